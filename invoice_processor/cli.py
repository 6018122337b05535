"""
Command line interface

    invoice-processor setup-db
    invoice-processor import data.xlsx
    invoice-processor export --format xml --output invoices.xml
    invoice-processor show 1

Exit code 0 on success, 1 on any handled failure.
"""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from invoice_processor.bootstrap import Services, build_services
from invoice_processor.core.config import Settings
from invoice_processor.core.exceptions import InvoiceImportError, InvoiceProcessorError

logger = logging.getLogger(__name__)


def cmd_setup_db(services: Services, args: argparse.Namespace) -> int:
    print("🔧 Creating database tables...")
    tables = services.setup_schema()
    if tables:
        print(f"✅ Tables ready: {', '.join(tables)}")
    else:
        print("ℹ️  Nothing to create for this backend")
    return 0


def cmd_import(services: Services, args: argparse.Namespace) -> int:
    print(f"📥 Importing {args.file}...")

    try:
        result = services.invoice_service.import_from_file(args.file)
    except InvoiceImportError as e:
        print(f"\n❌ ERROR: {str(e)}")
        if e.partial_result is not None and e.partial_result.invoices:
            print(f"⚠️  {e.partial_result.invoices} invoices were imported before the failure")
        return 1

    print(f"\n✅ Imported {result.invoices} invoices")
    print(f"  Customers: {result.customers} ({result.customers_created} new)")
    print(f"  Products:  {result.products} ({result.products_created} new)")
    print(f"  Items:     {result.items}")
    return 0


def cmd_export(services: Services, args: argparse.Namespace) -> int:
    content = services.invoice_service.export_invoices(args.format)

    if args.output:
        Path(args.output).write_text(content, encoding="utf-8")
        print(f"✅ Exported invoices to {args.output}")
    else:
        sys.stdout.write(content)
    return 0


def cmd_show(services: Services, args: argparse.Namespace) -> int:
    details = services.invoice_service.get_invoice_details(args.invoice_id)
    invoice = details["invoice"]
    customer = details["customer"] or {}

    print(f"📄 Invoice #{invoice['id']} - {invoice['date']}")
    print(f"  Customer: {customer.get('name', 'Unknown')} ({customer.get('address', '')})")
    for item in details["items"]:
        print(
            f"  - {item['product_name']}: {item['quantity']} x "
            f"{item['unit_price']:.2f} = {item['total']:.2f}"
        )
    print(f"  Grand total: {invoice['grand_total']:.2f}")

    if args.json:
        print(json.dumps(details, indent=4, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="invoice-processor",
        description="Import, export and inspect invoices",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    setup = subparsers.add_parser("setup-db", help="Create the database tables (SQL backend)")
    setup.set_defaults(handler=cmd_setup_db)

    importer = subparsers.add_parser("import", help="Import invoices from .xlsx/.xlsm/.xls/.ods/.csv")
    importer.add_argument("file", help="Path to the spreadsheet")
    importer.set_defaults(handler=cmd_import)

    exporter = subparsers.add_parser("export", help="Export every invoice")
    exporter.add_argument("--format", choices=["json", "xml"], default="json")
    exporter.add_argument("--output", help="Write to this file instead of stdout")
    exporter.set_defaults(handler=cmd_export)

    show = subparsers.add_parser("show", help="Show one invoice with its items")
    show.add_argument("invoice_id", type=int)
    show.add_argument("--json", action="store_true", help="Also print the raw JSON")
    show.set_defaults(handler=cmd_show)

    return parser


def main(argv: Optional[List[str]] = None, settings: Optional[Settings] = None,
         services: Optional[Services] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()
    settings = settings or Settings()
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    owns_services = services is None
    try:
        if owns_services:
            services = build_services(settings)
            if args.command != "setup-db":
                services.setup_schema()
        return args.handler(services, args)
    except InvoiceProcessorError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"\n❌ ERROR: {str(e)}", file=sys.stderr)
        return 1
    finally:
        if owns_services and services is not None:
            services.close()


if __name__ == "__main__":
    sys.exit(main())
