"""
Pytest fixtures and configuration for Invoice Processor tests

Every test gets its own in-memory SQLite database with the full schema,
so tests never share state.

Author: TM3
Date: 2025-11-22
"""
import pytest
from dotenv import load_dotenv
from openpyxl import Workbook

from invoice_processor.adapters import SqlAdapter
from invoice_processor.bootstrap import build_services
from invoice_processor.core.config import Settings
from invoice_processor.core.database import Connection
from invoice_processor.models import create_schema
from invoice_processor.repositories import (
    CustomerRepository,
    InvoiceRepository,
    ProductRepository,
)

# Load environment variables for tests (integration tests read TEST_DATABASE_URL)
load_dotenv()

MEMORY_URL = "sqlite:///:memory:"


@pytest.fixture
def settings():
    """
    Settings for an isolated in-memory database

    EXPORT_PAGE_SIZE is small so export tests cross page boundaries.
    """
    return Settings(
        _env_file=None,
        DATABASE_BACKEND="sql",
        DATABASE_URL=MEMORY_URL,
        DB_CONNECT_RETRIES=1,
        DB_RETRY_DELAY=0,
        DEFAULT_PAGE_SIZE=20,
        MAX_PAGE_SIZE=100,
        EXPORT_PAGE_SIZE=2,
    )


@pytest.fixture
def connection():
    """
    Fresh in-memory database with every table created

    Scope: function (new database per test)
    """
    conn = Connection(MEMORY_URL, max_retries=1, retry_delay=0)
    create_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def adapter(connection):
    return SqlAdapter(connection)


@pytest.fixture
def customer_repo(adapter):
    return CustomerRepository(adapter)


@pytest.fixture
def product_repo(adapter):
    return ProductRepository(adapter)


@pytest.fixture
def invoice_repo(adapter):
    return InvoiceRepository(adapter)


@pytest.fixture
def services(settings, adapter):
    """Full service graph on the in-memory adapter"""
    return build_services(settings, adapter=adapter)


@pytest.fixture
def sample_rows():
    """
    Three rows, two invoice groups, headers as they appear in the
    customer spreadsheets (including the misspelt quantity column)

    Invoice 1: Acme Corp, Widget x2 + Gadget x1
    Invoice 2: Globex, Widget x3 (Widget is reused, not re-created)
    """
    return [
        {
            "invoice": 1, "Invoice Date": 43831,
            "Customer Name": "Acme Corp", "Customer Address": "1 Main St",
            "Product Name": "Widget", "Qyantity": 2, "Price": 10.5,
            "Total": 21.0, "Grand Total": 41.0,
        },
        {
            "invoice": 1, "Invoice Date": 43831,
            "Customer Name": "Acme Corp", "Customer Address": "1 Main St",
            "Product Name": "Gadget", "Qyantity": 1, "Price": 20.0,
            "Total": 20.0, "Grand Total": 41.0,
        },
        {
            "invoice": 2, "Invoice Date": 43832,
            "Customer Name": "Globex", "Customer Address": "2 Side St",
            "Product Name": "Widget", "Qyantity": 3, "Price": 10.5,
            "Total": 31.5, "Grand Total": 31.5,
        },
    ]


SPREADSHEET_HEADERS = [
    "invoice", "Invoice Date", "Customer Name", "Customer Address",
    "Product Name", "Qyantity", "Price", "Total", "Grand Total",
]


@pytest.fixture
def make_workbook(tmp_path):
    """
    Factory writing an .xlsx file under tmp_path

    Usage:
        path = make_workbook(rows)                      # default headers
        path = make_workbook(rows, headers=[...], name="x.xlsx")
    """
    def _make(rows, headers=None, name="invoices.xlsx"):
        wb = Workbook()
        ws = wb.active
        ws.append(list(headers or SPREADSHEET_HEADERS))
        for row in rows:
            ws.append(list(row))
        path = tmp_path / name
        wb.save(path)
        return path

    return _make


@pytest.fixture
def sample_workbook(make_workbook, sample_rows):
    """sample_rows written as a spreadsheet"""
    return make_workbook([
        [row[header] for header in SPREADSHEET_HEADERS] for row in sample_rows
    ])
