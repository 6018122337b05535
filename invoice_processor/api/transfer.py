"""
Import / Export API Endpoints

POST /import reads a spreadsheet that is already on the server's disk;
GET /export streams every invoice as JSON or XML.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel

from invoice_processor.bootstrap import Services

from .deps import get_services
from .errors import http_error

router = APIRouter()


class ImportRequest(BaseModel):
    file_path: str


@router.post("/import")
async def import_invoices(body: ImportRequest, services: Services = Depends(get_services)):
    """
    Import a spreadsheet (.xlsx, .xlsm, .xls, .ods, .csv)

    Returns counts of invoices, customers, products and items
    """
    try:
        result = services.invoice_service.import_from_file(body.file_path)
        return {
            "success": True,
            "data": result.to_dict()
        }

    except Exception as e:
        raise http_error(e, "importing invoices")


@router.get("/export")
async def export_invoices(
    format: str = Query("json", description="json or xml"),
    services: Services = Depends(get_services)
):
    try:
        export = services.export_service
        content = export.export(format)
        filename = f"invoices{export.file_extension(format)}"

        return Response(
            content=content,
            media_type=export.content_type(format),
            headers={"Content-Disposition": f'attachment; filename="{filename}"'}
        )

    except Exception as e:
        raise http_error(e, "exporting invoices")
