"""
Service Layer - import pipeline, export and the invoice facade
"""
from invoice_processor.services.export_service import ExportService
from invoice_processor.services.import_service import ImportService
from invoice_processor.services.invoice_service import InvoiceService

__all__ = ['ExportService', 'ImportService', 'InvoiceService']
