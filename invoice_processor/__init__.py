"""
Invoice Processor - Backend

Stores customers, products, invoices and invoice items behind a
backend-agnostic database adapter, imports spreadsheets into normalized
records and exports invoices as JSON or XML.
"""

__version__ = "1.0.0"
