"""
Modelos relacionados con facturas
"""
from sqlalchemy import Column, Date, DECIMAL, ForeignKey, Integer, Text

from .base import Base


class Customer(Base):
    """
    Clientes - name is the natural key used by find-or-create
    """
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, index=True)
    address = Column(Text, nullable=False, default="")


class Product(Base):
    """
    Productos - price is the first price seen for the name
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False, index=True)
    price = Column(DECIMAL(12, 2), nullable=False, default=0)


class Invoice(Base):
    """
    Facturas - grand_total comes from the import source, not from the items
    """
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    invoice_date = Column(Date, nullable=False, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    grand_total = Column(DECIMAL(12, 2), nullable=False, default=0)


class InvoiceItem(Base):
    """
    Items de cada factura
    """
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=0)
    # NULL for rows written without an explicit price; readers fall back to total / quantity
    unit_price = Column(DECIMAL(12, 2), nullable=True)
    total = Column(DECIMAL(12, 2), nullable=False, default=0)
