"""
Customer and Product Domain Models

Both are identified by name during import (find-or-create); the id is
assigned by the storage backend and stays None until the entity is saved.

Author: TM3
Date: 2025-11-20
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Customer(BaseModel):
    """
    Customer domain model

    Fields:
        id: Backend-assigned ID (None until persisted)
        name: Customer name, natural key for find-or-create
        address: Postal address
    """

    id: Optional[int] = Field(None, description="Customer ID")
    name: str = Field(..., description="Customer name")
    address: str = Field("", description="Customer address")

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        return self.model_dump()


class Product(BaseModel):
    """
    Product domain model

    The stored price is the first price seen for the product name; later
    imports with a different price do not change it.
    """

    id: Optional[int] = Field(None, description="Product ID")
    name: str = Field(..., description="Product name")
    price: Decimal = Field(Decimal("0"), description="Unit price (first seen)", ge=0)

    model_config = ConfigDict(
        from_attributes=True,
        json_encoders={Decimal: float}
    )

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data["price"] = float(data["price"])
        return data


class CustomerCreate(BaseModel):
    """Schema for creating a customer through the API"""
    name: str = Field(..., min_length=1)
    address: str = ""


class ProductCreate(BaseModel):
    """Schema for creating a product through the API"""
    name: str = Field(..., min_length=1)
    price: Decimal = Field(Decimal("0"), ge=0)
