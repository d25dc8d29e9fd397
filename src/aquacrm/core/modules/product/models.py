from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from aquacrm.core.db import MongoModel
from aquacrm.utils import now


class ProductType(StrEnum):
    PRODUCT = "product"
    SERVICE = "service"


class Product(MongoModel):
    """Catalog entry: a purifier, spare part or a billable service."""

    name: str
    sku: str | None = None  # Unique when present
    description: str | None = None
    price: float = Field(..., ge=0)
    type: ProductType
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    sku: str | None = None
    description: str | None = None
    price: float = Field(..., ge=0)
    type: ProductType


class ProductUpdate(BaseModel):
    """Partial catalog update; omitted and null fields leave the stored value unchanged."""

    name: str | None = Field(None, min_length=1)
    sku: str | None = None
    description: str | None = None
    price: float | None = Field(None, ge=0)
    type: ProductType | None = None
