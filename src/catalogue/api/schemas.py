"""Pydantic request/response schemas for the Catalogue API."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from shared.responses import Pagination

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Cotton Kurta",
                    "description": "Hand-block printed cotton kurta.",
                    "price": "1299.00",
                    "sale_price": "999.00",
                    "stock": 25,
                    "category_id": None,
                }
            ]
        }
    }

    name: str = Field(..., min_length=2, max_length=200)
    description: str | None = None
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    sale_price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    stock: int = Field(0, ge=0)
    is_active: bool = True
    category_id: str | None = None


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    sale_price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    stock: int | None = Field(None, ge=0)
    is_active: bool | None = None
    category_id: str | None = None


# --- Category Request Schemas ---


class CreateCategoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ethnic Wear",
                    "slug": "ethnic-wear",
                    "description": "Kurtas, sarees and more.",
                }
            ]
        }
    }

    name: str = Field(..., min_length=2, max_length=100)
    slug: str = Field(..., min_length=2, max_length=100, pattern=SLUG_PATTERN)
    description: str | None = None


class UpdateCategoryRequest(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    slug: str | None = Field(None, min_length=2, max_length=100, pattern=SLUG_PATTERN)
    description: str | None = None
    is_active: bool | None = None


# --- Response Schemas ---


class ProductSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: Decimal
    sale_price: Decimal | None = None
    stock: int
    is_active: bool


class ProductResponse(ProductSummary):
    description: str | None = None
    category_id: str | None = None
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    pagination: Pagination


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: str | None = None
    is_active: bool


class CategoryDetailResponse(CategoryResponse):
    product_count: int
