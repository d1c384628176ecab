"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Classic Black T-Shirt",
                    "description": "Premium cotton crew-neck tee in black.",
                    "price": "19.99",
                    "stock": 25,
                    "category_id": None,
                    "image_url": "https://cdn.example.com/tshirt-black.png",
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)
    category_id: str | None = None
    image_url: str | None = Field(None, max_length=500)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    category_id: str | None = None
    image_url: str | None = Field(None, max_length=500)


class RestockRequest(BaseModel):
    quantity: int = Field(..., gt=0)


# --- Category Request Schemas ---


class CategoryRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)


# --- Response Schemas ---


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None
    price: Decimal
    stock: int
    category_id: str | None
    image_url: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_product(cls, product) -> ProductResponse:
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            stock=product.stock,
            category_id=product.category_id,
            image_url=product.image_url,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductPageResponse(BaseModel):
    items: list[ProductResponse]
    total: int
    limit: int
    offset: int


class CategoryResponse(BaseModel):
    id: str
    name: str
