from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field
from models.gen_response import Link


class ProductBase(BaseModel):
    name: str = Field(
        ...,
        description="Product name.",
        json_schema_extra={"example": "Basmati rice"},
    )
    description: str = Field(
        "",
        description="Free-text product description.",
        json_schema_extra={"example": "Long grain, bought in 5 kg sacks"},
    )
    parent_product_id: Optional[int] = Field(
        None,
        description="Reference to a more general Product (e.g. 'Rice' for 'Basmati rice').",
        json_schema_extra={"example": 3},
    )
    purchase_unit_id: int = Field(
        ...,
        description="Reference to the Unit the product is bought in.",
        json_schema_extra={"example": 4},
    )
    stock_unit_id: int = Field(
        ...,
        description="Reference to the Unit the product is stocked in.",
        json_schema_extra={"example": 2},
    )
    purchase_to_stock_factor: float = Field(
        1.0,
        description="How many stock units one purchase unit holds. Stored as given, never applied.",
        json_schema_extra={"example": 5000.0},
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Basmati rice",
                    "description": "Long grain, bought in 5 kg sacks",
                    "parent_product_id": 3,
                    "purchase_unit_id": 4,
                    "stock_unit_id": 2,
                    "purchase_to_stock_factor": 5000.0,
                }
            ]
        }
    }


class ProductCreate(ProductBase):
    """Creation payload for a Product."""
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Whole milk",
                    "description": "",
                    "parent_product_id": None,
                    "purchase_unit_id": 5,
                    "stock_unit_id": 6,
                    "purchase_to_stock_factor": 1000.0,
                }
            ]
        }
    }


class ProductReplace(ProductBase):
    """Full replacement for a Product; every column is written."""


class ProductUpdate(BaseModel):
    """Partial update for a Product; supply only fields to change."""
    name: Optional[str] = Field(
        None,
        json_schema_extra={"example": "Jasmine rice"},
    )
    description: Optional[str] = Field(
        None,
        json_schema_extra={"example": "Bought in 1 kg bags"},
    )
    parent_product_id: Optional[int] = Field(
        None,
        json_schema_extra={"example": 3},
    )
    purchase_unit_id: Optional[int] = Field(
        None,
        json_schema_extra={"example": 4},
    )
    stock_unit_id: Optional[int] = Field(
        None,
        json_schema_extra={"example": 2},
    )
    purchase_to_stock_factor: Optional[float] = Field(
        None,
        json_schema_extra={"example": 1000.0},
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"purchase_to_stock_factor": 1000.0},
                {"name": "Jasmine rice", "description": "Bought in 1 kg bags"},
                {"parent_product_id": None},
            ]
        }
    }


class ProductRead(ProductBase):
    """Server representation returned to clients."""
    id: int = Field(
        ...,
        description="Server-generated Product ID.",
        json_schema_extra={"example": 7},
    )
    created_at: Optional[datetime] = Field(
        None,
        description="Creation timestamp (UTC).",
        json_schema_extra={"example": "2026-03-02T10:20:30Z"},
    )
    updated_at: Optional[datetime] = Field(
        None,
        description="Last update timestamp (UTC).",
        json_schema_extra={"example": "2026-03-02T12:00:00Z"},
    )
    links: List[Link] = Field(
        default_factory=list,
        description="HATEOAS links for product",
        json_schema_extra={
            "examples": [
                {"rel": "self", "href": "/products/7"},
                {"rel": "stock-unit", "href": "/units/2"},
                {"rel": "purchase-unit", "href": "/units/4"},
                {"rel": "parent", "href": "/products/3"},
                {"rel": "stock-items", "href": "/stock-items?product_id=7"},
            ]
        }
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": 7,
                    "name": "Basmati rice",
                    "description": "Long grain, bought in 5 kg sacks",
                    "parent_product_id": 3,
                    "purchase_unit_id": 4,
                    "stock_unit_id": 2,
                    "purchase_to_stock_factor": 5000.0,
                    "created_at": "2026-03-02T10:20:30Z",
                    "updated_at": "2026-03-02T12:00:00Z",
                    "links": [
                        {"rel": "self", "href": "/products/7"},
                        {"rel": "stock-unit", "href": "/units/2"},
                        {"rel": "purchase-unit", "href": "/units/4"},
                        {"rel": "parent", "href": "/products/3"},
                        {"rel": "stock-items", "href": "/stock-items?product_id=7"},
                    ]
                }
            ]
        }
    }


class ProductResponse(BaseModel):
    # allows for a message to be included when a product is created
    message: str = "New product created"
    product: ProductRead
