from __future__ import annotations

from typing import Optional, List
from datetime import date, datetime
from pydantic import BaseModel, Field
from models.gen_response import Link


class StockItemBase(BaseModel):
    product_id: int = Field(
        ...,
        description="Reference to the Product ID.",
        json_schema_extra={"example": 7},
    )
    place_id: Optional[int] = Field(
        None,
        description="Reference to the Place where the item is kept.",
        json_schema_extra={"example": 5},
    )
    quantity: float = Field(
        0.0,
        description="Quantity on hand, in the product's stock unit.",
        json_schema_extra={"example": 2500.0},
    )
    best_by: Optional[date] = Field(
        None,
        description="Best-by date printed on the package. Informational only.",
        json_schema_extra={"example": "2027-01-31"},
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": 7,
                    "place_id": 5,
                    "quantity": 2500.0,
                    "best_by": "2027-01-31",
                }
            ]
        }
    }


class StockItemCreate(StockItemBase):
    """Creation payload for a StockItem."""


class StockItemReplace(StockItemBase):
    """Full replacement for a StockItem."""


class StockItemUpdate(BaseModel):
    """Partial update for a StockItem; supply only fields to change."""
    product_id: Optional[int] = None
    place_id: Optional[int] = None
    quantity: Optional[float] = Field(None, json_schema_extra={"example": 1800.0})
    best_by: Optional[date] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"quantity": 1800.0},
                {"place_id": 6},
            ]
        }
    }


class StockItemRead(StockItemBase):
    id: int = Field(
        ...,
        description="Server-generated StockItem ID.",
        json_schema_extra={"example": 12},
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    links: List[Link] = Field(
        default_factory=list,
        json_schema_extra={
            "examples": [
                {"rel": "self", "href": "/stock-items/12"},
                {"rel": "product", "href": "/products/7"},
                {"rel": "place", "href": "/places/5"},
            ]
        }
    )


class StockItemResponse(BaseModel):
    message: str = "New stock item created"
    stock_item: StockItemRead
