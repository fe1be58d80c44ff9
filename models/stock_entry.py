"""Stock movement ledger entries.

Entries are recorded as they happen. Stock levels are not derived from them.
"""

from __future__ import annotations

from typing import Optional, List
from enum import Enum
from datetime import datetime
from pydantic import BaseModel, Field
from models.gen_response import Link


class StockEntryKind(str, Enum):
    """What happened to the stock."""
    PURCHASE = "purchase"
    TRANSFER = "transfer"
    CONSUME = "consume"
    EXPIRE = "expire"


class StockEntryBase(BaseModel):
    model_config = {"use_enum_values": True}

    product_id: int = Field(
        ...,
        description="Reference to the Product ID.",
        json_schema_extra={"example": 7},
    )
    kind: StockEntryKind = Field(
        ...,
        description="Movement kind.",
        json_schema_extra={"example": "purchase"},
    )
    quantity: float = Field(
        ...,
        description="Moved quantity, in the product's stock unit.",
        json_schema_extra={"example": 5000.0},
    )
    from_place_id: Optional[int] = Field(
        None,
        description="Place the stock left (transfer, consume, expire).",
        json_schema_extra={"example": None},
    )
    to_place_id: Optional[int] = Field(
        None,
        description="Place the stock arrived at (purchase, transfer).",
        json_schema_extra={"example": 5},
    )
    occurred_at: Optional[datetime] = Field(
        None,
        description="When the movement happened.",
        json_schema_extra={"example": "2026-03-01T17:45:00"},
    )
    note: Optional[str] = Field(
        None,
        json_schema_extra={"example": "Weekly market run"},
    )


class StockEntryCreate(StockEntryBase):
    """Creation payload for a StockEntry."""
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": 7,
                    "kind": "purchase",
                    "quantity": 5000.0,
                    "to_place_id": 5,
                    "occurred_at": "2026-03-01T17:45:00",
                    "note": "Weekly market run",
                },
                {
                    "product_id": 7,
                    "kind": "transfer",
                    "quantity": 1000.0,
                    "from_place_id": 5,
                    "to_place_id": 6,
                },
                {
                    "product_id": 9,
                    "kind": "expire",
                    "quantity": 1.0,
                    "from_place_id": 6,
                },
            ]
        }
    }


class StockEntryReplace(StockEntryBase):
    """Full replacement for a StockEntry."""


class StockEntryUpdate(BaseModel):
    """Partial update for a StockEntry; supply only fields to change."""
    model_config = {"use_enum_values": True}

    product_id: Optional[int] = None
    kind: Optional[StockEntryKind] = None
    quantity: Optional[float] = None
    from_place_id: Optional[int] = None
    to_place_id: Optional[int] = None
    occurred_at: Optional[datetime] = None
    note: Optional[str] = Field(None, json_schema_extra={"example": "Corrected amount"})


class StockEntryRead(StockEntryBase):
    id: int = Field(
        ...,
        description="Server-generated StockEntry ID.",
        json_schema_extra={"example": 40},
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    links: List[Link] = Field(default_factory=list)


class StockEntryResponse(BaseModel):
    message: str = "New stock entry created"
    stock_entry: StockEntryRead
