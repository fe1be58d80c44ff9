from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field
from models.gen_response import Link


class UnitBase(BaseModel):
    singular: str = Field(
        ...,
        description="Singular display name.",
        json_schema_extra={"example": "gram"},
    )
    plural: str = Field(
        ...,
        description="Plural display name.",
        json_schema_extra={"example": "grams"},
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"singular": "gram", "plural": "grams"},
                {"singular": "sack", "plural": "sacks"},
            ]
        }
    }


class UnitCreate(UnitBase):
    """Creation payload for a Unit."""


class UnitReplace(UnitBase):
    """Full replacement for a Unit."""


class UnitUpdate(BaseModel):
    """Partial update for a Unit; supply only fields to change."""
    singular: Optional[str] = Field(None, json_schema_extra={"example": "kilogram"})
    plural: Optional[str] = Field(None, json_schema_extra={"example": "kilograms"})


class UnitRead(UnitBase):
    id: int = Field(
        ...,
        description="Server-generated Unit ID.",
        json_schema_extra={"example": 2},
    )
    created_at: Optional[datetime] = Field(None, description="Creation timestamp (UTC).")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp (UTC).")
    links: List[Link] = Field(default_factory=list, description="HATEOAS links for unit")


class UnitResponse(BaseModel):
    message: str = "New unit created"
    unit: UnitRead
