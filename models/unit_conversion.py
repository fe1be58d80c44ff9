from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field
from models.gen_response import Link


class UnitConversionBase(BaseModel):
    from_unit_id: int = Field(
        ...,
        description="Reference to the Unit converted from.",
        json_schema_extra={"example": 4},
    )
    to_unit_id: int = Field(
        ...,
        description="Reference to the Unit converted to.",
        json_schema_extra={"example": 2},
    )
    factor: float = Field(
        ...,
        description="Amount of `to_unit` in one `from_unit`. Stored only; the API never converts.",
        json_schema_extra={"example": 1000.0},
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"from_unit_id": 4, "to_unit_id": 2, "factor": 1000.0}
            ]
        }
    }


class UnitConversionCreate(UnitConversionBase):
    """Creation payload for a UnitConversion."""


class UnitConversionReplace(UnitConversionBase):
    """Full replacement for a UnitConversion."""


class UnitConversionUpdate(BaseModel):
    """Partial update for a UnitConversion; supply only fields to change."""
    from_unit_id: Optional[int] = None
    to_unit_id: Optional[int] = None
    factor: Optional[float] = Field(None, json_schema_extra={"example": 453.6})


class UnitConversionRead(UnitConversionBase):
    id: int = Field(
        ...,
        description="Server-generated UnitConversion ID.",
        json_schema_extra={"example": 1},
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    links: List[Link] = Field(default_factory=list)


class UnitConversionResponse(BaseModel):
    message: str = "New unit conversion created"
    unit_conversion: UnitConversionRead
