from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field
from models.gen_response import Link


class PlaceBase(BaseModel):
    name: str = Field(
        ...,
        description="Place name.",
        json_schema_extra={"example": "Top shelf"},
    )
    description: str = Field(
        "",
        description="Free-text description.",
        json_schema_extra={"example": "Above the spice rack"},
    )
    space_id: Optional[int] = Field(
        None,
        description="Reference to the Space this place is in.",
        json_schema_extra={"example": 1},
    )


class PlaceCreate(PlaceBase):
    """Creation payload for a Place."""
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "Top shelf", "description": "Above the spice rack", "space_id": 1},
                {"name": "Door rack", "description": "", "space_id": 2},
            ]
        }
    }


class PlaceReplace(PlaceBase):
    """Full replacement for a Place."""


class PlaceUpdate(BaseModel):
    """Partial update for a Place; supply only fields to change."""
    name: Optional[str] = None
    description: Optional[str] = None
    space_id: Optional[int] = Field(None, json_schema_extra={"example": 2})


class PlaceRead(PlaceBase):
    id: int = Field(
        ...,
        description="Server-generated Place ID.",
        json_schema_extra={"example": 5},
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    links: List[Link] = Field(default_factory=list)


class PlaceResponse(BaseModel):
    message: str = "New place created"
    place: PlaceRead
