from __future__ import annotations

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field
from models.gen_response import Link


class SpaceBase(BaseModel):
    name: str = Field(
        ...,
        description="Storage space name.",
        json_schema_extra={"example": "Pantry"},
    )
    description: str = Field(
        "",
        description="Free-text description.",
        json_schema_extra={"example": "Walk-in pantry next to the kitchen"},
    )


class SpaceCreate(SpaceBase):
    """Creation payload for a Space."""
    model_config = {
        "json_schema_extra": {
            "examples": [
                {"name": "Pantry", "description": "Walk-in pantry next to the kitchen"},
                {"name": "Fridge", "description": ""},
            ]
        }
    }


class SpaceReplace(SpaceBase):
    """Full replacement for a Space."""


class SpaceUpdate(BaseModel):
    """Partial update for a Space; supply only fields to change."""
    name: Optional[str] = Field(None, json_schema_extra={"example": "Cellar"})
    description: Optional[str] = None


class SpaceRead(SpaceBase):
    id: int = Field(
        ...,
        description="Server-generated Space ID.",
        json_schema_extra={"example": 1},
    )
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    links: List[Link] = Field(
        default_factory=list,
        json_schema_extra={
            "examples": [
                {"rel": "self", "href": "/spaces/1"},
                {"rel": "places", "href": "/places?space_id=1"},
            ]
        }
    )


class SpaceResponse(BaseModel):
    message: str = "New space created"
    space: SpaceRead
