from __future__ import annotations

from typing import Optional
from pydantic import BaseModel, Field


class Health(BaseModel):
    status: int = Field(..., json_schema_extra={"example": 200})
    status_message: str = Field(..., json_schema_extra={"example": "OK"})
    timestamp: str = Field(
        ...,
        description="UTC time the check ran, ISO 8601.",
        json_schema_extra={"example": "2026-03-02T10:00:00.000000Z"},
    )
    ip_address: str = Field(..., json_schema_extra={"example": "172.17.0.2"})
    echo: Optional[str] = Field(None, description="Echo of the `echo` query parameter.")
    path_echo: Optional[str] = Field(None, description="Echo of the path segment.")


class DatabaseHealth(BaseModel):
    database: str = Field(..., json_schema_extra={"example": "ok"})
