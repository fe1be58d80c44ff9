from __future__ import annotations

from pydantic import BaseModel, Field


class Link(BaseModel):
    rel: str = Field(
        ...,
        description="The relation type of the link.",
        json_schema_extra={"example": "self"},
    )
    href: str = Field(
        ...,
        description="The URL of the link.",
        json_schema_extra={"example": "/products/7"},
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "rel": "self",
                    "href": "/products/7",
                },
                {
                    "rel": "stock-items",
                    "href": "/stock-items?product_id=7",
                }
            ]
        }
    }


class MessageResponse(BaseModel):
    """Result stored on a completed delete operation."""
    id: int
    message: str
