import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Path, Query, Request, Response, status

from db import get_connection, insert_row, select_row, select_rows
from conditional import create_etag
from models.async_response import AsyncOperationResponse
from models.unit_conversion import (
    UnitConversionCreate,
    UnitConversionRead,
    UnitConversionReplace,
    UnitConversionResponse,
    UnitConversionUpdate,
)
from routers.common import accept_operation, conditional_read, delete_or_404, get_or_404, link, update_and_read

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/unit-conversions", tags=["unit conversions"])

TABLE = "unit_conversions"


def row_to_unit_conversion_read(row: dict, request: Request) -> UnitConversionRead:
    links = [
        link(request, "self", "get_unit_conversion", unit_conversion_id=row["id"]),
        link(request, "from-unit", "get_unit", unit_id=row["from_unit_id"]),
        link(request, "to-unit", "get_unit", unit_id=row["to_unit_id"]),
    ]
    return UnitConversionRead(**row, links=links)


@router.post("", response_model=UnitConversionResponse, status_code=status.HTTP_201_CREATED)
def create_unit_conversion(unit_conversion: UnitConversionCreate, response: Response, request: Request):
    """Create a new unit conversion. The factor is stored as given."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            unit_conversion_id = insert_row(cur, TABLE, unit_conversion.model_dump())
            conn.commit()

            row = select_row(cur, TABLE, unit_conversion_id)

    if not row:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve created unit conversion")

    logger.info(
        "Created unit conversion %s (%s -> %s)",
        unit_conversion_id, unit_conversion.from_unit_id, unit_conversion.to_unit_id,
    )

    etag = create_etag(row)
    if etag:
        response.headers["ETag"] = etag
    response.headers["Location"] = str(request.url_for("get_unit_conversion", unit_conversion_id=unit_conversion_id))

    return UnitConversionResponse(
        message="New unit conversion created",
        unit_conversion=row_to_unit_conversion_read(row, request),
    )


@router.get("", response_model=List[UnitConversionRead])
def list_unit_conversions(
        request: Request,
        from_unit_id: Optional[int] = Query(None, description="Filter by source unit"),
        to_unit_id: Optional[int] = Query(None, description="Filter by target unit"),
):
    """List all unit conversions with optional filters."""
    with get_connection() as conn, conn.cursor() as cur:
        rows = select_rows(cur, TABLE, equals={"from_unit_id": from_unit_id, "to_unit_id": to_unit_id})

    return [row_to_unit_conversion_read(row, request) for row in rows]


@router.get("/{unit_conversion_id}", response_model=UnitConversionRead)
def get_unit_conversion(
        request: Request,
        response: Response,
        unit_conversion_id: int = Path(..., description="Unit conversion ID"),
):
    """Get a specific unit conversion by ID."""
    row = get_or_404(TABLE, unit_conversion_id, "Unit conversion not found")
    return conditional_read(request, response, row, lambda r: row_to_unit_conversion_read(r, request))


@router.put("/{unit_conversion_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def replace_unit_conversion(
    request: Request,
    response: Response,
    unit_conversion_replace: UnitConversionReplace,
    unit_conversion_id: int = Path(..., description="Unit conversion ID"),
):
    """Replace a unit conversion entirely. Returns 202 Accepted with async operation."""

    async def _async_replace_unit_conversion():
        return update_and_read(
            TABLE, unit_conversion_id, unit_conversion_replace.model_dump(), "Unit conversion not found",
            "unit_conversion", lambda r: row_to_unit_conversion_read(r, request),
        )

    return await accept_operation(
        request, response, "Unit conversion replacement initiated", _async_replace_unit_conversion())


@router.patch("/{unit_conversion_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def update_unit_conversion(
    request: Request,
    response: Response,
    unit_conversion_update: UnitConversionUpdate,
    unit_conversion_id: int = Path(..., description="Unit conversion ID"),
):
    """Update a unit conversion (partial update). Returns 202 Accepted with async operation."""

    async def _async_update_unit_conversion():
        update_data = unit_conversion_update.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

        return update_and_read(
            TABLE, unit_conversion_id, update_data, "Unit conversion not found",
            "unit_conversion", lambda r: row_to_unit_conversion_read(r, request),
        )

    return await accept_operation(
        request, response, "Unit conversion update initiated", _async_update_unit_conversion())


@router.delete("/{unit_conversion_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def delete_unit_conversion(
    request: Request,
    response: Response,
    unit_conversion_id: int = Path(..., description="Unit conversion ID")
):
    """Delete a unit conversion. Returns 202 Accepted with async operation."""

    async def _async_delete_unit_conversion():
        return delete_or_404(
            TABLE, unit_conversion_id, "Unit conversion not found", "Unit conversion deleted successfully")

    return await accept_operation(
        request, response, "Unit conversion deletion initiated", _async_delete_unit_conversion())
