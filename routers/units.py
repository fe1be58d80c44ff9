import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Path, Query, Request, Response, status

from db import get_connection, insert_row, select_row, select_rows
from conditional import create_etag
from models.async_response import AsyncOperationResponse
from models.unit import UnitCreate, UnitRead, UnitReplace, UnitResponse, UnitUpdate
from routers.common import accept_operation, conditional_read, delete_or_404, get_or_404, link, update_and_read

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/units", tags=["units"])

TABLE = "units"


def row_to_unit_read(row: dict, request: Request) -> UnitRead:
    return UnitRead(**row, links=[link(request, "self", "get_unit", unit_id=row["id"])])


@router.post("", response_model=UnitResponse, status_code=status.HTTP_201_CREATED)
def create_unit(unit: UnitCreate, response: Response, request: Request):
    """Create a new unit."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            unit_id = insert_row(cur, TABLE, unit.model_dump())
            conn.commit()

            row = select_row(cur, TABLE, unit_id)

    if not row:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve created unit")

    logger.info("Created unit %s (%s)", unit_id, unit.singular)

    etag = create_etag(row)
    if etag:
        response.headers["ETag"] = etag
    response.headers["Location"] = str(request.url_for("get_unit", unit_id=unit_id))

    return UnitResponse(message="New unit created", unit=row_to_unit_read(row, request))


@router.get("", response_model=List[UnitRead])
def list_units(
        request: Request,
        singular: Optional[str] = Query(None, description="Filter by singular name (contains)"),
):
    """List all units."""
    with get_connection() as conn, conn.cursor() as cur:
        rows = select_rows(cur, TABLE, contains={"singular": singular})

    return [row_to_unit_read(row, request) for row in rows]


@router.get("/{unit_id}", response_model=UnitRead)
def get_unit(request: Request, response: Response, unit_id: int = Path(..., description="Unit ID")):
    """Get a specific unit by ID."""
    row = get_or_404(TABLE, unit_id, "Unit not found")
    return conditional_read(request, response, row, lambda r: row_to_unit_read(r, request))


@router.put("/{unit_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def replace_unit(
    request: Request,
    response: Response,
    unit_replace: UnitReplace,
    unit_id: int = Path(..., description="Unit ID"),
):
    """Replace a unit entirely. Returns 202 Accepted with async operation."""

    async def _async_replace_unit():
        return update_and_read(
            TABLE, unit_id, unit_replace.model_dump(), "Unit not found",
            "unit", lambda r: row_to_unit_read(r, request),
        )

    return await accept_operation(request, response, "Unit replacement initiated", _async_replace_unit())


@router.patch("/{unit_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def update_unit(
    request: Request,
    response: Response,
    unit_update: UnitUpdate,
    unit_id: int = Path(..., description="Unit ID"),
):
    """Update a unit (partial update). Returns 202 Accepted with async operation."""

    async def _async_update_unit():
        update_data = unit_update.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

        return update_and_read(
            TABLE, unit_id, update_data, "Unit not found",
            "unit", lambda r: row_to_unit_read(r, request),
        )

    return await accept_operation(request, response, "Unit update initiated", _async_update_unit())


@router.delete("/{unit_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def delete_unit(
    request: Request,
    response: Response,
    unit_id: int = Path(..., description="Unit ID")
):
    """Delete a unit. Returns 202 Accepted with async operation."""

    async def _async_delete_unit():
        return delete_or_404(TABLE, unit_id, "Unit not found", "Unit deleted successfully")

    return await accept_operation(request, response, "Unit deletion initiated", _async_delete_unit())
