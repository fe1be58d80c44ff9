import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Path, Query, Request, Response, status

from db import get_connection, insert_row, select_row, select_rows
from conditional import create_etag
from models.async_response import AsyncOperationResponse
from models.place import PlaceCreate, PlaceRead, PlaceReplace, PlaceResponse, PlaceUpdate
from routers.common import accept_operation, conditional_read, delete_or_404, get_or_404, link, update_and_read

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/places", tags=["places"])

TABLE = "places"


def row_to_place_read(row: dict, request: Request) -> PlaceRead:
    links = [link(request, "self", "get_place", place_id=row["id"])]
    if row.get("space_id") is not None:
        links.append(link(request, "space", "get_space", space_id=row["space_id"]))
    return PlaceRead(**row, links=links)


@router.post("", response_model=PlaceResponse, status_code=status.HTTP_201_CREATED)
def create_place(place: PlaceCreate, response: Response, request: Request):
    """Create a new place."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            place_id = insert_row(cur, TABLE, place.model_dump())
            conn.commit()

            row = select_row(cur, TABLE, place_id)

    if not row:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve created place")

    logger.info("Created place %s (%s)", place_id, place.name)

    etag = create_etag(row)
    if etag:
        response.headers["ETag"] = etag
    response.headers["Location"] = str(request.url_for("get_place", place_id=place_id))

    return PlaceResponse(message="New place created", place=row_to_place_read(row, request))


@router.get("", response_model=List[PlaceRead])
def list_places(
        request: Request,
        name: Optional[str] = Query(None, description="Filter by name (contains)"),
        space_id: Optional[int] = Query(None, description="Filter by storage space"),
):
    """List all places with optional filters."""
    with get_connection() as conn, conn.cursor() as cur:
        rows = select_rows(cur, TABLE, equals={"space_id": space_id}, contains={"name": name})

    return [row_to_place_read(row, request) for row in rows]


@router.get("/{place_id}", response_model=PlaceRead)
def get_place(request: Request, response: Response, place_id: int = Path(..., description="Place ID")):
    """Get a specific place by ID."""
    row = get_or_404(TABLE, place_id, "Place not found")
    return conditional_read(request, response, row, lambda r: row_to_place_read(r, request))


@router.put("/{place_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def replace_place(
    request: Request,
    response: Response,
    place_replace: PlaceReplace,
    place_id: int = Path(..., description="Place ID"),
):
    """Replace a place entirely. Returns 202 Accepted with async operation."""

    async def _async_replace_place():
        return update_and_read(
            TABLE, place_id, place_replace.model_dump(), "Place not found",
            "place", lambda r: row_to_place_read(r, request),
        )

    return await accept_operation(request, response, "Place replacement initiated", _async_replace_place())


@router.patch("/{place_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def update_place(
    request: Request,
    response: Response,
    place_update: PlaceUpdate,
    place_id: int = Path(..., description="Place ID"),
):
    """Update a place (partial update). Returns 202 Accepted with async operation."""

    async def _async_update_place():
        update_data = place_update.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

        return update_and_read(
            TABLE, place_id, update_data, "Place not found",
            "place", lambda r: row_to_place_read(r, request),
        )

    return await accept_operation(request, response, "Place update initiated", _async_update_place())


@router.delete("/{place_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def delete_place(
    request: Request,
    response: Response,
    place_id: int = Path(..., description="Place ID")
):
    """Delete a place. Returns 202 Accepted with async operation."""

    async def _async_delete_place():
        return delete_or_404(TABLE, place_id, "Place not found", "Place deleted successfully")

    return await accept_operation(request, response, "Place deletion initiated", _async_delete_place())
