import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Path, Query, Request, Response, status

from db import get_connection, insert_row, select_row, select_rows
from conditional import create_etag
from models.async_response import AsyncOperationResponse
from models.space import SpaceCreate, SpaceRead, SpaceReplace, SpaceResponse, SpaceUpdate
from routers.common import accept_operation, conditional_read, delete_or_404, get_or_404, link, update_and_read

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/spaces", tags=["spaces"])

TABLE = "spaces"


def row_to_space_read(row: dict, request: Request) -> SpaceRead:
    links = [
        link(request, "self", "get_space", space_id=row["id"]),
        link(request, "places", "list_places", query={"space_id": row["id"]}),
    ]
    return SpaceRead(**row, links=links)


@router.post("", response_model=SpaceResponse, status_code=status.HTTP_201_CREATED)
def create_space(space: SpaceCreate, response: Response, request: Request):
    """Create a new storage space."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            space_id = insert_row(cur, TABLE, space.model_dump())
            conn.commit()

            row = select_row(cur, TABLE, space_id)

    if not row:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve created space")

    logger.info("Created space %s (%s)", space_id, space.name)

    etag = create_etag(row)
    if etag:
        response.headers["ETag"] = etag
    response.headers["Location"] = str(request.url_for("get_space", space_id=space_id))

    return SpaceResponse(message="New space created", space=row_to_space_read(row, request))


@router.get("", response_model=List[SpaceRead])
def list_spaces(
        request: Request,
        name: Optional[str] = Query(None, description="Filter by name (contains)"),
):
    """List all storage spaces."""
    with get_connection() as conn, conn.cursor() as cur:
        rows = select_rows(cur, TABLE, contains={"name": name})

    return [row_to_space_read(row, request) for row in rows]


@router.get("/{space_id}", response_model=SpaceRead)
def get_space(request: Request, response: Response, space_id: int = Path(..., description="Space ID")):
    """Get a specific storage space by ID."""
    row = get_or_404(TABLE, space_id, "Space not found")
    return conditional_read(request, response, row, lambda r: row_to_space_read(r, request))


@router.put("/{space_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def replace_space(
    request: Request,
    response: Response,
    space_replace: SpaceReplace,
    space_id: int = Path(..., description="Space ID"),
):
    """Replace a storage space entirely. Returns 202 Accepted with async operation."""

    async def _async_replace_space():
        return update_and_read(
            TABLE, space_id, space_replace.model_dump(), "Space not found",
            "space", lambda r: row_to_space_read(r, request),
        )

    return await accept_operation(request, response, "Space replacement initiated", _async_replace_space())


@router.patch("/{space_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def update_space(
    request: Request,
    response: Response,
    space_update: SpaceUpdate,
    space_id: int = Path(..., description="Space ID"),
):
    """Update a storage space (partial update). Returns 202 Accepted with async operation."""

    async def _async_update_space():
        update_data = space_update.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

        return update_and_read(
            TABLE, space_id, update_data, "Space not found",
            "space", lambda r: row_to_space_read(r, request),
        )

    return await accept_operation(request, response, "Space update initiated", _async_update_space())


@router.delete("/{space_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def delete_space(
    request: Request,
    response: Response,
    space_id: int = Path(..., description="Space ID")
):
    """Delete a storage space. Returns 202 Accepted with async operation."""

    async def _async_delete_space():
        return delete_or_404(TABLE, space_id, "Space not found", "Space deleted successfully")

    return await accept_operation(request, response, "Space deletion initiated", _async_delete_space())
