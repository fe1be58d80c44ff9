import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Path, Query, Request, Response, status

from db import get_connection, insert_row, select_row, select_rows
from conditional import create_etag
from models.async_response import AsyncOperationResponse
from models.stock_entry import (
    StockEntryCreate,
    StockEntryKind,
    StockEntryRead,
    StockEntryReplace,
    StockEntryResponse,
    StockEntryUpdate,
)
from routers.common import accept_operation, conditional_read, delete_or_404, get_or_404, link, update_and_read

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stock-entries", tags=["stock entries"])

TABLE = "stock_entries"


def get_stock_entry_links(row: dict, request: Request) -> List[dict]:
    links = [
        link(request, "self", "get_stock_entry", stock_entry_id=row["id"]),
        link(request, "product", "get_product", product_id=row["product_id"]),
    ]
    if row.get("from_place_id") is not None:
        links.append(link(request, "from-place", "get_place", place_id=row["from_place_id"]))
    if row.get("to_place_id") is not None:
        links.append(link(request, "to-place", "get_place", place_id=row["to_place_id"]))
    return links


def row_to_stock_entry_read(row: dict, request: Request) -> StockEntryRead:
    return StockEntryRead(**row, links=get_stock_entry_links(row, request))


@router.post("", response_model=StockEntryResponse, status_code=status.HTTP_201_CREATED)
def create_stock_entry(stock_entry: StockEntryCreate, response: Response, request: Request):
    """Record a stock movement. Stock items are not adjusted."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            stock_entry_id = insert_row(cur, TABLE, stock_entry.model_dump())
            conn.commit()

            row = select_row(cur, TABLE, stock_entry_id)

    if not row:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve created stock entry")

    logger.info(
        "Created stock entry %s (%s of product %s)",
        stock_entry_id, stock_entry.kind, stock_entry.product_id,
    )

    etag = create_etag(row)
    if etag:
        response.headers["ETag"] = etag
    response.headers["Location"] = str(request.url_for("get_stock_entry", stock_entry_id=stock_entry_id))

    return StockEntryResponse(message="New stock entry created", stock_entry=row_to_stock_entry_read(row, request))


@router.get("", response_model=List[StockEntryRead])
def list_stock_entries(
        request: Request,
        product_id: Optional[int] = Query(None, description="Filter by product"),
        kind: Optional[StockEntryKind] = Query(None, description="Filter by movement kind"),
        from_place_id: Optional[int] = Query(None, description="Filter by source place"),
        to_place_id: Optional[int] = Query(None, description="Filter by destination place"),
):
    """List all stock entries with optional filters."""
    with get_connection() as conn, conn.cursor() as cur:
        rows = select_rows(
            cur,
            TABLE,
            equals={
                "product_id": product_id,
                "kind": kind.value if kind else None,
                "from_place_id": from_place_id,
                "to_place_id": to_place_id,
            },
        )

    return [row_to_stock_entry_read(row, request) for row in rows]


@router.get("/{stock_entry_id}", response_model=StockEntryRead)
def get_stock_entry(
        request: Request,
        response: Response,
        stock_entry_id: int = Path(..., description="Stock entry ID"),
):
    """Get a specific stock entry by ID."""
    row = get_or_404(TABLE, stock_entry_id, "Stock entry not found")
    return conditional_read(request, response, row, lambda r: row_to_stock_entry_read(r, request))


@router.put("/{stock_entry_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def replace_stock_entry(
    request: Request,
    response: Response,
    stock_entry_replace: StockEntryReplace,
    stock_entry_id: int = Path(..., description="Stock entry ID"),
):
    """Replace a stock entry entirely. Returns 202 Accepted with async operation."""

    async def _async_replace_stock_entry():
        return update_and_read(
            TABLE, stock_entry_id, stock_entry_replace.model_dump(), "Stock entry not found",
            "stock_entry", lambda r: row_to_stock_entry_read(r, request),
        )

    return await accept_operation(request, response, "Stock entry replacement initiated", _async_replace_stock_entry())


@router.patch("/{stock_entry_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def update_stock_entry(
    request: Request,
    response: Response,
    stock_entry_update: StockEntryUpdate,
    stock_entry_id: int = Path(..., description="Stock entry ID"),
):
    """Update a stock entry (partial update). Returns 202 Accepted with async operation."""

    async def _async_update_stock_entry():
        update_data = stock_entry_update.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

        return update_and_read(
            TABLE, stock_entry_id, update_data, "Stock entry not found",
            "stock_entry", lambda r: row_to_stock_entry_read(r, request),
        )

    return await accept_operation(request, response, "Stock entry update initiated", _async_update_stock_entry())


@router.delete("/{stock_entry_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def delete_stock_entry(
    request: Request,
    response: Response,
    stock_entry_id: int = Path(..., description="Stock entry ID")
):
    """Delete a stock entry. Returns 202 Accepted with async operation."""

    async def _async_delete_stock_entry():
        return delete_or_404(TABLE, stock_entry_id, "Stock entry not found", "Stock entry deleted successfully")

    return await accept_operation(request, response, "Stock entry deletion initiated", _async_delete_stock_entry())
