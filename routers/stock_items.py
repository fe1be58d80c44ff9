import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Path, Query, Request, Response, status

from db import get_connection, insert_row, select_row, select_rows
from conditional import create_etag
from models.async_response import AsyncOperationResponse
from models.stock_item import (
    StockItemCreate,
    StockItemRead,
    StockItemReplace,
    StockItemResponse,
    StockItemUpdate,
)
from routers.common import accept_operation, conditional_read, delete_or_404, get_or_404, link, update_and_read

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stock-items", tags=["stock items"])

TABLE = "stock_items"


def get_stock_item_links(row: dict, request: Request) -> List[dict]:
    links = [
        link(request, "self", "get_stock_item", stock_item_id=row["id"]),
        link(request, "product", "get_product", product_id=row["product_id"]),
    ]
    if row.get("place_id") is not None:
        links.append(link(request, "place", "get_place", place_id=row["place_id"]))
    return links


def row_to_stock_item_read(row: dict, request: Request) -> StockItemRead:
    return StockItemRead(**row, links=get_stock_item_links(row, request))


@router.post("", response_model=StockItemResponse, status_code=status.HTTP_201_CREATED)
def create_stock_item(stock_item: StockItemCreate, response: Response, request: Request):
    """Record a stock item (a quantity of a product kept at a place)."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            stock_item_id = insert_row(cur, TABLE, stock_item.model_dump())
            conn.commit()

            row = select_row(cur, TABLE, stock_item_id)

    if not row:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve created stock item")

    logger.info("Created stock item %s for product %s", stock_item_id, stock_item.product_id)

    etag = create_etag(row)
    if etag:
        response.headers["ETag"] = etag
    response.headers["Location"] = str(request.url_for("get_stock_item", stock_item_id=stock_item_id))

    return StockItemResponse(message="New stock item created", stock_item=row_to_stock_item_read(row, request))


@router.get("", response_model=List[StockItemRead])
def list_stock_items(
        request: Request,
        product_id: Optional[int] = Query(None, description="Filter by product"),
        place_id: Optional[int] = Query(None, description="Filter by place"),
):
    """List all stock items with optional filters."""
    with get_connection() as conn, conn.cursor() as cur:
        rows = select_rows(cur, TABLE, equals={"product_id": product_id, "place_id": place_id})

    return [row_to_stock_item_read(row, request) for row in rows]


@router.get("/{stock_item_id}", response_model=StockItemRead)
def get_stock_item(request: Request, response: Response, stock_item_id: int = Path(..., description="Stock item ID")):
    """Get a specific stock item by ID."""
    row = get_or_404(TABLE, stock_item_id, "Stock item not found")
    return conditional_read(request, response, row, lambda r: row_to_stock_item_read(r, request))


@router.put("/{stock_item_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def replace_stock_item(
    request: Request,
    response: Response,
    stock_item_replace: StockItemReplace,
    stock_item_id: int = Path(..., description="Stock item ID"),
):
    """Replace a stock item entirely. Returns 202 Accepted with async operation."""

    async def _async_replace_stock_item():
        return update_and_read(
            TABLE, stock_item_id, stock_item_replace.model_dump(), "Stock item not found",
            "stock_item", lambda r: row_to_stock_item_read(r, request),
        )

    return await accept_operation(request, response, "Stock item replacement initiated", _async_replace_stock_item())


@router.patch("/{stock_item_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def update_stock_item(
    request: Request,
    response: Response,
    stock_item_update: StockItemUpdate,
    stock_item_id: int = Path(..., description="Stock item ID"),
):
    """Update a stock item (partial update). Returns 202 Accepted with async operation."""

    async def _async_update_stock_item():
        update_data = stock_item_update.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

        return update_and_read(
            TABLE, stock_item_id, update_data, "Stock item not found",
            "stock_item", lambda r: row_to_stock_item_read(r, request),
        )

    return await accept_operation(request, response, "Stock item update initiated", _async_update_stock_item())


@router.delete("/{stock_item_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def delete_stock_item(
    request: Request,
    response: Response,
    stock_item_id: int = Path(..., description="Stock item ID")
):
    """Delete a stock item. Returns 202 Accepted with async operation."""

    async def _async_delete_stock_item():
        return delete_or_404(TABLE, stock_item_id, "Stock item not found", "Stock item deleted successfully")

    return await accept_operation(request, response, "Stock item deletion initiated", _async_delete_stock_item())
