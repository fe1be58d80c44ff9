import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Path, Query, Request, Response, status

from db import get_connection, insert_row, select_row, select_rows
from conditional import create_etag
from models.async_response import AsyncOperationResponse
from models.product import ProductCreate, ProductRead, ProductReplace, ProductResponse, ProductUpdate
from routers.common import accept_operation, conditional_read, delete_or_404, get_or_404, link, update_and_read

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])

TABLE = "products"


def get_product_links(row: dict, request: Request) -> List[dict]:
    links = [
        link(request, "self", "get_product", product_id=row["id"]),
        link(request, "stock-unit", "get_unit", unit_id=row["stock_unit_id"]),
        link(request, "purchase-unit", "get_unit", unit_id=row["purchase_unit_id"]),
    ]

    if row.get("parent_product_id") is not None:
        links.append(link(request, "parent", "get_product", product_id=row["parent_product_id"]))

    links.append(link(request, "stock-items", "list_stock_items", query={"product_id": row["id"]}))
    return links


def row_to_product_read(row: dict, request: Request) -> ProductRead:
    """
    Convert a SQL row from the `products` table (DictCursor) into ProductRead.
    """
    return ProductRead(**row, links=get_product_links(row, request))


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(product: ProductCreate, response: Response, request: Request):
    """Create a new product."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            product_id = insert_row(cur, TABLE, product.model_dump())
            conn.commit()

            row = select_row(cur, TABLE, product_id)

    if not row:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to retrieve created product")

    logger.info("Created product %s (%s)", product_id, product.name)

    etag = create_etag(row)
    if etag:
        response.headers["ETag"] = etag
    response.headers["Location"] = str(request.url_for("get_product", product_id=product_id))

    return ProductResponse(message="New product created", product=row_to_product_read(row, request))


@router.get("", response_model=List[ProductRead])
def list_products(
        request: Request,
        name: Optional[str] = Query(None, description="Filter by name (contains)"),
        parent_product_id: Optional[int] = Query(None, description="Filter by parent product"),
        stock_unit_id: Optional[int] = Query(None, description="Filter by stock unit"),
):
    """List all products with optional filters."""
    with get_connection() as conn, conn.cursor() as cur:
        rows = select_rows(
            cur,
            TABLE,
            equals={"parent_product_id": parent_product_id, "stock_unit_id": stock_unit_id},
            contains={"name": name},
        )

    return [row_to_product_read(row, request) for row in rows]


@router.get("/{product_id}", response_model=ProductRead)
def get_product(request: Request, response: Response, product_id: int = Path(..., description="Product ID")):
    """Get a specific product by ID."""
    row = get_or_404(TABLE, product_id, "Product not found")
    return conditional_read(request, response, row, lambda r: row_to_product_read(r, request))


@router.put("/{product_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def replace_product(
    request: Request,
    response: Response,
    product_replace: ProductReplace,
    product_id: int = Path(..., description="Product ID"),
):
    """Replace a product entirely. The product ID will remain the same. Returns 202 Accepted with async operation."""

    async def _async_replace_product():
        return update_and_read(
            TABLE, product_id, product_replace.model_dump(), "Product not found",
            "product", lambda r: row_to_product_read(r, request),
        )

    return await accept_operation(request, response, "Product replacement initiated", _async_replace_product())


@router.patch("/{product_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def update_product(
    request: Request,
    response: Response,
    product_update: ProductUpdate,
    product_id: int = Path(..., description="Product ID"),
):
    """Update a product (partial update). Returns 202 Accepted with async operation."""

    async def _async_update_product():
        update_data = product_update.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update")

        return update_and_read(
            TABLE, product_id, update_data, "Product not found",
            "product", lambda r: row_to_product_read(r, request),
        )

    return await accept_operation(request, response, "Product update initiated", _async_update_product())


@router.delete("/{product_id}", response_model=AsyncOperationResponse, status_code=status.HTTP_202_ACCEPTED)
async def delete_product(
    request: Request,
    response: Response,
    product_id: int = Path(..., description="Product ID")
):
    """Delete a product. Returns 202 Accepted with async operation."""

    async def _async_delete_product():
        return delete_or_404(TABLE, product_id, "Product not found", "Product deleted successfully")

    return await accept_operation(request, response, "Product deletion initiated", _async_delete_product())
