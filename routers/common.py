"""Helpers shared by the resource routers: conditional reads and async writes."""

from __future__ import annotations

import logging
from typing import Any, Callable, Coroutine, Dict, Optional, Union

from fastapi import HTTPException, Request, Response, status
from pydantic import BaseModel

from async_manager import async_operation_manager
from conditional import create_etag, is_not_modified, set_cache_headers
from db import get_connection, select_row, update_row, delete_row
from models.async_response import AsyncOperationResponse, OperationStatus
from models.gen_response import MessageResponse

logger = logging.getLogger(__name__)


def link(request: Request, rel: str, route: str, query: Optional[Dict[str, Any]] = None, **path_params) -> dict:
    href = str(request.url_for(route, **path_params).path)
    if query:
        href += "?" + "&".join(f"{key}={val}" for key, val in query.items())
    return {"rel": rel, "href": href}


def get_or_404(table: str, row_id: int, detail: str) -> dict:
    with get_connection() as conn, conn.cursor() as cur:
        row = select_row(cur, table, row_id)
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
    return row


def conditional_read(
        request: Request,
        response: Response,
        row: dict,
        to_read: Callable[[dict], BaseModel],
) -> Union[BaseModel, Response]:
    """Return 304 when the client copy is current, otherwise the read model with cache headers."""
    etag = create_etag(row)

    if is_not_modified(request, row, etag):
        return Response(status_code=status.HTTP_304_NOT_MODIFIED)

    set_cache_headers(response, row, etag)
    return to_read(row)


def update_and_read(
        table: str,
        row_id: int,
        data: Dict[str, Any],
        detail: str,
        key: str,
        to_read: Callable[[dict], BaseModel],
) -> Dict[str, Any]:
    """UPDATE one row and return the fresh read plus its ETag as an operation result."""
    with get_connection() as conn:
        with conn.cursor() as cur:
            if update_row(cur, table, row_id, data) == 0:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
            conn.commit()

            row = select_row(cur, table, row_id)
            if not row:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

    logger.info("Updated %s %s (%s)", table, row_id, ", ".join(data.keys()))

    return {
        key: to_read(row).model_dump(mode="json"),
        "etag": create_etag(row)
    }


def delete_or_404(table: str, row_id: int, detail: str, message: str) -> Dict[str, Any]:
    with get_connection() as conn:
        with conn.cursor() as cur:
            if delete_row(cur, table, row_id) == 0:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
            conn.commit()

    logger.info("Deleted %s %s", table, row_id)
    return MessageResponse(id=row_id, message=message).model_dump()


async def accept_operation(
        request: Request,
        response: Response,
        message: str,
        coroutine: Coroutine,
) -> AsyncOperationResponse:
    """Start `coroutine` as a tracked operation and describe it as a 202 body."""
    operation_id = await async_operation_manager.create_operation(
        message=message,
        coroutine=coroutine
    )

    status_url = str(request.url_for("get_operation_status", operation_id=operation_id))
    response.headers["Location"] = status_url

    return AsyncOperationResponse(
        operation_id=operation_id,
        status=OperationStatus.PENDING,
        message=message,
        status_url=status_url
    )
