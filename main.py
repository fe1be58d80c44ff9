from __future__ import annotations

import logging
import os

import pymysql
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from routers import (
    health,
    operations,
    places,
    products,
    spaces,
    stock_entries,
    stock_items,
    unit_conversions,
    units,
)

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

port = int(os.environ.get("FASTAPIPORT", 8000))

app = FastAPI(
    title="Unnamed Kitchen Inventory System",
    description="Products, units, storage places and stock movements for a home kitchen",
    version="0.1.0",
)

# ============================================================================
# CORS Middleware Configuration
# ============================================================================
# Requests are accepted from any origin (browser frontends, scripts)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Database error handlers
# ============================================================================


@app.exception_handler(pymysql.err.IntegrityError)
async def integrity_error_handler(request: Request, exc: pymysql.err.IntegrityError):
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"detail": str(exc)},
    )


@app.exception_handler(pymysql.err.OperationalError)
async def operational_error_handler(request: Request, exc: pymysql.err.OperationalError):
    logger.error("Database unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Database unavailable"},
    )


# ============================================================================
# Routers
# ============================================================================

app.include_router(health.router)
app.include_router(operations.router)
app.include_router(units.router)
app.include_router(unit_conversions.router)
app.include_router(products.router)
app.include_router(spaces.router)
app.include_router(places.router)
app.include_router(stock_items.router)
app.include_router(stock_entries.router)


# -----------------------------------------------------------------------------
# Run the app
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=port)
