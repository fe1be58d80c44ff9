import logging
import socket
from datetime import datetime
from typing import Optional

import pymysql
from fastapi import APIRouter, HTTPException, Path, Query, status

from db import get_connection
from models.health import DatabaseHealth, Health

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def _ip_address() -> str:
    try:
        return socket.gethostbyname(socket.gethostname())
    except socket.gaierror:
        return "127.0.0.1"


def make_health(echo: Optional[str], path_echo: Optional[str] = None) -> Health:
    return Health(
        status=200,
        status_message="OK",
        timestamp=datetime.utcnow().isoformat() + "Z",
        ip_address=_ip_address(),
        echo=echo,
        path_echo=path_echo,
    )


@router.get("", response_model=Health)
def get_health_no_path(echo: Optional[str] = Query(None, description="Optional echo string")):
    return make_health(echo=echo, path_echo=None)


@router.get("/db", response_model=DatabaseHealth)
def get_database_health():
    """Run `SELECT 1` against the configured database."""
    try:
        with get_connection() as conn, conn.cursor() as cur:
            cur.execute("SELECT 1")
            cur.fetchone()
    except pymysql.err.MySQLError as e:
        logger.warning("Database health check failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database unavailable"
        )
    return DatabaseHealth(database="ok")


@router.get("/{path_echo}", response_model=Health)
def get_health_with_path(
        path_echo: str = Path(...,
                              description="Required echo in the URL path"),
        echo: Optional[str] = Query(None, description="Optional echo string"),
):
    return make_health(echo=echo, path_echo=path_echo)
