# db.py
import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pymysql
from pymysql.constants import CLIENT
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DB_USER = os.getenv("DATABASE_USER", "ukis")
DB_PASSWORD = os.getenv("DATABASE_PASSWORD", "")
DB_HOST = os.getenv("DATABASE_HOST", "localhost")
DB_NAME = os.getenv("DATABASE_NAME", "ukis")
DB_PORT = int(os.getenv("DATABASE_PORT", "3306"))

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


def get_connection():
    return pymysql.connect(
        host=DB_HOST,
        user=DB_USER,
        password=DB_PASSWORD,
        database=DB_NAME,
        port=DB_PORT,
        charset="utf8mb4",
        cursorclass=pymysql.cursors.DictCursor,
        # UPDATE rowcount reports matched rows, not changed rows
        client_flag=CLIENT.FOUND_ROWS,
    )


def select_rows(
        cur,
        table: str,
        equals: Optional[Dict[str, Any]] = None,
        contains: Optional[Dict[str, str]] = None,
) -> List[dict]:
    """
    SELECT every row of `table`, optionally filtered.

    `equals` maps columns to exact values, `contains` maps text columns to
    substrings (LIKE). Filters whose value is None are ignored.
    """
    sql = f"SELECT * FROM {table}"
    where = []
    params = []

    for column, value in (equals or {}).items():
        if value is None:
            continue
        where.append(f"{column} = %s")
        params.append(value)
    for column, value in (contains or {}).items():
        if value is None:
            continue
        where.append(f"{column} LIKE %s")
        params.append(f"%{value}%")

    if where:
        sql += " WHERE " + " AND ".join(where)
    sql += " ORDER BY id"

    cur.execute(sql, params)
    return list(cur.fetchall())


def select_row(cur, table: str, row_id: int) -> Optional[dict]:
    cur.execute(f"SELECT * FROM {table} WHERE id=%s", (row_id,))
    return cur.fetchone()


def insert_row(cur, table: str, data: Dict[str, Any]) -> int:
    """INSERT one row and return its auto-increment id."""
    columns = ", ".join(data.keys())
    placeholders = ", ".join(["%s"] * len(data))
    cur.execute(
        f"INSERT INTO {table} ({columns}) VALUES ({placeholders})",
        list(data.values()),
    )
    return cur.lastrowid


def update_row(cur, table: str, row_id: int, data: Dict[str, Any]) -> int:
    """UPDATE the given columns of one row; returns the affected row count."""
    fields = []
    params = []
    for k, v in data.items():
        fields.append(f"{k}=%s")
        params.append(v)
    params.append(row_id)

    cur.execute(f"UPDATE {table} SET {', '.join(fields)} WHERE id=%s", params)
    return cur.rowcount


def delete_row(cur, table: str, row_id: int) -> int:
    cur.execute(f"DELETE FROM {table} WHERE id=%s", (row_id,))
    return cur.rowcount


def init_schema(conn) -> int:
    """Apply schema.sql statement by statement. Returns the statement count."""
    lines = [
        line for line in SCHEMA_PATH.read_text(encoding="utf-8").splitlines()
        if not line.lstrip().startswith("--")
    ]
    statements = [s.strip() for s in "\n".join(lines).split(";") if s.strip()]
    with conn.cursor() as cursor:
        for statement in statements:
            cursor.execute(statement)
    conn.commit()
    return len(statements)


if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    try:
        with get_connection() as conn:
            logger.info("Connection successful, server %s", conn.get_server_info())

            with conn.cursor() as cursor:
                cursor.execute("SELECT DATABASE();")
                logger.info("Current database: %s", cursor.fetchone())

            count = init_schema(conn)
            logger.info("Applied %d schema statements from %s", count, SCHEMA_PATH.name)
    except pymysql.err.MySQLError as e:
        logger.error("Connection failed: %s", e)
        raise SystemExit(1)
