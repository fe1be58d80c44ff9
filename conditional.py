"""ETag and Last-Modified helpers for conditional GET."""

from __future__ import annotations

import hashlib
import json
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

from fastapi import Request, Response


def create_etag(row: dict) -> Optional[str]:
    """
    Generates an ETag based on all row data
    """
    if not row:
        return None

    items = []
    for k in sorted(row.keys()):
        v = row[k]

        if isinstance(v, (datetime, date)):
            v = v.isoformat()

        if isinstance(v, (bytes, bytearray)):
            v = v.decode("utf-8")

        items.append((k, None if v is None else str(v)))

    canonical = json.dumps(items, separators=(",", ":"), ensure_ascii=False)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f'"{digest}"'


def parse_http_date(value: str) -> Optional[datetime]:
    """Parse an HTTP-date string to a naive UTC datetime. Returns None on parse error."""
    if not value:
        return None
    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def etag_matches(header_value: str, etag: str) -> bool:
    """Return True if any ETag in header_value matches etag. Support '*' wildcard."""
    if not header_value:
        return False
    header_value = header_value.strip()
    if header_value == '*':
        return True
    parts = [p.strip() for p in header_value.split(',') if p.strip()]
    return any(p == etag for p in parts)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def is_not_modified(request: Request, row: dict, etag: Optional[str]) -> bool:
    """If-None-Match wins over If-Modified-Since, as in RFC 9110."""
    inm = request.headers.get("if-none-match")
    if inm:
        return bool(etag) and etag_matches(inm, etag)

    ims = request.headers.get("if-modified-since")
    updated_at = row.get("updated_at")
    if ims and isinstance(updated_at, datetime):
        parsed = parse_http_date(ims)
        if parsed is not None:
            # HTTP-dates have second precision
            return _as_naive_utc(updated_at).replace(microsecond=0) <= parsed
    return False


def set_cache_headers(response: Response, row: dict, etag: Optional[str]):
    if etag:
        response.headers["ETag"] = etag

    updated_at = row.get("updated_at")
    if isinstance(updated_at, datetime):
        # RFC1123 (HTTP-date) in GMT
        response.headers["Last-Modified"] = _as_naive_utc(updated_at).strftime("%a, %d %b %Y %H:%M:%S GMT")
