from __future__ import annotations

import json
import re
from typing import Any

from ..errors import BackendContractError, InvalidRequest

__all__ = [
    "PREVIEW_CHARS",
    "preview",
    "looks_like_html",
    "extract_html_title",
    "extract_html_heading",
    "decode_backend_body",
    "parse_numeric_id",
    "parse_category_ids",
]

PREVIEW_CHARS = 200

_TITLE_RE = re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE | re.DOTALL)
_H1_RE = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)
_DIGITS_RE = re.compile(r"^\d+$")


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    """Return at most `limit` characters of `text` for diagnostics."""
    return text[:limit]


def looks_like_html(text: str) -> bool:
    lowered = text.lower()
    return "<!doctype" in lowered or "<html" in lowered


def _first_match(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    if not match:
        return None
    value = " ".join(match.group(1).split())
    return value or None


def extract_html_title(text: str) -> str | None:
    """Return the <title> of an HTML error page, whitespace-collapsed."""
    return _first_match(_TITLE_RE, text)


def extract_html_heading(text: str) -> str | None:
    return _first_match(_H1_RE, text)


def decode_backend_body(text: str, status_code: int) -> dict[str, Any]:
    """Decode a backend body that is supposed to be a JSON object.

    Raises:
        BackendContractError: if the body is not JSON. HTML error pages
        (a proxy in front of the backend answering 502, for instance) carry
        their title and first heading in the diagnostics.
    """
    try:
        data = json.loads(text)
    except ValueError as e:
        if looks_like_html(text):
            raise BackendContractError(
                "Backend returned HTML error page instead of JSON",
                error=preview(text),
                html_title=extract_html_title(text),
                html_h1=extract_html_heading(text),
                backend_status=status_code,
            ) from e
        raise BackendContractError(
            "Invalid JSON response from backend",
            error=preview(text),
            parse_error=str(e),
            backend_status=status_code,
        ) from e

    if not isinstance(data, dict):
        return {"data": data}
    return data


def parse_numeric_id(value: Any, label: str = "id") -> str:
    """Return `value` as a decimal id string or raise `InvalidRequest`."""
    if isinstance(value, bool):
        raise InvalidRequest(f"Valid {label} is required", field=label)
    if isinstance(value, int) and value >= 0:
        return str(value)
    if isinstance(value, str) and _DIGITS_RE.match(value.strip()):
        return value.strip()
    raise InvalidRequest(f"Valid {label} is required", field=label)


def parse_category_ids(raw: str) -> list[int]:
    """Validate the JSON-encoded `category_ids` form field.

    The browser sends something like ``"[3, 7]"``; numeric strings inside the
    array are accepted because older admin builds quoted them.
    """
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise InvalidRequest(
            "category_ids must be a JSON array", error=preview(raw), field="category_ids"
        ) from e
    if not isinstance(parsed, list):
        raise InvalidRequest("category_ids must be a JSON array", field="category_ids")

    out: list[int] = []
    for item in parsed:
        if isinstance(item, bool):
            raise InvalidRequest("category_ids must contain integers", field="category_ids")
        if isinstance(item, int):
            out.append(item)
        elif isinstance(item, str) and _DIGITS_RE.match(item.strip()):
            out.append(int(item.strip()))
        else:
            raise InvalidRequest("category_ids must contain integers", field="category_ids")
    return out
