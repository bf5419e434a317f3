from __future__ import annotations

from typing import Any


def _as_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def has_graph_error(payload: Any) -> bool:
    """True when a parsed body carries an API error, whatever the HTTP status."""
    if not isinstance(payload, dict):
        return False
    return bool(payload.get("error") or payload.get("error_message"))


def extract_graph_error(payload: Any) -> str | None:
    """Extract a readable error message from an Instagram Graph API error body.

    Handles the three shapes the API returns: a top-level ``error_message``,
    a Graph ``error`` object, and the OAuth ``error``/``error_description``
    pair.
    """
    if not isinstance(payload, dict):
        return None

    top_level = str(payload.get("error_message") or "").strip()
    if top_level:
        return top_level

    err = payload.get("error")
    if isinstance(err, dict):
        message = str(err.get("message") or "").strip()
        fbtrace = err.get("fbtrace_id")
        parts: list[str] = []
        if message:
            parts.append(message)
        if fbtrace:
            parts.append(f"fbtrace={fbtrace}")
        if parts:
            return " | ".join(parts)
        return None

    if isinstance(err, str) and err.strip():
        description = str(payload.get("error_description") or "").strip()
        if description:
            return f"{err.strip()} - {description}"
        return err.strip()
    return None


def extract_graph_error_codes(payload: Any) -> tuple[int | None, int | None]:
    if not isinstance(payload, dict):
        return None, None
    err = payload.get("error")
    if not isinstance(err, dict):
        return _as_int(payload.get("code")), None
    subcode = err.get("error_subcode")
    if subcode is None:
        subcode = err.get("subcode")
    return _as_int(err.get("code")), _as_int(subcode)
