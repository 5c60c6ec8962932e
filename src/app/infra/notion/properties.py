# src/app/infra/notion/properties.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

# Notion rejects rich text blocks longer than this
MAX_TEXT_LENGTH = 2000


def _text(content: str) -> list[dict[str, Any]]:
    return [{"text": {"content": content[:MAX_TEXT_LENGTH]}}]


def title(content: str) -> dict[str, Any]:
    return {"title": _text(content)}


def rich_text(content: str) -> dict[str, Any]:
    return {"rich_text": _text(content)}


def url(value: Optional[str]) -> dict[str, Any]:
    return {"url": value or None}


def relation(*page_ids: str) -> dict[str, Any]:
    return {"relation": [{"id": page_id} for page_id in page_ids]}


def checkbox(value: bool) -> dict[str, Any]:
    return {"checkbox": bool(value)}


def number(value: Optional[float]) -> dict[str, Any]:
    return {"number": value}


def date(value: datetime) -> dict[str, Any]:
    return {"date": {"start": value.isoformat()}}


def title_equals(property_name: str, value: str) -> dict[str, Any]:
    """Query filter matching a title property exactly."""
    return {"property": property_name, "title": {"equals": value}}


def read_number(page: dict[str, Any], property_name: str, default: int = 0) -> int:
    prop = (page.get("properties") or {}).get(property_name) or {}
    value = prop.get("number")
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def read_title(obj: dict[str, Any], property_name: Optional[str] = None) -> str:
    """
    Plain text of a title.

    With a property name, reads a page's title property; without one, reads the
    top-level `title` array of a database object.
    """
    if property_name is None:
        parts = obj.get("title") or []
    else:
        prop = (obj.get("properties") or {}).get(property_name) or {}
        parts = prop.get("title") or []
    texts = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        text = part.get("plain_text")
        if text is None:
            text = (part.get("text") or {}).get("content")
        if text:
            texts.append(text)
    return "".join(texts)
