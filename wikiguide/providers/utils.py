"""
Helpers for reading MediaWiki Action API payloads.
"""
from typing import Any, Dict, List, Optional


def query_pages(data: Any) -> List[Dict[str, Any]]:
    """Return ``query.pages`` as a list for both formatversion 1 (dict) and 2 (list)."""
    if not isinstance(data, dict):
        return []
    pages = (data.get("query") or {}).get("pages") or []
    if isinstance(pages, dict):
        pages = list(pages.values())
    return [p for p in pages if isinstance(p, dict)]


def first_page(data: Any) -> Optional[Dict[str, Any]]:
    """First existing page of a query response, or None."""
    for page in query_pages(data):
        if "missing" in page or "invalid" in page:
            continue
        return page
    return None


def parse_text(data: Any) -> Optional[str]:
    """Rendered HTML of an ``action=parse`` response (either formatversion)."""
    if not isinstance(data, dict):
        return None
    text = (data.get("parse") or {}).get("text")
    if isinstance(text, dict):
        text = text.get("*")
    return text or None


def strip_namespace(title: str) -> str:
    """Drop a file namespace prefix such as ``File:`` or ``Arquivo:``."""
    for prefix in ("File:", "Arquivo:", "Ficheiro:", "Imagem:", "Image:"):
        if title.startswith(prefix):
            return title[len(prefix):]
    return title
