from __future__ import annotations

import re
from typing import Iterable

META_DESCRIPTION_LIMIT = 155
IMAGE_ALT_LIMIT = 125
ELLIPSIS = "..."

_WRAPPING_QUOTES = re.compile(r"^[\"']|[\"']$")


def clip(text: str, limit: int) -> str:
    """Hard cap: anything longer than `limit` keeps limit-3 chars plus '...'."""
    text = text or ""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def strip_wrapping_quotes(text: str) -> str:
    return _WRAPPING_QUOTES.sub("", (text or "").strip())


def normalize_text(text: str) -> str:
    """Lowercase and collapse whitespace, for comparisons."""
    return " ".join((text or "").strip().lower().split())


def dedupe_preserve_order(items: Iterable[str]) -> list[str]:
    """Deduplicate strings preserving order (case-insensitive via normalize_text)."""
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        key = normalize_text(item)
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(item.strip())
    return out
