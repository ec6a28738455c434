"""Metadata extraction from the marker lines at the top of a Craft page"""

import re
from datetime import datetime, timezone
from typing import Any

from craftpub.core.models import Block, BlockType, Metadata, iso_timestamp


DATE_RE = re.compile(r'(\d{4}-\d{2}-\d{2})')

LIST_KEYS = {"category", "tags"}


def _parse_date(value: str) -> str | None:
    """Return the first YYYY-MM-DD in value as a midnight UTC timestamp, else None."""
    m = DATE_RE.search(value)
    if not m:
        return None
    try:
        day = datetime.strptime(m.group(1), "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except ValueError:
        return None
    return iso_timestamp(day)


def _transform(key: str, value: str) -> tuple[str, Any]:
    """Map a raw marker value to (metadata field, typed value); value is None to keep the default."""
    if key in LIST_KEYS:
        return key, [v.strip() for v in value.split(',')]
    if key == "published_date":
        return "published_at", _parse_date(value)
    if key == "featured":
        return key, value.lower() == "true"
    return key, value


def extract_metadata(page: Block, markers: dict[str, str]) -> Metadata:
    """Build Metadata from the page's text blocks that start with a configured marker.

    The page's own markdown is the fallback title. A marker seen twice keeps
    the later value.
    """
    fields: dict[str, Any] = {"title": page.markdown or "Untitled"}
    for block in page.content:
        if block.type != BlockType.text or not block.markdown:
            continue
        for key, marker in markers.items():
            if not block.markdown.startswith(marker):
                continue
            target, value = _transform(key, block.markdown[len(marker):].strip())
            if value is not None and target in Metadata.model_fields:
                fields[target] = value
    return Metadata(**fields)
