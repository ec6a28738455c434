"""Sanity Portable Text and reference node builders"""

from typing import Any, Optional


HEADING_STYLES = {"h2": "h2", "h3": "h3"}


def reference(ref_id: str, key: Optional[str] = None) -> dict[str, Any]:
    """Return a Sanity reference; array members also need a `_key`."""
    ref = {"_type": "reference", "_ref": ref_id}
    if key:
        ref["_key"] = key
    return ref


def text_block(key: str, text: str, style: str = "normal") -> dict[str, Any]:
    return {
        "_type": "block",
        "_key": key,
        "style": style,
        "children": [{"_type": "span", "text": text, "marks": []}],
    }


def image_block(asset_id: str, key: Optional[str] = None) -> dict[str, Any]:
    """Return an image node (body member when keyed, a plain image field otherwise)."""
    node = {"_type": "image", "asset": reference(asset_id)}
    if key:
        node["_key"] = key
    return node
