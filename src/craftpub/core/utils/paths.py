"""Dotted-path access into nested mappings (e.g. 'seo.metaTitle')"""

from typing import Any


def set_path(target: dict, path: str, value: Any) -> dict:
    """Set value at a dotted path, creating intermediate dicts as needed. Returns target."""
    *parents, leaf = path.split('.')
    current = target
    for part in parents:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[leaf] = value
    return target


def get_path(source: dict, path: str, default: Any = None) -> Any:
    """Return the value at a dotted path, or default if any segment is missing."""
    current: Any = source
    for part in path.split('.'):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current
