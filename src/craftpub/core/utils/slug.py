"""Slug generation for CMS record identifiers"""

import re


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug (ASCII alphanumerics only)."""
    text = re.sub(r'[^a-z0-9]+', '-', text.lower())
    return text.strip('-')
