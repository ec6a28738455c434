"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"

# Unprefixed variable names accepted as a fallback for the credential fields.
ENV_ALIASES = {
    "craft_api_url":     "CRAFT_API_URL",
    "craft_token":       "CRAFT_TOKEN",
    "sanity_project_id": "SANITY_PROJECT_ID",
    "sanity_dataset":    "SANITY_DATASET",
    "sanity_token":      "SANITY_TOKEN",
}

DEFAULT_MARKERS = {
    "title":           "Title:",
    "slug":            "Slug:",
    "author":          "Author:",
    "category":        "Category:",
    "published_date":  "Date:",
    "excerpt":         "Excerpt:",
    "featured":        "Featured:",
    "tags":            "Tags:",
    "seo_title":       "SEO Title:",
    "seo_description": "SEO Description:",
}


class RecordKind(BaseModel):
    """A Sanity document type and the mapping from logical field names to its field paths."""
    type:   str
    fields: dict[str, Optional[str]] = {}

    @property
    def label_field(self) -> str:
        """Field holding the human-readable name compared during reference resolution."""
        return self.fields.get("name") or self.fields.get("title") or "name"

    @property
    def slug_field(self) -> str:
        return self.fields.get("slug") or "slug"


def _post_kind() -> RecordKind:
    return RecordKind(type="post", fields={
        "title":           "title",
        "slug":            "slug",
        "published_at":    "publishedAt",
        "author":          "author",
        "categories":      "categories",
        "body":            "body",
        "main_image":      "mainImage",
        "excerpt":         "excerpt",
        "featured":        "featured",
        "tags":            "tags",
        "seo_title":       "seo.metaTitle",
        "seo_description": "seo.metaDescription",
    })


class SanitySchema(BaseModel):
    post:     RecordKind = Field(default_factory=_post_kind)
    author:   RecordKind = Field(default_factory=lambda: RecordKind(
        type="author", fields={"name": "name", "slug": "slug"}))
    category: RecordKind = Field(default_factory=lambda: RecordKind(
        type="category", fields={"title": "title", "slug": "slug", "description": "description"}))


class Settings(BaseModel):
    app_name:           str = "craftpub"
    craft_api_url:      str = Field(default="", description="Base URL of the Craft document API")
    craft_token:        str = Field(default="", description="Bearer token for the Craft API")
    sanity_project_id:  str = ""
    sanity_dataset:     str = "production"
    sanity_token:       str = Field(default="", description="Sanity token with write access")
    sanity_api_version: str = "2024-01-01"
    timeout:            float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    match_threshold:    int = Field(default=2, ge=0, description="Max edit distance for typo-tolerant name matching")
    metadata:           dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_MARKERS),
                                               description="Metadata key -> line prefix marker")
    sanity:             SanitySchema = Field(default_factory=SanitySchema)

    def missing(self, *names: str) -> list[str]:
        """Return the names among `names` whose value is empty."""
        return [n for n in names if not getattr(self, n)]


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then CRAFTPUB_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"CRAFTPUB_{name.upper()}"):
            data[name] = val
        elif name in ENV_ALIASES and (val := os.getenv(ENV_ALIASES[name])):
            data.setdefault(name, val)

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
