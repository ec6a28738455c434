"""Data models for Craft input, extracted metadata, and the Sanity post"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> str:
    """Current time as an ISO-8601 UTC timestamp with millisecond precision."""
    return iso_timestamp(datetime.now(timezone.utc))


def iso_timestamp(dt: datetime) -> str:
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BlockType(str, Enum):
    text = "text"
    image = "image"
    line = "line"


class Block(BaseModel):
    """One Craft block. The first block of a document is the page; its children are the body."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id:         Optional[str] = None
    type:       str = BlockType.text.value   # unknown Craft types are kept and ignored downstream
    markdown:   str = ""
    text_style: Optional[str] = Field(default=None, alias="textStyle")
    url:        Optional[str] = None
    content:    list["Block"] = []

    @field_validator("markdown", mode="before")
    @classmethod
    def _null_markdown(cls, value):
        return "" if value is None else value

    def starts_with_marker(self, markers: dict[str, str]) -> bool:
        """True if this block's markdown begins with any configured metadata marker."""
        return bool(self.markdown) and any(self.markdown.startswith(m) for m in markers.values())


class DocumentSummary(BaseModel):
    """Entry of the Craft document list."""
    model_config = ConfigDict(extra="ignore")

    id:    str
    title: Optional[str] = None


class Metadata(BaseModel):
    """Post metadata read from the marker lines at the top of a Craft document."""
    title:           str
    slug:            str = "untitled"
    author:          str = "Unknown"
    category:        list[str] = Field(default_factory=lambda: ["Uncategorized"])
    published_at:    str = Field(default_factory=utc_now)
    excerpt:         Optional[str] = None
    featured:        Optional[bool] = None
    tags:            Optional[list[str]] = None
    seo_title:       Optional[str] = None
    seo_description: Optional[str] = None


class Post(BaseModel):
    """Logical post fields; mapped onto Sanity field paths by the post record kind."""
    title:           str
    slug:            str
    published_at:    Optional[str] = None
    author:          Optional[dict[str, Any]] = None
    categories:      list[dict[str, Any]] = []
    body:            list[dict[str, Any]] = []
    main_image:      Optional[dict[str, Any]] = None
    excerpt:         Optional[str] = None
    featured:        Optional[bool] = None
    tags:            Optional[list[str]] = None
    seo_title:       Optional[str] = None
    seo_description: Optional[str] = None


@dataclass
class PublishResult:
    """Outcome of one publish run."""
    document_title: str
    post:           dict[str, Any]

    @property
    def is_draft(self) -> bool:
        return self.post.get("_id", "").startswith("drafts.")
