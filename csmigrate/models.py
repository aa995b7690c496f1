"""Pydantic models for source rows and the generated front matter."""

import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .text import to_text

LEADING_INT_RE = re.compile(r"\s*([-+]?\d+)")


class PostRow(BaseModel):
    """One row of the posts query (``cs_Post`` joined to ``cs_User``)."""

    id: Any = Field(..., description="Post identifier, usually a GUID string.")
    title: Optional[str] = Field(None, description="Post title as stored.")
    slug: Optional[str] = Field(None, description="Stored slug; may be empty.")
    date: Optional[datetime] = Field(None, description="Publication timestamp.")
    ispublished: int = Field(0, description="1 when the post is published.")
    categories: Optional[str] = Field(
        None, description="Comma separated category names."
    )
    content: Optional[str] = Field(None, description="HTML body.")
    comment_count: int = Field(0, description="Number of approved comments.")
    author: Optional[str] = Field(None, description="Author display name.")
    author_email: Optional[str] = Field(None, description="Author email, the join key.")
    type: Optional[str] = Field(
        None, description="'page' for standalone pages; not returned by the posts query."
    )
    status: Optional[str] = Field(
        None, description="Workflow status; not returned by the posts query."
    )
    parent_id: Any = Field(None, description="Parent page id for page hierarchies.")

    model_config = ConfigDict(extra="ignore")

    @field_validator("title", "slug", "categories", "content", "author", "author_email", mode="before")
    @classmethod
    def _decode_text(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return to_text(value)

    @field_validator("ispublished", "comment_count", mode="before")
    @classmethod
    def _coerce_int(cls, value: Any) -> int:
        if value is None or value == "":
            return 0
        return int(value)


class CommentRow(BaseModel):
    """An approved comment, coerced to the shapes written into front matter."""

    id: int
    author: str = ""
    author_email: str = ""
    author_url: str = ""
    date: str = ""
    content: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> int:
        # Leading digits of the value, or 0 when there are none.
        if isinstance(value, int):
            return value
        match = LEADING_INT_RE.match(to_text(value))
        return int(match.group(1)) if match else 0

    @field_validator("author", "author_email", "author_url", "date", "content", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return to_text(value)


class _OmitBlank(BaseModel):
    """Front matter base: blank strings and empty lists are stored as unset."""

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if value == "" or value == []:
            return None
        return value

    def to_front_matter(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Author(_OmitBlank):
    display_name: Optional[str] = None
    login: Optional[str] = None
    email: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.display_name or self.login or self.email)


class FrontMatter(_OmitBlank):
    """Jekyll front matter for one migrated post, in output key order."""

    layout: str = "post"
    status: Optional[str] = None
    published: Optional[bool] = None
    title: Optional[str] = None
    author: Optional[Author] = None
    author_login: Optional[str] = None
    author_email: Optional[str] = None
    cloudscribe_id: Optional[Any] = None
    cloudscribe_slug: Optional[str] = None
    date: Optional[datetime] = None
    categories: Optional[List[str]] = None
    comments: Optional[List[CommentRow]] = None

    @field_validator("author", mode="before")
    @classmethod
    def _drop_empty_author(cls, value: Any) -> Any:
        if isinstance(value, dict):
            value = Author(**value)
        if isinstance(value, Author) and value.is_empty():
            return None
        return value

    @field_validator("cloudscribe_id", mode="before")
    @classmethod
    def _plain_id(cls, value: Any) -> Any:
        # GUID columns arrive as uuid.UUID, which safe_dump cannot represent.
        if value is None or isinstance(value, int):
            return value
        return to_text(value)


__all__ = ["Author", "CommentRow", "FrontMatter", "PostRow"]
