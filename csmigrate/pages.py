"""Nested output paths for page-typed posts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .models import PostRow
from .text import sluggify

PAGE_TYPE = "page"


@dataclass
class PageNode:
    slug: str
    parent_id: Optional[Any] = None


@dataclass
class PageHierarchy:
    """Parent/child index of pages, keyed by page id."""

    pages: Dict[Any, PageNode] = field(default_factory=dict)

    @classmethod
    def from_posts(cls, posts: Iterable[PostRow]) -> "PageHierarchy":
        pages: Dict[Any, PageNode] = {}
        for post in posts:
            if post.type != PAGE_TYPE:
                continue
            slug = post.slug or sluggify(post.title or "")
            pages[post.id] = PageNode(slug=slug, parent_id=post.parent_id)
        return cls(pages=pages)

    def path_for(self, page_id: Any) -> str:
        """Slug chain from the root ancestor down to ``page_id``, ending in ``/``."""
        segments: List[str] = []
        seen = set()
        current = page_id
        while current is not None and current in self.pages and current not in seen:
            seen.add(current)
            node = self.pages[current]
            if node.slug:
                segments.append(node.slug)
            current = node.parent_id
        segments.reverse()
        if not segments:
            return ""
        return "/".join(segments) + "/"


__all__ = ["PAGE_TYPE", "PageHierarchy", "PageNode"]
