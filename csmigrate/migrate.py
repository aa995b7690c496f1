"""Migration from CloudScribe posts to Jekyll content files."""

from __future__ import annotations

import importlib.util
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional

from .autop import autop
from .db import connect, fetch_comments, fetch_posts
from .io_utils import info, render_document, warn
from .models import CommentRow, FrontMatter, PostRow
from .pages import PAGE_TYPE, PageHierarchy
from .settings import MigrationSettings
from .text import clean_entities, sluggify
from .util_fs import ensure_dir, write_text

POSTS_DIR = "_posts"
DRAFTS_DIR = "_drafts"
DRAFT_STATUS = "draft"
PUBLISH_STATUS = "publish"
# Drafts are always .md.
DRAFT_EXTENSION = "md"


@dataclass(frozen=True)
class Capabilities:
    """Features resolved once at startup and passed to every post."""

    clean_entities: bool = False

    @classmethod
    def resolve(cls, settings: MigrationSettings) -> "Capabilities":
        clean = settings.clean_entities
        if clean and importlib.util.find_spec("bs4") is None:
            warn(
                "[migrate] beautifulsoup4 is not installed, so the "
                "clean_entities option is now disabled."
            )
            clean = False
        return cls(clean_entities=clean)


@dataclass
class MigrationReport:
    written: List[Path] = field(default_factory=list)
    failed: List[Any] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def split_categories(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [name for name in raw.split(",") if name]


def filename_stem(date: datetime, slug: str) -> str:
    return f"{date.year:04d}-{date.month:02d}-{date.day:02d}-{slug}"


def published_flag(post: PostRow) -> Optional[bool]:
    # The posts query has no status column, so published posts come out False.
    if post.ispublished == 0:
        return None
    return post.status == PUBLISH_STATUS


def output_path(
    post: PostRow,
    slug: str,
    date: datetime,
    extension: str,
    pages: Optional[PageHierarchy] = None,
) -> Path:
    """Relative destination for a post: page tree, drafts, or dated posts."""
    if post.type == PAGE_TYPE:
        page_dir = (pages or PageHierarchy()).path_for(post.id) or f"{slug}/"
        return Path(page_dir) / f"index.{extension}"
    if post.status == DRAFT_STATUS:
        return Path(DRAFTS_DIR) / f"{slug}.{DRAFT_EXTENSION}"
    return Path(POSTS_DIR) / f"{filename_stem(date, slug)}.{extension}"


def build_front_matter(
    post: PostRow,
    title: str,
    date: datetime,
    categories: List[str],
    comments: List[CommentRow],
    settings: MigrationSettings,
) -> FrontMatter:
    email = post.author_email or ""
    return FrontMatter(
        layout="post",
        status="post" if post.ispublished == 1 else "draft",
        published=published_flag(post),
        title=title,
        author={
            "display_name": post.author or "",
            "login": email,
            "email": email,
        },
        author_login=email,
        author_email=email,
        cloudscribe_id=post.id,
        cloudscribe_slug=post.slug or "",
        date=date,
        categories=categories if settings.categories else None,
        comments=comments if settings.comments else None,
    )


def process_post(
    post: PostRow,
    connection,
    settings: MigrationSettings,
    capabilities: Capabilities,
    *,
    out_dir: Path = Path("."),
    pages: Optional[PageHierarchy] = None,
    now: Callable[[], datetime] = datetime.now,
) -> Path:
    """Write one post to disk and return the path of the file written."""
    clean = capabilities.clean_entities

    title = post.title or ""
    if clean:
        title = clean_entities(title)

    slug = post.slug or sluggify(title)
    date = post.date or now()

    content = post.content or ""
    if clean:
        content = clean_entities(content)
    content = autop(content)

    categories: List[str] = []
    if settings.categories:
        categories = split_categories(post.categories)

    comments: List[CommentRow] = []
    if settings.comments and post.comment_count > 0:
        comments = fetch_comments(connection, post.id, clean=clean)

    front_matter = build_front_matter(post, title, date, categories, comments, settings)
    target = Path(out_dir) / output_path(post, slug, date, settings.extension, pages)
    write_text(target, render_document(front_matter.to_front_matter(), content))
    return target


def migrate_posts(
    posts: List[PostRow],
    connection,
    settings: MigrationSettings,
    capabilities: Capabilities,
    *,
    out_dir: Path = Path("."),
) -> MigrationReport:
    """Process every post; a failing post is reported and skipped."""
    report = MigrationReport()
    pages = PageHierarchy.from_posts(posts)
    for post in posts:
        try:
            path = process_post(
                post, connection, settings, capabilities, out_dir=out_dir, pages=pages
            )
        except Exception as exc:
            warn(f"[migrate] post {post.id} failed: {exc}")
            report.failed.append(post.id)
            continue
        info(f"[migrate] wrote {path}")
        report.written.append(path)
    return report


def run(
    settings: MigrationSettings,
    *,
    connection=None,
    out_dir: Path = Path("."),
) -> MigrationReport:
    """Connect, query every qualifying post and write it out.

    A connection may be supplied by the caller; one opened here is closed
    when the run ends.
    """
    capabilities = Capabilities.resolve(settings)
    out_dir = Path(out_dir)
    ensure_dir(out_dir / POSTS_DIR)

    owns_connection = connection is None
    if owns_connection:
        connection = connect(settings)
    try:
        posts = fetch_posts(connection, settings.blog_id)
        report = migrate_posts(posts, connection, settings, capabilities, out_dir=out_dir)
    finally:
        if owns_connection:
            connection.close()

    info(
        f"[migrate] wrote {len(report.written)} file(s); "
        f"{len(report.failed)} post(s) failed."
    )
    return report


__all__ = [
    "Capabilities",
    "MigrationReport",
    "build_front_matter",
    "filename_stem",
    "migrate_posts",
    "output_path",
    "process_post",
    "published_flag",
    "run",
    "split_categories",
]
