"""SQL Server access for the CloudScribe schema.

The connection is opened once per run and reused for every query. Queries
bind their parameters through the driver (``%s`` placeholders, the
``pymssql`` paramstyle); values are never interpolated into SQL text.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

import pymssql

from .io_utils import info
from .models import CommentRow, PostRow
from .settings import MigrationSettings
from .text import clean_entities as clean_entities_text
from .text import to_text

AZURE_TDS_VERSION = "7.3"

POSTS_SQL = """
SELECT
  posts.Id          AS [id],
  posts.Title       AS [title],
  posts.Slug        AS [slug],
  posts.PubDate     AS [date],
  posts.IsPublished AS [ispublished],
  posts.Categories  AS [categories],
  posts.Content     AS [content],
  (SELECT COUNT(*) FROM cs_PostComment
    WHERE PostEntityId = posts.Id AND IsApproved = 1) AS [comment_count],
  users.DisplayName AS [author],
  users.Email       AS [author_email]
FROM cs_Post AS posts
  LEFT JOIN cs_User AS users
    ON posts.Author = users.Email
""".strip()

BLOG_FILTER_SQL = "WHERE posts.BlogId = %s"

COMMENTS_SQL = """
SELECT
  id      AS [id],
  author  AS [author],
  email   AS [author_email],
  website AS [author_url],
  pubdate AS [date],
  content AS [content]
FROM cs_PostComment
WHERE
  PostEntityId = %s AND
  IsApproved = 1
""".strip()


class MigrationConnectionError(ConnectionError):
    """The database could not be reached or rejected the credentials."""


def connect(settings: MigrationSettings):
    """Open the single connection used for the whole run."""
    kwargs: Dict[str, Any] = {
        "server": settings.host,
        "port": settings.port,
        "user": settings.user,
        "password": settings.password,
        "database": settings.database,
        "login_timeout": settings.login_timeout,
        "charset": "UTF-8",
    }
    if settings.azure:
        kwargs["tds_version"] = AZURE_TDS_VERSION

    info(f"[db] connecting to {settings.host}:{settings.port}/{settings.database}")
    try:
        return pymssql.connect(**kwargs)
    except pymssql.Error as exc:
        raise MigrationConnectionError(
            f"Could not connect to {settings.host}:{settings.port}: {exc}"
        ) from exc


def _rows_as_dicts(cursor) -> List[Dict[str, Any]]:
    columns = [column[0] for column in cursor.description or ()]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]


def _execute(connection, sql: str, params: Optional[Tuple[Any, ...]] = None) -> List[Dict[str, Any]]:
    cursor = connection.cursor()
    try:
        if params is None:
            cursor.execute(sql)
        else:
            cursor.execute(sql, params)
        return _rows_as_dicts(cursor)
    finally:
        cursor.close()


def posts_query(blog_id: Optional[str]) -> Tuple[str, Optional[Tuple[Any, ...]]]:
    """Return the posts SQL and its parameters, filtered by blog when given."""
    if blog_id:
        return f"{POSTS_SQL}\n{BLOG_FILTER_SQL}", (blog_id,)
    return POSTS_SQL, None


def fetch_posts(connection, blog_id: Optional[str] = None) -> List[PostRow]:
    """All qualifying posts in the order the server returns them."""
    sql, params = posts_query(blog_id)
    return [PostRow.model_validate(row) for row in _execute(connection, sql, params)]


def fetch_comments(connection, post_id: Any, *, clean: bool = False) -> List[CommentRow]:
    """Approved comments for one post, ascending by comment id."""
    comments: List[CommentRow] = []
    for row in _execute(connection, COMMENTS_SQL, (post_id,)):
        content = to_text(row.get("content"))
        if clean:
            content = clean_entities_text(content)
        comments.append(CommentRow.model_validate({**row, "content": content}))
    return sort_comments(comments)


def sort_comments(comments: Iterable[CommentRow]) -> List[CommentRow]:
    return sorted(comments, key=lambda comment: comment.id)


__all__ = [
    "BLOG_FILTER_SQL",
    "COMMENTS_SQL",
    "POSTS_SQL",
    "MigrationConnectionError",
    "connect",
    "fetch_comments",
    "fetch_posts",
    "posts_query",
    "sort_comments",
]
