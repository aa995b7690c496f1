from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from csmigrate.db import COMMENTS_SQL

POST_COLUMNS = [
    "id",
    "title",
    "slug",
    "date",
    "ispublished",
    "categories",
    "content",
    "comment_count",
    "author",
    "author_email",
]
COMMENT_COLUMNS = ["id", "author", "author_email", "author_url", "date", "content"]


class FakeCursor:
    def __init__(self, connection: "FakeConnection") -> None:
        self.connection = connection
        self.description = None
        self._rows: List[tuple] = []
        self.closed = False

    def execute(self, sql: str, params: Optional[tuple] = None) -> None:
        self.connection.executed.append((sql, params))
        if sql == COMMENTS_SQL:
            columns = COMMENT_COLUMNS
            rows = self.connection.comments.get(params[0], [])
        else:
            columns = self.connection.post_columns
            rows = self.connection.posts
        self.description = [(name, None, None, None, None, None, None) for name in columns]
        self._rows = [tuple(row.get(name) for name in columns) for row in rows]

    def fetchall(self) -> List[tuple]:
        return list(self._rows)

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    """Stands in for a pymssql connection, serving canned rows."""

    def __init__(
        self,
        posts: Optional[List[Dict[str, Any]]] = None,
        comments: Optional[Dict[Any, List[Dict[str, Any]]]] = None,
        post_columns: Optional[List[str]] = None,
    ) -> None:
        self.posts = posts or []
        self.comments = comments or {}
        self.post_columns = post_columns or POST_COLUMNS
        self.executed: List[tuple] = []
        self.closed = False

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_connection():
    return FakeConnection
