from datetime import datetime

import pymssql
import pytest

from csmigrate import db
from csmigrate.db import (
    BLOG_FILTER_SQL,
    COMMENTS_SQL,
    POSTS_SQL,
    MigrationConnectionError,
    fetch_comments,
    fetch_posts,
    posts_query,
)
from csmigrate.settings import MigrationSettings


def _comment(comment_id, content="hi"):
    return {
        "id": comment_id,
        "author": f"user{comment_id}",
        "author_email": None,
        "author_url": "http://example.org",
        "date": datetime(2020, 1, comment_id),
        "content": content,
    }


def test_posts_query_without_filter():
    sql, params = posts_query(None)
    assert sql == POSTS_SQL
    assert params is None


def test_blog_filter_is_bound_not_inlined():
    blog = "abc'; DROP TABLE cs_Post; --"
    sql, params = posts_query(blog)

    assert sql.endswith(BLOG_FILTER_SQL)
    assert blog not in sql
    assert params == (blog,)


def test_fetch_posts_passes_filter_to_cursor(fake_connection):
    conn = fake_connection(posts=[{"id": "p1", "title": "T", "ispublished": 1}])
    posts = fetch_posts(conn, "blog-guid")

    assert [post.id for post in posts] == ["p1"]
    assert posts[0].comment_count == 0
    assert conn.executed[0][1] == ("blog-guid",)


def test_comments_are_sorted_by_id(fake_connection):
    conn = fake_connection(comments={"p1": [_comment(5), _comment(1), _comment(3)]})
    comments = fetch_comments(conn, "p1")

    assert [comment.id for comment in comments] == [1, 3, 5]
    assert conn.executed == [(COMMENTS_SQL, ("p1",))]


def test_comment_fields_are_coerced(fake_connection):
    conn = fake_connection(comments={"p1": [_comment(2, content="caf\xc3\xa9".encode("latin-1"))]})
    (comment,) = fetch_comments(conn, "p1")

    assert comment.id == 2
    assert comment.author_email == ""
    assert comment.date == "2020-01-02 00:00:00"
    assert comment.content == "café"


def test_comment_content_is_cleaned_when_requested(fake_connection):
    conn = fake_connection(comments={"p1": [_comment(1, content="<i>café</i>")]})
    (comment,) = fetch_comments(conn, "p1", clean=True)

    assert comment.content == "<i>caf&eacute;</i>"


def test_no_approved_comments(fake_connection):
    assert fetch_comments(fake_connection(), "p1") == []


def test_connect_wraps_driver_errors(monkeypatch):
    def refuse(**kwargs):
        raise pymssql.OperationalError("login failed")

    monkeypatch.setattr(db.pymssql, "connect", refuse)

    with pytest.raises(MigrationConnectionError) as excinfo:
        db.connect(MigrationSettings(host="db.invalid"))
    assert isinstance(excinfo.value, ConnectionError)
    assert "db.invalid" in str(excinfo.value)


def test_connect_uses_azure_tds_version(monkeypatch):
    captured = {}

    def fake_connect(**kwargs):
        captured.update(kwargs)
        return object()

    monkeypatch.setattr(db.pymssql, "connect", fake_connect)

    db.connect(MigrationSettings(database="blog", azure=True))
    assert captured["tds_version"] == db.AZURE_TDS_VERSION
    assert captured["server"] == "localhost"
    assert captured["port"] == "1433"

    captured.clear()
    db.connect(MigrationSettings(azure=False))
    assert "tds_version" not in captured


def test_guid_comment_ids_take_leading_digits(fake_connection):
    rows = [
        {**_comment(1), "id": "3f2a1b6c-0d9e-4c4f-9b1a-aa00bb11cc22"},
        {**_comment(2), "id": "ab00cd11-0d9e-4c4f-9b1a-aa00bb11cc22"},
        {**_comment(3), "id": "12e4-5678"},
    ]
    conn = fake_connection(comments={"p-guid": rows})
    comments = fetch_comments(conn, "p-guid")

    assert [comment.id for comment in comments] == [0, 3, 12]
    assert [comment.author for comment in comments] == ["user2", "user1", "user3"]
