"""Wrap bare lines of legacy post HTML in paragraph tags."""

from __future__ import annotations

import re
from typing import List

BLOCK_TAGS = (
    "address", "article", "aside", "blockquote", "caption", "col", "colgroup",
    "dd", "div", "dl", "dt", "fieldset", "figcaption", "figure", "footer",
    "form", "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "iframe", "li",
    "map", "math", "nav", "object", "ol", "p", "pre", "section", "select",
    "style", "script", "table", "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
)

BLOCK_START_RE = re.compile(r"^\s*</?(?:%s)\b" % "|".join(BLOCK_TAGS), re.IGNORECASE)
BLOCK_END_RE = re.compile(r"</(?:%s)>\s*$" % "|".join(BLOCK_TAGS), re.IGNORECASE)
PRE_RE = re.compile(r"<pre\b.*?</pre>", re.IGNORECASE | re.DOTALL)
BLANK_LINES_RE = re.compile(r"\n\s*\n")
BLOCK_OPEN_RE = re.compile(r"(<(?:%s)\b[^>]*>)" % "|".join(BLOCK_TAGS), re.IGNORECASE)
BLOCK_CLOSE_RE = re.compile(r"(</(?:%s)>)" % "|".join(BLOCK_TAGS), re.IGNORECASE)
PLACEHOLDER = "<!--csmigrate-pre-%d-->"


def _protect_pre(text: str, stash: List[str]) -> str:
    def _swap(match: re.Match) -> str:
        stash.append(match.group(0))
        return "\n\n" + PLACEHOLDER % (len(stash) - 1) + "\n\n"

    return PRE_RE.sub(_swap, text)


def _restore_pre(text: str, stash: List[str]) -> str:
    for index, block in enumerate(stash):
        text = text.replace(PLACEHOLDER % index, block)
    return text


def _is_block(chunk: str) -> bool:
    return bool(BLOCK_START_RE.match(chunk) or BLOCK_END_RE.search(chunk))


def autop(text: str) -> str:
    """Turn blank-line separated chunks into ``<p>`` elements.

    Block-level tags are first moved onto chunks of their own and left alone,
    single newlines inside a paragraph become ``<br />`` and ``<pre>`` contents
    are never touched.
    """
    if not text or not text.strip():
        return ""

    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    stash: List[str] = []
    normalized = _protect_pre(normalized, stash)
    normalized = BLOCK_OPEN_RE.sub(r"\n\n\1", normalized)
    normalized = BLOCK_CLOSE_RE.sub(r"\1\n\n", normalized)

    paragraphs: List[str] = []
    for chunk in BLANK_LINES_RE.split(normalized.strip("\n")):
        chunk = chunk.strip()
        if not chunk:
            continue
        if chunk.startswith("<!--csmigrate-pre-") or _is_block(chunk):
            paragraphs.append(chunk)
            continue
        lines = [line.strip() for line in chunk.split("\n")]
        paragraphs.append("<p>" + "<br />\n".join(lines) + "</p>")

    return _restore_pre("\n".join(paragraphs), stash)


__all__ = ["BLOCK_TAGS", "autop"]
