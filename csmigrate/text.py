"""Text normalisation helpers: slugs and HTML entity cleanup."""

from __future__ import annotations

import re
from typing import Union

from unidecode import unidecode

NON_ALNUM_RE = re.compile(r"[^0-9A-Za-z]+")

# Entities that would break markup if left encoded, mapped back to their literal form.
STRUCTURAL_ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&#47;", "/"),
)


def to_text(value: Union[str, bytes, None]) -> str:
    """Coerce a column value to ``str``, decoding bytes as UTF-8."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def sluggify(title: str) -> str:
    """Transliterate to ASCII and collapse everything but letters and digits into hyphens."""
    ascii_title = unidecode(to_text(title)).lower()
    return NON_ALNUM_RE.sub(" ", ascii_title).strip().replace(" ", "-")


def encode_named_entities(text: Union[str, bytes]) -> str:
    """Replace every character that has a named HTML entity with that entity.

    The basic markup characters (``& < > " '``) are encoded as well.
    """
    from bs4.dammit import EntitySubstitution

    encoded = EntitySubstitution.substitute_html(to_text(text))
    return encoded.replace('"', "&quot;").replace("'", "&apos;")


def clean_entities(text: Union[str, bytes]) -> str:
    """Entity-encode non-ASCII text while leaving HTML markup intact."""
    cleaned = encode_named_entities(text)
    for entity, literal in STRUCTURAL_ENTITIES:
        cleaned = cleaned.replace(entity, literal)
    return cleaned


__all__ = [
    "STRUCTURAL_ENTITIES",
    "clean_entities",
    "encode_named_entities",
    "sluggify",
    "to_text",
]
