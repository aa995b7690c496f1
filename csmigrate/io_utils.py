"""Utility helpers for front matter output and console reporting."""

from __future__ import annotations

import sys
from typing import Any, Mapping

import yaml

FRONT_MATTER_SEPARATOR = "---"


def dump_front_matter(data: Mapping[str, Any]) -> str:
    """Serialize front matter as an explicit YAML document, keys in insertion order."""
    return yaml.safe_dump(
        dict(data),
        explicit_start=True,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def render_document(front_matter: Mapping[str, Any], body: str) -> str:
    """Front matter, a separator line, then the body; every part newline-terminated."""
    header = dump_front_matter(front_matter)
    parts = [header.rstrip("\n"), FRONT_MATTER_SEPARATOR, body.rstrip("\n")]
    return "\n".join(parts) + "\n"


def info(msg: str) -> None:
    print(msg)


def warn(msg: str) -> None:
    print(msg, file=sys.stderr)


__all__ = [
    "FRONT_MATTER_SEPARATOR",
    "dump_front_matter",
    "info",
    "render_document",
    "warn",
]
