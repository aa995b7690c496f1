"""Filesystem helpers for writing the migrated site tree."""

from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


def ensure_dir(path: PathLike) -> Path:
    """Create ``path`` and any missing parents; an existing directory is fine."""

    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def write_text(path: PathLike, content: str, *, encoding: str = "utf-8") -> Path:
    """Write one output document, creating its directories first."""

    file_path = Path(path)
    ensure_dir(file_path.parent)
    file_path.write_text(content, encoding=encoding)
    return file_path


__all__ = ["PathLike", "ensure_dir", "write_text"]
