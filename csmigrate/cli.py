"""Command-line interface for csmigrate."""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from .db import MigrationConnectionError
from .migrate import run
from .settings import build_settings

TOGGLES = {
    "azure": "the database is hosted in Azure",
    "clean_entities": "convert non-ASCII characters to named HTML entities",
    "comments": "migrate approved comments into the front matter",
    "categories": "save post categories in the front matter",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csmigrate",
        description="Export CloudScribe blog posts from SQL Server into Jekyll content files.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with settings; command-line flags take precedence.",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("."),
        help="Site root that receives _posts/, _drafts/ and page directories.",
    )
    parser.add_argument("--database", help="Database name (default: '').")
    parser.add_argument("--user", help="Database user name (default: '').")
    parser.add_argument("--password", help="Database user's password (default: '').")
    parser.add_argument("--host", help="Database host name (default: 'localhost').")
    parser.add_argument("--port", help="Database port number (default: '1433').")
    parser.add_argument(
        "--blog-id",
        dest="blog_id",
        help="GUID of the blog to export (default: all blogs).",
    )
    parser.add_argument("--extension", help="Post extension (default: 'html').")
    parser.add_argument(
        "--login-timeout",
        dest="login_timeout",
        type=int,
        help="Seconds to wait for the database login (default: 60).",
    )
    for name, help_text in TOGGLES.items():
        parser.add_argument(
            f"--{name.replace('_', '-')}",
            dest=name,
            action=argparse.BooleanOptionalAction,
            default=None,
            help=f"Whether {help_text} (default: true).",
        )
    return parser


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    skip = {"config", "out"}
    return {key: value for key, value in vars(args).items() if key not in skip}


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    settings = build_settings(_overrides(args), args.config)

    try:
        report = run(settings, out_dir=args.out)
    except MigrationConnectionError as exc:
        print(f"[db] {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not report.ok:
        failed = ", ".join(str(post_id) for post_id in report.failed)
        print(f"[migrate] failed posts: {failed}", file=sys.stderr)
        raise SystemExit(1)


__all__ = ["build_parser", "main"]


if __name__ == "__main__":
    main()
