"""Migration settings and their YAML loader."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class MigrationSettings(BaseModel):
    """Connection parameters and behaviour toggles for one migration run."""

    database: str = Field("", description="Database name.")
    user: str = Field("", description="Database user name.")
    password: str = Field("", description="Database user's password.")
    host: str = Field("localhost", description="SQL Server host name.")
    port: str = Field("1433", description="SQL Server port number.")
    blog_id: Optional[str] = Field(
        None, description="GUID of the blog to export; all blogs when unset."
    )
    azure: bool = Field(True, description="Whether the database is hosted in Azure.")
    clean_entities: bool = Field(
        True,
        description=(
            "Convert non-ASCII characters in titles, content and comments to "
            "named HTML entities."
        ),
    )
    comments: bool = Field(
        True, description="Migrate approved comments into the front matter."
    )
    categories: bool = Field(
        True, description="Save the post's categories in the front matter."
    )
    extension: str = Field("html", description="Extension for generated posts and pages.")
    login_timeout: int = Field(60, description="Seconds to wait for the login handshake.")

    model_config = ConfigDict(extra="forbid")

    @field_validator("port", mode="before")
    @classmethod
    def _port_as_text(cls, value: Any) -> str:
        return str(value)

    @field_validator("blog_id", mode="before")
    @classmethod
    def _empty_blog_is_unset(cls, value: Any) -> Optional[str]:
        if value is None or str(value).strip() == "":
            return None
        return str(value)

    @field_validator("extension")
    @classmethod
    def _strip_dot(cls, value: str) -> str:
        value = value.lstrip(".")
        if not value:
            raise ValueError("extension must not be empty")
        return value


def load_settings_file(path: Path) -> Dict[str, Any]:
    """Read a YAML mapping of settings; an empty file yields no overrides."""
    if not path.exists():
        raise SystemExit(f"Config file not found: {path}")
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise SystemExit(f"{path} must contain a mapping of settings.")
    return data


def build_settings(
    overrides: Dict[str, Any], config_path: Optional[Path] = None
) -> MigrationSettings:
    """Merge defaults, an optional YAML file and explicit overrides, in that order."""
    data: Dict[str, Any] = {}
    if config_path is not None:
        data.update(load_settings_file(config_path))
    data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return MigrationSettings.model_validate(data)
    except ValidationError as exc:
        source = config_path or "command line"
        raise SystemExit(f"Invalid settings from {source}: {exc}") from exc


__all__ = ["MigrationSettings", "build_settings", "load_settings_file"]
