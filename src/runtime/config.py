from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "cjsrt.toml"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

DEFAULT_NAMESPACE_MODULES = (
    "Accelerometer",
    "Analytics",
    "App",
    "API",
    "Calendar",
    "Codec",
    "Contacts",
    "Database",
    "Filesystem",
    "Geolocation",
    "Gesture",
    "Locale",
    "Media",
    "Network",
    "Platform",
    "Stream",
    "Utils",
    "UI",
    "WatchSession",
    "XML",
)


class NamespaceConfig(BaseModel):
    """The host's top-level API namespace published to every module."""

    model_config = ConfigDict(extra="forbid")

    aliases: list[str] = Field(
        default_factory=lambda: ["Ti", "Titanium"],
        description="Global names the namespace is published under",
    )
    modules: list[str] = Field(
        default_factory=lambda: list(DEFAULT_NAMESPACE_MODULES),
        description="Native capabilities reachable as namespace attributes",
    )


class RuntimeConfig(BaseModel):
    """Configuration for a module runtime and the cjsrt CLI."""

    model_config = ConfigDict(extra="forbid")

    resources_dir: str = Field(
        default="Resources",
        description="Directory (relative to the app root) holding the assets",
    )
    main: str = Field(
        default="app.js",
        description="Entry module, relative to the resources directory",
    )
    cwd: str = Field(
        default="/",
        description="Working directory used by the loader's path arithmetic",
    )
    log_level: LogLevel = Field(
        default="WARNING",
        description="Root log level used by the CLI",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for assets left out of the file index",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition when scanning assets "
            "(default: false for root-only)"
        ),
    )
    namespace: NamespaceConfig = Field(
        default_factory=NamespaceConfig,
        description="Top-level API namespace settings",
    )

    @field_validator("cwd")
    @classmethod
    def validate_cwd(cls, v: str) -> str:
        if not v.startswith("/"):
            msg = f"cwd must be an absolute POSIX path, got '{v}'"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when config file exists but cannot be parsed."""


def resolve_resources_dir(root: Path, resources_dir: str) -> Path:
    """Locate the resources directory named by the config.

    ``resources_dir`` is relative to the app root and has to name a directory
    strictly below it: the root itself holds ``cjsrt.toml`` and is never an
    asset tree.
    """
    candidate = Path(resources_dir)
    if not resources_dir or resources_dir.startswith("~") or candidate.is_absolute():
        msg = f"resources_dir must be a relative path below the app root, got '{resources_dir}'"
        raise ConfigError(msg)

    try:
        app_root = root.resolve()
        resolved = (app_root / candidate).resolve()
    except OSError as exc:
        msg = f"Failed to resolve resources_dir '{resources_dir}': {exc}"
        raise ConfigError(msg) from exc

    if resolved == app_root:
        msg = f"resources_dir '{resources_dir}' names the app root itself"
        raise ConfigError(msg)
    if app_root not in resolved.parents:
        msg = f"resources_dir '{resources_dir}' escapes the app root"
        raise ConfigError(msg)
    return resolved


def load_config(root: Path) -> RuntimeConfig:
    """Load configuration from cjsrt.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return RuntimeConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return RuntimeConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_NAMESPACE_MODULES",
    "ConfigError",
    "NamespaceConfig",
    "RuntimeConfig",
    "load_config",
    "resolve_resources_dir",
]
