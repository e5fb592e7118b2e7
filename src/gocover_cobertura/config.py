"""Configuration parsing from ``.gocover-cobertura.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from gocover_cobertura.classify import ClassificationMode
from gocover_cobertura.errors import ConfigError
from gocover_cobertura.ignore import Ignore

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".gocover-cobertura.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            # tags may be given as a YAML list
            result[key] = [_resolve_env_vars(v) if isinstance(v, str) else v for v in value]
        else:
            result[key] = value
    return result


@dataclass(frozen=True)
class IgnoreConfig:
    """Which profiled files are left out of the report."""

    dirs: str = ""
    """Regexp matched against each directory component of a file path."""

    files: str = ""
    """Regexp matched against the module-relative file path."""

    generated_files: bool = False
    """Skip files carrying the ``// Code generated ... DO NOT EDIT.`` marker."""


@dataclass(frozen=True)
class ConverterConfig:
    """Complete converter configuration."""

    by_files: bool = False
    """Group methods into one class per file instead of per receiver type."""

    tags: str = ""
    """Comma-separated build tags passed to ``go list``."""

    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)

    raw: dict[str, Any] = field(default_factory=dict, compare=False)
    """Raw parsed YAML, for debugging."""

    @property
    def mode(self) -> ClassificationMode:
        return ClassificationMode.BY_FILE if self.by_files else ClassificationMode.BY_RECEIVER

    def build_ignore(self) -> Ignore:
        """Compile the ignore patterns.

        Raises:
            ConfigError: If a pattern is not a valid regular expression.
        """
        return Ignore.from_patterns(
            dirs=self.ignore.dirs or None,
            files=self.ignore.files or None,
            generated_files=self.ignore.generated_files,
        )

    def with_overrides(self, **overrides: Any) -> ConverterConfig:
        """Return a copy with non-``None`` *overrides* applied.

        Keys ``ignore_dirs``, ``ignore_files`` and ``ignore_generated_files``
        update the nested ignore section.
        """
        ignore_changes = {
            key.removeprefix("ignore_"): value
            for key, value in overrides.items()
            if key.startswith("ignore_") and value is not None
        }
        top_changes = {
            key: value
            for key, value in overrides.items()
            if not key.startswith("ignore_") and value is not None
        }
        return replace(self, ignore=replace(self.ignore, **ignore_changes), **top_changes)


def _parse_ignore_config(raw: Any) -> IgnoreConfig:
    if not isinstance(raw, dict):
        return IgnoreConfig()
    return IgnoreConfig(
        dirs=str(raw.get("dirs") or ""),
        files=str(raw.get("files") or ""),
        generated_files=bool(raw.get("generated_files", False)),
    )


def load_config(path: str | Path | None = None, root: str | Path = ".") -> ConverterConfig:
    """Load the converter configuration.

    Args:
        path: Explicit config file. When ``None``, ``.gocover-cobertura.yml``
            under *root* is used if it exists.
        root: Directory searched for the default config file.

    Raises:
        ConfigError: If an explicit *path* is missing or the YAML is invalid.
    """
    if path is None:
        config_path = Path(root).resolve() / CONFIG_FILE_NAME
        if not config_path.is_file():
            return ConverterConfig()
    else:
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(f"config file not found: {config_path}")

    try:
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {config_path}: {e}") from e

    raw: dict[str, Any] = _resolve_dict(parsed) if isinstance(parsed, dict) else {}
    logger.debug("Loaded configuration from %s", config_path)

    tags = raw.get("tags", "")
    if isinstance(tags, list):
        tags = ",".join(str(tag) for tag in tags)

    return ConverterConfig(
        by_files=bool(raw.get("by_files", False)),
        tags=str(tags or ""),
        ignore=_parse_ignore_config(raw.get("ignore", {})),
        raw=raw,
    )


def validate_config(config: ConverterConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    try:
        config.build_ignore()
    except ConfigError as e:
        errors.append(str(e))

    if config.tags and any(not tag.strip() for tag in config.tags.split(",")):
        errors.append(f"tags: empty build tag in {config.tags!r}")

    ignore_raw = config.raw.get("ignore")
    if ignore_raw is not None and not isinstance(ignore_raw, dict):
        errors.append("ignore: must be a mapping")

    return errors
