"""TOML configuration: editor preferences, stylesheet discovery and logging."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from quickcss.errors import ConfigError
from quickcss.tokens import EditorPrefs

CONFIG_NAME = "quickcss.toml"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved settings."""

    prefs: EditorPrefs
    stylesheet_extension: str
    exclude: tuple[str, ...]
    log_level: str


DEFAULT_SETTINGS = Settings(
    prefs=EditorPrefs(),
    stylesheet_extension="css",
    exclude=("node_modules", ".git"),
    log_level="WARNING",
)


def load_config(config_path: Path | None, project_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else project_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_settings(config: dict[str, Any], path: Path | None = None) -> Settings:
    """Merge a loaded config dict over the defaults.

    Raises ConfigError when a present key has the wrong type.
    """
    d = DEFAULT_SETTINGS

    editor = _table(config, "editor", path)
    use_tabs = editor.get("use_tabs", d.prefs.use_tabs)
    if not isinstance(use_tabs, bool):
        raise ConfigError("expected a boolean", "editor.use_tabs", path)
    space_units = editor.get("space_units", d.prefs.space_units)
    if isinstance(space_units, bool) or not isinstance(space_units, int) or space_units < 1:
        raise ConfigError("expected a positive integer", "editor.space_units", path)

    sheets = _table(config, "stylesheets", path)
    extension = sheets.get("extension", d.stylesheet_extension)
    if not isinstance(extension, str) or not extension:
        raise ConfigError("expected a non-empty string", "stylesheets.extension", path)
    exclude = sheets.get("exclude", list(d.exclude))
    if not isinstance(exclude, list) or not all(isinstance(e, str) for e in exclude):
        raise ConfigError("expected a list of strings", "stylesheets.exclude", path)

    log = _table(config, "logging", path)
    level = log.get("level", d.log_level)
    if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
        raise ConfigError(f"expected one of {', '.join(_LOG_LEVELS)}", "logging.level", path)

    return Settings(
        prefs=EditorPrefs(use_tabs=use_tabs, space_units=space_units),
        stylesheet_extension=extension.lstrip("."),
        exclude=tuple(exclude),
        log_level=level.upper(),
    )


def _table(config: dict[str, Any], name: str, path: Path | None) -> dict[str, Any]:
    value = config.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError("expected a table", name, path)
    return value


def configure_logging(level: str) -> None:
    """Send quickcss diagnostics to stderr at the given level."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )
