"""TOML settings for the chat client, validated one section at a time."""

from __future__ import annotations

import logging
from pathlib import Path
import tomllib
from typing import Annotated, Any, Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError, field_validator

from .exceptions import ConfigValidationError

LOGGER = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "editchat"
CONFIG_PATH = CONFIG_DIR / "config.toml"

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
OptionalText = Annotated[str, StringConstraints(strip_whitespace=True)]
LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class _Section(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class OllamaSection(_Section):
    """Where completions come from."""

    host: RequiredText = "http://localhost:11434"
    model: RequiredText = "llama3.2"
    timeout: int = Field(default=120, ge=1, le=3600)

    @field_validator("host")
    @classmethod
    def _host_is_http_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme.lower() not in {"http", "https"} or not parsed.hostname:
            raise ValueError("host must be an http(s) URL with a hostname.")
        return value


class SessionSection(_Section):
    """How a new session starts."""

    welcome_message: OptionalText = ""


class UISection(_Section):
    """Banner and transcript appearance."""

    title: RequiredText = "editchat"
    show_timestamps: bool = True
    clear_screen: bool = True
    user_label: RequiredText = "You"
    assistant_label: RequiredText = "Assistant"
    system_label: RequiredText = "System"


class LoggingSection(_Section):
    """Log level, format, and optional file output."""

    level: LogLevel = "INFO"
    structured: bool = True
    log_to_file: bool = False
    log_file_path: RequiredText = "~/.local/state/editchat/app.log"

    @field_validator("level", mode="before")
    @classmethod
    def _uppercase_level(cls, value: Any) -> Any:
        return value.strip().upper() if isinstance(value, str) else value


SECTIONS: dict[str, type[_Section]] = {
    "ollama": OllamaSection,
    "session": SessionSection,
    "ui": UISection,
    "logging": LoggingSection,
}

DEFAULT_CONFIG: dict[str, dict[str, Any]] = {
    name: section().model_dump() for name, section in SECTIONS.items()
}


def ensure_config_dir(config_dir: Path | None = None) -> Path:
    """Create the config directory if possible and return it."""
    directory = config_dir or CONFIG_DIR
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create config directory %s: %s", directory, exc)
    return directory


def _read_tables(path: Path, strict: bool) -> dict[str, Any]:
    """Parse the TOML file at ``path``; an absent or broken file is empty unless strict."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        if strict:
            raise ConfigValidationError(f"Config file {path} does not exist.") from exc
        return {}
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
        if strict:
            raise ConfigValidationError(f"Cannot read config file {path}: {exc}") from exc
        LOGGER.warning("Ignoring unreadable config at %s: %s", path, exc)
        return {}


def _validate_section(name: str, table: Any, strict: bool) -> dict[str, Any]:
    section = SECTIONS[name]
    if isinstance(table, dict):
        try:
            return section.model_validate(table).model_dump()
        except ValidationError as exc:
            problem = str(exc)
    else:
        problem = f"expected a table, got {type(table).__name__}"
    if strict:
        raise ConfigValidationError(f"Invalid [{name}] section: {problem}")
    LOGGER.warning("Invalid [%s] section, using its defaults: %s", name, problem)
    return section().model_dump()


def load_config(
    config_path: Path | None = None, *, strict: bool = False
) -> dict[str, dict[str, Any]]:
    """Return validated settings as plain dicts keyed by section name.

    Each section is validated on its own, so a mistake in ``[ui]`` does not
    discard a valid ``[ollama]`` table. With ``strict`` (an explicitly chosen
    file) a missing file, a parse error, or an invalid section raises
    :class:`ConfigValidationError` instead of falling back to defaults.
    """
    path = config_path or CONFIG_PATH
    tables = _read_tables(path, strict)
    for unknown in sorted(set(tables) - set(SECTIONS)):
        LOGGER.warning("Ignoring unknown config section [%s] in %s", unknown, path)
    return {
        name: _validate_section(name, tables.get(name, {}), strict)
        for name in SECTIONS
    }
