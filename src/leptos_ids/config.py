"""
Configuration loading.

Settings are looked up, first match wins, in:

- an explicit file passed on the command line,
- `leptos-ids.toml` (top-level table),
- `Cargo.toml` (`[workspace.metadata.leptos-ids]`, then
  `[package.metadata.leptos-ids]`),
- `pyproject.toml` (`[tool.leptos-ids]`).

Example:

    [workspace.metadata.leptos-ids]
    exclude = ["target/**", "examples/**"]

    [workspace.metadata.leptos-ids.lints]
    tt_as_id_attribute_value = "deny"

    [workspace.metadata.leptos-ids.ids]
    into_attribute_value = false
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator

from .diagnostics import LintLevel
from .errors import ConfigError
from .lints.registry import LINTS_BY_NAME

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "leptos-ids.toml"
TABLE_NAME = "leptos-ids"


class IdsOptions(BaseModel):
    """Which conversions the registry generator emits for `Ids`."""

    model_config = ConfigDict(extra="forbid")

    into_str: bool = True
    into_attribute_value: bool = True


class Config(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lints: dict[str, LintLevel] = Field(default_factory=dict)
    exclude: list[str] = Field(default_factory=lambda: ["target/**"])
    ids: IdsOptions = Field(default_factory=IdsOptions)

    @field_validator("lints")
    @classmethod
    def _known_lints(cls, value: dict[str, LintLevel]) -> dict[str, LintLevel]:
        unknown = sorted(set(value) - set(LINTS_BY_NAME))
        if unknown:
            raise ValueError(f"unknown lint(s): {', '.join(unknown)}")
        return value


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: invalid TOML: {e}") from e
    except OSError as e:
        raise ConfigError(f"{path}: {e}") from e


def _dig(data: dict[str, Any], *keys: str) -> dict[str, Any] | None:
    for key in keys:
        value = data.get(key)
        if not isinstance(value, dict):
            return None
        data = value
    return data


def _table_from(path: Path) -> dict[str, Any] | None:
    """The leptos-ids table of a known config file, or None if absent."""
    data = _read_toml(path)
    if path.name == "Cargo.toml":
        return _dig(data, "workspace", "metadata", TABLE_NAME) or _dig(
            data, "package", "metadata", TABLE_NAME
        )
    if path.name == "pyproject.toml":
        return _dig(data, "tool", TABLE_NAME)
    return data


def parse_config(data: dict[str, Any], source: Path | str = "<config>") -> Config:
    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{source}: {e}") from e


def find_config_file(directory: Path) -> tuple[Path, dict[str, Any]] | None:
    for name in (CONFIG_FILE_NAME, "Cargo.toml", "pyproject.toml"):
        candidate = directory / name
        if not candidate.is_file():
            continue
        table = _table_from(candidate)
        if table is not None:
            return candidate, table
    return None


def load_config(
    path: Path | None = None, *, directory: Path | None = None
) -> Config:
    """
    Load configuration from `path`, or discover it in `directory` (default:
    the working directory). Returns defaults when nothing is found.

    Raises:
        ConfigError: unreadable file, invalid TOML or invalid values.
    """
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"{path}: config file not found")
        table = _table_from(path)
        logger.debug("Using config file %s", path)
        return parse_config(table or {}, path)

    found = find_config_file(directory or Path.cwd())
    if found is None:
        logger.debug("No config file found, using defaults")
        return Config()
    config_path, table = found
    logger.debug("Using config file %s", config_path)
    return parse_config(table, config_path)
