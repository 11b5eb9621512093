"""
Process-wide settings, optionally loaded from TOML via `tomlkit`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, cast

import tomlkit

from .exceptions import ConfigurationError
from .typedefs import EmbedModeType

__all__ = [
    "Settings",
    "get_settings",
    "configure",
    "load_settings",
]

TOOL_TABLE = "shapecraft"
"""
Name of the table under `[tool]` holding settings in a `pyproject.toml`.
"""

EMBED_MODES = ("ids", "objects")


@dataclass(kw_only=True, frozen=True)
class Settings:
    """
    Defaults applied to every serializer unless its configuration overrides them.
    """

    default_embed: EmbedModeType = "objects"
    """
    Embed mode of associations whose serializer doesn't declare one.
    """

    irregular_plurals: Mapping[str, str] = field(default_factory=dict)
    """
    Singular to plural words used when deriving side-load bucket keys, e.g.
    `{"person": "people"}`.
    """

    uncountable: frozenset[str] = frozenset()
    """
    Words whose plural is the word itself, e.g. `"equipment"`.
    """

    def __post_init__(self):
        if self.default_embed not in EMBED_MODES:
            raise ConfigurationError(
                f"Invalid default_embed '{self.default_embed}', must be one of "
                f"{EMBED_MODES}"
            )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any], /) -> Settings:
        """
        Create settings from a mapping, e.g. a parsed TOML table.
        """
        known = {f.name for f in fields(cls)}
        if extra := [k for k in values if k not in known]:
            raise ConfigurationError(f"Unknown settings: {', '.join(extra)}")

        kwargs: dict[str, Any] = {}
        if "default_embed" in values:
            kwargs["default_embed"] = str(values["default_embed"])
        if "irregular_plurals" in values:
            kwargs["irregular_plurals"] = {
                str(k): str(v) for k, v in values["irregular_plurals"].items()
            }
        if "uncountable" in values:
            kwargs["uncountable"] = frozenset(str(w) for w in values["uncountable"])
        return cls(**kwargs)


_settings = Settings()


def get_settings() -> Settings:
    """
    Get settings currently in effect.
    """
    return _settings


def configure(settings: Settings | None = None, /, **overrides: Any) -> Settings:
    """
    Install settings, either passed directly or as overrides of the current ones.

    Intended to be called during setup, before serializing.
    """
    global _settings
    base = settings or _settings
    if overrides:
        values = {f.name: getattr(base, f.name) for f in fields(base)}
        values.update(overrides)
        base = Settings(**values)
    _settings = base
    return _settings


def load_settings(path: Path | str, /, *, install: bool = True) -> Settings:
    """
    Load settings from a TOML file.

    Reads the `[tool.shapecraft]` table if present (as in `pyproject.toml`),
    otherwise the top-level table of the file.
    """
    document = tomlkit.parse(Path(path).read_text())
    values = cast(dict[str, Any], document.unwrap())

    tool = values.get("tool")
    if isinstance(tool, dict) and TOOL_TABLE in tool:
        values = tool[TOOL_TABLE]
    elif "tool" in values:
        # pyproject without our table: nothing to configure
        values = {}

    settings = Settings.from_mapping(values)
    if install:
        configure(settings)
    return settings
