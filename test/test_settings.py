"""
Test process-wide settings and loading them from TOML.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

from pytest import fixture, raises

from shapecraft import (
    ConfigurationError,
    Serializer,
    SerializerConfig,
    Settings,
    configure,
    get_settings,
    has_many,
    load_settings,
)
from shapecraft.inflection import pluralize


@fixture(autouse=True)
def restore_settings() -> Generator[None, None, None]:
    settings = get_settings()
    yield
    configure(settings)


class ItemSerializer(Serializer):
    serializer_config = SerializerConfig(attributes=("id",))


class OrderSerializer(Serializer):
    serializer_config = SerializerConfig(
        associations=(has_many("items", serializer=ItemSerializer),)
    )


def test_defaults():
    """
    Test default settings.
    """
    settings = Settings()
    assert settings.default_embed == "objects"
    assert settings.irregular_plurals == {}
    assert settings.uncountable == frozenset()


def test_configure():
    """
    Test default embed mode changed via settings.
    """
    order = {"items": [{"id": 1}, {"id": 2}]}
    assert OrderSerializer(order).to_document() == {
        "order": {"items": [{"id": 1}, {"id": 2}]}
    }

    configure(default_embed="ids")
    assert get_settings().default_embed == "ids"
    assert OrderSerializer(order).to_document() == {"order": {"items": [1, 2]}}


def test_invalid_settings():
    """
    Test errors for invalid settings.
    """
    with raises(ConfigurationError):
        Settings(default_embed="inline")  # type: ignore

    with raises(ConfigurationError, match="Unknown settings: embed"):
        Settings.from_mapping({"embed": "ids"})


def test_load_pyproject(tmp_path: Path):
    """
    Test settings loaded from a pyproject table.
    """
    path = tmp_path / "pyproject.toml"
    path.write_text(
        """\
[project]
name = "app"

[tool.shapecraft]
default_embed = "ids"
irregular_plurals = { cactus = "cacti" }
uncountable = ["sheep"]
"""
    )

    settings = load_settings(path)

    assert settings == Settings(
        default_embed="ids",
        irregular_plurals={"cactus": "cacti"},
        uncountable=frozenset(("sheep",)),
    )
    assert get_settings() is settings
    assert pluralize("cactus") == "cacti"
    assert pluralize("sheep") == "sheep"


def test_load_standalone(tmp_path: Path):
    """
    Test settings loaded from a standalone file without installing.
    """
    path = tmp_path / "shapecraft.toml"
    path.write_text('default_embed = "ids"\n')

    settings = load_settings(path, install=False)

    assert settings.default_embed == "ids"
    assert get_settings().default_embed == "objects"


def test_load_pyproject_without_table(tmp_path: Path):
    """
    Test pyproject without settings table yielding defaults.
    """
    path = tmp_path / "pyproject.toml"
    path.write_text('[tool.black]\nline-length = 88\n')

    assert load_settings(path) == Settings()
