"""Tests for schema backed settings."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from ansispan.settings import (
    InvalidKey,
    InvalidValue,
    Schema,
    Settings,
    SettingsError,
    load_settings,
    save_settings,
)
from ansispan.settings_schema import SCHEMA

pytestmark = pytest.mark.unit


@pytest.fixture
def schema() -> Schema:
    return Schema(SCHEMA)


def test_defaults(schema: Schema) -> None:
    assert schema.defaults == {
        "render": {
            "table": "tailwind",
            "container-class": "flex justify-center",
            "pre-class": "",
            "separator": " ",
        },
        "cache": {"size": 256},
    }


def test_keys(schema: Schema) -> None:
    assert set(schema.keys) == {
        "render.table",
        "render.container-class",
        "render.pre-class",
        "render.separator",
        "cache.size",
    }


def test_get_default(schema: Schema) -> None:
    settings = Settings(schema, {})
    assert settings.get("render.table", str) == "tailwind"
    assert settings.get("cache.size", int) == 256
    assert settings.get("render.pre-class", str) == ""


def test_get_value(schema: Schema) -> None:
    settings = Settings(schema, {"render": {"table": "textual"}})
    assert settings.get("render.table", str) == "textual"
    assert settings.get("render.separator", str) == " "


def test_get_expands_variables(schema: Schema, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRE_CLASS", "text-sm")
    settings = Settings(schema, {"render": {"pre-class": "$PRE_CLASS"}})
    assert settings.get("render.pre-class", str) == "text-sm"
    assert settings.get("render.pre-class", str, expand=False) == "$PRE_CLASS"


def test_set(schema: Schema) -> None:
    settings = Settings(schema, {})
    assert not settings.changed
    settings.set("cache.size", 10)
    assert settings.changed
    assert settings.get("cache.size", int) == 10
    assert json.loads(settings.json) == {"cache": {"size": 10}}
    settings.up_to_date()
    assert not settings.changed


def test_set_same_value_unchanged(schema: Schema) -> None:
    settings = Settings(schema, {})
    settings.set("render.table", "tailwind")
    assert not settings.changed


@pytest.mark.parametrize(
    "key, value, error",
    [
        ("render.colour", "x", InvalidKey),
        ("render.table", "bootstrap", InvalidValue),
        ("render.table", 1, InvalidValue),
        ("cache.size", "10", InvalidValue),
        ("cache.size", True, InvalidValue),
        ("cache.size", 0, InvalidValue),
    ],
)
def test_set_invalid(schema: Schema, key: str, value: object, error: type) -> None:
    settings = Settings(schema, {})
    with pytest.raises(error):
        settings.set(key, value)
    assert not settings.changed


@pytest.mark.parametrize(
    "key, text, expected",
    [
        ("cache.size", "64", 64),
        ("render.table", "textual", "textual"),
        ("render.pre-class", "text-xs", "text-xs"),
    ],
)
def test_parse_value(schema: Schema, key: str, text: str, expected: object) -> None:
    assert schema.parse_value(key, text) == expected


@pytest.mark.parametrize(
    "key, text, error",
    [("cache.size", "lots", InvalidValue), ("render.colour", "red", InvalidKey)],
)
def test_parse_value_invalid(schema: Schema, key: str, text: str, error: type) -> None:
    with pytest.raises(error):
        schema.parse_value(key, text)


class TestLoadSettings:
    def test_missing_file(self, schema: Schema, settings_path: Path) -> None:
        settings = load_settings(settings_path, schema)
        assert settings.get("render.table", str) == "tailwind"

    def test_load(self, schema: Schema, settings_path: Path) -> None:
        settings_path.write_text(json.dumps({"cache": {"size": 8}}), "utf-8")
        assert load_settings(settings_path, schema).get("cache.size", int) == 8

    def test_invalid_json(self, schema: Schema, settings_path: Path) -> None:
        settings_path.write_text("{not json", "utf-8")
        with pytest.raises(SettingsError):
            load_settings(settings_path, schema)

    def test_not_an_object(self, schema: Schema, settings_path: Path) -> None:
        settings_path.write_text("[]", "utf-8")
        with pytest.raises(SettingsError):
            load_settings(settings_path, schema)

    def test_invalid_value(self, schema: Schema, settings_path: Path) -> None:
        settings_path.write_text(json.dumps({"render": {"table": "nope"}}), "utf-8")
        with pytest.raises(InvalidValue):
            load_settings(settings_path, schema)

    def test_directory(self, schema: Schema, tmp_path: Path) -> None:
        with pytest.raises(SettingsError, match="Unable to read settings"):
            load_settings(tmp_path, schema)

    def test_not_utf8(self, schema: Schema, settings_path: Path) -> None:
        settings_path.write_bytes(b'{"render": {"pre-class": "\xff"}}')
        with pytest.raises(SettingsError, match="Unable to read settings"):
            load_settings(settings_path, schema)


class TestSaveSettings:
    def test_unchanged_not_written(self, schema: Schema, settings_path: Path) -> None:
        assert not save_settings(settings_path, Settings(schema, {}))
        assert not settings_path.exists()

    def test_save(self, schema: Schema, settings_path: Path) -> None:
        settings = Settings(schema, {})
        settings.set("render.table", "textual")
        assert save_settings(settings_path, settings)
        assert not settings.changed
        assert load_settings(settings_path, schema).get("render.table", str) == "textual"

    def test_write_error(self, schema: Schema, tmp_path: Path) -> None:
        settings = Settings(schema, {})
        settings.set("cache.size", 4)
        with pytest.raises(SettingsError, match="Unable to write settings"):
            save_settings(tmp_path, settings)
        assert settings.changed
