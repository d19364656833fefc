from __future__ import annotations

from collections.abc import Mapping
import copy
from functools import cached_property
import json
from json import dumps
from pathlib import Path
from typing import Iterable, KeysView, Sequence, TypedDict, Required

from ansispan._loop import loop_last


class SchemaDict(TypedDict, total=False):
    """Typing for schema data structure."""

    key: Required[str]
    title: Required[str]
    type: Required[str]
    help: str
    choices: list[str] | None
    default: object
    fields: list[SchemaDict]
    validate: list[dict]


type SettingsType = dict[str, object]


TYPE_MAP: Mapping[str, type] = {
    "string": str,
    "integer": int,
    "number": float,
    "boolean": bool,
    "choices": str,
    "text": str,
}


class SettingsError(Exception):
    """Base class for settings related errors."""


class InvalidKey(SettingsError):
    """The key is not in the schema."""


class InvalidValue(SettingsError):
    """The value was not of the expected type."""


def parse_key(key: str) -> Sequence[str]:
    return key.split(".")


class Schema:
    def __init__(self, schema: list[SchemaDict]) -> None:
        self.schema = schema

    def get_default(self, key: str) -> object | None:
        """Get a default for the given key.

        Args:
            key: Key in dotted notation

        Returns:
            Default, or `None`.
        """
        defaults = self.defaults

        schema_object = defaults
        for last, sub_key in loop_last(parse_key(key)):
            if last:
                return schema_object.get(sub_key, None)
            else:
                if isinstance(schema_object, dict):
                    schema_object = schema_object.get(sub_key, {})
                else:
                    return None
        return None

    @cached_property
    def defaults(self) -> dict[str, object]:
        settings: dict[str, object] = {}

        def set_defaults(schema: list[SchemaDict], settings: dict[str, object]) -> None:
            sub_settings: SettingsType
            for sub_schema in schema:
                key = sub_schema["key"]
                assert isinstance(sub_schema, dict)
                type = sub_schema["type"]

                if type == "object":
                    if fields := sub_schema.get("fields"):
                        sub_settings = settings[key] = {}
                        set_defaults(fields, sub_settings)

                else:
                    if (default := sub_schema.get("default")) is not None:
                        settings[key] = default

        set_defaults(self.schema, settings)
        return settings

    @cached_property
    def fields(self) -> Mapping[str, SchemaDict]:
        """Leaf fields of the schema, keyed by dotted key."""

        def get_fields(
            prefix: str, schema: list[SchemaDict]
        ) -> Iterable[tuple[str, SchemaDict]]:
            for sub_schema in schema:
                key = f"{prefix}{sub_schema['key']}"
                if sub_schema["type"] == "object":
                    yield from get_fields(f"{key}.", sub_schema.get("fields", []))
                else:
                    yield key, sub_schema

        return dict(get_fields("", self.schema))

    @cached_property
    def key_to_type(self) -> Mapping[str, type]:
        return {
            key: TYPE_MAP[field["type"]] for key, field in self.fields.items()
        }

    @property
    def keys(self) -> KeysView:
        return self.key_to_type.keys()

    def validate(self, key: str, value: object) -> None:
        """Check a value is valid for a key.

        Args:
            key: Key in dotted notation.
            value: Proposed value.

        Raises:
            InvalidKey: If the key is not in the schema.
            InvalidValue: If the value is the wrong type or out of range.
        """
        if (field := self.fields.get(key)) is None:
            raise InvalidKey(f"No setting called {key!r}")
        expect_type = self.key_to_type[key]
        if not isinstance(value, expect_type) or (
            expect_type is int and isinstance(value, bool)
        ):
            raise InvalidValue(
                f"Expected {expect_type.__name__} type for {key!r}; found {value!r}"
            )
        if (choices := field.get("choices")) and value not in choices:
            raise InvalidValue(
                f"{key!r} should be one of {', '.join(choices)}; found {value!r}"
            )
        for rule in field.get("validate") or []:
            if rule.get("type") == "minimum" and value < rule["value"]:  # type: ignore[operator]
                raise InvalidValue(
                    f"{key!r} should be at least {rule['value']}; found {value!r}"
                )

    def parse_value(self, key: str, text: str) -> object:
        """Convert text (from the command line) to the type of a key.

        Args:
            key: Key in dotted notation.
            text: Value as text.

        Raises:
            InvalidKey: If the key is not in the schema.
            InvalidValue: If the text can't be converted.

        Returns:
            The converted value.
        """
        if (field := self.fields.get(key)) is None:
            raise InvalidKey(f"No setting called {key!r}")
        match field["type"]:
            case "boolean":
                if text.lower() not in ("true", "false"):
                    raise InvalidValue(
                        f"Expected true or false for {key!r}; found {text!r}"
                    )
                return text.lower() == "true"
            case "integer" | "number":
                convert = self.key_to_type[key]
                try:
                    return convert(text)
                except ValueError:
                    raise InvalidValue(
                        f"Expected {convert.__name__} type for {key!r}; found {text!r}"
                    ) from None
            case _:
                return text

    def validate_settings(self, settings: SettingsType) -> None:
        """Validate all the leaf values in a settings structure.

        Args:
            settings: Settings dictionary.

        Raises:
            SettingsError: If any value is invalid.
        """

        def get_values(
            prefix: str, settings: Mapping[str, object]
        ) -> Iterable[tuple[str, object]]:
            for key, value in settings.items():
                if isinstance(value, dict):
                    yield from get_values(f"{prefix}{key}.", value)
                else:
                    yield f"{prefix}{key}", value

        for key, value in get_values("", settings):
            self.validate(key, value)


class Settings:
    """Stores schema backed settings."""

    def __init__(self, schema: Schema, settings: dict[str, object]) -> None:
        self._schema = schema
        self._settings = settings
        self._changed: bool = False

    @property
    def changed(self) -> bool:
        return self._changed

    @property
    def schema(self) -> Schema:
        return self._schema

    def up_to_date(self) -> None:
        """Set settings as up to date (clears changed flag)."""
        self._changed = False

    @property
    def json(self) -> str:
        """Settings in JSON form."""
        settings_json = dumps(self._settings, indent=4, separators=(", ", ": "))
        return settings_json

    def get[ExpectType](
        self,
        key: str,
        expect_type: type[ExpectType] = object,
        *,
        expand: bool = True,
    ) -> ExpectType:
        from os.path import expandvars

        sub_settings = self._settings

        for last, sub_key in loop_last(parse_key(key)):
            if last:
                if (value := sub_settings.get(sub_key)) is None:
                    default = self._schema.get_default(key)
                    if default is None:
                        default = expect_type()
                    if not isinstance(default, expect_type):
                        default = expect_type(default)
                    assert isinstance(default, expect_type)
                    return default

                if isinstance(value, str) and expand:
                    value = expandvars(value)
                if not isinstance(value, expect_type):
                    value = expect_type(value)
                if not isinstance(value, expect_type):
                    raise InvalidValue(
                        f"key {sub_key!r} is not of expected type {expect_type.__name__}"
                    )
                return value
            if not isinstance((sub_settings := sub_settings.get(sub_key, {})), dict):
                default = self._schema.get_default(key)
                if default is None:
                    default = expect_type()
                if not isinstance(default, expect_type):
                    default = expect_type(default)
                assert isinstance(default, expect_type)
                return default
        assert False, "Can't get here"

    def set(self, key: str, value: object) -> None:
        """Set a setting value.

        Args:
            key: Key in dot notation.
            value: New value.

        Raises:
            SettingsError: If the key or value is not valid.
        """
        self._schema.validate(key, value)
        current_value = self.get(key, expand=False)

        updated_settings = copy.deepcopy(self._settings)

        setting = updated_settings
        for last, sub_key in loop_last(parse_key(key)):
            if last:
                assert isinstance(setting, dict)
                setting[sub_key] = value
                if current_value != value:
                    self._changed = True
                    self._settings = updated_settings
            else:
                setting_node = setting.setdefault(sub_key, {})
                if isinstance(setting_node, dict):
                    setting = setting_node
                else:
                    assert isinstance(setting, dict)
                    setting[sub_key] = {}
                    setting = setting[sub_key]


def load_settings(path: Path, schema: Schema) -> Settings:
    """Load settings from a JSON file.

    A missing file is the same as an empty one.

    Args:
        path: Path to settings file.
        schema: Settings schema.

    Raises:
        SettingsError: If the file can't be read, is not valid JSON, or
            contains invalid values.

    Returns:
        Settings instance.
    """
    if not path.exists():
        return Settings(schema, {})
    try:
        settings = json.loads(path.read_text("utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as error:
        raise SettingsError(f"Unable to read settings from {str(path)!r}; {error}")
    if not isinstance(settings, dict):
        raise SettingsError(f"Settings in {str(path)!r} should be a JSON object")
    schema.validate_settings(settings)
    return Settings(schema, settings)


def save_settings(path: Path, settings: Settings) -> bool:
    """Write settings to a JSON file, if they have changed.

    Args:
        path: Path to settings file.
        settings: Settings instance.

    Raises:
        SettingsError: If the file could not be written.

    Returns:
        `True` if the file was written, `False` if there was nothing to save.
    """
    if not settings.changed:
        return False
    try:
        path.write_text(settings.json, "utf-8")
    except OSError as error:
        raise SettingsError(f"Unable to write settings to {str(path)!r}; {error}")
    settings.up_to_date()
    return True
