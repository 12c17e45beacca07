"""Schema helpers for the application settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    DEFAULT_BASE_URL,
    DEFAULT_LANGUAGE,
    DEFAULT_TIMEOUT_SEC,
    SEARCH_DEBOUNCE_MS,
    VIEW_MODES,
)

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "catalogdesk/settings.schema.json",
    "type": "object",
    "required": ["schema", "api", "sync", "ui"],
    "properties": {
        "schema": {"const": "catalogdesk/settings@1"},
        "api": {
            "type": "object",
            "required": ["base_url"],
            "properties": {
                "base_url": {"type": "string", "minLength": 1},
                "timeout_sec": {"type": "number", "exclusiveMinimum": 0},
                "token": {"type": ["string", "null"]},
            },
            "additionalProperties": True,
        },
        "sync": {
            "type": "object",
            "properties": {
                "debounce_ms": {"type": "integer", "minimum": 0, "maximum": 5000},
            },
            "additionalProperties": True,
        },
        "ui": {
            "type": "object",
            "properties": {
                "view_mode": {"type": "string", "enum": list(VIEW_MODES)},
                "language": {"type": "string"},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "catalogdesk/settings@1",
    "api": {
        "base_url": DEFAULT_BASE_URL,
        "timeout_sec": DEFAULT_TIMEOUT_SEC,
        "token": None,
    },
    "sync": {
        "debounce_ms": SEARCH_DEBOUNCE_MS,
    },
    "ui": {
        "view_mode": "grid",
        "language": DEFAULT_LANGUAGE,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)

_SECTIONS = ("api", "sync", "ui")


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in _SECTIONS and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
