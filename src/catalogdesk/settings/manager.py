"""Persistent user settings for CatalogDesk (API endpoint, sync, UI)."""

from __future__ import annotations

import json
import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import ValidationError as SchemaValidationError
from PySide6.QtCore import QObject, Signal

from ..errors import SettingsLoadError, SettingsValidationError
from .schema import DEFAULT_SETTINGS, merge_with_defaults

_APP_DIR = "CatalogDesk"
_FILE_NAME = "settings.json"


def default_settings_path() -> Path:
    """Per-user settings file location (APPDATA, Application Support or XDG)."""

    if os.name == "nt":
        root = Path(os.environ.get("APPDATA") or Path.home() / "AppData" / "Roaming")
    elif sys.platform == "darwin":
        root = Path.home() / "Library" / "Application Support"
    else:
        root = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return root / _APP_DIR / _FILE_NAME


def _split_key(key: str) -> list[str]:
    parts = [part for part in key.split(".") if part]
    if not parts:
        raise KeyError(key)
    return parts


class SettingsManager(QObject):
    """Schema-checked settings store.

    Keys are dotted paths (``"api.base_url"``).  Every successful ``set`` emits
    ``settingsChanged(key, value)`` so that long-lived services such as the
    message catalog can follow the change.  Loading never writes the file;
    it is only created by the first persisted ``set``.
    """

    settingsChanged = Signal(str, object)

    def __init__(self, path: Path | None = None) -> None:
        super().__init__()
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)

    @property
    def path(self) -> Path:
        if self._path is None:
            self._path = default_settings_path()
        return self._path

    def load(self) -> None:
        """Read the settings file; a missing file leaves the defaults in place."""

        path = self.path
        stored: dict[str, Any] | None = None
        if path.exists():
            try:
                stored = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                raise SettingsLoadError(f"{path}: {exc}") from exc
            if not isinstance(stored, dict):
                raise SettingsLoadError(f"{path}: top-level value must be an object")
        self._data = self._validated(stored)

    def get(self, key: str, default: Any | None = None) -> Any:
        node: Any = self._data
        for part in _split_key(key):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any, *, persist: bool = True) -> None:
        """Assign *value* at *key*; invalid values leave the settings untouched."""

        *parents, leaf = _split_key(key)
        candidate = deepcopy(self._data)
        node = candidate
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = node[part] = {}
            node = child
        node[leaf] = value
        self._data = self._validated(candidate)
        if persist:
            self._write()
        self.settingsChanged.emit(key, value)

    def snapshot(self) -> dict[str, Any]:
        return deepcopy(self._data)

    @staticmethod
    def _validated(data: dict[str, Any] | None) -> dict[str, Any]:
        try:
            return merge_with_defaults(data)
        except SchemaValidationError as exc:
            raise SettingsValidationError(exc.message) from exc

    def _write(self) -> None:
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self._data, indent=2, ensure_ascii=False), encoding="utf-8")


__all__ = ["SettingsManager", "default_settings_path"]
