"""Persistent settings for the qbs build tool.

Keys are presented in dotted notation (``profiles.qt.baseProfile``) and stored
through a key-value backend that uses slash-separated keys.

  * Default backend: one JSON file per identity under the settings home
  * Optional backend: Qt ``QSettings`` (see :mod:`.qt_backend`)
  * One-shot import of settings written under the legacy ``Nokia`` identity
"""

from .backend import JsonFileBackend, SettingsBackend, Status, json_backend_factory
from .keys import to_external, to_internal
from .store import Settings, status_error

__all__ = [
    "JsonFileBackend",
    "Settings",
    "SettingsBackend",
    "Status",
    "json_backend_factory",
    "status_error",
    "to_external",
    "to_internal",
]
