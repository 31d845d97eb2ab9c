"""Settings backend on top of Qt's ``QSettings``.

Requires PySide6 (``pip install qbs-config[qt]``). Without an explicit file
name the platform's native user-scope storage is used (registry on Windows,
plist on macOS, ``~/.config/<org>/<app>.conf`` elsewhere).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

from PySide6.QtCore import QSettings

from ..config import SettingsIdentity
from .backend import BackendFactory, SettingsBackend, Status

_STATUS = {
    QSettings.Status.NoError: "no_error",
    QSettings.Status.AccessError: "access_error",
    QSettings.Status.FormatError: "format_error",
}


class QSettingsBackend:
    def __init__(
        self,
        identity: SettingsIdentity,
        *,
        read_only: bool = False,
        filename: Optional[Path] = None,
    ):
        self.identity = identity
        self.read_only = read_only
        if filename is not None:
            self._qs: Optional[QSettings] = QSettings(str(filename), QSettings.Format.IniFormat)
        else:
            self._qs = QSettings(QSettings.Scope.UserScope, identity.organization, identity.application)

    def _settings(self) -> QSettings:
        if self._qs is None:
            raise RuntimeError(f"QSettings handle for {self.identity} is closed")
        return self._qs

    def set_fallbacks_enabled(self, enabled: bool) -> None:
        self._settings().setFallbacksEnabled(enabled)

    def value(self, key: str, default: Any = None) -> Any:
        qs = self._settings()
        if not qs.contains(key):
            return default
        return qs.value(key)

    def contains(self, key: str) -> bool:
        return self._settings().contains(key)

    def set_value(self, key: str, value: Any) -> None:
        self._settings().setValue(key, value)

    def remove(self, key: str) -> None:
        self._settings().remove(key)

    def all_keys(self) -> List[str]:
        return list(self._settings().allKeys())

    def begin_group(self, prefix: str) -> None:
        self._settings().beginGroup(prefix)

    def end_group(self) -> None:
        self._settings().endGroup()

    def sync(self) -> Status:
        qs = self._settings()
        if not self.read_only:
            qs.sync()
        return self.status()

    def status(self) -> Status:
        return _STATUS.get(self._settings().status(), "access_error")

    def file_name(self) -> str:
        return self._settings().fileName()

    def close(self) -> None:
        if self._qs is None:
            return
        if not self.read_only:
            self._qs.sync()
        self._qs = None


def qt_backend_factory(home: Optional[Path] = None) -> BackendFactory:
    """Factory for :class:`~qbs_config.settings.Settings`.

    With ``home`` set, each identity gets an INI file
    ``<home>/<organization>/<application>.ini`` instead of native storage.
    """

    def factory(identity: SettingsIdentity, read_only: bool) -> SettingsBackend:
        filename = None
        if home is not None:
            filename = Path(home) / identity.organization / f"{identity.application}.ini"
        return QSettingsBackend(identity, read_only=read_only, filename=filename)

    return factory
