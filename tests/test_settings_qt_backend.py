from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("PySide6")

from qbs_config.config import LEGACY_IDENTITY
from qbs_config.settings import Settings
from qbs_config.settings.qt_backend import QSettingsBackend, qt_backend_factory


def test_qt_backend_roundtrip(tmp_path: Path) -> None:
    with Settings(backend_factory=qt_backend_factory(tmp_path)) as settings:
        settings.set_value("profiles.qt.baseProfile", "gcc")
        settings.set_value("profile", "qt")

        assert settings.value("profiles.qt.baseProfile") == "gcc"
        assert settings.all_keys() == ["profile", "profiles.qt.baseProfile"]
        assert settings.all_keys_with_prefix("profiles") == ["profiles.qt.baseProfile"]
        assert settings.file_name.endswith("qbs.ini")

        settings.remove("profiles")
        assert settings.all_keys() == ["profile"]


def test_qt_backend_migration(tmp_path: Path) -> None:
    legacy = QSettingsBackend(
        LEGACY_IDENTITY, filename=tmp_path / "Nokia" / "qbs.ini"
    )
    legacy.set_value("x/y", "1")
    legacy.close()

    with Settings(backend_factory=qt_backend_factory(tmp_path)) as settings:
        assert settings.value("x.y") == "1"
