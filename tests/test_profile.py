from __future__ import annotations

from pathlib import Path

import pytest

from qbs_config.errors import InvalidKeyError, ProfileError
from qbs_config.profile import Profile
from qbs_config.settings import Settings


@pytest.fixture
def settings(tmp_path: Path):
    with Settings(home=tmp_path) as s:
        s.set_value("profiles.gcc.cpp.compilerName", "g++")
        s.set_value("profiles.gcc.cpp.toolchainInstallPath", "/usr/bin")
        s.set_value("profiles.qt.baseProfile", "gcc")
        s.set_value("profiles.qt.Qt.core.binPath", "/opt/qt/bin")
        s.set_value("profiles.qt.cpp.compilerName", "clang++")
        yield s


def test_profile_value_inherits_from_base(settings: Settings) -> None:
    qt = Profile("qt", settings)
    assert qt.base_profile_name() == "gcc"
    assert qt.value("cpp.compilerName") == "clang++"
    assert qt.value("cpp.toolchainInstallPath") == "/usr/bin"
    assert qt.value("cpp.missing", "none") == "none"


def test_profile_all_keys_merges_inherited(settings: Settings) -> None:
    assert Profile("qt", settings).all_keys() == [
        "Qt.core.binPath",
        "baseProfile",
        "cpp.compilerName",
        "cpp.toolchainInstallPath",
    ]
    assert Profile("gcc", settings).all_keys() == ["cpp.compilerName", "cpp.toolchainInstallPath"]


def test_profile_circular_inheritance(settings: Settings) -> None:
    settings.set_value("profiles.gcc.baseProfile", "qt")

    with pytest.raises(ProfileError) as excinfo:
        Profile("qt", settings).value("cpp.other")
    assert "qt -> gcc -> qt" in str(excinfo.value)


def test_profile_set_and_remove(settings: Settings) -> None:
    mingw = Profile("mingw", settings)
    assert not mingw.exists()

    mingw.set_value("qbs.targetOS", ["windows"])
    assert mingw.exists()
    assert settings.value("profiles.mingw.qbs.targetOS") == ["windows"]

    mingw.remove("qbs.targetOS")
    assert not mingw.exists()


def test_profile_remove_profile(settings: Settings) -> None:
    Profile("qt", settings).remove_profile()
    assert settings.profiles() == ["gcc"]


@pytest.mark.parametrize("name", ["", "a.b", "a/b"])
def test_profile_rejects_bad_names(settings: Settings, name: str) -> None:
    with pytest.raises(InvalidKeyError):
        Profile(name, settings)
