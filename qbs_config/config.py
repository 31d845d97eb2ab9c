from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


SETTINGS_DIR_ENV = "QBS_SETTINGS_DIR"


@dataclass(frozen=True)
class SettingsIdentity:
    """Product identity a settings handle is scoped to."""

    organization: str
    application: str


CURRENT_IDENTITY = SettingsIdentity("QtProject", "qbs")
LEGACY_ORGANIZATION = "Nokia"
LEGACY_IDENTITY = SettingsIdentity(LEGACY_ORGANIZATION, CURRENT_IDENTITY.application)


def legacy_identity_for(identity: SettingsIdentity) -> SettingsIdentity:
    return SettingsIdentity(LEGACY_ORGANIZATION, identity.application)


def settings_home(override: Optional[Path] = None) -> Path:
    """Directory under which file-based settings live.

    Resolution order: explicit override, ``$QBS_SETTINGS_DIR``,
    ``$XDG_CONFIG_HOME``, ``~/.config``.
    """

    if override is not None:
        return Path(override).expanduser()
    env = os.environ.get(SETTINGS_DIR_ENV)
    if env:
        return Path(env).expanduser()
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser()
    return Path.home() / ".config"
