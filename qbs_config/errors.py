"""Error types raised by the settings store."""

from __future__ import annotations


class SettingsError(Exception):
    """Base class for all settings failures."""


class SettingsAccessError(SettingsError):
    """The backing file could not be read or written."""

    def __init__(self, file_name: str):
        super().__init__(f"{file_name} is not accessible.")
        self.file_name = file_name


class SettingsFormatError(SettingsError):
    """The backing file exists but its content is corrupt."""

    def __init__(self, file_name: str):
        super().__init__(f"Format error in {file_name}.")
        self.file_name = file_name


class InvalidKeyError(SettingsError, ValueError):
    pass


class ProfileError(SettingsError):
    pass


# Short aliases matching the names used in user-facing docs.
AccessError = SettingsAccessError
FormatError = SettingsFormatError
