from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Optional

from ..config import CURRENT_IDENTITY, SettingsIdentity, legacy_identity_for
from ..errors import SettingsAccessError, SettingsError, SettingsFormatError
from .backend import BackendFactory, SettingsBackend, Status, json_backend_factory
from .keys import INTERNAL_SEPARATOR, is_valid_internal, to_external, to_internal

logger = logging.getLogger(__name__)


def status_error(status: Status, file_name: str) -> Optional[SettingsError]:
    """Map a backend status to the error it stands for (``None`` if OK)."""
    if status == "access_error":
        return SettingsAccessError(file_name)
    if status == "format_error":
        return SettingsFormatError(file_name)
    return None


class Settings:
    """Persistent, hierarchical user settings addressed by dotted keys.

    Each instance owns one backend handle for its whole lifetime; use it as a
    context manager (or call :meth:`close`) to release it. Reads go straight
    to the backend, there is no cache. Mutations are flushed immediately and
    raise :class:`SettingsAccessError` / :class:`SettingsFormatError` when the
    backing file cannot be written.

    If the store is empty on construction, everything found under the legacy
    organization (``Nokia``) is imported once. Failures while importing are
    logged and otherwise ignored.
    """

    def __init__(
        self,
        identity: SettingsIdentity = CURRENT_IDENTITY,
        *,
        home: Optional[Path] = None,
        backend_factory: Optional[BackendFactory] = None,
    ):
        self.identity = identity
        self._factory = backend_factory or json_backend_factory(home)
        backend = self._open(identity, read_only=False)
        try:
            # Import only into a store that loaded cleanly and holds nothing.
            needs_import = backend.status() == "no_error" and not backend.all_keys()
        except BaseException:
            backend.close()
            raise
        self._backend: Optional[SettingsBackend] = backend
        if needs_import:
            self._migrate_legacy_settings()

    def _open(self, identity: SettingsIdentity, read_only: bool) -> SettingsBackend:
        backend = self._factory(identity, read_only)
        try:
            # Only this handle's own scope counts, no organization-wide merging.
            backend.set_fallbacks_enabled(False)
        except BaseException:
            backend.close()
            raise
        return backend

    def _migrate_legacy_settings(self) -> None:
        legacy_identity = legacy_identity_for(self.identity)
        if legacy_identity == self.identity:
            return
        try:
            legacy = self._open(legacy_identity, read_only=True)
        except Exception:
            logger.warning("Could not open legacy settings for %s", legacy_identity, exc_info=True)
            return

        try:
            keys = legacy.all_keys()
            if not keys:
                return
            backend = self._handle()
            for key in keys:
                backend.set_value(key, legacy.value(key))
            status = backend.sync()
            if status != "no_error":
                logger.warning(
                    "Importing legacy settings from %s into %s failed (%s)",
                    legacy.file_name(),
                    backend.file_name(),
                    status,
                )
            else:
                logger.info("Imported %d keys from legacy settings %s", len(keys), legacy.file_name())
        except Exception:
            logger.warning("Importing legacy settings from %s failed", legacy_identity, exc_info=True)
        finally:
            legacy.close()

    def _handle(self) -> SettingsBackend:
        if self._backend is None:
            raise RuntimeError("settings store is closed")
        return self._backend

    # Lifecycle ----------------------------------------------------------
    def close(self) -> None:
        if self._backend is None:
            return
        backend, self._backend = self._backend, None
        backend.close()

    def __enter__(self) -> "Settings":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    @property
    def file_name(self) -> str:
        return self._handle().file_name()

    # Reads --------------------------------------------------------------
    def value(self, key: str, default: Any = None) -> Any:
        return self._handle().value(to_internal(key), default)

    def contains(self, key: str) -> bool:
        return self._handle().contains(to_internal(key))

    def all_keys(self) -> List[str]:
        return self._fixup_keys(self._handle().all_keys())

    def all_keys_with_prefix(self, group: str) -> List[str]:
        """Like :meth:`all_keys`, restricted to keys below ``group``.

        The returned keys still carry the ``group`` prefix.
        """
        if not group:
            return self.all_keys()
        internal_group = to_internal(group)
        backend = self._handle()
        backend.begin_group(internal_group)
        try:
            keys = backend.all_keys()
        finally:
            backend.end_group()
        return self._fixup_keys(internal_group + INTERNAL_SEPARATOR + k for k in keys)

    def default_profile(self) -> str:
        profile = self.value("profile", "")
        return "" if profile is None else str(profile)

    def profiles(self) -> List[str]:
        names = {key.split(".")[1] for key in self.all_keys_with_prefix("profiles")}
        return sorted(names)

    # Writes -------------------------------------------------------------
    def set_value(self, key: str, value: Any) -> None:
        internal_key = to_internal(key)
        self._handle().set_value(internal_key, value)
        logger.debug("Set %s", key)
        self._check_status()

    def remove(self, key: str) -> None:
        internal_key = to_internal(key)
        self._handle().remove(internal_key)
        logger.debug("Removed %s", key)
        self._check_status()

    # Helpers ------------------------------------------------------------
    @staticmethod
    def _fixup_keys(internal_keys: Iterable[str]) -> List[str]:
        out: List[str] = []
        for key in sorted(set(internal_keys)):
            if not is_valid_internal(key):
                logger.warning("Skipping malformed settings key %r", key)
                continue
            out.append(to_external(key))
        return out

    def _check_status(self) -> None:
        backend = self._handle()
        error = status_error(backend.sync(), backend.file_name())
        if error is not None:
            raise error
