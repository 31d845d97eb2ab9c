from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional, Protocol

from ..config import SettingsIdentity, settings_home

logger = logging.getLogger(__name__)


Status = Literal["no_error", "access_error", "format_error"]

SCHEMA_VERSION = 1


class SettingsBackend(Protocol):
    """Key-value persistence consumed by :class:`~qbs_config.settings.Settings`.

    Keys are slash-separated and relative to the group entered last with
    :meth:`begin_group`.
    """

    def set_fallbacks_enabled(self, enabled: bool) -> None: ...

    def value(self, key: str, default: Any = None) -> Any: ...

    def contains(self, key: str) -> bool: ...

    def set_value(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...

    def all_keys(self) -> List[str]: ...

    def begin_group(self, prefix: str) -> None: ...

    def end_group(self) -> None: ...

    def sync(self) -> Status: ...

    def status(self) -> Status: ...

    def file_name(self) -> str: ...

    def close(self) -> None: ...


BackendFactory = Callable[[SettingsIdentity, bool], SettingsBackend]


class JsonFileBackend:
    """Settings persisted in one JSON file per identity.

    Layout: ``<home>/<organization>/<application>.json`` containing
    ``{"schema_version": 1, "values": {"a/b": ...}}``. Values must be JSON
    serializable. Writes are atomic (temp file + ``os.replace``).

    A file that exists but could not be loaded (unreadable: ``access_error``,
    unparsable: ``format_error``) is never overwritten, so the user's data
    survives until the problem is fixed by hand.

    There is a single scope per identity, so the fallback switch is accepted
    but has nothing to fall back to.
    """

    def __init__(self, identity: SettingsIdentity, home: Optional[Path] = None, *, read_only: bool = False):
        self.identity = identity
        self.home = settings_home(home)
        self.read_only = read_only
        self._fallbacks_enabled = True
        self._groups: List[str] = []
        self._status: Status = "no_error"
        self._unloaded = False
        self._dirty = False
        self._closed = False
        self._values = self._load()
        logger.debug("Opened settings file %s (status=%s)", self.path(), self._status)

    def path(self) -> Path:
        return self.home / self.identity.organization / f"{self.identity.application}.json"

    # Loading --------------------------------------------------------------
    @staticmethod
    def _parse(raw: str) -> Dict[str, Any]:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("settings root is not an object")
        values = data.get("values", {})
        if not isinstance(values, dict):
            raise ValueError("settings 'values' is not an object")
        return dict(values)

    def _load(self) -> Dict[str, Any]:
        path = self.path()
        if not path.exists():
            return {}
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError:
            self._status = "access_error"
            self._unloaded = True
            return {}
        try:
            return self._parse(raw)
        except ValueError:
            self._status = "format_error"
            self._unloaded = True
            return {}

    # Key access -----------------------------------------------------------
    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"settings backend for {self.path()} is closed")

    def _prefix(self) -> str:
        return "/".join(self._groups)

    def _full_key(self, key: str) -> str:
        prefix = self._prefix()
        if not prefix:
            return key
        return f"{prefix}/{key}" if key else prefix

    def set_fallbacks_enabled(self, enabled: bool) -> None:
        self._fallbacks_enabled = bool(enabled)

    def value(self, key: str, default: Any = None) -> Any:
        self._check_open()
        full = self._full_key(key)
        if full in self._values:
            return copy.deepcopy(self._values[full])
        return default

    def contains(self, key: str) -> bool:
        self._check_open()
        return self._full_key(key) in self._values

    def set_value(self, key: str, value: Any) -> None:
        self._check_open()
        # Fail before mutating anything if the value cannot be stored.
        json.dumps(value)
        self._values[self._full_key(key)] = copy.deepcopy(value)
        self._dirty = True

    def remove(self, key: str) -> None:
        """Remove ``key`` and every key nested below it."""
        self._check_open()
        full = self._full_key(key)
        if not full:
            doomed = list(self._values)
        else:
            doomed = [k for k in self._values if k == full or k.startswith(full + "/")]
        for k in doomed:
            del self._values[k]
        if doomed:
            self._dirty = True

    def all_keys(self) -> List[str]:
        self._check_open()
        prefix = self._prefix()
        if not prefix:
            return list(self._values)
        head = prefix + "/"
        return [k[len(head):] for k in self._values if k.startswith(head)]

    def begin_group(self, prefix: str) -> None:
        self._check_open()
        self._groups.append(prefix.strip("/"))

    def end_group(self) -> None:
        if not self._groups:
            raise RuntimeError("end_group() called without matching begin_group()")
        self._groups.pop()

    # Persistence ----------------------------------------------------------
    def sync(self) -> Status:
        self._check_open()
        if self.read_only or self._unloaded or not self._dirty:
            return self._status

        path = self.path()
        tmp = path.with_suffix(path.suffix + ".tmp")
        payload = {"schema_version": SCHEMA_VERSION, "values": self._values}
        txt = json.dumps(payload, indent=2, sort_keys=True)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(txt, encoding="utf-8")
            os.replace(tmp, path)
        except OSError:
            logger.debug("Writing %s failed", path, exc_info=True)
            self._status = "access_error"
            return self._status

        self._status = "no_error"
        self._dirty = False
        return self._status

    def status(self) -> Status:
        return self._status

    def file_name(self) -> str:
        return str(self.path())

    def close(self) -> None:
        if self._closed:
            return
        if self._dirty and not self.read_only:
            status = self.sync()
            if status != "no_error":
                logger.warning("Unsaved settings changes for %s were lost (%s)", self.path(), status)
        self._closed = True
        self._values = {}
        logger.debug("Closed settings file %s", self.path())


def json_backend_factory(home: Optional[Path] = None) -> BackendFactory:
    def factory(identity: SettingsIdentity, read_only: bool) -> SettingsBackend:
        return JsonFileBackend(identity, home, read_only=read_only)

    return factory
