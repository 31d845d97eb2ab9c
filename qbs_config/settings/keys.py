"""Translation between user-facing and stored key notation.

Users see dotted keys (``profiles.qt.baseProfile``); the backend stores the
same segments joined by slashes (``profiles/qt/baseProfile``). The mapping is a
plain character substitution, so it only round-trips when no segment contains
either separator. Keys that would not round-trip are rejected instead of being
silently rewritten.
"""

from __future__ import annotations

from ..errors import InvalidKeyError

EXTERNAL_SEPARATOR = "."
INTERNAL_SEPARATOR = "/"


def _check(key: str, separator: str, foreign: str) -> None:
    if not isinstance(key, str):
        raise InvalidKeyError(f"settings key must be a string, got {type(key).__name__}")
    if foreign in key:
        raise InvalidKeyError(f"settings key {key!r} must not contain {foreign!r}")
    if any(not seg for seg in key.split(separator)):
        raise InvalidKeyError(f"settings key {key!r} has an empty segment")


def to_internal(external_key: str) -> str:
    _check(external_key, EXTERNAL_SEPARATOR, INTERNAL_SEPARATOR)
    return external_key.replace(EXTERNAL_SEPARATOR, INTERNAL_SEPARATOR)


def to_external(internal_key: str) -> str:
    _check(internal_key, INTERNAL_SEPARATOR, EXTERNAL_SEPARATOR)
    return internal_key.replace(INTERNAL_SEPARATOR, EXTERNAL_SEPARATOR)


def is_valid_internal(internal_key: str) -> bool:
    try:
        _check(internal_key, INTERNAL_SEPARATOR, EXTERNAL_SEPARATOR)
    except InvalidKeyError:
        return False
    return True
