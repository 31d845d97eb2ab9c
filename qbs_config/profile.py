from __future__ import annotations

from typing import Any, List, Optional, Set

from .errors import InvalidKeyError, ProfileError
from .settings import Settings

BASE_PROFILE_KEY = "baseProfile"


class Profile:
    """View on the ``profiles.<name>.*`` section of a :class:`Settings` store.

    Lookups that miss fall through to the profile named by ``baseProfile``,
    recursively.
    """

    def __init__(self, name: str, settings: Settings):
        if not name or "." in name or "/" in name:
            raise InvalidKeyError(f"invalid profile name {name!r}")
        self.name = name
        self.settings = settings

    def __repr__(self) -> str:
        return f"Profile({self.name!r})"

    @property
    def prefix(self) -> str:
        return f"profiles.{self.name}"

    def _full_key(self, key: str) -> str:
        return f"{self.prefix}.{key}"

    def exists(self) -> bool:
        return bool(self.settings.all_keys_with_prefix(self.prefix))

    def base_profile_name(self) -> str:
        base = self.settings.value(self._full_key(BASE_PROFILE_KEY), "")
        return "" if base is None else str(base)

    def _chain(self) -> List["Profile"]:
        chain: List[Profile] = []
        seen: Set[str] = set()
        profile: Optional[Profile] = self
        while profile is not None:
            if profile.name in seen:
                names = " -> ".join([p.name for p in chain] + [profile.name])
                raise ProfileError(f"Circular profile inheritance: {names}")
            seen.add(profile.name)
            chain.append(profile)
            base = profile.base_profile_name()
            profile = Profile(base, self.settings) if base else None
        return chain

    def value(self, key: str, default: Any = None) -> Any:
        for profile in self._chain():
            full = profile._full_key(key)
            if self.settings.contains(full):
                return self.settings.value(full)
        return default

    def set_value(self, key: str, value: Any) -> None:
        self.settings.set_value(self._full_key(key), value)

    def remove(self, key: str) -> None:
        self.settings.remove(self._full_key(key))

    def remove_profile(self) -> None:
        self.settings.remove(self.prefix)

    def all_keys(self) -> List[str]:
        """Keys relative to the profile, including inherited ones."""
        keys: Set[str] = set()
        for i, profile in enumerate(self._chain()):
            head = profile.prefix + "."
            for key in self.settings.all_keys_with_prefix(profile.prefix):
                rel = key[len(head):]
                if i > 0 and rel == BASE_PROFILE_KEY:
                    continue
                keys.add(rel)
        return sorted(keys)
