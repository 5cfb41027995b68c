from __future__ import annotations

import os
from typing import Mapping, Sequence, Tuple

from envbind.providers.interfaces import Provider, ProviderFunc


def _lookup_os_environ(key: str) -> Tuple[str, bool]:
    value = os.environ.get(key)
    if value is None:
        return "", False
    return value, True


OS: Provider = ProviderFunc(_lookup_os_environ)


class MapProvider:
    """In-memory provider, mostly useful in tests."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values = dict(values or {})

    def lookup_env(self, key: str) -> Tuple[str, bool]:
        if key not in self._values:
            return "", False
        return self._values[key], True

    def __repr__(self) -> str:
        return f"MapProvider(keys={sorted(self._values)})"


class MultiProvider:
    """
    Union of several providers.

    Every provider is consulted on each lookup; when the same key occurs more than once the
    value from the later provider takes precedence.
    """

    def __init__(self, *providers: Provider) -> None:
        self._providers: Sequence[Provider] = tuple(providers)

    @property
    def providers(self) -> Sequence[Provider]:
        return self._providers

    def lookup_env(self, key: str) -> Tuple[str, bool]:
        value = ""
        found = False
        for provider in self._providers:
            v, ok = provider.lookup_env(key)
            if ok:
                value = v
                found = True
        return value, found
