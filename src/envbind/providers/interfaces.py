from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, Tuple, runtime_checkable


@runtime_checkable
class Provider(Protocol):
    """
    Anything that can look up a variable by key.

    Implementations must not mutate state during a lookup; callers that back a provider with
    shared mutable state are responsible for their own synchronization.
    """

    def lookup_env(self, key: str) -> Tuple[str, bool]:
        """Return (value, True) when the key is present, ("", False) otherwise."""


@dataclass(frozen=True, slots=True)
class ProviderFunc:
    """Adapter that allows using a plain function as a Provider."""

    func: Callable[[str], Tuple[str, bool]]

    def lookup_env(self, key: str) -> Tuple[str, bool]:
        return self.func(key)
