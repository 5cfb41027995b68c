from __future__ import annotations

import typing
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TextUnmarshaler(Protocol):
    """
    Capability for user-defined types that parse themselves from text.

    A type that defines `unmarshal_text` is always bound as a single value: nested records that
    implement it are not walked, and sequence types that implement it are not split.
    """

    def unmarshal_text(self, text: str) -> None:
        ...


def has_unmarshaler(tp: Any) -> bool:
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        return False
    return callable(getattr(tp, "unmarshal_text", None))


@dataclass(frozen=True, slots=True)
class FieldRef:
    """Handle to one attribute of a destination record, borrowed for the duration of a load."""

    owner: Any
    name: str
    type: Any

    def get(self) -> Any:
        return getattr(self.owner, self.name, None)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.name, value)


@dataclass(frozen=True, slots=True)
class Variable:
    name: str
    required: bool
    expand: bool
    field: FieldRef
    # dotted attribute path from the destination root, for diagnostics only
    path: str = ""
