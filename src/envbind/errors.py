from __future__ import annotations

from typing import Sequence


class EnvError(Exception):
    """Base class for every error raised while loading variables into a record."""


class InvalidArgumentError(EnvError):
    def __init__(self, message: str = "env: argument must be a non-nil mutable record instance") -> None:
        super().__init__(message)


class EmptyTagNameError(EnvError):
    def __init__(self, field_name: str = "") -> None:
        self.field_name = field_name
        message = "env: empty tag name is not allowed"
        if field_name:
            message = f"{message} field={field_name}"
        super().__init__(message)


class InvalidTagOptionError(EnvError):
    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(f"env: invalid tag option {option!r}")


class UnsupportedTypeError(EnvError):
    def __init__(self, type_: object) -> None:
        self.type = type_
        super().__init__(f"env: unsupported type {_type_name(type_)}")


class NotSetError(EnvError):
    """
    Raised after loading when variables marked as required were absent.

    `names` keeps discovery order so an operator can fix every missing variable at once.
    """

    def __init__(self, names: Sequence[str]) -> None:
        self.names = list(names)
        super().__init__(f"env: [{', '.join(self.names)}] are required but not set")


def _type_name(type_: object) -> str:
    return getattr(type_, "__name__", None) or repr(type_)
