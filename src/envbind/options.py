from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable


@dataclass(frozen=True, slots=True)
class Options:
    """Settings for a single load call. Built once, read-only while loading."""

    prefix: str = ""
    slice_sep: str = " "


Option = Callable[[Options], Options]


def with_prefix(prefix: str) -> Option:
    """Prepend `prefix` to every variable name, e.g. PORT -> APP_PORT."""

    def _apply(options: Options) -> Options:
        return replace(options, prefix=prefix)

    return _apply


def with_slice_separator(sep: str) -> Option:
    """Split sequence values on `sep` instead of a single space."""

    def _apply(options: Options) -> Options:
        return replace(options, slice_sep=sep)

    return _apply


def build_options(*opts: Option) -> Options:
    options = Options()
    for opt in opts:
        options = opt(options)
    return options
