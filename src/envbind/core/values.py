from __future__ import annotations

import typing
from datetime import timedelta
from typing import Any, List, Sequence

from envbind.core.discovery import unwrap_optional
from envbind.core.durations import parse_duration
from envbind.core.models import FieldRef, has_unmarshaler
from envbind.errors import UnsupportedTypeError

_TRUE_LITERALS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_LITERALS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(text: str) -> bool:
    if text in _TRUE_LITERALS:
        return True
    if text in _FALSE_LITERALS:
        return False
    raise ValueError(f"invalid boolean literal {text!r}")


def is_sequence_type(tp: Any) -> bool:
    origin = typing.get_origin(tp)
    if origin is not None:
        return origin is list
    return isinstance(tp, type) and issubclass(tp, list)


def sequence_element_type(tp: Any) -> Any:
    args = typing.get_args(tp)
    if args:
        return args[0]
    # unparameterized list or list subclass: walk the bases for a parameterized list
    for base in getattr(tp, "__orig_bases__", ()):
        if typing.get_origin(base) is list and typing.get_args(base):
            return typing.get_args(base)[0]
    return str


def bind_value(field: FieldRef, raw: str, slice_sep: str) -> None:
    """
    Convert `raw` to the field's declared type and assign it.

    A sequence type that can unmarshal itself takes the whole text; other sequences are split
    on `slice_sep` and every piece is converted on its own. Conversion errors propagate as the
    ValueError raised by the underlying parser.
    """
    tp = unwrap_optional(field.type)
    if is_sequence_type(tp) and not has_unmarshaler(tp):
        field.set(convert_sequence(tp, split_values(raw, slice_sep)))
        return
    field.set(convert_scalar(tp, raw, current=field.get()))


def split_values(raw: str, sep: str) -> List[str]:
    if sep == "":
        return list(raw)
    return raw.split(sep)


def convert_sequence(tp: Any, pieces: Sequence[str]) -> List[Any]:
    elem = sequence_element_type(tp)
    values = [convert_scalar(elem, piece) for piece in pieces]
    origin = typing.get_origin(tp) or tp
    if origin is list:
        return values
    return origin(values)


def convert_scalar(tp: Any, raw: str, current: Any = None) -> Any:
    if has_unmarshaler(tp):
        target = current if isinstance(current, tp) else tp()
        target.unmarshal_text(raw)
        return target
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        raise UnsupportedTypeError(tp)
    if issubclass(tp, timedelta):
        return parse_duration(raw)
    # bool before int, bool is an int subclass
    if issubclass(tp, bool):
        return parse_bool(raw)
    if issubclass(tp, int):
        return tp(int(raw))
    if issubclass(tp, float):
        return tp(float(raw))
    if issubclass(tp, str):
        return tp(raw)
    raise UnsupportedTypeError(tp)
