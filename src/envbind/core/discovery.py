from __future__ import annotations

import dataclasses
import logging
import re
import sys
import types
import typing
from typing import Any, Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, Field
from pydantic_core import PydanticUndefined

from envbind.core.models import FieldRef, Variable, has_unmarshaler
from envbind.errors import EmptyTagNameError, InvalidArgumentError, InvalidTagOptionError

logger = logging.getLogger(__name__)

TAG_KEY = "env"

_UNION_TYPES: Tuple[Any, ...] = (Union, types.UnionType)
_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def env_field(
    tag: str,
    *,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    **kwargs: Any,
) -> Any:
    """Declare a dataclass field bound to the variable named by `tag` ("NAME[,option...]")."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = tag
    return dataclasses.field(default=default, default_factory=default_factory, metadata=metadata, **kwargs)


def env_model_field(tag: str, default: Any = PydanticUndefined, **kwargs: Any) -> Any:
    """Declare a pydantic model field bound to the variable named by `tag`."""
    extra = dict(kwargs.pop("json_schema_extra", None) or {})
    extra[TAG_KEY] = tag
    return Field(default, json_schema_extra=extra, **kwargs)


def is_record_type(tp: Any) -> bool:
    if not isinstance(tp, type) or typing.get_origin(tp) is not None:
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def is_mutable_record(obj: Any) -> bool:
    if isinstance(obj, type):
        return False
    if isinstance(obj, BaseModel):
        return not obj.model_config.get("frozen", False)
    if dataclasses.is_dataclass(obj):
        return not type(obj).__dataclass_params__.frozen  # type: ignore[attr-defined]
    return False


def ensure_record(dst: Any) -> None:
    if dst is None or not is_mutable_record(dst):
        raise InvalidArgumentError()


def unwrap_optional(tp: Any) -> Any:
    """Return T for Optional[T] / T | None, otherwise `tp` unchanged."""
    if typing.get_origin(tp) in _UNION_TYPES:
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def parse_tag(tag: str, *, field_name: str = "") -> Tuple[str, bool, bool]:
    """Split "NAME,opt1,opt2" into (name, required, expand)."""
    parts = tag.split(",")
    name, options = parts[0], parts[1:]
    if name == "":
        raise EmptyTagNameError(field_name)

    required = False
    expand = False
    for option in options:
        if option == "required":
            required = True
        elif option == "expand":
            expand = True
        else:
            raise InvalidTagOptionError(option)
    return name, required, expand


def discover(record: Any, prefix: str = "") -> List[Variable]:
    """
    Collect the bindable variables of `record`, depth-first in declaration order.

    Nested records are walked unless their type can unmarshal itself from text. Private fields
    (leading underscore) and nested frozen records are skipped.
    """
    ensure_record(record)
    return _discover(record, prefix, path="")


def _discover(record: Any, prefix: str, path: str) -> List[Variable]:
    variables: List[Variable] = []

    for name, tp, tag in _iter_fields(record):
        if name.startswith("_"):
            continue

        dotted = f"{path}.{name}" if path else name
        if isinstance(tp, str):
            if tag is None:
                continue
            raise InvalidArgumentError(f"env: cannot resolve annotation {tp!r} of field {dotted!r}")
        target = unwrap_optional(tp)

        if is_record_type(target) and not has_unmarshaler(target):
            nested = getattr(record, name, None)
            if nested is None:
                raise InvalidArgumentError(f"env: nested record field {dotted!r} is None")
            if not is_mutable_record(nested):
                logger.debug("discovery.skip_frozen path=%s", dotted)
                continue
            variables.extend(_discover(nested, prefix, dotted))
            continue

        if tag is None:
            continue

        key, required, expand = parse_tag(tag, field_name=dotted)
        variables.append(
            Variable(
                name=prefix + key,
                required=required,
                expand=expand,
                field=FieldRef(owner=record, name=name, type=tp),
                path=dotted,
            )
        )

    return variables


def _iter_fields(record: Any) -> Iterator[Tuple[str, Any, Optional[str]]]:
    cls = type(record)
    if isinstance(record, BaseModel):
        for name, info in cls.model_fields.items():
            if info.frozen:
                continue
            extra = info.json_schema_extra
            tag = extra.get(TAG_KEY) if isinstance(extra, dict) else None
            yield name, info.annotation, tag
        return

    try:
        hints = typing.get_type_hints(cls)
    except NameError:
        # classes defined inside a function cannot see each other through module globals
        hints = {f.name: _resolve_annotation(record, f) for f in dataclasses.fields(record)}
    for f in dataclasses.fields(record):
        yield f.name, hints.get(f.name, f.type), f.metadata.get(TAG_KEY)


def _resolve_annotation(record: Any, f: dataclasses.Field) -> Any:
    """Resolve one field annotation, falling back to the type of its current value."""
    if not isinstance(f.type, str):
        return f.type
    module = sys.modules.get(type(record).__module__)
    namespace = dict(vars(module)) if module is not None else {}
    try:
        return eval(f.type, namespace, dict(vars(type(record))))  # noqa: S307
    except (NameError, AttributeError):
        current = getattr(record, f.name, None)
        if current is not None and type(current).__name__ in _IDENTIFIER.findall(f.type):
            return type(current)
        # unresolved: returned as the raw string
        return f.type
