from __future__ import annotations

import argparse
import dataclasses
import importlib
import json
import logging
import sys
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, List, Literal, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from envbind.core.durations import format_duration
from envbind.errors import EnvError
from envbind.loader import Loader
from envbind.logging import init_logging
from envbind.options import Options
from envbind.providers import OS, DotenvProvider, MultiProvider, Provider, YamlProvider

logger = logging.getLogger(__name__)


class CliSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    log_level: str = "WARNING"
    output: Literal["json", "text"] = "json"


@dataclass(frozen=True, slots=True)
class LoadRequest:
    """
    Inputs for a CLI load.

    Sources are layered in order: YAML files, .env files, then the process environment.
    """

    target: str
    prefix: str = ""
    slice_sep: str = " "
    dotenv_paths: Tuple[str, ...] = ()
    yaml_paths: Tuple[str, ...] = ()
    include_os: bool = True


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="envbind", description="Bind environment variables to a config record")
    parser.add_argument("--prefix", default="", help="Prefix added to every variable name")
    parser.add_argument("--sep", default=" ", help="Separator for sequence values (default: space)")
    parser.add_argument(
        "--dotenv",
        action="append",
        default=[],
        help="Read variables from a .env file (repeatable, later files win)",
    )
    parser.add_argument(
        "--yaml",
        action="append",
        default=[],
        help="Read variables from a flat YAML mapping (repeatable, later files win)",
    )
    parser.add_argument(
        "--no-os",
        action="store_true",
        help="Do not read the process environment",
    )
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    parser.add_argument("--format", dest="output", choices=("json", "text"), default="json")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # Command: describe
    describe_parser = subparsers.add_parser("describe", help="List the variables a record binds")
    describe_parser.add_argument("target", help="Record class as module:ClassName")

    # Command: check
    check_parser = subparsers.add_parser("check", help="Load a record and print the result")
    check_parser.add_argument("target", help="Record class as module:ClassName")

    return parser


def import_target(target: str) -> Any:
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Target must look like module:ClassName, got: {target}")
    obj: Any = importlib.import_module(module_name)
    for part in attr.split("."):
        obj = getattr(obj, part)
    return obj


def build_provider(request: LoadRequest) -> Provider:
    providers: List[Provider] = [YamlProvider(p) for p in request.yaml_paths]
    providers.extend(DotenvProvider(p) for p in request.dotenv_paths)
    if request.include_os:
        providers.append(OS)
    return MultiProvider(*providers)


def _record_to_dict(record: Any) -> dict:
    if isinstance(record, BaseModel):
        return record.model_dump(mode="python")
    return dataclasses.asdict(record)


def _render(data: dict, output: str) -> str:
    if output == "json":
        return json.dumps(data, indent=2, default=_text)
    return "\n".join(f"{key}={_text(value)}" for key, value in _flatten(data))


def _text(value: Any) -> str:
    if isinstance(value, timedelta):
        return format_duration(value)
    return str(value)


def _flatten(data: dict, prefix: str = "") -> List[Tuple[str, Any]]:
    out: List[Tuple[str, Any]] = []
    for key, value in data.items():
        dotted = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            out.extend(_flatten(value, dotted))
        else:
            out.append((dotted, value))
    return out


def _type_label(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__name__
    return str(tp).replace("typing.", "")


def _describe(loader: Loader, record: Any, settings: CliSettings) -> str:
    variables = loader.discover(record)
    if settings.output == "json":
        rows = [
            {
                "name": v.name,
                "path": v.path,
                "type": _type_label(v.field.type),
                "required": v.required,
                "expand": v.expand,
            }
            for v in variables
        ]
        return json.dumps(rows, indent=2)
    lines = []
    for v in variables:
        flags = ",".join(flag for flag, on in (("required", v.required), ("expand", v.expand)) if on)
        lines.append(f"{v.name}\t{v.path}\t{_type_label(v.field.type)}\t{flags or '-'}")
    return "\n".join(lines)


def run(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = CliSettings(log_level=args.log_level, output=args.output)
    init_logging(settings.log_level)

    request = LoadRequest(
        target=args.target,
        prefix=args.prefix,
        slice_sep=args.sep,
        dotenv_paths=tuple(args.dotenv),
        yaml_paths=tuple(args.yaml),
        include_os=not args.no_os,
    )

    try:
        record = import_target(request.target)()
    except (ImportError, AttributeError, TypeError, ValueError) as exc:
        logger.debug("cli.target_failed target=%s error=%s", request.target, exc)
        print(f"Cannot create {request.target}: {exc}", file=sys.stderr)
        return 1

    loader = Loader(build_provider(request), Options(prefix=request.prefix, slice_sep=request.slice_sep))

    try:
        if args.command == "describe":
            print(_describe(loader, record, settings))
            return 0
        loader.load(record)
    except (EnvError, ValueError) as exc:
        logger.debug("cli.load_failed target=%s error=%s", request.target, exc)
        print(str(exc), file=sys.stderr)
        return 1

    print(_render(_record_to_dict(record), settings.output))
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
