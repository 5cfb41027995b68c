from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml
from dotenv import dotenv_values

from envbind.providers.impl import MapProvider

logger = logging.getLogger(__name__)


class DotenvProvider(MapProvider):
    """
    Provider backed by a .env file.

    Interpolation is left to the loader's `expand` option, so values are read verbatim.
    A missing file behaves like an empty source.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(_read_dotenv(self.path))


class YamlProvider(MapProvider):
    """Provider backed by a YAML document whose top level is a flat mapping of scalars."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        super().__init__(_read_yaml(self.path))


def _read_dotenv(path: Path) -> Dict[str, str]:
    if not path.exists():
        logger.debug("providers.dotenv_missing path=%s", path)
        return {}
    raw = dotenv_values(dotenv_path=path, interpolate=False)
    # bare `KEY` lines carry no value and are treated as unset
    values = {k: v for k, v in raw.items() if v is not None}
    logger.debug("providers.dotenv_loaded path=%s count=%s", path, len(values))
    return values


def _read_yaml(path: Path) -> Dict[str, str]:
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Top-level YAML must be a mapping, got: {type(data).__name__}")

    values: Dict[str, str] = {}
    for key, value in data.items():
        text, ok = _scalar_to_text(value)
        if not ok:
            raise ValueError(
                f"YAML values must be scalars. Key '{key}' is {type(value).__name__}."
            )
        values[str(key)] = text
    logger.debug("providers.yaml_loaded path=%s count=%s", path, len(values))
    return values


def _scalar_to_text(value: Any) -> Tuple[str, bool]:
    if value is None:
        return "", True
    if isinstance(value, bool):
        return ("true" if value else "false"), True
    if isinstance(value, (str, int, float)):
        return str(value), True
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat(), True
    return "", False
