"""Load environment variables into nested dataclasses and pydantic models."""

from envbind.core import TextUnmarshaler, env_field, env_model_field
from envbind.errors import (
    EmptyTagNameError,
    EnvError,
    InvalidArgumentError,
    InvalidTagOptionError,
    NotSetError,
    UnsupportedTypeError,
)
from envbind.loader import Loader, load, load_from
from envbind.options import Option, Options, with_prefix, with_slice_separator
from envbind.providers import (
    OS,
    DotenvProvider,
    MapProvider,
    MultiProvider,
    Provider,
    ProviderFunc,
    YamlProvider,
)

__version__ = "0.1.0"

__all__ = [
    "DotenvProvider",
    "EmptyTagNameError",
    "EnvError",
    "InvalidArgumentError",
    "InvalidTagOptionError",
    "Loader",
    "MapProvider",
    "MultiProvider",
    "NotSetError",
    "OS",
    "Option",
    "Options",
    "Provider",
    "ProviderFunc",
    "TextUnmarshaler",
    "UnsupportedTypeError",
    "YamlProvider",
    "env_field",
    "env_model_field",
    "load",
    "load_from",
    "with_prefix",
    "with_slice_separator",
]
