"""Record walking and value conversion."""

from envbind.core.discovery import discover, env_field, env_model_field, parse_tag
from envbind.core.durations import format_duration, parse_duration
from envbind.core.expand import expand
from envbind.core.models import FieldRef, TextUnmarshaler, Variable
from envbind.core.values import bind_value

__all__ = [
    "FieldRef",
    "TextUnmarshaler",
    "Variable",
    "bind_value",
    "discover",
    "env_field",
    "env_model_field",
    "expand",
    "format_duration",
    "parse_duration",
    "parse_tag",
]
