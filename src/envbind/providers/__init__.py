"""Key/value sources that variables are looked up from."""

from envbind.providers.files import DotenvProvider, YamlProvider
from envbind.providers.impl import OS, MapProvider, MultiProvider
from envbind.providers.interfaces import Provider, ProviderFunc

__all__ = [
    "DotenvProvider",
    "MapProvider",
    "MultiProvider",
    "OS",
    "Provider",
    "ProviderFunc",
    "YamlProvider",
]
