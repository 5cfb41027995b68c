from __future__ import annotations

import logging
from typing import Any, List, Tuple

from envbind.core.discovery import discover
from envbind.core.expand import expand
from envbind.core.models import Variable
from envbind.core.values import bind_value
from envbind.errors import NotSetError
from envbind.options import Option, Options, build_options
from envbind.providers import OS, Provider

logger = logging.getLogger(__name__)


class Loader:
    def __init__(self, provider: Provider, options: Options = Options()) -> None:
        self.provider = provider
        self.options = options

    def discover(self, dst: Any) -> List[Variable]:
        return discover(dst, self.options.prefix)

    def load(self, dst: Any) -> None:
        """
        Load variables into `dst` in place.

        Tag and conversion errors abort immediately. Missing required variables are collected
        and raised together as a NotSetError once every other variable has been bound.
        """
        variables = self.discover(dst)

        notset: List[str] = []
        for var in variables:
            value, ok = self.lookup_env(var.name, expand_value=var.expand)
            if not ok:
                if var.required:
                    notset.append(var.name)
                else:
                    logger.debug("loader.var_unset name=%s path=%s", var.name, var.path)
                continue

            bind_value(var.field, value, self.options.slice_sep)
            logger.debug("loader.var_bound name=%s path=%s", var.name, var.path)

        if notset:
            logger.debug("loader.required_not_set names=%s", notset)
            raise NotSetError(notset)

    def lookup_env(self, key: str, *, expand_value: bool = False) -> Tuple[str, bool]:
        value, ok = self.provider.lookup_env(key)
        if not ok:
            return "", False
        if not expand_value:
            return value, True
        return expand(value, self._lookup_or_empty), True

    def _lookup_or_empty(self, key: str) -> str:
        value, _ = self.provider.lookup_env(key)
        return value


def load(dst: Any, *opts: Option) -> None:
    """
    Load environment variables into the record `dst` using the process environment.

    `dst` must be a mutable dataclass or pydantic model instance. Fields are bound through an
    "env" tag of the form "NAME[,required][,expand]"; untagged fields are ignored except nested
    records, which are walked at any depth. Absent optional variables leave defaults untouched.
    """
    Loader(OS, build_options(*opts)).load(dst)


def load_from(provider: Provider, dst: Any, *opts: Option) -> None:
    """Like `load`, reading variables from `provider`."""
    Loader(provider, build_options(*opts)).load(dst)
