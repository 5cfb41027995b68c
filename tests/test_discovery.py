import unittest
from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from envbind import Loader, MapProvider, Options, env_field, env_model_field
from envbind.core.discovery import discover, parse_tag
from envbind.errors import EmptyTagNameError, InvalidArgumentError, InvalidTagOptionError


@dataclass
class Inner:
    level: int = env_field("LEVEL", default=0)


@dataclass
class Middle:
    name: str = env_field("NAME", default="")
    inner: Inner = field(default_factory=Inner)
    after: str = env_field("AFTER", default="")


@dataclass
class Outer:
    first: str = env_field("FIRST", default="")
    middle: Middle = field(default_factory=Middle)
    untagged: str = "x"
    _private: str = env_field("PRIVATE", default="")
    last: int = env_field("LAST,required,expand", default=0)


@dataclass
class HostPort:
    host: str = env_field("INNER_HOST", default="")
    port: int = 0

    def unmarshal_text(self, text: str) -> None:
        host, _, port = text.rpartition(":")
        self.host = host
        self.port = int(port)


@dataclass
class WithEndpoint:
    endpoint: HostPort = env_field("ENDPOINT", default_factory=HostPort)


@dataclass(frozen=True)
class FrozenPart:
    value: int = env_field("FROZEN_VALUE", default=0)


@dataclass
class WithFrozen:
    part: FrozenPart = field(default_factory=FrozenPart)
    other: int = env_field("OTHER", default=0)


@dataclass
class WithMissingNested:
    inner: Optional[Inner] = None


@dataclass
class EmptyName:
    value: str = env_field(",required", default="")


@dataclass
class BadOption:
    value: str = env_field("VALUE,requird", default="")


class ModelDatabase(BaseModel):
    host: str = env_model_field("DB_HOST", default="localhost")
    _token: str = PrivateAttr(default="")


class ModelConfig(BaseModel):
    port: int = env_model_field("PORT", default=0)
    name: str = "untagged"
    db: ModelDatabase = Field(default_factory=ModelDatabase)
    build: str = env_model_field("BUILD", default="", frozen=True)


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    port: int = env_model_field("PORT", default=0)


class ParseTagTests(unittest.TestCase):
    def test_name_only(self) -> None:
        self.assertEqual(parse_tag("PORT"), ("PORT", False, False))

    def test_options(self) -> None:
        self.assertEqual(parse_tag("PORT,required"), ("PORT", True, False))
        self.assertEqual(parse_tag("PORT,expand,required"), ("PORT", True, True))

    def test_empty_name(self) -> None:
        for tag in ("", ",", ",required", ",expand,required"):
            with self.assertRaises(EmptyTagNameError, msg=tag):
                parse_tag(tag)

    def test_invalid_option(self) -> None:
        with self.assertRaises(InvalidTagOptionError) as ctx:
            parse_tag("PORT,required,default=1")
        self.assertEqual(ctx.exception.option, "default=1")
        self.assertIn("default=1", str(ctx.exception))

    def test_trailing_comma_is_an_empty_option(self) -> None:
        with self.assertRaises(InvalidTagOptionError) as ctx:
            parse_tag("PORT,")
        self.assertEqual(ctx.exception.option, "")


class DiscoveryTests(unittest.TestCase):
    def test_depth_first_declaration_order(self) -> None:
        variables = discover(Outer())
        self.assertEqual([v.name for v in variables], ["FIRST", "NAME", "LEVEL", "AFTER", "LAST"])
        self.assertEqual(
            [v.path for v in variables],
            ["first", "middle.name", "middle.inner.level", "middle.after", "last"],
        )

    def test_flags(self) -> None:
        last = discover(Outer())[-1]
        self.assertTrue(last.required)
        self.assertTrue(last.expand)
        first = discover(Outer())[0]
        self.assertFalse(first.required)
        self.assertFalse(first.expand)

    def test_field_handle_points_at_nested_owner(self) -> None:
        record = Outer()
        level = discover(record)[2]
        self.assertIs(level.field.owner, record.middle.inner)
        level.field.set(7)
        self.assertEqual(record.middle.inner.level, 7)

    def test_prefix_is_applied(self) -> None:
        names = [v.name for v in discover(Outer(), "APP_")]
        self.assertEqual(names, ["APP_FIRST", "APP_NAME", "APP_LEVEL", "APP_AFTER", "APP_LAST"])

    def test_unmarshaler_record_is_a_leaf(self) -> None:
        variables = discover(WithEndpoint())
        self.assertEqual([v.name for v in variables], ["ENDPOINT"])

    def test_frozen_nested_record_is_skipped(self) -> None:
        self.assertEqual([v.name for v in discover(WithFrozen())], ["OTHER"])

    def test_nested_none_is_rejected(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            discover(WithMissingNested())

    def test_tag_errors(self) -> None:
        with self.assertRaises(EmptyTagNameError):
            discover(EmptyName())
        with self.assertRaises(InvalidTagOptionError) as ctx:
            discover(BadOption())
        self.assertEqual(ctx.exception.option, "requird")

    def test_pydantic_models(self) -> None:
        variables = discover(ModelConfig())
        self.assertEqual([v.name for v in variables], ["PORT", "DB_HOST"])
        self.assertEqual(variables[1].path, "db.host")

    def test_invalid_destinations(self) -> None:
        for dst in (None, Outer, object(), {"PORT": "1"}, "PORT", FrozenPart(), FrozenModel()):
            with self.assertRaises(InvalidArgumentError, msg=repr(dst)):
                discover(dst)

    def test_loader_discover_uses_prefix(self) -> None:
        loader = Loader(MapProvider(), Options(prefix="SVC_"))
        self.assertEqual(loader.discover(WithFrozen())[0].name, "SVC_OTHER")


if __name__ == "__main__":
    unittest.main()
