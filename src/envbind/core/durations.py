from __future__ import annotations

import re
from datetime import timedelta
from fractions import Fraction

_NANOSECONDS_PER_UNIT = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"([0-9]*(?:\.[0-9]*)?)([^0-9.]+)")


def parse_duration(text: str) -> timedelta:
    """
    Parse a duration literal such as "300ms", "-1.5h" or "2h45m".

    A duration is an optionally signed sequence of decimal numbers, each with an optional
    fraction and a unit suffix. Valid units are "ns", "us" (or "µs"), "ms", "s", "m", "h".
    """
    original = text
    s = text
    negative = False
    if s[:1] in ("-", "+"):
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if s == "":
        raise ValueError(f"invalid duration {original!r}")

    total = Fraction(0)
    pos = 0
    while pos < len(s):
        match = _COMPONENT.match(s, pos)
        if match is None:
            raise ValueError(f"invalid duration {original!r}")
        number, unit = match.group(1), match.group(2)
        if number in ("", "."):
            raise ValueError(f"invalid duration {original!r}")
        if unit not in _NANOSECONDS_PER_UNIT:
            raise ValueError(f"unknown unit {unit!r} in duration {original!r}")
        total += Fraction(number) * _NANOSECONDS_PER_UNIT[unit]
        pos = match.end()

    microseconds = total / 1000
    if microseconds.denominator != 1:
        raise ValueError(f"duration {original!r} is finer than microsecond precision")
    if negative:
        microseconds = -microseconds
    try:
        return timedelta(microseconds=int(microseconds))
    except OverflowError as exc:
        raise ValueError(f"invalid duration {original!r}: out of range") from exc


def format_duration(value: timedelta) -> str:
    """
    Render `value` in the same literal form `parse_duration` accepts, e.g. "1h30m0s" or "300ms".

    Durations under one second use the largest unit that keeps them whole-numbered or
    fractional ("1.5ms", "250µs"); longer ones are split into hours, minutes and seconds.
    """
    micros = value // timedelta(microseconds=1)
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_decimal(micros, 3)}ms"

    seconds, fraction = divmod(micros, 1_000_000)
    out = f"{_decimal((seconds % 60) * 1_000_000 + fraction, 6)}s"
    if seconds >= 60:
        out = f"{(seconds // 60) % 60}m{out}"
    if seconds >= 3600:
        out = f"{seconds // 3600}h{out}"
    return sign + out


def _decimal(value: int, digits: int) -> str:
    whole, rest = divmod(value, 10**digits)
    if not rest:
        return str(whole)
    return f"{whole}.{str(rest).zfill(digits).rstrip('0')}"
