from __future__ import annotations

from typing import Callable, Tuple

_SPECIAL_NAMES = frozenset("*#$@!?-0123456789")


def expand(text: str, mapping: Callable[[str], str]) -> str:
    """
    Replace $NAME and ${NAME} in `text` with `mapping(NAME)`.

    Invalid `${...}` syntax is dropped. A `$` not followed by a name is kept as is.
    """
    buf: list[str] = []
    i = 0
    j = 0
    while j < len(text):
        if text[j] == "$" and j + 1 < len(text):
            buf.append(text[i:j])
            name, width = _shell_name(text[j + 1 :])
            if name == "" and width > 0:
                # bad syntax, e.g. "${}" or an unterminated "${"
                pass
            elif name == "":
                buf.append(text[j])
            else:
                buf.append(mapping(name))
            j += width
            i = j + 1
        j += 1
    if not buf:
        return text
    buf.append(text[i:])
    return "".join(buf)


def _is_alnum(c: str) -> bool:
    return c == "_" or ("0" <= c <= "9") or ("a" <= c <= "z") or ("A" <= c <= "Z")


def _shell_name(s: str) -> Tuple[str, int]:
    """Return the variable name at the start of `s` and how many characters it occupies."""
    if s[0] == "{":
        if len(s) > 2 and s[1] in _SPECIAL_NAMES and s[2] == "}":
            return s[1:2], 3
        for i in range(1, len(s)):
            if s[i] == "}":
                if i == 1:
                    return "", 2
                return s[1:i], i + 1
        return "", 1
    if s[0] in _SPECIAL_NAMES:
        return s[0:1], 1
    i = 0
    while i < len(s) and _is_alnum(s[i]):
        i += 1
    return s[:i], i
