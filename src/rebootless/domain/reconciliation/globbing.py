"""Path glob compilation for policy rules.

``fnmatch`` neither rejects malformed patterns nor keeps ``*`` inside one path
segment, so patterns are compiled to regular expressions here:

- ``*`` matches any run of characters except ``/``
- ``?`` matches one character except ``/``
- ``[...]`` is a character class; a leading ``^`` negates it, ``!`` is literal
- ``\\`` escapes the next character, also inside classes

Patterns always match the whole value.
"""

from __future__ import annotations

import re


class MalformedPatternError(ValueError):
    """Raised for patterns that cannot be compiled."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Malformed glob pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


def compile_glob(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        index += 1
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "\\":
            if index >= len(pattern):
                raise MalformedPatternError(pattern, "trailing escape")
            parts.append(re.escape(pattern[index]))
            index += 1
        elif char == "[":
            class_regex, index = _compile_class(pattern, index)
            parts.append(class_regex)
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.DOTALL)


def glob_matches(compiled: re.Pattern[str], value: str) -> bool:
    return compiled.fullmatch(value) is not None


def _compile_class(pattern: str, index: int) -> tuple[str, int]:
    negate = index < len(pattern) and pattern[index] == "^"
    if negate:
        index += 1

    items: list[str] = []
    while True:
        if index >= len(pattern):
            raise MalformedPatternError(pattern, "unclosed character class")
        if pattern[index] == "]":
            if not items:
                raise MalformedPatternError(pattern, "empty character class")
            index += 1
            break
        low, index = _class_char(pattern, index)
        if index + 1 < len(pattern) and pattern[index] == "-" and pattern[index + 1] != "]":
            high, index = _class_char(pattern, index + 1)
            if high < low:
                raise MalformedPatternError(pattern, f"reversed range {low}-{high}")
            items.append(f"{re.escape(low)}-{re.escape(high)}")
        else:
            items.append(re.escape(low))

    body = "".join(items)
    return (f"[^{body}]" if negate else f"[{body}]"), index


def _class_char(pattern: str, index: int) -> tuple[str, int]:
    char = pattern[index]
    if char != "\\":
        return char, index + 1
    if index + 1 >= len(pattern):
        raise MalformedPatternError(pattern, "trailing escape")
    return pattern[index + 1], index + 2
