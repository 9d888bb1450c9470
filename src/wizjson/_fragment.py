"""Completeness grammar for the scalar token trailing a partial JSON buffer."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

# Each sub-part must be fully present: "-", "1.", "1e" and "1e+" are partial
_NUMBER_RE: Final = re.compile(
    r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?"
)
_STRING_RE: Final = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)
_UNICODE_ESCAPE_LENGTH: Final = 6


class FragmentKind(Enum):
    """Tagged variant over the kinds of trailing scalar token."""

    BOOLEAN = "boolean"
    NULL = "null"
    NUMBER = "number"
    STRING = "string"
    PARTIAL = "partial"


_LITERALS: Final = {
    "true": FragmentKind.BOOLEAN,
    "false": FragmentKind.BOOLEAN,
    "null": FragmentKind.NULL,
}


@dataclass(frozen=True)
class Fragment:
    """A classified trailing token.

    Only ``PARTIAL`` fragments are trimmed; everything else is a complete
    scalar that can be closed over as-is.
    """

    kind: FragmentKind
    text: str

    @property
    def is_complete(self) -> bool:
        return self.kind is not FragmentKind.PARTIAL


def classify_fragment(token: str) -> Fragment:
    """Classifies a trailing scalar token, ignoring surrounding whitespace.

    Args:
        token: Text following the last structural delimiter

    Returns:
        The fragment tagged with its kind, ``PARTIAL`` when the token is not
        yet a complete JSON scalar
    """
    stripped = token.strip(" \t\n\r")

    if stripped in _LITERALS:
        return Fragment(_LITERALS[stripped], stripped)
    if _NUMBER_RE.fullmatch(stripped):
        return Fragment(FragmentKind.NUMBER, stripped)
    if _STRING_RE.fullmatch(stripped):
        return Fragment(FragmentKind.STRING, stripped)
    return Fragment(FragmentKind.PARTIAL, stripped)


def dangling_escape_start(text: str, escape_start: int) -> int | None:
    """Returns where an unfinished ``\\uXXXX`` escape begins, if any.

    ``escape_start`` is the index of the backslash opening the last escape
    sequence of the open string literal, or -1 when there is none.
    """
    if escape_start < 0 or escape_start + 1 >= len(text):
        return None
    if text[escape_start + 1] != "u":
        return None
    if len(text) - escape_start < _UNICODE_ESCAPE_LENGTH:
        return escape_start
    return None
