"""
Partial JSON repair parser for streamed language model output.

Turns any prefix of a JSON document into the best-effort value that prefix
currently represents. Each call re-scans the whole buffer, trims a dangling
trailing token, closes an open string and the open brackets, and validates
the result with the standard library json module.
"""

import json
import os
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any
from typing import TypeAlias

from wizjson._fragment import Fragment
from wizjson._fragment import FragmentKind
from wizjson._fragment import classify_fragment
from wizjson._fragment import dangling_escape_start

__version__ = "0.1.0"

# Type aliases for domain concepts - recursive definition
JsonValue = (
    str | int | float | bool | None | dict[str, "JsonValue"] | list["JsonValue"]
)
Position: TypeAlias = int

# Union type for values that might be transformed by hooks
JsonValueOrTransformed = JsonValue | Any

# Hook type definitions - hooks can return custom types
ObjectHook = Callable[[dict[str, JsonValue]], Any] | None
ObjectPairsHook = (
    Callable[[list[tuple[str, JsonValueOrTransformed]]], Any] | None
)
ParseFloatHook = Callable[[str], Any] | None
ParseIntHook = Callable[[str], Any] | None
ParseConstantHook = Callable[[str], Any] | None

# Profiling infrastructure - zero-cost when disabled
PROFILE_HOT_PATHS = __debug__ and "WIZJSON_PROFILE" in os.environ

_WHITESPACE = " \t\n\r"
_CLOSERS = {"{": "}", "[": "]"}


@dataclass
class HotPathStats:
    """Statistics for profiling hot paths during repair."""

    function_name: str
    call_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(self, duration_ns: int, chars: int = 0) -> None:
        """Records a function call with timing and character processing info."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars


class ScanState(Enum):
    """
    Scanner states.

    ESCAPED is only entered from IN_STRING and always returns to it after
    consuming exactly one character.
    """

    DEFAULT = "default"
    IN_STRING = "in_string"
    ESCAPED = "escaped"


if PROFILE_HOT_PATHS:
    _hot_path_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Context manager for profiling hot paths."""

        def __init__(self, func_name: str, chars_to_process: int = 0):
            self.func_name = func_name
            self.chars = chars_to_process
            self.start_time = 0

        def __enter__(self) -> "ProfileContext":
            self.start_time = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            duration = time.perf_counter_ns() - self.start_time
            if self.func_name not in _hot_path_stats:
                _hot_path_stats[self.func_name] = HotPathStats(self.func_name)
            _hot_path_stats[self.func_name].record_call(duration, self.chars)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns current profiling statistics."""
        return _hot_path_stats.copy()

    def clear_hot_path_stats() -> None:
        """Clears profiling statistics."""
        _hot_path_stats.clear()

else:
    # Zero-cost in production - ignore arguments to nullcontext
    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, func_name: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass


class PartialJSONError(ValueError):
    """
    Signals that a prefix cannot be resolved into a JSON value yet.

    Carries position, line/column numbers and the offending document, the
    same shape as json.JSONDecodeError. Callers treat it as "retry on the
    next chunk", never as an empty value.
    """

    def __init__(self, msg: str, doc: str = "", pos: Position = 0) -> None:
        if not isinstance(msg, str):
            raise TypeError("msg must be a string")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.msg = msg
        self.doc = doc
        self.pos = pos

        # Compute line and column numbers from position
        self.lineno = doc.count("\n", 0, pos) + 1 if doc else 1
        self.colno = pos - doc.rfind("\n", 0, pos) if doc else pos + 1

        super().__init__(f"{msg} at line {self.lineno}, column {self.colno}")


class StructuralMismatchError(PartialJSONError):
    """
    A closing bracket outside a string does not match the innermost open
    container, so the buffer is not a prefix of well-formed JSON.
    """

    def __init__(
        self, closer: str, expected: str | None, doc: str, pos: Position
    ) -> None:
        self.closer = closer
        self.expected = expected
        if expected is None:
            msg = f"Unexpected '{closer}' with no open container"
        else:
            msg = f"Expecting '{expected}', found '{closer}'"
        super().__init__(msg, doc, pos)


class StillUnparseableError(PartialJSONError):
    """
    The repaired text still fails to parse.

    ``doc`` is the repaired text the decoder rejected and ``source`` the
    buffer it was derived from.
    """

    def __init__(
        self, msg: str, repaired: str, pos: Position, source: str
    ) -> None:
        self.source = source
        super().__init__(msg, repaired, pos)


@dataclass(frozen=True)
class Frame:
    """
    One open container on the bracket stack.

    ``boundary`` is the index of the opening bracket or of the container's
    most recent unquoted comma; truncation rewinds to just after it.
    """

    closer: str
    boundary: Position


@dataclass(frozen=True)
class ScanResult:
    """Final scanner state for one buffer."""

    state: ScanState
    frames: tuple[Frame, ...]
    last_delimiter: Position = -1
    string_start: Position = -1
    escape_start: Position = -1

    @property
    def closers(self) -> tuple[str, ...]:
        """Expected closers, outermost first."""
        return tuple(frame.closer for frame in self.frames)

    @property
    def in_string(self) -> bool:
        return self.state is not ScanState.DEFAULT


class Scanner:
    """
    Single left-to-right pass over a buffer.

    Tracks the bracket stack with strict LIFO matching, string literal
    boundaries and escapes. Structural characters inside strings are inert.
    """

    def __init__(self, text: str):
        self.text = text
        self.state = ScanState.DEFAULT
        self.frames: list[Frame] = []
        self.last_delimiter: Position = -1
        self.string_start: Position = -1
        self.escape_start: Position = -1

    def scan(self) -> ScanResult:
        """Scans the whole buffer and returns the final state."""
        with ProfileContext("scan", len(self.text)):
            for pos, char in enumerate(self.text):
                if self.state is ScanState.DEFAULT:
                    self._scan_default(char, pos)
                elif self.state is ScanState.IN_STRING:
                    self._scan_string(char, pos)
                else:
                    self.state = ScanState.IN_STRING

            return ScanResult(
                self.state,
                tuple(self.frames),
                self.last_delimiter,
                self.string_start,
                self.escape_start,
            )

    def _scan_default(self, char: str, pos: Position) -> None:
        if char in "{[":
            self.frames.append(Frame(_CLOSERS[char], pos))
            self.last_delimiter = pos
        elif char in "}]":
            self._pop_frame(char, pos)
            self.last_delimiter = pos
        elif char == ",":
            if self.frames:
                self.frames[-1] = Frame(self.frames[-1].closer, pos)
            self.last_delimiter = pos
        elif char == ":":
            self.last_delimiter = pos
        elif char == '"':
            self.state = ScanState.IN_STRING
            self.string_start = pos
            self.escape_start = -1

    def _scan_string(self, char: str, pos: Position) -> None:
        if char == '"':
            self.state = ScanState.DEFAULT
            self.string_start = -1
            self.escape_start = -1
        elif char == "\\":
            self.state = ScanState.ESCAPED
            self.escape_start = pos

    def _pop_frame(self, closer: str, pos: Position) -> None:
        """Pops the innermost container, which must be closed by ``closer``."""
        if not self.frames:
            raise StructuralMismatchError(closer, None, self.text, pos)

        expected = self.frames[-1].closer
        if closer != expected:
            raise StructuralMismatchError(closer, expected, self.text, pos)
        self.frames.pop()


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures decoding of the repaired text with immutable settings.

    Options are forwarded to the standard library decoder that validates
    every repaired prefix.
    """

    strict: bool = True
    parse_float: ParseFloatHook = None
    parse_int: ParseIntHook = None
    parse_constant: ParseConstantHook = None
    object_pairs_hook: ObjectPairsHook = None
    object_hook: ObjectHook = None

    def __post_init__(self) -> None:
        if not isinstance(self.strict, bool):
            raise TypeError("strict must be a boolean")


def scan(s: str) -> ScanResult:
    """Runs the scanner over ``s``; raises StructuralMismatchError."""
    return Scanner(s).scan()


def _trim_open_string(text: str, result: ScanResult) -> str:
    """Cuts a dangling escape off the open string literal."""
    if result.state is ScanState.ESCAPED:
        return text[:-1]

    cut = dangling_escape_start(text, result.escape_start)
    return text if cut is None else text[:cut]


def _trim_fragment(text: str, result: ScanResult) -> tuple[str, bool]:
    """
    Discards an incomplete token at the tail of the buffer.

    Truncation rewinds to just after the innermost container's boundary, so
    the remaining text ends with that container open and awaiting its next
    element. Returns the trimmed text and whether it still ends inside a
    string literal.
    """
    with ProfileContext("trim_fragment", len(text)):
        if not result.frames:
            if result.in_string:
                return _trim_open_string(text, result), True
            return text, False

        frame = result.frames[-1]
        delimiter = text[result.last_delimiter]
        safe = frame.boundary + 1

        # A nested container just closed
        if delimiter in "}]":
            return text, False

        # Key position: whatever follows is a key still awaiting its value
        if frame.closer == "}" and delimiter != ":":
            return text[:safe], False

        if result.in_string:
            return _trim_open_string(text, result), True

        fragment = classify_fragment(text[result.last_delimiter + 1 :])
        if fragment.is_complete:
            return text, False
        return text[:safe], False


def _close_fragment(text: str, open_string: bool) -> str:
    """Closes an open string literal and strips a dangling comma."""
    with ProfileContext("close_fragment", len(text)):
        if open_string:
            text += '"'

        stripped = text.rstrip(_WHITESPACE)
        if stripped.endswith(","):
            return stripped[:-1]
        return text


def _repair_prefix(s: str) -> tuple[str, tuple[str, ...]]:
    """Runs scan, trim and close; returns the text and pending closers."""
    if not s.strip(_WHITESPACE):
        return "{}", ()

    result = scan(s)
    trimmed, open_string = _trim_fragment(s, result)
    return _close_fragment(trimmed, open_string), result.closers


def _assemble(text: str, closers: tuple[str, ...]) -> str:
    """Appends closers most-recently-opened first."""
    with ProfileContext("assemble", len(text)):
        return text + "".join(reversed(closers))


def _validate(
    repaired: str, source: str, config: ParseConfig
) -> JsonValueOrTransformed:
    """Parses the repaired text with the standard library decoder."""
    with ProfileContext("validate", len(repaired)):
        try:
            return json.loads(
                repaired,
                strict=config.strict,
                parse_float=config.parse_float,
                parse_int=config.parse_int,
                parse_constant=config.parse_constant,
                object_pairs_hook=config.object_pairs_hook,
                object_hook=config.object_hook,
            )
        except json.JSONDecodeError as e:
            raise StillUnparseableError(e.msg, repaired, e.pos, source) from e


def repair(s: str) -> str:
    """
    Repairs a JSON prefix into balanced text without decoding it.

    Raises StructuralMismatchError when ``s`` is not a prefix of well-formed
    JSON.
    """
    if not isinstance(s, str):
        raise TypeError(f"the JSON prefix must be str, not {type(s).__name__}")

    text, closers = _repair_prefix(s)
    return _assemble(text, closers)


def loads(s: str, **kwargs: Any) -> JsonValueOrTransformed:
    """
    Parses a JSON prefix into the value it currently represents.

    Empty or whitespace-only input yields an empty object. Raises
    StructuralMismatchError or StillUnparseableError when the prefix cannot
    be resolved yet.
    """
    if not isinstance(s, str):
        raise TypeError(f"the JSON prefix must be str, not {type(s).__name__}")

    config = ParseConfig(**kwargs)
    with ProfileContext("loads", len(s)):
        return _validate(repair(s), s, config)


__all__ = [
    "Fragment",
    "FragmentKind",
    "Frame",
    "HotPathStats",
    "ParseConfig",
    "PartialJSONError",
    "ScanResult",
    "ScanState",
    "Scanner",
    "StillUnparseableError",
    "StructuralMismatchError",
    "classify_fragment",
    "clear_hot_path_stats",
    "get_hot_path_stats",
    "loads",
    "repair",
    "scan",
]
