"""
Typed snapshots of streamed command generations.

Adapts the partial parser to a streaming text source: deltas are accumulated,
the whole buffer is re-parsed on every chunk, and the last good snapshot is
kept whenever the current prefix is not yet resolvable.
"""

import json
import logging
from collections.abc import AsyncIterable
from collections.abc import AsyncIterator
from collections.abc import Callable
from collections.abc import Iterable
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any
from typing import TypeAlias

import wizjson
from wizjson import JsonValueOrTransformed
from wizjson import ParseConfig
from wizjson import PartialJSONError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Generation:
    """A natural-language-to-command generation."""

    command: str = ""
    explanation: str = ""


@dataclass(frozen=True)
class CompletionResult:
    """Text to append to a partially typed command."""

    completion: str = ""


Snapshot: TypeAlias = Generation | CompletionResult
Coerce: TypeAlias = Callable[[JsonValueOrTransformed], Snapshot]


def coerce_generation(value: JsonValueOrTransformed) -> Generation:
    """
    Normalizes a parsed value into a Generation.

    A non-string command becomes empty; a structured explanation is
    re-serialized to JSON text, any other non-string explanation becomes
    empty.
    """
    if not isinstance(value, dict):
        return Generation()

    command = value.get("command")
    explanation = value.get("explanation")
    if isinstance(explanation, dict | list):
        explanation = json.dumps(explanation)

    return Generation(
        command=command if isinstance(command, str) else "",
        explanation=explanation if isinstance(explanation, str) else "",
    )


def coerce_completion(value: JsonValueOrTransformed) -> CompletionResult:
    """Normalizes a parsed value into a CompletionResult."""
    if not isinstance(value, dict):
        return CompletionResult()

    completion = value.get("completion")
    return CompletionResult(
        completion=completion if isinstance(completion, str) else ""
    )


def parse_generation(text: str, **kwargs: Any) -> Generation | None:
    """Returns the generation a prefix represents, or None if unresolvable."""
    try:
        return coerce_generation(wizjson.loads(text, **kwargs))
    except PartialJSONError:
        return None


def parse_completion(text: str, **kwargs: Any) -> CompletionResult | None:
    """Returns the completion a prefix represents, or None if unresolvable."""
    try:
        return coerce_completion(wizjson.loads(text, **kwargs))
    except PartialJSONError:
        return None


class GenerationStream:
    """
    Accumulates streamed text deltas and tracks the latest good snapshot.

    Owned by a single reader. Mid-stream parse failures leave the previous
    snapshot untouched; only ``finish`` surfaces a failure.

    Example:
        >>> stream = GenerationStream()
        >>> stream.consume('{"command": "ls -')
        Generation(command='ls -', explanation='')
        >>> stream.consume('la", "explanation": "Lists')
        Generation(command='ls -la', explanation='Lists')
    """

    def __init__(
        self, coerce: Coerce = coerce_generation, **kwargs: Any
    ) -> None:
        # Validate decoder options up front rather than on every chunk
        ParseConfig(**kwargs)
        self._coerce = coerce
        self._parse_options = kwargs
        self._buffer = ""
        self._snapshot: Snapshot | None = None
        self.chunks_consumed = 0
        self.failed_parses = 0

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def snapshot(self) -> Snapshot | None:
        """The last successfully parsed snapshot, None before the first."""
        return self._snapshot

    def _parse(self) -> Snapshot:
        value = wizjson.loads(self._buffer, **self._parse_options)
        self._snapshot = self._coerce(value)
        return self._snapshot

    def consume(self, chunk: str | None) -> Snapshot | None:
        """
        Appends a text delta and re-parses the whole buffer.

        A None chunk is the upstream end-of-stream marker and is ignored.

        Returns:
            The new snapshot, or None when the buffer is not yet resolvable
        """
        if chunk is None:
            return None

        self._buffer += chunk
        self.chunks_consumed += 1
        try:
            return self._parse()
        except PartialJSONError as e:
            self.failed_parses += 1
            logger.debug(
                "Prefix of %d chars not yet resolvable: %s",
                len(self._buffer),
                e,
            )
            return None

    def finish(self) -> Snapshot:
        """
        Re-parses the final buffer once the stream is declared complete.

        Raises:
            PartialJSONError: the complete buffer still cannot be resolved
        """
        try:
            return self._parse()
        except PartialJSONError:
            logger.warning(
                "Stream ended with unresolvable JSON after %d chunks",
                self.chunks_consumed,
            )
            raise

    def feed(self, chunks: Iterable[str | None]) -> Iterator[Snapshot]:
        """Consumes chunks, yielding each updated snapshot."""
        for chunk in chunks:
            snapshot = self.consume(chunk)
            if snapshot is not None:
                yield snapshot

    async def afeed(
        self, chunks: AsyncIterable[str | None]
    ) -> AsyncIterator[Snapshot]:
        """Async variant of ``feed`` for streaming completion clients."""
        async for chunk in chunks:
            snapshot = self.consume(chunk)
            if snapshot is not None:
                yield snapshot


__all__ = [
    "CompletionResult",
    "Generation",
    "GenerationStream",
    "coerce_completion",
    "coerce_generation",
    "parse_completion",
    "parse_generation",
]
