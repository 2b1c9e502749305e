"""Errors raised while generating headers.

Two severities exist. ``Level.BUG`` marks a broken internal contract (an
emitter handed the wrong kind of declaration) and is never the user's
fault. ``Level.ERROR`` rejects input the generator cannot represent in C.
Both abort the run: there is no partial output.
"""

from __future__ import annotations

import enum

from headergen.ir import Span


class Level(enum.Enum):
    BUG = "bug"
    ERROR = "error"


class BindgenError(Exception):
    """A fatal generation error, optionally tied to a source span."""

    def __init__(self, message: str, level: Level = Level.ERROR, span: Span | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.level = level
        self.span = span

    def __str__(self) -> str:
        text = f"{self.level.value}: {self.message}"
        if self.span is not None:
            text += f" (at {self.span})"
        return text


class CyclicDependencyError(BindgenError):
    """Two or more headers need each other's types.

    :param cycle: The offending edges as ``(producer, consumer)`` header pairs.
    """

    def __init__(self, cycle: list[tuple[str, str]]) -> None:
        path = " -> ".join([edge[0] for edge in cycle] + [cycle[0][0]]) if cycle else "?"
        super().__init__(f"cyclic dependency between headers: {path}")
        self.cycle = cycle
