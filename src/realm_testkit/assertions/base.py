"""Failure signalling for the assertion helpers."""

from __future__ import annotations

import inspect
import logging
import re
import traceback
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger("realm_testkit.assertions")

FailureSink = Callable[[str], None]

# Matches "name@file:line:column" and "file:line:column" stack lines.
_FRAME_RE = re.compile(r"^(?:.*?@)?([^[(].+?):(\d+)(?::(\d+))?\s*$")

# Frames between the failing check and TestFailureError.__init__.
_BASE_FRAME_INDEX = 2


def _log_failure(message: str) -> None:
    logger.error(f"Assertion failed: {message}")


_failure_sink: FailureSink = _log_failure


def set_failure_sink(sink: FailureSink | None) -> FailureSink:
    """Install the runner's failure sink and return the previous one.

    Passing None restores the default sink, which logs failures.
    """
    global _failure_sink
    previous = _failure_sink
    _failure_sink = sink or _log_failure
    return previous


@contextmanager
def capture_failures() -> Iterator[list[str]]:
    """Collect every reported failure message while the block runs."""
    messages: list[str] = []
    previous = set_failure_sink(messages.append)
    try:
        yield messages
    finally:
        set_failure_sink(previous)


@dataclass(frozen=True)
class SourceLocation:
    source_file: str
    line: int
    column: int | None
    stack_text: str


class LocationResolver(Protocol):
    def resolve(
        self, stack: list[traceback.FrameSummary], index: int
    ) -> SourceLocation | None: ...


def format_frame(frame: traceback.FrameSummary) -> str:
    text = f"{frame.name}@{frame.filename}:{frame.lineno}"
    colno = getattr(frame, "colno", None)
    if colno is not None:
        text = f"{text}:{colno + 1}"
    return text


def capture_stack() -> list[traceback.FrameSummary]:
    """Frames of the current call stack, innermost first, with column positions.

    The frame of capture_stack() itself is excluded.
    """
    stack = []
    for info in inspect.stack(context=0)[1:]:
        positions = info.positions
        stack.append(
            traceback.FrameSummary(
                info.filename,
                info.lineno,
                info.function,
                lookup_line=False,
                colno=positions.col_offset if positions else None,
            )
        )
    return stack


class StackLocationResolver:
    """Pick the frame at ``index`` (innermost first) and parse its location."""

    def resolve(
        self, stack: list[traceback.FrameSummary], index: int
    ) -> SourceLocation | None:
        if index >= len(stack):
            return None
        lines = [format_frame(frame) for frame in stack]
        match = _FRAME_RE.match(lines[index])
        if not match:
            return None
        return SourceLocation(
            source_file=match.group(1),
            line=int(match.group(2)),
            column=int(match.group(3)) if match.group(3) else None,
            stack_text="\n".join(lines[index:]),
        )


class NullLocationResolver:
    def resolve(
        self, stack: list[traceback.FrameSummary], index: int
    ) -> SourceLocation | None:
        return None


class TestFailureError(AssertionError):
    """A failed check.

    The message is reported to the active failure sink as soon as the error
    is built. ``source_file``, ``line``, ``column`` and ``stack_text`` point
    at the caller of the failing check when the stack allows it and are
    None otherwise. ``depth`` skips that many extra frames for checks that
    delegate to other checks.
    """

    __test__ = False

    location_resolver: LocationResolver = StackLocationResolver()

    def __init__(self, message: str, depth: int = 0) -> None:
        super().__init__(message)
        self.message = message
        _failure_sink(message)

        stack = capture_stack()
        location = self.location_resolver.resolve(
            stack, _BASE_FRAME_INDEX + (depth or 0)
        )
        self.source_file = location.source_file if location else None
        self.line = location.line if location else None
        self.column = location.column if location else None
        self.stack_text = location.stack_text if location else None
