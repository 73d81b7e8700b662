"""Fluent expectation primitive the assertion helpers are built on."""

from __future__ import annotations

from typing import Any

from realm_testkit.assertions.base import TestFailureError


class _Undefined:
    """Marker for a value that is absent altogether (as opposed to None)."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined()

# _check() and the matcher method sit between _fail() and the caller.
_MATCHER_FRAMES = 2


class Expectation:
    """Wraps a value under test; each matcher raises TestFailureError on mismatch."""

    def __init__(
        self,
        actual: Any,
        *,
        context: str | None = None,
        negated: bool = False,
        depth: int = 0,
    ) -> None:
        self.actual = actual
        self.context = context
        self.negated = negated
        self.depth = depth

    def with_context(self, context: str) -> Expectation:
        return Expectation(
            self.actual, context=context, negated=self.negated, depth=self.depth
        )

    @property
    def not_(self) -> Expectation:
        return Expectation(
            self.actual, context=self.context, negated=not self.negated, depth=self.depth
        )

    def _check(self, passed: bool, description: str) -> None:
        if passed == self.negated:
            self._fail(description)

    def _fail(self, description: str) -> None:
        verb = "not " if self.negated else ""
        message = f"Expected {self.actual!r} {verb}{description}."
        if self.context:
            message = f"{self.context}: {message}"
        raise TestFailureError(message, self.depth + _MATCHER_FRAMES)

    def to_equal(self, expected: Any) -> None:
        self._check(self.actual == expected, f"to equal {expected!r}")

    def to_be(self, expected: Any) -> None:
        self._check(self.actual is expected, f"to be {expected!r}")

    def to_be_close_to(self, expected: float | None, tolerance: float) -> None:
        if self.actual is None or expected is None:
            passed = False
        else:
            passed = abs(self.actual - expected) <= tolerance
        self._check(passed, f"to be close to {expected!r} (tolerance {tolerance!r})")

    def to_be_truthy(self) -> None:
        self._check(bool(self.actual), "to be truthy")

    def to_be_falsy(self) -> None:
        self._check(not self.actual, "to be falsy")

    def to_be_defined(self) -> None:
        self._check(self.actual is not UNDEFINED, "to be defined")

    def to_be_undefined(self) -> None:
        self._check(self.actual is UNDEFINED, "to be undefined")

    def _call(self) -> BaseException | None:
        if not callable(self.actual):
            raise TypeError(f"Expected a callable, got {self.actual!r}")
        try:
            self.actual()
        except Exception as e:
            return e
        return None

    def to_throw(self, expected: type[BaseException] | BaseException | None = None) -> None:
        """Pass if calling the value raises.

        ``expected`` narrows the match: an exception class must match by
        isinstance, an exception instance by type and message.
        """
        error = self._call()
        if expected is None:
            self._check(error is not None, "to throw an exception")
        elif isinstance(expected, type):
            self._check(isinstance(error, expected), f"to throw {expected.__name__}")
        else:
            passed = type(error) is type(expected) and str(error) == str(expected)
            self._check(passed, f"to throw {expected!r}")

    def to_throw_error(
        self, error_type: type[BaseException] = Exception, message: str | None = None
    ) -> None:
        """Pass if calling the value raises ``error_type`` whose message contains ``message``."""
        error = self._call()
        passed = isinstance(error, error_type) and (
            message is None or message in str(error)
        )
        description = f"to throw {error_type.__name__}"
        if message is not None:
            description = f"{description} containing {message!r}"
        if error is not None:
            description = f"{description}, but it threw {error!r}"
        self._check(passed, description)


def expect(actual: Any, context: str | None = None, *, depth: int = 0) -> Expectation:
    """Start an expectation on ``actual``; ``context`` prefixes failure messages."""
    return Expectation(actual, context=context or None, depth=depth)
