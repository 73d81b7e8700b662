"""Typed assertion helpers for SDK tests.

Every helper raises TestFailureError (after reporting the message to the
failure sink) when its condition does not hold. ``error_message`` prefixes or
replaces the default message; ``depth`` is the number of extra stack frames
between the helper and the test code, used for the failure location.
"""

from __future__ import annotations

import importlib
import sys
from collections.abc import Callable, Sequence
from numbers import Real
from typing import Any

from realm_testkit.assertions.base import TestFailureError
from realm_testkit.assertions.expect import UNDEFINED, Expectation, expect
from realm_testkit.assertions.kinds import (
    FLOAT_TOLERANCE,
    ValueKind,
    element_comparator,
    epoch,
    object_field,
    object_keys,
)


def _expect(value: Any, error_message: str | None, depth: int) -> Expectation:
    # One extra frame for the assert_* helper itself.
    return expect(value, error_message, depth=depth + 1)


def _with_prefix(error_message: str | None, message: str) -> str:
    return f"{error_message} - {message}" if error_message else message


# --- assert_similar ---


def _similar_float(val1, val2, error_message, depth):
    assert_equal_with_tolerance(val1, val2, FLOAT_TOLERANCE, error_message, depth + 1)


def _similar_data(val1, val2, error_message, depth):
    assert_arrays_equal(
        bytes(val1) if val1 is not None else None, val2, error_message, depth + 1
    )


def _similar_date(val1, val2, error_message, depth):
    assert_equal(epoch(val1), epoch(val2), error_message, depth + 1)


def _similar_object(val1, val2, error_message, depth):
    for key in object_keys(val1):
        message = f"{error_message}: {key}" if error_message else key
        assert_equal(object_field(val1, key), object_field(val2, key), message, depth + 1)


def _similar_list(val1, val2, error_message, depth):
    assert_arrays_equal(val1, val2, error_message, depth + 1)


def _similar_default(val1, val2, error_message, depth):
    assert_equal(val1, val2, error_message, depth + 1)


_SIMILAR_CHECKS: dict[ValueKind, Callable[[Any, Any, str | None, int], None]] = {
    ValueKind.FLOAT: _similar_float,
    ValueKind.DOUBLE: _similar_float,
    ValueKind.DATA: _similar_data,
    ValueKind.DATE: _similar_date,
    ValueKind.OBJECT: _similar_object,
    ValueKind.LIST: _similar_list,
    ValueKind.DEFAULT: _similar_default,
}


def assert_similar(
    type: str, val1: Any, val2: Any, error_message: str | None = None, depth: int = 0
) -> None:
    """Compare ``val1`` with ``val2`` the way a property of ``type`` compares.

    ``type`` is a property type tag (``"double?"``, ``"date"``, ...). When
    ``val2`` is None, ``val1`` must be None whatever the type.
    """
    assert_defined(type, depth=depth + 1)
    if val2 is None:
        assert_null(val1, error_message, depth + 1)
        return
    _SIMILAR_CHECKS[ValueKind.parse(type)](val1, val2, error_message, depth + 1)


# --- equality ---


def assert_equal(val1: Any, val2: Any, error_message: str | None = None, depth: int = 0) -> None:
    _expect(val1, error_message, depth).to_equal(val2)


def assert_not_equal(
    val1: Any, val2: Any, error_message: str | None = None, depth: int = 0
) -> None:
    _expect(val1, error_message, depth).not_.to_equal(val2)


def assert_equal_with_tolerance(
    val1: float,
    val2: float,
    tolerance: float,
    error_message: str | None = None,
    depth: int = 0,
) -> None:
    _expect(val1, error_message, depth).to_be_close_to(val2, tolerance)


# --- sequences ---


def _is_array(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(
        value, (str, bytes, bytearray)
    )


def assert_array(value: Any, error_message: str | None = None, depth: int = 0) -> None:
    if not _is_array(value):
        raise TestFailureError(error_message or f"Value {value} is not an array", depth)


def assert_array_length(
    value: Any, length: int, error_message: str | None = None, depth: int = 0
) -> None:
    assert_array(value, depth=depth + 1)
    if len(value) != length:
        raise TestFailureError(
            error_message or f"Value {value} is not an array of length {length}", depth
        )


def assert_arrays_equal(
    val1: Any, val2: Any, error_message: str | None = None, depth: int = 0
) -> None:
    """Compare two sequences element by element.

    The element comparison follows ``val1.type`` when ``val1`` is a
    TypedList: bytes for ``data``, instants for ``date``, a 1e-6 tolerance
    for ``float``/``double`` and per-key equality for ``object``.
    """
    for name, value in (("val1", val1), ("val2", val2)):
        if value is None or value is UNDEFINED:
            raise TestFailureError(f"{name} should be non-null but is {value}", depth)

    len1 = len(val1)
    len2 = len(val2)
    if len1 != len2:
        message = f"Arrays ({val1}) and ({val2}) have different lengths ({len1} != {len2})"
        raise TestFailureError(_with_prefix(error_message, message), depth)

    compare = element_comparator(val1)
    for i, (a, b) in enumerate(zip(val1, val2)):
        if not compare(a, b):
            message = f"Array contents not equal at index {i} ({a} != {b})"
            raise TestFailureError(_with_prefix(error_message, message), depth)


# --- exceptions ---


def assert_throws(
    func: Callable[[], Any], error_message: str | None = None, depth: int = 0
) -> None:
    _expect(func, error_message, depth).to_throw()


def assert_throws_exception(
    func: Callable[[], Any],
    expected_exception: type[BaseException] | BaseException,
    depth: int = 0,
) -> None:
    _expect(func, None, depth).to_throw(expected_exception)


def assert_throws_containing(
    func: Callable[[], Any], expected_message: str, depth: int = 0
) -> None:
    _expect(func, None, depth).to_throw_error(Exception, expected_message)


# --- truthiness, presence and types ---


def assert_true(condition: Any, error_message: str | None = None, depth: int = 0) -> None:
    _expect(condition, error_message, depth).to_be_truthy()


def assert_false(condition: Any, error_message: str | None = None, depth: int = 0) -> None:
    _expect(condition, error_message, depth).to_be_falsy()


def assert_instance_of(
    obj: Any, type: type | tuple[type, ...], error_message: str | None = None, depth: int = 0
) -> None:
    if not isinstance(obj, type):
        raise TestFailureError(
            error_message or f"Object {obj} expected to be of type {type}", depth
        )


def type_tag(value: Any) -> str:
    """Primitive type tag of a value: undefined, boolean, number, string, function or object."""
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, Real):
        return "number"
    if isinstance(value, str):
        return "string"
    if callable(value):
        return "function"
    return "object"


def assert_type(value: Any, type: str, depth: int = 0) -> None:
    if type_tag(value) != type:
        raise TestFailureError(f"Value {value} expected to be of type {type}", depth)


def assert_defined(value: Any, error_message: str | None = None, depth: int = 0) -> None:
    _expect(value, error_message, depth).to_be_defined()


def assert_undefined(value: Any, error_message: str | None = None, depth: int = 0) -> None:
    _expect(value, error_message, depth).to_be_undefined()


def assert_null(value: Any, error_message: str | None = None, depth: int = 0) -> None:
    _expect(value, error_message, depth).to_be(None)


# --- environment ---


def _host_process() -> Any:
    """The Node.js ``process`` object when running on a JS host such as Pyodide."""
    js = sys.modules.get("js")
    if js is None and sys.platform == "emscripten":
        js = importlib.import_module("js")
    return getattr(js, "process", None)


def is_node() -> bool:
    process = _host_process()
    release = getattr(process, "release", None)
    return getattr(release, "name", None) == "node"


def is_node6() -> bool:
    return is_node() and str(_host_process().version).startswith("v6.")
