"""Assertion helpers for SDK tests."""

from realm_testkit.assertions.base import (
    LocationResolver,
    NullLocationResolver,
    SourceLocation,
    StackLocationResolver,
    TestFailureError,
    capture_failures,
    capture_stack,
    set_failure_sink,
)
from realm_testkit.assertions.checks import (
    assert_array,
    assert_array_length,
    assert_arrays_equal,
    assert_defined,
    assert_equal,
    assert_equal_with_tolerance,
    assert_false,
    assert_instance_of,
    assert_not_equal,
    assert_null,
    assert_similar,
    assert_throws,
    assert_throws_containing,
    assert_throws_exception,
    assert_true,
    assert_type,
    assert_undefined,
    is_node,
    is_node6,
    type_tag,
)
from realm_testkit.assertions.expect import UNDEFINED, Expectation, expect
from realm_testkit.assertions.kinds import TypedList, ValueKind

__all__ = [
    "UNDEFINED",
    "Expectation",
    "LocationResolver",
    "NullLocationResolver",
    "SourceLocation",
    "StackLocationResolver",
    "TestFailureError",
    "TypedList",
    "ValueKind",
    "assert_array",
    "assert_array_length",
    "assert_arrays_equal",
    "assert_defined",
    "assert_equal",
    "assert_equal_with_tolerance",
    "assert_false",
    "assert_instance_of",
    "assert_not_equal",
    "assert_null",
    "assert_similar",
    "assert_throws",
    "assert_throws_containing",
    "assert_throws_exception",
    "assert_true",
    "assert_type",
    "assert_undefined",
    "capture_failures",
    "capture_stack",
    "expect",
    "is_node",
    "is_node6",
    "set_failure_sink",
    "type_tag",
]
