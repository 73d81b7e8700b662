"""Test-support tooling for realm SDK test suites."""

from realm_testkit.assertions import TestFailureError, expect
from realm_testkit.controller import RemoteController

__all__ = ["RemoteController", "TestFailureError", "expect"]
