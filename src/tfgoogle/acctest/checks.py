"""
State check functions for acceptance test steps.

Every check factory returns a callable taking the flattened state
({address: {key: value}}) and raising AssertionError on mismatch.

Usage:
    check = compose_test_check_func(
        check_resource_attr("google_alloydb_backup.default", "state", "READY"),
        check_resource_attr_set("google_alloydb_backup.default", "uid"),
    )
"""

from typing import Callable

from .state import FlatState, resource_attributes

CheckFunc = Callable[[FlatState], None]


def check_resource_attr(address: str, key: str, value: str) -> CheckFunc:
    def _check(state: FlatState) -> None:
        attributes = resource_attributes(state, address)
        # An empty collection is stored without a count in state
        if value == "0" and (key.endswith(".#") or key.endswith(".%")) and key not in attributes:
            return
        actual = attributes.get(key)
        if actual is None:
            raise AssertionError(f"{address}: Attribute '{key}' not found")
        if actual != value:
            raise AssertionError(f"{address}: Attribute '{key}' expected {value!r}, got {actual!r}")
    return _check


def check_resource_attr_set(address: str, key: str) -> CheckFunc:
    def _check(state: FlatState) -> None:
        attributes = resource_attributes(state, address)
        if not attributes.get(key):
            raise AssertionError(f"{address}: Attribute '{key}' expected to be set")
    return _check


def check_no_resource_attr(address: str, key: str) -> CheckFunc:
    def _check(state: FlatState) -> None:
        attributes = resource_attributes(state, address)
        if key in attributes and not (key.endswith((".#", ".%")) and attributes[key] == "0"):
            raise AssertionError(f"{address}: Attribute '{key}' found when not expected: {attributes[key]!r}")
    return _check


def check_resource_attr_pair(address_first: str, key_first: str, address_second: str, key_second: str) -> CheckFunc:
    def _check(state: FlatState) -> None:
        first = resource_attributes(state, address_first).get(key_first)
        second = resource_attributes(state, address_second).get(key_second)
        if first != second:
            raise AssertionError(
                f"{address_first}: Attribute '{key_first}' expected {second!r} "
                f"(from {address_second}.{key_second}), got {first!r}"
            )
    return _check


def compose_test_check_func(*checks: CheckFunc) -> CheckFunc:
    """Run checks in order, stopping at the first failure."""
    def _check(state: FlatState) -> None:
        for index, check in enumerate(checks):
            try:
                check(state)
            except AssertionError as e:
                raise AssertionError(f"Check {index + 1}/{len(checks)} error: {e}") from e
    return _check
