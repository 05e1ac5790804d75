"""Reusable assertion helpers for matcher-based tests.

    from validation_matchers.pytest_helpers import assert_accepts, assert_rejects

    assert_accepts(validate_presence_of("attr"), record)
"""
from __future__ import annotations

from validation_matchers.matchers import ValidatePresenceOfMatcher
from validation_matchers.records import Record


def assert_accepts(matcher: ValidatePresenceOfMatcher, record: Record) -> None:
    """Assert *matcher* matches *record*."""
    evaluation = matcher.evaluate(record)
    if not evaluation.matched:
        raise AssertionError(
            f"{record.model_name} should {matcher.description}:\n"
            f"  {matcher.failure_message(record)}"
        )


def assert_rejects(matcher: ValidatePresenceOfMatcher, record: Record) -> None:
    """Assert *matcher* does NOT match *record*."""
    evaluation = matcher.evaluate(record)
    if evaluation.matched:
        raise AssertionError(
            f"{record.model_name} should not {matcher.description}:\n"
            f"  {matcher.negative_failure_message(record)}"
        )
