"""Matchers asserting that a model declares a validation rule.

The matchers are PyHamcrest matchers, so they work with ``assert_that`` as
well as with :mod:`validation_matchers.pytest_helpers`:

    >>> from hamcrest import assert_that
    >>> assert_that(record, validate_presence_of("attr"))
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from hamcrest.core.base_matcher import BaseMatcher
from hamcrest.core.description import Description

from validation_matchers.i18n import Translations
from validation_matchers.models import TranslationError
from validation_matchers.records import Record

logger = logging.getLogger("validation_matchers.matchers")

ExpectedMessage = Union[str, "re.Pattern[str]"]


@dataclass(frozen=True)
class PresenceEvaluation:
    """Outcome of evaluating a presence matcher against one record."""

    matched: bool
    expected: Optional[ExpectedMessage]
    actual: Tuple[str, ...]
    error: Optional[TranslationError] = None

    @property
    def expected_text(self) -> str:
        if isinstance(self.expected, re.Pattern):
            return f"/{self.expected.pattern}/"
        return repr(self.expected)


class ValidatePresenceOfMatcher(BaseMatcher[Record]):
    """Matches records whose validation reports *attribute* as blank.

    The record is validated as it is; the matcher never assigns values. It
    matches when the errors on *attribute* contain the expected message:
    the :meth:`with_message` override if one is set, otherwise the
    ``blank`` message resolved through the translation context.
    """

    def __init__(
        self, attribute: str, translations: Optional[Translations] = None
    ) -> None:
        self.attribute = attribute
        self._translations = translations
        self._message: Optional[ExpectedMessage] = None

    def __repr__(self) -> str:
        return (
            f"ValidatePresenceOfMatcher(attribute={self.attribute!r}, "
            f"message={self._message!r})"
        )

    def with_message(self, message: Optional[ExpectedMessage]) -> "ValidatePresenceOfMatcher":
        """Expect *message* instead of the default; None restores the default."""
        self._message = message
        return self

    @property
    def description(self) -> str:
        return f"require {self.attribute} to be set"

    def expected_message(
        self, record: Record, translations: Translations
    ) -> ExpectedMessage:
        if self._message is not None:
            return self._message
        return translations.generate_message(
            record.model_name,
            self.attribute,
            "blank",
            value=record.read(self.attribute),
        )

    def evaluate(self, record: Record) -> PresenceEvaluation:
        """Validate *record* and compare its errors on the target name."""
        translations = (
            self._translations if self._translations is not None else Translations()
        )
        try:
            errors = record.validate(translations)
            expected = self.expected_message(record, translations)
        except TranslationError as e:
            logger.warning(
                "Could not resolve messages for %s.%s: %s",
                record.model_name,
                self.attribute,
                e,
            )
            return PresenceEvaluation(
                matched=False, expected=self._message, actual=(), error=e
            )

        actual = errors.on(self.attribute)
        if isinstance(expected, re.Pattern):
            matched = any(expected.search(message) for message in actual)
        else:
            matched = expected in actual
        logger.debug(
            "%s on %s.%s: expected %r, got %r",
            "Matched" if matched else "No match",
            record.model_name,
            self.attribute,
            expected,
            actual,
        )
        return PresenceEvaluation(matched=matched, expected=expected, actual=actual)

    def _matches(self, item: Record) -> bool:
        return self.evaluate(item).matched

    def describe_to(self, description: Description) -> None:
        description.append_text(self.description)

    def describe_mismatch(self, item: Record, mismatch_description: Description) -> None:
        mismatch_description.append_text(self._explain(self.evaluate(item)))

    def failure_message(self, record: Record) -> str:
        """Message for an expected match that did not happen."""
        evaluation = self.evaluate(record)
        if evaluation.error is not None:
            return self._explain(evaluation)
        return (
            f"Expected errors to include {evaluation.expected_text} "
            f"when {self.attribute} is {record.read(self.attribute)!r}, "
            f"{self._explain(evaluation)}"
        )

    def negative_failure_message(self, record: Record) -> str:
        """Message for a match that was expected not to happen."""
        evaluation = self.evaluate(record)
        return (
            f"Did not expect errors to include {evaluation.expected_text} "
            f"when {self.attribute} is {record.read(self.attribute)!r}, "
            f"{self._explain(evaluation)}"
        )

    def _explain(self, evaluation: PresenceEvaluation) -> str:
        if evaluation.error is not None:
            return (
                f"could not resolve the expected message for "
                f"{self.attribute}: {evaluation.error}"
            )
        if not evaluation.actual:
            return f"got no errors on {self.attribute}"
        return f"got errors on {self.attribute}: {list(evaluation.actual)!r}"


def validate_presence_of(
    attribute: str, translations: Optional[Translations] = None
) -> ValidatePresenceOfMatcher:
    """Matcher for a presence validation on an attribute or association.

    Args:
        attribute: Attribute or association name.
        translations: Translation context used for both the record's
            validation pass and the expected message. A fresh default
            context is used when omitted.
    """
    return ValidatePresenceOfMatcher(attribute, translations)
