"""Declarative validation rules and the error collection they populate."""
from __future__ import annotations

import logging
import re
from collections.abc import Collection
from typing import (
    TYPE_CHECKING,
    Annotated,
    Dict,
    Iterator,
    List,
    Literal,
    Optional,
    Tuple,
    Union,
)

from pydantic import BaseModel, ConfigDict, Field, field_validator

from validation_matchers.i18n import Translations

if TYPE_CHECKING:
    from validation_matchers.records import Record

logger = logging.getLogger("validation_matchers.validations")


def is_blank(value: object) -> bool:
    """Return True for None, False, whitespace-only strings and empty collections."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Collection):
        return len(value) == 0
    return False


class ErrorCollection:
    """Error messages produced by a validation pass, keyed by name.

    Names keep the order in which their first error was added, and each
    name's messages keep insertion order.
    """

    def __init__(self) -> None:
        self._messages: Dict[str, List[str]] = {}

    def __repr__(self) -> str:
        return f"ErrorCollection({self.to_dict()!r})"

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())

    def __bool__(self) -> bool:
        return len(self) > 0

    def __contains__(self, name: object) -> bool:
        return name in self._messages

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        for name, messages in self._messages.items():
            for message in messages:
                yield name, message

    def add(self, name: str, message: str) -> None:
        self._messages.setdefault(name, []).append(message)

    def on(self, name: str) -> Tuple[str, ...]:
        """Messages recorded for *name*; empty when there are none."""
        return tuple(self._messages.get(name, ()))

    def clear(self) -> None:
        self._messages.clear()

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(messages) for name, messages in self._messages.items()}


class ValidationRuleBase(BaseModel):
    """Common fields for rules declared on a model.

    Not intended to be instantiated directly; use PresenceRule or FormatRule.
    """

    model_config = ConfigDict(frozen=True)

    attribute: str = Field(
        ...,
        min_length=1,
        description="Attribute or association the rule applies to",
    )
    message: Optional[str] = Field(
        None,
        description="Custom message template replacing the translated default",
    )

    def _add_error(
        self,
        record: "Record",
        translations: Translations,
        errors: ErrorCollection,
        key: str,
        value: object,
    ) -> None:
        errors.add(
            self.attribute,
            translations.generate_message(
                record.model_name,
                self.attribute,
                key,
                value=value,
                message=self.message,
            ),
        )


class PresenceRule(ValidationRuleBase):
    """The attribute or association must not be blank."""

    kind: Literal["presence"] = "presence"

    def apply(
        self, record: "Record", translations: Translations, errors: ErrorCollection
    ) -> None:
        value = record.read(self.attribute)
        if is_blank(value):
            self._add_error(record, translations, errors, "blank", value)


class FormatRule(ValidationRuleBase):
    """The string form of the value must match ``pattern``.

    ``None`` is checked as the empty string unless ``allow_nil`` is set.
    """

    kind: Literal["format"] = "format"
    pattern: str = Field(..., description="Regular expression searched for")
    allow_nil: bool = False
    allow_blank: bool = False

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"pattern is not a valid regular expression: {e}") from e
        return v

    def apply(
        self, record: "Record", translations: Translations, errors: ErrorCollection
    ) -> None:
        value = record.read(self.attribute)
        if value is None and self.allow_nil:
            return
        if self.allow_blank and is_blank(value):
            return
        text = "" if value is None else str(value)
        if re.search(self.pattern, text) is None:
            self._add_error(record, translations, errors, "invalid", value)


ValidationRule = Annotated[
    Union[PresenceRule, FormatRule],
    Field(discriminator="kind"),
]


def run_validations(
    record: "Record",
    rules: Tuple[Union[PresenceRule, FormatRule], ...],
    translations: Translations,
    errors: ErrorCollection,
) -> None:
    """Clear *errors* and apply every rule to *record* in declaration order."""
    errors.clear()
    for rule in rules:
        rule.apply(record, translations, errors)
    logger.debug(
        "Validated %s: %d error(s) over %d rule(s)",
        record.model_name,
        len(errors),
        len(rules),
    )
