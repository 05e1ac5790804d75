"""Model descriptors and the records built from them.

A :class:`ModelDescriptor` is the typed, inspectable declaration of a model:
its attributes, its to-many associations and the validation rules attached to
them. Descriptors are immutable; the ``validates_*`` builders return a new
descriptor.

Example:
    >>> parent = define_model(
    ...     "parent", associations={"children": "has_many"}
    ... ).validates_presence_of("children")
    >>> record = parent.new()
    >>> record.is_valid()
    False
    >>> record.errors.on("children")
    ("can't be blank",)
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from validation_matchers.i18n import Translations
from validation_matchers.models import (
    AssociationSpec,
    AssociationTypeError,
    AttributeSpec,
    AttributeType,
    UnknownAttributeError,
)
from validation_matchers.validations import (
    ErrorCollection,
    FormatRule,
    PresenceRule,
    ValidationRule,
    run_validations,
)

logger = logging.getLogger("validation_matchers.records")


class ModelDescriptor(BaseModel):
    """Immutable declaration of a model's shape and validation rules."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        pattern=r"^[a-z_][a-z0-9_]*$",
        description="Model name in snake_case (e.g., 'example', 'line_item')",
    )
    attributes: Tuple[AttributeSpec, ...] = Field(
        default=(),
        description="Declared attributes in declaration order",
    )
    associations: Tuple[AssociationSpec, ...] = Field(
        default=(),
        description="Declared to-many associations in declaration order",
    )
    validations: Tuple[ValidationRule, ...] = Field(
        default=(),
        description="Validation rules in the order they run",
    )

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def _check_names(self) -> "ModelDescriptor":
        names = [a.name for a in self.attributes] + [a.name for a in self.associations]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"duplicate attribute/association names: {duplicates}")
        declared = set(names)
        for rule in self.validations:
            if rule.attribute not in declared:
                raise ValueError(
                    f"{rule.kind} rule references undeclared name {rule.attribute!r}"
                )
        return self

    def __repr__(self) -> str:
        return (
            f"ModelDescriptor(name={self.name}, "
            f"attributes={[a.name for a in self.attributes]}, "
            f"associations={[a.name for a in self.associations]}, "
            f"validations={len(self.validations)})"
        )

    def attribute(self, name: str) -> Optional[AttributeSpec]:
        for spec in self.attributes:
            if spec.name == name:
                return spec
        return None

    def association(self, name: str) -> Optional[AssociationSpec]:
        for spec in self.associations:
            if spec.name == name:
                return spec
        return None

    def declares(self, name: str) -> bool:
        return self.attribute(name) is not None or self.association(name) is not None

    def rules_for(self, name: str) -> Tuple[Union[PresenceRule, FormatRule], ...]:
        """Rules declared on *name*, in declaration order."""
        return tuple(rule for rule in self.validations if rule.attribute == name)

    def with_rules(self, *rules: Union[PresenceRule, FormatRule]) -> "ModelDescriptor":
        """Return a copy with *rules* appended."""
        return ModelDescriptor(
            name=self.name,
            attributes=self.attributes,
            associations=self.associations,
            validations=self.validations + tuple(rules),
        )

    def validates_presence_of(
        self, *names: str, message: Optional[str] = None
    ) -> "ModelDescriptor":
        return self.with_rules(
            *(PresenceRule(attribute=name, message=message) for name in names)
        )

    def validates_format_of(
        self,
        name: str,
        pattern: str,
        *,
        message: Optional[str] = None,
        allow_nil: bool = False,
        allow_blank: bool = False,
    ) -> "ModelDescriptor":
        return self.with_rules(
            FormatRule(
                attribute=name,
                pattern=pattern,
                message=message,
                allow_nil=allow_nil,
                allow_blank=allow_blank,
            )
        )

    def new(self, **values: Any) -> "Record":
        return Record(self, **values)


def define_model(
    name: str,
    attributes: Optional[Mapping[str, Union[str, AttributeType]]] = None,
    associations: Optional[Mapping[str, Any]] = None,
) -> ModelDescriptor:
    """Build a descriptor from plain mappings.

    Args:
        name: Model name.
        attributes: Attribute name to type, e.g. ``{"attr": "string"}``.
        associations: Association name to kind (``"has_many"``), or to a
            mapping of :class:`AssociationSpec` fields such as
            ``{"kind": "has_many", "target": "child"}``.
    """
    attribute_specs = tuple(
        AttributeSpec(name=attr, type=attr_type)
        for attr, attr_type in (attributes or {}).items()
    )
    association_specs: List[AssociationSpec] = []
    for assoc, options in (associations or {}).items():
        if isinstance(options, Mapping):
            association_specs.append(AssociationSpec(name=assoc, **options))
        else:
            association_specs.append(AssociationSpec(name=assoc, kind=options))
    return ModelDescriptor(
        name=name,
        attributes=attribute_specs,
        associations=tuple(association_specs),
    )


class Record:
    """An instance of a model: attribute values, associated records, errors.

    Attribute values are coerced to their declared type on assignment.
    Associations are plain lists owned by the record.
    """

    __slots__ = ("_descriptor", "_values", "_associations", "_errors")

    def __init__(self, descriptor: ModelDescriptor, **values: Any) -> None:
        object.__setattr__(self, "_descriptor", descriptor)
        object.__setattr__(self, "_values", {a.name: None for a in descriptor.attributes})
        object.__setattr__(
            self, "_associations", {a.name: [] for a in descriptor.associations}
        )
        object.__setattr__(self, "_errors", ErrorCollection())
        for name, value in values.items():
            self.write(name, value)

    def __repr__(self) -> str:
        return f"Record({self.model_name}, {self._values!r})"

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.read(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in Record.__slots__:
            object.__setattr__(self, name, value)
            return
        self.write(name, value)

    def __copy__(self) -> "Record":
        """Copy values and association lists; errors start empty."""
        duplicate = Record(self._descriptor)
        duplicate._values.update(self._values)
        for name, related in self._associations.items():
            duplicate._associations[name] = list(related)
        return duplicate

    @property
    def descriptor(self) -> ModelDescriptor:
        return self._descriptor

    @property
    def model_name(self) -> str:
        return self._descriptor.name

    @property
    def errors(self) -> ErrorCollection:
        """Errors from the most recent :meth:`validate` call."""
        return self._errors

    def read(self, name: str) -> Any:
        if name in self._values:
            return self._values[name]
        if name in self._associations:
            return self._associations[name]
        raise UnknownAttributeError(self.model_name, name)

    def write(self, name: str, value: Any) -> None:
        spec = self._descriptor.attribute(name)
        if spec is not None:
            self._values[name] = spec.coerce(value)
            return
        assoc = self._descriptor.association(name)
        if assoc is not None:
            related = list(value or ())
            for item in related:
                self._check_associated(assoc, item)
            self._associations[name] = related
            return
        raise UnknownAttributeError(self.model_name, name)

    def associate(self, name: str, *records: "Record") -> None:
        """Append *records* to association *name*."""
        assoc = self._descriptor.association(name)
        if assoc is None:
            raise UnknownAttributeError(self.model_name, name)
        for item in records:
            self._check_associated(assoc, item)
        self._associations[name].extend(records)
        logger.debug(
            "Associated %d record(s) with %s.%s", len(records), self.model_name, name
        )

    def _check_associated(self, assoc: AssociationSpec, item: object) -> None:
        if not isinstance(item, Record):
            raise AssociationTypeError(
                f"{self.model_name}.{assoc.name} holds records; "
                f"got {type(item).__name__}"
            )
        if assoc.target is not None and item.model_name != assoc.target:
            raise AssociationTypeError(
                f"{self.model_name}.{assoc.name} holds {assoc.target!r} records; "
                f"got {item.model_name!r}"
            )

    def validate(self, translations: Optional[Translations] = None) -> ErrorCollection:
        """Run every declared rule and return the repopulated :attr:`errors`."""
        run_validations(
            self,
            self._descriptor.validations,
            translations if translations is not None else Translations(),
            self._errors,
        )
        return self._errors

    def is_valid(self, translations: Optional[Translations] = None) -> bool:
        return not self.validate(translations)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self._values)
        for name, related in self._associations.items():
            data[name] = [item.to_dict() for item in related]
        return data
