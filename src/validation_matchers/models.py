"""Core data models for validation-matchers."""
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

_PYTHON_TYPES: Dict[str, Type[Any]] = {
    "string": str,
    "text": str,
    "integer": int,
    "float": float,
    "boolean": bool,
}


class AttributeType(str, Enum):
    """Primitive column types a model attribute can be declared with."""

    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"

    @property
    def python_type(self) -> Type[Any]:
        return _PYTHON_TYPES[self.value]


# Built once per type; shared by every AttributeSpec
_ADAPTERS: Dict[AttributeType, TypeAdapter[Any]] = {
    attr_type: TypeAdapter(
        attr_type.python_type, config=ConfigDict(coerce_numbers_to_str=True)
    )
    for attr_type in AttributeType
}


class AssociationKind(str, Enum):
    """To-many association kinds. Both hold an ordered list of records."""

    HAS_MANY = "has_many"
    HAS_AND_BELONGS_TO_MANY = "has_and_belongs_to_many"


class AttributeSpec(BaseModel):
    """A declared attribute of a model."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        pattern=r"^[a-z_][a-z0-9_]*$",
        description="Attribute name (snake_case identifier)",
    )
    type: AttributeType = Field(
        default=AttributeType.STRING,
        description="Primitive type values are coerced to",
    )

    def coerce(self, value: object) -> Any:
        """Coerce *value* to the declared type. ``None`` is always allowed.

        Numbers assigned to string attributes are converted to strings.

        Raises:
            pydantic.ValidationError: If the value cannot be coerced.
        """
        if value is None:
            return None
        return _ADAPTERS[self.type].validate_python(value)


class AssociationSpec(BaseModel):
    """A declared to-many association of a model."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        pattern=r"^[a-z_][a-z0-9_]*$",
        description="Association name (e.g., 'children')",
    )
    kind: AssociationKind = Field(
        default=AssociationKind.HAS_MANY,
        description="Association kind",
    )
    target: Optional[str] = Field(
        None,
        min_length=1,
        description="Name of the associated model; None accepts any record",
    )

    @field_validator("target", mode="before")
    @classmethod
    def _normalize_target(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().lower()
        return v


# Custom Exceptions
class ValidationMatchersError(Exception):
    """Base exception for all library errors."""
    pass


class UnknownAttributeError(ValidationMatchersError, AttributeError):
    """A record was asked for a name its model does not declare."""

    def __init__(self, model: str, name: str) -> None:
        super().__init__(
            f"{model!r} has no attribute or association {name!r}", name=name
        )
        self.model = model


class AssociationTypeError(ValidationMatchersError, TypeError):
    """A record of the wrong model was added to an association."""
    pass


class TranslationError(ValidationMatchersError):
    """Base class for localization failures."""
    pass


class MissingTranslationError(TranslationError):
    """No translation exists for any of the candidate keys."""

    def __init__(self, locale: str, keys: Tuple[str, ...]) -> None:
        self.locale = locale
        self.keys = keys
        super().__init__(
            f"Translation missing for locale {locale!r}: tried {list(keys)}"
        )


class MissingInterpolationError(TranslationError):
    """A template references a placeholder no value was supplied for."""

    def __init__(self, token: str, template: str) -> None:
        self.token = token
        self.template = template
        super().__init__(
            f"Missing interpolation argument {token!r} in {template!r}"
        )


class LocaleFileError(ValidationMatchersError):
    """A locale file could not be read or failed schema validation."""
    pass
