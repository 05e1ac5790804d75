"""
validation-matchers: Matchers asserting that models declare validation rules.

A model is described by a :class:`ModelDescriptor` (attributes, to-many
associations and validation rules). Matchers validate a record of that model
and inspect the resulting error messages, which are resolved through an
explicitly passed :class:`Translations` context.

Example:
    >>> from validation_matchers import define_model, validate_presence_of
    >>> example = define_model("example", {"attr": "string"})
    >>> required = example.validates_presence_of("attr")
    >>> validate_presence_of("attr").matches(required.new())
    True
    >>> validate_presence_of("attr").matches(example.new())
    False
"""

__version__ = "0.1.0"

# Core data models
from validation_matchers.models import (
    AttributeType,
    AssociationKind,
    AttributeSpec,
    AssociationSpec,
    ValidationMatchersError,
    UnknownAttributeError,
    AssociationTypeError,
    TranslationError,
    MissingTranslationError,
    MissingInterpolationError,
    LocaleFileError,
)

# Localization
from validation_matchers.i18n import (
    DEFAULT_LOCALE,
    DEFAULT_MESSAGES,
    DEFAULT_SCOPE,
    Translations,
    humanize,
    interpolate,
)

# Validation rules
from validation_matchers.validations import (
    ErrorCollection,
    FormatRule,
    PresenceRule,
    ValidationRule,
    is_blank,
)

# Model descriptors and records
from validation_matchers.records import (
    ModelDescriptor,
    Record,
    define_model,
)

# Matchers
from validation_matchers.matchers import (
    PresenceEvaluation,
    ValidatePresenceOfMatcher,
    validate_presence_of,
)

__all__ = [
    # Core data models
    "AttributeType",
    "AssociationKind",
    "AttributeSpec",
    "AssociationSpec",
    "ValidationMatchersError",
    "UnknownAttributeError",
    "AssociationTypeError",
    "TranslationError",
    "MissingTranslationError",
    "MissingInterpolationError",
    "LocaleFileError",
    # Localization
    "DEFAULT_LOCALE",
    "DEFAULT_MESSAGES",
    "DEFAULT_SCOPE",
    "Translations",
    "humanize",
    "interpolate",
    # Validation rules
    "ErrorCollection",
    "FormatRule",
    "PresenceRule",
    "ValidationRule",
    "is_blank",
    # Model descriptors and records
    "ModelDescriptor",
    "Record",
    "define_model",
    # Matchers
    "PresenceEvaluation",
    "ValidatePresenceOfMatcher",
    "validate_presence_of",
]
