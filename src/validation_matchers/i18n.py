"""Localization context for validation error messages.

A :class:`Translations` object owns the translation tables for every locale
and is passed explicitly to whatever needs messages (records, matchers).
There is no process-wide table: tests that need a customised message merge
it into their own context, or use :meth:`Translations.override` to have the
previous state restored afterwards.

Message templates may reference placeholders written as ``{{name}}`` or
``%{name}``. Resolving a placeholder that no value was supplied for raises
:class:`~validation_matchers.models.MissingInterpolationError`.
"""
from __future__ import annotations

import copy
import json
import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union

from jsonschema import Draft202012Validator

from validation_matchers.models import (
    LocaleFileError,
    MissingInterpolationError,
    MissingTranslationError,
)

logger = logging.getLogger("validation_matchers.i18n")

_LOCALE_SCHEMA_PATH = Path(__file__).parent / "locale.schema.json"

DEFAULT_LOCALE = "en"
DEFAULT_SCOPE = "orm"

DEFAULT_MESSAGES: Dict[str, str] = {
    "blank": "can't be blank",
    "invalid": "is invalid",
}

_TOKEN_RE = re.compile(r"\{\{(\w+)\}\}|%\{(\w+)\}")

TranslationTree = Dict[str, Any]
Snapshot = Dict[str, TranslationTree]


def _load_locale_schema() -> Dict[str, Any]:
    """Load the JSON Schema locale files are validated against."""
    schema: Dict[str, Any] = json.loads(_LOCALE_SCHEMA_PATH.read_text(encoding="utf-8"))
    return schema


def _deep_merge(target: TranslationTree, source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, Mapping) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        elif isinstance(value, Mapping):
            target[key] = copy.deepcopy(dict(value))
        else:
            target[key] = value


def humanize(name: str) -> str:
    """Turn an identifier into a human label: ``first_name`` -> ``First name``."""
    text = name.replace("_", " ").strip()
    if text.endswith(" id"):
        text = text[:-3]
    return text[:1].upper() + text[1:]


def interpolate(template: str, values: Mapping[str, object]) -> str:
    """Replace ``{{name}}`` / ``%{name}`` tokens in *template*.

    ``None`` values render as the empty string.

    Raises:
        MissingInterpolationError: If a token has no entry in *values*.
    """

    def _replace(match: "re.Match[str]") -> str:
        token = match.group(1) or match.group(2)
        if token not in values:
            raise MissingInterpolationError(token, template)
        value = values[token]
        return "" if value is None else str(value)

    return _TOKEN_RE.sub(_replace, template)


class Translations:
    """Translation tables keyed by locale, plus message lookup rules."""

    def __init__(
        self,
        locale: str = DEFAULT_LOCALE,
        scope: str = DEFAULT_SCOPE,
    ) -> None:
        self.locale = locale
        self.scope = scope
        self._tables: Snapshot = {}
        self.merge(locale, {scope: {"errors": {"messages": DEFAULT_MESSAGES}}})

    def __repr__(self) -> str:
        return (
            f"Translations(locale={self.locale!r}, scope={self.scope!r}, "
            f"locales={sorted(self._tables)})"
        )

    @property
    def locales(self) -> Tuple[str, ...]:
        return tuple(sorted(self._tables))

    def merge(self, locale: str, tree: Mapping[str, Any]) -> None:
        """Deep-merge a nested mapping of translations into *locale*."""
        _deep_merge(self._tables.setdefault(locale, {}), tree)

    def store(self, locale: str, key: str, template: str) -> None:
        """Set a single dotted *key* to *template*."""
        tree: Dict[str, Any] = {}
        node = tree
        parts = key.split(".")
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        node[parts[-1]] = template
        self.merge(locale, tree)

    def lookup(self, key: str, locale: Optional[str] = None) -> Optional[str]:
        """Return the template stored at dotted *key*, or None."""
        node: Any = self._tables.get(locale or self.locale, {})
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node if isinstance(node, str) else None

    def translate(
        self,
        key: str,
        default: Sequence[str] = (),
        locale: Optional[str] = None,
        **values: object,
    ) -> str:
        """Resolve the first of *key* and *default* keys and interpolate it.

        Raises:
            MissingTranslationError: If none of the keys has a translation.
            MissingInterpolationError: If the template needs an absent value.
        """
        locale = locale or self.locale
        candidates = (key,) + tuple(default)
        for candidate in candidates:
            template = self.lookup(candidate, locale)
            if template is not None:
                if candidate != key:
                    logger.debug("Translation %s fell back to %s", key, candidate)
                return interpolate(template, values)
        raise MissingTranslationError(locale, candidates)

    # Model naming

    def human_model_name(self, model: str) -> str:
        template = self.lookup(f"{self.scope}.models.{model}")
        return template if template is not None else humanize(model)

    def human_attribute_name(self, model: str, attribute: str) -> str:
        template = self.lookup(f"{self.scope}.attributes.{model}.{attribute}")
        return template if template is not None else humanize(attribute)

    def message_keys(self, model: str, attribute: str, key: str) -> Tuple[str, ...]:
        """Lookup chain for an error message, most specific first."""
        base = f"{self.scope}.errors"
        return (
            f"{base}.models.{model}.attributes.{attribute}.{key}",
            f"{base}.models.{model}.{key}",
            f"{base}.messages.{key}",
        )

    def generate_message(
        self,
        model: str,
        attribute: str,
        key: str,
        value: object = None,
        message: Optional[str] = None,
    ) -> str:
        """Build the error message *key* for *attribute* of *model*.

        The ``attribute``, ``model`` and ``value`` placeholders are always
        available to the template. An explicit *message* is interpolated in
        place of the looked-up template.
        """
        values = {
            "attribute": self.human_attribute_name(model, attribute),
            "model": self.human_model_name(model),
            "value": value,
        }
        if message is not None:
            return interpolate(message, values)
        first, *rest = self.message_keys(model, attribute, key)
        return self.translate(first, default=rest, **values)

    # Save/restore lifecycle

    def snapshot(self) -> Snapshot:
        """Return a deep copy of every translation table."""
        return copy.deepcopy(self._tables)

    def restore(self, snapshot: Snapshot) -> None:
        """Replace every translation table with *snapshot*."""
        self._tables = copy.deepcopy(snapshot)

    @contextmanager
    def override(
        self, locale: str, tree: Mapping[str, Any]
    ) -> Iterator["Translations"]:
        """Merge *tree* into *locale* for the duration of the block."""
        saved = self.snapshot()
        self.merge(locale, tree)
        try:
            yield self
        finally:
            self.restore(saved)

    # Locale files

    def load_file(self, path: Union[str, Path]) -> Tuple[str, ...]:
        """Validate and merge a JSON locale file; return the locales it held.

        The document's top-level keys are locale names, each mapping to a
        nested tree of translation templates.

        Raises:
            LocaleFileError: If the file is unreadable, not JSON, or does not
                match the ``locale`` schema.
        """
        path = Path(path)
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise LocaleFileError(f"Cannot read locale file {path}: {e}") from e

        validator = Draft202012Validator(_load_locale_schema())
        errors = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.absolute_path])
        if errors:
            details = "; ".join(
                "$" + "".join(f".{p}" for p in error.absolute_path) + f": {error.message}"
                for error in errors
            )
            raise LocaleFileError(f"Invalid locale file {path}: {details}")

        for locale, tree in document.items():
            self.merge(locale, tree)
        logger.debug("Loaded locales %s from %s", sorted(document), path)
        return tuple(sorted(document))
