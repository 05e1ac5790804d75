"""Shared pytest fixtures for all tests."""
from typing import Iterator

import pytest

from validation_matchers import ModelDescriptor, Translations, define_model


@pytest.fixture
def translations() -> Iterator[Translations]:
    """A fresh translation context; its tables are restored after the test."""
    context = Translations()
    saved = context.snapshot()
    yield context
    context.restore(saved)


@pytest.fixture
def example_model() -> ModelDescriptor:
    """``example`` model with an optional string ``attr``."""
    return define_model("example", {"attr": "string"})


@pytest.fixture
def required_example_model(example_model: ModelDescriptor) -> ModelDescriptor:
    """``example`` model with a presence rule on ``attr``."""
    return example_model.validates_presence_of("attr")


@pytest.fixture
def child_model() -> ModelDescriptor:
    return define_model("child", {"name": "string"})
