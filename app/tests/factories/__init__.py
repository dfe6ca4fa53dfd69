"""Test data factories for deterministic test data generation."""

from tests.factories.inflector import (
    make_gender_config,
    make_inflection_config,
    make_options,
    make_registry,
    make_translation_catalog,
    make_translation_key,
)

__all__ = [
    "make_gender_config",
    "make_inflection_config",
    "make_options",
    "make_registry",
    "make_translation_catalog",
    "make_translation_key",
]
