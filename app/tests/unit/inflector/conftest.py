"""Feature-level fixtures for inflector tests.

Provides registries, resolvers and YAML translation trees shared by the
registry, parser, resolver, loader and translator tests.
"""

import pytest
import yaml

from inflector import (
    InterpolationResolver,
    PatternParser,
    YAMLTranslationLoader,
)
from tests.factories.inflector import (
    make_gender_config,
    make_inflection_config,
    make_options,
    make_registry,
)


@pytest.fixture
def parser():
    """Create a PatternParser."""
    return PatternParser()


@pytest.fixture
def registry():
    """Registry with gender (f, m, n, aliases, default n) and number (s, p)."""
    return make_registry()


@pytest.fixture
def resolve(registry, parser):
    """Resolve a template with the shared registry.

    Usage:
        resolve("Dear @{f:Madam|m:Sir}", {"gender": "m"}, unknown_defaults=False)
    """

    def _resolve(template, inflections=None, **switches):
        resolver = InterpolationResolver(registry, make_options(**switches), parser)
        return resolver.interpolate(template, inflections or {})

    return _resolve


@pytest.fixture
def temp_translations_dir(tmp_path):
    """Create temporary directory with sample YAML translation files.

    Returns a directory structure like:
    - welcome.en.yml
    - inflections.en.yml
    - welcome.pl.yml
    - pl.yml
    - notes.yml (skipped: not a locale)
    """
    en_welcome = {
        "welcome": {
            "formal": "Dear @{f:Madam|m:Sir|n:You|All}",
            "named": "Dear %{name}, @gender{f:you are invited|m:you are invited|n:all are invited}",
        }
    }
    with open(tmp_path / "welcome.en.yml", "w", encoding="utf-8") as f:
        yaml.dump(en_welcome, f)

    en_inflections = {"i18n": {"inflections": make_inflection_config()}}
    with open(tmp_path / "inflections.en.yml", "w", encoding="utf-8") as f:
        yaml.dump(en_inflections, f)

    pl_welcome = {
        "welcome": {
            "formal": "Szanown@{k:a Pani|m:y Panie|n:i Państwo}",
        }
    }
    with open(tmp_path / "welcome.pl.yml", "w", encoding="utf-8") as f:
        yaml.dump(pl_welcome, f, allow_unicode=True)

    pl_inflections = {
        "i18n": {
            "inflections": {
                "gender": {
                    "k": "kobieta",
                    "m": "mężczyzna",
                    "n": "nijaki",
                    "female": "@k",
                    "male": "@m",
                    "none": "@n",
                    "default": "none",
                }
            }
        }
    }
    with open(tmp_path / "pl.yml", "w", encoding="utf-8") as f:
        yaml.dump(pl_inflections, f, allow_unicode=True)

    with open(tmp_path / "notes.yml", "w", encoding="utf-8") as f:
        yaml.dump({"todo": {"item": "not a locale"}}, f)

    return tmp_path


@pytest.fixture
def yaml_loader(temp_translations_dir):
    """Create YAMLTranslationLoader for temporary translations directory."""
    return YAMLTranslationLoader(temp_translations_dir, use_cache=False)


@pytest.fixture
def gender_only_config():
    """Inflection configuration with only the gender kind."""
    return {"gender": make_gender_config()}
