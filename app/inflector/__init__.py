"""Inflector - inflection patterns for translated messages.

Selects variant text inside translations according to grammatical options
such as gender or number::

    Dear @{f:Madam|m:Sir|n:You|All}

Main components:
- registry: InflectionRegistry compiled from per-locale kind/token/alias data
- parser: PatternParser splitting templates into text and Pattern objects
- resolver: InterpolationResolver choosing each pattern's value
- options: InflectionOptions, the four fallback switches
- translator: Translator host with %{} interpolation and introspection
- loader: TranslationLoader and YAMLTranslationLoader
"""

from inflector.errors import (
    BadDefaultTokenError,
    BadInflectionAliasError,
    BadInflectionKindError,
    BadInflectionTokenError,
    DuplicatedInflectionTokenError,
    InflectionConfigError,
    InflectionResolutionError,
    InflectorError,
    InvalidInflectionKindError,
    InvalidInflectionTokenError,
    InvalidLocaleError,
    InvalidOptionForKindError,
    MisplacedInflectionTokenError,
    MissingInterpolationArgumentError,
    PatternSyntaxError,
)
from inflector.factory import create_translator
from inflector.loader import TranslationLoader, YAMLTranslationLoader
from inflector.models import Locale, TranslationCatalog, TranslationKey
from inflector.options import InflectionOptions
from inflector.parser import ParsedTemplate, Pattern, PatternParser, Segment, TokenGroup
from inflector.registry import InflectionRegistry, Kind, Token, TokenStatus
from inflector.resolver import InterpolationResolver, OptionState
from inflector.translator import TranslationSnapshot, Translator

__all__ = [
    "Locale",
    "TranslationKey",
    "TranslationCatalog",
    "TranslationLoader",
    "YAMLTranslationLoader",
    "Translator",
    "TranslationSnapshot",
    "create_translator",
    "InflectionOptions",
    "InflectionRegistry",
    "Kind",
    "Token",
    "TokenStatus",
    "PatternParser",
    "ParsedTemplate",
    "Pattern",
    "Segment",
    "TokenGroup",
    "InterpolationResolver",
    "OptionState",
    "InflectorError",
    "InflectionConfigError",
    "InvalidLocaleError",
    "BadInflectionKindError",
    "BadInflectionTokenError",
    "BadInflectionAliasError",
    "BadDefaultTokenError",
    "DuplicatedInflectionTokenError",
    "PatternSyntaxError",
    "InflectionResolutionError",
    "InvalidOptionForKindError",
    "InvalidInflectionTokenError",
    "InvalidInflectionKindError",
    "MisplacedInflectionTokenError",
    "MissingInterpolationArgumentError",
]
