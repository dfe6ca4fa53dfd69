"""Translation service with %{} interpolation and inflection.

Core host component: keeps per-locale catalogs, builds an inflection
registry for every locale that carries ``i18n.inflections`` configuration,
and resolves inflection patterns after standard interpolation.

Catalogs and registries are published together as one TranslationSnapshot,
swapped in a single assignment. A translation call reads the snapshot once,
so its template and its registry always come from the same publication.
"""

import dataclasses
import re
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from core.config import settings
from core.logging import get_module_logger
from inflector.errors import MissingInterpolationArgumentError
from inflector.loader import TranslationLoader
from inflector.models import (
    Locale,
    TranslationCatalog,
    TranslationKey,
    deep_merge,
)
from inflector.options import InflectionOptions
from inflector.parser import PatternParser
from inflector.registry import InflectionRegistry, TokenStatus
from inflector.resolver import InterpolationResolver

logger = get_module_logger()

# %{name} placeholders; %%{name} is an escaped literal "%{name}"
INTERPOLATION_PATTERN = re.compile(r"%%\{(\w+)\}|%\{(\w+)\}")

LocaleLike = Union[Locale, str]
KeyLike = Union[TranslationKey, str]


@dataclass(frozen=True)
class TranslationSnapshot:
    """Catalogs and the registries built from them, published as one unit.

    Attributes:
        catalogs: Read-only locale -> catalog mapping.
        registries: Read-only locale -> registry mapping, one entry per
            catalog with inflection data.
    """

    catalogs: Mapping[Locale, TranslationCatalog]
    registries: Mapping[Locale, InflectionRegistry]

    @classmethod
    def empty(cls) -> "TranslationSnapshot":
        return cls(catalogs=MappingProxyType({}), registries=MappingProxyType({}))

    def template(self, locale: Locale, key: TranslationKey) -> Optional[str]:
        """Stored template for key, or None."""
        catalog = self.catalogs.get(locale)
        return catalog.get_message(key) if catalog else None

    def registry_for(self, locale: Locale) -> InflectionRegistry:
        """Registry of a locale; an empty one when it has no inflection data."""
        registry = self.registries.get(locale)
        if registry is None:
            registry = InflectionRegistry(locale, kinds={}, arena=(), index={})
        return registry


class Translator:
    """Service for translating messages with interpolation and inflection.

    Attributes:
        loader: TranslationLoader for loading translation files (optional).
        options: Process-wide inflection switches. Mutations are not
            synchronized; do not change them while translations run.
        parser: Shared pattern parser.
    """

    def __init__(
        self,
        loader: Optional[TranslationLoader] = None,
        options: Optional[InflectionOptions] = None,
    ):
        """Initialize Translator.

        Args:
            loader: TranslationLoader used by load_all()/load_locale()/reload().
            options: Process-wide switches. Seeded from settings when omitted.
        """
        self.loader = loader
        self._default_options = options or InflectionOptions.from_settings(
            settings.inflector
        )
        self.options = dataclasses.replace(self._default_options)
        self.parser = PatternParser()
        self._snapshot = TranslationSnapshot.empty()
        self._write_lock = threading.Lock()
        logger.info(
            "initialized_translator",
            loader=type(loader).__name__ if loader else None,
        )

    @property
    def snapshot(self) -> TranslationSnapshot:
        """Currently published catalogs and registries."""
        return self._snapshot

    @property
    def catalogs(self) -> Mapping[Locale, TranslationCatalog]:
        """Loaded TranslationCatalogs by locale (read-only)."""
        return self._snapshot.catalogs

    # Loading and storing

    def load_all(self) -> None:
        """Load all available locales from loader and rebuild registries."""
        catalogs = self._require_loader().load_all()
        with self._write_lock:
            self._publish(catalogs, replace=True)
        logger.info("loaded_all_translations", locale_count=len(self.catalogs))

    def load_locale(self, locale: LocaleLike) -> None:
        """Load a specific locale from loader.

        Raises:
            FileNotFoundError: If translation files not found.
            InflectionConfigError: If its inflection configuration is invalid.
        """
        locale = Locale.from_string(locale)
        catalog = self._require_loader().load(locale)
        with self._write_lock:
            self._publish({locale: catalog})
        logger.info("loaded_locale_translations", locale=locale.tag)

    def reload(self) -> None:
        """Reload all translations from loader."""
        loader = self._require_loader()
        clear_cache = getattr(loader, "clear_cache", None)
        if clear_cache is not None:
            clear_cache()
        self.load_all()
        logger.info("reloaded_all_translations")

    def store_translations(self, locale: LocaleLike, data: Mapping[str, Any]) -> None:
        """Merge a nested translation tree into a locale.

        The locale's inflection registry is rebuilt from the merged
        configuration. If the build fails, the published snapshot stays
        as it was.

        Raises:
            InflectionConfigError: If the merged inflection data is invalid.
        """
        locale = Locale.from_string(locale)
        with self._write_lock:
            current = self._snapshot.catalogs.get(locale)
            merged = TranslationCatalog(
                locale=locale,
                messages=deep_merge(
                    deep_merge({}, current.messages) if current else {}, data
                ),
                loaded_at=current.loaded_at if current else None,
            )
            self._publish({locale: merged})
        logger.info("stored_translations", locale=locale.tag)

    def _require_loader(self) -> TranslationLoader:
        if self.loader is None:
            raise RuntimeError("Translator has no loader configured")
        return self.loader

    def _publish(
        self, catalogs: Mapping[Locale, TranslationCatalog], replace: bool = False
    ) -> None:
        """Build registries off to the side, then swap in a new snapshot.

        Callers hold the write lock.
        """
        built = {}
        for locale, catalog in catalogs.items():
            config = catalog.inflections
            if config:
                built[locale] = InflectionRegistry.build(locale, config)

        current = self._snapshot
        new_catalogs = {} if replace else dict(current.catalogs)
        new_catalogs.update(catalogs)
        new_registries = {} if replace else dict(current.registries)
        for locale in catalogs:
            new_registries.pop(locale, None)
        new_registries.update(built)

        self._snapshot = TranslationSnapshot(
            catalogs=MappingProxyType(new_catalogs),
            registries=MappingProxyType(new_registries),
        )

    # External interface consumed by inflection

    def get_raw_template(self, locale: LocaleLike, key: KeyLike) -> Optional[str]:
        """Return the stored template for key, or None if not found."""
        return self._snapshot.template(Locale.from_string(locale), self._key(key))

    def get_inflection_config(self, locale: LocaleLike) -> Dict[str, Any]:
        """Return the raw inflection configuration of a locale."""
        catalog = self.catalogs.get(Locale.from_string(locale))
        return catalog.inflections if catalog else {}

    # Translation

    def inflect(
        self,
        locale: LocaleLike,
        key: KeyLike,
        options: Optional[Mapping[str, Any]] = None,
        switches: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Retrieve, interpolate and inflect a translated message.

        Args:
            locale: Locale to translate to.
            key: TranslationKey or dot-separated key string.
            options: Interpolation variables and inflection options
                (kind name -> token name) in one mapping. Entries that are
                not kinds are ignored by inflection.
            switches: Per-call switch overrides.

        Returns:
            Final message.

        Raises:
            KeyError: If key not found in the locale.
            MissingInterpolationArgumentError: If a %{} variable is missing.
            PatternSyntaxError: If the message holds a malformed pattern.
            InflectionResolutionError: Only when the raises switch is on.
        """
        locale = Locale.from_string(locale)
        key = self._key(key)
        snapshot = self._snapshot
        template = snapshot.template(locale, key)
        if template is None:
            logger.error("translation_not_found", key=str(key), locale=locale.tag)
            raise KeyError(f"Translation not found for key {key} in {locale.tag}")

        return self._render(snapshot, locale, template, options, switches)

    def interpolate(
        self,
        locale: LocaleLike,
        template: str,
        options: Optional[Mapping[str, Any]] = None,
        switches: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Interpolate and inflect a template string that is not stored."""
        locale = Locale.from_string(locale)
        return self._render(self._snapshot, locale, template, options, switches)

    def _render(
        self,
        snapshot: TranslationSnapshot,
        locale: Locale,
        template: str,
        options: Optional[Mapping[str, Any]],
        switches: Optional[Mapping[str, Any]],
    ) -> str:
        options = options or {}
        message = self._interpolate_variables(template, options)
        resolver = InterpolationResolver(
            snapshot.registry_for(locale), self.options.merged(switches), self.parser
        )
        return resolver.interpolate(message, options)

    def _interpolate_variables(self, message: str, variables: Mapping[str, Any]) -> str:
        """Replace %{name} with variables[name]; %%{name} becomes %{name}."""

        def replace(match: "re.Match") -> str:
            escaped, name = match.groups()
            if escaped is not None:
                return f"%{{{escaped}}}"
            if name not in variables:
                logger.error(
                    "missing_interpolation_variable",
                    variable=name,
                    available_variables=list(variables.keys()),
                )
                raise MissingInterpolationArgumentError(name, message)
            value = variables[name]
            return "" if value is None else str(value)

        return INTERPOLATION_PATTERN.sub(replace, message)

    def _key(self, key: KeyLike) -> TranslationKey:
        return key if isinstance(key, TranslationKey) else TranslationKey.from_string(key)

    def has_message(self, key: KeyLike, locale: LocaleLike) -> bool:
        """Check if translation exists for key in locale."""
        return self.get_raw_template(locale, key) is not None

    def get_available_locales(self) -> List[Locale]:
        """Get list of loaded locales."""
        return list(self.catalogs.keys())

    def get_catalog(self, locale: LocaleLike) -> Optional[TranslationCatalog]:
        """Get complete catalog for a locale."""
        return self.catalogs.get(Locale.from_string(locale))

    # Inflection introspection

    def reset_options(self) -> None:
        """Restore the process-wide switches to their configured values."""
        self.options.reset(self._default_options)

    def inflected_locales(self, kind: Optional[str] = None) -> List[Locale]:
        """Locales with inflection data, optionally only those defining kind."""
        return [
            locale
            for locale, registry in self._snapshot.registries.items()
            if not registry.is_empty and (kind is None or registry.has_kind(kind))
        ]

    def registry(self, locale: LocaleLike) -> Optional[InflectionRegistry]:
        """Current registry of a locale."""
        return self._snapshot.registries.get(Locale.from_string(locale))

    def kinds(self, locale: Optional[LocaleLike] = None) -> List[str]:
        """Kind names of a locale, or of every inflected locale when omitted."""
        if locale is None:
            registries = list(self._snapshot.registries.values())
        else:
            found = self.registry(locale)
            registries = [found] if found else []

        names: Dict[str, None] = {}
        for registry in registries:
            names.update(dict.fromkeys(registry.kinds))
        return list(names)

    def true_tokens(
        self, locale: LocaleLike, kind: Optional[str] = None
    ) -> Dict[str, str]:
        """Real token names mapped to descriptions."""
        registry = self.registry(locale)
        return registry.true_tokens(kind) if registry else {}

    def aliases(self, locale: LocaleLike, kind: Optional[str] = None) -> Dict[str, str]:
        """Alias names mapped to the real tokens they resolve to."""
        registry = self.registry(locale)
        return registry.aliases(kind) if registry else {}

    def tokens(self, locale: LocaleLike, kind: Optional[str] = None) -> Dict[str, str]:
        """Every token and alias name mapped to its description."""
        registry = self.registry(locale)
        return registry.tokens(kind) if registry else {}

    def token_status(
        self, name: str, locale: LocaleLike, kind: Optional[str] = None
    ) -> TokenStatus:
        """Classify name as a true token, an alias or unknown."""
        registry = self.registry(locale)
        return registry.token_status(name, kind) if registry else TokenStatus.UNKNOWN

    def default_token(self, locale: LocaleLike, kind: str) -> Optional[str]:
        """Default token of a kind in a locale."""
        registry = self.registry(locale)
        return registry.default_token(kind) if registry else None
