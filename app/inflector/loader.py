"""Translation sources for the Translator.

Inflection configuration travels inside ordinary translation files under the
``i18n.inflections`` scope::

    # welcome.en.yml
    welcome:
      formal: "Dear @{f:Madam|m:Sir|n:You|All}"
    i18n:
      inflections:
        gender:
          f: "female"
          m: "male"
          n: "neuter"
          man: "@m"        # aliases must be quoted in YAML
          default: n
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Set

import structlog
import yaml

from inflector.errors import InvalidLocaleError
from inflector.models import Locale, TranslationCatalog, deep_merge

logger = structlog.get_logger()

YAML_SUFFIX = ".yml"


class TranslationLoader(ABC):
    """Source of per-locale translation catalogs."""

    @abstractmethod
    def load(self, locale: Locale) -> TranslationCatalog:
        """Load the catalog of one locale.

        Raises:
            FileNotFoundError: If the locale has no translation sources.
            ValueError: If a source cannot be parsed.
        """

    @abstractmethod
    def load_all(self) -> Dict[Locale, TranslationCatalog]:
        """Load the catalogs of every locale the source knows about."""


class YAMLTranslationLoader(TranslationLoader):
    """Reads ``<locale>.yml`` and ``<domain>.<locale>.yml`` files.

    All files of a locale are deep-merged in file name order, so a domain
    file may add tokens to a kind declared in another file.

    Attributes:
        translations_dir: Directory holding the YAML files.
        use_cache: Keep loaded catalogs until clear_cache() is called.
    """

    def __init__(self, translations_dir: Path, use_cache: bool = True):
        """Open a translations directory.

        Raises:
            ValueError: If the directory does not exist.
        """
        self.translations_dir = Path(translations_dir)
        self.use_cache = use_cache
        self.cache: Dict[Locale, TranslationCatalog] = {}

        if not self.translations_dir.is_dir():
            raise ValueError(
                f"Translations directory not found: {self.translations_dir}"
            )

        logger.info(
            "initialized_yaml_loader",
            translations_dir=str(self.translations_dir),
            use_cache=use_cache,
        )

    def available_locales(self) -> List[Locale]:
        """Locales named by the files in the directory, sorted by tag.

        The locale is the last dot-separated part of a file stem:
        "welcome.en-US.yml" -> en-US, "pl.yml" -> pl.
        """
        found: Set[Locale] = set()
        for path in self.translations_dir.glob(f"*{YAML_SUFFIX}"):
            try:
                found.add(Locale.from_string(path.stem.rsplit(".", 1)[-1]))
            except InvalidLocaleError:
                logger.warning("skipped_translation_file", file=str(path))
        return sorted(found, key=lambda locale: locale.tag)

    def files_for(self, locale: Locale) -> List[Path]:
        """Translation files of a locale, in merge order."""
        files = set(self.translations_dir.glob(f"*.{locale.tag}{YAML_SUFFIX}"))
        bare = self.translations_dir / f"{locale.tag}{YAML_SUFFIX}"
        if bare.is_file():
            files.add(bare)
        return sorted(files)

    def load(self, locale: Locale) -> TranslationCatalog:
        if self.use_cache and locale in self.cache:
            logger.debug("loaded_from_cache", locale=locale.tag)
            return self.cache[locale]

        paths = self.files_for(locale)
        if not paths:
            raise FileNotFoundError(
                f"No translation files found for locale {locale.tag} in {self.translations_dir}"
            )

        catalog = TranslationCatalog(
            locale=locale,
            loaded_at=datetime.now(timezone.utc).isoformat(),
        )
        for path in paths:
            for namespace, messages in self._read(path).items():
                deep_merge(catalog.messages, {namespace: messages})

        logger.info(
            "loaded_translations",
            locale=locale.tag,
            file_count=len(paths),
            namespace_count=len(catalog.messages),
        )

        if self.use_cache:
            self.cache[locale] = catalog
        return catalog

    def load_all(self) -> Dict[Locale, TranslationCatalog]:
        """Load every locale found by available_locales().

        Raises:
            ValueError: If the directory holds no locale files at all.
        """
        locales = self.available_locales()
        if not locales:
            raise ValueError(f"No translation files found in {self.translations_dir}")
        return {locale: self.load(locale) for locale in locales}

    def _read(self, path: Path) -> Dict[str, Dict[str, Any]]:
        """Parse one file into its namespace mappings."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("yaml_parse_error", file=str(path), error=str(e))
            raise ValueError(f"Failed to parse {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("invalid_yaml_format", file=str(path), expected="dict")
            return {}

        namespaces = {}
        for namespace, messages in data.items():
            if isinstance(messages, dict):
                namespaces[str(namespace)] = messages
            else:
                logger.warning(
                    "invalid_namespace_format",
                    file=str(path),
                    namespace=namespace,
                    expected="dict",
                )
        return namespaces

    def clear_cache(self) -> None:
        """Forget every cached catalog."""
        self.cache.clear()
        logger.info("cleared_translation_cache")
