"""Translator construction from settings."""

from pathlib import Path
from typing import Optional

import structlog

from core.config import settings
from inflector.loader import YAMLTranslationLoader
from inflector.options import InflectionOptions
from inflector.translator import Translator

logger = structlog.get_logger()

DEFAULT_TRANSLATIONS_DIR = "locales"


def default_translations_dir() -> Path:
    """INFLECTOR_TRANSLATIONS_DIR, or ./locales when it is unset."""
    return Path(settings.inflector.translations_dir or DEFAULT_TRANSLATIONS_DIR)


def create_translator(
    translations_dir: Optional[Path] = None,
    options: Optional[InflectionOptions] = None,
    use_cache: bool = True,
    preload: bool = True,
) -> Translator:
    """Create a Translator reading YAML files from translations_dir.

    Args:
        translations_dir: Directory of *.<locale>.yml files
            (default: default_translations_dir()).
        options: Process-wide switches (default: from settings).
        use_cache: Cache parsed catalogs in the loader.
        preload: Load every locale and build its registry now.

    Raises:
        ValueError: If translations_dir does not exist.
        InflectionConfigError: If preloaded inflection data is invalid.

    Usage:
        translator = create_translator(Path("locales"))
        translator.inflect("en", "welcome.formal", {"gender": "f"})

        # Lazy loading
        translator = create_translator(preload=False)
        translator.load_locale("pl")
    """
    directory = Path(translations_dir) if translations_dir else default_translations_dir()
    translator = Translator(
        loader=YAMLTranslationLoader(directory, use_cache=use_cache),
        options=options,
    )

    if preload:
        translator.load_all()

    logger.info(
        "translator_created",
        translations_dir=str(directory),
        preload=preload,
        locale_count=len(translator.get_available_locales()),
        inflected_locale_count=len(translator.inflected_locales()),
    )
    return translator
