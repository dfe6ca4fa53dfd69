"""Translation models for the inflector host.

Defines locales, translation keys and per-locale catalogs. Inflection
configuration is stored inside a catalog under the ``i18n.inflections``
scope, next to ordinary messages.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from inflector.errors import InvalidLocaleError

INFLECTIONS_SCOPE: Tuple[str, str] = ("i18n", "inflections")

# IETF BCP 47-like tags: "en", "en-US", "pt-BR", "sr-Latn-RS", "pl_PL"
LOCALE_RE = re.compile(r"^[A-Za-z]{2,3}(?:[-_][A-Za-z0-9]{2,8})*$")


@dataclass(frozen=True)
class Locale:
    """Locale identifier.

    Frozen so it can key registries and catalogs.

    Attributes:
        tag: Locale tag (e.g., "en", "en-US", "pl").
    """

    tag: str

    def __post_init__(self):
        if not isinstance(self.tag, str) or not LOCALE_RE.match(self.tag):
            raise InvalidLocaleError(self.tag)

    def __str__(self) -> str:
        return self.tag

    @classmethod
    def from_string(cls, locale_str: Any) -> "Locale":
        """Convert a string (or Locale) to Locale.

        Args:
            locale_str: Locale string (e.g., "en-US", "fr").

        Returns:
            Matching Locale.

        Raises:
            InvalidLocaleError: If the string is not a valid locale tag.
        """
        if isinstance(locale_str, cls):
            return locale_str
        return cls(locale_str)

    @property
    def language(self) -> str:
        """Get language part of locale (e.g., "en" from "en-US")."""
        return re.split(r"[-_]", self.tag)[0]

    @property
    def region(self) -> str:
        """Get region part of locale (e.g., "US" from "en-US")."""
        parts = re.split(r"[-_]", self.tag)
        return parts[-1] if len(parts) > 1 else ""


@dataclass(frozen=True)
class TranslationKey:
    """Represents a translation key for accessing translated messages.

    Keys are hierarchical (e.g., "welcome.formal", "mail.subject.reply").
    Frozen to ensure immutability and hashability for caching.

    Attributes:
        namespace: Top-level namespace (e.g., "welcome", "mail").
        message_key: Remaining dot-separated path inside the namespace.
    """

    namespace: str
    message_key: str

    def __str__(self) -> str:
        return f"{self.namespace}.{self.message_key}"

    @property
    def parts(self) -> Tuple[str, ...]:
        """Full key path as a tuple of segments."""
        return (self.namespace, *self.message_key.split("."))

    @classmethod
    def from_string(cls, key_string: str) -> "TranslationKey":
        """Create TranslationKey from dot-separated string.

        Args:
            key_string: Dot-separated key (e.g., "mail.subject.reply").

        Returns:
            TranslationKey instance.

        Raises:
            ValueError: If key_string has no dot or an empty part.
        """
        parts = key_string.split(".", 1)
        if len(parts) != 2 or not all(parts) or "" in parts[1].split("."):
            raise ValueError(
                f"Translation key must be in format 'namespace.key': {key_string}"
            )
        return cls(namespace=parts[0], message_key=parts[1])


def deep_merge(target: Dict[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge source into target. Later entries override earlier ones."""
    for key, value in source.items():
        key = str(key)
        if isinstance(value, Mapping) and isinstance(target.get(key), dict):
            deep_merge(target[key], value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge({}, value)
        else:
            target[key] = value
    return target


@dataclass
class TranslationCatalog:
    """Container for translations in a specific locale.

    Attributes:
        locale: The Locale this catalog is for.
        messages: Nested dict structure {namespace: {key: message_or_subtree}}.
        loaded_at: Timestamp (ISO 8601) when translations were loaded.
    """

    locale: Locale
    messages: Dict[str, Any] = field(default_factory=dict)
    loaded_at: Optional[str] = None

    def _lookup(self, parts: Tuple[str, ...]) -> Any:
        node: Any = self.messages
        for part in parts:
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]
        return node

    def get_message(self, key: TranslationKey) -> Optional[str]:
        """Retrieve a translation message by key.

        Returns:
            Translated message string, or None if missing or not a string.
        """
        value = self._lookup(key.parts)
        return value if isinstance(value, str) else None

    def set_message(self, key: TranslationKey, message: str) -> None:
        """Set a translation message, creating intermediate scopes."""
        node = self.messages
        *scopes, leaf = key.parts
        for scope in scopes:
            child = node.get(scope)
            if not isinstance(child, dict):
                child = node[scope] = {}
            node = child
        node[leaf] = message

    def has_message(self, key: TranslationKey) -> bool:
        """Check if a string translation exists for given key."""
        return self.get_message(key) is not None

    def get_namespace(self, namespace: str) -> Dict[str, Any]:
        """Get all messages for a specific namespace."""
        value = self.messages.get(namespace, {})
        return value if isinstance(value, dict) else {}

    @property
    def inflections(self) -> Dict[str, Any]:
        """Raw inflection configuration stored under ``i18n.inflections``."""
        value = self._lookup(INFLECTIONS_SCOPE)
        return value if isinstance(value, dict) else {}

    def merge(self, other: "TranslationCatalog") -> None:
        """Merge another catalog into this one. Later entries override earlier ones."""
        deep_merge(self.messages, other.messages)
