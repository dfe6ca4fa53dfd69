"""Per-locale inflection registry.

Compiles raw inflection configuration of the form::

    gender:
      f: "female"
      m: "male"
      n: "neuter"
      woman: "@f"
      man: "@m"
      default: n

into an immutable lookup structure. Real tokens are stored once in an arena
and addressed by a stable integer id; aliases point at that id directly, so
alias chains are collapsed at build time and never re-chased at lookup time.

A registry is built as a whole or not at all. Callers publish a finished
registry by swapping a reference, never by patching an existing one.
"""

import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from core.logging import get_module_logger
from inflector.errors import (
    BadDefaultTokenError,
    BadInflectionAliasError,
    BadInflectionKindError,
    BadInflectionTokenError,
    DuplicatedInflectionTokenError,
    InflectionConfigError,
)
from inflector.models import Locale

logger = get_module_logger()

ALIAS_MARKER = "@"
DEFAULT_KEY = "default"

# Names must not collide with pattern syntax: @ { } | : , ! + * ~ \ and whitespace
NAME_RE = re.compile(r"^[^\s@{}|:,!+*~\\]+$")


def is_valid_name(name: Any) -> bool:
    """Check whether name can be used as a kind, token or alias name."""
    return isinstance(name, str) and bool(NAME_RE.match(name))


class TokenStatus(str, Enum):
    """What a name denotes within a registry."""

    TRUE = "true"
    ALIAS = "alias"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Token:
    """A real inflection token.

    Attributes:
        id: Stable index of the token in the registry arena.
        name: Token name as used in patterns and options.
        kind: Name of the kind the token belongs to.
        description: Human-readable description.
    """

    id: int
    name: str
    kind: str
    description: str


@dataclass(frozen=True)
class Kind:
    """A category of mutually exclusive tokens.

    Attributes:
        name: Kind name (e.g., "gender").
        tokens: Real token names, in configuration order.
        aliases: Alias name to real token name, already flattened.
        default: Real token name used as the kind's default, if any.
    """

    name: str
    tokens: Tuple[str, ...]
    aliases: Mapping[str, str]
    default: Optional[str] = None

    def __contains__(self, name: object) -> bool:
        return name in self.tokens or name in self.aliases


class _RegistryBuilder:
    """Validates raw configuration and collects the pieces of a registry."""

    def __init__(self, locale: str):
        self.locale = locale
        self.owners: Dict[str, str] = {}

    def _fail(self, error_cls, message: str, **context) -> InflectionConfigError:
        return error_cls(message, locale=self.locale, **context)

    def build(self, raw_config: Optional[Mapping[str, Any]]) -> "InflectionRegistry":
        if raw_config is None:
            raw_config = {}
        if not isinstance(raw_config, Mapping):
            raise self._fail(
                BadInflectionKindError,
                f"Inflection configuration must be a mapping, got {type(raw_config).__name__}",
            )

        parsed: List[Tuple[str, Dict[str, str], Dict[str, str], Optional[str]]] = []
        for kind_name, body in raw_config.items():
            parsed.append(self._collect_kind(kind_name, body))

        arena: List[Token] = []
        index: Dict[str, int] = {}
        kinds: Dict[str, Kind] = {}

        for kind_name, real, alias_targets, default_name in parsed:
            for token_name, description in real.items():
                token = Token(
                    id=len(arena),
                    name=token_name,
                    kind=kind_name,
                    description=description,
                )
                arena.append(token)
                index[token_name] = token.id

            resolved_aliases = {
                alias: self._resolve_alias(kind_name, alias, real, alias_targets)
                for alias in alias_targets
            }
            for alias, target in resolved_aliases.items():
                index[alias] = index[target]

            default = None
            if default_name is not None:
                default = self._resolve_default(
                    kind_name, default_name, real, resolved_aliases
                )

            kinds[kind_name] = Kind(
                name=kind_name,
                tokens=tuple(real),
                aliases=MappingProxyType(resolved_aliases),
                default=default,
            )

        return InflectionRegistry(
            locale=Locale.from_string(self.locale),
            kinds=kinds,
            arena=tuple(arena),
            index=index,
        )

    def _collect_kind(
        self, kind_name: Any, body: Any
    ) -> Tuple[str, Dict[str, str], Dict[str, str], Optional[str]]:
        if not is_valid_name(kind_name) or kind_name == DEFAULT_KEY:
            raise self._fail(
                BadInflectionKindError, f"Bad inflection kind name {kind_name!r}"
            )
        if not isinstance(body, Mapping):
            raise self._fail(
                BadInflectionKindError,
                f"Inflection kind {kind_name!r} must map tokens to descriptions",
                kind=kind_name,
            )

        real: Dict[str, str] = {}
        alias_targets: Dict[str, str] = {}
        default_name: Optional[str] = None

        for token_name, spec in body.items():
            if token_name == DEFAULT_KEY:
                default_name = self._default_name(kind_name, spec)
                continue

            if not is_valid_name(token_name):
                raise self._fail(
                    BadInflectionTokenError,
                    f"Bad inflection token name {token_name!r}",
                    kind=kind_name,
                    token=str(token_name),
                )
            if token_name in self.owners:
                raise DuplicatedInflectionTokenError(
                    token=token_name,
                    kind=kind_name,
                    original_kind=self.owners[token_name],
                    locale=self.locale,
                )
            self.owners[token_name] = kind_name

            if isinstance(spec, str) and spec.startswith(ALIAS_MARKER):
                alias_targets[token_name] = spec[len(ALIAS_MARKER):]
            elif isinstance(spec, str) and spec.strip():
                real[token_name] = spec
            else:
                raise self._fail(
                    BadInflectionTokenError,
                    f"Inflection token {token_name!r} needs a description or an alias target, got {spec!r}",
                    kind=kind_name,
                    token=token_name,
                )

        return kind_name, real, alias_targets, default_name

    def _default_name(self, kind_name: str, spec: Any) -> str:
        name = spec
        if isinstance(name, str) and name.startswith(ALIAS_MARKER):
            name = name[len(ALIAS_MARKER):]
        if not is_valid_name(name):
            raise self._fail(
                BadDefaultTokenError,
                f"Bad default token {spec!r} for kind {kind_name!r}",
                kind=kind_name,
                token=str(spec),
            )
        return name

    def _resolve_alias(
        self,
        kind_name: str,
        alias: str,
        real: Mapping[str, str],
        alias_targets: Mapping[str, str],
    ) -> str:
        chain = [alias]
        current = alias_targets[alias]
        while current in alias_targets:
            if current in chain:
                cycle = " -> ".join(chain + [current])
                raise BadInflectionAliasError(
                    f"Cyclic inflection alias {cycle}",
                    token=alias,
                    target=alias_targets[alias],
                    kind=kind_name,
                    locale=self.locale,
                )
            chain.append(current)
            current = alias_targets[current]

        if current in real:
            return current

        if current in self.owners:
            message = (
                f"Inflection alias {alias!r} points to {current!r} "
                f"of another kind {self.owners[current]!r}"
            )
        else:
            message = f"Inflection alias {alias!r} points to unknown token {current!r}"
        raise BadInflectionAliasError(
            message,
            token=alias,
            target=current,
            kind=kind_name,
            locale=self.locale,
        )

    def _resolve_default(
        self,
        kind_name: str,
        default_name: str,
        real: Mapping[str, str],
        resolved_aliases: Mapping[str, str],
    ) -> str:
        if default_name in real:
            return default_name
        if default_name in resolved_aliases:
            return resolved_aliases[default_name]
        raise self._fail(
            BadDefaultTokenError,
            f"Default token {default_name!r} is not a token of kind {kind_name!r}",
            kind=kind_name,
            token=default_name,
        )


class InflectionRegistry:
    """Immutable inflection data for one locale.

    Build with InflectionRegistry.build(); every query afterwards is a dict
    lookup. All exposed mappings are read-only views.

    Attributes:
        locale: Locale the registry was built for.
    """

    def __init__(
        self,
        locale: Locale,
        kinds: Dict[str, Kind],
        arena: Tuple[Token, ...],
        index: Dict[str, int],
    ):
        self.locale = locale
        self._kinds = MappingProxyType(dict(kinds))
        self._arena = arena
        self._index = MappingProxyType(dict(index))

    @classmethod
    def build(
        cls,
        locale: Union[Locale, str],
        raw_config: Optional[Mapping[str, Any]],
    ) -> "InflectionRegistry":
        """Compile raw configuration into a registry.

        Args:
            locale: Locale (or locale tag) the configuration belongs to.
            raw_config: Mapping of kind name to mapping of token name to
                token spec. A spec starting with "@" is an alias marker;
                any other non-empty string is a description. The "default"
                key names the kind's default token (alias form allowed).

        Returns:
            A fully validated InflectionRegistry.

        Raises:
            InflectionConfigError: A subclass naming the broken invariant.
                No partially built registry is ever returned.
        """
        locale = Locale.from_string(locale)
        try:
            registry = _RegistryBuilder(locale.tag).build(raw_config)
        except InflectionConfigError as e:
            logger.error(
                "inflection_registry_build_failed",
                locale=locale.tag,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise

        logger.info(
            "inflection_registry_built",
            locale=locale.tag,
            kind_count=len(registry._kinds),
            token_count=len(registry._arena),
            alias_count=len(registry._index) - len(registry._arena),
        )
        return registry

    def __repr__(self) -> str:
        return f"InflectionRegistry(locale={self.locale.tag!r}, kinds={list(self._kinds)!r})"

    @property
    def is_empty(self) -> bool:
        """True when no kinds are configured."""
        return not self._kinds

    @property
    def kinds(self) -> Tuple[str, ...]:
        """Names of all configured kinds."""
        return tuple(self._kinds)

    def has_kind(self, name: str) -> bool:
        return name in self._kinds

    def lookup_kind(self, name: str) -> Optional[Kind]:
        """Get a kind by name, or None if it is not configured."""
        return self._kinds.get(name)

    def resolve_token(self, name: str) -> Optional[Tuple[Kind, Token]]:
        """Resolve a token or alias name to its kind and real token.

        Returns:
            (Kind, Token) where Token is always a real token, or None.
        """
        token_id = self._index.get(name) if isinstance(name, str) else None
        if token_id is None:
            return None
        token = self._arena[token_id]
        return self._kinds[token.kind], token

    def true_token(self, name: str) -> Optional[Token]:
        """Get the real token a token or alias name stands for."""
        resolved = self.resolve_token(name)
        return resolved[1] if resolved else None

    def kind_of(self, name: str) -> Optional[str]:
        """Get the kind name of a token or alias."""
        resolved = self.resolve_token(name)
        return resolved[0].name if resolved else None

    def is_token_of_kind(self, name: str, kind: str) -> bool:
        """Check whether name is a token or alias of the given kind."""
        return self.kind_of(name) == kind

    def has_true_token(self, name: str, kind: Optional[str] = None) -> bool:
        resolved = self.resolve_token(name)
        if resolved is None or resolved[1].name != name:
            return False
        return kind is None or resolved[0].name == kind

    def has_alias(self, name: str, kind: Optional[str] = None) -> bool:
        resolved = self.resolve_token(name)
        if resolved is None or resolved[1].name == name:
            return False
        return kind is None or resolved[0].name == kind

    def has_token(self, name: str, kind: Optional[str] = None) -> bool:
        """Check whether name is a real token or an alias (optionally of kind)."""
        return self.has_true_token(name, kind) or self.has_alias(name, kind)

    def token_status(self, name: str, kind: Optional[str] = None) -> TokenStatus:
        """Classify a name as a true token, an alias or unknown."""
        if self.has_true_token(name, kind):
            return TokenStatus.TRUE
        if self.has_alias(name, kind):
            return TokenStatus.ALIAS
        return TokenStatus.UNKNOWN

    def default_token(self, kind: str) -> Optional[str]:
        """Get the real default token name of a kind."""
        found = self._kinds.get(kind)
        return found.default if found else None

    def description(self, name: str) -> Optional[str]:
        """Get the description of a token, following aliases."""
        token = self.true_token(name)
        return token.description if token else None

    def _selected_kinds(self, kind: Optional[str]) -> List[Kind]:
        if kind is None:
            return list(self._kinds.values())
        found = self._kinds.get(kind)
        return [found] if found else []

    def true_tokens(self, kind: Optional[str] = None) -> Dict[str, str]:
        """Map real token names to descriptions, for one kind or all kinds."""
        result = {}
        for selected in self._selected_kinds(kind):
            for name in selected.tokens:
                result[name] = self._arena[self._index[name]].description
        return result

    def aliases(self, kind: Optional[str] = None) -> Dict[str, str]:
        """Map alias names to the real token names they resolve to."""
        result = {}
        for selected in self._selected_kinds(kind):
            result.update(selected.aliases)
        return result

    def tokens(self, kind: Optional[str] = None) -> Dict[str, str]:
        """Map every token and alias name to its (resolved) description."""
        result = self.true_tokens(kind)
        for alias in self.aliases(kind):
            result[alias] = self._arena[self._index[alias]].description
        return result
