"""Pattern resolution against a registry, inflection options and switches.

For every pattern of a template the resolver:

1. determines the governing kind(s), declared or inferred from the first
   recognisable token;
2. reads each kind's option and classifies it as absent, empty, unknown or
   valid (aliases in options always resolve to real tokens);
3. picks an effective token per kind: the option's token when valid,
   otherwise the kind's default when ``unknown_defaults`` is on, otherwise
   the unknown name as supplied (absent and empty options give no token);
4. returns the text of the first segment whose groups all match, where a
   negated group matches exactly when a non-negated one would not;
5. retries with the default token when ``excluded_defaults`` is on and a
   valid option is simply not mentioned in the pattern;
6. falls back to the free text, then to the empty string.

With ``raises`` on, unknown or misplaced pattern tokens, unknown kinds and
options without a usable default raise InflectionResolutionError
subclasses instead of degrading silently.

Resolution is a pure function of (pattern, registry, options, switches).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from core.logging import get_module_logger
from inflector.errors import (
    InvalidInflectionKindError,
    InvalidInflectionTokenError,
    InvalidOptionForKindError,
    MisplacedInflectionTokenError,
)
from inflector.options import InflectionOptions
from inflector.parser import Pattern, PatternParser, Segment, TemplatePiece
from inflector.registry import InflectionRegistry, Kind, Token

logger = get_module_logger()


class OptionState(str, Enum):
    """Classification of the option supplied for a kind."""

    ABSENT = "absent"
    EMPTY = "empty"
    UNKNOWN = "unknown"
    VALID = "valid"


@dataclass(frozen=True)
class KindOption:
    """The caller's option for one governing kind.

    Attributes:
        kind: Governing kind.
        state: Option classification.
        value: Normalized token name as supplied, if any.
        token: Real token when state is VALID.
    """

    kind: Kind
    state: OptionState
    value: Optional[str] = None
    token: Optional[Token] = None


def normalize_token_name(value: Any) -> Optional[str]:
    """Normalize an option value to a token name.

    Strings pass through, enum members use their value, None and empty
    strings become None, anything else is converted with str().
    """
    if value is None:
        return None
    if isinstance(value, Enum):
        value = value.value
    name = value if isinstance(value, str) else str(value)
    return name or None


# (eligible real token names, negated) per position
_Matcher = Tuple[Tuple[Tuple[FrozenSet[str], bool], ...], Segment]


class InterpolationResolver:
    """Resolve inflection patterns for one locale.

    Attributes:
        registry: Registry snapshot of the locale.
        options: Effective switches for this resolution.
        parser: Parser used by interpolate().

    Example:
        resolver = InterpolationResolver(registry, InflectionOptions())
        resolver.interpolate("Dear @{f:Madam|m:Sir|n:You}", {"gender": "m"})
        # "Dear Sir"
    """

    def __init__(
        self,
        registry: InflectionRegistry,
        options: Optional[InflectionOptions] = None,
        parser: Optional[PatternParser] = None,
    ):
        self.registry = registry
        self.options = options or InflectionOptions()
        self.parser = parser or PatternParser()

    def interpolate(
        self, template: str, inflections: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Parse and resolve every pattern of a template."""
        return self.resolve(self.parser.parse(template), inflections)

    def resolve(
        self,
        parsed: Iterable[TemplatePiece],
        inflections: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """Resolve an already parsed template.

        Args:
            parsed: Text runs and patterns, e.g. a ParsedTemplate.
            inflections: Kind name to token name. Other entries are ignored.

        Returns:
            Text with every pattern replaced by its chosen value.

        Raises:
            PatternSyntaxError: If the template contains a malformed pattern.
            InflectionResolutionError: Only when the raises switch is on.
        """
        inflections = inflections or {}
        parts = []
        for piece in parsed:
            if isinstance(piece, Pattern):
                parts.append(self.resolve_pattern(piece, inflections))
            else:
                parts.append(piece)
        return "".join(parts)

    def resolve_pattern(
        self, pattern: Pattern, inflections: Mapping[str, Any]
    ) -> str:
        """Choose the value of a single pattern."""
        kinds = self._governing_kinds(pattern)
        if kinds is None:
            return self._fallback(pattern)

        matchers, mentioned = self._compile(pattern, kinds)
        kind_options = [self._read_option(kind, inflections) for kind in kinds]
        effective = [
            self._effective_token(pattern, kind_option, mentioned[position])
            for position, kind_option in enumerate(kind_options)
        ]

        segment = self._match(matchers, effective)

        if segment is None and self.options.excluded_defaults:
            retry = list(effective)
            for position, kind_option in enumerate(kind_options):
                if (
                    kind_option.state is OptionState.VALID
                    and effective[position] not in mentioned[position]
                    and kind_option.kind.default is not None
                ):
                    retry[position] = kind_option.kind.default
            if retry != effective:
                logger.debug(
                    "inflection_excluded_default_used",
                    pattern=pattern.source,
                    tokens=retry,
                )
                effective = retry
                segment = self._match(matchers, effective)

        if segment is None:
            return self._fallback(pattern)
        if segment.loud:
            return " ".join(
                self.registry.description(name) or name for name in effective
            )
        return segment.text

    def _fallback(self, pattern: Pattern) -> str:
        return pattern.free_text if pattern.free_text is not None else ""

    def _governing_kinds(self, pattern: Pattern) -> Optional[List[Kind]]:
        """Return the kinds governing the pattern, or None if unresolvable."""
        if pattern.kinds:
            kinds = []
            for name in pattern.kinds:
                kind = self.registry.lookup_kind(name)
                if kind is None:
                    if self.options.raises:
                        raise InvalidInflectionKindError(pattern.source, name)
                    logger.debug(
                        "inflection_kind_unknown", pattern=pattern.source, kind=name
                    )
                    return None
                kinds.append(kind)
            return kinds

        for name in pattern.token_names():
            resolved = self.registry.resolve_token(name)
            if resolved is None:
                continue
            kind, token = resolved
            if token.name == name or self.options.aliased_patterns:
                return [kind]

        if pattern.segments:
            if self.options.raises:
                raise InvalidInflectionTokenError(
                    pattern.source, next(pattern.token_names())
                )
            logger.debug("inflection_kind_not_inferred", pattern=pattern.source)
        return None

    def _compile(
        self, pattern: Pattern, kinds: Sequence[Kind]
    ) -> Tuple[List[_Matcher], List[FrozenSet[str]]]:
        """Map pattern token names to eligible real tokens, per position."""
        matchers: List[_Matcher] = []
        mentioned: List[set] = [set() for _ in kinds]

        for segment in pattern.segments:
            groups = []
            for position, (group, kind) in enumerate(zip(segment.groups, kinds)):
                eligible = frozenset(
                    filter(None, (self._eligible(pattern, name, kind) for name in group.names))
                )
                mentioned[position].update(eligible)
                groups.append((eligible, group.negated))
            matchers.append((tuple(groups), segment))

        return matchers, [frozenset(names) for names in mentioned]

    def _eligible(self, pattern: Pattern, name: str, kind: Kind) -> Optional[str]:
        """Return the real token name a pattern token stands for, if usable."""
        resolved = self.registry.resolve_token(name)
        if resolved is None or (
            resolved[1].name != name and not self.options.aliased_patterns
        ):
            if self.options.raises:
                raise InvalidInflectionTokenError(pattern.source, name, kind.name)
            return None

        token_kind, token = resolved
        if token_kind.name != kind.name:
            if self.options.raises:
                raise MisplacedInflectionTokenError(
                    pattern.source, name, token_kind.name, kind.name
                )
            return None
        return token.name

    def _read_option(self, kind: Kind, inflections: Mapping[str, Any]) -> KindOption:
        if kind.name not in inflections:
            return KindOption(kind=kind, state=OptionState.ABSENT)

        value = normalize_token_name(inflections[kind.name])
        if value is None:
            return KindOption(kind=kind, state=OptionState.EMPTY)

        resolved = self.registry.resolve_token(value)
        if resolved is None or resolved[0].name != kind.name:
            return KindOption(kind=kind, state=OptionState.UNKNOWN, value=value)
        return KindOption(
            kind=kind, state=OptionState.VALID, value=value, token=resolved[1]
        )

    def _effective_token(
        self,
        pattern: Pattern,
        kind_option: KindOption,
        mentioned: FrozenSet[str],
    ) -> Optional[str]:
        if kind_option.state is OptionState.VALID:
            return kind_option.token.name

        default = kind_option.kind.default
        usable = self.options.unknown_defaults and default is not None
        if self.options.raises and not (usable and default in mentioned):
            raise InvalidOptionForKindError(
                pattern.source, kind_option.kind.name, kind_option.value
            )

        logger.debug(
            "inflection_option_unusable",
            pattern=pattern.source,
            kind=kind_option.kind.name,
            state=kind_option.state.value,
            default=default if usable else None,
        )
        if usable:
            return default
        # An unknown name is in no eligible set: only negated groups match it
        return kind_option.value

    def _match(
        self, matchers: Sequence[_Matcher], effective: Sequence[Optional[str]]
    ) -> Optional[Segment]:
        for groups, segment in matchers:
            if all(
                token is not None and ((token in names) != negated)
                for (names, negated), token in zip(groups, effective)
            ):
                return segment
        return None
