"""Inflection pattern parsing.

Patterns are embedded in translations::

    Dear @{f:Madam|m:Sir|n:You|All}                  simple (kind inferred)
    Dear @gender{f:Madam|m:Sir|All}                  named
    Dear @gender+number{f+s:Lady|f+p:Ladies|All}     complex
    Hello @{m,f:Ladies and Gentlemen|!n:Friends}     token groups, negation
    This is the @@{pattern}                          escaped, left as text

Parsing is independent of any registry or option values; the resolver gives
the parsed structure its meaning.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union

from core.logging import get_module_logger
from inflector.errors import PatternSyntaxError
from inflector.registry import is_valid_name

logger = get_module_logger()

PATTERN_MARKER = "@"
ESCAPE_CHARS = ("\\", PATTERN_MARKER)
KIND_SEPARATOR = "+"
SEGMENT_SEPARATOR = "|"
TOKEN_SEPARATOR = ":"
GROUP_SEPARATOR = ","
NEGATION = "!"
LOUD_TOKEN = "~"
ESCAPED_LOUD_TOKEN = "\\~"

# Characters that may not appear in a kind specifier (besides whitespace)
_SPECIFIER_STOP = set("@{}|:,!*~\\")


@dataclass(frozen=True)
class TokenGroup:
    """Comma-separated token names sharing one negation flag.

    Attributes:
        names: Token names as written in the pattern.
        negated: Match when the option is NOT one of names.
    """

    names: Tuple[str, ...]
    negated: bool = False

    def __contains__(self, name: object) -> bool:
        return name in self.names


@dataclass(frozen=True)
class Segment:
    """One token-spec/value pairing of a pattern.

    Attributes:
        groups: One TokenGroup per governing kind, in declared order.
        text: Value emitted when the segment matches.
        loud: Emit the matched tokens' descriptions instead of text.
    """

    groups: Tuple[TokenGroup, ...]
    text: str
    loud: bool = False


@dataclass(frozen=True)
class Pattern:
    """A parsed inflection pattern.

    Attributes:
        source: Original span text, e.g. "@{f:Madam|m:Sir}".
        kinds: Declared kinds; empty for simple patterns.
        segments: Token segments in declaration order.
        free_text: Trailing fallback value, if present.
    """

    source: str
    kinds: Tuple[str, ...]
    segments: Tuple[Segment, ...]
    free_text: Optional[str] = None

    @property
    def is_simple(self) -> bool:
        return not self.kinds

    @property
    def is_complex(self) -> bool:
        return len(self.kinds) > 1

    @property
    def arity(self) -> int:
        """Number of token positions per segment."""
        return max(1, len(self.kinds))

    def token_names(self) -> Iterator[str]:
        """Yield every token name in declaration order."""
        for segment in self.segments:
            for group in segment.groups:
                yield from group.names


TemplatePiece = Union[str, Pattern]


class ParsedTemplate:
    """Lazily parsed template.

    Iterating yields literal text runs and Pattern objects in order. Each
    iteration restarts the scan, so a ParsedTemplate can be consumed many
    times.
    """

    def __init__(self, parser: "PatternParser", template: str):
        self._parser = parser
        self.template = template

    def __iter__(self) -> Iterator[TemplatePiece]:
        return self._parser.scan(self.template)

    def __repr__(self) -> str:
        return f"ParsedTemplate({self.template!r})"

    @property
    def patterns(self) -> List[Pattern]:
        """All patterns of the template."""
        return [piece for piece in self if isinstance(piece, Pattern)]


class PatternParser:
    """Split templates into literal text and inflection patterns.

    Handles:
    - Simple, named (@kind{...}) and complex (@kind1+kind2{...}) patterns
    - Token groups (m,f:...) and negation (!m:...)
    - Free text fallback as the last segment
    - Loud tokens (~) and escaped loud tokens (\\~)
    - Escaped patterns (\\@{...} and @@{...})

    Example:
        parser = PatternParser()
        list(parser.parse("Dear @{f:Madam|m:Sir}!"))
        # ["Dear ", Pattern(source="@{f:Madam|m:Sir}", ...), "!"]
    """

    def parse(self, template: str) -> ParsedTemplate:
        """Parse a template lazily.

        Args:
            template: Translation text, already %{}-interpolated.

        Returns:
            ParsedTemplate; PatternSyntaxError surfaces while iterating.
        """
        return ParsedTemplate(self, template)

    def scan(self, template: str) -> Iterator[TemplatePiece]:
        """Single left-to-right scan yielding text runs and patterns.

        Raises:
            PatternSyntaxError: On the first malformed pattern.
        """
        buffer: List[str] = []
        length = len(template)
        i = 0

        while i < length:
            char = template[i]

            # Escapes are checked before pattern starts
            if (
                char in ESCAPE_CHARS
                and i + 1 < length
                and template[i + 1] == PATTERN_MARKER
            ):
                brace = self._pattern_start(template, i + 1)
                if brace is not None:
                    close = template.find("}", brace)
                    end = close + 1 if close != -1 else length
                    buffer.append(template[i + 1:end])
                    i = end
                    continue

            if char == PATTERN_MARKER:
                brace = self._pattern_start(template, i)
                if brace is not None:
                    if buffer:
                        yield "".join(buffer)
                        buffer = []
                    close = self._pattern_end(template, i, brace)
                    yield self.parse_pattern(
                        template[i:close + 1],
                        template[i + 1:brace],
                        template[brace + 1:close],
                    )
                    i = close + 1
                    continue

            buffer.append(char)
            i += 1

        if buffer:
            yield "".join(buffer)

    def parse_pattern(self, source: str, specifier: str, body: str) -> Pattern:
        """Build a Pattern from its kind specifier and body.

        Args:
            source: Full span text (for error reporting).
            specifier: Text between "@" and "{" ("" for simple patterns).
            body: Text between the braces.

        Returns:
            Pattern instance.

        Raises:
            PatternSyntaxError: If the specifier or body is malformed.
        """
        kinds = self._parse_specifier(source, specifier)
        if not body:
            raise self._error("empty pattern body", source)

        arity = max(1, len(kinds))
        segments: List[Segment] = []
        free_text: Optional[str] = None

        for raw_segment in body.split(SEGMENT_SEPARATOR):
            if free_text is not None:
                raise self._error("free text must be the last segment", source)

            head, separator, text = raw_segment.partition(TOKEN_SEPARATOR)
            if separator and not any(c.isspace() for c in head):
                groups = self._parse_token_spec(source, head, arity)
                segments.append(self._make_segment(groups, text))
            else:
                free_text = raw_segment

        return Pattern(
            source=source,
            kinds=kinds,
            segments=tuple(segments),
            free_text=free_text,
        )

    def _pattern_start(self, template: str, at: int) -> Optional[int]:
        """Return the index of the opening brace if a pattern starts at ``at``."""
        j = at + 1
        length = len(template)
        while (
            j < length
            and template[j] not in _SPECIFIER_STOP
            and not template[j].isspace()
        ):
            j += 1
        if j < length and template[j] == "{":
            return j
        return None

    def _pattern_end(self, template: str, start: int, brace: int) -> int:
        """Return the index of the closing brace of a pattern."""
        for j in range(brace + 1, len(template)):
            if template[j] == "{":
                raise self._error(
                    "nested braces are not allowed", template[start:j + 1]
                )
            if template[j] == "}":
                return j
        raise self._error("missing closing brace", template[start:])

    def _parse_specifier(self, source: str, specifier: str) -> Tuple[str, ...]:
        if not specifier:
            return ()
        kinds = tuple(specifier.split(KIND_SEPARATOR))
        for kind in kinds:
            if not is_valid_name(kind):
                raise self._error(f"bad kind specifier {specifier!r}", source)
        if len(set(kinds)) != len(kinds):
            raise self._error(f"repeated kind in specifier {specifier!r}", source)
        return kinds

    def _parse_token_spec(
        self, source: str, head: str, arity: int
    ) -> Tuple[TokenGroup, ...]:
        if not head:
            raise self._error("empty token specifier", source)

        positions = head.split(KIND_SEPARATOR)
        if len(positions) != arity:
            raise self._error(
                f"token specifier {head!r} has {len(positions)} position(s), "
                f"expected {arity}",
                source,
            )

        groups = []
        for position in positions:
            if not position:
                raise self._error(f"empty token group in {head!r}", source)
            names = []
            negations = set()
            for member in position.split(GROUP_SEPARATOR):
                negated = member.startswith(NEGATION)
                name = member[len(NEGATION):] if negated else member
                if not is_valid_name(name):
                    raise self._error(f"bad token {member!r} in {head!r}", source)
                names.append(name)
                negations.add(negated)
            if len(negations) > 1:
                raise self._error(f"mixed negation in token group {position!r}", source)
            groups.append(TokenGroup(names=tuple(names), negated=negations.pop()))
        return tuple(groups)

    def _make_segment(self, groups: Tuple[TokenGroup, ...], text: str) -> Segment:
        if text == LOUD_TOKEN:
            return Segment(groups=groups, text=text, loud=True)
        if text == ESCAPED_LOUD_TOKEN:
            return Segment(groups=groups, text=LOUD_TOKEN)
        return Segment(groups=groups, text=text)

    def _error(self, reason: str, source: str) -> PatternSyntaxError:
        logger.warning("inflection_pattern_malformed", pattern=source, reason=reason)
        return PatternSyntaxError(reason, source)
