"""Inflection switches.

Four independent booleans steer how patterns fall back when options and
patterns disagree. A process-wide instance lives on each Translator; every
call may override any of them.

Precedence, lowest first: documented defaults, process-wide values (seeded
from settings, then mutated at runtime), per-call overrides.

Mutating the process-wide instance is not synchronized. Avoid changing
switches while translation calls are in flight.
"""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping, Optional

from core.config import InflectorSettings


@dataclass
class InflectionOptions:
    """Switches controlling pattern resolution.

    Attributes:
        raises: Raise InflectionResolutionError subclasses for unknown tokens
            in patterns and missing or invalid options, instead of falling back.
        aliased_patterns: Allow aliases, not only real tokens, inside patterns.
        unknown_defaults: Use the kind's default token when the option is
            absent, None, empty or names an unknown token.
        excluded_defaults: Use the kind's default token when the option is a
            valid token that the pattern does not mention.
    """

    raises: bool = False
    aliased_patterns: bool = False
    unknown_defaults: bool = True
    excluded_defaults: bool = False

    @classmethod
    def from_settings(cls, inflector_settings: InflectorSettings) -> "InflectionOptions":
        """Build process-wide switches from environment settings."""
        return cls(
            raises=inflector_settings.raises,
            aliased_patterns=inflector_settings.aliased_patterns,
            unknown_defaults=inflector_settings.unknown_defaults,
            excluded_defaults=inflector_settings.excluded_defaults,
        )

    @classmethod
    def names(cls) -> tuple:
        """Names of all switches."""
        return tuple(f.name for f in fields(cls))

    def merged(self, overrides: Optional[Mapping[str, Any]] = None) -> "InflectionOptions":
        """Return a copy with per-call overrides applied.

        None values in overrides are ignored, so callers can pass partial
        switch sets built from optional arguments.

        Args:
            overrides: Mapping of switch name to value.

        Returns:
            New InflectionOptions; self is left untouched.

        Raises:
            TypeError: If overrides name an unknown switch.
        """
        if not overrides:
            return replace(self)

        unknown = set(overrides) - set(self.names())
        if unknown:
            raise TypeError(f"Unknown inflection switches: {sorted(unknown)}")

        changes = {
            name: bool(value) for name, value in overrides.items() if value is not None
        }
        return replace(self, **changes)

    def reset(self, defaults: Optional["InflectionOptions"] = None) -> None:
        """Reset all switches in place.

        Args:
            defaults: Values to restore. Documented defaults when omitted.
        """
        source = defaults if defaults is not None else InflectionOptions()
        for name, value in asdict(source).items():
            setattr(self, name, value)
