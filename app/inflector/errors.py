"""Custom exceptions for the inflection engine.

Every error shares the InflectorError base:

- InflectionConfigError: broken inflection configuration, detected while a
  registry is built. Always raised.
- PatternSyntaxError: a malformed pattern inside a translation. Always raised.
- InflectionResolutionError: a runtime mismatch between options and a
  pattern. Raised only when the ``raises`` switch is enabled; otherwise the
  resolver falls back silently.
- MissingInterpolationArgumentError: a %{} placeholder without a variable,
  also a ValueError.
"""

from typing import Optional


class InflectorError(Exception):
    """Base exception for all inflection errors.

    Example:
        try:
            translator.inflect(locale, key, options)
        except InflectorError as e:
            logger.error("inflection_failed", error=str(e))
    """

    pass


class InflectionConfigError(InflectorError):
    """Raised when inflection configuration for a locale is invalid.

    Attributes:
        locale: Locale tag whose configuration failed, if known.
        kind: Kind being processed, if any.
        token: Offending token name, if any.
    """

    def __init__(
        self,
        message: str,
        locale: Optional[str] = None,
        kind: Optional[str] = None,
        token: Optional[str] = None,
    ):
        self.locale = locale
        self.kind = kind
        self.token = token
        if locale:
            message = f"{message} (locale: {locale})"
        super().__init__(message)


class InvalidLocaleError(InflectionConfigError, ValueError):
    """Raised when a locale designator is empty or malformed.

    Example:
        >>> Locale.from_string("not a locale")
        Traceback (most recent call last):
        ...
        InvalidLocaleError: Unsupported locale: 'not a locale'
    """

    def __init__(self, locale_str: object):
        super().__init__(f"Unsupported locale: {locale_str!r}")
        self.locale = str(locale_str)


class BadInflectionKindError(InflectionConfigError):
    """Raised when a kind name is malformed or its body is not a mapping."""

    pass


class BadInflectionTokenError(InflectionConfigError):
    """Raised when a token name or its description is malformed.

    Example:
        gender:
          "f|m": "female or male"   # reserved character in name
          n: ""                     # empty description
    """

    pass


class DuplicatedInflectionTokenError(InflectionConfigError):
    """Raised when the same token name appears in more than one kind.

    Attributes:
        original_kind: Kind that declared the token first.
    """

    def __init__(
        self,
        token: str,
        kind: str,
        original_kind: str,
        locale: Optional[str] = None,
    ):
        self.original_kind = original_kind
        super().__init__(
            f"Token {token!r} of kind {kind!r} is already used by kind {original_kind!r}",
            locale=locale,
            kind=kind,
            token=token,
        )


class BadInflectionAliasError(InflectionConfigError):
    """Raised when an alias is dangling, cyclic or points into another kind.

    Attributes:
        target: Name the alias points to.
    """

    def __init__(
        self,
        message: str,
        token: str,
        target: Optional[str] = None,
        kind: Optional[str] = None,
        locale: Optional[str] = None,
    ):
        self.target = target
        super().__init__(message, locale=locale, kind=kind, token=token)


class BadDefaultTokenError(InflectionConfigError):
    """Raised when a kind's default does not resolve to a real token of that kind."""

    pass


class PatternSyntaxError(InflectorError):
    """Raised when an inflection pattern cannot be parsed.

    Attributes:
        pattern: Offending pattern text.
        reason: Short description of what is wrong.
    """

    def __init__(self, reason: str, pattern: str):
        self.reason = reason
        self.pattern = pattern
        super().__init__(f"Malformed inflection pattern {pattern!r}: {reason}")


class InflectionResolutionError(InflectorError):
    """Base for errors raised while resolving a pattern with ``raises`` enabled.

    Attributes:
        pattern: Pattern source text.
        kind: Kind involved, if known.
        token: Token involved, if any.
    """

    def __init__(
        self,
        message: str,
        pattern: str,
        kind: Optional[str] = None,
        token: Optional[str] = None,
    ):
        self.pattern = pattern
        self.kind = kind
        self.token = token
        super().__init__(message)


class InvalidOptionForKindError(InflectionResolutionError):
    """Raised when no usable option or default exists for a governing kind.

    Example:
        >>> translator.interpolate(en, "Dear @{m:Sir|f:Madam|Fallback}", switches={"raises": True})
        Traceback (most recent call last):
        ...
        InvalidOptionForKindError: option 'gender' required by the pattern
            '@{m:Sir|f:Madam|Fallback}' was not found
    """

    def __init__(self, pattern: str, kind: str, value: Optional[str] = None):
        self.value = value
        if value is None:
            message = f"option {kind!r} required by the pattern {pattern!r} was not found"
        else:
            message = (
                f"option {kind!r} required by the pattern {pattern!r} "
                f"has an invalid value {value!r}"
            )
        super().__init__(message, pattern=pattern, kind=kind, token=value)


class InvalidInflectionTokenError(InflectionResolutionError):
    """Raised when a pattern uses a token that is unknown or not allowed there."""

    def __init__(self, pattern: str, token: str, kind: Optional[str] = None):
        super().__init__(
            f"token {token!r} used in the pattern {pattern!r} is invalid",
            pattern=pattern,
            kind=kind,
            token=token,
        )


class MisplacedInflectionTokenError(InflectionResolutionError):
    """Raised when a pattern token belongs to another kind than its position.

    Attributes:
        expected_kind: Kind governing the position.
    """

    def __init__(self, pattern: str, token: str, kind: str, expected_kind: str):
        self.expected_kind = expected_kind
        super().__init__(
            f"token {token!r} of kind {kind!r} used in the pattern {pattern!r} "
            f"is not of the expected kind {expected_kind!r}",
            pattern=pattern,
            kind=kind,
            token=token,
        )


class InvalidInflectionKindError(InflectionResolutionError):
    """Raised when a named or complex pattern declares an unknown kind."""

    def __init__(self, pattern: str, kind: str):
        super().__init__(
            f"kind {kind!r} used in the pattern {pattern!r} is unknown",
            pattern=pattern,
            kind=kind,
        )


class MissingInterpolationArgumentError(InflectorError, ValueError):
    """Raised when a %{} placeholder has no matching variable.

    Attributes:
        variable: Placeholder name.
        template: Template being interpolated.
    """

    def __init__(self, variable: str, template: str):
        self.variable = variable
        self.template = template
        super().__init__(f"Missing interpolation variable: {variable}")
