"""
=========================
querykit error taxonomy.
=========================

All failures are fail-closed: a renderer error never comes with partial
output. Errors are programmer/data errors, not transient conditions, so
nothing here is retryable.

Hierarchy:
    QueryKitError
    ├── RenderError (offset, message, template)
    │   ├── DangerousCharacter
    │   ├── UnterminatedSpecifier
    │   ├── UnknownSpecifier
    │   ├── TooFewParameters
    │   ├── TooManyParameters
    │   ├── SpecifierTypeMismatch (expected, actual)
    │   └── RowLengthMismatch
    ├── ArgumentError
    │   ├── TypeMismatch
    │   └── UnsupportedConversion
    ├── UnsupportedDynamicType
    └── EscaperUnavailableError
"""

from typing import Optional


class QueryKitError(Exception):
    """Base class for every error raised by querykit."""
    pass


class RenderError(QueryKitError, ValueError):
    """Exception raised when a template cannot be rendered.

    The renderer reports where it stopped as an index into the template
    ``str``; the offset exposed here is the matching position in the
    template's UTF-8 encoding, i.e. the byte the server would see.

    Attributes:
        offset: UTF-8 byte offset in the template where rendering stopped
        position: The same location as a character index into ``template``
        message: Human-readable description of the problem
        template: The template text being rendered
    """

    def __init__(self, position: int, message: str, template: str = ''):
        self.position = position
        self.offset = len(template[:position].encode('utf-8')) if template else position
        self.message = message
        self.template = template
        super().__init__(
            f"Parse error at offset {self.offset}: {message}, query: {template}"
        )


class DangerousCharacter(RenderError):
    """Template contains a literal ; ' \" or ` outside the escape mechanisms."""
    pass


class UnterminatedSpecifier(RenderError):
    """Template ends in the middle of a % specifier."""
    pass


class UnknownSpecifier(RenderError):
    """Template uses a % code that does not exist."""
    pass


class TooFewParameters(RenderError):
    """Template consumes more arguments than were supplied."""
    pass


class TooManyParameters(RenderError):
    """Arguments remain after the template has been fully rendered."""
    pass


class SpecifierTypeMismatch(RenderError):
    """Argument variant is incompatible with the specifier consuming it.

    Attributes:
        expected: What the specifier accepts (e.g. 'int', 'list of lists')
        actual: Variant name of the offending argument
    """

    def __init__(
        self,
        position: int,
        expected: str,
        actual: str,
        template: str = '',
        message: Optional[str] = None
    ):
        self.expected = expected
        self.actual = actual
        super().__init__(
            position,
            message or f"invalid value type {actual} for format string, expected {expected}",
            template
        )


class RowLengthMismatch(RenderError):
    """Rows passed to %V do not all have the same number of columns."""
    pass


class ArgumentError(QueryKitError):
    """Base class for misuse of an ArgumentValue."""
    pass


class TypeMismatch(ArgumentError, TypeError):
    """Accessor called for a variant the value does not hold."""
    pass


class UnsupportedConversion(ArgumentError, TypeError):
    """Display-string conversion requested for a non-scalar variant."""
    pass


class UnsupportedDynamicType(QueryKitError, TypeError):
    """Dynamic (JSON-like) value has no ArgumentValue representation."""
    pass


class EscaperUnavailableError(QueryKitError):
    """No connection handle was supplied while strict escaping is enabled."""
    pass
