"""
=========================================
querykit: safe SQL statement construction.
=========================================

Builds injection-resistant SQL text from a template and typed arguments,
ahead of any network I/O.

The package is organised by concern:
    - arguments.py: ArgumentValue tagged union and display conversion
    - dynamic.py: import of JSON-like data (sorted object keys)
    - escaping.py: Escaper capability (connection-backed or passthrough)
    - renderer.py: the % template interpreter
    - statement.py: Statement and StatementBatch
    - exceptions.py: error taxonomy

Example:
    >>> from querykit import ArgumentValue, Statement
    >>>
    >>> stmt = Statement(
    ...     "UPDATE %T SET %U WHERE %W",
    ...     ["users", {"name": "ann", "email": None}, {"id": 7}]
    ... )
    >>> stmt.render_insecure()
    'UPDATE `users` SET `name` = "ann", `email` = NULL WHERE `id` = 7'
"""

__version__ = "0.1.0"
__all__ = [
    # Values
    'ArgumentKind', 'ArgumentValue', 'from_dynamic', 'from_json',
    # Escaping
    'Escaper', 'PassthroughEscaper', 'ConnectionEscaper', 'get_escaper',
    # Rendering
    'TemplateRenderer', 'render', 'Statement', 'StatementBatch', 'render_many',
    # Errors
    'QueryKitError', 'RenderError', 'DangerousCharacter', 'UnterminatedSpecifier',
    'UnknownSpecifier', 'TooFewParameters', 'TooManyParameters',
    'SpecifierTypeMismatch', 'RowLengthMismatch', 'ArgumentError', 'TypeMismatch',
    'UnsupportedConversion', 'UnsupportedDynamicType', 'EscaperUnavailableError',
]

from .arguments import ArgumentKind, ArgumentValue
from .dynamic import from_dynamic, from_json
from .escaping import ConnectionEscaper, Escaper, PassthroughEscaper, get_escaper
from .exceptions import (
    ArgumentError,
    DangerousCharacter,
    EscaperUnavailableError,
    QueryKitError,
    RenderError,
    RowLengthMismatch,
    SpecifierTypeMismatch,
    TooFewParameters,
    TooManyParameters,
    TypeMismatch,
    UnknownSpecifier,
    UnsupportedConversion,
    UnsupportedDynamicType,
    UnterminatedSpecifier,
)
from .renderer import TemplateRenderer, render
from .statement import Statement, StatementBatch, render_many
