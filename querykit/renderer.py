"""
==================================
Template renderer for SQL statements.
==================================

Interprets the ``%`` mini-language of statement templates. The template is
walked once, left to right; every specifier consumes the next argument.

Specifiers:
- %%            literal percent sign
- %d %s %f      int / string / double (NULL always allowed)
- %T %C         table / column identifier, backtick quoted
- %K            value inside a /* comment */
- %=d %=s %=f   `` = value`` or `` IS NULL``
- %V            rows of a VALUES clause: (a, b), (c, d)
- %LO %LA       (k1 = v1 OR k2 = v2) / (... AND ...)
- %Ld %Ls %Lf %LC  comma separated list of values or identifiers
- %U            SET style: `k1` = v1, `k2` = NULL
- %W            WHERE style: `k1` = v1 AND `k2` IS NULL
- %Q            raw, unescaped text or a trusted sub-statement

The characters ; ' " and ` may never appear literally in a template; they
can only be produced by the specifiers above.

Example:
    >>> from querykit.renderer import render
    >>> render("SELECT * FROM %T WHERE %W", ["users", {"id": 7}])
    'SELECT * FROM `users` WHERE `id` = 7'
"""

import logging
from typing import Any, List, Optional, Sequence

from core.config import config
from querykit.arguments import ArgumentKind, ArgumentValue
from querykit.escaping import Escaper, get_escaper
from querykit.exceptions import (
    DangerousCharacter,
    RenderError,
    RowLengthMismatch,
    SpecifierTypeMismatch,
    TooFewParameters,
    TooManyParameters,
    UnknownSpecifier,
    UnsupportedConversion,
    UnterminatedSpecifier,
)

logger = logging.getLogger(__name__)

DANGEROUS_CHARACTERS = frozenset(";'\"`")

# Internal-only type code: accepts any scalar. Never read from a template.
WILDCARD = 'v'

_SCALAR_SPECIFIERS = {
    'd': ArgumentKind.INT,
    's': ArgumentKind.STRING,
    'f': ArgumentKind.DOUBLE,
}

_LIST_SPECIFIERS = frozenset('dsfC')


def quote_identifier(name: str) -> str:
    """Wrap ``name`` in backticks, doubling any backtick inside it."""
    return '`' + name.replace('`', '``') + '`'


def comment_text(text: str) -> str:
    """Break up comment delimiters so ``text`` cannot close or reopen a comment."""
    return text.replace('/*', ' / * ').replace('*/', ' * / ')


class TemplateRenderer:
    """
    Renders templates against ordered arguments using one Escaper.

    A renderer holds no per-render state, so one instance can be reused for
    any number of templates as long as its escaper allows it.

    Attributes:
        escaper: Escaper used for string literals
    """

    def __init__(self, escaper: Optional[Escaper] = None):
        self.escaper = escaper if escaper is not None else get_escaper(None)

    def render(self, template: str, arguments: Sequence[Any] = ()) -> str:
        """
        Render ``template`` with ``arguments``.

        Args:
            template: Template text using % specifiers
            arguments: ArgumentValues, or plain Python values coerced with
                ArgumentValue.from_python

        Returns:
            Final SQL text

        Raises:
            RenderError: On any template or argument problem; no partial
                output is ever returned
        """
        args = [ArgumentValue.from_python(arg) for arg in arguments]
        logger.debug(f"Rendering template with {len(args)} argument(s): {template}")

        try:
            rendered = self._render(template, args)
        except RenderError as e:
            logger.debug(f"Render failed: {e}")
            raise

        if config.render.log_statements:
            logger.debug(f"Rendered statement: {rendered[:config.render.log_max_length]}")
        return rendered

    # ------------------------------------------------------------------
    # Main scan
    # ------------------------------------------------------------------

    def _render(self, template: str, args: List[ArgumentValue]) -> str:
        for offset, char in enumerate(template):
            if char in DANGEROUS_CHARACTERS:
                raise DangerousCharacter(
                    offset, "Saw dangerous characters in SQL query", template
                )

        out: List[str] = []
        consumed = 0
        idx = 0
        length = len(template)

        while idx < length:
            char = template[idx]
            if char != '%':
                out.append(char)
                idx += 1
                continue

            idx += 1
            if idx >= length:
                raise UnterminatedSpecifier(
                    length, "string ended with unfinished % code", template
                )

            code = template[idx]
            if code == '%':
                out.append('%')
                idx += 1
                continue

            if consumed >= len(args):
                raise TooFewParameters(idx, "too few parameters for query", template)
            param = args[consumed]
            consumed += 1

            idx = self._render_specifier(out, template, idx, code, param) + 1

        if consumed != len(args):
            raise TooManyParameters(0, "too many parameters specified for query", template)

        return ''.join(out)

    def _render_specifier(
        self,
        out: List[str],
        template: str,
        idx: int,
        code: str,
        param: ArgumentValue
    ) -> int:
        """Emit one specifier; returns the index of its last character."""
        if code in _SCALAR_SPECIFIERS:
            self._append_value(out, template, idx, code, param)
        elif code == 'K':
            out.append('/* ')
            out.append(comment_text(self._display(template, idx, code, param)))
            out.append(' */')
        elif code in ('T', 'C'):
            self._append_identifier(out, template, idx, code, param)
        elif code == '=':
            idx, type_code = self._next_code(template, idx)
            if type_code not in _SCALAR_SPECIFIERS:
                raise UnknownSpecifier(idx, "expected %=d, %=f, or %=s", template)
            if param.is_null():
                out.append(' IS NULL')
            else:
                out.append(' = ')
                self._append_value(out, template, idx, type_code, param)
        elif code == 'V':
            self._append_rows(out, template, idx, param)
        elif code == 'L':
            idx, type_code = self._next_code(template, idx)
            if type_code in ('O', 'A'):
                separator = ' OR ' if type_code == 'O' else ' AND '
                out.append('(')
                self._append_clauses(out, template, idx, 'L' + type_code, separator, param)
                out.append(')')
            elif type_code in _LIST_SPECIFIERS:
                self._append_list(out, template, idx, type_code, param)
            else:
                raise UnknownSpecifier(
                    idx, f"unknown list type %L{type_code}", template
                )
        elif code == 'U':
            self._append_clauses(out, template, idx, 'U', ', ', param)
        elif code == 'W':
            self._append_clauses(out, template, idx, 'W', ' AND ', param)
        elif code == 'Q':
            if param.is_raw_statement():
                out.append(param.get_statement().render(self.escaper))
            else:
                out.append(self._display(template, idx, code, param))
        else:
            raise UnknownSpecifier(idx, f"unknown % code %{code}", template)
        return idx

    @staticmethod
    def _next_code(template: str, idx: int):
        if idx + 1 >= len(template):
            raise UnterminatedSpecifier(idx, "unexpected end of string", template)
        return idx + 1, template[idx + 1]

    # ------------------------------------------------------------------
    # Emitters
    # ------------------------------------------------------------------

    def _append_value(
        self,
        out: List[str],
        template: str,
        offset: int,
        code: str,
        value: ArgumentValue
    ) -> None:
        """Emit a scalar checked against ``code`` (or any scalar for WILDCARD)."""
        kind = value.kind
        if kind is ArgumentKind.NULL:
            out.append('NULL')
            return

        if code == WILDCARD:
            allowed = kind in (
                ArgumentKind.STRING, ArgumentKind.INT,
                ArgumentKind.DOUBLE, ArgumentKind.BOOL,
            )
        else:
            allowed = kind is _SCALAR_SPECIFIERS[code]

        if not allowed:
            if code == WILDCARD:
                raise SpecifierTypeMismatch(
                    offset, 'scalar', value.type_name, template,
                    message=f"invalid value type {value.type_name}, expected a scalar value"
                )
            raise SpecifierTypeMismatch(
                offset, _SCALAR_SPECIFIERS[code].value, value.type_name, template,
                message=f"invalid value type {value.type_name} for format string %{code}"
            )

        if kind is ArgumentKind.STRING:
            out.append('"')
            out.append(self.escaper.escape_text(value.get_string()))
            out.append('"')
        else:
            out.append(value.to_display_string())

    def _append_identifier(
        self,
        out: List[str],
        template: str,
        offset: int,
        code: str,
        value: ArgumentValue
    ) -> None:
        if not value.is_string():
            raise SpecifierTypeMismatch(
                offset, 'string', value.type_name, template,
                message=f"invalid value type {value.type_name} for identifier %{code}"
            )
        out.append(quote_identifier(value.get_string()))

    def _display(self, template: str, offset: int, code: str, value: ArgumentValue) -> str:
        try:
            return value.to_display_string()
        except UnsupportedConversion:
            raise SpecifierTypeMismatch(
                offset, 'scalar', value.type_name, template,
                message=f"invalid value type {value.type_name} for format string %{code}"
            ) from None

    def _append_rows(
        self,
        out: List[str],
        template: str,
        offset: int,
        param: ArgumentValue
    ) -> None:
        """Emit %V: ``(a, b), (c, d)``; every row must have the same width."""
        if not param.is_list():
            raise SpecifierTypeMismatch(
                offset, 'list of lists', param.type_name, template,
                message=f"expected array of arrays for %V formatter, got {param.type_name}"
            )

        row_len = None
        for row_number, row in enumerate(param.get_list()):
            if not row.is_list():
                raise SpecifierTypeMismatch(
                    offset, 'list', row.type_name, template,
                    message=f"row {row_number} of %V is {row.type_name}, expected array"
                )
            columns = row.get_list()
            if row_len is None:
                row_len = len(columns)
            elif len(columns) != row_len:
                raise RowLengthMismatch(
                    offset,
                    "not all rows provided for %V formatter are the same size",
                    template
                )

            if row_number:
                out.append(', ')
            out.append('(')
            for col_number, column in enumerate(columns):
                if col_number:
                    out.append(', ')
                self._append_value(out, template, offset, WILDCARD, column)
            out.append(')')

    def _append_list(
        self,
        out: List[str],
        template: str,
        offset: int,
        code: str,
        param: ArgumentValue
    ) -> None:
        if not param.is_list():
            raise SpecifierTypeMismatch(
                offset, 'list', param.type_name, template,
                message=f"expected array for %L formatter, got {param.type_name}"
            )
        for position, item in enumerate(param.get_list()):
            if position:
                out.append(', ')
            if code == 'C':
                self._append_identifier(out, template, offset, 'LC', item)
            else:
                self._append_value(out, template, offset, code, item)

    def _append_clauses(
        self,
        out: List[str],
        template: str,
        offset: int,
        label: str,
        separator: str,
        param: ArgumentValue
    ) -> None:
        """Emit ``key = value`` pairs; NULL becomes IS NULL unless separator is a comma."""
        if not param.is_pair_list():
            raise SpecifierTypeMismatch(
                offset, 'object', param.type_name, template,
                message=f"object expected for %{label} but received {param.type_name}"
            )
        for position, (key, value) in enumerate(param.get_pairs()):
            if position:
                out.append(separator)
            out.append(quote_identifier(key))
            if value.is_null() and separator != ', ':
                out.append(' IS NULL')
            else:
                out.append(' = ')
                self._append_value(out, template, offset, WILDCARD, value)


def render(
    template: str,
    arguments: Sequence[Any] = (),
    escaper: Optional[Escaper] = None
) -> str:
    """Render ``template`` with a one-off TemplateRenderer."""
    return TemplateRenderer(escaper).render(template, arguments)
