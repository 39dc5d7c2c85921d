"""
================================
Statements and statement batches.
================================

A Statement pairs a template with its default arguments. Statements are
immutable: append() and ``+`` build a new Statement, so a template shared
between callers can never be changed under them.

A StatementBatch joins several rendered statements with ``;`` into one
multi-statement text.

Usage:
    from querykit.statement import Statement, StatementBatch

    insert = Statement("INSERT INTO %T (%LC) VALUES %V",
                       ["users", ["id", "name"], [[1, "ann"], [2, "bob"]]])
    sql = insert.render(escaper)

    batch = StatementBatch([Statement.unsafe_text("BEGIN"), insert])
    sql = batch.render_all(escaper)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple

from querykit.arguments import ArgumentValue
from querykit.escaping import Escaper, PassthroughEscaper, get_escaper
from querykit.renderer import TemplateRenderer

logger = logging.getLogger(__name__)

STATEMENT_SEPARATOR = ';'


@dataclass(frozen=True)
class Statement:
    """
    Template text plus its default arguments.

    Attributes:
        text: Template text (verbatim SQL when unsafe is True)
        arguments: Default arguments consumed by the template
        unsafe: If True, text is emitted as-is with no scanning or escaping;
            the caller vouches for it
    """

    text: str
    arguments: Tuple[ArgumentValue, ...] = ()
    unsafe: bool = False

    def __post_init__(self):
        if not isinstance(self.text, str):
            raise TypeError(f"Statement text must be str, got {type(self.text).__name__}")
        object.__setattr__(
            self,
            'arguments',
            tuple(ArgumentValue.from_python(arg) for arg in self.arguments)
        )

    @classmethod
    def unsafe_text(cls, text: str) -> 'Statement':
        """Statement emitted verbatim. Only for SQL validated elsewhere."""
        return cls(text, (), unsafe=True)

    def append(self, other: 'Statement') -> 'Statement':
        """
        Concatenate two statements into a new one.

        Text and arguments are joined in order. The result is unsafe only if
        both parts are; mixing a verbatim part into a checked one means the
        verbatim text gets scanned at render time.
        """
        return Statement(
            self.text + other.text,
            self.arguments + other.arguments,
            unsafe=self.unsafe and other.unsafe
        )

    def __add__(self, other):
        if not isinstance(other, Statement):
            return NotImplemented
        return self.append(other)

    def render(
        self,
        escaper: Optional[Escaper] = None,
        arguments: Optional[Sequence[Any]] = None
    ) -> str:
        """
        Render the statement.

        Args:
            escaper: Escaper for string literals (None: connectionless, see
                querykit.escaping.get_escaper)
            arguments: Override for the default arguments, e.g. to render the
                same template for several rows

        Returns:
            SQL text ready to be sent to the server
        """
        if self.unsafe:
            logger.debug("Emitting unsafe statement verbatim")
            return self.text
        params = self.arguments if arguments is None else arguments
        return TemplateRenderer(escaper).render(self.text, params)

    def render_insecure(self, arguments: Optional[Sequence[Any]] = None) -> str:
        """Render without a connection. String literals are NOT escaped; tests only."""
        return self.render(PassthroughEscaper(), arguments)


def render_many(statements: Iterable[Statement], escaper: Optional[Escaper] = None) -> str:
    """Render each statement and join them with ``;`` (no trailing separator)."""
    if escaper is None:
        escaper = get_escaper(None)
    return STATEMENT_SEPARATOR.join(statement.render(escaper) for statement in statements)


@dataclass
class StatementBatch:
    """
    Ordered statements rendered into one multi-statement text.

    The last rendered text is kept on the instance; it is overwritten by
    every render_all() call. Do not render the same batch concurrently.

    Attributes:
        statements: Statements in execution order
        rendered: Text produced by the last successful render_all(), if any
    """

    statements: List[Statement] = field(default_factory=list)
    rendered: Optional[str] = field(default=None, init=False, repr=False)

    def add(self, statement: Statement) -> 'StatementBatch':
        self.statements.append(statement)
        self.rendered = None
        return self

    def render_all(self, escaper: Optional[Escaper] = None) -> str:
        """
        Render every statement and join them with ``;``.

        A batch holding a single unsafe statement returns its text directly.

        Raises:
            RenderError: From the first statement that fails; later
                statements are not rendered
        """
        if len(self.statements) == 1 and self.statements[0].unsafe:
            self.rendered = self.statements[0].text
        else:
            self.rendered = render_many(self.statements, escaper)
        logger.debug(f"Rendered batch of {len(self.statements)} statement(s)")
        return self.rendered

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.statements)
