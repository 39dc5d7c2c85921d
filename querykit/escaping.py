"""
======================================
String-literal escaping capabilities.
======================================

The renderer never escapes string literals itself; it asks an Escaper.
Two implementations are provided:

- ConnectionEscaper: wraps a live driver connection and calls its native
  ``escape_string`` (mysqlclient and PyMySQL connections both have one).
- PassthroughEscaper: no connection, bytes are returned unchanged. Only
  acceptable in tests; refused entirely when strict escaping is configured.

Example:
    >>> from querykit.escaping import get_escaper
    >>> escaper = get_escaper(raw_connection)
    >>> escaper.escape_text('O"Brien')
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from core.config import config
from querykit.exceptions import EscaperUnavailableError

logger = logging.getLogger(__name__)


class Escaper(ABC):
    """Turns raw bytes into bytes safe inside a quoted string literal."""

    @abstractmethod
    def escape(self, raw: bytes) -> bytes:
        """Escape ``raw`` for embedding between quotes."""

    def escape_text(self, value: str) -> str:
        """Escape a str, round-tripping through UTF-8."""
        return self.escape(value.encode('utf-8')).decode('utf-8')


class PassthroughEscaper(Escaper):
    """Connectionless escaper that copies input through unmodified."""

    def escape(self, raw: bytes) -> bytes:
        logger.debug(
            "connectionless escape performed; this should only occur in testing"
        )
        return bytes(raw)

    def __repr__(self):
        return 'PassthroughEscaper()'


class ConnectionEscaper(Escaper):
    """Escaper backed by a DBAPI connection's native escaping routine.

    The renderer wraps escaped literals in double quotes, so the server must
    treat ``"`` as a string delimiter and honour backslash escapes. Sessions
    with ``ANSI_QUOTES`` or ``NO_BACKSLASH_ESCAPES`` in ``sql_mode`` are not
    supported.

    Attributes:
        handle: The driver connection (must expose ``escape_string``)
    """

    def __init__(self, handle: Any):
        if not callable(getattr(handle, 'escape_string', None)):
            raise TypeError(
                f"{type(handle).__name__} does not provide escape_string(); "
                "pass the raw driver connection"
            )
        self.handle = handle

    def escape(self, raw: bytes) -> bytes:
        # mysqlclient takes and returns bytes, PyMySQL works on str
        try:
            escaped = self.handle.escape_string(raw)
        except TypeError:
            escaped = self.handle.escape_string(raw.decode('utf-8'))
        if isinstance(escaped, str):
            return escaped.encode('utf-8')
        return bytes(escaped)

    def __repr__(self):
        return f"ConnectionEscaper({self.handle!r})"


def get_escaper(handle: Optional[Any] = None) -> Escaper:
    """
    Return the escaper for ``handle``.

    Args:
        handle: Driver connection, or None for connectionless rendering

    Returns:
        ConnectionEscaper when a handle is given, else PassthroughEscaper

    Raises:
        EscaperUnavailableError: If handle is None and strict escaping is on
    """
    if handle is not None:
        return ConnectionEscaper(handle)
    if config.render.strict_escaping:
        raise EscaperUnavailableError(
            "No connection handle supplied and QUERYKIT_STRICT_ESCAPING is enabled"
        )
    return PassthroughEscaper()
