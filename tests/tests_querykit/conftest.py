"""
Shared fixtures and fakes for querykit tests.

Key fixtures:
- passthrough: connectionless PassthroughEscaper
- fake_connection: driver connection stand-in with a MySQL-style escape_string
- escaper: ConnectionEscaper wrapping fake_connection
- renderer: TemplateRenderer using the passthrough escaper
"""

import pytest


class FakeMySQLConnection:
    """Mock driver connection escaping the way mysql_real_escape_string does."""

    _REPLACEMENTS = {
        0x00: b"\\0",
        0x0A: b"\\n",
        0x0D: b"\\r",
        0x1A: b"\\Z",
        0x22: b'\\"',
        0x27: b"\\'",
        0x5C: b"\\\\",
    }

    def __init__(self):
        self.calls = []

    def escape_string(self, raw):
        self.calls.append(raw)
        return b"".join(self._REPLACEMENTS.get(byte, bytes([byte])) for byte in raw)


class FakeStrConnection:
    """Mock driver connection that only accepts str, like PyMySQL."""

    def escape_string(self, value):
        if not isinstance(value, str):
            raise TypeError("expected str")
        return value.replace("\\", "\\\\").replace('"', '\\"').replace("'", "\\'")


@pytest.fixture
def passthrough(render_config):
    from querykit.escaping import PassthroughEscaper

    return PassthroughEscaper()


@pytest.fixture
def fake_connection():
    return FakeMySQLConnection()


@pytest.fixture
def escaper(fake_connection):
    from querykit.escaping import ConnectionEscaper

    return ConnectionEscaper(fake_connection)


@pytest.fixture
def renderer(passthrough):
    from querykit.renderer import TemplateRenderer

    return TemplateRenderer(passthrough)


@pytest.fixture
def str_connection():
    return FakeStrConnection()
