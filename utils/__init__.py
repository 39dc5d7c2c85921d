"""
==========================
Utility Functions Package.
==========================

Helpers that connect querykit to a live MySQL server through SQLAlchemy.

Modules:
    database_utils: Engine creation, connection escaping, statement execution
"""

__version__ = "0.1.0"
__all__ = [
    'StatementExecutionError',
    'get_connection_string',
    'create_sqlalchemy_engine',
    'escaper_from_connection',
    'execute_statement'
]

from .database_utils import (
    StatementExecutionError,
    create_sqlalchemy_engine,
    escaper_from_connection,
    execute_statement,
    get_connection_string,
)
