"""
==================================================
Execution-layer helpers for rendered statements.
==================================================

Connects querykit to a MySQL server through SQLAlchemy. Rendering stays in
querykit; this module only builds engines, pulls the driver connection out
of a SQLAlchemy connection for escaping, and sends rendered text.

Key Features:
    - Connection string building from config
    - Engine creation with pre-ping pooling
    - Escaper bound to a live SQLAlchemy connection
    - Render-and-execute for statements and batches

Example:
    >>> from utils.database_utils import create_sqlalchemy_engine, execute_statement
    >>> from querykit import Statement
    >>>
    >>> engine = create_sqlalchemy_engine()
    >>> with engine.begin() as conn:
    ...     execute_statement(conn, Statement("DELETE FROM %T WHERE %W",
    ...                                       ["sessions", {"user_id": 7}]))
"""

import logging
from typing import Any, Union
from urllib.parse import quote_plus

from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import config
from querykit.escaping import ConnectionEscaper
from querykit.statement import Statement, StatementBatch

logger = logging.getLogger(__name__)


class StatementExecutionError(Exception):
    """Exception raised when the server rejects a rendered statement."""
    pass


def get_connection_string(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None,
    driver: str = None
) -> str:
    """
    Build MySQL connection string.

    Args:
        host: Database hostname (defaults to config.db_host)
        port: Database port (defaults to config.db_port)
        user: Database user (defaults to config.db_user)
        password: Database password (defaults to config.db_password)
        database: Database name (defaults to config.db_name)
        driver: SQLAlchemy driver (defaults to config.db_driver)

    Returns:
        MySQL connection string

    Example:
        >>> get_connection_string(database='shop')
        'mysql+pymysql://root:@localhost:3306/shop'
    """
    host = host if host is not None else config.db_host
    port = port if port is not None else config.db_port
    user = user if user is not None else config.db_user
    password = password if password is not None else config.db_password
    database = database if database is not None else config.db_name
    driver = driver if driver is not None else config.db_driver

    return f"mysql+{driver}://{user}:{quote_plus(password)}@{host}:{port}/{database}"


def create_sqlalchemy_engine(
    host: str = None,
    port: int = None,
    user: str = None,
    password: str = None,
    database: str = None,
    echo: bool = False,
    pool_size: int = 5,
    max_overflow: int = 10
) -> Engine:
    """
    Create SQLAlchemy engine with connection pooling.

    Args:
        host: Database hostname
        port: Database port
        user: Database user
        password: Database password
        database: Database name
        echo: Enable SQL statement logging
        pool_size: Connection pool size
        max_overflow: Maximum overflow connections

    Returns:
        Configured SQLAlchemy Engine
    """
    connection_url = URL.create(
        drivername=f"mysql+{config.db_driver}",
        username=user or config.db_user,
        password=password or config.db_password,
        host=host or config.db_host,
        port=port or config.db_port,
        database=database or config.db_name
    )

    logger.info(f"Creating engine for {connection_url.host}:{connection_url.port}/{connection_url.database}")
    return create_engine(
        connection_url,
        echo=echo,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True
    )


def escaper_from_connection(connection: Connection) -> ConnectionEscaper:
    """
    Build an escaper from the DBAPI connection behind a SQLAlchemy connection.

    Args:
        connection: Open SQLAlchemy Connection

    Returns:
        ConnectionEscaper using the driver's native escape_string

    Raises:
        TypeError: If the driver connection cannot escape strings
    """
    pooled = connection.connection
    dbapi_connection = getattr(pooled, 'dbapi_connection', None)
    if dbapi_connection is None:
        dbapi_connection = pooled
    return ConnectionEscaper(dbapi_connection)


def execute_statement(
    connection: Connection,
    statement: Union[Statement, StatementBatch]
) -> Any:
    """
    Render a statement (or batch) with the connection's escaper and run it.

    Args:
        connection: Open SQLAlchemy Connection
        statement: Statement or StatementBatch to send

    Returns:
        The CursorResult from SQLAlchemy

    Raises:
        RenderError: If the statement does not render; nothing is sent
        StatementExecutionError: If the server rejects the statement
    """
    escaper = escaper_from_connection(connection)
    if isinstance(statement, StatementBatch):
        sql = statement.render_all(escaper)
    else:
        sql = statement.render(escaper)

    try:
        # no_parameters: the driver must not apply paramstyle % formatting
        return connection.exec_driver_sql(
            sql, execution_options={"no_parameters": True}
        )
    except SQLAlchemyError as e:
        logger.error(f"❌ Statement execution failed: {e}")
        raise StatementExecutionError(f"Statement execution failed: {e}") from e
