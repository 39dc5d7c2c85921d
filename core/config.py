"""
=====================================
Configuration management for querykit.
=====================================

Loads all configuration from environment variables (.env file) and provides
a centralized Config singleton for application-wide access.

The configuration covers:
- MySQL connection settings used by the execution-layer helpers
- Rendering behaviour (strict escaping, statement logging)
- Logging setup (level, file output, colors)

Example:
    >>> from core.config import config
    >>>
    >>> # Database connection
    >>> engine_url = config.get_connection_string()
    >>>
    >>> # Refuse connectionless escaping outside of tests
    >>> if config.strict_escaping:
    ...     print("Passthrough escaping disabled")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment.

    Accepts 1/0, true/false, yes/no and on/off (case-insensitive).
    """
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        host: MySQL server hostname or IP address
        port: MySQL server port number
        user: Database username
        password: Database password
        database: Default database name
        driver: SQLAlchemy MySQL driver name (pymysql, mysqldb, ...)
    """

    host: str
    port: int
    user: str
    password: str
    database: str
    driver: str = 'pymysql'

    def get_connection_string(self, database: Optional[str] = None) -> str:
        """Get MySQL connection string.

        Args:
            database: Optional database name override

        Returns:
            SQLAlchemy-compatible MySQL connection string
        """
        db_name = database or self.database
        return (
            f"mysql+{self.driver}://{self.user}:{quote_plus(self.password)}"
            f"@{self.host}:{self.port}/{db_name}"
        )

    def get_connection_params(self, database: Optional[str] = None) -> dict:
        """Get connection parameters as dictionary.

        Returns:
            Dictionary with keys: host, port, user, password, database
        """
        return {
            'host': self.host,
            'port': self.port,
            'user': self.user,
            'password': self.password,
            'database': database or self.database
        }


@dataclass
class RenderConfig:
    """Statement rendering settings.

    Attributes:
        strict_escaping: If True, refuse to hand out the connectionless
            passthrough escaper
        log_statements: If True, log every rendered statement at DEBUG level
        log_max_length: Maximum number of characters of a rendered statement
            written to the log
    """

    strict_escaping: bool = False
    log_statements: bool = False
    log_max_length: int = 500


@dataclass
class LoggingConfig:
    """Logging settings consumed by core.logger.setup_logging.

    Attributes:
        level: Logging level name
        log_file: Optional log file name
        log_dir: Optional log directory
        use_colors: Colored console output
    """

    level: str = 'INFO'
    log_file: Optional[str] = None
    log_dir: Optional[str] = None
    use_colors: bool = True


class Config:
    """Centralized configuration manager.

    Provides access to all configuration settings loaded from environment
    variables (.env file).

    Attributes:
        db: DatabaseConfig instance with database connection settings
        render: RenderConfig instance with rendering settings
        logging: LoggingConfig instance with logging settings

    Example:
        >>> config = Config()
        >>> conn_str = config.get_connection_string()
        >>> print(f"Connecting to {config.db_host}:{config.db_port}")
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.db = DatabaseConfig(
            host=os.getenv('MYSQL_HOST', 'localhost'),
            port=int(os.getenv('MYSQL_PORT', '3306')),
            user=os.getenv('MYSQL_USER', 'root'),
            password=os.getenv('MYSQL_PASSWORD', ''),
            database=os.getenv('MYSQL_DATABASE', 'test'),
            driver=os.getenv('MYSQL_DRIVER', 'pymysql')
        )

        self.render = RenderConfig(
            strict_escaping=_env_bool('QUERYKIT_STRICT_ESCAPING', False),
            log_statements=_env_bool('QUERYKIT_LOG_STATEMENTS', False),
            log_max_length=int(os.getenv('QUERYKIT_LOG_MAX_LENGTH', '500'))
        )

        self.logging = LoggingConfig(
            level=os.getenv('QUERYKIT_LOG_LEVEL', 'INFO'),
            log_file=os.getenv('QUERYKIT_LOG_FILE') or None,
            log_dir=os.getenv('QUERYKIT_LOG_DIR') or None,
            use_colors=_env_bool('QUERYKIT_LOG_COLORS', True)
        )

    @property
    def db_host(self) -> str:
        """Get database server hostname."""
        return self.db.host

    @property
    def db_port(self) -> int:
        """Get database server port number."""
        return self.db.port

    @property
    def db_user(self) -> str:
        """Get database username."""
        return self.db.user

    @property
    def db_password(self) -> str:
        """Get database password."""
        return self.db.password

    @property
    def db_name(self) -> str:
        """Get default database name."""
        return self.db.database

    @property
    def db_driver(self) -> str:
        """Get SQLAlchemy MySQL driver name."""
        return self.db.driver

    @property
    def strict_escaping(self) -> bool:
        """Whether connectionless escaping is refused."""
        return self.render.strict_escaping

    def get_connection_string(self, database: Optional[str] = None) -> str:
        """Get database connection string.

        Args:
            database: Optional database name override

        Returns:
            SQLAlchemy-compatible MySQL connection string
        """
        return self.db.get_connection_string(database=database)

    def get_connection_params(self, database: Optional[str] = None) -> dict:
        """Get database connection parameters."""
        return self.db.get_connection_params(database=database)


# Global configuration instance
config = Config()
