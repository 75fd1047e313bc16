"""
================================================
Configuration management for the SQLite builder.
================================================

Loads configuration from environment variables (.env file) and provides
a centralized Config singleton for application-wide access.

Environment variables:
    SQLITE_PATH: Database file path, or ':memory:' (default: data/database.db)
    SQLITE_ECHO: Log every statement SQLAlchemy runs (true/false)
    LOG_LEVEL: Root log level (default: INFO)
    LOG_FILE: Optional log file name
    LOG_DIR: Directory for LOG_FILE (default: logs)
    LOG_COLORS: Colored console output (true/false)
    LOG_AUTO_CONFIGURE: Configure logging when core.logger is imported

Example:
    >>> from core.config import config
    >>>
    >>> engine_url = config.get_connection_string()
    >>> print(f"Database: {config.db_path}")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

MEMORY_DATABASE = ':memory:'


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def expand_database_path(path: str) -> str:
    """Expand a leading ``~`` in a database path. ``:memory:`` is returned unchanged."""
    if path == MEMORY_DATABASE:
        return path
    return str(Path(path).expanduser())


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        path: SQLite database file path, or ':memory:'
        echo: If True, SQLAlchemy logs every statement
    """

    path: str
    echo: bool = False

    @property
    def is_memory(self) -> bool:
        return self.path == MEMORY_DATABASE

    def get_connection_string(self) -> str:
        """Get SQLAlchemy connection string for the SQLite database.

        Returns:
            ``sqlite://`` for an in-memory database, otherwise ``sqlite:///<path>``
            with ``~`` expanded
        """
        if self.is_memory:
            return "sqlite://"
        return f"sqlite:///{expand_database_path(self.path)}"


@dataclass
class LoggingConfig:
    """Logging configuration settings.

    Attributes:
        level: Log level name
        log_file: Optional log file name
        log_dir: Directory holding log_file
        use_colors: Colored console output
        auto_configure: Configure the root logger when core.logger is imported
    """

    level: str = 'INFO'
    log_file: Optional[str] = None
    log_dir: str = 'logs'
    use_colors: bool = True
    auto_configure: bool = True


class Config:
    """Centralized configuration manager.

    Attributes:
        db: DatabaseConfig instance
        logging: LoggingConfig instance
        project_root: Absolute path to the project root

    Example:
        >>> config = Config()
        >>> config.get_connection_string()
        'sqlite:////path/to/project/data/database.db'
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.project_root = Path(__file__).parent.parent

        default_path = str(self.project_root / 'data' / 'database.db')
        self.db = DatabaseConfig(
            path=os.getenv('SQLITE_PATH', default_path),
            echo=_env_flag('SQLITE_ECHO', False)
        )

        self.logging = LoggingConfig(
            level=os.getenv('LOG_LEVEL', 'INFO'),
            log_file=os.getenv('LOG_FILE') or None,
            log_dir=os.getenv('LOG_DIR', 'logs'),
            use_colors=_env_flag('LOG_COLORS', True),
            auto_configure=_env_flag('LOG_AUTO_CONFIGURE', True)
        )

    @property
    def db_path(self) -> str:
        """Get SQLite database path."""
        return self.db.path

    @property
    def db_echo(self) -> bool:
        return self.db.echo

    @property
    def log_level(self) -> str:
        return self.logging.level

    def get_connection_string(self) -> str:
        """Get database connection string.

        Returns:
            SQLAlchemy-compatible SQLite connection string
        """
        return self.db.get_connection_string()


# Global configuration instance
config = Config()
