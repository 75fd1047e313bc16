"""
==================================================
Database connectivity utilities for SQLite.
==================================================

Provides reusable connection helpers and health checks for SQLite
database files, keeping SQLAlchemy engine setup out of the query
builders and the Index facade.

Key Features:
    - Connection string building from config
    - Engine creation for file and in-memory databases
    - Database availability and existence checks

Example:
    >>> from utils.database_utils import (
    ...     check_database_available,
    ...     create_sqlalchemy_engine,
    ...     get_connection_string
    ... )
    >>>
    >>> get_connection_string('/tmp/unit.db')
    'sqlite:////tmp/unit.db'
    >>>
    >>> engine = create_sqlalchemy_engine('/tmp/unit.db')
    >>> if check_database_available('/tmp/unit.db'):
    ...     print("Database ready")
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from core.config import MEMORY_DATABASE, DatabaseConfig, config, expand_database_path

logger = logging.getLogger(__name__)

class DatabaseConnectionError(Exception):
    """Exception raised when a database engine cannot be created or opened."""
    pass

def _resolve_path(path: Optional[str]) -> str:
    return expand_database_path(path if path is not None else config.db_path)

def get_connection_string(path: Optional[str] = None) -> str:
    """
    Build SQLite connection string.

    Args:
        path: Database file path or ':memory:' (defaults to config.db_path)

    Returns:
        SQLAlchemy SQLite connection string
    """
    return DatabaseConfig(path=_resolve_path(path)).get_connection_string()

def ensure_database_directory(path: Optional[str] = None) -> None:
    """Create the parent directory of a database file if it is missing."""
    path = _resolve_path(path)
    if path == MEMORY_DATABASE:
        return
    Path(path).parent.mkdir(parents=True, exist_ok=True)

def create_sqlalchemy_engine(
    path: Optional[str] = None,
    echo: Optional[bool] = None
) -> Engine:
    """
    Create SQLAlchemy engine for a SQLite database.

    In-memory databases use a StaticPool so that every connection sees
    the same database.

    Args:
        path: Database file path or ':memory:' (defaults to config.db_path)
        echo: Enable SQL statement logging (defaults to config.db_echo)

    Returns:
        Configured SQLAlchemy Engine

    Raises:
        DatabaseConnectionError: If the engine cannot be created
    """
    path = _resolve_path(path)
    echo = config.db_echo if echo is None else echo

    try:
        if path == MEMORY_DATABASE:
            return create_engine(
                get_connection_string(path),
                echo=echo,
                poolclass=StaticPool,
                connect_args={'check_same_thread': False}
            )

        return create_engine(get_connection_string(path), echo=echo)
    except SQLAlchemyError as e:
        logger.error(f"Failed to create engine for {path}: {e}")
        raise DatabaseConnectionError(f"Failed to create engine for {path}: {e}")

def check_database_available(path: Optional[str] = None) -> bool:
    """
    Check if a SQLite database can be opened and queried.

    Args:
        path: Database file path (defaults to config.db_path)

    Returns:
        True if ``SELECT 1`` succeeds, False otherwise
    """
    path = _resolve_path(path)

    try:
        engine = create_sqlalchemy_engine(path, echo=False)
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        engine.dispose()
        return True
    except (SQLAlchemyError, DatabaseConnectionError) as e:
        logger.debug(f"Database not available: {e}")
        return False

def verify_database_exists(path: Optional[str] = None) -> bool:
    """
    Verify if a SQLite database file exists.

    In-memory databases always exist.
    """
    path = _resolve_path(path)
    if path == MEMORY_DATABASE:
        return True
    return Path(path).is_file()

def verify_connection(path: Optional[str] = None) -> Tuple[bool, Optional[str]]:
    """
    Verify database connection and return status with details.

    Returns:
        Tuple of (success: bool, message: str)

    Example:
        >>> success, message = verify_connection(':memory:')
        >>> success
        True
    """
    path = _resolve_path(path)
    existed = verify_database_exists(path)

    if not check_database_available(path):
        return False, f"SQLite database at {path} is not available"

    if existed:
        return True, f"Connected to SQLite database at {path}."
    return True, f"Connected to SQLite database at {path} (created on first use)."
