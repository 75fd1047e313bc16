"""
==========================
Utility Functions Package.
==========================

Reusable helpers for SQLite connectivity.

Modules:
    database_utils: Engine creation and health checks
"""

__version__ = "0.1.0"
__all__ = [
    'DatabaseConnectionError',
    'check_database_available',
    'create_sqlalchemy_engine',
    'ensure_database_directory',
    'get_connection_string',
    'verify_connection',
    'verify_database_exists'
]

from .database_utils import (
    DatabaseConnectionError,
    check_database_available,
    create_sqlalchemy_engine,
    ensure_database_directory,
    get_connection_string,
    verify_connection,
    verify_database_exists,
)
