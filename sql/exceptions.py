"""
=========================================
Exceptions raised by the SQL builders.
=========================================

Classes:
    SqliteBuilderError: Base class for every builder error
    ConfigurationError: A required field is missing when a query is rendered
    ArgumentError: A builder setter received a value of the wrong type
"""


class SqliteBuilderError(Exception):
    """Base exception for query builder errors."""
    pass


class ConfigurationError(SqliteBuilderError):
    """Exception raised when a builder is rendered before it is complete.

    Raised synchronously by ``get_query()`` when, for example, no table
    name has been set.
    """
    pass


class ArgumentError(SqliteBuilderError, TypeError):
    """Exception raised when a setter receives an argument of the wrong type.

    Subclasses TypeError so callers can catch either.
    """
    pass
