"""
=====================================
Utility query builder for SQLite.
=====================================

Holds exactly one active statement at a time; each call replaces the
previous one. Rendering delegates to the pure functions in ``sql.ddl``.

Example:
    >>> from sql.utility import Utility
    >>> Utility().drop_table('users').get_query()
    'DROP TABLE "users";'
    >>> Utility().show_columns('users').get_query()
    'PRAGMA table_info(users);'
"""

from typing import Optional

from sql.argument import check_argument
from sql.ddl import (
    drop_table_sql,
    rename_table_sql,
    show_columns_sql,
    show_tables_sql,
    truncate_sql,
)
from sql.exceptions import ConfigurationError


class Utility:
    """Builder for single-purpose table statements."""

    def __init__(self):
        self.query: Optional[str] = None

    def drop_table(self, table: str) -> 'Utility':
        check_argument(1, table, 'str')
        self.query = drop_table_sql(table)
        return self

    def rename_table(self, table: str, name: str) -> 'Utility':
        check_argument(1, table, 'str')
        check_argument(2, name, 'str')
        self.query = rename_table_sql(table, name)
        return self

    def show_columns(self, table: str) -> 'Utility':
        check_argument(1, table, 'str')
        self.query = show_columns_sql(table)
        return self

    def show_tables(self, schema: str = "dbname") -> 'Utility':
        check_argument(1, schema, 'str')
        self.query = show_tables_sql(schema)
        return self

    def truncate(self, table: str) -> 'Utility':
        check_argument(1, table, 'str')
        self.query = truncate_sql(table)
        return self

    def get_query(self) -> str:
        """Return the active statement.

        Raises:
            ConfigurationError: If no statement has been selected yet
        """
        if self.query is None:
            raise ConfigurationError("No utility statement has been selected")
        return self.query

    def __str__(self) -> str:
        return self.get_query()
