"""
====================================================
SQL utilities package for SQLite query strings.
====================================================

This package renders SQLite statements from in-memory metadata. Nothing
here executes SQL; the strings are handed to a driver by ``database.index``.

The package follows a clear organization:
    - columns.py: Frozen table metadata (ColumnSpec, TableDefinition, AlterPlan)
    - ddl.py: Pure DDL renderers (CREATE/ALTER/DROP/RENAME/PRAGMA)
    - create.py, alter.py, utility.py: Fluent builders over the renderers
    - dml.py: Parameterised INSERT/UPDATE/DELETE
    - query_builder.py: SELECT and metadata queries (_builder suffix)
    - argument.py, exceptions.py: Setter validation and error types

Example:
    >>> from sql import Alter, Create, Utility
    >>>
    >>> Create('users').add_field('id', {'type': 'INTEGER', 'primary': True}).get_query()
    'CREATE TABLE "users" ("id" INTEGER PRIMARY KEY)'
    >>> Utility().drop_table('users').get_query()
    'DROP TABLE "users";'
"""

__version__ = "0.1.0"
__all__ = [
    # Builders
    'Create', 'Alter', 'Utility',
    # Metadata
    'ColumnSpec', 'ForeignKeySpec', 'UniqueKeySpec', 'TableDefinition',
    'ColumnChange', 'AlterPlan',
    # DDL functions
    'column_definition', 'create_table_sql', 'alter_table_sql',
    'drop_table_sql', 'rename_table_sql', 'show_columns_sql',
    'show_tables_sql', 'truncate_sql',
    # Errors
    'SqliteBuilderError', 'ConfigurationError', 'ArgumentError'
]

from .alter import Alter
from .columns import (
    AlterPlan,
    ColumnChange,
    ColumnSpec,
    ForeignKeySpec,
    TableDefinition,
    UniqueKeySpec,
)
from .create import Create
from .ddl import (
    alter_table_sql,
    column_definition,
    create_table_sql,
    drop_table_sql,
    rename_table_sql,
    show_columns_sql,
    show_tables_sql,
    truncate_sql,
)
from .exceptions import ArgumentError, ConfigurationError, SqliteBuilderError
from .utility import Utility
