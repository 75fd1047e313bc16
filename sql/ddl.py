"""
=======================================================================
Data Definition Language (DDL) rendering for SQLite tables.
=======================================================================

Pure functions that turn the frozen table metadata from ``sql.columns``
into SQLite DDL strings. Nothing here touches a database; the strings
are the exact payload later handed to the driver.

Key Features:
    - CREATE TABLE with column modifiers, foreign keys and unique keys
    - ALTER TABLE with a fixed clause order
    - One-line utility statements (DROP, RENAME, PRAGMA, TRUNCATE)

Functions:
    column_definition: Render the type and modifiers of one column
    create_table_sql: Generate CREATE TABLE statement
    alter_table_sql: Generate ALTER TABLE statement
    drop_table_sql: Generate DROP TABLE statement
    rename_table_sql: Generate RENAME TABLE statement
    show_columns_sql: Generate PRAGMA table_info statement
    show_tables_sql: Generate sqlite_master table listing
    truncate_sql: Generate TRUNCATE statement

Example:
    >>> from sql.columns import ColumnSpec, TableDefinition
    >>> from sql.ddl import create_table_sql
    >>>
    >>> definition = TableDefinition(
    ...     name='users',
    ...     columns=(
    ...         ColumnSpec('id', type='INTEGER', primary=True),
    ...         ColumnSpec('name', type='VARCHAR', length=255, nullable=False),
    ...     )
    ... )
    >>> print(create_table_sql(definition))
    CREATE TABLE "users" ("id" INTEGER PRIMARY KEY, "name" VARCHAR(255) NOT NULL)
"""

import logging
from numbers import Number
from typing import List

from sql.columns import AlterPlan, ColumnSpec, ForeignKeySpec, TableDefinition
from sql.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

GROUP_SEPARATOR = ", \n"


def _render_default(column: ColumnSpec) -> List[str]:
    """Render the DEFAULT clause of a column.

    A default is only emitted when it is set, is not ``False`` and the
    column is not explicitly nullable. Strings are single-quoted, numbers
    are emitted raw and ``True`` emits nothing. Embedded single quotes are
    doubled.
    """
    default = column.default
    if default is None or default is False or column.nullable is True:
        return []

    if isinstance(default, str):
        escaped = default.replace("'", "''")
        return [f"DEFAULT '{escaped}'"]

    if isinstance(default, Number) and not isinstance(default, bool):
        return [f"DEFAULT {default}"]

    return []


def column_definition(column: ColumnSpec, include_primary: bool = True) -> str:
    """Render the type and modifiers that follow a column name.

    Tokens, in order: type (with ``(length)``), ``PRIMARY KEY``, the raw
    attribute, ``NOT NULL`` or ``DEFAULT NULL``, then the default value.

    Args:
        column: Column to render
        include_primary: If False, PRIMARY KEY is never emitted (ALTER TABLE)

    Returns:
        Space-joined modifiers, possibly empty

    Example:
        >>> column_definition(ColumnSpec('age', type='INTEGER', nullable=False, default=0))
        'INTEGER NOT NULL DEFAULT 0'
    """
    tokens = []

    if column.type is not None:
        if column.length is not None:
            tokens.append(f"{column.type}({column.length})")
        else:
            tokens.append(column.type)

    if include_primary and column.primary:
        tokens.append("PRIMARY KEY")

    if column.attribute is not None:
        tokens.append(column.attribute)

    if column.nullable is False:
        tokens.append("NOT NULL")
    elif column.nullable is True:
        tokens.append("DEFAULT NULL")

    tokens.extend(_render_default(column))

    return " ".join(tokens)


def _prefixed(name: str, modifiers: str) -> str:
    return f"{name} {modifiers}" if modifiers else name


def _foreign_key_reference(key: ForeignKeySpec) -> str:
    return f'FOREIGN KEY "{key.name}" REFERENCES {key.table}({key.column})'


def _require_name(name, statement: str) -> None:
    if not name:
        raise ConfigurationError(f"{statement} requires a table name")


def create_table_sql(definition: TableDefinition) -> str:
    """Generate CREATE TABLE statement.

    Args:
        definition: Table snapshot to render

    Returns:
        ``CREATE TABLE "<name>" (<columns>[, <foreign keys>][, <unique keys>])``

    Raises:
        ConfigurationError: If the definition has no table name
    """
    _require_name(definition.name, "CREATE TABLE")

    fields = ", ".join(
        _prefixed(f'"{column.name}"', column_definition(column))
        for column in definition.columns
    )

    foreign_keys = [_foreign_key_reference(key) for key in definition.foreign_keys]

    uniques = []
    for key in definition.unique_keys:
        column_list = ", ".join([f'"{col}"' for col in key.columns])
        uniques.append(f'UNIQUE "{key.name}" ({column_list})')

    keys_clause = ", " + GROUP_SEPARATOR.join(foreign_keys) if foreign_keys else ""
    uniques_clause = ", " + GROUP_SEPARATOR.join(uniques) if uniques else ""

    sql = f'CREATE TABLE "{definition.name}" ({fields}{keys_clause}{uniques_clause})'
    logger.debug(f"Rendered CREATE TABLE for {definition.name}")
    return sql


def alter_table_sql(plan: AlterPlan) -> str:
    """Generate ALTER TABLE statement.

    Clauses are emitted in a fixed order: dropped columns, added columns,
    changed columns, dropped foreign keys, added foreign keys, dropped
    unique keys and finally a single ADD UNIQUE for all added unique keys.

    Args:
        plan: Alteration snapshot to render

    Returns:
        ``ALTER TABLE "<name>" <clauses>;`` with clauses joined by ``, \\n``

    Raises:
        ConfigurationError: If the plan has no table name

    Example:
        >>> plan = AlterPlan(
        ...     name='users',
        ...     columns_to_add=(ColumnSpec('email', type='VARCHAR'),),
        ...     columns_to_remove=('legacy_id',)
        ... )
        >>> alter_table_sql(plan)
        'ALTER TABLE "users" DROP "legacy_id", \\nADD "email" VARCHAR;'
    """
    _require_name(plan.name, "ALTER TABLE")

    clauses = []

    for name in plan.columns_to_remove:
        clauses.append(f'DROP "{name}"')

    for column in plan.columns_to_add:
        clauses.append(_prefixed(
            f'ADD "{column.name}"',
            column_definition(column, include_primary=False)
        ))

    for change in plan.columns_to_change:
        clauses.append(_prefixed(
            f'CHANGE "{change.column.name}" "{change.target_name}"',
            column_definition(change.column, include_primary=False)
        ))

    for name in plan.foreign_keys_to_remove:
        clauses.append(f'DROP FOREIGN KEY "{name}"')

    for key in plan.foreign_keys_to_add:
        clauses.append(f"ADD {_foreign_key_reference(key)}")

    for name in plan.unique_keys_to_remove:
        clauses.append(f'DROP UNIQUE "{name}"')

    if plan.unique_keys_to_add:
        key_list = ", ".join(plan.unique_keys_to_add)
        clauses.append(f"ADD UNIQUE ({key_list})")

    logger.debug(f"Rendered ALTER TABLE for {plan.name} with {len(clauses)} clause(s)")
    return f'ALTER TABLE "{plan.name}" {GROUP_SEPARATOR.join(clauses)};'


def drop_table_sql(table: str) -> str:
    """Generate DROP TABLE statement.

    Example:
        >>> drop_table_sql('users')
        'DROP TABLE "users";'
    """
    return f'DROP TABLE "{table}";'


def rename_table_sql(table: str, name: str) -> str:
    """Generate RENAME TABLE statement.

    Args:
        table: Current table name
        name: New table name

    Returns:
        SQL RENAME TABLE statement
    """
    return f'RENAME TABLE "{table}" TO "{name}";'


def show_columns_sql(table: str) -> str:
    """Generate PRAGMA statement listing the columns of a table."""
    return f"PRAGMA table_info({table});"


def show_tables_sql(schema: str = "dbname") -> str:
    """Generate query listing every table of a database.

    Args:
        schema: Database qualifier for sqlite_master. The default keeps the
            historical ``dbname`` qualifier; pass ``'main'`` to run it
            against the primary database of a connection.

    Returns:
        SQL SELECT statement over sqlite_master
    """
    return f"SELECT * FROM {schema}.sqlite_master WHERE type='table';"


def truncate_sql(table: str) -> str:
    """Generate TRUNCATE statement.

    SQLite has no TRUNCATE; the statement is rendered literally and will be
    rejected by the driver. Use ``sql.dml.delete_sql`` to empty a table.
    """
    return f'TRUNCATE "{table}";'
