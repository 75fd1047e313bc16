"""
===========================================
Data Manipulation Language (DML) Utilities.
===========================================

Functions that build parameterised SQLite INSERT, UPDATE and DELETE
statements. Values are never inlined: every statement uses named bind
parameters (``:name``) that the driver fills in. The only exception is
``insert_values_sql``, which renders literal values for schema dumps.

Functions:
- quote_identifier: Double-quote a table or column name
- literal: Render a Python value as an SQL literal
- insert_sql: Generate INSERT with named binds
- insert_values_sql: Generate INSERT with literal values
- update_sql: Generate UPDATE with named binds
- delete_sql: Generate DELETE with an optional WHERE clause

Usage:
    from sql.dml import insert_sql, update_sql

    insert = insert_sql('unit_post', ['post_slug', 'post_title'])
    # INSERT INTO "unit_post" ("post_slug", "post_title") VALUES (:post_slug, :post_title);

    update = update_sql('unit_post', ['post_title'], where='post_slug = :slug')
    # UPDATE "unit_post" SET "post_title" = :set_post_title WHERE post_slug = :slug;
"""

import re
from typing import Any, Dict, List, Mapping, Optional

SET_PREFIX = "set_"

_BIND_UNSAFE = re.compile(r"\W")


def quote_identifier(name: str) -> str:
    """Double-quote an identifier, escaping embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def bind_name(column: str, prefix: str = "") -> str:
    """Derive a bind parameter name from a column name.

    Characters that are not valid in a bind name are replaced with ``_``.
    """
    return prefix + _BIND_UNSAFE.sub("_", column)


def literal(value: Any) -> str:
    """Render a value as an SQL literal.

    Args:
        value: None, bool, number, bytes or anything convertible to str

    Returns:
        SQL literal text

    Example:
        >>> literal("O'Brien")
        "'O''Brien'"
        >>> literal(None)
        'NULL'
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, bytes):
        return f"X'{value.hex()}'"
    return "'" + str(value).replace("'", "''") + "'"


def insert_sql(table: str, columns: List[str]) -> str:
    """
    Generate INSERT statement with named bind parameters.

    Args:
        table: Table name
        columns: Column names, one bind parameter each

    Returns:
        SQL INSERT statement template
    """
    column_list = ", ".join([quote_identifier(col) for col in columns])
    placeholder_list = ", ".join([f":{bind_name(col)}" for col in columns])

    return f"INSERT INTO {quote_identifier(table)} ({column_list}) VALUES ({placeholder_list});"


def insert_binds(row: Mapping[str, Any]) -> Dict[str, Any]:
    """Map a row to the bind parameters expected by ``insert_sql``."""
    return {bind_name(col): value for col, value in row.items()}


def insert_values_sql(table: str, row: Mapping[str, Any]) -> str:
    """
    Generate INSERT statement with literal values.

    Used to dump table contents; the result can be replayed without binds.
    """
    column_list = ", ".join([quote_identifier(col) for col in row])
    value_list = ", ".join([literal(value) for value in row.values()])

    return f"INSERT INTO {quote_identifier(table)} ({column_list}) VALUES ({value_list});"


def update_sql(table: str, columns: List[str], where: Optional[str] = None) -> str:
    """
    Generate UPDATE statement with named bind parameters.

    SET binds are prefixed with ``set_`` so they never collide with binds
    used in the WHERE clause.

    Args:
        table: Table name
        columns: Columns to update
        where: Optional WHERE condition, may reference its own binds

    Returns:
        SQL UPDATE statement template
    """
    set_clause = ", ".join([
        f"{quote_identifier(col)} = :{bind_name(col, SET_PREFIX)}" for col in columns
    ])

    sql = f"UPDATE {quote_identifier(table)} SET {set_clause}"

    if where:
        sql += f" WHERE {where}"

    return sql + ";"


def update_binds(settings: Mapping[str, Any]) -> Dict[str, Any]:
    """Map column settings to the SET binds expected by ``update_sql``."""
    return {bind_name(col, SET_PREFIX): value for col, value in settings.items()}


def delete_sql(table: str, where: Optional[str] = None) -> str:
    """
    Generate DELETE statement.

    Without a WHERE condition every row is deleted; this is the SQLite
    equivalent of TRUNCATE.
    """
    sql = f"DELETE FROM {quote_identifier(table)}"

    if where:
        sql += f" WHERE {where}"

    return sql + ";"
