"""
============================
SQL Query Builder Utilities.
============================

Low-level building blocks for SQLite SELECT statements and metadata
lookups. All builders follow the _builder naming convention.

Query Builders:
- select_builder: Build SELECT statements with optional filtering and ordering
- where_builder: Build dynamic WHERE conditions

Metadata Query Functions:
- count_rows_sql: Count rows of a table
- check_table_exists_sql: Check if a table exists

Usage:
    from sql.query_builder import select_builder

    query = select_builder(
        table='unit_post',
        columns=['post_id', 'post_title'],
        where_conditions=['post_active = :active'],
        order_by=['post_id DESC'],
        limit=10
    )
"""

from typing import Any, Dict, List, Optional, Union

from sql.dml import quote_identifier


def select_builder(
    table: str,
    columns: Union[List[str], str] = "*",
    where_conditions: Optional[List[str]] = None,
    order_by: Optional[List[str]] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    distinct: bool = False
) -> str:
    """
    Build a SELECT statement with optional filtering and ordering.

    Args:
        table: Table name
        columns: Column list, or a raw column expression such as "*" or "ROWID,*"
        where_conditions: List of WHERE conditions joined with AND
        order_by: List of ORDER BY expressions
        limit: LIMIT clause value
        offset: OFFSET clause value
        distinct: Use SELECT DISTINCT

    Returns:
        SQL SELECT statement
    """
    select_keyword = "SELECT DISTINCT" if distinct else "SELECT"

    if isinstance(columns, str):
        column_clause = columns
    else:
        column_clause = ", ".join([quote_identifier(col) for col in columns])

    sql = f"{select_keyword} {column_clause} FROM {quote_identifier(table)}"

    if where_conditions:
        sql += " " + where_builder(where_conditions)

    if order_by:
        sql += f" ORDER BY {', '.join(order_by)}"

    # SQLite only accepts OFFSET after a LIMIT
    if limit is not None:
        sql += f" LIMIT {limit}"
        if offset:
            sql += f" OFFSET {offset}"
    elif offset:
        sql += f" LIMIT -1 OFFSET {offset}"

    return sql + ";"


def where_builder(
    conditions: List[Union[str, Dict[str, Any]]],
    operator: str = "AND"
) -> str:
    """
    Build WHERE clause from conditions.

    Args:
        conditions: Raw condition strings, or dicts with ``column``,
            ``operator`` (default ``=``) and ``param`` (bind name,
            defaults to the column name)
        operator: Logical operator between conditions (AND, OR)

    Returns:
        WHERE clause, or an empty string when there are no conditions

    Example:
        >>> where_builder(['a = :a', {'column': 'b', 'operator': '>', 'param': 'min_b'}])
        'WHERE a = :a AND "b" > :min_b'
    """
    parts = []
    for condition in conditions:
        if isinstance(condition, dict):
            column = condition['column']
            op = condition.get('operator', '=')
            param = condition.get('param', column)
            parts.append(f"{quote_identifier(column)} {op} :{param}")
        else:
            parts.append(condition)

    if not parts:
        return ""

    return "WHERE " + f" {operator.upper()} ".join(parts)


def count_rows_sql(table: str, where: Optional[str] = None) -> str:
    """Count rows of a table, optionally filtered."""
    sql = f"SELECT COUNT(*) AS total FROM {quote_identifier(table)}"
    if where:
        sql += f" WHERE {where}"
    return sql + ";"


def check_table_exists_sql() -> str:
    """
    Check if a table exists in the main database.

    Binds:
        table_name: Name of the table to look up
    """
    return "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = :table_name;"
