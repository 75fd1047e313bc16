"""
==================================================
SQLite database facade over the query builders.
==================================================

``Index`` owns one SQLAlchemy engine for one SQLite database and ties
the pure builders in ``sql/`` to actual execution. It hands out builder
instances, runs rendered statements, introspects tables and offers
small CRUD helpers.

Key Features:
    - Lazy engine creation (``connect()`` is optional)
    - Builder factories: create(), alter(), utility()
    - Schema introspection via PRAGMA table_info
    - Schema and data dumps as replayable SQL
    - Row helpers: insert, update, delete, get, set (upsert-by-column)

Example:
    >>> from database.index import Index
    >>>
    >>> db = Index(':memory:').connect()
    >>> db.query(
    ...     db.create('unit_post')
    ...     .add_field('post_id', {'type': 'INTEGER', 'primary': True})
    ...     .add_field('post_slug', {'type': 'VARCHAR', 'null': False})
    ... )
    []
    >>> _ = db.insert_row('unit_post', {'post_slug': 'unit-test-1'})
    >>> db.get_last_inserted_id()
    1
    >>> db.get_row('unit_post', 'post_slug', 'unit-test-1')
    {'post_id': 1, 'post_slug': 'unit-test-1'}
"""

import logging
import re
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import config
from sql.alter import Alter
from sql.argument import check_argument
from sql.columns import ColumnSpec
from sql.create import Create
from sql.dml import (
    delete_sql,
    insert_binds,
    insert_sql,
    insert_values_sql,
    quote_identifier,
    update_binds,
    update_sql,
)
from sql.query_builder import check_table_exists_sql, count_rows_sql, select_builder
from sql.utility import Utility
from utils.database_utils import create_sqlalchemy_engine, ensure_database_directory

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

_TYPE_WITH_LENGTH = re.compile(r'^([^(]+)\(([^)]*)\)\s*(.*)$')
_NUMBER = re.compile(r'^-?\d+(\.\d+)?$')


class DatabaseError(Exception):
    """Exception raised for Index operation errors."""
    pass


class QueryError(DatabaseError):
    """Exception raised when the driver rejects a statement."""
    pass


def split_column_type(declared: Optional[str]) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """Split a declared SQLite type into (type, length, trailing attribute).

    Example:
        >>> split_column_type('VARCHAR(255)')
        ('VARCHAR', '255', None)
        >>> split_column_type('INTEGER')
        ('INTEGER', None, None)
    """
    if not declared:
        return None, None, None

    match = _TYPE_WITH_LENGTH.match(declared.strip())
    if not match:
        return declared.strip(), None, None

    column_type, length, rest = match.groups()
    return column_type.strip(), length.strip(), rest.strip() or None


def parse_default(raw: Optional[str]) -> Tuple[Optional[Union[str, int, float]], Optional[str]]:
    """Turn a PRAGMA ``dflt_value`` into (default, attribute).

    Quoted strings and numbers become a default value. Any other
    expression (e.g. CURRENT_TIMESTAMP) cannot be expressed as a plain
    default, so it is returned as a raw ``DEFAULT <expr>`` attribute.
    """
    if raw is None or raw.upper() == 'NULL':
        return None, None

    if len(raw) >= 2 and raw[0] == raw[-1] == "'":
        return raw[1:-1].replace("''", "'"), None

    if _NUMBER.match(raw):
        return (float(raw) if '.' in raw else int(raw)), None

    return None, f"DEFAULT {raw}"


class Index:
    """Connection and query facade for one SQLite database.

    Attributes:
        path: Database file path, or ':memory:'
    """

    def __init__(self, path: Optional[str] = None):
        """Store connection information.

        Args:
            path: SQLite file path or ':memory:' (defaults to config.db_path)
        """
        check_argument(1, path, 'str', 'null')
        self.path = path if path is not None else config.db_path

        self._engine: Optional[Engine] = None
        self._last_inserted_id: Optional[int] = None

    def connect(self) -> 'Index':
        """Create the SQLAlchemy engine if it does not exist yet.

        Returns:
            This Index
        """
        if self._engine is None:
            ensure_database_directory(self.path)
            self._engine = create_sqlalchemy_engine(self.path)
            logger.info(f"Connected to SQLite database at {self.path}")
        return self

    def close(self) -> None:
        """Dispose of the engine. A later query reconnects."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.debug(f"Closed SQLite database at {self.path}")

    def _get_engine(self) -> Engine:
        return self.connect()._engine

    # Builder factories

    def create(self, name: Optional[str] = None) -> Create:
        check_argument(1, name, 'str', 'null')
        return Create(name)

    def alter(self, name: Optional[str] = None) -> Alter:
        check_argument(1, name, 'str', 'null')
        return Alter(name)

    def utility(self) -> Utility:
        return Utility()

    # Execution

    def query(self, query: Union[str, Create, Alter, Utility], binds: Optional[Mapping[str, Any]] = None) -> List[Row]:
        """Run one statement and return its rows.

        Each call runs in its own transaction and is committed on success.
        The statement reaches sqlite3 unchanged, so ``:name`` is only a bind
        outside of string literals.

        Args:
            query: SQL text or a builder (rendered with ``get_query()``)
            binds: Named bind parameters

        Returns:
            Result rows as dicts; an empty list for statements without rows

        Raises:
            QueryError: If the driver rejects the statement
        """
        if not isinstance(query, str):
            check_argument(1, query, Create, Alter, Utility)
            query = query.get_query()
        check_argument(2, binds, Mapping, 'null')

        try:
            with self._get_engine().begin() as conn:
                result = conn.exec_driver_sql(query, dict(binds) if binds else None)

                if result.returns_rows:
                    return [dict(row) for row in result.mappings().all()]

                if result.lastrowid:
                    self._last_inserted_id = result.lastrowid
                return []

        except SQLAlchemyError as e:
            logger.error(f"Query failed: {query} ({e})")
            raise QueryError(f"Query failed: {e}")

    def get_last_inserted_id(self) -> Optional[int]:
        """Return the rowid of the last row inserted through this Index."""
        return self._last_inserted_id

    # Introspection

    def get_columns(self, table: str) -> List[Row]:
        """Return the columns of a table.

        Args:
            table: Table name

        Returns:
            One dict per column with keys ``field``, ``type``, ``default``,
            ``null`` (True when nullable) and ``key`` ('PRI' or None)
        """
        check_argument(1, table, 'str')

        results = self.query(self.utility().show_columns(table))

        columns = []
        for column in results:
            columns.append({
                'field': column['name'],
                'type': column['type'],
                'default': column['dflt_value'],
                'null': column['notnull'] != 1,
                'key': 'PRI' if column['pk'] else None
            })

        return columns

    def get_primary_key(self, table: str) -> Optional[str]:
        """Return the first primary key column of a table, if any."""
        check_argument(1, table, 'str')

        for column in self.get_columns(table):
            if column['key'] == 'PRI':
                return column['field']
        return None

    def get_tables(self) -> List[str]:
        """List user tables of the main database.

        Internal ``sqlite_*`` tables are left out.
        """
        results = self.query(self.utility().show_tables('main'))
        return [row['name'] for row in results if not row['name'].startswith('sqlite_')]

    def table_exists(self, table: str) -> bool:
        check_argument(1, table, 'str')
        return bool(self.query(check_table_exists_sql(), {'table_name': table}))

    def get_table_schema(self, table: str) -> str:
        """Dump one table as a CREATE TABLE statement followed by its rows.

        The CREATE TABLE is rebuilt from ``get_columns`` with the Create
        builder; rows are rendered as literal INSERT statements. Composite
        primary keys are rendered as PRIMARY KEY on the first key column
        only, since the builder has no table-level primary key clause.

        Args:
            table: Table name

        Returns:
            SQL text, sections separated by a blank line
        """
        check_argument(1, table, 'str')

        backup = []

        schema = self.get_columns(table)
        if schema:
            query = self.create(table)
            primary_key = self.get_primary_key(table)

            for field in schema:
                column_type, length, type_attribute = split_column_type(field['type'])
                default, default_attribute = parse_default(field['default'])
                attributes = [item for item in (type_attribute, default_attribute) if item]

                query.add_field(field['field'], ColumnSpec(
                    name=field['field'],
                    type=column_type,
                    length=length,
                    primary=field['field'] == primary_key,
                    attribute=" ".join(attributes) or None,
                    nullable=None if field['null'] else False,
                    default=default
                ))

            backup.append(query.get_query() + ";")

        rows = self.query(select_builder(table))
        if rows:
            backup.append("\n".join(insert_values_sql(table, row) for row in rows))

        return "\n\n".join(backup)

    def get_schema(self) -> str:
        """Dump every user table of the database."""
        return "\n\n".join(self.get_table_schema(table) for table in self.get_tables())

    # Rows

    def insert_row(self, table: str, settings: Mapping[str, Any]) -> 'Index':
        """Insert one row given a column -> value mapping."""
        check_argument(1, table, 'str')
        check_argument(2, settings, Mapping)

        self.query(insert_sql(table, list(settings)), insert_binds(settings))
        return self

    def insert_rows(self, table: str, settings: List[Mapping[str, Any]]) -> 'Index':
        """Insert several rows, one statement per row."""
        check_argument(1, table, 'str')
        check_argument(2, settings, 'list')

        for setting in settings:
            self.insert_row(table, setting)
        return self

    def update_rows(
        self,
        table: str,
        settings: Mapping[str, Any],
        where: Optional[str] = None,
        binds: Optional[Mapping[str, Any]] = None
    ) -> 'Index':
        """Update rows matching ``where``.

        Args:
            table: Table name
            settings: Column -> new value
            where: Optional WHERE condition with named binds, e.g. ``"post_slug = :slug"``
            binds: Values for the binds used in ``where``

        Returns:
            This Index
        """
        check_argument(1, table, 'str')
        check_argument(2, settings, Mapping)
        check_argument(3, where, 'str', 'null')

        params = dict(binds or {})
        params.update(update_binds(settings))

        self.query(update_sql(table, list(settings), where), params)
        return self

    def delete_rows(
        self,
        table: str,
        where: Optional[str] = None,
        binds: Optional[Mapping[str, Any]] = None
    ) -> 'Index':
        """Delete rows matching ``where``; every row when it is None."""
        check_argument(1, table, 'str')
        check_argument(2, where, 'str', 'null')

        self.query(delete_sql(table, where), binds)
        return self

    def count_rows(
        self,
        table: str,
        where: Optional[str] = None,
        binds: Optional[Mapping[str, Any]] = None
    ) -> int:
        check_argument(1, table, 'str')

        rows = self.query(count_rows_sql(table, where), binds)
        return rows[0]['total']

    def get_row(self, table: str, name: str, value: Any) -> Optional[Row]:
        """Return the first row whose column ``name`` equals ``value``."""
        check_argument(1, table, 'str')
        check_argument(2, name, 'str')

        rows = self.query(
            select_builder(table, where_conditions=[f"{quote_identifier(name)} = :value"], limit=1),
            {'value': value}
        )
        return rows[0] if rows else None

    def set_row(self, table: str, name: str, value: Any, settings: Mapping[str, Any]) -> 'Index':
        """Update the rows where ``name`` equals ``value``, or insert one.

        When inserting, ``name: value`` is added to the row unless
        ``settings`` already sets that column.
        """
        check_argument(1, table, 'str')
        check_argument(2, name, 'str')
        check_argument(4, settings, Mapping)

        if self.get_row(table, name, value) is not None:
            return self.update_rows(
                table, settings, f"{quote_identifier(name)} = :value", {'value': value}
            )

        row = {name: value}
        row.update(settings)
        return self.insert_row(table, row)
