"""
=========================================
CREATE TABLE query builder for SQLite.
=========================================

Fluent builder that accumulates columns, foreign keys and unique keys
and renders them through ``sql.ddl.create_table_sql``.

Example:
    >>> from sql.create import Create
    >>>
    >>> query = (
    ...     Create('users')
    ...     .add_field('id', {'type': 'INTEGER', 'primary': True})
    ...     .add_field('name', {'type': 'VARCHAR', 'length': 255, 'null': False})
    ...     .get_query()
    ... )
    >>> print(query)
    CREATE TABLE "users" ("id" INTEGER PRIMARY KEY, "name" VARCHAR(255) NOT NULL)
"""

from collections.abc import Mapping, Sequence
from typing import Dict, Optional, Tuple, Union

from sql.argument import check_argument
from sql.columns import ColumnSpec, ForeignKeySpec, TableDefinition, UniqueKeySpec
from sql.ddl import create_table_sql

ColumnInput = Union[ColumnSpec, Mapping]


def as_column(name: str, attributes: ColumnInput) -> ColumnSpec:
    """Coerce an attribute mapping or ColumnSpec into a ColumnSpec named ``name``."""
    check_argument(1, name, 'str')
    check_argument(2, attributes, ColumnSpec, Mapping)

    if isinstance(attributes, ColumnSpec):
        if attributes.name == name:
            return attributes
        return ColumnSpec(
            name=name,
            type=attributes.type,
            length=attributes.length,
            primary=attributes.primary,
            attribute=attributes.attribute,
            nullable=attributes.nullable,
            default=attributes.default,
        )

    return ColumnSpec.from_attributes(name, attributes)


class Create:
    """Builder for CREATE TABLE statements.

    Attributes:
        name: Table name, required before rendering
        comments: Table comments (kept, never rendered by SQLite)
        fields: Column definitions keyed by name, in insertion order
        keys: Foreign keys keyed by name as (table, column) pairs
        unique_keys: Unique keys keyed by name as column tuples
    """

    def __init__(self, name: Optional[str] = None):
        self.name: Optional[str] = None
        self.comments: Optional[str] = None
        self.fields: Dict[str, ColumnSpec] = {}
        self.keys: Dict[str, Tuple[str, str]] = {}
        self.unique_keys: Dict[str, Tuple[str, ...]] = {}

        if isinstance(name, str):
            self.set_name(name)

    def set_name(self, name: str) -> 'Create':
        """Set the name of the table to create."""
        check_argument(1, name, 'str')
        self.name = name
        return self

    def set_comments(self, comments: str) -> 'Create':
        check_argument(1, comments, 'str')
        self.comments = comments
        return self

    def add_field(self, name: str, attributes: ColumnInput) -> 'Create':
        """Add a column.

        Args:
            name: Column name
            attributes: Attribute mapping (``type``, ``length``, ``primary``,
                ``attribute``, ``null``, ``default``) or a ColumnSpec

        Returns:
            This builder
        """
        self.fields[name] = as_column(name, attributes)
        return self

    def set_fields(self, fields: Mapping) -> 'Create':
        """Replace every column with the given name -> attributes mapping."""
        check_argument(1, fields, Mapping)
        self.fields = {name: as_column(name, attributes) for name, attributes in fields.items()}
        return self

    def add_foreign_key(self, name: str, table: str, key: str) -> 'Create':
        """Add a foreign key referencing ``table(key)``."""
        check_argument(1, name, 'str')
        check_argument(2, table, 'str')
        check_argument(3, key, 'str')

        self.keys[name] = (table, key)
        return self

    def set_foreign_keys(self, keys: Mapping) -> 'Create':
        """Replace every foreign key with a name -> (table, column) mapping."""
        check_argument(1, keys, Mapping)

        self.keys = {}
        for name, reference in keys.items():
            check_argument(1, reference, 'list')
            table, key = reference
            self.add_foreign_key(name, table, key)
        return self

    def add_unique_key(self, name: str, fields: Sequence) -> 'Create':
        """Add a unique key over ``fields``."""
        check_argument(1, name, 'str')
        check_argument(2, fields, 'list')

        self.unique_keys[name] = tuple(fields)
        return self

    def set_unique_keys(self, unique_keys: Mapping) -> 'Create':
        check_argument(1, unique_keys, Mapping)

        self.unique_keys = {}
        for name, fields in unique_keys.items():
            self.add_unique_key(name, fields)
        return self

    def build(self) -> TableDefinition:
        """Return an immutable snapshot of the builder."""
        return TableDefinition(
            name=self.name,
            columns=tuple(self.fields.values()),
            foreign_keys=tuple(
                ForeignKeySpec(name, table, column)
                for name, (table, column) in self.keys.items()
            ),
            unique_keys=tuple(
                UniqueKeySpec(name, columns) for name, columns in self.unique_keys.items()
            ),
            comment=self.comments,
        )

    def get_query(self) -> str:
        """Render the CREATE TABLE statement.

        Raises:
            ConfigurationError: If no table name has been set
        """
        return create_table_sql(self.build())

    def __str__(self) -> str:
        return self.get_query()

    def __repr__(self) -> str:
        return f"Create(name={self.name!r}, fields={list(self.fields)!r})"
