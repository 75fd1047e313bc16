"""
=======================================
ALTER TABLE query builder for SQLite.
=======================================

Fluent builder collecting column and key changes for one table and
rendering them through ``sql.ddl.alter_table_sql``.

Example:
    >>> from sql.alter import Alter
    >>>
    >>> query = (
    ...     Alter('users')
    ...     .add_field('email', {'type': 'VARCHAR'})
    ...     .remove_field('legacy_id')
    ...     .get_query()
    ... )
    >>> query
    'ALTER TABLE "users" DROP "legacy_id", \\nADD "email" VARCHAR;'
"""

from collections.abc import Mapping
from typing import Dict, List, Optional, Tuple

from sql.argument import check_argument
from sql.columns import AlterPlan, ColumnChange, ColumnSpec, ForeignKeySpec
from sql.create import ColumnInput, as_column
from sql.ddl import alter_table_sql


class Alter:
    """Builder for ALTER TABLE statements.

    Every collection keeps insertion order, which is the order clauses of
    the same kind appear in the rendered statement.
    """

    def __init__(self, name: Optional[str] = None):
        self.name: Optional[str] = None
        self.add_fields: Dict[str, ColumnSpec] = {}
        self.change_fields: Dict[str, ColumnChange] = {}
        self.remove_fields: List[str] = []
        self.add_keys: Dict[str, Tuple[str, str]] = {}
        self.remove_keys: List[str] = []
        self.add_unique_keys: List[str] = []
        self.remove_unique_keys: List[str] = []

        if isinstance(name, str):
            self.set_name(name)

    def set_name(self, name: str) -> 'Alter':
        check_argument(1, name, 'str')
        self.name = name
        return self

    def add_field(self, name: str, attributes: ColumnInput) -> 'Alter':
        """Add a new column. PRIMARY KEY is never rendered for added columns."""
        self.add_fields[name] = as_column(name, attributes)
        return self

    def change_field(self, name: str, attributes: ColumnInput) -> 'Alter':
        """Redefine an existing column.

        Args:
            name: Current column name
            attributes: New attributes. A ``name`` key in the mapping renames
                the column.

        Returns:
            This builder
        """
        new_name = None
        if isinstance(attributes, Mapping) and 'name' in attributes:
            attributes = dict(attributes)
            new_name = attributes.pop('name')
            check_argument(2, new_name, 'str')

        self.change_fields[name] = ColumnChange(as_column(name, attributes), new_name)
        return self

    def remove_field(self, name: str) -> 'Alter':
        check_argument(1, name, 'str')
        self.remove_fields.append(name)
        return self

    def add_foreign_key(self, name: str, table: str, key: str) -> 'Alter':
        """Add a foreign key referencing ``table(key)``."""
        check_argument(1, name, 'str')
        check_argument(2, table, 'str')
        check_argument(3, key, 'str')

        self.add_keys[name] = (table, key)
        return self

    def remove_foreign_key(self, name: str) -> 'Alter':
        check_argument(1, name, 'str')
        self.remove_keys.append(name)
        return self

    def add_unique_key(self, name: str) -> 'Alter':
        """Add a column to the single ADD UNIQUE clause."""
        check_argument(1, name, 'str')
        self.add_unique_keys.append(name)
        return self

    def remove_unique_key(self, name: str) -> 'Alter':
        check_argument(1, name, 'str')
        self.remove_unique_keys.append(name)
        return self

    def build(self) -> AlterPlan:
        """Return an immutable snapshot of the builder."""
        return AlterPlan(
            name=self.name,
            columns_to_add=tuple(self.add_fields.values()),
            columns_to_change=tuple(self.change_fields.values()),
            columns_to_remove=tuple(self.remove_fields),
            foreign_keys_to_add=tuple(
                ForeignKeySpec(name, table, column)
                for name, (table, column) in self.add_keys.items()
            ),
            foreign_keys_to_remove=tuple(self.remove_keys),
            unique_keys_to_add=tuple(self.add_unique_keys),
            unique_keys_to_remove=tuple(self.remove_unique_keys),
        )

    def get_query(self) -> str:
        """Render the ALTER TABLE statement.

        Raises:
            ConfigurationError: If no table name has been set
        """
        return alter_table_sql(self.build())

    def __str__(self) -> str:
        return self.get_query()
