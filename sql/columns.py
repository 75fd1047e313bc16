"""
==============================================
Table metadata structures for the DDL builders.
==============================================

Immutable snapshots produced by the fluent builders and consumed by the
pure renderers in ``sql.ddl``. Builders may be mutated freely; a render
always works on one of these frozen structures.

Classes:
    ColumnSpec: One column and its optional attributes
    ForeignKeySpec: A named reference to a column of another table
    UniqueKeySpec: A named unique key over one or more columns
    TableDefinition: Everything needed to render CREATE TABLE
    ColumnChange: A column to redefine, optionally under a new name
    AlterPlan: Everything needed to render ALTER TABLE

Example:
    >>> from sql.columns import ColumnSpec
    >>> column = ColumnSpec.from_attributes('name', {
    ...     'type': 'VARCHAR',
    ...     'length': 255,
    ...     'null': False
    ... })
    >>> column.nullable
    False
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from sql.argument import check_argument
from sql.exceptions import ArgumentError

DefaultValue = Union[str, int, float, bool]

# attribute key -> ColumnSpec field
ATTRIBUTE_KEYS = {
    'type': 'type',
    'length': 'length',
    'primary': 'primary',
    'attribute': 'attribute',
    'null': 'nullable',
    'nullable': 'nullable',
    'default': 'default',
}


@dataclass(frozen=True)
class ColumnSpec:
    """Column definition.

    Attributes:
        name: Column name
        type: SQL type such as INTEGER or VARCHAR
        length: Optional length rendered as TYPE(length)
        primary: Render PRIMARY KEY (CREATE TABLE only)
        attribute: Raw attribute string, e.g. AUTOINCREMENT
        nullable: False renders NOT NULL, True renders DEFAULT NULL,
            None renders neither
        default: Default value; ignored when nullable is True
    """

    name: str
    type: Optional[str] = None
    length: Optional[Union[int, str]] = None
    primary: bool = False
    attribute: Optional[str] = None
    nullable: Optional[bool] = None
    default: Optional[DefaultValue] = None

    @classmethod
    def from_attributes(cls, name: str, attributes: Mapping[str, Any]) -> 'ColumnSpec':
        """Build a column from an attribute mapping.

        Accepted keys are ``type``, ``length``, ``primary``, ``attribute``,
        ``null`` (or ``nullable``) and ``default``.

        Args:
            name: Column name
            attributes: Attribute mapping

        Returns:
            A new ColumnSpec

        Raises:
            ArgumentError: If a key is unknown or a value has the wrong type
        """
        check_argument(1, name, 'str')
        check_argument(2, attributes, Mapping)

        fields: Dict[str, Any] = {}
        for key, value in attributes.items():
            if key not in ATTRIBUTE_KEYS:
                raise ArgumentError(f"Unknown column attribute {key!r} for column {name!r}")
            fields[ATTRIBUTE_KEYS[key]] = value

        check_argument(2, fields.get('type'), 'str', 'null')
        check_argument(2, fields.get('length'), 'int', 'str', 'null')
        check_argument(2, fields.get('attribute'), 'str', 'null')
        check_argument(2, fields.get('nullable'), 'bool', 'null')
        check_argument(2, fields.get('default'), 'str', 'number', 'bool', 'null')

        fields['primary'] = bool(fields.get('primary', False))
        return cls(name=name, **fields)


@dataclass(frozen=True)
class ForeignKeySpec:
    """Foreign key referencing ``table(column)``."""

    name: str
    table: str
    column: str


@dataclass(frozen=True)
class UniqueKeySpec:
    """Named unique key over an ordered list of columns."""

    name: str
    columns: Tuple[str, ...]


@dataclass(frozen=True)
class TableDefinition:
    """Snapshot of a Create builder.

    Column order is insertion order and determines output order. The
    comment is carried for callers but SQLite has no table comments, so it
    is never rendered.
    """

    name: Optional[str]
    columns: Tuple[ColumnSpec, ...] = ()
    foreign_keys: Tuple[ForeignKeySpec, ...] = ()
    unique_keys: Tuple[UniqueKeySpec, ...] = ()
    comment: Optional[str] = None


@dataclass(frozen=True)
class ColumnChange:
    """Redefinition of an existing column, renamed when new_name is set."""

    column: ColumnSpec
    new_name: Optional[str] = None

    @property
    def target_name(self) -> str:
        return self.new_name if self.new_name is not None else self.column.name


@dataclass(frozen=True)
class AlterPlan:
    """Snapshot of an Alter builder."""

    name: Optional[str]
    columns_to_add: Tuple[ColumnSpec, ...] = ()
    columns_to_change: Tuple[ColumnChange, ...] = ()
    columns_to_remove: Tuple[str, ...] = ()
    foreign_keys_to_add: Tuple[ForeignKeySpec, ...] = ()
    foreign_keys_to_remove: Tuple[str, ...] = ()
    unique_keys_to_add: Tuple[str, ...] = ()
    unique_keys_to_remove: Tuple[str, ...] = ()
