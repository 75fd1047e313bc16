"""
===================================
Argument type checks for builders.
===================================

Every fluent setter validates its arguments at call time so that a bad
value is reported where it was passed, not later when the query is
rendered.

Example:
    >>> from sql.argument import check_argument
    >>> check_argument(1, 'users', 'str')
    >>> check_argument(2, None, 'str', 'null')
    >>> check_argument(1, 42, 'str')
    Traceback (most recent call last):
        ...
    sql.exceptions.ArgumentError: Argument 1 expected str, got int
"""

from numbers import Number
from typing import Any, Union

from sql.exceptions import ArgumentError

TYPE_NAMES = {
    'str': (str,),
    'int': (int,),
    'bool': (bool,),
    'list': (list, tuple),
    'dict': (dict,),
    'number': (Number,),
    'null': (type(None),),
}


def _matches(value: Any, expected: Union[str, type]) -> bool:
    if isinstance(expected, type):
        return isinstance(value, expected)

    if expected not in TYPE_NAMES:
        raise ValueError(f"Unknown argument type name: {expected!r}")

    # bool is an int subclass; only accept it where bool is asked for
    if expected in ('int', 'number') and isinstance(value, bool):
        return False

    return isinstance(value, TYPE_NAMES[expected])


def check_argument(position: int, value: Any, *expected: Union[str, type]) -> None:
    """Validate that an argument matches one of the expected types.

    Args:
        position: 1-based argument position, used in the error message
        value: The value passed by the caller
        *expected: Type names ('str', 'int', 'bool', 'list', 'dict',
            'number', 'null') or classes

    Raises:
        ArgumentError: If the value matches none of the expected types
    """
    if any(_matches(value, item) for item in expected):
        return

    names = " or ".join(
        item.__name__ if isinstance(item, type) else item for item in expected
    )
    raise ArgumentError(
        f"Argument {position} expected {names}, got {type(value).__name__}"
    )
