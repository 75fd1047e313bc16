"""
==================================
Pytest suite for sql/utility.py
==================================

How to Execute:
---------------
All tests:          python -m pytest tests/tests_sql/test_utility.py -v
"""

import pytest

from sql.exceptions import ArgumentError, ConfigurationError
from sql.utility import Utility


@pytest.mark.unit
@pytest.mark.parametrize("method, args, expected", [
    ('drop_table', ('users',), 'DROP TABLE "users";'),
    ('rename_table', ('users', 'members'), 'RENAME TABLE "users" TO "members";'),
    ('show_columns', ('users',), 'PRAGMA table_info(users);'),
    ('show_tables', (), "SELECT * FROM dbname.sqlite_master WHERE type='table';"),
    ('show_tables', ('main',), "SELECT * FROM main.sqlite_master WHERE type='table';"),
    ('truncate', ('users',), 'TRUNCATE "users";'),
])
def test_statements(method, args, expected):
    query = Utility()

    assert getattr(query, method)(*args) is query
    assert query.get_query() == expected


@pytest.mark.unit
def test_last_call_wins():
    query = Utility().drop_table('a').truncate('b').show_columns('c')

    assert query.get_query() == 'PRAGMA table_info(c);'
    assert str(query) == 'PRAGMA table_info(c);'


@pytest.mark.edge_case
def test_get_query_without_statement_raises():
    with pytest.raises(ConfigurationError):
        Utility().get_query()


@pytest.mark.edge_case
@pytest.mark.parametrize("call", [
    lambda query: query.drop_table(None),
    lambda query: query.rename_table('a', 5),
    lambda query: query.show_columns(['a']),
    lambda query: query.show_tables(None),
    lambda query: query.truncate(1.5),
])
def test_invalid_arguments_raise(call):
    with pytest.raises(ArgumentError):
        call(Utility())
