"""
===========================================
Comprehensive pytest suite for database/index.py
===========================================

Sections:
---------
1. Unit tests - type and default parsing helpers, construction
2. Integration tests - builders executed against in-memory SQLite
3. Edge case tests - failing statements, missing rows, internal tables
4. Smoke tests - file database round trip

Available markers:
------------------
unit, integration, edge_case, smoke

Test Coverage:
--------------
- split_column_type / parse_default: PRAGMA table_info parsing
- Index.query: builders and raw SQL, rows as dicts, last inserted id
- Index.get_columns / get_primary_key / get_tables / table_exists
- Index.get_table_schema / get_schema: replayable dumps
- Index row helpers: insert, update, delete, count, get, set

How to Execute:
---------------
All tests:          python -m pytest tests/tests_database/test_index.py -v
By category:        python -m pytest tests/tests_database/test_index.py -m integration
With coverage:      python -m pytest tests/tests_database/test_index.py --cov=database.index
"""

import logging

import pytest

from database.index import (
    DatabaseError,
    Index,
    QueryError,
    parse_default,
    split_column_type,
)
from sql.alter import Alter
from sql.create import Create
from sql.exceptions import ArgumentError
from sql.utility import Utility

# ====================
# Mock Helper Classes
# ====================

class FakeConfig:
    """Mock config object for testing."""
    def __init__(self, db_path=':memory:'):
        self.db_path = db_path
        self.db_echo = False


# ==========
# Fixtures
# ==========

@pytest.fixture
def db():
    """In-memory Index, disposed after the test."""
    index = Index(':memory:')
    yield index
    index.close()


@pytest.fixture
def post_db(db):
    """In-memory Index holding an empty post table."""
    db.query(
        db.create('post')
        .add_field('post_id', {'type': 'INTEGER', 'primary': True})
        .add_field('post_slug', {'type': 'VARCHAR', 'length': 255, 'null': False})
        .add_field('post_title', {'type': 'VARCHAR', 'length': 255, 'null': True})
        .add_field('post_flag', {'type': 'SMALLINT', 'null': False, 'default': 0})
    )
    return db


# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
@pytest.mark.parametrize("declared, expected", [
    ('VARCHAR(255)', ('VARCHAR', '255', None)),
    ('INTEGER', ('INTEGER', None, None)),
    ('DECIMAL(10,2) UNSIGNED', ('DECIMAL', '10,2', 'UNSIGNED')),
    ('', (None, None, None)),
    (None, (None, None, None)),
])
def test_split_column_type(declared, expected):
    assert split_column_type(declared) == expected


@pytest.mark.unit
@pytest.mark.parametrize("raw, expected", [
    (None, (None, None)),
    ('NULL', (None, None)),
    ("'post'", ('post', None)),
    ("'it''s'", ("it's", None)),
    ('0', (0, None)),
    ('-1.5', (-1.5, None)),
    ('CURRENT_TIMESTAMP', (None, 'DEFAULT CURRENT_TIMESTAMP')),
])
def test_parse_default(raw, expected):
    assert parse_default(raw) == expected


@pytest.mark.unit
def test_index_defaults_to_configured_path(monkeypatch):
    """Test Index without a path. Verifies config.db_path is used."""
    monkeypatch.setattr('database.index.config', FakeConfig('/tmp/configured.db'))

    assert Index().path == '/tmp/configured.db'


@pytest.mark.unit
def test_index_is_lazy():
    index = Index(':memory:')

    assert index._engine is None
    assert index.get_last_inserted_id() is None


@pytest.mark.unit
def test_builder_factories(db):
    assert isinstance(db.create('post'), Create)
    assert db.create('post').name == 'post'
    assert isinstance(db.alter('post'), Alter)
    assert db.alter().name is None
    assert isinstance(db.utility(), Utility)


@pytest.mark.unit
def test_query_error_hierarchy():
    assert issubclass(QueryError, DatabaseError)


# =====================
# 2. INTEGRATION TESTS
# =====================

@pytest.mark.integration
def test_connect_is_idempotent(db):
    assert db.connect() is db
    engine = db._engine

    db.connect()

    assert db._engine is engine


@pytest.mark.integration
def test_query_returns_rows_as_dicts(db):
    assert db.query("SELECT 1 AS one, 'a' AS letter") == [{'one': 1, 'letter': 'a'}]


@pytest.mark.integration
def test_query_without_rows_returns_empty_list(post_db):
    assert post_db.query('DELETE FROM "post";') == []


@pytest.mark.integration
def test_query_with_binds(post_db):
    post_db.query(
        'INSERT INTO "post" ("post_slug") VALUES (:slug);', {'slug': 'bound'}
    )

    assert post_db.get_row('post', 'post_slug', 'bound')['post_id'] == 1


@pytest.mark.integration
def test_last_inserted_id(post_db):
    post_db.insert_row('post', {'post_slug': 'a'})
    assert post_db.get_last_inserted_id() == 1

    post_db.insert_row('post', {'post_slug': 'b'})
    assert post_db.get_last_inserted_id() == 2


@pytest.mark.integration
def test_last_inserted_id_survives_other_statements(post_db):
    post_db.insert_row('post', {'post_slug': 'a'})
    post_db.query('SELECT * FROM "post";')
    post_db.update_rows('post', {'post_title': 'T'})

    assert post_db.get_last_inserted_id() == 1


@pytest.mark.integration
def test_get_row(post_db):
    post_db.insert_row('post', {'post_slug': 'a', 'post_title': 'First'})

    assert post_db.get_row('post', 'post_slug', 'a') == {
        'post_id': 1,
        'post_slug': 'a',
        'post_title': 'First',
        'post_flag': 0,
    }


@pytest.mark.integration
def test_insert_rows_and_count(post_db):
    post_db.insert_rows('post', [
        {'post_slug': 'a', 'post_flag': 1},
        {'post_slug': 'b', 'post_flag': 1},
        {'post_slug': 'c'},
    ])

    assert post_db.count_rows('post') == 3
    assert post_db.count_rows('post', 'post_flag = :flag', {'flag': 1}) == 2


@pytest.mark.integration
def test_update_rows_with_where(post_db):
    post_db.insert_rows('post', [{'post_slug': 'a'}, {'post_slug': 'b'}])

    post_db.update_rows('post', {'post_title': 'Updated'}, 'post_slug = :slug', {'slug': 'a'})

    assert post_db.get_row('post', 'post_slug', 'a')['post_title'] == 'Updated'
    assert post_db.get_row('post', 'post_slug', 'b')['post_title'] is None


@pytest.mark.integration
def test_update_rows_where_bind_named_like_column(post_db):
    """Test WHERE binds named after updated columns. Verifies SET binds do not collide."""
    post_db.insert_row('post', {'post_slug': 'a'})

    post_db.update_rows(
        'post', {'post_slug': 'z'}, 'post_slug = :post_slug', {'post_slug': 'a'}
    )

    assert post_db.get_row('post', 'post_slug', 'z') is not None
    assert post_db.get_row('post', 'post_slug', 'a') is None


@pytest.mark.integration
def test_delete_rows(post_db):
    post_db.insert_rows('post', [{'post_slug': 'a'}, {'post_slug': 'b'}])

    post_db.delete_rows('post', 'post_slug = :slug', {'slug': 'a'})
    assert post_db.count_rows('post') == 1

    post_db.delete_rows('post')
    assert post_db.count_rows('post') == 0


@pytest.mark.integration
def test_set_row_updates_existing(post_db):
    post_db.insert_row('post', {'post_slug': 'a'})

    post_db.set_row('post', 'post_slug', 'a', {'post_title': 'Set'})

    assert post_db.count_rows('post') == 1
    assert post_db.get_row('post', 'post_slug', 'a')['post_title'] == 'Set'


@pytest.mark.integration
def test_set_row_inserts_missing(post_db):
    post_db.set_row('post', 'post_slug', 'new', {'post_title': 'Fresh'})

    row = post_db.get_row('post', 'post_slug', 'new')
    assert row['post_title'] == 'Fresh'
    assert post_db.get_last_inserted_id() == row['post_id']


@pytest.mark.integration
def test_get_columns(post_db):
    columns = post_db.get_columns('post')

    assert columns == [
        {'field': 'post_id', 'type': 'INTEGER', 'default': None, 'null': True, 'key': 'PRI'},
        {'field': 'post_slug', 'type': 'VARCHAR(255)', 'default': None, 'null': False, 'key': None},
        {'field': 'post_title', 'type': 'VARCHAR(255)', 'default': 'NULL', 'null': True, 'key': None},
        {'field': 'post_flag', 'type': 'SMALLINT', 'default': '0', 'null': False, 'key': None},
    ]


@pytest.mark.integration
def test_get_primary_key(post_db):
    assert post_db.get_primary_key('post') == 'post_id'


@pytest.mark.integration
def test_get_primary_key_without_key(db):
    db.query(db.create('plain').add_field('a', {'type': 'TEXT'}))

    assert db.get_primary_key('plain') is None


@pytest.mark.integration
def test_get_tables_and_table_exists(post_db):
    post_db.query(post_db.create('comment').add_field('comment_id', {'type': 'INTEGER'}))

    assert post_db.get_tables() == ['post', 'comment']
    assert post_db.table_exists('comment') is True
    assert post_db.table_exists('missing') is False


@pytest.mark.integration
def test_drop_table_through_utility(post_db):
    post_db.query(post_db.utility().drop_table('post'))

    assert post_db.get_tables() == []


@pytest.mark.integration
def test_alter_add_column(post_db):
    post_db.query(
        post_db.alter('post').add_field('post_views', {'type': 'INTEGER', 'null': False, 'default': 0})
    )

    assert post_db.get_columns('post')[-1]['field'] == 'post_views'


@pytest.mark.integration
def test_get_table_schema(post_db):
    post_db.insert_row('post', {'post_slug': 'a', 'post_title': "It's"})

    assert post_db.get_table_schema('post') == (
        'CREATE TABLE "post" ("post_id" INTEGER PRIMARY KEY, '
        '"post_slug" VARCHAR(255) NOT NULL, '
        '"post_title" VARCHAR(255), '
        '"post_flag" SMALLINT NOT NULL DEFAULT 0);'
        '\n\n'
        'INSERT INTO "post" ("post_id", "post_slug", "post_title", "post_flag") '
        "VALUES (1, 'a', 'It''s', 0);"
    )


@pytest.mark.integration
def test_get_table_schema_replays(post_db):
    """Test replaying a dump into a fresh database. Verifies the dump is reproduced."""
    post_db.insert_rows('post', [{'post_slug': 'a'}, {'post_slug': 'b', 'post_flag': 3}])
    dump = post_db.get_table_schema('post')

    copy = Index(':memory:')
    try:
        for statement in dump.replace('\n\n', '\n').split('\n'):
            copy.query(statement)

        assert copy.get_table_schema('post') == dump
    finally:
        copy.close()


@pytest.mark.integration
def test_get_table_schema_keeps_expression_defaults(db):
    db.query(
        db.create('event')
        .add_field('created', {'type': 'DATETIME', 'attribute': 'DEFAULT CURRENT_TIMESTAMP'})
    )

    assert db.get_table_schema('event') == (
        'CREATE TABLE "event" ("created" DATETIME DEFAULT CURRENT_TIMESTAMP);'
    )


@pytest.mark.integration
def test_query_keeps_colons_inside_string_literals(db):
    """Test a rendered default holding ':word'. Verifies it is not read as a bind."""
    db.query(db.create('note').add_field('label', {'type': 'VARCHAR', 'default': 'note :draft'}))
    db.query('INSERT INTO "note" DEFAULT VALUES;')

    assert db.get_row('note', 'label', 'note :draft') == {'label': 'note :draft'}


@pytest.mark.integration
def test_get_table_schema_replays_quotes_and_colons(db):
    """Test a dump with a quoted default and ':word' data. Verifies it replays unchanged."""
    db.query('CREATE TABLE "person" ("name" VARCHAR DEFAULT \'O\'\'Brien\', "note" TEXT)')
    db.insert_row('person', {'note': 'see :later'})
    dump = db.get_table_schema('person')

    assert dump.startswith('CREATE TABLE "person" ("name" VARCHAR DEFAULT \'O\'\'Brien\', "note" TEXT);')

    copy = Index(':memory:')
    try:
        for statement in dump.replace('\n\n', '\n').split('\n'):
            copy.query(statement)

        assert copy.get_table_schema('person') == dump
        assert copy.get_row('person', 'note', 'see :later')['name'] == "O'Brien"
    finally:
        copy.close()


@pytest.mark.integration
def test_get_schema_dumps_every_table(post_db):
    post_db.query(post_db.create('tag').add_field('tag_name', {'type': 'TEXT'}))
    post_db.insert_row('tag', {'tag_name': 'news'})

    schema = post_db.get_schema()

    assert schema.startswith('CREATE TABLE "post"')
    assert 'CREATE TABLE "tag" ("tag_name" TEXT);' in schema
    assert schema.endswith('INSERT INTO "tag" ("tag_name") VALUES (\'news\');')


# ===================
# 3. EDGE CASE TESTS
# ===================

@pytest.mark.edge_case
def test_truncate_is_rejected_by_sqlite(post_db, caplog):
    with caplog.at_level(logging.ERROR, logger='database.index'):
        with pytest.raises(QueryError, match="Query failed"):
            post_db.query(post_db.utility().truncate('post'))

    assert 'TRUNCATE "post";' in caplog.text


@pytest.mark.edge_case
def test_failed_statement_is_rolled_back(post_db):
    with pytest.raises(QueryError):
        post_db.query('INSERT INTO "post" ("post_slug") VALUES (NULL);')

    assert post_db.count_rows('post') == 0


@pytest.mark.edge_case
def test_query_rejects_non_builder(db):
    with pytest.raises(ArgumentError):
        db.query(42)


@pytest.mark.edge_case
def test_query_rejects_bad_binds(db):
    with pytest.raises(ArgumentError):
        db.query('SELECT 1', ['a'])


@pytest.mark.edge_case
def test_get_row_missing_returns_none(post_db):
    assert post_db.get_row('post', 'post_slug', 'missing') is None


@pytest.mark.edge_case
def test_get_tables_skips_internal_tables(db):
    db.query(
        db.create('counter')
        .add_field('counter_id', {'type': 'INTEGER', 'primary': True, 'attribute': 'AUTOINCREMENT'})
    )
    db.insert_row('counter', {'counter_id': 5})

    assert db.get_tables() == ['counter']


@pytest.mark.edge_case
def test_get_table_schema_for_empty_table(post_db):
    assert post_db.get_table_schema('post').endswith('DEFAULT 0);')
    assert 'INSERT' not in post_db.get_table_schema('post')


@pytest.mark.edge_case
def test_close_then_query_reconnects(db):
    db.query('SELECT 1')
    db.close()
    assert db._engine is None

    assert db.query('SELECT 2 AS two') == [{'two': 2}]


# ================
# 4. SMOKE TESTS
# ================

@pytest.mark.smoke
def test_file_database_round_trip(tmp_path):
    path = tmp_path / 'nested' / 'unit.db'
    index = Index(str(path))

    try:
        index.query(index.create('unit_post').add_field('post_slug', {'type': 'TEXT'}))
        index.insert_row('unit_post', {'post_slug': 'unit-test-1'})
    finally:
        index.close()

    assert path.is_file()

    reopened = Index(str(path))
    try:
        assert reopened.get_row('unit_post', 'post_slug', 'unit-test-1') == {'post_slug': 'unit-test-1'}
    finally:
        reopened.close()
