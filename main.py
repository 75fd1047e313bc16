"""
=========================================================
Command-line entry point for the SQLite query builder.
=========================================================

Thin CLI over ``database.index.Index`` for inspecting a SQLite database
from the shell. All work is delegated to Index; this module only parses
arguments, prints results and maps failures to exit codes.

Usage:
    # Check that the configured database can be opened
    python main.py --verify

    # List tables of a specific database file
    python main.py --database data/blog.db --tables

    # Show the columns of one table
    python main.py --columns post

    # Dump one table, or every table, as replayable SQL
    python main.py --schema post
    python main.py --schema

Exit Codes:
    0: Success
    1: Error
    130: User interrupt (Ctrl+C)
"""

import argparse
import sys
from typing import List, Optional

from core.logger import get_logger
from database.index import DatabaseError, Index
from sql.exceptions import SqliteBuilderError
from utils.database_utils import DatabaseConnectionError, verify_connection

logger = get_logger(__name__)

ALL_TABLES = ''


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SQLite query builder - database inspection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Verify the database from SQLITE_PATH
  python main.py --verify

  # Dump every table of another file
  python main.py --database backup.db --schema
        """
    )

    parser.add_argument(
        '--database',
        type=str,
        default=None,
        help='SQLite file path or :memory: (defaults to SQLITE_PATH)'
    )
    parser.add_argument(
        '--verify',
        action='store_true',
        help='Check that the database can be opened'
    )
    parser.add_argument(
        '--tables',
        action='store_true',
        help='List user tables'
    )
    parser.add_argument(
        '--columns',
        type=str,
        metavar='TABLE',
        help='Show the columns of TABLE'
    )
    parser.add_argument(
        '--schema',
        type=str,
        nargs='?',
        const=ALL_TABLES,
        metavar='TABLE',
        help='Dump TABLE (or every table) as CREATE TABLE and INSERT statements'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging (DEBUG level)'
    )

    return parser


def format_columns(columns: List[dict]) -> str:
    """Render get_columns() output as aligned text, one column per line."""
    lines = []
    for column in columns:
        flags = []
        if column['key'] == 'PRI':
            flags.append('PRIMARY KEY')
        if not column['null']:
            flags.append('NOT NULL')
        if column['default'] is not None:
            flags.append(f"DEFAULT {column['default']}")

        lines.append(f"{column['field']:<24} {column['type'] or '':<16} {' '.join(flags)}".rstrip())
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Command-line interface for database inspection.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        import logging
        logging.getLogger().setLevel(logging.DEBUG)

    index = Index(args.database)

    try:
        if args.verify:
            success, message = verify_connection(index.path)
            if success:
                logger.info(f"✅ {message}")
                return 0
            logger.error(f"❌ {message}")
            return 1

        elif args.tables:
            for table in index.get_tables():
                print(table)
            return 0

        elif args.columns:
            if not index.table_exists(args.columns):
                logger.error(f"❌ Table {args.columns} does not exist")
                return 1
            print(format_columns(index.get_columns(args.columns)))
            return 0

        elif args.schema is not None:
            if args.schema == ALL_TABLES:
                print(index.get_schema())
            else:
                print(index.get_table_schema(args.schema))
            return 0

        else:
            parser.print_help()
            logger.warning("⚠️  No operation specified. Use --verify, --tables, --columns or --schema.")
            return 1

    except (DatabaseError, DatabaseConnectionError, SqliteBuilderError) as e:
        logger.error(f"❌ {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("⚠️  Operation interrupted by user")
        return 130
    finally:
        index.close()


if __name__ == '__main__':
    sys.exit(main())
