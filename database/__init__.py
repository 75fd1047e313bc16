"""
===========================
SQLite database facade.
===========================

Modules:
    index: Index, the connection/query facade over the sql/ builders
"""

__all__ = ['Index', 'DatabaseError', 'QueryError']

from .index import DatabaseError, Index, QueryError
