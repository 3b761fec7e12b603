"""
Database module for canopy.

asyncpg connection pool, error wrapping for queries and the DDL of the
content and auth schemas.
"""

from .connection import (
    DatabaseManager,
    get_database,
    init_database,
    close_database,
)
from .error_handling import persistence_operation
from .schema import (
    auth_schema_sql,
    content_schema_sql,
    create_schema,
    seed_rows,
)

__all__ = [
    "DatabaseManager",
    "get_database",
    "init_database",
    "close_database",
    "persistence_operation",
    "auth_schema_sql",
    "content_schema_sql",
    "create_schema",
    "seed_rows",
]
