"""Content repositories package.

HierarchyStore implementations: in-memory and asyncpg.
"""

from .memory_hierarchy_store import MemoryHierarchyStore
from .hierarchy_repository import AsyncPGHierarchySession, AsyncPGHierarchyStore

__all__ = [
    "MemoryHierarchyStore",
    "AsyncPGHierarchySession",
    "AsyncPGHierarchyStore",
]
