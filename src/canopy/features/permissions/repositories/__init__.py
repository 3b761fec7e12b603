"""Permission repositories package."""

from .memory_catalog import MemoryPermissionCatalog
from .permission_catalog import AsyncPGPermissionCatalog

__all__ = [
    "MemoryPermissionCatalog",
    "AsyncPGPermissionCatalog",
]
