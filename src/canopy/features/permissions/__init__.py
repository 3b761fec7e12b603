"""Permissions feature for canopy.

Permission tokens, roles, and the catalog of global and resource-scoped
role assignments.
"""

from .entities import (
    PermissionCode,
    Role,
    GlobalRoleAssignment,
    ResourceRoleAssignment,
    PermissionCatalog,
)
from .repositories import MemoryPermissionCatalog, AsyncPGPermissionCatalog

__all__ = [
    "PermissionCode",
    "Role",
    "GlobalRoleAssignment",
    "ResourceRoleAssignment",
    "PermissionCatalog",
    "MemoryPermissionCatalog",
    "AsyncPGPermissionCatalog",
]
