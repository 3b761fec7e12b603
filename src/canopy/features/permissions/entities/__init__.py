"""Permission entities package."""

from .permission import PermissionCode
from .role import Role, GlobalRoleAssignment, ResourceRoleAssignment
from .protocols import PermissionCatalog

__all__ = [
    "PermissionCode",
    "Role",
    "GlobalRoleAssignment",
    "ResourceRoleAssignment",
    "PermissionCatalog",
]
