"""Access entities package."""

from .permission_check import PermissionCheck, PermissionCheckBuilder
from .permission_result import PermissionResult

__all__ = [
    "PermissionCheck",
    "PermissionCheckBuilder",
    "PermissionResult",
]
