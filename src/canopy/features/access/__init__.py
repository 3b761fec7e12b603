"""Access feature for canopy.

Tiered resolution of permission checks (global, resource, ownership) and
the ancestor cascade that lets a resource grant cover a whole subtree.
"""

from .entities import PermissionCheck, PermissionCheckBuilder, PermissionResult
from .services import (
    AccessResolver,
    OwnershipLookup,
    ContentOwnershipLookup,
    AncestorCascade,
    AccessService,
    ContentAccessService,
)

__all__ = [
    "PermissionCheck",
    "PermissionCheckBuilder",
    "PermissionResult",
    "AccessResolver",
    "OwnershipLookup",
    "ContentOwnershipLookup",
    "AncestorCascade",
    "AccessService",
    "ContentAccessService",
]
