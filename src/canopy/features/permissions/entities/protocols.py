"""Protocol interfaces for the permission catalog.

The catalog stores role -> permission mappings plus global and
resource-scoped role assignments. It answers questions; deciding access is
the access feature's job.
"""

from abc import abstractmethod
from typing import List, Optional, Protocol, Set, runtime_checkable

from ....core.value_objects import NavigatorId, ResourceId
from .role import GlobalRoleAssignment, ResourceRoleAssignment


@runtime_checkable
class PermissionCatalog(Protocol):
    """Protocol for role and permission storage."""

    @abstractmethod
    async def has_global_permission(self, navigator_id: NavigatorId, permission: str) -> bool:
        """Does any globally assigned role of the navigator carry ``permission``?"""
        ...

    @abstractmethod
    async def has_resource_permission(
        self,
        navigator_id: Optional[NavigatorId],
        permission: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        """Does any role assigned on exactly this resource carry ``permission``?"""
        ...

    @abstractmethod
    async def get_navigator_permissions(self, navigator_id: NavigatorId) -> Set[str]:
        """All permissions granted through global roles."""
        ...

    @abstractmethod
    async def get_navigator_roles(self, navigator_id: NavigatorId) -> List[GlobalRoleAssignment]:
        ...

    @abstractmethod
    async def get_navigator_resource_roles(
        self,
        navigator_id: Optional[NavigatorId],
        resource_type: Optional[str] = None,
        resource_id: Optional[ResourceId] = None,
    ) -> List[ResourceRoleAssignment]:
        ...

    @abstractmethod
    async def get_role_permissions(self, role_name: str) -> Set[str]:
        ...

    @abstractmethod
    async def grant_global_role(self, navigator_id: NavigatorId, role_name: str) -> bool:
        """Assign a global role; returns False when it was already assigned."""
        ...

    @abstractmethod
    async def revoke_global_role(self, navigator_id: NavigatorId, role_name: str) -> bool:
        """Remove a global role; returns False when it was not assigned."""
        ...

    @abstractmethod
    async def grant_resource_role(
        self,
        navigator_id: Optional[NavigatorId],
        role_name: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        ...

    @abstractmethod
    async def revoke_resource_role(
        self,
        navigator_id: Optional[NavigatorId],
        role_name: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        ...
