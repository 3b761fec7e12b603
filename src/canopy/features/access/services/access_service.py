"""Role assignment facade over the permission catalog."""

from typing import List, Optional, Set

from ....config.settings import CanopySettings, get_settings
from ....core.value_objects import ContentId, NavigatorId, ResourceId
from ...permissions.entities.protocols import PermissionCatalog
from ...permissions.entities.role import GlobalRoleAssignment, ResourceRoleAssignment


class AccessService:
    """Grant, revoke and list role assignments.

    Grants and revokes are idempotent; each returns whether anything changed.
    """

    def __init__(self, catalog: PermissionCatalog, settings: Optional[CanopySettings] = None):
        self._catalog = catalog
        self._settings = settings or get_settings()

    async def grant_global_role(self, navigator_id: NavigatorId, role_name: str) -> bool:
        return await self._catalog.grant_global_role(navigator_id, role_name)

    async def revoke_global_role(self, navigator_id: NavigatorId, role_name: str) -> bool:
        return await self._catalog.revoke_global_role(navigator_id, role_name)

    async def grant_resource_role(
        self,
        navigator_id: Optional[NavigatorId],
        role_name: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        return await self._catalog.grant_resource_role(
            navigator_id, role_name, resource_type, resource_id
        )

    async def revoke_resource_role(
        self,
        navigator_id: Optional[NavigatorId],
        role_name: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        return await self._catalog.revoke_resource_role(
            navigator_id, role_name, resource_type, resource_id
        )

    async def grant_content_role(
        self,
        navigator_id: Optional[NavigatorId],
        role_name: str,
        content_id: ContentId,
    ) -> bool:
        """Grant a role on one block (and, through the cascade, its subtree)."""
        return await self.grant_resource_role(
            navigator_id, role_name, self._settings.content_resource_type, content_id.as_resource()
        )

    async def revoke_content_role(
        self,
        navigator_id: Optional[NavigatorId],
        role_name: str,
        content_id: ContentId,
    ) -> bool:
        return await self.revoke_resource_role(
            navigator_id, role_name, self._settings.content_resource_type, content_id.as_resource()
        )

    async def get_navigator_permissions(self, navigator_id: NavigatorId) -> Set[str]:
        return await self._catalog.get_navigator_permissions(navigator_id)

    async def get_navigator_roles(self, navigator_id: NavigatorId) -> List[GlobalRoleAssignment]:
        return await self._catalog.get_navigator_roles(navigator_id)

    async def get_navigator_resource_roles(
        self,
        navigator_id: Optional[NavigatorId],
        resource_type: Optional[str] = None,
        resource_id: Optional[ResourceId] = None,
    ) -> List[ResourceRoleAssignment]:
        return await self._catalog.get_navigator_resource_roles(
            navigator_id, resource_type, resource_id
        )
