"""In-memory permission catalog."""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from ....config.constants import DEFAULT_ROLE_DESCRIPTIONS, DEFAULT_ROLE_PERMISSIONS
from ....core.exceptions import CatalogError
from ....core.value_objects import NavigatorId, ResourceId
from ..entities.role import GlobalRoleAssignment, ResourceRoleAssignment, Role

logger = logging.getLogger(__name__)

ResourceKey = Tuple[Optional[NavigatorId], str, str, ResourceId]


class MemoryPermissionCatalog:
    """PermissionCatalog held in process memory.

    Args:
        role_permissions: Role name -> permission tokens; defaults to the
            seeded catalog
    """

    def __init__(self, role_permissions: Optional[Mapping[str, Iterable[str]]] = None):
        source = DEFAULT_ROLE_PERMISSIONS if role_permissions is None else role_permissions
        self._roles: Dict[str, Role] = {
            name: Role(
                name=name,
                description=DEFAULT_ROLE_DESCRIPTIONS.get(name),
                permissions=frozenset(permissions),
            )
            for name, permissions in source.items()
        }
        self._global: Dict[NavigatorId, Dict[str, GlobalRoleAssignment]] = {}
        self._resource: Dict[ResourceKey, ResourceRoleAssignment] = {}

    def define_role(self, name: str, permissions: Iterable[str], description: Optional[str] = None) -> Role:
        """Add or replace a role of the static catalog."""
        role = Role(name=name, description=description, permissions=frozenset(permissions))
        self._roles[name] = role
        return role

    def _require_role(self, role_name: str, operation: str) -> Role:
        role = self._roles.get(role_name)
        if role is None:
            raise CatalogError(
                f"Role {role_name!r} does not exist",
                operation=operation,
                details={"role_name": role_name},
            )
        return role

    def _role_permissions(self, role_name: str) -> Set[str]:
        role = self._roles.get(role_name)
        return set(role.permissions) if role else set()

    async def has_global_permission(self, navigator_id: NavigatorId, permission: str) -> bool:
        return any(
            permission in self._role_permissions(role_name)
            for role_name in self._global.get(navigator_id, {})
        )

    async def has_resource_permission(
        self,
        navigator_id: Optional[NavigatorId],
        permission: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        return any(
            permission in self._role_permissions(assignment.role_name)
            for assignment in await self.get_navigator_resource_roles(
                navigator_id, resource_type, resource_id
            )
        )

    async def get_navigator_permissions(self, navigator_id: NavigatorId) -> Set[str]:
        permissions: Set[str] = set()
        for role_name in self._global.get(navigator_id, {}):
            permissions |= self._role_permissions(role_name)
        return permissions

    async def get_navigator_roles(self, navigator_id: NavigatorId) -> List[GlobalRoleAssignment]:
        return list(self._global.get(navigator_id, {}).values())

    async def get_navigator_resource_roles(
        self,
        navigator_id: Optional[NavigatorId],
        resource_type: Optional[str] = None,
        resource_id: Optional[ResourceId] = None,
    ) -> List[ResourceRoleAssignment]:
        return [
            assignment for assignment in self._resource.values()
            if assignment.navigator_id == navigator_id
            and (resource_type is None or assignment.resource_type == resource_type)
            and (resource_id is None or assignment.resource_id == resource_id)
        ]

    async def get_role_permissions(self, role_name: str) -> Set[str]:
        return self._role_permissions(role_name)

    async def grant_global_role(self, navigator_id: NavigatorId, role_name: str) -> bool:
        self._require_role(role_name, "grant global role")
        assigned = self._global.setdefault(navigator_id, {})
        if role_name in assigned:
            return False
        assigned[role_name] = GlobalRoleAssignment(navigator_id=navigator_id, role_name=role_name)
        logger.info(f"Granted global role {role_name} to navigator {navigator_id}")
        return True

    async def revoke_global_role(self, navigator_id: NavigatorId, role_name: str) -> bool:
        assigned = self._global.get(navigator_id, {})
        if assigned.pop(role_name, None) is None:
            return False
        logger.info(f"Revoked global role {role_name} from navigator {navigator_id}")
        return True

    async def grant_resource_role(
        self,
        navigator_id: Optional[NavigatorId],
        role_name: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        self._require_role(role_name, "grant resource role")
        assignment = ResourceRoleAssignment(
            navigator_id=navigator_id,
            role_name=role_name,
            resource_type=resource_type,
            resource_id=resource_id,
        )
        if assignment.key in self._resource:
            return False
        self._resource[assignment.key] = assignment
        logger.info(
            f"Granted role {role_name} on {resource_type} {resource_id} to navigator {navigator_id}"
        )
        return True

    async def revoke_resource_role(
        self,
        navigator_id: Optional[NavigatorId],
        role_name: str,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        key = (navigator_id, role_name, resource_type, resource_id)
        if self._resource.pop(key, None) is None:
            return False
        logger.info(
            f"Revoked role {role_name} on {resource_type} {resource_id} from navigator {navigator_id}"
        )
        return True
