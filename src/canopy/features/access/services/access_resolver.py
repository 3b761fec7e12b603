"""Tiered access resolution.

Decision order, first match wins:

1. no navigator -> DENIED
2. global: a globally assigned role carries the permission -> GRANTED_GLOBAL
3. resource: a role assigned on exactly this resource carries it -> GRANTED_RESOURCE
4. ownership: the permission ends with ``:own``, the navigator holds it
   globally and owns the resource -> GRANTED_OWNERSHIP
5. otherwise DENIED

A ``:own`` check that names a resource skips the global tier: holding the
permission globally only grants access to resources the navigator owns.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

from ....config.settings import CanopySettings, get_settings
from ....core.exceptions import PermissionDeniedError
from ....core.value_objects import ContentId, NavigatorId, ResourceId
from ...content.entities.protocols import HierarchyStore
from ...permissions.entities.protocols import PermissionCatalog
from ..entities.permission_check import PermissionCheck
from ..entities.permission_result import PermissionResult

logger = logging.getLogger(__name__)


@runtime_checkable
class OwnershipLookup(Protocol):
    """Answers whether a navigator is the recorded owner of a resource."""

    async def is_owner(
        self,
        navigator_id: NavigatorId,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        ...


class ContentOwnershipLookup:
    """Ownership of content blocks, read from the block's ``owner_id``."""

    def __init__(self, store: HierarchyStore, settings: Optional[CanopySettings] = None):
        self._store = store
        self._resource_type = (settings or get_settings()).content_resource_type

    async def is_owner(
        self,
        navigator_id: NavigatorId,
        resource_type: str,
        resource_id: ResourceId,
    ) -> bool:
        if resource_type != self._resource_type:
            return False
        node = await self._store.get(ContentId(resource_id.value))
        return node is not None and node.is_owned_by(navigator_id)


class AccessResolver:
    """Resolves permission checks against the catalog.

    Args:
        catalog: PermissionCatalog implementation
        ownership: Ownership facts for the ownership tier; without one that
            tier never grants
    """

    def __init__(self, catalog: PermissionCatalog, ownership: Optional[OwnershipLookup] = None):
        self._catalog = catalog
        self._ownership = ownership

    async def check(self, check: PermissionCheck) -> PermissionResult:
        """Run every tier in order and return the first decision."""
        navigator_id = check.navigator_id
        if navigator_id is None:
            logger.debug(f"Denied {check.permission}: no navigator")
            return PermissionResult.DENIED

        if not (check.is_ownership and check.has_resource):
            if await self._catalog.has_global_permission(navigator_id, check.permission):
                return self._decided(check, PermissionResult.GRANTED_GLOBAL)

        if check.has_resource:
            result = await self.check_resource(check)
            if result.granted:
                return result

        if check.is_ownership and check.has_resource and self._ownership is not None:
            if await self._catalog.has_global_permission(navigator_id, check.permission):
                if await self._ownership.is_owner(navigator_id, check.resource_type, check.resource_id):
                    return self._decided(check, PermissionResult.GRANTED_OWNERSHIP)

        return self._decided(check, PermissionResult.DENIED)

    async def check_resource(self, check: PermissionCheck) -> PermissionResult:
        """Resource tier only: roles assigned on exactly ``check``'s resource."""
        if check.navigator_id is None or not check.has_resource:
            return PermissionResult.DENIED

        granted = await self._catalog.has_resource_permission(
            check.navigator_id,
            check.permission,
            check.resource_type,
            check.resource_id,
        )
        if granted:
            return self._decided(check, PermissionResult.GRANTED_RESOURCE)
        return PermissionResult.DENIED

    async def can(self, check: PermissionCheck) -> bool:
        return (await self.check(check)).granted

    async def require(self, check: PermissionCheck) -> PermissionResult:
        """Like ``check`` but raises PermissionDeniedError instead of returning DENIED."""
        result = await self.check(check)
        if not result.granted:
            raise PermissionDeniedError(
                check.navigator_id, check.permission, check.describe_resource()
            )
        return result

    async def can_on(
        self,
        navigator_id: Optional[NavigatorId],
        permission: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[ResourceId] = None,
    ) -> bool:
        return await self.can(PermissionCheck(permission, navigator_id, resource_type, resource_id))

    async def require_on(
        self,
        navigator_id: Optional[NavigatorId],
        permission: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[ResourceId] = None,
    ) -> PermissionResult:
        return await self.require(PermissionCheck(permission, navigator_id, resource_type, resource_id))

    @staticmethod
    def _decided(check: PermissionCheck, result: PermissionResult) -> PermissionResult:
        logger.debug(
            f"{result.value}: navigator={check.navigator_id} permission={check.permission} "
            f"resource={check.describe_resource()}"
        )
        return result
