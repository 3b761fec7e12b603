"""Read and write access checks for content blocks."""

import logging
from typing import Optional

from ....config.constants import ContentAction, PermissionScope
from ....config.settings import CanopySettings, get_settings
from ....core.exceptions import ContentNodeNotFoundError, PermissionDeniedError
from ....core.value_objects import ContentId, NavigatorId, NodeRef
from ...content.entities.protocols import HierarchyStore
from ...permissions.entities.permission import PermissionCode
from ..entities.permission_check import PermissionCheck
from ..entities.permission_result import PermissionResult
from .access_resolver import AccessResolver
from .ancestor_cascade import AncestorCascade

logger = logging.getLogger(__name__)


class ContentAccessService:
    """Decides whether a navigator may read or write a block.

    For action ``A`` on block ``B`` it tries, in order:

    - ``<prefix>:A:all`` (normally a global grant)
    - ``<prefix>:A`` granted on ``B`` itself
    - ``<prefix>:A:own`` when the navigator owns ``B``
    - ``<prefix>:A`` granted on an ancestor of ``B``, nearest first
    """

    def __init__(
        self,
        resolver: AccessResolver,
        store: HierarchyStore,
        cascade: Optional[AncestorCascade] = None,
        settings: Optional[CanopySettings] = None,
    ):
        self._settings = settings or get_settings()
        self._resolver = resolver
        self._store = store
        self._cascade = cascade or AncestorCascade(resolver, store, self._settings)

    async def check_read(self, navigator_id: Optional[NavigatorId], ref: NodeRef) -> PermissionResult:
        return await self._check(navigator_id, ref, ContentAction.READ)

    async def check_write(self, navigator_id: Optional[NavigatorId], ref: NodeRef) -> PermissionResult:
        return await self._check(navigator_id, ref, ContentAction.WRITE)

    async def can_read(self, navigator_id: Optional[NavigatorId], ref: NodeRef) -> bool:
        return (await self.check_read(navigator_id, ref)).granted

    async def can_write(self, navigator_id: Optional[NavigatorId], ref: NodeRef) -> bool:
        return (await self.check_write(navigator_id, ref)).granted

    async def require_read(self, navigator_id: Optional[NavigatorId], ref: NodeRef) -> PermissionResult:
        return await self._require(navigator_id, ref, ContentAction.READ)

    async def require_write(self, navigator_id: Optional[NavigatorId], ref: NodeRef) -> PermissionResult:
        return await self._require(navigator_id, ref, ContentAction.WRITE)

    def permission_for(self, action: ContentAction, scope: PermissionScope = PermissionScope.RESOURCE) -> str:
        return PermissionCode.build(self._settings.content_permission_prefix, action.value, scope).value

    async def _resolve(self, ref: NodeRef) -> ContentId:
        node_id = await self._store.resolve(ref)
        if node_id is None:
            raise ContentNodeNotFoundError(str(ref))
        return node_id

    async def _check(
        self,
        navigator_id: Optional[NavigatorId],
        ref: NodeRef,
        action: ContentAction,
    ) -> PermissionResult:
        node_id = await self._resolve(ref)
        if navigator_id is None:
            return PermissionResult.DENIED

        def check_for(scope: PermissionScope) -> PermissionCheck:
            return (
                PermissionCheck.builder()
                .navigator(navigator_id)
                .permission(self.permission_for(action, scope))
                .resource(self._settings.content_resource_type, node_id)
                .build()
            )

        result = await self._resolver.check(check_for(PermissionScope.ALL))
        if result.granted:
            return result

        exact = check_for(PermissionScope.RESOURCE)
        result = await self._resolver.check_resource(exact)
        if result.granted:
            return result

        result = await self._resolver.check(check_for(PermissionScope.OWN))
        if result.granted:
            return result

        result = await self._cascade.check_ancestors(exact)
        logger.debug(f"{action.value} access to block {node_id} for navigator {navigator_id}: {result.value}")
        return result

    async def _require(
        self,
        navigator_id: Optional[NavigatorId],
        ref: NodeRef,
        action: ContentAction,
    ) -> PermissionResult:
        result = await self._check(navigator_id, ref, action)
        if not result.granted:
            raise PermissionDeniedError(
                navigator_id,
                self.permission_for(action),
                f"{self._settings.content_resource_type}:{ref}",
            )
        return result
