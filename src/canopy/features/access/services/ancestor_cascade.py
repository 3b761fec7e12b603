"""Ancestor cascade: resource grants inherited down the block hierarchy."""

import logging
from typing import Optional

from ....config.settings import CanopySettings, get_settings
from ....core.value_objects import ContentId
from ...content.entities.protocols import HierarchyStore
from ..entities.permission_check import PermissionCheck
from ..entities.permission_result import PermissionResult
from .access_resolver import AccessResolver

logger = logging.getLogger(__name__)


class AncestorCascade:
    """Re-runs the resource tier against each ancestor of a denied block.

    Ancestors are tried nearest-first and the first grant ends the walk.
    Only checks on content blocks cascade; other resource types have no
    hierarchy.
    """

    def __init__(
        self,
        resolver: AccessResolver,
        store: HierarchyStore,
        settings: Optional[CanopySettings] = None,
    ):
        self._resolver = resolver
        self._store = store
        self._resource_type = (settings or get_settings()).content_resource_type

    async def check(self, check: PermissionCheck) -> PermissionResult:
        result = await self._resolver.check(check)
        if result.granted:
            return result
        return await self.check_ancestors(check)

    async def check_ancestors(self, check: PermissionCheck) -> PermissionResult:
        """Resource tier over the ancestors of ``check``'s resource only."""
        if (
            check.navigator_id is None
            or not check.has_resource
            or check.resource_type != self._resource_type
        ):
            return PermissionResult.DENIED

        ancestors = await self._store.ancestors(ContentId(check.resource_id.value))
        for ancestor in ancestors:
            result = await self._resolver.check_resource(
                check.for_resource(ancestor.id.as_resource())
            )
            if result.granted:
                logger.debug(
                    f"{check.permission} on {check.resource_id} inherited from ancestor {ancestor.id}"
                )
                return result

        return PermissionResult.DENIED
