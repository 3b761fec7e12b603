"""Permission check input and its builder."""

from dataclasses import dataclass, replace
from typing import Optional, Union

from ....config.constants import OWNERSHIP_SUFFIX
from ....core.exceptions import MissingPermissionError, PermissionCheckError
from ....core.value_objects import ContentId, NavigatorId, ResourceId
from ...permissions.entities.permission import PermissionCode


@dataclass(frozen=True)
class PermissionCheck:
    """A (navigator, permission, optional resource) triple to resolve.

    The permission token is not validated structurally; only its presence is
    required. A check without a navigator always resolves to Denied.
    """

    permission: str
    navigator_id: Optional[NavigatorId] = None
    resource_type: Optional[str] = None
    resource_id: Optional[ResourceId] = None

    def __post_init__(self):
        if not self.permission:
            raise MissingPermissionError()

    @classmethod
    def builder(cls) -> 'PermissionCheckBuilder':
        return PermissionCheckBuilder()

    @property
    def has_resource(self) -> bool:
        return self.resource_type is not None and self.resource_id is not None

    @property
    def is_ownership(self) -> bool:
        return self.permission.endswith(OWNERSHIP_SUFFIX)

    def for_resource(self, resource_id: ResourceId) -> 'PermissionCheck':
        """The same check against another resource of the same type."""
        return replace(self, resource_id=resource_id)

    def describe_resource(self) -> Optional[str]:
        if not self.has_resource:
            return None
        return f"{self.resource_type}:{self.resource_id}"


class PermissionCheckBuilder:
    """Fluent construction of a PermissionCheck.

    Usage:
        check = (
            PermissionCheck.builder()
            .navigator(navigator_id)
            .permission("content_blocks:read")
            .resource("content_block", block_id)
            .build()
        )
    """

    def __init__(self):
        self._navigator_id: Optional[NavigatorId] = None
        self._permission: Optional[str] = None
        self._resource_type: Optional[str] = None
        self._resource_id: Optional[ResourceId] = None

    def navigator(self, navigator_id: Optional[NavigatorId]) -> 'PermissionCheckBuilder':
        self._navigator_id = navigator_id
        return self

    def permission(self, permission: Union[str, PermissionCode]) -> 'PermissionCheckBuilder':
        self._permission = str(permission)
        return self

    def resource(
        self,
        resource_type: str,
        resource_id: Union[ResourceId, ContentId],
    ) -> 'PermissionCheckBuilder':
        if not resource_type:
            raise PermissionCheckError("Resource type is required when a resource is given")
        if isinstance(resource_id, ContentId):
            resource_id = resource_id.as_resource()
        self._resource_type = resource_type
        self._resource_id = resource_id
        return self

    def build(self) -> PermissionCheck:
        if not self._permission:
            raise MissingPermissionError()
        return PermissionCheck(
            permission=self._permission,
            navigator_id=self._navigator_id,
            resource_type=self._resource_type,
            resource_id=self._resource_id,
        )
