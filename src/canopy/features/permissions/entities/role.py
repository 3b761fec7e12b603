"""Role and role-assignment entities.

Maps to ``auth.roles``/``auth.role_permissions`` (static catalog data),
``auth.navigator_roles`` (global assignments) and ``auth.resource_roles``
(assignments scoped to one resource).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional, Tuple
from uuid import UUID

from ....core.value_objects import NavigatorId, ResourceId
from ....utils import generate_uuid_v7


@dataclass(frozen=True)
class Role:
    """A named bundle of permission tokens."""

    name: str
    description: Optional[str] = None
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    def has_permission(self, permission: str) -> bool:
        return permission in self.permissions

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class GlobalRoleAssignment:
    """Role held by a navigator everywhere."""

    navigator_id: NavigatorId
    role_name: str
    id: UUID = field(default_factory=generate_uuid_v7)
    created_at: Optional[datetime] = None

    @property
    def key(self) -> Tuple[NavigatorId, str]:
        return (self.navigator_id, self.role_name)


@dataclass(frozen=True)
class ResourceRoleAssignment:
    """Role held on one specific resource.

    ``navigator_id`` is None for a role granted to anonymous visitors.
    """

    role_name: str
    resource_type: str
    resource_id: ResourceId
    navigator_id: Optional[NavigatorId] = None
    id: UUID = field(default_factory=generate_uuid_v7)
    created_at: Optional[datetime] = None

    @property
    def is_anonymous(self) -> bool:
        return self.navigator_id is None

    @property
    def key(self) -> Tuple[Optional[NavigatorId], str, str, ResourceId]:
        return (self.navigator_id, self.role_name, self.resource_type, self.resource_id)
