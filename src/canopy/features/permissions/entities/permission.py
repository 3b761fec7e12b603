"""Permission value object for the canopy permissions feature.

Permission tokens are namespaced strings ``<resource-type>:<action>[:<scope>]``
where scope is ``all``, ``own`` or absent (the exact resource only).
"""

from dataclasses import dataclass
from typing import Union

from ....core.exceptions import InvalidPermissionError
from ....config.constants import OWNERSHIP_SUFFIX, PERMISSION_SEPARATOR, PermissionScope


@dataclass(frozen=True)
class PermissionCode:
    """Immutable value object for a permission token with validation."""

    value: str

    def __post_init__(self):
        """Validate permission format: type:action[:scope]"""
        if not isinstance(self.value, str) or not self.value:
            raise InvalidPermissionError(str(self.value), "must be a non-empty string")

        parts = self.value.split(PERMISSION_SEPARATOR)
        if len(parts) not in (2, 3):
            raise InvalidPermissionError(self.value, "expected type:action[:scope]")
        if not all(parts):
            raise InvalidPermissionError(self.value, "empty segment")
        if len(parts) == 3 and parts[2] not in (PermissionScope.ALL.value, PermissionScope.OWN.value):
            raise InvalidPermissionError(self.value, f"unknown scope {parts[2]!r}")

    @classmethod
    def parse(cls, value: Union[str, 'PermissionCode']) -> 'PermissionCode':
        return value if isinstance(value, PermissionCode) else cls(value)

    @classmethod
    def build(
        cls,
        resource_type: str,
        action: str,
        scope: PermissionScope = PermissionScope.RESOURCE,
    ) -> 'PermissionCode':
        base = f"{resource_type}{PERMISSION_SEPARATOR}{action}"
        if scope is PermissionScope.RESOURCE:
            return cls(base)
        return cls(f"{base}{PERMISSION_SEPARATOR}{scope.value}")

    @property
    def resource_type(self) -> str:
        return self.value.split(PERMISSION_SEPARATOR)[0]

    @property
    def action(self) -> str:
        return self.value.split(PERMISSION_SEPARATOR)[1]

    @property
    def scope(self) -> PermissionScope:
        parts = self.value.split(PERMISSION_SEPARATOR)
        return PermissionScope(parts[2]) if len(parts) == 3 else PermissionScope.RESOURCE

    @property
    def is_ownership(self) -> bool:
        return self.value.endswith(OWNERSHIP_SUFFIX)

    def with_scope(self, scope: PermissionScope) -> 'PermissionCode':
        """Same type and action under a different scope."""
        return PermissionCode.build(self.resource_type, self.action, scope)

    def __str__(self) -> str:
        return self.value
