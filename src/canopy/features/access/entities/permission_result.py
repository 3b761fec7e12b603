"""Outcome of an access check."""

from enum import Enum


class PermissionResult(str, Enum):
    """Closed set of access decisions.

    Each grant names the tier that produced it; ``DENIED`` is a normal result,
    not an error.
    """

    GRANTED_GLOBAL = "granted_global"
    GRANTED_RESOURCE = "granted_resource"
    GRANTED_OWNERSHIP = "granted_ownership"
    DENIED = "denied"

    @property
    def granted(self) -> bool:
        return self is not PermissionResult.DENIED

    def __bool__(self) -> bool:
        return self.granted
