"""Domain exceptions: validation, not-found and authorization."""

from typing import Any, Optional

from .base import CanopyError


# Validation

class ValidationError(CanopyError):
    """Input rejected before any persistence call."""
    pass


class FractionalIndexError(ValidationError):
    """Base class for fractional index errors."""
    pass


class InvalidCharacterError(FractionalIndexError):
    """Raised when an index contains a symbol outside the alphabet."""

    def __init__(self, character: str, value: str):
        self.character = character
        self.value = value
        super().__init__(
            f"Invalid character in index: {character!r}",
            details={"character": character, "index": value},
        )


class IdenticalIndicesError(FractionalIndexError):
    """Raised when asked for an index between two equal indices."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(
            "Cannot generate index between identical indices",
            details={"index": value},
        )


class InvalidIdentifierError(ValidationError):
    """Raised when an identifier is malformed."""

    def __init__(self, kind: str, value: Any, reason: str = ""):
        self.kind = kind
        self.value = value
        message = f"Invalid {kind}: {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, details={"kind": kind, "value": str(value)})


class InvalidPermissionError(ValidationError):
    """Raised when a permission token does not follow type:action[:scope]."""

    def __init__(self, value: str, reason: str = ""):
        self.value = value
        message = f"Invalid permission format: {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, details={"permission": value})


class PermissionCheckError(ValidationError):
    """Raised when a permission check cannot be constructed."""
    pass


class MissingPermissionError(PermissionCheckError):
    """Raised when a permission check is built without a permission."""

    def __init__(self):
        super().__init__("Permission is required")


class HierarchyCycleError(ValidationError):
    """Raised when a save would make a block its own ancestor."""

    def __init__(self, node_id: Any, parent_id: Any):
        self.node_id = node_id
        self.parent_id = parent_id
        super().__init__(
            f"Block {node_id} cannot be placed under {parent_id}: it would become its own ancestor",
            details={"node_id": str(node_id), "parent_id": str(parent_id)},
        )


# Not found

class NotFoundError(CanopyError):
    """A mutation or access check referenced something that does not exist."""
    pass


class ContentNodeNotFoundError(NotFoundError):
    """Raised when a content block cannot be resolved."""

    def __init__(self, reference: Any):
        self.reference = reference
        super().__init__(
            f"Content block not found: {reference}",
            details={"reference": str(reference)},
        )


# Authorization

class AuthorizationError(CanopyError):
    """Base class for authorization failures."""
    pass


class PermissionDeniedError(AuthorizationError):
    """Raised by ``require`` helpers when a check resolves to Denied."""

    def __init__(
        self,
        navigator_id: Optional[Any],
        permission: str,
        resource: Optional[str] = None,
    ):
        self.navigator_id = str(navigator_id) if navigator_id is not None else None
        self.permission = permission
        self.resource = resource
        message = f"Permission denied for navigator {self.navigator_id} on {permission}"
        if resource:
            message += f" {resource}"
        super().__init__(
            message,
            details={
                "navigator_id": self.navigator_id,
                "permission": permission,
                "resource": resource,
            },
        )
