"""Access services package."""

from .access_resolver import AccessResolver, OwnershipLookup, ContentOwnershipLookup
from .ancestor_cascade import AncestorCascade
from .access_service import AccessService
from .content_access_service import ContentAccessService

__all__ = [
    "AccessResolver",
    "OwnershipLookup",
    "ContentOwnershipLookup",
    "AncestorCascade",
    "AccessService",
    "ContentAccessService",
]
