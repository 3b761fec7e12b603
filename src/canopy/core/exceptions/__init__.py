"""Exception hierarchy for canopy.

    CanopyError
    ├── ValidationError
    │   ├── FractionalIndexError (InvalidCharacterError, IdenticalIndicesError)
    │   ├── InvalidIdentifierError
    │   ├── InvalidPermissionError
    │   ├── PermissionCheckError (MissingPermissionError)
    │   └── HierarchyCycleError
    ├── NotFoundError
    │   └── ContentNodeNotFoundError
    ├── PersistenceError
    │   ├── HierarchyStoreError
    │   ├── CatalogError
    │   └── DatabaseConnectionError
    └── AuthorizationError
        └── PermissionDeniedError
"""

from .base import CanopyError, create_error_response
from .domain import (
    ValidationError,
    FractionalIndexError,
    InvalidCharacterError,
    IdenticalIndicesError,
    InvalidIdentifierError,
    InvalidPermissionError,
    PermissionCheckError,
    MissingPermissionError,
    HierarchyCycleError,
    NotFoundError,
    ContentNodeNotFoundError,
    AuthorizationError,
    PermissionDeniedError,
)
from .database import (
    PersistenceError,
    HierarchyStoreError,
    CatalogError,
    DatabaseConnectionError,
)
from .http_mapping import get_http_status_code

__all__ = [
    # Base
    "CanopyError",
    "create_error_response",

    # Validation
    "ValidationError",
    "FractionalIndexError",
    "InvalidCharacterError",
    "IdenticalIndicesError",
    "InvalidIdentifierError",
    "InvalidPermissionError",
    "PermissionCheckError",
    "MissingPermissionError",
    "HierarchyCycleError",

    # Not found
    "NotFoundError",
    "ContentNodeNotFoundError",

    # Authorization
    "AuthorizationError",
    "PermissionDeniedError",

    # Persistence
    "PersistenceError",
    "HierarchyStoreError",
    "CatalogError",
    "DatabaseConnectionError",

    # HTTP mapping
    "get_http_status_code",
]
