"""Canopy - hierarchical content blocks with tiered access control.

Provides an ordered, nestable forest of content blocks with a derived
reference graph, and a permission engine that resolves global, resource
and ownership grants with inheritance down the block hierarchy.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    CanopySettings,
    get_settings,
    DatabaseSchemas,
    PermissionScope,
    ContentAction,
    Roles,
)

from .core.exceptions import (
    CanopyError,
    ValidationError,
    NotFoundError,
    PersistenceError,
    AuthorizationError,
    PermissionDeniedError,
    ContentNodeNotFoundError,
    get_http_status_code,
    create_error_response,
)

from .core.value_objects import (
    NavigatorId,
    ContentId,
    ResourceId,
    LinkId,
    ShortId,
    NodeRef,
    parse_node_ref,
)

from .features.content import (
    FractionalIndex,
    BlockContent,
    PageContent,
    HeadingContent,
    ParagraphContent,
    ContentNode,
    LinkEdge,
    ContentContext,
    HierarchyStore,
    ReferenceExtractor,
    MemoryHierarchyStore,
    AsyncPGHierarchyStore,
    ContentService,
    SaveResult,
)

from .features.permissions import (
    PermissionCode,
    PermissionCatalog,
    MemoryPermissionCatalog,
    AsyncPGPermissionCatalog,
)

from .features.access import (
    PermissionCheck,
    PermissionResult,
    AccessResolver,
    ContentOwnershipLookup,
    AncestorCascade,
    AccessService,
    ContentAccessService,
)

from .database import DatabaseManager, create_schema

__all__ = [
    "__version__",

    # Configuration
    "CanopySettings",
    "get_settings",
    "DatabaseSchemas",
    "PermissionScope",
    "ContentAction",
    "Roles",

    # Exceptions
    "CanopyError",
    "ValidationError",
    "NotFoundError",
    "PersistenceError",
    "AuthorizationError",
    "PermissionDeniedError",
    "ContentNodeNotFoundError",
    "get_http_status_code",
    "create_error_response",

    # Identifiers
    "NavigatorId",
    "ContentId",
    "ResourceId",
    "LinkId",
    "ShortId",
    "NodeRef",
    "parse_node_ref",

    # Content
    "FractionalIndex",
    "BlockContent",
    "PageContent",
    "HeadingContent",
    "ParagraphContent",
    "ContentNode",
    "LinkEdge",
    "ContentContext",
    "HierarchyStore",
    "ReferenceExtractor",
    "MemoryHierarchyStore",
    "AsyncPGHierarchyStore",
    "ContentService",
    "SaveResult",

    # Permissions
    "PermissionCode",
    "PermissionCatalog",
    "MemoryPermissionCatalog",
    "AsyncPGPermissionCatalog",

    # Access
    "PermissionCheck",
    "PermissionResult",
    "AccessResolver",
    "ContentOwnershipLookup",
    "AncestorCascade",
    "AccessService",
    "ContentAccessService",

    # Database
    "DatabaseManager",
    "create_schema",
]
