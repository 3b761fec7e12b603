"""Constants and enums for canopy.

These mirror the values stored in the ``content`` and ``auth`` schemas and
the static role catalog seeded alongside them.
"""

from enum import Enum
from typing import Dict, Final, FrozenSet


# Database Schema Names
class DatabaseSchemas:
    """Database schema names."""

    CONTENT: Final[str] = "content"
    AUTH: Final[str] = "auth"


class PermissionScope(str, Enum):
    """Scope suffix of a permission token.

    ``RESOURCE`` has no textual suffix: the permission applies to the exact
    resource named in the check.
    """

    ALL = "all"
    OWN = "own"
    RESOURCE = ""


class ContentAction(str, Enum):
    """Permission families for content blocks."""

    READ = "read"
    WRITE = "write"


class ResourceTypes:
    """Resource type tags used in resource-scoped role assignments."""

    CONTENT_BLOCK: Final[str] = "content_block"


PERMISSION_SEPARATOR: Final[str] = ":"
OWNERSHIP_SUFFIX: Final[str] = ":own"
CONTENT_PERMISSION_PREFIX: Final[str] = "content_blocks"


class FractionalIndexAlphabet:
    """Printable-ASCII alphabet of fractional index digits."""

    MIN_CHAR: Final[str] = "!"   # 33
    MAX_CHAR: Final[str] = "~"   # 126
    BASE: Final[int] = 94


class ShortIdFormat:
    """Shape of shareable short identifiers (permalinks)."""

    LENGTH: Final[int] = 7
    # Base-58: no 0, O, I or l
    ALPHABET: Final[str] = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


class Roles:
    """Role names of the seeded catalog."""

    ADMIN: Final[str] = "admin"
    EDITOR: Final[str] = "editor"
    VIEWER: Final[str] = "viewer"
    AUTHOR: Final[str] = "author"


DEFAULT_PERMISSIONS: Final[Dict[str, str]] = {
    "content_blocks:read:all": "Can view all content blocks.",
    "content_blocks:read:own": "Can view own content blocks.",
    "content_blocks:read": "Can view a specific content block and its descendants.",
    "content_blocks:write:all": "Can create, update, and delete all content blocks.",
    "content_blocks:write:own": "Can create, update, and delete own content blocks.",
    "content_blocks:write": "Can update a specific content block and its descendants.",
}

DEFAULT_ROLE_PERMISSIONS: Final[Dict[str, FrozenSet[str]]] = {
    Roles.ADMIN: frozenset({"content_blocks:read:all", "content_blocks:write:all"}),
    Roles.EDITOR: frozenset({"content_blocks:read", "content_blocks:write"}),
    Roles.VIEWER: frozenset({"content_blocks:read"}),
    Roles.AUTHOR: frozenset({"content_blocks:read:own", "content_blocks:write:own"}),
}

DEFAULT_ROLE_DESCRIPTIONS: Final[Dict[str, str]] = {
    Roles.ADMIN: "System Administrator",
    Roles.EDITOR: "Can read and edit a shared subtree",
    Roles.VIEWER: "Can read a shared subtree",
    Roles.AUTHOR: "Can read and edit blocks they own",
}
