"""Value objects for identifiers in canopy.

UUID-backed identifiers are immutable, hashable and compare by raw value.
Short identifiers are the shareable permalink form of a block; they are
validated here but produced by an external encoder.
"""

from dataclasses import dataclass
from typing import Any, Union
from uuid import UUID

from ..exceptions import InvalidIdentifierError
from ...config.constants import ShortIdFormat
from ...utils import generate_uuid_v7


def _coerce_uuid(kind: str, value: Any) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        raise InvalidIdentifierError(kind, value, "must be a valid UUID")


@dataclass(frozen=True)
class NavigatorId:
    """Navigator (account) identifier."""
    value: UUID

    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid("NavigatorId", self.value))

    @classmethod
    def generate(cls) -> 'NavigatorId':
        """Generate a new NavigatorId using UUIDv7 for time-ordering."""
        return cls(generate_uuid_v7())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ContentId:
    """Content block identifier."""
    value: UUID

    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid("ContentId", self.value))

    @classmethod
    def generate(cls) -> 'ContentId':
        """Generate a new ContentId using UUIDv7 for time-ordering."""
        return cls(generate_uuid_v7())

    def as_resource(self) -> 'ResourceId':
        """The same identifier seen as a generic access-control resource."""
        return ResourceId(self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ResourceId:
    """Identifier of any resource that resource-scoped roles can target."""
    value: UUID

    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid("ResourceId", self.value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class LinkId:
    """Link edge identifier."""
    value: UUID

    def __post_init__(self):
        object.__setattr__(self, 'value', _coerce_uuid("LinkId", self.value))

    @classmethod
    def generate(cls) -> 'LinkId':
        return cls(generate_uuid_v7())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ShortId:
    """Shareable short identifier of a content block (base-58, 7 symbols)."""
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise InvalidIdentifierError("ShortId", self.value, "must be a string")
        if len(self.value) != ShortIdFormat.LENGTH:
            raise InvalidIdentifierError(
                "ShortId", self.value, f"must be exactly {ShortIdFormat.LENGTH} characters"
            )
        if any(c not in ShortIdFormat.ALPHABET for c in self.value):
            raise InvalidIdentifierError("ShortId", self.value, "must be base-58")

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check the format without raising."""
        return (
            isinstance(value, str)
            and len(value) == ShortIdFormat.LENGTH
            and all(c in ShortIdFormat.ALPHABET for c in value)
        )

    def __str__(self) -> str:
        return self.value


# Anything a hierarchy store accepts as a block reference
NodeRef = Union[ContentId, ShortId]


def parse_node_ref(value: Union[str, UUID, ContentId, ShortId]) -> NodeRef:
    """Parse a caller-supplied block reference.

    UUIDs (or UUID strings) become ContentId, 7-symbol base-58 strings become
    ShortId; anything else raises InvalidIdentifierError.
    """
    if isinstance(value, (ContentId, ShortId)):
        return value
    if isinstance(value, UUID):
        return ContentId(value)
    if isinstance(value, str):
        if ShortId.is_valid(value):
            return ShortId(value)
        try:
            return ContentId(UUID(value))
        except ValueError:
            pass
    raise InvalidIdentifierError("block reference", value, "expected a UUID or a short id")
