"""Content node (block) domain entity.

Maps to ``content.blocks``. A node without a parent is a root; the order key
only has to be unique among siblings sharing the same parent.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

from ....core.value_objects import ContentId, NavigatorId, ShortId
from .block_content import BlockContent
from .fractional_index import FractionalIndex


@dataclass
class ContentNode:
    """A block of hierarchical, ordered content."""

    id: ContentId
    order_key: FractionalIndex
    content: BlockContent
    owner_id: Optional[NavigatorId] = None
    parent_id: Optional[ContentId] = None
    short_id: Optional[ShortId] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        content: BlockContent,
        order_key: FractionalIndex,
        parent_id: Optional[ContentId] = None,
        owner_id: Optional[NavigatorId] = None,
        short_id: Optional[ShortId] = None,
    ) -> 'ContentNode':
        """Create an unsaved node with a freshly generated identifier."""
        return cls(
            id=ContentId.generate(),
            order_key=order_key,
            content=content,
            owner_id=owner_id,
            parent_id=parent_id,
            short_id=short_id,
        )

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def is_owned_by(self, navigator_id: NavigatorId) -> bool:
        """Check if the block is owned by the given navigator."""
        return self.owner_id is not None and self.owner_id == navigator_id

    def copy(self, **changes) -> 'ContentNode':
        """Shallow copy with the given fields replaced."""
        return replace(self, **changes)

    def touched(self, now: Optional[datetime] = None) -> 'ContentNode':
        """Copy with timestamps set the way a store records a save."""
        now = now or datetime.now(timezone.utc)
        return replace(self, created_at=self.created_at or now, updated_at=now)

    def __str__(self) -> str:
        return f"ContentNode({self.id})"
