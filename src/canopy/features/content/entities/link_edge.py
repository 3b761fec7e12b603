"""Link edge entity: a directed reference from one block to another.

Maps to ``content.links``; ``(source_id, target_id)`` is unique.
"""

from dataclasses import dataclass
from typing import List, Tuple

from ....core.value_objects import ContentId, LinkId


@dataclass(frozen=True)
class LinkEdge:
    """Reference from ``source_id`` to ``target_id`` (a backlink seen from the target)."""

    id: LinkId
    source_id: ContentId
    target_id: ContentId

    @classmethod
    def create(cls, source_id: ContentId, target_id: ContentId) -> 'LinkEdge':
        return cls(id=LinkId.generate(), source_id=source_id, target_id=target_id)

    @property
    def key(self) -> Tuple[ContentId, ContentId]:
        return (self.source_id, self.target_id)


@dataclass(frozen=True)
class LinkDiff:
    """Outcome of synchronizing a block's outgoing links."""

    added: Tuple[LinkEdge, ...] = ()
    removed: Tuple[LinkEdge, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)

    def added_targets(self) -> List[ContentId]:
        return [edge.target_id for edge in self.added]

    def removed_targets(self) -> List[ContentId]:
        return [edge.target_id for edge in self.removed]
