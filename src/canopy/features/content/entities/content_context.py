"""Read model describing one block and its neighbourhood."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ....core.value_objects import ContentId
from .content_node import ContentNode


@dataclass(frozen=True)
class ContentContext:
    """A block with its parent, ordered children, references and backlinks.

    ``blocks`` caches every node fetched while the context was built (the
    block itself, its ancestors and its descendants), keyed by id.
    """

    node: ContentNode
    ancestor_ids: List[ContentId] = field(default_factory=list)
    children_ids: List[ContentId] = field(default_factory=list)
    reference_ids: List[ContentId] = field(default_factory=list)
    backlink_ids: List[ContentId] = field(default_factory=list)
    blocks: Dict[ContentId, ContentNode] = field(default_factory=dict)

    @property
    def block_id(self) -> ContentId:
        return self.node.id

    @property
    def parent_id(self) -> Optional[ContentId]:
        return self.node.parent_id

    def block(self, block_id: ContentId) -> Optional[ContentNode]:
        return self.blocks.get(block_id)

    def children(self) -> List[ContentNode]:
        return [self.blocks[child_id] for child_id in self.children_ids]
