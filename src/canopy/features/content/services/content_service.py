"""Content service: saving, placing and reading blocks.

Orchestrates the hierarchy store and the reference extractor. The link graph
is never edited directly; every save re-derives the block's outgoing links
from its content inside the same transaction as the upsert.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ....core.exceptions import ContentNodeNotFoundError, HierarchyCycleError
from ....core.value_objects import ContentId, NavigatorId, NodeRef, ShortId
from ..entities.block_content import BlockContent
from ..entities.content_context import ContentContext
from ..entities.content_node import ContentNode
from ..entities.fractional_index import FractionalIndex
from ..entities.link_edge import LinkEdge
from ..entities.protocols import HierarchySession, HierarchyStore, ReferenceExtractor


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SaveResult:
    """Saved node plus the link edges the save created and removed."""

    node: ContentNode
    links_added: Tuple[LinkEdge, ...] = ()
    links_removed: Tuple[LinkEdge, ...] = ()

    @property
    def links_changed(self) -> bool:
        return bool(self.links_added or self.links_removed)


class ContentService:
    """Service for content block operations.

    Args:
        store: HierarchyStore implementation
        extractor: Parser returning the short ids referenced by block text;
            without one, blocks are saved as referencing nothing
    """

    def __init__(self, store: HierarchyStore, extractor: Optional[ReferenceExtractor] = None):
        self._store = store
        self._extractor = extractor

    async def save(self, node: ContentNode) -> SaveResult:
        """Upsert a block and synchronize its outgoing links atomically.

        Referenced short ids that do not resolve to an existing block are
        dropped. Any failure rolls back both the upsert and the link changes.
        """
        async with self._store.transaction() as session:
            await self._check_parent(session, node)

            saved = await session.upsert(node)
            short_ids = self._extract_references(saved.content)
            targets = await session.resolve_short_ids(short_ids)
            diff = await session.replace_links(saved.id, targets)

        if diff.changed:
            logger.info(
                f"Saved block {saved.id}: {len(diff.added)} link(s) added, "
                f"{len(diff.removed)} removed"
            )
        else:
            logger.info(f"Saved block {saved.id}")

        return SaveResult(node=saved, links_added=diff.added, links_removed=diff.removed)

    async def create(
        self,
        content: BlockContent,
        parent_id: Optional[ContentId] = None,
        owner_id: Optional[NavigatorId] = None,
        after: Optional[ContentId] = None,
        short_id: Optional[ShortId] = None,
    ) -> SaveResult:
        """Create a block under ``parent_id``, placed after ``after`` or last."""
        order_key = await self._order_key(parent_id, after)
        node = ContentNode.create(
            content=content,
            order_key=order_key,
            parent_id=parent_id,
            owner_id=owner_id,
            short_id=short_id,
        )
        return await self.save(node)

    async def move(
        self,
        ref: NodeRef,
        new_parent_id: Optional[ContentId],
        after: Optional[ContentId] = None,
    ) -> SaveResult:
        """Re-parent a block, placed after ``after`` or last among its new siblings."""
        node = await self._require(ref)
        order_key = await self._order_key(new_parent_id, after, exclude=node.id)
        return await self.save(node.copy(parent_id=new_parent_id, order_key=order_key))

    async def get(self, ref: NodeRef) -> Optional[ContentNode]:
        return await self._store.get(ref)

    async def children(self, ref: NodeRef) -> List[ContentNode]:
        """Direct children in order key order; empty when the block is missing."""
        node_id = await self._store.resolve(ref)
        if node_id is None:
            return []
        descendants = await self._store.descendants(node_id)
        return self._children_of(node_id, descendants)

    async def context(self, ref: NodeRef) -> ContentContext:
        """Build the read model of a block."""
        node = await self._require(ref)

        ancestors = await self._store.ancestors(node.id)
        descendants = await self._store.descendants(node.id)
        references = await self._store.links_from(node.id)
        backlinks = await self._store.links_to(node.id)

        blocks = {node.id: node}
        for block in ancestors + descendants:
            blocks[block.id] = block

        return ContentContext(
            node=node,
            ancestor_ids=[block.id for block in ancestors],
            children_ids=[child.id for child in self._children_of(node.id, descendants)],
            reference_ids=[edge.target_id for edge in references],
            backlink_ids=[edge.source_id for edge in backlinks],
            blocks=blocks,
        )

    async def delete(self, ref: NodeRef, recursive: bool = False) -> int:
        """Delete a block and its link edges.

        A block that still has children can only be deleted with
        ``recursive=True``, which removes the whole subtree deepest-first.
        Returns the number of blocks deleted.
        """
        node_id = await self._store.resolve(ref)
        if node_id is None:
            raise ContentNodeNotFoundError(str(ref))

        async with self._store.transaction() as session:
            doomed = [node_id]
            if recursive:
                descendants = await session.descendants(node_id)
                doomed = [block.id for block in reversed(descendants)] + doomed

            for block_id in doomed:
                await session.delete(block_id)

        logger.info(f"Deleted block {node_id} ({len(doomed)} block(s) removed)")
        return len(doomed)

    async def _require(self, ref: NodeRef) -> ContentNode:
        node = await self._store.get(ref)
        if node is None:
            raise ContentNodeNotFoundError(str(ref))
        return node

    async def _check_parent(self, session: HierarchySession, node: ContentNode) -> None:
        """Reject a parent that is missing, the node itself or one of its descendants."""
        if node.parent_id is None:
            return
        if node.parent_id == node.id:
            raise HierarchyCycleError(str(node.id), str(node.parent_id))

        parent = await session.get(node.parent_id)
        if parent is None:
            raise ContentNodeNotFoundError(str(node.parent_id))

        lineage = await session.ancestors(node.parent_id)
        if any(block.id == node.id for block in lineage):
            raise HierarchyCycleError(str(node.id), str(node.parent_id))

    def _extract_references(self, content: BlockContent) -> List[str]:
        if self._extractor is None:
            return []
        text = content.reference_text()
        if not text:
            return []
        # Malformed ids cannot resolve
        return [
            short_id for short_id in dict.fromkeys(self._extractor.extract(text))
            if ShortId.is_valid(short_id)
        ]

    async def _order_key(
        self,
        parent_id: Optional[ContentId],
        after: Optional[ContentId],
        exclude: Optional[ContentId] = None,
    ) -> FractionalIndex:
        """Order key after ``after`` (or the last sibling) and before the next sibling."""
        if parent_id is None:
            # Roots are not indexed as siblings of one another
            if after is None:
                return FractionalIndex.after()
            predecessor = await self._require(after)
            return FractionalIndex.after(predecessor.order_key)

        siblings = [
            child for child in await self.children(parent_id)
            if child.id != exclude
        ]
        if after is None:
            last = siblings[-1].order_key if siblings else None
            return FractionalIndex.after(last)

        for position, sibling in enumerate(siblings):
            if sibling.id == after:
                if position + 1 < len(siblings):
                    return FractionalIndex.between(
                        sibling.order_key, siblings[position + 1].order_key
                    )
                return FractionalIndex.after(sibling.order_key)

        raise ContentNodeNotFoundError(str(after))

    @staticmethod
    def _children_of(node_id: ContentId, descendants: List[ContentNode]) -> List[ContentNode]:
        return sorted(
            (block for block in descendants if block.parent_id == node_id),
            key=lambda block: block.order_key,
        )
