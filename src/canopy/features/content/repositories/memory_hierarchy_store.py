"""In-memory hierarchy store.

Blocks live in an arena keyed by ContentId with a parent -> children index,
so ancestors and descendants are plain iterative walks. Transactions are
copy-on-write: writers serialize on a lock, mutate a private copy of the
state and publish it with a single reference swap. Readers always see either
the state before a transaction or the state after it.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Iterable, List, Optional, Set

from ....core.exceptions import HierarchyStoreError
from ....core.value_objects import ContentId, LinkId, NodeRef, ShortId
from ..entities.content_node import ContentNode
from ..entities.link_edge import LinkDiff, LinkEdge

logger = logging.getLogger(__name__)


class _HierarchyState:
    """Mutable container of every block and link."""

    def __init__(self):
        self.nodes: Dict[ContentId, ContentNode] = {}
        self.children: Dict[Optional[ContentId], Set[ContentId]] = {}
        self.short_ids: Dict[str, ContentId] = {}
        self.links: Dict[LinkId, LinkEdge] = {}
        self.outgoing: Dict[ContentId, Dict[ContentId, LinkId]] = {}
        self.incoming: Dict[ContentId, Dict[ContentId, LinkId]] = {}

    def copy(self) -> '_HierarchyState':
        # Nodes and edges are never mutated in place, so sharing them is safe
        clone = _HierarchyState()
        clone.nodes = dict(self.nodes)
        clone.children = {parent: set(ids) for parent, ids in self.children.items()}
        clone.short_ids = dict(self.short_ids)
        clone.links = dict(self.links)
        clone.outgoing = {source: dict(targets) for source, targets in self.outgoing.items()}
        clone.incoming = {target: dict(sources) for target, sources in self.incoming.items()}
        return clone


class _MemorySession:
    """HierarchySession over one state object."""

    def __init__(self, state: _HierarchyState, max_depth: int):
        self._state = state
        self._max_depth = max_depth

    def _resolve(self, ref: NodeRef) -> Optional[ContentId]:
        if isinstance(ref, ShortId):
            return self._state.short_ids.get(ref.value)
        return ref if ref in self._state.nodes else None

    async def resolve(self, ref: NodeRef) -> Optional[ContentId]:
        return self._resolve(ref)

    async def resolve_short_ids(self, short_ids: Iterable[str]) -> List[ContentId]:
        resolved: List[ContentId] = []
        for short_id in short_ids:
            node_id = self._state.short_ids.get(short_id)
            if node_id is not None and node_id not in resolved:
                resolved.append(node_id)
        return resolved

    async def get(self, ref: NodeRef) -> Optional[ContentNode]:
        node_id = self._resolve(ref)
        if node_id is None:
            return None
        return self._state.nodes[node_id].copy()

    async def ancestors(self, ref: NodeRef) -> List[ContentNode]:
        node_id = self._resolve(ref)
        if node_id is None:
            return []

        chain: List[ContentNode] = []
        seen = {node_id}
        parent_id = self._state.nodes[node_id].parent_id
        while parent_id is not None and parent_id not in seen and len(chain) < self._max_depth:
            parent = self._state.nodes.get(parent_id)
            if parent is None:
                break
            chain.append(parent.copy())
            seen.add(parent_id)
            parent_id = parent.parent_id
        return chain

    async def descendants(self, ref: NodeRef) -> List[ContentNode]:
        node_id = self._resolve(ref)
        if node_id is None:
            return []

        found: List[ContentNode] = []
        seen = {node_id}
        frontier = [node_id]
        depth = 0
        while frontier and depth < self._max_depth:
            next_frontier = []
            for parent_id in frontier:
                for child_id in self._state.children.get(parent_id, ()):
                    if child_id in seen:
                        continue
                    seen.add(child_id)
                    found.append(self._state.nodes[child_id].copy())
                    next_frontier.append(child_id)
            frontier = next_frontier
            depth += 1
        return found

    async def links_from(self, node_id: ContentId) -> List[LinkEdge]:
        return [
            self._state.links[link_id]
            for link_id in self._state.outgoing.get(node_id, {}).values()
        ]

    async def links_to(self, node_id: ContentId) -> List[LinkEdge]:
        return [
            self._state.links[link_id]
            for link_id in self._state.incoming.get(node_id, {}).values()
        ]

    async def is_linked(self, source_id: ContentId, target_id: ContentId) -> bool:
        return target_id in self._state.outgoing.get(source_id, {})

    async def upsert(self, node: ContentNode) -> ContentNode:
        state = self._state

        if node.parent_id is not None and node.parent_id not in state.nodes:
            raise HierarchyStoreError(
                f"Parent block {node.parent_id} does not exist",
                operation="upsert content block",
                details={"node_id": str(node.id)},
            )
        if node.short_id is not None:
            holder = state.short_ids.get(node.short_id.value)
            if holder is not None and holder != node.id:
                raise HierarchyStoreError(
                    f"Short id {node.short_id} is already used by block {holder}",
                    operation="upsert content block",
                    details={"node_id": str(node.id)},
                )

        existing = state.nodes.get(node.id)
        saved = node.copy(created_at=existing.created_at if existing else None).touched()

        if existing is not None:
            state.children.get(existing.parent_id, set()).discard(node.id)
            if existing.short_id is not None:
                state.short_ids.pop(existing.short_id.value, None)

        state.nodes[node.id] = saved
        state.children.setdefault(saved.parent_id, set()).add(node.id)
        if saved.short_id is not None:
            state.short_ids[saved.short_id.value] = node.id

        return saved.copy()

    async def replace_links(
        self,
        source_id: ContentId,
        target_ids: Iterable[ContentId],
    ) -> LinkDiff:
        state = self._state
        desired = list(dict.fromkeys(target_ids))

        if source_id not in state.nodes:
            raise HierarchyStoreError(
                f"Source block {source_id} does not exist",
                operation="replace content links",
            )
        missing = [target_id for target_id in desired if target_id not in state.nodes]
        if missing:
            raise HierarchyStoreError(
                f"Link targets do not exist: {', '.join(str(m) for m in missing)}",
                operation="replace content links",
                details={"source_id": str(source_id)},
            )

        current = state.outgoing.setdefault(source_id, {})
        desired_set = set(desired)

        removed = []
        for target_id, link_id in list(current.items()):
            if target_id not in desired_set:
                removed.append(self._drop_link(link_id))

        added = []
        for target_id in desired:
            if target_id in current:
                continue
            edge = LinkEdge.create(source_id, target_id)
            state.links[edge.id] = edge
            current[target_id] = edge.id
            state.incoming.setdefault(target_id, {})[source_id] = edge.id
            added.append(edge)

        return LinkDiff(added=tuple(added), removed=tuple(removed))

    def _drop_link(self, link_id: LinkId) -> LinkEdge:
        edge = self._state.links.pop(link_id)
        self._state.outgoing.get(edge.source_id, {}).pop(edge.target_id, None)
        self._state.incoming.get(edge.target_id, {}).pop(edge.source_id, None)
        return edge

    async def delete(self, ref: NodeRef) -> bool:
        state = self._state
        node_id = self._resolve(ref)
        if node_id is None:
            return False

        if state.children.get(node_id):
            raise HierarchyStoreError(
                f"Block {node_id} still has children",
                operation="delete content block",
                details={"node_id": str(node_id)},
            )

        node = state.nodes.pop(node_id)
        state.children.get(node.parent_id, set()).discard(node_id)
        state.children.pop(node_id, None)
        if node.short_id is not None:
            state.short_ids.pop(node.short_id.value, None)

        touching = list(state.outgoing.pop(node_id, {}).values())
        touching += list(state.incoming.pop(node_id, {}).values())
        for link_id in touching:
            if link_id in state.links:
                self._drop_link(link_id)

        return True


class MemoryHierarchyStore:
    """HierarchyStore kept entirely in process memory."""

    def __init__(self, max_depth: int = 1000):
        self._state = _HierarchyState()
        self._lock = asyncio.Lock()
        self._max_depth = max_depth

    def _reader(self) -> _MemorySession:
        return _MemorySession(self._state, self._max_depth)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[_MemorySession]:
        """Serialize writers and publish their changes atomically."""
        async with self._lock:
            working = self._state.copy()
            yield _MemorySession(working, self._max_depth)
            self._state = working

    # Reads run against the currently published state

    async def resolve(self, ref: NodeRef) -> Optional[ContentId]:
        return await self._reader().resolve(ref)

    async def resolve_short_ids(self, short_ids: Iterable[str]) -> List[ContentId]:
        return await self._reader().resolve_short_ids(short_ids)

    async def get(self, ref: NodeRef) -> Optional[ContentNode]:
        return await self._reader().get(ref)

    async def ancestors(self, ref: NodeRef) -> List[ContentNode]:
        return await self._reader().ancestors(ref)

    async def descendants(self, ref: NodeRef) -> List[ContentNode]:
        return await self._reader().descendants(ref)

    async def links_from(self, node_id: ContentId) -> List[LinkEdge]:
        return await self._reader().links_from(node_id)

    async def links_to(self, node_id: ContentId) -> List[LinkEdge]:
        return await self._reader().links_to(node_id)

    async def is_linked(self, source_id: ContentId, target_id: ContentId) -> bool:
        return await self._reader().is_linked(source_id, target_id)

    # Single writes get their own transaction

    async def upsert(self, node: ContentNode) -> ContentNode:
        async with self.transaction() as session:
            return await session.upsert(node)

    async def replace_links(
        self,
        source_id: ContentId,
        target_ids: Iterable[ContentId],
    ) -> LinkDiff:
        async with self.transaction() as session:
            return await session.replace_links(source_id, target_ids)

    async def delete(self, ref: NodeRef) -> bool:
        async with self.transaction() as session:
            deleted = await session.delete(ref)
        if deleted:
            logger.info(f"Deleted content block {ref}")
        return deleted

    def __len__(self) -> int:
        return len(self._state.nodes)
