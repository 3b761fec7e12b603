"""Protocol interfaces for the content feature.

A ``HierarchySession`` is the full read/write contract of the hierarchy
store bound to one consistency scope. A ``HierarchyStore`` exposes the same
contract directly (each call its own scope) and hands out sessions through
``transaction()`` for multi-step atomic work such as the save pipeline.
"""

from abc import abstractmethod
from typing import AsyncContextManager, Iterable, List, Optional, Protocol, runtime_checkable

from ....core.value_objects import ContentId, NodeRef
from .content_node import ContentNode
from .link_edge import LinkDiff, LinkEdge


@runtime_checkable
class HierarchySession(Protocol):
    """Hierarchy operations inside one consistency scope.

    Missing blocks are reported as ``None`` or empty sequences, never as
    errors.
    """

    @abstractmethod
    async def resolve(self, ref: NodeRef) -> Optional[ContentId]:
        """Resolve a block reference to its ContentId, if the block exists."""
        ...

    @abstractmethod
    async def resolve_short_ids(self, short_ids: Iterable[str]) -> List[ContentId]:
        """Resolve short identifiers, dropping any that match no block."""
        ...

    @abstractmethod
    async def get(self, ref: NodeRef) -> Optional[ContentNode]:
        ...

    @abstractmethod
    async def ancestors(self, ref: NodeRef) -> List[ContentNode]:
        """Ancestor chain, nearest parent first."""
        ...

    @abstractmethod
    async def descendants(self, ref: NodeRef) -> List[ContentNode]:
        """Every block below ``ref`` (unordered)."""
        ...

    @abstractmethod
    async def links_from(self, node_id: ContentId) -> List[LinkEdge]:
        ...

    @abstractmethod
    async def links_to(self, node_id: ContentId) -> List[LinkEdge]:
        ...

    @abstractmethod
    async def is_linked(self, source_id: ContentId, target_id: ContentId) -> bool:
        ...

    @abstractmethod
    async def upsert(self, node: ContentNode) -> ContentNode:
        """Insert or fully replace a block; the store sets the timestamps."""
        ...

    @abstractmethod
    async def replace_links(
        self,
        source_id: ContentId,
        target_ids: Iterable[ContentId],
    ) -> LinkDiff:
        """Make the outgoing links of ``source_id`` equal to ``target_ids``.

        Unchanged edges are left untouched.
        """
        ...

    @abstractmethod
    async def delete(self, ref: NodeRef) -> bool:
        """Delete one block and every edge touching it.

        Descendants are not deleted. Returns False when nothing matched.
        """
        ...


@runtime_checkable
class HierarchyStore(HierarchySession, Protocol):
    """Hierarchy store with transactional sessions."""

    @abstractmethod
    def transaction(self) -> AsyncContextManager[HierarchySession]:
        """Open an atomic scope; leaving it with an exception rolls back."""
        ...


@runtime_checkable
class ReferenceExtractor(Protocol):
    """Finds the short identifiers a piece of block text refers to."""

    @abstractmethod
    def extract(self, text: str) -> Iterable[str]:
        ...
