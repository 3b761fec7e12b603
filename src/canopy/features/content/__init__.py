"""Content feature for canopy.

Ordered block hierarchy, the reference link graph derived from block
content, and the stores that persist both.
"""

from .entities import (
    FractionalIndex,
    BlockContent,
    PageContent,
    HeadingContent,
    ParagraphContent,
    load_content,
    dump_content,
    ContentNode,
    LinkEdge,
    LinkDiff,
    ContentContext,
    HierarchySession,
    HierarchyStore,
    ReferenceExtractor,
)
from .repositories import MemoryHierarchyStore, AsyncPGHierarchyStore
from .services import ContentService, SaveResult

__all__ = [
    # Entities
    "FractionalIndex",
    "BlockContent",
    "PageContent",
    "HeadingContent",
    "ParagraphContent",
    "load_content",
    "dump_content",
    "ContentNode",
    "LinkEdge",
    "LinkDiff",
    "ContentContext",

    # Protocols
    "HierarchySession",
    "HierarchyStore",
    "ReferenceExtractor",

    # Repositories
    "MemoryHierarchyStore",
    "AsyncPGHierarchyStore",

    # Services
    "ContentService",
    "SaveResult",
]
