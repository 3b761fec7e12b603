"""Content entities package.

Domain entities and protocols for the block hierarchy and its link graph.
"""

from .fractional_index import FractionalIndex
from .block_content import (
    BlockContent,
    PageContent,
    HeadingContent,
    ParagraphContent,
    load_content,
    dump_content,
)
from .content_node import ContentNode
from .link_edge import LinkEdge, LinkDiff
from .content_context import ContentContext
from .protocols import HierarchySession, HierarchyStore, ReferenceExtractor

__all__ = [
    # Ordering
    "FractionalIndex",

    # Content
    "BlockContent",
    "PageContent",
    "HeadingContent",
    "ParagraphContent",
    "load_content",
    "dump_content",

    # Domain entities
    "ContentNode",
    "LinkEdge",
    "LinkDiff",
    "ContentContext",

    # Protocols
    "HierarchySession",
    "HierarchyStore",
    "ReferenceExtractor",
]
