"""Value objects shared across canopy features."""

from .identifiers import (
    NavigatorId,
    ContentId,
    ResourceId,
    LinkId,
    ShortId,
    NodeRef,
    parse_node_ref,
)

__all__ = [
    "NavigatorId",
    "ContentId",
    "ResourceId",
    "LinkId",
    "ShortId",
    "NodeRef",
    "parse_node_ref",
]
