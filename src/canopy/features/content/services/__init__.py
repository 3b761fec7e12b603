"""Content services package."""

from .content_service import ContentService, SaveResult

__all__ = [
    "ContentService",
    "SaveResult",
]
