"""Persistence exceptions for canopy.

Store failures are wrapped, never interpreted: the original exception is
kept as ``__cause__`` and the failing operation is named in ``details``.
"""

from typing import Any, Dict, Optional

from .base import CanopyError


class PersistenceError(CanopyError):
    """Base class for catalog and hierarchy store failures."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.operation = operation
        merged = dict(details or {})
        if operation:
            merged.setdefault("operation", operation)
        super().__init__(message, details=merged)


class HierarchyStoreError(PersistenceError):
    """Raised when a content block or link query fails."""
    pass


class CatalogError(PersistenceError):
    """Raised when a role or permission query fails."""
    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when the connection pool cannot be created."""
    pass
