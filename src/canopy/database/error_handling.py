"""Standardized error handling for store and catalog queries."""

import functools
import logging
from typing import Any, Callable, Type

import asyncpg

from ..core.exceptions import CanopyError, PersistenceError

logger = logging.getLogger(__name__)


def persistence_operation(
    operation_name: str,
    error_class: Type[PersistenceError] = PersistenceError,
    log_level: int = logging.DEBUG,
):
    """Decorator that wraps driver failures in a canopy persistence error.

    Domain errors raised inside the wrapped coroutine pass through untouched;
    anything coming from asyncpg or the connection is re-raised as
    ``error_class`` with the original kept as ``__cause__``.

    Usage:
        @persistence_operation("upsert content block", HierarchyStoreError)
        async def upsert(self, node):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> Any:
            try:
                return await func(*args, **kwargs)
            except CanopyError:
                raise
            except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
                logger.log(log_level, f"Failed to {operation_name}: {e}")
                raise error_class(
                    f"Failed to {operation_name}: {e}",
                    operation=operation_name,
                    details={"function": func.__name__},
                ) from e

        return wrapper
    return decorator
