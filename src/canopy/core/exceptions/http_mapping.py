"""HTTP status code mapping for exceptions.

The request layer that sits above canopy uses this to turn any raised
CanopyError into a response status. Lookup walks the exception's MRO so
subclasses inherit their parent's status unless mapped explicitly.
"""

from typing import Dict, Type

from .base import CanopyError
from .domain import (
    AuthorizationError,
    ContentNodeNotFoundError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from .database import PersistenceError


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,

    # 403 Forbidden
    AuthorizationError: 403,
    PermissionDeniedError: 403,

    # 404 Not Found
    NotFoundError: 404,
    ContentNodeNotFoundError: 404,

    # 500 Internal Server Error
    PersistenceError: 500,
    CanopyError: 500,
}


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for an exception.

    Args:
        exception: The exception instance

    Returns:
        HTTP status code, 500 for anything unmapped
    """
    for klass in type(exception).__mro__:
        if klass in HTTP_STATUS_MAP:
            return HTTP_STATUS_MAP[klass]
    return 500
