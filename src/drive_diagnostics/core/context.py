"""
Context variables for Drive diagnostics.

This module holds the request-scoped origin the diagnostics classify. The
surrounding application sets it per request; the classifier only reads it.
"""

import contextvars
from typing import Optional

# Context variable to hold the current request origin (scheme://host[:port])
_request_origin: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_origin", default=None
)


def get_request_origin() -> Optional[str]:
    """
    Get the current request origin from context.

    Returns:
        The current origin or None if not set.
    """
    return _request_origin.get()


def set_request_origin(origin: Optional[str]) -> None:
    """
    Set the current request origin in context.

    Args:
        origin: The origin to set, or None to clear.
    """
    _request_origin.set(origin.rstrip("/") if origin else None)
