"""
Core utilities package for Drive diagnostics.

This package provides shared configuration and request context.
"""

from .config import (
    DRIVE_DIAGNOSTICS_PORT,
    DRIVE_DIAGNOSTICS_BASE_URI,
    get_fallback_origin,
    get_probe_url,
    get_probe_timeout,
    get_credential_timeout,
    get_preview_length,
)
from .context import (
    get_request_origin,
    set_request_origin,
)

__all__ = [
    # Config
    "DRIVE_DIAGNOSTICS_PORT",
    "DRIVE_DIAGNOSTICS_BASE_URI",
    "get_fallback_origin",
    "get_probe_url",
    "get_probe_timeout",
    "get_credential_timeout",
    "get_preview_length",
    # Context
    "get_request_origin",
    "set_request_origin",
]
