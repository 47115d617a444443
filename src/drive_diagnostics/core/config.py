"""
Shared configuration for Drive diagnostics.

This module centralizes configuration values to avoid hardcoded values
scattered throughout the codebase.
"""

import os

from ..utils.constants import (
    DEFAULT_CREDENTIAL_TIMEOUT,
    DEFAULT_PREVIEW_LENGTH,
    DEFAULT_PROBE_TIMEOUT,
    GOOGLE_PROBE_URL,
)

# Local fallback origin, used when no request context is available
DRIVE_DIAGNOSTICS_PORT = int(os.getenv("DRIVE_DIAGNOSTICS_PORT", "5173"))
DRIVE_DIAGNOSTICS_BASE_URI = os.getenv("DRIVE_DIAGNOSTICS_BASE_URI", "http://localhost")

# Credentials directory (holds client_secret.json)
CREDENTIALS_DIR = os.path.expanduser(
    os.getenv("DRIVE_DIAGNOSTICS_CREDENTIALS_DIR", "~/.config/drive-diagnostics")
)


def get_fallback_origin() -> str:
    """
    Get the origin used when the request context carries none.

    Returns:
        DRIVE_DIAGNOSTICS_EXTERNAL_URL if set, otherwise the local base URL
        (e.g., "http://localhost:5173").
    """
    external_url = os.getenv("DRIVE_DIAGNOSTICS_EXTERNAL_URL")
    if external_url:
        return external_url.rstrip("/")
    return f"{DRIVE_DIAGNOSTICS_BASE_URI}:{DRIVE_DIAGNOSTICS_PORT}"


def get_probe_url() -> str:
    """Get the static resource used for the connectivity probe."""
    return os.getenv("DRIVE_DIAGNOSTICS_PROBE_URL", GOOGLE_PROBE_URL)


def get_probe_timeout() -> float:
    """Get the upper bound, in seconds, for a connectivity probe."""
    return float(os.getenv("DRIVE_DIAGNOSTICS_PROBE_TIMEOUT", DEFAULT_PROBE_TIMEOUT))


def get_credential_timeout() -> float:
    """Get the upper bound, in seconds, for resolving a client ID."""
    return float(
        os.getenv("DRIVE_DIAGNOSTICS_CREDENTIAL_TIMEOUT", DEFAULT_CREDENTIAL_TIMEOUT)
    )


def get_preview_length() -> int:
    """Get the number of client ID characters shown in reports."""
    return int(os.getenv("DRIVE_DIAGNOSTICS_PREVIEW_LENGTH", DEFAULT_PREVIEW_LENGTH))
