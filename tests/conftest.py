"""Shared fixtures for the drive-diagnostics tests."""
import os
import sys

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../src"))

from drive_diagnostics.auth.credential_store import set_credential_source  # noqa: E402
from drive_diagnostics.core.context import set_request_origin  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Start every test from default configuration and an empty request context."""
    for name in list(os.environ):
        if name.startswith("DRIVE_DIAGNOSTICS_") or (
            name.startswith("GOOGLE_") and name.endswith("CLIENT_ID")
        ):
            monkeypatch.delenv(name, raising=False)
    # Loaded lazily from the patched environment; restored by monkeypatch.
    monkeypatch.setattr("drive_diagnostics.auth.oauth_config._oauth_config", None)
    set_credential_source(None)
    set_request_origin(None)
    yield
    set_request_origin(None)
    set_credential_source(None)
