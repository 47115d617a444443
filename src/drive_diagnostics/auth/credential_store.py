"""
Credential Configuration Sources for Drive diagnostics.

This module provides a standardized interface for looking up the OAuth client
ID configured for a feature. Sources answer ``None`` when they have no entry;
they raise only when the lookup itself broke.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence

import httpx
from google_auth_oauthlib.flow import Flow

from ..core.config import CREDENTIALS_DIR
from .scopes import get_scopes

logger = logging.getLogger(__name__)


def _env_name(feature: str) -> str:
    return f"GOOGLE_{feature.upper().replace('-', '_')}_CLIENT_ID"


class CredentialSource(ABC):
    """Abstract base class for credential configuration sources."""

    @abstractmethod
    async def get_client_id(self, feature: str) -> Optional[str]:
        """Get the OAuth client ID configured for a feature, or None."""
        pass


class EnvironmentCredentialSource(CredentialSource):
    """Reads GOOGLE_<FEATURE>_CLIENT_ID, falling back to GOOGLE_OAUTH_CLIENT_ID."""

    def __init__(self, fallback_var: Optional[str] = "GOOGLE_OAUTH_CLIENT_ID") -> None:
        self.fallback_var = fallback_var

    async def get_client_id(self, feature: str) -> Optional[str]:
        client_id = os.getenv(_env_name(feature))
        if not client_id and self.fallback_var:
            client_id = os.getenv(self.fallback_var)
        return client_id.strip() if client_id and client_id.strip() else None


class ClientSecretsFileCredentialSource(CredentialSource):
    """Credential source that reads Google client_secret.json files."""

    def __init__(self, base_dir: Optional[str] = None) -> None:
        """
        Initialize the client secrets source.

        Args:
            base_dir: Directory holding client_secret_<feature>.json and/or
                     client_secret.json. Defaults to the credentials dir.
        """
        self.base_dir = base_dir or CREDENTIALS_DIR

    def _candidate_paths(self, feature: str) -> List[str]:
        return [
            os.path.join(self.base_dir, f"client_secret_{feature}.json"),
            os.path.join(self.base_dir, "client_secret.json"),
        ]

    async def get_client_id(self, feature: str) -> Optional[str]:
        """Get the client ID from the first readable client secrets file."""
        for path in self._candidate_paths(feature):
            if not os.path.exists(path):
                continue
            try:
                flow = Flow.from_client_secrets_file(path, scopes=get_scopes(feature))
            except (IOError, ValueError) as e:
                logger.warning(f"Ignoring unreadable client secrets file {path}: {e}")
                continue

            client_id = flow.client_config.get("client_id")
            if client_id:
                logger.debug(f"Loaded client ID for '{feature}' from {path}")
                return client_id

        logger.debug(f"No client secrets file found for '{feature}' in {self.base_dir}")
        return None


class RemoteCredentialSource(CredentialSource):
    """Looks up client IDs from a remote config endpoint: GET {base_url}/{feature}."""

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.client = client
        self.timeout = timeout

    async def _fetch(self, client: httpx.AsyncClient, feature: str) -> Optional[str]:
        response = await client.get(f"{self.base_url}/{feature}")
        if response.status_code == 404:
            return None
        response.raise_for_status()
        client_id = response.json().get("client_id")
        return client_id or None

    async def get_client_id(self, feature: str) -> Optional[str]:
        if self.client is not None:
            return await self._fetch(self.client, feature)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._fetch(client, feature)


class StaticCredentialSource(CredentialSource):
    """In-memory mapping of feature keys to client IDs."""

    def __init__(self, client_ids: Optional[Dict[str, str]] = None) -> None:
        self.client_ids = dict(client_ids or {})

    async def get_client_id(self, feature: str) -> Optional[str]:
        return self.client_ids.get(feature) or None


class ChainedCredentialSource(CredentialSource):
    """
    Asks each source in order; the first non-empty answer wins.

    A failing source does not stop the chain. If no source answered and at
    least one failed, the first failure is re-raised.
    """

    def __init__(self, sources: Sequence[CredentialSource]) -> None:
        self.sources = list(sources)

    async def get_client_id(self, feature: str) -> Optional[str]:
        first_error: Optional[Exception] = None
        for source in self.sources:
            try:
                client_id = await source.get_client_id(feature)
            except Exception as e:
                logger.warning(
                    f"{type(source).__name__} failed for '{feature}': {e}"
                )
                if first_error is None:
                    first_error = e
                continue
            if client_id:
                logger.debug(f"Client ID for '{feature}' from {type(source).__name__}")
                return client_id

        if first_error is not None:
            raise first_error
        return None


# Global credential source instance
_credential_source: Optional[CredentialSource] = None


def build_default_credential_source() -> CredentialSource:
    """Build the default chain: environment, client secrets file, remote."""
    sources: List[CredentialSource] = [
        EnvironmentCredentialSource(),
        ClientSecretsFileCredentialSource(),
    ]
    remote_url = os.getenv("DRIVE_DIAGNOSTICS_CREDENTIALS_URL")
    if remote_url:
        sources.append(RemoteCredentialSource(remote_url))
    return ChainedCredentialSource(sources)


def get_credential_source() -> CredentialSource:
    """Get the global credential source instance."""
    global _credential_source

    if _credential_source is None:
        _credential_source = build_default_credential_source()
        logger.info(
            f"Initialized credential source: {type(_credential_source).__name__}"
        )

    return _credential_source


def set_credential_source(source: Optional[CredentialSource]) -> None:
    """Set the global credential source instance (None restores the default)."""
    global _credential_source
    _credential_source = source
    logger.info(f"Set credential source: {type(source).__name__}")
