"""
Credential resolution for Drive diagnostics.

resolve_client_id() is the trusted path: it returns the full client ID and
fails with CredentialUnavailableError. probe_credential() is the reporting
path: it never raises for lookup failures and only ever carries a
fixed-length prefix of the identifier.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..auth.credential_store import CredentialSource, get_credential_source
from ..auth.oauth_config import OAuthConfig, get_oauth_config
from ..core.config import get_credential_timeout, get_preview_length
from ..utils.constants import FEATURE_KEY_PATTERN
from ..utils.errors import CredentialUnavailableError, InvalidFeatureKeyError

logger = logging.getLogger(__name__)

_FEATURE_KEY_RE = re.compile(FEATURE_KEY_PATTERN)


class CredentialStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class CredentialProbeResult:
    """Outcome of resolving the client ID of one feature."""

    feature: str
    status: CredentialStatus
    preview: Optional[str] = None
    reason: Optional[str] = None
    truncated: bool = False

    @property
    def available(self) -> bool:
        return self.status is CredentialStatus.AVAILABLE


def validate_feature_key(feature: object) -> str:
    """
    Check that a feature key is well formed.

    Raises:
        InvalidFeatureKeyError: If the key is not a short lowercase identifier.
    """
    if not isinstance(feature, str) or not _FEATURE_KEY_RE.fullmatch(feature):
        raise InvalidFeatureKeyError(feature)
    return feature


def redact_client_id(client_id: str, length: Optional[int] = None) -> str:
    """Return the fixed-length prefix of a client ID shown in reports."""
    if length is None:
        length = get_preview_length()
    return client_id[:max(length, 0)]


async def resolve_client_id(
    feature: str,
    source: Optional[CredentialSource] = None,
    config: Optional[OAuthConfig] = None,
) -> str:
    """
    Resolve the OAuth client ID configured for a feature.

    Args:
        feature: Feature key (e.g., "drive").
        source: Credential source, defaults to the global one.
        config: OAuth configuration used to decide which features exist.

    Returns:
        The full client ID.

    Raises:
        InvalidFeatureKeyError: If the feature key is malformed.
        CredentialUnavailableError: If the feature is unknown, has no client
            ID configured, or the source could not be reached.
    """
    validate_feature_key(feature)
    config = config or get_oauth_config()
    if feature not in config.get_features():
        raise CredentialUnavailableError("Unknown feature", feature)

    source = source or get_credential_source()
    try:
        client_id = await source.get_client_id(feature)
    except asyncio.CancelledError:
        raise
    except Exception as e:
        raise CredentialUnavailableError(
            f"Credential source {type(source).__name__} failed: {e}", feature
        ) from e

    if client_id is not None and not isinstance(client_id, str):
        raise CredentialUnavailableError(
            "Credential source returned a non-string client ID", feature
        )
    if not client_id:
        raise CredentialUnavailableError("No client ID configured", feature)
    return client_id


async def probe_credential(
    feature: str,
    source: Optional[CredentialSource] = None,
    config: Optional[OAuthConfig] = None,
    preview_length: Optional[int] = None,
    timeout: Optional[float] = None,
) -> CredentialProbeResult:
    """
    Resolve a feature's client ID for a diagnostic report.

    Lookup failures and timeouts become an UNAVAILABLE result; only a
    malformed feature key raises.
    """
    validate_feature_key(feature)
    if timeout is None:
        timeout = get_credential_timeout()

    try:
        client_id = await asyncio.wait_for(
            resolve_client_id(feature, source=source, config=config), timeout
        )
    except CredentialUnavailableError as e:
        logger.warning(f"Client ID unavailable: {e}")
        return CredentialProbeResult(
            feature=feature, status=CredentialStatus.UNAVAILABLE, reason=e.message
        )
    except asyncio.TimeoutError:
        logger.warning(f"Client ID lookup for '{feature}' timed out after {timeout}s")
        return CredentialProbeResult(
            feature=feature,
            status=CredentialStatus.UNAVAILABLE,
            reason=f"Lookup timed out after {timeout:g}s",
        )

    preview = redact_client_id(client_id, preview_length)
    truncated = len(preview) < len(client_id)
    logger.debug(f"Client ID available for '{feature}' (prefix {preview!r})")
    return CredentialProbeResult(
        feature=feature,
        status=CredentialStatus.AVAILABLE,
        preview=preview,
        truncated=truncated,
    )
