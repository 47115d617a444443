"""
Diagnostic orchestrator for Drive diagnostics.

Runs the credential lookup and the connectivity probe concurrently, joins
them with the environment classification and assembles one report. A failing
check only downgrades its own field; the run as a whole never fails because
a remote system did.
"""

import asyncio
import logging
from typing import Optional

import httpx

from ..auth.credential_store import CredentialSource
from ..auth.oauth_config import OAuthConfig, get_oauth_config
from .connectivity import probe
from .credentials import probe_credential, validate_feature_key
from .environment import EnvironmentInfo, current_environment
from .report import DiagnosticReport, LastError, build_checklist

logger = logging.getLogger(__name__)


async def run_diagnostics(
    feature: str,
    last_error: Optional[LastError] = None,
    environment: Optional[EnvironmentInfo] = None,
    source: Optional[CredentialSource] = None,
    probe_target: Optional[str] = None,
    probe_timeout: Optional[float] = None,
    credential_timeout: Optional[float] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    config: Optional[OAuthConfig] = None,
) -> DiagnosticReport:
    """
    Run the diagnostic battery for one feature.

    Args:
        feature: Feature key whose OAuth setup is checked (e.g., "drive").
        last_error: Most recent failure the user saw, passed through as is.
        environment: Classified environment; defaults to the ambient request
                     context.
        source: Credential source, defaults to the global one.
        probe_target: URL probed for connectivity, defaults to the config.
        probe_timeout: Upper bound for the probe in seconds.
        credential_timeout: Upper bound for the client ID lookup in seconds.
        http_client: Optional httpx client used by the probe.
        config: OAuth configuration, defaults to the global one.

    Returns:
        A fresh DiagnosticReport.

    Raises:
        InvalidFeatureKeyError: If the feature key is malformed.
    """
    validate_feature_key(feature)
    config = config or get_oauth_config()
    if environment is None:
        environment = current_environment(config)

    logger.info(
        f"Running diagnostics for '{feature}' on {environment.hostname} "
        f"({environment.kind.value})"
    )

    credential, connectivity = await asyncio.gather(
        probe_credential(
            feature, source=source, config=config, timeout=credential_timeout
        ),
        probe(
            probe_target or config.probe_url,
            timeout=probe_timeout,
            client=http_client,
        ),
    )

    report = DiagnosticReport(
        environment=environment,
        credential=credential,
        connectivity=connectivity,
        checklist=build_checklist(environment, feature, config),
        last_error=last_error,
    )
    logger.info(
        f"Diagnostics for '{feature}' complete: credential={credential.status.value}, "
        f"connectivity={connectivity.reachable.value}"
    )
    return report
