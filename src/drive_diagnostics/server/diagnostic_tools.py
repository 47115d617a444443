"""Diagnostic MCP tools for Drive diagnostics."""

import logging
from typing import Optional

from .main import mcp
from ..diagnostics import (
    LastError,
    build_checklist,
    classify,
    current_environment,
    render_report,
    run_diagnostics,
    validate_feature_key,
)
from ..utils.constants import FEATURE_DRIVE
from ..utils.errors import DiagnosticsError, format_error

logger = logging.getLogger(__name__)


def _environment_for(origin: Optional[str]):
    if origin:
        return classify(origin)
    return current_environment()


@mcp.tool()
async def run_drive_diagnostics(
    origin: Optional[str] = None,
    feature: str = FEATURE_DRIVE,
    last_error_code: Optional[str] = None,
    last_error_details: Optional[str] = None,
) -> str:
    """
    Diagnose the Google OAuth setup of an environment.

    Checks which environment the origin belongs to, whether a client ID is
    configured for the feature and whether Google is reachable, then lists
    what the Google Cloud Console has to contain.

    Args:
        origin: Origin or host of the app (e.g., "https://preview.scriptony.de"
                or "localhost:5173"). Defaults to the current request context.
        feature: OAuth feature to check (default: "drive").
        last_error_code: Code of the last OAuth error the user saw, if any.
        last_error_details: Details of that error.

    Returns:
        Diagnostic report as Markdown, or error message.
    """
    last_error = None
    if last_error_code:
        last_error = LastError(code=last_error_code, details=last_error_details or "")

    try:
        report = await run_diagnostics(
            feature, last_error=last_error, environment=_environment_for(origin)
        )
        return render_report(report)
    except DiagnosticsError as e:
        return f"**Error:** {format_error('Diagnostics', e)}"
    except Exception as e:
        logger.error(f"Drive diagnostics failed unexpectedly: {e}", exc_info=True)
        return f"**Error:** An unexpected error occurred: {e}"


@mcp.tool()
def get_console_checklist(origin: Optional[str] = None, feature: str = FEATURE_DRIVE) -> str:
    """
    List the origins and redirect URIs to register in the Google Cloud Console.

    Args:
        origin: Origin or host of the app. Defaults to the current request context.
        feature: OAuth feature (default: "drive").

    Returns:
        Checklist as Markdown, or error message.
    """
    try:
        validate_feature_key(feature)
        environment = _environment_for(origin)
        checklist = build_checklist(environment, feature)
    except DiagnosticsError as e:
        return f"**Error:** {format_error('Checklist', e)}"

    lines = [
        f"**Environment:** {environment.label} ({environment.origin_url})",
        "",
        "Authorized JavaScript origins:",
    ]
    lines.extend(f"- {o}" for o in checklist.authorized_origins)
    lines.extend(["", "Authorized redirect URIs:"])
    lines.extend(f"- {uri}" for uri in checklist.redirect_uris)
    lines.extend(["", f"Open: {checklist.console_url}"])
    return "\n".join(lines)
