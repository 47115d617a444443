"""
Diagnostic report types, console checklist and text rendering.

A report is a frozen snapshot of one diagnostic run. Re-running diagnostics
builds a new report; nothing here is ever mutated or persisted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

from ..auth.oauth_config import OAuthConfig, get_oauth_config
from ..auth.scopes import get_scopes
from .connectivity import ConnectivityResult, Reachability
from .credentials import CredentialProbeResult
from .environment import EnvironmentInfo


@dataclass(frozen=True)
class LastError:
    """The most recent real-world failure the user ran into, supplied by the caller."""

    code: str
    details: str


@dataclass(frozen=True)
class ConsoleChecklist:
    """What the Google Cloud Console has to contain for the feature to work."""

    authorized_origins: Tuple[str, ...]
    redirect_uris: Tuple[str, ...]
    scopes: Tuple[str, ...]
    console_url: str


@dataclass(frozen=True)
class DiagnosticReport:
    environment: EnvironmentInfo
    credential: CredentialProbeResult
    connectivity: ConnectivityResult
    checklist: ConsoleChecklist
    last_error: Optional[LastError] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def ok(self) -> bool:
        """True when the credential is available and the provider is reachable."""
        return (
            self.credential.available
            and self.connectivity.reachable is Reachability.REACHABLE
        )


def build_checklist(
    environment: EnvironmentInfo,
    feature: str,
    config: Optional[OAuthConfig] = None,
) -> ConsoleChecklist:
    """
    Build the expected console configuration for a feature.

    The current environment comes first, followed by the canonical origins;
    duplicates are dropped keeping the first occurrence.
    """
    config = config or get_oauth_config()
    origins = [environment.origin_url] + list(config.canonical_origins)

    redirect_uris = [environment.redirect_uri(feature)]
    redirect_uris.extend(
        config.get_redirect_uri(origin, feature) for origin in config.canonical_origins
    )

    return ConsoleChecklist(
        authorized_origins=tuple(dict.fromkeys(origins)),
        redirect_uris=tuple(uri for uri in dict.fromkeys(redirect_uris) if uri),
        scopes=tuple(get_scopes(feature)),
        console_url=config.console_url,
    )


def _connectivity_line(result: ConnectivityResult) -> str:
    if result.reachable is Reachability.REACHABLE:
        return f"✅ Reachable (HTTP {result.status_code})"
    if result.reachable is Reachability.UNREACHABLE:
        return f"❌ Unreachable ({result.detail})"
    return f"⚠️ Unknown ({result.detail})"


def render_report(report: DiagnosticReport) -> str:
    """Render a report as Markdown text."""
    env = report.environment
    credential = report.credential
    feature = credential.feature

    lines = [
        f"# Google Drive Connection Diagnostics ({feature})",
        "",
        "## Environment",
        f"- **Hostname:** {env.hostname}",
        f"- **Environment type:** {env.kind.value}",
        f"- **Domain recognition:** {env.label}",
        f"- **Origin URL:** {env.origin_url}",
    ]
    for key, uri in sorted(env.redirect_uris.items()):
        lines.append(f"- **{key.capitalize()} redirect URL:** {uri}")

    lines.extend(["", "## Connection Tests"])
    if credential.available:
        preview = f"{credential.preview}..." if credential.truncated else credential.preview
        lines.append(f"- **Client ID:** ✅ Available ({preview})")
    else:
        lines.append(f"- **Client ID:** ❌ Missing ({credential.reason})")
    lines.append(f"- **Google connectivity:** {_connectivity_line(report.connectivity)}")

    if report.last_error:
        lines.extend([
            "",
            "## Last Error",
            f"- **Error code:** {report.last_error.code}",
            f"- **Details:** {report.last_error.details}",
        ])

    checklist = report.checklist
    lines.extend(["", "## Google Cloud Console Configuration", "", "Authorized JavaScript origins:"])
    lines.extend(f"- {origin}" for origin in checklist.authorized_origins)
    lines.extend(["", "Authorized redirect URIs:"])
    lines.extend(f"- {uri}" for uri in checklist.redirect_uris)
    lines.extend(["", "OAuth scopes:"])
    lines.extend(f"- {scope}" for scope in checklist.scopes)
    lines.extend(["", f"Console: {checklist.console_url}"])

    return "\n".join(lines)
