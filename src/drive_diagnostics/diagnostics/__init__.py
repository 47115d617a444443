"""Drive OAuth diagnostics: environment, credential and connectivity checks.

This package combines the individual checks into a single diagnostic report
that any display layer can render.
"""
from .environment import (
    DomainRule,
    EnvironmentInfo,
    EnvironmentKind,
    classify,
    classify_origin,
    current_environment,
    get_domain_rules,
)
from .credentials import (
    CredentialProbeResult,
    CredentialStatus,
    probe_credential,
    redact_client_id,
    resolve_client_id,
    validate_feature_key,
)
from .connectivity import ConnectivityResult, Reachability, probe
from .report import (
    ConsoleChecklist,
    DiagnosticReport,
    LastError,
    build_checklist,
    render_report,
)
from .orchestrator import run_diagnostics
from .session import DiagnosticSession, RunState

__all__ = [
    'DomainRule',
    'EnvironmentInfo',
    'EnvironmentKind',
    'classify',
    'classify_origin',
    'current_environment',
    'get_domain_rules',
    'CredentialProbeResult',
    'CredentialStatus',
    'probe_credential',
    'redact_client_id',
    'resolve_client_id',
    'validate_feature_key',
    'ConnectivityResult',
    'Reachability',
    'probe',
    'ConsoleChecklist',
    'DiagnosticReport',
    'LastError',
    'build_checklist',
    'render_report',
    'run_diagnostics',
    'DiagnosticSession',
    'RunState',
]
