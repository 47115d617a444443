"""Drive Diagnostics - Google Drive OAuth pre-flight checks.

This package classifies the deployment environment of a request, derives the
OAuth redirect URIs Google Drive needs for it and reports whether the OAuth
client is configured and Google is reachable.
"""
from .diagnostics import (
    DiagnosticReport,
    DiagnosticSession,
    EnvironmentKind,
    classify,
    run_diagnostics,
)

__version__ = "0.1.0"
__all__ = [
    "DiagnosticReport",
    "DiagnosticSession",
    "EnvironmentKind",
    "classify",
    "run_diagnostics",
]
