"""Custom exceptions for the Drive diagnostics package.

This module provides structured error handling with specific exception types
for the diagnostic checks. All exceptions inherit from DiagnosticsError.
Most of them never leave the orchestrator: they are recovered into the
matching report field instead.
"""
from typing import Optional


class DiagnosticsError(Exception):
    """Base exception for all drive-diagnostics errors.

    Attributes:
        message: Human-readable error description.
        feature: Optional feature key related to the error.
    """

    def __init__(self, message: str, feature: Optional[str] = None) -> None:
        self.message = message
        self.feature = feature
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the error message, optionally including the feature key."""
        if self.feature:
            return f"{self.message} (feature: {self.feature})"
        return self.message


class ConfigurationError(DiagnosticsError):
    """Raised when static configuration (domain rules, redirect paths) is invalid."""
    pass


class InvalidFeatureKeyError(DiagnosticsError):
    """Raised when a feature key is malformed. This is a caller bug."""

    def __init__(self, feature: object) -> None:
        self.raw_feature = feature
        super().__init__(
            f"Invalid feature key {feature!r}. "
            "Expected lowercase letters, digits, '-' or '_'."
        )


class CredentialUnavailableError(DiagnosticsError):
    """Raised when no OAuth client ID can be resolved for a feature."""
    pass


class ConnectivityIndeterminateError(DiagnosticsError):
    """Raised when a probe cannot tell blocked from unreachable."""

    def __init__(self, message: str, target: str) -> None:
        self.target = target
        super().__init__(message)


class ConnectivityFailedError(DiagnosticsError):
    """Raised when a probe clearly failed (DNS failure, connection refused)."""

    def __init__(self, message: str, target: str) -> None:
        self.target = target
        super().__init__(message)


class SessionClosedError(DiagnosticsError):
    """Raised when a diagnostic session is used after it was closed."""
    pass


def format_error(action: str, error: Exception) -> str:
    """Format an error message consistently.

    Args:
        action: The action that failed (e.g., "Diagnostics", "Checklist").
        error: The exception that occurred.

    Returns:
        Formatted error string.
    """
    if isinstance(error, DiagnosticsError):
        return f"{action} failed: {error.message}"
    return f"{action} failed: {str(error)}"
