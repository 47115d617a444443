"""
OAuth configuration package for Drive diagnostics.

This package provides:
- OAuth configuration (redirect paths, canonical origins, domain rules)
- OAuth scopes per feature
- Credential configuration sources for client IDs
"""

from .scopes import BASE_SCOPES, DRIVE_SCOPES, FEATURE_SCOPES, get_scopes
from .oauth_config import OAuthConfig, get_oauth_config, reload_oauth_config
from .credential_store import (
    CredentialSource,
    EnvironmentCredentialSource,
    ClientSecretsFileCredentialSource,
    RemoteCredentialSource,
    StaticCredentialSource,
    ChainedCredentialSource,
    get_credential_source,
    set_credential_source,
)

__all__ = [
    # Scopes
    "BASE_SCOPES",
    "DRIVE_SCOPES",
    "FEATURE_SCOPES",
    "get_scopes",
    # Config
    "OAuthConfig",
    "get_oauth_config",
    "reload_oauth_config",
    # Credential Sources
    "CredentialSource",
    "EnvironmentCredentialSource",
    "ClientSecretsFileCredentialSource",
    "RemoteCredentialSource",
    "StaticCredentialSource",
    "ChainedCredentialSource",
    "get_credential_source",
    "set_credential_source",
]
