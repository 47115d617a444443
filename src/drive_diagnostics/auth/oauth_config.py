"""
OAuth Configuration Management for Drive diagnostics.

This module centralizes the OAuth-related configuration the diagnostics
compare against: redirect path suffixes per feature, the origins registered
in the Google Cloud Console and the ordered domain rules used to classify
hosts. Everything can be overridden from the environment.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from ..core.config import get_fallback_origin, get_probe_url
from ..utils.constants import (
    DEFAULT_CANONICAL_ORIGINS,
    DEFAULT_DOMAIN_RULES,
    DEFAULT_REDIRECT_PATHS,
    GOOGLE_CONSOLE_CREDENTIALS_URL,
)
from ..utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


def _parse_redirect_paths(raw: str) -> Dict[str, str]:
    """Parse "drive=/account?tab=storage,auth=/auth/callback"."""
    paths = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        feature, sep, path = item.partition("=")
        if not sep or not feature.strip() or not path.strip().startswith("/"):
            raise ConfigurationError(
                f"Invalid redirect path entry '{item}', expected feature=/path"
            )
        paths[feature.strip()] = path.strip()
    return paths


def _load_domain_rules(path: str) -> List[Tuple[str, str]]:
    """Load ordered (pattern, kind) rules from a JSON file."""
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read domain rules from {path}: {e}") from e

    if not isinstance(data, list):
        raise ConfigurationError(f"Domain rules in {path} must be a JSON list")

    rules = []
    for entry in data:
        if not isinstance(entry, dict) or "pattern" not in entry or "kind" not in entry:
            raise ConfigurationError(
                f"Invalid domain rule {entry!r} in {path}, expected pattern and kind"
            )
        rules.append((str(entry["pattern"]), str(entry["kind"])))
    logger.info(f"Loaded {len(rules)} domain rules from {path}")
    return rules


class OAuthConfig:
    """
    Centralized OAuth configuration management.

    Provides a single source of truth for the values the diagnostics derive
    redirect URIs and checklists from.
    """

    def __init__(self) -> None:
        # Redirect path suffixes per feature
        self.redirect_paths = dict(DEFAULT_REDIRECT_PATHS)
        custom_paths = os.getenv("DRIVE_DIAGNOSTICS_REDIRECT_PATHS")
        if custom_paths:
            self.redirect_paths.update(_parse_redirect_paths(custom_paths))

        # Origins registered in the provider console besides the current one
        custom_origins = os.getenv("DRIVE_DIAGNOSTICS_CANONICAL_ORIGINS")
        if custom_origins:
            self.canonical_origins = [
                origin.strip().rstrip("/")
                for origin in custom_origins.split(",")
                if origin.strip()
            ]
        else:
            self.canonical_origins = list(DEFAULT_CANONICAL_ORIGINS)

        # Ordered domain rules, first match wins
        self.domain_rules_file = os.getenv("DRIVE_DIAGNOSTICS_DOMAIN_RULES_FILE")
        if self.domain_rules_file:
            self.domain_rules = _load_domain_rules(self.domain_rules_file)
        else:
            self.domain_rules = list(DEFAULT_DOMAIN_RULES)

        self.fallback_origin = get_fallback_origin()
        self.probe_url = get_probe_url()
        self.console_url = GOOGLE_CONSOLE_CREDENTIALS_URL

    def get_features(self) -> List[str]:
        """Get the feature keys that have a redirect path."""
        return list(self.redirect_paths)

    def get_redirect_uri(self, origin: str, feature: str) -> Optional[str]:
        """Get the redirect URI a feature registers for an origin."""
        path = self.redirect_paths.get(feature)
        if path is None:
            return None
        return f"{origin.rstrip('/')}{path}"

    def get_redirect_uris(self, origin: str) -> Dict[str, str]:
        """Get the redirect URI of every feature for an origin."""
        return {
            feature: self.get_redirect_uri(origin, feature)
            for feature in self.redirect_paths
        }

    def get_environment_summary(self) -> Dict[str, Any]:
        """Get a summary of the current OAuth configuration (excluding secrets)."""
        return {
            "redirect_paths": dict(self.redirect_paths),
            "canonical_origins": list(self.canonical_origins),
            "domain_rules_file": self.domain_rules_file,
            "domain_rule_count": len(self.domain_rules),
            "fallback_origin": self.fallback_origin,
            "probe_url": self.probe_url,
        }


# Global configuration instance
_oauth_config: Optional[OAuthConfig] = None


def get_oauth_config() -> OAuthConfig:
    """Get the global OAuth configuration instance."""
    global _oauth_config
    if _oauth_config is None:
        _oauth_config = OAuthConfig()
    return _oauth_config


def reload_oauth_config() -> OAuthConfig:
    """Reload the OAuth configuration from environment variables."""
    global _oauth_config
    _oauth_config = OAuthConfig()
    return _oauth_config
