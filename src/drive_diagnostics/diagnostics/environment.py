"""
Environment classification for Drive diagnostics.

Maps a request host to a coarse deployment environment and derives the
redirect URIs each OAuth feature has to register for it. Classification is a
pure function of the host and the configuration: an ordered list of domain
rules is evaluated and the first match wins. Hosts no rule knows about are
classified as UNKNOWN rather than rejected, so diagnostics still render for
embedding and preview platforms nobody configured.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional, Tuple
from urllib.parse import urlsplit

from ..auth.oauth_config import OAuthConfig, get_oauth_config
from ..core.context import get_request_origin
from ..utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


class EnvironmentKind(str, Enum):
    """Coarse classification of the deployment context."""

    LOCAL = "local"
    PREVIEW = "preview"
    STAGING = "staging"
    PRODUCTION = "production"
    UNKNOWN = "unknown"


_KIND_LABELS = {
    EnvironmentKind.LOCAL: "Local Development",
    EnvironmentKind.PREVIEW: "Preview Domain",
    EnvironmentKind.STAGING: "Staging Domain",
    EnvironmentKind.PRODUCTION: "Production Domain",
    EnvironmentKind.UNKNOWN: "Unknown Domain",
}


def _split_port(hostname: str) -> Tuple[str, Optional[str]]:
    """Split "host:port" (or "[v6]:port") into host and port."""
    if hostname.startswith("["):
        host, _, rest = hostname.partition("]")
        port = rest[1:] if rest.startswith(":") else None
        return f"{host}]", port
    if hostname.count(":") == 1:
        host, _, port = hostname.partition(":")
        if port.isdigit():
            return host, port
    return hostname, None


@dataclass(frozen=True)
class DomainRule:
    """A hostname pattern (full match, case-insensitive) and the kind it implies."""

    pattern: str
    kind: EnvironmentKind

    def matches(self, hostname: str) -> bool:
        regex = re.compile(self.pattern, re.IGNORECASE)
        if regex.fullmatch(hostname):
            return True
        host, port = _split_port(hostname)
        return port is not None and regex.fullmatch(host) is not None


@lru_cache(maxsize=8)
def _compile_rules(raw_rules: Tuple[Tuple[str, str], ...]) -> Tuple[DomainRule, ...]:
    rules = []
    for pattern, kind in raw_rules:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"Invalid domain rule pattern '{pattern}': {e}") from e
        try:
            rules.append(DomainRule(pattern, EnvironmentKind(kind.lower())))
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid environment kind '{kind}' for domain rule '{pattern}'"
            ) from e
    return tuple(rules)


def get_domain_rules(config: Optional[OAuthConfig] = None) -> Tuple[DomainRule, ...]:
    """
    Get the ordered domain rules of a configuration.

    Raises:
        ConfigurationError: If a rule has an invalid pattern or kind.
    """
    config = config or get_oauth_config()
    return _compile_rules(tuple(tuple(rule) for rule in config.domain_rules))


@dataclass(frozen=True)
class EnvironmentInfo:
    """Classification of one request context. Recomputed on demand, never stored."""

    hostname: str
    kind: EnvironmentKind
    origin_url: str
    # Derived from origin_url, so it stays out of the hash.
    redirect_uris: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    matched_rule: Optional[str] = None

    @property
    def label(self) -> str:
        """Human-readable domain recognition label."""
        return _KIND_LABELS[self.kind]

    def redirect_uri(self, feature: str) -> Optional[str]:
        return self.redirect_uris.get(feature)


def _normalize_hostname(hostname: str) -> str:
    return hostname.strip().lower().rstrip("/").rstrip(".")


def classify(
    hostname: str,
    origin_url: Optional[str] = None,
    config: Optional[OAuthConfig] = None,
) -> EnvironmentInfo:
    """
    Classify a request host.

    Args:
        hostname: Request host, optionally with port (e.g., "localhost:5173").
                  A full origin URL is accepted as well.
        origin_url: Explicit origin of the request. When omitted it is built
                    from the host: http for local hosts, https otherwise.
        config: OAuth configuration, defaults to the global one.

    Returns:
        EnvironmentInfo; UNKNOWN when no rule matches. Never raises for an
        unrecognized host.
    """
    if "://" in hostname:
        return classify_origin(hostname, config=config)

    config = config or get_oauth_config()
    host = _normalize_hostname(hostname)

    kind = EnvironmentKind.UNKNOWN
    matched_rule = None
    for rule in get_domain_rules(config):
        if rule.matches(host):
            kind = rule.kind
            matched_rule = rule.pattern
            break

    if kind is EnvironmentKind.UNKNOWN:
        logger.debug(f"No domain rule matched host '{host}'")

    if origin_url:
        origin = origin_url.strip().rstrip("/")
    else:
        scheme = "http" if kind is EnvironmentKind.LOCAL else "https"
        origin = f"{scheme}://{host}"

    return EnvironmentInfo(
        hostname=host,
        kind=kind,
        origin_url=origin,
        redirect_uris=MappingProxyType(dict(config.get_redirect_uris(origin))),
        matched_rule=matched_rule,
    )


def classify_origin(
    origin_url: str, config: Optional[OAuthConfig] = None
) -> EnvironmentInfo:
    """
    Classify a full origin URL such as "https://preview.scriptony.de".

    The scheme and port of the URL are kept in the derived origin.
    """
    parsed = urlsplit(origin_url.strip())
    if not parsed.scheme or not parsed.netloc:
        return classify(origin_url.replace("://", ""), config=config)

    host = parsed.netloc.rpartition("@")[2].lower()
    origin = f"{parsed.scheme.lower()}://{host}"
    return classify(host, origin_url=origin, config=config)


def current_environment(config: Optional[OAuthConfig] = None) -> EnvironmentInfo:
    """
    Classify the ambient request context.

    Uses the origin set with core.context.set_request_origin(), falling back
    to DRIVE_DIAGNOSTICS_EXTERNAL_URL and then the local base URL.
    """
    config = config or get_oauth_config()
    origin = get_request_origin() or config.fallback_origin
    return classify_origin(origin, config=config)
