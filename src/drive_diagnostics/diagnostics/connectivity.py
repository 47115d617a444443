"""
Connectivity probe for Drive diagnostics.

Sends one best-effort request to a static resource on the provider domain.
Any response at all, whatever its status, means the network path is open.
Failures are split into a clear "unreachable" (name resolution failed,
connection refused) and "unknown" for everything that may just as well be a
proxy, TLS interception or a slow network. The tri-state is kept all the way
into the report.
"""

import asyncio
import errno
import logging
import socket
import ssl
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from ..core.config import get_probe_timeout, get_probe_url
from ..utils.errors import ConnectivityFailedError, ConnectivityIndeterminateError

logger = logging.getLogger(__name__)

_REFUSED_ERRNOS = {errno.ECONNREFUSED, errno.ENETUNREACH, errno.EHOSTUNREACH}


class Reachability(str, Enum):
    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ConnectivityResult:
    """Outcome of one connectivity probe."""

    reachable: Reachability
    target: str
    detail: Optional[str] = None
    status_code: Optional[int] = None
    elapsed: Optional[float] = None


def _iter_causes(exc: BaseException):
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = exc.__cause__ or exc.__context__


def classify_transport_error(exc: Exception, target: str) -> Exception:
    """
    Convert an httpx transport error into a connectivity error.

    Returns:
        ConnectivityFailedError for DNS failures and refused connections,
        ConnectivityIndeterminateError for everything else.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ConnectivityIndeterminateError(f"Timed out: {exc}", target)

    if isinstance(exc, httpx.ConnectError):
        for cause in _iter_causes(exc):
            if isinstance(cause, ssl.SSLError):
                return ConnectivityIndeterminateError(
                    f"TLS handshake failed (proxy or interception?): {cause}", target
                )
            if isinstance(cause, socket.gaierror):
                return ConnectivityFailedError(f"Name resolution failed: {cause}", target)
            if isinstance(cause, ConnectionRefusedError) or (
                isinstance(cause, OSError) and cause.errno in _REFUSED_ERRNOS
            ):
                return ConnectivityFailedError(f"Connection refused: {cause}", target)

        message = str(exc).lower()
        if any(token in message for token in ("ssl", "tls", "certificate")):
            return ConnectivityIndeterminateError(
                f"TLS handshake failed (proxy or interception?): {exc}", target
            )
        if any(
            token in message
            for token in ("name or service not known", "nodename nor servname",
                          "getaddrinfo failed", "connection refused")
        ):
            return ConnectivityFailedError(f"Connection failed: {exc}", target)

    return ConnectivityIndeterminateError(
        f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__, target
    )


async def _send(
    target: str, timeout: float, client: Optional[httpx.AsyncClient]
) -> httpx.Response:
    if client is not None:
        return await client.get(target, follow_redirects=False)
    async with httpx.AsyncClient(timeout=timeout) as own_client:
        return await own_client.get(target, follow_redirects=False)


async def probe(
    target: Optional[str] = None,
    timeout: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ConnectivityResult:
    """
    Check whether the network path to the provider is open.

    Args:
        target: URL of a static resource, defaults to the configured probe URL.
        timeout: Upper bound in seconds; expiry is reported as UNKNOWN.
        client: Optional httpx client to send the request with.

    Returns:
        ConnectivityResult. Never raises for network failures.
    """
    target = target or get_probe_url()
    if timeout is None:
        timeout = get_probe_timeout()

    started = time.monotonic()
    try:
        response = await asyncio.wait_for(_send(target, timeout, client), timeout)
    except asyncio.TimeoutError:
        error: Exception = ConnectivityIndeterminateError(
            f"No answer within {timeout:g}s", target
        )
    except httpx.TransportError as e:
        error = classify_transport_error(e, target)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        error = ConnectivityIndeterminateError(f"{type(e).__name__}: {e}", target)
    else:
        elapsed = time.monotonic() - started
        logger.debug(
            f"Probe {target} answered HTTP {response.status_code} in {elapsed:.2f}s"
        )
        return ConnectivityResult(
            reachable=Reachability.REACHABLE,
            target=target,
            status_code=response.status_code,
            elapsed=elapsed,
        )

    elapsed = time.monotonic() - started
    if isinstance(error, ConnectivityFailedError):
        logger.warning(f"Probe {target} failed: {error.message}")
        reachable = Reachability.UNREACHABLE
    else:
        logger.warning(f"Probe {target} inconclusive: {error.message}")
        reachable = Reachability.UNKNOWN

    return ConnectivityResult(
        reachable=reachable, target=target, detail=error.message, elapsed=elapsed
    )
