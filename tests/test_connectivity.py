"""Unit tests for the connectivity probe."""
import asyncio
import socket
import ssl

import httpx
import pytest

from drive_diagnostics.diagnostics.connectivity import (
    Reachability,
    classify_transport_error,
    probe,
)
from drive_diagnostics.utils.errors import (
    ConnectivityFailedError,
    ConnectivityIndeterminateError,
)

TARGET = "https://accounts.google.com/favicon.ico"


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _raising(exc):
    def handler(request):
        raise exc
    return handler


def _connect_error_from(cause):
    try:
        raise httpx.ConnectError("connect failed") from cause
    except httpx.ConnectError as e:
        return e


class TestProbe:
    """Tests for probe() outcomes."""

    @pytest.mark.parametrize("status", [200, 204, 301, 403, 404, 500])
    async def test_any_response_is_reachable(self, status):
        """A response of any status means the network path is open."""
        async with _client(lambda request: httpx.Response(status)) as client:
            result = await probe(TARGET, timeout=1.0, client=client)

        assert result.reachable is Reachability.REACHABLE
        assert result.status_code == status
        assert result.target == TARGET
        assert result.detail is None

    async def test_connection_refused_is_unreachable(self):
        handler = _raising(httpx.ConnectError("[Errno 111] Connection refused"))
        async with _client(handler) as client:
            result = await probe(TARGET, timeout=1.0, client=client)

        assert result.reachable is Reachability.UNREACHABLE
        assert "refused" in result.detail.lower()

    async def test_dns_failure_is_unreachable(self):
        error = _connect_error_from(socket.gaierror(-2, "Name or service not known"))
        async with _client(_raising(error)) as client:
            result = await probe(TARGET, timeout=1.0, client=client)

        assert result.reachable is Reachability.UNREACHABLE
        assert "Name resolution failed" in result.detail

    async def test_tls_interception_is_unknown(self):
        """A TLS failure may be a proxy in the way, so it is not reported as down."""
        error = _connect_error_from(ssl.SSLError("certificate verify failed"))
        async with _client(_raising(error)) as client:
            result = await probe(TARGET, timeout=1.0, client=client)

        assert result.reachable is Reachability.UNKNOWN

    @pytest.mark.parametrize("exc", [
        httpx.ReadTimeout("read timed out"),
        httpx.ConnectTimeout("connect timed out"),
        httpx.ProxyError("proxy said no"),
        httpx.RemoteProtocolError("peer closed connection"),
        httpx.ConnectError("unexpected"),
    ])
    async def test_opaque_failures_are_unknown(self, exc):
        """Failures that cannot be told apart from policy blocks are UNKNOWN, never UNREACHABLE."""
        async with _client(_raising(exc)) as client:
            result = await probe(TARGET, timeout=1.0, client=client)

        assert result.reachable is Reachability.UNKNOWN
        assert result.detail

    async def test_upper_bound_is_unknown(self):
        """A probe exceeding its time budget is UNKNOWN."""
        async def handler(request):
            await asyncio.sleep(5)
            return httpx.Response(200)

        async with _client(handler) as client:
            result = await probe(TARGET, timeout=0.05, client=client)

        assert result.reachable is Reachability.UNKNOWN
        assert "0.05" in result.detail

    async def test_default_target_from_environment(self, monkeypatch):
        monkeypatch.setenv("DRIVE_DIAGNOSTICS_PROBE_URL", "https://probe.example.org/ping")
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200)

        async with _client(handler) as client:
            result = await probe(timeout=1.0, client=client)

        assert result.target == "https://probe.example.org/ping"
        assert str(requests[0].url) == "https://probe.example.org/ping"


class TestClassifyTransportError:
    """Tests for mapping transport errors to the error taxonomy."""

    def test_refused_errno(self):
        error = _connect_error_from(ConnectionRefusedError(111, "Connection refused"))
        assert isinstance(classify_transport_error(error, TARGET), ConnectivityFailedError)

    def test_timeout(self):
        error = classify_transport_error(httpx.PoolTimeout("pool"), TARGET)
        assert isinstance(error, ConnectivityIndeterminateError)
        assert error.target == TARGET
