"""Unit tests for the diagnostic orchestrator and session lifecycle."""
import asyncio

import httpx
import pytest

from drive_diagnostics.auth.credential_store import (
    CredentialSource,
    RemoteCredentialSource,
    StaticCredentialSource,
)
from drive_diagnostics.core.context import set_request_origin
from drive_diagnostics.diagnostics import (
    CredentialStatus,
    DiagnosticSession,
    EnvironmentKind,
    LastError,
    Reachability,
    RunState,
    build_checklist,
    classify,
    render_report,
    run_diagnostics,
)
from drive_diagnostics.utils.errors import InvalidFeatureKeyError, SessionClosedError

CLIENT_ID = "123456789012-abcdefghijklmnop.apps.googleusercontent.com"


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _ok(request):
    return httpx.Response(200)


def _refused(request):
    raise httpx.ConnectError("[Errno 111] Connection refused")


class GatedSource(CredentialSource):
    """Source that answers only once the gate is opened."""

    def __init__(self, client_id=CLIENT_ID):
        self.client_id = client_id
        self.gate = asyncio.Event()
        self.calls = 0

    async def get_client_id(self, feature):
        self.calls += 1
        await self.gate.wait()
        return self.client_id


class BrokenSource(CredentialSource):
    async def get_client_id(self, feature):
        raise RuntimeError("backend down")


class TestRunDiagnostics:
    """Tests for run_diagnostics()."""

    async def test_healthy_setup(self):
        env = classify("localhost:5173")
        async with _client(_ok) as client:
            report = await run_diagnostics(
                "drive",
                environment=env,
                source=StaticCredentialSource({"drive": CLIENT_ID}),
                http_client=client,
            )

        assert report.environment is env
        assert report.credential.status is CredentialStatus.AVAILABLE
        assert report.credential.preview == CLIENT_ID[:12]
        assert report.connectivity.reachable is Reachability.REACHABLE
        assert report.last_error is None
        assert report.ok

    async def test_both_checks_failing_still_resolves(self):
        """Neither a missing credential nor a dead network makes the run fail."""
        async with _client(_refused) as client:
            report = await run_diagnostics(
                "drive",
                environment=classify("localhost:5173"),
                source=BrokenSource(),
                http_client=client,
            )

        assert report.credential.status is CredentialStatus.UNAVAILABLE
        assert report.credential.preview is None
        assert report.connectivity.reachable is Reachability.UNREACHABLE
        assert not report.ok

    async def test_missing_drive_entry(self):
        async with _client(_ok) as client:
            report = await run_diagnostics(
                "drive",
                environment=classify("localhost:5173"),
                source=StaticCredentialSource({"auth": "auth-only"}),
                http_client=client,
            )

        assert report.credential.feature == "drive"
        assert report.credential.status is CredentialStatus.UNAVAILABLE
        assert report.credential.preview is None

    async def test_credential_failure_does_not_skip_probe(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(204)

        async with _client(handler) as client:
            report = await run_diagnostics(
                "drive",
                environment=classify("preview.scriptony.de"),
                source=BrokenSource(),
                http_client=client,
            )

        assert len(requests) == 1
        assert report.connectivity.reachable is Reachability.REACHABLE

    async def test_checks_run_concurrently(self):
        """The credential lookup waits for the probe to start; sequential runs would time out."""
        source = GatedSource()

        def handler(request):
            source.gate.set()
            return httpx.Response(200)

        async with _client(handler) as client:
            report = await run_diagnostics(
                "drive",
                environment=classify("localhost:5173"),
                source=source,
                http_client=client,
                credential_timeout=2.0,
            )

        assert report.credential.status is CredentialStatus.AVAILABLE

    async def test_non_string_remote_client_id_still_resolves(self):
        """A malformed config endpoint answer is reported, not raised."""
        remote = _client(lambda request: httpx.Response(200, json={"client_id": 1234567890123456}))
        async with remote, _client(_ok) as client:
            report = await run_diagnostics(
                "drive",
                environment=classify("localhost:5173"),
                source=RemoteCredentialSource("https://config.example.org", client=remote),
                http_client=client,
            )

        assert report.credential.status is CredentialStatus.UNAVAILABLE
        assert report.credential.preview is None
        assert report.connectivity.reachable is Reachability.REACHABLE
        assert not report.ok

    async def test_report_is_hashable(self):
        async with _client(_ok) as client:
            report = await run_diagnostics(
                "drive",
                environment=classify("localhost:5173"),
                source=StaticCredentialSource({"drive": CLIENT_ID}),
                http_client=client,
            )

        assert report in {report}

    async def test_last_error_is_passed_through(self):
        last_error = LastError(code="redirect_uri_mismatch", details="Error 400")
        async with _client(_ok) as client:
            report = await run_diagnostics(
                "drive",
                last_error=last_error,
                environment=classify("localhost:5173"),
                source=StaticCredentialSource({}),
                http_client=client,
            )

        assert report.last_error == last_error

    async def test_invalid_feature_key_rejects(self):
        with pytest.raises(InvalidFeatureKeyError):
            await run_diagnostics("Drive Storage", source=StaticCredentialSource({}))

    async def test_uses_ambient_request_origin(self):
        set_request_origin("https://preview.scriptony.de")
        async with _client(_ok) as client:
            report = await run_diagnostics(
                "drive", source=StaticCredentialSource({}), http_client=client
            )

        assert report.environment.kind is EnvironmentKind.PREVIEW
        assert report.environment.redirect_uris["auth"].startswith("https://preview.scriptony.de")

    async def test_rerun_builds_fresh_report(self):
        """Two runs on a stable environment agree on the environment but share no report."""
        env = classify("app.scriptony.de")
        source = StaticCredentialSource({"drive": CLIENT_ID})
        async with _client(_ok) as client:
            first = await run_diagnostics("drive", environment=env, source=source, http_client=client)
            second = await run_diagnostics("drive", environment=env, source=source, http_client=client)

        assert first is not second
        assert first.environment == second.environment
        assert first.credential == second.credential


class TestChecklist:
    """Tests for the console configuration checklist."""

    def test_local_environment(self):
        checklist = build_checklist(classify("localhost:5173"), "drive")

        assert checklist.authorized_origins == (
            "http://localhost:5173",
            "https://app.scriptony.de",
            "https://preview.scriptony.de",
            "https://admin.scriptony.de",
        )
        assert checklist.redirect_uris == (
            "http://localhost:5173/account?tab=storage",
            "https://app.scriptony.de/account?tab=storage",
            "https://preview.scriptony.de/account?tab=storage",
            "https://admin.scriptony.de/account?tab=storage",
        )
        assert "https://www.googleapis.com/auth/drive.file" in checklist.scopes
        assert checklist.console_url.startswith("https://console.cloud.google.com/")

    def test_canonical_environment_is_not_duplicated(self):
        checklist = build_checklist(classify("preview.scriptony.de"), "drive")

        assert checklist.authorized_origins[0] == "https://preview.scriptony.de"
        assert len(checklist.authorized_origins) == 3
        assert len(checklist.redirect_uris) == 3

    def test_checklist_is_read_only(self):
        checklist = build_checklist(classify("localhost:5173"), "drive")

        with pytest.raises(AttributeError):
            checklist.redirect_uris.append("https://attacker.example/callback")
        assert "https://attacker.example/callback" not in checklist.redirect_uris


class TestRenderReport:
    async def test_render_contains_all_sections(self):
        async with _client(_refused) as client:
            report = await run_diagnostics(
                "drive",
                last_error=LastError(code="popup_closed", details="The user closed the popup"),
                environment=classify("localhost:5173"),
                source=StaticCredentialSource({"drive": CLIENT_ID}),
                http_client=client,
            )
        text = render_report(report)

        assert "Local Development" in text
        assert "http://localhost:5173/account?tab=storage" in text
        assert f"Available ({CLIENT_ID[:12]}...)" in text
        assert CLIENT_ID not in text
        assert "Unreachable" in text
        assert "popup_closed" in text
        assert "https://console.cloud.google.com/apis/credentials" in text

    async def test_short_client_id_is_shown_whole(self):
        async with _client(_ok) as client:
            report = await run_diagnostics(
                "drive",
                environment=classify("localhost:5173"),
                source=StaticCredentialSource({"drive": "abc"}),
                http_client=client,
            )
        text = render_report(report)

        assert "Available (abc)" in text
        assert "abc..." not in text


class TestDiagnosticSession:
    """Tests for the run lifecycle."""

    def _session(self, source, client):
        return DiagnosticSession(
            environment=classify("localhost:5173"), source=source, http_client=client
        )

    async def test_run_completes(self):
        async with _client(_ok) as client:
            session = self._session(StaticCredentialSource({"drive": CLIENT_ID}), client)
            assert session.state("drive") is RunState.IDLE

            report = await session.run("drive")

            assert session.state("drive") is RunState.COMPLETE
            assert session.latest("drive") is report

    async def test_duplicate_request_joins_running_run(self):
        source = GatedSource()
        async with _client(_ok) as client:
            session = self._session(source, client)
            first = asyncio.create_task(session.run("drive"))
            second = asyncio.create_task(session.run("drive"))
            await asyncio.sleep(0)
            await asyncio.sleep(0)

            assert session.state("drive") is RunState.RUNNING
            source.gate.set()
            first_report, second_report = await asyncio.gather(first, second)

        assert first_report is second_report
        assert source.calls == 1

    async def test_rerun_replaces_report(self):
        async with _client(_ok) as client:
            session = self._session(StaticCredentialSource({"drive": CLIENT_ID}), client)
            first = await session.run("drive")
            second = await session.run("drive")

            assert first is not second
            assert session.latest("drive") is second
            assert session.state("drive") is RunState.COMPLETE
            assert first.environment == second.environment

    async def test_close_discards_in_flight_run(self):
        source = GatedSource()
        async with _client(_ok) as client:
            session = self._session(source, client)
            pending = asyncio.create_task(session.run("drive"))
            await asyncio.sleep(0)

            await session.close()
            source.gate.set()

            with pytest.raises(SessionClosedError):
                await pending
            assert session.latest("drive") is None
            assert session.state("drive") is RunState.IDLE

    async def test_run_after_close_raises(self):
        async with _client(_ok) as client:
            async with self._session(StaticCredentialSource({}), client) as session:
                await session.run("drive")
            assert session.closed

            with pytest.raises(SessionClosedError):
                await session.run("drive")

    async def test_invalid_feature_leaves_state_idle(self):
        session = DiagnosticSession()
        with pytest.raises(InvalidFeatureKeyError):
            await session.run("not valid")
        assert session.state("not valid") is RunState.IDLE
