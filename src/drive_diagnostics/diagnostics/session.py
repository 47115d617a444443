"""
Diagnostic run lifecycle for one invocation context (e.g., an open view).

Each feature moves IDLE -> RUNNING -> COMPLETE and back to IDLE before the
next run starts. A request for a feature that is already RUNNING joins the
in-flight run and receives the same report; it never starts a second one.
Closing the session cancels in-flight runs and discards late results.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, Optional

from ..utils.errors import SessionClosedError
from .credentials import validate_feature_key
from .orchestrator import run_diagnostics
from .report import DiagnosticReport, LastError

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"


class DiagnosticSession:
    """
    Owns the diagnostic runs of one invocation context.

    Keyword arguments are passed on to run_diagnostics() for every run.
    """

    def __init__(self, **run_kwargs: Any) -> None:
        self._run_kwargs = run_kwargs
        self._states: Dict[str, RunState] = {}
        self._runs: Dict[str, "asyncio.Task[DiagnosticReport]"] = {}
        self._reports: Dict[str, DiagnosticReport] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def state(self, feature: str) -> RunState:
        """Get the lifecycle state of a feature's diagnostics."""
        return self._states.get(feature, RunState.IDLE)

    def latest(self, feature: str) -> Optional[DiagnosticReport]:
        """Get the last report handed out for a feature, if any."""
        return self._reports.get(feature)

    async def run(
        self, feature: str, last_error: Optional[LastError] = None
    ) -> DiagnosticReport:
        """
        Run diagnostics for a feature, or join the run already in flight.

        Raises:
            SessionClosedError: If the session is closed before or during the run.
            InvalidFeatureKeyError: If the feature key is malformed.
        """
        if self._closed:
            raise SessionClosedError("Diagnostic session is closed", feature)
        validate_feature_key(feature)

        task = self._runs.get(feature)
        if task is None:
            if self.state(feature) is RunState.COMPLETE:
                self._states[feature] = RunState.IDLE
            self._states[feature] = RunState.RUNNING
            task = asyncio.create_task(self._execute(feature, last_error))
            self._runs[feature] = task
        else:
            logger.debug(f"Diagnostics for '{feature}' already running, joining")

        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if self._closed:
                raise SessionClosedError("Diagnostic session closed during run", feature)
            raise

    async def _execute(
        self, feature: str, last_error: Optional[LastError]
    ) -> DiagnosticReport:
        try:
            report = await run_diagnostics(
                feature, last_error=last_error, **self._run_kwargs
            )
        except BaseException:
            self._states[feature] = RunState.IDLE
            raise
        finally:
            self._runs.pop(feature, None)

        if self._closed:
            logger.debug(f"Discarding late diagnostics result for '{feature}'")
            raise SessionClosedError("Diagnostic session closed during run", feature)

        self._reports[feature] = report
        self._states[feature] = RunState.COMPLETE
        return report

    async def close(self) -> None:
        """Cancel in-flight runs and drop all reports."""
        if self._closed:
            return
        self._closed = True

        tasks = list(self._runs.values())
        for task in tasks:
            task.cancel()
        if tasks:
            logger.info(f"Cancelled {len(tasks)} in-flight diagnostic run(s)")
            await asyncio.gather(*tasks, return_exceptions=True)

        self._runs.clear()
        self._reports.clear()
        self._states.clear()

    async def __aenter__(self) -> "DiagnosticSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
