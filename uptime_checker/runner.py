from __future__ import annotations

import logging
import threading
from typing import Callable

from uptime_checker.checks.http_check import run_http_check
from uptime_checker.checks.results import CheckResult
from uptime_checker.clock import SystemClock
from uptime_checker.formatting import log_check_result
from uptime_checker.models import JobSpec

logger = logging.getLogger(__name__)

CheckFn = Callable[[JobSpec], CheckResult]
ResultSink = Callable[[JobSpec, CheckResult], None]


class JobRunner:
    """Runs one job's checks on its own thread, one check per tick, until stopped.

    The first tick fires one period after start(). Ticks are never queued: a
    check that overruns its period delays the next one until it returns, and
    the schedule restarts from that moment.
    """

    def __init__(
        self,
        spec: JobSpec,
        check: CheckFn = run_http_check,
        on_result: ResultSink = log_check_result,
        clock: SystemClock | None = None,
    ) -> None:
        self.spec = spec
        self._check = check
        self._on_result = on_result
        self._clock = clock or SystemClock()
        self._cancelled = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            name=f"job-{spec.id}",
            daemon=True,
        )

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        # Safe to call repeatedly.
        self._cancelled.set()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the loop to exit. An in-flight check is allowed to finish first."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    @property
    def stopped(self) -> bool:
        return self._cancelled.is_set()

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _tick(self) -> None:
        try:
            result = self._check(self.spec)
            self._on_result(self.spec, result)
        except Exception:
            # A failing check or sink must never end the loop.
            logger.exception("Health check error for job %s", self.spec.id)

    def _run(self) -> None:
        period = self.spec.frequency.total_seconds()
        deadline = self._clock.now() + period
        while not self._clock.wait_until(deadline, self._cancelled):
            self._tick()
            deadline += period
            now = self._clock.now()
            if deadline <= now:
                logger.debug("Job %s overran its period; next check runs immediately", self.spec.id)
                deadline = now
        logger.debug("Runner for job %s stopped", self.spec.id)
