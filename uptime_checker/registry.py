from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass

from uptime_checker.checks.http_check import run_http_check
from uptime_checker.clock import SystemClock
from uptime_checker.durations import format_duration
from uptime_checker.formatting import log_check_result
from uptime_checker.models import JobSpec
from uptime_checker.runner import CheckFn, JobRunner, ResultSink

logger = logging.getLogger(__name__)


class JobNotFoundError(KeyError):
    def __init__(self, job_id: int) -> None:
        super().__init__(job_id)
        self.job_id = job_id

    def __str__(self) -> str:
        return f"job {self.job_id} not found"


@dataclass
class RunningJob:
    spec: JobSpec
    runner: JobRunner


class JobRegistry:
    """Authoritative map of job id -> (spec, runner).

    `_lock` guards the mapping and the per-id hand-off locks and is held only
    briefly, so get(), list() and add() never wait behind a runner hand-off.
    update and delete hold the hand-off lock of their own id while the old
    runner exits, so at most one runner per id is ever live and other ids
    proceed meanwhile. Lock order is hand-off lock, then `_lock`.
    """

    def __init__(
        self,
        check: CheckFn = run_http_check,
        on_result: ResultSink = log_check_result,
        clock: SystemClock | None = None,
    ) -> None:
        self._check = check
        self._on_result = on_result
        self._clock = clock or SystemClock()
        self._jobs: dict[int, RunningJob] = {}
        self._handoff: dict[int, threading.Lock] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def _start_runner(self, spec: JobSpec) -> JobRunner:
        runner = JobRunner(spec, check=self._check, on_result=self._on_result, clock=self._clock)
        runner.start()
        return runner

    @staticmethod
    def _stop_runner(running: RunningJob) -> None:
        running.runner.stop()
        running.runner.join()

    def _handoff_lock(self, job_id: int) -> threading.Lock | None:
        with self._lock:
            return self._handoff.get(job_id)

    def add(self, spec: JobSpec) -> int:
        with self._lock:
            job_id = next(self._ids)
            handoff = self._handoff[job_id] = threading.Lock()

        with handoff:
            spec = spec.with_id(job_id)
            runner = self._start_runner(spec)
            with self._lock:
                self._jobs[job_id] = RunningJob(spec=spec, runner=runner)

        logger.info(
            "Added job %d: %s %s every %s",
            job_id, spec.method, spec.url, format_duration(spec.frequency),
        )
        return job_id

    def update(self, job_id: int, spec: JobSpec) -> JobSpec:
        """Replace a job's spec, handing execution off to a fresh runner. The id is kept."""
        handoff = self._handoff_lock(job_id)
        if handoff is None:
            raise JobNotFoundError(job_id)

        with handoff:
            with self._lock:
                current = self._jobs.get(job_id)
            # deleted while we waited for the hand-off
            if current is None:
                raise JobNotFoundError(job_id)

            spec = spec.with_id(job_id)
            self._stop_runner(current)
            runner = self._start_runner(spec)
            with self._lock:
                self._jobs[job_id] = RunningJob(spec=spec, runner=runner)

        logger.info(
            "Updated job %d: %s %s every %s",
            job_id, spec.method, spec.url, format_duration(spec.frequency),
        )
        return spec

    def delete(self, job_id: int) -> None:
        """Stop and remove a job. Unknown ids are ignored."""
        handoff = self._handoff_lock(job_id)
        running = None
        if handoff is not None:
            with handoff:
                with self._lock:
                    running = self._jobs.pop(job_id, None)
                    self._handoff.pop(job_id, None)
                if running is not None:
                    self._stop_runner(running)

        if running is None:
            logger.debug("Delete of unknown job %d ignored", job_id)
            return
        logger.info("Deleted job %d", job_id)

    def get(self, job_id: int) -> JobSpec:
        with self._lock:
            running = self._jobs.get(job_id)
        if running is None:
            raise JobNotFoundError(job_id)
        return running.spec

    def list(self) -> list[JobSpec]:
        with self._lock:
            return [self._jobs[k].spec for k in sorted(self._jobs)]

    def close(self) -> None:
        """Stop every runner and forget all jobs."""
        with self._lock:
            running = dict(self._jobs)
        # signal all first so in-flight checks wind down in parallel
        for job in running.values():
            job.runner.stop()
        for job_id in running:
            self.delete(job_id)

        if running:
            logger.info("Stopped %d job runner(s)", len(running))
