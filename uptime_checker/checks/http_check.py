from __future__ import annotations

import time
from typing import Any

import requests

from uptime_checker.checks.results import CheckResult, FailureReason
from uptime_checker.config import settings
from uptime_checker.models import JobSpec
from uptime_checker.query import NO_RESULT, DocumentQuery, first_result, render_value

SUPPORTED_METHODS = frozenset({"GET"})


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def _check_body(query: DocumentQuery, response: Any) -> tuple[FailureReason, str] | None:
    try:
        document = response.json()
    except ValueError as e:
        return FailureReason.BODY_NOT_JSON, f"response body is not JSON: {e}"

    try:
        value = first_result(query, document)
    except ValueError as e:
        return FailureReason.QUERY_ERROR, f"query {query.source!r} failed: {e}"

    if value is NO_RESULT:
        return FailureReason.NO_RESULT, f"query {query.source!r} returned no result"

    observed = render_value(value)
    if observed != query.expectation:
        return (
            FailureReason.EXPECTATION_MISMATCH,
            f"query {query.source!r}: expected {query.expectation!r}, got {observed!r}",
        )
    return None


def run_http_check(spec: JobSpec, timeout_s: float | None = None) -> CheckResult:
    """Probe spec.url once and decide UP/DOWN. Never raises."""
    timeout = settings.CHECK_TIMEOUT_SECONDS if timeout_s is None else timeout_s
    start = time.perf_counter()

    if spec.method not in SUPPORTED_METHODS:
        return CheckResult(
            ok=False,
            latency_ms=0,
            reason=FailureReason.METHOD_NOT_SUPPORTED,
            error=f"method {spec.method} not supported",
        )

    try:
        r = requests.get(spec.url, headers={"Accept": "application/json"}, timeout=timeout)
    except requests.RequestException as e:
        return CheckResult(
            ok=False,
            latency_ms=_elapsed_ms(start),
            reason=FailureReason.TRANSPORT_ERROR,
            error=str(e),
        )

    latency_ms = _elapsed_ms(start)
    if r.status_code != spec.expected_status:
        return CheckResult(
            ok=False,
            latency_ms=latency_ms,
            status_code=r.status_code,
            reason=FailureReason.STATUS_MISMATCH,
            error=f"unexpected status code, {r.status_code} != {spec.expected_status}",
        )

    if spec.query is not None:
        failure = _check_body(spec.query, r)
        if failure is not None:
            reason, error = failure
            return CheckResult(
                ok=False,
                latency_ms=latency_ms,
                status_code=r.status_code,
                reason=reason,
                error=error,
            )

    return CheckResult(ok=True, latency_ms=latency_ms, status_code=r.status_code)
