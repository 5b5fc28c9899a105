from __future__ import annotations

import logging
from typing import Any, Dict

from uptime_checker.checks.results import CheckResult
from uptime_checker.models import JobSpec

logger = logging.getLogger(__name__)


def check_record(spec: JobSpec, result: CheckResult) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "job_id": spec.id,
        "url": spec.url,
        "method": spec.method,
        "expected_status": spec.expected_status,
        "status": result.status,
    }
    if not result.ok:
        record["reason"] = result.reason.value if result.reason else None
        record["error"] = result.error
    return record


def log_check_result(spec: JobSpec, result: CheckResult) -> None:
    """Default result sink: one `healthcheck-done` log record per completed check."""
    record = check_record(spec, result)
    fields = " ".join(f"{k}={v}" for k, v in record.items())
    level = logging.INFO if result.ok else logging.WARNING
    logger.log(level, "healthcheck-done %s", fields, extra=record)
