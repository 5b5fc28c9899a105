from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureReason(str, Enum):
    METHOD_NOT_SUPPORTED = "method_not_supported"
    TRANSPORT_ERROR = "transport_error"
    STATUS_MISMATCH = "status_mismatch"
    BODY_NOT_JSON = "body_not_json"
    QUERY_ERROR = "query_error"
    NO_RESULT = "no_result"
    EXPECTATION_MISMATCH = "expectation_mismatch"


@dataclass
class CheckResult:
    ok: bool
    latency_ms: int
    status_code: int | None = None
    reason: FailureReason | None = None
    error: str | None = None

    @property
    def status(self) -> str:
        return "UP" if self.ok else "DOWN"
