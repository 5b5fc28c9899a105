from __future__ import annotations

from pydantic import BaseModel, Field

from uptime_checker.durations import format_duration
from uptime_checker.models import JobSpec


class HealthResponse(BaseModel):
    status: str = Field(description="Health status")


class JqQueryResponse(BaseModel):
    query: str = Field(description="jq expression evaluated against the JSON response body")
    expectation: str = Field(description="Value the first query result must equal")


class JobResponse(BaseModel):
    id: int = Field(ge=1)
    url: str
    method: str
    expected_status: int
    frequency: str = Field(description="Normalized check period, e.g. 2m0s")
    jq_query: JqQueryResponse | None = None

    @classmethod
    def from_spec(cls, spec: JobSpec) -> JobResponse:
        jq_query = None
        if spec.query is not None:
            jq_query = JqQueryResponse(query=spec.query.source, expectation=spec.query.expectation)
        return cls(
            id=spec.id,
            url=spec.url,
            method=spec.method,
            expected_status=spec.expected_status,
            frequency=format_duration(spec.frequency),
            jq_query=jq_query,
        )
