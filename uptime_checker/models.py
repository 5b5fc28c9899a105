from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import timedelta
from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    AnyHttpUrl,
    BaseModel,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from uptime_checker.durations import format_duration, parse_duration
from uptime_checker.query import JqQuery

_HTTP_URL = TypeAdapter(AnyHttpUrl)


@dataclass(frozen=True)
class JobSpec:
    """One version of a job definition. Updates build a new JobSpec."""

    url: str
    method: str
    expected_status: int
    frequency: timedelta
    query: Optional[JqQuery] = None
    id: Optional[int] = None

    def __post_init__(self) -> None:
        if self.frequency <= timedelta(0):
            raise ValueError(f"frequency must be positive, got {format_duration(self.frequency)}")

    def with_id(self, job_id: int) -> JobSpec:
        return replace(self, id=job_id)


class JqQueryConfig(BaseModel):
    query: str = Field(..., min_length=1)
    expectation: str

    @field_validator("query")
    @classmethod
    def _compiles(cls, value: str) -> str:
        JqQuery(value, "")
        return value


class JobConfig(BaseModel):
    url: str = Field(..., min_length=1)
    method: str = "GET"
    expected_status: int = Field(..., ge=100, le=599)
    frequency: timedelta
    jq_query: Optional[JqQueryConfig] = Field(
        default=None,
        validation_alias=AliasChoices("jq_query", "query"),
    )

    @field_validator("url")
    @classmethod
    def _http_url(cls, value: str) -> str:
        try:
            _HTTP_URL.validate_python(value)
        except ValidationError as exc:
            raise ValueError(f"invalid http(s) url {value!r}") from exc
        return value

    @field_validator("frequency", mode="before")
    @classmethod
    def _parse_frequency(cls, value: Any) -> timedelta:
        if not isinstance(value, str):
            raise ValueError("frequency must be a duration string such as '30s' or '2m'")
        return parse_duration(value)

    @field_validator("frequency")
    @classmethod
    def _positive_frequency(cls, value: timedelta) -> timedelta:
        if value <= timedelta(0):
            raise ValueError("frequency must be greater than zero")
        return value

    def to_spec(self) -> JobSpec:
        query = None
        if self.jq_query is not None:
            query = JqQuery(self.jq_query.query, self.jq_query.expectation)
        return JobSpec(
            url=self.url,
            method=self.method,
            expected_status=self.expected_status,
            frequency=self.frequency,
            query=query,
        )


class JobsFile(BaseModel):
    jobs: List[JobConfig] = Field(default_factory=list)
