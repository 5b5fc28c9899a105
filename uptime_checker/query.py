from __future__ import annotations

import json
from typing import Any, Iterator, Protocol

import jq

# Returned by first_result() when a query yields nothing.
NO_RESULT = object()


class DocumentQuery(Protocol):
    """Evaluates an expression against a decoded JSON document.

    Implementations yield results lazily; callers usually only need the first.
    """

    source: str
    expectation: str

    def evaluate(self, document: Any) -> Iterator[Any]:
        ...


class JqQuery:
    def __init__(self, source: str, expectation: str) -> None:
        try:
            self._program = jq.compile(source)
        except ValueError as exc:
            raise ValueError(f"invalid jq query {source!r}: {exc}") from exc
        self.source = source
        self.expectation = expectation

    def evaluate(self, document: Any) -> Iterator[Any]:
        return iter(self._program.input_value(document))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JqQuery):
            return NotImplemented
        return (self.source, self.expectation) == (other.source, other.expectation)

    def __hash__(self) -> int:
        return hash((self.source, self.expectation))

    def __repr__(self) -> str:
        return f"JqQuery({self.source!r}, expectation={self.expectation!r})"


def first_result(query: DocumentQuery, document: Any) -> Any:
    """First value yielded by the query, or NO_RESULT. Evaluation errors raise ValueError."""
    return next(iter(query.evaluate(document)), NO_RESULT)


def render_value(value: Any) -> str:
    # Strings compare as-is; everything else by its compact JSON text.
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))
