"""Pydantic schemas for test assertions and variable extraction."""

from typing import Any, Literal

from pydantic import Field, JsonValue

from apirunner.schemas.base import CamelModel


class TestAssertion(CamelModel):
    """Expected value at a response path, plus its outcome once evaluated.

    Paths: status, statusText, headers.<name>, data.<a>.<b>, duration.
    """
    __test__ = False

    name: str
    assertion: str = Field(..., description="Response path, e.g. data.user.id")
    expected: JsonValue = None
    actual: Any = None
    passed: bool | None = None


class TestResult(CamelModel):
    """Aggregate of one evaluation pass over a list of assertions."""
    __test__ = False

    name: str = "API Tests"
    passed: bool
    assertions: list[TestAssertion] = Field(default_factory=list)
    duration: int = 0  # Milliseconds

    @property
    def passed_count(self) -> int:
        return sum(1 for a in self.assertions if a.passed)


class VariableExtraction(CamelModel):
    """Capture of a response body value into a named variable."""
    name: str = Field(..., min_length=1, max_length=100)
    path: str = Field(..., description="Path into the response body, e.g. data.items[0].id")
    # Only "workflow" captures are stored; the others are accepted but not persisted
    scope: Literal["workflow", "environment", "global"] = "workflow"
