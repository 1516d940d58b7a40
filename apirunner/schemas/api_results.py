"""Pydantic schemas for execution results."""

from pydantic import Field, computed_field

from apirunner.schemas.api_assertions import TestResult
from apirunner.schemas.api_collection import CollectionRequest
from apirunner.schemas.api_request import ResponseData
from apirunner.schemas.api_workflow import WorkflowStep
from apirunner.schemas.base import CamelModel


class ExecutionResult(CamelModel):
    """Outcome of a single RequestExecutor call."""
    response: ResponseData
    test_results: TestResult | None = None

    @property
    def success(self) -> bool:
        """Status in [200, 400) and no failing tests."""
        return self.response.is_success and (self.test_results is None or self.test_results.passed)


class RequestRunResult(CamelModel):
    """Outcome of one request inside a collection run."""
    request: CollectionRequest
    response: ResponseData | None = None
    test_results: TestResult | None = None
    error: str | None = None
    success: bool = False


class CollectionRunResult(CamelModel):
    """Aggregate of a collection run."""
    collection_name: str
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    results: list[RequestRunResult] = Field(default_factory=list)
    total_duration: int = 0  # Milliseconds

    @computed_field
    @property
    def success(self) -> bool:
        return self.failed_requests == 0


class StepRunResult(CamelModel):
    """Outcome of one executed workflow step."""
    step: WorkflowStep
    response: ResponseData | None = None
    test_results: TestResult | None = None
    error: str | None = None
    success: bool = False
    captured_variables: dict[str, str] = Field(default_factory=dict)


class WorkflowRunResult(CamelModel):
    """Aggregate of a workflow run. Steps skipped by an early stop are absent."""
    workflow_name: str
    total_steps: int = 0
    completed_steps: int = 0
    failed_steps: int = 0
    steps: list[StepRunResult] = Field(default_factory=list)
    total_duration: int = 0  # Milliseconds
    success: bool = False
