"""Pydantic schemas for workflows."""

from pydantic import Field, JsonValue

from apirunner.schemas.api_assertions import TestAssertion, VariableExtraction
from apirunner.schemas.api_request import Method
from apirunner.schemas.base import CamelModel, TextValue


class StepRequest(CamelModel):
    """Request part of a workflow step."""
    method: Method = "GET"
    url: str = Field(..., min_length=1)
    headers: dict[str, TextValue] = Field(default_factory=dict)
    params: dict[str, TextValue] = Field(default_factory=dict)
    body: JsonValue = None
    tests: list[TestAssertion] = Field(default_factory=list)


class WorkflowStep(CamelModel):
    """One request plus its captures and its error-continuation policy."""
    name: str = Field(..., min_length=1)
    request: StepRequest
    extract_variables: list[VariableExtraction] = Field(default_factory=list)
    continue_on_error: bool = False


class Workflow(CamelModel):
    """Ordered steps sharing captured variables."""
    name: str = Field(..., min_length=1)
    description: str | None = None
    environment: str | None = None
    steps: list[WorkflowStep] = Field(..., min_length=1)
