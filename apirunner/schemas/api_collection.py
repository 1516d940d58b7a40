"""Pydantic schemas for collections."""

from pydantic import Field, JsonValue

from apirunner.schemas.api_assertions import TestAssertion
from apirunner.schemas.api_request import AuthConfig, Method
from apirunner.schemas.base import CamelModel, TextValue


class CollectionSettings(CamelModel):
    """Defaults shared by every request in a collection."""
    base_url: str | None = None
    headers: dict[str, TextValue] = Field(default_factory=dict)  # Default headers for all requests
    auth: AuthConfig | None = None
    variables: dict[str, TextValue] = Field(default_factory=dict)  # Collection scope
    timeout: int | None = Field(None, ge=1, description="Timeout in milliseconds")


class CollectionRequest(CamelModel):
    """One named request inside a collection."""
    id: str | None = None
    name: str = Field(..., min_length=1)
    method: Method = "GET"
    url: str = Field(..., min_length=1)
    headers: dict[str, TextValue] = Field(default_factory=dict)
    params: dict[str, TextValue] = Field(default_factory=dict)
    body: JsonValue = None
    tests: list[TestAssertion] = Field(default_factory=list)


class Collection(CamelModel):
    """Ordered list of requests run one after another."""
    id: str | None = None
    name: str = Field(..., min_length=1)
    description: str | None = None
    requests: list[CollectionRequest] = Field(default_factory=list)
    settings: CollectionSettings | None = None
