"""Pydantic schemas for environments."""

from pydantic import Field

from apirunner.schemas.base import CamelModel, TextValue


class Environment(CamelModel):
    """Named set of variables populating the Environment scope."""
    id: str | None = None
    name: str = Field(..., min_length=1)
    variables: dict[str, TextValue] = Field(default_factory=dict)
