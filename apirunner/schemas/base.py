"""Shared base model and field types for definition files and run results."""

import json
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel


def to_text(value: Any) -> str:
    """Text form of a JSON value written where a string is expected."""
    if isinstance(value, str):
        return value
    return json.dumps(value)


# Variable, header and param values: {"port": 8080} reads as "8080"
TextValue = Annotated[str, BeforeValidator(to_text)]


class CamelModel(BaseModel):
    """Model that reads and writes the camelCase keys used in JSON files.

    snake_case field names are accepted as input too.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """Dump with camelCase keys, dropping unset optional values."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
