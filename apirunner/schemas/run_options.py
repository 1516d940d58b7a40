"""Validated options for the run commands."""

from pydantic import BaseModel, Field, field_validator


class RunOptions(BaseModel):
    """Options shared by `collection run` and `workflow run`.

    Built once at the command-line boundary; the runners never see raw flags.
    """
    file: str = Field(..., min_length=1)
    environment: str | None = None  # Environment name or id
    environments_file: str | None = None
    globals_file: str | None = None
    variables: dict[str, str] = Field(default_factory=dict)  # --var KEY=VALUE, added to the Global scope
    verbose: bool = False

    @field_validator("environment")
    @classmethod
    def blank_environment_is_none(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            return None
        return value

    @classmethod
    def parse_var_pairs(cls, pairs: tuple[str, ...] | list[str]) -> dict[str, str]:
        """Parse KEY=VALUE strings; the value may itself contain '='."""
        variables = {}
        for pair in pairs:
            if "=" not in pair:
                raise ValueError(f"Invalid variable '{pair}', expected KEY=VALUE")
            key, value = pair.split("=", 1)
            key = key.strip()
            if not key:
                raise ValueError(f"Invalid variable '{pair}', name must not be empty")
            variables[key] = value
        return variables
