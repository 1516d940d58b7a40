"""Pydantic schemas for HTTP requests and responses."""

from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BeforeValidator, ConfigDict, Field, JsonValue, field_validator

from apirunner.schemas.base import CamelModel, TextValue

HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]

AuthType = Literal["none", "bearer", "basic", "apikey", "oauth2", "aws-sigv4", "digest", "custom"]


def _upper(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


# Accepts "get", "Post" etc. from hand-written files
Method = Annotated[HttpMethod, BeforeValidator(_upper)]


class AuthConfig(CamelModel):
    """Authentication descriptor.

    Opaque to the execution engine; only the auth applier interprets it.
    Keys for advanced schemes (oauth2, awsSigV4, digest, custom) are kept as
    extra fields.
    """
    type: AuthType = "none"
    token: str | None = None  # bearer
    username: str | None = None  # basic
    password: str | None = None  # basic
    api_key: str | None = None
    api_key_name: str = "X-API-Key"
    api_key_location: Literal["header", "query"] = "header"

    model_config = ConfigDict(extra="allow")

    @field_validator("type", mode="before")
    @classmethod
    def lower_type(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class RequestOptions(CamelModel):
    """A single HTTP request as handed to the transport."""
    method: Method = "GET"
    url: str = Field(..., min_length=1)
    headers: dict[str, TextValue] = Field(default_factory=dict)
    params: dict[str, TextValue] = Field(default_factory=dict)
    data: JsonValue = None  # Raw string or JSON-like body
    timeout: int | None = Field(None, ge=1, description="Timeout in milliseconds")
    auth: AuthConfig | None = None
    follow_redirects: bool = True
    verify_ssl: bool = Field(
        True,
        validation_alias=AliasChoices("verify_ssl", "verifySsl", "rejectUnauthorized"),
    )
    max_redirects: int | None = Field(None, ge=0)


class ResponseData(CamelModel):
    """Completed HTTP response. Never mutated once produced."""
    status: int
    status_text: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    data: Any = None  # Parsed JSON when the body is JSON, text otherwise
    duration: int = 0  # Milliseconds

    model_config = ConfigDict(frozen=True)

    @property
    def is_success(self) -> bool:
        """Status in the 2xx/3xx range."""
        return 200 <= self.status < 400
