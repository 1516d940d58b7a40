"""Interfaces of the collaborators the execution engine depends on."""

from typing import Any, Protocol

from apirunner.schemas.api_environment import Environment
from apirunner.schemas.api_request import AuthConfig, RequestOptions, ResponseData


class HTTPTransport(Protocol):
    """Sends one request. Raises only when no response was obtainable."""

    async def send(self, options: RequestOptions) -> ResponseData: ...


class EnvironmentLookup(Protocol):
    """Finds an environment by name (or id); None when it does not exist."""

    def get_by_name(self, name: str) -> Environment | None: ...


class HistorySink(Protocol):
    """Receives every resolved request and its response."""

    def record(self, request: RequestOptions, response: ResponseData) -> None: ...


class AuthApplier(Protocol):
    """Adds credentials for ``auth`` to the in-flight headers and params."""

    def apply(
        self,
        auth: AuthConfig,
        method: str,
        url: str,
        headers: dict[str, str],
        params: dict[str, str],
        body: Any = None,
    ) -> None: ...
