"""Shared fixtures for apirunner tests.

The HTTP transport is replaced by FakeTransport, which records every
request it receives and answers through a handler function.
"""

from typing import Callable

import pytest

from apirunner.schemas.api_environment import Environment
from apirunner.schemas.api_request import RequestOptions, ResponseData
from apirunner.services.api_testing.environments import StaticEnvironmentLookup
from apirunner.services.api_testing.history import InMemoryHistory
from apirunner.services.api_testing.request_executor import RequestExecutor


def make_response(status: int = 200, data=None, headers=None, status_text: str = "OK", duration: int = 12):
    return ResponseData(
        status=status,
        status_text=status_text,
        headers=headers or {"content-type": "application/json"},
        data=data,
        duration=duration,
    )


class FakeTransport:
    """HTTP transport double; ``handler`` returns a ResponseData or raises."""

    def __init__(self, handler: Callable[[RequestOptions], ResponseData] | None = None):
        self.handler = handler or (lambda options: make_response())
        self.sent: list[RequestOptions] = []

    async def send(self, options: RequestOptions) -> ResponseData:
        self.sent.append(options)
        return self.handler(options)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def environments():
    return StaticEnvironmentLookup(
        [
            Environment(id="env-1", name="staging", variables={"baseUrl": "https://staging.example.com", "apiKey": "stg"}),
            Environment(id="env-2", name="production", variables={"baseUrl": "https://api.example.com"}),
        ]
    )


@pytest.fixture
def history():
    return InMemoryHistory()


@pytest.fixture
def executor(transport, environments, history):
    return RequestExecutor(http_client=transport, environments=environments, history=history)
