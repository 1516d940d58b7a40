"""API testing services: variable resolution and sequential execution."""

from apirunner.services.api_testing.collection_runner import CollectionRunner
from apirunner.services.api_testing.http_client import APIHttpClient
from apirunner.services.api_testing.request_executor import RequestExecutor
from apirunner.services.api_testing.test_runner import TestRunner
from apirunner.services.api_testing.variable_resolver import VariableResolver, VariableScope
from apirunner.services.api_testing.workflow_engine import WorkflowEngine

__all__ = [
    "APIHttpClient",
    "CollectionRunner",
    "RequestExecutor",
    "TestRunner",
    "VariableResolver",
    "VariableScope",
    "WorkflowEngine",
]
