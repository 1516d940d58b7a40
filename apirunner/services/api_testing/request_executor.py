"""Single request execution: resolve, send, assert, record."""

import logging

from apirunner.schemas.api_assertions import TestAssertion, TestResult
from apirunner.schemas.api_request import RequestOptions
from apirunner.schemas.api_results import ExecutionResult
from apirunner.services.api_testing.collaborators import (
    AuthApplier,
    EnvironmentLookup,
    HistorySink,
    HTTPTransport,
)
from apirunner.services.api_testing.history import NullHistory
from apirunner.services.api_testing.test_runner import TestRunner
from apirunner.services.api_testing.variable_resolver import VariableResolver, VariableScope

logger = logging.getLogger(__name__)


class RequestExecutor:
    """
    Runs one request through the full pipeline.

    1. Load Global, Environment, Collection and Local scopes into a fresh
       VariableResolver
    2. Apply auth, then resolve URL, headers, params and body
    3. Send through the HTTP transport
    4. Run test assertions (if any)
    5. Record to history (failures are only logged)

    Only a transport failure raises. Status codes and failed assertions are
    reported in the result.
    """

    def __init__(
        self,
        http_client: HTTPTransport,
        environments: EnvironmentLookup | None = None,
        history: HistorySink | None = None,
        test_runner: TestRunner | None = None,
        auth_applier: AuthApplier | None = None,
    ):
        self.http_client = http_client
        self.environments = environments
        self.history = history or NullHistory()
        self.test_runner = test_runner or TestRunner()
        self.auth_applier = auth_applier

    async def execute_request(
        self,
        options: RequestOptions,
        environment_name: str | None = None,
        tests: list[TestAssertion] | None = None,
        global_variables: dict[str, str] | None = None,
        collection_variables: dict[str, str] | None = None,
        local_variables: dict[str, str] | None = None,
    ) -> ExecutionResult:
        """
        Execute a request with all variable scopes applied.

        Args:
            options: Request as written, possibly containing {{variables}}
            environment_name: Environment whose variables fill the Environment scope
            tests: Assertions to run against the response
            global_variables: Global scope
            collection_variables: Collection scope
            local_variables: Local scope (workflow captures)

        Returns:
            ExecutionResult with the response and optional test results

        Raises:
            TransportError: no response could be obtained
        """
        logger.debug("Starting request execution: %s %s", options.method, options.url)

        resolver = self.build_resolver(
            environment_name=environment_name,
            global_variables=global_variables,
            collection_variables=collection_variables,
            local_variables=local_variables,
        )
        resolved_options = self.resolve_options(options, resolver)

        logger.debug("Executing HTTP request: %s %s", resolved_options.method, resolved_options.url)
        response = await self.http_client.send(resolved_options)
        logger.info("Request completed: status=%s duration=%sms", response.status, response.duration)

        test_results: TestResult | None = None
        if tests:
            logger.debug("Running %d test assertion(s)", len(tests))
            test_results = self.test_runner.run_tests(tests, response)
            logger.info(
                "Tests completed: passed=%s total=%d",
                test_results.passed,
                len(test_results.assertions),
            )

        try:
            self.history.record(resolved_options, response)
        except Exception as e:
            # History errors are logged, never raised
            logger.warning("Failed to log request to history: %s", e)

        return ExecutionResult(response=response, test_results=test_results)

    def build_resolver(
        self,
        environment_name: str | None = None,
        global_variables: dict[str, str] | None = None,
        collection_variables: dict[str, str] | None = None,
        local_variables: dict[str, str] | None = None,
    ) -> VariableResolver:
        """Create a resolver holding this request's scopes."""
        resolver = VariableResolver()

        if global_variables:
            resolver.set_scope(VariableScope.GLOBAL, global_variables)
            logger.debug("Global variables loaded: %d", len(global_variables))

        if environment_name:
            environment = self.environments.get_by_name(environment_name) if self.environments else None
            if environment:
                resolver.set_scope(VariableScope.ENVIRONMENT, environment.variables)
                logger.debug(
                    "Environment variables loaded: %s (%d)",
                    environment.name,
                    len(environment.variables),
                )
            else:
                logger.warning("Environment '%s' not found", environment_name)

        if collection_variables:
            resolver.set_scope(VariableScope.COLLECTION, collection_variables)
            logger.debug("Collection variables loaded: %d", len(collection_variables))

        if local_variables:
            resolver.set_scope(VariableScope.LOCAL, local_variables)
            logger.debug("Local variables loaded: %d", len(local_variables))

        return resolver

    def resolve_options(self, options: RequestOptions, resolver: VariableResolver) -> RequestOptions:
        """Return a copy of ``options`` with auth applied and variables resolved."""
        headers = dict(options.headers)
        params = dict(options.params)

        if options.auth and self.auth_applier:
            self.auth_applier.apply(options.auth, options.method, options.url, headers, params, options.data)

        if isinstance(options.data, str):
            data = resolver.resolve(options.data)
        else:
            data = resolver.resolve_object(options.data)

        return options.model_copy(
            update={
                "url": resolver.resolve(options.url),
                "headers": resolver.resolve_dict(headers),
                "params": resolver.resolve_dict(params),
                "data": data,
            }
        )
