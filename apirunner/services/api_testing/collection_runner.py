"""Sequential execution of every request in a collection."""

import logging
import time
from typing import Callable

from apirunner.schemas.api_collection import Collection, CollectionRequest
from apirunner.schemas.api_request import RequestOptions
from apirunner.schemas.api_results import CollectionRunResult, RequestRunResult
from apirunner.services.api_testing.request_executor import RequestExecutor

logger = logging.getLogger(__name__)


class CollectionRunner:
    """
    Runs a collection's requests in order, one at a time.

    A failing or raising request never stops the run; every request is
    executed and counted.
    """

    def __init__(
        self,
        request_executor: RequestExecutor,
        on_request_start: Callable[[int, int, CollectionRequest], None] | None = None,
        on_request_complete: Callable[[int, int, RequestRunResult], None] | None = None,
    ):
        """
        Args:
            request_executor: Executor shared by every request of the run
            on_request_start: Called with (index, total, request) before each request
            on_request_complete: Called with (index, total, result) after each request
        """
        self.request_executor = request_executor
        self.on_request_start = on_request_start
        self.on_request_complete = on_request_complete

    async def run_collection(
        self,
        collection: Collection,
        environment_name: str | None = None,
        global_variables: dict[str, str] | None = None,
    ) -> CollectionRunResult:
        """
        Run all requests in a collection.

        Args:
            collection: Collection to run
            environment_name: Environment for the Environment scope
            global_variables: Global scope

        Returns:
            CollectionRunResult with per-request results and counts
        """
        start_time = time.perf_counter()
        total = len(collection.requests)
        result = CollectionRunResult(collection_name=collection.name, total_requests=total)

        logger.info("Running collection '%s' (%d requests)", collection.name, total)

        for index, request in enumerate(collection.requests):
            if self.on_request_start:
                self.on_request_start(index, total, request)

            try:
                run_result = await self.run_request(request, collection, environment_name, global_variables)
            except Exception as e:
                logger.error("Request '%s' failed: %s", request.name, e)
                run_result = RequestRunResult(request=request, success=False, error=str(e))

            result.results.append(run_result)
            if run_result.success:
                result.successful_requests += 1
            else:
                result.failed_requests += 1

            if self.on_request_complete:
                self.on_request_complete(index, total, run_result)

        result.total_duration = int((time.perf_counter() - start_time) * 1000)
        logger.info(
            "Collection '%s' finished: %d successful, %d failed in %dms",
            collection.name,
            result.successful_requests,
            result.failed_requests,
            result.total_duration,
        )
        return result

    async def run_request(
        self,
        request: CollectionRequest,
        collection: Collection,
        environment_name: str | None = None,
        global_variables: dict[str, str] | None = None,
    ) -> RequestRunResult:
        """Run one request with the collection's defaults applied."""
        settings = collection.settings

        options = RequestOptions(
            method=request.method,
            url=build_url(request.url, settings.base_url if settings else None),
            # Request headers override collection defaults
            headers={**(settings.headers if settings else {}), **request.headers},
            params=request.params,
            data=request.body,
            timeout=settings.timeout if settings else None,
            auth=settings.auth if settings else None,
        )

        execution = await self.request_executor.execute_request(
            options,
            environment_name=environment_name,
            tests=request.tests,
            global_variables=global_variables,
            collection_variables=settings.variables if settings else None,
        )

        return RequestRunResult(
            request=request,
            response=execution.response,
            test_results=execution.test_results,
            success=execution.success,
        )


def build_url(url: str, base_url: str | None) -> str:
    """Prefix a relative URL with the collection base URL."""
    if not base_url or url.startswith("http"):
        return url
    return base_url + ("" if url.startswith("/") else "/") + url
