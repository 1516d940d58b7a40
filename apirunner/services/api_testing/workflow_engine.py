"""Workflow execution: ordered steps with variable capture between them."""

import json
import logging
import time
from typing import Any, Callable

from apirunner.schemas.api_request import RequestOptions
from apirunner.schemas.api_results import StepRunResult, WorkflowRunResult
from apirunner.schemas.api_workflow import Workflow, WorkflowStep
from apirunner.services.api_testing.json_path import MISSING, extract_json_path
from apirunner.services.api_testing.request_executor import RequestExecutor

logger = logging.getLogger(__name__)


class WorkflowEngine:
    """
    Executes workflow steps in order, feeding captured variables forward.

    Each step sees the variables captured by earlier steps as its Local
    scope. A failed step stops the run unless it sets ``continueOnError``.

    The captured-variable map belongs to this instance; use one engine per
    concurrent run.
    """

    def __init__(
        self,
        request_executor: RequestExecutor,
        on_step_start: Callable[[int, int, WorkflowStep], None] | None = None,
        on_step_complete: Callable[[int, int, StepRunResult], None] | None = None,
    ):
        self.request_executor = request_executor
        self.on_step_start = on_step_start
        self.on_step_complete = on_step_complete
        self._workflow_variables: dict[str, str] = {}

    async def execute_workflow(
        self,
        workflow: Workflow,
        environment_name: str | None = None,
        global_variables: dict[str, str] | None = None,
    ) -> WorkflowRunResult:
        """
        Execute a workflow.

        Args:
            workflow: Validated workflow definition
            environment_name: Overrides the workflow's own environment
            global_variables: Global scope

        Returns:
            WorkflowRunResult; steps never reached are absent from ``steps``
        """
        start_time = time.perf_counter()
        total = len(workflow.steps)
        result = WorkflowRunResult(workflow_name=workflow.name, total_steps=total)
        environment = environment_name or workflow.environment or None

        logger.info("Running workflow '%s' (%d steps)", workflow.name, total)

        self._workflow_variables.clear()

        for index, step in enumerate(workflow.steps):
            if self.on_step_start:
                self.on_step_start(index, total, step)

            try:
                step_result = await self.execute_step(step, environment, global_variables)
            except Exception as e:
                logger.error("Step '%s' failed: %s", step.name, e)
                step_result = StepRunResult(step=step, success=False, error=str(e))

            result.steps.append(step_result)
            if step_result.success:
                result.completed_steps += 1
            else:
                result.failed_steps += 1

            if self.on_step_complete:
                self.on_step_complete(index, total, step_result)

            if not step_result.success and not step.continue_on_error:
                logger.warning("Workflow '%s' stopped at step '%s'", workflow.name, step.name)
                break

        result.total_duration = int((time.perf_counter() - start_time) * 1000)
        result.success = result.failed_steps == 0
        logger.info(
            "Workflow '%s' finished: %d completed, %d failed in %dms",
            workflow.name,
            result.completed_steps,
            result.failed_steps,
            result.total_duration,
        )
        return result

    async def execute_step(
        self,
        step: WorkflowStep,
        environment_name: str | None = None,
        global_variables: dict[str, str] | None = None,
    ) -> StepRunResult:
        """Execute one step and capture its declared variables."""
        options = RequestOptions(
            method=step.request.method,
            url=step.request.url,
            headers=step.request.headers,
            params=step.request.params,
            data=step.request.body,
        )

        execution = await self.request_executor.execute_request(
            options,
            environment_name=environment_name,
            tests=step.request.tests,
            global_variables=global_variables,
            collection_variables=None,
            # Snapshot, so this step's captures only reach later steps
            local_variables=dict(self._workflow_variables),
        )

        captured: dict[str, str] = {}
        for extraction in step.extract_variables:
            value = extract_json_path(execution.response.data, extraction.path, default=MISSING)
            if value is MISSING:
                logger.warning(
                    "Failed to extract variable '%s' from path '%s'",
                    extraction.name,
                    extraction.path,
                )
                continue

            # Every capture is reported; only workflow captures reach later steps
            captured[extraction.name] = stringify(value)
            if extraction.scope == "workflow":
                self._workflow_variables[extraction.name] = captured[extraction.name]

        return StepRunResult(
            step=step,
            response=execution.response,
            test_results=execution.test_results,
            success=execution.success,
            captured_variables=captured,
        )

    def get_workflow_variables(self) -> dict[str, str]:
        """Variables captured so far in the current (or last) run."""
        return dict(self._workflow_variables)

    def clear_workflow_variables(self) -> None:
        self._workflow_variables.clear()


def stringify(value: Any) -> str:
    """String form of an extracted value as stored in a variable."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    return json.dumps(value)
