"""
Unit tests for WorkflowEngine capture, continue-on-error and isolation.
"""

import pytest

from apirunner.errors import TransportError
from apirunner.schemas.api_workflow import Workflow
from apirunner.services.api_testing.request_executor import RequestExecutor
from apirunner.services.api_testing.workflow_engine import WorkflowEngine, stringify
from tests.conftest import FakeTransport, make_response


def workflow(steps, **extra):
    return Workflow.model_validate({"name": "User flow", "steps": steps, **extra})


def step(name, url, method="GET", extract=None, continue_on_error=False, tests=None, body=None):
    data = {
        "name": name,
        "request": {"method": method, "url": url},
        "continueOnError": continue_on_error,
    }
    if extract:
        data["extractVariables"] = extract
    if tests:
        data["request"]["tests"] = tests
    if body is not None:
        data["request"]["body"] = body
    return data


def routed(routes):
    """Transport handler answering by URL; unknown URLs get 404."""

    def handler(options):
        answer = routes.get(options.url)
        if answer is None:
            return make_response(status=404, status_text="Not Found", data={"error": "not found"})
        if isinstance(answer, Exception):
            raise answer
        return answer

    return handler


class TestVariableCapture:
    """Tests for extracting variables and feeding them forward."""

    @pytest.mark.asyncio
    async def test_capture_feeds_next_step(self, environments):
        transport = FakeTransport(
            routed(
                {
                    "https://api.test/users": make_response(status=201, data={"id": 42}),
                    "https://api.test/users/42": make_response(data={"name": "Ada"}),
                }
            )
        )
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow(
            [
                step("Create", "https://api.test/users", "POST", extract=[{"name": "userId", "path": "id", "scope": "workflow"}]),
                step("Fetch", "https://api.test/users/{{userId}}"),
            ]
        )

        result = await engine.execute_workflow(wf)

        assert transport.sent[1].url == "https://api.test/users/42"
        assert result.success
        assert result.completed_steps == 2
        assert result.steps[0].captured_variables == {"userId": "42"}
        assert engine.get_workflow_variables() == {"userId": "42"}

    @pytest.mark.asyncio
    async def test_capture_used_in_body(self, environments):
        transport = FakeTransport(routed({"http://x.test/token": make_response(data={"auth": {"token": "abc"}}),
                                          "http://x.test/items": make_response(status=201)}))
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow(
            [
                step("Login", "http://x.test/token", extract=[{"name": "token", "path": "auth.token"}]),
                step("Create", "http://x.test/items", "POST", body={"token": "{{token}}"}),
            ]
        )

        await engine.execute_workflow(wf)

        assert transport.sent[1].data == {"token": "abc"}

    @pytest.mark.asyncio
    async def test_captures_not_visible_to_same_step(self, environments):
        """Test a step's own captures only reach later steps."""
        transport = FakeTransport(lambda options: make_response(data={"id": 1}))
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow([step("One", "http://x.test/{{id}}", extract=[{"name": "id", "path": "id"}])])

        await engine.execute_workflow(wf)

        assert transport.sent[0].url == "http://x.test/{{id}}"

    @pytest.mark.asyncio
    async def test_missing_path_skipped_with_warning(self, environments, caplog):
        transport = FakeTransport(lambda options: make_response(data={"id": 1}))
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow([step("One", "http://x.test", extract=[{"name": "nope", "path": "missing.key"}])])

        result = await engine.execute_workflow(wf)

        assert result.success
        assert result.steps[0].captured_variables == {}
        assert "Failed to extract variable 'nope'" in caplog.text

    @pytest.mark.asyncio
    async def test_null_value_captured(self, environments, caplog):
        transport = FakeTransport(lambda options: make_response(data={"next": None}))
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow(
            [
                step("Page", "http://x.test/page", extract=[{"name": "cursor", "path": "next"}]),
                step("Next", "http://x.test/page?cursor={{cursor}}"),
            ]
        )

        result = await engine.execute_workflow(wf)

        assert result.steps[0].captured_variables == {"cursor": "null"}
        assert transport.sent[1].url == "http://x.test/page?cursor=null"
        assert "Failed to extract" not in caplog.text

    @pytest.mark.asyncio
    async def test_non_workflow_scope_not_stored(self, environments):
        transport = FakeTransport(lambda options: make_response(data={"id": 5}))
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow(
            [
                step("One", "http://x.test/one", extract=[{"name": "envId", "path": "id", "scope": "environment"}]),
                step("Two", "http://x.test/{{envId}}"),
            ]
        )

        result = await engine.execute_workflow(wf)

        assert result.steps[0].captured_variables == {"envId": "5"}
        assert engine.get_workflow_variables() == {}
        assert transport.sent[1].url == "http://x.test/{{envId}}"

    @pytest.mark.asyncio
    async def test_captured_map_cleared_each_run(self, environments):
        transport = FakeTransport(lambda options: make_response(data={"id": 1}))
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        first = workflow([step("One", "http://x.test", extract=[{"name": "id", "path": "id"}])])
        second = workflow([step("Two", "http://x.test/{{id}}")])

        await engine.execute_workflow(first)
        await engine.execute_workflow(second)

        assert transport.sent[1].url == "http://x.test/{{id}}"

    @pytest.mark.asyncio
    async def test_clear_workflow_variables(self, environments):
        engine = WorkflowEngine(RequestExecutor(FakeTransport(lambda options: make_response(data={"id": 7})), environments))
        await engine.execute_workflow(workflow([step("One", "http://x.test", extract=[{"name": "id", "path": "id"}])]))
        assert engine.get_workflow_variables() == {"id": "7"}

        engine.clear_workflow_variables()

        assert engine.get_workflow_variables() == {}

    @pytest.mark.asyncio
    async def test_workflow_environment_used(self, environments):
        transport = FakeTransport()
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow([step("One", "{{baseUrl}}/health")], environment="staging")

        await engine.execute_workflow(wf)
        await engine.execute_workflow(wf, environment_name="production")

        assert transport.sent[0].url == "https://staging.example.com/health"
        assert transport.sent[1].url == "https://api.example.com/health"


class TestContinueOnError:
    """Tests for the stop/continue policy."""

    @pytest.mark.asyncio
    async def test_failed_step_stops_run(self, environments):
        transport = FakeTransport(routed({"http://x.test/two": make_response()}))
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow([step("One", "http://x.test/one"), step("Two", "http://x.test/two")])

        result = await engine.execute_workflow(wf)

        assert not result.success
        assert [s.step.name for s in result.steps] == ["One"]
        assert len(transport.sent) == 1
        assert result.failed_steps == 1
        assert result.total_steps == 2

    @pytest.mark.asyncio
    async def test_continue_on_error_runs_next_step(self, environments):
        transport = FakeTransport(
            routed(
                {
                    "http://x.test/login": make_response(data={"token": "t1"}),
                    "http://x.test/two?t=t1": make_response(),
                }
            )
        )
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow(
            [
                step("Login", "http://x.test/login", extract=[{"name": "token", "path": "token"}]),
                step("Broken", "http://x.test/one", continue_on_error=True),
                step("Two", "http://x.test/two?t={{token}}"),
            ]
        )

        result = await engine.execute_workflow(wf)

        assert [s.step.name for s in result.steps] == ["Login", "Broken", "Two"]
        assert [s.success for s in result.steps] == [True, False, True]
        assert transport.sent[2].url == "http://x.test/two?t=t1"
        assert result.completed_steps == 2
        assert result.failed_steps == 1
        assert not result.success

    @pytest.mark.asyncio
    async def test_continue_after_first_step_fails_with_no_captures(self, environments):
        transport = FakeTransport(routed({"http://x.test/{{userId}}": make_response()}))
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow(
            [
                step("One", "http://x.test/one", extract=[{"name": "userId", "path": "id"}], continue_on_error=True),
                step("Two", "http://x.test/{{userId}}"),
            ]
        )

        result = await engine.execute_workflow(wf)

        assert transport.sent[1].url == "http://x.test/{{userId}}"
        assert [s.success for s in result.steps] == [False, True]

    @pytest.mark.asyncio
    async def test_exception_treated_as_failure(self, environments):
        transport = FakeTransport(routed({"http://x.test/one": TransportError("No response received: timeout")}))
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow([step("One", "http://x.test/one"), step("Two", "http://x.test/two")])

        result = await engine.execute_workflow(wf)

        assert len(result.steps) == 1
        assert result.steps[0].error == "No response received: timeout"
        assert result.steps[0].response is None
        assert not result.success

    @pytest.mark.asyncio
    async def test_exception_with_continue_on_error(self, environments):
        transport = FakeTransport(
            routed(
                {
                    "http://x.test/one": TransportError("No response received: timeout"),
                    "http://x.test/two": make_response(),
                }
            )
        )
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow([step("One", "http://x.test/one", continue_on_error=True), step("Two", "http://x.test/two")])

        result = await engine.execute_workflow(wf)

        assert [s.success for s in result.steps] == [False, True]
        assert result.failed_steps == 1

    @pytest.mark.asyncio
    async def test_failed_tests_fail_the_step(self, environments):
        transport = FakeTransport(lambda options: make_response(data={"ok": False}))
        engine = WorkflowEngine(RequestExecutor(transport, environments))
        wf = workflow(
            [
                step("Check", "http://x.test", tests=[{"name": "ok", "assertion": "data.ok", "expected": True}]),
                step("Never", "http://x.test/never"),
            ]
        )

        result = await engine.execute_workflow(wf)

        assert len(result.steps) == 1
        assert result.steps[0].test_results.passed is False
        assert not result.success


class TestStringify:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("abc", "abc"),
            (42, "42"),
            (True, "true"),
            (False, "false"),
            ({"a": 1}, '{"a":1}'),
            ([1, 2], "[1,2]"),
            (None, "null"),
        ],
    )
    def test_stringify(self, value, expected):
        assert stringify(value) == expected
