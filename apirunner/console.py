"""Console rendering of run progress and summaries."""

from rich.console import Console
from rich.markup import escape

from apirunner.schemas.api_collection import CollectionRequest
from apirunner.schemas.api_results import (
    CollectionRunResult,
    RequestRunResult,
    StepRunResult,
    WorkflowRunResult,
)
from apirunner.schemas.api_workflow import WorkflowStep

console = Console()


def _print_outcome(response, test_results, error: str | None, success: bool) -> None:
    if response is not None:
        color = "green" if success else "red"
        mark = "✓" if success else "✗"
        console.print(
            f"  [{color}]{mark} {response.status} {response.status_text} ({response.duration}ms)[/{color}]"
        )
    else:
        console.print(f"  [red]✗ Error: {escape(error or 'Request failed')}[/red]")

    if test_results:
        passed = test_results.passed_count
        total = len(test_results.assertions)
        if test_results.passed:
            console.print(f"  [green]✓ Tests: {passed}/{total} passed[/green]")
        else:
            console.print(f"  [red]✗ Tests: {passed}/{total} passed[/red]")
            for assertion in test_results.assertions:
                if not assertion.passed:
                    console.print(
                        f"    [red]✗ {escape(assertion.name)}[/red] "
                        f"[dim](expected {escape(repr(assertion.expected))}, got {escape(repr(assertion.actual))})[/dim]"
                    )


def print_request_start(index: int, total: int, request: CollectionRequest) -> None:
    console.print(f"[dim][{index + 1}/{total}][/dim] [cyan]{request.method} {escape(request.name)}[/cyan]")


def print_request_complete(index: int, total: int, result: RequestRunResult) -> None:
    _print_outcome(result.response, result.test_results, result.error, result.success)
    console.print()


def print_step_start(index: int, total: int, step: WorkflowStep) -> None:
    console.print(f"[dim][{index + 1}/{total}][/dim] [cyan]{escape(step.name)}[/cyan]")


def print_step_complete(index: int, total: int, result: StepRunResult) -> None:
    _print_outcome(result.response, result.test_results, result.error, result.success)
    if result.captured_variables:
        console.print(f"  [yellow]Captured {len(result.captured_variables)} variable(s)[/yellow]")
        for name, value in result.captured_variables.items():
            shown = value if len(value) <= 50 else value[:50] + "..."
            console.print(f"     [dim]{escape(name)}: {escape(shown)}[/dim]")
    if not result.success and not result.step.continue_on_error:
        console.print("\n  [yellow]⚠ Workflow stopped due to error[/yellow]")
    console.print()


def print_collection_summary(result: CollectionRunResult) -> None:
    console.print("[bold]" + "═" * 60 + "[/bold]")
    console.print("[bold]Collection Run Summary:[/bold]")
    console.print(f"  [dim]Collection: {escape(result.collection_name)}[/dim]")
    console.print(f"  [dim]Total Requests: {result.total_requests}[/dim]")
    console.print(f"  [green]Successful: {result.successful_requests}[/green]")
    if result.failed_requests:
        console.print(f"  [red]Failed: {result.failed_requests}[/red]")
    console.print(f"  [dim]Total Duration: {result.total_duration}ms[/dim]")
    console.print("[bold]" + "═" * 60 + "[/bold]")


def print_workflow_summary(result: WorkflowRunResult) -> None:
    console.print("[bold]" + "═" * 70 + "[/bold]")
    console.print("[bold]Workflow Summary:[/bold]")
    console.print(f"  [dim]Workflow: {escape(result.workflow_name)}[/dim]")
    console.print(f"  [dim]Total Steps: {result.total_steps}[/dim]")
    console.print(f"  [green]Completed: {result.completed_steps}[/green]")
    if result.failed_steps:
        console.print(f"  [red]Failed: {result.failed_steps}[/red]")
    console.print(f"  [dim]Total Duration: {result.total_duration}ms[/dim]")
    status = "[green]✓ SUCCESS[/green]" if result.success else "[red]✗ FAILED[/red]"
    console.print(f"  [bold]Status:[/bold] {status}")
    console.print("[bold]" + "═" * 70 + "[/bold]")
