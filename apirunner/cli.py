#!/usr/bin/env python3
"""
apirunner CLI
Run API collections and workflows with layered variables.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path

import click
import pydantic
from rich.markup import escape

from apirunner import __version__
from apirunner.config import get_settings
from apirunner.console import (
    console,
    print_collection_summary,
    print_request_complete,
    print_request_start,
    print_step_complete,
    print_step_start,
    print_workflow_summary,
)
from apirunner.errors import APIRunnerError
from apirunner.schemas.run_options import RunOptions
from apirunner.services.api_testing.auth import BasicAuthApplier
from apirunner.services.api_testing.collection_runner import CollectionRunner
from apirunner.services.api_testing.environments import StaticEnvironmentLookup
from apirunner.services.api_testing.history import LoggingHistory
from apirunner.services.api_testing.http_client import APIHttpClient
from apirunner.services.api_testing.loaders import (
    create_workflow_template,
    load_collection,
    load_environments,
    load_variables,
    load_workflow,
    workflow_template_filename,
)
from apirunner.services.api_testing.request_executor import RequestExecutor
from apirunner.services.api_testing.workflow_engine import WorkflowEngine


def run_options(func):
    """Options shared by the run subcommands."""
    func = click.option("--verbose", is_flag=True, help="Show detailed execution logs")(func)
    func = click.option(
        "--var", "variables", multiple=True, metavar="KEY=VALUE", help="Global variable (repeatable)"
    )(func)
    func = click.option("--globals", "globals_file", type=click.Path(), help="Global variables JSON file")(func)
    func = click.option(
        "--environments", "environments_file", type=click.Path(), help="Environments JSON file"
    )(func)
    func = click.option("-e", "--env", "environment", help="Environment to use")(func)
    return func


def build_options(file, environment, environments_file, globals_file, variables, verbose) -> RunOptions:
    """Validate raw flags once, filling defaults from settings."""
    settings = get_settings()
    try:
        return RunOptions(
            file=file,
            environment=environment,
            environments_file=environments_file or settings.environments_file,
            globals_file=globals_file or settings.globals_file,
            variables=RunOptions.parse_var_pairs(variables),
            verbose=verbose,
        )
    except (ValueError, pydantic.ValidationError) as e:
        raise click.BadParameter(str(e)) from e


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def build_executor(options: RunOptions, http_client: APIHttpClient) -> RequestExecutor:
    environments = StaticEnvironmentLookup(
        load_environments(options.environments_file) if options.environments_file else []
    )
    return RequestExecutor(
        http_client=http_client,
        environments=environments,
        history=LoggingHistory(),
        auth_applier=BasicAuthApplier(),
    )


def global_variables(options: RunOptions) -> dict[str, str]:
    variables = load_variables(options.globals_file) if options.globals_file else {}
    # --var wins over the globals file
    variables.update(options.variables)
    return variables


async def _run_collection(options: RunOptions) -> bool:
    collection = load_collection(options.file)
    console.print(f"\n[bold]▶ Running Collection: [cyan]{escape(collection.name)}[/cyan][/bold]")
    console.print(f"  [dim]Requests: {len(collection.requests)}[/dim]")
    if options.environment:
        console.print(f"  [dim]Environment: {escape(options.environment)}[/dim]")
    console.print()

    async with APIHttpClient() as http_client:
        runner = CollectionRunner(
            build_executor(options, http_client),
            on_request_start=print_request_start,
            on_request_complete=print_request_complete,
        )
        result = await runner.run_collection(collection, options.environment, global_variables(options))

    print_collection_summary(result)
    return result.success


async def _run_workflow(options: RunOptions) -> bool:
    workflow = load_workflow(options.file)
    environment = options.environment or workflow.environment or None
    console.print(f"\n[bold]▶ Running Workflow: [cyan]{escape(workflow.name)}[/cyan][/bold]")
    console.print(f"  [dim]Steps: {len(workflow.steps)}[/dim]")
    if environment:
        console.print(f"  [dim]Environment: {escape(environment)}[/dim]")
    console.print()

    async with APIHttpClient() as http_client:
        engine = WorkflowEngine(
            build_executor(options, http_client),
            on_step_start=print_step_start,
            on_step_complete=print_step_complete,
        )
        result = await engine.execute_workflow(workflow, options.environment, global_variables(options))

    print_workflow_summary(result)
    return result.success


def _execute(coro_factory, options: RunOptions) -> None:
    configure_logging(options.verbose)
    try:
        success = asyncio.run(coro_factory(options))
    except APIRunnerError as e:
        console.print(f"\n[red]✗ {e.__class__.__name__}:[/red] {escape(e.message)}")
        sys.exit(1)
    if not success:
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli():
    """apirunner - run API collections and workflows."""
    pass


@cli.group()
def collection():
    """Run collections of requests."""
    pass


@collection.command("run")
@click.argument("file", type=click.Path())
@run_options
def collection_run(file, environment, environments_file, globals_file, variables, verbose):
    """Run every request of a collection JSON file in order."""
    options = build_options(file, environment, environments_file, globals_file, variables, verbose)
    _execute(_run_collection, options)


@cli.group()
def workflow():
    """Execute workflows (sequential requests with variable capture)."""
    pass


@workflow.command("run")
@click.argument("file", type=click.Path())
@run_options
def workflow_run(file, environment, environments_file, globals_file, variables, verbose):
    """Execute a workflow from a JSON file."""
    options = build_options(file, environment, environments_file, globals_file, variables, verbose)
    _execute(_run_workflow, options)


@workflow.command("create")
@click.argument("name")
@click.option("-o", "--output", type=click.Path(), help="Output file path")
def workflow_create(name, output):
    """Create a new workflow template file."""
    filename = output or workflow_template_filename(name)
    template = create_workflow_template(name)
    Path(filename).write_text(json.dumps(template, indent=2), encoding="utf-8")

    console.print("\n[green]✓ Workflow template created[/green]")
    console.print(f"  [dim]File: {filename}[/dim]")
    console.print(f"  [dim]Steps: {len(template['steps'])}[/dim]")
    console.print("\n[bold]Next steps:[/bold]")
    console.print(f"  [dim]1. Edit the workflow file: {filename}[/dim]")
    console.print(f"  [dim]2. Run the workflow: apirunner workflow run {filename}[/dim]")


def main():
    """Main entry point for the apirunner CLI."""
    cli()


if __name__ == "__main__":
    main()
