"""CLI commands for chainload."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from pydantic import ValidationError

from chainload.cli.output import CLIOutput, create_output
from chainload.config import create_example_plan, load_plan, load_settings
from chainload.config.settings import LoadSettings
from chainload.errors import ConfigurationError
from chainload.observability.logging import setup_logging
from chainload.reporters import get_reporter
from chainload.runner import LoadRunner

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_CONFIG_ERROR = 2


def _settings_or_exit(output: CLIOutput, **overrides: object) -> LoadSettings:
    try:
        return load_settings(**overrides)
    except ValidationError as e:
        problems = [
            f"{' -> '.join(str(p) for p in item.get('loc', ()))}: {item.get('msg')}"
            for item in e.errors()
        ]
        output.show_error(ConfigurationError("Invalid settings", problems=problems, cause=e))
        sys.exit(EXIT_CONFIG_ERROR)


@click.group()
@click.version_option(package_name="chainload")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Log line format (default: text, or CHAINLOAD_LOG_FORMAT)",
)
@click.option("--no-color", is_flag=True, help="Disable colored console output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, log_format: str | None, no_color: bool) -> None:
    """chainload - weighted HTTP request-chain load generator."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["log_format"] = log_format
    ctx.obj["no_color"] = no_color


@cli.command()
@click.argument("plan_file", type=click.Path(dir_okay=False), default="config.yml")
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Report format",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the report to a file")
@click.option("--timeout", type=float, default=None, help="Per-fetch timeout in seconds")
@click.option(
    "--max-concurrency",
    type=int,
    default=None,
    help="Cap on chains executing at once (default: no cap)",
)
@click.option("--seed", type=int, default=None, help="Seed the scheduler for a reproducible schedule")
@click.option(
    "--reject-error-status",
    is_flag=True,
    help="Count 4xx/5xx responses as invalid status codes",
)
@click.option("--follow-redirects", is_flag=True, help="Follow HTTP redirects")
@click.option("--no-progress", is_flag=True, help="Hide the progress bar")
@click.pass_context
def run(
    ctx: click.Context,
    plan_file: str,
    output_format: str,
    output: str | None,
    timeout: float | None,
    max_concurrency: int | None,
    seed: int | None,
    reject_error_status: bool,
    follow_redirects: bool,
    no_progress: bool,
) -> None:
    """Run the load plan in PLAN_FILE (default: config.yml).

    Exits with 1 when any chain failed and 2 when the plan or settings are
    invalid.
    """
    console = create_output(show_progress=not no_progress, use_colors=not ctx.obj["no_color"])
    settings = _settings_or_exit(
        console,
        timeout=timeout,
        max_concurrency=max_concurrency,
        seed=seed,
        reject_error_status=reject_error_status or None,
        follow_redirects=follow_redirects or None,
        log_format=ctx.obj["log_format"],
        verbose=ctx.obj["verbose"] or None,
    )
    setup_logging(settings.verbose, settings.log_format)

    try:
        plan = load_plan(plan_file)
    except ConfigurationError as e:
        console.show_error(e)
        sys.exit(EXIT_CONFIG_ERROR)

    console.header(f"chainload: {plan_file}")
    console.plan_overview(plan)
    if plan.number_of_requests == 0:
        console.warning("number_of_requests is 0, no chains will be run")

    with console.progress(plan.number_of_requests) as callback:
        result = LoadRunner(settings, progress_callback=callback).run(plan)

    reporter = get_reporter(output_format)
    if output:
        path = reporter.save(result, Path(output))
        console.success(f"Report written to {path}")
    else:
        click.echo(reporter.generate(result), nl=output_format == "json")

    console.run_summary(result)
    sys.exit(EXIT_FAILURES if result.failed_chains else EXIT_OK)


@cli.command()
@click.argument("plan_file", type=click.Path(dir_okay=False), default="config.yml")
@click.pass_context
def validate(ctx: click.Context, plan_file: str) -> None:
    """Check PLAN_FILE and show what a run would draw from it."""
    console = create_output(use_colors=not ctx.obj["no_color"])
    setup_logging(ctx.obj["verbose"], ctx.obj["log_format"] or "text")

    try:
        plan = load_plan(plan_file)
    except ConfigurationError as e:
        console.show_error(e)
        sys.exit(EXIT_CONFIG_ERROR)

    console.plan_overview(plan)
    console.success(f"{plan_file} is a valid load plan")


@cli.command()
@click.argument("path", type=click.Path(dir_okay=False), default="config.yml")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
@click.pass_context
def init(ctx: click.Context, path: str, force: bool) -> None:
    """Write an example load plan to PATH (default: config.yml)."""
    console = create_output(use_colors=not ctx.obj["no_color"])
    try:
        written = create_example_plan(path, force=force)
    except FileExistsError:
        console.error(f"{path} already exists (use --force to overwrite)")
        sys.exit(EXIT_CONFIG_ERROR)
    console.success(f"Example plan written to {written}")
