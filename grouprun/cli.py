"""CLI entry point for grouprun.

    grouprun run:group <name>... [options]
    grouprun resolve <name>...
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config.options import DEFAULT_DEBUG_LEVEL
from .config.settings import RunnerSettings
from .errors import GroupRunError
from .generation.trigger import CommandGenerationTrigger
from .planning.resolver import resolve
from .registry.lookup import load_registries
from .reporting.json_reporter import REPORT_FILE_NAME, JsonReporter
from .runner.invoker import ProcessRunnerInvoker
from .runner.orchestrator import ExecutionResult, GroupRunOrchestrator

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _echo_output(chunk: str) -> None:
    click.echo(chunk, nl=False)


def _load_settings(ctx: click.Context, **overrides) -> RunnerSettings:
    try:
        return RunnerSettings.from_env(**overrides)
    except ValueError as e:
        click.echo(f"ERROR: {e}", err=True)
        ctx.exit(2)


def _save_report(result: ExecutionResult, report_dir: Optional[Path]) -> None:
    """Write the run report; a failure here never changes the exit code."""
    reporter = JsonReporter()
    report = result.to_report()
    report_path = (report_dir or Path(".")) / REPORT_FILE_NAME
    try:
        saved_path = reporter.save(report, report_path)
    except OSError as e:
        logger.warning("Failed to save report: %s", e)
        return

    summary = reporter.generate_flow_output(report, str(saved_path))
    click.echo(json.dumps(summary, ensure_ascii=False), err=True)


registry_option = click.option(
    "--registry",
    type=click.Path(dir_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="Registry manifest, relative to the current directory "
         "(default: $GROUPRUN_REGISTRY or tests/registry.yaml under the project root).",
)
project_root_option = click.option(
    "--project-root",
    type=click.Path(file_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="Project root (default: $GROUPRUN_PROJECT_ROOT or the current directory).",
)


@click.group()
@click.version_option(__version__, prog_name="grouprun")
def cli():
    """Run tests by group or suite name."""


@cli.command("run:group")
@click.argument("names", nargs=-1, required=True)
@click.option("-k", "--skip-generate", "skip_generation", is_flag=True,
              help="Only execute the tests, do not generate them first.")
@click.option("-f", "--force", is_flag=True, help="Force generation of tests.")
@click.option("-r", "--remove", is_flag=True, help="Remove previously generated tests before generating.")
@click.option("--debug", "debug_level", is_flag=False, flag_value=DEFAULT_DEBUG_LEVEL, default=None,
              metavar="[LEVEL]", help="Debug level passed to generation (default: developer).")
@click.option("-a", "--allow-skipped", is_flag=True, help="Generate tests marked as skipped.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose generation and progress output.")
@registry_option
@project_root_option
@click.option("--idle-timeout", type=float, default=None,
              help="Abort the runner after this many seconds without output (default: 600).")
@click.option("--save-report", is_flag=True, help="Save a JSON run report.")
@click.option("--report-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Directory for the saved report.")
@click.pass_context
def run_group(
    ctx: click.Context,
    names: tuple[str, ...],
    skip_generation: bool,
    force: bool,
    remove: bool,
    debug_level: Optional[str],
    allow_skipped: bool,
    verbose: bool,
    registry: Optional[Path],
    project_root: Optional[Path],
    idle_timeout: Optional[float],
    save_report: bool,
    report_dir: Optional[Path],
):
    """Execute the tests in the given groups and suites.

    Each NAME is a suite or a group. The runner's exit status is the exit
    status of this command.
    """
    _configure_logging(verbose)
    settings = _load_settings(
        ctx,
        project_root=project_root,
        registry_path=registry,
        idle_timeout=idle_timeout,
    )

    raw_options = {
        "force": force,
        "verbose": verbose,
        "debug_level": debug_level,
        "allow_skipped": allow_skipped,
        "skip_generation": skip_generation,
        "remove": remove,
    }

    try:
        generator = CommandGenerationTrigger(
            settings.generate_argv,
            settings.project_root,
            output=_echo_output,
            idle_timeout=settings.idle_timeout,
        )
    except ValueError as e:
        click.echo(f"ERROR: {e}", err=True)
        ctx.exit(2)

    orchestrator = GroupRunOrchestrator(
        invoker=ProcessRunnerInvoker(),
        settings=settings,
        generator=generator,
        output=_echo_output,
    )

    try:
        status = orchestrator.execute(
            names, raw_options, lambda: load_registries(settings.registry_path),
        )
    except GroupRunError as e:
        click.echo(f"ERROR: {e}", err=True)
        status = e.exit_code
    except KeyboardInterrupt:
        click.echo("ERROR: Run interrupted by user", err=True)
        status = 130

    if save_report:
        _save_report(orchestrator.result, report_dir)

    ctx.exit(status)


@cli.command("resolve")
@click.argument("names", nargs=-1, required=True)
@registry_option
@project_root_option
@click.option("--pretty", is_flag=True, help="Indent the JSON output.")
@click.pass_context
def resolve_names(
    ctx: click.Context,
    names: tuple[str, ...],
    registry: Optional[Path],
    project_root: Optional[Path],
    pretty: bool,
):
    """Print the execution plan for the given names without running it."""
    _configure_logging(False)
    settings = _load_settings(ctx, project_root=project_root, registry_path=registry)

    try:
        suites, groups = load_registries(settings.registry_path)
        plan = resolve(names, suites, groups)
    except GroupRunError as e:
        click.echo(f"ERROR: {e}", err=True)
        ctx.exit(e.exit_code)

    click.echo(json.dumps(plan.to_dict(), indent=2 if pretty else None, ensure_ascii=False))


def main():
    """Main CLI entry point."""
    cli(prog_name="grouprun")


if __name__ == "__main__":
    main()
