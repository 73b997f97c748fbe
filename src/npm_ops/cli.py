"""Command-line interface for npm-ops."""

import asyncio
import logging
from pathlib import Path

import click

from .agents.local import LocalFileOperations, LocalProcessExecuter, YamlPackageSourceStore
from .core.context import ExecutionContext
from .core.config import load_options
from .core.errors import ConfigError, ExecutionFailureError
from .core.package_sources import list_npm_sources
from .core.reporting import JsonReporter, TextReporter
from .operations import (
    OPERATION_REGISTRY,
    NpmBuildOperation,
    NpmExecuteOperation,
    NpmInstallOperation,
    NpmPublishOperation,
    NpmRunOperation,
    NpmSetProjectVersionOperation,
    Operation,
)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_EXECUTION_FAILURE = 2


def build_context(sources_path: Path | None) -> ExecutionContext:
    """Context for running on this machine."""
    return ExecutionContext(
        file_ops=LocalFileOperations(),
        processes=LocalProcessExecuter(),
        package_sources=YamlPackageSourceStore(sources_path),
        working_directory=str(Path.cwd()),
    )


def log_level(verbose: int) -> int:
    """Logging level for a -v count: WARNING, then INFO, then DEBUG."""
    if verbose == 1:
        return logging.INFO
    elif verbose >= 2:
        return logging.DEBUG
    return logging.WARNING


def _fail(message: str, code: int = EXIT_FAILURE) -> None:
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(code)


def _run_operation(ctx: click.Context, operation: Operation) -> None:
    settings = ctx.obj
    try:
        context = build_context(settings["sources_path"])
        result = asyncio.run(operation.execute(context))
    except ConfigError as e:
        _fail(str(e))
    except ExecutionFailureError as e:
        _fail(str(e), EXIT_EXECUTION_FAILURE)

    if settings["format"] == "json":
        click.echo(JsonReporter().report(result))
    else:
        TextReporter().report(result)

    raise SystemExit(EXIT_SUCCESS if result.success else EXIT_FAILURE)


def _options(ctx: click.Context):
    try:
        return load_options(ctx.obj["config_path"], **ctx.obj["overrides"])
    except ConfigError as e:
        _fail(str(e))


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with default npm options.",
)
@click.option(
    "--sources",
    "sources_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="NPM_OPS_SOURCES",
    help="YAML file of named package sources.",
)
@click.option("--source-directory", "-C", help="Directory npm runs in.")
@click.option(
    "--package-source",
    help="Package source name or registry URL; generates a local .npmrc.",
)
@click.option(
    "--scope",
    "scopes",
    multiple=True,
    help="Scope to wire to the package source. Can be specified multiple times.",
)
@click.option("--npm-verbose", is_flag=True, help="Run npm with --loglevel verbose.")
@click.option(
    "--success-exit-code",
    help="Exit code policy, e.g. '0' or '>= 0'. Ignored when not specified.",
)
@click.option("--npm-path", envvar="NPM_PATH", help="Full path to npm/npm.cmd.")
@click.option("--npmrc-path", help="Override the .npmrc path (ignored with --package-source).")
@click.option(
    "--allow-self-signed-certificate",
    is_flag=True,
    help="Bypass npm certificate validation for the package source.",
)
@click.option(
    "--format",
    "-f",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format (default: text)",
)
@click.option("--verbose", "-v", count=True, help="Increase verbosity (-v for INFO, -vv for DEBUG)")
@click.pass_context
def main(
    ctx,
    config_path,
    sources_path,
    source_directory,
    package_source,
    scopes,
    npm_verbose,
    success_exit_code,
    npm_path,
    npmrc_path,
    allow_self_signed_certificate,
    format,
    verbose,
):
    """
    npm-ops - Run npm from build pipelines.

    Generates a per-run .npmrc for a package source, runs npm, classifies
    its output and applies a success exit code policy.
    """
    # Setup logging
    logging.basicConfig(level=log_level(verbose), format="%(levelname)s: %(message)s")

    ctx.obj = {
        "config_path": config_path,
        "sources_path": sources_path,
        "format": format.lower(),
        "overrides": {
            "source_directory": source_directory,
            "package_source": package_source,
            "scopes": scopes,
            "verbose": npm_verbose,
            "success_exit_code": success_exit_code,
            "npm_path": npm_path,
            "npmrc_path": npmrc_path,
            "allow_self_signed_certificate": allow_self_signed_certificate,
        },
    }


additional_arguments_option = click.option(
    "--additional-arguments", "-a", help="Additional command line arguments for npm."
)


@main.command()
@additional_arguments_option
@click.pass_context
def install(ctx, additional_arguments):
    """Run npm install."""
    _run_operation(ctx, NpmInstallOperation(_options(ctx), additional_arguments))


@main.command()
@additional_arguments_option
@click.pass_context
def build(ctx, additional_arguments):
    """Run npm run build."""
    _run_operation(ctx, NpmBuildOperation(_options(ctx), additional_arguments))


@main.command()
@additional_arguments_option
@click.pass_context
def publish(ctx, additional_arguments):
    """Run npm publish."""
    _run_operation(ctx, NpmPublishOperation(_options(ctx), additional_arguments))


@main.command()
@click.argument("command")
@additional_arguments_option
@click.pass_context
def run(ctx, command, additional_arguments):
    """Run a package.json script (npm run COMMAND)."""
    _run_operation(ctx, NpmRunOperation(_options(ctx), command, additional_arguments))


@main.command("exec")
@click.argument("command")
@click.option("--arguments", help="Command line arguments for the npm command.")
@click.pass_context
def execute_command(ctx, command, arguments):
    """Run any npm command (npm COMMAND ARGUMENTS)."""
    _run_operation(ctx, NpmExecuteOperation(_options(ctx), command, arguments))


@main.command("set-version")
@click.argument("version")
@click.pass_context
def set_version(ctx, version):
    """Set the version field in package.json."""
    options = _options(ctx)
    _run_operation(ctx, NpmSetProjectVersionOperation(version, options.source_directory))


@main.command("list-operations")
def list_operations():
    """List available operations and exit."""
    click.echo("Available operations:")
    for name, operation_class in OPERATION_REGISTRY.items():
        click.echo(f"  - {name}: {operation_class.description}")


@main.command("list-sources")
@click.pass_context
def list_sources(ctx):
    """List npm package sources from the sources file."""
    try:
        store = YamlPackageSourceStore(ctx.obj["sources_path"])
    except ConfigError as e:
        _fail(str(e))

    names = list_npm_sources(store)
    if not names:
        click.echo("No npm package sources configured.")
        return
    click.echo("npm package sources:")
    for name in names:
        click.echo(f"  - {name}")


if __name__ == "__main__":
    main()
