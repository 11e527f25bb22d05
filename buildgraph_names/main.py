"""buildgraph - inspect module name resolution for a build manifest."""

import logging
import os
import sys
from pathlib import Path

import click
from rich.table import Table
from rich.text import Text

from .console import console
from .console import err_console
from .graph_builder import GraphBuilder
from .logging_setup import init_json_logging
from .manifest import ManifestError
from .manifest import load_manifest
from .settings import STRATEGIES
from .settings import ResolutionSettings
from .settings import SettingsManager
from .settings import create_resolver
from .ui import display_resolution_errors
from .ui import format_error

logger = logging.getLogger(__name__)

strategy_option = click.option(
    "--strategy",
    "-s",
    type=click.Choice(sorted(STRATEGIES)),
    default=None,
    help="Name resolution strategy (default: from settings, else flat)",
)


def _resolution_settings(ctx: click.Context, strategy: str | None) -> ResolutionSettings:
    settings: ResolutionSettings = ctx.obj["settings"].get_resolution_settings()
    if strategy:
        settings.strategy = strategy
    return settings


def _build(ctx: click.Context, manifest_path: str, strategy: str | None):
    """Load the manifest and run it through the configured resolver."""
    try:
        manifest = load_manifest(manifest_path)
    except ManifestError as e:
        err_console.print(Text(f"Error: {e}", style="red"), soft_wrap=True)
        sys.exit(2)

    settings = _resolution_settings(ctx, strategy)
    builder = GraphBuilder(create_resolver(settings), settings.suggestion_limit, settings.suggestion_cutoff)
    logger.debug(f"Building graph from {manifest_path} (strategy={settings.strategy})")
    return builder, builder.build(manifest)


@click.group()
@click.version_option(package_name="buildgraph-names")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding project settings (default: .buildgraph)",
)
@click.option("--log-file", default=None, help="Write JSONL logs to this file")
@click.option("--log-level", default=None, help="Log level for the JSONL log (e.g. DEBUG)")
@click.pass_context
def cli(ctx, config_dir, log_file, log_level):
    """buildgraph - module name resolution for build graphs."""
    settings_manager = SettingsManager(config_dir=config_dir)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings_manager

    log_settings = settings_manager.get_logging_settings()
    log_path = log_file or log_settings.get("path") or os.environ.get("BUILDGRAPH_LOG_PATH")
    log_level = log_level or log_settings.get("level")
    # A level on its own logs to the default path
    if log_path or log_level:
        init_json_logging(log_path, log_level)


@cli.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@strategy_option
@click.option("--verbose", "-v", is_flag=True, help="Show a tip under each error")
@click.pass_context
def check(ctx, manifest: str, strategy: str | None, verbose: bool):
    """Register every module in MANIFEST and resolve all dependencies.

    Exits with status 1 when any name resolution error was found.
    """
    _builder, result = _build(ctx, manifest, strategy)
    display_resolution_errors(console, result.errors, verbose=verbose)
    if not result.ok:
        sys.exit(1)
    console.print(f"[dim]{len(result.groups)} module(s), {sum(map(len, result.edges.values()))} dependency edge(s)[/dim]")


@cli.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@strategy_option
@click.pass_context
def modules(ctx, manifest: str, strategy: str | None):
    """List all registered modules in deterministic order."""
    builder, result = _build(ctx, manifest, strategy)

    table = Table(title="Modules", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="green")
    table.add_column("Unique name")
    table.add_column("Namespace", style="magenta")
    table.add_column("Variants", style="dim")
    table.add_column("Defined at", style="yellow")

    for group in result.groups:
        variants = ", ".join(module.variant for module in group.modules if module.variant) or "-"
        namespace = group.namespace.display_name if group.namespace is not None else "-"
        table.add_row(group.name, builder.unique_name(group), namespace, variants, str(group.first_module().pos))

    console.print(table)
    if result.errors:
        console.print(f"[yellow]{len(result.errors)} error(s); run 'buildgraph check' for details[/yellow]")


@cli.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.argument("name")
@click.option("--from-file", default="Android.bp", show_default=True, help="Build file the reference is written in")
@strategy_option
@click.pass_context
def explain(ctx, manifest: str, name: str, from_file: str, strategy: str | None):
    """Show what NAME resolves to when referenced from --from-file."""
    builder, _result = _build(ctx, manifest, strategy)
    group, error = builder.lookup(name, from_file)

    if group is None:
        console.print(format_error(error), soft_wrap=True)
        sys.exit(1)

    console.print(f"[bold green]{group.name}[/bold green] -> {builder.unique_name(group)}")
    for module in group.modules:
        variant = f" ({module.variant})" if module.variant else ""
        console.print(f"  {module.pos}{variant}")


@cli.command()
@click.argument("name", required=False, type=click.Choice(sorted(STRATEGIES)))
@click.option("--local", "scope_flag", flag_value="local", help="Set locally (just you)")
@click.option("--project", "scope_flag", flag_value="project", help="Set for project (team)")
@click.option("--global", "scope_flag", flag_value="user", help="Set globally (all projects)")
@click.pass_context
def strategy(ctx, name: str | None, scope_flag: str | None):
    """Show or set the name resolution strategy.

    Examples:
      buildgraph strategy
      buildgraph strategy namespaced --project
    """
    settings_manager: SettingsManager = ctx.obj["settings"]
    if name is None:
        console.print(f"Strategy: [bold]{settings_manager.get_resolution_settings().strategy}[/bold]")
        return

    scope = scope_flag or "project"
    settings_manager.set_strategy(name, scope)
    console.print(f"[green]✓ Using '{name}' name resolution ({scope})[/green]")


def main():
    cli()


if __name__ == "__main__":
    main()
