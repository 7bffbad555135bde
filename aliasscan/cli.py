"""Command-line interface for alias-scan."""

import importlib
import sys
from pathlib import Path
from typing import Any, Optional

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax

from . import __version__
from .config import ScanConfig
from .core.errors import AliasScanError, TargetResolutionError
from .core.walker import find_duplicate_pointers
from .demo import run_demo
from .reporting import DuplicateReport
from .utils.logging_setup import get_logger, log_operation, setup_logging


logger = get_logger(__name__)

console = Console()


def resolve_target(target: str) -> Any:
    """
    Import ``package.module:attr.sub`` and return the named object.

    Raises:
        TargetResolutionError: If the module or attribute cannot be found, or
            importing the module raises
    """
    module_name, sep, attr_path = target.partition(":")
    if not module_name:
        raise TargetResolutionError(f"Invalid target '{target}': expected module:attribute", target=target)

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetResolutionError(f"Cannot import module '{module_name}': {e}", target=target) from e
    except Exception as e:
        raise TargetResolutionError(
            f"Error while importing module '{module_name}': {type(e).__name__}: {e}", target=target
        ) from e

    if not sep or not attr_path:
        return obj

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise TargetResolutionError(
                f"'{module_name}' has no attribute path '{attr_path}'", target=target
            ) from e
    return obj


def _load_config(config_path: Optional[str]) -> ScanConfig:
    try:
        return ScanConfig.load_or_default(config_path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


@click.group()
@click.version_option(__version__, prog_name="aliasscan")
def cli():
    """Find aliased and cyclic references in Python object graphs."""
    pass


@cli.command(name="scan")
@click.argument("target")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Path to configuration file")
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
@click.option("--all", "show_all", is_flag=True, help="List every identity, not only duplicates")
@click.option("--fail-on-duplicates", is_flag=True, help="Exit with status 1 if any duplicate is found")
@click.option("--path", "extra_path", type=click.Path(exists=True, file_okay=False),
              help="Directory prepended to sys.path before importing TARGET")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write JSON logs to this file")
def scan_command(target, config_path, as_json, show_all, fail_on_duplicates, extra_path, verbose, log_file):
    """Scan the object named by TARGET (module:attribute)."""
    config = _load_config(config_path)
    setup_logging("aliasscan", level="DEBUG" if verbose else config.log_level, log_file=log_file)
    log_operation(logger, "scan", target=target)

    if extra_path:
        sys.path.insert(0, str(Path(extra_path).resolve()))

    try:
        root = resolve_target(target)
        result = find_duplicate_pointers(root, config)
    except AliasScanError as e:
        logger.error(e.message)
        raise click.ClickException(e.message) from e

    report = DuplicateReport(result, title=f"Duplicate references in {target}")
    logger.info(f"Scanned {target}", extra={'operation': 'scan', 'extra_fields': report.summary()})
    if as_json:
        click.echo(report.to_json(show_all=show_all))
    else:
        report.render(console, show_all=show_all)

    if fail_on_duplicates and report.has_duplicates:
        sys.exit(1)


@cli.command(name="demo")
@click.option("--all", "show_all", is_flag=True, help="List every identity, not only duplicates")
def demo_command(show_all):
    """Run the built-in aliasing scenarios."""
    if not run_demo(console, show_all=show_all):
        sys.exit(1)


@cli.group(name="config")
def config_group():
    """Manage the scan configuration file."""
    pass


@config_group.command(name="init")
@click.option(
    "--path",
    type=click.Path(),
    default=".aliasscan.yml",
    help="Path for config file"
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path, force):
    """Write a configuration file with default settings."""
    config_path = Path(path)

    if config_path.exists() and not force:
        if not click.confirm(f"Config file {path} already exists. Overwrite?"):
            console.print("[yellow]Aborted[/yellow]")
            return

    ScanConfig().save_to_file(config_path)
    console.print(f"[green]✓ Created config file at {path}[/green]")


@config_group.command(name="show")
@click.option(
    "--path",
    type=click.Path(exists=True),
    help="Path to config file"
)
def config_show(path):
    """Display the effective configuration."""
    config = _load_config(path)
    yaml_str = yaml.dump(config.to_dict(), default_flow_style=False, sort_keys=False)
    panel = Panel(
        Syntax(yaml_str, "yaml", theme="monokai", line_numbers=False),
        title="[bold cyan]Scan Configuration[/bold cyan]",
        border_style="cyan"
    )
    console.print(panel)


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
