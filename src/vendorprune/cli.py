"""vendorprune CLI - find and remove Composer packages a PHP application never uses."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from vendorprune import __version__
from vendorprune.cleaner import VendorCleaner
from vendorprune.config import (
    CleanupConfig,
    ConfigurationError,
    load_config,
    load_config_or_default,
    save_config,
)
from vendorprune.models.results import CleanupReport
from vendorprune.output.json_writer import write_report
from vendorprune.output.tree import build_classification_tree, display_tree
from vendorprune.paths import get_config_path, get_vendor_dir, has_config_file
from vendorprune.repository import RepositoryError

app = typer.Typer(
    name="vendorprune",
    help="Find and remove Composer packages your PHP code never references",
    no_args_is_help=False,
    rich_markup_mode="rich",
)
console = Console()

# Directories "init" proposes for scanning when they exist
SCAN_CANDIDATES = ["app", "src", "bootstrap", "config", "database", "routes", "resources"]


def version_callback(value: bool) -> None:
    if value:
        console.print(f"vendorprune version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Find and remove Composer packages your PHP code never references."""
    if ctx.invoked_subcommand is None:
        # Default to run command; option defaults are OptionInfo objects, so pass values
        ctx.invoke(
            run,
            path=Path("."),
            config=None,
            vendor_dir=None,
            dry_run=None,
            verbose=False,
            output=None,
            tree=False,
            yes=False,
            strict=False,
        )


def _load_cleanup_config(config_path: Path, strict: bool) -> CleanupConfig:
    """Load the config file, substituting safe defaults unless ``strict``."""
    if strict and config_path.is_file():
        try:
            config = load_config(config_path)
        except ConfigurationError as e:
            console.print(f"[red]Error:[/] {escape(str(e))}")
            raise typer.Exit(1)
        console.print(f"[dim]Loaded configuration from {escape(str(config_path))}[/]")
        return config

    config, warning = load_config_or_default(config_path)
    if warning is None:
        console.print(f"[dim]Loaded configuration from {escape(str(config_path))}[/]")
    elif config_path.is_file():
        console.print(f"[yellow]Warning:[/] {escape(warning)}")
    else:
        console.print(f"[dim]{escape(warning)}[/]")
    return config


@app.command()
def run(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the PHP project (the directory holding composer.json)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: composer-cleanup.json in the project)",
    ),
    vendor_dir: Optional[Path] = typer.Option(
        None,
        "--vendor-dir",
        help="Vendor directory (default: from composer.json, else vendor/)",
    ),
    dry_run: Optional[bool] = typer.Option(
        None,
        "--dry-run/--no-dry-run",
        help="Only report what would be removed (overrides the config file)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show every classification step",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write a JSON report to this path",
    ),
    tree: bool = typer.Option(
        False,
        "--tree",
        "-t",
        help="Show all packages grouped by classification",
    ),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Do not ask for confirmation before deleting",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail on a malformed config file instead of using defaults",
    ),
) -> None:
    """Analyze the project and remove unused packages (default command)."""
    path = path.resolve()

    console.print(Panel.fit("[bold blue]vendorprune - Unused Package Cleanup[/]"))
    console.print(f"\n[dim]Project:[/] {escape(str(path))}\n")

    cleanup_config = _load_cleanup_config(config or get_config_path(path), strict)
    cleanup_config = cleanup_config.with_overrides(dry_run=dry_run, verbose=verbose or None)

    cleaner = VendorCleaner(
        path,
        cleanup_config,
        vendor_dir=get_vendor_dir(path, vendor_dir),
        console=console,
    )

    try:
        report = cleaner.analyze()
    except RepositoryError as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1)

    if report.unused:
        if not cleanup_config.dry_run and not yes:
            proceed = Confirm.ask(
                f"\n[bold]Permanently delete {len(report.unused)} package directories?[/]",
                default=False,
                console=console,
            )
            if not proceed:
                console.print("[yellow]Removal cancelled.[/]")
                _finish(report, output, tree)
                raise typer.Exit()
        cleaner.remove(report)

    _finish(report, output, tree)

    if report.failed:
        console.print(f"\n[red]{len(report.failed)} package(s) could not be fully removed[/]")
        raise typer.Exit(1)


def _finish(report: CleanupReport, output: Optional[Path], tree: bool) -> None:
    if tree and report.classification is not None:
        display_tree(build_classification_tree(report.classification, report.removals), console)
    if output is not None:
        write_report(report, output)
        console.print(f"\n[green]Report saved to:[/] {escape(str(output))}")


@app.command()
def scan(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the PHP project",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config file (default: composer-cleanup.json in the project)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="List every namespace and symbol found",
    ),
) -> None:
    """Show the namespaces and symbols the project's source references."""
    path = path.resolve()
    cleanup_config = _load_cleanup_config(config or get_config_path(path), strict=False)

    if not cleanup_config.scan_directories:
        console.print("No scan directories configured, nothing to scan.")
        return

    report = CleanupReport(project_root=path, vendor_dir=get_vendor_dir(path), dry_run=True)
    cleaner = VendorCleaner(path, cleanup_config.with_overrides(verbose=verbose or None), console=console)
    usage = cleaner.scan(report)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("Files scanned", str(report.files_scanned))
    table.add_row("Parse errors", str(len(report.parse_errors)))
    table.add_row("Imported namespaces", str(len(usage.used_namespaces)))
    table.add_row("Referenced symbols", str(len(usage.used_symbols)))
    console.print(Panel(table, title="[bold]Usage Summary[/]", border_style="blue"))

    if verbose:
        for heading, names in (
            ("Imported namespaces", usage.used_namespaces),
            ("Referenced symbols", usage.used_symbols),
        ):
            console.print(f"\n[bold]{heading}:[/]")
            for name in sorted(names):
                console.print(f"  • {escape(name)}")


@app.command()
def init(
    path: Path = typer.Argument(
        Path("."),
        help="Path to the PHP project",
    ),
    scan_dirs: Optional[List[str]] = typer.Option(
        None,
        "--scan-dir",
        "-s",
        help="Directory to scan (repeatable; default: common source directories that exist)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite an existing config file",
    ),
) -> None:
    """Write a default composer-cleanup.json."""
    path = path.resolve()
    config_path = get_config_path(path)

    if has_config_file(path) and not force:
        console.print(f"[red]Config file already exists:[/] {escape(str(config_path))}")
        console.print("Use [bold]--force[/] to overwrite it.")
        raise typer.Exit(1)

    if not scan_dirs:
        scan_dirs = [d for d in SCAN_CANDIDATES if (path / d).is_dir()]

    config = CleanupConfig(scan_directories=tuple(scan_dirs))
    save_config(config, config_path)

    console.print(f"[green]Configuration saved to:[/] {escape(str(config_path))}")
    if scan_dirs:
        console.print(f"[dim]Scan directories:[/] {', '.join(scan_dirs)}")
    else:
        console.print("[yellow]![/] No source directories found; add scan_directories before running")


if __name__ == "__main__":
    app()
