"""The cleanup pipeline: scan, extract, classify, then remove."""

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from vendorprune.analysis.classmap import ClassmapIndex
from vendorprune.analysis.closure import ClosureEngine
from vendorprune.analysis.graph import PackageGraph
from vendorprune.analysis.scanner import SourceScanner
from vendorprune.analysis.visitor import analyze_file
from vendorprune.config import CleanupConfig
from vendorprune.deletion.executor import RemovalExecutor, plan_removals
from vendorprune.models.results import (
    Classification,
    CleanupReport,
    RemovalResult,
    RemovalStatus,
)
from vendorprune.models.usage import UsageSet
from vendorprune.paths import get_vendor_dir
from vendorprune.repository import InstalledRepository

default_console = Console()


class VendorCleaner:
    """Finds installed packages the application never references and removes them.

    Classification always completes before the first directory is touched.
    """

    def __init__(
        self,
        project_root: Path,
        config: CleanupConfig | None = None,
        vendor_dir: Path | None = None,
        console: Console | None = None,
    ) -> None:
        self.project_root = project_root
        self.config = config or CleanupConfig()
        self.vendor_dir = vendor_dir or get_vendor_dir(project_root)
        self.console = console or default_console

    @property
    def verbose(self) -> bool:
        return self.config.verbose

    def _debug(self, message: str) -> None:
        if self.verbose:
            self.console.print(message)

    def scanner(self) -> SourceScanner:
        return SourceScanner(
            self.project_root,
            list(self.config.scan_directories),
            list(self.config.exclude_directories),
        )

    # === Scan ===

    def scan(self, report: CleanupReport | None = None) -> UsageSet:
        """Extract usage from every source file under the scan directories.

        A file that fails to parse contributes nothing; the failure is
        recorded on ``report`` and printed in verbose mode.
        """
        scanner = self.scanner()
        for root in scanner.missing_roots():
            self._debug(f"[yellow]Scan directory not found:[/] {escape(str(root))}")

        files = list(scanner)
        usage = UsageSet()

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task("Parsing PHP files...", total=len(files))
            for path in files:
                result = analyze_file(path)
                if result.error:
                    if report is not None:
                        report.parse_errors[str(path)] = result.error
                    self._debug(f"[red]Error parsing {escape(str(path))}:[/] {escape(result.error)}")
                else:
                    usage.merge(result.usage)
                progress.update(task, advance=1)

        if report is not None:
            report.files_scanned = len(files)
            report.usage = usage
        return usage

    # === Classify ===

    def load_graph(self) -> PackageGraph:
        """Raises RepositoryError when installed.json is missing or malformed."""
        return PackageGraph.build(InstalledRepository(self.vendor_dir).packages())

    def classify(self, graph: PackageGraph, usage: UsageSet) -> Classification:
        self._debug("[dim]Analyzing package dependencies...[/]")

        classmap_classes = None
        if self.config.match_classmap:
            index = ClassmapIndex(self.vendor_dir)
            classmap_classes = index.build(graph)
            for path, error in index.errors.items():
                self._debug(f"[red]Error parsing {escape(path)}:[/] {escape(error)}")

        engine = ClosureEngine(graph, self.config.rules, self.config.namespace_matching)
        classification = engine.classify(usage, classmap_classes)

        if self.verbose:
            for match in classification.matches:
                # Prefixes end in a namespace separator, so print them unparsed
                self.console.print(
                    f"Detected Namespace: {match.reference}, "
                    f"Composer Namespace: {match.prefix}, "
                    f"Package Name: {match.package}",
                    markup=False,
                    highlight=False,
                )
            for name, requirer in classification.protected_by.items():
                self.console.print(f"Package {name} is required by {requirer} - marking as dependent")
            self.console.print(f"[dim]Used packages:[/] {', '.join(classification.used)}")
            self.console.print(f"[dim]Excluded packages:[/] {', '.join(classification.excluded)}")
            self.console.print(f"[dim]Dependent packages:[/] {', '.join(classification.dependent)}")
            self.console.print("[dim]...Done[/]")
            self.console.print()

        return classification

    # === Pipeline ===

    def analyze(self) -> CleanupReport:
        """Scan and classify without touching the filesystem."""
        report = CleanupReport(
            project_root=self.project_root,
            vendor_dir=self.vendor_dir,
            dry_run=self.config.dry_run,
        )

        self.console.print("Analyzing application for used classes...")
        if self.verbose:
            self.console.print("[dim]Config:[/]", escape(json.dumps(self.config.to_dict(), indent=2)))

        if not self.config.scan_directories:
            self.console.print("No scan directories configured, skipping application scan.")
            report.skipped_reason = "no scan directories configured"
            return report

        self.scan(report)
        self._debug(
            "[dim]Detected Namespaces:[/] "
            + escape(json.dumps(sorted(report.usage.used_namespaces), indent=2))
        )

        graph = self.load_graph()
        report.packages = graph.to_dict()
        report.classification = self.classify(graph, report.usage)

        if not report.unused:
            self.console.print("No unused packages found.")
            return report

        self.console.print(f"Found {len(report.unused)} potentially unused packages:")
        for name in report.unused:
            self.console.print(f"  - {name}")
        self.console.print(
            "[dim]Classes referenced only dynamically (variable class names, "
            "reflection, string autoloading) are not detected.[/]"
        )
        return report

    def remove(self, report: CleanupReport) -> list[RemovalResult]:
        """Remove (or, in dry-run mode, report) every unused package of ``report``."""
        executor = RemovalExecutor(dry_run=self.config.dry_run)
        results = executor.execute(plan_removals(report.unused, self.vendor_dir))

        for result in results:
            match result.status:
                case RemovalStatus.DRY_RUN:
                    self.console.print(
                        f"[yellow]\\[DRY RUN][/] Would remove unused package: {result.package}"
                    )
                case RemovalStatus.REMOVED:
                    self.console.print(f"[green]Removed unused package:[/] {result.package}")
                case RemovalStatus.SKIPPED:
                    self._debug(f"[dim]Skipping {result.package}: not installed at {escape(str(result.path))}[/]")
                case RemovalStatus.FAILED:
                    state = (
                        f"partially removed, {result.remaining} entries left"
                        if result.is_partial
                        else "not removed"
                    )
                    self.console.print(f"[red]Failed to remove {result.package}[/] ({state})")
                    for error in result.errors:
                        self.console.print(f"  [red]{escape(error)}[/]")

        report.removals = results
        return results

    def cleanup(self) -> CleanupReport:
        """Run the whole pipeline."""
        report = self.analyze()
        if report.unused:
            self.remove(report)
        return report
