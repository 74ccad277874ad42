"""Rich tree visualization for package classification."""

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from vendorprune.models.results import Classification, PackageStatus, RemovalResult, RemovalStatus

console = Console()

_STATUS_STYLE = {
    PackageStatus.USED: ("green", "Used"),
    PackageStatus.EXCLUDED: ("cyan", "Excluded"),
    PackageStatus.DEPENDENCY: ("blue", "Required by a kept package"),
    PackageStatus.UNUSED: ("red", "Unused"),
}

_REMOVAL_LABEL = {
    RemovalStatus.REMOVED: "[green]removed[/]",
    RemovalStatus.DRY_RUN: "[yellow]would remove[/]",
    RemovalStatus.SKIPPED: "[dim]not on disk[/]",
    RemovalStatus.FAILED: "[red]removal failed[/]",
}


def build_classification_tree(
    classification: Classification,
    removals: list[RemovalResult] | None = None,
    title: str = "Packages",
) -> Tree:
    """Build a Rich tree grouping packages by status."""
    evidence = {match.package: match for match in classification.matches}
    outcome = {result.package: result for result in removals or []}

    root = Tree(f"[bold]{escape(title)}[/]", guide_style="dim")

    for status, (color, label) in _STATUS_STYLE.items():
        names = [name for name, s in classification.statuses.items() if s is status]
        if not names:
            continue
        status_node = root.add(f"[{color}]{label}[/] ({len(names)})")

        for name in names:
            text = f"[{color}]{name}[/]"
            if status is PackageStatus.USED and name in evidence:
                text += f" [dim]via {escape(evidence[name].reference)}[/]"
            elif status is PackageStatus.DEPENDENCY and name in classification.protected_by:
                text += f" [dim]required by {classification.protected_by[name]}[/]"
            elif status is PackageStatus.UNUSED and name in outcome:
                text += f" ({_REMOVAL_LABEL[outcome[name].status]})"
            status_node.add(text)

    return root


def display_tree(tree: Tree, target: Console | None = None) -> None:
    """Display the tree to console."""
    target = target or console
    target.print()
    target.print(tree)
    target.print()
