"""Planning and executing the removal of unused package directories."""

import os
from pathlib import Path

from vendorprune.models.results import RemovalItem, RemovalResult, RemovalStatus


def package_dir(vendor_dir: Path, package_name: str) -> Path:
    """On-disk location of a package: ``<vendor-dir>/<vendor>/<name>``."""
    return vendor_dir.joinpath(*package_name.split("/"))


def plan_removals(unused: list[str], vendor_dir: Path) -> list[RemovalItem]:
    """One removal item per unused package, in the order given."""
    return [RemovalItem(package=name, path=package_dir(vendor_dir, name)) for name in unused]


def _describe(error: OSError) -> str:
    target = error.filename if error.filename is not None else "?"
    return f"{target}: {error.strerror or error}"


def remove_tree(directory: Path) -> list[str]:
    """Delete ``directory`` bottom-up: files first, then directories, then itself.

    Errors do not stop the walk; every failure is returned so a partial
    removal can be reported. Symlinks are unlinked, never followed.
    """
    errors: list[str] = []

    if directory.is_symlink():
        try:
            directory.unlink()
        except OSError as e:
            errors.append(_describe(e))
        return errors

    def on_error(error: OSError) -> None:
        errors.append(_describe(error))

    for dirpath, dirnames, filenames in os.walk(directory, topdown=False, onerror=on_error):
        current = Path(dirpath)
        for filename in filenames:
            try:
                (current / filename).unlink()
            except OSError as e:
                errors.append(_describe(e))
        for dirname in dirnames:
            child = current / dirname
            try:
                if child.is_symlink():
                    child.unlink()
                else:
                    child.rmdir()
            except OSError as e:
                errors.append(_describe(e))

    try:
        directory.rmdir()
    except OSError as e:
        errors.append(_describe(e))
    return errors


def _count_entries(directory: Path) -> int:
    if not directory.exists():
        return 0
    try:
        return sum(1 for _ in directory.rglob("*")) + 1
    except OSError:
        return 1


class RemovalExecutor:
    """Removes planned package directories, or only reports them in dry-run mode."""

    def __init__(self, dry_run: bool = True) -> None:
        self.dry_run = dry_run

    def execute_one(self, item: RemovalItem) -> RemovalResult:
        if not item.path.is_dir():
            # Already gone
            return RemovalResult(package=item.package, path=item.path, status=RemovalStatus.SKIPPED)

        if self.dry_run:
            return RemovalResult(package=item.package, path=item.path, status=RemovalStatus.DRY_RUN)

        errors = remove_tree(item.path)
        if errors:
            return RemovalResult(
                package=item.package,
                path=item.path,
                status=RemovalStatus.FAILED,
                errors=errors,
                remaining=_count_entries(item.path),
            )
        return RemovalResult(package=item.package, path=item.path, status=RemovalStatus.REMOVED)

    def execute(self, plan: list[RemovalItem]) -> list[RemovalResult]:
        """Process every item; a failure on one package never stops the rest."""
        return [self.execute_one(item) for item in plan]
