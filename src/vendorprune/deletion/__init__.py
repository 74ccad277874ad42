"""Removal of unused package directories."""

from vendorprune.deletion.executor import (
    RemovalExecutor,
    package_dir,
    plan_removals,
    remove_tree,
)

__all__ = ["RemovalExecutor", "package_dir", "plan_removals", "remove_tree"]
