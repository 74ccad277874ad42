"""Output modules for CLI display and file writing."""

from vendorprune.output.json_writer import write_report
from vendorprune.output.tree import build_classification_tree, display_tree

__all__ = ["build_classification_tree", "display_tree", "write_report"]
