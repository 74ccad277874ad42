"""Data models for symbol usage collected from source files."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class UsageSet:
    """Symbols and namespaces referenced by a body of source files.

    Both sets only grow during a scan pass. Per-file sets are combined with
    ``merge`` (set union), so the order files are processed in is irrelevant.
    """

    used_symbols: set[str] = field(default_factory=set)
    used_namespaces: set[str] = field(default_factory=set)

    def add_symbol(self, name: str | None) -> None:
        if name:
            self.used_symbols.add(name)

    def add_namespace(self, name: str | None) -> None:
        if name:
            self.used_namespaces.add(name)

    def merge(self, other: "UsageSet") -> "UsageSet":
        """Fold ``other`` into this set and return self."""
        self.used_symbols |= other.used_symbols
        self.used_namespaces |= other.used_namespaces
        return self

    def references(self) -> set[str]:
        """All referenced names, namespaces and symbols alike."""
        return self.used_namespaces | self.used_symbols

    def is_empty(self) -> bool:
        return not self.used_symbols and not self.used_namespaces

    def to_dict(self) -> dict:
        return {
            "used_namespaces": sorted(self.used_namespaces),
            "used_symbols": sorted(self.used_symbols),
        }


@dataclass
class FileUsageResult:
    """Result of extracting usage from a single file."""

    path: Path
    usage: UsageSet = field(default_factory=UsageSet)
    error: str | None = None
