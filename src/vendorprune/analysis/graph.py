"""Package dependency graph built from the installed package list."""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from vendorprune.models.package import Package


@dataclass
class PackageGraph:
    """Installed packages indexed by name, with ``requires`` as edges."""

    # package name -> Package, in installation order
    packages: dict[str, Package] = field(default_factory=dict)

    # package name -> names of packages that require it
    reverse_edges: dict[str, list[str]] = field(default_factory=lambda: defaultdict(list))

    @classmethod
    def build(cls, packages: Iterable[Package]) -> "PackageGraph":
        """Index ``packages`` by name. A later duplicate replaces an earlier one."""
        graph = cls()
        for package in packages:
            graph.packages[package.name] = package
        for package in graph.packages.values():
            for required in graph.requirements_of(package.name):
                graph.reverse_edges[required].append(package.name)
        return graph

    def __contains__(self, name: object) -> bool:
        return name in self.packages

    def __iter__(self) -> Iterator[Package]:
        return iter(self.packages.values())

    def __len__(self) -> int:
        return len(self.packages)

    def get(self, name: str) -> Package | None:
        return self.packages.get(name)

    def requirements_of(self, name: str) -> list[str]:
        """Installed packages ``name`` requires. Requirements absent from the graph
        (platform packages such as ``php`` or ``ext-json``, or anything not
        installed) are dropped."""
        package = self.packages.get(name)
        if package is None:
            return []
        return [required for required in package.requires if required in self.packages]

    def required_by(self, name: str) -> list[str]:
        """Installed packages that require ``name``."""
        return list(self.reverse_edges.get(name, []))

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            name: {
                "type": package.type,
                "requires": self.requirements_of(name),
                "required_by": self.required_by(name),
            }
            for name, package in self.packages.items()
        }
