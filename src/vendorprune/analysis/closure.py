"""Package classification and the dependency closure over the package graph.

A package is kept when it is used directly (one of its autoload prefixes
matches a reference), excluded by configuration, or required by a package
that is kept. Everything else is unused.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from vendorprune.analysis.graph import PackageGraph
from vendorprune.models.package import AutoloadKind, Package
from vendorprune.models.results import Classification, NamespaceMatch, PackageStatus
from vendorprune.models.usage import UsageSet

NAMESPACE_SEPARATOR = "\\"


class NamespaceMatching(Enum):
    """How an autoload prefix is compared with a referenced name."""

    # Raw string prefix: "Acme\\Util" also matches "Acme\\Utilities\\Foo"
    PREFIX = "prefix"
    # Whole namespace segments only: "Acme\\Util" matches "Acme\\Util\\Foo" only
    SEGMENT = "segment"


def _segments(name: str) -> list[str]:
    return [part for part in name.split(NAMESPACE_SEPARATOR) if part]


def prefix_matches(prefix: str, reference: str, matching: NamespaceMatching) -> bool:
    """Check whether ``reference`` falls under the autoload ``prefix``.

    An empty prefix (a psr-4 fallback directory) matches everything under
    both policies.
    """
    if matching is NamespaceMatching.PREFIX:
        return reference.startswith(prefix)
    prefix_parts = _segments(prefix)
    return _segments(reference)[: len(prefix_parts)] == prefix_parts


@dataclass(frozen=True)
class ExclusionRules:
    """Packages that are always kept, by name prefix or exact type."""

    packages: tuple[str, ...] = ()
    package_types: tuple[str, ...] = ()

    def is_excluded(self, package: Package) -> bool:
        # Plain string prefix: "foo/bar" also excludes "foo/bar-baz"
        if any(package.name.startswith(prefix) for prefix in self.packages):
            return True
        return package.type in self.package_types


class ClosureEngine:
    """Computes the protected and unused package sets for one run."""

    def __init__(
        self,
        graph: PackageGraph,
        rules: ExclusionRules | None = None,
        matching: NamespaceMatching = NamespaceMatching.PREFIX,
    ) -> None:
        self.graph = graph
        self.rules = rules or ExclusionRules()
        self.matching = matching

    def find_usage(
        self,
        package: Package,
        references: Iterable[str],
        declared_classes: Iterable[str] = (),
    ) -> NamespaceMatch | None:
        """Return the first reference that shows ``package`` is used, if any.

        psr-4 and psr-0 prefixes are compared with the configured policy;
        classes declared under the package's classmap paths must be
        referenced exactly.
        """
        references = list(references)
        for kind, prefix in package.namespace_prefixes():
            for reference in references:
                if prefix_matches(prefix, reference, self.matching):
                    return NamespaceMatch(
                        package=package.name,
                        prefix=prefix,
                        reference=reference,
                        convention=kind.value,
                    )

        lookup = set(references)
        for class_name in sorted(declared_classes):
            if class_name in lookup:
                return NamespaceMatch(
                    package=package.name,
                    prefix=class_name,
                    reference=class_name,
                    convention=AutoloadKind.CLASSMAP.value,
                )
        return None

    def close(self, seeds: Iterable[str]) -> tuple[set[str], dict[str, str], int]:
        """Grow ``seeds`` with everything a protected package requires.

        Runs full passes over the graph until one adds nothing. The set only
        grows, so this ends after at most ``len(graph)`` productive passes.

        Returns:
            The protected set, a map of each newly protected package to the
            protected package that required it, and the number of passes run.
        """
        protected = {name for name in seeds if name in self.graph}
        protected_by: dict[str, str] = {}
        passes = 0
        changed = True

        while changed:
            changed = False
            passes += 1
            for package in self.graph:
                if package.name in protected:
                    continue
                requirer = next(
                    (r for r in self.graph.required_by(package.name) if r in protected),
                    None,
                )
                if requirer is not None:
                    protected.add(package.name)
                    protected_by[package.name] = requirer
                    changed = True

        return protected, protected_by, passes

    def classify(
        self,
        usage: UsageSet,
        classmap_classes: Mapping[str, set[str]] | None = None,
    ) -> Classification:
        """Classify every package in the graph.

        Args:
            usage: References collected from the application's source.
            classmap_classes: Optional map of package name to the classes
                declared under its classmap paths.

        Returns:
            A ``Classification`` where every package has exactly one status.
            Precedence when several apply: excluded, used, dependency.
        """
        classmap_classes = classmap_classes or {}
        references = sorted(usage.references())

        classification = Classification()
        for package in self.graph:
            if self.rules.is_excluded(package):
                classification.statuses[package.name] = PackageStatus.EXCLUDED
                continue
            match = self.find_usage(package, references, classmap_classes.get(package.name, ()))
            if match is not None:
                classification.statuses[package.name] = PackageStatus.USED
                classification.matches.append(match)

        protected, protected_by, passes = self.close(classification.statuses)
        classification.protected_by = protected_by
        classification.passes = passes

        # Rebuild in graph order so every listing follows installation order
        statuses: dict[str, PackageStatus] = {}
        for package in self.graph:
            status = classification.statuses.get(package.name)
            if status is None:
                status = PackageStatus.DEPENDENCY if package.name in protected else PackageStatus.UNUSED
            statuses[package.name] = status
        classification.statuses = statuses

        return classification
