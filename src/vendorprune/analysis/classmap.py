"""Class names declared under a package's classmap autoload paths."""

from pathlib import Path
from typing import Iterable, Iterator

from tree_sitter import Node

from vendorprune.analysis.graph import PackageGraph
from vendorprune.analysis.syntax import ParseError, name_of, node_text, parse_php
from vendorprune.models.package import Package

CLASSMAP_EXTENSIONS = (".php", ".inc")

DECLARATION_TYPES = frozenset(
    {"class_declaration", "interface_declaration", "trait_declaration", "enum_declaration"}
)

# Statement blocks a declaration can sit inside; expressions are never entered
_STATEMENT_CONTAINERS = frozenset(
    {
        "compound_statement",
        "if_statement",
        "else_clause",
        "else_if_clause",
        "colon_block",
        "declare_statement",
        "try_statement",
        "catch_clause",
        "finally_clause",
    }
)


def declared_classes(source: bytes | str) -> set[str]:
    """Fully qualified names of the classes, interfaces, traits and enums in ``source``.

    Raises:
        ParseError: If the source is not valid PHP.
    """
    tree = parse_php(source)
    found: set[str] = set()
    _collect(tree.root_node.named_children, "", found)
    return found


def _collect(nodes: Iterable[Node], namespace: str, found: set[str]) -> None:
    for node in nodes:
        if node.type == "namespace_definition":
            name = name_of(node.child_by_field_name("name")) or ""
            body = node.child_by_field_name("body")
            if body is None:
                # "namespace Foo;" applies to the statements that follow
                namespace = name
            else:
                _collect(body.named_children, name, found)
        elif node.type in DECLARATION_TYPES:
            name_node = node.child_by_field_name("name")
            if name_node is not None:
                short = node_text(name_node)
                found.add(f"{namespace}\\{short}" if namespace else short)
        elif node.type in _STATEMENT_CONTAINERS:
            # Conditional declarations: if (!class_exists(...)) { class Foo {} }
            _collect(node.named_children, namespace, found)


class ClassmapIndex:
    """Resolves classmap entries of installed packages to declared class names."""

    def __init__(self, vendor_dir: Path) -> None:
        self.vendor_dir = vendor_dir
        self.errors: dict[str, str] = {}  # path -> message

    def _files(self, package: Package) -> Iterator[Path]:
        base = self.vendor_dir / package.name
        for rel in package.classmap_paths():
            target = base / rel
            if target.is_file():
                yield target
            elif target.is_dir():
                for path in sorted(target.rglob("*")):
                    if path.is_file() and path.suffix in CLASSMAP_EXTENSIONS:
                        yield path

    def classes_for(self, package: Package) -> set[str]:
        """Classes declared under ``package``'s classmap paths. Unparseable files are skipped."""
        classes: set[str] = set()
        for path in self._files(package):
            try:
                classes |= declared_classes(path.read_bytes())
            except (ParseError, OSError) as e:
                self.errors[str(path)] = str(e)
        return classes

    def build(self, graph: PackageGraph) -> dict[str, set[str]]:
        """Map every package with classmap entries to its declared classes."""
        return {
            package.name: self.classes_for(package)
            for package in graph
            if package.classmap_paths()
        }
