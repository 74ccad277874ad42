"""Syntax tree visitor collecting symbol references from PHP source."""

from pathlib import Path

from tree_sitter import Node

from vendorprune.analysis.syntax import (
    NAME_TYPES,
    USE_CLAUSE_TYPES,
    NodeKind,
    ParseError,
    SyntaxNode,
    name_of,
    parse_php,
)
from vendorprune.models.usage import FileUsageResult, UsageSet


class UsageVisitor:
    """
    Walks a parsed file and records every statically named reference.

    Imports land in ``used_namespaces``; every other "this type is used"
    position lands in ``used_symbols``. Dynamic sites (``new $class``,
    ``$class::create()``) are skipped, so a package only reached that way
    will look unused.
    """

    def __init__(self) -> None:
        self.usage = UsageSet()

    def visit(self, root: SyntaxNode) -> UsageSet:
        """Visit ``root`` and all of its descendants exactly once, preorder."""
        stack = [root]
        while stack:
            node = stack.pop()
            self._dispatch(node)
            # Children are always visited, whether or not the node contributed
            stack.extend(reversed(node.children))
        return self.usage

    def _dispatch(self, node: SyntaxNode) -> None:
        raw = node.node
        match node.kind:
            case NodeKind.IMPORT:
                for clause in _use_clauses(raw):
                    self.usage.add_namespace(_clause_path(clause))
            case NodeKind.GROUPED_IMPORT:
                self._visit_group_use(raw)
            case NodeKind.INSTANTIATION:
                self._visit_new(raw)
            case NodeKind.STATIC_CALL | NodeKind.STATIC_PROPERTY_ACCESS:
                self.usage.add_symbol(name_of(raw.child_by_field_name("scope")))
            case NodeKind.CONSTANT_FETCH:
                scope = raw.named_children[0] if raw.named_children else None
                self.usage.add_symbol(name_of(scope))
            case NodeKind.TYPE_CHECK:
                self.usage.add_symbol(name_of(raw.child_by_field_name("right")))
            case NodeKind.CATCH_CLAUSE:
                for type_node in _caught_types(raw):
                    self.usage.add_symbol(name_of(type_node))
            case NodeKind.FUNCTION_CALL:
                self.usage.add_symbol(name_of(raw.child_by_field_name("function")))
            case NodeKind.PARAMETER | NodeKind.PROPERTY_DECLARATION:
                self.usage.add_symbol(_plain_type(raw.child_by_field_name("type")))
            case NodeKind.FUNCTION_DECLARATION:
                self.usage.add_symbol(_plain_type(raw.child_by_field_name("return_type")))
            case NodeKind.CLASS_DECLARATION:
                for name in _inherited_names(raw):
                    self.usage.add_symbol(name)
            case NodeKind.TRAIT_USE:
                for child in raw.named_children:
                    if child.type in NAME_TYPES:
                        self.usage.add_symbol(name_of(child))

    def _visit_group_use(self, node: Node) -> None:
        """``use Foo\\{Bar, Baz\\Qux}`` records ``Foo\\Bar`` and ``Foo\\Baz\\Qux``."""
        prefix = None
        for child in node.named_children:
            if child.type in ("namespace_name", "qualified_name", "name"):
                prefix = name_of(child)
            elif child.type == "namespace_use_group" and prefix is not None:
                for clause in child.named_children:
                    if clause.type in USE_CLAUSE_TYPES:
                        path = _clause_path(clause)
                        if path:
                            self.usage.add_namespace(f"{prefix}\\{path}")

    def _visit_new(self, node: Node) -> None:
        children = node.named_children
        if children:
            self.usage.add_symbol(name_of(children[0]))
        # Older grammars inline anonymous class clauses into the expression
        for name in _inherited_names(node):
            self.usage.add_symbol(name)


def _use_clauses(node: Node) -> list[Node]:
    return [child for child in node.named_children if child.type in USE_CLAUSE_TYPES]


def _clause_path(clause: Node) -> str | None:
    """The imported path of a use clause; the alias comes after it and is ignored."""
    for child in clause.named_children:
        if child.type in NAME_TYPES or child.type == "namespace_name":
            return name_of(child)
    return None


def _caught_types(node: Node) -> list[Node]:
    type_node = node.child_by_field_name("type")
    if type_node is None:
        return []
    if type_node.type == "type_list":
        return list(type_node.named_children)
    return [type_node]


def _plain_type(type_node: Node | None) -> str | None:
    """Name of a plain named type hint; None for nullable, union or builtin types."""
    if type_node is None:
        return None
    # Some grammar versions wrap every hint in a single-member union_type
    if type_node.type == "union_type" and len(type_node.named_children) == 1:
        type_node = type_node.named_children[0]
    if type_node.type == "named_type" or type_node.type in NAME_TYPES:
        return name_of(type_node)
    return None


def _inherited_names(node: Node) -> list[str]:
    """Base classes and implemented interfaces declared on a class-like node."""
    names: list[str] = []
    for child in node.named_children:
        if child.type in ("base_clause", "class_interface_clause"):
            for item in child.named_children:
                name = name_of(item)
                if name:
                    names.append(name)
    return names


def extract_usage(source: bytes | str) -> UsageSet:
    """Parse ``source`` and return the references it contains.

    Raises:
        ParseError: If the source is not valid PHP.
    """
    tree = parse_php(source)
    return UsageVisitor().visit(SyntaxNode.wrap(tree.root_node))


def analyze_file(file_path: Path) -> FileUsageResult:
    """Extract usage from a single file, recording failures instead of raising."""
    try:
        source = file_path.read_bytes()
        return FileUsageResult(path=file_path, usage=extract_usage(source))
    except ParseError as e:
        return FileUsageResult(path=file_path, error=str(e))
    except OSError as e:
        return FileUsageResult(path=file_path, error=f"Unreadable file: {e}")
