"""Tree-sitter PHP parsing and the closed set of node kinds the extractor knows.

Every tree-sitter node is wrapped in a ``SyntaxNode`` tagged with a
``NodeKind``. Kinds that do not contribute usage are tagged ``OTHER``; all
kinds expose the same ``children`` accessor so one traversal covers the tree.
"""

from dataclasses import dataclass
from enum import Enum
from functools import cache

import tree_sitter_php
from tree_sitter import Language, Node, Parser, Tree


class ParseError(Exception):
    """Raised when source text is not syntactically valid PHP."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} at line {line}, column {column}"
        super().__init__(message)


class NodeKind(Enum):
    """Syntax node kinds that carry symbol references."""

    IMPORT = "import-statement"
    GROUPED_IMPORT = "grouped-import"
    INSTANTIATION = "instantiation"
    STATIC_CALL = "static-call"
    CONSTANT_FETCH = "constant-fetch"
    STATIC_PROPERTY_ACCESS = "static-property-access"
    TYPE_CHECK = "type-check"
    CATCH_CLAUSE = "catch-clause"
    FUNCTION_CALL = "function-call"
    PARAMETER = "parameter"
    FUNCTION_DECLARATION = "function-declaration"
    PROPERTY_DECLARATION = "property-declaration"
    CLASS_DECLARATION = "class-declaration"
    TRAIT_USE = "trait-use"
    OTHER = "other"


_KIND_BY_TYPE: dict[str, NodeKind] = {
    "namespace_use_declaration": NodeKind.IMPORT,
    "object_creation_expression": NodeKind.INSTANTIATION,
    "scoped_call_expression": NodeKind.STATIC_CALL,
    "class_constant_access_expression": NodeKind.CONSTANT_FETCH,
    "scoped_property_access_expression": NodeKind.STATIC_PROPERTY_ACCESS,
    "catch_clause": NodeKind.CATCH_CLAUSE,
    "function_call_expression": NodeKind.FUNCTION_CALL,
    "simple_parameter": NodeKind.PARAMETER,
    "variadic_parameter": NodeKind.PARAMETER,
    "property_promotion_parameter": NodeKind.PARAMETER,
    "function_definition": NodeKind.FUNCTION_DECLARATION,
    "method_declaration": NodeKind.FUNCTION_DECLARATION,
    "anonymous_function": NodeKind.FUNCTION_DECLARATION,
    "anonymous_function_creation_expression": NodeKind.FUNCTION_DECLARATION,
    "arrow_function": NodeKind.FUNCTION_DECLARATION,
    "property_declaration": NodeKind.PROPERTY_DECLARATION,
    "class_declaration": NodeKind.CLASS_DECLARATION,
    "anonymous_class": NodeKind.CLASS_DECLARATION,
    "interface_declaration": NodeKind.CLASS_DECLARATION,
    "enum_declaration": NodeKind.CLASS_DECLARATION,
    "use_declaration": NodeKind.TRAIT_USE,
}

# Node types that spell a class-like name statically
NAME_TYPES = frozenset({"name", "qualified_name", "relative_name"})

# Names that resolve against the enclosing class, never a package
RELATIVE_SCOPES = frozenset({"self", "static", "parent"})

# Older grammars name the members of a grouped import differently
USE_CLAUSE_TYPES = frozenset({"namespace_use_clause", "namespace_use_group_clause"})


def classify(node: Node) -> NodeKind:
    """Map a tree-sitter node to its ``NodeKind``."""
    kind = _KIND_BY_TYPE.get(node.type)
    if kind is NodeKind.IMPORT:
        if any(child.type == "namespace_use_group" for child in node.named_children):
            return NodeKind.GROUPED_IMPORT
        return kind
    if kind is not None:
        return kind
    if node.type == "binary_expression":
        operator = node.child_by_field_name("operator")
        if operator is not None and node_text(operator).lower() == "instanceof":
            return NodeKind.TYPE_CHECK
    return NodeKind.OTHER


@dataclass(frozen=True)
class SyntaxNode:
    """A parsed node tagged with its kind."""

    kind: NodeKind
    node: Node

    @classmethod
    def wrap(cls, node: Node) -> "SyntaxNode":
        return cls(kind=classify(node), node=node)

    @property
    def children(self) -> list["SyntaxNode"]:
        return [SyntaxNode.wrap(child) for child in self.node.named_children]


def node_text(node: Node) -> str:
    """Decoded source text of ``node``."""
    text = node.text
    if text is None:
        return ""
    return text.decode("utf-8", errors="replace")


def name_of(node: Node | None) -> str | None:
    """Return the class-like name ``node`` spells, or None if it is dynamic.

    ``named_type`` wrappers are unwrapped; anything else (variables,
    ``self``/``static``/``parent``, expressions) yields None. Whitespace is
    dropped and a leading namespace separator is stripped, so ``\\Foo\\Bar``
    and ``Foo\\Bar`` record the same name.
    """
    if node is None:
        return None
    if node.type == "named_type":
        inner = [child for child in node.named_children if child.type in NAME_TYPES]
        return name_of(inner[0]) if inner else None
    if node.type not in NAME_TYPES and node.type != "namespace_name":
        return None
    name = "".join(node_text(node).split())
    if node.type == "relative_name" and name.lower().startswith("namespace\\"):
        name = name[len("namespace\\"):]
    name = name.lstrip("\\")
    if not name or name.lower() in RELATIVE_SCOPES:
        return None
    return name


@cache
def php_language() -> Language:
    """The tree-sitter PHP grammar (PHP mixed with inline HTML)."""
    return Language(tree_sitter_php.language_php())


def parse_php(source: bytes | str) -> Tree:
    """Parse PHP source into a tree-sitter tree.

    Raises:
        ParseError: If the tree contains syntax errors or missing tokens.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    parser = Parser(php_language())
    tree = parser.parse(source)
    if tree.root_node.has_error:
        error = _first_error(tree.root_node)
        if error is None:
            raise ParseError("Syntax error")
        line, column = error.start_point
        what = "Missing token" if error.is_missing else "Syntax error"
        raise ParseError(what, line=line + 1, column=column + 1)
    return tree


def _first_error(root: Node) -> Node | None:
    """Find the first ERROR or missing node, in source order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None
