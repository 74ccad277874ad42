"""Analysis modules for unused package detection."""

from vendorprune.analysis.classmap import ClassmapIndex, declared_classes
from vendorprune.analysis.closure import (
    ClosureEngine,
    ExclusionRules,
    NamespaceMatching,
    prefix_matches,
)
from vendorprune.analysis.graph import PackageGraph
from vendorprune.analysis.scanner import SourceScanner
from vendorprune.analysis.syntax import NodeKind, ParseError, SyntaxNode, parse_php
from vendorprune.analysis.visitor import UsageVisitor, analyze_file, extract_usage

__all__ = [
    "ClassmapIndex",
    "ClosureEngine",
    "ExclusionRules",
    "NamespaceMatching",
    "NodeKind",
    "PackageGraph",
    "ParseError",
    "SourceScanner",
    "SyntaxNode",
    "UsageVisitor",
    "analyze_file",
    "declared_classes",
    "extract_usage",
    "parse_php",
    "prefix_matches",
]
