"""Data models for vendorprune."""

from vendorprune.models.package import NAMESPACE_KINDS, AutoloadKind, Package
from vendorprune.models.results import (
    Classification,
    CleanupReport,
    NamespaceMatch,
    PackageStatus,
    RemovalItem,
    RemovalResult,
    RemovalStatus,
)
from vendorprune.models.usage import FileUsageResult, UsageSet

__all__ = [
    # Package models
    "AutoloadKind",
    "NAMESPACE_KINDS",
    "Package",
    # Usage models
    "FileUsageResult",
    "UsageSet",
    # Results models
    "Classification",
    "CleanupReport",
    "NamespaceMatch",
    "PackageStatus",
    "RemovalItem",
    "RemovalResult",
    "RemovalStatus",
]
