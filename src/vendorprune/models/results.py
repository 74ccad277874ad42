"""Data models for classification and cleanup results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

from vendorprune.models.usage import UsageSet


class PackageStatus(Enum):
    """Classification of an installed package. Exactly one per package."""

    USED = "used"
    EXCLUDED = "excluded"
    DEPENDENCY = "protected-by-dependency"
    UNUSED = "unused"


@dataclass
class NamespaceMatch:
    """Evidence that a package is used: a reference matched one of its prefixes."""

    package: str
    prefix: str  # autoload prefix, or the declared class for classmap matches
    reference: str
    convention: str  # "psr-4", "psr-0" or "classmap"

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "prefix": self.prefix,
            "reference": self.reference,
            "convention": self.convention,
        }


@dataclass
class Classification:
    """Partition of installed packages computed by the closure engine."""

    statuses: dict[str, PackageStatus] = field(default_factory=dict)  # input order
    matches: list[NamespaceMatch] = field(default_factory=list)
    # package -> protected package that required it
    protected_by: dict[str, str] = field(default_factory=dict)
    passes: int = 0

    def _with_status(self, status: PackageStatus) -> list[str]:
        return [name for name, s in self.statuses.items() if s is status]

    @property
    def used(self) -> list[str]:
        return self._with_status(PackageStatus.USED)

    @property
    def excluded(self) -> list[str]:
        return self._with_status(PackageStatus.EXCLUDED)

    @property
    def dependent(self) -> list[str]:
        return self._with_status(PackageStatus.DEPENDENCY)

    @property
    def unused(self) -> list[str]:
        return self._with_status(PackageStatus.UNUSED)

    @property
    def protected(self) -> set[str]:
        return {name for name, s in self.statuses.items() if s is not PackageStatus.UNUSED}

    def status_of(self, name: str) -> PackageStatus | None:
        return self.statuses.get(name)

    def to_dict(self) -> dict:
        return {
            "used": self.used,
            "excluded": self.excluded,
            "dependent": self.dependent,
            "unused": self.unused,
            "protected_by": dict(self.protected_by),
            "matches": [m.to_dict() for m in self.matches],
            "passes": self.passes,
        }


class RemovalStatus(Enum):
    """Outcome of processing one unused package."""

    REMOVED = "removed"
    DRY_RUN = "dry_run"  # Would be removed
    SKIPPED = "skipped"  # Directory already absent
    FAILED = "failed"  # Filesystem error, possibly partial removal


@dataclass
class RemovalItem:
    """A planned removal: one unused package and its vendor directory."""

    package: str
    path: Path


@dataclass
class RemovalResult:
    """What happened to a planned removal."""

    package: str
    path: Path
    status: RemovalStatus
    errors: list[str] = field(default_factory=list)
    remaining: int = 0  # Entries left on disk after a failed removal

    @property
    def is_partial(self) -> bool:
        return self.status is RemovalStatus.FAILED and self.remaining > 0

    def to_dict(self) -> dict:
        return {
            "package": self.package,
            "path": str(self.path),
            "status": self.status.value,
            "errors": self.errors,
            "remaining": self.remaining,
        }


@dataclass
class CleanupReport:
    """Everything a cleanup run produced, for display and JSON output."""

    project_root: Path
    vendor_dir: Path
    dry_run: bool
    started_at: datetime = field(default_factory=datetime.now)
    files_scanned: int = 0
    parse_errors: dict[str, str] = field(default_factory=dict)  # path -> message
    usage: UsageSet = field(default_factory=UsageSet)
    classification: Classification | None = None
    packages: dict[str, dict] = field(default_factory=dict)  # graph by package name
    removals: list[RemovalResult] = field(default_factory=list)
    skipped_reason: str | None = None  # Set when the run short-circuits

    @property
    def unused(self) -> list[str]:
        return self.classification.unused if self.classification else []

    @property
    def failed(self) -> list[RemovalResult]:
        return [r for r in self.removals if r.status is RemovalStatus.FAILED]

    def to_dict(self) -> dict:
        return {
            "version": "1.0",
            "metadata": {
                "project": str(self.project_root),
                "vendor_dir": str(self.vendor_dir),
                "dry_run": self.dry_run,
                "started_at": self.started_at.isoformat(),
                "files_scanned": self.files_scanned,
                "skipped_reason": self.skipped_reason,
            },
            "parse_errors": dict(self.parse_errors),
            "usage": self.usage.to_dict(),
            "packages": dict(self.packages),
            "classification": self.classification.to_dict() if self.classification else None,
            "unused_packages": self.unused,
            "removals": [r.to_dict() for r in self.removals],
        }
