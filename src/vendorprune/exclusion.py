"""Directory exclusion for the source scan.

Exclude entries behave like Symfony Finder's ``exclude()``: an entry names a
directory relative to a scan root and matches at any depth, so ``legacy``
prunes ``app/legacy/`` as well as ``legacy/``, and ``Http/Stubs`` prunes
every ``.../Http/Stubs/``. Matching uses gitignore-style patterns via
pathspec.
"""

from dataclasses import dataclass, field
from pathlib import PurePosixPath

import pathspec


# Always pruned: version control metadata and other dot-directories,
# mirroring the Finder defaults (ignoreVCS, ignoreDotFiles)
DEFAULT_EXCLUDES = [
    ".*",
    "CVS",
]


@dataclass
class ExclusionConfig:
    """Configuration for directory exclusion."""

    exclude_directories: list[str] = field(default_factory=list)
    default_patterns: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDES))


def to_pattern(entry: str) -> str:
    """Turn an exclude entry into a gitignore pattern matching it at any depth."""
    cleaned = entry.strip().replace("\\", "/").strip("/")
    if cleaned.startswith("**/"):
        return f"{cleaned}/"
    return f"**/{cleaned}/"


class DirectoryExcluder:
    """Decides which directories and files below a scan root are skipped."""

    def __init__(self, exclude_directories: list[str] | None = None, use_defaults: bool = True) -> None:
        """Initialize the excluder.

        Args:
            exclude_directories: Directory entries to prune, relative to a scan root.
            use_defaults: If False, dot-directories and VCS metadata are scanned too.
        """
        self._config = ExclusionConfig(
            exclude_directories=[e for e in (exclude_directories or []) if e.strip().strip("/")],
            default_patterns=list(DEFAULT_EXCLUDES) if use_defaults else [],
        )
        self._spec = pathspec.PathSpec.from_lines("gitignore", self.patterns)

    @property
    def patterns(self) -> list[str]:
        """Return all gitignore patterns in effect (for debugging)."""
        return list(self._config.default_patterns) + [
            to_pattern(entry) for entry in self._config.exclude_directories
        ]

    def should_exclude_dir(self, rel_dir: PurePosixPath | str) -> bool:
        """Check if a directory, given relative to its scan root, is pruned."""
        path_str = str(PurePosixPath(rel_dir))
        if path_str in ("", "."):
            return False
        return self._spec.match_file(f"{path_str}/")

    def should_exclude_file(self, rel_file: PurePosixPath | str) -> bool:
        """Check if a file, given relative to its scan root, is skipped."""
        rel_file = PurePosixPath(rel_file)
        if self._spec.match_file(str(rel_file)):
            return True
        # A file is also skipped when any parent directory is pruned
        parent = PurePosixPath()
        for part in rel_file.parts[:-1]:
            parent = parent / part
            if self.should_exclude_dir(parent):
                return True
        return False
