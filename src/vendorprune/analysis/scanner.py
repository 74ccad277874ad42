"""Source file discovery below the configured scan directories."""

import os
from pathlib import Path, PurePosixPath
from typing import Iterator

from vendorprune.exclusion import DirectoryExcluder

SOURCE_EXTENSION = ".php"


class SourceScanner:
    """Lazy, restartable sequence of source files.

    Each iteration walks the scan roots afresh. Roots are resolved against
    ``project_root``; roots that do not exist are skipped. With no scan
    directories configured the sequence is empty.
    """

    def __init__(
        self,
        project_root: Path,
        scan_directories: list[str],
        exclude_directories: list[str] | None = None,
        extension: str = SOURCE_EXTENSION,
    ) -> None:
        self.project_root = project_root
        self.scan_directories = list(scan_directories)
        self.extension = extension
        self.excluder = DirectoryExcluder(exclude_directories)

    @property
    def roots(self) -> list[Path]:
        return [self.project_root / directory for directory in self.scan_directories]

    def missing_roots(self) -> list[Path]:
        return [root for root in self.roots if not root.is_dir()]

    def __iter__(self) -> Iterator[Path]:
        seen: set[Path] = set()
        for root in self.roots:
            if not root.is_dir():
                continue
            for path in self._walk(root):
                resolved = path.resolve()
                if resolved in seen:
                    continue
                seen.add(resolved)
                yield path

    def _walk(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current = Path(dirpath)
            rel_dir = PurePosixPath(current.relative_to(root).as_posix())

            # Prune in place so excluded trees are never descended into
            dirnames[:] = sorted(
                d for d in dirnames if not self.excluder.should_exclude_dir(rel_dir / d)
            )

            for filename in sorted(filenames):
                if not filename.endswith(self.extension):
                    continue
                if self.excluder.should_exclude_file(rel_dir / filename):
                    continue
                yield current / filename
