"""Read the installed package list from Composer's local repository."""

import json
from pathlib import Path

from vendorprune.models.package import Package
from vendorprune.paths import get_installed_path


class RepositoryError(Exception):
    """Raised when the installed package list cannot be read."""


class InstalledRepository:
    """The packages Composer recorded in ``vendor/composer/installed.json``.

    Both layouts are accepted: Composer 1 writes a bare list, Composer 2 an
    object with a ``packages`` list.
    """

    def __init__(self, vendor_dir: Path) -> None:
        self.vendor_dir = vendor_dir
        self.path = get_installed_path(vendor_dir)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> list[dict]:
        """Raw package entries from installed.json."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise RepositoryError(
                f"No installed packages found at {self.path}. Run 'composer install' first."
            ) from e
        except OSError as e:
            raise RepositoryError(f"Cannot read {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise RepositoryError(f"Invalid JSON in {self.path}: {e}") from e

        if isinstance(data, dict):
            data = data.get("packages", [])
        if not isinstance(data, list):
            raise RepositoryError(f"Unexpected layout in {self.path}: expected a package list")
        return [entry for entry in data if isinstance(entry, dict) and entry.get("name")]

    def packages(self) -> list[Package]:
        """Installed packages, in the order Composer recorded them."""
        return [Package.from_dict(entry) for entry in self.load()]
