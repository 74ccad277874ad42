"""Centralized path management for project, vendor and config files."""

import json
import os
from pathlib import Path

# Configuration file at the project root
CONFIG_FILE = "composer-cleanup.json"

# Composer files
COMPOSER_FILE = "composer.json"
INSTALLED_FILE = Path("composer") / "installed.json"  # Relative to the vendor dir
DEFAULT_VENDOR_DIR = "vendor"

# Composer itself honours this variable over composer.json
VENDOR_DIR_ENV = "COMPOSER_VENDOR_DIR"


def get_config_path(project_path: Path) -> Path:
    """Get the composer-cleanup.json path for a project."""
    return project_path / CONFIG_FILE


def has_config_file(project_path: Path) -> bool:
    """Check whether the project carries a composer-cleanup.json."""
    return get_config_path(project_path).is_file()


def get_composer_path(project_path: Path) -> Path:
    """Get the composer.json path for a project."""
    return project_path / COMPOSER_FILE


def get_vendor_dir(project_path: Path, override: Path | None = None) -> Path:
    """Resolve the vendor directory for a project.

    Order: explicit override, ``COMPOSER_VENDOR_DIR``, ``config.vendor-dir``
    in composer.json, then ``vendor``. Relative values are taken from the
    project root.
    """
    if override is not None:
        vendor = Path(override)
    elif os.environ.get(VENDOR_DIR_ENV):
        vendor = Path(os.environ[VENDOR_DIR_ENV])
    else:
        vendor = Path(_composer_vendor_dir(project_path) or DEFAULT_VENDOR_DIR)
    if not vendor.is_absolute():
        vendor = project_path / vendor
    return vendor


def _composer_vendor_dir(project_path: Path) -> str | None:
    composer_path = get_composer_path(project_path)
    if not composer_path.is_file():
        return None
    try:
        with open(composer_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return None
    if not isinstance(data, dict):
        return None
    config = data.get("config")
    if isinstance(config, dict) and isinstance(config.get("vendor-dir"), str):
        return config["vendor-dir"]
    return None


def get_installed_path(vendor_dir: Path) -> Path:
    """Get the installed.json path inside a vendor directory."""
    return vendor_dir / INSTALLED_FILE
