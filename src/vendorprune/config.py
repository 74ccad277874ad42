"""Configuration loading and saving for vendorprune."""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path

from vendorprune.analysis.closure import ExclusionRules, NamespaceMatching

DEFAULT_EXCLUDE_PACKAGES = (
    "vendorprune/vendorprune",
    "kytoonlabs/composer-cleanup",
)
DEFAULT_EXCLUDE_PACKAGE_TYPES = (
    "composer-plugin",
    "metapackage",
)

_LIST_KEYS = (
    "scan_directories",
    "exclude_directories",
    "exclude_packages",
    "exclude_package_types",
)
_BOOL_KEYS = ("dry_run", "verbose", "match_classmap")


class ConfigurationError(Exception):
    """Raised when a configuration payload is malformed."""


@dataclass(frozen=True)
class CleanupConfig:
    """Settings for one cleanup run. Immutable once built."""

    scan_directories: tuple[str, ...] = ()
    exclude_directories: tuple[str, ...] = ()
    exclude_packages: tuple[str, ...] = DEFAULT_EXCLUDE_PACKAGES
    exclude_package_types: tuple[str, ...] = DEFAULT_EXCLUDE_PACKAGE_TYPES
    dry_run: bool = True
    verbose: bool = False
    namespace_matching: NamespaceMatching = NamespaceMatching.PREFIX
    match_classmap: bool = True
    # Keys this version does not know about, kept for get()
    extra: dict = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: object) -> "CleanupConfig":
        """Build a config from a decoded payload; missing keys take defaults.

        Raises:
            ConfigurationError: If the payload is not an object or a value has
                the wrong type.
        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration must be a JSON object, got {type(data).__name__}"
            )

        values: dict = {}
        for key in _LIST_KEYS:
            if key in data:
                value = data[key]
                if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                    raise ConfigurationError(f"'{key}' must be a list of strings")
                values[key] = tuple(value)

        for key in _BOOL_KEYS:
            if key in data:
                if not isinstance(data[key], bool):
                    raise ConfigurationError(f"'{key}' must be true or false")
                values[key] = data[key]

        if "namespace_matching" in data:
            try:
                values["namespace_matching"] = NamespaceMatching(data["namespace_matching"])
            except ValueError as e:
                choices = ", ".join(m.value for m in NamespaceMatching)
                raise ConfigurationError(f"'namespace_matching' must be one of: {choices}") from e

        known = set(_LIST_KEYS) | set(_BOOL_KEYS) | {"namespace_matching"}
        values["extra"] = {k: v for k, v in data.items() if k not in known}
        return cls(**values)

    def get(self, key: str, default: object = None) -> object:
        """Look up an option by its JSON key."""
        data = self.to_dict()
        if key in data:
            return data[key]
        return self.extra.get(key, default)

    def with_overrides(self, dry_run: bool | None = None, verbose: bool | None = None) -> "CleanupConfig":
        """Copy with command-line overrides applied."""
        changes: dict = {}
        if dry_run is not None:
            changes["dry_run"] = dry_run
        if verbose is not None:
            changes["verbose"] = verbose
        return replace(self, **changes) if changes else self

    @property
    def rules(self) -> ExclusionRules:
        return ExclusionRules(
            packages=self.exclude_packages,
            package_types=self.exclude_package_types,
        )

    def to_dict(self) -> dict:
        return {
            "scan_directories": list(self.scan_directories),
            "exclude_directories": list(self.exclude_directories),
            "exclude_packages": list(self.exclude_packages),
            "exclude_package_types": list(self.exclude_package_types),
            "dry_run": self.dry_run,
            "verbose": self.verbose,
            "namespace_matching": self.namespace_matching.value,
            "match_classmap": self.match_classmap,
            **self.extra,
        }


def load_config(config_path: Path) -> CleanupConfig:
    """Load a composer-cleanup.json configuration file.

    Raises:
        ConfigurationError: If the file is unreadable, not valid JSON, or
            holds malformed values.
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path.name}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e
    return CleanupConfig.from_dict(data)


def load_config_or_default(config_path: Path) -> tuple[CleanupConfig, str | None]:
    """Load the config, falling back to defaults.

    The defaults are a dry run with no scan directories, so a fallback run
    neither analyzes nor removes anything.

    Returns:
        The config and, when the defaults were substituted, a message saying why.
    """
    if not config_path.is_file():
        return CleanupConfig(), f"No {config_path.name} found, using default configuration"
    try:
        return load_config(config_path), None
    except ConfigurationError as e:
        return CleanupConfig(), f"{e}; using default configuration"


def save_config(config: CleanupConfig, config_path: Path) -> None:
    """Save configuration to composer-cleanup.json."""
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
        f.write("\n")
