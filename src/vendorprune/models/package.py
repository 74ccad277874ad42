"""Data models for installed Composer packages."""

from dataclasses import dataclass, field
from enum import Enum


class AutoloadKind(Enum):
    """Autoload conventions a package manifest can declare."""

    PSR4 = "psr-4"
    PSR0 = "psr-0"
    CLASSMAP = "classmap"


# Conventions whose keys are namespace prefixes
NAMESPACE_KINDS = (AutoloadKind.PSR4, AutoloadKind.PSR0)


@dataclass(frozen=True)
class Package:
    """An installed package as reported by the local repository."""

    name: str  # "vendor/name"
    type: str = "library"
    # psr-4 / psr-0: namespace prefix -> path(s); classmap: path -> path
    autoload: dict[AutoloadKind, dict[str, list[str]]] = field(default_factory=dict)
    requires: tuple[str, ...] = ()

    def namespace_prefixes(self) -> list[tuple[AutoloadKind, str]]:
        """Return every (convention, prefix) pair usable for namespace matching."""
        prefixes: list[tuple[AutoloadKind, str]] = []
        for kind in NAMESPACE_KINDS:
            for prefix in self.autoload.get(kind, {}):
                prefixes.append((kind, prefix))
        return prefixes

    def classmap_paths(self) -> list[str]:
        """Return the relative paths listed under the classmap convention."""
        return list(self.autoload.get(AutoloadKind.CLASSMAP, {}))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.type,
            "autoload": {
                kind.value: {key: list(paths) for key, paths in entries.items()}
                for kind, entries in self.autoload.items()
            },
            "requires": list(self.requires),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Package":
        """Create from a Composer package entry (installed.json shape).

        Autoload values may be a string or a list of strings; classmap is a
        plain list of paths. Unknown conventions ("files",
        "exclude-from-classmap") are dropped.
        """
        autoload: dict[AutoloadKind, dict[str, list[str]]] = {}
        raw_autoload = data.get("autoload") or {}
        if isinstance(raw_autoload, dict):
            for kind in AutoloadKind:
                raw = raw_autoload.get(kind.value)
                if not raw:
                    continue
                if kind is AutoloadKind.CLASSMAP:
                    paths = raw if isinstance(raw, list) else [raw]
                    autoload[kind] = {str(p): [str(p)] for p in paths}
                elif isinstance(raw, dict):
                    autoload[kind] = {
                        str(prefix): [str(p) for p in (paths if isinstance(paths, list) else [paths])]
                        for prefix, paths in raw.items()
                    }

        requires = data.get("require") or {}
        if isinstance(requires, dict):
            required_names = tuple(requires.keys())
        else:
            required_names = tuple(str(r) for r in requires)

        return cls(
            name=data["name"],
            type=data.get("type", "library") or "library",
            autoload=autoload,
            requires=required_names,
        )
