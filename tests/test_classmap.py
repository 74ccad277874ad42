"""Tests for classmap class discovery."""

from pathlib import Path

import pytest

from vendorprune.analysis.classmap import ClassmapIndex, declared_classes
from vendorprune.analysis.graph import PackageGraph
from vendorprune.analysis.syntax import ParseError
from vendorprune.models.package import AutoloadKind, Package


def classmap_package(name: str, *paths: str) -> Package:
    return Package(name=name, autoload={AutoloadKind.CLASSMAP: {p: [p] for p in paths}})


class TestDeclaredClasses:
    """Tests for declared_classes."""

    def test_global_class(self):
        """A class outside any namespace keeps its short name."""
        assert declared_classes("<?php\nclass Legacy_Helper {}\n") == {"Legacy_Helper"}

    def test_statement_namespace(self):
        """A namespace statement qualifies the declarations that follow."""
        source = "<?php\nnamespace Acme\\Util;\nclass Str {}\ninterface Stringable {}\n"
        assert declared_classes(source) == {"Acme\\Util\\Str", "Acme\\Util\\Stringable"}

    def test_braced_namespaces(self):
        """Each braced namespace qualifies only its own body."""
        source = "<?php\nnamespace A { class X {} }\nnamespace B { trait Y {} }\n"
        assert declared_classes(source) == {"A\\X", "B\\Y"}

    def test_enum_declaration(self):
        """Enums are declarations too."""
        assert declared_classes("<?php\nnamespace App;\nenum Suit { case Hearts; }\n") == {"App\\Suit"}

    def test_conditional_declaration(self):
        """Classes declared inside an if block are found."""
        source = "<?php\nif (!class_exists('Shim')) {\n    class Shim {}\n}\n"
        assert declared_classes(source) == {"Shim"}

    def test_anonymous_classes_ignored(self):
        """Anonymous classes have no name to record."""
        assert declared_classes("<?php\n$x = new class {};\n") == set()

    def test_invalid_source(self):
        """Unparseable source raises ParseError."""
        with pytest.raises(ParseError):
            declared_classes("<?php\nclass {\n")


class TestClassmapIndex:
    """Tests for ClassmapIndex."""

    def test_directory_entry(self, tmp_path: Path):
        """Every PHP file below a classmap directory is read."""
        src = tmp_path / "legacy" / "helpers" / "src"
        (src / "Sub").mkdir(parents=True)
        (src / "A.php").write_text("<?php\nclass A {}\n")
        (src / "Sub" / "B.inc").write_text("<?php\nclass B {}\n")
        (src / "notes.txt").write_text("class C {}\n")

        index = ClassmapIndex(tmp_path)
        classes = index.classes_for(classmap_package("legacy/helpers", "src/"))

        assert classes == {"A", "B"}

    def test_file_entry(self, tmp_path: Path):
        """A classmap entry can name a single file."""
        base = tmp_path / "acme" / "single"
        base.mkdir(parents=True)
        (base / "Single.php").write_text("<?php\nnamespace Acme;\nclass Single {}\n")

        index = ClassmapIndex(tmp_path)
        assert index.classes_for(classmap_package("acme/single", "Single.php")) == {"Acme\\Single"}

    def test_missing_entry(self, tmp_path: Path):
        """A classmap path that does not exist yields nothing."""
        index = ClassmapIndex(tmp_path)
        assert index.classes_for(classmap_package("gone/pkg", "src/")) == set()

    def test_parse_errors_recorded(self, tmp_path: Path):
        """A broken file is skipped and its error recorded."""
        src = tmp_path / "acme" / "broken" / "src"
        src.mkdir(parents=True)
        (src / "Bad.php").write_text("<?php\nclass {\n")
        (src / "Good.php").write_text("<?php\nclass Good {}\n")

        index = ClassmapIndex(tmp_path)
        classes = index.classes_for(classmap_package("acme/broken", "src"))

        assert classes == {"Good"}
        assert list(index.errors) == [str(src / "Bad.php")]

    def test_build_only_classmap_packages(self, tmp_path: Path):
        """build maps only packages that declare classmap entries."""
        base = tmp_path / "legacy" / "lib"
        base.mkdir(parents=True)
        (base / "Lib.php").write_text("<?php\nclass Lib {}\n")

        graph = PackageGraph.build(
            [
                classmap_package("legacy/lib", "Lib.php"),
                Package(name="modern/lib", autoload={AutoloadKind.PSR4: {"Modern\\": ["src/"]}}),
            ]
        )

        assert ClassmapIndex(tmp_path).build(graph) == {"legacy/lib": {"Lib"}}
