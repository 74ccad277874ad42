"""Tests for the command line interface."""

import json
import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from vendorprune import __version__
from vendorprune.cli import app

FIXTURES_PATH = Path(__file__).parent / "fixtures" / "laravel_app"

UNUSED = ["fakerphp/faker", "hamcrest/hamcrest-php", "mockery/mockery"]

runner = CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Path:
    target = tmp_path / "laravel_app"
    shutil.copytree(FIXTURES_PATH, target)
    return target


def vendor_dirs_present(project: Path) -> list[str]:
    return [name for name in UNUSED if (project / "vendor" / name).is_dir()]


class TestVersion:
    """Tests for --version."""

    def test_version(self):
        """--version prints the version and exits cleanly."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestRunCommand:
    """Tests for the run command."""

    def test_dry_run_from_config(self, project: Path):
        """The fixture config is a dry run: packages are listed, nothing removed."""
        result = runner.invoke(app, ["run", str(project)])

        assert result.exit_code == 0, result.output
        assert "Found 3 potentially unused packages:" in result.output
        assert "[DRY RUN] Would remove unused package: fakerphp/faker" in result.output
        assert vendor_dirs_present(project) == UNUSED

    def test_default_command(self, project: Path, monkeypatch):
        """Invoking without a subcommand runs the cleanup in the current directory."""
        monkeypatch.chdir(project)

        result = runner.invoke(app, [])

        assert result.exit_code == 0, result.output
        assert "Found 3 potentially unused packages:" in result.output

    def test_live_run_with_yes(self, project: Path):
        """--no-dry-run --yes removes the unused packages without asking."""
        result = runner.invoke(app, ["run", str(project), "--no-dry-run", "--yes"])

        assert result.exit_code == 0, result.output
        assert vendor_dirs_present(project) == []
        assert (project / "vendor" / "nesbot" / "carbon").is_dir()

    def test_live_run_confirmed(self, project: Path):
        """Answering yes at the prompt removes the packages."""
        result = runner.invoke(app, ["run", str(project), "--no-dry-run"], input="y\n")

        assert result.exit_code == 0, result.output
        assert vendor_dirs_present(project) == []

    def test_live_run_declined(self, project: Path):
        """Answering no at the prompt removes nothing."""
        result = runner.invoke(app, ["run", str(project), "--no-dry-run"], input="n\n")

        assert result.exit_code == 0, result.output
        assert "Removal cancelled." in result.output
        assert vendor_dirs_present(project) == UNUSED

    def test_dry_run_flag_overrides_config(self, project: Path):
        """--dry-run wins over dry_run: false in the config."""
        config_path = project / "composer-cleanup.json"
        data = json.loads(config_path.read_text())
        data["dry_run"] = False
        config_path.write_text(json.dumps(data))

        result = runner.invoke(app, ["run", str(project), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert vendor_dirs_present(project) == UNUSED

    def test_malformed_config_falls_back(self, project: Path):
        """A malformed config warns and runs with the safe defaults."""
        (project / "composer-cleanup.json").write_text('{"dry_run": "no"}')

        result = runner.invoke(app, ["run", str(project), "--no-dry-run", "--yes"])

        assert result.exit_code == 0, result.output
        assert "Warning" in result.output
        assert "No scan directories configured" in result.output
        assert vendor_dirs_present(project) == UNUSED

    def test_malformed_config_strict(self, project: Path):
        """--strict turns a malformed config into an error."""
        (project / "composer-cleanup.json").write_text("{ broken")

        result = runner.invoke(app, ["run", str(project), "--strict"])

        assert result.exit_code == 1

    def test_missing_installed_json(self, project: Path):
        """A project without installed.json exits with an error."""
        shutil.rmtree(project / "vendor" / "composer")

        result = runner.invoke(app, ["run", str(project)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_json_report(self, project: Path, tmp_path: Path):
        """--output writes the report as JSON."""
        report_path = tmp_path / "report.json"

        result = runner.invoke(app, ["run", str(project), "--output", str(report_path)])

        assert result.exit_code == 0, result.output
        data = json.loads(report_path.read_text())
        assert data["unused_packages"] == UNUSED
        assert [r["status"] for r in data["removals"]] == ["dry_run"] * 3

    def test_tree(self, project: Path):
        """--tree shows every status group."""
        result = runner.invoke(app, ["run", str(project), "--tree"])

        assert result.exit_code == 0, result.output
        for label in ("Used", "Excluded", "Required by a kept package", "Unused"):
            assert label in result.output

    def test_custom_config_path(self, project: Path, tmp_path: Path):
        """--config points at a config outside the project."""
        config_path = tmp_path / "other.json"
        config_path.write_text(json.dumps({"scan_directories": ["routes"]}))

        result = runner.invoke(app, ["run", str(project), "--config", str(config_path)])

        assert result.exit_code == 0, result.output
        # Only routes/ is scanned, so the classmap helper is no longer referenced
        assert "Found 4 potentially unused packages:" in result.output
        assert "  - legacy/helpers" in result.output


class TestScanCommand:
    """Tests for the scan command."""

    def test_scan_summary(self, project: Path):
        """scan reports how many files and references it found."""
        result = runner.invoke(app, ["scan", str(project)])

        assert result.exit_code == 0, result.output
        assert "Files scanned" in result.output
        assert "Usage Summary" in result.output

    def test_scan_verbose_lists_names(self, project: Path):
        """scan --verbose lists every imported namespace."""
        result = runner.invoke(app, ["scan", str(project), "--verbose"])

        assert result.exit_code == 0, result.output
        assert "Carbon\\Carbon" in result.output

    def test_scan_without_directories(self, tmp_path: Path):
        """scan with no configuration has nothing to do."""
        result = runner.invoke(app, ["scan", str(tmp_path)])

        assert result.exit_code == 0
        assert "nothing to scan" in result.output


class TestInitCommand:
    """Tests for the init command."""

    def test_init_detects_directories(self, tmp_path: Path):
        """init proposes the source directories that exist."""
        (tmp_path / "app").mkdir()
        (tmp_path / "routes").mkdir()

        result = runner.invoke(app, ["init", str(tmp_path)])

        assert result.exit_code == 0, result.output
        data = json.loads((tmp_path / "composer-cleanup.json").read_text())
        assert data["scan_directories"] == ["app", "routes"]
        assert data["dry_run"] is True

    def test_init_explicit_directories(self, tmp_path: Path):
        """--scan-dir overrides detection."""
        result = runner.invoke(app, ["init", str(tmp_path), "-s", "src", "-s", "lib"])

        assert result.exit_code == 0, result.output
        data = json.loads((tmp_path / "composer-cleanup.json").read_text())
        assert data["scan_directories"] == ["src", "lib"]

    def test_init_refuses_overwrite(self, project: Path):
        """An existing config is kept unless --force is given."""
        before = (project / "composer-cleanup.json").read_text()

        result = runner.invoke(app, ["init", str(project)])

        assert result.exit_code == 1
        assert (project / "composer-cleanup.json").read_text() == before

    def test_init_force(self, project: Path):
        """--force overwrites an existing config."""
        result = runner.invoke(app, ["init", str(project), "--force"])

        assert result.exit_code == 0, result.output
        data = json.loads((project / "composer-cleanup.json").read_text())
        assert data["exclude_directories"] == []
