"""Tests for the exclusion module."""

from pathlib import PurePosixPath

from vendorprune.exclusion import DEFAULT_EXCLUDES, DirectoryExcluder, to_pattern


class TestDefaultExcludes:
    """Tests for default exclusion patterns."""

    def test_default_excludes_list(self) -> None:
        """Verify DEFAULT_EXCLUDES covers dot-directories and CVS."""
        assert ".*" in DEFAULT_EXCLUDES
        assert "CVS" in DEFAULT_EXCLUDES

    def test_excludes_git(self) -> None:
        """Should exclude .git directories at any depth."""
        excluder = DirectoryExcluder()

        assert excluder.should_exclude_dir(".git")
        assert excluder.should_exclude_dir("Http/.svn")
        assert excluder.should_exclude_file(".git/hooks/pre-commit.php")

    def test_excludes_cvs(self) -> None:
        """Should exclude CVS directories."""
        excluder = DirectoryExcluder()
        assert excluder.should_exclude_dir("Models/CVS")

    def test_does_not_exclude_source(self) -> None:
        """Should not exclude normal source paths."""
        excluder = DirectoryExcluder()

        assert not excluder.should_exclude_dir("Http/Controllers")
        assert not excluder.should_exclude_file("Http/Controllers/HomeController.php")

    def test_defaults_can_be_disabled(self) -> None:
        """With use_defaults=False dot-directories are scanned."""
        excluder = DirectoryExcluder(use_defaults=False)
        assert not excluder.should_exclude_dir(".hidden")

    def test_root_never_excluded(self) -> None:
        """The scan root itself is never pruned."""
        excluder = DirectoryExcluder(["legacy"])
        assert not excluder.should_exclude_dir("")
        assert not excluder.should_exclude_dir(".")


class TestExcludeEntries:
    """Tests for configured exclude entries."""

    def test_top_level_entry(self) -> None:
        """An entry prunes the directory directly below the root."""
        excluder = DirectoryExcluder(["Legacy"])

        assert excluder.should_exclude_dir("Legacy")
        assert excluder.should_exclude_file("Legacy/Old.php")

    def test_entry_matches_at_depth(self) -> None:
        """An entry also prunes same-named directories further down."""
        excluder = DirectoryExcluder(["Stubs"])

        assert excluder.should_exclude_dir("Http/Stubs")
        assert excluder.should_exclude_file("Http/Stubs/Fake.php")

    def test_multi_segment_entry(self) -> None:
        """A path entry matches that path anywhere below the root."""
        excluder = DirectoryExcluder(["Http/Stubs"])

        assert excluder.should_exclude_dir("Http/Stubs")
        assert excluder.should_exclude_dir("Modules/Http/Stubs")
        assert not excluder.should_exclude_dir("Stubs")

    def test_partial_names_not_matched(self) -> None:
        """Entries match whole directory names only."""
        excluder = DirectoryExcluder(["Legacy"])

        assert not excluder.should_exclude_dir("LegacyBridge")
        assert not excluder.should_exclude_file("Legacy.php")

    def test_blank_entries_ignored(self) -> None:
        """Blank entries do not exclude everything."""
        excluder = DirectoryExcluder(["", "  ", "/"])

        assert not excluder.should_exclude_dir("Http")
        assert excluder.patterns == list(DEFAULT_EXCLUDES)

    def test_accepts_posix_paths(self) -> None:
        """PurePosixPath arguments behave like strings."""
        excluder = DirectoryExcluder(["Legacy"])
        assert excluder.should_exclude_dir(PurePosixPath("Legacy"))


class TestToPattern:
    """Tests for entry to pattern conversion."""

    def test_plain_entry(self) -> None:
        """A bare name becomes a directory pattern at any depth."""
        assert to_pattern("Legacy") == "**/Legacy/"

    def test_slashes_normalized(self) -> None:
        """Surrounding slashes and backslashes are normalized."""
        assert to_pattern("/Http\\Stubs/") == "**/Http/Stubs/"

    def test_anchored_entry_kept(self) -> None:
        """An entry already starting with **/ is not prefixed twice."""
        assert to_pattern("**/cache") == "**/cache/"
