"""
Unit tests for gitignore-style ignore pattern matching.

Tests the pattern implementation used when building snapshots, including
wildcards, negation, rooted and directory patterns, and edge cases.
"""

import pytest

from treefilter.models.config import SnapshotConfig


class TestIgnorePatterns:
    """Test cases for gitignore-style ignore patterns."""

    def test_basic_wildcards(self):
        """Test basic wildcard patterns (* and ?)."""
        config = SnapshotConfig(ignore=["*.pyc", "test?.txt", "temp*"])

        # Test * wildcard
        assert config.should_ignore("module.pyc")
        assert config.should_ignore("src/module.pyc")
        assert not config.should_ignore("module.py")

        # Test ? wildcard
        assert config.should_ignore("test1.txt")
        assert config.should_ignore("testA.txt")
        assert not config.should_ignore("test12.txt")
        assert not config.should_ignore("test.txt")

        # Test * at end
        assert config.should_ignore("temp123")
        assert config.should_ignore("temporary")
        assert not config.should_ignore("mytemp")

    def test_directory_wildcards(self):
        """Test ** directory wildcard patterns."""
        config = SnapshotConfig(ignore=["**/node_modules/**", "**/*.log", "build/**/temp"])

        # Test **/ prefix
        assert config.should_ignore("node_modules/package/index.js")
        assert config.should_ignore("project/node_modules/lib/file.js")
        assert config.should_ignore("deep/path/node_modules")

        # Test **/*.ext pattern
        assert config.should_ignore("app.log")
        assert config.should_ignore("logs/error.log")
        assert config.should_ignore("deep/path/debug.log")

        # Test middle ** pattern
        assert config.should_ignore("build/debug/temp")
        assert config.should_ignore("build/release/obj/temp")
        assert config.should_ignore("build/temp")  # Zero intermediate directories
        assert not config.should_ignore("other/build/debug/temp")

    def test_directory_only_patterns(self):
        """Test patterns with a trailing slash."""
        config = SnapshotConfig(ignore=["build/", "*.tmp/", "**/cache/"])

        assert config.should_ignore("build/")
        assert config.should_ignore("build")
        assert config.should_ignore("build/output.bin")
        assert config.should_ignore("project.tmp")
        assert config.should_ignore("deep/path/cache")
        assert config.should_ignore("cache/entry")
        assert not config.should_ignore("builder")

    def test_rooted_patterns(self):
        """Test patterns that are rooted (start with /)."""
        config = SnapshotConfig(ignore=["/build", "/src/*.py", "/*.log"])

        # Rooted patterns should only match at root
        assert config.should_ignore("build")
        assert config.should_ignore("src/main.py")
        assert config.should_ignore("error.log")

        # Should not match in subdirectories
        assert not config.should_ignore("project/build")
        assert not config.should_ignore("lib/src/main.py")
        assert not config.should_ignore("logs/error.log")

    def test_negation_patterns(self):
        """Test negation patterns (starting with !)."""
        config = SnapshotConfig(ignore=[
            "*.log",
            "!important.log",
            "temp/*",
            "!temp/keep.txt",
            "**/build/**",
            "!**/build/assets/**"
        ])

        # Basic negation
        assert config.should_ignore("debug.log")
        assert not config.should_ignore("important.log")  # Negated

        # Directory negation
        assert config.should_ignore("temp/delete.txt")
        assert not config.should_ignore("temp/keep.txt")  # Negated

        # Complex negation with **
        assert config.should_ignore("project/build/obj/file.o")
        assert not config.should_ignore("project/build/assets/style.css")  # Negated

    def test_character_classes(self):
        """Test character class patterns [abc] and [!abc]."""
        config = SnapshotConfig(ignore=["test[0-9].txt", "file[!abc].py", "doc[a-z].md"])

        # Positive character classes
        assert config.should_ignore("test1.txt")
        assert config.should_ignore("test9.txt")
        assert not config.should_ignore("testA.txt")
        assert not config.should_ignore("test10.txt")

        # Negative character classes
        assert config.should_ignore("filed.py")
        assert config.should_ignore("file1.py")
        assert not config.should_ignore("filea.py")
        assert not config.should_ignore("filec.py")

        # Range character classes
        assert config.should_ignore("doca.md")
        assert config.should_ignore("docz.md")
        assert not config.should_ignore("doc1.md")
        assert not config.should_ignore("docA.md")

    def test_unclosed_bracket_is_literal(self):
        """Test that an unclosed '[' matches itself."""
        config = SnapshotConfig(ignore=["draft[1"])

        assert config.should_ignore("draft[1")
        assert not config.should_ignore("draft1")

    def test_vault_patterns(self):
        """Test a realistic set of note vault patterns."""
        config = SnapshotConfig(ignore=[
            "**/.obsidian/**",
            "**/.trash/**",
            "*.canvas",
            "Templates/",
            "/Archive/**",
            "!/Archive/Keep/**",
            "*~",
            ".DS_Store"
        ])

        assert config.should_ignore(".obsidian/workspace.json")
        assert config.should_ignore("Sub/.trash/old.md")
        assert config.should_ignore("Boards/plan.canvas")
        assert config.should_ignore("Templates/daily.md")
        assert config.should_ignore("Areas/Templates")
        assert config.should_ignore("Archive/2020/notes.md")
        assert config.should_ignore("notes.md~")
        assert config.should_ignore("Projects/.DS_Store")

        assert not config.should_ignore("Archive/Keep/important.md")
        assert not config.should_ignore("Projects/Archive/notes.md")
        assert not config.should_ignore("Daily/2024-01-31.md")

    def test_pattern_order_matters(self):
        """Test that pattern order affects the final result."""
        config1 = SnapshotConfig(ignore=["*.log", "!important.log", "*.log"])  # Re-ignore after negation
        config2 = SnapshotConfig(ignore=["!important.log", "*.log"])  # Ignore after negation
        config3 = SnapshotConfig(ignore=["*.log", "!important.log"])

        assert config1.should_ignore("important.log")
        assert config2.should_ignore("important.log")
        assert not config3.should_ignore("important.log")

    def test_empty_and_comment_patterns(self):
        """Test handling of empty patterns and comments."""
        config = SnapshotConfig(ignore=[
            "",  # Empty pattern
            "   ",  # Whitespace only
            "# This is a comment",
            "*.pyc",
            "# Another comment",
            "*.log"
        ])

        assert config.ignore == ["*.pyc", "*.log"]
        assert config.should_ignore("test.pyc")
        assert config.should_ignore("debug.log")
        assert not config.should_ignore("# This is a comment")

    def test_edge_cases(self):
        """Test edge cases and degenerate patterns."""
        config = SnapshotConfig(ignore=[
            "*",  # Any single name
            "/",  # Nothing left after stripping
            "*/b",  # 'b' in any immediate subdirectory
            "**/c/**",  # Everything under any directory named 'c'
        ])

        assert config.should_ignore("file.txt")
        assert config.should_ignore("deep/path/file.txt")
        assert SnapshotConfig(ignore=["**"]).should_ignore("deep/path/file.txt")
        assert not SnapshotConfig(ignore=["/"]).should_ignore("anything")

        b_only = SnapshotConfig(ignore=["*/b"])
        assert b_only.should_ignore("dir/b")
        assert not b_only.should_ignore("deep/dir/b")  # Not immediate subdirectory
        assert not b_only.should_ignore("b")

        c_only = SnapshotConfig(ignore=["**/c/**"])
        assert c_only.should_ignore("c/file.txt")
        assert c_only.should_ignore("path/c/deep/file.txt")
        assert not c_only.should_ignore("path/cc/file.txt")

    def test_path_normalization(self):
        """Test that paths are normalized before matching."""
        config = SnapshotConfig(ignore=["temp/*.txt", "build/debug/"])

        assert config.should_ignore("temp/file.txt")
        assert config.should_ignore("./temp/file.txt")
        assert config.should_ignore("/temp/file.txt")

        assert config.should_ignore("build/debug/")
        assert config.should_ignore("build/debug")

    def test_case_sensitivity(self):
        """Test case sensitivity in pattern matching."""
        config = SnapshotConfig(ignore=["*.TXT", "Build/", "NODE_MODULES/"])

        # Patterns are case-sensitive
        assert config.should_ignore("file.TXT")
        assert not config.should_ignore("file.txt")

        assert config.should_ignore("Build/")
        assert not config.should_ignore("build/")

        assert config.should_ignore("NODE_MODULES/")
        assert not config.should_ignore("node_modules/")

    def test_default_patterns(self):
        """Test the default ignore list."""
        config = SnapshotConfig()

        assert config.should_ignore(".git/HEAD")
        assert config.should_ignore("Notes/.obsidian/app.json")
        assert config.should_ignore("web/node_modules/pkg/index.js")
        assert config.should_ignore("src/__pycache__/mod.cpython-312.pyc")
        assert not config.should_ignore("Notes/today.md")


class TestIgnorePatternValidation:
    """Test validation of ignore patterns."""

    def test_invalid_patterns(self):
        """Test that patterns compiling to an invalid regex raise errors."""
        with pytest.raises(ValueError, match="Invalid ignore pattern"):
            SnapshotConfig(ignore=["file[z-a].md"])  # Reversed character range

    def test_single_string_pattern(self):
        """Test that a single string is accepted as a one-item list."""
        config = SnapshotConfig(ignore="*.tmp")
        assert config.ignore == ["*.tmp"]
        assert config.should_ignore("a/b.tmp")

    def test_none_clears_patterns(self):
        """Test that None yields an empty ignore list."""
        config = SnapshotConfig(ignore=None)
        assert config.ignore == []
        assert not config.should_ignore(".git/HEAD")
