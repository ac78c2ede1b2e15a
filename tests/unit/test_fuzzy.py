"""
Unit tests for subsequence matching.
"""

import pytest

from treefilter.tools.fuzzy import fuzzy_match, match_positions


class TestFuzzyMatch:
    """Test cases for fuzzy_match."""

    def test_empty_pattern_always_matches(self):
        """Test that an empty pattern matches any text."""
        assert fuzzy_match("anything", "")
        assert fuzzy_match("anything", "", case_sensitive=True)
        assert fuzzy_match("", "")

    def test_empty_text_never_matches(self):
        """Test that empty text only matches an empty pattern."""
        assert not fuzzy_match("", "a")
        assert not fuzzy_match("", "a", case_sensitive=True)

    def test_subsequence_across_words(self):
        """Test matching characters spread across the text."""
        assert fuzzy_match("Data Governance", "dgov")
        assert fuzzy_match("Data Governance", "data gov")
        assert fuzzy_match("meeting-notes", "mtgnts")

    def test_case_sensitivity(self):
        """Test case-sensitive matching compares characters exactly."""
        assert not fuzzy_match("Data Governance", "dgov", True)
        assert fuzzy_match("Data Governance", "DGov", True)

    def test_order_matters(self):
        """Test that characters must appear in the pattern's order."""
        assert fuzzy_match("abc", "ac")
        assert not fuzzy_match("abc", "ca")

    def test_pattern_longer_than_text(self):
        """Test that a pattern longer than the text cannot match."""
        assert not fuzzy_match("ab", "abc")

    def test_repeated_characters_consumed_once(self):
        """Test that each text character satisfies at most one pattern character."""
        assert fuzzy_match("aab", "aa")
        assert not fuzzy_match("ab", "aa")

    @pytest.mark.parametrize("text,pattern,expected", [
        ("report.md", "rpt", True),
        ("Projects", "pjs", True),
        ("Projects", "xyz", False),
        ("2024-01-01 Daily", "2401", True),
    ])
    def test_examples(self, text, pattern, expected):
        """Test assorted name/pattern pairs."""
        assert fuzzy_match(text, pattern) is expected


class TestMatchPositions:
    """Test cases for match_positions."""

    def test_positions_follow_greedy_scan(self):
        """Test that positions are the earliest characters consumed."""
        assert match_positions("Data Governance", "dgov") == [0, 5, 6, 7]

    def test_no_match_returns_none(self):
        """Test that a failed match returns None."""
        assert match_positions("abc", "ca") is None
        assert match_positions("", "a") is None

    def test_empty_pattern_returns_empty_list(self):
        """Test that an empty pattern has no positions."""
        assert match_positions("abc", "") == []

    def test_case_sensitive_positions(self):
        """Test case-sensitive positions skip differently cased characters."""
        assert match_positions("aAa", "A", case_sensitive=True) == [1]
        assert match_positions("aAa", "A") == [0]

    def test_agrees_with_fuzzy_match(self):
        """Test that positions exist exactly when fuzzy_match succeeds."""
        samples = [("Data Governance", "dgv"), ("Projects", "jp"), ("notes", "ns")]
        for text, pattern in samples:
            assert (match_positions(text, pattern) is not None) == fuzzy_match(text, pattern)
