"""
Subsequence matching for the fuzzy tree filter.

A pattern matches a text when every pattern character appears in the text in the
same relative order, not necessarily next to each other ("dgov" matches
"Data Governance").
"""

from typing import List, Optional


def fuzzy_match(text: str, pattern: str, case_sensitive: bool = False) -> bool:
    """
    Check whether pattern occurs as an ordered subsequence of text.

    The scan is greedy and leftmost: it reports whether a match exists, not the
    best alignment.

    Args:
        text: Text to search in
        pattern: Characters to look for, in order
        case_sensitive: Compare characters exactly instead of case-folded

    Returns:
        True if every pattern character was found in order
    """
    if not pattern:
        return True
    if not text:
        return False

    if not case_sensitive:
        text = text.lower()
        pattern = pattern.lower()

    pattern_idx = 0
    pattern_len = len(pattern)
    for char in text:
        if char == pattern[pattern_idx]:
            pattern_idx += 1
            if pattern_idx == pattern_len:
                return True

    return False


def match_positions(text: str, pattern: str, case_sensitive: bool = False) -> Optional[List[int]]:
    """
    Get the text indices consumed by the greedy subsequence scan.

    The display layer uses these to highlight matched characters.

    Args:
        text: Text to search in
        pattern: Characters to look for, in order
        case_sensitive: Compare characters exactly instead of case-folded

    Returns:
        Indices into text for each pattern character, [] for an empty pattern,
        or None when the pattern does not match
    """
    if not pattern:
        return []
    if not text:
        return None

    haystack = text if case_sensitive else text.lower()
    needle = pattern if case_sensitive else pattern.lower()

    positions = []
    pattern_idx = 0
    for text_idx, char in enumerate(haystack):
        if pattern_idx < len(needle) and char == needle[pattern_idx]:
            positions.append(text_idx)
            pattern_idx += 1

    if pattern_idx != len(needle):
        return None
    return positions
