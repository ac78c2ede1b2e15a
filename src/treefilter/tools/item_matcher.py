"""
Single-item matching for the fuzzy tree filter.

The ItemMatcher decides whether one tree item satisfies one structured query.
Exclusions are applied first and always win over inclusions; each facet with
values then acts as a gate; free-text terms are checked last.
"""

import re
import logging
from typing import Dict, List, Optional, Tuple

from ..models.items import TreeItem, ROOT_PATH
from ..models.query import StructuredQuery
from .fuzzy import fuzzy_match


logger = logging.getLogger(__name__)


class RegexCache:
    """
    Cache of compiled regular expressions owned by the caller.

    Patterns that fail to compile are remembered as None so the error is only
    reported once. A cache can be shared across evaluation passes by passing
    the same instance in; otherwise each pass gets its own.
    """

    def __init__(self):
        self._compiled: Dict[Tuple[str, int], Optional[re.Pattern]] = {}

    def get(self, pattern: str, flags: int = 0) -> Optional[re.Pattern]:
        """
        Get the compiled form of a pattern.

        Args:
            pattern: Regular expression source
            flags: re module flags

        Returns:
            Compiled pattern, or None if the pattern is invalid
        """
        key = (pattern, flags)
        if key not in self._compiled:
            try:
                self._compiled[key] = re.compile(pattern, flags)
            except re.error as e:
                logger.warning(f"Invalid regex pattern '{pattern}': {e}")
                self._compiled[key] = None
        return self._compiled[key]

    def clear(self) -> None:
        """Remove every cached pattern."""
        self._compiled.clear()

    def __len__(self) -> int:
        return len(self._compiled)


class ItemMatcher:
    """
    Matcher applying one StructuredQuery to individual tree items.

    Regex patterns are compiled once when the matcher is created, so one
    matcher should be built per evaluation pass and reused for every item.
    """

    def __init__(self, query: StructuredQuery, case_sensitive: bool = False,
                 regex_cache: Optional[RegexCache] = None):
        """
        Initialize the matcher.

        Args:
            query: Parsed query to match against
            case_sensitive: Use case-sensitive fuzzy and regex matching
            regex_cache: Cache for compiled patterns (a private one is created if None)
        """
        self.query = query
        self.case_sensitive = case_sensitive
        self.regex_cache = regex_cache if regex_cache is not None else RegexCache()

        flags = 0 if case_sensitive else re.IGNORECASE
        compiled = (self.regex_cache.get(pattern, flags) for pattern in query.regex_patterns)
        # Invalid patterns never match, but an all-invalid list still constrains
        self._regexes: List[re.Pattern] = [regex for regex in compiled if regex is not None]
        self._lowered_phrases = [phrase.lower() for phrase in query.exact_phrases]

    def matches(self, item: TreeItem) -> bool:
        """
        Check whether an item satisfies the query.

        Args:
            item: Tree item to check

        Returns:
            True if the item matches
        """
        query = self.query
        name = item.match_name
        path = item.path

        if self.is_excluded(item):
            return False

        if query.folder_includes:
            if not self.in_included_folder(item):
                return False

        if query.file_includes:
            if item.is_folder:
                return False
            if not any(self._fuzzy(name, pattern) for pattern in query.file_includes):
                return False

        if query.path_includes:
            if not any(pattern in path for pattern in query.path_includes):
                return False

        if query.tag_includes:
            # Folders carry no tags
            if not any(tag in item.tags for tag in query.tag_includes):
                return False

        if query.tag_excludes:
            if any(tag in item.tags for tag in query.tag_excludes):
                return False

        if self._lowered_phrases:
            lowered_name = name.lower()
            if not any(phrase in lowered_name for phrase in self._lowered_phrases):
                return False

        if query.regex_patterns:
            if not any(regex.search(name) or regex.search(path) for regex in self._regexes):
                return False

        if query.search_terms:
            if item.is_folder:
                return any(self._fuzzy(name, term) or self._fuzzy(path, term) for term in query.search_terms)
            return any(self._fuzzy(name, term) for term in query.search_terms)

        # Only constraints were given and the item survived all of them
        return True

    def in_included_folder(self, item: TreeItem) -> bool:
        """
        Check the folder inclusion rule for an item.

        A folder passes when a value subsequence-matches its name or is a
        substring of its path. A file passes through its location: a value
        must be a substring of its parent path or subsequence-match the name
        of one of its ancestor folders.

        Args:
            item: Tree item to check

        Returns:
            True if any folder inclusion applies
        """
        patterns = self.query.folder_includes
        if item.is_folder:
            return any(self._fuzzy(item.match_name, pattern) or pattern in item.path for pattern in patterns)

        parent = item.effective_parent_path
        if parent == ROOT_PATH:
            return False
        folder_names = [segment for segment in parent.split('/') if segment]
        return any(
            pattern in parent or any(self._fuzzy(folder_name, pattern) for folder_name in folder_names)
            for pattern in patterns
        )

    def is_excluded(self, item: TreeItem) -> bool:
        """
        Check the exclusion rules for an item.

        Args:
            item: Tree item to check

        Returns:
            True if any path, folder or file exclusion applies
        """
        query = self.query
        name = item.match_name
        path = item.path

        if any(pattern in path for pattern in query.path_excludes):
            return True

        # Path containment also applies to files, so a folder's contents go with it
        if any(self._fuzzy(name, pattern) or pattern in path for pattern in query.folder_excludes):
            return True

        if any(self._fuzzy(name, pattern) for pattern in query.file_excludes):
            return True

        return False

    def _fuzzy(self, text: str, pattern: str) -> bool:
        return fuzzy_match(text, pattern, self.case_sensitive)
