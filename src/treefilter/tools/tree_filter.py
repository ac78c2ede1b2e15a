"""
Tree propagation engine for the fuzzy tree filter.

This module turns per-item match results into a consistent visibility decision
for every item of a tree snapshot. Matches stay reachable because their
ancestor folders are revealed, and a matching folder reveals its direct
contents.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Set

from ..models.items import TreeItem, ROOT_PATH, parent_of
from ..models.query import StructuredQuery
from ..models.decisions import (
    Decision,
    MatchType,
    FOLDER_MATCH,
    FILE_MATCH,
    CONTAINS_MATCH,
    REVEALED,
    HIDDEN,
    count_matches,
)
from ..models.config import SearchSettings
from .fuzzy import match_positions
from .item_matcher import ItemMatcher, RegexCache
from .query_parser import QueryParser


logger = logging.getLogger(__name__)


class TreeFilter:
    """
    Filter engine computing visibility decisions for tree snapshots.

    The engine keeps no state between calls: every evaluation works on the
    snapshot and query it is given.
    """

    def __init__(self, settings: Optional[SearchSettings] = None):
        """
        Initialize the tree filter.

        Args:
            settings: Search settings (defaults to case-insensitive matching)
        """
        self.settings = settings or SearchSettings()
        self.query_parser = QueryParser()

    def filter(self, items: Iterable[TreeItem], raw_query: Optional[str],
               regex_cache: Optional[RegexCache] = None) -> Dict[str, Decision]:
        """
        Parse a raw query and evaluate it against a snapshot.

        Args:
            items: Flat snapshot of every file and folder
            raw_query: Query text as typed by the user
            regex_cache: Optional caller-owned cache of compiled patterns

        Returns:
            Decision per item path; empty when the query is blank
        """
        return self.evaluate(items, self.query_parser.parse(raw_query), regex_cache)

    def evaluate(self, items: Iterable[TreeItem], query: StructuredQuery,
                 regex_cache: Optional[RegexCache] = None) -> Dict[str, Decision]:
        """
        Evaluate a structured query against a snapshot.

        Args:
            items: Flat snapshot of every file and folder
            query: Parsed query
            regex_cache: Optional caller-owned cache of compiled patterns

        Returns:
            Decision per item path. An empty map means no filtering is active
            and everything should be shown.
        """
        if query.is_empty_query:
            return {}

        items = list(items)
        matcher = ItemMatcher(query, self.settings.case_sensitive, regex_cache)

        matching_files: Set[str] = set()
        matching_folders: Set[str] = set()
        ancestors: Set[str] = set()

        for item in items:
            # The root is the container of the tree: revealed, never matched
            if item.is_root or not matcher.matches(item):
                continue
            if item.is_folder:
                matching_folders.add(item.path)
            else:
                matching_files.add(item.path)
                ancestors.add(item.effective_parent_path)

        for path in list(ancestors):
            self._add_ancestors(path, ancestors)
        for path in matching_folders:
            self._add_ancestors(path, ancestors)

        decisions: Dict[str, Decision] = {}
        for item in items:
            if item.path in decisions:
                logger.debug(f"Duplicate path in snapshot: {item.path}")
            decisions[item.path] = self._classify(item, matching_files, matching_folders, ancestors)

        logger.debug(
            f"Evaluated {len(items)} items: {len(matching_files)} file matches, "
            f"{len(matching_folders)} folder matches, {len(ancestors)} revealed ancestors"
        )
        return decisions

    def match_summary(self, decisions: Mapping[str, Decision]) -> Optional[str]:
        """
        Get the match count label for a decision map.

        Args:
            decisions: Decision map from one evaluation pass

        Returns:
            Label such as "3 matches", or None when the count is disabled in
            the settings or nothing matched
        """
        if not self.settings.show_match_count:
            return None
        count = count_matches(decisions)
        if count == 0:
            return None
        return f"{count} matches"

    def highlight_positions(self, item: TreeItem, decision: Decision,
                            query: StructuredQuery) -> List[int]:
        """
        Get the indices of item.name to highlight for a search.

        The first search term that matches the name as a subsequence supplies
        the positions.

        Args:
            item: Tree item being displayed
            decision: Decision computed for the item
            query: Parsed query the decision came from

        Returns:
            Character indices to highlight; empty when highlighting is disabled
            in the settings, the item did not match, or no term fits the name
        """
        if not self.settings.highlight_matches or decision.match_type is MatchType.NONE:
            return []
        for term in query.search_terms:
            positions = match_positions(item.name, term, self.settings.case_sensitive)
            if positions:
                return positions
        return []

    @staticmethod
    def _classify(item: TreeItem, matching_files: Set[str], matching_folders: Set[str],
                  ancestors: Set[str]) -> Decision:
        """Classify one item, highest priority rule first."""
        if item.path in matching_folders:
            return FOLDER_MATCH
        if item.path in matching_files:
            return FILE_MATCH
        if item.is_folder and item.path in ancestors:
            return CONTAINS_MATCH
        if not item.is_root and item.effective_parent_path in matching_folders:
            return REVEALED
        return HIDDEN

    @staticmethod
    def _add_ancestors(path: str, collection: Set[str]) -> None:
        """
        Add every ancestor of path to collection.

        The walk stops at the root or at the first ancestor already collected,
        whose own chain up to the root is then already present.
        """
        current = path
        while current != ROOT_PATH:
            parent = parent_of(current)
            if parent in collection:
                break
            collection.add(parent)
            current = parent


def evaluate(items: Iterable[TreeItem], query: StructuredQuery, case_sensitive: bool = False,
             regex_cache: Optional[RegexCache] = None) -> Dict[str, Decision]:
    """
    Convenience function to evaluate a parsed query against a snapshot.

    Args:
        items: Flat snapshot of every file and folder
        query: Parsed query
        case_sensitive: Use case-sensitive fuzzy and regex matching
        regex_cache: Optional caller-owned cache of compiled patterns

    Returns:
        Decision per item path
    """
    tree_filter = TreeFilter(SearchSettings(case_sensitive=case_sensitive))
    return tree_filter.evaluate(items, query, regex_cache)


def filter_tree(items: Iterable[TreeItem], raw_query: Optional[str],
                case_sensitive: bool = False) -> Dict[str, Decision]:
    """
    Convenience function to parse and evaluate a raw query against a snapshot.

    Args:
        items: Flat snapshot of every file and folder
        raw_query: Query text as typed by the user
        case_sensitive: Use case-sensitive fuzzy and regex matching

    Returns:
        Decision per item path
    """
    tree_filter = TreeFilter(SearchSettings(case_sensitive=case_sensitive))
    return tree_filter.filter(items, raw_query)

