"""
Fuzzy Tree Filter - Core Package

Filters a tree of files and folders against a small query language and decides
which items are visible and why.
"""

from .models import (
    TreeItem,
    ItemKind,
    StructuredQuery,
    Decision,
    MatchType,
    count_matches,
    visible_paths,
    diff_decisions
)
from .tools.fuzzy import fuzzy_match, match_positions
from .tools.query_parser import QueryParser, parse_query
from .tools.item_matcher import ItemMatcher, RegexCache
from .tools.tree_filter import TreeFilter, evaluate, filter_tree

__version__ = "0.1.0"

__all__ = [
    'TreeItem',
    'ItemKind',
    'StructuredQuery',
    'Decision',
    'MatchType',
    'count_matches',
    'visible_paths',
    'diff_decisions',
    'fuzzy_match',
    'match_positions',
    'QueryParser',
    'parse_query',
    'ItemMatcher',
    'RegexCache',
    'TreeFilter',
    'evaluate',
    'filter_tree'
]
