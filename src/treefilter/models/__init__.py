"""
Data models for the fuzzy tree filter.

This module contains the snapshot, query and decision structures shared by the
parser, the matcher and the tree filter engine.
"""

from .items import TreeItem, ItemKind, ROOT_PATH
from .query import StructuredQuery
from .decisions import Decision, MatchType, count_matches, visible_paths, diff_decisions

__all__ = [
    'TreeItem',
    'ItemKind',
    'ROOT_PATH',
    'StructuredQuery',
    'Decision',
    'MatchType',
    'count_matches',
    'visible_paths',
    'diff_decisions'
]
