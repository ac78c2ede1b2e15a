"""
Decision data models for the fuzzy tree filter.

This module defines the per-item output of one evaluation pass together with
small helpers the display layer uses to summarize and diff decision maps.
"""

from typing import Dict, Mapping, Optional, Set, Any
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class MatchType(Enum):
    """Why an item is (or is not) part of the filtered tree."""
    FOLDER_MATCH = "folder_match"
    FILE_MATCH = "file_match"
    CONTAINS_MATCH = "contains_match"
    NONE = "none"


class Decision(BaseModel):
    """
    Visibility decision for a single tree item.

    Attributes:
        match_type: Classification of the item for this query
        should_show: Whether the item is visible in the filtered tree
    """

    match_type: MatchType = Field(MatchType.NONE, description="Match classification")
    should_show: bool = Field(False, description="Whether the item is visible")

    model_config = ConfigDict(frozen=True)

    @field_validator('match_type', mode='before')
    @classmethod
    def validate_match_type(cls, v) -> MatchType:
        """Ensure match_type is MatchType enum."""
        if isinstance(v, str):
            try:
                return MatchType(v)
            except ValueError:
                raise ValueError(f"Invalid match type: {v}")
        return v

    @property
    def is_direct_match(self) -> bool:
        """Check if the item itself matched the query."""
        return self.match_type in (MatchType.FOLDER_MATCH, MatchType.FILE_MATCH)

    def to_dict(self) -> Dict[str, Any]:
        return {'match_type': self.match_type.value, 'should_show': self.should_show}


# Shared instances; decisions are immutable so every pass can reuse them.
FOLDER_MATCH = Decision(match_type=MatchType.FOLDER_MATCH, should_show=True)
FILE_MATCH = Decision(match_type=MatchType.FILE_MATCH, should_show=True)
CONTAINS_MATCH = Decision(match_type=MatchType.CONTAINS_MATCH, should_show=True)
REVEALED = Decision(match_type=MatchType.NONE, should_show=True)
HIDDEN = Decision(match_type=MatchType.NONE, should_show=False)


def count_matches(decisions: Mapping[str, Decision]) -> int:
    """
    Count visible items that matched the query directly.

    Ancestors shown only to keep a match reachable, and contents revealed by a
    matching folder, are not counted.

    Args:
        decisions: Decision map from one evaluation pass

    Returns:
        Number of shown FILE_MATCH and FOLDER_MATCH entries
    """
    return sum(1 for decision in decisions.values() if decision.should_show and decision.is_direct_match)


def visible_paths(decisions: Mapping[str, Decision]) -> Set[str]:
    """Get the set of paths a decision map marks as shown."""
    return {path for path, decision in decisions.items() if decision.should_show}


def diff_decisions(previous: Mapping[str, Decision],
                   current: Mapping[str, Decision]) -> Dict[str, Optional[Decision]]:
    """
    Compare two decision maps from consecutive passes.

    Args:
        previous: Decision map from the earlier pass
        current: Decision map from the later pass

    Returns:
        Mapping of every path whose decision changed to its new decision, with
        None for paths that are no longer present in the current map
    """
    changes: Dict[str, Optional[Decision]] = {}

    for path, decision in current.items():
        old = previous.get(path)
        if old is None or old.match_type != decision.match_type or old.should_show != decision.should_show:
            changes[path] = decision

    for path in previous:
        if path not in current:
            changes[path] = None

    return changes
