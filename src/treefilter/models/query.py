"""
Structured query data model for the fuzzy tree filter.

A StructuredQuery is the parsed form of a raw search string. It is produced once
per raw string by the query parser and is immutable afterwards.
"""

from typing import Dict, List, Any
from pydantic import BaseModel, ConfigDict, Field, model_validator


class StructuredQuery(BaseModel):
    """
    Parsed search query describing inclusion and exclusion rules per facet.

    Every list uses "any of" semantics during matching; order is preserved only
    for display and debugging.

    Attributes:
        search_terms: Free-text terms matched as subsequences of item names
        path_includes: Values that must appear as a substring of the item path
        path_excludes: Values that exclude any item whose path contains them
        folder_includes: Folder name filters (subsequence on name, substring on path)
        folder_excludes: Folder exclusions (subsequence on name, substring on path)
        file_includes: File name filters (subsequence on name)
        file_excludes: File name exclusions (subsequence on name)
        tag_includes: Tags a file must carry one of (no leading '#')
        tag_excludes: Tags that exclude a file (no leading '#')
        content_includes: Reserved content facet, recorded but never matched
        exact_phrases: Case-insensitive substrings of the item name
        regex_patterns: Raw regular expression bodies, compiled at match time
        is_empty_query: True iff the raw query was empty or whitespace-only
    """

    search_terms: List[str] = Field(default_factory=list, description="Free-text fuzzy terms")
    path_includes: List[str] = Field(default_factory=list, description="path: values")
    path_excludes: List[str] = Field(default_factory=list, description="-path: values")
    folder_includes: List[str] = Field(default_factory=list, description="folder: values")
    folder_excludes: List[str] = Field(default_factory=list, description="-folder: values")
    file_includes: List[str] = Field(default_factory=list, description="file: values")
    file_excludes: List[str] = Field(default_factory=list, description="-file: values")
    tag_includes: List[str] = Field(default_factory=list, description="tag: values")
    tag_excludes: List[str] = Field(default_factory=list, description="-tag: values")
    content_includes: List[str] = Field(default_factory=list, description="content: values (inert)")
    exact_phrases: List[str] = Field(default_factory=list, description="Quoted phrases")
    regex_patterns: List[str] = Field(default_factory=list, description="Slash-delimited regex bodies")
    is_empty_query: bool = Field(False, description="Whether the raw query was blank")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode='after')
    def validate_empty_query(self):
        """An empty query carries no criteria."""
        if self.is_empty_query and self.has_criteria():
            raise ValueError("An empty query cannot carry search criteria")
        return self

    @classmethod
    def empty(cls) -> 'StructuredQuery':
        """Create the query produced by a blank search string."""
        return cls(is_empty_query=True)

    def has_criteria(self) -> bool:
        """Check if any list holds a value, including the inert content facet."""
        return any(getattr(self, name) for name in self._list_fields())

    def has_constraints(self) -> bool:
        """Check if any operator, phrase or regex constraint is active."""
        return any(
            getattr(self, name)
            for name in self._list_fields()
            if name not in ('search_terms', 'content_includes')
        )

    def has_exclusions(self) -> bool:
        return bool(self.path_excludes or self.folder_excludes or self.file_excludes or self.tag_excludes)

    @classmethod
    def _list_fields(cls) -> List[str]:
        return [name for name in cls.model_fields if name != 'is_empty_query']

    def to_dict(self) -> Dict[str, Any]:
        """Convert the query to a dictionary representation."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StructuredQuery':
        """Create a StructuredQuery from a dictionary."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation listing only the active parts of the query."""
        if self.is_empty_query:
            return "Query: <empty>"

        parts = []
        for name in self._list_fields():
            values = getattr(self, name)
            if values:
                parts.append(f"{name}={values!r}")
        return "Query: " + " | ".join(parts)
