"""
Tree item data models for the fuzzy tree filter.

This module defines the snapshot records the filter engine evaluates: one
TreeItem per file or folder, linked into a tree through parent paths.
"""

from typing import Dict, Any, FrozenSet, Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


ROOT_PATH = "/"


class ItemKind(Enum):
    """Kinds of tree items."""
    FILE = "file"
    FOLDER = "folder"


def parent_of(path: str) -> str:
    """
    Get the parent path of a '/'-separated path.

    Top-level paths ("Projects") and the root itself resolve to the root path.

    Args:
        path: Item path

    Returns:
        Parent path, or "/" for top-level items
    """
    index = path.rfind('/')
    if index <= 0:
        return ROOT_PATH
    return path[:index]


def normalize_path(path: str) -> str:
    """Use '/' separators and drop trailing slashes from non-root paths."""
    path = path.strip().replace('\\', '/')
    if path and path != ROOT_PATH:
        path = path.rstrip('/') or ROOT_PATH
    return path


def normalize_tag(tag: str) -> str:
    """Strip surrounding whitespace and a single leading '#' from a tag."""
    tag = tag.strip()
    if tag.startswith('#'):
        tag = tag[1:]
    return tag


class TreeItem(BaseModel):
    """
    A single file or folder in a tree snapshot.

    Items are supplied fresh on every evaluation; the filter engine never keeps
    a reference to them between calls.

    Attributes:
        path: Unique '/'-separated path ("/" for the root folder)
        name: Display name of the file or folder
        kind: Whether this item is a file or a folder
        parent_path: Path of the containing folder (None for the root)
        tags: Normalized tag set (files only, no leading '#')
    """

    path: str = Field(..., min_length=1, description="Unique '/'-separated item path")
    name: str = Field("", description="Display name of the item")
    kind: ItemKind = Field(ItemKind.FILE, description="File or folder")
    parent_path: Optional[str] = Field(None, description="Path of the containing folder")
    tags: FrozenSet[str] = Field(default_factory=frozenset, description="Normalized tag set")

    model_config = ConfigDict(frozen=True)

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Normalize separators and strip trailing slashes from non-root paths."""
        v = normalize_path(v)
        if not v:
            raise ValueError("Item path cannot be empty")
        return v

    @field_validator('kind', mode='before')
    @classmethod
    def validate_kind(cls, v) -> ItemKind:
        """Ensure kind is an ItemKind enum."""
        if isinstance(v, str):
            try:
                return ItemKind(v.lower())
            except ValueError:
                raise ValueError(f"Invalid item kind: {v}")
        return v

    @field_validator('tags', mode='before')
    @classmethod
    def validate_tags(cls, v) -> FrozenSet[str]:
        """Normalize tags, dropping a leading '#' and empty entries."""
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(tag for tag in (normalize_tag(t) for t in v) if tag)

    @model_validator(mode='before')
    @classmethod
    def fill_derived_fields(cls, data: Any) -> Any:
        """Derive name and parent path from the item path when they are omitted."""
        if not isinstance(data, dict) or not isinstance(data.get('path'), str):
            return data

        data = dict(data)
        path = normalize_path(data['path'])
        if not path:
            return data

        if not data.get('name') and path != ROOT_PATH:
            data['name'] = path.rsplit('/', 1)[-1]

        if 'parent_path' not in data:
            data['parent_path'] = None if path == ROOT_PATH else parent_of(path)

        # Folders never carry tags
        kind = data.get('kind')
        if kind is ItemKind.FOLDER or (isinstance(kind, str) and kind.lower() == ItemKind.FOLDER.value):
            data['tags'] = frozenset()

        return data

    @property
    def is_folder(self) -> bool:
        return self.kind is ItemKind.FOLDER

    @property
    def is_root(self) -> bool:
        return self.path == ROOT_PATH

    @property
    def match_name(self) -> str:
        """
        Name used for name-based matching.

        Files match on their base name without the final extension, so
        "report.md" is matched as "report". Folders match on their full name.
        """
        if self.is_folder:
            return self.name
        stem, dot, _ = self.name.rpartition('.')
        return stem if dot and stem else self.name

    @property
    def effective_parent_path(self) -> str:
        """Parent path, falling back to the root for items without one."""
        return self.parent_path or ROOT_PATH

    @classmethod
    def file(cls, path: str, tags=None, **kwargs) -> 'TreeItem':
        """Create a file item."""
        return cls(path=path, kind=ItemKind.FILE, tags=tags or frozenset(), **kwargs)

    @classmethod
    def folder(cls, path: str, **kwargs) -> 'TreeItem':
        """Create a folder item."""
        return cls(path=path, kind=ItemKind.FOLDER, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the item to a dictionary representation."""
        data = self.model_dump()
        data['kind'] = self.kind.value
        data['tags'] = sorted(self.tags)
        return data
