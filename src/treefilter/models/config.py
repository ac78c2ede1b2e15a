"""
Configuration data models for the fuzzy tree filter.

This module defines the settings that shape matching (case sensitivity and the
display hints carried for the UI layer) and the settings used when building a
tree snapshot from a directory on disk.
"""

from typing import Dict, List, Any
from pathlib import Path
import re
from pydantic import BaseModel, Field, PrivateAttr, field_validator


class SearchSettings(BaseModel):
    """
    Settings applied while matching queries against tree items.

    Attributes:
        case_sensitive: Use case-sensitive fuzzy and regex matching
        show_match_count: Whether TreeFilter.match_summary reports the number of matches
        highlight_matches: Whether TreeFilter.highlight_positions reports matched characters
    """

    case_sensitive: bool = Field(False, description="Use case-sensitive fuzzy and regex matching")
    show_match_count: bool = Field(True, description="Display the number of matches")
    highlight_matches: bool = Field(True, description="Highlight matching characters in names")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class SnapshotConfig(BaseModel):
    """
    Configuration for building tree snapshots from the filesystem.

    Attributes:
        ignore: Gitignore-style patterns for entries left out of the snapshot
        show_hidden: Whether to include entries whose name starts with '.'
        read_tags: Whether to read tags from tagged file types
        tag_extensions: File extensions that are scanned for tags
        max_items: Maximum number of items in one snapshot
        max_bytes_per_file: Maximum file size read when extracting tags (bytes)
    """

    ignore: List[str] = Field(
        default_factory=lambda: [
            "**/.git/**",
            "**/.obsidian/**",
            "**/node_modules/**",
            "**/__pycache__/**"
        ],
        description="List of ignore patterns (gitignore-style)"
    )
    show_hidden: bool = Field(False, description="Include hidden files and folders")
    read_tags: bool = Field(True, description="Read tags from tagged file types")
    tag_extensions: List[str] = Field(default_factory=lambda: [".md"], description="Extensions scanned for tags")
    max_items: int = Field(200000, gt=0, description="Maximum number of items in one snapshot")
    max_bytes_per_file: int = Field(1000000, gt=0, description="Maximum file size read for tags (bytes)")

    _compiled_ignore_patterns: List[Dict[str, Any]] = PrivateAttr(default_factory=list)

    @field_validator('tag_extensions', mode='before')
    @classmethod
    def validate_tag_extensions(cls, v) -> List[str]:
        """Normalize extensions to lower case with a leading dot."""
        if isinstance(v, str):
            v = [v]

        normalized = []
        for ext in v:
            ext = str(ext).strip().lower()
            if not ext:
                continue
            if not ext.startswith('.'):
                ext = '.' + ext
            normalized.append(ext)
        return normalized

    @field_validator('ignore', mode='before')
    @classmethod
    def validate_ignore(cls, v) -> List[str]:
        """Drop blank patterns and comments."""
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        return [str(p).strip() for p in v if str(p).strip() and not str(p).strip().startswith('#')]

    def model_post_init(self, __context) -> None:
        """Compile ignore patterns for efficient matching."""
        self._compiled_ignore_patterns = []
        for pattern in self.ignore:
            is_negation = pattern.startswith('!')
            try:
                regex = re.compile(self._gitignore_to_regex(pattern[1:] if is_negation else pattern))
            except re.error as e:
                raise ValueError(f"Invalid ignore pattern '{pattern}': {e}")
            self._compiled_ignore_patterns.append({
                'regex': regex,
                'is_negation': is_negation,
                'original': pattern
            })

    @staticmethod
    def _gitignore_to_regex(pattern: str) -> str:
        """
        Convert a gitignore-style pattern to a regex over relative POSIX paths.

        Supports '*', '?', character classes, '**' directory wildcards, rooted
        patterns (leading '/') and directory patterns (trailing '/' or '/**').
        Patterns without a slash match a path component anywhere in the tree.
        A matching directory also matches everything below it.

        Args:
            pattern: Gitignore-style pattern (without a leading '!')

        Returns:
            Regex pattern string
        """
        is_rooted = pattern.startswith('/')
        pattern = pattern.strip('/')
        if pattern.endswith('/**'):
            pattern = pattern[:-3]

        is_floating = not is_rooted and '/' not in pattern
        if not is_rooted and pattern.startswith('**/'):
            pattern = pattern[3:]
            is_floating = True

        if not pattern:
            return r'(?!)'  # Never matches anything

        segments = pattern.split('/')
        regex_parts = []
        for i, segment in enumerate(segments):
            if segment == '**':
                regex_parts.append(r'.*' if i == len(segments) - 1 else r'(?:[^/]+/)*')
                continue
            regex_parts.append(_translate_segment(segment))
            if i < len(segments) - 1:
                regex_parts.append('/')

        prefix = r'(?:^|/)' if is_floating else '^'
        return f"{prefix}{''.join(regex_parts)}(?:/.*)?$"

    def should_ignore(self, path: str) -> bool:
        """
        Check if a relative path should be ignored.

        Patterns are processed in order, so a later negation ('!pattern') can
        re-include a path an earlier pattern ignored.

        Args:
            path: Path relative to the snapshot root

        Returns:
            True if the path should be ignored
        """
        normalized_path = Path(path).as_posix().lstrip('/')

        should_ignore_path = False
        for pattern_info in self._compiled_ignore_patterns:
            if pattern_info['regex'].search(normalized_path):
                should_ignore_path = not pattern_info['is_negation']

        return should_ignore_path

    def is_tagged_file(self, name: str) -> bool:
        """Check if a file name has one of the tag-bearing extensions."""
        return self.read_tags and Path(name).suffix.lower() in self.tag_extensions

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class TreeFilterConfig(BaseModel):
    """
    Main configuration class for the fuzzy tree filter.

    Attributes:
        search: Matching settings
        snapshot: Filesystem snapshot settings
    """

    search: SearchSettings = Field(default_factory=SearchSettings, description="Matching settings")
    snapshot: SnapshotConfig = Field(default_factory=SnapshotConfig, description="Filesystem snapshot settings")

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any warnings."""
        warnings = []

        if self.snapshot.read_tags and not self.snapshot.tag_extensions:
            warnings.append("Tag reading is enabled but no tag extensions are configured")

        if self.snapshot.max_items > 1000000:
            warnings.append("Very high max_items limit may cause memory issues")

        if self.snapshot.max_bytes_per_file > 50000000:  # 50MB
            warnings.append("Very high max_bytes_per_file limit may slow down tag extraction")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'search': self.search.to_dict(),
            'snapshot': self.snapshot.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TreeFilterConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the configuration."""
        parts = [f"Case sensitive: {self.search.case_sensitive}"]
        parts.append(f"Ignore patterns: {len(self.snapshot.ignore)}")
        parts.append(f"Tags: {', '.join(self.snapshot.tag_extensions) if self.snapshot.read_tags else 'off'}")
        parts.append(f"Max items: {self.snapshot.max_items}")

        return " | ".join(parts)


def validate_config_dict(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a configuration dictionary using Pydantic.

    Args:
        config_data: Dictionary containing configuration data

    Returns:
        Validated and normalized configuration dictionary

    Raises:
        ValueError: If configuration is invalid
    """
    unknown = set(config_data) - set(TreeFilterConfig.model_fields)
    if unknown:
        raise ValueError(f"Unknown configuration sections: {', '.join(sorted(unknown))}")

    # An empty YAML section loads as None
    config_data = {key: value for key, value in config_data.items() if value is not None}

    for section, value in config_data.items():
        if not isinstance(value, dict):
            raise ValueError(f"Configuration section '{section}' must be a mapping")

    try:
        return TreeFilterConfig.model_validate(config_data).to_dict()
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}") from e


def _translate_segment(segment: str) -> str:
    """Translate one path segment of a glob into a regex that never crosses '/'."""
    result = []
    i = 0
    while i < len(segment):
        char = segment[i]
        if char == '*':
            result.append('[^/]*')
        elif char == '?':
            result.append('[^/]')
        elif char == '[':
            close = segment.find(']', i + 2 if segment[i + 1:i + 2] in ('!', '^') else i + 1)
            if close == -1:
                result.append(re.escape(char))
            else:
                body = segment[i + 1:close]
                if body[:1] in ('!', '^'):
                    body = '^' + body[1:]
                result.append('[' + body.replace('\\', '\\\\') + ']')
                i = close
        else:
            result.append(re.escape(char))
        i += 1
    return ''.join(result)
