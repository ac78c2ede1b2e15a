"""
Filesystem snapshot builder for the fuzzy tree filter.

This module walks a directory and produces the flat TreeItem snapshot the filter
engine evaluates. It respects ignore patterns and item limits, and reads tags
from markdown-style files (YAML front matter plus inline #tags).
"""

import os
import re
from pathlib import Path
from typing import Dict, List, Optional, Set, Union
import logging

import yaml

from ..models.items import TreeItem, ItemKind, ROOT_PATH, normalize_tag
from ..models.config import SnapshotConfig


logger = logging.getLogger(__name__)

_FRONT_MATTER = re.compile(r'\A---[ \t]*\r?\n(.*?)\r?\n(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)', re.DOTALL)
_INLINE_TAG = re.compile(r'(?<![\w#&/])#([^\s#!"$%&\'()*+,.:;<=>?@\[\]^`{|}~]+)')
_FENCED_CODE = re.compile(r'^```.*?^```', re.DOTALL | re.MULTILINE)


def extract_tags(text: str) -> Set[str]:
    """
    Extract tags from markdown-style text.

    Tags come from the 'tags' (or 'tag') key of YAML front matter, given as a
    list or a comma/space separated string, and from inline '#tag' tokens in
    the body. Fenced code blocks are skipped. Purely numeric inline tokens such
    as '#123' are not tags.

    Args:
        text: File contents

    Returns:
        Set of normalized tags (no leading '#')
    """
    tags: Set[str] = set()
    body = text

    match = _FRONT_MATTER.match(text)
    if match:
        body = text[match.end():]
        try:
            front_matter = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            logger.debug(f"Ignoring unparsable front matter: {e}")
            front_matter = None

        if isinstance(front_matter, dict):
            raw_tags = front_matter.get('tags', front_matter.get('tag'))
            if isinstance(raw_tags, str):
                raw_tags = re.split(r'[,\s]+', raw_tags)
            if isinstance(raw_tags, list):
                tags.update(normalize_tag(str(tag)) for tag in raw_tags if tag is not None)

    body = _FENCED_CODE.sub('', body)
    for tag in _INLINE_TAG.findall(body):
        if not tag.isdigit():
            tags.add(tag)

    tags.discard('')
    return tags


class SnapshotBuilder:
    """
    Builder that turns a directory tree into a flat TreeItem snapshot.

    Item paths are relative to the walked root and joined with '/', the root
    itself is the folder "/". Entries are emitted parents first.
    """

    def __init__(self, config: Optional[SnapshotConfig] = None):
        """
        Initialize the snapshot builder.

        Args:
            config: Snapshot configuration (defaults are used if None)
        """
        self.config = config or SnapshotConfig()
        self._stats = self._empty_stats()

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            'directories_traversed': 0,
            'files_scanned': 0,
            'items_ignored': 0,
            'files_tagged': 0,
            'errors': 0
        }

    def build(self, root: Union[str, Path]) -> List[TreeItem]:
        """
        Walk a directory and build its snapshot.

        Args:
            root: Directory to snapshot

        Returns:
            List of TreeItems, starting with the root folder. Empty if root is
            missing or not a directory.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            logger.warning(f"Root directory does not exist: {root_path}")
            return []
        if not root_path.is_dir():
            logger.warning(f"Root path is not a directory: {root_path}")
            return []

        logger.info(f"Building tree snapshot: {root_path}")
        items = [TreeItem(path=ROOT_PATH, name="", kind=ItemKind.FOLDER)]

        try:
            self._walk(root_path, items)
        except OSError as e:
            logger.error(f"Error walking directory {root_path}: {e}")
            self._stats['errors'] += 1

        return items

    def _walk(self, root_path: Path, items: List[TreeItem]) -> None:
        """Walk root_path, appending items until the item limit is reached."""
        max_items = self.config.max_items

        for current_dir, subdirs, files in os.walk(root_path, onerror=self._on_walk_error):
            self._stats['directories_traversed'] += 1
            relative_dir = Path(current_dir).relative_to(root_path).as_posix()
            prefix = '' if relative_dir == '.' else relative_dir + '/'

            subdirs[:] = sorted(
                (d for d in subdirs if self._is_included(prefix + d, d)),
                key=str.lower
            )

            for dirname in subdirs:
                if len(items) >= max_items:
                    logger.warning(f"Reached maximum item limit: {max_items}")
                    return
                items.append(TreeItem(path=prefix + dirname, name=dirname, kind=ItemKind.FOLDER))

            for filename in sorted(files, key=str.lower):
                relative_path = prefix + filename
                if not self._is_included(relative_path, filename):
                    continue
                if len(items) >= max_items:
                    logger.warning(f"Reached maximum item limit: {max_items}")
                    return

                self._stats['files_scanned'] += 1
                tags = self._read_tags(Path(current_dir) / filename) if self.config.is_tagged_file(filename) else set()
                items.append(TreeItem(path=relative_path, name=filename, kind=ItemKind.FILE, tags=tags))

    def _is_included(self, relative_path: str, name: str) -> bool:
        """Check hidden-entry and ignore rules for one entry."""
        if not self.config.show_hidden and name.startswith('.'):
            self._stats['items_ignored'] += 1
            return False
        if self.config.should_ignore(relative_path):
            self._stats['items_ignored'] += 1
            return False
        return True

    def _read_tags(self, file_path: Path) -> Set[str]:
        """
        Read the tags of a single file.

        Returns:
            Set of tags, empty if the file is too large or cannot be read
        """
        try:
            size = file_path.stat().st_size
            if size > self.config.max_bytes_per_file:
                logger.debug(f"Skipping tags of large file: {file_path} ({size} bytes)")
                return set()

            with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
                tags = extract_tags(f.read())

        except OSError as e:
            logger.warning(f"Error reading tags from {file_path}: {e}")
            self._stats['errors'] += 1
            return set()

        if tags:
            self._stats['files_tagged'] += 1
        return tags

    def _on_walk_error(self, error: OSError) -> None:
        logger.warning(f"Error listing directory {error.filename}: {error}")
        self._stats['errors'] += 1

    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about the last snapshot builds.

        Returns:
            Dictionary containing operation statistics
        """
        return self._stats.copy()

    def reset_stats(self) -> None:
        """Reset the statistics counters."""
        self._stats = self._empty_stats()


def build_snapshot(root: Union[str, Path], config: Optional[SnapshotConfig] = None) -> List[TreeItem]:
    """
    Convenience function to snapshot a directory.

    Args:
        root: Directory to snapshot
        config: Snapshot configuration (optional)

    Returns:
        List of TreeItems for the directory tree
    """
    return SnapshotBuilder(config).build(root)
