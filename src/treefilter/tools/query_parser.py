"""
Query language parser for the fuzzy tree filter.

Supported syntax:
- word: fuzzy (subsequence) match on file and folder names
- "exact phrase": case-insensitive substring match on names
- /regex/: regular expression match on names or paths
- path:value, -path:value: include/exclude items whose path contains value
- folder:value, -folder:value: folder name filters
- file:value, -file:value: file name filters
- tag:#name, -tag:#name: include/exclude files carrying a tag
- content:value: reserved facet, recorded but not matched

Operator values may be quoted to include whitespace (folder:"Meeting Notes").
Malformed input never raises; it degrades to a plain term or is dropped.
"""

import re
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from ..models.items import normalize_tag
from ..models.query import StructuredQuery


logger = logging.getLogger(__name__)

_OPERATOR_PREFIX = re.compile(r'(-?)([A-Za-z]+):')
_WHITESPACE = re.compile(r'\s')


class TokenType(Enum):
    """Types of query tokens."""
    TERM = "term"
    PHRASE = "phrase"
    REGEX = "regex"
    OPERATOR = "operator"


@dataclass
class QueryToken:
    """
    A single token of a raw query string.

    Attributes:
        type: Kind of token
        value: Token text; phrases and regexes have their delimiters removed,
            operators keep their full "-key:value" text
    """
    type: TokenType
    value: str


class QueryParser:
    """
    Parser turning raw search strings into StructuredQuery objects.

    Tokenization precedence at each token start is operator, then quoted
    phrase, then regex, then bare term.
    """

    FACETS = ('path', 'folder', 'file', 'tag', 'content')

    def parse(self, raw: Optional[str]) -> StructuredQuery:
        """
        Parse a raw query string.

        Args:
            raw: Query text as typed by the user

        Returns:
            StructuredQuery describing the query; blank input yields the empty query
        """
        if not raw or not raw.strip():
            return StructuredQuery.empty()

        criteria: Dict[str, List[str]] = {name: [] for name in (
            'search_terms', 'path_includes', 'path_excludes', 'folder_includes',
            'folder_excludes', 'file_includes', 'file_excludes', 'tag_includes',
            'tag_excludes', 'content_includes', 'exact_phrases', 'regex_patterns'
        )}

        for token in self.tokenize(raw):
            if token.type is TokenType.OPERATOR:
                self._parse_operator(token.value, criteria)
            elif token.type is TokenType.PHRASE:
                criteria['exact_phrases'].append(token.value)
            elif token.type is TokenType.REGEX:
                criteria['regex_patterns'].append(token.value)
            else:
                criteria['search_terms'].append(token.value)

        return StructuredQuery(is_empty_query=False, **criteria)

    def tokenize(self, raw: str) -> List[QueryToken]:
        """
        Split a raw query string into typed tokens.

        Args:
            raw: Query text

        Returns:
            Tokens in the order they appear
        """
        tokens = []
        pos = 0
        length = len(raw)

        while pos < length:
            if raw[pos].isspace():
                pos += 1
                continue

            operator = _OPERATOR_PREFIX.match(raw, pos)
            if operator:
                end = self._operator_end(raw, operator.end())
                tokens.append(QueryToken(TokenType.OPERATOR, raw[pos:end]))
                pos = end
                continue

            char = raw[pos]
            if char in ('"', '/'):
                close = raw.find(char, pos + 1)
                if close == pos + 1 and char == '"':
                    logger.debug("Dropping empty quoted phrase")
                    pos = close + 1
                    continue
                if close > pos + 1:
                    token_type = TokenType.PHRASE if char == '"' else TokenType.REGEX
                    tokens.append(QueryToken(token_type, raw[pos + 1:close]))
                    pos = close + 1
                    continue

            # Bare term, including unterminated quotes and slashes
            end = self._boundary(raw, pos)
            tokens.append(QueryToken(TokenType.TERM, raw[pos:end]))
            pos = end

        return tokens

    @staticmethod
    def _boundary(raw: str, start: int) -> int:
        """Get the index of the next whitespace character, or the end of raw."""
        match = _WHITESPACE.search(raw, start)
        return match.start() if match else len(raw)

    def _operator_end(self, raw: str, value_start: int) -> int:
        """Find where an operator token ends, honouring a quoted value."""
        if value_start < len(raw) and raw[value_start] == '"':
            close = raw.find('"', value_start + 1)
            if close != -1:
                return close + 1
        return self._boundary(raw, value_start)

    def _parse_operator(self, text: str, criteria: Dict[str, List[str]]) -> None:
        """Route an operator token's value into the matching criteria list."""
        is_negated = text.startswith('-')
        if is_negated:
            text = text[1:]

        keyword, _, value = text.partition(':')
        keyword = keyword.lower()
        value = value.strip()

        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1].strip()

        if keyword == 'tag':
            value = normalize_tag(value)

        if not value:
            logger.debug(f"Dropping operator without a value: {keyword}:")
            return

        if keyword not in self.FACETS:
            logger.debug(f"Dropping unknown operator: {keyword}:{value}")
            return

        if keyword == 'content':
            # Content exclusion is not supported; -content: is accepted and ignored
            if not is_negated:
                criteria['content_includes'].append(value)
            return

        suffix = 'excludes' if is_negated else 'includes'
        criteria[f'{keyword}_{suffix}'].append(value)


def parse_query(raw: Optional[str]) -> StructuredQuery:
    """
    Convenience function to parse a raw query string.

    Args:
        raw: Query text

    Returns:
        Parsed StructuredQuery
    """
    return QueryParser().parse(raw)
