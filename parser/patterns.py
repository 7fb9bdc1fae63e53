# -*- coding: utf-8 -*-
"""
DAT Grammar Patterns

Centralized keyword recognition and tokenizing for the ASCII tool database
family. Every dialect shares these; they differ only in their state machines.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from datforge_enums import Keyword


@dataclass(frozen=True)
class KeywordLine:
    """
    A line that starts with a structural keyword.

    Attributes:
        keyword: CLASS, FORMAT, DATA or END_DATA
        prefix: Everything before the keyword (indent and optional '#')
        rest: Everything after the keyword
        commented: True if the keyword was '#'-prefixed
    """
    keyword: Keyword
    prefix: str
    rest: str
    commented: bool

    @property
    def indent(self) -> str:
        return self.prefix[:len(self.prefix) - len(self.prefix.lstrip())]

    @property
    def marker(self) -> str:
        """The prefix without its leading indent (e.g. '#' or '# ')."""
        return self.prefix.lstrip()


class DatPatterns:
    """
    Collection of regex patterns for the DAT grammar.

    Organized by category:
    - Structural keywords (CLASS / FORMAT / DATA / END_DATA, optionally '#'-prefixed)
    - Field tokens and pipe-delimited values
    - Head comments (unit label)
    """

    # =========================================================================
    # STRUCTURE
    # =========================================================================

    # The keyword must be followed by whitespace, a pipe or the end of line,
    # so "# Database ..." is not a DATA line.
    KEYWORD_LINE = re.compile(
        r'^(?P<prefix>\s*(?:#[#\s]*)?)'
        r'(?P<word>END_DATA|CLASS|FORMAT|DATA)'
        r'(?P<rest>(?:[\s|].*)?)$',
        re.IGNORECASE | re.DOTALL,
    )

    COMMENT_PREFIX = re.compile(r'^\s*#[#\s]*')

    # =========================================================================
    # FIELDS AND VALUES
    # =========================================================================

    FIELD_TOKEN = re.compile(r'^[A-Z0-9_]+$')
    INLINE_COMMENT = re.compile(r'#|//')

    # =========================================================================
    # HEAD COMMENTS
    # =========================================================================

    UNIT_COMMENT = re.compile(r'^\s*#[#\s]*Unit[^:]*:\s*(?P<units>.*?)\s*$', re.IGNORECASE)

    # =========================================================================
    # UTILITY
    # =========================================================================

    @classmethod
    def match_keyword(cls, line: str) -> Optional[KeywordLine]:
        """
        Recognize a structural keyword line.

        Uncommented keywords are matched case-insensitively. Behind a '#'
        only the upper-case keyword counts, so prose comments such as
        "# Class list follows" stay comments.
        """
        match = cls.KEYWORD_LINE.match(line.rstrip('\r\n'))
        if not match:
            return None
        word = match.group('word')
        prefix = match.group('prefix')
        commented = '#' in prefix
        if commented and word != word.upper():
            return None
        return KeywordLine(
            keyword=Keyword(word.upper()),
            prefix=prefix,
            rest=match.group('rest'),
            commented=commented,
        )

    @classmethod
    def strip_comment_prefix(cls, line: str) -> str:
        """Drop leading whitespace and any leading '#' characters."""
        stripped = line.strip()
        if stripped.startswith('#'):
            return cls.COMMENT_PREFIX.sub('', stripped, count=1).strip()
        return stripped

    @staticmethod
    def is_blank_or_comment(line: str) -> bool:
        stripped = line.strip()
        return not stripped or stripped.startswith('#') or stripped.startswith('//')

    @staticmethod
    def get_indentation(line: str) -> str:
        """Leading whitespace of a line."""
        return line[:len(line) - len(line.lstrip())]

    @classmethod
    def find_units(cls, line: str) -> Optional[str]:
        """Return the value of a '# Unit: <value>' comment, or None."""
        match = cls.UNIT_COMMENT.match(line)
        if match and match.group('units'):
            return match.group('units')
        return None


def split_pipe_keep_empties(text: str) -> List[str]:
    """
    Split a pipe-delimited DATA payload into values.

    Starts at the first '|'. Empty values are kept, including the one after a
    trailing pipe. Values are trimmed and anything after '//' or '#' inside a
    value is dropped as an inline comment.

    Example:
        >>> split_pipe_keep_empties('| 1 |  | 10.0 # dia |')
        ['1', '', '10.0', '']
    """
    start = text.find('|')
    if start < 0:
        return []

    values = []
    for part in text[start + 1:].split('|'):
        token = part.strip()
        token = DatPatterns.INLINE_COMMENT.split(token, maxsplit=1)[0].strip()
        values.append(token)
    return values


def field_tokens(text: str) -> List[str]:
    """
    Whitespace-separated tokens that look like FORMAT field names.

    Only upper-case ASCII letters, digits and underscore qualify, which
    filters out prose on documentation-style continuation lines.

    Example:
        >>> field_tokens('LIBRF T ST  -- tool fields')
        ['LIBRF', 'T', 'ST']
    """
    return [part for part in text.split() if DatPatterns.FIELD_TOKEN.match(part)]
