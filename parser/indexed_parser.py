# -*- coding: utf-8 -*-
"""
Holder / Shank Dialect Parsers

Holder and shank databases describe each item with an index row (RTYPE=1,
shown in the grid) and a series of shape/step rows (RTYPE=2, used for the
preview) linked to it through LIBRF and ordered by SEQ.

Two grouping conventions exist in the wild:

- RTYPE_SPLIT: class markers are not reliable, every DATA row is routed by
  its RTYPE value into one of two synthetic classes (index / shape).
- CLASS_MARKERS: the top-of-file FORMAT/DATA block becomes a synthetic index
  class and every CLASS marker ('CLASS', '#CLASS', '# CLASS') starts an
  explicit class holding step rows.

The mode is a parser option; by default it follows the marker convention the
file actually uses.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

import datforge_config as config
from datforge_enums import FileKind, GroupingMode, Keyword, ParserState
from datforge_logger import get_logger
from models.dat_document import DatClass, DatDocument, DatRow
from parser.base import (
    DocumentBuilder,
    format_continuation,
    is_data_line,
    is_format_line,
    normalize_lines,
)
from parser.patterns import DatPatterns, field_tokens

logger = get_logger("parser.indexed")


@dataclass(frozen=True)
class IndexedDialect:
    """Names that differ between the holder and shank dialects."""
    kind: FileKind
    index_class: str
    shape_class: str


HOLDER_DIALECT = IndexedDialect(FileKind.HOLDERS, config.HOLDER_INDEX_CLASS, config.HOLDER_SHAPE_CLASS)
SHANK_DIALECT = IndexedDialect(FileKind.SHANKS, config.SHANK_INDEX_CLASS, config.SHANK_STEP_CLASS)

_INDEX_CLASS_NAMES = {
    config.HOLDER_INDEX_CLASS,
    config.SHANK_INDEX_CLASS,
    config.LEGACY_INDEX_CLASS,
}


# =============================================================================
# PUBLIC ENTRY POINTS
# =============================================================================

def parse_holder_lines(lines: Iterable[str], grouping: Optional[GroupingMode] = None) -> DatDocument:
    """Parse a holder database. `grouping` None picks the mode from the text."""
    return _parse_indexed(lines, HOLDER_DIALECT, grouping)


def parse_shank_lines(lines: Iterable[str], grouping: Optional[GroupingMode] = None) -> DatDocument:
    """Parse a shank database. `grouping` None picks the mode from the text."""
    return _parse_indexed(lines, SHANK_DIALECT, grouping)


def detect_grouping(lines: List[str]) -> GroupingMode:
    """CLASS_MARKERS if any line is a class marker, RTYPE_SPLIT otherwise."""
    for line in lines:
        match = DatPatterns.match_keyword(line)
        if match is not None and match.keyword == Keyword.CLASS:
            return GroupingMode.CLASS_MARKERS
    return GroupingMode.RTYPE_SPLIT


def _parse_indexed(lines: Iterable[str], dialect: IndexedDialect,
                   grouping: Optional[GroupingMode]) -> DatDocument:
    lines = normalize_lines(lines)
    if grouping is None:
        grouping = detect_grouping(lines)
    logger.debug(f"Parsing {dialect.kind.value} with grouping {grouping.value}")

    if grouping == GroupingMode.RTYPE_SPLIT:
        doc = _parse_rtype_split(lines, dialect)
    else:
        doc = _parse_class_markers(lines, dialect)
    doc.grouping = grouping
    return doc


# =============================================================================
# RTYPE SPLIT
# =============================================================================

def _parse_rtype_split(lines: List[str], dialect: IndexedDialect) -> DatDocument:
    builder = DocumentBuilder(dialect.kind)
    doc = builder.document
    doc.row_layout = []
    state = ParserState.SCAN_HEAD
    fields: List[str] = []
    format_commented = False
    targets = {}
    last_target: Optional[DatClass] = None
    dropped = 0

    def ensure_targets():
        # The index class always comes first, whatever RTYPE the first row has
        if not targets:
            for name in (dialect.index_class, dialect.shape_class):
                targets[name] = builder.add_class(name)

    def route(row: DatRow) -> Optional[DatClass]:
        # Decide once the row (including continuations) is complete
        nonlocal last_target, dropped
        rtype = _value_at(row, fields, config.RTYPE_FIELD)
        if rtype == config.RTYPE_INDEX:
            name = dialect.index_class
        elif rtype == config.RTYPE_SHAPE:
            name = dialect.shape_class
        else:
            dropped += 1
            logger.debug(f"Dropping row with RTYPE '{rtype}' at line {builder.line_number}")
            for line in row.raw_lines:
                builder.hold(line)
            return None

        ensure_targets()
        cls = targets[name]
        if not cls.format_fields:
            cls.extend_format(fields)
        builder.place_row(cls, row)
        doc.row_layout.append(cls)
        last_target = cls
        return cls

    def close_row():
        # Comments held after the row's last line stay behind it
        trailing = builder.take_trailing()
        route(builder.finish_row())
        for held in trailing:
            builder.hold(held)

    for line in lines:
        builder.line_number += 1
        match = DatPatterns.match_keyword(line)

        if builder.current_row is not None:
            if builder.accepts_continuation(line):
                builder.continue_row(line)
                continue
            if match is None and DatPatterns.is_blank_or_comment(line):
                builder.hold(line)
                continue
            close_row()

        if state == ParserState.SCAN_HEAD:
            if match is None or (match.keyword == Keyword.FORMAT and not is_format_line(match)) \
                    or (match.keyword == Keyword.DATA and not is_data_line(match)):
                builder.head_line(line)
                continue
            state = ParserState.IDLE

        if is_format_line(match):
            fields = field_tokens(match.rest)
            builder.hold_format(line)
            format_commented = match.commented
            state = ParserState.IN_FORMAT
            continue

        if is_data_line(match):
            if not fields:
                raise builder.structural_error("DATA found before FORMAT", line)
            builder.start_row(line, match)
            state = ParserState.IN_DATA
            continue

        if state == ParserState.IN_FORMAT and match is None:
            tokens = format_continuation(line, format_commented)
            if tokens:
                fields.extend(tokens)
                builder.hold_format(line, continuation=True)
                continue

        if match is not None or not DatPatterns.is_blank_or_comment(line):
            state = ParserState.IDLE
        builder.hold(line)

    if builder.current_row is not None:
        close_row()

    if not targets:
        ensure_targets()
        targets[dialect.index_class].extend_format(fields)
    if last_target is None:
        last_target = targets[dialect.index_class]

    if dropped:
        logger.debug(f"{dropped} rows with unrecognized RTYPE were dropped")
    return builder.finish(last_target)


def _value_at(row: DatRow, fields: List[str], field: str) -> str:
    """Value of `field` in the row's raw values, located through a FORMAT list."""
    folded = field.upper()
    for i, name in enumerate(fields):
        if name.upper() == folded:
            return row.values[i].strip() if i < len(row.values) else ''
    return ''


# =============================================================================
# CLASS MARKERS
# =============================================================================

def _parse_class_markers(lines: List[str], dialect: IndexedDialect) -> DatDocument:
    builder = DocumentBuilder(dialect.kind)
    state = ParserState.SCAN_HEAD
    format_commented = False

    def ensure_class() -> DatClass:
        # Top-of-file FORMAT/DATA belongs to the index class
        if builder.current_class is None:
            builder.open_class(dialect.index_class, synthetic=True)
        return builder.current_class

    for line in lines:
        builder.line_number += 1
        match = DatPatterns.match_keyword(line)
        keyword = match.keyword if match else None

        if keyword == Keyword.CLASS:
            name = match.rest.strip() or config.UNNAMED_CLASS
            builder.open_class(name, class_line=line)
            state = ParserState.IDLE
            continue

        if keyword == Keyword.END_DATA:
            # Closes the data block; a following FORMAT continues the same class
            builder.finish_row()
            if builder.current_class is None:
                builder.head_line(line)
            else:
                builder.hold(line)
            state = ParserState.IDLE
            continue

        if is_format_line(match):
            cls = ensure_class()
            builder.finish_row()
            cls.extend_format(field_tokens(match.rest))
            builder.hold_format(line)
            format_commented = match.commented
            state = ParserState.IN_FORMAT
            continue

        if is_data_line(match):
            cls = ensure_class()
            if not cls.format_fields:
                raise builder.structural_error("DATA found before FORMAT", line)
            builder.start_row(line, match, cls)
            state = ParserState.IN_DATA
            continue

        if state == ParserState.IN_DATA and builder.accepts_continuation(line):
            builder.continue_row(line)
            continue

        if state == ParserState.IN_FORMAT and keyword is None:
            tokens = format_continuation(line, format_commented)
            if tokens:
                builder.current_class.extend_format(tokens)
                builder.hold_format(line, continuation=True)
                continue

        if DatPatterns.is_blank_or_comment(line):
            if builder.current_class is None:
                builder.head_line(line)
            else:
                builder.hold(line)
            continue

        builder.finish_row()
        if builder.current_class is None:
            builder.head_line(line)
        else:
            builder.hold(line)
        state = ParserState.IDLE

    return builder.finish()


# =============================================================================
# QUERIES
# =============================================================================

def get_index_class(doc: DatDocument) -> Optional[DatClass]:
    """The synthetic index class of a holder/shank document."""
    for cls in doc.classes:
        if cls.name.upper() in _INDEX_CLASS_NAMES:
            return cls
    return None


def get_index_rows(doc: DatDocument) -> List[DatRow]:
    """Index rows (RTYPE=1) that belong in the grid."""
    index = get_index_class(doc)
    if index is None:
        return []
    return [row for row in index.rows if row.get(config.RTYPE_FIELD) == config.RTYPE_INDEX]


def get_shape_rows_for(doc: DatDocument, librf: str) -> List[DatRow]:
    """
    Shape/step rows (RTYPE=2) for one index entry.

    Args:
        doc: Holder or shank document
        librf: LIBRF value of the index row (compared ignoring case)

    Returns:
        Matching rows ordered by SEQ; rows whose SEQ is not an integer come last
    """
    if not librf or not librf.strip():
        return []
    wanted = librf.strip().upper()

    rows = [
        row
        for cls in doc.classes if cls.name.upper() not in _INDEX_CLASS_NAMES
        for row in cls.rows
        if row.get(config.RTYPE_FIELD) == config.RTYPE_SHAPE
        and row.get(config.LIBRF_FIELD).strip().upper() == wanted
    ]
    return sorted(rows, key=_seq_key)


def _seq_key(row: DatRow):
    try:
        return (0, int(row.get(config.SEQ_FIELD)))
    except ValueError:
        return (1, 0)
