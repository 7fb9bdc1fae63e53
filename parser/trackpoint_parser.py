# -*- coding: utf-8 -*-
"""
Trackpoint Dialect Parser

trackpoint_database.dat files are edited by rewriting data rows only, so every
non-data line (comments, directives, END_DATA markers) must come back out of
the writer exactly as it went in. The section loop below is shared with the
segmented-tool dialect.
"""

from typing import Iterable

from datforge_enums import FileKind, Keyword, ParserState
from datforge_logger import get_logger
from models.dat_document import DatDocument
from parser.base import (
    DocumentBuilder,
    format_continuation,
    is_data_line,
    is_format_line,
    normalize_lines,
)
from parser.patterns import DatPatterns, field_tokens

logger = get_logger("parser.trackpoint")


def parse_trackpoint_lines(lines: Iterable[str]) -> DatDocument:
    """Parse a trackpoint database."""
    return parse_sectioned_lines(lines, FileKind.TRACKPOINTS)


def parse_sectioned_lines(lines: Iterable[str], kind: FileKind) -> DatDocument:
    """
    Parse a CLASS-sectioned file keeping all surrounding text.

    Per class, the CLASS marker goes to class_line, header lines to
    pre_format_lines, the FORMAT block to format_lines, lines up to the first
    DATA to pre_data_lines, lines between rows to the following row's
    lead_lines and everything after the last row to post_data_lines.

    Args:
        lines: File lines
        kind: Dialect recorded on the document

    Returns:
        The parsed document

    Raises:
        StructuralError: DATA before any CLASS, DATA before FORMAT, or a DATA
            payload without a leading '|'
    """
    builder = DocumentBuilder(kind)
    state = ParserState.BEFORE_FIRST_CLASS
    format_commented = False

    for line in normalize_lines(lines):
        builder.line_number += 1
        match = DatPatterns.match_keyword(line)
        keyword = match.keyword if match else None

        if keyword == Keyword.CLASS:
            builder.open_class(match.rest.strip(), class_line=line)
            state = ParserState.IN_CLASS_HEADER
            continue

        if state == ParserState.BEFORE_FIRST_CLASS:
            if is_data_line(match):
                raise builder.structural_error("DATA found before CLASS", line)
            builder.head_line(line)
            continue

        cls = builder.current_class

        if state == ParserState.IN_DATA and builder.accepts_continuation(line):
            builder.continue_row(line)
            continue

        if is_format_line(match):
            builder.finish_row()
            cls.extend_format(field_tokens(match.rest))
            builder.hold_format(line)
            format_commented = match.commented
            state = ParserState.IN_FORMAT
            continue

        if is_data_line(match):
            if not cls.format_fields:
                raise builder.structural_error("DATA found before FORMAT", line)
            builder.start_row(line, match, cls)
            state = ParserState.IN_DATA
            continue

        if state == ParserState.IN_FORMAT and keyword is None:
            tokens = format_continuation(line, format_commented)
            if tokens:
                cls.extend_format(tokens)
                builder.hold_format(line, continuation=True)
                continue

        # Everything else is kept verbatim; the builder decides the bucket
        builder.hold(line)
        if state == ParserState.IN_CLASS_HEADER:
            continue
        if keyword == Keyword.END_DATA or not DatPatterns.is_blank_or_comment(line):
            builder.finish_row()
            state = ParserState.IN_CLASS_FOOTER
        elif state == ParserState.IN_FORMAT:
            state = ParserState.IN_CLASS_FOOTER

    return builder.finish()
