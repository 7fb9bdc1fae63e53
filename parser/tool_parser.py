# -*- coding: utf-8 -*-
"""
Tool Dialect Parser

Parser for tool_database.dat files: explicit CLASS sections, each with a
FORMAT schema (possibly continued over several lines) and DATA rows
(possibly continued with leading '|' lines).
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

logger = get_logger("parser.tool")


def parse_tool_lines(lines: Iterable[str]) -> DatDocument:
    """
    Parse a tool database.

    Args:
        lines: File lines

    Returns:
        The parsed document

    Raises:
        StructuralError: DATA before any CLASS, DATA before FORMAT, or a DATA
            payload without a leading '|'
    """
    builder = DocumentBuilder(FileKind.TOOLS)
    state = ParserState.SCAN_HEAD
    format_commented = False

    for line in normalize_lines(lines):
        builder.line_number += 1
        match = DatPatterns.match_keyword(line)
        keyword = match.keyword if match else None

        if keyword == Keyword.CLASS:
            builder.open_class(match.rest.strip(), class_line=line)
            state = ParserState.IDLE
            continue

        if state == ParserState.SCAN_HEAD:
            if is_data_line(match):
                raise builder.structural_error("DATA found before CLASS", line)
            # FORMAT examples in the documentation header are kept as text
            builder.head_line(line)
            continue

        cls = builder.current_class

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

        if keyword == Keyword.END_DATA:
            builder.finish_row()
            builder.hold(line)
            state = ParserState.IDLE
            continue

        if state == ParserState.IN_DATA and builder.accepts_continuation(line):
            builder.continue_row(line)
            continue

        if state == ParserState.IN_FORMAT and keyword is None:
            tokens = format_continuation(line, format_commented)
            if tokens:
                cls.extend_format(tokens)
                builder.hold_format(line, continuation=True)
                continue

        # Comments and blanks do not end the current mode
        if DatPatterns.is_blank_or_comment(line):
            builder.hold(line)
            continue

        builder.finish_row()
        builder.hold(line)
        state = ParserState.IDLE

    return builder.finish()
