# -*- coding: utf-8 -*-
"""
DatForge Parser Package

Dialect-aware parsers for NX ASCII tool databases and the matching writer.
Every dialect shares the grammar in parser.patterns and the bookkeeping in
parser.base; parser.core dispatches on FileKind.
"""

from parser.patterns import DatPatterns, KeywordLine, split_pipe_keep_empties, field_tokens
from parser.base import DocumentBuilder
from parser.detect import detect_kind
from parser.tool_parser import parse_tool_lines
from parser.indexed_parser import (
    parse_holder_lines,
    parse_shank_lines,
    detect_grouping,
    get_index_class,
    get_index_rows,
    get_shape_rows_for,
)
from parser.trackpoint_parser import parse_trackpoint_lines
from parser.segmented_parser import parse_segmented_lines
from parser.core import parse
from parser.writer import render_document, write_document

__all__ = [
    'DatPatterns',
    'KeywordLine',
    'split_pipe_keep_empties',
    'field_tokens',
    'DocumentBuilder',
    'detect_kind',
    'parse_tool_lines',
    'parse_holder_lines',
    'parse_shank_lines',
    'detect_grouping',
    'get_index_class',
    'get_index_rows',
    'get_shape_rows_for',
    'parse_trackpoint_lines',
    'parse_segmented_lines',
    'parse',
    'render_document',
    'write_document',
]
