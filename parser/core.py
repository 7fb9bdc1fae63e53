# -*- coding: utf-8 -*-
"""
Parser Core Functions

Single entry point that dispatches to the dialect parser for a FileKind.
"""

from typing import Callable, Dict, Iterable, Optional

from datforge_enums import FileKind, GroupingMode
from datforge_logger import get_logger
from models.dat_document import DatDocument
from parser.indexed_parser import parse_holder_lines, parse_shank_lines
from parser.segmented_parser import parse_segmented_lines
from parser.tool_parser import parse_tool_lines
from parser.trackpoint_parser import parse_trackpoint_lines

logger = get_logger("parser.core")

_PARSERS: Dict[FileKind, Callable[..., DatDocument]] = {
    FileKind.TOOLS: parse_tool_lines,
    FileKind.HOLDERS: parse_holder_lines,
    FileKind.SHANKS: parse_shank_lines,
    FileKind.TRACKPOINTS: parse_trackpoint_lines,
    FileKind.SEGMENTED_TOOLS: parse_segmented_lines,
}

_GROUPED_KINDS = {FileKind.HOLDERS, FileKind.SHANKS}


def parse(lines: Iterable[str], kind: FileKind, grouping: Optional[GroupingMode] = None) -> DatDocument:
    """
    Parse lines with the parser for `kind`.

    Args:
        lines: File lines
        kind: Dialect to parse as
        grouping: Holder/shank grouping mode, ignored for other dialects

    Returns:
        The parsed document

    Raises:
        StructuralError: if the text violates the dialect's structure
    """
    kind = FileKind(kind)
    parser = _PARSERS[kind]
    if kind in _GROUPED_KINDS:
        return parser(lines, grouping)
    if grouping is not None:
        logger.debug(f"Grouping mode ignored for {kind.value}")
    return parser(lines)
