# -*- coding: utf-8 -*-
"""
Segmented Tool Dialect Parser

segmented_tool_database.dat holds the profile segments of form tools. Each
CLASS section lists segment rows that point at their master tool through
LIBRF and are ordered by SEQ. Parsing is the trackpoint section loop; this
module adds the segment-specific helpers used by editors.
"""

from typing import Iterable, List, Optional

import datforge_config as config
from datforge_enums import FileKind
from datforge_logger import get_logger
from models.dat_document import DatClass, DatDocument, DatRow
from parser.trackpoint_parser import parse_sectioned_lines

logger = get_logger("parser.segmented")


def parse_segmented_lines(lines: Iterable[str]) -> DatDocument:
    """Parse a segmented tool database. END_DATA closes a class's data block."""
    return parse_sectioned_lines(lines, FileKind.SEGMENTED_TOOLS)


def get_segment_rows(cls: DatClass, librf: str) -> List[DatRow]:
    """Rows of `cls` belonging to the tool `librf` (ignoring case), in file order."""
    wanted = (librf or '').strip().upper()
    if not wanted:
        return []
    return [row for row in cls.rows if row.get(config.LIBRF_FIELD).strip().upper() == wanted]


def new_segment_row(cls: DatClass, librf: Optional[str] = None, master_class: str = '') -> DatRow:
    """
    Append a segment row pre-filled for its master entry.

    Holder and shank masters get RTYPE=2; tool masters get T=1 and the STYPE
    that matches the tool class (mill form, step drill, turn form).

    Args:
        cls: Class receiving the row
        librf: LIBRF of the master entry; nothing is pre-filled without it
        master_class: Class name of the master entry
    """
    row = cls.add_row()
    if not librf:
        return row

    row.set(config.LIBRF_FIELD, librf)
    master = (master_class or '').upper()
    if master in ("HOLDER", "SHANK"):
        row.set(config.RTYPE_FIELD, config.RTYPE_SHAPE)
    else:
        row.set(config.T_FIELD, "1")
        row.set(config.STYPE_FIELD, config.SEGMENT_STYPES.get(master, config.DEFAULT_SEGMENT_STYPE))
    return row


def resequence_rows(rows: Iterable[DatRow]) -> int:
    """Renumber SEQ as 1..n in the given order. Returns the number of rows changed."""
    changed = 0
    for i, row in enumerate(rows, start=1):
        if row.set(config.SEQ_FIELD, str(i)):
            changed += 1
    if changed:
        logger.debug(f"Resequenced {changed} segment rows")
    return changed


def visible_segment_fields(cls: DatClass) -> List[str]:
    """Format fields an editor shows for segment rows (link and ordering fields hidden)."""
    fields = cls.format_fields
    if not fields and cls.rows:
        fields = list(cls.rows[0].map)
    return [field for field in fields if field.upper() not in config.SEGMENT_HIDDEN_FIELDS]
