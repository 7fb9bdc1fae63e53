# -*- coding: utf-8 -*-
"""
DAT Writer

Serializes a DatDocument back to text. Verbatim buckets are emitted exactly
as parsed; a row is re-composed only when it was edited or created, so an
unmodified document reproduces its source file.
"""

from pathlib import Path
from typing import List, Union

import datforge_config as config
from datforge_exceptions import FileWriteError
from datforge_logger import get_logger
from models.dat_document import DatClass, DatDocument, DatRow
from parser.patterns import DatPatterns

logger = get_logger("parser.writer")


def format_row_line(cls: DatClass, row: DatRow) -> str:
    """
    Compose the DATA line for an edited or new row.

    Values are read through the row map in FORMAT order and joined with
    ' | ' (no pipes at the ends). Existing rows keep their indentation and
    comment prefix; new rows take the indentation of the class FORMAT line.
    """
    content = config.FIELD_SEPARATOR.join(row.cells(cls.format_fields))
    if row.is_new:
        indent = cls.format_indent
    else:
        indent = DatPatterns.get_indentation(row.raw_lines[0])
    return f"{indent}{row.keyword_prefix}{config.DATA_KEYWORD} | {content}"


def _class_header(cls: DatClass) -> List[str]:
    lines = list(cls.pre_class_lines)
    if cls.class_line is not None:
        lines.append(cls.class_line)
    lines.extend(cls.pre_format_lines)
    lines.extend(cls.format_lines)
    lines.extend(cls.pre_data_lines)
    return lines


def _row_lines(cls: DatClass, row: DatRow) -> List[str]:
    lines = list(row.lead_lines)
    # Soft-deleted rows are dropped
    if row.is_blank:
        return lines
    if row.is_modified or row.is_new:
        lines.append(format_row_line(cls, row))
    else:
        lines.extend(row.raw_lines)
    return lines


def render_class(cls: DatClass) -> List[str]:
    """Lines of one class section."""
    lines = _class_header(cls)
    for row in cls.rows:
        lines.extend(_row_lines(cls, row))
    lines.extend(cls.post_data_lines)
    return lines


def render_interleaved(doc: DatDocument) -> List[str]:
    """
    Render a document whose classes share one run of rows in the file.

    Rows are written in the order of doc.row_layout. Each slot takes the next
    row of its class, so rows moved within a class keep the slot pattern;
    new rows follow the last row of their class and a class without slots is
    written after all slotted rows. Post-data lines close the document.
    """
    remaining = {cls: list(cls.rows) for cls in doc.classes}
    layout = [cls for cls in doc.row_layout if cls in remaining]
    last_slot = {cls: i for i, cls in enumerate(layout)}
    started = set()

    lines = list(doc.head)
    for i, cls in enumerate(layout):
        if cls not in started:
            lines.extend(_class_header(cls))
            started.add(cls)
        rows = remaining[cls]
        if last_slot[cls] == i:
            taken, remaining[cls] = rows, []
        else:
            taken, remaining[cls] = rows[:1], rows[1:]
        for row in taken:
            lines.extend(_row_lines(cls, row))

    for cls in doc.classes:
        if cls not in started:
            lines.extend(_class_header(cls))
        for row in remaining[cls]:
            lines.extend(_row_lines(cls, row))
    for cls in doc.classes:
        lines.extend(cls.post_data_lines)
    return lines


def render_document(doc: DatDocument) -> List[str]:
    """
    Render a document to lines (without line terminators).

    Args:
        doc: Document to render

    Returns:
        Head lines followed by every class section in order, or the rows in
        their source order for documents with a row layout
    """
    if doc.row_layout is not None:
        return render_interleaved(doc)
    lines = list(doc.head)
    for cls in doc.classes:
        lines.extend(render_class(cls))
    return lines


def write_document(path: Union[str, Path], doc: DatDocument) -> None:
    """
    Write a document to disk as UTF-8 with '\\n' line endings.

    Raises:
        FileWriteError: if the file cannot be written
    """
    lines = render_document(doc)
    text = "".join(line + "\n" for line in lines)
    try:
        with open(path, 'w', encoding=config.FILE_ENCODING, newline='\n') as f:
            f.write(text)
    except OSError as e:
        raise FileWriteError(f"Could not write file: {e}", file_path=str(path)) from e

    logger.info(f"Wrote {len(lines)} lines to {path}")
