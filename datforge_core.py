# -*- coding: utf-8 -*-
"""
DatForge Core

File-level operations: read a database file, detect its dialect, parse it
into a document, wrap it as a loaded library and write it back.
"""

from pathlib import Path
from typing import List, Optional, Union

import datforge_config as config
from datforge_enums import FileKind, GroupingMode
from datforge_exceptions import FileReadError
from datforge_logger import get_logger
from models.dat_document import DatDocument
from models.library import LibraryRef
import parser.core as parser
from parser.detect import detect_kind
from parser.writer import write_document

logger = get_logger("core")


def read_lines(input_path: Union[str, Path]) -> List[str]:
    """
    Read a file as lines without terminators. A UTF-8 BOM is tolerated.

    Raises:
        FileReadError: if the file is missing or unreadable
    """
    input_path_obj = Path(input_path)
    if not input_path_obj.is_file():
        raise FileReadError(f"File not found: {input_path}", file_path=str(input_path))
    try:
        raw_lines = input_path_obj.read_text(encoding=config.READ_ENCODING).splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise FileReadError(f"Could not read file: {e}", file_path=str(input_path)) from e

    logger.debug(f"Read {len(raw_lines)} lines from {input_path}")
    return raw_lines


def load_document(input_path: Union[str, Path], kind: Optional[FileKind] = None,
                  grouping: Optional[GroupingMode] = None) -> DatDocument:
    """
    Read and parse a file.

    Args:
        input_path: Database file
        kind: Dialect override; detected from the file when omitted
        grouping: Holder/shank grouping override

    Raises:
        FileReadError: if the file cannot be read
        StructuralError: if the file violates its dialect's structure
    """
    lines = read_lines(input_path)
    if kind is None:
        kind = detect_kind(input_path, lines)
    doc = parser.parse(lines, kind, grouping)
    logger.info(f"Loaded {Path(input_path).name} as {doc.kind.value}: "
                f"{len(doc.classes)} classes, {doc.row_count} rows")
    return doc


def load_library(input_path: Union[str, Path], kind: Optional[FileKind] = None) -> LibraryRef:
    """Load a file and wrap it as a LibraryRef with its dirty flag wired to the document."""
    path = Path(input_path)
    doc = load_document(path, kind)
    return LibraryRef(
        kind=doc.kind,
        file_path=path,
        document=doc,
        is_read_only=_is_read_only(path),
    )


def save_library(ref: LibraryRef, output_path: Union[str, Path, None] = None) -> Path:
    """
    Write a library to its own path or, for save-as, to `output_path`.

    Raises:
        FileWriteError: if the file cannot be written
    """
    target = Path(output_path) if output_path is not None else ref.file_path
    write_document(target, ref.document)

    if target != ref.file_path:
        logger.info(f"Library {ref.file_name} saved as {target.name}")
        ref.file_path = target
        ref.is_read_only = _is_read_only(target)
    ref.clear_dirty()
    return target


def _is_read_only(path: Path) -> bool:
    # Missing files are writable as far as a later save is concerned
    try:
        return not (path.stat().st_mode & 0o200)
    except OSError:
        return False
