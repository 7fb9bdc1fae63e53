# -*- coding: utf-8 -*-
"""
Dialect Detection

Decides which dialect parser a file needs, first from its name, then from the
canonical file name quoted in its header comment, then from the fields its
FORMAT lines declare.
"""

import os
from itertools import islice
from pathlib import Path
from typing import Iterable, Optional, Set, Union

import datforge_config as config
from datforge_enums import FileKind
from datforge_exceptions import FileReadError
from datforge_logger import get_logger
from parser.base import is_format_line
from parser.patterns import DatPatterns, field_tokens

logger = get_logger("parser.detect")

_HOLDER_MARKERS = {"HTYPE", "MTS", "MAXOFF", "MINDIA"}


def kind_from_filename(path: Union[str, Path]) -> Optional[FileKind]:
    """Match the file name against the configured substrings, in priority order."""
    name = os.path.basename(str(path)).lower()
    for needle, kind in config.FILENAME_PRIORITY:
        if needle in name:
            return FileKind(kind)
    return None


def kind_from_header(lines: Iterable[str]) -> Optional[FileKind]:
    """Look for a canonical database file name in the sampled lines."""
    for line in lines:
        lowered = line.lower()
        for signature, kind in config.HEADER_SIGNATURES:
            if signature in lowered:
                return FileKind(kind)
    return None


def kind_from_format(lines: Iterable[str]) -> Optional[FileKind]:
    """Guess the dialect from the union of declared FORMAT field names."""
    fields: Set[str] = set()
    for line in lines:
        match = DatPatterns.match_keyword(line)
        if is_format_line(match):
            fields.update(field_tokens(match.rest))

    if "SWEEP" in fields:
        return FileKind.SEGMENTED_TOOLS
    if "DEFTYPE" in fields:
        return FileKind.TRACKPOINTS
    if config.RTYPE_FIELD in fields:
        if fields & _HOLDER_MARKERS:
            return FileKind.HOLDERS
        if "STYPE" in fields or {"SEQ", "DIAM", "TAPER"} <= fields:
            return FileKind.SHANKS
    return None


def sample_file(path: Union[str, Path], limit: int = config.SNIFF_LINE_LIMIT) -> list:
    """
    Read at most `limit` lines of a file.

    Raises:
        FileReadError: if the file cannot be read
    """
    try:
        with open(path, 'r', encoding=config.READ_ENCODING, errors='replace') as f:
            return [line.rstrip('\r\n') for line in islice(f, limit)]
    except OSError as e:
        raise FileReadError(f"Could not read file for detection: {e}", file_path=str(path)) from e


def detect_kind(path: Union[str, Path], sample_lines: Optional[Iterable[str]] = None) -> FileKind:
    """
    Detect the dialect of a file.

    Args:
        path: File path; its name is checked first
        sample_lines: Content to sniff. When omitted, the first lines of the
            file are read (only if the name did not decide).

    Returns:
        The detected FileKind, TOOLS when nothing matched
    """
    kind = kind_from_filename(path)
    if kind is not None:
        logger.debug(f"Detected {kind.value} from file name {path}")
        return kind

    if sample_lines is None:
        sample = sample_file(path)
    else:
        sample = list(islice(sample_lines, config.SNIFF_LINE_LIMIT))

    kind = kind_from_header(sample) or kind_from_format(sample)
    if kind is not None:
        logger.debug(f"Detected {kind.value} from content of {path}")
        return kind

    logger.debug(f"No dialect markers in {path}, assuming {FileKind.TOOLS.value}")
    return FileKind.TOOLS
