"""
DatForge Enum Definitions

Type-safe enums for file kinds, parser states and grouping modes.
"""

from enum import Enum


class FileKind(str, Enum):
    """The five ASCII database dialects."""
    TOOLS = 'tools'
    HOLDERS = 'holders'
    SHANKS = 'shanks'
    TRACKPOINTS = 'trackpoints'
    SEGMENTED_TOOLS = 'segmented_tools'


class ParserState(str, Enum):
    """States shared by the dialect state machines."""
    SCAN_HEAD = 'scan_head'
    IDLE = 'idle'
    BEFORE_FIRST_CLASS = 'before_first_class'
    IN_CLASS_HEADER = 'in_class_header'
    IN_FORMAT = 'in_format'
    IN_DATA = 'in_data'
    IN_CLASS_FOOTER = 'in_class_footer'


class GroupingMode(str, Enum):
    """How holder/shank rows are bucketed into classes."""
    RTYPE_SPLIT = 'rtype_split'
    CLASS_MARKERS = 'class_markers'


class Keyword(str, Enum):
    """Structural keywords of the shared grammar."""
    CLASS = 'CLASS'
    FORMAT = 'FORMAT'
    DATA = 'DATA'
    END_DATA = 'END_DATA'
