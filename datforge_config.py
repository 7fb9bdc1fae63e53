from pathlib import Path

VERSION = "0.4.0"

FILE_ENCODING = "utf-8"
READ_ENCODING = "utf-8-sig"

# Content sniffing reads at most this many lines
SNIFF_LINE_LIMIT = 400

DEFAULT_UNITS = "Unknown"
DEFAULT_DATA_INDENT = "    "
FIELD_SEPARATOR = " | "
DATA_KEYWORD = "DATA"

SETTINGS_DIR = Path.home() / ".datforge"
LOG_DIR = SETTINGS_DIR / "logs"

# Filename substrings, checked in this order ("tool_holder.dat" is a holder file)
FILENAME_PRIORITY = (
    ("segmented", "segmented_tools"),
    ("trackpoint", "trackpoints"),
    ("holder", "holders"),
    ("shank", "shanks"),
    ("tool", "tools"),
)

# Canonical file names quoted in the header comment of each dialect
HEADER_SIGNATURES = (
    ("segmented_tool_database.dat", "segmented_tools"),
    ("trackpoint_database.dat", "trackpoints"),
    ("holder_ascii.dat", "holders"),
    ("holder_database.dat", "holders"),
    ("shank_ascii.dat", "shanks"),
    ("shank_database.dat", "shanks"),
    ("tool_database.dat", "tools"),
)

# Holder / shank row routing
RTYPE_FIELD = "RTYPE"
LIBRF_FIELD = "LIBRF"
SEQ_FIELD = "SEQ"
RTYPE_INDEX = "1"
RTYPE_SHAPE = "2"

HOLDER_INDEX_CLASS = "HOLDER_INDEX"
HOLDER_SHAPE_CLASS = "HOLDER_SHAPE"
SHANK_INDEX_CLASS = "SHANK_INDEX"
SHANK_STEP_CLASS = "SHANK_STEP"
# Older files bucket the top-of-file block under this name
LEGACY_INDEX_CLASS = "GENERAL"
UNNAMED_CLASS = "UNNAMED"

# Segment rows
T_FIELD = "T"
STYPE_FIELD = "STYPE"
SEGMENT_HIDDEN_FIELDS = frozenset({"LIBRF", "T", "STYPE", "SEQ", "RTYPE"})
# Segment profile type per master tool class; anything else is a mill form
SEGMENT_STYPES = {
    "MILL_FORM": "0",
    "STEP_DRILL": "1",
    "TURN_FORM": "2",
}
DEFAULT_SEGMENT_STYPE = "0"

__all__ = [
    "VERSION", "FILE_ENCODING", "READ_ENCODING", "SNIFF_LINE_LIMIT",
    "DEFAULT_UNITS", "DEFAULT_DATA_INDENT", "FIELD_SEPARATOR", "DATA_KEYWORD",
    "SETTINGS_DIR", "LOG_DIR", "FILENAME_PRIORITY", "HEADER_SIGNATURES",
    "RTYPE_FIELD", "LIBRF_FIELD", "SEQ_FIELD", "RTYPE_INDEX", "RTYPE_SHAPE",
    "HOLDER_INDEX_CLASS", "HOLDER_SHAPE_CLASS", "SHANK_INDEX_CLASS",
    "SHANK_STEP_CLASS", "LEGACY_INDEX_CLASS", "UNNAMED_CLASS",
    "T_FIELD", "STYPE_FIELD", "SEGMENT_HIDDEN_FIELDS", "SEGMENT_STYPES",
    "DEFAULT_SEGMENT_STYPE",
    "Path",
]
