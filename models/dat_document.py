# -*- coding: utf-8 -*-
"""
DatForge Document Model

The in-memory tree every dialect parser produces and the writer consumes:

    DatDocument -> DatClass -> DatRow

Ownership runs strictly downwards. Back-references (row -> class,
class -> document) are weak references so the tree never keeps itself alive.
Row edits go through DatRow.set(), which notifies row observers and marks the
owning document modified.
"""

import weakref
from collections.abc import MutableMapping
from typing import Callable, Dict, Iterable, Iterator, List, Optional

import datforge_config as config
from datforge_logger import get_logger

logger = get_logger("models.dat_document")


class FieldMap(MutableMapping):
    """
    Case-insensitive field name -> value mapping.

    Keys keep the casing they were first stored with, lookups ignore case.
    """

    def __init__(self, data=None):
        self._store: Dict[str, tuple] = {}
        if data:
            self.update(data)

    def __setitem__(self, key: str, value: str):
        folded = key.upper()
        original = self._store[folded][0] if folded in self._store else key
        self._store[folded] = (original, value)

    def __getitem__(self, key: str) -> str:
        return self._store[key.upper()][1]

    def __delitem__(self, key: str):
        del self._store[key.upper()]

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"FieldMap({dict(self.items())!r})"


# =============================================================================
# ROW
# =============================================================================

class DatRow:
    """
    One DATA record.

    Attributes:
        values: Raw parsed values, index-aligned to the class FORMAT fields.
        map: Field -> value view. Authoritative for get()/set() and the writer.
        raw_lines: Source lines the row was parsed from (empty for new rows).
        lead_lines: Incidental lines between the previous row and this one.
        keyword_prefix: Text before the DATA keyword on the source line (e.g. '#').
    """

    def __init__(
        self,
        values: Optional[Iterable[str]] = None,
        raw_lines: Optional[Iterable[str]] = None,
        parent_class: Optional['DatClass'] = None,
        keyword_prefix: str = '',
    ):
        self._values: List[str] = list(values or [])
        self._map = FieldMap()
        self._raw_lines: List[str] = list(raw_lines or [])
        self.lead_lines: List[str] = []
        self.keyword_prefix = keyword_prefix
        self._parent_ref = None
        self._is_modified = False
        self._observers: List[Callable] = []

        if parent_class is not None:
            self.parent_class = parent_class

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def values(self) -> List[str]:
        return self._values

    @property
    def map(self) -> FieldMap:
        return self._map

    @property
    def raw_lines(self) -> List[str]:
        return self._raw_lines

    @property
    def parent_class(self) -> Optional['DatClass']:
        return self._parent_ref() if self._parent_ref is not None else None

    @parent_class.setter
    def parent_class(self, value: Optional['DatClass']):
        self._parent_ref = weakref.ref(value) if value is not None else None

    @property
    def is_modified(self) -> bool:
        """True once any field was changed, i.e. raw_lines no longer match the values."""
        return self._is_modified

    @property
    def is_new(self) -> bool:
        return not any(line.strip() for line in self._raw_lines)

    @property
    def is_blank(self) -> bool:
        """True if every field of the owning class is blank (soft-deleted row)."""
        cls = self.parent_class
        fields = cls.format_fields if cls is not None and cls.format_fields else list(self._map)
        return all(not self.get(field).strip() for field in fields)

    # =========================================================================
    # FIELD ACCESS
    # =========================================================================

    def get(self, field: str) -> str:
        """Return the value of a field, or an empty string if the row has none."""
        return self._map.get(field, '')

    def set(self, field: str, value) -> bool:
        """
        Set a field value.

        Does nothing when the value is unchanged. Otherwise notifies row
        observers with (row, field, old, new) and marks the owning document
        modified.

        Returns:
            True if the value changed
        """
        value = '' if value is None else str(value)
        old = self.get(field)
        if old == value:
            return False

        self._map[field] = value
        self._is_modified = True
        self._notify(field, old, value)

        cls = self.parent_class
        if cls is not None:
            cls.mark_modified()
        return True

    def map_to_fields(self, fields: List[str], tokens: Optional[List[str]] = None):
        """
        Align values to a FORMAT field list and rebuild the map.

        Short rows are padded with empty strings, extra values are dropped.
        `tokens` replaces the current values first. Used by the parsers;
        does not notify.
        """
        if tokens is not None:
            self._values = list(tokens)
        if not fields:
            return
        if len(self._values) < len(fields):
            self._values.extend([''] * (len(fields) - len(self._values)))
        del self._values[len(fields):]
        for i, key in enumerate(fields):
            self._map[key] = self._values[i]

    def cells(self, fields: List[str]) -> List[str]:
        """Current values for the given fields, read through the map."""
        return [self.get(field) for field in fields]

    # =========================================================================
    # OBSERVER PATTERN
    # =========================================================================

    def subscribe(self, callback: Callable):
        """Register callback(row, field, old_value, new_value) for value changes."""
        if callback not in self._observers:
            self._observers.append(callback)

    def unsubscribe(self, callback: Callable):
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify(self, field: str, old: str, new: str):
        for callback in list(self._observers):
            try:
                callback(self, field, old, new)
            except Exception as e:
                logger.error(f"Error in row observer for field '{field}': {e}")

    def __repr__(self) -> str:
        return f"DatRow({self._values!r})"


# =============================================================================
# CLASS
# =============================================================================

class DatClass:
    """
    One schema section: CLASS name, FORMAT fields and DATA rows.

    Synthetic classes (holder/shank index buckets) have no class_line.
    The line buckets keep the surrounding text for exact re-serialization.
    """

    def __init__(
        self,
        name: str = '',
        document: Optional['DatDocument'] = None,
        class_line: Optional[str] = None,
        synthetic: bool = False,
    ):
        self.name = name
        self.alias: Optional[str] = None
        self.class_line = class_line
        self.is_synthetic = synthetic

        self._format_fields: List[str] = []
        self._rows: List[DatRow] = []

        self.pre_class_lines: List[str] = []
        self.pre_format_lines: List[str] = []
        self.format_lines: List[str] = []
        self.pre_data_lines: List[str] = []
        self.post_data_lines: List[str] = []

        self._document_ref = None
        if document is not None:
            self.document = document

    @property
    def format_fields(self) -> List[str]:
        return self._format_fields

    @property
    def rows(self) -> List[DatRow]:
        return self._rows

    @property
    def document(self) -> Optional['DatDocument']:
        return self._document_ref() if self._document_ref is not None else None

    @document.setter
    def document(self, value: Optional['DatDocument']):
        self._document_ref = weakref.ref(value) if value is not None else None

    @property
    def display_name(self) -> str:
        if self.alias:
            return self.alias
        return self.name if self.name and self.name.strip() else "(Unnamed Class)"

    @property
    def display_header(self) -> str:
        return f"{self.display_name} ({len(self._rows)})"

    @property
    def format_indent(self) -> str:
        """Leading whitespace of the FORMAT line, used for new DATA lines."""
        if self.format_lines:
            line = self.format_lines[0]
            return line[:len(line) - len(line.lstrip())]
        return config.DEFAULT_DATA_INDENT

    def extend_format(self, tokens: Iterable[str]) -> int:
        """Append FORMAT field names. Returns the number of fields added."""
        before = len(self._format_fields)
        self._format_fields.extend(tokens)
        return len(self._format_fields) - before

    # =========================================================================
    # ROW OPERATIONS
    # =========================================================================

    def attach_row(self, row: DatRow) -> DatRow:
        """Append a parsed row without marking the document modified."""
        row.parent_class = self
        self._rows.append(row)
        return row

    def add_row(self, row: Optional[DatRow] = None, index: Optional[int] = None) -> DatRow:
        """Insert a row (a new empty one by default) and mark the document modified."""
        if row is None:
            row = DatRow()
        row.parent_class = self
        if index is None:
            self._rows.append(row)
        else:
            self._rows.insert(index, row)
        self.mark_modified()
        return row

    def new_row(self, **values) -> DatRow:
        """Create, append and fill a new row."""
        row = self.add_row()
        for field, value in values.items():
            row.set(field, value)
        return row

    def remove_row(self, row: DatRow) -> bool:
        """Remove a row. Comments that preceded it stay in place."""
        if row not in self._rows:
            return False
        index = self._rows.index(row)
        if row.lead_lines:
            if index + 1 < len(self._rows):
                following = self._rows[index + 1]
                following.lead_lines[:0] = row.lead_lines
            else:
                self.post_data_lines[:0] = row.lead_lines
            row.lead_lines = []
        del self._rows[index]
        row.parent_class = None
        self.mark_modified()
        return True

    def move_row(self, old_index: int, new_index: int) -> bool:
        if not (0 <= old_index < len(self._rows)) or not (0 <= new_index < len(self._rows)):
            return False
        if old_index == new_index:
            return False
        row = self._rows.pop(old_index)
        self._rows.insert(new_index, row)
        self.mark_modified()
        return True

    def mark_modified(self):
        doc = self.document
        if doc is not None:
            doc.mark_modified()

    def __repr__(self) -> str:
        return f"DatClass({self.name!r}, fields={len(self._format_fields)}, rows={len(self._rows)})"


# =============================================================================
# DOCUMENT
# =============================================================================

class DatDocument:
    """
    Root of one parsed file.

    Attributes:
        head: Verbatim lines before the first class/schema declaration.
        units: Unit label from a '# Unit: ...' head comment.
        classes: Ordered class sections.
        kind: Dialect that produced the document.
        grouping: Holder/shank grouping sub-mode, None for other dialects.
        row_layout: Owning class of every source row in file order, for documents
            whose classes interleave in the file (RTYPE routing). None when
            classes are contiguous.
    """

    def __init__(self, kind=None):
        self.head: List[str] = []
        self.units: str = config.DEFAULT_UNITS
        self._classes: List[DatClass] = []
        self.kind = kind
        self.grouping = None
        self.row_layout: Optional[List[DatClass]] = None
        self._library_ref = None
        self._is_modified = False
        self._observers: Dict[str, List[Callable]] = {
            'modified': [],
        }

    @property
    def classes(self) -> List[DatClass]:
        return self._classes

    @property
    def is_modified(self) -> bool:
        return self._is_modified

    @property
    def library(self):
        """The LibraryRef this document is loaded in, if any."""
        return self._library_ref() if self._library_ref is not None else None

    @library.setter
    def library(self, value):
        self._library_ref = weakref.ref(value) if value is not None else None

    @property
    def row_count(self) -> int:
        return sum(len(cls.rows) for cls in self._classes)

    def add_class(self, cls: DatClass) -> DatClass:
        cls.document = self
        self._classes.append(cls)
        return cls

    def find_class(self, name: str) -> Optional[DatClass]:
        """Find a class by name, ignoring case."""
        folded = name.upper()
        for cls in self._classes:
            if cls.name.upper() == folded:
                return cls
        return None

    def iter_rows(self) -> Iterator[DatRow]:
        for cls in self._classes:
            yield from cls.rows

    # =========================================================================
    # MODIFICATION STATE
    # =========================================================================

    def mark_modified(self):
        if not self._is_modified:
            self._is_modified = True
            self._notify('modified', True)

    def mark_saved(self):
        """Clear the modified flag after a successful save."""
        if self._is_modified:
            self._is_modified = False
            self._notify('modified', False)

    def subscribe(self, event: str, callback: Callable):
        if event in self._observers:
            self._observers[event].append(callback)
        else:
            logger.warning(f"Unknown event type: {event}")

    def unsubscribe(self, event: str, callback: Callable):
        if event in self._observers and callback in self._observers[event]:
            self._observers[event].remove(callback)

    def _notify(self, event: str, *args):
        for callback in list(self._observers.get(event, [])):
            try:
                callback(*args)
            except Exception as e:
                logger.error(f"Error in observer callback for '{event}': {e}")

    def __repr__(self) -> str:
        kind = self.kind.value if self.kind is not None else None
        return f"DatDocument(kind={kind}, classes={len(self._classes)}, rows={self.row_count})"
