# -*- coding: utf-8 -*-
"""
DatForge Library Reference

A loaded database file: where it came from, which dialect it is, the parsed
document and whether it has unsaved changes.
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional

from datforge_enums import FileKind
from datforge_logger import get_logger
from models.dat_document import DatDocument

logger = get_logger("models.library")


class LibraryRef:
    """
    Wrapper around one loaded DatDocument.

    The dirty flag follows the document's modified flag. Subscribers to
    'dirty_changed' receive the new boolean value.
    """

    def __init__(
        self,
        kind: FileKind,
        file_path: Path,
        document: DatDocument,
        is_read_only: bool = False,
    ):
        self.kind = kind
        self._file_path = Path(file_path)
        self.is_read_only = is_read_only
        self._document = document
        self._observers: Dict[str, List[Callable]] = {
            'dirty_changed': [],
        }

        document.library = self
        document.subscribe('modified', self._on_document_modified)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def document(self) -> DatDocument:
        return self._document

    @property
    def file_path(self) -> Path:
        return self._file_path

    @file_path.setter
    def file_path(self, value):
        self._file_path = Path(value)

    @property
    def file_name(self) -> str:
        return self._file_path.name

    @property
    def units(self) -> str:
        return self._document.units

    @property
    def is_dirty(self) -> bool:
        return self._document.is_modified

    def clear_dirty(self):
        """Mark the current state as saved."""
        self._document.mark_saved()

    # =========================================================================
    # OBSERVER PATTERN
    # =========================================================================

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
                logger.error(f"Error in library observer callback for '{event}': {e}")

    def _on_document_modified(self, is_modified: bool):
        self._notify('dirty_changed', is_modified)

    def detach(self):
        """Stop following the document (called on unload)."""
        self._document.unsubscribe('modified', self._on_document_modified)
        self._document.library = None

    def __repr__(self) -> str:
        return f"LibraryRef({self.kind.value}, {self.file_name!r}, dirty={self.is_dirty})"
