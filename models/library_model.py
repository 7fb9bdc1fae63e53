# -*- coding: utf-8 -*-
"""
DatForge Library Model

Keeps track of the loaded database files:
- At most one library per FileKind
- Unsaved-changes guard on replace and unload
- Save / save-as
- Observer pattern for state changes
"""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import datforge_core as core
from datforge_enums import FileKind
from datforge_exceptions import LibraryBusyError, LibraryNotLoadedError
from datforge_logger import get_logger
from models.dat_document import DatClass
from models.library import LibraryRef
from parser.indexed_parser import get_index_class

logger = get_logger("models.library_model")


class LibraryModel:
    """
    The set of loaded libraries, one per file kind.

    Events:
        library_loaded(ref), library_unloaded(ref), library_saved(ref),
        dirty_changed(kind, is_dirty)
    """

    def __init__(self):
        self._libraries: Dict[FileKind, LibraryRef] = {}
        self._dirty_handlers: Dict[FileKind, Callable] = {}

        self._observers: Dict[str, List[Callable]] = {
            'library_loaded': [],
            'library_unloaded': [],
            'library_saved': [],
            'dirty_changed': [],
        }

    # =============================================================================
    # PROPERTIES
    # =============================================================================

    @property
    def libraries(self) -> Dict[FileKind, LibraryRef]:
        """Loaded libraries by kind (copy)."""
        return self._libraries.copy()

    @property
    def has_unsaved_changes(self) -> bool:
        return any(ref.is_dirty for ref in self._libraries.values())

    def get(self, kind: FileKind) -> Optional[LibraryRef]:
        return self._libraries.get(FileKind(kind))

    def is_loaded(self, kind: FileKind) -> bool:
        return FileKind(kind) in self._libraries

    # =============================================================================
    # OBSERVER PATTERN
    # =============================================================================

    def subscribe(self, event: str, callback: Callable):
        """Subscribe to library events."""
        if event in self._observers:
            self._observers[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable):
        """Unsubscribe from an event."""
        if event in self._observers and callback in self._observers[event]:
            self._observers[event].remove(callback)

    def _notify(self, event: str, *args):
        """Notify all subscribers of an event."""
        for callback in list(self._observers.get(event, [])):
            try:
                callback(*args)
            except Exception as e:
                logger.error(f"Error in library observer callback for '{event}': {e}")

    # =============================================================================
    # LOAD / UNLOAD
    # =============================================================================

    def load(self, file_path: Union[str, Path], kind: Optional[FileKind] = None,
             force: bool = False) -> LibraryRef:
        """
        Load a file, replacing the library of the same kind.

        Args:
            file_path: Database file
            kind: Dialect override; detected when omitted
            force: Replace a library with unsaved changes

        Returns:
            The new LibraryRef

        Raises:
            LibraryBusyError: the library being replaced has unsaved changes
            FileReadError, StructuralError: the file could not be loaded
        """
        ref = core.load_library(file_path, kind)

        previous = self._libraries.get(ref.kind)
        if previous is not None:
            if previous.is_dirty and not force:
                ref.detach()
                raise LibraryBusyError(
                    f"{previous.file_name} has unsaved changes",
                    kind=ref.kind.value,
                    file_path=str(previous.file_path),
                )
            self._detach(previous)
            self._notify('library_unloaded', previous)

        self._attach(ref)
        logger.info(f"Library loaded: {ref.file_name} ({ref.kind.value})")
        self._notify('library_loaded', ref)
        return ref

    def unload(self, kind: FileKind, discard: bool = False) -> bool:
        """
        Unload the library of a kind.

        Returns:
            False if nothing is loaded, or if it has unsaved changes and
            `discard` is not set
        """
        ref = self._libraries.get(FileKind(kind))
        if ref is None:
            return False
        if ref.is_dirty and not discard:
            logger.warning(f"Not unloading {ref.file_name}: unsaved changes")
            return False

        self._detach(ref)
        logger.info(f"Library unloaded: {ref.file_name}")
        self._notify('library_unloaded', ref)
        return True

    def _attach(self, ref: LibraryRef):
        handler = lambda is_dirty, kind=ref.kind: self._notify('dirty_changed', kind, is_dirty)
        ref.subscribe('dirty_changed', handler)
        self._dirty_handlers[ref.kind] = handler
        self._libraries[ref.kind] = ref

    def _detach(self, ref: LibraryRef):
        handler = self._dirty_handlers.pop(ref.kind, None)
        if handler is not None:
            ref.unsubscribe('dirty_changed', handler)
        ref.detach()
        self._libraries.pop(ref.kind, None)

    # =============================================================================
    # SAVE
    # =============================================================================

    def save(self, kind: FileKind) -> Path:
        """
        Write the library of a kind to its file.

        Raises:
            LibraryNotLoadedError: nothing of that kind is loaded
            FileWriteError: the file could not be written
        """
        ref = self._require(kind)
        path = core.save_library(ref)
        self._notify('library_saved', ref)
        return path

    def save_as(self, kind: FileKind, file_path: Union[str, Path]) -> Path:
        """Write the library of a kind to a new file and switch to it."""
        ref = self._require(kind)
        path = core.save_library(ref, file_path)
        self._notify('library_saved', ref)
        return path

    def _require(self, kind: FileKind) -> LibraryRef:
        ref = self._libraries.get(FileKind(kind))
        if ref is None:
            raise LibraryNotLoadedError(f"No {FileKind(kind).value} library loaded", kind=FileKind(kind).value)
        return ref

    # =============================================================================
    # QUERIES
    # =============================================================================

    def index_class(self, kind: FileKind) -> Optional[DatClass]:
        """
        The class a tree/grid shows first for a kind.

        Holders and shanks use their synthetic index class; other kinds their
        first class.
        """
        ref = self._libraries.get(FileKind(kind))
        if ref is None:
            return None
        doc = ref.document
        index = get_index_class(doc)
        if index is not None:
            return index
        return doc.classes[0] if doc.classes else None

    def __repr__(self) -> str:
        loaded = ", ".join(f"{k.value}={r.file_name}" for k, r in self._libraries.items())
        return f"LibraryModel({loaded})"
