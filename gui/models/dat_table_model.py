# -*- coding: utf-8 -*-
"""
DatTableModel - grid model for one DatClass

Exposes the rows of a class to a QTableView: one row per DatRow, one column
per visible FORMAT field. Reads go through DatRow.get(), edits through
DatRow.set(), so the document's dirty flag and row observers stay the single
source of change notifications.
"""

from typing import Any, Iterable, List, Optional

from PySide6.QtCore import Qt, QAbstractTableModel, QModelIndex, Signal
from PySide6.QtGui import QBrush, QColor

from datforge_logger import get_logger
from models.dat_document import DatClass, DatRow

logger = get_logger("gui.models.dat_table")


class ColorCache:
    """Brushes reused by data()."""
    FG_DEFAULT = QBrush(QColor("#f0f0f0"))
    FG_MODIFIED = QBrush(QColor("#ADD8E6"))  # Light Blue
    FG_NEW = QBrush(QColor("#90EE90"))       # Light Green


class DatTableModel(QAbstractTableModel):
    """
    Table model over a DatClass.

    Hidden fields (link and ordering columns such as LIBRF or SEQ) are
    injected by the caller; matching ignores case.
    """

    row_changed = Signal(int, str)  # (row index, field)

    def __init__(self, cls: Optional[DatClass] = None, hidden_fields: Iterable[str] = (), parent=None):
        super().__init__(parent)
        self._class: Optional[DatClass] = None
        self._hidden = {field.upper() for field in hidden_fields}
        self._columns: List[str] = []
        self._rows: List[DatRow] = []
        if cls is not None:
            self.set_class(cls)

    # =========================================================================
    # QAbstractTableModel
    # =========================================================================

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._columns)

    def headerData(self, section: int, orientation: Qt.Orientation,
                   role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            if 0 <= section < len(self._columns):
                return self._columns[section]
            return None
        return str(section + 1)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        row = self.row_at(index.row()) if index.isValid() else None
        if row is None or not (0 <= index.column() < len(self._columns)):
            return None

        if role in (Qt.ItemDataRole.DisplayRole, Qt.ItemDataRole.EditRole):
            return row.get(self._columns[index.column()])

        elif role == Qt.ItemDataRole.ForegroundRole:
            if row.is_new:
                return ColorCache.FG_NEW
            if row.is_modified:
                return ColorCache.FG_MODIFIED
            return ColorCache.FG_DEFAULT

        return None

    def flags(self, index: QModelIndex) -> Qt.ItemFlag:
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        return Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable | Qt.ItemFlag.ItemIsEditable

    def setData(self, index: QModelIndex, value: Any,
                role: int = Qt.ItemDataRole.EditRole) -> bool:
        if not index.isValid() or role != Qt.ItemDataRole.EditRole:
            return False
        row = self.row_at(index.row())
        if row is None or not (0 <= index.column() < len(self._columns)):
            return False
        # dataChanged is emitted by the row observer
        return row.set(self._columns[index.column()], value)

    # =========================================================================
    # DATA API
    # =========================================================================

    @property
    def dat_class(self) -> Optional[DatClass]:
        return self._class

    @property
    def columns(self) -> List[str]:
        return list(self._columns)

    def set_class(self, cls: Optional[DatClass]) -> None:
        """Show another class (None clears the model)."""
        self.beginResetModel()
        for row in self._rows:
            row.unsubscribe(self._on_row_changed)
        self._class = cls
        self._rows = list(cls.rows) if cls is not None else []
        self._columns = self._visible_fields(cls)
        for row in self._rows:
            row.subscribe(self._on_row_changed)
        self.endResetModel()
        if cls is not None:
            logger.debug(f"[DatTableModel] {cls.display_name}: {len(self._rows)} rows, {len(self._columns)} columns")

    def set_hidden_fields(self, hidden_fields: Iterable[str]) -> None:
        self._hidden = {field.upper() for field in hidden_fields}
        self.set_class(self._class)

    def row_at(self, row_idx: int) -> Optional[DatRow]:
        if 0 <= row_idx < len(self._rows):
            return self._rows[row_idx]
        return None

    def insert_row(self, position: Optional[int] = None, **values) -> Optional[DatRow]:
        """Insert a new row into the class (appended by default)."""
        if self._class is None:
            return None
        if position is None or not (0 <= position <= len(self._rows)):
            position = len(self._rows)

        self.beginInsertRows(QModelIndex(), position, position)
        row = self._class.add_row(index=self._class_index_for(position))
        self._rows.insert(position, row)
        row.subscribe(self._on_row_changed)
        self.endInsertRows()

        for field, value in values.items():
            row.set(field, value)
        return row

    def remove_row(self, position: int) -> bool:
        """Remove a row from the class."""
        row = self.row_at(position)
        if row is None or self._class is None:
            return False

        self.beginRemoveRows(QModelIndex(), position, position)
        row.unsubscribe(self._on_row_changed)
        self._class.remove_row(row)
        del self._rows[position]
        self.endRemoveRows()
        return True

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _visible_fields(self, cls: Optional[DatClass]) -> List[str]:
        if cls is None:
            return []
        fields = cls.format_fields
        if not fields and cls.rows:
            fields = list(cls.rows[0].map)
        return [field for field in fields if field.upper() not in self._hidden]

    def _class_index_for(self, position: int) -> int:
        # The model shows the class's rows in class order
        if position < len(self._rows):
            return self._class.rows.index(self._rows[position])
        return len(self._class.rows)

    def _on_row_changed(self, row: DatRow, field: str, old: str, new: str):
        try:
            row_idx = self._rows.index(row)
        except ValueError:
            return
        folded = field.upper()
        columns = [i for i, name in enumerate(self._columns) if name.upper() == folded]
        if columns:
            cell = self.index(row_idx, columns[0])
            self.dataChanged.emit(cell, cell)
        else:
            # Hidden field: repaint the row so modified colouring updates
            self.dataChanged.emit(self.index(row_idx, 0), self.index(row_idx, max(len(self._columns) - 1, 0)))
        self.row_changed.emit(row_idx, field)
