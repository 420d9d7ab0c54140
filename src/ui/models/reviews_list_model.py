# ui/models/reviews_list_model.py
from __future__ import annotations

import uuid

from PySide6.QtCore import QAbstractListModel, Qt, QModelIndex

from core.models import DisplayItem, ItemKind
from core.state import ReviewsState

ItemRole = int(Qt.UserRole)
KindRole = ItemRole + 1


class ReviewsListModel(QAbstractListModel):
    """Read-only Qt view over the latest ReviewsState snapshot."""

    def __init__(self, state: ReviewsState | None = None, parent=None):
        super().__init__(parent)
        self._items: tuple[DisplayItem, ...] = state.items if state else ()

    def set_state(self, state: ReviewsState):
        # snapshots are small; a reset keeps the view in sync with in-place row updates
        self.beginResetModel()
        self._items = state.items
        self.endResetModel()

    def rowCount(self, parent=QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return len(self._items)

    def data(self, index: QModelIndex, role=Qt.DisplayRole):
        if not index.isValid() or index.row() >= len(self._items):
            return None
        item = self._items[index.row()]

        if role == Qt.DisplayRole:
            if item.kind is ItemKind.REVIEW:
                return f"{item.username}\n{item.rating_text}\n{item.review_text}\n{item.created}"
            return item.reviews_count_text
        if role == ItemRole:
            return item
        if role == KindRole:
            return item.kind.value
        return None

    def item_at(self, row: int) -> DisplayItem | None:
        if row < 0 or row >= len(self._items):
            return None
        return self._items[row]

    def row_for_id(self, item_id: uuid.UUID) -> int:
        for i, item in enumerate(self._items):
            if item.id == item_id:
                return i
        return -1
