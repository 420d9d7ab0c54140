# core/state.py
from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from typing import Optional

from core.models import DisplayItem, ItemKind, ReviewItem, ReviewsCountItem

DEFAULT_PAGE_LIMIT = 20


@dataclass(frozen=True)
class ReviewsState:
    """Immutable snapshot handed to the presentation layer."""
    items: tuple[DisplayItem, ...] = ()
    offset: int = 0
    limit: int = DEFAULT_PAGE_LIMIT
    should_load: bool = True
    is_refreshing: bool = False

    @property
    def review_count(self) -> int:
        return sum(1 for i in self.items if i.kind is ItemKind.REVIEW)

    @property
    def has_footer(self) -> bool:
        return bool(self.items) and self.items[-1].kind is ItemKind.REVIEWS_COUNT


class ListState:
    """
    Mutable list state owned by the view model.

    Rows are kept in a dict by id plus a separate display order, so async
    completions look rows up by id instead of relying on indexes.
    """

    def __init__(self, limit: int = DEFAULT_PAGE_LIMIT):
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self.offset = 0
        self.should_load = True
        self.is_refreshing = False
        self._rows: dict[uuid.UUID, ReviewItem] = {}
        self._order: list[uuid.UUID] = []
        self._footer: Optional[ReviewsCountItem] = None

    def reset(self, refreshing: bool = False) -> None:
        self.offset = 0
        self.should_load = True
        self.is_refreshing = refreshing
        self._rows.clear()
        self._order.clear()
        self._footer = None

    # ---- rows ----

    @property
    def review_count(self) -> int:
        return len(self._order)

    @property
    def has_footer(self) -> bool:
        return self._footer is not None

    def append_rows(self, rows: list[ReviewItem]) -> None:
        if self._footer is not None:
            raise RuntimeError("Cannot append reviews after the reviews count footer")
        for row in rows:
            if row.id in self._rows:
                raise ValueError(f"Duplicate row id {row.id}")
            self._rows[row.id] = row
            self._order.append(row.id)

    def append_footer(self, footer: ReviewsCountItem) -> None:
        if self._footer is not None:
            raise RuntimeError("Reviews count footer already added")
        self._footer = footer

    def get(self, row_id: uuid.UUID) -> Optional[ReviewItem]:
        return self._rows.get(row_id)

    def update(self, row_id: uuid.UUID, **changes) -> Optional[ReviewItem]:
        """Replaces the row in place. Returns None when the row no longer exists."""
        row = self._rows.get(row_id)
        if row is None:
            return None
        row = replace(row, **changes)
        self._rows[row_id] = row
        return row

    def snapshot(self) -> ReviewsState:
        items: list[DisplayItem] = [self._rows[i] for i in self._order]
        if self._footer is not None:
            items.append(self._footer)
        return ReviewsState(
            items=tuple(items),
            offset=self.offset,
            limit=self.limit,
            should_load=self.should_load,
            is_refreshing=self.is_refreshing,
        )


class AppState:
    """Long-lived objects shared by the application shell."""

    def __init__(self):
        self.config = None
        self.executor = None
        self.view_model = None
