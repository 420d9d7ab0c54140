# ui/widgets/reviews_widget.py
from __future__ import annotations

from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QListView, QProgressBar, QToolButton, QStyle

from core.reviews_view_model import ReviewsViewModel
from core.state import ReviewsState
from ui.delegates.review_delegate import ReviewDelegate
from ui.models.reviews_list_model import ReviewsListModel


class ReviewsWidget(QWidget):
    def __init__(self, view_model: ReviewsViewModel, parent=None):
        super().__init__(parent)
        self.view_model = view_model

        self.list = QListView()
        self.model = ReviewsListModel(view_model.state)
        self.list.setModel(self.model)
        self.list.setObjectName("ReviewsList")
        self.list.setVerticalScrollMode(QListView.ScrollMode.ScrollPerPixel)
        self.list.setSelectionMode(QListView.SelectionMode.NoSelection)
        self.list.setUniformItemSizes(False)
        self.list.setResizeMode(QListView.ResizeMode.Adjust)

        # Delegate draws the rows and handles "Show more..."
        self.delegate = ReviewDelegate(self.list)
        self.list.setItemDelegate(self.delegate)

        # Prefetch on scroll
        self.list.verticalScrollBar().valueChanged.connect(self._on_scrolled)
        self.list.verticalScrollBar().rangeChanged.connect(self._on_range_changed)

        # Pull-to-refresh stand-in: a refresh button plus a busy bar
        self.btn_refresh = QToolButton()
        self.btn_refresh.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_BrowserReload))
        self.btn_refresh.setToolTip("Refresh reviews")
        self.btn_refresh.clicked.connect(self.view_model.begin_refresh)

        self.refreshing_bar = QProgressBar()
        self.refreshing_bar.setRange(0, 0)
        self.refreshing_bar.setTextVisible(False)
        self.refreshing_bar.setMaximumHeight(4)
        self.refreshing_bar.setVisible(False)

        top_bar = QHBoxLayout()
        top_bar.addStretch(1)
        top_bar.addWidget(self.btn_refresh)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addLayout(top_bar)
        layout.addWidget(self.refreshing_bar)
        layout.addWidget(self.list)

        self.view_model.stateChanged.connect(self._on_state_changed)

    def _on_state_changed(self, state: ReviewsState):
        bar = self.list.verticalScrollBar()
        scroll = bar.value()
        self.model.set_state(state)
        # lay out now so the scroll range matches the new rows
        self.list.doItemsLayout()
        bar.setValue(min(scroll, bar.maximum()))
        self.refreshing_bar.setVisible(state.is_refreshing)
        # rows that do not fill the viewport leave nothing to scroll, so check here too
        self._check_near_end()

    def _on_scrolled(self, value: int):
        self._check_near_end(value)

    def _on_range_changed(self, _minimum: int, _maximum: int):
        self._check_near_end()

    def _check_near_end(self, target_offset: int | None = None):
        if not self.list.isVisible():
            return
        bar = self.list.verticalScrollBar()
        viewport_h = self.list.viewport().height()
        content_h = bar.maximum() + viewport_h
        self.view_model.request_next_page_if_near_end(
            viewport_height=viewport_h,
            content_height=content_h,
            target_offset=bar.value() if target_offset is None else target_offset,
        )

    def showEvent(self, event):
        super().showEvent(event)
        self._check_near_end()
