# ui/delegates/review_delegate.py
from __future__ import annotations

from PySide6.QtCore import QEvent, QRect, QSize, Qt
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtWidgets import QStyledItemDelegate

from core.models import (
    AVATAR_SIZE, AVATAR_TO_CONTENT, CELL_INSETS, LINE_SPACING, PHOTO_SIZE, PHOTOS_SPACING, SHOW_MORE_TEXT,
    ItemKind, ReviewItem, count_text_lines,
)
from ui.models.reviews_list_model import ItemRole

CREATED_COLOR = QColor("#8c8c8c")
SHOW_MORE_COLOR = QColor("#4c7bdb")


class ReviewDelegate(QStyledItemDelegate):
    def sizeHint(self, option, index):
        item = index.data(ItemRole)
        if item is None:
            return super().sizeHint(option, index)
        width = option.rect.width() or self.parent().viewport().width()
        return QSize(width, item.measure(width, option.fontMetrics))

    def paint(self, painter: QPainter, option, index):
        item = index.data(ItemRole)
        if item is None:
            return super().paint(painter, option, index)

        painter.save()
        top, left, bottom, right = CELL_INSETS
        rect = option.rect
        fm = option.fontMetrics
        line_h = fm.height()

        if item.kind is ItemKind.REVIEWS_COUNT:
            painter.setPen(CREATED_COLOR)
            painter.drawText(rect.adjusted(left, top, -right, -bottom), Qt.AlignHCenter | Qt.AlignTop,
                             item.reviews_count_text)
            painter.restore()
            return

        avatar_rect = QRect(rect.left() + left, rect.top() + top, AVATAR_SIZE, AVATAR_SIZE)
        if isinstance(item.avatar, QImage):
            painter.drawImage(avatar_rect, item.avatar)

        x = avatar_rect.right() + 1 + AVATAR_TO_CONTENT
        width = rect.right() - right - x
        y = rect.top() + top

        painter.drawText(QRect(x, y, width, line_h), Qt.AlignLeft, item.username)
        y += line_h + LINE_SPACING
        painter.drawText(QRect(x, y, width, line_h), Qt.AlignLeft, item.rating_text)
        y += line_h + LINE_SPACING

        if item.photos:
            px = x
            for photo in item.photos:
                if isinstance(photo, QImage):
                    painter.drawImage(QRect(px, y, *PHOTO_SIZE), photo)
                px += PHOTO_SIZE[0] + PHOTOS_SPACING
            y += PHOTO_SIZE[1] + LINE_SPACING

        lines = count_text_lines(item.review_text, width, fm)
        if lines:
            shown = lines if item.is_expanded else min(lines, item.max_lines)
            painter.drawText(QRect(x, y, width, shown * line_h), Qt.AlignLeft | Qt.TextWordWrap, item.review_text)
            y += shown * line_h + LINE_SPACING
            if item.is_truncated(rect.width(), fm):
                painter.setPen(SHOW_MORE_COLOR)
                painter.drawText(QRect(x, y, width, line_h), Qt.AlignLeft, SHOW_MORE_TEXT)
                painter.setPen(option.palette.text().color())
                y += line_h + LINE_SPACING

        painter.setPen(CREATED_COLOR)
        painter.drawText(QRect(x, y, width, line_h), Qt.AlignLeft, item.created)
        painter.restore()

    def editorEvent(self, event, model, option, index):
        if event.type() != QEvent.MouseButtonRelease or event.button() != Qt.LeftButton:
            return False
        item = index.data(ItemRole)
        if not isinstance(item, ReviewItem) or not item.is_truncated(option.rect.width(), option.fontMetrics):
            return False

        # "Show more" sits right above the created date line
        line_h = option.fontMetrics.height()
        bottom = option.rect.bottom() - CELL_INSETS[2] - line_h - LINE_SPACING
        show_more_rect = QRect(option.rect.left(), bottom - line_h, option.rect.width(), line_h)
        if show_more_rect.contains(event.position().toPoint()):
            item.show_more()
            return True
        return False
