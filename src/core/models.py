# core/models.py
from __future__ import annotations

import json
import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Optional, Protocol, Union

from core.errors import SchemaDecodeFailure

# -----------------------------
# Wire records
# -----------------------------

@dataclass(frozen=True)
class Review:
    avatar_url: Optional[str]
    first_name: str
    last_name: str
    rating: int
    text: str
    created: str        # already formatted for display by the server
    photo_urls: tuple[str, ...] = ()

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Review":
        try:
            photo_urls = d.get("photo_urls") or []
            if not isinstance(photo_urls, list):
                raise TypeError("photo_urls must be a list")
            rating = d["rating"]
            if isinstance(rating, bool) or not isinstance(rating, int):
                raise TypeError("rating must be an integer")
            return Review(
                avatar_url=d.get("avatar_url"),
                first_name=str(d["first_name"]),
                last_name=str(d["last_name"]),
                rating=rating,
                text=str(d["text"]),
                created=str(d["created"]),
                photo_urls=tuple(str(u) for u in photo_urls),
            )
        except (KeyError, TypeError, AttributeError) as e:
            raise SchemaDecodeFailure(f"Malformed review record: {e}") from e


@dataclass(frozen=True)
class ReviewsPage:
    items: tuple[Review, ...]
    count: int          # total number of reviews on the server

    @staticmethod
    def from_json(data: bytes | str) -> "ReviewsPage":
        try:
            payload = json.loads(data)
        except (ValueError, TypeError) as e:
            raise SchemaDecodeFailure(f"Reviews payload is not JSON: {e}") from e

        if not isinstance(payload, dict):
            raise SchemaDecodeFailure("Reviews payload must be an object")
        items = payload.get("items")
        count = payload.get("count")
        if not isinstance(items, list):
            raise SchemaDecodeFailure("Reviews payload has no 'items' list")
        if isinstance(count, bool) or not isinstance(count, int):
            raise SchemaDecodeFailure("Reviews payload has no integer 'count'")

        return ReviewsPage(items=tuple(Review.from_dict(i) for i in items), count=count)


# -----------------------------
# Display items
# -----------------------------

class FontMetrics(Protocol):
    """The part of QFontMetrics the layout code needs."""

    def height(self) -> int: ...
    def horizontalAdvance(self, text: str) -> int: ...


class ItemKind(Enum):
    REVIEW = "review"
    REVIEWS_COUNT = "reviews_count"


TRUNCATED_MAX_LINES = 3
EXPANDED_MAX_LINES = 0      # 0 = no limit

# Insets: top, left, bottom, right
CELL_INSETS = (9, 12, 9, 12)
AVATAR_SIZE = 36
AVATAR_TO_CONTENT = 10
PHOTO_SIZE = (55, 66)
PHOTOS_SPACING = 8
LINE_SPACING = 6
SHOW_MORE_TEXT = "Show more..."


def count_text_lines(text: str, width: int, metrics: FontMetrics) -> int:
    if not text:
        return 0
    lines = 0
    for paragraph in text.split("\n"):
        advance = metrics.horizontalAdvance(paragraph)
        if width <= 0 or advance <= 0:
            lines += 1
        else:
            lines += max(1, math.ceil(advance / width))
    return lines


@dataclass(frozen=True)
class ReviewItem:
    kind: ClassVar[ItemKind] = ItemKind.REVIEW

    username: str
    rating_text: str
    avatar: Any
    review_text: str
    created: str
    photos: tuple[Any, ...] = ()
    max_lines: int = TRUNCATED_MAX_LINES
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    on_tap_show_more: Optional[Callable[[uuid.UUID], None]] = field(default=None, compare=False, repr=False)

    @property
    def is_expanded(self) -> bool:
        return self.max_lines == EXPANDED_MAX_LINES

    def show_more(self) -> None:
        if self.on_tap_show_more is not None:
            self.on_tap_show_more(self.id)

    def is_truncated(self, max_width: int, metrics: FontMetrics) -> bool:
        if self.is_expanded:
            return False
        return count_text_lines(self.review_text, self._text_width(max_width), metrics) > self.max_lines

    def _text_width(self, max_width: int) -> int:
        top, left, bottom, right = CELL_INSETS
        return max_width - left - right - AVATAR_SIZE - AVATAR_TO_CONTENT

    def measure(self, max_width: int, metrics: FontMetrics) -> int:
        """
        Returns the row height for the given width.
        Layout (right of the avatar): username, rating, photos, text, "show more", created.
        """
        top, left, bottom, right = CELL_INSETS
        line_h = metrics.height()
        width = self._text_width(max_width)

        y = top
        y += line_h + LINE_SPACING      # username
        y += line_h + LINE_SPACING      # rating

        if self.photos:
            y += PHOTO_SIZE[1] + LINE_SPACING

        lines = count_text_lines(self.review_text, width, metrics)
        if lines:
            shown = lines if self.is_expanded else min(lines, self.max_lines)
            y += shown * line_h + LINE_SPACING
            if not self.is_expanded and lines > self.max_lines:
                y += line_h + LINE_SPACING

        y += line_h                     # created

        return max(y, top + AVATAR_SIZE) + bottom


@dataclass(frozen=True)
class ReviewsCountItem:
    kind: ClassVar[ItemKind] = ItemKind.REVIEWS_COUNT

    reviews_count_text: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def measure(self, max_width: int, metrics: FontMetrics) -> int:
        top, left, bottom, right = CELL_INSETS
        width = max_width - left - right
        lines = max(1, count_text_lines(self.reviews_count_text, width, metrics))
        return top + lines * metrics.height() + bottom


DisplayItem = Union[ReviewItem, ReviewsCountItem]
