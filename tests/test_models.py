"""Tests for wire decoding and display item measurement."""

import json

import pytest

from core.errors import SchemaDecodeFailure
from core.models import (
    CELL_INSETS, EXPANDED_MAX_LINES, ItemKind, Review, ReviewItem, ReviewsCountItem, ReviewsPage,
    count_text_lines,
)

from conftest import make_review


class FixedMetrics:
    """Every character is 10px wide, lines are 20px high."""

    def height(self) -> int:
        return 20

    def horizontalAdvance(self, text: str) -> int:
        return 10 * len(text)


def _item(text: str = "short", photos=(), max_lines: int = 3) -> ReviewItem:
    return ReviewItem(
        username="Ann Lee",
        rating_text="★★★★☆",
        avatar=None,
        review_text=text,
        created="1 May",
        photos=photos,
        max_lines=max_lines,
    )


class TestReviewDecoding:
    def test_snake_case_fields(self):
        review = Review.from_dict(make_review(1, photo_urls=["http://img.test/p.png"], avatar_url="http://img.test/a.png"))

        assert review.avatar_url == "http://img.test/a.png"
        assert review.first_name == "First1"
        assert review.last_name == "Last1"
        assert review.rating == 2
        assert review.photo_urls == ("http://img.test/p.png",)

    def test_optional_avatar_and_photos(self):
        d = make_review(0)
        del d["avatar_url"]
        del d["photo_urls"]

        review = Review.from_dict(d)

        assert review.avatar_url is None
        assert review.photo_urls == ()

    @pytest.mark.parametrize("field,value", [
        ("first_name", KeyError),
        ("rating", "5"),
        ("rating", True),
        ("photo_urls", "http://img.test/p.png"),
    ])
    def test_malformed_review(self, field, value):
        d = make_review(0)
        if value is KeyError:
            del d[field]
        else:
            d[field] = value

        with pytest.raises(SchemaDecodeFailure):
            Review.from_dict(d)

    def test_page(self):
        data = json.dumps({"items": [make_review(0), make_review(1)], "count": 7}).encode()

        page = ReviewsPage.from_json(data)

        assert page.count == 7
        assert [r.first_name for r in page.items] == ["First0", "First1"]

    @pytest.mark.parametrize("data", [b"not json", b"[]", b'{"count": 1}', b'{"items": [], "count": "1"}'])
    def test_malformed_page(self, data):
        with pytest.raises(SchemaDecodeFailure):
            ReviewsPage.from_json(data)


class TestDisplayItems:
    def test_kinds(self):
        assert _item().kind is ItemKind.REVIEW
        assert ReviewsCountItem("3 reviews").kind is ItemKind.REVIEWS_COUNT

    def test_ids_are_generated_per_item(self):
        assert _item().id != _item().id

    def test_equality_ignores_callback(self):
        a = _item()
        b = ReviewItem(**{**a.__dict__, "on_tap_show_more": lambda _id: None})
        assert a == b

    def test_count_text_lines(self):
        metrics = FixedMetrics()
        assert count_text_lines("", 100, metrics) == 0
        assert count_text_lines("x" * 10, 100, metrics) == 1
        assert count_text_lines("x" * 11, 100, metrics) == 2
        assert count_text_lines("a\nb", 100, metrics) == 2

    def test_truncated_text_is_limited(self):
        metrics = FixedMetrics()
        long_text = "x" * 500

        truncated = _item(long_text)
        expanded = _item(long_text, max_lines=EXPANDED_MAX_LINES)

        assert truncated.is_truncated(400, metrics)
        assert not expanded.is_truncated(400, metrics)
        assert expanded.measure(400, metrics) > truncated.measure(400, metrics)

    def test_short_text_is_not_truncated(self):
        assert not _item("short").is_truncated(400, FixedMetrics())

    def test_photos_add_height(self):
        metrics = FixedMetrics()
        assert _item(photos=("p",)).measure(400, metrics) > _item().measure(400, metrics)

    def test_count_item_height(self):
        top, _, bottom, _ = CELL_INSETS
        assert ReviewsCountItem("45 reviews").measure(400, FixedMetrics()) == top + 20 + bottom
