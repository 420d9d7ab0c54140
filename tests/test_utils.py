"""Tests for text helpers."""

import pytest

from core.utils import RatingRenderer, collapse, full_name, reviews_count_text


class TestRatingRenderer:
    @pytest.mark.parametrize("rating,expected", [
        (0, "☆☆☆☆☆"),
        (3, "★★★☆☆"),
        (5, "★★★★★"),
        (9, "★★★★★"),
        (-2, "☆☆☆☆☆"),
    ])
    def test_rating_text(self, rating, expected):
        assert RatingRenderer().rating_text(rating) == expected


def test_full_name():
    assert full_name(" Ann ", "Lee") == "Ann Lee"
    assert collapse("a \n\t b") == "a b"


def test_reviews_count_text():
    assert reviews_count_text(1) == "1 review"
    assert reviews_count_text(0) == "0 reviews"
    assert reviews_count_text(45) == "45 reviews"
