import re

MAX_RATING = 5


def collapse(s: str) -> str:
    """
    Combines runs of whitespace into a single space and trims both ends.
    """
    return re.sub(r'\s+', ' ', s).strip()


def full_name(first_name: str, last_name: str) -> str:
    return collapse(f"{first_name} {last_name}")


class RatingRenderer:
    """
    Renders an integer rating as a row of stars, e.g. 4 -> "★★★★☆".
    Values outside 0..max_rating are clamped.
    """

    def __init__(self, max_rating: int = MAX_RATING, filled: str = "★", empty: str = "☆"):
        self.max_rating = max_rating
        self.filled = filled
        self.empty = empty
        self._cache: dict[int, str] = {}

    def rating_text(self, rating: int) -> str:
        rating = max(0, min(int(rating), self.max_rating))
        text = self._cache.get(rating)
        if text is None:
            text = self.filled * rating + self.empty * (self.max_rating - rating)
            self._cache[rating] = text
        return text


def reviews_count_text(count: int) -> str:
    return f"{count} review" if count == 1 else f"{count} reviews"
