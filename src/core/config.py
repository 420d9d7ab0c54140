# core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ReviewsConfig:
    base_url: str = "http://localhost:8000"
    reviews_file: str | None = None     # serve pages from a local JSON response instead of HTTP
    page_limit: int = 20
    prefetch_screens: float = 2.5
    request_timeout_s: float = 15.0
    max_workers: int = 8
    user_agent: str = "reviews-feed/0.1"
    debug: bool = False

    @staticmethod
    def from_env() -> "ReviewsConfig":
        defaults = ReviewsConfig()
        return ReviewsConfig(
            base_url=os.getenv("REVIEWS_BASE_URL", defaults.base_url),
            reviews_file=os.getenv("REVIEWS_FILE") or None,
            page_limit=int(os.getenv("REVIEWS_PAGE_LIMIT", defaults.page_limit)),
            prefetch_screens=float(os.getenv("REVIEWS_PREFETCH_SCREENS", defaults.prefetch_screens)),
            request_timeout_s=float(os.getenv("REVIEWS_TIMEOUT", defaults.request_timeout_s)),
            max_workers=int(os.getenv("REVIEWS_MAX_WORKERS", defaults.max_workers)),
            user_agent=defaults.user_agent,
            debug=os.getenv("REVIEWS_DEBUG") == "1",
        )
