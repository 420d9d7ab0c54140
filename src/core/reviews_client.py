# core/reviews_client.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

import requests

from core.errors import SchemaDecodeFailure, TransportFailure

logger = logging.getLogger(__name__)


class ReviewsProvider(Protocol):
    def get_reviews(self, offset: int, limit: int) -> bytes:
        """Returns the raw page payload or raises a PageLoadError."""
        ...


class ReviewsClient:
    def __init__(self, base_url: str, user_agent: str = "reviews-feed/0.1", timeout_s: float = 15.0):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

    def get_reviews(self, offset: int, limit: int) -> bytes:
        # GET /reviews?offset=&limit= -> {"items": [...], "count": N}
        params = {"offset": int(offset), "limit": int(limit)}
        try:
            r = self.session.get(f"{self.base_url}/reviews", params=params, timeout=self.timeout_s)
            r.raise_for_status()
        except requests.RequestException as e:
            raise TransportFailure(e) from e
        return r.content


class FileReviewsProvider:
    """
    Serves pages out of a single bundled response file holding every review.
    Useful for running the app without a backend.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._payload: dict | None = None

    def _load(self) -> dict:
        if self._payload is None:
            try:
                payload = json.loads(self.path.read_text(encoding="utf-8"))
            except OSError as e:
                raise TransportFailure(e) from e
            except ValueError as e:
                raise SchemaDecodeFailure(f"{self.path} is not valid JSON: {e}") from e
            if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
                raise SchemaDecodeFailure(f"{self.path} has no 'items' list")
            self._payload = payload
        return self._payload

    def get_reviews(self, offset: int, limit: int) -> bytes:
        payload = self._load()
        items = payload["items"]
        count = payload.get("count", len(items))
        page = items[offset:offset + limit]
        logger.debug("Serving %d reviews from %s at offset %d", len(page), self.path, offset)
        return json.dumps({"items": page, "count": count}).encode("utf-8")
