# core/images_provider.py
from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future
from typing import Any, Callable, Optional
from urllib.parse import urlparse

import requests
from PySide6.QtGui import QImage

from core.errors import DecodeFailed, InvalidResponse, InvalidURL, TransportError

logger = logging.getLogger(__name__)

ImageDecoder = Callable[[bytes], Optional[Any]]


def decode_qimage(data: bytes):
    # QImage needs no QGuiApplication, so this is safe on worker threads
    image = QImage()
    if not data or not image.loadFromData(data):
        return None
    return image


def is_valid_url(url: str | None) -> bool:
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class ImageCache:
    """
    Thread-safe image store keyed by source URL.
    No eviction; the last writer for a key wins.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._images: dict[str, Any] = {}

    def get(self, url: str):
        with self._lock:
            return self._images.get(url)

    def set(self, url: str, image) -> None:
        with self._lock:
            self._images[url] = image

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return url in self._images

    def __len__(self) -> int:
        with self._lock:
            return len(self._images)


def _completed(result=None, error: BaseException | None = None) -> Future:
    f: Future = Future()
    if error is not None:
        f.set_exception(error)
    else:
        f.set_result(result)
    return f


class ImagesProvider:
    """
    Fetches images over HTTP and caches them by URL.

    Both fetch methods return a concurrent.futures.Future that settles exactly
    once, either with the image(s) or with an ImageError. Done-callbacks run on
    whatever thread settles the future; callers marshal them themselves.
    """

    def __init__(
        self,
        executor: Executor,
        cache: ImageCache | None = None,
        session: requests.Session | None = None,
        decoder: ImageDecoder = decode_qimage,
        timeout_s: float = 15.0,
        user_agent: str = "reviews-feed/0.1",
    ):
        self.executor = executor
        self.cache = cache if cache is not None else ImageCache()
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": user_agent})
        self.session = session
        self.decoder = decoder
        self.timeout_s = timeout_s

    def fetch_image(self, url: str | None) -> Future:
        if not is_valid_url(url):
            return _completed(error=InvalidURL(url))

        cached = self.cache.get(url)
        if cached is not None:
            return _completed(result=cached)

        return self.executor.submit(self._download, url)

    def fetch_images(self, urls: list[str]) -> Future:
        """
        All-or-nothing batch fetch. Resolves to images in input order, or to
        the first failure in input order. Images that did succeed stay cached.
        """
        urls = list(urls)
        if not urls:
            return _completed(result=[])

        aggregate: Future = Future()
        children = [self.fetch_image(u) for u in urls]
        lock = threading.Lock()
        pending = [len(children)]

        def on_child_done(_f: Future) -> None:
            with lock:
                pending[0] -= 1
                if pending[0]:
                    return
            for child in children:
                error = child.exception()
                if error is not None:
                    aggregate.set_exception(error)
                    return
            aggregate.set_result([child.result() for child in children])

        for child in children:
            child.add_done_callback(on_child_done)
        return aggregate

    def _download(self, url: str):
        logger.debug("Downloading image %s", url)
        try:
            r = self.session.get(url, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise TransportError(url, e) from e

        if r.status_code != 200:
            raise InvalidResponse(url, r.status_code)

        image = self.decoder(r.content)
        if image is None:
            raise DecodeFailed(url)

        self.cache.set(url, image)
        return image
