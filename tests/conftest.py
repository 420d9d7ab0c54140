"""Shared pytest fixtures for the reviews feed tests."""

import json
import os
import time
from concurrent.futures import Future
from dataclasses import dataclass, field
from typing import Any

# widgets are created in some tests; no display is needed
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from core.errors import TransportFailure
from core.images_provider import ImageCache, ImagesProvider
from core.reviews_view_model import ReviewsViewModel


@pytest.fixture(scope="session", autouse=True)
def qt_app():
    app = QApplication.instance() or QApplication([])
    yield app


def wait_until(predicate, timeout_s: float = 5.0) -> bool:
    """Pumps the Qt event loop until `predicate()` holds or the timeout expires."""
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        QCoreApplication.processEvents()
        if predicate():
            return True
        time.sleep(0.005)
    QCoreApplication.processEvents()
    return predicate()


class ManualExecutor:
    """Executor whose jobs only run when the test asks for it."""

    def __init__(self):
        self.jobs: list[tuple] = []

    def submit(self, fn, *args, **kwargs) -> Future:
        f: Future = Future()
        self.jobs.append((f, fn, args, kwargs))
        return f

    @property
    def pending(self) -> int:
        return len(self.jobs)

    def run(self, index: int = 0) -> None:
        f, fn, args, kwargs = self.jobs.pop(index)
        try:
            result = fn(*args, **kwargs)
        except BaseException as e:
            f.set_exception(e)
        else:
            f.set_result(result)

    def run_all(self) -> None:
        # jobs may schedule more jobs
        while self.jobs:
            self.run(0)


class ImmediateDispatcher:
    def __init__(self):
        self.posted = 0

    def post(self, fn) -> None:
        self.posted += 1
        fn()


@dataclass
class FakeResponse:
    status_code: int = 200
    content: bytes = b""


class FakeSession:
    """Stands in for requests.Session: maps URL -> FakeResponse or exception."""

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses = responses or {}
        self.headers: dict[str, str] = {}
        self.calls: list[str] = []

    def get(self, url, timeout=None, **kwargs):
        self.calls.append(url)
        r = self.responses.get(url, FakeResponse(status_code=404))
        if isinstance(r, BaseException):
            raise r
        return r


def decode_fake_image(data: bytes):
    """Payloads starting with b"IMG:" decode to their text; anything else fails."""
    if not data.startswith(b"IMG:"):
        return None
    return data[4:].decode()


def image_response(name: str) -> FakeResponse:
    return FakeResponse(200, b"IMG:" + name.encode())


def make_review(i: int, photo_urls: list[str] | None = None, avatar_url: str | None = None) -> dict:
    return {
        "avatar_url": avatar_url,
        "first_name": f"First{i}",
        "last_name": f"Last{i}",
        "rating": (i % 5) + 1,
        "text": f"Review text {i}",
        "created": "13 March",
        "photo_urls": photo_urls or [],
    }


@dataclass
class FakeReviewsProvider:
    """Serves `total` generated reviews; `fail_next` makes the next call raise."""
    total: int = 45
    fail_next: int = 0
    calls: list[tuple[int, int]] = field(default_factory=list)
    reviews: list[dict] | None = None

    def get_reviews(self, offset: int, limit: int) -> bytes:
        self.calls.append((offset, limit))
        if self.fail_next:
            self.fail_next -= 1
            raise TransportFailure(ConnectionError("offline"))
        reviews = self.reviews if self.reviews is not None else [make_review(i) for i in range(self.total)]
        return json.dumps({"items": reviews[offset:offset + limit], "count": self.total}).encode()


PLACEHOLDER = "avatar-placeholder"


@pytest.fixture
def executor():
    return ManualExecutor()


@pytest.fixture
def dispatcher():
    return ImmediateDispatcher()


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def images(executor, session):
    return ImagesProvider(executor, cache=ImageCache(), session=session, decoder=decode_fake_image)


@pytest.fixture
def provider():
    return FakeReviewsProvider()


@pytest.fixture
def view_model(provider, images, executor, dispatcher):
    vm = ReviewsViewModel(
        reviews_provider=provider,
        images_provider=images,
        executor=executor,
        dispatcher=dispatcher,
        avatar_placeholder=PLACEHOLDER,
        limit=20,
    )
    vm.snapshots = []
    vm.stateChanged.connect(vm.snapshots.append)
    return vm
