# core/errors.py
from __future__ import annotations


class ImageError(Exception):
    """Base class for everything that can go wrong while fetching one image."""


class InvalidURL(ImageError):
    def __init__(self, url: str | None):
        super().__init__(f"Invalid image URL: {url!r}")
        self.url = url


class InvalidResponse(ImageError):
    def __init__(self, url: str, status_code: int):
        super().__init__(f"Unexpected status {status_code} for {url}")
        self.url = url
        self.status_code = status_code


class TransportError(ImageError):
    def __init__(self, url: str, cause: BaseException):
        super().__init__(f"Request for {url} failed: {cause}")
        self.url = url
        self.cause = cause


class DecodeFailed(ImageError):
    def __init__(self, url: str):
        super().__init__(f"Could not decode image data from {url}")
        self.url = url


class PageLoadError(Exception):
    """A page of reviews could not be loaded. Callers treat every subclass the same way."""


class TransportFailure(PageLoadError):
    def __init__(self, cause: BaseException):
        super().__init__(f"Reviews request failed: {cause}")
        self.cause = cause


class SchemaDecodeFailure(PageLoadError):
    pass
