# core/reviews_view_model.py
from __future__ import annotations

import logging
import uuid
from concurrent.futures import CancelledError, Executor, Future
from functools import partial
from typing import Any, Optional

from PySide6.QtCore import QObject, Signal

from core.errors import PageLoadError
from core.images_provider import ImagesProvider
from core.models import DisplayItem, Review, ReviewItem, ReviewsCountItem, ReviewsPage, EXPANDED_MAX_LINES
from core.reviews_client import ReviewsProvider
from core.state import DEFAULT_PAGE_LIMIT, ListState, ReviewsState
from core.utils import RatingRenderer, full_name, reviews_count_text

logger = logging.getLogger(__name__)

DEFAULT_PREFETCH_SCREENS = 2.5


def should_load_next_page(
    viewport_height: float,
    content_height: float,
    target_offset: float,
    screens_to_load_next_page: float = DEFAULT_PREFETCH_SCREENS,
) -> bool:
    """True when less than `screens_to_load_next_page` viewports of content remain below the target offset."""
    trigger_distance = viewport_height * screens_to_load_next_page
    remaining_distance = content_height - viewport_height - target_offset
    return remaining_distance <= trigger_distance


class ReviewsViewModel(QObject):
    """
    Owns the reviews list state. Every mutation happens on the dispatcher's
    thread and is followed by a `stateChanged` emission carrying a snapshot.

    Network work goes through `executor`; completions come back through
    `dispatcher.post(...)` before they touch the state.
    """
    stateChanged = Signal(object)   # ReviewsState

    def __init__(
        self,
        reviews_provider: ReviewsProvider,
        images_provider: ImagesProvider,
        executor: Executor,
        dispatcher,
        avatar_placeholder: Any = None,
        rating_renderer: RatingRenderer | None = None,
        limit: int = DEFAULT_PAGE_LIMIT,
        prefetch_screens: float = DEFAULT_PREFETCH_SCREENS,
        parent=None,
    ):
        super().__init__(parent)
        self.reviews_provider = reviews_provider
        self.images_provider = images_provider
        self.executor = executor
        self.dispatcher = dispatcher
        self.avatar_placeholder = avatar_placeholder
        self.rating_renderer = rating_renderer or RatingRenderer()
        self.prefetch_screens = prefetch_screens

        self._state = ListState(limit)
        self._snapshot = self._state.snapshot()
        # bumped on every refresh; page responses from an older generation are stale
        self._generation = 0

    # ----------------------------
    # Presentation queries
    # ----------------------------

    @property
    def state(self) -> ReviewsState:
        return self._snapshot

    def row_count(self) -> int:
        return len(self._snapshot.items)

    def item_at(self, index: int) -> Optional[DisplayItem]:
        if index < 0 or index >= len(self._snapshot.items):
            return None
        return self._snapshot.items[index]

    # ----------------------------
    # Pagination
    # ----------------------------

    def get_reviews(self) -> None:
        """Requests the next page. No-op while a page is in flight or after the last page."""
        if not self._state.should_load:
            return
        self._state.should_load = False

        offset, limit, generation = self._state.offset, self._state.limit, self._generation
        logger.debug("Loading reviews offset=%d limit=%d", offset, limit)

        future = self.executor.submit(self._fetch_page, offset, limit)
        future.add_done_callback(
            lambda f: self.dispatcher.post(partial(self._got_reviews, generation, f))
        )

    def request_next_page_if_near_end(
        self,
        viewport_height: float,
        content_height: float,
        target_offset: float,
        screens_to_load_next_page: float | None = None,
    ) -> bool:
        screens = self.prefetch_screens if screens_to_load_next_page is None else screens_to_load_next_page
        near_end = should_load_next_page(viewport_height, content_height, target_offset, screens)
        if near_end:
            self.get_reviews()
        return near_end

    def begin_refresh(self) -> None:
        self._generation += 1
        self._state.reset(refreshing=True)
        self._emit()
        self.get_reviews()

    def end_refresh(self) -> None:
        self._state.is_refreshing = False
        self._emit()

    def _fetch_page(self, offset: int, limit: int) -> ReviewsPage:
        # runs on the executor
        return ReviewsPage.from_json(self.reviews_provider.get_reviews(offset, limit))

    def _got_reviews(self, generation: int, future: Future) -> None:
        if generation != self._generation:
            logger.debug("Dropping reviews page requested before a refresh")
            return

        added: list[tuple[ReviewItem, Review]] = []
        try:
            page: ReviewsPage = future.result()
        except (PageLoadError, CancelledError) as e:
            logger.warning("Failed to load reviews at offset %d: %s", self._state.offset, e)
            self._state.should_load = True
        except Exception:
            logger.exception("Unexpected error while loading reviews at offset %d", self._state.offset)
            self._state.should_load = True
        else:
            added = [(self._make_review_item(review), review) for review in page.items]
            self._state.append_rows([item for item, _ in added])
            self._state.should_load = self._state.review_count < page.count
            if self._state.should_load:
                self._state.offset += self._state.limit
            elif not self._state.has_footer:
                self._state.append_footer(self._make_reviews_count_item(page.count))

        self._emit()

        if self._state.is_refreshing:
            self.end_refresh()

        for item, review in added:
            self._load_avatar(item.id, review)

    # ----------------------------
    # Enrichment
    # ----------------------------

    def _load_avatar(self, review_id: uuid.UUID, review: Review) -> None:
        future = self.images_provider.fetch_image(review.avatar_url)
        future.add_done_callback(
            lambda f: self.dispatcher.post(partial(self._avatar_loaded, review_id, review.photo_urls, f))
        )

    def _avatar_loaded(self, review_id: uuid.UUID, photo_urls: tuple[str, ...], future: Future) -> None:
        # photos start only after the avatar has been applied to a row that still exists
        if self.resolve_avatar(review_id, future):
            self._load_photos(review_id, photo_urls)

    def _load_photos(self, review_id: uuid.UUID, photo_urls: tuple[str, ...]) -> None:
        future = self.images_provider.fetch_images(list(photo_urls))
        future.add_done_callback(
            lambda f: self.dispatcher.post(partial(self.resolve_photos, review_id, f))
        )

    def resolve_avatar(self, review_id: uuid.UUID, result: Future) -> bool:
        """Applies a settled avatar fetch. Returns False when the row is gone."""
        error = result.exception()
        if error is not None:
            logger.debug("Avatar for review %s unavailable: %s", review_id, error)
            avatar = self.avatar_placeholder
        else:
            avatar = result.result()

        if self._state.update(review_id, avatar=avatar) is None:
            logger.debug("Review %s no longer listed; dropping avatar", review_id)
            return False
        self._emit()
        return True

    def resolve_photos(self, review_id: uuid.UUID, result: Future) -> bool:
        error = result.exception()
        if error is not None:
            logger.debug("Photos for review %s unavailable: %s", review_id, error)
            photos: tuple = ()
        else:
            photos = tuple(result.result())

        if self._state.update(review_id, photos=photos) is None:
            logger.debug("Review %s no longer listed; dropping photos", review_id)
            return False
        self._emit()
        return True

    # ----------------------------
    # User actions
    # ----------------------------

    def show_more_review(self, review_id: uuid.UUID) -> None:
        """Removes the line limit of the review text. Unknown ids are ignored."""
        if self._state.update(review_id, max_lines=EXPANDED_MAX_LINES) is None:
            return
        self._emit()

    # ----------------------------
    # Items
    # ----------------------------

    def _make_review_item(self, review: Review) -> ReviewItem:
        return ReviewItem(
            username=full_name(review.first_name, review.last_name),
            rating_text=self.rating_renderer.rating_text(review.rating),
            avatar=self.avatar_placeholder,
            review_text=review.text,
            created=review.created,
            on_tap_show_more=self.show_more_review,
        )

    def _make_reviews_count_item(self, count: int) -> ReviewsCountItem:
        return ReviewsCountItem(reviews_count_text=reviews_count_text(count))

    def _emit(self) -> None:
        self._snapshot = self._state.snapshot()
        self.stateChanged.emit(self._snapshot)
