import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from PySide6.QtGui import QColor, QImage
from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.config import ReviewsConfig
from core.dispatch import MainThreadDispatcher
from core.images_provider import ImagesProvider
from core.models import AVATAR_SIZE
from core.reviews_client import FileReviewsProvider, ReviewsClient
from core.reviews_view_model import ReviewsViewModel
from core.state import AppState
from ui.main_window import MainWindow


def make_avatar_placeholder() -> QImage:
    image = QImage(AVATAR_SIZE, AVATAR_SIZE, QImage.Format.Format_ARGB32)
    image.fill(QColor("#d9d9d9"))
    return image


def init_app_state(config: ReviewsConfig) -> AppState:
    app_state = AppState()
    app_state.config = config
    app_state.executor = ThreadPoolExecutor(max_workers=config.max_workers, thread_name_prefix="reviews-net")

    if config.reviews_file:
        provider = FileReviewsProvider(config.reviews_file)
    else:
        provider = ReviewsClient(config.base_url, user_agent=config.user_agent, timeout_s=config.request_timeout_s)

    images = ImagesProvider(
        app_state.executor,
        timeout_s=config.request_timeout_s,
        user_agent=config.user_agent,
    )

    app_state.view_model = ReviewsViewModel(
        reviews_provider=provider,
        images_provider=images,
        executor=app_state.executor,
        dispatcher=MainThreadDispatcher(),
        avatar_placeholder=make_avatar_placeholder(),
        limit=config.page_limit,
        prefetch_screens=config.prefetch_screens,
    )
    return app_state


def main() -> int:
    config = ReviewsConfig.from_env()
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    qt_app = QApplication(sys.argv)

    app_state = init_app_state(config)
    main_window = MainWindow(app_state)
    main_window.show()

    try:
        return qt_app.exec()
    finally:
        app_state.executor.shutdown(wait=False, cancel_futures=True)


if __name__ == "__main__":
    raise SystemExit(main())
