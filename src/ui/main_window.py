from PySide6.QtWidgets import QMainWindow

from ui.widgets.reviews_widget import ReviewsWidget


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("Reviews")
        self.resize(420, 760)
        self.app_state = app_state

        self.reviews = ReviewsWidget(app_state.view_model)
        self.setCentralWidget(self.reviews)

        # first page as soon as the screen exists
        app_state.view_model.get_reviews()
