# core/dispatch.py
from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, Signal, Slot


class MainThreadDispatcher(QObject):
    """
    Runs callables on the thread this object lives on (normally the GUI thread).
    Posting from a worker thread queues the call; posting from the owner thread
    runs it right away.
    """
    _posted = Signal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._posted.connect(self._run)

    def post(self, fn: Callable[[], None]) -> None:
        self._posted.emit(fn)

    @Slot(object)
    def _run(self, fn: Callable[[], None]) -> None:
        fn()
