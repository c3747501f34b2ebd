from PySide6.QtCore import QObject, Signal
import time
import logging

log = logging.getLogger(__name__)


class FetchWorker(QObject):
    """Background worker fetching a fresh price snapshot.

    The worker never touches application state. It emits exactly one of
    ``finished`` or ``error``; the receiver applies the result on the GUI
    thread.
    """

    finished = Signal(dict)
    error = Signal(str)

    def __init__(self, fetcher, token: int):
        super().__init__()
        self.fetcher = fetcher
        self.token = token

    def run(self):
        start = time.perf_counter()
        try:
            snapshot, provenance = self.fetcher()
        except Exception as e:
            log.warning("FetchWorker failed: %s", e)
            self.error.emit(str(e))
            return
        elapsed = time.perf_counter() - start
        log.info("Price fetch completed: elapsed=%.2fs", elapsed)
        self.finished.emit({
            "token": self.token,
            "snapshot": snapshot,
            "provenance": provenance,
            "elapsed": elapsed,
        })
