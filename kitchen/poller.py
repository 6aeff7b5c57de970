"""
Fixed-interval refresh loop for the kitchen board.

The board has no push channel. A KitchenBoardPoller calls `fetch` every
`interval` seconds on a background thread and hands each result to
`on_update`. It can be paused, forced to refresh, and stopped at any time.
"""
import logging
import threading

from django.conf import settings
from django.db import connections

logger = logging.getLogger(__name__)


class KitchenBoardPoller:
    def __init__(self, fetch, on_update=None, interval=None):
        self.fetch = fetch
        self.on_update = on_update
        self.interval = interval if interval is not None else settings.KITCHEN_REFRESH_INTERVAL_SECONDS
        self.last_board = None
        self.last_error = None
        self._auto_refresh = True
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread = None

    @property
    def auto_refresh(self):
        return self._auto_refresh

    @property
    def is_running(self):
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name='kitchen-board-poller', daemon=True)
        self._thread.start()
        logger.info("Kitchen board poller started (every %ss)", self.interval)

    def stop(self, timeout=None):
        self._stop_event.set()
        self._wake_event.set()
        thread = self._thread
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Kitchen board poller did not stop within %ss", timeout)
                return
        self._thread = None
        logger.info("Kitchen board poller stopped")

    def set_auto_refresh(self, enabled):
        self._auto_refresh = bool(enabled)
        # Re-enabling refreshes right away instead of waiting a full interval
        self._wake_event.set()

    def refresh_now(self):
        """Fetch the board once on the calling thread. Returns None on failure."""
        try:
            board = self.fetch()
        except Exception as e:
            self.last_error = e
            logger.warning("Kitchen board refresh failed: %s", e)
            return None

        self.last_board = board
        self.last_error = None
        if self.on_update is not None:
            try:
                self.on_update(board)
            except Exception as e:
                logger.warning("Kitchen board update handler failed: %s", e)
        return board

    def _run(self):
        try:
            while not self._stop_event.is_set():
                if self._auto_refresh:
                    self.refresh_now()
                self._wake_event.wait(self.interval)
                self._wake_event.clear()
        finally:
            connections.close_all()
