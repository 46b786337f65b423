import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Calls a function every ``interval`` seconds on a daemon thread.

    ``start`` and ``stop`` are idempotent. A timer can be restarted after it
    was stopped.
    """

    def __init__(self, interval: float, callback: Callable[[], object], name: str | None = None):
        self._interval = interval
        self._callback = callback
        self._name = name
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread is not None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name=self._name,
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=self._interval * 2)
        self._thread = None

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval):
            try:
                self._callback()
            except Exception:
                logger.exception("Error in %s timer callback", self._name or "repeating")
