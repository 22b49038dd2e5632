"""
Debounced auto-save.

Admin edits arrive in bursts (one request per keystroke pause). Each call to
`Debouncer.schedule` replaces the pending save for the same key, so only the
last edit of a burst reaches the database, `delay` seconds after it arrived.
"""
import logging
import threading
from typing import Callable, Dict

logger = logging.getLogger(__name__)


class Debouncer:
    def __init__(self, delay: float = 1.0):
        self.delay = delay
        self._lock = threading.Lock()
        self._timers: Dict[str, threading.Timer] = {}
        self._calls: Dict[str, Callable[[], object]] = {}

    def schedule(self, key: str, fn: Callable[[], object]) -> None:
        with self._lock:
            timer = self._timers.pop(key, None)
            if timer is not None:
                timer.cancel()
            self._calls[key] = fn
            timer = threading.Timer(self.delay, self._fire, args=(key, fn))
            timer.daemon = True
            self._timers[key] = timer
            timer.start()

    def _fire(self, key: str, fn: Callable[[], object]) -> None:
        with self._lock:
            # superseded by a newer schedule() or already flushed
            if self._calls.get(key) is not fn:
                return
            self._calls.pop(key, None)
            self._timers.pop(key, None)
        self._run(key, fn)

    def _run(self, key: str, fn: Callable[[], object]) -> None:
        try:
            fn()
        except Exception:
            logger.exception("autosave for %s failed", key)

    def flush(self, key: str) -> bool:
        with self._lock:
            timer = self._timers.pop(key, None)
            fn = self._calls.pop(key, None)
        if timer is not None:
            timer.cancel()
        if fn is None:
            return False
        self._run(key, fn)
        return True

    def cancel(self, key: str) -> None:
        with self._lock:
            timer = self._timers.pop(key, None)
            self._calls.pop(key, None)
        if timer is not None:
            timer.cancel()

    def pending(self, key: str = None) -> bool:
        with self._lock:
            if key is None:
                return bool(self._calls)
            return key in self._calls

    def shutdown(self) -> None:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
            self._calls.clear()
        for timer in timers:
            timer.cancel()
