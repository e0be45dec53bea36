from __future__ import annotations

"""Host-side timing: a recurring tick source and an elapsed-time stopwatch."""

import threading
import time
from typing import Callable, Optional


class Ticker:
    """Calls ``callback`` once per ``interval_s`` on a daemon thread.

    Calls are strictly sequential: the next wait starts only after the
    previous callback returned. ``cancel`` is safe to call from any thread,
    including from inside the callback, and more than once.
    """

    def __init__(self, callback: Callable[[], object], interval_s: float = 1.0) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self.callback = callback
        self.interval_s = float(interval_s)
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        t = self._thread
        return t is not None and t.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            self._thread = threading.Thread(target=self._run, name="monkmode-ticker", daemon=True)
            self._thread.start()

    def cancel(self, join_timeout: float | None = 1.0) -> None:
        self._stop.set()
        t = self._thread
        if t is not None and t is not threading.current_thread():
            t.join(join_timeout)

    def _run(self) -> None:
        while not self._stop.wait(self.interval_s):
            try:
                self.callback()
            except Exception as exc:
                print(f"WARNING: tick callback failed, stopping ticker: {exc!r}")
                self._stop.set()
                raise


class SessionTimer:
    """Stopwatch for total time spent in a session view."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._started: Optional[float] = None
        self._accumulated = 0.0

    @property
    def is_running(self) -> bool:
        return self._started is not None

    @property
    def elapsed(self) -> float:
        if self._started is None:
            return self._accumulated
        return self._accumulated + (self._clock() - self._started)

    def start(self) -> None:
        if self._started is not None:
            return
        self._started = self._clock()

    def pause(self) -> None:
        if self._started is None:
            return
        self._accumulated += self._clock() - self._started
        self._started = None

    def reset(self) -> None:
        self._started = None
        self._accumulated = 0.0
