from __future__ import annotations

"""Session Manager: owns the running engine, its ticker and summary hand-off.

Every engine operation goes through one lock, so the ticker thread and the
caller's thread never mutate the engine at the same time.
"""

import threading
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, Optional, Sequence

from storage.store import SessionHistory

from ..config.config import session_config_from
from ..models import SessionSummary, StudyItem, StudyMode
from ..session.engine import Phase, StudySessionEngine
from ..session.ticker import Ticker
from ..util.randomness import make_rng
from .events import EventBus
from .explain import trace as xtrace

SESSION_ENDED = "session_ended"
TICKED = "ticked"


@dataclass(frozen=True)
class Snapshot:
    """Consistent view of the engine for a presentation layer."""

    item: Optional[StudyItem]
    phase: Phase
    remaining: int
    position: int
    total: int
    score: int
    missed: int
    finished: bool
    stopped: bool


class SessionManager:
    def __init__(
        self,
        cfg: Dict[str, Any],
        *,
        history: Optional[SessionHistory] = None,
        bus: Optional[EventBus] = None,
        tick_interval_s: float = 1.0,
    ) -> None:
        self.cfg = cfg
        self.history = history if history is not None else SessionHistory()
        self.bus = bus or EventBus()
        self.tick_interval_s = tick_interval_s
        self.engine: Optional[StudySessionEngine] = None
        self._ticker: Optional[Ticker] = None
        self._ticker_gen = 0
        self._lock = threading.RLock()
        self.bus.subscribe(SESSION_ENDED, self.history.append)

    def start_session(
        self,
        items: Sequence[StudyItem],
        *,
        mode: StudyMode | str | None = None,
        course: Optional[str] = None,
        chapter: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        seed: Optional[int] = None,
    ) -> StudySessionEngine:
        # Resolve params: config session section, then caller overrides
        with self._lock:
            self._cancel_ticker()
            if self.engine is not None and self.engine.active:
                self.stop()
            config = session_config_from(self.cfg, overrides)
            mode = StudyMode(mode or self.cfg.get("session", {}).get("mode", "treadmill"))
            self.engine = StudySessionEngine(
                items,
                config,
                mode=mode,
                course=course,
                chapter=chapter,
                rng=make_rng(seed),
                on_summary=self._publish,
            )
            xtrace(
                "session_started",
                {"mode": mode.value, "course": course, "chapter": chapter, "items": len(items)},
            )
            return self.engine

    def run_ticker(self) -> None:
        """Start the once-per-interval tick source for the current session."""
        with self._lock:
            if self.engine is None or not self.engine.active:
                return
            self._cancel_ticker()
            self._ticker = Ticker(partial(self._tick, self._ticker_gen), self.tick_interval_s)
            self._ticker.start()

    def tick(self) -> Optional[SessionSummary]:
        return self._tick(None)

    def _tick(self, gen: Optional[int]) -> Optional[SessionSummary]:
        with self._lock:
            if self.engine is None:
                return None
            # a cancelled ticker may already be waiting on the lock
            if gen is not None and gen != self._ticker_gen:
                return None
            summary = self.engine.tick()
            if not self.engine.active:
                self._cancel_ticker()
        self.bus.emit(TICKED, self.snapshot())
        return summary

    def reveal(self) -> bool:
        with self._lock:
            return self.engine.reveal() if self.engine is not None else False

    def mark_correct(self) -> Optional[SessionSummary]:
        with self._lock:
            if self.engine is None:
                return None
            summary = self.engine.mark_correct()
            if not self.engine.active:
                self._cancel_ticker()
            return summary

    def mark_incorrect(self) -> Optional[SessionSummary]:
        with self._lock:
            if self.engine is None:
                return None
            summary = self.engine.mark_incorrect()
            if not self.engine.active:
                self._cancel_ticker()
            return summary

    def stop(self) -> Optional[SessionSummary]:
        """Halt the ticker and stop the engine. Safe to call repeatedly."""
        with self._lock:
            self._cancel_ticker()
            if self.engine is None:
                return None
            return self.engine.stop()

    def snapshot(self) -> Optional[Snapshot]:
        with self._lock:
            e = self.engine
            if e is None:
                return None
            position, total = e.progress()
            return Snapshot(
                item=e.current_item,
                phase=e.phase,
                remaining=e.remaining,
                position=position,
                total=total,
                score=e.score,
                missed=len(e.missed),
                finished=e.finished,
                stopped=e.stopped,
            )

    def _cancel_ticker(self) -> None:
        self._ticker_gen += 1
        if self._ticker is not None:
            # may be called from the ticker thread itself; never join there
            self._ticker.cancel(join_timeout=0)
            self._ticker = None

    def _publish(self, summary: SessionSummary) -> None:
        self.bus.emit(SESSION_ENDED, summary)
