from __future__ import annotations

"""Study session engine: ordered items, per-item phase countdown and scoring.

The engine is driven by a host-owned tick source calling ``tick()`` roughly
once per second. It never touches files, audio or the network; the summary
it emits at the end of a session is handed to ``on_summary`` by value.

Per item the engine cycles through two phases::

    AWAITING_REVEAL --(question_duration ticks)--> REVEALED
    REVEALED --(mark_correct | mark_incorrect | answer_duration ticks)--> next item

Advancing past the last item finishes the session and emits the summary.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from ..app.explain import trace as xtrace
from ..models import SessionConfig, SessionSummary, StudyItem, StudyMode, TimeoutPolicy


class Phase(str, Enum):
    AWAITING_REVEAL = "awaiting_reveal"
    REVEALED = "revealed_awaiting_judgement"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SessionState:
    current_index: int = 0
    phase: Phase = Phase.AWAITING_REVEAL
    remaining: int = 0
    score: int = 0
    missed: List[StudyItem] = field(default_factory=list)
    stopped: bool = False


class StudySessionEngine:
    def __init__(
        self,
        items: Sequence[StudyItem],
        config: SessionConfig,
        *,
        mode: StudyMode = StudyMode.TREADMILL,
        course: Optional[str] = None,
        chapter: Optional[str] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = _utcnow,
        on_summary: Optional[Callable[[SessionSummary], None]] = None,
    ) -> None:
        if items is None:
            raise TypeError("items must be a sequence of StudyItem")
        self.config = config
        self.mode = StudyMode(mode)
        self.course = course
        self.chapter = chapter
        self._clock = clock
        self._on_summary = on_summary
        self._items: List[StudyItem] = list(items)
        if config.shuffle and len(self._items) > 1:
            (rng or random.Random()).shuffle(self._items)
        self.started_at = clock()
        self.state = SessionState(remaining=config.question_duration if self._items else 0)
        self._summary_emitted = False

    # --- read-only views -------------------------------------------------

    @property
    def items(self) -> Tuple[StudyItem, ...]:
        return tuple(self._items)

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def has_items(self) -> bool:
        return bool(self._items)

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def remaining(self) -> int:
        return self.state.remaining

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def missed(self) -> Tuple[StudyItem, ...]:
        return tuple(self.state.missed)

    @property
    def finished(self) -> bool:
        return self.state.current_index >= len(self._items)

    @property
    def stopped(self) -> bool:
        return self.state.stopped

    @property
    def active(self) -> bool:
        return not (self.finished or self.state.stopped)

    @property
    def current_item(self) -> Optional[StudyItem]:
        idx = self.state.current_index
        if 0 <= idx < len(self._items):
            return self._items[idx]
        return None

    @property
    def revealed(self) -> bool:
        return self.active and self.state.phase == Phase.REVEALED

    def progress(self) -> Tuple[int, int]:
        """Position shown to the user, 1-based and clamped to the item count."""
        total = len(self._items)
        return min(self.state.current_index + 1, total), total

    # --- operations ------------------------------------------------------

    def tick(self) -> Optional[SessionSummary]:
        """Advance the countdown by one second.

        Returns the summary if this tick finished the session.
        """
        if not self.active:
            return None
        st = self.state
        if st.remaining > 0:
            st.remaining -= 1
        if st.remaining > 0:
            return None
        if st.phase == Phase.AWAITING_REVEAL:
            self._reveal()
            return None
        # answer phase ran out without a judgement
        item = self.current_item
        if self.config.unjudged_timeout == TimeoutPolicy.MISS and item is not None:
            st.missed.append(item)
        return self._advance("timeout")

    def reveal(self) -> bool:
        """Show the answer before the question countdown runs out."""
        if not self.active or self.state.phase != Phase.AWAITING_REVEAL:
            return False
        self._reveal()
        return True

    def mark_correct(self) -> Optional[SessionSummary]:
        if not self.active:
            return None
        self.state.score += 1
        return self._advance("correct")

    def mark_incorrect(self) -> Optional[SessionSummary]:
        if not self.active:
            return None
        item = self.current_item
        if item is not None:
            self.state.missed.append(item)
        return self._advance("incorrect")

    def stop(self) -> Optional[SessionSummary]:
        """Stop early. Emits a partial summary the first time it is called."""
        if self.state.stopped:
            return None
        self.state.stopped = True
        if self._summary_emitted or not self._items:
            return None
        xtrace("session_stopped", {"index": self.state.current_index, "total": len(self._items)})
        return self._emit_summary(completed=False)

    # --- internals -------------------------------------------------------

    def _reveal(self) -> None:
        self.state.phase = Phase.REVEALED
        self.state.remaining = self.config.answer_duration
        xtrace("phase_revealed", {"index": self.state.current_index})

    def _advance(self, reason: str) -> Optional[SessionSummary]:
        st = self.state
        st.current_index += 1
        xtrace("item_advanced", {"index": st.current_index, "reason": reason, "score": st.score})
        if self.finished:
            st.remaining = 0
            st.phase = Phase.AWAITING_REVEAL
            return self._emit_summary(completed=True)
        st.phase = Phase.AWAITING_REVEAL
        st.remaining = self.config.question_duration
        return None

    def _emit_summary(self, *, completed: bool) -> Optional[SessionSummary]:
        if self._summary_emitted:
            return None
        self._summary_emitted = True
        elapsed = max(0.0, (self._clock() - self.started_at).total_seconds())
        summary = SessionSummary(
            mode=self.mode,
            course=self.course,
            chapter=self.chapter,
            started_at=self.started_at,
            duration_s=elapsed,
            score=self.state.score,
            missed=len(self.state.missed),
            total=len(self._items),
            completed=completed,
        )
        xtrace("session_ended", summary.to_json())
        if self._on_summary is not None:
            self._on_summary(summary)
        return summary
