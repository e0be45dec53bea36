from __future__ import annotations

"""Sentence-by-sentence reading: splitting, pause pacing and queue position.

The queue does not speak; a text-to-speech front-end asks it which sentence
to say next and reports back when each sentence is done.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..app.explain import trace as xtrace
from ..models import SessionSummary, StudyMode

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]*")


@dataclass(frozen=True)
class Pacing:
    base: float = 1.0
    per_word: float = 0.06
    min: float = 1.0
    max: float = 4.5

    @classmethod
    def from_config(cls, reader_cfg: dict) -> "Pacing":
        return cls(
            base=float(reader_cfg.get("pause_base", 1.0)),
            per_word=float(reader_cfg.get("pause_per_word", 0.06)),
            min=float(reader_cfg.get("pause_min", 1.0)),
            max=float(reader_cfg.get("pause_max", 4.5)),
        )


def split_sentences(text: str) -> List[str]:
    """Split at ., ! and ?, keeping the terminator and dropping blanks."""
    text = (text or "").strip()
    out: List[str] = []
    for m in _SENTENCE_RE.finditer(text):
        s = m.group(0).strip()
        if s and any(ch.isalnum() for ch in s):
            out.append(s)
    return out


def pause_after(sentence: str, pacing: Pacing = Pacing()) -> float:
    """Post-sentence delay in seconds; longer sentences get longer pauses."""
    words = max(1, len(sentence.split()))
    raw = pacing.base + pacing.per_word * words
    return min(pacing.max, max(pacing.min, raw))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReadingQueue:
    """Tracks which sentence is being read and logs one reading session."""

    def __init__(self, pacing: Pacing = Pacing(), clock: Callable[[], datetime] = _utcnow) -> None:
        self.pacing = pacing
        self._clock = clock
        self.sentences: List[str] = []
        self.current_index: Optional[int] = None
        self.last_highlighted: Optional[int] = None
        self.is_speaking = False
        self._pending: List[int] = []
        self._reached_end = False
        # session tracking
        self.course: Optional[str] = None
        self.chapter: Optional[str] = None
        self.session_started: Optional[datetime] = None
        self._logged = False

    def load(self, text: str) -> None:
        self.stop()
        self.sentences = split_sentences(text)
        self._reached_end = False

    def start_session(self, course: Optional[str] = None, chapter: Optional[str] = None) -> None:
        self.session_started = self._clock()
        self.course = course
        self.chapter = chapter
        self._logged = False
        self._reached_end = False
        xtrace("reading_started", {"course": course, "chapter": chapter, "sentences": len(self.sentences)})

    def start(self, from_index: Optional[int] = None) -> Optional[int]:
        """Queue sentences from ``from_index`` (or the current one) to the end.

        Returns the index to speak first, or None if nothing is left.
        """
        self._reached_end = False
        start = from_index if from_index is not None else (self.current_index or 0)
        if not (0 <= start < len(self.sentences)):
            return None
        self._pending = list(range(start, len(self.sentences)))
        return self._speak_next()

    def sentence_finished(self) -> Optional[int]:
        """The current sentence was spoken; returns the next index or None."""
        if not self.is_speaking:
            return None
        return self._speak_next()

    def pause(self) -> None:
        self.is_speaking = False

    def resume(self) -> Optional[int]:
        if self.current_index is None:
            return self.start()
        self.is_speaking = True
        return self.current_index

    def stop(self) -> None:
        self.is_speaking = False
        self.current_index = None
        self._pending = []

    def restart_at_current(self) -> Optional[int]:
        """Restart from the sentence being read (e.g. after a voice change)."""
        resume_at = self.current_index if self.current_index is not None else (self.last_highlighted or 0)
        self.is_speaking = False
        return self.start(resume_at)

    def current_pause(self) -> float:
        if self.current_index is None:
            return 0.0
        return pause_after(self.sentences[self.current_index], self.pacing)

    def finish_session(self) -> Optional[SessionSummary]:
        """Build the reading summary once per started session."""
        if self.session_started is None or self._logged:
            return None
        self._logged = True
        duration = max(0.0, (self._clock() - self.session_started).total_seconds())
        return SessionSummary(
            mode=StudyMode.READING,
            course=self.course,
            chapter=self.chapter,
            started_at=self.session_started,
            duration_s=duration,
            score=0,
            missed=0,
            total=len(self.sentences),
            completed=self._reached_end,
        )

    def _speak_next(self) -> Optional[int]:
        if not self._pending:
            self.is_speaking = False
            self.current_index = None
            self._reached_end = True
            return None
        idx = self._pending.pop(0)
        self.current_index = idx
        self.last_highlighted = idx
        self.is_speaking = True
        return idx
