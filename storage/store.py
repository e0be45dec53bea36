from __future__ import annotations

"""Append-only session history held in memory.

Rows are kept in insertion order with no de-duplication: appending the same
summary twice stores it twice. ``to_frame`` returns a typed DataFrame for
the analytics package.
"""

from typing import Iterable, List, Optional

import pandas as pd

from monkmode.models import SessionSummary, StudyMode

from .schema import DTYPES, SessionRecord


def _empty_df() -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in DTYPES.items()})


def record_from_summary(summary: SessionSummary) -> SessionRecord:
    return SessionRecord(
        session_id=summary.id,
        started_at=summary.started_at,
        mode=summary.mode.value,
        course=summary.course,
        chapter=summary.chapter,
        duration_s=summary.duration_s,
        score=summary.score,
        missed=summary.missed,
        total=summary.total,
        completed=summary.completed,
    )


def validate_records(records: list[SessionRecord]) -> pd.DataFrame:
    if not isinstance(records, list):
        raise TypeError("records must be a list[SessionRecord]")
    rows = [r if isinstance(r, SessionRecord) else SessionRecord.model_validate(r) for r in records]
    if not rows:
        return _empty_df()
    df = pd.DataFrame([r.model_dump() for r in rows])
    for col, dt in DTYPES.items():
        if col not in df.columns:
            df[col] = pd.NA
        df[col] = df[col].astype(dt)
    return df[list(DTYPES.keys())]


class SessionHistory:
    def __init__(self, records: Iterable[SessionRecord] = ()) -> None:
        self._records: List[SessionRecord] = list(records)

    def __len__(self) -> int:
        return len(self._records)

    def append(self, summary: SessionSummary) -> SessionRecord:
        rec = record_from_summary(summary)
        self._records.append(rec)
        return rec

    def records(self, mode: Optional[StudyMode] = None) -> List[SessionRecord]:
        if mode is None:
            return list(self._records)
        return [r for r in self._records if r.mode == StudyMode(mode).value]

    def summaries(self) -> List[SessionSummary]:
        return [
            SessionSummary(
                id=r.session_id,
                mode=StudyMode(r.mode),
                course=r.course,
                chapter=r.chapter,
                started_at=r.started_at,
                duration_s=r.duration_s,
                score=r.score,
                missed=r.missed,
                total=r.total,
                completed=r.completed,
            )
            for r in self._records
        ]

    def to_frame(self) -> pd.DataFrame:
        return validate_records(list(self._records))
