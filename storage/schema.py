from __future__ import annotations

"""Schema constants and Pydantic model for session history rows."""

from datetime import datetime, timezone
from typing import Literal, Optional

import pandas as pd
from pandas.api.types import CategoricalDtype
from pydantic import BaseModel, Field, field_validator

# --- Constants ---

MODES = {"treadmill", "reading", "quiz", "free"}


def _cat_dtype(categories: set[str]) -> CategoricalDtype:
    return CategoricalDtype(categories=sorted(categories), ordered=False)


DTYPES = {
    "session_id": "string",
    # timezone-aware UTC timestamps
    "started_at": pd.DatetimeTZDtype(tz="UTC"),
    "mode": _cat_dtype(MODES),
    "course": "string",
    "chapter": "string",
    "duration_s": "float64",
    "score": "UInt32",
    "missed": "UInt32",
    "total": "UInt32",
    "completed": "boolean",
}


# --- Pydantic models ---

class SessionRecord(BaseModel):
    session_id: str
    started_at: datetime
    mode: Literal["treadmill", "reading", "quiz", "free"]
    course: Optional[str] = None
    chapter: Optional[str] = None
    duration_s: float = Field(ge=0)
    score: int = Field(ge=0)
    missed: int = Field(ge=0)
    total: int = Field(default=0, ge=0)
    completed: bool = True

    @field_validator("started_at")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
