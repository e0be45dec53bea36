"""MonkMode study core.

Timed study sessions over flashcard decks: the session engine, content
import, the reading queue and the terminal front-end.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .models import (
    FlowMeta,
    FlowRole,
    ReaderChapter,
    SessionConfig,
    SessionSummary,
    StudyItem,
    StudyMode,
    TimeoutPolicy,
    VariantExtension,
    VariantKind,
)
from .session.engine import Phase, StudySessionEngine

__all__ = [
    "__version__",
    "FlowMeta",
    "FlowRole",
    "Phase",
    "ReaderChapter",
    "SessionConfig",
    "SessionSummary",
    "StudyItem",
    "StudyMode",
    "StudySessionEngine",
    "TimeoutPolicy",
    "VariantExtension",
    "VariantKind",
]
