from __future__ import annotations

"""Session tracing (Explain Mode).

Off by default. ``--explain`` or ``ui.explain: true`` turns it on; each
milestone then prints one ``[EXPLAIN] event :: {json}`` line. Events in use:
session_started, phase_revealed, item_advanced, session_stopped,
session_ended, reading_started.
"""

import json
import sys
from typing import Any, Dict, Optional, TextIO

_ENABLED = False
_STREAM: Optional[TextIO] = None


def enable(flag: bool = True, stream: Optional[TextIO] = None) -> None:
    """Toggle tracing; ``stream`` defaults to whatever stdout is at trace time."""
    global _ENABLED, _STREAM
    _ENABLED = bool(flag)
    _STREAM = stream


def enabled() -> bool:
    return _ENABLED


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    out = _STREAM or sys.stdout
    try:
        line = json.dumps(payload or {}, separators=(",", ":"), default=str, ensure_ascii=False)
    except (TypeError, ValueError):
        print(f"[EXPLAIN] {event}", file=out)
        return
    print(f"[EXPLAIN] {event} :: {line}", file=out)
