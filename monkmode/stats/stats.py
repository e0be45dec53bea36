from __future__ import annotations

"""Human-readable session summaries."""

from ..models import SessionSummary


def format_duration(seconds: float) -> str:
    total = int(round(seconds))
    minutes, secs = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    return f"{minutes}m {secs:02d}s"


def format_summary(summary: SessionSummary) -> str:
    """Return a human-readable summary of one session."""
    where = " / ".join(x for x in (summary.course, summary.chapter) if x)
    lines = [f"Mode: {summary.mode.value}" + (f" ({where})" if where else "")]
    lines.append(f"Duration: {format_duration(summary.duration_s)}")
    if summary.mode.value != "reading":
        lines.append(f"Score: {summary.score}/{summary.total} correct, {summary.missed} missed")
        if not summary.completed:
            lines.append(f"Stopped early after {summary.answered} of {summary.total} items")
    return "\n".join(lines)
