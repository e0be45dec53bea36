from .engine import Phase, SessionState, StudySessionEngine
from .ticker import SessionTimer, Ticker

__all__ = ["Phase", "SessionState", "StudySessionEngine", "SessionTimer", "Ticker"]
