from .schema import DTYPES, MODES, SessionRecord
from .store import SessionHistory, record_from_summary, validate_records

__all__ = [
    "DTYPES",
    "MODES",
    "SessionRecord",
    "SessionHistory",
    "record_from_summary",
    "validate_records",
]
