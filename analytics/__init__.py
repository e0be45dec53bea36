from .config import AnalyticsConfig
from .metrics import compute_metrics, mode_totals
from .prepare import load_and_prepare
from .smoothing import ewma_by_session

__all__ = [
    "AnalyticsConfig",
    "compute_metrics",
    "mode_totals",
    "load_and_prepare",
    "ewma_by_session",
]
