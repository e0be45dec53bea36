from __future__ import annotations

"""Turn a session history into an ordered, metric-enriched frame."""

import pandas as pd

from storage.store import SessionHistory

from .config import AnalyticsConfig
from .metrics import compute_metrics


def load_and_prepare(history: SessionHistory, cfg: AnalyticsConfig) -> pd.DataFrame:
    """Build the history frame and compute metrics with consistent dtypes.

    - Ensures 'mode' is categorical.
    - Sorts by (started_at, session_id).
    - Computes metrics and adds a stable session index 'session_idx'.
    """
    df = history.to_frame()
    df["mode"] = df["mode"].astype("category")
    df = df.sort_values(["started_at", "session_id"], kind="stable")
    df = compute_metrics(df, cfg)
    df["session_idx"] = pd.factorize(df["session_id"])[0]
    return df.reset_index(drop=True)
