from __future__ import annotations

"""Metric computations over session history rows."""

import numpy as np
import pandas as pd

from .config import AnalyticsConfig


def compute_metrics(df: pd.DataFrame, cfg: AnalyticsConfig | None = None) -> pd.DataFrame:
    """Compute answered counts, accuracy and minutes studied.

    Returns a filtered copy with added columns: answered, acc, minutes.
    Reading sessions have no judged items, so their acc is NaN.
    """
    cfg = cfg or AnalyticsConfig()
    out = df.copy()
    if not cfg.include_partial:
        out = out[out["completed"].fillna(True).astype(bool)]
    answered = out["score"].astype("float64") + out["missed"].astype("float64")
    out["answered"] = answered.astype("UInt32")
    denom = answered.where(answered >= max(1, cfg.min_answered), other=np.nan)
    out["acc"] = (out["score"].astype("float64") / denom).astype("float32")
    out["minutes"] = (out["duration_s"].astype("float64") / 60.0).astype("float32")
    return out


def mode_totals(df: pd.DataFrame) -> pd.DataFrame:
    """Aggregate sessions, items, score and time per study mode."""
    g = compute_metrics(df).groupby("mode", observed=True)
    out = pd.DataFrame(
        {
            "sessions": g["session_id"].count(),
            "score": g["score"].sum(),
            "missed": g["missed"].sum(),
            "minutes": g["minutes"].sum(),
        }
    )
    answered = (out["score"] + out["missed"]).astype("float64")
    out["acc"] = (out["score"].astype("float64") / answered.where(answered > 0)).astype("float32")
    return out.reset_index()
