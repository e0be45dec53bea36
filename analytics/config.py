from __future__ import annotations

"""Analytics configuration (hyperparameters) using Pydantic."""

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Hyperparameters for history analytics.

    - smoothing_span: EWMA span in sessions (>1)
    - include_partial: count sessions stopped before the last item
    - min_answered: sessions with fewer judged items are dropped from accuracy
    """

    smoothing_span: int = Field(10, gt=1)
    include_partial: bool = True
    min_answered: int = Field(1, ge=0)
