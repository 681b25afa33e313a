"""
LottoLens - Recency Weighter
============================

Linear recency decay relative to the latest draw date.

Formula: weight(d) = clamp(1 - days_back(d) / window_days, MIN_WEIGHT, 1)

The floor keeps every occurrence contributing some signal regardless of age.
"""

from datetime import date
from typing import Dict, Iterable, Mapping, Optional

import numpy as np
from loguru import logger

from .record_store import DrawRecord

MIN_WEIGHT = 0.05
DEFAULT_WINDOW_DAYS = 14


def resolve_window(window_days: Optional[float]) -> float:
    """Non-positive or missing windows fall back to the default"""
    if window_days is None or window_days <= 0:
        return DEFAULT_WINDOW_DAYS
    return window_days


def recency_weights(
    records: Iterable[DrawRecord],
    latest_date: Optional[date],
    window_days: Optional[float] = DEFAULT_WINDOW_DAYS,
) -> Dict[date, float]:
    """
    Calculate a recency weight for each record date.

    Args:
        records: Draw records (any order)
        latest_date: Reference date, normally the store's latest date
        window_days: Days until the weight reaches MIN_WEIGHT

    Returns:
        Mapping of date -> weight in [MIN_WEIGHT, 1]
    """
    if latest_date is None:
        return {}

    window = resolve_window(window_days)
    dates = sorted({record.date for record in records})
    if not dates:
        return {}

    days_back = np.array([(latest_date - d).days for d in dates], dtype=float)
    days_back = np.clip(np.round(days_back), 0, None)
    weights = np.clip(1.0 - days_back / window, MIN_WEIGHT, 1.0)

    logger.debug(f"Recency weights calculated for {len(dates)} dates (window={window})")
    return {d: float(w) for d, w in zip(dates, weights)}


def weight_for(weights: Mapping[date, float], draw_date: date) -> float:
    return weights.get(draw_date, MIN_WEIGHT)
