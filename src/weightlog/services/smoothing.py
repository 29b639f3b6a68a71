# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Trailing moving average over the raw daily series.

The averaged series is always derived from the raw one at read time; it is
never stored.
"""

from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from weightlog.core.models import Series

DEFAULT_WINDOW = 7


def moving_average(raw: Series, window: int = DEFAULT_WINDOW) -> Series:
    """Mean of each run of `window` consecutive points, dated at the run's last date.

    A series of N points gives N - window + 1 points; fewer than `window`
    points give an empty series.
    """
    if window < 1:
        raise ValueError("window must be >= 1")
    n = len(raw)
    if n < window:
        return Series()

    values = pd.Series(raw.weights, dtype="float64")
    means = values.rolling(window=window).mean().iloc[window - 1:]
    return Series(
        dates=list(raw.dates[window - 1:]),
        weights=[float(v) for v in means.tolist()],
    )


def raw_and_average(raw: Series, window: int = DEFAULT_WINDOW) -> Dict[str, Any]:
    average = moving_average(raw, window)
    return {"raw": raw.to_dict(), "average": average.to_dict()}
