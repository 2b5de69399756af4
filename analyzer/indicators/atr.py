# analyzer/indicators/atr.py
"""
True Range and a simple (unweighted) ATR.

TR = max(
    High - Low,
    abs(High - PrevClose),
    abs(Low - PrevClose)
)

First bar: High - Low.
ATR at index i >= period is the mean TR of bars i-period+1 .. i; earlier bars
report their own High - Low.
"""
from typing import List, Sequence
import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view


def _hlc(high: Sequence[float], low: Sequence[float], close: Sequence[float]):
    h = np.asarray(high, dtype=float)
    l = np.asarray(low, dtype=float)
    c = np.asarray(close, dtype=float)
    if not (len(h) == len(l) == len(c)):
        raise ValueError("high, low and close must have the same length")
    return h, l, c


def true_range(high: Sequence[float], low: Sequence[float], close: Sequence[float]) -> List[float]:
    h, l, c = _hlc(high, low, close)
    tr = h - l
    if len(tr) > 1:
        prev_close = c[:-1]
        tr[1:] = np.maximum.reduce([
            h[1:] - l[1:],
            np.abs(h[1:] - prev_close),
            np.abs(l[1:] - prev_close),
        ])
    return tr.tolist()


def atr(high: Sequence[float], low: Sequence[float], close: Sequence[float], period: int) -> List[float]:
    if period <= 0:
        raise ValueError("period must be > 0")
    h, l, c = _hlc(high, low, close)
    out = h - l
    n = len(out)
    if n > period:
        tr = np.asarray(true_range(h, l, c))
        # window k ends at bar k+period-1; bars >= period start at k = 1
        out[period:] = sliding_window_view(tr, period).mean(axis=1)[1:]
    return out.tolist()


def add_atr(df: pd.DataFrame, period: int = 14,
            high_col: str = "high", low_col: str = "low", close_col: str = "close",
            prefix: str = "atr", force: bool = False) -> pd.DataFrame:
    """Add column f"{prefix}_{period}" with simple ATR. Returns df."""
    colname = f"{prefix}_{period}"
    if (colname in df.columns) and not force:
        return df
    for c in (high_col, low_col, close_col):
        if c not in df.columns:
            raise ValueError(f"column '{c}' not found in DataFrame")
    values = atr(df[high_col].tolist(), df[low_col].tolist(), df[close_col].tolist(), period)
    df[colname] = pd.Series(values, index=df.index, dtype=float)
    return df
