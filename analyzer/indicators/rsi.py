# analyzer/indicators/rsi.py
from typing import List, Sequence
import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

NEUTRAL_RSI = 50.0


def rsi(prices: Sequence[float], period: int) -> List[float]:
    """
    Windowed RSI (simple averages over the trailing `period` deltas, not
    Wilder smoothing).
    - indices < period hold NEUTRAL_RSI
    - a window without losses gives exactly 100.0
    Returns a list len == len(prices).
    """
    if period <= 0:
        raise ValueError("period must be > 0")
    closes = np.asarray(prices, dtype=float)
    n = len(closes)
    out = np.full(n, NEUTRAL_RSI, dtype=float)
    if n <= period:
        return out.tolist()

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    # window k covers deltas[k:k+period], i.e. bars k+1 .. k+period
    avg_gain = sliding_window_view(gains, period).sum(axis=1) / period
    avg_loss = sliding_window_view(losses, period).sum(axis=1) / period

    with np.errstate(divide="ignore", invalid="ignore"):
        values = 100.0 - 100.0 / (1.0 + avg_gain / avg_loss)
    out[period:] = np.where(avg_loss == 0.0, 100.0, values)
    return out.tolist()


def add_rsi(df: pd.DataFrame, period: int = 14, price_col: str = "close",
            prefix: str = "rsi", force: bool = False) -> pd.DataFrame:
    """Add column f"{prefix}_{period}" with windowed RSI. Returns df."""
    colname = f"{prefix}_{period}"
    if (colname in df.columns) and not force:
        return df
    if price_col not in df.columns:
        raise ValueError(f"price_col '{price_col}' not found in DataFrame")
    df[colname] = pd.Series(rsi(df[price_col].astype(float).tolist(), period),
                            index=df.index, dtype=float)
    return df
