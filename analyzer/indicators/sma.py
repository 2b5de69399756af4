# analyzer/indicators/sma.py
from typing import List, Sequence
import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view


def sma(values: Sequence[float], period: int) -> List[float]:
    """
    Trailing simple moving average.
    Before `period` samples exist the raw input value is passed through
    unchanged (not a partial-window average).
    """
    if period <= 0:
        raise ValueError("period must be > 0")
    vals = np.asarray(values, dtype=float)
    out = vals.copy()
    if len(vals) >= period:
        out[period - 1:] = sliding_window_view(vals, period).mean(axis=1)
    return out.tolist()


def add_sma(df: pd.DataFrame, period: int = 20, source_col: str = "volume",
            prefix: str = "sma", force: bool = False) -> pd.DataFrame:
    """Add column f"{prefix}_{source_col}_{period}". Returns df."""
    colname = f"{prefix}_{source_col}_{period}"
    if (colname in df.columns) and not force:
        return df
    if source_col not in df.columns:
        raise ValueError(f"column '{source_col}' not found in DataFrame")
    df[colname] = pd.Series(sma(df[source_col].astype(float).tolist(), period),
                            index=df.index, dtype=float)
    return df
