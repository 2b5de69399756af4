# analyzer/indicators/ema.py
from typing import List, Sequence, Tuple, Union
import pandas as pd


def ema(prices: Sequence[float], period: int) -> List[float]:
    """
    Low-level EMA calculator.
    - prices: sequence (list/Series) of floats
    - period: int, smoothing factor k = 2 / (period + 1)
    Seeds with the first price (no pre-roll), so early values lean toward
    prices[0]. Returns list with len == len(prices).
    """
    if period <= 0:
        raise ValueError("period must be > 0")
    n = len(prices)
    if n == 0:
        return []
    k = 2.0 / (period + 1)
    prices_f = [float(p) for p in prices]
    out = [prices_f[0]] * n
    prev = prices_f[0]
    for i in range(1, n):
        prev = prices_f[i] * k + prev * (1 - k)
        out[i] = prev
    return out


def add_ema(df: pd.DataFrame,
            spans: Union[int, Tuple[int, ...], Sequence[int]] = (21, 55),
            price_col: str = "close",
            prefix: str = "ema",
            force: bool = False) -> pd.DataFrame:
    """
    Compute EMA(s) and add columns f"{prefix}_{span}" to df.
    Existing columns are kept unless force=True.
    Returns df (modified in-place and returned).
    """
    if price_col not in df.columns:
        raise ValueError(f"price_col '{price_col}' not found in DataFrame")

    if isinstance(spans, int):
        spans = (spans,)
    spans = tuple(int(s) for s in spans)

    prices = df[price_col].astype(float).tolist()
    for span in spans:
        colname = f"{prefix}_{span}"
        if (colname in df.columns) and not force:
            continue
        df[colname] = pd.Series(ema(prices, span), index=df.index, dtype=float)
    return df
