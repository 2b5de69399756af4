# analyzer/indicators/__init__.py
"""
Public API for indicators.
List-based calculators (ema, rsi, sma, true_range, atr), the full-window
recompute (compute_indicators -> IndicatorSeries) and DataFrame-friendly
helpers (add_ema, add_rsi, add_sma, add_atr, add_all_indicators).
"""
from typing import Any, Mapping, Optional, Union

import pandas as pd

from analyzer.signal_engine.config import SignalConfig
from .atr import add_atr, atr, true_range
from .ema import add_ema, ema
from .rsi import NEUTRAL_RSI, add_rsi, rsi
from .series import SERIES_NAMES, IndicatorSeries, compute_indicators, ensure_min_length
from .sma import add_sma, sma


def add_all_indicators(df: pd.DataFrame,
                       cfg: Optional[Union[SignalConfig, Mapping[str, Any]]] = None,
                       force: bool = False) -> pd.DataFrame:
    """
    Add the six engine series to an OHLCV DataFrame as columns named like
    IndicatorSeries fields (fast_ema, slow_ema, rsi, atr, volume_sma, atr_sma).
    cfg may be a SignalConfig or a mapping accepted by SignalConfig.from_mapping.
    Returns df (modified in-place).
    """
    if not isinstance(cfg, SignalConfig):
        cfg = SignalConfig.from_mapping(cfg)
    for c in ("high", "low", "close", "volume"):
        if c not in df.columns:
            raise ValueError(f"column '{c}' not found in DataFrame")
    if ("fast_ema" in df.columns) and not force:
        return df

    closes = df["close"].astype(float).tolist()
    highs = df["high"].astype(float).tolist()
    lows = df["low"].astype(float).tolist()
    atr_vals = atr(highs, lows, closes, cfg.atr_period)
    df["fast_ema"] = ema(closes, cfg.fast_period)
    df["slow_ema"] = ema(closes, cfg.slow_period)
    df["rsi"] = rsi(closes, cfg.rsi_period)
    df["atr"] = atr_vals
    df["volume_sma"] = sma(df["volume"].astype(float).tolist(), cfg.volume_period)
    df["atr_sma"] = sma(atr_vals, cfg.atr_period)
    return df


__all__ = [
    "ema", "rsi", "sma", "atr", "true_range", "NEUTRAL_RSI",
    "add_ema", "add_rsi", "add_sma", "add_atr", "add_all_indicators",
    "IndicatorSeries", "SERIES_NAMES", "compute_indicators", "ensure_min_length",
]
