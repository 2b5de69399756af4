# analyzer/indicators/series.py
"""
Full indicator recomputation over the candle window.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import pandas as pd

from analyzer.errors import InsufficientData
from analyzer.models import Candle
from analyzer.signal_engine.config import MIN_CANDLES, SignalConfig
from .atr import atr
from .ema import ema
from .rsi import rsi
from .sma import sma

SERIES_NAMES = ("fast_ema", "slow_ema", "rsi", "atr", "volume_sma", "atr_sma")


@dataclass(frozen=True)
class IndicatorSeries:
    """
    Six series index-aligned 1:1 with the candles they came from.
    Series are stored as tuples so snapshots handed to readers cannot be edited.
    """
    fast_ema: Tuple[float, ...] = ()
    slow_ema: Tuple[float, ...] = ()
    rsi: Tuple[float, ...] = ()
    atr: Tuple[float, ...] = ()
    volume_sma: Tuple[float, ...] = ()
    atr_sma: Tuple[float, ...] = ()

    def __post_init__(self):
        for name in SERIES_NAMES:
            object.__setattr__(self, name, tuple(getattr(self, name)))

    def __len__(self) -> int:
        return len(self.fast_ema)

    def is_aligned(self, length: int) -> bool:
        return all(len(getattr(self, name)) == length for name in SERIES_NAMES)

    def at(self, index: int) -> Dict[str, float]:
        return {name: getattr(self, name)[index] for name in SERIES_NAMES}

    def to_frame(self, index: Optional[Sequence] = None) -> pd.DataFrame:
        data = {name: getattr(self, name) for name in SERIES_NAMES}
        return pd.DataFrame(data, index=index)


def ensure_min_length(candles: Sequence[Candle], minimum: int = MIN_CANDLES) -> None:
    if len(candles) < minimum:
        raise InsufficientData(len(candles), minimum)


def compute_indicators(candles: Sequence[Candle], config: SignalConfig) -> IndicatorSeries:
    """
    Recompute every series from scratch. Empty input gives empty series.
    """
    if not candles:
        return IndicatorSeries()
    closes = [c.close for c in candles]
    highs = [c.high for c in candles]
    lows = [c.low for c in candles]
    volumes = [c.volume for c in candles]

    atr_vals = atr(highs, lows, closes, config.atr_period)
    return IndicatorSeries(
        fast_ema=ema(closes, config.fast_period),
        slow_ema=ema(closes, config.slow_period),
        rsi=rsi(closes, config.rsi_period),
        atr=atr_vals,
        volume_sma=sma(volumes, config.volume_period),
        atr_sma=sma(atr_vals, config.atr_period),
    )
