# tests/test_indicators/test_indicator_series.py
from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest
from analyzer.errors import InsufficientData
from analyzer.indicators import (SERIES_NAMES, IndicatorSeries, add_all_indicators,
                                 compute_indicators, ensure_min_length, sma)
from analyzer.models import Candle
from analyzer.signal_engine.config import SignalConfig


def sample_candles(n=60):
    start = datetime(2025, 1, 1, tzinfo=timezone.utc)
    out = []
    for i in range(n):
        close = 100 + (i % 7) - (i % 3) * 0.5
        openp = close - 0.25
        out.append(Candle(time=start + timedelta(minutes=i), open=openp,
                          high=close + 1.0, low=openp - 1.0, close=close,
                          volume=100 + (i % 5) * 10))
    return out


def test_empty_candles_give_empty_series():
    series = compute_indicators([], SignalConfig())
    assert len(series) == 0
    assert series.is_aligned(0)


def test_series_are_index_aligned_with_candles():
    candles = sample_candles(60)
    series = compute_indicators(candles, SignalConfig(fast_period=5, slow_period=20))
    assert series.is_aligned(60)
    for name in SERIES_NAMES:
        assert len(getattr(series, name)) == 60
    assert series.fast_ema[0] == candles[0].close
    assert series.rsi[:14] == (50.0,) * 14


def test_atr_sma_is_smoothed_atr():
    cfg = SignalConfig(atr_period=5)
    series = compute_indicators(sample_candles(40), cfg)
    assert list(series.atr_sma) == pytest.approx(sma(series.atr, 5))


def test_at_returns_values_for_one_bar():
    series = compute_indicators(sample_candles(30), SignalConfig())
    values = series.at(-1)
    assert set(values) == set(SERIES_NAMES)
    assert values["volume_sma"] == series.volume_sma[-1]


def test_to_frame_uses_given_index():
    candles = sample_candles(10)
    frame = compute_indicators(candles, SignalConfig()).to_frame(index=[c.time for c in candles])
    assert list(frame.columns) == list(SERIES_NAMES)
    assert frame.index[0] == candles[0].time


def test_ensure_min_length():
    with pytest.raises(InsufficientData) as exc:
        ensure_min_length(sample_candles(99), 100)
    assert exc.value.have == 99 and exc.value.need == 100
    ensure_min_length(sample_candles(100), 100)


def test_add_all_indicators_matches_engine_series():
    candles = sample_candles(50)
    df = pd.DataFrame([{"open": c.open, "high": c.high, "low": c.low,
                        "close": c.close, "volume": c.volume} for c in candles])
    cfg = {"fastEMA": 5, "slowEMA": 12, "atrPeriod": 7}
    out = add_all_indicators(df, cfg)
    expected = compute_indicators(candles, SignalConfig.from_mapping(cfg))
    for name in SERIES_NAMES:
        assert out[name].tolist() == pytest.approx(list(getattr(expected, name)))


def test_add_all_indicators_requires_ohlcv():
    with pytest.raises(ValueError):
        add_all_indicators(pd.DataFrame({"close": [1.0, 2.0]}))


def test_indicator_series_default_is_empty():
    assert len(IndicatorSeries()) == 0


def test_series_are_stored_as_tuples():
    series = IndicatorSeries(fast_ema=[1.0, 2.0], slow_ema=[1.0, 2.0], rsi=[50.0, 50.0],
                             atr=[0.5, 0.5], volume_sma=[10.0, 10.0], atr_sma=[0.5, 0.5])
    for name in SERIES_NAMES:
        assert isinstance(getattr(series, name), tuple)
    with pytest.raises(TypeError):
        series.rsi[-1] = 0.0
