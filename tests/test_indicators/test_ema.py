# tests/test_indicators/test_ema.py
import pandas as pd
import pytest
from analyzer.indicators.ema import add_ema, ema


def test_ema_seeds_with_first_value_and_keeps_length():
    prices = [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]
    out = ema(prices, 3)
    # panjang harus sama
    assert len(out) == len(prices)
    # tanpa pre-roll: nilai pertama = harga pertama
    assert out[0] == 1.0
    # k = 2/(3+1) = 0.5
    assert out[1] == 1.5
    assert out[2] == 2.25
    assert out[3] == 3.125


def test_ema_rising_prices_lag_below_price():
    prices = [100 + i for i in range(50)]
    out = ema(prices, 10)
    assert all(out[i] < out[i + 1] for i in range(len(out) - 1))
    assert out[-1] < prices[-1]


def test_ema_period_one_tracks_input():
    prices = [3.0, 7.0, 1.0, 4.0]
    assert ema(prices, 1) == prices


def test_ema_flat_series_is_flat():
    assert ema([42.0] * 20, 5) == [42.0] * 20


def test_ema_empty_and_invalid_period():
    assert ema([], 5) == []
    with pytest.raises(ValueError):
        ema([1, 2, 3], 0)


def test_add_ema_creates_columns_and_respects_force():
    df = pd.DataFrame({"close": [1.0, 2.0, 3.0, 4.0]})
    add_ema(df, spans=(2, 3))
    assert "ema_2" in df.columns and "ema_3" in df.columns
    assert df["ema_3"].iloc[0] == 1.0

    df["ema_2"] = 0.0
    add_ema(df, spans=2)
    assert (df["ema_2"] == 0.0).all()
    add_ema(df, spans=2, force=True)
    assert df["ema_2"].iloc[-1] > 0.0


def test_add_ema_invalid_pricecol_raises():
    df = pd.DataFrame({"close": [1.0, 2.0]})
    with pytest.raises(ValueError):
        add_ema(df, spans=(5,), price_col="nonexistent")
