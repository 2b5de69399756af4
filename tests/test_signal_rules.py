# tests/test_signal_rules.py
from datetime import datetime, timezone

from analyzer.models import Candle, SignalKind
from analyzer.signal_engine.config import SignalConfig
from analyzer.signal_engine.rules import (HIGH_VOLATILITY, HIGH_VOLUME, FactorReadings, agreeing_factors,
                                          confirmation_count, confirmations_for, decide, is_ready,
                                          read_factors, required_confirmations)

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


def bar(volume=100.0):
    return Candle(time=T0, open=100.0, high=101.0, low=99.0, close=100.5, volume=volume)


def values(fast=101.0, slow=100.0, rsi=60.0, atr=2.0, atr_sma=1.0, volume_sma=50.0):
    return {"fast_ema": fast, "slow_ema": slow, "rsi": rsi, "atr": atr,
            "atr_sma": atr_sma, "volume_sma": volume_sma}


def test_read_factors_all_bullish():
    r = read_factors(bar(), values(), SignalConfig())
    assert r.trend_up and not r.trend_down
    assert r.rsi_buy and not r.rsi_sell
    assert r.volume_spike and r.volatility_spike


def test_equal_emas_give_no_trend():
    r = read_factors(bar(), values(fast=100.0, slow=100.0), SignalConfig())
    assert not r.trend_up and not r.trend_down
    assert decide(r, SignalConfig()) is None


def test_thresholds_are_inclusive_for_rsi_and_strict_for_spikes():
    cfg = SignalConfig(rsi_buy_threshold=60, rsi_sell_threshold=60,
                       volume_multiplier=2.0, atr_multiplier=2.0)
    r = read_factors(bar(volume=100.0), values(rsi=60.0, volume_sma=50.0, atr=2.0, atr_sma=1.0), cfg)
    assert r.rsi_buy and r.rsi_sell
    assert not r.volume_spike  # 100 > 50*2 is false
    assert not r.volatility_spike


def test_disabled_factors_read_false():
    cfg = SignalConfig(use_rsi=False, use_volume=False, use_atr=False)
    r = read_factors(bar(), values(), cfg)
    assert r.trend_up
    assert not (r.rsi_buy or r.volume_spike or r.volatility_spike)


def test_disabled_factor_counts_as_satisfied():
    cfg = SignalConfig(use_rsi=False, use_volume=False, use_atr=False)
    r = FactorReadings(trend_up=True)
    assert confirmation_count(r, SignalKind.BUY, cfg) == 4
    assert confirmation_count(r, SignalKind.SELL, cfg) == 3


def test_shared_spikes_count_for_both_directions():
    r = FactorReadings(trend_down=True, volume_spike=True, volatility_spike=True)
    cfg = SignalConfig()
    assert confirmation_count(r, SignalKind.SELL, cfg) == 3
    assert confirmation_count(r, SignalKind.BUY, cfg) == 2


def test_required_confirmations():
    assert required_confirmations(SignalConfig()) == 4
    assert required_confirmations(SignalConfig(use_volume=False)) == 3
    assert required_confirmations(SignalConfig(use_rsi=False, use_volume=False, use_atr=False)) == 1


def test_is_ready_require_all_needs_every_enabled_factor():
    cfg = SignalConfig(use_atr=False)  # required = 3
    agree = FactorReadings(trend_up=True, rsi_buy=True, volume_spike=True)
    assert agreeing_factors(agree, SignalKind.BUY, cfg) == 3
    # the vacuous ATR pass lifts the strength to 4 without affecting readiness
    assert confirmation_count(agree, SignalKind.BUY, cfg) == 4
    assert is_ready(agree, SignalKind.BUY, cfg)
    assert not is_ready(FactorReadings(trend_up=True, rsi_buy=True), SignalKind.BUY, cfg)


def test_is_ready_ignores_spikes_of_disabled_factors():
    cfg = SignalConfig(use_volume=False, use_atr=False)  # required = 2
    r = FactorReadings(trend_up=True, rsi_buy=True, volume_spike=True, volatility_spike=True)
    assert agreeing_factors(r, SignalKind.BUY, cfg) == 2
    assert is_ready(r, SignalKind.BUY, cfg)


def test_is_ready_sensitivity_mode():
    cfg = SignalConfig(require_all=False, sensitivity=2)
    assert is_ready(FactorReadings(trend_up=True, volume_spike=True), SignalKind.BUY, cfg)
    assert is_ready(FactorReadings(trend_up=True, rsi_buy=True, volume_spike=True, volatility_spike=True),
                    SignalKind.BUY, cfg)
    assert not is_ready(FactorReadings(trend_up=True), SignalKind.BUY, cfg)


def test_confirmations_for_filters_by_direction():
    r = FactorReadings(trend_up=True, rsi_buy=True, rsi_sell=True, volume_spike=True)
    assert confirmations_for(r, SignalKind.BUY) == ("Trend Up", "RSI Buy", HIGH_VOLUME.label)
    assert confirmations_for(r, SignalKind.SELL) == ("RSI Sell", HIGH_VOLUME.label)
    assert HIGH_VOLATILITY.applies_to(SignalKind.BUY) and HIGH_VOLATILITY.applies_to(SignalKind.SELL)


def test_decide_buy_and_sell():
    cfg = SignalConfig()
    buy = decide(FactorReadings(trend_up=True, rsi_buy=True, volume_spike=True, volatility_spike=True), cfg)
    assert buy.kind is SignalKind.BUY and buy.strength == 4
    sell = decide(FactorReadings(trend_down=True, rsi_sell=True, volume_spike=True, volatility_spike=True), cfg)
    assert sell.kind is SignalKind.SELL
    assert sell.confirmations == ("Trend Down", "RSI Sell", "High Volume", "High Volatility")


def test_decide_requires_trend_even_when_count_is_enough():
    cfg = SignalConfig(require_all=False, sensitivity=3)
    r = FactorReadings(rsi_buy=True, volume_spike=True, volatility_spike=True)
    assert confirmation_count(r, SignalKind.BUY, cfg) == 3
    assert decide(r, cfg) is None


def test_decide_tie_emits_nothing():
    cfg = SignalConfig(use_rsi=False, use_volume=False, use_atr=False)
    assert decide(FactorReadings(trend_up=True, trend_down=True), cfg) is None
