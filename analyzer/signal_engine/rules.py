# analyzer/signal_engine/rules.py
"""
Confirmation rule for the latest bar.

Four confirmation kinds are checked per direction:
  TREND       fast EMA above (BUY) / below (SELL) slow EMA, always required
  RSI         RSI >= buy threshold / <= sell threshold
  VOLUME      volume above its SMA * multiplier (shared by both directions)
  VOLATILITY  ATR above its SMA * multiplier (shared by both directions)

A disabled optional factor counts as satisfied, so the count runs 0..4.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Tuple

from analyzer.models import Candle, SignalKind
from analyzer.signal_engine.config import SignalConfig


class Factor(str, Enum):
    TREND = "TREND"
    RSI = "RSI"
    VOLUME = "VOLUME"
    VOLATILITY = "VOLATILITY"


@dataclass(frozen=True)
class Confirmation:
    factor: Factor
    direction: Optional[SignalKind]  # None when shared by BUY and SELL
    label: str

    def applies_to(self, kind: SignalKind) -> bool:
        return self.direction is None or self.direction is kind


TREND_UP = Confirmation(Factor.TREND, SignalKind.BUY, "Trend Up")
TREND_DOWN = Confirmation(Factor.TREND, SignalKind.SELL, "Trend Down")
RSI_BUY = Confirmation(Factor.RSI, SignalKind.BUY, "RSI Buy")
RSI_SELL = Confirmation(Factor.RSI, SignalKind.SELL, "RSI Sell")
HIGH_VOLUME = Confirmation(Factor.VOLUME, None, "High Volume")
HIGH_VOLATILITY = Confirmation(Factor.VOLATILITY, None, "High Volatility")


@dataclass(frozen=True)
class FactorReadings:
    """Boolean factor values at one bar, already gated by the feature toggles."""
    trend_up: bool = False
    trend_down: bool = False
    rsi_buy: bool = False
    rsi_sell: bool = False
    volume_spike: bool = False
    volatility_spike: bool = False

    def fired(self) -> Tuple[Confirmation, ...]:
        pairs = (
            (self.trend_up, TREND_UP),
            (self.trend_down, TREND_DOWN),
            (self.rsi_buy, RSI_BUY),
            (self.rsi_sell, RSI_SELL),
            (self.volume_spike, HIGH_VOLUME),
            (self.volatility_spike, HIGH_VOLATILITY),
        )
        return tuple(conf for flag, conf in pairs if flag)

    def trend(self, kind: SignalKind) -> bool:
        return self.trend_up if kind is SignalKind.BUY else self.trend_down

    def rsi(self, kind: SignalKind) -> bool:
        return self.rsi_buy if kind is SignalKind.BUY else self.rsi_sell


@dataclass(frozen=True)
class Decision:
    kind: SignalKind
    strength: int
    confirmations: Tuple[str, ...]


def read_factors(candle: Candle, values: Mapping[str, float], config: SignalConfig) -> FactorReadings:
    """
    values: indicator values at the candle's index (see IndicatorSeries.at).
    fast == slow gives neither trend.
    """
    fast, slow = values["fast_ema"], values["slow_ema"]
    rsi_value = values["rsi"]
    return FactorReadings(
        trend_up=fast > slow,
        trend_down=fast < slow,
        rsi_buy=config.use_rsi and rsi_value >= config.rsi_buy_threshold,
        rsi_sell=config.use_rsi and rsi_value <= config.rsi_sell_threshold,
        volume_spike=config.use_volume and candle.volume > values["volume_sma"] * config.volume_multiplier,
        volatility_spike=config.use_atr and values["atr"] > values["atr_sma"] * config.atr_multiplier,
    )


def confirmation_count(readings: FactorReadings, kind: SignalKind, config: SignalConfig) -> int:
    checks = (
        readings.trend(kind),
        readings.rsi(kind) or not config.use_rsi,
        readings.volume_spike or not config.use_volume,
        readings.volatility_spike or not config.use_atr,
    )
    return sum(1 for ok in checks if ok)


def required_confirmations(config: SignalConfig) -> int:
    # trend is mandatory, plus every enabled optional factor
    return config.enabled_factors + 1


def agreeing_factors(readings: FactorReadings, kind: SignalKind, config: SignalConfig) -> int:
    """Enabled factors that actually fired for `kind` (no vacuous passes)."""
    checks = (
        readings.trend(kind),
        config.use_rsi and readings.rsi(kind),
        config.use_volume and readings.volume_spike,
        config.use_atr and readings.volatility_spike,
    )
    return sum(1 for ok in checks if ok)


def is_ready(readings: FactorReadings, kind: SignalKind, config: SignalConfig) -> bool:
    """
    require_all: every enabled factor agrees (agreeing == required).
    Otherwise the vacuous count must reach `sensitivity` on the 0..4 scale.
    """
    if config.require_all:
        return agreeing_factors(readings, kind, config) == required_confirmations(config)
    return confirmation_count(readings, kind, config) >= config.sensitivity


def confirmations_for(readings: FactorReadings, kind: SignalKind) -> Tuple[str, ...]:
    """
    Labels of fired confirmations relevant to `kind`, in factor order.
    Volume and volatility spikes are shared, so their tags go on BUY and SELL alike.
    """
    return tuple(conf.label for conf in readings.fired() if conf.applies_to(kind))


def decide(readings: FactorReadings, config: SignalConfig) -> Optional[Decision]:
    """
    Return the direction to signal, or None. Trend is required regardless of
    require_all/sensitivity; if both directions qualify nothing is emitted.
    """
    ready = []
    for kind in (SignalKind.BUY, SignalKind.SELL):
        if readings.trend(kind) and is_ready(readings, kind, config):
            strength = confirmation_count(readings, kind, config)
            ready.append(Decision(kind, strength, confirmations_for(readings, kind)))
    if len(ready) != 1:
        return None
    return ready[0]
