# analyzer/signal_engine/detector.py
"""
Stateful signal detector: evaluates the latest bar and keeps a bounded,
cooldown-filtered history of emitted signals.
"""
import logging
from collections import deque
from datetime import datetime, timedelta
from typing import Deque, Optional, Sequence, Tuple

from analyzer.indicators import IndicatorSeries
from analyzer.models import Candle, Signal
from analyzer.signal_engine.config import HISTORY_LIMIT, MIN_CANDLES, SIGNAL_COOLDOWN, SignalConfig
from analyzer.signal_engine.rules import decide, read_factors

logger = logging.getLogger(__name__)


class SignalDetector:
    """
    Not thread-safe: callers must serialize evaluate() per symbol.
    """

    def __init__(self,
                 history_limit: int = HISTORY_LIMIT,
                 cooldown: timedelta = SIGNAL_COOLDOWN,
                 min_candles: int = MIN_CANDLES):
        self.cooldown = cooldown
        self.min_candles = min_candles
        self._history: Deque[Signal] = deque(maxlen=history_limit)

    @property
    def history(self) -> Tuple[Signal, ...]:
        return tuple(self._history)

    @property
    def last_signal(self) -> Optional[Signal]:
        return self._history[-1] if self._history else None

    def clear(self) -> None:
        self._history.clear()

    def in_cooldown(self, now: datetime) -> bool:
        last = self.last_signal
        return last is not None and now - last.time < self.cooldown

    def evaluate(self,
                 candles: Sequence[Candle],
                 indicators: IndicatorSeries,
                 config: SignalConfig,
                 now: Optional[datetime] = None) -> Optional[Signal]:
        """
        Evaluate the last bar; append and return a Signal when one fires.
        `now` stamps the signal and drives the cooldown; defaults to the
        last candle's time.
        """
        n = len(candles)
        if n < self.min_candles:
            return None
        if not indicators.is_aligned(n):
            logger.warning("indicator series not aligned with %d candles, skipping evaluation", n)
            return None

        last_idx = n - 1
        candle = candles[last_idx]
        readings = read_factors(candle, indicators.at(last_idx), config)
        decision = decide(readings, config)
        if decision is None:
            return None

        now = now if now is not None else candle.time
        if self.in_cooldown(now):
            logger.debug("%s suppressed by cooldown (last signal at %s)",
                         decision.kind.value, self.last_signal.time)
            return None

        signal = Signal(kind=decision.kind, time=now, price=candle.close,
                        strength=decision.strength, confirmations=decision.confirmations)
        self._history.append(signal)
        logger.info("%s signal at %s price=%.6g strength=%d [%s]",
                    signal.kind.value, signal.time, signal.price, signal.strength,
                    ", ".join(signal.confirmations))
        return signal
