# analyzer/engine.py
"""
Per-symbol signal engine.

push_candle() appends to the rolling window, recomputes every indicator and
runs one detector cycle; current_state() returns a read-only snapshot.
Both are serialized with a lock, so a snapshot never sees a half-finished
update. Use one engine per symbol; engines share no mutable state.
"""
import logging
import threading
from collections import deque
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Callable, Deque, Iterable, List, Optional, Tuple

from analyzer.errors import InsufficientData
from analyzer.indicators import NEUTRAL_RSI, IndicatorSeries, compute_indicators, ensure_min_length
from analyzer.models import Candle, Signal
from analyzer.signal_engine.config import BUFFER_CAPACITY, MIN_CANDLES, SignalConfig
from analyzer.signal_engine.detector import SignalDetector

logger = logging.getLogger(__name__)

RECENT_WINDOW = 24  # candles used for recent high/low


@dataclass(frozen=True)
class EngineState:
    indicators: IndicatorSeries
    signals: Tuple[Signal, ...]
    latest_candle: Optional[Candle]
    candle_count: int
    waiting_for_data: bool
    current_price: Optional[float] = None
    price_change_pct: Optional[float] = None
    recent_high: Optional[float] = None
    recent_low: Optional[float] = None
    current_rsi: float = NEUTRAL_RSI
    current_atr: float = 0.0
    current_volume: float = 0.0
    average_volume: float = 0.0
    config: SignalConfig = field(default_factory=SignalConfig)

    @property
    def last_signal(self) -> Optional[Signal]:
        return self.signals[-1] if self.signals else None


class SignalEngine:
    def __init__(self,
                 config: Optional[SignalConfig] = None,
                 capacity: int = BUFFER_CAPACITY,
                 min_candles: int = MIN_CANDLES,
                 clock: Optional[Callable[[], datetime]] = None,
                 detector: Optional[SignalDetector] = None):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.config = config or SignalConfig()
        self.capacity = capacity
        self.min_candles = min_candles
        self.clock = clock
        self.detector = detector or SignalDetector(min_candles=min_candles)
        self._candles: Deque[Candle] = deque(maxlen=capacity)
        self._indicators = IndicatorSeries()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._candles)

    @property
    def candles(self) -> List[Candle]:
        with self._lock:
            return list(self._candles)

    def push_candle(self, candle: Candle) -> Optional[Signal]:
        """
        Append one candle (evicting the oldest at capacity) and run a cycle.
        Raises ValueError if the candle is older than the latest one.
        Returns the signal emitted this cycle, if any.
        """
        with self._lock:
            if self._candles and candle.time < self._candles[-1].time:
                raise ValueError(
                    f"candle at {candle.time} is older than latest {self._candles[-1].time}")
            self._candles.append(candle)
            return self._cycle()

    def extend(self, candles: Iterable[Candle]) -> List[Signal]:
        emitted = []
        for candle in candles:
            signal = self.push_candle(candle)
            if signal is not None:
                emitted.append(signal)
        return emitted

    def update_config(self, config: SignalConfig) -> Optional[Signal]:
        """Swap configuration, recompute indicators and run a cycle."""
        with self._lock:
            self.config = config
            return self._cycle()

    def reset(self) -> None:
        with self._lock:
            self._candles.clear()
            self._indicators = IndicatorSeries()
            self.detector.clear()

    def _cycle(self) -> Optional[Signal]:
        candles = list(self._candles)
        self._indicators = compute_indicators(candles, self.config)
        try:
            ensure_min_length(candles, self.min_candles)
        except InsufficientData as e:
            logger.debug("waiting for data: %s", e)
            return None
        now = self.clock() if self.clock is not None else None
        return self.detector.evaluate(candles, self._indicators, self.config, now=now)

    def current_state(self) -> EngineState:
        with self._lock:
            candles = list(self._candles)
            indicators = self._indicators
            signals = self.detector.history
            config = self.config

        waiting = len(candles) < self.min_candles
        if not candles:
            return EngineState(indicators=indicators, signals=signals, latest_candle=None,
                               candle_count=0, waiting_for_data=True, config=config)

        latest = candles[-1]
        first_close = candles[0].close
        change = None
        if len(candles) > 1 and first_close != 0:
            change = (latest.close - first_close) / first_close * 100.0
        recent = candles[-RECENT_WINDOW:]
        state = EngineState(
            indicators=indicators,
            signals=signals,
            latest_candle=latest,
            candle_count=len(candles),
            waiting_for_data=waiting,
            current_price=latest.close,
            price_change_pct=change,
            recent_high=max(c.high for c in recent),
            recent_low=min(c.low for c in recent),
            current_volume=latest.volume,
            config=config,
        )
        if waiting or len(indicators) != len(candles):
            return state
        return replace(state,
                       current_rsi=indicators.rsi[-1],
                       current_atr=indicators.atr[-1],
                       average_volume=indicators.volume_sma[-1])
