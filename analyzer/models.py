# analyzer/models.py
"""
Value types shared by the indicator engine and the signal detector.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Tuple


@dataclass(frozen=True)
class Candle:
    """
    One OHLCV bar.
    Raises ValueError when high/low do not bracket open and close.
    """
    time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self):
        if self.high < max(self.open, self.close):
            raise ValueError(f"candle at {self.time}: high {self.high} below open/close")
        if self.low > min(self.open, self.close):
            raise ValueError(f"candle at {self.time}: low {self.low} above open/close")
        if self.volume < 0:
            raise ValueError(f"candle at {self.time}: negative volume {self.volume}")


class SignalKind(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Signal:
    kind: SignalKind
    time: datetime
    price: float
    strength: int
    confirmations: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "signal": self.kind.value,
            "ts": self.time.isoformat(),
            "price": self.price,
            "strength": self.strength,
            "confirmations": list(self.confirmations),
        }
