# analyzer/errors.py
"""
Error taxonomy for the signal engine.

Only two conditions are modelled as exceptions:
- InsufficientData: not enough candles yet. Never fatal, the engine turns it
  into a "waiting for data" state.
- InvalidConfiguration: raised when a configuration is built or loaded,
  never from inside the indicator math.
"""
from typing import Iterable


class SignalEngineError(Exception):
    """Base class for engine errors."""


class InsufficientData(SignalEngineError):
    def __init__(self, have: int, need: int):
        self.have = have
        self.need = need
        super().__init__(f"need at least {need} candles, have {have}")


class InvalidConfiguration(SignalEngineError, ValueError):
    def __init__(self, errors: Iterable[str]):
        self.errors = list(errors)
        super().__init__("invalid configuration: " + "; ".join(self.errors))
