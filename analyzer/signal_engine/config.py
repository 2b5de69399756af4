# analyzer/signal_engine/config.py
"""
Configuration for the EMA trend + RSI/volume/ATR confirmation rule.
Engine-wide constants live here too so other modules can import them.
"""
import json
import os
from dataclasses import asdict, dataclass, fields
from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional

import yaml

from analyzer.errors import InvalidConfiguration

# --- Engine limits ---
BUFFER_CAPACITY = 200   # candles kept in the rolling window
MIN_CANDLES = 100       # candles required before signals are evaluated
HISTORY_LIMIT = 10      # most recent signals kept
SIGNAL_COOLDOWN = timedelta(seconds=10)

# --- Defaults (dashboard presets) ---
DEFAULTS = {
    "fast_period": 21,
    "slow_period": 55,
    "rsi_period": 14,
    "rsi_buy_threshold": 55.0,
    "rsi_sell_threshold": 45.0,
    "atr_period": 14,
    "atr_multiplier": 1.0,
    "volume_period": 20,
    "volume_multiplier": 1.25,
    "sensitivity": 4,
    "require_all": True,
    "use_rsi": True,
    "use_volume": True,
    "use_atr": True,
}

# camelCase names used by the settings panel
ALIASES = {
    "fastEMA": "fast_period",
    "slowEMA": "slow_period",
    "ema_fast": "fast_period",
    "ema_slow": "slow_period",
    "rsiPeriod": "rsi_period",
    "rsiBuy": "rsi_buy_threshold",
    "rsiSell": "rsi_sell_threshold",
    "atrPeriod": "atr_period",
    "atrMult": "atr_multiplier",
    "volPeriod": "volume_period",
    "volMult": "volume_multiplier",
    "requireAll": "require_all",
    "useRSI": "use_rsi",
    "useVolume": "use_volume",
    "useATR": "use_atr",
}

PERIOD_FIELDS = ("fast_period", "slow_period", "rsi_period", "atr_period", "volume_period")
MAX_CONFIRMATIONS = 4


@dataclass(frozen=True)
class SignalConfig:
    fast_period: int = DEFAULTS["fast_period"]
    slow_period: int = DEFAULTS["slow_period"]
    rsi_period: int = DEFAULTS["rsi_period"]
    rsi_buy_threshold: float = DEFAULTS["rsi_buy_threshold"]
    rsi_sell_threshold: float = DEFAULTS["rsi_sell_threshold"]
    atr_period: int = DEFAULTS["atr_period"]
    atr_multiplier: float = DEFAULTS["atr_multiplier"]
    volume_period: int = DEFAULTS["volume_period"]
    volume_multiplier: float = DEFAULTS["volume_multiplier"]
    sensitivity: int = DEFAULTS["sensitivity"]
    require_all: bool = DEFAULTS["require_all"]
    use_rsi: bool = DEFAULTS["use_rsi"]
    use_volume: bool = DEFAULTS["use_volume"]
    use_atr: bool = DEFAULTS["use_atr"]

    def __post_init__(self):
        errors = self.validate()
        if errors:
            raise InvalidConfiguration(errors)

    def validate(self) -> List[str]:
        errors = []
        for name in PERIOD_FIELDS:
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int):
                errors.append(f"{name} must be an integer, got {type(v).__name__}")
            elif v < 1:
                errors.append(f"{name} must be >= 1")
        for name in ("rsi_buy_threshold", "rsi_sell_threshold"):
            v = getattr(self, name)
            if not isinstance(v, (int, float)) or isinstance(v, bool):
                errors.append(f"{name} must be a number")
            elif not 0.0 <= v <= 100.0:
                errors.append(f"{name} must be within [0, 100]")
        for name in ("atr_multiplier", "volume_multiplier"):
            v = getattr(self, name)
            if not isinstance(v, (int, float)) or isinstance(v, bool):
                errors.append(f"{name} must be a number")
            elif v <= 0:
                errors.append(f"{name} must be > 0")
        if isinstance(self.sensitivity, bool) or not isinstance(self.sensitivity, int):
            errors.append("sensitivity must be an integer")
        elif not 1 <= self.sensitivity <= MAX_CONFIRMATIONS:
            errors.append(f"sensitivity must be within [1, {MAX_CONFIRMATIONS}]")
        for name in ("require_all", "use_rsi", "use_volume", "use_atr"):
            if not isinstance(getattr(self, name), bool):
                errors.append(f"{name} must be a boolean")
        return errors

    @property
    def enabled_factors(self) -> int:
        """Number of optional confirmations switched on (RSI, volume, ATR)."""
        return sum((self.use_rsi, self.use_volume, self.use_atr))

    def replace(self, **changes) -> "SignalConfig":
        merged = asdict(self)
        merged.update(changes)
        return SignalConfig(**merged)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, cfg: Optional[Mapping[str, Any]] = None) -> "SignalConfig":
        """
        Build a config from a mapping. Keys may sit at top level or under
        "signal_engine"; camelCase aliases are accepted and unknown keys ignored.
        Raises InvalidConfiguration.
        """
        cfg = dict(cfg or {})
        nested = cfg.get("signal_engine")
        if isinstance(nested, Mapping):
            cfg = {**cfg, **nested}
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in cfg.items():
            name = ALIASES.get(key, key)
            if name in known:
                values[name] = value
        return cls(**values)


def load_config(path: str) -> Dict[str, Any]:
    """Read a .yaml/.yml or .json config file into a dict."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Config file not found: {path}")
    ext = os.path.splitext(path)[1].lower()
    with open(path, "r", encoding="utf-8") as f:
        if ext in (".yaml", ".yml"):
            data = yaml.safe_load(f)
        elif ext == ".json":
            data = json.load(f)
        else:
            raise ValueError("Unsupported config format. Use .yaml/.yml or .json")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfiguration(["Config must be a mapping/object at top level."])
    return data


def load_signal_config(path: Optional[str] = None) -> SignalConfig:
    if path is None:
        return SignalConfig()
    return SignalConfig.from_mapping(load_config(path))
