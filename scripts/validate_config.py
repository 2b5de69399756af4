#!/usr/bin/env python3
"""
scripts/validate_config.py
Usage:
  python scripts/validate_config.py config.yaml

Validates signal engine settings (periods, thresholds, multipliers, toggles).
Exits 0 if OK, 2 if invalid. Unknown keys only produce a warning.
"""
import sys
from dataclasses import fields
from typing import Any, List, Mapping

from analyzer.errors import InvalidConfiguration
from analyzer.signal_engine.config import ALIASES, SignalConfig, load_config


def unknown_keys(cfg: Mapping[str, Any]) -> List[str]:
    known = {f.name for f in fields(SignalConfig)}
    section = cfg.get("signal_engine", cfg)
    if not isinstance(section, Mapping):
        return []
    return [k for k in section if k != "signal_engine" and ALIASES.get(k, k) not in known]


def validate_config(cfg: Any) -> List[str]:
    """Return a list of problems; empty when cfg builds a valid SignalConfig."""
    if not isinstance(cfg, Mapping):
        return ["Config must be a mapping/object at top level."]
    try:
        SignalConfig.from_mapping(cfg)
    except InvalidConfiguration as e:
        return list(e.errors)
    return []


def main(argv):
    if len(argv) < 2:
        print("Usage: python scripts/validate_config.py <config.yaml|config.json>", file=sys.stderr)
        return 2
    path = argv[1]
    try:
        cfg = load_config(path)
    except Exception as e:
        print(f"ERROR loading config: {e}", file=sys.stderr)
        return 2
    for key in unknown_keys(cfg):
        print(f"WARN: unknown key ignored: '{key}'", file=sys.stderr)
    errs = validate_config(cfg)
    if errs:
        print("CONFIG INVALID:", file=sys.stderr)
        for e in errs:
            print(" -", e, file=sys.stderr)
        return 2
    print("CONFIG OK")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
