#!/usr/bin/env python3
"""
scripts/make_sample_csv.py
Usage:
  python scripts/make_sample_csv.py BTCUSDT --rows 200 --price 67234.5 --out-dir data

Synthetic candle feed: random walk with 2% volatility, a slow sinusoidal
drift and up to 1% wicks, one candle per minute. Writes CSV with header:
time,open,high,low,close,volume  (time is ISO-8601 UTC)
"""
import argparse
import logging
import math
import os
import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pandas as pd

from analyzer.models import Candle

VOLATILITY = 0.02
DRIFT = 0.005
WICK = 0.01
INTERVAL = timedelta(minutes=1)


def next_candle(prev_close: float, index: int, time: datetime,
                rng: Optional[random.Random] = None) -> Candle:
    """Build the candle that follows a bar closing at prev_close."""
    rng = rng or random.Random()
    trend = math.sin(index / 20) * DRIFT
    change = (rng.random() - 0.5) * prev_close * VOLATILITY + prev_close * trend
    openp = prev_close
    close = prev_close + change
    high = max(openp, close) * (1 + rng.random() * WICK)
    low = min(openp, close) * (1 - rng.random() * WICK)
    volume = 100 + rng.random() * 200
    return Candle(time=time, open=openp, high=high, low=low, close=close, volume=volume)


def make_candles(count: int = 200, base_price: float = 1000.0,
                 end_time: Optional[datetime] = None,
                 rng: Optional[random.Random] = None) -> List[Candle]:
    """`count` one-minute candles ending just before end_time (default: now, UTC)."""
    rng = rng or random.Random()
    end_time = end_time or datetime.now(timezone.utc)
    candles = []
    price = float(base_price)
    for i in range(count):
        candle = next_candle(price, i, end_time - (count - i) * INTERVAL, rng)
        candles.append(candle)
        price = candle.close
    return candles


def write_csv(candles: List[Candle], outpath: str) -> str:
    os.makedirs(os.path.dirname(outpath) or ".", exist_ok=True)
    df = pd.DataFrame([{
        "time": c.time.isoformat(),
        "open": c.open, "high": c.high, "low": c.low,
        "close": c.close, "volume": c.volume,
    } for c in candles], columns=["time", "open", "high", "low", "close", "volume"])
    df.to_csv(outpath, index=False, encoding="utf-8")
    return outpath


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    p = argparse.ArgumentParser()
    p.add_argument("ticker", help="ticker name (used for output filename)")
    p.add_argument("--rows", type=int, default=200)
    p.add_argument("--price", type=float, default=1000.0)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--out-dir", default="data")
    args = p.parse_args()
    out = os.path.join(args.out_dir, f"{args.ticker}.csv")
    series = make_candles(args.rows, args.price, rng=random.Random(args.seed))
    write_csv(series, out)
    logging.info("Wrote %s rows=%d", out, args.rows)
