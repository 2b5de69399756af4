# loop/live_loop.py
"""
Simulated live feed: seed an engine with a full window of synthetic candles,
then push one new candle every TICK_SECONDS and dispatch any signal.

Usage:
  python -m loop.live_loop --symbol BTCUSDT --price 67234.5 [--config config.yaml] [--test]
"""
import argparse
import logging
import os
import random
import time
from datetime import datetime, timezone

import schedule

from analyzer.engine import SignalEngine
from analyzer.signal_engine.config import BUFFER_CAPACITY, load_signal_config
from dispatcher.telegram_bot import dispatch_signals
from scripts.make_sample_csv import make_candles, next_candle

logger = logging.getLogger(__name__)

TICK_SECONDS = 3


class LiveFeed:
    def __init__(self, engine: SignalEngine, symbol: str, base_price: float,
                 rng: random.Random = None, dry_run: bool = True):
        self.engine = engine
        self.symbol = symbol
        self.rng = rng or random.Random()
        self.dry_run = dry_run
        self.index = 0
        self._base_price = base_price

    def seed(self, count: int = BUFFER_CAPACITY) -> None:
        self.engine.reset()
        self.engine.extend(make_candles(count, self._base_price, rng=self.rng))
        self.index = count

    def tick(self) -> None:
        state = self.engine.current_state()
        prev_close = state.current_price if state.current_price is not None else self._base_price
        candle = next_candle(prev_close, self.index, datetime.now(timezone.utc), self.rng)
        self.index += 1
        signal = self.engine.push_candle(candle)
        if signal is not None:
            dispatch_signals([signal], self.symbol,
                             os.environ.get("TG_BOT_TOKEN"), os.environ.get("TG_CHAT_ID"),
                             dry_run=self.dry_run)


def main(argv=None):
    parser = argparse.ArgumentParser()
    parser.add_argument("--symbol", default="BTCUSDT")
    parser.add_argument("--price", type=float, default=67234.5)
    parser.add_argument("--config", default=None)
    parser.add_argument("--test", action="store_true", help="Dry-run mode (no real Telegram send)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    engine = SignalEngine(load_signal_config(args.config),
                          clock=lambda: datetime.now(timezone.utc))
    has_creds = bool(os.environ.get("TG_BOT_TOKEN") and os.environ.get("TG_CHAT_ID"))
    feed = LiveFeed(engine, args.symbol, args.price, dry_run=args.test or not has_creds)
    feed.seed()

    schedule.every(TICK_SECONDS).seconds.do(feed.tick)
    logger.info("Live loop started for %s, press Ctrl+C to stop.", args.symbol)
    try:
        while True:
            schedule.run_pending()
            time.sleep(0.5)
    except KeyboardInterrupt:
        logger.info("stopped")
    finally:
        schedule.clear()


if __name__ == "__main__":
    main()
