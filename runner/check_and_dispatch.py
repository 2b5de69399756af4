# runner/check_and_dispatch.py
"""
Replay a candle CSV through a SignalEngine and dispatch the signals it emits.

Usage:
  python -m runner.check_and_dispatch --data data/BTCUSDT.csv --symbol BTCUSDT [--config config.yaml] [--signals-out signals/BTCUSDT.csv] [--test]
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from analyzer.engine import SignalEngine
from analyzer.errors import InvalidConfiguration
from analyzer.models import Signal
from analyzer.signal_engine.config import load_signal_config
from dispatcher.telegram_bot import STATE_FILE, dispatch_signals
from ingestor.storage import load_candles, save_signals_csv

logger = logging.getLogger(__name__)


def replay(data_path: str, config_path: Optional[str] = None) -> List[Signal]:
    """Push every candle of data_path into a fresh engine; return emitted signals in order."""
    config = load_signal_config(config_path)
    candles = load_candles(data_path)
    engine = SignalEngine(config)
    emitted = engine.extend(candles)
    state = engine.current_state()
    if state.waiting_for_data:
        logger.info("only %d candles in %s, waiting for data", state.candle_count, data_path)
    return emitted


def main(argv=None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--data", required=True, help="candle CSV (time,open,high,low,close,volume)")
    parser.add_argument("--symbol", default="UNKNOWN")
    parser.add_argument("--config", default=None, help="yaml/json signal settings")
    parser.add_argument("--signals-out", default=None, help="append emitted signals to this CSV")
    parser.add_argument("--state-file", default=STATE_FILE)
    parser.add_argument("--no-dispatch", action="store_true", help="skip Telegram dispatch")
    parser.add_argument("--test", action="store_true", help="Dry-run mode (no real Telegram send)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        signals = replay(args.data, args.config)
    except (FileNotFoundError, InvalidConfiguration, ValueError) as e:
        logger.error("%s", e)
        return 2
    logger.info("Generated %d signals for %s", len(signals), args.symbol)

    if args.signals_out:
        written = save_signals_csv(signals, args.signals_out, symbol=args.symbol)
        logger.info("Wrote %d signals to %s", written, args.signals_out)

    if not args.no_dispatch:
        bot_token = os.environ.get("TG_BOT_TOKEN")
        chat_id = os.environ.get("TG_CHAT_ID")
        dry_run = args.test or not (bot_token and chat_id)
        dispatch_signals(signals, args.symbol, bot_token, chat_id,
                         dry_run=dry_run, state_file=args.state_file)
    return 0


if __name__ == "__main__":
    sys.exit(main())
