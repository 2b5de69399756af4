# dispatcher/telegram_bot.py
import json
import logging
import os
from typing import Iterable, Optional

import requests

from analyzer.models import Signal, SignalKind

logger = logging.getLogger(__name__)

STATE_FILE = "state/last_signals.json"
API_URL = "https://api.telegram.org/bot{token}/sendMessage"
MAX_SENT_KEYS = 500


def load_state(path: str = STATE_FILE) -> dict:
    if os.path.exists(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("could not read dispatch state %s: %s", path, e)
            return {}
    return {}


def save_state(state: dict, path: str = STATE_FILE) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(state, f, indent=2, ensure_ascii=False)


def signal_key(symbol: str, signal: Signal) -> str:
    return f"{symbol}_{signal.kind.value}_{signal.time.isoformat()}"


def format_signal(symbol: str, signal: Signal) -> str:
    icon = "📈" if signal.kind is SignalKind.BUY else "📉"
    lines = [
        f"{icon} {signal.kind.value} Signal: {symbol}",
        f"Time: {signal.time.isoformat()}",
        f"Price: {signal.price:.6g}",
        f"Strength: {signal.strength}/4",
    ]
    if signal.confirmations:
        lines.append("Confirmations: " + ", ".join(signal.confirmations))
    return "\n".join(lines)


def send_telegram_message(bot_token, chat_id, text, dry_run=False, timeout=10):
    """Kirim pesan ke Telegram atau log saja kalau dry_run."""
    if dry_run:
        logger.info("[TEST] Telegram message -> %s: %s", chat_id, text)
        return True

    url = API_URL.format(token=bot_token)
    data = {"chat_id": chat_id, "text": text}
    try:
        resp = requests.post(url, data=data, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("Telegram send failed: %s", e)
        return False
    if resp.status_code != 200:
        logger.warning("Telegram send failed: %s", resp.text)
        return False
    return True


def dispatch_signals(signals: Iterable[Signal], symbol: str, bot_token: Optional[str], chat_id: Optional[str],
                     dry_run: bool = False, state_file: str = STATE_FILE,
                     max_keys: int = MAX_SENT_KEYS) -> int:
    """
    Send signals not sent before. Sent keys are remembered in state_file so
    replays do not notify twice; only the newest MAX_SENT_KEYS are kept.
    Returns the number of messages sent.
    """
    state = load_state(state_file)
    last_sent = set(state.get("sent", []))

    new_keys = []
    for signal in signals:
        key = signal_key(symbol, signal)
        if key in last_sent:
            continue
        if send_telegram_message(bot_token, chat_id, format_signal(symbol, signal), dry_run=dry_run):
            new_keys.append(key)
            last_sent.add(key)

    if new_keys:
        sent = state.get("sent", []) + new_keys
        state["sent"] = sent[-max_keys:]
        save_state(state, state_file)

    logger.info("Dispatched %d new signals.", len(new_keys))
    return len(new_keys)
