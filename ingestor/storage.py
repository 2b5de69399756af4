# ingestor/storage.py
"""
Storage helpers: candle CSVs in, emitted signals out.

Fungsi utama:
- normalize_ohlcv(data) -> DataFrame  (time-indexed, canonical OHLCV columns)
- load_candles(path)    -> list[Candle] ready for SignalEngine.push_candle
- candles_to_frame(candles)
- save_signals_csv(signals, path, symbol)  (append, header on first write)
"""
import logging
from pathlib import Path
from typing import Iterable, List, Union

import pandas as pd

from analyzer.models import Candle, Signal

logger = logging.getLogger(__name__)

OHLCV = ['open', 'high', 'low', 'close', 'volume']
SIGNAL_FIELDNAMES = ['symbol', 'ts', 'signal', 'price', 'strength', 'confirmations']


# ---------------------------
# Utility: standardize columns
# ---------------------------
def _standardize_colnames(df: pd.DataFrame) -> pd.DataFrame:
    """Map variasi nama kolom ke canonical names kami (non-destructive)."""
    mapping = {}
    for c in list(df.columns):
        lc = str(c).lower().strip()
        if lc in ('time', 'timestamp', 'datetime', 'date', 'date_time', 'ts'):
            mapping[c] = 'time'
        elif lc in ('o', 'open', 'open_price'):
            mapping[c] = 'open'
        elif lc in ('h', 'high', 'high_price'):
            mapping[c] = 'high'
        elif lc in ('l', 'low', 'low_price'):
            mapping[c] = 'low'
        elif lc in ('c', 'close', 'close_price', 'adj close', 'adjclose'):
            mapping[c] = 'close'
        elif 'vol' in lc:
            mapping[c] = 'volume'
    if mapping:
        return df.rename(columns=mapping)
    return df


def _parse_time(values: pd.Series) -> pd.Series:
    # epoch milliseconds (feed format) or anything pandas can parse; always UTC
    if pd.api.types.is_numeric_dtype(values):
        return pd.to_datetime(values, unit='ms', utc=True, errors='coerce')
    return pd.to_datetime(values, utc=True, errors='coerce')


# ---------------------------
# Public: normalize_ohlcv
# ---------------------------
def normalize_ohlcv(data: Union[str, Path, pd.DataFrame]) -> pd.DataFrame:
    """
    Accepts a path to CSV or a pandas.DataFrame.
    Returns a DataFrame indexed by UTC time (sorted ascending) with columns
    open, high, low, close, volume. Rows with an unparseable time or missing
    price are dropped; missing volume becomes 0.
    """
    if isinstance(data, (str, Path)):
        df = pd.read_csv(data)
    elif isinstance(data, pd.DataFrame):
        df = data.copy()
    else:
        raise ValueError("data must be path to CSV or pandas.DataFrame")

    df = _standardize_colnames(df)

    if 'time' not in df.columns:
        if isinstance(df.index, pd.DatetimeIndex):
            df = df.rename_axis('time').reset_index()
        else:
            raise ValueError("No time column found")

    df['time'] = _parse_time(df['time'])
    for col in OHLCV:
        if col not in df.columns:
            df[col] = pd.NA
        df[col] = pd.to_numeric(df[col], errors='coerce')
    df['volume'] = df['volume'].fillna(0)

    before = len(df)
    df = df.dropna(subset=['time', 'open', 'high', 'low', 'close'])
    if len(df) < before:
        logger.warning("normalize_ohlcv: dropped %d incomplete rows", before - len(df))
    df = df.set_index('time').sort_index(kind='stable')
    return df[OHLCV]


def load_candles(data: Union[str, Path, pd.DataFrame]) -> List[Candle]:
    """Read and normalize OHLCV data into Candle objects (oldest first)."""
    df = normalize_ohlcv(data)
    candles = []
    for ts, row in df.iterrows():
        candles.append(Candle(
            time=ts.to_pydatetime(),
            open=float(row['open']),
            high=float(row['high']),
            low=float(row['low']),
            close=float(row['close']),
            volume=float(row['volume']),
        ))
    logger.info("loaded %d candles", len(candles))
    return candles


def candles_to_frame(candles: Iterable[Candle]) -> pd.DataFrame:
    rows = [{'time': c.time, 'open': c.open, 'high': c.high, 'low': c.low,
             'close': c.close, 'volume': c.volume} for c in candles]
    if not rows:
        return pd.DataFrame(columns=OHLCV, index=pd.DatetimeIndex([], name='time'))
    return pd.DataFrame(rows).set_index('time')


# ---------------------------
# Public: save_signals_csv
# ---------------------------
def save_signals_csv(signals: Iterable[Signal], path: Union[str, Path], symbol: str = "UNKNOWN") -> int:
    """
    Append signals to CSV file.
    - Creates parent folder if needed.
    - Writes header (SIGNAL_FIELDNAMES) if file did not exist.
    Returns number of rows written.
    """
    rows = []
    for s in signals:
        row = s.to_dict()
        row['symbol'] = symbol
        row['confirmations'] = ';'.join(row['confirmations'])
        rows.append(row)
    if not rows:
        return 0

    csv_path = Path(path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame(rows, columns=SIGNAL_FIELDNAMES)
    write_header = not csv_path.exists()
    df.to_csv(csv_path, index=False, mode='w' if write_header else 'a',
              header=write_header, encoding='utf-8')
    return len(rows)
