from __future__ import annotations

import csv
import logging
import math
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Sequence

from tradejournal.services.records import TradeInput
from tradejournal.utils.time import parse_permissive

if TYPE_CHECKING:
    from tradejournal.services.trade_store import TradeStore

logger = logging.getLogger(__name__)

BROKER_FORMATS: Dict[str, Dict[str, str]] = {
    "generic": {
        "name": "Generic CSV",
        "description": "Standard CSV with common column names",
    },
    "metatrader": {
        "name": "MetaTrader 4/5",
        "description": "MT4/MT5 trading history export",
    },
    "tradingview": {
        "name": "TradingView",
        "description": "TradingView paper trading export",
    },
    "thinkorswim": {
        "name": "TD Ameritrade / thinkorswim",
        "description": "thinkorswim trading activity",
    },
    "ibkr": {
        "name": "Interactive Brokers",
        "description": "IBKR Flex Query or Activity Statement",
    },
    "oanda": {
        "name": "OANDA",
        "description": "OANDA fxTrade history",
    },
}

# Header substrings per logical field. The first header column containing any
# alias wins, so the order of the columns in the file decides ambiguities.
COLUMN_ALIASES: Dict[str, tuple[str, ...]] = {
    "date": ("date", "time", "open time", "entry time", "trade date"),
    "symbol": ("symbol", "instrument", "ticker"),
    "side": ("side", "type", "direction"),
    "entry_price": ("entry", "open price"),
    "exit_price": ("exit", "close price"),
    "quantity": ("quantity", "volume", "lots"),
    "pnl": ("pnl", "profit", "p/l"),
    "commission": ("commission", "fee"),
}

NUMERIC_DEFAULTS: Dict[str, float] = {
    "entry_price": 0.0,
    "exit_price": 0.0,
    "quantity": 1.0,
    "pnl": 0.0,
    "commission": 0.0,
}

MIN_ROW_VALUES = 3
DEFAULT_DURATION_MINUTES = 60
UNKNOWN_SYMBOL = "UNKNOWN"
NO_TRADES_MESSAGE = "No valid trades found in CSV"

# Longest leading decimal literal; trailing units such as " USD" are ignored.
NUMBER_PREFIX = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class InvalidDateError(ValueError):
    def __init__(self, raw: str) -> None:
        super().__init__(f"Invalid date format {raw!r}")
        self.raw = raw


@dataclass
class NormalizeResult:
    trades: List[TradeInput] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


@dataclass
class ImportResult:
    success: bool
    count: int
    errors: List[str] = field(default_factory=list)


def _clean_values(row: Sequence[str]) -> List[str]:
    return [value.strip().strip('"').strip() for value in row]


def _split_line(line: str) -> List[str]:
    """Tokenize a single CSV line; quotes never span into the next line."""

    return _clean_values(next(csv.reader([line], skipinitialspace=True), []))


def detect_columns(headers: Sequence[str]) -> Dict[str, int]:
    """Return the column index of every logical field, -1 when absent."""

    columns: Dict[str, int] = {}
    for name, aliases in COLUMN_ALIASES.items():
        columns[name] = next(
            (idx for idx, header in enumerate(headers) if any(alias in header for alias in aliases)),
            -1,
        )
    return columns


def _value_at(values: Sequence[str], index: int) -> str:
    if 0 <= index < len(values):
        return values[index]
    return ""


def _parse_number(raw: str, name: str) -> float:
    default = NUMERIC_DEFAULTS[name]
    match = NUMBER_PREFIX.match(raw or "")
    number = float(match.group(0)) if match else math.nan
    if not math.isfinite(number):
        logger.debug("Defaulting %s=%r to %s", name, raw, default)
        return default
    return number


def _parse_side(raw: str) -> str:
    token = raw.lower()
    if "sell" in token or "short" in token:
        return "short"
    return "long"


def _parse_row(values: Sequence[str], columns: Dict[str, int]) -> TradeInput:
    raw_date = _value_at(values, columns["date"] if columns["date"] >= 0 else 0)
    try:
        timestamp = parse_permissive(raw_date)
    except (ValueError, OverflowError) as exc:
        raise InvalidDateError(raw_date) from exc

    symbol = _value_at(values, columns["symbol"] if columns["symbol"] >= 0 else 1) or UNKNOWN_SYMBOL
    raw_side = _value_at(values, columns["side"]) if columns["side"] >= 0 else "long"
    numbers = {name: _parse_number(_value_at(values, columns[name]), name) for name in NUMERIC_DEFAULTS}

    return TradeInput(
        date=timestamp.date(),
        symbol=symbol,
        side=_parse_side(raw_side),
        entry_price=numbers["entry_price"],
        exit_price=numbers["exit_price"],
        quantity=abs(numbers["quantity"]),
        pnl=numbers["pnl"],
        commission=abs(numbers["commission"]),
        duration=DEFAULT_DURATION_MINUTES,
        entry_time=timestamp,
    )


def normalize(csv_text: str) -> NormalizeResult:
    """Turn a broker CSV export into trade inputs plus row-level errors.

    Each line is tokenized on its own, so a malformed line only costs that
    row. Unparseable dates and unexpected row failures are reported per row
    and the row is skipped. Unparseable numbers fall back to
    ``NUMERIC_DEFAULTS`` without an error.
    """

    result = NormalizeResult()
    lines = (csv_text or "").splitlines()

    if lines:
        headers = [value.lower() for value in _clean_values(lines[0].split(","))]
        columns = detect_columns(headers)
        logger.debug("Detected CSV columns: %s", columns)

        for row_number, line in enumerate(lines[1:], start=2):
            if not line.strip():
                continue
            try:
                values = _split_line(line)
                if len(values) < MIN_ROW_VALUES:
                    continue
                result.trades.append(_parse_row(values, columns))
            except InvalidDateError as exc:
                result.errors.append(f'Row {row_number}: Invalid date format "{exc.raw}"')
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to parse CSV row %d: %s", row_number, exc)
                result.errors.append(f"Row {row_number}: Failed to parse row")

    if not result.trades and not result.errors:
        result.errors.append(NO_TRADES_MESSAGE)
    return result


def import_csv(store: "TradeStore", csv_text: str, broker_format: str = "generic") -> ImportResult:
    """Normalize ``csv_text`` and append the resulting trades to ``store``."""

    if broker_format not in BROKER_FORMATS:
        raise ValueError(f"Unknown broker format {broker_format!r}")

    normalized = normalize(csv_text)
    if normalized.trades:
        store.add_many(normalized.trades)

    count = len(normalized.trades)
    logger.info(
        "CSV import (%s): %d trades imported, %d row errors",
        broker_format,
        count,
        len(normalized.errors),
    )
    for error in normalized.errors:
        logger.warning("CSV import: %s", error)
    return ImportResult(success=count > 0, count=count, errors=normalized.errors)


__all__ = [
    "BROKER_FORMATS",
    "COLUMN_ALIASES",
    "ImportResult",
    "InvalidDateError",
    "NormalizeResult",
    "detect_columns",
    "import_csv",
    "normalize",
]
