from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Sequence, Tuple, Union

from tradejournal.services.records import Trade

PNL_MODES = ("net", "gross")

KeyResult = Union[str, Iterable[str]]
KeyFn = Callable[[Trade], KeyResult]

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# (exclusive upper bound, label); values above the last bound get the overflow label.
DURATION_BUCKETS: Tuple[Tuple[float, str], ...] = (
    (1, "Under 1 min"),
    (5, "1-5 min"),
    (15, "5-15 min"),
    (30, "15-30 min"),
    (60, "30-60 min"),
    (120, "1-2 hours"),
)
DURATION_OVERFLOW = "2 hours+"

PRICE_BUCKETS: Tuple[Tuple[float, str], ...] = (
    (50, "$0 - $50"),
    (100, "$50 - $100"),
    (200, "$100 - $200"),
    (500, "$200 - $500"),
)
PRICE_OVERFLOW = "$500+"

VOLUME_BUCKETS: Tuple[Tuple[float, str], ...] = (
    (0.1, "0 - 0.1"),
    (0.5, "0.1 - 0.5"),
    (1.0, "0.5 - 1.0"),
    (2.0, "1.0 - 2.0"),
)
VOLUME_OVERFLOW = "2.0+"

NO_SETUP = "No Setup"
DEFAULT_SECTOR = "Stocks"
SECTOR_BY_SYMBOL: Dict[str, str] = {
    "EURUSD": "Forex",
    "GBPUSD": "Forex",
    "USDJPY": "Forex",
    "USDCHF": "Forex",
    "USDCAD": "Forex",
    "AUDUSD": "Forex",
    "NZDUSD": "Forex",
    "EURGBP": "Forex",
    "EURJPY": "Forex",
    "GBPJPY": "Forex",
    "BTCUSD": "Crypto",
    "ETHUSD": "Crypto",
    "SOLUSD": "Crypto",
    "XRPUSD": "Crypto",
    "BTCUSDT": "Crypto",
    "ETHUSDT": "Crypto",
    "US30": "Indices",
    "NAS100": "Indices",
    "SPX500": "Indices",
    "US500": "Indices",
    "GER40": "Indices",
    "UK100": "Indices",
    "JP225": "Indices",
    "XAUUSD": "Commodities",
    "XAGUSD": "Commodities",
    "USOIL": "Commodities",
    "UKOIL": "Commodities",
    "NATGAS": "Commodities",
}


@dataclass(frozen=True)
class ReportRow:
    label: str
    trades: int
    pnl: float


@dataclass(frozen=True)
class SummaryRow:
    label: str
    net_profit: float
    win_rate: float
    total_profits: float
    total_loss: float
    trades: int
    volume: float


def _check_pnl_mode(pnl_mode: str) -> None:
    if pnl_mode not in PNL_MODES:
        raise ValueError(f"Unknown P&L mode {pnl_mode!r}, expected one of {PNL_MODES}")


def trade_pnl(trade: Trade, pnl_mode: str = "net") -> float:
    if pnl_mode == "gross":
        return trade.pnl
    return trade.pnl - trade.commission


def _labels(key_fn: KeyFn, trade: Trade) -> List[str]:
    key = key_fn(trade)
    if isinstance(key, str):
        return [key]
    return list(key)


def _group(trades: Sequence[Trade], key_fn: KeyFn) -> Dict[str, List[Trade]]:
    groups: Dict[str, List[Trade]] = {}
    for trade in trades:
        for label in _labels(key_fn, trade):
            groups.setdefault(label, []).append(trade)
    return groups


def aggregate(trades: Sequence[Trade], key_fn: KeyFn, pnl_mode: str = "net") -> List[ReportRow]:
    """Group trades by ``key_fn`` and sum their P&L, best group first.

    ``key_fn`` may return several labels, in which case the trade counts fully
    towards each of them.
    """

    _check_pnl_mode(pnl_mode)
    rows = [
        ReportRow(
            label=label,
            trades=len(members),
            pnl=sum(trade_pnl(trade, pnl_mode) for trade in members),
        )
        for label, members in _group(trades, key_fn).items()
    ]
    rows.sort(key=lambda row: row.pnl, reverse=True)
    return rows


def summarize(trades: Sequence[Trade], key_fn: KeyFn, pnl_mode: str = "net") -> List[SummaryRow]:
    _check_pnl_mode(pnl_mode)
    rows: List[SummaryRow] = []
    for label, members in _group(trades, key_fn).items():
        pnls = [trade_pnl(trade, pnl_mode) for trade in members]
        wins = sum(1 for trade in members if trade.pnl > 0)
        rows.append(
            SummaryRow(
                label=label,
                net_profit=sum(pnls),
                win_rate=wins / len(members) * 100,
                total_profits=sum(pnl for pnl in pnls if pnl > 0),
                total_loss=abs(sum(pnl for pnl in pnls if pnl < 0)),
                trades=len(members),
                volume=sum(trade.quantity for trade in members),
            )
        )
    rows.sort(key=lambda row: row.net_profit, reverse=True)
    return rows


def _bucket(value: float, buckets: Tuple[Tuple[float, str], ...], overflow: str) -> str:
    for upper, label in buckets:
        if value < upper:
            return label
    return overflow


def by_symbol(trade: Trade) -> str:
    return trade.symbol


def by_weekday(trade: Trade) -> str:
    return WEEKDAYS[trade.date.weekday()]


def by_week(trade: Trade) -> str:
    return f"Week {trade.date.isocalendar()[1]}"


def by_month(trade: Trade) -> str:
    return MONTHS[trade.date.month - 1]


def by_hour(trade: Trade) -> str:
    hour = trade.entry_time.hour if trade.entry_time is not None else 0
    return f"{hour}:00"


def by_duration(trade: Trade) -> str:
    return _bucket(trade.duration, DURATION_BUCKETS, DURATION_OVERFLOW)


def by_price(trade: Trade) -> str:
    return _bucket(trade.entry_price, PRICE_BUCKETS, PRICE_OVERFLOW)


def by_volume(trade: Trade) -> str:
    return _bucket(trade.quantity, VOLUME_BUCKETS, VOLUME_OVERFLOW)


def by_setup(trade: Trade) -> str:
    return trade.setup or NO_SETUP


def by_sector(trade: Trade) -> str:
    return SECTOR_BY_SYMBOL.get(trade.symbol, DEFAULT_SECTOR)


def by_tag(trade: Trade) -> Tuple[str, ...]:
    return trade.tags


def by_mistake(trade: Trade) -> Tuple[str, ...]:
    return trade.mistakes


@dataclass(frozen=True)
class ReportCategory:
    id: str
    label: str
    title: str
    key_fn: KeyFn


REPORT_CATEGORIES: Dict[str, ReportCategory] = {
    category.id: category
    for category in (
        ReportCategory("days", "DAYS", "DAY", by_weekday),
        ReportCategory("weeks", "WEEKS", "WEEK", by_week),
        ReportCategory("months", "MONTHS", "MONTH", by_month),
        ReportCategory("time", "TIME", "HOUR", by_hour),
        ReportCategory("duration", "TRADE DURATION", "INTRADAY DURATION", by_duration),
        ReportCategory("price", "PRICE", "PRICE RANGE", by_price),
        ReportCategory("volume", "VOLUME", "VOLUME", by_volume),
        ReportCategory("instrument", "INSTRUMENT", "SYMBOLS", by_symbol),
        ReportCategory("sector", "SECTOR", "SECTOR", by_sector),
        ReportCategory("setups", "SETUPS", "SETUP", by_setup),
        ReportCategory("mistakes", "MISTAKES", "MISTAKE", by_mistake),
        ReportCategory("tags", "TAGS", "TAG", by_tag),
    )
}
DEFAULT_CATEGORY = "time"
