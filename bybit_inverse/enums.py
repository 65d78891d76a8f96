from __future__ import annotations

from enum import Enum


class SymbolFuture(str, Enum):
    BTCUSD = "BTCUSD"
    ETHUSD = "ETHUSD"
    EOSUSD = "EOSUSD"
    XRPUSD = "XRPUSD"
    DOTUSD = "DOTUSD"
    ADAUSD = "ADAUSD"
    LTCUSD = "LTCUSD"
    BITUSD = "BITUSD"
    SOLUSD = "SOLUSD"
    MANAUSD = "MANAUSD"


class Coin(str, Enum):
    BTC = "BTC"
    ETH = "ETH"
    EOS = "EOS"
    XRP = "XRP"
    DOT = "DOT"
    ADA = "ADA"
    LTC = "LTC"
    BIT = "BIT"
    SOL = "SOL"
    MANA = "MANA"
    USDT = "USDT"


class Side(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class OrderType(str, Enum):
    LIMIT = "Limit"
    MARKET = "Market"


class TimeInForce(str, Enum):
    GOOD_TILL_CANCEL = "GoodTillCancel"
    IMMEDIATE_OR_CANCEL = "ImmediateOrCancel"
    FILL_OR_KILL = "FillOrKill"
    POST_ONLY = "PostOnly"


class OrderStatus(str, Enum):
    CREATED = "Created"
    REJECTED = "Rejected"
    NEW = "New"
    PARTIALLY_FILLED = "PartiallyFilled"
    FILLED = "Filled"
    CANCELLED = "Cancelled"
    PENDING_CANCEL = "PendingCancel"
    # conditional orders
    UNTRIGGERED = "Untriggered"
    DEACTIVATED = "Deactivated"
    TRIGGERED = "Triggered"
    ACTIVE = "Active"


class TriggerByFuture(str, Enum):
    LAST_PRICE = "LastPrice"
    INDEX_PRICE = "IndexPrice"
    MARK_PRICE = "MarkPrice"
    UNKNOWN = "UNKNOWN"


class Direction(str, Enum):
    PREV = "prev"
    NEXT = "next"


class Interval(str, Enum):
    MIN_1 = "1"
    MIN_3 = "3"
    MIN_5 = "5"
    MIN_15 = "15"
    MIN_30 = "30"
    MIN_60 = "60"
    MIN_120 = "120"
    MIN_240 = "240"
    MIN_360 = "360"
    MIN_720 = "720"
    DAY = "D"
    WEEK = "W"
    MONTH = "M"


class Period(str, Enum):
    """Aggregation window for open-interest and account-ratio statistics."""

    MIN_5 = "5min"
    MIN_15 = "15min"
    MIN_30 = "30min"
    HOUR_1 = "1h"
    HOUR_4 = "4h"
    DAY_1 = "1d"
