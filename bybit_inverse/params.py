from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import PydanticSerializationError

from .enums import (
    Coin,
    Direction,
    Interval,
    OrderStatus,
    OrderType,
    Period,
    Side,
    SymbolFuture,
    TimeInForce,
    TriggerByFuture,
)
from .errors import EncodingError


class Param(BaseModel):
    """Request parameters for one endpoint.

    Fields left as ``None`` are absent: they are dropped from both the query
    string and the JSON body instead of being sent as null or empty values.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    def to_json(self) -> Dict[str, Any]:
        """Wire-named JSON body for POST endpoints."""
        try:
            return self.model_dump(mode="json", by_alias=True, exclude_none=True)
        except PydanticSerializationError as e:
            raise EncodingError(
                f"json encode for {type(self).__name__}: {e}", param=type(self).__name__
            ) from e

    def to_query(self) -> Dict[str, str]:
        """Wire-named query parameters for GET endpoints, in declaration order."""
        return {key: self._query_value(key, value) for key, value in self.to_json().items()}

    def query_string(self) -> str:
        return urlencode(self.to_query())

    def _query_value(self, key: str, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float, str)):
            return str(value)
        raise EncodingError(
            f"query encode for {type(self).__name__}: unsupported value for {key!r}: {type(value).__name__}",
            param=type(self).__name__,
        )


# ===== Market data =====


class SymbolParam(Param):
    symbol: SymbolFuture


class CoinParam(Param):
    coin: Coin


class ListKlineParam(Param):
    symbol: SymbolFuture
    interval: Interval
    from_: int = Field(alias="from")

    limit: Optional[int] = None


class TradingRecordsParam(Param):
    symbol: SymbolFuture

    from_: Optional[int] = Field(default=None, alias="from")
    limit: Optional[int] = None


class MarkPriceKlineParam(Param):
    symbol: SymbolFuture
    interval: Interval
    from_: int = Field(alias="from")

    limit: Optional[int] = None


class IndexPriceKlineParam(Param):
    symbol: SymbolFuture
    interval: Interval
    from_: int = Field(alias="from")

    limit: Optional[int] = None


class PremiumIndexKlineParam(Param):
    symbol: SymbolFuture
    interval: Interval
    from_: int = Field(alias="from")

    limit: Optional[int] = None


class OpenInterestParam(Param):
    symbol: SymbolFuture
    period: Period

    limit: Optional[int] = None


class BigDealParam(Param):
    symbol: SymbolFuture

    limit: Optional[int] = None


class AccountRatioParam(Param):
    symbol: SymbolFuture
    period: Period

    limit: Optional[int] = None


# ===== Account =====


class CreateOrderParam(Param):
    side: Side
    symbol: SymbolFuture
    order_type: OrderType
    qty: int
    time_in_force: TimeInForce

    price: Optional[float] = None
    take_profit: Optional[float] = None
    stop_loss: Optional[float] = None
    tp_trigger_by: Optional[TriggerByFuture] = None
    sl_trigger_by: Optional[TriggerByFuture] = None
    reduce_only: Optional[bool] = None
    close_on_trigger: Optional[bool] = None
    # Client-assigned id; the exchange rejects a second order reusing it.
    order_link_id: Optional[str] = None


class ListOrderParam(Param):
    symbol: SymbolFuture

    order_status: Optional[OrderStatus] = None
    direction: Optional[Direction] = None
    limit: Optional[int] = None
    cursor: Optional[str] = None


class CancelOrderParam(Param):
    symbol: SymbolFuture

    order_id: Optional[str] = None
    order_link_id: Optional[str] = None


class CancelAllOrderParam(Param):
    symbol: SymbolFuture


class QueryOrderParam(Param):
    symbol: SymbolFuture

    order_id: Optional[str] = None
    order_link_id: Optional[str] = None


class CreateStopOrderParam(Param):
    side: Side
    symbol: SymbolFuture
    order_type: OrderType
    qty: int
    base_price: float
    stop_px: float
    time_in_force: TimeInForce

    price: Optional[float] = None
    trigger_by: Optional[TriggerByFuture] = None
    close_on_trigger: Optional[bool] = None
    order_link_id: Optional[str] = None
    take_profit: Optional[float] = None
    stop_loss: Optional[float] = None
    tp_trigger_by: Optional[TriggerByFuture] = None
    sl_trigger_by: Optional[TriggerByFuture] = None


class SaveLeverageParam(Param):
    symbol: SymbolFuture
    leverage: float
