"""Response envelope and per-endpoint result records.

Field types mirror what the exchange actually sends on each endpoint. The same
logical value is often a JSON number on one endpoint and a numeric string on
another (``price`` is a number in order/create but a string in order/list), so
``str`` fields here are never coerced from numbers and must stay that way.

Enum-like fields decode to the members in ``enums`` when the value is known and
keep the raw string otherwise, so a new status on the exchange side does not
break decoding.
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .enums import (
    Interval,
    OrderStatus,
    OrderType,
    Side,
    SymbolFuture,
    TimeInForce,
    TriggerByFuture,
)

ResultT = TypeVar("ResultT")


def passthrough(enum_cls):
    """Enum member for known values, the raw string for anything else."""

    def coerce(value):
        try:
            return enum_cls(value)
        except ValueError:
            return value

    return Annotated[Union[enum_cls, str], BeforeValidator(coerce)]


SymbolValue = passthrough(SymbolFuture)
SideValue = passthrough(Side)
OrderTypeValue = passthrough(OrderType)
TimeInForceValue = passthrough(TimeInForce)
OrderStatusValue = passthrough(OrderStatus)
TriggerByValue = passthrough(TriggerByFuture)
IntervalValue = passthrough(Interval)


class Record(BaseModel):
    # Number fields reject numeric strings; str fields reject numbers.
    model_config = ConfigDict(frozen=True, populate_by_name=True, strict=True)


class CommonResponse(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow")

    ret_code: int
    ret_msg: str
    ext_code: Optional[str] = ""
    ext_info: Any = None
    time_now: Optional[str] = None
    rate_limit_status: Optional[int] = None
    rate_limit_reset_ms: Optional[int] = None
    rate_limit: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.ret_code == 0


class Response(CommonResponse, Generic[ResultT]):
    result: ResultT

    def unwrap(self) -> ResultT:
        return self.result


# ===== Market data =====


class OrderBookResult(Record):
    symbol: SymbolValue
    price: str
    size: float
    side: SideValue


class ListKlineResult(Record):
    symbol: SymbolValue
    interval: IntervalValue
    open_time: int
    open: str
    high: str
    low: str
    close: str
    volume: str
    turnover: str


class TickersResult(Record):
    symbol: SymbolValue
    bid_price: str
    ask_price: str
    last_price: str
    last_tick_direction: str
    prev_price_24h: str
    price_24h_pcnt: str
    high_price_24h: str
    low_price_24h: str
    prev_price_1h: str
    price_1h_pcnt: str
    mark_price: str
    index_price: str
    open_interest: float
    open_value: str
    total_turnover: str
    turnover_24h: str
    total_volume: float
    volume_24h: float
    funding_rate: str
    predicted_funding_rate: str
    next_funding_time: str
    countdown_hour: int
    delivery_fee_rate: str = ""
    predicted_delivery_price: str = ""
    delivery_time: str = ""


class TradingRecordsResult(Record):
    id: int
    symbol: SymbolValue
    price: float
    qty: float
    side: SideValue
    time: str


class LeverageFilter(Record):
    min_leverage: float
    max_leverage: float
    leverage_step: str


class PriceFilter(Record):
    min_price: str
    max_price: str
    tick_size: str


class LotSizeFilter(Record):
    max_trading_qty: float
    min_trading_qty: float
    qty_step: float


class SymbolsResult(Record):
    # Lists every contract on the exchange, not only inverse perpetuals.
    name: str
    alias: str
    status: str
    base_currency: str
    quote_currency: str
    price_scale: int
    taker_fee: str
    maker_fee: str
    leverage_filter: LeverageFilter
    price_filter: PriceFilter
    lot_size_filter: LotSizeFilter


class MarkPriceKlineResult(Record):
    id: int
    symbol: SymbolValue
    period: IntervalValue
    start_at: int
    open: float
    high: float
    low: float
    close: float


class IndexPriceKlineResult(Record):
    symbol: SymbolValue
    period: IntervalValue
    open_time: int
    open: str
    high: str
    low: str
    close: str


class PremiumIndexKlineResult(Record):
    symbol: SymbolValue
    period: IntervalValue
    open_time: int
    open: str
    high: str
    low: str
    close: str


class OpenInterestResult(Record):
    open_interest: float
    timestamp: int
    symbol: SymbolValue


class BigDealResult(Record):
    symbol: SymbolValue
    side: SideValue
    timestamp: int
    value: float


class AccountRatioResult(Record):
    symbol: SymbolValue
    buy_ratio: float
    sell_ratio: float
    timestamp: int


# ===== Account =====


class OrderResult(Record):
    """Order snapshot returned by order/create and order/cancel."""

    user_id: int
    order_id: str
    symbol: SymbolValue
    side: SideValue
    order_type: OrderTypeValue
    price: float
    qty: float
    time_in_force: TimeInForceValue
    order_status: OrderStatusValue
    last_exec_time: float
    last_exec_price: float
    leaves_qty: float
    cum_exec_qty: float
    cum_exec_value: float
    cum_exec_fee: float
    reject_reason: str
    order_link_id: str
    created_at: str
    updated_at: str


class CreateOrderResult(OrderResult):
    pass


class CancelOrderResult(OrderResult):
    pass


class ListOrder(Record):
    user_id: int
    symbol: SymbolValue
    side: SideValue
    order_type: OrderTypeValue
    price: str
    qty: str
    time_in_force: TimeInForceValue
    order_status: OrderStatusValue
    leaves_qty: str
    leaves_value: str
    cum_exec_qty: str
    cum_exec_value: str
    cum_exec_fee: str
    reject_reason: str
    order_link_id: str
    created_at: str
    order_id: str
    take_profit: str = ""
    stop_loss: str = ""
    tp_trigger_by: Optional[TriggerByValue] = None
    sl_trigger_by: Optional[TriggerByValue] = None


class ListOrderResult(Record):
    # The exchange sends null instead of an empty list when nothing matches.
    data: Optional[List[ListOrder]] = None
    cursor: str = ""


class CancelAllOrderResult(Record):
    cl_ord_id: str = Field(alias="clOrdID")
    order_link_id: str
    user_id: int
    symbol: SymbolValue
    side: SideValue
    order_type: OrderTypeValue
    price: str
    qty: float
    time_in_force: TimeInForceValue
    create_type: str
    cancel_type: str
    order_status: OrderStatusValue
    leaves_qty: float
    leaves_value: str
    created_at: str
    updated_at: str
    cross_status: str
    cross_seq: int


class QueryOrderResult(Record):
    user_id: int
    position_idx: int
    symbol: SymbolValue
    side: SideValue
    order_type: OrderTypeValue
    price: str
    qty: float
    time_in_force: TimeInForceValue
    order_status: OrderStatusValue
    # Undocumented shape; kept as-is.
    ext_fields: Dict[str, Any] = Field(default_factory=dict)
    last_exec_time: str
    leaves_qty: int
    leaves_value: str
    cum_exec_qty: int
    cum_exec_value: str
    cum_exec_fee: str
    reject_reason: str
    cancel_type: str
    order_link_id: str
    created_at: str
    updated_at: str
    order_id: str
    take_profit: str = ""
    stop_loss: str = ""
    tp_trigger_by: Optional[TriggerByValue] = None
    sl_trigger_by: Optional[TriggerByValue] = None


class CreateStopOrderResult(Record):
    user_id: int
    symbol: SymbolValue
    side: SideValue
    order_type: OrderTypeValue
    price: str
    qty: str
    time_in_force: TimeInForceValue
    remark: str
    leaves_qty: str
    leaves_value: str
    stop_px: str
    reject_reason: str
    stop_order_id: str
    order_link_id: str
    trigger_by: TriggerByValue
    base_price: str
    created_at: str
    updated_at: str
    tp_trigger_by: Optional[TriggerByValue] = None
    sl_trigger_by: Optional[TriggerByValue] = None
    take_profit: str = ""
    stop_loss: str = ""


class ListPositionResult(Record):
    id: int
    user_id: int
    risk_id: int
    symbol: SymbolValue
    side: SideValue  # "None" when flat
    size: float
    position_value: str
    entry_price: str
    is_isolated: bool
    auto_add_margin: float
    leverage: str
    effective_leverage: str
    position_margin: str
    liq_price: str
    bust_price: str
    occ_closing_fee: str
    occ_funding_fee: str
    take_profit: str
    stop_loss: str
    trailing_stop: str
    position_status: str
    deleverage_indicator: int
    oc_calc_data: str
    order_margin: str
    wallet_balance: str
    realised_pnl: str
    unrealised_pnl: float
    cum_realised_pnl: str
    cross_seq: float
    position_seq: float
    created_at: str
    updated_at: str


class ListPositionsResult(Record):
    is_valid: bool
    data: ListPositionResult


# ===== Wallet =====


class BalanceResult(Record):
    equity: float
    available_balance: float
    used_margin: float
    order_margin: float
    position_margin: float
    occ_closing_fee: float
    occ_funding_fee: float
    wallet_balance: float
    realised_pnl: float
    unrealised_pnl: float
    cum_realised_pnl: float
    given_cash: float
    service_cash: float


# ===== Envelopes =====


class OrderBookResponse(Response[List[OrderBookResult]]):
    pass


class ListKlineResponse(Response[List[ListKlineResult]]):
    pass


class TickersResponse(Response[List[TickersResult]]):
    pass


class TradingRecordsResponse(Response[List[TradingRecordsResult]]):
    pass


class SymbolsResponse(Response[List[SymbolsResult]]):
    pass


class MarkPriceKlineResponse(Response[List[MarkPriceKlineResult]]):
    pass


class IndexPriceKlineResponse(Response[List[IndexPriceKlineResult]]):
    pass


class PremiumIndexKlineResponse(Response[List[PremiumIndexKlineResult]]):
    pass


class OpenInterestResponse(Response[List[OpenInterestResult]]):
    pass


class BigDealResponse(Response[List[BigDealResult]]):
    pass


class AccountRatioResponse(Response[List[AccountRatioResult]]):
    pass


class CreateOrderResponse(Response[CreateOrderResult]):
    pass


class ListOrderResponse(Response[ListOrderResult]):
    pass


class CancelOrderResponse(Response[CancelOrderResult]):
    pass


class CancelAllOrderResponse(Response[List[CancelAllOrderResult]]):
    pass


class QueryOrderResponse(Response[List[QueryOrderResult]]):
    pass


class CreateStopOrderResponse(Response[CreateStopOrderResult]):
    pass


class ListPositionResponse(Response[ListPositionResult]):
    pass


class ListPositionsResponse(Response[List[ListPositionsResult]]):
    pass


class SaveLeverageResponse(Response[float]):
    pass


class BalanceResponse(Response[Dict[str, BalanceResult]]):
    pass
