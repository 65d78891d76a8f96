from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional, Type, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from .client import BybitClient
from .enums import Coin, SymbolFuture
from .errors import APIError, DecodingError, EncodingError, TransportError, ValidationError
from .models import (
    AccountRatioResponse,
    BalanceResponse,
    BigDealResponse,
    CancelAllOrderResponse,
    CancelOrderResponse,
    CommonResponse,
    CreateOrderResponse,
    CreateStopOrderResponse,
    IndexPriceKlineResponse,
    ListKlineResponse,
    ListOrderResponse,
    ListPositionResponse,
    ListPositionsResponse,
    MarkPriceKlineResponse,
    OpenInterestResponse,
    OrderBookResponse,
    PremiumIndexKlineResponse,
    QueryOrderResponse,
    SaveLeverageResponse,
    SymbolsResponse,
    TickersResponse,
    TradingRecordsResponse,
)
from .params import (
    AccountRatioParam,
    BigDealParam,
    CancelAllOrderParam,
    CancelOrderParam,
    CoinParam,
    CreateOrderParam,
    CreateStopOrderParam,
    IndexPriceKlineParam,
    ListKlineParam,
    ListOrderParam,
    MarkPriceKlineParam,
    OpenInterestParam,
    Param,
    PremiumIndexKlineParam,
    QueryOrderParam,
    SaveLeverageParam,
    SymbolParam,
    TradingRecordsParam,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=CommonResponse)
Send = Callable[..., Dict[str, Any]]


class FutureInversePerpetualService:
    """Inverse perpetual endpoints of the Bybit v2 REST API.

    Every method encodes its parameters, makes one transport call and returns
    the decoded response envelope. Nothing is retried or cached here; the
    ``timeout`` keyword is handed to the transport untouched.
    """

    def __init__(self, client: BybitClient):
        self.client = client

    # ===== Market data =====

    def order_book(self, symbol: Union[SymbolFuture, str], *, timeout: Optional[float] = None) -> OrderBookResponse:
        param = SymbolParam(symbol=symbol)
        return self._get_publicly("/v2/public/orderBook/L2", param, OrderBookResponse, timeout)

    def list_kline(self, param: ListKlineParam, *, timeout: Optional[float] = None) -> ListKlineResponse:
        return self._get_publicly("/v2/public/kline/list", param, ListKlineResponse, timeout)

    def tickers(self, symbol: Union[SymbolFuture, str], *, timeout: Optional[float] = None) -> TickersResponse:
        param = SymbolParam(symbol=symbol)
        return self._get_publicly("/v2/public/tickers", param, TickersResponse, timeout)

    def trading_records(
        self, param: TradingRecordsParam, *, timeout: Optional[float] = None
    ) -> TradingRecordsResponse:
        return self._get_publicly("/v2/public/trading-records", param, TradingRecordsResponse, timeout)

    def symbols(self, *, timeout: Optional[float] = None) -> SymbolsResponse:
        return self._get_publicly("/v2/public/symbols", None, SymbolsResponse, timeout)

    def mark_price_kline(
        self, param: MarkPriceKlineParam, *, timeout: Optional[float] = None
    ) -> MarkPriceKlineResponse:
        return self._get_publicly("/v2/public/mark-price-kline", param, MarkPriceKlineResponse, timeout)

    def index_price_kline(
        self, param: IndexPriceKlineParam, *, timeout: Optional[float] = None
    ) -> IndexPriceKlineResponse:
        return self._get_publicly("/v2/public/index-price-kline", param, IndexPriceKlineResponse, timeout)

    def premium_index_kline(
        self, param: PremiumIndexKlineParam, *, timeout: Optional[float] = None
    ) -> PremiumIndexKlineResponse:
        return self._get_publicly("/v2/public/premium-index-kline", param, PremiumIndexKlineResponse, timeout)

    def open_interest(self, param: OpenInterestParam, *, timeout: Optional[float] = None) -> OpenInterestResponse:
        return self._get_publicly("/v2/public/open-interest", param, OpenInterestResponse, timeout)

    def big_deal(self, param: BigDealParam, *, timeout: Optional[float] = None) -> BigDealResponse:
        return self._get_publicly("/v2/public/big-deal", param, BigDealResponse, timeout)

    def account_ratio(self, param: AccountRatioParam, *, timeout: Optional[float] = None) -> AccountRatioResponse:
        return self._get_publicly("/v2/public/account-ratio", param, AccountRatioResponse, timeout)

    # ===== Account =====

    def create_order(self, param: CreateOrderParam, *, timeout: Optional[float] = None) -> CreateOrderResponse:
        """Place an active order.

        Not idempotent: repeating the call places another order unless
        ``order_link_id`` is set, in which case the exchange rejects the duplicate.
        """
        return self._post_json("/v2/private/order/create", param, CreateOrderResponse, timeout)

    def list_order(self, param: ListOrderParam, *, timeout: Optional[float] = None) -> ListOrderResponse:
        return self._get_privately("/v2/private/order/list", param, ListOrderResponse, timeout)

    def cancel_order(self, param: CancelOrderParam, *, timeout: Optional[float] = None) -> CancelOrderResponse:
        path = "/v2/private/order/cancel"
        if param.order_id is None and param.order_link_id is None:
            raise ValidationError(
                "either order_id or order_link_id needed", endpoint=path, param=type(param).__name__
            )
        return self._post_json(path, param, CancelOrderResponse, timeout)

    def cancel_all_order(
        self, param: CancelAllOrderParam, *, timeout: Optional[float] = None
    ) -> CancelAllOrderResponse:
        return self._post_json("/v2/private/order/cancelAll", param, CancelAllOrderResponse, timeout)

    def query_order(self, param: QueryOrderParam, *, timeout: Optional[float] = None) -> QueryOrderResponse:
        """Query one order by id, or every active order of the symbol when no id is set."""
        return self._get_privately("/v2/private/order", param, QueryOrderResponse, timeout)

    def create_stop_order(
        self, param: CreateStopOrderParam, *, timeout: Optional[float] = None
    ) -> CreateStopOrderResponse:
        return self._post_json("/v2/private/stop-order/create", param, CreateStopOrderResponse, timeout)

    def list_position(
        self, symbol: Union[SymbolFuture, str], *, timeout: Optional[float] = None
    ) -> ListPositionResponse:
        param = SymbolParam(symbol=symbol)
        return self._get_privately("/v2/private/position/list", param, ListPositionResponse, timeout)

    def list_positions(self, *, timeout: Optional[float] = None) -> ListPositionsResponse:
        """All positions of the account; the same path without a symbol."""
        return self._get_privately("/v2/private/position/list", None, ListPositionsResponse, timeout)

    def save_leverage(self, param: SaveLeverageParam, *, timeout: Optional[float] = None) -> SaveLeverageResponse:
        return self._post_json("/v2/private/position/leverage/save", param, SaveLeverageResponse, timeout)

    # ===== Wallet =====

    def balance(self, coin: Union[Coin, str], *, timeout: Optional[float] = None) -> BalanceResponse:
        param = CoinParam(coin=coin)
        return self._get_privately("/v2/private/wallet/balance", param, BalanceResponse, timeout)

    # ===== Internals =====

    def _get_publicly(
        self, path: str, param: Optional[Param], response_type: Type[ResponseT], timeout: Optional[float]
    ) -> ResponseT:
        query = self._encode(path, param, Param.to_query)
        return self._execute("GET", self.client.get_publicly, path, query, param, response_type, timeout)

    def _get_privately(
        self, path: str, param: Optional[Param], response_type: Type[ResponseT], timeout: Optional[float]
    ) -> ResponseT:
        query = self._encode(path, param, Param.to_query)
        return self._execute("GET", self.client.get_privately, path, query, param, response_type, timeout)

    def _post_json(
        self, path: str, param: Param, response_type: Type[ResponseT], timeout: Optional[float]
    ) -> ResponseT:
        body = self._encode(path, param, Param.to_json)
        return self._execute("POST", self.client.post_json, path, body, param, response_type, timeout)

    def _encode(
        self, path: str, param: Optional[Param], encoder: Callable[[Param], Dict[str, Any]]
    ) -> Dict[str, Any]:
        if param is None:
            return {}
        try:
            return encoder(param)
        except EncodingError as e:
            raise EncodingError(f"{path} ({e.param}): {e}", endpoint=path, param=e.param) from e

    def _execute(
        self,
        verb: str,
        send: Send,
        path: str,
        payload: Dict[str, Any],
        param: Optional[Param],
        response_type: Type[ResponseT],
        timeout: Optional[float],
    ) -> ResponseT:
        param_name = type(param).__name__ if param is not None else None
        logger.debug("%s %s %s", verb, path, payload)

        try:
            data = send(path, payload, timeout=timeout)
        except APIError:
            raise
        except TransportError as e:
            raise TransportError(f"{path} ({param_name}): {e}", endpoint=path, param=param_name) from e

        try:
            envelope = CommonResponse.model_validate(data)
        except PydanticValidationError as e:
            raise DecodingError(
                f"decode response envelope from {path}: {e}", endpoint=path, param=param_name
            ) from e

        if not envelope.ok:
            logger.warning("%s returned ret_code=%s: %s", path, envelope.ret_code, envelope.ret_msg)
            raise APIError(
                envelope.ret_msg,
                ret_code=envelope.ret_code,
                ext_code=envelope.ext_code or "",
                endpoint=path,
                param=param_name,
            )

        try:
            return response_type.model_validate(data)
        except PydanticValidationError as e:
            raise DecodingError(
                f"decode {response_type.__name__} from {path}: {e}", endpoint=path, param=param_name
            ) from e
