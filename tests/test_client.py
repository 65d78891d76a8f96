from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import Mock, patch

import pytest
import requests

from bybit_inverse import (
    BybitClient,
    BybitClientConfig,
    FutureInversePerpetualService,
    Settings,
    TransportError,
)
from bybit_inverse.client import sign
from bybit_inverse.params import CreateOrderParam, ListOrderParam

UTC = timezone.utc


@pytest.fixture
def bybit_config():
    """Bybit client configuration for testnet."""
    return BybitClientConfig(
        testnet=True,
        api_key="test_key",
        api_secret="test_secret",
        max_retries=2,
        retry_delay_ms=50,
    )


def ok_response(result):
    mock_response = Mock()
    mock_response.json.return_value = {
        "ret_code": 0,
        "ret_msg": "OK",
        "ext_code": "",
        "ext_info": "",
        "result": result,
        "time_now": "1577444332.192859",
    }
    mock_response.raise_for_status.return_value = None
    return mock_response


class TestBybitClientConfig:
    """Client construction."""

    def test_base_url(self, bybit_config):
        """Testnet flag and override select the base URL."""
        assert BybitClient(bybit_config).base_url == "https://api-testnet.bybit.com"
        assert BybitClient(BybitClientConfig(testnet=False)).base_url == "https://api.bybit.com"
        assert BybitClient(BybitClientConfig(base_url="http://localhost:8080/")).base_url == "http://localhost:8080"

    def test_from_settings(self, monkeypatch):
        """Settings read from BYBIT_* environment variables."""
        monkeypatch.setenv("BYBIT_API_KEY", "env_key")
        monkeypatch.setenv("BYBIT_API_SECRET", "env_secret")
        monkeypatch.setenv("BYBIT_TESTNET", "false")
        monkeypatch.setenv("BYBIT_TIMEOUT_SEC", "3.5")

        config = BybitClientConfig.from_settings(Settings(_env_file=None))

        assert config.api_key == "env_key"
        assert config.api_secret == "env_secret"
        assert config.testnet is False
        assert config.timeout_sec == 3.5


class TestSigning:
    """Request signing."""

    def test_sign_sorts_keys(self):
        """Signature covers sorted k=v pairs and skips sign itself."""
        a = sign("secret", {"symbol": "BTCUSD", "api_key": "k", "timestamp": "1", "sign": "x"})
        b = sign("secret", {"timestamp": "1", "api_key": "k", "symbol": "BTCUSD"})
        assert a == b
        assert len(a) == 64

    def test_sign_renders_bools(self):
        """Booleans are signed as true/false, as they appear on the wire."""
        assert sign("s", {"reduce_only": True}) == sign("s", {"reduce_only": "true"})


class TestBybitClientMock:
    """Test Bybit client with mocked HTTP responses."""

    @patch("bybit_inverse.client.requests.Session.get")
    def test_get_server_time(self, mock_get, bybit_config):
        """Server time comes from time_now."""
        mock_get.return_value = ok_response({})

        client = BybitClient(bybit_config)
        server_time = client.get_server_time()

        assert isinstance(server_time, datetime)
        assert server_time.tzinfo == UTC
        assert int(server_time.timestamp()) == 1577444332

    @patch("bybit_inverse.client.requests.Session.get")
    def test_get_publicly_is_unsigned(self, mock_get, bybit_config):
        """Public GETs carry only the given params."""
        mock_get.return_value = ok_response([])

        client = BybitClient(bybit_config)
        client.get_publicly("/v2/public/symbols", {"symbol": "BTCUSD"}, timeout=1.5)

        args, kwargs = mock_get.call_args
        assert args[0] == "https://api-testnet.bybit.com/v2/public/symbols"
        assert kwargs["params"] == {"symbol": "BTCUSD"}
        assert kwargs["timeout"] == 1.5

    @patch("bybit_inverse.client.requests.Session.get")
    def test_get_privately_signs_query(self, mock_get, bybit_config):
        """Private GETs add credentials and a valid signature."""
        mock_get.return_value = ok_response({"data": [], "cursor": ""})

        client = BybitClient(bybit_config)
        client.get_privately("/v2/private/order/list", {"symbol": "BTCUSD"})

        params = mock_get.call_args.kwargs["params"]
        assert params["symbol"] == "BTCUSD"
        assert params["api_key"] == "test_key"
        assert params["recv_window"] == "5000"
        assert "timestamp" in params
        assert params["sign"] == sign("test_secret", params)
        assert mock_get.call_args.kwargs["timeout"] == bybit_config.timeout_sec

    @patch("bybit_inverse.client.requests.Session.post")
    def test_post_json_signs_body(self, mock_post, bybit_config):
        """POST bodies carry the signature in the JSON document."""
        mock_post.return_value = ok_response({})

        client = BybitClient(bybit_config)
        client.post_json("/v2/private/order/cancelAll", {"symbol": "BTCUSD"})

        body = mock_post.call_args.kwargs["json"]
        assert body["symbol"] == "BTCUSD"
        assert body["api_key"] == "test_key"
        assert body["sign"] == sign("test_secret", body)

    @patch("bybit_inverse.client.requests.Session.get")
    def test_private_call_without_credentials(self, mock_get):
        """Missing credentials fail before any request is made."""
        client = BybitClient(BybitClientConfig())

        with pytest.raises(TransportError):
            client.get_privately("/v2/private/position/list")
        mock_get.assert_not_called()

    @patch("bybit_inverse.client.time.sleep")
    @patch("bybit_inverse.client.requests.Session.get")
    def test_get_retries_then_fails(self, mock_get, mock_sleep, bybit_config):
        """GETs are retried max_retries times, then surface TransportError."""
        mock_get.side_effect = requests.exceptions.ConnectionError("boom")

        client = BybitClient(bybit_config)
        with pytest.raises(TransportError) as exc_info:
            client.get_publicly("/v2/public/symbols")

        assert mock_get.call_count == 2
        assert mock_sleep.call_count == 1
        assert exc_info.value.endpoint == "/v2/public/symbols"

    @patch("bybit_inverse.client.time.sleep")
    @patch("bybit_inverse.client.requests.Session.post")
    def test_post_is_not_retried(self, mock_post, mock_sleep, bybit_config):
        """A failed POST is reported at once; the order may have been placed."""
        mock_response = Mock()
        mock_response.raise_for_status.side_effect = requests.exceptions.HTTPError("502 Bad Gateway")
        mock_post.return_value = mock_response

        client = BybitClient(bybit_config)
        with pytest.raises(TransportError):
            client.post_json("/v2/private/order/create", {"symbol": "BTCUSD"})

        assert mock_post.call_count == 1
        mock_sleep.assert_not_called()

    @patch("bybit_inverse.client.requests.Session.get")
    def test_invalid_json(self, mock_get, bybit_config):
        """A non-JSON body is a transport failure."""
        mock_response = Mock()
        mock_response.raise_for_status.return_value = None
        mock_response.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = mock_response

        with pytest.raises(TransportError):
            BybitClient(bybit_config).get_publicly("/v2/public/symbols")


class TestServiceOverHttp:
    """Endpoint service wired to the real client with a mocked session."""

    @patch("bybit_inverse.client.requests.Session.post")
    def test_create_order(self, mock_post, bybit_config):
        """Create order posts to the v2 path and decodes the reply."""
        mock_post.return_value = ok_response(
            {
                "user_id": 1,
                "order_id": "order123",
                "symbol": "BTCUSD",
                "side": "Buy",
                "order_type": "Market",
                "price": 8800,
                "qty": 1,
                "time_in_force": "ImmediateOrCancel",
                "order_status": "Created",
                "last_exec_time": 0,
                "last_exec_price": 0,
                "leaves_qty": 1,
                "cum_exec_qty": 0,
                "cum_exec_value": 0,
                "cum_exec_fee": 0,
                "reject_reason": "",
                "order_link_id": "",
                "created_at": "2019-11-30T11:03:43.452Z",
                "updated_at": "2019-11-30T11:03:43.455Z",
            }
        )

        service = FutureInversePerpetualService(BybitClient(bybit_config))
        res = service.create_order(
            CreateOrderParam(
                side="Buy", symbol="BTCUSD", order_type="Market", qty=1, time_in_force="ImmediateOrCancel"
            )
        )

        assert mock_post.call_args.args[0] == "https://api-testnet.bybit.com/v2/private/order/create"
        assert "price" not in mock_post.call_args.kwargs["json"]
        assert res.result.order_id == "order123"

    @patch("bybit_inverse.client.requests.Session.get")
    def test_list_order_error_envelope(self, mock_get, bybit_config):
        """An error envelope over HTTP 200 is raised with the exchange message."""
        mock_response = Mock()
        mock_response.raise_for_status.return_value = None
        mock_response.json.return_value = {
            "ret_code": 10004,
            "ret_msg": "error sign!",
            "ext_code": "",
            "ext_info": "",
            "result": None,
            "time_now": "1577444332.192859",
        }
        mock_get.return_value = mock_response

        service = FutureInversePerpetualService(BybitClient(bybit_config))
        with pytest.raises(TransportError, match="error sign!"):
            service.list_order(ListOrderParam(symbol="BTCUSD"))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
