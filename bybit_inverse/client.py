from __future__ import annotations

import hashlib
import hmac
import logging
import random
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import TransportError

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger(__name__)

MAINNET_URL = "https://api.bybit.com"
TESTNET_URL = "https://api-testnet.bybit.com"


@dataclass(frozen=True)
class BybitClientConfig:
    testnet: bool = True
    api_key: str = ""
    api_secret: str = ""
    recv_window: int = 5000
    max_retries: int = 3
    retry_delay_ms: int = 100
    timeout_sec: float = 10
    base_url: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "BybitClientConfig":
        return cls(
            testnet=settings.testnet,
            api_key=settings.api_key,
            api_secret=settings.api_secret.get_secret_value(),
            recv_window=settings.recv_window,
            max_retries=settings.max_retries,
            retry_delay_ms=settings.retry_delay_ms,
            timeout_sec=settings.timeout_sec,
            base_url=settings.base_url,
        )


class BybitClient:
    """HTTP transport for the Bybit v2 REST API.

    Exposes the three primitives the endpoint services build on:
    ``get_publicly``, ``get_privately`` and ``post_json``. Each returns the
    decoded response envelope as a dict and raises ``TransportError`` when the
    request itself fails. A non-zero ``ret_code`` is left for the caller.
    """

    def __init__(self, config: BybitClientConfig):
        self.config = config
        if config.base_url:
            self.base_url = config.base_url.rstrip("/")
        else:
            self.base_url = TESTNET_URL if config.testnet else MAINNET_URL
        self._session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a session that retries throttled and failed-upstream responses."""
        session = requests.Session()
        retry_strategy = Retry(
            total=self.config.max_retries,
            backoff_factor=0.1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def close(self) -> None:
        self._session.close()

    def get_server_time(self) -> datetime:
        """Get exchange server time."""
        data = self.get_publicly("/v2/public/time")
        try:
            return datetime.fromtimestamp(float(data["time_now"]), tz=timezone.utc)
        except (KeyError, TypeError, ValueError) as e:
            raise TransportError(f"Unexpected server time payload: {data}", endpoint="/v2/public/time") from e

    # ===== Primitives =====

    def get_publicly(
        self,
        path: str,
        params: Optional[Mapping[str, str]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Unauthenticated GET."""
        return self._request("GET", path, dict(params or {}), timeout=timeout)

    def get_privately(
        self,
        path: str,
        params: Optional[Mapping[str, str]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Signed GET; auth fields and ``sign`` are appended to the query."""
        return self._request("GET", path, self._sign(path, dict(params or {})), timeout=timeout)

    def post_json(
        self,
        path: str,
        body: Optional[Mapping[str, Any]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Signed POST with a JSON body; ``sign`` travels inside the body."""
        return self._request("POST", path, self._sign(path, dict(body or {})), timeout=timeout)

    # ===== Internals =====

    def _sign(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if not self.config.api_key or not self.config.api_secret:
            raise TransportError(f"API credentials required for {path}", endpoint=path)

        payload["api_key"] = self.config.api_key
        payload["timestamp"] = str(int(time.time() * 1000))
        payload["recv_window"] = str(self.config.recv_window)
        payload["sign"] = sign(self.config.api_secret, payload)
        return payload

    def _request(
        self,
        method: str,
        endpoint: str,
        payload: Dict[str, Any],
        *,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Make a request. Only GETs are retried; an order POST may have landed."""
        if method not in ("GET", "POST"):
            raise ValueError(f"Unsupported method: {method}")

        url = f"{self.base_url}{endpoint}"
        timeout = self.config.timeout_sec if timeout is None else timeout
        attempts = max(self.config.max_retries, 1) if method == "GET" else 1

        for attempt in range(attempts):
            try:
                if method == "GET":
                    resp = self._session.get(url, params=payload, timeout=timeout)
                else:
                    resp = self._session.post(url, json=payload, timeout=timeout)

                resp.raise_for_status()
                return resp.json()
            except ValueError as e:
                # requests' JSONDecodeError is a ValueError
                raise TransportError(f"Invalid JSON from {method} {endpoint}: {e}", endpoint=endpoint) from e
            except requests.exceptions.RequestException as e:
                if attempt < attempts - 1:
                    jitter_ms = random.randint(0, self.config.retry_delay_ms)
                    logger.warning("%s %s failed (attempt %d/%d): %s", method, endpoint, attempt + 1, attempts, e)
                    time.sleep((self.config.retry_delay_ms + jitter_ms) / 1000.0)
                else:
                    logger.error("%s %s failed after %d attempts: %s", method, endpoint, attempts, e)
                    raise TransportError(
                        f"Request failed after {attempts} attempts: {e}", endpoint=endpoint
                    ) from e

        raise TransportError("Unexpected error in _request", endpoint=endpoint)


def sign(secret: str, payload: Mapping[str, Any]) -> str:
    """HMAC-SHA256 over ``k=v`` pairs sorted by key, excluding ``sign`` itself."""
    message = "&".join(
        f"{key}={_sign_value(payload[key])}" for key in sorted(payload) if key != "sign"
    )
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


def _sign_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
