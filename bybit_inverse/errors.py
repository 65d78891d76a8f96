from __future__ import annotations

from typing import Optional


class BybitError(Exception):
    """Base class for errors raised by the inverse-perpetual binding."""

    def __init__(
        self,
        message: str,
        *,
        endpoint: Optional[str] = None,
        param: Optional[str] = None,
    ) -> None:
        self.endpoint = endpoint
        self.param = param
        super().__init__(message)


class EncodingError(BybitError):
    """Raised when a parameter record cannot be serialized to its wire form."""


class ValidationError(BybitError):
    """Raised when an endpoint precondition is unmet, before any network call."""


class TransportError(BybitError):
    """Raised when the HTTP transport call fails."""


class APIError(TransportError):
    """Raised when the exchange answers with a non-zero ret_code."""

    def __init__(
        self,
        ret_msg: str,
        *,
        ret_code: int,
        ext_code: str = "",
        endpoint: Optional[str] = None,
        param: Optional[str] = None,
    ) -> None:
        self.ret_code = ret_code
        self.ret_msg = ret_msg
        self.ext_code = ext_code
        super().__init__(ret_msg, endpoint=endpoint, param=param)


class DecodingError(BybitError):
    """Raised when a response payload does not fit the expected result shape."""
