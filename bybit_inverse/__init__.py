from .client import BybitClient, BybitClientConfig
from .config import Settings, get_settings
from .errors import (
    APIError,
    BybitError,
    DecodingError,
    EncodingError,
    TransportError,
    ValidationError,
)
from .future_inverse_perpetual import FutureInversePerpetualService

__all__ = [
    "APIError",
    "BybitClient",
    "BybitClientConfig",
    "BybitError",
    "DecodingError",
    "EncodingError",
    "FutureInversePerpetualService",
    "Settings",
    "TransportError",
    "ValidationError",
    "get_settings",
]
