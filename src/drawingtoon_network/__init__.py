"""HTTP request/response core for the Drawingtoon app."""
from .builder import build_request
from .client import AsyncNetworkManager, NetworkManager
from .config import ClientConfig, GenerativeConfig
from .encoding import JSONEncoding, ParameterEncoding, URLEncoding
from .exceptions import (
    ClientError,
    DecodingError,
    DrawingtoonNetworkError,
    HTTPStatusError,
    InvalidURLError,
    NetworkError,
    RequestCancelled,
    ServerError,
    TransportError,
)
from .http import HTTPMethod, RawResponse, RequestDescriptor
from .status import HTTPStatusCategory, classify
from .transport import CancellationToken
from .urls import Endpoint, resolve_url

__all__ = [
    "AsyncNetworkManager",
    "CancellationToken",
    "ClientConfig",
    "ClientError",
    "DecodingError",
    "DrawingtoonNetworkError",
    "Endpoint",
    "GenerativeConfig",
    "HTTPMethod",
    "HTTPStatusCategory",
    "HTTPStatusError",
    "InvalidURLError",
    "JSONEncoding",
    "NetworkError",
    "NetworkManager",
    "ParameterEncoding",
    "RawResponse",
    "RequestCancelled",
    "RequestDescriptor",
    "ServerError",
    "TransportError",
    "URLEncoding",
    "build_request",
    "classify",
    "resolve_url",
]
