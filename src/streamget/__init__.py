"""Stream-oriented HTTP(S) fetching with redirects, cookies and decompression."""

from .core import ACCEPT_ENCODING, BROTLI, ResponseInfo
from .errors import (
    DecodeError,
    FetchError,
    HTTPError,
    InvalidURL,
    RedirectLoop,
    RequestAborted,
    TransportError,
)
from .handle import FetchHandle, fetch

__version__ = "0.1.0"

__all__ = [
    "ACCEPT_ENCODING",
    "BROTLI",
    "DecodeError",
    "FetchError",
    "FetchHandle",
    "HTTPError",
    "InvalidURL",
    "RedirectLoop",
    "RequestAborted",
    "ResponseInfo",
    "TransportError",
    "fetch",
]
