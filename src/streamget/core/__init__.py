"""Core fetch components."""

from .cookies import JarCookieAgent, make_cookie_agent
from .decoders import ACCEPT_ENCODING, BROTLI, ContentCoding, get_decoder
from .fetcher import FetchEngine, State
from .protocols import CookieAgent, ResponseInfo
from .redirects import RedirectTracker
from .request import RequestSpec, Scheme
from .stream import ByteStream

__all__ = [
    "ACCEPT_ENCODING",
    "BROTLI",
    "ByteStream",
    "ContentCoding",
    "CookieAgent",
    "FetchEngine",
    "JarCookieAgent",
    "RedirectTracker",
    "RequestSpec",
    "ResponseInfo",
    "Scheme",
    "State",
    "get_decoder",
    "make_cookie_agent",
]
