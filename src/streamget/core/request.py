"""Request description built up by the caller and rewritten on redirects."""

import logging
from base64 import b64encode
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

import httpx

from ..errors import InvalidURL
from .decoders import ACCEPT_ENCODING

logger = logging.getLogger(__name__)


class Scheme(str, Enum):
    PLAIN = "http"
    SECURE = "https"


def _default_headers() -> httpx.Headers:
    return httpx.Headers({"Accept-Encoding": ACCEPT_ENCODING})


@dataclass
class RequestSpec:
    """Mutable description of the next physical request.

    Setters return the spec so calls can be chained. They never raise: a
    URL that cannot be parsed is kept in ``error`` and reported when the
    fetch runs.
    """

    scheme: Scheme = Scheme.PLAIN
    host: str | None = None
    path: str | None = None
    method: str = "GET"
    headers: httpx.Headers = field(default_factory=_default_headers)
    auth: str | None = None
    body: bytes | None = None
    max_redirects: int = 0
    follow_redirects: bool = True
    decompress: bool = True
    error: InvalidURL | None = None

    @property
    def secure(self) -> bool:
        return self.scheme is Scheme.SECURE

    @property
    def effective_url(self) -> str:
        return f"{self.scheme.value}://{self.host}{self.path or '/'}"

    @property
    def location_key(self) -> tuple[str, str | None, str | None]:
        return (self.scheme.value, self.host, self.path)

    def set_url(self, url: str, base: str | None = None) -> "RequestSpec":
        """Point the spec at ``url``, resolved against ``base`` if relative."""
        try:
            parsed = httpx.URL(base).join(url) if base else httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as exc:
            logger.debug("Cannot parse URL %r: %s", url, exc)
            self.error = InvalidURL(str(url), str(exc))
            return self

        if parsed.scheme not in ("http", "https") or not parsed.host:
            self.error = InvalidURL(str(url), "absolute http(s) URL required")
            return self

        self.error = None
        self.scheme = Scheme(parsed.scheme)
        self.host = parsed.netloc.decode("ascii")
        self.path = parsed.raw_path.decode("ascii")
        if parsed.username or parsed.password:
            self.set_auth(parsed.username, parsed.password)
        return self

    def set_header(self, name: str, value: str) -> "RequestSpec":
        self.headers[name] = value
        return self

    def set_headers(self, headers: Mapping[str, str]) -> "RequestSpec":
        for name, value in headers.items():
            self.headers[name] = value
        return self

    def set_auth(self, username: str, password: str | None = None) -> "RequestSpec":
        """Store credentials as ``user:pass``, or pass a prebuilt token through."""
        self.auth = f"{username}:{password}" if password is not None else username
        return self

    def set_body(self, body: bytes | str | None) -> "RequestSpec":
        self.body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def authorization(self) -> str | None:
        """Basic authorization header value derived from ``auth``."""
        if not self.auth:
            return None
        return "Basic " + b64encode(self.auth.encode("utf-8")).decode("ascii")
