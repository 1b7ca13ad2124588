"""Protocol definitions for fetch collaborators."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .request import RequestSpec


@dataclass
class ResponseInfo:
    """Status line and headers of the final response."""

    url: str
    status: int
    headers: dict[str, str]
    http_version: str = "HTTP/1.1"

    @property
    def content_encoding(self) -> str:
        return self.headers.get("content-encoding", "").strip().lower()


class CookieAgent(Protocol):
    """Anything able to attach and store cookies for a request."""

    def attach(self, spec: "RequestSpec") -> str | None:
        """Return a Cookie header value for the request, if any."""
        ...

    def store(self, spec: "RequestSpec", set_cookie_values: list[str]) -> None:
        """Ingest Set-Cookie values received for the request."""
        ...
