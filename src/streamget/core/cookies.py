"""Cookie persistence across the hops of a fetch."""

import logging
from http.cookiejar import CookieJar
from typing import TYPE_CHECKING

import httpx

from .protocols import CookieAgent

if TYPE_CHECKING:
    from .request import RequestSpec

logger = logging.getLogger(__name__)


class JarCookieAgent:
    """Cookie agent backed by an in-memory ``httpx.Cookies`` jar."""

    def __init__(self, jar: httpx.Cookies | CookieJar | dict | None = None):
        self.jar = jar if isinstance(jar, httpx.Cookies) else httpx.Cookies(jar)

    def attach(self, spec: "RequestSpec") -> str | None:
        request = httpx.Request(spec.method, spec.effective_url)
        self.jar.set_cookie_header(request)
        value = request.headers.get("cookie")
        logger.debug("Attach cookies for %s: %r", spec.effective_url, value)
        return value or None

    def store(self, spec: "RequestSpec", set_cookie_values: list[str]) -> None:
        if not set_cookie_values:
            return
        logger.debug("Storing cookies from %s: %r", spec.effective_url, set_cookie_values)
        request = httpx.Request(spec.method, spec.effective_url)
        response = httpx.Response(
            200,
            headers=[("set-cookie", value) for value in set_cookie_values],
            request=request,
        )
        self.jar.extract_cookies(response)


def make_cookie_agent(jar=None) -> CookieAgent:
    """Wrap ``jar`` in a cookie agent unless it already is one."""
    if hasattr(jar, "attach") and hasattr(jar, "store"):
        return jar
    return JarCookieAgent(jar)
