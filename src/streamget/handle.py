"""Fluent handle returned by :func:`fetch`."""

import asyncio
from collections.abc import Callable, Mapping
from http.cookiejar import CookieJar

import httpx

from .config import FetchSettings, settings as default_settings
from .core.cookies import make_cookie_agent
from .core.fetcher import FetchEngine, State
from .core.protocols import CookieAgent, ResponseInfo
from .core.request import RequestSpec, Scheme
from .core.stream import ByteStream


class FetchHandle:
    """Configures one logical fetch and exposes its decoded body stream.

    Builder methods mutate the underlying :class:`RequestSpec` and return
    the handle. The body is read with ``async for chunk in handle`` or
    ``await handle.read()``; failures are raised from the read and passed
    to ``on_error`` observers.
    """

    def __init__(
        self,
        url: str | None = None,
        auto_start: bool = True,
        *,
        client: httpx.AsyncClient | None = None,
        settings: FetchSettings | None = None,
    ):
        self.settings = settings or default_settings
        self.spec = RequestSpec()
        if self.settings.user_agent:
            self.spec.set_header("User-Agent", self.settings.user_agent)
        self.stream = ByteStream(self.settings.max_buffered_chunks)
        self._engine = FetchEngine(self.spec, self.stream, client=client, settings=self.settings)
        self._start_on_read = False

        if url is False:
            # False means "do not start", not a URL
            auto_start = False
        elif url:
            self.spec.set_url(url)

        if auto_start:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                self._start_on_read = True
            else:
                loop.call_soon(self._auto_run)

    @property
    def response(self) -> ResponseInfo | None:
        return self._engine.response

    @property
    def error(self) -> BaseException | None:
        return self._engine.error

    @property
    def state(self) -> State:
        return self._engine.state

    @property
    def aborted(self) -> bool:
        return self._engine.aborted

    def host(self, host: str) -> "FetchHandle":
        self.spec.host = host
        return self

    def path(self, path: str) -> "FetchHandle":
        self.spec.path = path
        return self

    def method(self, method: str) -> "FetchHandle":
        self.spec.method = method
        return self

    def secure(self, flag: bool = True) -> "FetchHandle":
        self.spec.scheme = Scheme.SECURE if flag else Scheme.PLAIN
        return self

    def header(self, name: str | Mapping[str, str], value: str | None = None) -> "FetchHandle":
        if value is not None:
            self.spec.set_header(name, value)
        else:
            self.spec.set_headers(name)
        return self

    set = header

    def user_agent(self, user_agent: str) -> "FetchHandle":
        return self.header("User-Agent", user_agent)

    def auth(self, username: str, password: str | None = None) -> "FetchHandle":
        self.spec.set_auth(username, password)
        return self

    def send(self, body: bytes | str | None) -> "FetchHandle":
        self.spec.set_body(body)
        return self

    def url(self, url: str, base: str | None = None) -> "FetchHandle":
        self.spec.set_url(url, base)
        return self

    def follow_redirects(self, flag: bool = True) -> "FetchHandle":
        self.spec.follow_redirects = flag
        return self

    def max_redirects(self, count: int) -> "FetchHandle":
        self.spec.max_redirects = count
        return self

    def inflate(self, flag: bool = True) -> "FetchHandle":
        self.spec.decompress = flag
        return self

    def cookies(self, jar: httpx.Cookies | CookieJar | dict | CookieAgent | None = None) -> "FetchHandle":
        """Keep cookies across redirects, in ``jar`` or a fresh in-memory jar."""
        self._engine.cookie_agent = make_cookie_agent(jar)
        # a redirect back to the same location may now carry a cookie
        self.spec.max_redirects = max(self.spec.max_redirects, 1)
        return self

    def on_response(self, callback: Callable[[ResponseInfo], None]) -> "FetchHandle":
        self._engine.add_response_callback(callback)
        return self

    def on_error(self, callback: Callable[[BaseException], None]) -> "FetchHandle":
        self._engine.add_error_callback(callback)
        return self

    def abort(self) -> "FetchHandle":
        self._engine.abort()
        return self

    def run(self) -> "FetchHandle":
        self._start_on_read = False
        self._engine.start()
        return self

    def _auto_run(self) -> None:
        if not self._engine.started:
            self.run()

    def _ensure_started(self) -> None:
        if self._start_on_read:
            self.run()

    async def read_chunk(self) -> bytes:
        self._ensure_started()
        return await self.stream.read_chunk()

    async def read(self) -> bytes:
        self._ensure_started()
        return await self.stream.read()

    def __aiter__(self):
        self._ensure_started()
        return self.stream


def fetch(
    url: str | None = None,
    auto_start: bool = True,
    *,
    client: httpx.AsyncClient | None = None,
    settings: FetchSettings | None = None,
) -> FetchHandle:
    """Start fetching ``url`` and return the handle for its body stream.

    The request is issued on the next iteration of the event loop, so the
    handle can still be configured in the same statement. Pass
    ``auto_start=False`` (or ``url=False``) and call ``run()`` to start
    manually.
    """
    return FetchHandle(url, auto_start, client=client, settings=settings)
