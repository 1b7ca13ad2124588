"""Fetch engine: one logical fetch as a loop over physical requests."""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

import httpx

from ..config import FetchSettings, settings as default_settings
from ..errors import FetchError, HTTPError, InvalidURL, RedirectLoop, RequestAborted
from .decoders import IdentityDecoder, get_decoder
from .protocols import CookieAgent, ResponseInfo
from .redirects import RedirectTracker
from .request import RequestSpec
from .stream import ByteStream

logger = logging.getLogger(__name__)


class State(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    REDIRECTING = "redirecting"
    EMITTING = "emitting"
    CLOSED = "closed"
    FAILED = "failed"
    ABORTED = "aborted"


ACTIVE_STATES = (State.IN_FLIGHT, State.REDIRECTING, State.EMITTING)


def _status_class(response: httpx.Response) -> int:
    return response.status_code // 100


async def _iter_raw(response: httpx.Response, chunk_size: int):
    if response.is_stream_consumed:
        # body was preloaded, e.g. a Response built with content=...
        async for chunk in response.stream:
            yield chunk
        return
    async for chunk in response.aiter_raw(chunk_size):
        yield chunk


class FetchEngine:
    """Drives the request/redirect/decompression state machine.

    Redirects are followed by looping in ``_exchange``; only the final
    response reaches ``stream``. Errors close ``stream`` with the error and
    are reported to error observers exactly once.
    """

    def __init__(
        self,
        spec: RequestSpec,
        stream: ByteStream,
        client: httpx.AsyncClient | None = None,
        settings: FetchSettings | None = None,
    ):
        self.spec = spec
        self.stream = stream
        self.settings = settings or default_settings
        self.cookie_agent: CookieAgent | None = None
        self.state = State.IDLE
        self.response: ResponseInfo | None = None
        self.error: BaseException | None = None
        self._client = client
        self._owns_client = client is None
        self._tracker: RedirectTracker | None = None
        self._aborted = False
        self._task: asyncio.Task | None = None
        self._response_callbacks: list[Callable[[ResponseInfo], None]] = []
        self._error_callbacks: list[Callable[[BaseException], None]] = []

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def started(self) -> bool:
        return self._task is not None

    @property
    def in_flight(self) -> bool:
        return (
            self._task is not None
            and not self._task.done()
            and self.state in ACTIVE_STATES
        )

    def add_response_callback(self, callback: Callable[[ResponseInfo], None]) -> None:
        self._response_callbacks.append(callback)
        if self.response is not None:
            callback(self.response)

    def add_error_callback(self, callback: Callable[[BaseException], None]) -> None:
        self._error_callbacks.append(callback)
        if self.error is not None:
            callback(self.error)

    def start(self) -> asyncio.Task:
        """Schedule ``run`` on the running loop; later calls are no-ops."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self.run())
        return self._task

    def abort(self) -> None:
        if self._aborted:
            return
        self._aborted = True
        if self.in_flight:
            logger.debug("Aborting request to %s", self.spec.effective_url)
            self._task.cancel()

    async def run(self) -> None:
        if self._aborted:
            self.state = State.ABORTED
            self.stream.close()
            return
        if self.spec.error is None and not self.spec.host:
            self.spec.error = InvalidURL("", "no host set")
        if self.spec.error is not None:
            self._fail(self.spec.error)
            return

        self._tracker = RedirectTracker(self.spec.max_redirects)
        self._tracker.visit(self.spec.location_key)
        try:
            await self._exchange()
        except asyncio.CancelledError:
            self._fail(RequestAborted("Request aborted"))
            if not self._aborted:
                raise
        except (FetchError, httpx.HTTPError, httpx.InvalidURL) as exc:
            self._fail(exc)
        except Exception as exc:
            logger.exception("Unexpected error while fetching %s", self.spec.effective_url)
            self._fail(exc)
        finally:
            self._tracker = None
            if self._owns_client and self._client is not None:
                await self._client.aclose()
                self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.timeout),
                follow_redirects=False,
            )
        return self._client

    def _build_request(self) -> httpx.Request:
        spec = self.spec
        headers = httpx.Headers(spec.headers)
        authorization = spec.authorization()
        if authorization and "authorization" not in headers:
            headers["Authorization"] = authorization
        if self.cookie_agent is not None:
            cookie = self.cookie_agent.attach(spec)
            if cookie:
                headers["Cookie"] = cookie
        return httpx.Request(spec.method, spec.effective_url, headers=headers, content=spec.body)

    async def _exchange(self) -> None:
        client = self._get_client()
        while True:
            self.state = State.IN_FLIGHT
            request = self._build_request()
            logger.debug("%s %s", request.method, request.url)
            response = await client.send(request, stream=True, follow_redirects=False)
            try:
                status_class = _status_class(response)
                if status_class == 3 and self.spec.follow_redirects:
                    self.state = State.REDIRECTING
                    self._redirect(response)
                    continue
                if status_class != 2 and status_class != 3:
                    self._store_cookies(response)
                    raise HTTPError(response.status_code)
                await self._emit(response)
                return
            finally:
                await response.aclose()

    def _store_cookies(self, response: httpx.Response) -> None:
        if self.cookie_agent is not None:
            self.cookie_agent.store(self.spec, response.headers.get_list("set-cookie"))

    def _redirect(self, response: httpx.Response) -> None:
        location = response.headers.get("location")
        if location is None:
            raise HTTPError(response.status_code)
        self._store_cookies(response)

        spec = self.spec
        logger.debug("Redirecting to %s", location)
        # auth and headers carry over unless the location names its own credentials
        spec.set_url(location, base=spec.effective_url)
        if spec.error is not None:
            raise spec.error

        if self._tracker.visit(spec.location_key):
            raise RedirectLoop(location)

    async def _emit(self, response: httpx.Response) -> None:
        self.state = State.EMITTING
        self._store_cookies(response)
        self.response = ResponseInfo(
            url=str(response.url),
            status=response.status_code,
            headers=dict(response.headers),
            http_version=response.http_version,
        )
        for callback in self._response_callbacks:
            callback(self.response)

        if self.spec.decompress and _status_class(response) == 2:
            decoder = get_decoder(self.response.content_encoding)
        else:
            decoder = IdentityDecoder()

        async for chunk in _iter_raw(response, self.settings.chunk_size):
            await self.stream.write(decoder.decode(chunk))
        await self.stream.write(decoder.flush())
        self.state = State.CLOSED
        self.stream.close()

    def _fail(self, error: BaseException) -> None:
        if self.error is not None:
            return
        logger.debug("Error detected: %s", error)
        self.state = State.ABORTED if isinstance(error, RequestAborted) else State.FAILED
        self.error = error
        self.stream.close(error)
        for callback in self._error_callbacks:
            try:
                callback(error)
            except Exception:
                logger.exception("Error observer failed for %s", self.spec.effective_url)
