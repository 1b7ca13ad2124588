"""Errors surfaced by a fetch."""

import httpx

TransportError = httpx.TransportError


class FetchError(Exception):
    """Base class for errors raised by streamget itself."""


class InvalidURL(FetchError):
    def __init__(self, url: str, reason: str = ""):
        self.url = url
        self.reason = reason
        message = f"Invalid URL: {url!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class HTTPError(FetchError):
    """Final response status was not acceptable."""

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"HTTP Error: {status}")


class RedirectLoop(FetchError):
    """A location was visited more often than the redirect budget allows."""

    def __init__(self, location: str):
        self.location = location
        super().__init__(f"Redirect loop detected: {location}")


class DecodeError(FetchError):
    def __init__(self, coding: str, detail: str):
        self.coding = coding
        super().__init__(f"Cannot decode {coding} content: {detail}")


class RequestAborted(httpx.TransportError):
    """The in-flight request was cancelled by abort()."""
