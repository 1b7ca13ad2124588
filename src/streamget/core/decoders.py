"""Incremental decoders for HTTP content codings."""

import logging
import zlib
from enum import Enum

try:
    import brotli
except ImportError:
    brotli = None

from ..errors import DecodeError

logger = logging.getLogger(__name__)

BROTLI = brotli is not None
ACCEPT_ENCODING = "br, gzip, deflate" if BROTLI else "gzip, deflate"


class ContentCoding(Enum):
    """Content codings this package can undo."""

    IDENTITY = "identity"
    GZIP = "gzip"
    DEFLATE = "deflate"
    BROTLI = "br"

    @classmethod
    def from_header(cls, value: str | None) -> "ContentCoding":
        """Map a Content-Encoding value to a coding.

        Unknown codings, and ``br`` without brotli support, map to
        IDENTITY so the body is relayed untouched.
        """
        coding = (value or "").strip().lower()
        if coding in ("gzip", "x-gzip"):
            return cls.GZIP
        if coding == "deflate":
            return cls.DEFLATE
        if coding == "br" and BROTLI:
            return cls.BROTLI
        return cls.IDENTITY


class IdentityDecoder:
    coding = "identity"

    def decode(self, data: bytes) -> bytes:
        return data

    def flush(self) -> bytes:
        return b""


class GzipDecoder:
    coding = "gzip"

    def __init__(self):
        self._decompressor = zlib.decompressobj(16 + zlib.MAX_WBITS)

    def decode(self, data: bytes) -> bytes:
        try:
            return self._decompressor.decompress(data)
        except zlib.error as exc:
            raise DecodeError(self.coding, str(exc)) from exc

    def flush(self) -> bytes:
        try:
            tail = self._decompressor.flush()
        except zlib.error as exc:
            raise DecodeError(self.coding, str(exc)) from exc
        if not self._decompressor.eof:
            raise DecodeError(self.coding, "unexpected end of file")
        return tail


class DeflateDecoder(GzipDecoder):
    """zlib-wrapped deflate, falling back to raw deflate streams."""

    coding = "deflate"

    def __init__(self):
        self._decompressor = zlib.decompressobj()
        # input seen while the two-byte zlib header is still unconfirmed
        self._pending: bytes | None = b""

    def decode(self, data: bytes) -> bytes:
        if self._pending is not None:
            self._pending += data
        try:
            output = self._decompressor.decompress(data)
        except zlib.error as exc:
            if self._pending is None:
                raise DecodeError(self.coding, str(exc)) from exc
            # some servers send deflate content without the zlib header
            data, self._pending = self._pending, None
            self._decompressor = zlib.decompressobj(-zlib.MAX_WBITS)
            return self.decode(data)
        if self._pending is not None and (output or len(self._pending) >= 2):
            self._pending = None
        return output


class BrotliDecoder:
    coding = "br"

    def __init__(self):
        self._decompressor = brotli.Decompressor()

    def decode(self, data: bytes) -> bytes:
        try:
            return self._decompressor.process(data)
        except brotli.error as exc:
            raise DecodeError(self.coding, str(exc)) from exc

    def flush(self) -> bytes:
        if not self._decompressor.is_finished():
            raise DecodeError(self.coding, "unexpected end of file")
        return b""


_DECODERS = {
    ContentCoding.IDENTITY: IdentityDecoder,
    ContentCoding.GZIP: GzipDecoder,
    ContentCoding.DEFLATE: DeflateDecoder,
    ContentCoding.BROTLI: BrotliDecoder,
}


def get_decoder(content_encoding: str | None):
    """Return a fresh decoder for the given Content-Encoding header value."""
    coding = ContentCoding.from_header(content_encoding)
    logger.debug("Selected %s decoder for content-encoding %r", coding.value, content_encoding)
    return _DECODERS[coding]()
