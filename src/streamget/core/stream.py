"""Output byte stream shared by every hop of a fetch."""

import asyncio
from collections import deque


class ByteStream:
    """Bounded single-producer, single-consumer byte channel.

    ``write`` waits while ``max_buffered_chunks`` chunks are pending. Once
    closed the stream yields whatever is buffered and then EOF, or, when
    closed with an error, drops the buffer and raises the error once.
    """

    def __init__(self, max_buffered_chunks: int = 16):
        self.max_buffered_chunks = max(1, max_buffered_chunks)
        self._buffer: deque[bytes] = deque()
        self._closed = False
        self._error: BaseException | None = None
        self._readable = asyncio.Event()
        self._writable = asyncio.Event()
        self._writable.set()
        self.bytes_written = 0

    @property
    def closed(self) -> bool:
        return self._closed

    async def write(self, chunk: bytes) -> None:
        if not chunk:
            return
        while len(self._buffer) >= self.max_buffered_chunks and not self._closed:
            self._writable.clear()
            await self._writable.wait()
        if self._closed:
            raise RuntimeError("write to a closed stream")
        self._buffer.append(chunk)
        self.bytes_written += len(chunk)
        self._readable.set()

    def close(self, error: BaseException | None = None) -> None:
        if self._closed:
            return
        self._closed = True
        if error is not None:
            self._error = error
            self._buffer.clear()
        self._readable.set()
        self._writable.set()

    async def read_chunk(self) -> bytes:
        """Next chunk, or ``b""`` at end of stream."""
        while not self._buffer:
            if self._closed:
                error, self._error = self._error, None
                if error is not None:
                    raise error
                return b""
            self._readable.clear()
            await self._readable.wait()
        chunk = self._buffer.popleft()
        self._writable.set()
        return chunk

    async def read(self) -> bytes:
        chunks = []
        while chunk := await self.read_chunk():
            chunks.append(chunk)
        return b"".join(chunks)

    def __aiter__(self):
        return self

    async def __anext__(self) -> bytes:
        chunk = await self.read_chunk()
        if not chunk:
            raise StopAsyncIteration
        return chunk
