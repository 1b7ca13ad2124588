"""Tests for the output byte stream."""

import asyncio

import pytest

from streamget.core import ByteStream


class TestByteStream:
    async def test_read_until_eof(self):
        """Chunks written before close are read in order."""
        stream = ByteStream()
        await stream.write(b"ab")
        await stream.write(b"cd")
        stream.close()

        assert await stream.read() == b"abcd"
        assert stream.closed
        assert await stream.read_chunk() == b""

    async def test_empty_writes_ignored(self):
        """Empty chunks are not buffered."""
        stream = ByteStream()
        await stream.write(b"")
        stream.close()

        assert [chunk async for chunk in stream] == []

    async def test_reader_waits_for_data(self):
        """A pending read completes once data arrives."""
        stream = ByteStream()
        reader = asyncio.create_task(stream.read_chunk())
        await asyncio.sleep(0)
        assert not reader.done()

        await stream.write(b"late")

        assert await reader == b"late"

    async def test_backpressure(self):
        """Writes wait while the buffer is full."""
        stream = ByteStream(max_buffered_chunks=1)
        await stream.write(b"a")
        writer = asyncio.create_task(stream.write(b"b"))
        await asyncio.sleep(0)
        assert not writer.done()

        assert await stream.read_chunk() == b"a"
        await writer
        assert await stream.read_chunk() == b"b"

    async def test_error_discards_buffer_and_raises_once(self):
        """Closing with an error drops pending data and raises once."""
        stream = ByteStream()
        await stream.write(b"pending")
        stream.close(ValueError("boom"))

        with pytest.raises(ValueError, match="boom"):
            await stream.read_chunk()
        assert await stream.read_chunk() == b""

    async def test_close_is_idempotent(self):
        """A later close does not replace the first outcome."""
        stream = ByteStream()
        stream.close()
        stream.close(ValueError("ignored"))

        assert await stream.read() == b""

    async def test_write_after_close_fails(self):
        """Writing to a closed stream is an error."""
        stream = ByteStream()
        stream.close()

        with pytest.raises(RuntimeError):
            await stream.write(b"x")

    async def test_close_releases_blocked_writer(self):
        """A writer blocked on backpressure is released by close."""
        stream = ByteStream(max_buffered_chunks=1)
        await stream.write(b"a")
        writer = asyncio.create_task(stream.write(b"b"))
        await asyncio.sleep(0)

        stream.close(ValueError("stop"))

        with pytest.raises(RuntimeError):
            await writer
