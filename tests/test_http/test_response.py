"""
Tests for response consumption and progress reporting.
"""

import aiohttp
import pytest

from httpreq.exceptions import ErrorCode, ProgressUnavailableError, RequestAbortedError
from httpreq.http.response import ResponseConsumer, parse_content_length
from httpreq.models import DownloadProgress, RequestDescriptor

URL = "http://example.com/file"


async def chunks(*parts: bytes):
    for part in parts:
        yield part


async def broken_stream(*parts: bytes):
    for part in parts:
        yield part
    raise aiohttp.ClientPayloadError("Response payload is not completed")


class ProgressRecorder:
    """Collects progress callback invocations."""

    def __init__(self):
        self.calls = []

    def __call__(self, error, progress):
        self.calls.append((error, progress))


@pytest.mark.parametrize(
    "headers, expected",
    [({"Content-Length": "1000"}, 1000), ({}, None), ({"Content-Length": "abc"}, None)],
)
def test_parse_content_length(headers, expected):
    assert parse_content_length(headers) == expected


class TestResponseConsumer:
    """Test buffering, streaming and stream termination."""

    @pytest.mark.asyncio
    async def test_buffers_and_decodes_text(self):
        consumer = ResponseConsumer(RequestDescriptor(url=URL), URL, 200, {})

        await consumer.consume(chunks("héllo ".encode(), b"world"))
        result = consumer.build_result()

        assert result.status_code == 200
        assert result.body == "héllo world"
        assert result.download_location is None

    @pytest.mark.asyncio
    async def test_binary_body_kept_as_bytes(self):
        descriptor = RequestDescriptor(url=URL, binary=True)
        consumer = ResponseConsumer(descriptor, URL, 200, {})

        await consumer.consume(chunks(b"\xff\x00", b"\x01"))

        assert consumer.build_result().body == b"\xff\x00\x01"

    @pytest.mark.asyncio
    async def test_empty_body(self):
        consumer = ResponseConsumer(RequestDescriptor(url=URL), URL, 204, {})

        await consumer.consume(chunks())

        assert consumer.build_result().body == ""

    @pytest.mark.asyncio
    async def test_progress_with_content_length(self):
        recorder = ProgressRecorder()
        descriptor = RequestDescriptor(url=URL, progress_callback=recorder)
        consumer = ResponseConsumer(descriptor, URL, 200, {"Content-Length": "1000"})

        await consumer.consume(chunks(b"a" * 500, b"b" * 500))

        assert recorder.calls == [
            (None, DownloadProgress(totalsize=1000, currentsize=500, percentage=50.0)),
            (None, DownloadProgress(totalsize=1000, currentsize=1000, percentage=100.0)),
        ]
        assert recorder.calls[-1][1].is_complete

    @pytest.mark.asyncio
    async def test_async_progress_callback(self):
        seen = []

        async def on_progress(error, progress):
            seen.append(progress.currentsize)

        descriptor = RequestDescriptor(url=URL, progress_callback=on_progress)
        consumer = ResponseConsumer(descriptor, URL, 200, {"Content-Length": "4"})

        await consumer.consume(chunks(b"ab", b"cd"))

        assert seen == [2, 4]

    @pytest.mark.asyncio
    async def test_progress_without_content_length_is_soft_error_per_chunk(self):
        recorder = ProgressRecorder()
        descriptor = RequestDescriptor(url=URL, progress_callback=recorder)
        consumer = ResponseConsumer(descriptor, URL, 200, {})

        await consumer.consume(chunks(b"a", b"b", b"c"))

        assert len(recorder.calls) == 3
        for error, progress in recorder.calls:
            assert isinstance(error, ProgressUnavailableError)
            assert progress is None
        assert consumer.build_result().body == "abc"

    @pytest.mark.asyncio
    async def test_streams_to_download_location(self, temp_dir):
        target = temp_dir / "out.bin"
        descriptor = RequestDescriptor(url=URL, download_location=target)
        consumer = ResponseConsumer(descriptor, URL, 200, {"Content-Length": "6"})

        await consumer.consume(chunks(b"abc", b"def"))
        result = consumer.build_result()

        assert result.body is None
        assert result.download_location == target
        assert target.read_bytes() == b"abcdef"

    @pytest.mark.asyncio
    async def test_premature_close_aborts(self):
        consumer = ResponseConsumer(RequestDescriptor(url=URL), URL, 200, {"Content-Length": "10"})

        with pytest.raises(RequestAbortedError) as exc_info:
            await consumer.consume(broken_stream(b"abc"))

        assert exc_info.value.code == ErrorCode.REQUEST_ABORTED
        assert consumer.ended is False
        with pytest.raises(RuntimeError):
            consumer.build_result()

    @pytest.mark.asyncio
    async def test_premature_close_closes_sink(self, temp_dir):
        target = temp_dir / "partial.bin"
        descriptor = RequestDescriptor(url=URL, download_location=target)
        consumer = ResponseConsumer(descriptor, URL, 200, {})

        with pytest.raises(RequestAbortedError):
            await consumer.consume(broken_stream(b"abc"))

        assert target.read_bytes() == b"abc"

    @pytest.mark.asyncio
    async def test_close_after_end_is_ignored(self):
        consumer = ResponseConsumer(RequestDescriptor(url=URL), URL, 200, {})
        await consumer.consume(chunks(b"done"))

        assert await consumer.on_close("socket closed") is None
        assert consumer.build_result().body == "done"

    @pytest.mark.asyncio
    async def test_cookies_in_result(self):
        headers = {"Set-Cookie": ["sid=abc; Path=/; HttpOnly", "theme=dark"]}
        consumer = ResponseConsumer(RequestDescriptor(url=URL), URL, 200, headers)

        await consumer.consume(chunks())

        assert consumer.build_result().cookies == ("sid=abc", "theme=dark")
