"""
Unit tests for the request engine.

Tests for do_request against mocked transports: body dispatch, redirect
chains, error classification and exactly-once completion.
"""

import asyncio
import errno

import aiohttp
import pytest
from aioresponses import aioresponses

from httpreq import do_request
from httpreq.config import EngineSettings
from httpreq.exceptions import (
    CantSendFilesUsingGetError,
    ErrorCode,
    HttpReqError,
    RequestTimeoutError,
    TooManyRedirectsError,
    TransportError,
)
from httpreq.models import RequestDescriptor, RequestResult


def calls_to(m: aioresponses, method: str, path: str) -> list:
    """Requests recorded for ``method`` and ``path``, whatever the query."""
    calls = []
    for (recorded_method, url), recorded in m.requests.items():
        if recorded_method == method and url.path == path:
            calls.extend(recorded)
    return calls


def sent(m: aioresponses, method: str, path: str) -> dict:
    """Keyword arguments of the first request sent to ``path``."""
    return calls_to(m, method, path)[0].kwargs


class TestDoRequest:
    """Test single-hop requests."""

    @pytest.mark.asyncio
    async def test_get_success(self):
        with aioresponses() as m:
            m.get(
                "http://example.com/hello",
                status=200,
                body="hi there",
                headers={"Set-Cookie": "sid=1; Path=/"},
            )

            result = await do_request({"url": "http://example.com/hello"})

        assert isinstance(result, RequestResult)
        assert result.status_code == 200
        assert result.body == "hi there"
        assert result.cookies == ("sid=1",)
        assert result.url == "http://example.com/hello"
        assert result.is_success

    @pytest.mark.asyncio
    async def test_get_parameters_in_query(self):
        with aioresponses() as m:
            m.get("http://example.com/search?q=x%20y&page=2", status=200, body="ok")

            result = await do_request(
                {"url": "http://example.com/search", "parameters": {"q": "x y", "page": 2}}
            )

            assert result.body == "ok"
            kwargs = sent(m, "GET", "/search")
            assert kwargs["data"] is None

    @pytest.mark.asyncio
    async def test_post_form(self):
        with aioresponses() as m:
            m.post("http://example.com/submit", status=201, body="created")

            result = await do_request(
                RequestDescriptor(
                    url="http://example.com/submit",
                    method="POST",
                    parameters={"name": "a b"},
                    headers={"X-Trace": "t1"},
                )
            )

            assert result.status_code == 201
            kwargs = sent(m, "POST", "/submit")
            assert kwargs["data"] == b"name=a%20b"
            assert kwargs["headers"]["Content-Type"] == (
                "application/x-www-form-urlencoded; charset=UTF-8"
            )
            assert kwargs["headers"]["Content-Length"] == "10"
            assert kwargs["headers"]["X-Trace"] == "t1"
            assert kwargs["allow_redirects"] is False

    @pytest.mark.asyncio
    async def test_basic_auth_and_cookies_sent(self):
        with aioresponses() as m:
            m.get("http://example.com/private", status=200)

            await do_request(
                {
                    "url": "http://example.com/private",
                    "auth": "user:secret",
                    "cookies": ["a=1", "b=2"],
                }
            )

            kwargs = sent(m, "GET", "/private")
            assert kwargs["auth"] == aiohttp.BasicAuth("user", "secret")
            assert kwargs["headers"]["Cookie"] == "a=1; b=2"

    @pytest.mark.asyncio
    async def test_error_status_is_a_result(self):
        with aioresponses() as m:
            m.get("http://example.com/missing", status=404, body="not found")

            result = await do_request({"url": "http://example.com/missing"})

        assert result.status_code == 404
        assert result.is_client_error
        assert result.body == "not found"

    @pytest.mark.asyncio
    async def test_binary_body(self):
        with aioresponses() as m:
            m.get("http://example.com/blob", status=200, body=b"\x00\xff")

            result = await do_request({"url": "http://example.com/blob", "binary": True})

        assert result.body == b"\x00\xff"

    @pytest.mark.asyncio
    async def test_download_to_file_with_progress(self, temp_dir):
        target = temp_dir / "data.bin"
        progress = []

        with aioresponses() as m:
            m.get(
                "http://example.com/data",
                status=200,
                body=b"x" * 1000,
                headers={"Content-Length": "1000"},
            )

            result = await do_request(
                {
                    "url": "http://example.com/data",
                    "download_location": target,
                    "progress_callback": lambda error, info: progress.append((error, info)),
                }
            )

        assert result.download_location == target
        assert result.body is None
        assert target.read_bytes() == b"x" * 1000
        assert progress
        assert all(error is None for error, _ in progress)
        assert progress[-1][1].percentage == 100.0

    @pytest.mark.asyncio
    async def test_user_agent_from_settings(self):
        with aioresponses() as m:
            m.get("http://example.com/", status=200)

            await do_request(
                {"url": "http://example.com/"},
                settings=EngineSettings(user_agent="httpreq-test"),
            )

            assert sent(m, "GET", "/")["headers"]["User-Agent"] == "httpreq-test"


class TestRedirects:
    """Test redirect chains."""

    @staticmethod
    def register_chain(m: aioresponses) -> None:
        m.get("http://example.com/r1", status=302, headers={"Location": "/r2"})
        m.get("http://example.com/r2", status=301, headers={"Location": "http://example.com/final"})
        m.get("http://example.com/final", status=200, body="done")

    @pytest.mark.asyncio
    async def test_chain_within_budget(self):
        descriptor = RequestDescriptor(
            url="http://example.com/r1", allow_redirects=True, max_redirects=2
        )

        with aioresponses() as m:
            self.register_chain(m)
            result = await do_request(descriptor)

        assert result.status_code == 200
        assert result.body == "done"
        assert result.url == "http://example.com/final"

        # Hops advance a private copy
        assert descriptor.url == "http://example.com/r1"
        assert descriptor.redirect_count == 0

    @pytest.mark.asyncio
    async def test_chain_over_budget(self):
        with aioresponses() as m:
            self.register_chain(m)

            with pytest.raises(TooManyRedirectsError) as exc_info:
                await do_request(
                    {"url": "http://example.com/r1", "allow_redirects": True, "max_redirects": 1}
                )

        assert exc_info.value.code == ErrorCode.TOO_MANY_REDIRECTS
        assert exc_info.value.redirects == 1

    @pytest.mark.asyncio
    async def test_redirects_not_followed_by_default(self):
        with aioresponses() as m:
            self.register_chain(m)

            result = await do_request({"url": "http://example.com/r1"})

        assert result.status_code == 302
        assert result.headers["Location"] == "/r2"

    @pytest.mark.asyncio
    async def test_default_budget_from_settings(self):
        with aioresponses() as m:
            m.get(
                "http://example.com/loop",
                status=302,
                headers={"Location": "/loop"},
                repeat=True,
            )

            with pytest.raises(TooManyRedirectsError) as exc_info:
                await do_request(
                    {"url": "http://example.com/loop", "allow_redirects": True},
                    settings=EngineSettings(default_max_redirects=3),
                )

            assert exc_info.value.redirects == 3
            assert len(calls_to(m, "GET", "/loop")) == 4


class TestErrors:
    """Test error classification."""

    @pytest.mark.asyncio
    async def test_timeout(self):
        with aioresponses() as m:
            m.get("http://example.com/slow", exception=asyncio.TimeoutError())

            with pytest.raises(RequestTimeoutError) as exc_info:
                await do_request({"url": "http://example.com/slow", "timeout": 50})

        assert exc_info.value.code == ErrorCode.TIMEOUT
        assert exc_info.value.message == "request timed out"

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        with aioresponses() as m:
            m.get(
                "http://example.com/down",
                exception=ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused"),
            )

            with pytest.raises(TransportError) as exc_info:
                await do_request({"url": "http://example.com/down"})

        assert exc_info.value.code == "ECONNREFUSED"
        assert exc_info.value.url == "http://example.com/down"
        assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)

    @pytest.mark.asyncio
    async def test_client_error_uses_class_name(self):
        with aioresponses() as m:
            m.get("http://example.com/bad", exception=aiohttp.ClientConnectionError("boom"))

            with pytest.raises(TransportError) as exc_info:
                await do_request({"url": "http://example.com/bad"})

        assert exc_info.value.code == "ClientConnectionError"

    @pytest.mark.asyncio
    async def test_invalid_url(self):
        with pytest.raises(TransportError) as exc_info:
            await do_request({"url": "not a url"})

        assert exc_info.value.code == "InvalidURL"

    @pytest.mark.asyncio
    async def test_files_with_get_never_dispatches(self, sample_files):
        with aioresponses() as m:
            with pytest.raises(CantSendFilesUsingGetError):
                await do_request(
                    {"url": "http://example.com/up", "files": {"f": str(sample_files["report"])}}
                )

            assert not m.requests


class TestCallbackDelivery:
    """Test callback style completion."""

    @pytest.mark.asyncio
    async def test_success_delivered_once(self):
        calls = []

        with aioresponses() as m:
            m.get("http://example.com/", status=200, body="ok")

            result = await do_request(
                {"url": "http://example.com/"}, lambda error, res: calls.append((error, res))
            )

        assert len(calls) == 1
        error, delivered = calls[0]
        assert error is None
        assert delivered is result
        assert delivered.body == "ok"

    @pytest.mark.asyncio
    async def test_failure_delivered_once_without_raising(self):
        calls = []

        async def callback(error, res):
            calls.append((error, res))

        with aioresponses() as m:
            m.get("http://example.com/", exception=asyncio.TimeoutError())

            result = await do_request({"url": "http://example.com/"}, callback)

        assert result is None
        assert len(calls) == 1
        error, delivered = calls[0]
        assert isinstance(error, HttpReqError)
        assert error.code == ErrorCode.TIMEOUT
        assert delivered is None
