"""
Tests for CLI argument helpers.
"""

import pytest

from httpreq.cli.parsers import create_parser
from httpreq.cli.utils import parse_headers, parse_pairs, parse_proxy


class TestParseHelpers:
    """Test option value parsing."""

    def test_parse_headers(self, capsys):
        headers = parse_headers(["Accept: application/json", "X-Trace:1", "broken"])

        assert headers == {"Accept": "application/json", "X-Trace": "1"}
        assert "Invalid header format: broken" in capsys.readouterr().err

    def test_parse_headers_none(self):
        assert parse_headers(None) == {}

    def test_parse_pairs(self):
        assert parse_pairs(["a=1", "b=x=y", "a=2", "empty="], "-d") == {
            "a": "2",
            "b": "x=y",
            "empty": "",
        }

    @pytest.mark.parametrize("item", ["novalue", "=value"])
    def test_parse_pairs_rejects_malformed(self, item):
        with pytest.raises(ValueError, match="-d expects KEY=VALUE"):
            parse_pairs([item], "-d")

    @pytest.mark.parametrize(
        "value, host, port, encrypted",
        [
            ("proxy.local:3128", "proxy.local", 3128, False),
            ("https://secure.proxy:8443", "secure.proxy", 8443, True),
            ("[::1]:8080", "::1", 8080, False),
        ],
    )
    def test_parse_proxy(self, value, host, port, encrypted):
        proxy = parse_proxy(value)

        assert proxy.host == host
        assert proxy.port == port
        assert proxy.is_encrypted is encrypted

    @pytest.mark.parametrize("value", ["proxy.local", "proxy.local:abc", "proxy.local:70000"])
    def test_parse_proxy_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            parse_proxy(value)


class TestParser:
    """Test the argument parser."""

    def test_defaults(self):
        args = create_parser().parse_args(["GET", "http://example.com/"])

        assert args.method == "GET"
        assert args.url == "http://example.com/"
        assert args.follow is False
        assert args.format == "summary"
        assert args.data is None

    def test_repeated_options(self):
        args = create_parser().parse_args(
            ["POST", "http://example.com/", "-d", "a=1", "-d", "b=2", "-H", "X: 1", "-F", "f=./x"]
        )

        assert args.data == ["a=1", "b=2"]
        assert args.headers == ["X: 1"]
        assert args.file == ["f=./x"]
