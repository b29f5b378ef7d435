"""
Argument parsing for the httpreq command.

Options are grouped the way the request descriptor groups its fields:
request content, redirects and timing, TLS and output.
"""

import argparse
from pathlib import Path


def add_basic_arguments(parser: argparse.ArgumentParser) -> None:
    """Add method and URL arguments."""
    parser.add_argument("method", help="HTTP method, e.g. GET or POST")
    parser.add_argument("url", help="URL to request")


def add_content_arguments(parser: argparse.ArgumentParser) -> None:
    """Add request body, header and credential arguments."""
    parser.add_argument(
        "-d",
        "--data",
        action="append",
        metavar="KEY=VALUE",
        help="Request parameter; query string for GET, form field otherwise "
        "(can be used multiple times)",
    )

    parser.add_argument("--json", metavar="JSON", help="JSON document to send as the body")

    parser.add_argument(
        "-F",
        "--file",
        action="append",
        metavar="FIELD=PATH",
        help="File to upload as multipart/form-data (can be used multiple times)",
    )

    parser.add_argument("--body", help="Raw request body, sent as given")

    parser.add_argument(
        "-H",
        "--header",
        action="append",
        dest="headers",
        help='Custom header in format "Key: Value" (can be used multiple times)',
    )

    parser.add_argument(
        "--cookie",
        action="append",
        dest="cookies",
        metavar="NAME=VALUE",
        help="Cookie to send (can be used multiple times)",
    )

    parser.add_argument("-u", "--auth", metavar="USER:PASSWORD", help="Basic authentication")

    parser.add_argument(
        "--proxy", metavar="[SCHEME://]HOST:PORT", help="Send the request through a proxy"
    )


def add_redirect_arguments(parser: argparse.ArgumentParser) -> None:
    """Add redirect and timing arguments."""
    parser.add_argument(
        "-L", "--follow", action="store_true", help="Follow redirects"
    )

    parser.add_argument(
        "--max-redirects",
        type=int,
        help="Maximum redirects to follow (default: from configuration, 10)",
    )

    parser.add_argument(
        "--timeout",
        type=int,
        metavar="MS",
        help="Idle socket timeout in milliseconds",
    )


def add_ssl_arguments(parser: argparse.ArgumentParser) -> None:
    """Add TLS arguments."""
    parser.add_argument(
        "-k",
        "--insecure",
        action="store_true",
        help="Disable SSL certificate verification",
    )

    parser.add_argument("--cert", type=Path, help="PEM client certificate file")
    parser.add_argument("--key", type=Path, help="PEM private key file for --cert")


def add_io_arguments(parser: argparse.ArgumentParser) -> None:
    """Add output related arguments."""
    parser.add_argument(
        "-o", "--output", type=Path, help="Stream the response body into this file"
    )

    parser.add_argument(
        "--binary", action="store_true", help="Keep the response body as raw bytes"
    )

    parser.add_argument(
        "--format",
        choices=["summary", "json", "body"],
        default="summary",
        help="Output format (default: summary)",
    )

    parser.add_argument("--config", type=Path, help="Configuration file (YAML or JSON)")

    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="httpreq",
        description="Send one HTTP request and report its response",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s GET https://httpbin.org/get -d q=python
  %(prog)s POST https://httpbin.org/post --json '{"name": "value"}'
  %(prog)s POST https://httpbin.org/post -F report=./report.pdf -d tag=q3
  %(prog)s GET https://httpbin.org/redirect/3 --follow --max-redirects 5
  %(prog)s GET https://example.com/big.iso -o big.iso
        """,
    )

    add_basic_arguments(parser)
    add_content_arguments(parser)
    add_redirect_arguments(parser)
    add_ssl_arguments(parser)
    add_io_arguments(parser)

    return parser
