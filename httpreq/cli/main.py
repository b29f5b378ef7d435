#!/usr/bin/env python3
"""
Command-line interface for the httpreq library.

Sends one request described by the command line through ``do_request`` and
prints the terminal response.
"""

import argparse
import asyncio
import json
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from rich.progress import Progress, TaskID

from ..config import config_manager
from ..config.models import LogLevel
from ..core import do_request
from ..exceptions import HttpReqError, ProgressUnavailableError
from ..logging import setup_logging
from ..models import DownloadProgress, ProgressCallback, RequestDescriptor
from .formatting import create_formatter
from .parsers import create_parser
from .utils import parse_headers, parse_pairs, parse_proxy


def build_descriptor(args: argparse.Namespace) -> RequestDescriptor:
    """
    Translate parsed arguments into a request descriptor.

    Raises:
        ValueError: For malformed option values
        pydantic.ValidationError: If the descriptor is invalid
    """
    fields: Dict[str, Any] = {"url": args.url, "method": args.method}

    parameters = parse_pairs(args.data, "-d/--data")
    if parameters:
        fields["parameters"] = parameters

    files = parse_pairs(args.file, "-F/--file")
    if files:
        fields["files"] = files

    if args.json is not None:
        try:
            fields["json"] = json.loads(args.json)
        except json.JSONDecodeError as e:
            raise ValueError(f"--json is not valid JSON: {e}") from e

    if args.body is not None:
        fields["body"] = args.body

    headers = parse_headers(args.headers)
    if headers:
        fields["headers"] = headers

    if args.cookies:
        fields["cookies"] = list(args.cookies)
    if args.auth:
        fields["auth"] = args.auth
    if args.proxy:
        fields["proxy"] = parse_proxy(args.proxy)

    fields["allow_redirects"] = args.follow
    if args.max_redirects is not None:
        fields["max_redirects"] = args.max_redirects
    if args.timeout is not None:
        fields["timeout"] = args.timeout

    if args.insecure:
        fields["reject_unauthorized"] = False
    if args.cert is not None:
        fields["cert"] = args.cert
    if args.key is not None:
        fields["key"] = args.key

    if args.output is not None:
        fields["download_location"] = args.output
    fields["binary"] = args.binary

    return RequestDescriptor.model_validate(fields)


def create_progress_callback(progress: Progress, task: TaskID) -> ProgressCallback:
    """Progress callback driving a rich download bar."""

    def progress_callback(
        error: Optional[ProgressUnavailableError], info: Optional[DownloadProgress]
    ) -> None:
        if info is None:
            # Size unknown; keep the bar indeterminate
            progress.update(task, total=None)
            return
        progress.update(task, total=info.totalsize, completed=info.currentsize)

    return progress_callback


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI function.

    Returns:
        Process exit status: 0 when a response was received, 1 on failure
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    formatter = create_formatter(verbose=args.verbose)

    try:
        config = config_manager.load_config(args.config)
    except ValueError as e:
        formatter.print_error(f"Configuration error: {e}")
        return 1

    logging_config = config.logging
    if args.verbose:
        logging_config = logging_config.model_copy(update={"level": LogLevel.DEBUG})
    setup_logging(logging_config)

    try:
        descriptor = build_descriptor(args)
    except ValidationError as e:
        formatter.print_error(f"Invalid request: {e.errors()[0]['msg']}")
        return 1
    except ValueError as e:
        formatter.print_error(str(e))
        return 1

    try:
        if descriptor.download_location is not None:
            with formatter.create_download_progress() as progress:
                task = progress.add_task(f"Downloading {descriptor.url}", total=None)
                descriptor.progress_callback = create_progress_callback(progress, task)
                result = await do_request(descriptor, settings=config.engine)
        else:
            result = await do_request(descriptor, settings=config.engine)
    except HttpReqError as e:
        formatter.print_error(f"{e.message} ({e.code})")
        return 1
    except KeyboardInterrupt:
        formatter.print_warning("Operation cancelled by user")
        return 1

    assert result is not None
    formatter.print_result(result, args.format)
    if result.download_location is not None and args.format != "body":
        formatter.print_success(f"Saved to {result.download_location}")
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
