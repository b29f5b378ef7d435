"""
Formatting utilities for the httpreq CLI.

Results go to stdout; status messages and progress go to stderr so that
``--format body`` output can be piped.
"""

import json
import sys
from typing import Any, Dict, Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from ..models import RequestResult


def result_to_dict(result: RequestResult) -> Dict[str, Any]:
    """JSON-serializable view of a result."""
    data: Dict[str, Any] = {
        "url": result.url,
        "status_code": result.status_code,
        "headers": dict(result.headers),
        "cookies": list(result.cookies),
    }
    if result.download_location is not None:
        data["download_location"] = str(result.download_location)
    elif isinstance(result.body, bytes):
        data["body_length"] = len(result.body)
    else:
        data["body"] = result.body
    return data


class Formatter:
    """Formatting utilities for CLI output."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.console = Console(highlight=False)
        self.err_console = Console(stderr=True, highlight=False)

    def print_success(self, message: str) -> None:
        """Print a success message with green checkmark."""
        self.err_console.print(f"✓ {message}", style="bold green", markup=False)

    def print_error(self, message: str) -> None:
        """Print an error message with red X."""
        self.err_console.print(f"✗ {message}", style="bold red", markup=False)

    def print_warning(self, message: str) -> None:
        """Print a warning message with yellow exclamation."""
        self.err_console.print(f"⚠ {message}", style="bold yellow", markup=False)

    def print_json(self, data: Any, title: Optional[str] = None) -> None:
        """Print JSON data, highlighted on a terminal and plain otherwise."""
        json_str = json.dumps(data, indent=2, default=str, ensure_ascii=False)
        if sys.stdout.isatty():
            if title:
                self.console.rule(title)
            self.console.print(Syntax(json_str, "json", theme="monokai"))
        else:
            sys.stdout.write(json_str + "\n")

    def print_body(self, result: RequestResult) -> None:
        """Write the raw response body to stdout."""
        if isinstance(result.body, bytes):
            sys.stdout.flush()
            sys.stdout.buffer.write(result.body)
            sys.stdout.buffer.flush()
        elif result.body:
            sys.stdout.write(result.body)

    def print_summary(self, result: RequestResult) -> None:
        """Print a summary table of the response."""
        if result.is_success:
            status_style, status_icon = "bold green", "✓"
        elif result.status_code < 400:
            status_style, status_icon = "bold yellow", "→"
        else:
            status_style, status_icon = "bold red", "✗"

        table = Table(show_header=False, box=None, padding=(0, 1))
        table.add_column("Property", style="cyan", no_wrap=True)
        table.add_column("Value")

        table.add_row("URL", Text(result.url))
        table.add_row("Status", f"{status_icon} {result.status_code}", style=status_style)
        table.add_row("Content Type", Text(result.headers.get("Content-Type", "Unknown")))

        if result.download_location is not None:
            table.add_row("Saved To", Text(str(result.download_location)))
        elif result.body is not None:
            table.add_row("Body Length", str(len(result.body)))

        for cookie in result.cookies:
            table.add_row("Cookie", Text(cookie))

        if self.verbose:
            for name, value in result.headers.items():
                table.add_row(Text(name), Text(value), style="dim")

        self.console.print(table)

        if result.download_location is None and isinstance(result.body, str) and result.body:
            self.console.print()
            self.console.print(result.body, markup=False)

    def print_result(self, result: RequestResult, format_type: str = "summary") -> None:
        """Print a result in the given format."""
        if format_type == "json":
            self.print_json(result_to_dict(result), f"Result for {result.url}")
        elif format_type == "body":
            self.print_body(result)
        else:
            self.print_summary(result)

    def create_download_progress(self) -> Progress:
        """Progress bar for streamed downloads."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=self.err_console,
            transient=True,
        )


def create_formatter(verbose: bool = False) -> Formatter:
    """Create a Formatter instance."""
    return Formatter(verbose=verbose)
