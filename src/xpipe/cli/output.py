"""Diagnostic output on stderr. stdout always belongs to the command."""

from __future__ import annotations

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

STYLE_ERROR_LABEL = "bold #f87171"  # red
STYLE_ERROR_BODY = "#f87171"


def configure_logging(verbose: bool, use_rich: bool) -> None:
    """Route xpipe's log records to stderr."""
    level = logging.DEBUG if verbose else logging.WARNING
    if use_rich:
        handler: logging.Handler = RichHandler(
            console=Console(stderr=True), show_path=False, rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("xpipe: %(levelname)s %(name)s: %(message)s"))

    root = logging.getLogger("xpipe")
    root.handlers[:] = [handler]
    root.setLevel(level)
    root.propagate = False


def print_error(message: str, use_rich: bool) -> None:
    """Report a fatal error."""
    if use_rich:
        console = Console(stderr=True, highlight=False)
        console.print(f"[{STYLE_ERROR_LABEL}]xpipe:[/] [{STYLE_ERROR_BODY}]{escape(message)}[/]", markup=True)
    else:
        click.echo(f"xpipe: {message}", err=True)
