"""CLI entry point for xpipe."""

from __future__ import annotations

import logging
import sys

import click

from xpipe import __version__
from xpipe.cli.output import configure_logging, print_error
from xpipe.core.engine import run as run_engine
from xpipe.errors import XpipeError

logger = logging.getLogger(__name__)


class XpipeGroup(click.Group):
    """Custom group that treats the first non-option argument as the command.

    Options are only recognised before the command, so the command's own
    flags (``awk -F,``) pass through untouched.  ``--`` ends xpipe's
    options explicitly, which also allows a command named like a
    subcommand.
    """

    # Options that take a value argument
    _VALUE_OPTS = {"-b", "--buffer-size", "-t", "--timeout"}

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        # If first arg matches a subcommand, dispatch normally
        if args and args[0] in self.commands:
            return super().parse_args(ctx, args)

        click_args: list[str] = []
        command: list[str] = []
        i = 0
        while i < len(args):
            arg = args[i]
            if arg == "--":
                command = args[i + 1:]
                break
            if arg in self._VALUE_OPTS and i + 1 < len(args):
                click_args.extend([arg, args[i + 1]])
                i += 2
            elif arg.startswith("-") and arg != "-":
                # Flags, --opt=value, attached short values (-b60) and
                # unknown options, which click reports.
                click_args.append(arg)
                i += 1
            else:
                command = args[i:]
                break

        ctx.ensure_object(dict)
        ctx.obj["command"] = command
        return super().parse_args(ctx, click_args)


@click.group(cls=XpipeGroup, invoke_without_command=True)
@click.option(
    "--buffer-size", "-b",
    type=click.IntRange(min=1),
    default=None,
    help="Buffer capacity in bytes [default: 8192]",
)
@click.option(
    "--timeout", "-t",
    type=click.IntRange(min=0),
    default=None,
    help="Flush complete lines after SECONDS without input (0: never)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--rich/--no-rich", default=None, help="Rich terminal output (default: auto)")
@click.version_option(__version__, "--version", prog_name="xpipe")
@click.pass_context
def cli(
    ctx: click.Context,
    buffer_size: int | None,
    timeout: int | None,
    verbose: bool,
    rich: bool | None,
) -> None:
    """Split stdin into lines and pipe each chunk into a new COMMAND.

    \b
    Usage:
      producer | xpipe awk '{ print NR, $0 }'
      producer | xpipe -b 65536 -t 5 sort
      xpipe config                         (show configuration)
    """
    if ctx.invoked_subcommand is not None:
        return

    use_rich = rich if rich is not None else sys.stderr.isatty()
    configure_logging(verbose, use_rich)

    ctx.ensure_object(dict)
    command = ctx.obj.get("command", [])
    if not command:
        raise click.UsageError("Missing COMMAND to pipe lines into.", ctx=ctx)

    from xpipe.core.config import resolve_config

    try:
        config = resolve_config(command, buffer_size=buffer_size, timeout=timeout)
        stats = run_engine(config)
    except XpipeError as exc:
        print_error(str(exc), use_rich)
        raise SystemExit(exc.exit_code)
    except OSError as exc:
        print_error(f"I/O error: {exc}", use_rich)
        raise SystemExit(1)

    logger.debug("Done: %d chunks", stats.flushes)


def _register_subcommands() -> None:
    """Register CLI subcommands."""
    from xpipe.cli.commands import config_cmd

    cli.add_command(config_cmd, "config")


_register_subcommands()


def main() -> None:
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
