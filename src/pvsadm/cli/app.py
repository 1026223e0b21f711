"""CLI application entry point and command routing for pvsadm.

This module is the **sole error boundary** for the entire application.
It catches :class:`~pvsadm.exceptions.PvsadmError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — command modules pack options into core
  models and delegate to core services.
* SDK clients are built lazily, only once a command needs them, so
  ``--help``, ``--version`` and ``doctor`` never authenticate.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import sys

from rich.markup import escape

from pvsadm.cli import exit_codes, image_commands, purge
from pvsadm.cli.console import LOG_LEVELS, configure_logging, console
from pvsadm.cli.context import CloudContext
from pvsadm.config import Settings
from pvsadm.exceptions import PvsadmError
from pvsadm.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Commands:
    * ``pvsadm image import`` / ``pvsadm image list``
    * ``pvsadm purge images``
    * ``pvsadm doctor``
    """
    parser = argparse.ArgumentParser(
        prog="pvsadm",
        description="IBM Cloud PowerVS image lifecycle tool.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-k",
        "--api-key",
        default=None,
        help="IBM Cloud API key (defaults to the IBMCLOUD_API_KEY environment variable)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log verbosity (defaults to PVSADM_LOG_LEVEL or INFO)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    image_commands.register(subparsers)
    purge.register(subparsers)
    subparsers.add_parser("doctor", help="Check the local environment")

    # Group parsers print their own help when no subcommand follows.
    for name, group in subparsers.choices.items():
        if name != "doctor":
            group.set_defaults(group_parser=group)
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _make_context(settings: Settings) -> CloudContext:
    """Authenticate and build the cloud clients for a command."""
    return CloudContext.from_settings(settings)


def _handle_doctor(settings: Settings) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from pvsadm.cli.doctor import run_doctor

    return run_doctor(settings)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the pvsadm CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return exit_codes.SUCCESS

    settings = Settings.from_env(api_key=args.api_key, log_level=args.log_level)
    configure_logging(settings.log_level)

    if args.command == "doctor":
        return _handle_doctor(settings)

    handler = getattr(args, "handler", None)
    if handler is None:
        args.group_parser.print_help()
        return exit_codes.SUCCESS

    return handler(args, lambda: _make_context(settings))


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except PvsadmError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}", highlight=False)
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}", highlight=False)
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
