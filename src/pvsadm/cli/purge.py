"""``pvsadm purge images`` — delete images by name pattern and age.

Flow:
1. Resolve the instance and select candidates with the purge filter.
2. Render the candidates as a table.
3. Stop on ``--dry-run``; otherwise confirm (unless ``--no-prompt``).
4. Delete, optionally continuing past failures.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable
from typing import Any

from rich.markup import escape

from pvsadm.cli import exit_codes
from pvsadm.cli.console import console, output
from pvsadm.cli.context import CloudContext
from pvsadm.cli.image_commands import add_instance_arguments
from pvsadm.cli.tables import build_image_table
from pvsadm.exceptions import InvalidOptionError, missing_sdk_error
from pvsadm.utils.durations import parse_duration

PURGE_EPILOG = """\
examples:
  # list the images older than three days whose names start with rhel-
  pvsadm purge images -n upstream-core-lon04 --before 72h --expr '^rhel-' --dry-run

  # delete every image created in the last hour without asking
  pvsadm purge images -i <INSTANCE_ID> --since 1h --no-prompt
"""

CONFIRM_MESSAGE: str = (
    "Deleting all the above images, images can't be claimed back once deleted. "
    "Do you really want to continue?"
)


def _import_questionary() -> Any:
    """Import questionary lazily for the confirmation prompt."""
    try:
        import questionary
    except ModuleNotFoundError as exc:
        raise missing_sdk_error("questionary") from exc
    return questionary


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the ``purge`` command group."""
    purge = subparsers.add_parser("purge", help="Purge the PowerVS resources")
    purge_sub = purge.add_subparsers(dest="purge_command", metavar="<subcommand>")

    images = purge_sub.add_parser(
        "images",
        help="Purge the PowerVS images",
        description="Purge the PowerVS images matching a name pattern and age window",
        epilog=PURGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_instance_arguments(images)
    images.add_argument(
        "--before",
        default="0",
        help="Remove resources created at least this long ago (e.g. 72h)",
    )
    images.add_argument(
        "--since",
        default="0",
        help="Remove resources created within this long (e.g. 1h30m)",
    )
    images.add_argument(
        "--expr", default="", help="Remove resources whose names match the regular expression",
    )
    images.add_argument(
        "--dry-run", action="store_true", help="Only list the resources that would be deleted",
    )
    images.add_argument(
        "--no-prompt", action="store_true", help="Delete without asking for confirmation",
    )
    images.add_argument(
        "--ignore-errors", action="store_true", help="Continue when a deletion fails",
    )
    images.set_defaults(handler=handle_purge_images)


def confirm_deletion() -> bool:
    """Ask the user to confirm.  An aborted prompt counts as Ctrl+C."""
    questionary = _import_questionary()
    answer = questionary.confirm(CONFIRM_MESSAGE, default=False).ask()
    if answer is None:
        raise KeyboardInterrupt
    return bool(answer)


def handle_purge_images(
    args: argparse.Namespace,
    context_factory: Callable[[], CloudContext],
) -> int:
    before = parse_duration(args.before)
    since = parse_duration(args.since)
    if before and since:
        raise InvalidOptionError("--before and --since can't be used together.")

    context = context_factory()
    service = context.image_service(
        instance_id=args.instance_id, instance_name=args.instance_name,
    )
    candidates = service.purgeable_images(before=before, since=since, expr=args.expr)
    if not candidates:
        console.print("[green]No images to purge.[/green]")
        return exit_codes.SUCCESS

    output.print(build_image_table(candidates, title="Images to purge"))

    if args.dry_run:
        console.print(f"[yellow]Dry run:[/yellow] {len(candidates)} image(s) would be deleted.")
        return exit_codes.SUCCESS

    if not args.no_prompt and not confirm_deletion():
        console.print("[yellow]Purge cancelled.[/yellow]")
        return exit_codes.SUCCESS

    result = service.purge(candidates, ignore_errors=args.ignore_errors)
    console.print(f"[bold green]Deleted {len(result.deleted)} image(s).[/bold green]")
    if result.failed:
        console.print(f"[bold red]Failed to delete {len(result.failed)} image(s):[/bold red]")
        for image, error in result.failed:
            console.print(f"  {escape(image.name)}: {escape(str(error))}")
        return exit_codes.PARTIAL_FAILURE
    return exit_codes.SUCCESS
