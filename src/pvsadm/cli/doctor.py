"""``pvsadm doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies pvsadm's requirements.
No cloud calls are made.
"""

from __future__ import annotations

import platform
import sys
from importlib import metadata

from rich.table import Table

from pvsadm.cli import exit_codes
from pvsadm.cli.console import console
from pvsadm.config import API_KEY_ENV, Settings
from pvsadm.version import __version__

SDK_DISTRIBUTIONS: tuple[str, ...] = (
    "ibm-cloud-sdk-core",
    "ibm-platform-services",
    "ibm-cos-sdk",
)

OK = "[green]OK[/green]"
WARN = "[yellow]WARN[/yellow]"
FAIL = "[red]FAIL[/red]"


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _distribution_check(distribution: str) -> tuple[str, str, str]:
    """Return (label, value, status) for an installed distribution."""
    try:
        version = metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return distribution, "NOT INSTALLED", FAIL
    return distribution, version, OK


def _api_key_check(settings: Settings) -> tuple[str, str, str]:
    """The key is optional for doctor itself, so absence is only a warning."""
    if settings.api_key:
        return "API key", f"set ({API_KEY_ENV} or --api-key)", OK
    return "API key", "not set", WARN


def _os_check() -> tuple[str, str, str]:
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    value = f"{system_display} {platform.release()} ({platform.machine()})"
    return "OS", value, OK


def collect_checks(settings: Settings) -> list[tuple[str, str, str]]:
    return [
        ("pvsadm", __version__, OK),
        _python_version_check(),
        *(_distribution_check(name) for name in SDK_DISTRIBUTIONS),
        _api_key_check(settings),
        _os_check(),
    ]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(settings: Settings) -> int:
    """Execute all diagnostic checks and render a Rich summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check failed,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    checks = collect_checks(settings)

    table = Table(
        title="pvsadm doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, value, status)

    console.print()
    console.print(table)
    console.print()

    missing = [label for label, _, status in checks if status == FAIL and label in SDK_DISTRIBUTIONS]
    if missing:
        console.print("Install the missing SDKs with:\n")
        console.print(f"  [bold]pip install {' '.join(missing)}[/bold]\n")

    if any("FAIL" in status for _, _, status in checks):
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR

    if not settings.api_key:
        console.print(f"[yellow]Export {API_KEY_ENV} before running cloud commands.[/yellow]")
    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS
