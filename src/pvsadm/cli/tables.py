"""Rich table rendering for image listings.

All display-related logic lives here — no SDK calls, no filtering.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from rich.markup import escape
from rich.table import Table

from pvsadm.core.models import Image


def _format_date(value: datetime | None) -> str:
    """Render a timestamp as ``YYYY-MM-DD HH:MM:SS UTC`` or ``"—"``."""
    if value is None:
        return "—"
    return value.strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def _format_text(value: str) -> str:
    return value or "—"


def build_image_table(images: Sequence[Image], *, title: str = "Images") -> Table:
    """Build a Rich table with one row per image."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold magenta",
        border_style="dim",
    )
    table.add_column("#", justify="right", style="dim", width=4)
    table.add_column("Name", justify="left", min_width=16)
    table.add_column("ID", justify="left", min_width=12)
    table.add_column("State", justify="left")
    table.add_column("Storage", justify="left")
    table.add_column("OS", justify="left")
    table.add_column("Created", justify="left")

    for i, image in enumerate(images, start=1):
        table.add_row(
            str(i),
            escape(image.name),
            image.image_id,
            _format_text(image.state),
            _format_text(image.storage_type),
            _format_text(image.os_type),
            _format_date(image.creation_date),
        )
    return table
