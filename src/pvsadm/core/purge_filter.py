"""Pure purge-candidate selection.

Every function in this module is a **pure** transformation — no I/O,
no clock access (``now`` is always passed in), fully deterministic.

An image is a purge candidate when:

1. its name matches the expression (unanchored search; empty matches all), and
2. its age falls inside the window: younger than or equal to ``since``,
   or at least ``before`` old.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import datetime, timedelta

from pvsadm.core.models import Image
from pvsadm.exceptions import InvalidOptionError

_ZERO = timedelta(0)


def is_purgeable(
    created: datetime | None,
    *,
    before: timedelta = _ZERO,
    since: timedelta = _ZERO,
    now: datetime,
) -> bool:
    """Return whether a resource created at *created* falls in the window.

    ``since`` takes precedence over ``before``.  With neither set every
    resource qualifies, including those without a creation date.
    """
    if created is None:
        return since == _ZERO and before == _ZERO

    age = now - created
    if since != _ZERO:
        return age <= since
    return age >= before


def compile_expression(expr: str) -> re.Pattern[str] | None:
    """Compile a name filter, or return ``None`` for an empty expression."""
    if not expr:
        return None
    try:
        return re.compile(expr)
    except re.error as exc:
        raise InvalidOptionError(
            f"Invalid regular expression {expr!r}: {exc}",
        ) from exc


def select_purgeable(
    images: Sequence[Image],
    *,
    before: timedelta = _ZERO,
    since: timedelta = _ZERO,
    expr: str = "",
    now: datetime,
) -> list[Image]:
    """Return the images matching *expr* whose age falls in the window."""
    if before != _ZERO and since != _ZERO:
        raise InvalidOptionError("--before and --since can't be used together.")
    if before < _ZERO or since < _ZERO:
        raise InvalidOptionError("--before and --since must not be negative.")

    pattern = compile_expression(expr)
    candidates: list[Image] = []
    for image in images:
        if pattern is not None and not pattern.search(image.name):
            continue
        if not is_purgeable(image.creation_date, before=before, since=since, now=now):
            continue
        candidates.append(image)
    return candidates
