"""Go-style duration strings (``72h``, ``1h30m``, ``45m``, ``10s``)."""

from __future__ import annotations

import re
from datetime import timedelta

from pvsadm.exceptions import InvalidOptionError

_UNIT_SECONDS: dict[str, float] = {
    "ms": 0.001,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")


def parse_duration(text: str) -> timedelta:
    """Parse a Go-style duration into a :class:`~datetime.timedelta`.

    ``"0"`` and the empty string mean zero.  Units are ``h``, ``m``,
    ``s`` and ``ms``; components may be chained (``1h30m``).
    """
    value = text.strip()
    if value in ("", "0"):
        return timedelta(0)

    seconds = 0.0
    position = 0
    for match in _COMPONENT.finditer(value):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(value):
        raise InvalidOptionError(
            f"Invalid duration: {text!r}",
            hint="Use values like 72h, 1h30m, 45m or 10s.",
        )
    return timedelta(seconds=seconds)
