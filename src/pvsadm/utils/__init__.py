"""Shared utilities — pure helpers importable by any layer.

Rules
-----
* No business logic.
* No I/O.
"""

from pvsadm.utils.durations import parse_duration

__all__: list[str] = ["parse_duration"]
