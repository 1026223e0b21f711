"""Process exit codes returned by ``pvsadm``.

Every command handler returns one of these; the error boundary in
:mod:`pvsadm.cli.app` maps exceptions onto them.
"""

from __future__ import annotations

SUCCESS: int = 0
"""The command finished and every requested change was made."""

GENERAL_ERROR: int = 1
"""A PvsadmError was reported to the user (bad option, API failure, ...)."""

UNEXPECTED_ERROR: int = 2
"""An exception outside the PvsadmError hierarchy reached the boundary."""

PARTIAL_FAILURE: int = 3
"""``purge`` ran with ``--ignore-errors`` and some deletions failed."""

KEYBOARD_INTERRUPT: int = 130
"""Interrupted with Ctrl+C (128 + SIGINT)."""
