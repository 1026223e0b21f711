"""Allow ``python -m pvsadm`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m pvsadm`` behaves identically to the ``pvsadm``
console script.
"""

from __future__ import annotations

from pvsadm.cli.app import cli

if __name__ == "__main__":
    cli()
