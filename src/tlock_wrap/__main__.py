"""Allow ``python -m tlock_wrap`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m tlock_wrap`` behaves identically to the ``tlock-wrap``
console script.
"""

from __future__ import annotations

from tlock_wrap.cli.app import cli

if __name__ == "__main__":
    cli()
