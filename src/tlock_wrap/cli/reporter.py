"""Console reporter passed explicitly through the encryption pipeline.

This module bridges the core :class:`~tlock_wrap.core.protocols.Reporter`
protocol with the shared stderr console.  Quiet and verbose rules are
enforced here, once, rather than at every call site.

Design
------
* Everything goes to stderr, so piping stdout yields only the artifact.
* ``quiet`` silences every method; fatal errors are rendered by the
  error boundary in :mod:`tlock_wrap.cli.app`, not here.
* ``detail`` additionally requires ``verbose``.
"""

from __future__ import annotations

from tlock_wrap.cli.console import console, escape


class ConsoleReporter:
    """Quiet/verbose-aware implementation of the ``Reporter`` protocol."""

    def __init__(self, *, quiet: bool = False, verbose: bool = False) -> None:
        self.quiet: bool = quiet
        self.verbose: bool = verbose

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def step(self, message: str) -> None:
        if not self.quiet:
            console.print(escape(message))

    def detail(self, message: str) -> None:
        if self.verbose and not self.quiet:
            console.print(f"[dim]{escape(message)}[/dim]")

    def warning(self, message: str) -> None:
        if not self.quiet:
            console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def success(self, message: str) -> None:
        if not self.quiet:
            console.print(f"[bold green]{escape(message)}[/bold green]")

    # ------------------------------------------------------------------
    # CLI-only helpers
    # ------------------------------------------------------------------

    def banner(self, title: str) -> None:
        """Bold heading followed by a blank line."""
        if not self.quiet:
            console.print(f"\n[bold]{escape(title)}[/bold]\n")

    def rule(self) -> None:
        """Separator around stream output, on stderr."""
        if not self.quiet:
            console.print("─" * 50)
