"""``tlock-wrap doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment satisfies tlock-wrap's requirements
and whether both drand networks are reachable.

This module lives in the CLI layer — it may import from ``infra``
and ``core``, and it renders via Rich.  No business logic resides
here; it purely collects and displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys
from importlib import metadata

from tlock_wrap.cli import exit_codes
from tlock_wrap.cli.console import console
from tlock_wrap.core.models import Network
from tlock_wrap.exceptions import ChainInfoError
from tlock_wrap.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    major, minor = sys.version_info[:2]
    ok = (major, minor) >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _timelock_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the timelock package row."""
    try:
        from timelock import Timelock  # noqa: F401
    except ImportError:
        return "timelock", "NOT INSTALLED", "[red]FAIL[/red]"
    try:
        version = metadata.version("timelock")
    except metadata.PackageNotFoundError:
        version = "unknown"
    return "timelock", version, "[green]OK[/green]"


def _requests_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the requests row."""
    try:
        import requests
    except ImportError:
        return "requests", "NOT INSTALLED", "[red]FAIL[/red]"
    return "requests", requests.__version__, "[green]OK[/green]"


def _network_check(network: Network) -> tuple[str, str, str]:
    """Return (label, value, status) for a drand network row.

    An unreachable network is a WARN: encryption on the other network
    may still work.
    """
    label = f"drand {network.value}"
    try:
        from tlock_wrap.infra.drand_client import select_client
    except ImportError:
        return label, "requests missing", "[yellow]WARN[/yellow]"

    try:
        with select_client(network is Network.TESTNET) as client:
            info = client.chain_info()
    except ChainInfoError as exc:
        return label, str(exc)[:40], "[yellow]WARN[/yellow]"
    return label, info.scheme_id, "[green]OK[/green]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    release = platform.release()
    machine = platform.machine()
    value = f"{system_display} {release} ({machine})"
    return "OS", value, "[green]OK[/green]"


def _tlockwrap_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the tlock-wrap version row."""
    return "tlock-wrap", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\ntlock-wrap doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<16} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        plain_status = _status_plain(status)
        print(f"{label:<16} {value:<40} {plain_status:<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor() -> int:
    """Execute all diagnostic checks and render a Rich summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    checks = [
        _tlockwrap_version_check(),
        _python_version_check(),
        _timelock_check(),
        _requests_check(),
        _network_check(Network.MAINNET),
        _network_check(Network.TESTNET),
        _os_check(),
    ]

    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="tlock-wrap doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=16)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)

        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    if has_failure:
        if rich_available:
            console.print("[bold red]Some checks failed.[/bold red]")
            console.print("Install missing packages with: [bold]pip install timelock requests[/bold]")
        else:
            print("Some checks failed.", file=sys.stderr)
            print("Install missing packages with: pip install timelock requests", file=sys.stderr)
        return exit_codes.GENERAL_ERROR

    if rich_available:
        console.print("[bold green]All checks passed.[/bold green]")
    else:
        print("All checks passed.", file=sys.stderr)
    return exit_codes.SUCCESS
