"""CLI application entry point and command routing for tlock-wrap.

This module is the **sole error boundary** for the entire application.
It catches :class:`~tlock_wrap.exceptions.TlockWrapError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages on stderr and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the core/service
  and infrastructure layers.
* Fatal errors are always rendered on stderr, even with ``--quiet``, so
  a failing pipe is never silent and stdout is never polluted.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import sys
from contextlib import ExitStack

from tlock_wrap.cli import exit_codes
from tlock_wrap.cli.arguments import build_parser, parse_options, wants_help
from tlock_wrap.cli.console import console, escape
from tlock_wrap.core.models import Options
from tlock_wrap.exceptions import TlockWrapError


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_encrypt(options: Options) -> int:
    """Dispatch a single encryption run.

    Flow:
    1. Instantiate the infra encrypter and the core service.
    2. Select the network client and encrypt (service).
    3. Deliver the artifact to a file or to stdout.
    4. Report a summary unless quiet.
    """
    from tlock_wrap.cli.reporter import ConsoleReporter
    from tlock_wrap.core.encryption_service import EncryptionService
    from tlock_wrap.infra.drand_client import DrandClient, select_client
    from tlock_wrap.infra.output_sink import write_artifact
    from tlock_wrap.infra.timelock_encrypter import TimelockEncrypter

    reporter = ConsoleReporter(quiet=options.quiet, verbose=options.verbose)
    reporter.banner("tlock-wrap — timelock encryption")

    if options.verbose:
        reporter.detail(f"Text: {options.text!r}")
        reporter.detail(f"Round: {options.round}")
        reporter.detail(f"Network: {options.network.value}")

    # Clients opened by the service are closed once encryption is over.
    with ExitStack() as clients:
        def open_client(use_testnet: bool) -> DrandClient:
            return clients.enter_context(select_client(use_testnet))

        service = EncryptionService(TimelockEncrypter(), open_client)
        result = service.encrypt(options, reporter)

    if result.target.is_stream:
        reporter.step("Encrypted content follows on stdout:")
        reporter.rule()
        write_artifact(result.artifact, result.target)
        reporter.rule()
        reporter.success("Done! Encrypted content written to stdout.")
        return exit_codes.SUCCESS

    path = write_artifact(result.artifact, result.target)
    reporter.step(f"Saved to: {path}")
    reporter.step(f"Can be decrypted after round {result.round} is reached.")
    reporter.detail(f"Size: {len(result) / 1024:.2f} KB ({len(result)} bytes)")
    reporter.success("Done! Your text has been encrypted and saved.")
    return exit_codes.SUCCESS


def _handle_doctor() -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from tlock_wrap.cli.doctor import run_doctor

    return run_doctor()


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the tlock-wrap CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    TlockWrapError
        Any domain failure; :func:`cli` renders it and exits with 1.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    if wants_help(args):
        build_parser().print_help()
        return exit_codes.SUCCESS

    if args == ["doctor"]:
        return _handle_doctor()

    options = parse_options(args)
    return _handle_encrypt(options)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except TlockWrapError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
