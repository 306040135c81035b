"""Command-line argument parsing for tlock-wrap.

Turns raw ``argv`` tokens into a validated
:class:`~tlock_wrap.core.models.Options` record.  Every failure is
raised as :class:`~tlock_wrap.exceptions.UsageError` or
:class:`~tlock_wrap.exceptions.ValidationError` so the error boundary
can exit with :data:`~tlock_wrap.cli.exit_codes.GENERAL_ERROR` — argparse
is never allowed to call ``sys.exit(2)`` on its own.
"""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from typing import NoReturn

from tlock_wrap.core.models import Options
from tlock_wrap.core.validation import parse_round, validate_text
from tlock_wrap.exceptions import UsageError
from tlock_wrap.version import __version__

PROG = "tlock-wrap"

HELP_FLAGS: frozenset[str] = frozenset({"-h", "--help"})

_EPILOG = f"""\
examples:
  {PROG} "Hello World" 11645812
  {PROG} "Secret message" 11645812 --output secret.age
  {PROG} "Secret message" 11645812 --stdout --quiet > secret.age
  {PROG} "Long text" 11645812 --stdout --quiet | gzip > secret.age.gz
  {PROG} "Test message" 20000 --testnet --verbose
  {PROG} -- "-text starting with a dash" 11645812

networks:
  mainnet (default)  quicknet  52db9ba70e0cc0f6eaf7803dd07447a1f5477735fd3f661792ba94600c84e971
  testnet (--testnet)          7672797f548f3f4748ac4bf3352fc6c6b6468c9ad40ad456a397545c6e2df5bf

Run '{PROG} doctor' to check your environment.
"""


class _ArgumentParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises :class:`UsageError` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(
            message[:1].upper() + message[1:] + ".",
            hint=f"{self.format_usage().strip()}\nTry '{self.prog} --help' for more information.",
        )


# ---------------------------------------------------------------------------
# Parser construction
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser.

    The CLI supports:
    * ``tlock-wrap <text> <round> [options]`` — encrypt
    * ``tlock-wrap doctor``                  — environment diagnostics
    * ``tlock-wrap --version``
    """
    parser = _ArgumentParser(
        prog=PROG,
        description="Timelock-encrypt text so it can only be decrypted "
        "once a future drand round is reached.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument("text", help="Text to encrypt (quote it if it contains spaces).")
    parser.add_argument("round", help="Target drand round number (>= 1).")
    parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        default=None,
        help="Output file (default: encrypted-<network>-round-<round>-<timestamp>.age).",
    )
    parser.add_argument(
        "-s",
        "--stdout",
        action="store_true",
        help="Write the encrypted content to stdout (for piping).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress all output except the encrypted content (requires --stdout).",
    )
    parser.add_argument(
        "-t",
        "--testnet",
        action="store_true",
        help="Use the drand testnet instead of mainnet.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show chain details and artifact size.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def wants_help(argv: Sequence[str]) -> bool:
    """Return ``True`` when *argv* requests help anywhere before ``--``."""
    for token in argv:
        if token == "--":
            return False
        if token in HELP_FLAGS:
            return True
    return False


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_options(argv: Sequence[str]) -> Options:
    """Parse and validate *argv* into :class:`Options`.

    Raises
    ------
    UsageError
        Missing positionals, unknown flags, or conflicting flags.
    ValidationError
        Blank text or an invalid round.
    """
    args = build_parser().parse_args(list(argv))

    if args.output is not None and not args.output.strip():
        raise UsageError("--output requires a filename.")
    if args.stdout and args.output is not None:
        raise UsageError("Cannot use both --stdout and --output.")
    if args.quiet and not args.stdout:
        raise UsageError("--quiet can only be used with --stdout.")

    return Options(
        text=validate_text(args.text),
        round=parse_round(args.round),
        output_path=args.output,
        to_stdout=args.stdout,
        quiet=args.quiet,
        verbose=args.verbose,
        use_testnet=args.testnet,
    )
