"""Custom exception hierarchy for tlock-wrap.

All exceptions that cross layer boundaries must inherit from
:class:`TlockWrapError`.  Raw third-party exceptions (``requests``,
``timelock``, ``OSError``) must NEVER propagate beyond the
infrastructure layer — they must be caught and re-raised as a typed
subclass defined here.

Hierarchy
---------
TlockWrapError
├── UsageError
├── ValidationError
├── ChainInfoError        (non-fatal during diagnostics)
├── EncryptionError
├── OutputWriteError
└── EnvironmentError
"""

from __future__ import annotations


class TlockWrapError(Exception):
    """Base exception for all tlock-wrap errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    fatal: bool = True
    """Whether the error aborts the remaining pipeline steps."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command line ----------------------------------------------------------

class UsageError(TlockWrapError):
    """Raised for missing arguments, unknown flags or conflicting flags."""


class ValidationError(TlockWrapError):
    """Raised when the text or round argument fails validation."""


# --- Network / chain metadata ----------------------------------------------

class ChainInfoError(TlockWrapError):
    """Raised when drand chain metadata cannot be fetched or trusted.

    Recoverable while reporting diagnostics; the encrypter re-raises it
    as :class:`EncryptionError` when the metadata is actually required.
    """

    fatal = False


# --- Encryption ------------------------------------------------------------

class EncryptionError(TlockWrapError):
    """Raised when the timelock primitive fails to produce an artifact."""


# --- Output ----------------------------------------------------------------

class OutputWriteError(TlockWrapError):
    """Raised when the encrypted artifact cannot be written."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(TlockWrapError):
    """Raised when a required runtime dependency is not available."""


def append_upgrade_suggestion(hint: str, package: str = "timelock") -> str:
    """Append package upgrade guidance to an existing hint text.

    The suggestion is appended only once and preserves the original
    hint content verbatim.
    """
    marker = f"Also try updating {package}:"
    if marker in hint:
        return hint
    return "\n".join(
        (
            hint,
            marker,
            f"    pip install --upgrade {package}",
        )
    )
