"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters and the CLI
reporter must satisfy.  Core code depends ONLY on these protocols —
never on concrete implementations — preserving the dependency
inversion principle.
"""

from __future__ import annotations

from typing import Protocol

from tlock_wrap.core.models import ChainInfo, Network


class ChainClient(Protocol):
    """Opaque handle to one drand network.

    The core only ever reads :attr:`network` (for reporting), asks for
    :meth:`chain_info`, and hands the object to an :class:`Encrypter`.
    """

    network: Network

    def chain_info(self) -> ChainInfo:
        """Return the chain metadata of the configured network.

        Raises
        ------
        ChainInfoError
            When the metadata cannot be fetched or does not match the
            configured chain.
        """
        ...  # pragma: no cover


class Encrypter(Protocol):
    """Contract for timelock encryption backends.

    Implementations must map all backend-specific exceptions to
    :class:`~tlock_wrap.exceptions.TlockWrapError` subclasses.
    """

    def encrypt(self, round_number: int, plaintext: bytes, client: ChainClient) -> bytes:
        """Encrypt *plaintext* so it can only be opened at *round_number*.

        Raises
        ------
        EncryptionError
            When the artifact cannot be produced for any reason.
        """
        ...  # pragma: no cover


class Reporter(Protocol):
    """Sink for human-readable progress messages.

    The concrete reporter decides what to show under quiet/verbose
    mode; the core just emits every message at the right level.
    """

    def step(self, message: str) -> None:
        """Normal progress line."""
        ...  # pragma: no cover

    def detail(self, message: str) -> None:
        """Diagnostic line, shown only in verbose mode."""
        ...  # pragma: no cover

    def warning(self, message: str) -> None:
        """Non-fatal problem."""
        ...  # pragma: no cover

    def success(self, message: str) -> None:
        """Completed stage."""
        ...  # pragma: no cover
