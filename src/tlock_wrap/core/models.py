"""Domain models for tlock-wrap.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and must remain pure across the entire lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


# ---------------------------------------------------------------------------
# Network variant
# ---------------------------------------------------------------------------

class Network(str, Enum):
    """The two drand networks a client handle can point at."""

    MAINNET = "mainnet"
    TESTNET = "testnet"


# ---------------------------------------------------------------------------
# Command-line options
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Options:
    """Validated options for a single encryption run.

    Built once by :func:`tlock_wrap.cli.arguments.parse_options`, which
    guarantees that ``output_path`` and ``to_stdout`` are never both set
    and that ``quiet`` is only set together with ``to_stdout``.
    """

    text: str
    """Plaintext to encrypt.  Never blank."""

    round: int
    """Target drand round, ``1 <= round <= MAX_SAFE_INTEGER``."""

    output_path: str | None = None
    """Explicit output file, or ``None`` to auto-generate a name."""

    to_stdout: bool = False
    """Write the raw artifact to standard output instead of a file."""

    quiet: bool = False
    """Suppress every report line (only valid with ``to_stdout``)."""

    verbose: bool = False
    """Report chain diagnostics and size details."""

    use_testnet: bool = False
    """Select the drand testnet instead of mainnet."""

    @property
    def network(self) -> Network:
        return Network.TESTNET if self.use_testnet else Network.MAINNET


# ---------------------------------------------------------------------------
# Chain metadata
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ChainInfo:
    """Subset of the drand ``/info`` document consumed by tlock-wrap."""

    hash: str
    """Chain hash (hex)."""

    scheme_id: str
    """Signature scheme identifier (e.g. ``bls-unchained-g1-rfc9380``)."""

    public_key: str
    """Group public key (hex)."""

    period: int | None = None
    """Seconds between rounds, or ``None`` if not reported."""

    genesis_time: int | None = None
    """UNIX time of round 1, or ``None`` if not reported."""


# ---------------------------------------------------------------------------
# Output destination
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OutputTarget:
    """Where the encrypted artifact goes: standard output or a file."""

    path: Path | None
    """Destination file, or ``None`` for the standard-output stream."""

    @classmethod
    def stream(cls) -> OutputTarget:
        return cls(path=None)

    @classmethod
    def file(cls, path: str | Path) -> OutputTarget:
        return cls(path=Path(path))

    @property
    def is_stream(self) -> bool:
        return self.path is None


# ---------------------------------------------------------------------------
# Pipeline result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class EncryptionResult:
    """The encrypted artifact together with its resolved destination."""

    artifact: bytes
    """Opaque ciphertext, written verbatim and never inspected."""

    target: OutputTarget
    network: Network
    round: int

    def __len__(self) -> int:
        return len(self.artifact)
