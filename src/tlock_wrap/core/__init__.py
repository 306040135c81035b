"""Core / service layer — pure business logic and data transformations.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O.
* No imports from ``cli`` or ``infra``.
* All functions must be fully typed and deterministic.
"""

from tlock_wrap.core.encryption_service import EncryptionService, build_output_filename
from tlock_wrap.core.models import (
    ChainInfo,
    EncryptionResult,
    Network,
    Options,
    OutputTarget,
)
from tlock_wrap.core.protocols import ChainClient, Encrypter, Reporter
from tlock_wrap.core.validation import (
    MAX_SAFE_INTEGER,
    parse_round,
    validate_round,
    validate_text,
)

__all__: list[str] = [
    "MAX_SAFE_INTEGER",
    "ChainClient",
    "ChainInfo",
    "EncryptionResult",
    "EncryptionService",
    "Encrypter",
    "Network",
    "Options",
    "OutputTarget",
    "Reporter",
    "build_output_filename",
    "parse_round",
    "validate_round",
    "validate_text",
]
