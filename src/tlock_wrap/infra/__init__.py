"""Infrastructure layer — external system integration.

This layer wraps all interaction with the drand HTTP API, the
``timelock`` bindings, and the filesystem.  Every raw third-party
exception must be caught here and re-raised as a
:class:`~tlock_wrap.exceptions.TlockWrapError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from tlock_wrap.infra.drand_client import NETWORKS, DrandClient, NetworkConfig, select_client
from tlock_wrap.infra.output_sink import write_artifact
from tlock_wrap.infra.timelock_encrypter import TimelockEncrypter

__all__: list[str] = [
    "NETWORKS",
    "DrandClient",
    "NetworkConfig",
    "TimelockEncrypter",
    "select_client",
    "write_artifact",
]
