"""tlock-wrap — timelock-encrypt text for a future drand round.

Built on the ``timelock`` Python bindings with a strict layered architecture.
"""

from tlock_wrap.version import __version__

__all__: list[str] = ["__version__"]
