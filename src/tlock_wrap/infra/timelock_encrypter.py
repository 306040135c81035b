"""``timelock`` backed implementation of :class:`~tlock_wrap.core.protocols.Encrypter`.

This module is the **only** place in the codebase that imports
``timelock``.  All library exceptions are caught here and re-raised as
:class:`~tlock_wrap.exceptions.EncryptionError` — nothing raw escapes
the infrastructure boundary.
"""

from __future__ import annotations

import secrets

from tlock_wrap.core.protocols import ChainClient
from tlock_wrap.exceptions import (
    ChainInfoError,
    EncryptionError,
    EnvironmentError,
    append_upgrade_suggestion,
)

SALT_BYTES: int = 32


class TimelockEncrypter:
    """Concrete :class:`Encrypter` backed by the ``timelock`` bindings.

    The public key of the target chain is read from the client handle,
    so the same encrypter serves both networks.

    This class satisfies the :class:`~tlock_wrap.core.protocols.Encrypter`
    protocol structurally — no explicit inheritance required.
    """

    def encrypt(self, round_number: int, plaintext: bytes, client: ChainClient) -> bytes:
        """Encrypt *plaintext* for *round_number* on *client*'s chain.

        Raises
        ------
        EnvironmentError
            When the ``timelock`` package is not installed.
        EncryptionError
            When chain metadata is unavailable or the library fails.
        """
        try:
            from timelock import Timelock
        except ModuleNotFoundError as exc:
            raise EnvironmentError(
                "timelock is not installed. Install with: pip install timelock",
            ) from exc

        try:
            info = client.chain_info()
        except ChainInfoError as exc:
            raise EncryptionError(
                f"Cannot encrypt without chain info: {exc}",
                hint=exc.hint,
            ) from exc

        try:
            message = plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise EncryptionError("Plaintext is not valid UTF-8.") from exc

        salt = secrets.token_bytes(SALT_BYTES)
        try:
            ciphertext = Timelock(info.public_key).tle(round_number, message, salt)
        except Exception as exc:
            raise EncryptionError(
                f"timelock failed to encrypt for round {round_number}: {exc}",
                hint=append_upgrade_suggestion(
                    f"Check that the {client.network.value} chain scheme "
                    f"({info.scheme_id}) is supported.",
                ),
            ) from exc

        return bytes(ciphertext)
