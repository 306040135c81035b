"""Core encryption service — orchestrates the encryption pipeline.

This service delegates the actual cryptography to an
:class:`~tlock_wrap.core.protocols.Encrypter` and obtains its network
handle from a client factory, both injected at construction time.  It
is responsible for:

* Selecting the client for the requested network.
* Running the optional (non-fatal) chain diagnostics.
* Delegating to the encrypter.
* Resolving where the artifact should be delivered.
* Ensuring only :class:`~tlock_wrap.exceptions.TlockWrapError`
  subclasses escape.

Guarantees
----------
* Pure orchestration — no ``print()``, no filesystem access.
* No ``timelock`` or ``requests`` import.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from tlock_wrap.core.models import (
    ChainInfo,
    EncryptionResult,
    Network,
    Options,
    OutputTarget,
)
from tlock_wrap.core.protocols import ChainClient, Encrypter, Reporter
from tlock_wrap.exceptions import EncryptionError, TlockWrapError


def build_output_filename(network: Network, round_number: int, now: datetime) -> str:
    """Return the auto-generated artifact filename.

    The UTC timestamp is rendered to second precision with ``:`` and
    ``.`` replaced by ``-`` so the name is safe on every filesystem,
    e.g. ``encrypted-mainnet-round-100-2024-01-31T12-30-05.age``.
    """
    timestamp = now.astimezone(timezone.utc).isoformat(timespec="seconds")
    timestamp = timestamp.removesuffix("+00:00")
    timestamp = timestamp.replace(":", "-").replace(".", "-")
    return f"encrypted-{network.value}-round-{round_number}-{timestamp}.age"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class EncryptionService:
    """Stateless service that drives the encryption pipeline.

    Parameters
    ----------
    encrypter:
        Any object satisfying the :class:`Encrypter` protocol.
    client_factory:
        Callable mapping ``use_testnet`` to a :class:`ChainClient`.
    clock:
        Returns the current time; used for auto-generated filenames
        and round estimates.  Defaults to UTC ``datetime.now``.
    """

    def __init__(
        self,
        encrypter: Encrypter,
        client_factory: Callable[[bool], ChainClient],
        *,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._encrypter: Encrypter = encrypter
        self._client_factory: Callable[[bool], ChainClient] = client_factory
        self._clock: Callable[[], datetime] = clock or _utc_now

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def encrypt(self, options: Options, reporter: Reporter) -> EncryptionResult:
        """Encrypt ``options.text`` for ``options.round``.

        Raises
        ------
        EncryptionError
            When the encrypter fails for any reason.  Never retried.
        EnvironmentError
            When the encryption backend is not installed.
        """
        client = self._client_factory(options.use_testnet)

        reporter.step(f"Encrypting for {options.network.value}, target round {options.round}")
        if options.verbose and not options.quiet:
            self._report_chain_info(client, options.round, reporter)

        plaintext = options.text.encode("utf-8")
        artifact = self._encrypt(client, options.round, plaintext, reporter)
        reporter.success("Encryption successful.")

        return EncryptionResult(
            artifact=artifact,
            target=self.resolve_target(options),
            network=options.network,
            round=options.round,
        )

    def resolve_target(self, options: Options) -> OutputTarget:
        """Return the stream target or the (explicit or generated) file."""
        if options.to_stdout:
            return OutputTarget.stream()
        if options.output_path:
            return OutputTarget.file(options.output_path)
        return OutputTarget.file(
            build_output_filename(options.network, options.round, self._clock()),
        )

    # ------------------------------------------------------------------
    # Encrypter delegation (safe boundary)
    # ------------------------------------------------------------------

    def _encrypt(
        self,
        client: ChainClient,
        round_number: int,
        plaintext: bytes,
        reporter: Reporter,
    ) -> bytes:
        """Call the encrypter and ensure only our exceptions escape."""
        try:
            return self._encrypter.encrypt(round_number, plaintext, client)
        except TlockWrapError as exc:
            _report_failure_detail(exc, reporter)
            raise
        except Exception as exc:
            _report_failure_detail(exc, reporter)
            raise EncryptionError(
                f"Unexpected encryption error: {exc}",
            ) from exc

    # ------------------------------------------------------------------
    # Diagnostics (never fatal)
    # ------------------------------------------------------------------

    def _report_chain_info(
        self,
        client: ChainClient,
        round_number: int,
        reporter: Reporter,
    ) -> None:
        try:
            info = client.chain_info()
        except Exception as exc:  # noqa: BLE001
            reporter.warning(f"Could not fetch chain info: {exc}")
            return

        reporter.detail(f"Chain hash: {info.hash}")
        reporter.detail(f"Scheme: {info.scheme_id}")
        reporter.detail(f"Public key: {info.public_key[:32]}...")

        current = estimate_current_round(info, self._clock())
        if current is None:
            return
        reporter.detail(f"Current round (estimated): {current}")
        if round_number <= current:
            reporter.warning(
                f"Round {round_number} has already been reached; "
                "the artifact will be decryptable immediately.",
            )
        elif info.period:
            wait = (round_number - current) * info.period
            reporter.detail(f"Unlocks in about {_format_duration(wait)}")


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def estimate_current_round(info: ChainInfo, now: datetime) -> int | None:
    """Estimate the latest emitted round from genesis time and period.

    Returns ``None`` when the chain did not report timing data, or when
    *now* is before genesis.
    """
    if not info.period or info.genesis_time is None:
        return None
    elapsed = int(now.timestamp()) - info.genesis_time
    if elapsed < 0:
        return None
    return elapsed // info.period + 1


def _format_duration(seconds: int) -> str:
    days, rem = divmod(seconds, 86_400)
    hours, rem = divmod(rem, 3_600)
    minutes, secs = divmod(rem, 60)
    if days:
        return f"{days}d {hours}h"
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def _report_failure_detail(exc: BaseException, reporter: Reporter) -> None:
    """Emit the exception type and its cause chain as verbose details."""
    current: BaseException | None = exc
    while current is not None:
        reporter.detail(f"Full error: {type(current).__name__}: {current}")
        current = current.__cause__
