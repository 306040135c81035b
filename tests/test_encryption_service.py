"""Tests for the encryption pipeline (core/encryption_service.py).

The :class:`Encrypter` and the client factory are mocked — no network
access and no ``timelock`` invocation.

Coverage:
* Client selection and encrypter delegation.
* Non-fatal diagnostic chain-info fetch.
* Exception wrapping (unexpected errors → EncryptionError).
* Output-target resolution and auto-generated filenames.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, call

import pytest

from tlock_wrap.core.encryption_service import (
    EncryptionService,
    build_output_filename,
    estimate_current_round,
)
from tlock_wrap.core.models import ChainInfo, Network, Options
from tlock_wrap.exceptions import ChainInfoError, EncryptionError, EnvironmentError

FIXED_NOW = datetime(2024, 1, 31, 12, 30, 5, 123456, tzinfo=timezone.utc)
ARTIFACT = b"-----BEGIN AGE ENCRYPTED FILE-----\nopaque\n-----END AGE ENCRYPTED FILE-----\n"


def _options(**overrides: Any) -> Options:
    defaults: dict[str, Any] = {"text": "Hello", "round": 100}
    defaults.update(overrides)
    return Options(**defaults)


def _service(
    encrypter: MagicMock,
    client: Any,
) -> tuple[EncryptionService, MagicMock]:
    factory = MagicMock(return_value=client)
    return EncryptionService(encrypter, factory, clock=lambda: FIXED_NOW), factory


def _encrypter(result: bytes | Exception = ARTIFACT) -> MagicMock:
    encrypter = MagicMock()
    if isinstance(result, Exception):
        encrypter.encrypt.side_effect = result
    else:
        encrypter.encrypt.return_value = result
    return encrypter


# ---------------------------------------------------------------------------
# Delegation
# ---------------------------------------------------------------------------

class TestDelegation:
    def test_encrypts_utf8_bytes_with_selected_client(
        self, make_client: Callable[..., Any],
    ) -> None:
        client = make_client()
        encrypter = _encrypter()
        svc, factory = _service(encrypter, client)

        result = svc.encrypt(_options(text="héllo"), MagicMock())

        factory.assert_called_once_with(False)
        encrypter.encrypt.assert_called_once_with(100, "héllo".encode("utf-8"), client)
        assert result.artifact == ARTIFACT
        assert result.round == 100
        assert result.network is Network.MAINNET

    def test_testnet_flag_forwarded_to_factory(
        self, make_client: Callable[..., Any],
    ) -> None:
        svc, factory = _service(_encrypter(), make_client(Network.TESTNET))
        result = svc.encrypt(_options(use_testnet=True), MagicMock())

        factory.assert_called_once_with(True)
        assert result.network is Network.TESTNET

    def test_artifact_returned_verbatim(self, make_client: Callable[..., Any]) -> None:
        raw = bytes(range(256))
        svc, _ = _service(_encrypter(raw), make_client())
        assert svc.encrypt(_options(), MagicMock()).artifact == raw

    def test_reports_success(self, make_client: Callable[..., Any]) -> None:
        reporter = MagicMock()
        svc, _ = _service(_encrypter(), make_client())
        svc.encrypt(_options(), reporter)
        reporter.success.assert_called_once_with("Encryption successful.")


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

class TestDiagnostics:
    def test_not_fetched_without_verbose(self, make_client: Callable[..., Any]) -> None:
        client = make_client()
        svc, _ = _service(_encrypter(), client)
        svc.encrypt(_options(), MagicMock())
        assert client.calls == 0

    def test_not_fetched_when_quiet(self, make_client: Callable[..., Any]) -> None:
        client = make_client()
        svc, _ = _service(_encrypter(), client)
        svc.encrypt(_options(verbose=True, to_stdout=True, quiet=True), MagicMock())
        assert client.calls == 0

    def test_verbose_reports_chain_details(
        self, make_client: Callable[..., Any], chain_info: ChainInfo,
    ) -> None:
        reporter = MagicMock()
        client = make_client()
        svc, _ = _service(_encrypter(), client)
        svc.encrypt(_options(verbose=True), reporter)

        assert client.calls == 1
        details = [c.args[0] for c in reporter.detail.call_args_list]
        assert f"Chain hash: {chain_info.hash}" in details
        assert f"Scheme: {chain_info.scheme_id}" in details
        assert f"Public key: {chain_info.public_key[:32]}..." in details

    def test_diagnostic_failure_does_not_block_encryption(
        self, failing_client: Any,
    ) -> None:
        reporter = MagicMock()
        encrypter = _encrypter()
        svc, _ = _service(encrypter, failing_client)

        result = svc.encrypt(_options(verbose=True), reporter)

        assert failing_client.calls == 1
        encrypter.encrypt.assert_called_once()
        assert result.artifact == ARTIFACT
        reporter.warning.assert_called_once_with(
            "Could not fetch chain info: drand unreachable",
        )

    def test_unexpected_diagnostic_failure_is_non_fatal(
        self, make_client: Callable[..., Any],
    ) -> None:
        client = make_client(error=RuntimeError("socket exploded"))
        encrypter = _encrypter()
        svc, _ = _service(encrypter, client)

        svc.encrypt(_options(verbose=True), MagicMock())
        encrypter.encrypt.assert_called_once()

    def test_past_round_warns(self, make_client: Callable[..., Any]) -> None:
        reporter = MagicMock()
        svc, _ = _service(_encrypter(), make_client())
        svc.encrypt(_options(round=1, verbose=True), reporter)

        warnings = [c.args[0] for c in reporter.warning.call_args_list]
        assert any("already been reached" in w for w in warnings)

    def test_future_round_reports_wait(
        self, make_client: Callable[..., Any], chain_info: ChainInfo,
    ) -> None:
        reporter = MagicMock()
        current = estimate_current_round(chain_info, FIXED_NOW)
        assert current is not None
        svc, _ = _service(_encrypter(), make_client())
        svc.encrypt(_options(round=current + 1200, verbose=True), reporter)

        reporter.warning.assert_not_called()
        assert call("Unlocks in about 1h 0m") in reporter.detail.call_args_list


# ---------------------------------------------------------------------------
# Exception mapping
# ---------------------------------------------------------------------------

class TestExceptions:
    def test_encryption_error_propagates(self, make_client: Callable[..., Any]) -> None:
        svc, _ = _service(_encrypter(EncryptionError("remote rejected")), make_client())
        with pytest.raises(EncryptionError, match="remote rejected"):
            svc.encrypt(_options(), MagicMock())

    def test_environment_error_propagates(self, make_client: Callable[..., Any]) -> None:
        svc, _ = _service(_encrypter(EnvironmentError("missing")), make_client())
        with pytest.raises(EnvironmentError):
            svc.encrypt(_options(), MagicMock())

    def test_unexpected_error_wrapped_and_chained(
        self, make_client: Callable[..., Any],
    ) -> None:
        original = RuntimeError("root cause")
        svc, _ = _service(_encrypter(original), make_client())

        with pytest.raises(EncryptionError, match="Unexpected") as exc_info:
            svc.encrypt(_options(), MagicMock())
        assert exc_info.value.__cause__ is original

    def test_failure_detail_reported(self, make_client: Callable[..., Any]) -> None:
        reporter = MagicMock()
        cause = ChainInfoError("offline")
        error = EncryptionError("cannot encrypt")
        error.__cause__ = cause
        svc, _ = _service(_encrypter(error), make_client())

        with pytest.raises(EncryptionError):
            svc.encrypt(_options(verbose=True), reporter)

        details = [c.args[0] for c in reporter.detail.call_args_list]
        assert "Full error: EncryptionError: cannot encrypt" in details
        assert "Full error: ChainInfoError: offline" in details

    def test_no_retry(self, make_client: Callable[..., Any]) -> None:
        encrypter = _encrypter(EncryptionError("flaky"))
        svc, _ = _service(encrypter, make_client())
        with pytest.raises(EncryptionError):
            svc.encrypt(_options(), MagicMock())
        assert encrypter.encrypt.call_count == 1


# ---------------------------------------------------------------------------
# Output target
# ---------------------------------------------------------------------------

class TestResolveTarget:
    def test_stdout(self, make_client: Callable[..., Any]) -> None:
        svc, _ = _service(_encrypter(), make_client())
        assert svc.resolve_target(_options(to_stdout=True)).is_stream

    def test_explicit_path(self, make_client: Callable[..., Any]) -> None:
        svc, _ = _service(_encrypter(), make_client())
        target = svc.resolve_target(_options(output_path="out/secret.age"))
        assert target.path == Path("out/secret.age")

    def test_auto_generated_mainnet(self, make_client: Callable[..., Any]) -> None:
        svc, _ = _service(_encrypter(), make_client())
        target = svc.resolve_target(_options())
        assert target.path == Path("encrypted-mainnet-round-100-2024-01-31T12-30-05.age")

    def test_auto_generated_testnet(self, make_client: Callable[..., Any]) -> None:
        svc, _ = _service(_encrypter(), make_client())
        target = svc.resolve_target(_options(use_testnet=True, round=20000))
        assert target.path == Path("encrypted-testnet-round-20000-2024-01-31T12-30-05.age")


class TestBuildOutputFilename:
    def test_no_colons_or_periods_in_timestamp(self) -> None:
        name = build_output_filename(Network.MAINNET, 7, FIXED_NOW)
        stem = name.removesuffix(".age")
        assert ":" not in stem
        assert "." not in stem

    def test_converts_to_utc(self) -> None:
        local = FIXED_NOW.astimezone(timezone(timedelta(hours=5, minutes=30)))
        assert build_output_filename(Network.TESTNET, 7, local) == (
            "encrypted-testnet-round-7-2024-01-31T12-30-05.age"
        )


class TestEstimateCurrentRound:
    def test_without_timing_data(self) -> None:
        info = ChainInfo(hash="h", scheme_id="s", public_key="pk")
        assert estimate_current_round(info, FIXED_NOW) is None

    def test_before_genesis(self, chain_info: ChainInfo) -> None:
        early = datetime(2000, 1, 1, tzinfo=timezone.utc)
        assert estimate_current_round(chain_info, early) is None

    def test_genesis_is_round_one(self, chain_info: ChainInfo) -> None:
        assert chain_info.genesis_time is not None
        genesis = datetime.fromtimestamp(chain_info.genesis_time, tz=timezone.utc)
        assert estimate_current_round(chain_info, genesis) == 1
        assert estimate_current_round(chain_info, genesis + timedelta(seconds=3)) == 2
