"""Shared pytest fixtures and configuration for the tlock-wrap test suite.

Guidelines
----------
* No internet access in any test.
* ``timelock`` and the drand HTTP session must be mocked at the infra boundary.
* Core tests must be pure — no side effects.
* Tests must not depend on OS state.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from tlock_wrap.core.models import ChainInfo, Network
from tlock_wrap.exceptions import ChainInfoError

MAINNET_HASH = "52db9ba70e0cc0f6eaf7803dd07447a1f5477735fd3f661792ba94600c84e971"


class FakeChainClient:
    """In-memory ``ChainClient`` that records how often it was queried
    and whether it was closed."""

    def __init__(
        self,
        network: Network = Network.MAINNET,
        *,
        info: ChainInfo | None = None,
        error: Exception | None = None,
    ) -> None:
        self.network = network
        self._info = info
        self._error = error
        self.calls = 0
        self.closed = False

    def __enter__(self) -> FakeChainClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def chain_info(self) -> ChainInfo:
        self.calls += 1
        if self._error is not None:
            raise self._error
        assert self._info is not None
        return self._info


@pytest.fixture()
def chain_info() -> ChainInfo:
    return ChainInfo(
        hash=MAINNET_HASH,
        scheme_id="bls-unchained-g1-rfc9380",
        public_key="83cf0f2896adee7eb8b5f01fcad3912212c437e0073e911fb90022d3e760183c",
        period=3,
        genesis_time=1692803367,
    )


@pytest.fixture()
def make_client(chain_info: ChainInfo) -> Callable[..., FakeChainClient]:
    """Factory for fake clients; pass ``error=`` to make ``chain_info`` fail."""

    def _make(
        network: Network = Network.MAINNET,
        *,
        error: Exception | None = None,
    ) -> FakeChainClient:
        return FakeChainClient(network, info=chain_info, error=error)

    return _make


@pytest.fixture()
def failing_client() -> FakeChainClient:
    return FakeChainClient(error=ChainInfoError("drand unreachable"))
