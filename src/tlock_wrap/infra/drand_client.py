"""drand HTTP client and network selection.

This module is the **only** place in the codebase that talks to the
drand HTTP API.  All ``requests`` exceptions are caught here and
re-raised as :class:`~tlock_wrap.exceptions.ChainInfoError` — nothing
raw escapes the infrastructure boundary.

The client satisfies :class:`~tlock_wrap.core.protocols.ChainClient`
structurally and doubles as the opaque handle handed to the encrypter.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from tlock_wrap.core.models import ChainInfo, Network
from tlock_wrap.exceptions import ChainInfoError

REQUEST_TIMEOUT: float = 10.0
"""Seconds before a drand HTTP request is abandoned."""


# ---------------------------------------------------------------------------
# Network configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class NetworkConfig:
    """Static endpoint configuration for one drand network."""

    network: Network
    display_name: str
    base_url: str
    chain_hash: str

    @property
    def info_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.chain_hash}/info"


NETWORKS: dict[Network, NetworkConfig] = {
    Network.MAINNET: NetworkConfig(
        network=Network.MAINNET,
        display_name="mainnet (quicknet)",
        base_url="https://api.drand.sh",
        chain_hash="52db9ba70e0cc0f6eaf7803dd07447a1f5477735fd3f661792ba94600c84e971",
    ),
    Network.TESTNET: NetworkConfig(
        network=Network.TESTNET,
        display_name="testnet",
        base_url="https://pl-us.testnet.drand.sh",
        chain_hash="7672797f548f3f4748ac4bf3352fc6c6b6468c9ad40ad456a397545c6e2df5bf",
    ),
}


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class DrandClient:
    """Handle to a single drand network.

    Usage::

        with select_client(use_testnet=False) as client:
            info = client.chain_info()

    The first successful :meth:`chain_info` result is cached for the
    lifetime of the handle, which is one CLI invocation.  A session the
    client created itself is closed by :meth:`close`; an injected one is
    left to its owner.
    """

    def __init__(
        self,
        config: NetworkConfig,
        *,
        session: requests.Session | None = None,
    ) -> None:
        self.config: NetworkConfig = config
        self.network: Network = config.network
        self._owns_session: bool = session is None
        self._session: requests.Session = session or requests.Session()
        self._info: ChainInfo | None = None

    def __repr__(self) -> str:
        return f"DrandClient({self.network.value}, {self.config.chain_hash[:12]}…)"

    def __enter__(self) -> DrandClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the pooled connections of an owned session."""
        if self._owns_session:
            self._session.close()

    # ------------------------------------------------------------------
    # Protocol method
    # ------------------------------------------------------------------

    def chain_info(self) -> ChainInfo:
        """Fetch (once) and return the chain metadata.

        Raises
        ------
        ChainInfoError
            On transport, HTTP status or decoding failures, or when the
            node answers for a different chain than the configured one.
        """
        if self._info is not None:
            return self._info

        url = self.config.info_url
        try:
            response = self._session.get(url, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
            payload: Any = response.json()
        except requests.Timeout as exc:
            raise ChainInfoError(
                f"Timed out contacting {url}",
                hint="Check your network connection and retry.",
            ) from exc
        except requests.HTTPError as exc:
            raise ChainInfoError(f"drand node rejected the request: {exc}") from exc
        except requests.JSONDecodeError as exc:
            raise ChainInfoError(f"drand node returned invalid JSON: {exc}") from exc
        except requests.RequestException as exc:
            raise ChainInfoError(
                f"Could not reach {url}: {exc}",
                hint="Check your network connection and retry.",
            ) from exc
        except ValueError as exc:
            raise ChainInfoError(f"drand node returned invalid JSON: {exc}") from exc

        info = self._parse_info(payload)
        if info.hash != self.config.chain_hash:
            raise ChainInfoError(
                f"Chain hash mismatch: expected {self.config.chain_hash}, got {info.hash}",
            )
        self._info = info
        return info

    # ------------------------------------------------------------------
    # Raw-dict → domain-model parser (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_info(payload: Any) -> ChainInfo:
        """Convert a drand ``/info`` JSON document into :class:`ChainInfo`."""
        if not isinstance(payload, dict):
            raise ChainInfoError("drand node returned an unexpected data structure.")

        missing = [key for key in ("hash", "public_key") if not payload.get(key)]
        if missing:
            raise ChainInfoError(
                f"drand info missing required keys: {', '.join(missing)}",
            )

        period = payload.get("period")
        genesis_time = payload.get("genesis_time")
        return ChainInfo(
            hash=str(payload["hash"]),
            scheme_id=str(payload.get("schemeID", "unknown")),
            public_key=str(payload["public_key"]),
            period=period if isinstance(period, int) and period > 0 else None,
            genesis_time=genesis_time if isinstance(genesis_time, int) else None,
        )


# ---------------------------------------------------------------------------
# Selector
# ---------------------------------------------------------------------------

def select_client(
    use_testnet: bool,
    *,
    session: requests.Session | None = None,
) -> DrandClient:
    """Return a client for the testnet or mainnet variant."""
    network = Network.TESTNET if use_testnet else Network.MAINNET
    return DrandClient(NETWORKS[network], session=session)
