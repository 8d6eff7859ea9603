"""Asset identity - the Stellar Asset Contract id for the monitored asset."""

from __future__ import annotations

import logging
from functools import lru_cache

from stellar_sdk import Asset

from asset_monitor.errors import AddressDecodeError, ConfigError
from asset_monitor.stellar.address import decode_contract, encode_contract, is_account

log = logging.getLogger(__name__)

NATIVE_CODES = ("native", "XLM")


def is_native(code: str, issuer: str) -> bool:
    return not issuer and code in NATIVE_CODES


def build_asset(code: str, issuer: str) -> Asset:
    """Build the SDK asset, raising ConfigError on a malformed descriptor."""
    if is_native(code, issuer):
        return Asset.native()
    if not code:
        raise ConfigError("Asset code is required")
    if not issuer:
        raise ConfigError(f"Asset issuer is required for non-native asset {code!r}")
    if not is_account(issuer):
        raise ConfigError(f"Asset issuer {issuer!r} is not a valid G... public key")
    try:
        return Asset(code, issuer)
    except ValueError as exc:
        raise ConfigError(f"Invalid asset {code}:{issuer}: {exc}") from exc


@lru_cache(maxsize=None)
def contract_id_for(code: str, issuer: str, network_passphrase: str) -> bytes:
    """Derive the 32-byte SAC contract id for an asset on a network.

    SHA-256 over the HashIDPreimage (network id + asset XDR); the SDK builds
    the preimage, we only unwrap its StrKey result.
    """
    asset = build_asset(code, issuer)
    try:
        return decode_contract(asset.contract_id(network_passphrase))
    except AddressDecodeError as exc:
        raise ConfigError(f"Could not derive contract id for {code}: {exc}") from exc


class AssetIdentity:
    """The monitored asset: code, issuer and its derived contract id.

    Everything is computed once at construction; the instance is immutable
    for the life of the process.
    """

    def __init__(self, code: str, issuer: str, network_passphrase: str) -> None:
        if not network_passphrase:
            raise ConfigError("Network passphrase is required to derive the asset contract id")
        self._code = code
        self._issuer = issuer
        self._network_passphrase = network_passphrase
        self._contract_id = contract_id_for(code, issuer, network_passphrase)
        self._contract_address = encode_contract(self._contract_id)
        self._canonical_name = "native" if is_native(code, issuer) else f"{code}:{issuer}"
        log.debug("Asset %s -> contract %s", self._canonical_name, self._contract_address)

    @property
    def code(self) -> str:
        return self._code

    @property
    def issuer(self) -> str:
        return self._issuer

    @property
    def network_passphrase(self) -> str:
        return self._network_passphrase

    @property
    def contract_id(self) -> bytes:
        return self._contract_id

    @property
    def contract_address(self) -> str:
        return self._contract_address

    @property
    def canonical_name(self) -> str:
        """The "code:issuer" string SAC events carry in topics[2]."""
        return self._canonical_name
