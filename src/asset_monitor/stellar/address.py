"""StrKey address codec for account (G...) and contract (C...) identifiers."""

from __future__ import annotations

import logging

from stellar_sdk import StrKey, xdr

from asset_monitor.errors import AddressDecodeError

log = logging.getLogger(__name__)

KEY_LENGTH = 32


def _check_length(raw: bytes, what: str) -> bytes:
    if not isinstance(raw, (bytes, bytearray)) or len(raw) != KEY_LENGTH:
        size = len(raw) if isinstance(raw, (bytes, bytearray)) else type(raw).__name__
        raise AddressDecodeError(f"{what} must be exactly {KEY_LENGTH} bytes, got {size}")
    return bytes(raw)


def encode_account(raw: bytes) -> str:
    """Encode an Ed25519 public key as a G... account address."""
    return StrKey.encode_ed25519_public_key(_check_length(raw, "account key"))


def encode_contract(raw: bytes) -> str:
    """Encode a contract hash as a C... contract address."""
    return StrKey.encode_contract(_check_length(raw, "contract id"))


def decode_account(address: str) -> bytes:
    try:
        return StrKey.decode_ed25519_public_key(address)
    except ValueError as exc:
        raise AddressDecodeError(f"invalid account address {address!r}: {exc}") from exc


def decode_contract(address: str) -> bytes:
    try:
        return StrKey.decode_contract(address)
    except ValueError as exc:
        raise AddressDecodeError(f"invalid contract address {address!r}: {exc}") from exc


def is_account(address: str) -> bool:
    return StrKey.is_valid_ed25519_public_key(address)


def address_to_str(address: xdr.SCAddress) -> str:
    """Render an SCAddress. Never raises.

    Account and contract variants go through the codec; if the key bytes are
    unusable the raw XDR debug string is returned instead.
    """
    if address.type == xdr.SCAddressType.SC_ADDRESS_TYPE_ACCOUNT:
        try:
            return encode_account(address.account_id.account_id.ed25519.uint256)
        except (AddressDecodeError, AttributeError) as exc:
            log.warning("Could not encode account address: %s", exc)
            return str(address.account_id)

    if address.type == xdr.SCAddressType.SC_ADDRESS_TYPE_CONTRACT:
        try:
            # Hash and ContractID are both fixed opaque[32]: XDR bytes == raw bytes
            return encode_contract(address.contract_id.to_xdr_bytes())
        except (AddressDecodeError, AttributeError) as exc:
            log.warning("Could not encode contract address: %s", exc)
            return str(address.contract_id)

    return f"Unknown Address: {address}"
