"""Ledger feed records and contract events decoded from transaction metadata."""

from __future__ import annotations

from dataclasses import dataclass

from stellar_sdk import xdr


@dataclass(frozen=True)
class LedgerRecord:
    """A closed ledger as reported by Horizon."""

    sequence: int
    paging_token: str


@dataclass(frozen=True)
class TransactionRecord:
    """A successful transaction and its base64 TransactionMeta XDR."""

    hash: str
    result_meta_xdr: str
    ledger: int | None = None


@dataclass(frozen=True)
class ContractEvent:
    """A Soroban contract event attached to one operation.

    Produced only by the metadata decoder; topics and data are left as raw
    SCVal so the filter can look inside maps before anything is rendered.
    """

    contract_id: bytes | None  # 32 raw bytes
    topics: tuple[xdr.SCVal, ...]
    data: xdr.SCVal


@dataclass(frozen=True)
class ExtractedEvent:
    """Topic strings and amount pulled out of a ContractEvent."""

    kind: str  # topics[0], e.g. "mint"
    topics: tuple[str, ...]
    amount: str  # still text; SupplyLedger parses it
    data: str  # format_value() rendering of the whole payload
