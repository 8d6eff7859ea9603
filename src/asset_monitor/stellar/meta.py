"""TransactionMeta decoder - pulls per-operation contract events out of result meta XDR."""

from __future__ import annotations

import logging

from stellar_sdk import xdr

from asset_monitor.models.events import ContractEvent

log = logging.getLogger(__name__)

# Protocol 23+ metadata. Earlier versions carry no unified per-operation events.
UNIFIED_EVENTS_VERSION = 4


def _contract_id_bytes(raw: object) -> bytes | None:
    if raw is None:
        return None
    # ContractID / Hash are fixed opaque[32]: the XDR encoding is the raw id
    return raw.to_xdr_bytes()  # type: ignore[attr-defined]


def _to_event(raw: xdr.ContractEvent) -> ContractEvent:
    body = raw.body.v0
    return ContractEvent(
        contract_id=_contract_id_bytes(raw.contract_id),
        topics=tuple(body.topics),
        data=body.data,
    )


class TransactionMetaDecoder:
    """Decodes base64 TransactionMeta into a list of event lists, one per operation."""

    def decode(self, envelope: str) -> list[list[ContractEvent]]:
        """Decode one transaction's meta. Never raises.

        Non-v4 metadata yields []; so does anything undecodable, with a warning.
        """
        try:
            meta = xdr.TransactionMeta.from_xdr(envelope)
        except Exception as exc:
            log.warning("Could not decode transaction meta XDR: %s", exc)
            return []

        if meta.v != UNIFIED_EVENTS_VERSION or getattr(meta, "v4", None) is None:
            log.debug("Skipping transaction meta v%s", meta.v)
            return []

        operations: list[list[ContractEvent]] = []
        for index, op in enumerate(meta.v4.operations):
            try:
                operations.append([_to_event(e) for e in (op.events or [])])
            except (AttributeError, TypeError) as exc:
                log.warning("Could not read events of operation %d: %s", index, exc)
                operations.append([])
        return operations
