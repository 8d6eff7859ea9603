"""Asset event filter - keeps events emitted by the monitored asset's contract."""

from __future__ import annotations

import logging

from asset_monitor.models.events import ContractEvent, ExtractedEvent
from asset_monitor.models.values import ValueKind
from asset_monitor.stellar.asset import AssetIdentity
from asset_monitor.stellar.values import decode_scval, format_value

log = logging.getLogger(__name__)

# Index of the "code:issuer" topic in SAC events: [kind, from/to..., asset]
ASSET_TOPIC_INDEX = 2


class AssetEventFilter:
    """Matches contract events against one asset and extracts their payload.

    Checks:
    1. Event contract id equals the asset's SAC contract id (exact bytes)
    2. topics[2] equals the asset's canonical "code:issuer" name

    Data is either a scalar amount or, for muxed destinations, a map with an
    "amount" entry.
    """

    def __init__(self, identity: AssetIdentity) -> None:
        self._identity = identity
        self._contract_id = identity.contract_id

    @property
    def identity(self) -> AssetIdentity:
        return self._identity

    def matches(self, event: ContractEvent) -> bool:
        return event.contract_id is not None and event.contract_id == self._contract_id

    def extract(self, event: ContractEvent) -> ExtractedEvent:
        """Render topics and pull the amount out of the data. Never raises."""
        topics = tuple(decode_scval(t).text for t in event.topics)
        data = decode_scval(event.data)
        rendered = format_value(data)

        if data.kind is ValueKind.MAP:
            amount_value = data.get("amount")
            if amount_value is None:
                log.warning("Map payload has no amount entry: %s", rendered)
                amount = rendered
            else:
                amount = amount_value.text
        else:
            amount = data.text

        return ExtractedEvent(
            kind=topics[0] if topics else "",
            topics=topics,
            amount=amount,
            data=rendered,
        )

    def belongs_to_asset(self, extracted: ExtractedEvent) -> bool:
        topics = extracted.topics
        return len(topics) > ASSET_TOPIC_INDEX and topics[ASSET_TOPIC_INDEX] == self._identity.canonical_name

    def select(self, event: ContractEvent) -> ExtractedEvent | None:
        """Full check: contract id, then payload, then asset topic."""
        if not self.matches(event):
            return None
        extracted = self.extract(event)
        if not self.belongs_to_asset(extracted):
            log.debug("Asset contract event without matching asset topic: %s", extracted.topics)
            return None
        return extracted
