"""TransactionMeta decoding into per-operation contract events."""

from __future__ import annotations

import base64

import pytest
from stellar_sdk import scval

from asset_monitor.stellar.address import decode_contract
from asset_monitor.stellar.meta import TransactionMetaDecoder
from asset_monitor.stellar.values import format_scval
from tests.conftest import OTHER_CONTRACT
from tests.factories import make_event, make_meta_legacy, make_meta_v4, muxed_amount

OTHER_ID = decode_contract(OTHER_CONTRACT)


@pytest.fixture
def decoder():
    return TransactionMetaDecoder()


@pytest.mark.parametrize("version", [0, 1, 2, 3])
def test_pre_v4_meta_has_no_events(decoder, version):
    assert decoder.decode(make_meta_legacy(version)) == []


def test_v2_tag_ignores_payload(decoder, identity):
    v4 = base64.b64decode(make_meta_v4([[make_event(identity.contract_id, "mint", 1)]]))
    relabelled = b"\x00\x00\x00\x02" + v4[4:]
    assert decoder.decode(base64.b64encode(relabelled).decode()) == []


def test_v4_keeps_operation_and_event_order(decoder, identity):
    asset_id = identity.contract_id
    meta = make_meta_v4([
        [make_event(asset_id, "mint", 1), make_event(OTHER_ID, "transfer", 2)],
        [],
        [make_event(asset_id, "burn", 3)],
    ])

    ops = decoder.decode(meta)

    assert len(ops) == 3
    assert [e.contract_id for e in ops[0]] == [asset_id, OTHER_ID]
    assert ops[1] == []
    assert format_scval(ops[0][0].topics[0]) == "symbol: mint"
    assert format_scval(ops[0][1].data) == "i64: 2"
    assert format_scval(ops[2][0].topics[0]) == "symbol: burn"


def test_v4_without_operations(decoder):
    assert decoder.decode(make_meta_v4([])) == []


def test_event_without_contract_id(decoder):
    event = make_event(None, "mint", 5)
    ops = decoder.decode(make_meta_v4([[event]]))
    assert ops[0][0].contract_id is None


def test_map_data_survives_decoding(decoder, identity):
    event = make_event(identity.contract_id, data=muxed_amount(42))
    ops = decoder.decode(make_meta_v4([[event]]))
    assert format_scval(ops[0][0].data) == "map: {amount: 42, to_muxed_id: 7}"


def test_topics_are_kept_raw(decoder, identity):
    topics = [scval.to_symbol("set_admin"), scval.to_address(OTHER_CONTRACT)]
    event = make_event(identity.contract_id, topics=topics, data=scval.to_void())
    ops = decoder.decode(make_meta_v4([[event]]))
    assert [format_scval(t) for t in ops[0][0].topics] == ["symbol: set_admin", OTHER_CONTRACT]
    assert format_scval(ops[0][0].data) == "void: null"


@pytest.mark.parametrize("envelope", [
    "",
    "not base64!!",
    base64.b64encode(b"\x00\x00\x00\x04\x00").decode(),  # truncated v4
    base64.b64encode(b"\x00\x00\x00\x09").decode(),  # unknown version
])
def test_undecodable_meta_yields_nothing(decoder, envelope):
    assert decoder.decode(envelope) == []
