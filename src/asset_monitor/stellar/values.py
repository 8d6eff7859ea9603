"""SCVal decoding - turns Soroban contract values into NativeValue.

Decoding is total: every SCVal produces a NativeValue, unknown or malformed
values included (kind UNSUPPORTED with a debug rendering).
"""

from __future__ import annotations

import logging

from stellar_sdk import xdr

from asset_monitor.models.values import NativeValue, ValueKind
from asset_monitor.stellar.address import address_to_str

log = logging.getLogger(__name__)

MASK64 = (1 << 64) - 1


# ── 128/256-bit reassembly ─────────────────────────────────────────


def join_i128(hi: int, lo: int) -> int:
    """Signed 128-bit value from a signed high word and unsigned low word."""
    return (hi << 64) | (lo & MASK64)


def split_i128(value: int) -> tuple[int, int]:
    return value >> 64, value & MASK64


def join_u128(hi: int, lo: int) -> int:
    return ((hi & MASK64) << 64) | (lo & MASK64)


def split_u128(value: int) -> tuple[int, int]:
    return (value >> 64) & MASK64, value & MASK64


def _join_256(hi_hi: int, hi_lo: int, lo_hi: int, lo_lo: int) -> int:
    return (
        (hi_hi << 192)
        | ((hi_lo & MASK64) << 128)
        | ((lo_hi & MASK64) << 64)
        | (lo_lo & MASK64)
    )


def _u64_from_xdr(wrapper: object) -> int:
    """TimePoint / Duration are typedefs of uint64: 8 big-endian bytes on the wire."""
    return int.from_bytes(wrapper.to_xdr_bytes(), "big")  # type: ignore[attr-defined]


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _unsupported(value: xdr.SCVal) -> NativeValue:
    tag = getattr(value.type, "name", str(value.type))
    return NativeValue(ValueKind.UNSUPPORTED, f"{tag}({value!r})")


# ── Decoder ────────────────────────────────────────────────────────


def decode_scval(value: xdr.SCVal) -> NativeValue:
    """Decode one SCVal. Never raises."""
    try:
        return _decode(value)
    except (AttributeError, TypeError, ValueError) as exc:
        log.warning("Could not decode %s value: %s", getattr(value, "type", "?"), exc)
        return _unsupported(value)


def _decode(value: xdr.SCVal) -> NativeValue:
    t = value.type
    T = xdr.SCValType

    if t == T.SCV_VOID:
        return NativeValue(ValueKind.VOID)
    if t == T.SCV_BOOL:
        return NativeValue(ValueKind.BOOL, bool(value.b))
    if t == T.SCV_U32:
        return NativeValue(ValueKind.U32, value.u32.uint32)
    if t == T.SCV_I32:
        return NativeValue(ValueKind.I32, value.i32.int32)
    if t == T.SCV_U64:
        return NativeValue(ValueKind.U64, value.u64.uint64)
    if t == T.SCV_I64:
        return NativeValue(ValueKind.I64, value.i64.int64)
    if t == T.SCV_TIMEPOINT:
        return NativeValue(ValueKind.TIMEPOINT, _u64_from_xdr(value.timepoint))
    if t == T.SCV_DURATION:
        return NativeValue(ValueKind.DURATION, _u64_from_xdr(value.duration))

    if t == T.SCV_U128:
        hi, lo = value.u128.hi.uint64, value.u128.lo.uint64
        if hi == 0:
            return NativeValue(ValueKind.U64, lo)
        return NativeValue(ValueKind.U128, join_u128(hi, lo))

    if t == T.SCV_I128:
        hi = value.i128.hi.int64
        n = join_i128(hi, value.i128.lo.uint64)
        # A high word of 0 or -1 is labelled i64; the value itself stays exact.
        if hi in (0, -1):
            return NativeValue(ValueKind.I64, n)
        return NativeValue(ValueKind.I128, n)

    if t == T.SCV_U256:
        p = value.u256
        return NativeValue(
            ValueKind.U256,
            _join_256(p.hi_hi.uint64 & MASK64, p.hi_lo.uint64, p.lo_hi.uint64, p.lo_lo.uint64),
        )
    if t == T.SCV_I256:
        p = value.i256
        return NativeValue(
            ValueKind.I256,
            _join_256(p.hi_hi.int64, p.hi_lo.uint64, p.lo_hi.uint64, p.lo_lo.uint64),
        )

    if t == T.SCV_SYMBOL:
        return NativeValue(ValueKind.SYMBOL, _text(value.sym.sc_symbol))
    if t == T.SCV_STRING:
        return NativeValue(ValueKind.STRING, _text(value.str.sc_string))
    if t == T.SCV_BYTES:
        return NativeValue(ValueKind.BYTES, bytes(value.bytes.sc_bytes))
    if t == T.SCV_ADDRESS:
        return NativeValue(ValueKind.ADDRESS, address_to_str(value.address))

    if t == T.SCV_VEC:
        items = value.vec.sc_vec if value.vec is not None else []
        return NativeValue(ValueKind.VEC, tuple(decode_scval(item) for item in items))
    if t == T.SCV_MAP:
        entries = value.map.sc_map if value.map is not None else []
        return NativeValue(
            ValueKind.MAP,
            tuple((decode_scval(e.key), decode_scval(e.val)) for e in entries),
        )

    return _unsupported(value)


def format_value(value: NativeValue) -> str:
    """Render as "<kind>: <text>"; addresses render bare, void as "void: null"."""
    if value.kind is ValueKind.ADDRESS:
        return value.text
    return f"{value.kind.value}: {value.text}"


def format_scval(value: xdr.SCVal) -> str:
    return format_value(decode_scval(value))
