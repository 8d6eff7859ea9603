"""Native values decoded from Soroban SCVal."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Closed set of decoded value kinds. The value doubles as the display prefix."""

    VOID = "void"
    BOOL = "bool"
    U32 = "u32"
    I32 = "i32"
    U64 = "u64"
    I64 = "i64"
    TIMEPOINT = "timepoint"
    DURATION = "duration"
    U128 = "u128"
    I128 = "i128"
    U256 = "u256"
    I256 = "i256"
    SYMBOL = "symbol"
    STRING = "string"
    BYTES = "bytes"
    ADDRESS = "address"
    VEC = "vec"
    MAP = "map"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class NativeValue:
    """A decoded contract value.

    ``value`` holds:
      - None for VOID
      - bool / int for the scalar kinds
      - str for SYMBOL, STRING, ADDRESS and UNSUPPORTED
      - bytes for BYTES
      - tuple[NativeValue, ...] for VEC
      - tuple[tuple[NativeValue, NativeValue], ...] for MAP
    """

    kind: ValueKind
    value: Any = None

    @property
    def text(self) -> str:
        """Plain rendering without the kind prefix."""
        if self.kind is ValueKind.VOID:
            return "null"
        if self.kind is ValueKind.BOOL:
            return "true" if self.value else "false"
        if self.kind is ValueKind.BYTES:
            return self.value.hex()
        if self.kind is ValueKind.VEC:
            return "[" + ", ".join(item.text for item in self.value) + "]"
        if self.kind is ValueKind.MAP:
            return "{" + ", ".join(f"{k.text}: {v.text}" for k, v in self.value) + "}"
        return str(self.value)

    def get(self, key: str) -> NativeValue | None:
        """Look up a map entry by the text of its key. None if absent or not a map."""
        if self.kind is not ValueKind.MAP:
            return None
        for k, v in self.value:
            if k.text == key:
                return v
        return None
