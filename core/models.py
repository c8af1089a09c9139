# core/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from collections.abc import Mapping
from typing import Literal, Any

from core.errors import PropertyTypeMismatch

Kind = Literal["string", "bytes", "integer", "boolean", "float", "array", "dictionary"]

# sysctl identifier path, e.g. (CTL_HW, HW_MEMSIZE)
ControlPath = tuple[int, ...]


@dataclass(frozen=True)
class PropertyValue:
    """
    One value from an IOKit property dictionary, tagged with its kind.

    Registry dictionaries mix strings, data blobs, numbers and booleans.
    The accessors raise PropertyTypeMismatch instead of coercing, except
    as_float() which also accepts integers (CFNumber bridges both ways).
    """
    kind: Kind
    value: Any

    @classmethod
    def from_python(cls, value: Any) -> PropertyValue:
        # bool before int: bool is an int subclass
        if isinstance(value, bool):
            return cls("boolean", value)
        if isinstance(value, int):
            return cls("integer", int(value))
        if isinstance(value, float):
            return cls("float", float(value))
        if isinstance(value, str):
            return cls("string", str(value))
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls("bytes", bytes(value))
        if isinstance(value, (list, tuple)):
            return cls("array", tuple(cls.from_python(v) for v in value))
        if isinstance(value, Mapping):
            return cls("dictionary", {str(k): cls.from_python(v) for k, v in value.items()})
        raise PropertyTypeMismatch("supported", type(value).__name__)

    def _expect(self, *kinds: str) -> Any:
        if self.kind not in kinds:
            raise PropertyTypeMismatch("/".join(kinds), self.kind)
        return self.value

    def as_string(self) -> str:
        return self._expect("string")

    def as_bytes(self) -> bytes:
        return self._expect("bytes")

    def as_integer(self) -> int:
        return self._expect("integer")

    def as_boolean(self) -> bool:
        return self._expect("boolean")

    def as_float(self) -> float:
        return float(self._expect("float", "integer"))

    def as_array(self) -> tuple[PropertyValue, ...]:
        return self._expect("array")

    def as_dictionary(self) -> dict[str, PropertyValue]:
        return self._expect("dictionary")


@dataclass(frozen=True)
class HardwareService:
    """Property snapshot of one matched registry entry."""
    class_name: str
    properties: Mapping[str, PropertyValue] = field(default_factory=dict)

    def get(self, key: str) -> PropertyValue | None:
        return self.properties.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self.properties


@dataclass
class AssetField:
    name: str
    value: str


@dataclass
class AssetReport:
    meta: dict[str, Any]
    host: dict[str, Any]
    fields: list[AssetField] = field(default_factory=list)

    def values(self, name: str) -> list[str]:
        return [f.value for f in self.fields if f.name == name]
