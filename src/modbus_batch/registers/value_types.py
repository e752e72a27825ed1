import struct
from dataclasses import dataclass
from typing import Any, Callable, List, Protocol, Union

from modbus_batch.client.exceptions import InvalidInputException

NumericValue = Union[int, float]


class ValueTrait(Protocol):
    def to_bytes(self) -> bytes: ...


class ValueTypeTrait(Protocol):
    @property
    def size(self) -> int: ...

    def convert(self, data: bytes) -> ValueTrait: ...


@dataclass(frozen=True)
class ValueType:
    """
    Numeric value spanning one or more registers.

    `format_str` is a big-endian struct format of the whole value, `reverse_words` swaps the order
    of the 16-bit words on the wire while the bytes within each word stay big-endian.
    """
    name: str
    format_str: str
    reverse_words: bool
    converter_func: Callable[[Any], NumericValue]

    @property
    def size(self) -> int:
        return struct.calcsize(">" + self.format_str) // 2

    def __call__(self, value: NumericValue) -> 'RegisterValue':
        try:
            return RegisterValue(self, self.converter_func(value))
        except (OverflowError, ValueError, TypeError) as e:
            raise InvalidInputException(f"{value} is not a valid {self.name}: {e}") from e

    def convert(self, data: bytes) -> 'RegisterValue':
        if len(data) != self.size * 2:
            raise InvalidInputException(f"bytes of size {len(data)}, {self.name} requires {self.size * 2}")

        words = self._order_words(list(struct.unpack(f">{self.size}H", data)))
        value = struct.unpack(">" + self.format_str, struct.pack(f">{self.size}H", *words))[0]
        return RegisterValue(self, value)

    def encode(self, value: NumericValue) -> bytes:
        try:
            value_bytes = struct.pack(">" + self.format_str, self.converter_func(value))
        except (struct.error, OverflowError, ValueError) as e:
            raise InvalidInputException(f"{value} does not fit {self.name}: {e}") from e

        words = self._order_words(list(struct.unpack(f">{self.size}H", value_bytes)))
        return struct.pack(f">{self.size}H", *words)

    def _order_words(self, words: List[int]) -> List[int]:
        return words if not self.reverse_words else list(reversed(words))

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class RegisterValue:
    value_type: ValueType
    value: NumericValue

    def to_bytes(self) -> bytes:
        return self.value_type.encode(self.value)

    def format(self) -> str:
        if isinstance(self.value, int):
            return f"{self.value}"
        else:
            return f"{self.value:.3f}"

    def __str__(self) -> str:
        return f"{self.format()} ({self.value_type})"


Uint16 = ValueType("uint16", "H", False, round)
Float32 = ValueType("float32", "f", False, float)
Float32CDAB = ValueType("float32cdab", "f", True, float)

__all__ = [
    "NumericValue",
    "ValueTrait",
    "ValueTypeTrait",
    "ValueType",
    "RegisterValue",
    "Uint16",
    "Float32",
    "Float32CDAB",
]
