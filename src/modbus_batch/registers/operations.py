from dataclasses import dataclass

from modbus_batch.client.defaults import MaxReadQuantity, MaxWriteQuantity
from modbus_batch.client.exceptions import TooManyRegistersException, OddByteNumberException
from modbus_batch.registers.value_types import ValueTypeTrait, ValueTrait


@dataclass(frozen=True)
class Read:
    register: int
    value_type: ValueTypeTrait

    def __str__(self) -> str:
        return f"read {self.value_type} at {self.register}"


@dataclass(frozen=True)
class Write:
    register: int
    value: ValueTrait

    def __str__(self) -> str:
        return f"write {self.value} at {self.register}"


@dataclass(frozen=True)
class ReadOp:
    register: int
    quantity: int

    def get_address(self) -> int:
        return self.register

    def get_count(self) -> int:
        return self.quantity


@dataclass(frozen=True)
class WriteOp:
    register: int
    quantity: int
    value: bytes

    def get_address(self) -> int:
        return self.register

    def get_count(self) -> int:
        return self.quantity


def create_read_op(register: int, quantity: int) -> ReadOp:
    if quantity > MaxReadQuantity:
        raise TooManyRegistersException(quantity, MaxReadQuantity)
    return ReadOp(register, quantity)


def create_write_op(register: int, value: bytes) -> WriteOp:
    # single register is 2 bytes
    if len(value) % 2 != 0:
        raise OddByteNumberException(len(value))

    quantity = len(value) // 2
    if quantity > MaxWriteQuantity:
        raise TooManyRegistersException(quantity, MaxWriteQuantity)
    return WriteOp(register, quantity, bytes(value))


def convert_read(request: Read) -> ReadOp:
    return create_read_op(request.register, request.value_type.size)


def convert_write(request: Write) -> WriteOp:
    return create_write_op(request.register, request.value.to_bytes())


__all__ = [
    "Read",
    "Write",
    "ReadOp",
    "WriteOp",
    "create_read_op",
    "create_write_op",
    "convert_read",
    "convert_write",
]
