import logging
import struct
from typing import Dict, List, Optional, Tuple

from modbus_batch.client.exceptions import ReadErrorException, WriteErrorException
from modbus_batch.client.transport import ModbusTransport

RequestLogEntry = Tuple[str, int, int]


class MockModbusTransport(ModbusTransport):
    def __init__(self, holding_registers: Optional[Dict[int, int]] = None, missing_as_zero: bool = False) -> None:
        self.holding_registers: Dict[int, int] = dict(holding_registers or {})
        self.missing_as_zero = missing_as_zero
        self.requests: List[RequestLogEntry] = []
        self.connected = False

    def connect(self) -> None:
        self.connected = True

    def read_holding_registers(self, register: int, quantity: int) -> bytes:
        logging.debug(f"mock read {register} count: {quantity}")
        self.requests.append(("read", register, quantity))

        values = []
        for address in range(register, register + quantity):
            value = self.holding_registers.get(address)
            if value is None:
                if not self.missing_as_zero:
                    raise ReadErrorException(f"register {address} not available")
                value = 0
            values.append(value)

        return struct.pack(f">{quantity}H", *values)

    def write_multiple_registers(self, register: int, quantity: int, value: bytes) -> bytes:
        logging.debug(f"mock write {register} count: {quantity}")
        self.requests.append(("write", register, quantity))

        if len(value) != quantity * 2:
            raise WriteErrorException("invalid count")

        for i, word in enumerate(struct.unpack(f">{quantity}H", value)):
            self.holding_registers[register + i] = word

        return struct.pack(">HH", register, quantity)

    def close(self) -> None:
        self.connected = False


__all__ = [
    "MockModbusTransport",
]
