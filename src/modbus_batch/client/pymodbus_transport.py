import logging
import struct
from typing import Any

from pymodbus import FramerType
from pymodbus.client import ModbusBaseSyncClient, ModbusSerialClient, ModbusTcpClient

from modbus_batch.client.defaults import DefaultTimeout
from modbus_batch.client.exceptions import ConnectErrorException, ReadErrorException, WriteErrorException
from modbus_batch.client.transport import ModbusTransport


class PyModbusTransport(ModbusTransport):
    def __init__(self, client: ModbusBaseSyncClient, unit: int):
        self.client = client
        self.unit = unit

    def connect(self) -> None:
        if not self.client.connect():
            raise ConnectErrorException(f"unable to connect to {self.client}")

    def read_holding_registers(self, register: int, quantity: int) -> bytes:
        logging.debug(f"read {register} count: {quantity}")
        result: Any = self.client.read_holding_registers(register, count=quantity, device_id=self.unit)
        if result.isError():
            raise ReadErrorException(str(result))
        if len(result.registers) != quantity:
            raise ReadErrorException("invalid count")
        return struct.pack(f">{quantity}H", *result.registers)

    def write_multiple_registers(self, register: int, quantity: int, value: bytes) -> bytes:
        logging.debug(f"write {register} count: {quantity}")
        if len(value) != quantity * 2:
            raise WriteErrorException("invalid count")

        values = list(struct.unpack(f">{quantity}H", value))
        result: Any = self.client.write_registers(register, values, device_id=self.unit)
        if result.isError():
            raise WriteErrorException(str(result))
        return struct.pack(">HH", register, quantity)

    def close(self) -> None:
        self.client.close()


# retries are left to BatchModbusClient, which repeats a failed request exactly once

class PyModbusTcpTransport(PyModbusTransport):
    def __init__(self, host: str, port: int, unit: int, timeout: float = DefaultTimeout):
        super().__init__(ModbusTcpClient(host, port=port, timeout=timeout, retries=0), unit)


class PyModbusRtuTransport(PyModbusTransport):
    def __init__(self, path: str, unit: int, baudrate: int = 9600, stopbits: int = 1, parity: str = "N",
                 timeout: float = DefaultTimeout):
        super().__init__(ModbusSerialClient(path, framer=FramerType.RTU,
                                            baudrate=baudrate, stopbits=stopbits, parity=parity,
                                            timeout=timeout, retries=0), unit)


class PyModbusRtuOverTcpTransport(PyModbusTransport):
    def __init__(self, host: str, port: int, unit: int, timeout: float = DefaultTimeout):
        super().__init__(ModbusTcpClient(host, port=port, framer=FramerType.RTU, timeout=timeout, retries=0), unit)


__all__ = [
    "PyModbusTransport",
    "PyModbusTcpTransport",
    "PyModbusRtuTransport",
    "PyModbusRtuOverTcpTransport",
]
