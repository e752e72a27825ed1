from abc import abstractmethod


class ModbusTransport:
    """Blocking request/response link to a single device, one outstanding request at a time."""

    @abstractmethod
    def connect(self) -> None:
        pass

    @abstractmethod
    def read_holding_registers(self, register: int, quantity: int) -> bytes:
        pass

    @abstractmethod
    def write_multiple_registers(self, register: int, quantity: int, value: bytes) -> bytes:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


__all__ = [
    "ModbusTransport",
]
