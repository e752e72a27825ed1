from typing import Optional


class ModbusBatchException(Exception):
    pass


class ValidationException(ModbusBatchException):
    pass


class TooManyRegistersException(ValidationException):
    def __init__(self, quantity: int, limit: int) -> None:
        super().__init__(f"too many registers in an operation: {quantity} (max {limit})")
        self.quantity = quantity
        self.limit = limit


class OddByteNumberException(ValidationException):
    def __init__(self, length: int) -> None:
        super().__init__(f"odd bytes number not allowed: {length}")
        self.length = length


class InvalidInputException(ModbusBatchException):
    pass


class ReadErrorException(ModbusBatchException):
    pass


class WriteErrorException(ModbusBatchException):
    pass


class ConnectErrorException(ModbusBatchException):
    pass


class RequestFailedException(ModbusBatchException):
    def __init__(self, kind: str, index: int, register: int, error: Optional[BaseException] = None) -> None:
        super().__init__(f"{kind} request {index} at {register}: {error}")
        self.kind = kind
        self.index = index
        self.register = register


__all__ = [
    "ModbusBatchException",
    "ValidationException",
    "TooManyRegistersException",
    "OddByteNumberException",
    "InvalidInputException",
    "ReadErrorException",
    "WriteErrorException",
    "ConnectErrorException",
    "RequestFailedException",
]
