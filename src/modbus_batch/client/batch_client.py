"""
Thread-safe Modbus client operating on batches of requests, aimed at high-latency links.

Read and write batches are sorted by register number and requests whose ranges follow each other
without a gap are merged into a single function 3 / function 16 request, as long as the merged
request stays within 2047 registers for reads and 123 registers for writes. Writes can additionally
be filtered against a snapshot of values already stored on the device.
"""
import logging
import threading
from types import TracebackType
from typing import Callable, List, Optional, Sequence, Type, TypeVar

from pymodbus.exceptions import ModbusException

from modbus_batch.client.exceptions import InvalidInputException, RequestFailedException, ReadErrorException, \
    ModbusBatchException
from modbus_batch.client.transport import ModbusTransport
from modbus_batch.registers.address_range import merge_read_ops, merge_write_ops
from modbus_batch.registers.address_space import FlatAddressSpace
from modbus_batch.registers.differential import Registers, filter_unchanged_writes
from modbus_batch.registers.operations import Read, Write, ReadOp, WriteOp, convert_read, convert_write, create_read_op, \
    create_write_op
from modbus_batch.registers.value_types import ValueTrait, ValueTypeTrait

TOp = TypeVar("TOp", ReadOp, WriteOp)
TResult = TypeVar("TResult")

# failures worth a second attempt, anything else is a bug and propagates as is
RetryableExceptions = (ModbusBatchException, ModbusException, OSError)


class BatchModbusClient:
    """
    Holds a single lock around the transport. A batch keeps the lock for all of its requests,
    so single reads and writes issued from other threads wait until the whole batch is done.
    """

    def __init__(self, transport: ModbusTransport, differential_optimization: bool = True) -> None:
        self._transport = transport
        self._lock = threading.Lock()
        self.differential_optimization = differential_optimization

    def connect(self) -> None:
        with self._lock:
            self._transport.connect()

    def close(self) -> None:
        with self._lock:
            self._transport.close()

    def __enter__(self) -> 'BatchModbusClient':
        self.connect()
        return self

    def __exit__(self, exc_type: Optional[Type[BaseException]], exc_val: Optional[BaseException],
                 exc_tb: Optional[TracebackType]) -> None:
        self.close()

    def batch_read(self, requests: Sequence[Read]) -> Registers:
        """
        Reads all requests with as few function 3 requests as possible and returns the values keyed by register.

        Raises on the first validation, transport or conversion error, no partial result is returned.
        """
        ops = merge_read_ops([convert_read(x) for x in requests])
        logging.debug(f"batch read: {len(requests)} requests merged into {len(ops)}")

        with self._lock:
            results = self._execute("read", ops, self._read)

        # merged responses are laid out by register number and sliced again per original request
        space = FlatAddressSpace()
        for op, data in zip(ops, results):
            space.set(op.register * 2, data)

        values: Registers = {}
        for request in requests:
            data = space.get(request.register * 2, request.value_type.size * 2)
            try:
                values[request.register] = request.value_type.convert(data)
            except InvalidInputException as e:
                raise InvalidInputException(f"{request}: {e}") from e

        return values

    def batch_write(self, requests: Sequence[Write], old_data: Optional[Registers] = None) -> None:
        """
        Writes all requests with as few function 16 requests as possible.

        When `old_data` is given and differential optimization is enabled, writes of values equal to
        the ones in `old_data` are skipped. Only use it if the device registers are known not to change
        between calls. On failure, requests sent before the failing one stay applied on the device.
        """
        if old_data is not None and self.differential_optimization:
            requests = filter_unchanged_writes(requests, old_data)

        ops = merge_write_ops([convert_write(x) for x in requests])
        logging.debug(f"batch write: {len(requests)} requests merged into {len(ops)}")

        with self._lock:
            self._execute("write", ops, self._write)

    def read(self, register: int, value_type: ValueTypeTrait) -> ValueTrait:
        op = create_read_op(register, value_type.size)

        with self._lock:
            data, = self._execute("read", [op], self._read)

        return value_type.convert(data)

    def write(self, register: int, value: ValueTrait) -> None:
        op = create_write_op(register, value.to_bytes())

        with self._lock:
            self._execute("write", [op], self._write)

    def _execute(self, kind: str, ops: Sequence[TOp], call: Callable[[TOp], TResult]) -> List[TResult]:
        # caller holds the lock; no rollback of requests already sent
        results: List[TResult] = []
        for i, op in enumerate(ops, start=1):
            try:
                results.append(self._call_with_retry(call, op))
            except RetryableExceptions as e:
                raise RequestFailedException(kind, i, op.register, e) from e
        return results

    @staticmethod
    def _call_with_retry(call: Callable[[TOp], TResult], op: TOp) -> TResult:
        try:
            return call(op)
        except RetryableExceptions as e:
            logging.warning(f"request at {op.register} failed, retrying: {e}")
            return call(op)

    def _read(self, op: ReadOp) -> bytes:
        data = self._transport.read_holding_registers(op.register, op.quantity)
        if len(data) != op.quantity * 2:
            raise ReadErrorException(f"invalid response size {len(data)}, expected {op.quantity * 2}")
        return data

    def _write(self, op: WriteOp) -> bytes:
        return self._transport.write_multiple_registers(op.register, op.quantity, op.value)


__all__ = [
    "Registers",
    "BatchModbusClient",
]
