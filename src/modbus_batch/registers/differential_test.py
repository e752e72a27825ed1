import unittest

from modbus_batch.registers.differential import filter_unchanged_writes, Registers
from modbus_batch.registers.operations import Write
from modbus_batch.registers.value_types import Uint16, Float32, Float32CDAB


class FilterUnchangedWritesTest(unittest.TestCase):
    def test_no_snapshot(self) -> None:
        writes = [Write(1, Uint16(5)), Write(2, Uint16(6))]
        self.assertEqual(writes, filter_unchanged_writes(writes, None))

    def test_empty_snapshot(self) -> None:
        writes = [Write(1, Uint16(5))]
        self.assertEqual(writes, filter_unchanged_writes(writes, {}))

    def test_drops_unchanged(self) -> None:
        old_data: Registers = {1: Uint16(5), 2: Uint16(7)}
        writes = [Write(1, Uint16(5)), Write(2, Uint16(6)), Write(3, Uint16(0))]
        self.assertEqual([Write(2, Uint16(6)), Write(3, Uint16(0))], filter_unchanged_writes(writes, old_data))

    def test_compares_bytes(self) -> None:
        # same number, different wire representation
        old_data: Registers = {10: Float32CDAB(1.5)}
        self.assertEqual([Write(10, Float32(1.5))], filter_unchanged_writes([Write(10, Float32(1.5))], old_data))
        self.assertEqual([], filter_unchanged_writes([Write(10, Float32CDAB(1.5))], old_data))

    def test_keeps_order(self) -> None:
        writes = [Write(9, Uint16(1)), Write(1, Uint16(2)), Write(5, Uint16(3))]
        self.assertEqual(writes, filter_unchanged_writes(writes, {2: Uint16(2)}))
