import unittest

from modbus_batch.client.exceptions import ReadErrorException, WriteErrorException
from modbus_batch.client.mock_transport import MockModbusTransport


class MockModbusTransportTest(unittest.TestCase):
    def test_read(self) -> None:
        transport = MockModbusTransport({1: 0x0102, 2: 3})
        self.assertEqual(b"\x01\x02\x00\x03", transport.read_holding_registers(1, 2))
        self.assertEqual([("read", 1, 2)], transport.requests)

    def test_read_missing(self) -> None:
        with self.assertRaises(ReadErrorException):
            MockModbusTransport({1: 1}).read_holding_registers(1, 2)

        self.assertEqual(b"\x00\x01\x00\x00", MockModbusTransport({1: 1}, missing_as_zero=True).read_holding_registers(1, 2))

    def test_write(self) -> None:
        transport = MockModbusTransport()
        transport.write_multiple_registers(5, 2, b"\x00\x01\x00\x02")
        self.assertEqual({5: 1, 6: 2}, transport.holding_registers)

        with self.assertRaises(WriteErrorException):
            transport.write_multiple_registers(5, 2, b"\x00\x01")
