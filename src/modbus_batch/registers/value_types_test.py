import math
import unittest

from modbus_batch.client.exceptions import InvalidInputException
from modbus_batch.registers.value_types import Uint16, Float32, Float32CDAB, RegisterValue


class ValueTypesTest(unittest.TestCase):
    def test_sizes(self) -> None:
        self.assertEqual(1, Uint16.size)
        self.assertEqual(2, Float32.size)
        self.assertEqual(2, Float32CDAB.size)

    def test_uint16(self) -> None:
        self.assertEqual(bytes([0, 0b100000]), Uint16(32).to_bytes())
        self.assertEqual(bytes([0b11, 0b1111011]), Uint16(891).to_bytes())
        self.assertEqual(Uint16(891), Uint16.convert(bytes([0b11, 0b1111011])))

    def test_uint16_rounds(self) -> None:
        self.assertEqual(Uint16(3), Uint16(2.6))

    def test_uint16_out_of_range(self) -> None:
        with self.assertRaises(InvalidInputException):
            Uint16(65536).to_bytes()
        with self.assertRaises(InvalidInputException):
            Uint16(-1).to_bytes()

    def test_float32(self) -> None:
        self.assertEqual(b"\x3f\xc0\x00\x00", Float32(1.5).to_bytes())
        self.assertEqual(Float32(1.5), Float32.convert(b"\x3f\xc0\x00\x00"))

    def test_float32_cdab(self) -> None:
        self.assertEqual(b"\x00\x00\x3f\xc0", Float32CDAB(1.5).to_bytes())
        self.assertEqual(Float32CDAB(1.5), Float32CDAB.convert(b"\x00\x00\x3f\xc0"))

        # 123.456 = 0x42F6E979
        self.assertEqual(b"\xe9\x79\x42\xf6", Float32CDAB(123.456).to_bytes())
        value = Float32CDAB.convert(b"\xe9\x79\x42\xf6").value
        self.assertTrue(math.isclose(123.456, value, rel_tol=1e-6))

    def test_invalid_input(self) -> None:
        with self.assertRaises(InvalidInputException):
            Uint16.convert(b"\x01")
        with self.assertRaises(InvalidInputException):
            Float32.convert(b"\x01\x02")
        with self.assertRaises(InvalidInputException):
            Float32CDAB.convert(b"")

    def test_value_keeps_type(self) -> None:
        value = Float32CDAB.convert(b"\x00\x00\x3f\xc0")
        self.assertIsInstance(value, RegisterValue)
        self.assertIs(Float32CDAB, value.value_type)

    def test_format(self) -> None:
        self.assertEqual("12", Uint16(12).format())
        self.assertEqual("1.500", Float32(1.5).format())
        self.assertEqual("1.500 (float32cdab)", str(Float32CDAB(1.5)))

    def test_out_of_range_float(self) -> None:
        with self.assertRaises(InvalidInputException):
            Float32(1e40).to_bytes()
        with self.assertRaises(InvalidInputException):
            Float32CDAB(-1e40).to_bytes()

    def test_non_finite_uint16(self) -> None:
        with self.assertRaises(InvalidInputException):
            Uint16(float("inf"))
        with self.assertRaises(InvalidInputException):
            Uint16(float("nan"))
