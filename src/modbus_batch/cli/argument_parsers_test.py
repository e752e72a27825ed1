import argparse
import unittest

from modbus_batch.cli.argument_parsers import mode_parser, interval_parser, read_parser, write_parser
from modbus_batch.registers.operations import Read, Write
from modbus_batch.registers.value_types import Uint16, Float32, Float32CDAB


class ArgumentParsersTest(unittest.TestCase):
    def test_mode(self) -> None:
        self.assertEqual((9600, "N", 1), mode_parser("9600n1"))
        self.assertEqual((19200, "E", 2), mode_parser("19200E2"))

        with self.assertRaises(argparse.ArgumentTypeError):
            mode_parser("9600x1")

    def test_interval(self) -> None:
        self.assertEqual(1.5, interval_parser("1.5"))
        self.assertEqual(2.0, interval_parser("2s"))
        self.assertAlmostEqual(0.25, interval_parser("250ms"))

        with self.assertRaises(argparse.ArgumentTypeError):
            interval_parser("1h")

    def test_read(self) -> None:
        self.assertEqual(Read(42, Uint16), read_parser("42"))
        self.assertEqual(Read(42, Uint16), read_parser("042"))
        self.assertEqual(Read(42, Float32), read_parser("0x2a/float32"))
        self.assertEqual(Read(42, Float32CDAB), read_parser("0x002A/Float32CDAB"))

    def test_read_invalid(self) -> None:
        for arg in ("", "abc", "42/int8", "0x10000", "42/"):
            with self.assertRaises(argparse.ArgumentTypeError, msg=arg):
                read_parser(arg)

    def test_write(self) -> None:
        self.assertEqual(Write(10, Uint16(5)), write_parser("10=5"))
        self.assertEqual(Write(10, Uint16(16)), write_parser("10/uint16=0x10"))
        self.assertEqual(Write(16, Float32CDAB(1.5)), write_parser("0x10/float32cdab=1.5"))

    def test_write_invalid(self) -> None:
        for arg in ("10", "10=", "10=abc", "10/float64=1", "10=70000", "10=1e400", "10/float32=1e40"):
            with self.assertRaises(argparse.ArgumentTypeError, msg=arg):
                write_parser(arg)
