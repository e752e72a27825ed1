import re
import argparse
from typing import Tuple, Any, Dict

from modbus_batch.client.exceptions import InvalidInputException
from modbus_batch.registers.operations import Read, Write
from modbus_batch.registers.value_types import ValueType, Uint16, Float32, Float32CDAB, NumericValue

ModeTupleType = Tuple[int, str, int]

value_types_by_name: Dict[str, ValueType] = {x.name: x for x in (Uint16, Float32, Float32CDAB)}

address_re = r"\s*(?P<address>0x[0-9a-fA-F]+|[0-9]+)\s*"
type_re = r"(?:/\s*(?P<type>[a-zA-Z0-9]+)\s*)?"


def mode_parser(arg_value: Any) -> ModeTupleType:
    m = re.match(r"(\d+)([neo])([12])", arg_value, re.IGNORECASE)
    if m:
        return int(m.group(1)), m.group(2).upper(), int(m.group(3))
    else:
        raise argparse.ArgumentTypeError(f"invalid mode: {arg_value}")


def interval_parser(arg_value: Any) -> float:
    try:
        return float(arg_value)
    except ValueError:
        m = re.match(r"(\d+)(ms|s)$", arg_value, re.IGNORECASE)
        if m:
            return float(m.group(1)) * (1 if m.group(2).lower() == "s" else 0.001)
        else:
            raise argparse.ArgumentTypeError(f"invalid interval: {arg_value}")


def _parse_address(value: str) -> int:
    address = int(value, 16) if value.lower().startswith("0x") else int(value)
    if address > 0xffff:
        raise argparse.ArgumentTypeError(f"register out of range: {value}")
    return address


def _parse_value_type(name: str | None) -> ValueType:
    if name is None:
        return Uint16

    value_type = value_types_by_name.get(name.lower())
    if value_type is None:
        raise argparse.ArgumentTypeError(f"unknown type {name}, valid: {', '.join(value_types_by_name)}")
    return value_type


def _parse_number(value: str) -> NumericValue:
    try:
        return int(value, 0)
    except ValueError:
        try:
            return float(value)
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid value: {value}")


def read_parser(arg_value: Any) -> Read:
    # 0x002a/float32
    m = re.match(rf"^{address_re}{type_re}$", arg_value)
    if m is None:
        raise argparse.ArgumentTypeError(f"invalid register definition: {arg_value}")

    return Read(_parse_address(m.group("address")), _parse_value_type(m.group("type")))


def write_parser(arg_value: Any) -> Write:
    # 0x002a/float32=1.5
    m = re.match(rf"^{address_re}{type_re}=\s*(?P<value>\S+)\s*$", arg_value)
    if m is None:
        raise argparse.ArgumentTypeError(f"invalid write definition: {arg_value}")

    value_type = _parse_value_type(m.group("type"))
    try:
        value = value_type(_parse_number(m.group("value")))
        value.to_bytes()
    except InvalidInputException as e:
        raise argparse.ArgumentTypeError(str(e))
    return Write(_parse_address(m.group("address")), value)


__all__ = [
    "ModeTupleType",
    "value_types_by_name",
    "mode_parser",
    "interval_parser",
    "read_parser",
    "write_parser",
]
