import argparse
import datetime
import json
import logging
import sys
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, cast, Dict

from modbus_batch.cli.argument_parsers import interval_parser, mode_parser, read_parser, write_parser, ModeTupleType
from modbus_batch.cli.system_file import load_system_config, find_system_file, Device
from modbus_batch.client.batch_client import BatchModbusClient
from modbus_batch.client.defaults import DefaultTimeout
from modbus_batch.client.exceptions import ModbusBatchException
from modbus_batch.client.pymodbus_transport import PyModbusTcpTransport, PyModbusRtuTransport, PyModbusRtuOverTcpTransport
from modbus_batch.client.transport import ModbusTransport
from modbus_batch.registers.differential import Registers
from modbus_batch.registers.operations import Read, Write
from modbus_batch.registers.value_types import RegisterValue


@dataclass
class Args:
    format: str
    cmd: str
    create_client: Callable[['Args'], Optional[BatchModbusClient]]
    device_mode: str
    host: str
    port: int
    path: str
    mode: ModeTupleType
    unit: int
    reads: List[Read]
    writes: List[Write]
    only_changed: bool
    interval: float
    timeout: float
    verbose: bool


def create_client_from_args(args: Args) -> BatchModbusClient:
    device_mode = args.device_mode

    transport: ModbusTransport
    if device_mode == "tcp":
        transport = PyModbusTcpTransport(host=args.host, port=args.port, unit=args.unit, timeout=args.timeout)
    elif device_mode == "rtu":
        transport = PyModbusRtuTransport(path=args.path, unit=args.unit,
                                         baudrate=args.mode[0], parity=args.mode[1], stopbits=args.mode[2],
                                         timeout=args.timeout)
    elif device_mode == "rtu-over-tcp":
        transport = PyModbusRtuOverTcpTransport(host=args.host, port=args.port, unit=args.unit, timeout=args.timeout)
    else:
        raise Exception("invalid mode")

    return BatchModbusClient(transport)


def create_transport_for_device(device: Device) -> ModbusTransport:
    if device.tcp is not None:
        return PyModbusTcpTransport(host=device.tcp.host, port=device.tcp.port, unit=device.unit,
                                    timeout=device.timeout)
    elif device.rtu is not None:
        return PyModbusRtuTransport(path=device.rtu.path, unit=device.unit,
                                    baudrate=device.rtu.baudrate, parity=device.rtu.parity,
                                    stopbits=device.rtu.stopbits, timeout=device.timeout)
    elif device.rtu_over_tcp is not None:
        return PyModbusRtuOverTcpTransport(host=device.rtu_over_tcp.host, port=device.rtu_over_tcp.port,
                                           unit=device.unit, timeout=device.timeout)
    else:
        raise Exception("invalid mode")


def create_client_from_system_file(args: Args) -> Optional[BatchModbusClient]:
    device_name = vars(args)["device-name"]
    system_config = load_system_config(find_system_file(vars(args)["system-file"]))

    if device_name == "list":
        for dev in system_config.devices:
            print("  ", dev.name)
        return None

    device = system_config.find_device(device_name)
    if device is None:
        print("no matching device")
        exit(1)

    return BatchModbusClient(create_transport_for_device(device),
                             differential_optimization=device.differential_optimization)


def print_values(reads: Sequence[Read], values: Registers, format: str) -> None:
    if format == "pretty":
        for read in reads:
            value = cast(RegisterValue, values[read.register])
            print(f"{f'{read.register}/{read.value_type}':>20s} = {value.format()}")

    if format == "json":
        data: Dict[str, Any] = {str(read.register): cast(RegisterValue, values[read.register]).value for read in reads}
        sys.stdout.write(json.dumps(data) + "\n")

    if format == "raw":
        sys.stdout.write(",".join(f"{cast(RegisterValue, values[read.register]).value}" for read in reads) + "\n")

    sys.stdout.flush()


def handle_read(client: BatchModbusClient, reads: List[Read], format: str) -> None:
    print_values(reads, client.batch_read(reads), format)


def handle_watch(client: BatchModbusClient, reads: List[Read], format: str, interval: float) -> None:
    read_num = 0
    while True:
        read_num += 1
        date_str = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        try:
            values = client.batch_read(reads)
        except ModbusBatchException as e:
            if format == "pretty":
                print(f"[{f'#{read_num}':>5} - {date_str}] READ ERROR: {e}")
            time.sleep(interval)
            continue

        if format == "pretty":
            print()
            print(f"===============================")
            print(f"| {f'#{read_num}':>5} - {date_str} |")
            print(f"===============================")
        print_values(reads, values, format)

        time.sleep(interval)


def handle_write(client: BatchModbusClient, writes: List[Write], only_changed: bool) -> None:
    old_data: Optional[Registers] = None
    if only_changed:
        old_data = client.batch_read([Read(x.register, cast(RegisterValue, x.value).value_type) for x in writes])

    client.batch_write(writes, old_data)


def main() -> None:
    argparser = argparse.ArgumentParser()

    argparser.add_argument("--format", type=str, choices=("raw", "pretty", "json"), default="pretty")
    argparser.add_argument("--timeout", type=float, default=DefaultTimeout)
    argparser.add_argument("-v", "--verbose", action='store_true')

    mode_subparser = argparser.add_subparsers(title='connection', description='valid connections')

    dev_tcp_p = mode_subparser.add_parser("tcp")
    dev_tcp_p.set_defaults(device_mode="tcp")
    dev_tcp_p.set_defaults(create_client=lambda x: create_client_from_args(x))
    dev_tcp_p.add_argument("--host", type=str, required=True)
    dev_tcp_p.add_argument("--port", type=int, default=502)
    dev_tcp_p.add_argument("--unit", type=int, required=True)

    dev_rtu_p = mode_subparser.add_parser("rtu")
    dev_rtu_p.set_defaults(device_mode="rtu")
    dev_rtu_p.set_defaults(create_client=lambda x: create_client_from_args(x))
    dev_rtu_p.add_argument("--path", type=str, required=True)
    dev_rtu_p.add_argument("--mode", type=mode_parser, default="9600n1", help="default 9600n1")
    dev_rtu_p.add_argument("--unit", type=int, required=True)

    dev_rtu_over_tcp_p = mode_subparser.add_parser("rtu-over-tcp")
    dev_rtu_over_tcp_p.set_defaults(device_mode="rtu-over-tcp")
    dev_rtu_over_tcp_p.set_defaults(create_client=lambda x: create_client_from_args(x))
    dev_rtu_over_tcp_p.add_argument("--host", type=str, required=True)
    dev_rtu_over_tcp_p.add_argument("--port", type=int, required=True)
    dev_rtu_over_tcp_p.add_argument("--unit", type=int, required=True)

    system_p = mode_subparser.add_parser("system")
    system_p.set_defaults(create_client=lambda x: create_client_from_system_file(x))
    system_p.add_argument("system-file", type=str)
    system_p.add_argument("device-name", type=str, help="device name or 'list'")

    def add_commands_parser(sp: argparse.ArgumentParser) -> None:
        subparsers = sp.add_subparsers(title='subcommands', description='valid subcommands', help='additional help')

        read_parser_ = subparsers.add_parser('read', help="REGISTER[/TYPE], types: uint16, float32, float32cdab")
        read_parser_.set_defaults(cmd="read")
        read_parser_.add_argument("reads", nargs="+", type=read_parser)

        watch_parser = subparsers.add_parser('watch', help="REGISTER[/TYPE]")
        watch_parser.set_defaults(cmd="watch")
        watch_parser.add_argument("reads", nargs="+", type=read_parser)
        watch_parser.add_argument("--interval", type=interval_parser, default="1s")

        write_parser_ = subparsers.add_parser('write', help="REGISTER[/TYPE]=VALUE")
        write_parser_.set_defaults(cmd="write")
        write_parser_.add_argument("writes", nargs="+", type=write_parser)
        write_parser_.add_argument("--only-changed", action='store_true',
                                   help="read current values first and skip the ones already set")

    add_commands_parser(dev_tcp_p)
    add_commands_parser(dev_rtu_p)
    add_commands_parser(dev_rtu_over_tcp_p)
    add_commands_parser(system_p)

    args = cast(Args, argparser.parse_args())

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="[%(asctime)s] [%(name)s] %(message)s",
                        datefmt="%Y-%m-%d %H:%M:%S")

    if "create_client" not in cast(Any, args):
        argparser.print_help()
        exit(1)

    client = args.create_client(args)
    if client is None:
        exit(0)

    if "cmd" not in cast(Any, args):
        print("Specify command")
        exit(1)

    try:
        with client:
            if args.cmd == "read":
                handle_read(client, args.reads, args.format)

            if args.cmd == "watch":
                handle_watch(client, args.reads, args.format, args.interval)

            if args.cmd == "write":
                handle_write(client, args.writes, args.only_changed)
    except ModbusBatchException as e:
        print(f"ERROR: {e}")
        exit(1)


def main_cli() -> None:
    main()


if __name__ == "__main__":
    main_cli()
