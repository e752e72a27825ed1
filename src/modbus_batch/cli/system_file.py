import io
import os
from dataclasses import field
from typing import List, Optional

import yaml
from pydantic import model_validator
from pydantic.dataclasses import dataclass

from modbus_batch.client.defaults import DefaultTimeout

search_paths = ["."]
home_path = os.environ.get("HOME")
if home_path is not None:
    search_paths.append(os.path.join(home_path, ".modbus_batch"))


@dataclass
class RtuConfig:
    path: str
    baudrate: int = 9600
    parity: str = "N"
    stopbits: int = 1


@dataclass
class TcpConfig:
    host: str
    port: int = 502


@dataclass
class RtuOverTcpConfig:
    host: str
    port: int


@dataclass
class Device:
    name: str
    unit: int
    timeout: float = DefaultTimeout
    differential_optimization: bool = True

    rtu: Optional[RtuConfig] = None
    tcp: Optional[TcpConfig] = None
    rtu_over_tcp: Optional[RtuOverTcpConfig] = None

    @model_validator(mode='after')
    def check(self) -> 'Device':
        connections = [x for x in (self.rtu, self.tcp, self.rtu_over_tcp) if x is not None]
        if len(connections) != 1:
            raise ValueError(f"device /{self.name}/ requires exactly one of /rtu/, /tcp/ or /rtu_over_tcp/")
        return self


@dataclass
class SystemConfig:
    devices: List[Device] = field(default_factory=list)

    def find_device(self, name: str) -> Optional[Device]:
        for device in self.devices:
            if device.name == name:
                return device
        return None


def find_system_file(name: str) -> str:
    if not name.endswith(".yaml"):
        name = name + ".yaml"

    for sp in search_paths:
        full_path = os.path.join(sp, name)
        if os.path.exists(full_path):
            return full_path

    raise FileNotFoundError(f"system file {name} not found")


def load_system_config_from_yaml(config: str) -> SystemConfig:
    return SystemConfig(**yaml.load(io.StringIO(config), Loader=yaml.SafeLoader))


def load_system_config(path: str) -> SystemConfig:
    with open(path, "rt") as f:
        return SystemConfig(**yaml.load(f, Loader=yaml.SafeLoader))


__all__ = [
    "RtuConfig",
    "TcpConfig",
    "RtuOverTcpConfig",
    "Device",
    "SystemConfig",
    "find_system_file",
    "load_system_config_from_yaml",
    "load_system_config",
]
