from typing import Dict, List, Optional, Sequence

from modbus_batch.registers.operations import Write
from modbus_batch.registers.value_types import ValueTrait

Registers = Dict[int, ValueTrait]


def filter_unchanged_writes(requests: Sequence[Write], old_data: Optional[Registers]) -> List[Write]:
    """
    Drops writes whose value is already known to be stored on the device.

    `old_data` has to reflect the actual device state, otherwise required updates are skipped silently.
    Passing None disables filtering.
    """
    if old_data is None:
        return list(requests)

    filtered: List[Write] = []
    for request in requests:
        old_value = old_data.get(request.register)
        if old_value is None or old_value.to_bytes() != request.value.to_bytes():
            filtered.append(request)
    return filtered


__all__ = [
    "Registers",
    "filter_unchanged_writes",
]
