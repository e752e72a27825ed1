from dataclasses import replace
from typing import Callable, List, Optional, Protocol, Sequence, TypeVar

from modbus_batch.client.defaults import MaxReadQuantity, MaxWriteQuantity
from modbus_batch.registers.operations import ReadOp, WriteOp


class AddressRangeTrait(Protocol):
    def get_address(self) -> int: ...

    def get_count(self) -> int: ...


TRange = TypeVar("TRange", bound=AddressRangeTrait)


def merge_address_ranges(ranges: Sequence[TRange], max_count: int, merge: Callable[[TRange, TRange], TRange]) \
        -> List[TRange]:
    """
    Coalesces ranges that follow each other without a gap as long as the merged range
    stays within `max_count`. Overlapping ranges are left as they are.
    """
    buckets: List[TRange] = []
    cur_rng: Optional[TRange] = None

    for rng in sorted(ranges, key=lambda x: x.get_address()):
        if cur_rng is None:
            cur_rng = rng
        elif rng.get_address() == cur_rng.get_address() + cur_rng.get_count() \
                and cur_rng.get_count() + rng.get_count() <= max_count:
            cur_rng = merge(cur_rng, rng)
        else:
            buckets.append(cur_rng)
            cur_rng = rng

    if cur_rng is not None:
        buckets.append(cur_rng)

    return buckets


def _merge_read(a: ReadOp, b: ReadOp) -> ReadOp:
    return replace(a, quantity=a.quantity + b.quantity)


def _merge_write(a: WriteOp, b: WriteOp) -> WriteOp:
    return replace(a, quantity=a.quantity + b.quantity, value=a.value + b.value)


def merge_read_ops(ops: Sequence[ReadOp]) -> List[ReadOp]:
    return merge_address_ranges(ops, max_count=MaxReadQuantity, merge=_merge_read)


def merge_write_ops(ops: Sequence[WriteOp]) -> List[WriteOp]:
    return merge_address_ranges(ops, max_count=MaxWriteQuantity, merge=_merge_write)


__all__ = [
    "AddressRangeTrait",
    "merge_address_ranges",
    "merge_read_ops",
    "merge_write_ops",
]
