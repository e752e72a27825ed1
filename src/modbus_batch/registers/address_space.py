from modbus_batch.client.defaults import AddressSpaceSize


class FlatAddressSpace:
    """
    Byte buffer addressed by absolute offset, register `n` starts at offset `n * 2`.

    Neither `set` nor `get` raise on out-of-range arguments, they clamp to the buffer instead.
    """

    def __init__(self, size: int = AddressSpaceSize) -> None:
        self._buf = bytearray(size)

    def __len__(self) -> int:
        return len(self._buf)

    def set(self, offset: int, data: bytes) -> int:
        """Copies `data` at `offset` and returns the number of bytes copied, which is less than `len(data)` on truncation."""
        if offset < 0 or offset >= len(self._buf):
            return 0

        count = min(len(data), len(self._buf) - offset)
        self._buf[offset:offset + count] = data[:count]
        return count

    def get(self, offset: int, size: int) -> bytes:
        if offset < 0 or size < 0:
            return b""
        if offset >= len(self._buf):
            return b""
        return bytes(self._buf[offset:offset + size])


__all__ = [
    "FlatAddressSpace",
]
