from datetime import timedelta

DefaultTimeout = timedelta(seconds=3).total_seconds()

# limits to how many registers can be read / written with a single request
MaxReadQuantity = 2047
MaxWriteQuantity = 123

# covers the whole 16-bit register address range, 2 bytes each
AddressSpaceSize = 65536 * 2

__all__ = [
    'DefaultTimeout',
    'MaxReadQuantity',
    'MaxWriteQuantity',
    'AddressSpaceSize',
]
