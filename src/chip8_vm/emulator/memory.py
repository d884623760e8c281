"""
Address Space for the CHIP-8 VM
===============================

CHIP-8 memory is a flat, byte-addressable 4KB space:

    $000-$04F  Font sprites (16 glyphs x 5 bytes)
    $050-$1FF  Unused (historically the interpreter itself), zero-filled
    $200-$FFF  Program ROM and working data

Unlike the banked RAM/ROM of larger machines there is no routing here: a
single dense buffer covers the whole span and every access is range
checked. Reads and writes outside [start, end) raise OutOfRangeError rather
than being silently ignored, because the interpreter never produces such an
address while executing well-formed code.
"""

from typing import Iterable

from ..errors import OutOfRangeError

# Standard CHIP-8 memory size
DEFAULT_MEMORY_SIZE = 0x1000


class AddressSpace:
    """
    Dense byte store over [start, start + size).

    The span is fixed at construction and never resized. Values are plain
    8-bit unsigned integers; writes mask to 8 bits and always succeed for a
    valid address.

    Example:
        >>> mem = AddressSpace()
        >>> mem.write(0x200, 0x60)
        >>> mem.read(0x200)
        96
        >>> mem.read(0x1000)
        Traceback (most recent call last):
        ...
        OutOfRangeError: address 0x1000 outside address space [0x0000, 0x1000)

    Attributes:
        start: First valid address
        size: Number of addressable bytes
    """

    def __init__(self, size: int = DEFAULT_MEMORY_SIZE, start: int = 0):
        """
        Initialize a zero-filled address space.

        Args:
            size: Number of bytes (default 4096)
            start: First valid address (default 0)

        Raises:
            ValueError: If size is not positive or start is negative
        """
        if size <= 0:
            raise ValueError(f"Address space size must be positive, got {size}")
        if start < 0:
            raise ValueError(f"Address space start must be >= 0, got {start}")

        self._start = start
        self._size = size
        self._data = bytearray(size)

    @property
    def start(self) -> int:
        """First valid address."""
        return self._start

    @property
    def size(self) -> int:
        """Number of addressable bytes."""
        return self._size

    @property
    def end(self) -> int:
        """One past the last valid address."""
        return self._start + self._size

    def __len__(self) -> int:
        return self._size

    def __contains__(self, address: object) -> bool:
        return isinstance(address, int) and self._start <= address < self.end

    def _check(self, address: int) -> int:
        """Validate address and return its offset into the buffer."""
        if not self._start <= address < self.end:
            raise OutOfRangeError(address, self._start, self.end)
        return address - self._start

    def read(self, address: int) -> int:
        """
        Read byte from the address space.

        Args:
            address: Address to read

        Returns:
            Byte value (0-255)

        Raises:
            OutOfRangeError: If address is outside [start, end)
        """
        return self._data[self._check(address)]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to the address space.

        Args:
            address: Address to write
            value: Byte value (masked to 8 bits)

        Raises:
            OutOfRangeError: If address is outside [start, end)
        """
        self._data[self._check(address)] = value & 0xFF

    def load(self, address: int, data: Iterable[int]) -> None:
        """
        Write consecutive bytes starting at address.

        Both ends of the range are checked before anything is written, so a
        failed load leaves memory untouched.
        """
        data = bytes(data)
        if not data:
            return
        self._check(address)
        self._check(address + len(data) - 1)
        offset = address - self._start
        self._data[offset:offset + len(data)] = data

    def dump(self, address: int, count: int) -> bytes:
        """Read count consecutive bytes starting at address."""
        if count <= 0:
            return b""
        self._check(address)
        self._check(address + count - 1)
        offset = address - self._start
        return bytes(self._data[offset:offset + count])

    def __repr__(self) -> str:
        return f"AddressSpace(start=0x{self._start:04X}, size={self._size})"
