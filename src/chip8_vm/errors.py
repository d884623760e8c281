"""
CHIP-8 VM Error Hierarchy
=========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing callers to catch every
VM-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── AddressError (memory access)
│   └── OutOfRangeError - address outside the address space
├── RomError (ROM image handling)
│   ├── RomFormatError - ROM image is unusable (e.g. empty)
│   └── RomSizeError - ROM image does not fit in program memory
└── ConfigError - invalid emulator configuration

Fatal machine faults (stack overflow/underflow, running off the end of
memory) are NOT exceptions: the interpreter records them in its exit flag
and the host stops calling step(). Exceptions are reserved for contract
violations that indicate a corrupt ROM or a host bug.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 VM errors.

        try:
            emu.load_rom("pong.ch8")
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Memory Exceptions
# =============================================================================

class AddressError(Chip8Error):
    """Base exception for address space access errors."""
    pass


class OutOfRangeError(AddressError):
    """
    Address outside the valid range of an address space.

    Raised by AddressSpace.read() and AddressSpace.write(). During correct
    instruction execution the interpreter never produces such an address, so
    this usually means the ROM drove the index register off the end of
    memory.

    Attributes:
        address: The offending address
        start: First valid address
        end: One past the last valid address
    """

    def __init__(self, address: int, start: int, end: int):
        self.address = address
        self.start = start
        self.end = end
        super().__init__(
            f"address 0x{address:04X} outside address space "
            f"[0x{start:04X}, 0x{end:04X})"
        )


# =============================================================================
# ROM Exceptions
# =============================================================================

class RomError(Chip8Error):
    """
    Base exception for ROM image errors.

    Attributes:
        message: The error description
        path: ROM file path, when the image came from disk (optional)
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path
        if path:
            super().__init__(f"{path}: {message}")
        else:
            super().__init__(message)


class RomFormatError(RomError):
    """ROM image cannot be used (for example, it is empty)."""
    pass


class RomSizeError(RomError):
    """
    ROM image larger than the program area.

    Attributes:
        size: ROM size in bytes
        capacity: Bytes available from the program start to end of memory
    """

    def __init__(self, size: int, capacity: int, path: Optional[str] = None):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"ROM is {size} bytes but only {capacity} bytes of program "
            f"memory are available",
            path,
        )


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigError(Chip8Error):
    """Invalid emulator configuration value."""
    pass
