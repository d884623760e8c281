"""
ROM Loading
===========

CHIP-8 ROMs are flat binary blobs of big-endian instruction words with no
header or magic number. Loading one means building a fresh address space
with:

    $000  Font sprites (FONT_SET, 80 bytes)
    $200  ROM bytes
    rest  Zero-filled

The result is handed to an Interpreter; a new ROM always gets a new
address space rather than an in-place reset.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from ..errors import RomFormatError, RomSizeError
from .cpu import PROGRAM_START
from .fonts import FONT_SET, FONT_START
from .memory import DEFAULT_MEMORY_SIZE, AddressSpace

logger = logging.getLogger(__name__)


def build_address_space(
    rom: bytes,
    program_start: int = PROGRAM_START,
    memory_size: int = DEFAULT_MEMORY_SIZE,
    source: Optional[str] = None,
) -> AddressSpace:
    """
    Create an address space holding the font table and a ROM image.

    Args:
        rom: Raw ROM bytes
        program_start: Address to load the ROM at (default 0x200)
        memory_size: Size of the address space (default 4096)
        source: ROM name used in error messages (optional)

    Returns:
        Populated AddressSpace

    Raises:
        RomFormatError: If the ROM is empty
        RomSizeError: If the ROM does not fit between program_start and
                      the end of memory
    """
    if not rom:
        raise RomFormatError("ROM image is empty", source)

    capacity = memory_size - program_start
    if len(rom) > capacity:
        raise RomSizeError(len(rom), capacity, source)

    memory = AddressSpace(memory_size)
    memory.load(FONT_START, FONT_SET)
    memory.load(program_start, rom)

    logger.debug(
        "Loaded %d-byte ROM at 0x%03X (%d bytes free)",
        len(rom), program_start, capacity - len(rom),
    )
    return memory


def load_rom(
    path: Union[str, Path],
    program_start: int = PROGRAM_START,
    memory_size: int = DEFAULT_MEMORY_SIZE,
) -> AddressSpace:
    """
    Read a ROM file and build its address space.

    Raises:
        FileNotFoundError: If the file does not exist
        RomFormatError: If the file is empty
        RomSizeError: If the ROM is too large
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"ROM file not found: {path}")

    logger.info("Loading ROM %s", path)
    return build_address_space(
        path.read_bytes(), program_start, memory_size, source=str(path)
    )
