"""
CHIP-8 VM - Interpreter and Tools for the CHIP-8 Virtual Machine
================================================================

CHIP-8 is a small interpreted language from the late 1970s: 35 two-byte
instructions, sixteen 8-bit registers, 4 KiB of memory, a 64x32
monochrome display, two 60Hz timers and a 16-key hex keypad.

Main Components
---------------
- **emulator**: The interpreter core plus host-side pieces
    Address space, framebuffer, keypad, ROM loading and the Emulator facade

- **opcodes**: Instruction encoding
    Decoder shared by all components and one encoder per instruction

- **disassembler**: Instruction listings (c8disasm)

Quick Start
-----------
Build and run a tiny program:
    >>> from chip8_vm import Emulator
    >>> from chip8_vm.opcodes import assemble, ld_byte, shl
    >>> emu = Emulator()
    >>> emu.load_bytes(assemble([ld_byte(0xC, 127), shl(0xC)]))
    >>> emu.run(max_steps=2).steps
    2
    >>> emu.registers["VC"], emu.registers["VF"]
    (254, 0)

Or use the command-line tools:
    $ c8run pong.ch8 --show-screen
    $ c8disasm pong.ch8 -o pong.lst

Version History
---------------
1.0.0 - Initial release with interpreter, runner and disassembler
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8_vm.emulator import (
    AddressSpace,
    Emulator,
    EmulatorConfig,
    Framebuffer,
    Interpreter,
    Keypad,
    RunResult,
    StopReason,
    build_address_space,
    load_rom,
    render_image,
)
from chip8_vm.errors import (
    Chip8Error,
    AddressError,
    OutOfRangeError,
    RomError,
    RomFormatError,
    RomSizeError,
    ConfigError,
)
from chip8_vm.opcodes import (
    Instruction,
    OpcodeFamily,
    assemble,
    decode,
)
from chip8_vm.disassembler import Chip8Disassembler, DisassembledInstruction

__all__ = [
    # Version info
    "__version__",
    # Emulator
    "Emulator",
    "EmulatorConfig",
    "RunResult",
    "StopReason",
    "Interpreter",
    "AddressSpace",
    "Framebuffer",
    "Keypad",
    "build_address_space",
    "load_rom",
    "render_image",
    # Instruction set
    "Instruction",
    "OpcodeFamily",
    "assemble",
    "decode",
    # Disassembler
    "Chip8Disassembler",
    "DisassembledInstruction",
    # Exception hierarchy
    "Chip8Error",
    "AddressError",
    "OutOfRangeError",
    "RomError",
    "RomFormatError",
    "RomSizeError",
    "ConfigError",
]
