"""
CHIP-8 Virtual Machine
======================

An interpreter for the canonical 35-instruction CHIP-8 ISA, plus the
host-side pieces needed to drive it.

- **Interpreter**: fetch/decode/execute core with registers, index, call
  stack, timers, framebuffer and key state
- **Address space**: dense, bounds-checked byte memory (4 KiB by default)
- **Display**: 64x32 XOR framebuffer, text dump and PNG rendering
- **Keypad**: 16-key input with host key mapping
- **ROM loading**: fonts at 0x000, program at 0x200

Quick Start
-----------

Basic usage::

    >>> from chip8_vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=7))
    >>> emu.load_rom("ibm_logo.ch8")
    >>> result = emu.run(max_steps=1_000)
    >>> print(emu.display_text)

Driving the interpreter directly::

    >>> from chip8_vm.emulator import Interpreter, build_address_space
    >>> cpu = Interpreter(build_address_space(rom_bytes))
    >>> while not cpu.should_exit():
    ...     cpu.sync_keys(poll_host_keys())
    ...     cpu.step()
    ...     if cpu.take_draw_flag():
    ...         repaint(cpu.framebuffer)

Module Structure
----------------

- `emulator.py`: Main Emulator class (high-level API)
- `cpu.py`: Interpreter
- `memory.py`: AddressSpace
- `display.py`: Framebuffer and PNG rendering
- `keyboard.py`: Keypad and key mapping
- `fonts.py`: Built-in hex digit glyphs
- `rom.py`: ROM image loading
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig, RunResult, StopReason

# Interpreter core
from .cpu import (
    INDEX_LIMIT,
    NUM_KEYS,
    PROGRAM_START,
    STACK_DEPTH,
    Interpreter,
    InterpreterState,
    MemoryProtocol,
)

# Memory and ROM loading
from .memory import DEFAULT_MEMORY_SIZE, AddressSpace
from .rom import build_address_space, load_rom
from .fonts import FONT_SET, FONT_START, GLYPH_SIZE, glyph_address

# Host I/O
from .display import (
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    Framebuffer,
    format_rows,
    render_image,
)
from .keyboard import DEFAULT_KEYMAP, Keypad

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",
    "RunResult",
    "StopReason",

    # Interpreter
    "Interpreter",
    "InterpreterState",
    "MemoryProtocol",
    "PROGRAM_START",
    "STACK_DEPTH",
    "INDEX_LIMIT",

    # Memory
    "AddressSpace",
    "DEFAULT_MEMORY_SIZE",
    "build_address_space",
    "load_rom",
    "FONT_SET",
    "FONT_START",
    "GLYPH_SIZE",
    "glyph_address",

    # Display
    "Framebuffer",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "format_rows",
    "render_image",

    # Keypad
    "Keypad",
    "DEFAULT_KEYMAP",
    "NUM_KEYS",
]
