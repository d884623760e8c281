#!/usr/bin/env python3
"""
CHIP-8 Emulator Demo
====================

This script demonstrates how to use the CHIP-8 VM to:
1. Build a small ROM with the opcode encoders
2. Run it headlessly
3. Feed it key presses
4. Inspect registers and take screenshots

The demo program waits for a key, then draws the pressed digit in the
middle of the screen.

Usage:
    python examples/emulator_demo.py
"""

from pathlib import Path

from chip8_vm.disassembler import Chip8Disassembler
from chip8_vm.emulator import Emulator, EmulatorConfig
from chip8_vm.opcodes import assemble, cls, drw, jp, ld_byte, ld_font, ld_vx_key


def build_rom() -> bytes:
    return assemble([
        cls(),              # 200
        ld_vx_key(0),       # 202  V0 = key
        ld_font(0),         # 204  I = glyph(V0)
        ld_byte(1, 30),     # 206  x
        ld_byte(2, 13),     # 208  y
        drw(1, 2, 5),       # 20A
        jp(0x20C),          # 20C  halt
    ])


def main():
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    rom = build_rom()

    # ==========================================================================
    # 1. Show the program
    # ==========================================================================
    print("Program listing:")
    print(Chip8Disassembler().disassemble_to_text(rom))

    # ==========================================================================
    # 2. Load and run until the program blocks on Fx0A
    # ==========================================================================
    emu = Emulator(EmulatorConfig(seed=1))
    emu.load_bytes(rom, name="demo")
    emu.run_frame()
    print(f"\nWaiting for key at PC=${emu.registers['PC']:03X}")

    # ==========================================================================
    # 3. Press a key (host 'e' is CHIP-8 key 6) and let it draw
    # ==========================================================================
    emu.tap_key("e", hold_steps=10)
    print(f"V0 = {emu.registers['V0']:X}")
    print(emu.display_text)

    # ==========================================================================
    # 4. Screenshot
    # ==========================================================================
    shot = output_dir / "chip8_demo.png"
    shot.write_bytes(emu.render_display(scale=8))
    print(f"\nScreenshot saved to {shot}")
    print(emu)


if __name__ == "__main__":
    main()
