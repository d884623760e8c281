"""
CHIP-8 Font Sprites
===================

The built-in hexadecimal font: 16 glyphs (0-F), each 4 pixels wide and
5 rows tall, stored one byte per row with the pixels in the high nibble.
Programs locate a glyph with the Fx29 instruction, which sets the index
register to digit * 5, so the table must live at address 0.
"""

# Address of the first glyph
FONT_START = 0x000

# Bytes per glyph
GLYPH_SIZE = 5

FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


def glyph_address(digit: int) -> int:
    """Address of the sprite for hex digit 0-F (upper bits ignored)."""
    return FONT_START + (digit & 0xF) * GLYPH_SIZE
