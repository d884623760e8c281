"""
CHIP-8 Instruction Set
======================

This module is the single source of truth for the CHIP-8 instruction
encoding. It is shared by the interpreter (decode), the disassembler and
the ROM-building helpers used by tests and tools (encode).

Instruction Format
------------------
Every instruction is one big-endian 16-bit word. The top nibble selects one
of 16 families; the remaining 12 bits are split into operand fields:

    F X Y N
    |    `--`  nn  (bits 0-7)
    |  `----`  nnn (bits 0-11)
    family    (bits 12-15)

    x = bits 8-11 (register index)
    y = bits 4-7  (register index)
    n = bits 0-3

Encoders
--------
One small function per instruction returns the encoded word, e.g.:

    >>> hex(ld_byte(0xC, 127))
    '0x6c7f'
    >>> assemble([ld_byte(0xC, 127), shl(0xC)])
    b'l\\x7f\\x8c\\x0e'

Every operand is range checked; out-of-range values raise ValueError
rather than silently bleeding into neighbouring fields.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable


# =============================================================================
# Opcode Families
# =============================================================================

class OpcodeFamily(IntEnum):
    """The 16 instruction families selected by the top nibble."""
    SYSTEM = 0x0       # 00E0 CLS, 00EE RET
    JUMP = 0x1         # 1nnn
    CALL = 0x2         # 2nnn
    SKIP_EQ_BYTE = 0x3  # 3xnn
    SKIP_NE_BYTE = 0x4  # 4xnn
    SKIP_EQ_REG = 0x5  # 5xy0
    LOAD_BYTE = 0x6    # 6xnn
    ADD_BYTE = 0x7     # 7xnn
    ALU = 0x8          # 8xyN
    SKIP_NE_REG = 0x9  # 9xy0
    LOAD_INDEX = 0xA   # Annn
    JUMP_V0 = 0xB      # Bnnn
    RANDOM = 0xC       # Cxnn
    DRAW = 0xD         # Dxyn
    KEY = 0xE          # Ex9E, ExA1
    MISC = 0xF         # Fx07 .. Fx65


class SystemOp(IntEnum):
    """00nn operations, selected by the low byte."""
    CLS = 0xE0
    RET = 0xEE


class AluOp(IntEnum):
    """8xyN operations, selected by the low nibble."""
    LD = 0x0
    OR = 0x1
    AND = 0x2
    XOR = 0x3
    ADD = 0x4
    SUB = 0x5
    SHR = 0x6
    SUBN = 0x7
    SHL = 0xE


class KeyOp(IntEnum):
    """ExNN operations, selected by the low byte."""
    SKP = 0x9E
    SKNP = 0xA1


class MiscOp(IntEnum):
    """FxNN operations, selected by the low byte."""
    LD_VX_DT = 0x07
    LD_VX_K = 0x0A
    LD_DT_VX = 0x15
    LD_ST_VX = 0x18
    ADD_I_VX = 0x1E
    LD_F_VX = 0x29
    LD_B_VX = 0x33
    LD_I_VX = 0x55
    LD_VX_I = 0x65


# =============================================================================
# Decoding
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    A decoded instruction word.

    Attributes:
        word: The raw 16-bit instruction
        family: Opcode family (top nibble)
        x: Register index from bits 8-11
        y: Register index from bits 4-7
        n: 4-bit constant from bits 0-3
        nn: 8-bit constant from bits 0-7
        nnn: 12-bit address from bits 0-11
    """
    word: int
    family: OpcodeFamily
    x: int
    y: int
    n: int
    nn: int
    nnn: int


def decode(word: int) -> Instruction:
    """Split a 16-bit instruction word into its fields."""
    word &= 0xFFFF
    return Instruction(
        word=word,
        family=OpcodeFamily((word & 0xF000) >> 12),
        x=(word & 0x0F00) >> 8,
        y=(word & 0x00F0) >> 4,
        n=word & 0x000F,
        nn=word & 0x00FF,
        nnn=word & 0x0FFF,
    )


# =============================================================================
# Encoding helpers
# =============================================================================

def _check(name: str, value: int, limit: int) -> int:
    if not 0 <= value <= limit:
        raise ValueError(f"{name} must be 0-{limit:#x}, got {value:#x}")
    return value


def _addr(family: int, nnn: int) -> int:
    return (family << 12) | _check("address", nnn, 0xFFF)


def _xnn(family: int, x: int, nn: int) -> int:
    return (family << 12) | (_check("register", x, 0xF) << 8) | _check("byte", nn, 0xFF)


def _xyn(family: int, x: int, y: int, n: int) -> int:
    return (
        (family << 12)
        | (_check("register", x, 0xF) << 8)
        | (_check("register", y, 0xF) << 4)
        | _check("nibble", n, 0xF)
    )


def _xop(family: int, x: int, op: int) -> int:
    return (family << 12) | (_check("register", x, 0xF) << 8) | op


# -----------------------------------------------------------------------------
# Flow control
# -----------------------------------------------------------------------------

def cls() -> int:
    """00E0 - clear the display."""
    return int(SystemOp.CLS)


def ret() -> int:
    """00EE - return from subroutine."""
    return int(SystemOp.RET)


def jp(address: int) -> int:
    """1nnn - jump to address."""
    return _addr(0x1, address)


def call(address: int) -> int:
    """2nnn - call subroutine at address."""
    return _addr(0x2, address)


def jp_v0(address: int) -> int:
    """Bnnn - jump to address + V0."""
    return _addr(0xB, address)


# -----------------------------------------------------------------------------
# Conditional skips
# -----------------------------------------------------------------------------

def se_byte(x: int, nn: int) -> int:
    """3xnn - skip if Vx == nn."""
    return _xnn(0x3, x, nn)


def sne_byte(x: int, nn: int) -> int:
    """4xnn - skip if Vx != nn."""
    return _xnn(0x4, x, nn)


def se_reg(x: int, y: int) -> int:
    """5xy0 - skip if Vx == Vy."""
    return _xyn(0x5, x, y, 0)


def sne_reg(x: int, y: int) -> int:
    """9xy0 - skip if Vx != Vy."""
    return _xyn(0x9, x, y, 0)


def skp(x: int) -> int:
    """Ex9E - skip if key Vx is pressed."""
    return _xop(0xE, x, KeyOp.SKP)


def sknp(x: int) -> int:
    """ExA1 - skip if key Vx is not pressed."""
    return _xop(0xE, x, KeyOp.SKNP)


# -----------------------------------------------------------------------------
# Register loads and arithmetic
# -----------------------------------------------------------------------------

def ld_byte(x: int, nn: int) -> int:
    """6xnn - Vx = nn."""
    return _xnn(0x6, x, nn)


def add_byte(x: int, nn: int) -> int:
    """7xnn - Vx += nn (no carry)."""
    return _xnn(0x7, x, nn)


def ld_reg(x: int, y: int) -> int:
    """8xy0 - Vx = Vy."""
    return _xyn(0x8, x, y, AluOp.LD)


def or_reg(x: int, y: int) -> int:
    """8xy1 - Vx |= Vy."""
    return _xyn(0x8, x, y, AluOp.OR)


def and_reg(x: int, y: int) -> int:
    """8xy2 - Vx &= Vy."""
    return _xyn(0x8, x, y, AluOp.AND)


def xor_reg(x: int, y: int) -> int:
    """8xy3 - Vx ^= Vy."""
    return _xyn(0x8, x, y, AluOp.XOR)


def add_reg(x: int, y: int) -> int:
    """8xy4 - Vx += Vy, VF = carry."""
    return _xyn(0x8, x, y, AluOp.ADD)


def sub_reg(x: int, y: int) -> int:
    """8xy5 - Vx -= Vy, VF = Vx > Vy."""
    return _xyn(0x8, x, y, AluOp.SUB)


def shr(x: int, y: int = 0) -> int:
    """8xy6 - Vx >>= 1, VF = old LSB."""
    return _xyn(0x8, x, y, AluOp.SHR)


def subn_reg(x: int, y: int) -> int:
    """8xy7 - Vx = Vy - Vx, VF = Vy > Vx."""
    return _xyn(0x8, x, y, AluOp.SUBN)


def shl(x: int, y: int = 0) -> int:
    """8xyE - Vx <<= 1, VF = old MSB."""
    return _xyn(0x8, x, y, AluOp.SHL)


def rnd(x: int, nn: int) -> int:
    """Cxnn - Vx = random byte & nn."""
    return _xnn(0xC, x, nn)


# -----------------------------------------------------------------------------
# Index register, memory and display
# -----------------------------------------------------------------------------

def ld_i(address: int) -> int:
    """Annn - I = nnn."""
    return _addr(0xA, address)


def drw(x: int, y: int, n: int) -> int:
    """Dxyn - draw n-row sprite from [I] at (Vx, Vy)."""
    return _xyn(0xD, x, y, n)


def add_i(x: int) -> int:
    """Fx1E - I += Vx."""
    return _xop(0xF, x, MiscOp.ADD_I_VX)


def ld_font(x: int) -> int:
    """Fx29 - I = address of font glyph for Vx."""
    return _xop(0xF, x, MiscOp.LD_F_VX)


def ld_bcd(x: int) -> int:
    """Fx33 - store BCD of Vx at [I], [I+1], [I+2]."""
    return _xop(0xF, x, MiscOp.LD_B_VX)


def ld_i_vx(x: int) -> int:
    """Fx55 - store V0..Vx at [I]."""
    return _xop(0xF, x, MiscOp.LD_I_VX)


def ld_vx_i(x: int) -> int:
    """Fx65 - load V0..Vx from [I]."""
    return _xop(0xF, x, MiscOp.LD_VX_I)


# -----------------------------------------------------------------------------
# Timers and keys
# -----------------------------------------------------------------------------

def ld_vx_dt(x: int) -> int:
    """Fx07 - Vx = delay timer."""
    return _xop(0xF, x, MiscOp.LD_VX_DT)


def ld_vx_key(x: int) -> int:
    """Fx0A - wait for a key press, store it in Vx."""
    return _xop(0xF, x, MiscOp.LD_VX_K)


def ld_dt(x: int) -> int:
    """Fx15 - delay timer = Vx."""
    return _xop(0xF, x, MiscOp.LD_DT_VX)


def ld_st(x: int) -> int:
    """Fx18 - sound timer = Vx."""
    return _xop(0xF, x, MiscOp.LD_ST_VX)


# =============================================================================
# ROM building
# =============================================================================

def assemble(words: Iterable[int]) -> bytes:
    """Pack instruction words into a big-endian ROM image."""
    out = bytearray()
    for word in words:
        _check("instruction", word, 0xFFFF)
        out.append((word >> 8) & 0xFF)
        out.append(word & 0xFF)
    return bytes(out)
