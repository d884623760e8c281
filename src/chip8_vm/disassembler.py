"""
CHIP-8 Disassembler
===================

Turns CHIP-8 machine code back into readable assembly using the
conventional mnemonics:

    CLS, RET, JP, CALL, SE, SNE, LD, ADD, OR, AND, XOR, SUB, SHR, SUBN,
    SHL, RND, DRW, SKP, SKNP

Operands are written as registers (V0-VF, I, DT, ST, K, F, B, [I]) or
hex constants prefixed with '#'. Words that do not decode to one of the
35 instructions are emitted as data (`DW #xxxx`), exactly as the
interpreter would skip them.

CHIP-8 has no variable-length encodings, so every instruction is one
big-endian word and a listing simply walks the image two bytes at a time.
A trailing odd byte is shown as `DB #xx`.

Usage:
    disasm = Chip8Disassembler()

    # Disassemble a ROM image loaded at 0x200
    for instr in disasm.disassemble(rom_bytes, start_address=0x200):
        print(instr)

    # Disassemble a single word
    instr = disasm.disassemble_one(0x6C7F, address=0x200)
    print(f"{instr.mnemonic} {instr.operand_str}")   # LD VC, #7F
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .opcodes import AluOp, KeyOp, MiscOp, OpcodeFamily, SystemOp, decode


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    A single disassembled CHIP-8 instruction.

    Attributes:
        address: Memory address of the instruction
        word: The raw instruction word (or byte, for a trailing DB)
        mnemonic: Instruction mnemonic ("LD", "DRW", "DW" for data)
        operand_str: Formatted operands, empty for CLS/RET
        size: Bytes covered (2, or 1 for a trailing byte)
        comment: Optional annotation (symbol name, "unknown opcode")
    """
    address: int
    word: int
    mnemonic: str
    operand_str: str
    size: int = 2
    comment: str = ""

    @property
    def raw_bytes(self) -> bytes:
        """The bytes this record covers."""
        if self.size == 1:
            return bytes([self.word & 0xFF])
        return bytes([(self.word >> 8) & 0xFF, self.word & 0xFF])

    @property
    def is_data(self) -> bool:
        """True for words that are not valid instructions."""
        return self.mnemonic in ("DW", "DB")

    def __str__(self) -> str:
        """Format as listing line: ADDRESS: WORD  MNEMONIC OPERANDS"""
        hex_word = "".join(f"{b:02X}" for b in self.raw_bytes).ljust(4)
        asm = f"{self.mnemonic} {self.operand_str}" if self.operand_str else self.mnemonic

        if self.comment:
            return f"${self.address:03X}: {hex_word}  {asm:<16} ; {self.comment}"
        return f"${self.address:03X}: {hex_word}  {asm}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:03X}",
            "address_int": self.address,
            "word": f"#{self.word:04X}" if self.size == 2 else f"#{self.word:02X}",
            "mnemonic": self.mnemonic,
            "operand": self.operand_str,
            "size": self.size,
            "comment": self.comment,
        }


# =============================================================================
# Mnemonic tables
# =============================================================================

_ALU_MNEMONICS: Dict[int, str] = {
    AluOp.LD: "LD",
    AluOp.OR: "OR",
    AluOp.AND: "AND",
    AluOp.XOR: "XOR",
    AluOp.ADD: "ADD",
    AluOp.SUB: "SUB",
    AluOp.SHR: "SHR",
    AluOp.SUBN: "SUBN",
    AluOp.SHL: "SHL",
}

# FxNN: (mnemonic, operand template); {x} is the register name
_MISC_FORMS: Dict[int, Tuple[str, str]] = {
    MiscOp.LD_VX_DT: ("LD", "{x}, DT"),
    MiscOp.LD_VX_K: ("LD", "{x}, K"),
    MiscOp.LD_DT_VX: ("LD", "DT, {x}"),
    MiscOp.LD_ST_VX: ("LD", "ST, {x}"),
    MiscOp.ADD_I_VX: ("ADD", "I, {x}"),
    MiscOp.LD_F_VX: ("LD", "F, {x}"),
    MiscOp.LD_B_VX: ("LD", "B, {x}"),
    MiscOp.LD_I_VX: ("LD", "[I], {x}"),
    MiscOp.LD_VX_I: ("LD", "{x}, [I]"),
}


def _reg(index: int) -> str:
    return f"V{index:X}"


# =============================================================================
# CHIP-8 Disassembler
# =============================================================================

class Chip8Disassembler:
    """
    Disassembler for CHIP-8 machine code.

    Decoding goes through chip8_vm.opcodes.decode, the same decoder the
    interpreter uses, so a listing always agrees with execution.

    Attributes:
        _symbol_table: Optional address -> name mapping used to annotate
                       jump, call and index targets
    """

    def __init__(self, symbol_table: Optional[Dict[int, str]] = None):
        """
        Initialize the disassembler.

        Args:
            symbol_table: Optional dict mapping addresses to symbol names.
        """
        self._symbol_table = dict(symbol_table or {})

    def disassemble_one(self, word: int, address: int = 0) -> DisassembledInstruction:
        """
        Disassemble a single instruction word.

        Args:
            word: 16-bit instruction word
            address: Address of the word (for display)

        Returns:
            DisassembledInstruction; invalid words come back as DW
        """
        ins = decode(word)
        x, y = _reg(ins.x), _reg(ins.y)
        mnemonic: Optional[str] = None
        operands = ""
        target: Optional[int] = None

        match ins.family:
            case OpcodeFamily.SYSTEM:
                if ins.nn == SystemOp.CLS:
                    mnemonic = "CLS"
                elif ins.nn == SystemOp.RET:
                    mnemonic = "RET"
            case OpcodeFamily.JUMP:
                mnemonic, operands, target = "JP", f"#{ins.nnn:03X}", ins.nnn
            case OpcodeFamily.CALL:
                mnemonic, operands, target = "CALL", f"#{ins.nnn:03X}", ins.nnn
            case OpcodeFamily.SKIP_EQ_BYTE:
                mnemonic, operands = "SE", f"{x}, #{ins.nn:02X}"
            case OpcodeFamily.SKIP_NE_BYTE:
                mnemonic, operands = "SNE", f"{x}, #{ins.nn:02X}"
            case OpcodeFamily.SKIP_EQ_REG:
                if ins.n == 0:
                    mnemonic, operands = "SE", f"{x}, {y}"
            case OpcodeFamily.LOAD_BYTE:
                mnemonic, operands = "LD", f"{x}, #{ins.nn:02X}"
            case OpcodeFamily.ADD_BYTE:
                mnemonic, operands = "ADD", f"{x}, #{ins.nn:02X}"
            case OpcodeFamily.ALU:
                if ins.n in _ALU_MNEMONICS:
                    mnemonic, operands = _ALU_MNEMONICS[ins.n], f"{x}, {y}"
            case OpcodeFamily.SKIP_NE_REG:
                if ins.n == 0:
                    mnemonic, operands = "SNE", f"{x}, {y}"
            case OpcodeFamily.LOAD_INDEX:
                mnemonic, operands, target = "LD", f"I, #{ins.nnn:03X}", ins.nnn
            case OpcodeFamily.JUMP_V0:
                mnemonic, operands, target = "JP", f"V0, #{ins.nnn:03X}", ins.nnn
            case OpcodeFamily.RANDOM:
                mnemonic, operands = "RND", f"{x}, #{ins.nn:02X}"
            case OpcodeFamily.DRAW:
                mnemonic, operands = "DRW", f"{x}, {y}, #{ins.n:X}"
            case OpcodeFamily.KEY:
                if ins.nn == KeyOp.SKP:
                    mnemonic, operands = "SKP", x
                elif ins.nn == KeyOp.SKNP:
                    mnemonic, operands = "SKNP", x
            case OpcodeFamily.MISC:
                if ins.nn in _MISC_FORMS:
                    mnemonic, template = _MISC_FORMS[ins.nn]
                    operands = template.format(x=x)

        if mnemonic is None:
            return DisassembledInstruction(
                address=address,
                word=ins.word,
                mnemonic="DW",
                operand_str=f"#{ins.word:04X}",
                comment="unknown opcode",
            )

        comment = ""
        if target is not None and target in self._symbol_table:
            comment = self._symbol_table[target]

        return DisassembledInstruction(
            address=address,
            word=ins.word,
            mnemonic=mnemonic,
            operand_str=operands,
            comment=comment,
        )

    def disassemble(
        self,
        data: bytes,
        start_address: int = 0x200,
        count: Optional[int] = None,
    ) -> List[DisassembledInstruction]:
        """
        Disassemble a block of machine code.

        Args:
            data: Byte buffer containing machine code
            start_address: Memory address of the first byte
            count: Maximum number of instructions (None = all)

        Returns:
            List of DisassembledInstruction objects
        """
        result = []
        offset = 0

        while offset < len(data):
            if count is not None and len(result) >= count:
                break

            address = start_address + offset
            if offset + 1 >= len(data):
                # Odd trailing byte
                result.append(DisassembledInstruction(
                    address=address,
                    word=data[offset],
                    mnemonic="DB",
                    operand_str=f"#{data[offset]:02X}",
                    size=1,
                ))
                break

            word = (data[offset] << 8) | data[offset + 1]
            result.append(self.disassemble_one(word, address))
            offset += 2

        return result

    def disassemble_to_text(
        self,
        data: bytes,
        start_address: int = 0x200,
        count: Optional[int] = None,
    ) -> str:
        """Disassemble and return a multi-line listing."""
        return "\n".join(str(instr) for instr in self.disassemble(data, start_address, count))

    def add_symbol(self, address: int, name: str) -> None:
        """Add a symbol used to annotate targets."""
        self._symbol_table[address] = name
