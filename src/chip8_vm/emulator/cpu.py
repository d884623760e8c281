"""
CHIP-8 Interpreter
==================

Fetch-decode-execute core for the canonical 35-instruction CHIP-8 ISA.

Machine state:
- 16 8-bit registers V0-VF (VF doubles as carry/borrow/collision flag)
- 16-bit index register I
- 16-bit program pointer, starting at 0x200
- 16-entry call stack of return addresses
- Delay and sound timers (8-bit, count down once per step)
- 64x32 monochrome framebuffer
- 16-key input state

Each step() fetches the big-endian word at the program pointer, advances
the pointer by 2, dispatches on the top nibble and finally ticks the timers.
Control-flow instructions overwrite the pointer with their absolute target
after that automatic advance, so they land exactly where they point.

Fault handling is two-tier:
- Fatal faults (stack overflow, stack underflow, running off the end of
  memory) set the exit flag; step() does nothing once it is set.
- Unknown opcodes are logged and skipped without touching state.

Address space violations are not caught here: an OutOfRangeError raised by
the memory propagates to the host.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Sequence, Tuple

from ..opcodes import AluOp, Instruction, KeyOp, MiscOp, OpcodeFamily, SystemOp, decode
from .display import Framebuffer, Rows
from .fonts import FONT_START, GLYPH_SIZE

logger = logging.getLogger(__name__)

# Address of the first program instruction
PROGRAM_START = 0x200

# Maximum subroutine nesting
STACK_DEPTH = 16

# Number of general-purpose registers
NUM_REGISTERS = 16

# Number of keypad keys
NUM_KEYS = 16

# Register written by carry/borrow/collision
VF = 0xF

# Fx1E sets VF when I + Vx crosses this boundary
INDEX_LIMIT = 0xFFF


class MemoryProtocol(Protocol):
    """
    Protocol defining the memory interface the interpreter needs.

    AddressSpace implements it; tests may substitute a mock.
    """

    @property
    def end(self) -> int:
        """One past the last valid address."""
        ...

    def read(self, address: int) -> int:
        """Read byte from address."""
        ...

    def write(self, address: int, value: int) -> None:
        """Write byte to address."""
        ...


@dataclass
class InterpreterState:
    """
    Complete CPU-visible state.

    Values are Python ints but represent:
    - registers: 16 x 8-bit unsigned
    - index, pc: 16-bit unsigned
    - delay_timer, sound_timer: 8-bit unsigned
    """
    registers: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    index: int = 0
    pc: int = PROGRAM_START
    stack: List[int] = field(default_factory=list)
    delay_timer: int = 0
    sound_timer: int = 0
    keys: List[bool] = field(default_factory=lambda: [False] * NUM_KEYS)
    exit_flag: bool = False
    draw_flag: bool = False


def _default_rng() -> Callable[[], int]:
    source = random.Random()
    return lambda: source.randrange(256)


class Interpreter:
    """
    CHIP-8 interpreter bound to an address space.

    The interpreter is the sole reader and mutator of its memory once
    constructed. It is driven entirely by the host: step() executes one
    instruction, sync_keys() refreshes input, take_draw_flag() tells the
    host when to repaint and should_exit() when to stop.

    Example:
        >>> from chip8_vm.emulator import build_address_space
        >>> from chip8_vm.opcodes import assemble, ld_byte, shl
        >>> cpu = Interpreter(build_address_space(assemble([ld_byte(0xC, 129), shl(0xC)])))
        >>> cpu.step()
        True
        >>> cpu.step()
        True
        >>> cpu.get_register(0xC), cpu.get_register(0xF)
        (2, 1)
    """

    def __init__(
        self,
        memory: MemoryProtocol,
        program_start: int = PROGRAM_START,
        rng: Optional[Callable[[], int]] = None,
        log: Optional[logging.Logger] = None,
    ):
        """
        Initialize interpreter with populated memory.

        Args:
            memory: Address space holding fonts and ROM
            program_start: Initial program pointer (default 0x200)
            rng: Zero-argument callable returning a byte for Cxnn.
                 Defaults to a fresh random.Random source.
            log: Logger for diagnostics. Defaults to this module's logger.
        """
        self.memory = memory
        self.state = InterpreterState(pc=program_start & 0xFFFF)
        self._framebuffer = Framebuffer()
        self._rng = rng or _default_rng()
        self._log = log or logger

    # ========================================
    # Register Access
    # ========================================

    @property
    def registers(self) -> Tuple[int, ...]:
        """Snapshot of V0-VF."""
        return tuple(self.state.registers)

    def get_register(self, index: int) -> int:
        """Read Vindex."""
        return self.state.registers[index]

    def set_register(self, index: int, value: int) -> None:
        """Write Vindex (masked to 8 bits)."""
        self.state.registers[index] = value & 0xFF

    @property
    def index_register(self) -> int:
        """Index register I (16-bit)."""
        return self.state.index

    @index_register.setter
    def index_register(self, value: int) -> None:
        self.state.index = value & 0xFFFF

    @property
    def program_pointer(self) -> int:
        """Address of the next instruction (16-bit)."""
        return self.state.pc

    @program_pointer.setter
    def program_pointer(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def delay_timer(self) -> int:
        """Delay timer (8-bit)."""
        return self.state.delay_timer

    @delay_timer.setter
    def delay_timer(self, value: int) -> None:
        self.state.delay_timer = value & 0xFF

    @property
    def sound_timer(self) -> int:
        """Sound timer (8-bit)."""
        return self.state.sound_timer

    @sound_timer.setter
    def sound_timer(self, value: int) -> None:
        self.state.sound_timer = value & 0xFF

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is running (the host may beep)."""
        return self.state.sound_timer > 0

    @property
    def call_stack(self) -> Tuple[int, ...]:
        """Saved return addresses, oldest first."""
        return tuple(self.state.stack)

    # ========================================
    # Host Interface
    # ========================================

    @property
    def framebuffer(self) -> Rows:
        """Read-only 64x32 snapshot of the display."""
        return self._framebuffer.rows()

    @property
    def keys(self) -> Tuple[bool, ...]:
        """Current key state as last synced by the host."""
        return tuple(self.state.keys)

    def sync_keys(self, keys: Sequence[bool]) -> None:
        """
        Overwrite the key state with the host's latest poll.

        Args:
            keys: 16 booleans, index = CHIP-8 key value

        Raises:
            ValueError: If keys does not have exactly 16 entries
        """
        if len(keys) != NUM_KEYS:
            raise ValueError(f"Expected {NUM_KEYS} key states, got {len(keys)}")
        self.state.keys = [bool(k) for k in keys]

    def take_draw_flag(self) -> bool:
        """Return whether the display changed since the last call, and reset."""
        flag = self.state.draw_flag
        self.state.draw_flag = False
        return flag

    def should_exit(self) -> bool:
        """True once a fatal fault or end of memory has been reached."""
        return self.state.exit_flag

    def _fault(self, message: str, *args) -> None:
        self._log.error(message, *args)
        self.state.exit_flag = True

    # ========================================
    # Main Execution Loop
    # ========================================

    def step(self) -> bool:
        """
        Fetch, decode and execute one instruction, then tick the timers.

        Returns:
            True if an instruction was executed. False if nothing ran: either
            the machine had already stopped, or the next word would straddle
            the end of memory (the exit flag is set before returning)
        """
        if self.state.exit_flag:
            return False

        pc = self.state.pc
        if pc + 1 >= self.memory.end:
            self._fault("Program pointer 0x%04X ran past end of memory", pc)
            return False

        word = (self.memory.read(pc) << 8) | self.memory.read(pc + 1)
        self.state.pc = (pc + 2) & 0xFFFF
        self.execute(word)

        if self.state.delay_timer > 0:
            self.state.delay_timer -= 1
        if self.state.sound_timer > 0:
            self.state.sound_timer -= 1

        if self.state.pc >= self.memory.end:
            self._fault("Program pointer 0x%04X ran past end of memory", self.state.pc)

        return True

    def execute(self, word: int) -> None:
        """
        Execute a single instruction word.

        Does not fetch, advance the program pointer beforehand, or tick the
        timers; step() does those. Exposed so individual opcodes can be
        exercised directly.
        """
        ins = decode(word)
        self._log.debug("Opcode 0x%04X at 0x%03X (%s)", ins.word, self.state.pc, ins.family.name)

        match ins.family:
            case OpcodeFamily.SYSTEM:
                self._exec_system(ins)
            case OpcodeFamily.JUMP:
                self.state.pc = ins.nnn
            case OpcodeFamily.CALL:
                self._exec_call(ins)
            case OpcodeFamily.SKIP_EQ_BYTE:
                if self.state.registers[ins.x] == ins.nn:
                    self._skip()
            case OpcodeFamily.SKIP_NE_BYTE:
                if self.state.registers[ins.x] != ins.nn:
                    self._skip()
            case OpcodeFamily.SKIP_EQ_REG:
                if ins.n != 0:
                    self._unknown(ins)
                elif self.state.registers[ins.x] == self.state.registers[ins.y]:
                    self._skip()
            case OpcodeFamily.LOAD_BYTE:
                self.state.registers[ins.x] = ins.nn
            case OpcodeFamily.ADD_BYTE:
                # No carry flag
                self.state.registers[ins.x] = (self.state.registers[ins.x] + ins.nn) & 0xFF
            case OpcodeFamily.ALU:
                self._exec_alu(ins)
            case OpcodeFamily.SKIP_NE_REG:
                if ins.n != 0:
                    self._unknown(ins)
                elif self.state.registers[ins.x] != self.state.registers[ins.y]:
                    self._skip()
            case OpcodeFamily.LOAD_INDEX:
                self.state.index = ins.nnn
            case OpcodeFamily.JUMP_V0:
                self.state.pc = (ins.nnn + self.state.registers[0]) & 0xFFFF
            case OpcodeFamily.RANDOM:
                self.state.registers[ins.x] = (self._rng() & 0xFF) & ins.nn
            case OpcodeFamily.DRAW:
                self._exec_draw(ins)
            case OpcodeFamily.KEY:
                self._exec_key(ins)
            case OpcodeFamily.MISC:
                self._exec_misc(ins)

    def _skip(self) -> None:
        self.state.pc = (self.state.pc + 2) & 0xFFFF

    def _unknown(self, ins: Instruction) -> None:
        self._log.error("Unknown opcode 0x%04X in family %s", ins.word, ins.family.name)

    # ========================================
    # Instruction Families
    # ========================================

    def _exec_system(self, ins: Instruction) -> None:
        match ins.nn:
            case SystemOp.CLS:
                self._framebuffer.clear()
                self.state.draw_flag = True
            case SystemOp.RET:
                if not self.state.stack:
                    self._fault("Stack underflow: return with empty call stack")
                    return
                self.state.pc = self.state.stack.pop()
            case _:
                self._unknown(ins)

    def _exec_call(self, ins: Instruction) -> None:
        if len(self.state.stack) >= STACK_DEPTH:
            self._fault("Stack overflow: call to 0x%03X exceeds depth %d", ins.nnn, STACK_DEPTH)
            return
        self.state.stack.append(self.state.pc)
        self.state.pc = ins.nnn

    def _exec_alu(self, ins: Instruction) -> None:
        """
        8xyN register-to-register operations.

        Where an operation sets VF, the flag is computed from the operands
        and written before the result, so with x == F the result wins.
        """
        regs = self.state.registers
        vx = regs[ins.x]
        vy = regs[ins.y]

        match ins.n:
            case AluOp.LD:
                regs[ins.x] = vy
            case AluOp.OR:
                regs[ins.x] = vx | vy
            case AluOp.AND:
                regs[ins.x] = vx & vy
            case AluOp.XOR:
                regs[ins.x] = vx ^ vy
            case AluOp.ADD:
                total = vx + vy
                regs[VF] = 1 if total > 0xFF else 0
                regs[ins.x] = total & 0xFF
            case AluOp.SUB:
                # Strictly greater: equal operands clear VF
                regs[VF] = 1 if vx > vy else 0
                regs[ins.x] = (vx - vy) & 0xFF
            case AluOp.SHR:
                regs[VF] = vx & 0x01
                regs[ins.x] = vx >> 1
            case AluOp.SUBN:
                regs[VF] = 1 if vy > vx else 0
                regs[ins.x] = (vy - vx) & 0xFF
            case AluOp.SHL:
                regs[VF] = (vx >> 7) & 0x01
                regs[ins.x] = (vx << 1) & 0xFF
            case _:
                self._unknown(ins)

    def _exec_draw(self, ins: Instruction) -> None:
        """
        Dxyn: XOR an 8 x n sprite from memory[I..I+n-1] onto the display.

        VF ends up 1 if any lit pixel was turned off, else 0.
        """
        x0 = self.state.registers[ins.x]
        y0 = self.state.registers[ins.y]
        collision = False

        for row in range(ins.n):
            sprite = self.memory.read(self.state.index + row)
            for bit in range(8):
                if sprite & (0x80 >> bit):
                    if self._framebuffer.toggle(x0 + bit, y0 + row):
                        collision = True

        self.state.registers[VF] = 1 if collision else 0
        self.state.draw_flag = True

    def _exec_key(self, ins: Instruction) -> None:
        key = self.state.registers[ins.x] & 0xF
        match ins.nn:
            case KeyOp.SKP:
                if self.state.keys[key]:
                    self._skip()
            case KeyOp.SKNP:
                if not self.state.keys[key]:
                    self._skip()
            case _:
                self._unknown(ins)

    def _exec_misc(self, ins: Instruction) -> None:
        regs = self.state.registers
        vx = regs[ins.x]

        match ins.nn:
            case MiscOp.LD_VX_DT:
                regs[ins.x] = self.state.delay_timer
            case MiscOp.LD_VX_K:
                self._wait_for_key(ins)
            case MiscOp.LD_DT_VX:
                self.state.delay_timer = vx
            case MiscOp.LD_ST_VX:
                self.state.sound_timer = vx
            case MiscOp.ADD_I_VX:
                total = self.state.index + vx
                regs[VF] = 1 if total > INDEX_LIMIT else 0
                self.state.index = total & 0xFFFF
            case MiscOp.LD_F_VX:
                self.state.index = FONT_START + vx * GLYPH_SIZE
            case MiscOp.LD_B_VX:
                i = self.state.index
                self.memory.write(i, vx // 100)
                self.memory.write(i + 1, (vx // 10) % 10)
                self.memory.write(i + 2, vx % 10)
            case MiscOp.LD_I_VX:
                for r in range(ins.x + 1):
                    self.memory.write(self.state.index + r, regs[r])
            case MiscOp.LD_VX_I:
                for r in range(ins.x + 1):
                    regs[r] = self.memory.read(self.state.index + r)
            case _:
                self._unknown(ins)

    def _wait_for_key(self, ins: Instruction) -> None:
        """
        Fx0A: block until a key is held, then store it in Vx.

        Blocking means rewinding the program pointer so the same instruction
        runs again on the next step; timers keep ticking meanwhile. When
        several keys are held the lowest-numbered one is stored.
        """
        for key, pressed in enumerate(self.state.keys):
            if pressed:
                self.state.registers[ins.x] = key
                return
        self.state.pc = (self.state.pc - 2) & 0xFFFF

    def __repr__(self) -> str:
        regs = " ".join(f"V{i:X}={v:02X}" for i, v in enumerate(self.state.registers))
        return (
            f"Interpreter(PC=0x{self.state.pc:03X} I=0x{self.state.index:03X} "
            f"SP={len(self.state.stack)} DT={self.state.delay_timer} "
            f"ST={self.state.sound_timer} {regs})"
        )
