"""
CHIP-8 Emulator - Main Orchestrator
===================================

This module provides the `Emulator` class that wires the host-side pieces
(ROM loading, keypad, display rendering) around an Interpreter and offers a
high-level API for running and inspecting programs.

The Emulator class:
- Builds a fresh address space and interpreter for every ROM
- Forwards keypad state to the interpreter before each step
- Supports execution control (step, run, run_frame)
- Offers display inspection as text or PNG
- Exposes register state for debugging and tests

Example usage:
    >>> from chip8_vm.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> emu.load_rom("pong.ch8")
    >>> result = emu.run(max_steps=10_000)
    >>> print(emu.display_text)

Timing is the host's responsibility: the interpreter ticks its timers once
per step regardless of wall-clock time. EmulatorConfig.steps_per_frame
gives the number of steps that correspond to one 60Hz timer frame at the
configured CPU speed, which is what run_frame() executes.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Union

from ..errors import ConfigError, RomError
from .cpu import PROGRAM_START, Interpreter
from .display import format_rows, render_image
from .keyboard import Keypad, KeyLike
from .memory import DEFAULT_MEMORY_SIZE, AddressSpace
from .rom import build_address_space, load_rom

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        cpu_hz: Instructions per second the host aims for (default 500)
        timer_hz: Timer decrement rate in Hz (default 60)
        memory_size: Address space size in bytes (default 4096)
        program_start: Load address and initial program pointer (default 0x200)
        seed: Seed for the Cxnn random source. None gives a non-reproducible
              source.

    Example:
        >>> config = EmulatorConfig(cpu_hz=700, seed=42)
        >>> config.steps_per_frame
        11
    """
    cpu_hz: int = 500
    timer_hz: int = 60
    memory_size: int = DEFAULT_MEMORY_SIZE
    program_start: int = PROGRAM_START
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.cpu_hz <= 0:
            raise ConfigError(f"cpu_hz must be positive, got {self.cpu_hz}")
        if self.timer_hz <= 0:
            raise ConfigError(f"timer_hz must be positive, got {self.timer_hz}")
        if not 0 < self.memory_size <= 0x10000:
            raise ConfigError(f"memory_size must be 1-65536, got {self.memory_size}")
        if not 0 <= self.program_start < self.memory_size:
            raise ConfigError(
                f"program_start 0x{self.program_start:X} outside memory "
                f"of {self.memory_size} bytes"
            )

    @property
    def steps_per_frame(self) -> int:
        """Instructions executed per timer frame (at least 1)."""
        return max(1, self.cpu_hz // self.timer_hz)


class StopReason(Enum):
    """Why run() returned."""
    EXITED = "exited"          # Interpreter set its exit flag
    STEP_LIMIT = "step_limit"  # max_steps reached


@dataclass(frozen=True)
class RunResult:
    """
    Outcome of a run() call.

    Attributes:
        reason: Why execution stopped
        steps: Instructions executed during this call
        program_pointer: Program pointer when execution stopped
    """
    reason: StopReason
    steps: int
    program_pointer: int


class Emulator:
    """
    CHIP-8 emulator: interpreter plus host-side collaborators.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        keypad: Host keypad; its state is synced into the interpreter
                before every step

    Example:
        >>> emu = Emulator()
        >>> emu.load_bytes(bytes([0x6C, 0x7F, 0x8C, 0x0E]))
        >>> emu.run(max_steps=2).reason
        <StopReason.STEP_LIMIT: 'step_limit'>
        >>> emu.registers["VC"]
        254
    """

    def __init__(self, config: Optional[EmulatorConfig] = None):
        """
        Initialize the emulator. No ROM is loaded yet.

        Args:
            config: EmulatorConfig. If None, defaults are used.
        """
        self.config = config or EmulatorConfig()
        self.keypad = Keypad()
        self._rng = random.Random(self.config.seed)
        self._cpu: Optional[Interpreter] = None
        self._memory: Optional[AddressSpace] = None
        self._rom_name: Optional[str] = None
        self._total_steps = 0

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_rom(self, path: Union[str, Path]) -> None:
        """
        Load a ROM file, replacing any running program.

        Raises:
            FileNotFoundError: If the ROM file doesn't exist
            RomError: If the ROM is empty or too large
        """
        path = Path(path)
        memory = load_rom(path, self.config.program_start, self.config.memory_size)
        self._attach(memory, path.name)

    def load_bytes(self, rom: bytes, name: str = "<bytes>") -> None:
        """
        Load a ROM image from memory, replacing any running program.

        Raises:
            RomError: If the ROM is empty or too large
        """
        memory = build_address_space(
            rom, self.config.program_start, self.config.memory_size, source=name
        )
        self._attach(memory, name)

    def _attach(self, memory: AddressSpace, name: str) -> None:
        self._memory = memory
        # Each ROM starts from the configured seed
        self._rng = random.Random(self.config.seed)
        self._cpu = Interpreter(
            memory,
            program_start=self.config.program_start,
            rng=lambda: self._rng.randrange(256),
        )
        self._rom_name = name
        self._total_steps = 0
        logger.info("ROM %s ready at 0x%03X", name, self.config.program_start)

    @property
    def cpu(self) -> Interpreter:
        """
        The active interpreter.

        Raises:
            RomError: If no ROM has been loaded
        """
        if self._cpu is None:
            raise RomError("no ROM loaded")
        return self._cpu

    @property
    def rom_name(self) -> Optional[str]:
        """Name of the loaded ROM, or None."""
        return self._rom_name

    # =========================================================================
    # Execution Control
    # =========================================================================

    def step(self) -> bool:
        """
        Sync the keypad and execute one instruction.

        Returns:
            True if an instruction ran, False if the program has exited
        """
        cpu = self.cpu
        cpu.sync_keys(self.keypad.state())
        executed = cpu.step()
        if executed:
            self._total_steps += 1
        return executed

    def run(self, max_steps: int = 100_000) -> RunResult:
        """
        Run until the program exits or max_steps instructions have run.

        Args:
            max_steps: Instruction budget for this call

        Returns:
            RunResult describing why execution stopped
        """
        cpu = self.cpu
        steps = 0
        while steps < max_steps:
            if not self.step():
                break
            steps += 1

        reason = StopReason.EXITED if cpu.should_exit() else StopReason.STEP_LIMIT
        logger.debug("Run stopped after %d steps: %s", steps, reason.value)
        return RunResult(reason, steps, cpu.program_pointer)

    def run_frame(self) -> int:
        """
        Run one timer frame worth of instructions.

        Returns:
            Number of instructions executed (fewer if the program exited)
        """
        return self.run(self.config.steps_per_frame).steps

    def take_draw_flag(self) -> bool:
        """Consume the interpreter's draw flag."""
        return self.cpu.take_draw_flag()

    def should_exit(self) -> bool:
        """True once the program has stopped."""
        return self._cpu is not None and self._cpu.should_exit()

    # =========================================================================
    # Input
    # =========================================================================

    def press_key(self, key: KeyLike) -> None:
        """Hold a key down (CHIP-8 value, 0x-prefixed hex or host name)."""
        self.keypad.press(key)

    def release_key(self, key: KeyLike) -> None:
        """Release a held key."""
        self.keypad.release(key)

    def tap_key(self, key: KeyLike, hold_steps: int = 10) -> None:
        """Press a key, run hold_steps instructions, then release it."""
        self.keypad.press(key)
        try:
            self.run(hold_steps)
        finally:
            self.keypad.release(key)

    # =========================================================================
    # Display
    # =========================================================================

    @property
    def display_text(self) -> str:
        """The framebuffer as text, '#' for lit pixels and '.' for unlit."""
        return format_rows(self.cpu.framebuffer)

    def render_display(self, scale: int = 8) -> bytes:
        """Render the framebuffer as PNG image bytes."""
        return render_image(self.cpu.framebuffer, scale=scale)

    # =========================================================================
    # Inspection
    # =========================================================================

    @property
    def registers(self) -> Dict[str, int]:
        """Register file as a dict: V0-VF, I, PC, SP, DT, ST."""
        cpu = self.cpu
        regs = {f"V{i:X}": value for i, value in enumerate(cpu.registers)}
        regs["I"] = cpu.index_register
        regs["PC"] = cpu.program_pointer
        regs["SP"] = len(cpu.call_stack)
        regs["DT"] = cpu.delay_timer
        regs["ST"] = cpu.sound_timer
        return regs

    def read_bytes(self, address: int, count: int) -> bytes:
        """Read a block of memory."""
        if self._memory is None:
            raise RomError("no ROM loaded")
        return self._memory.dump(address, count)

    @property
    def total_steps(self) -> int:
        """Instructions executed since the ROM was loaded."""
        return self._total_steps

    def __repr__(self) -> str:
        if self._cpu is None:
            return "Emulator(no ROM)"
        return (
            f"Emulator(rom={self._rom_name!r}, PC=0x{self._cpu.program_pointer:03X}, "
            f"steps={self._total_steps}, exited={self._cpu.should_exit()})"
        )
