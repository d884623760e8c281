"""
Shared Test Fixtures
====================

Fixtures used across the CHIP-8 VM test suite:
- MockMemory: flat memory that records every access
- make_cpu: build an Interpreter over a real address space from words
- rom_file: write a ROM image to a temporary file
"""

from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from chip8_vm.emulator import Interpreter, build_address_space
from chip8_vm.opcodes import assemble


# =============================================================================
# Mock Memory for Interpreter Testing
# =============================================================================

class MockMemory:
    """
    Simple mock memory for interpreter testing.

    Provides a flat zero-filled span with no range checking beyond the
    list bounds. Tracks all reads and writes for verification.
    """

    def __init__(self, size: int = 0x1000):
        self._memory = bytearray(size)
        self.reads: List[Tuple[int, int]] = []   # (address, value)
        self.writes: List[Tuple[int, int]] = []  # (address, value)

    @property
    def end(self) -> int:
        return len(self._memory)

    def read(self, address: int) -> int:
        value = self._memory[address]
        self.reads.append((address, value))
        return value

    def write(self, address: int, value: int) -> None:
        value &= 0xFF
        self._memory[address] = value
        self.writes.append((address, value))

    def load_program(self, address: int, data: bytes) -> None:
        """Helper to load program bytes without recording writes."""
        self._memory[address:address + len(data)] = data

    def clear_history(self) -> None:
        self.reads.clear()
        self.writes.clear()


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def mock_memory():
    """Empty 4KB mock memory."""
    return MockMemory()


@pytest.fixture
def make_cpu() -> Callable[..., Interpreter]:
    """
    Factory: build an Interpreter running the given instruction words.

    Usage:
        cpu = make_cpu([ld_byte(0, 5), add_byte(0, 1)])
        cpu = make_cpu(words, rng=lambda: 0xAB)
    """
    def _make(
        words: Sequence[int] = (),
        rng: Optional[Callable[[], int]] = None,
        memory_size: int = 0x1000,
    ) -> Interpreter:
        rom = assemble(words) if words else b"\x00\x00"
        return Interpreter(build_address_space(rom, memory_size=memory_size), rng=rng)

    return _make


@pytest.fixture
def rom_file(tmp_path):
    """Factory: write instruction words (or raw bytes) to a .ch8 file."""
    def _write(content, name: str = "test.ch8"):
        path = tmp_path / name
        data = content if isinstance(content, (bytes, bytearray)) else assemble(content)
        path.write_bytes(bytes(data))
        return path

    return _write
