"""
Keypad for the CHIP-8 VM
========================

The CHIP-8 keypad has 16 keys labelled with hex digits, laid out as:

    1 2 3 C
    4 5 6 D
    7 8 9 E
    A 0 B F

Hosts conventionally map it onto the left block of a QWERTY keyboard:

    1 2 3 4
    Q W E R
    A S D F
    Z X C V

The Keypad is the input layer's side of the boundary: it tracks which keys
are held and hands the interpreter a 16-element snapshot via state(). The
interpreter never reads host input directly.
"""

from typing import Dict, Optional, Tuple, Union

from .cpu import NUM_KEYS

# Host key name -> CHIP-8 key value
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}

KeyLike = Union[int, str]


class Keypad:
    """
    State of the 16 CHIP-8 keys.

    Keys may be named three ways:
    - CHIP-8 value as an int (0-15)
    - CHIP-8 value as a hex string prefixed with "0x" or "$" ("0xA", "$a")
    - Host key name from the keymap ("q", "Z")

    Example:
        >>> pad = Keypad()
        >>> pad.press("q")          # CHIP-8 key 4
        >>> pad.is_pressed(4)
        True
        >>> pad.state()[4]
        True
    """

    def __init__(self, keymap: Optional[Dict[str, int]] = None):
        """
        Initialize keypad with all keys released.

        Args:
            keymap: Host key name to CHIP-8 value mapping. Defaults to
                    DEFAULT_KEYMAP. Names are matched case-insensitively.
        """
        source = DEFAULT_KEYMAP if keymap is None else keymap
        self._keymap = {name.lower(): value for name, value in source.items()}
        for name, value in self._keymap.items():
            if not 0 <= value < NUM_KEYS:
                raise ValueError(f"Key '{name}' maps to invalid CHIP-8 key {value}")
        self._pressed = [False] * NUM_KEYS

    @property
    def keymap(self) -> Dict[str, int]:
        """Copy of the host key mapping."""
        return dict(self._keymap)

    def resolve(self, key: KeyLike) -> int:
        """
        Convert a key reference to its CHIP-8 value.

        Raises:
            ValueError: If the key is not recognised
        """
        if isinstance(key, int):
            if not 0 <= key < NUM_KEYS:
                raise ValueError(f"CHIP-8 key must be 0-15, got {key}")
            return key

        name = key.strip().lower()
        if name in self._keymap:
            return self._keymap[name]
        if name.startswith("0x") or name.startswith("$"):
            digits = name[2:] if name.startswith("0x") else name[1:]
            try:
                value = int(digits, 16)
            except ValueError:
                raise ValueError(f"Unknown key: '{key}'") from None
            return self.resolve(value)
        raise ValueError(f"Unknown key: '{key}'")

    def press(self, key: KeyLike) -> None:
        """Mark a key as held down."""
        self._pressed[self.resolve(key)] = True

    def release(self, key: KeyLike) -> None:
        """Mark a key as released."""
        self._pressed[self.resolve(key)] = False

    def release_all(self) -> None:
        """Release every key."""
        self._pressed = [False] * NUM_KEYS

    def is_pressed(self, key: KeyLike) -> bool:
        """Check whether a key is held."""
        return self._pressed[self.resolve(key)]

    def state(self) -> Tuple[bool, ...]:
        """16-element snapshot suitable for Interpreter.sync_keys()."""
        return tuple(self._pressed)

    def __repr__(self) -> str:
        held = [f"{i:X}" for i, down in enumerate(self._pressed) if down]
        return f"Keypad(pressed=[{', '.join(held)}])"
