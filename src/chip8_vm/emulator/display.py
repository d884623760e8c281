"""
Framebuffer for the CHIP-8 VM
=============================

CHIP-8 has a single monochrome 64x32 display. Programs never write pixels
directly: the only mutations are "clear" (00E0) and "draw sprite" (Dxyn),
which XORs 8-pixel-wide rows into the buffer. Drawing wraps at the edges,
so column and row indices are taken modulo 64 and 32.

The interpreter owns a Framebuffer; hosts read it through snapshots
(rows()) and can rasterize it with render_image(), which uses Pillow.
"""

import io
from typing import Tuple

# Display dimensions
SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32

# Characters used by to_text()
PIXEL_ON = "#"
PIXEL_OFF = "."

Rows = Tuple[Tuple[bool, ...], ...]


class Framebuffer:
    """
    64x32 grid of boolean pixels.

    Stored row-major as a flat list; (x, y) maps to index y * width + x.

    Example:
        >>> fb = Framebuffer()
        >>> fb.toggle(3, 4)
        False
        >>> fb.get(3, 4)
        True
        >>> fb.toggle(67, 36)   # wraps to (3, 4), erasing it
        True
    """

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self._width = width
        self._height = height
        self._pixels = [False] * (width * height)

    @property
    def width(self) -> int:
        """Display width in pixels."""
        return self._width

    @property
    def height(self) -> int:
        """Display height in pixels."""
        return self._height

    @property
    def pixel_count(self) -> int:
        """Number of pixels currently lit."""
        return sum(self._pixels)

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels = [False] * (self._width * self._height)

    def get(self, x: int, y: int) -> bool:
        """Pixel state at (x, y), with wraparound."""
        return self._pixels[(y % self._height) * self._width + (x % self._width)]

    def toggle(self, x: int, y: int) -> bool:
        """
        XOR a lit pixel into (x, y), with wraparound.

        Returns:
            True if the pixel was on and is now off (a collision)
        """
        index = (y % self._height) * self._width + (x % self._width)
        erased = self._pixels[index]
        self._pixels[index] = not erased
        return erased

    def rows(self) -> Rows:
        """Immutable snapshot of the display, one tuple per row."""
        w = self._width
        return tuple(
            tuple(self._pixels[y * w:(y + 1) * w]) for y in range(self._height)
        )

    def to_text(self, on: str = PIXEL_ON, off: str = PIXEL_OFF) -> str:
        """Render the display as lines of text, one per pixel row."""
        return format_rows(self.rows(), on, off)

    def __repr__(self) -> str:
        return f"Framebuffer({self._width}x{self._height}, lit={self.pixel_count})"


def format_rows(rows: Rows, on: str = PIXEL_ON, off: str = PIXEL_OFF) -> str:
    """Render a framebuffer snapshot as lines of text."""
    return "\n".join("".join(on if pixel else off for pixel in row) for row in rows)


def render_image(
    rows: Rows,
    scale: int = 8,
    foreground: Tuple[int, int, int] = (255, 255, 255),
    background: Tuple[int, int, int] = (0, 0, 0),
) -> bytes:
    """
    Render a framebuffer snapshot as a PNG image.

    Args:
        rows: Snapshot from Framebuffer.rows()
        scale: Size of each CHIP-8 pixel in image pixels
        foreground: RGB colour for lit pixels
        background: RGB colour for unlit pixels

    Returns:
        PNG image bytes
    """
    from PIL import Image, ImageDraw

    if scale < 1:
        raise ValueError(f"Scale must be >= 1, got {scale}")

    height = len(rows)
    width = len(rows[0]) if height else 0

    img = Image.new("RGB", (width * scale, height * scale), color=background)
    draw = ImageDraw.Draw(img)

    for y, row in enumerate(rows):
        for x, pixel in enumerate(row):
            if pixel:
                x0 = x * scale
                y0 = y * scale
                draw.rectangle(
                    [x0, y0, x0 + scale - 1, y0 + scale - 1], fill=foreground
                )

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
