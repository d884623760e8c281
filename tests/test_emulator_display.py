"""
Framebuffer Unit Tests
======================

Tests for the 64x32 framebuffer and PNG rendering.
"""

import io

import pytest
from PIL import Image

from chip8_vm.emulator import Framebuffer, SCREEN_HEIGHT, SCREEN_WIDTH, format_rows, render_image


# =============================================================================
# Framebuffer
# =============================================================================

class TestFramebuffer:
    """Test pixel storage and XOR semantics."""

    def test_dimensions(self):
        fb = Framebuffer()
        assert (fb.width, fb.height) == (SCREEN_WIDTH, SCREEN_HEIGHT) == (64, 32)
        rows = fb.rows()
        assert len(rows) == 32
        assert all(len(row) == 64 for row in rows)

    def test_starts_dark(self):
        fb = Framebuffer()
        assert fb.pixel_count == 0

    def test_toggle_lights_then_erases(self):
        """First toggle lights the pixel; second erases and reports it."""
        fb = Framebuffer()
        assert fb.toggle(10, 5) is False
        assert fb.get(10, 5)
        assert fb.toggle(10, 5) is True
        assert not fb.get(10, 5)

    def test_wraparound(self):
        """Coordinates wrap modulo width and height."""
        fb = Framebuffer()
        fb.toggle(64 + 3, 32 + 4)
        assert fb.get(3, 4)
        assert fb.get(-61, -28)

    def test_clear(self):
        fb = Framebuffer()
        for x in range(10):
            fb.toggle(x, x)
        assert fb.pixel_count == 10
        fb.clear()
        assert fb.pixel_count == 0

    def test_rows_is_snapshot(self):
        """rows() does not change when the buffer does."""
        fb = Framebuffer()
        rows = fb.rows()
        fb.toggle(0, 0)
        assert rows[0][0] is False
        assert fb.rows()[0][0] is True

    def test_to_text(self):
        fb = Framebuffer(4, 2)
        fb.toggle(0, 0)
        fb.toggle(3, 1)
        assert fb.to_text() == "#...\n...#"
        assert fb.to_text(on="X", off=" ") == "X   \n   X"

    def test_format_rows(self):
        assert format_rows(((True, False), (False, True))) == "#.\n.#"

    def test_repr(self):
        fb = Framebuffer()
        fb.toggle(1, 1)
        assert repr(fb) == "Framebuffer(64x32, lit=1)"


# =============================================================================
# PNG Rendering
# =============================================================================

class TestRenderImage:
    """Test render_image() via Pillow."""

    def test_png_size_and_colours(self):
        fb = Framebuffer()
        fb.toggle(1, 0)
        png = render_image(fb.rows(), scale=4)
        assert png[:8] == b"\x89PNG\r\n\x1a\n"

        img = Image.open(io.BytesIO(png)).convert("RGB")
        assert img.size == (256, 128)
        assert img.getpixel((0, 0)) == (0, 0, 0)
        assert img.getpixel((4, 0)) == (255, 255, 255)
        assert img.getpixel((7, 3)) == (255, 255, 255)
        assert img.getpixel((8, 0)) == (0, 0, 0)

    def test_custom_colours(self):
        fb = Framebuffer(2, 1)
        fb.toggle(0, 0)
        png = render_image(fb.rows(), scale=1, foreground=(0, 255, 0), background=(10, 10, 10))
        img = Image.open(io.BytesIO(png)).convert("RGB")
        assert img.getpixel((0, 0)) == (0, 255, 0)
        assert img.getpixel((1, 0)) == (10, 10, 10)

    def test_invalid_scale(self):
        with pytest.raises(ValueError):
            render_image(Framebuffer().rows(), scale=0)
