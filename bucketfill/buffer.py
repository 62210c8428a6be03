"""
RGBA pixel buffer.

`PixelBuffer` treats `data` as a flat, mutable bytearray representing a
`width` by `height` bitmap in row-major order, 4 bytes per pixel in
(r, g, b, a) order. Pixel (x, y) starts at byte `(x + y * width) * 4`.
"""

from typing import Final

from .color import Color
from .errors import InvalidBufferError, OutOfBoundsError


class PixelBuffer:
    """A bounds checked RGBA bitmap.

    - `data` is modified in-place.
    - Coordinates are 0-based, with origin at top-left.
    - Reads outside the bitmap give None, writes outside it raise.
    """

    def __init__(self, width: int, height: int, data: bytes | bytearray | None = None) -> None:
        if width <= 0 or height <= 0:
            raise InvalidBufferError(f"Buffer size must be positive, got {width}x{height}")
        size = width * height * 4
        if data is None:
            data = bytearray(size)
        elif len(data) != size:
            raise InvalidBufferError(
                f"Expected {size} bytes for a {width}x{height} buffer, got {len(data)}"
            )
        self.data: Final = bytearray(data)
        self.width: int = width
        self.height: int = height

    def __len__(self) -> int:
        return self.width * self.height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        return (x + y * self.width) * 4

    def get_color(self, x: int, y: int) -> Color | None:
        if not self.in_bounds(x, y):
            return None
        i = (x + y * self.width) * 4
        d = self.data
        return (d[i], d[i + 1], d[i + 2], d[i + 3])

    def set_color(self, x: int, y: int, color: Color) -> None:
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(x, y, self.width, self.height)
        i = (x + y * self.width) * 4
        self.data[i : i + 4] = bytes(color)

    def clear(self, color: Color) -> None:
        self.data[:] = bytes(color) * (self.width * self.height)

    def set_pixels(self, pixels: bytes | bytearray) -> None:
        if len(pixels) != len(self.data):
            raise InvalidBufferError(
                f"Expected {len(self.data)} bytes, got {len(pixels)}"
            )
        self.data[:] = pixels

    def to_bytes(self) -> bytes:
        return bytes(self.data)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.width, self.height, self.data)

    def is_uniform(self) -> bool:
        """True if every pixel has the same color as the first one."""
        return self.data == self.data[0:4] * (self.width * self.height)

    def count(self, color: Color) -> int:
        """Number of pixels with exactly `color`."""
        pixel = bytes(color)
        d = self.data
        return sum(1 for i in range(0, len(d), 4) if d[i : i + 4] == pixel)

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, color: Color) -> None:
        """Draw a 1px line from (x0, y0) to (x1, y1) using Bresenham's algorithm.

        - Writes only to in-bounds pixels.
        """

        dx = abs(x1 - x0)
        sx = 1 if x0 < x1 else -1
        dy = -abs(y1 - y0)
        sy = 1 if y0 < y1 else -1
        err = dx + dy  # error term

        while True:
            if self.in_bounds(x0, y0):
                self.set_color(x0, y0, color)
            if x0 == x1 and y0 == y1:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x0 += sx
            if e2 <= dx:
                err += dx
                y0 += sy
