"""
RGBA colors as plain 4-tuples.

A `Color` is `(r, g, b, a)` with every channel in 0..255. `None` is used as the
"no color" sentinel for pixels outside a buffer; it never compares equal to
anything, so fills stop at the edges without extra checks.
"""

from collections.abc import Sequence
from logging import getLogger

logger = getLogger(__name__)

type Color = tuple[int, int, int, int]

WHITE: Color = (255, 255, 255, 255)
BLACK: Color = (0, 0, 0, 255)


def colors_equal(a: Color | None, b: Color | None, tolerance: int | None = None) -> bool:
    """Compare two colors, optionally within a per-channel tolerance.

    With a tolerance > 0 only r, g and b are compared and alpha is ignored.
    Without one all four channels must match exactly.
    """
    if a is None or b is None:
        return False
    if tolerance:
        return (
            abs(a[0] - b[0]) <= tolerance
            and abs(a[1] - b[1]) <= tolerance
            and abs(a[2] - b[2]) <= tolerance
        )
    return a[0] == b[0] and a[1] == b[1] and a[2] == b[2] and a[3] == b[3]


def _is_channel(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and 0 <= v <= 255


def validate_color(color: Sequence[int] | None, placeholder: bool = False) -> Color | None:
    """Turn an RGB or RGBA sequence into an opaque `Color`.

    Any alpha given is dropped; colors are always fully opaque.
    Returns BLACK for invalid input if `placeholder` is set, otherwise None.
    """
    if (
        color is not None
        and not isinstance(color, (str, bytes))
        and len(color) in (3, 4)
        and all(_is_channel(c) for c in color)
    ):
        return (color[0], color[1], color[2], 255)
    if placeholder:
        return BLACK
    logger.warning(
        "Color is not valid! It must be a sequence with RGB values: [0-255, 0-255, 0-255]"
    )
    return None


def color_from_hex(value: int) -> Color:
    """0xRRGGBB -> opaque color"""
    return (value >> 16 & 0xFF, value >> 8 & 0xFF, value & 0xFF, 255)


def rgba_string(c: Color) -> str:
    return f"rgba({c[0]},{c[1]},{c[2]},{c[3]})"


def rgb_string(c: Color) -> str:
    return f"rgb({c[0]},{c[1]},{c[2]})"
