from dataclasses import dataclass
from pathlib import Path

from .flood_fill import FillStrategy


class HexInt(int):
    def __repr__(self) -> str:  # used in help default printing
        return f"{int(self):06x}"

    __str__ = __repr__


@dataclass
class FillConfig:
    output: Path
    """Where to write the filled image"""

    x: int
    y: int

    image: Path | None = None
    """Image to fill. Without one a blank canvas is used"""

    width: int = 500
    height: int = 500
    """Size of the blank canvas"""

    background_color: int = HexInt(0xFFFFFF)
    color: int = HexInt(0xFF00FF)
    """Fill color as 0xRRGGBB"""

    tolerance: int | None = None
    """Max per channel difference for a pixel to be part of the region"""

    strategy: FillStrategy = FillStrategy.PIXEL

    fill_file: Path | None = None
    """yaml file with a list of extra fills ({x, y, color, tolerance}) applied afterwards"""
