#!/usr/bin/env python
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any, cast

import jsonargparse
import yaml
from PIL import Image

from .color import color_from_hex
from .fill_config import FillConfig
from .flood_fill import FillOutcome
from .surface import DrawingSurface

logger = logging.getLogger(__name__)


def load_surface(config: FillConfig) -> DrawingSurface:
    if config.image is None:
        return DrawingSurface(
            config.width, config.height, color_from_hex(config.background_color)
        )
    with Image.open(config.image) as img:
        rgba = img.convert("RGBA")
        surface = DrawingSurface(rgba.width, rgba.height)
        surface.restore(rgba.tobytes())
    logger.info(f"Loaded {config.image} ({surface.width}x{surface.height})")
    return surface


def save_surface(surface: DrawingSurface, path: Path) -> None:
    img = Image.frombytes("RGBA", (surface.width, surface.height), surface.snapshot())
    img.save(path)
    logger.info(f"Saved {path}")


def load_fills(path: Path) -> list[dict[str, Any]]:
    with open(path) as f:
        fills = yaml.safe_load(f) or []
    if not isinstance(fills, list):
        raise ValueError(f"{path}: expected a list of fills")
    return cast("list[dict[str, Any]]", fills)


def _parse_color(value: int | Sequence[int]) -> Sequence[int]:
    if isinstance(value, int):
        return color_from_hex(value)
    return value


def run(config: FillConfig) -> list[FillOutcome]:
    surface = load_surface(config)
    outcomes = [
        surface.fill(
            config.x,
            config.y,
            color_from_hex(config.color),
            config.tolerance,
            config.strategy,
        )
    ]

    if config.fill_file is not None:
        for op in load_fills(config.fill_file):
            color = _parse_color(op.get("color", config.color))
            outcomes.append(
                surface.fill(
                    int(op["x"]),
                    int(op["y"]),
                    color,
                    op.get("tolerance", config.tolerance),
                    config.strategy,
                )
            )

    save_surface(surface, config.output)
    return outcomes


def main(argv: list[str] | None = None) -> None:
    jsonargparse.set_parsing_settings(docstring_parse_attribute_docstrings=True)

    args = cast(
        "FillConfig",
        jsonargparse.auto_cli(FillConfig, args=argv, as_positional=True),  # pyright: ignore[reportUnknownMemberType]
    )
    for outcome in run(args):
        logger.info(f"{outcome.status.value}: {outcome.pixels_written} pixels written")


if __name__ == "__main__":
    main()
