from collections.abc import Callable, Sequence
from logging import getLogger
from typing import Literal

from .buffer import PixelBuffer
from .color import BLACK, WHITE, Color, validate_color
from .flood_fill import FillOutcome, FillRequest, FillStrategy, flood_fill

logger = getLogger(__name__)

Event = Literal["redraw"]

ALLOWED_EVENTS: tuple[str, ...] = ("redraw",)


class DrawingSurface:
    """Owns a pixel buffer and the drawing state around it.

    Strokes are recorded as point lists. As long as no stroke has been drawn
    and no image restored the surface counts as pristine, and a bucket fill
    just replaces the background.
    """

    def __init__(
        self,
        width: int,
        height: int,
        background_color: Sequence[int] = WHITE,
        stroke_color: Sequence[int] | None = None,
        verify_pristine: bool = False,
    ):
        self.buffer: PixelBuffer = PixelBuffer(width, height)
        self.width: int = width
        self.height: int = height
        self.verify_pristine: bool = verify_pristine

        self.strokes: list[list[tuple[int, int]]] = []
        self.image_restored: bool = False

        self.stroke_color: Color = validate_color(stroke_color, True) or BLACK
        self.bucket_tool_color: Color = self.stroke_color
        self.bucket_tool_tolerance: int = 0
        self.is_bucket_tool_enabled: bool = False

        self._listeners: dict[str, list[Callable[[], None]]] = {e: [] for e in ALLOWED_EVENTS}

        self.background_color: Color = WHITE
        self.set_background(background_color)

    @property
    def has_content(self) -> bool:
        """False while the buffer still only holds the background."""
        if self.verify_pristine:
            return not self.buffer.is_uniform()
        return bool(self.strokes) or self.image_restored

    def on(self, event: str, callback: Callable[[], None]) -> None:
        if event not in self._listeners:
            logger.warning(f"This event is not allowed: {event}")
            return
        self._listeners[event].append(callback)

    def emit(self, event: Event) -> None:
        for callback in self._listeners[event]:
            callback()

    def stroke(self, points: Sequence[tuple[int, int]], color: Sequence[int] | None = None) -> None:
        """Draw a polyline through `points` and record it."""
        if not points:
            return
        col = validate_color(color, True) if color is not None else self.stroke_color
        assert col is not None
        pts = [(int(x), int(y)) for x, y in points]
        x0, y0 = pts[0]
        self.buffer.draw_line(x0, y0, x0, y0, col)
        for x1, y1 in pts[1:]:
            self.buffer.draw_line(x0, y0, x1, y1, col)
            x0, y0 = x1, y1
        self.strokes.append(pts)
        self.emit("redraw")

    def fill(
        self,
        x: int,
        y: int,
        color: Sequence[int] | None = None,
        tolerance: int | None = None,
        strategy: FillStrategy = FillStrategy.PIXEL,
    ) -> FillOutcome:
        """Bucket fill at (x, y), using the bucket tool settings for anything not given."""
        request = FillRequest(
            x,
            y,
            self.bucket_tool_color if color is None else color,
            self.bucket_tool_tolerance if tolerance is None else tolerance,
        )
        pristine = not self.has_content
        outcome = flood_fill(
            self.buffer,
            request,
            pristine=pristine,
            strategy=strategy,
            on_change=lambda _: self.emit("redraw"),
        )
        logger.info(
            "Fill at (%d, %d): %s, %d pixels written",
            x,
            y,
            outcome.status.value,
            outcome.pixels_written,
        )
        return outcome

    def configure_bucket_tool(
        self, color: Sequence[int] | None = None, tolerance: int | None = None
    ) -> None:
        if color:
            valid = validate_color(color)
            if valid:
                self.bucket_tool_color = valid
        if tolerance and tolerance > 0:
            self.bucket_tool_tolerance = tolerance

    def toggle_bucket_tool(self) -> bool:
        self.is_bucket_tool_enabled = not self.is_bucket_tool_enabled
        return self.is_bucket_tool_enabled

    def set_stroke_color(self, color: Sequence[int]) -> None:
        self.stroke_color = validate_color(color, True) or BLACK

    def set_drawing_color(self, color: Sequence[int]) -> None:
        """Set both stroke and bucket tool color."""
        self.configure_bucket_tool(color=color)
        self.set_stroke_color(color)

    def set_background(self, color: Sequence[int], save: bool = True) -> None:
        valid = validate_color(color)
        if valid:
            if save:
                self.background_color = valid
            self.buffer.clear(valid)

    def clear(self) -> None:
        self.strokes = []
        self.set_background(self.background_color)
        self.emit("redraw")

    def snapshot(self) -> bytes:
        return self.buffer.to_bytes()

    def restore(self, data: bytes) -> None:
        self.buffer.set_pixels(data)
        self.image_restored = True
        self.emit("redraw")
