"""
Bucket fill over a `PixelBuffer`.

The fill is a stack based scanline algorithm: pop a seed, expand west and
east along its row while pixels match the target color, paint that span and
push matching pixels from the rows above and below.

All matching is done against the seed color captured before anything is
painted. The number of pending work items is capped at one per pixel of the
buffer; if the stack grows past that the fill stops where it is and reports
`FillStatus.GUARD_TRIPPED`.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from enum import Enum
from logging import getLogger

from .buffer import PixelBuffer
from .color import Color, colors_equal, rgba_string
from .errors import InvalidRequestError, OutOfBoundsError

logger = getLogger(__name__)


class FillStatus(Enum):
    FILLED = "filled"
    UNCHANGED = "unchanged"
    """Seed pixel already had the requested color, nothing was written"""
    BACKGROUND = "background"
    """Pristine surface, the whole buffer was replaced"""
    GUARD_TRIPPED = "guard_tripped"
    CANCELLED = "cancelled"


class FillStrategy(Enum):
    PIXEL = "pixel"
    """Push every matching pixel above and below a span"""
    SPAN = "span"
    """Push one item per run of matching pixels above and below a span"""


@dataclass(frozen=True)
class FillRequest:
    x: int
    y: int
    color: Sequence[int]
    tolerance: int | None = None

    def validate(self) -> "FillRequest":
        """Return a normalized copy, raising InvalidRequestError for bad input.

        The color becomes an RGBA tuple (alpha 255 if only RGB is given) and
        a tolerance of False or 0 becomes None, meaning exact match.
        """
        color = self.color
        if (
            isinstance(color, (str, bytes))
            or not isinstance(color, Sequence)
            or len(color) not in (3, 4)
        ):
            raise InvalidRequestError(f"Color must have 3 or 4 channels: {color!r}")
        for c in color:
            if isinstance(c, bool) or not isinstance(c, int) or not 0 <= c <= 255:
                raise InvalidRequestError(f"Invalid channel value {c!r} in {color!r}")
        rgba: Color = (color[0], color[1], color[2], color[3] if len(color) == 4 else 255)

        tolerance = self.tolerance
        if tolerance is False or tolerance == 0:
            tolerance = None
        elif tolerance is not None:
            if isinstance(tolerance, bool) or not isinstance(tolerance, int):
                raise InvalidRequestError(f"Tolerance must be an integer: {tolerance!r}")
            if tolerance < 0:
                raise InvalidRequestError(f"Tolerance must be >= 0: {tolerance}")

        return replace(self, color=rgba, tolerance=tolerance)


@dataclass(frozen=True)
class FillOutcome:
    status: FillStatus
    pixels_written: int = 0
    """Pixel writes, a pixel may be written more than once with FillStrategy.PIXEL"""
    items_processed: int = 0
    max_pending: int = 0

    @property
    def changed(self) -> bool:
        return self.pixels_written > 0


type ChangeCallback = Callable[[FillOutcome], None]


class FillJob:
    """A single flood fill that can be run in steps.

    The job holds the buffer until it finishes. Target color and the pending
    work guard are kept across `step()` calls, so running in chunks gives the
    same result as `run()`.
    """

    def __init__(
        self,
        buffer: PixelBuffer,
        request: FillRequest,
        *,
        pristine: bool = False,
        strategy: FillStrategy = FillStrategy.PIXEL,
        on_change: ChangeCallback | None = None,
    ) -> None:
        request = request.validate()
        if not buffer.in_bounds(request.x, request.y):
            raise OutOfBoundsError(request.x, request.y, buffer.width, buffer.height)

        self.buffer: PixelBuffer = buffer
        self.request: FillRequest = request
        self.strategy: FillStrategy = strategy
        self.on_change: ChangeCallback | None = on_change
        self.limit: int = buffer.width * buffer.height
        self.color: Color = request.color  # pyright: ignore[reportAttributeAccessIssue]
        self.target: Color | None = None
        self.stack: list[tuple[int, int]] = []
        self.outcome: FillOutcome | None = None

        self._cancelled = False
        self._pixels_written = 0
        self._items_processed = 0
        self._max_pending = 0

        if pristine:
            logger.debug("Pristine buffer, replacing background with %s", rgba_string(self.color))
            buffer.clear(self.color)
            self._pixels_written = len(buffer)
            self._finish(FillStatus.BACKGROUND)
            return

        self.target = buffer.get_color(request.x, request.y)
        if colors_equal(self.target, self.color, request.tolerance):
            logger.debug("Seed (%d, %d) already has the fill color", request.x, request.y)
            self._finish(FillStatus.UNCHANGED)
            return

        logger.debug(
            "Fill at (%d, %d) target %s -> %s, tolerance %s",
            request.x,
            request.y,
            rgba_string(self.target),  # pyright: ignore[reportArgumentType]
            rgba_string(self.color),
            request.tolerance,
        )
        self.stack.append((request.x, request.y))

    @property
    def done(self) -> bool:
        return self.outcome is not None

    def cancel(self) -> None:
        """Stop the fill before the next work item is taken."""
        self._cancelled = True

    def step(self, max_items: int | None = None) -> bool:
        """Process up to `max_items` work items (all if None). Returns True when finished."""
        if self.outcome is not None:
            return True

        processed = 0
        while self.stack:
            if self._cancelled:
                self._finish(FillStatus.CANCELLED)
                return True
            if max_items is not None and processed >= max_items:
                return False
            if len(self.stack) > self.limit:
                logger.warning(
                    "Fill stopped at %d pending items (limit %d), buffer is partially filled",
                    len(self.stack),
                    self.limit,
                )
                self._finish(FillStatus.GUARD_TRIPPED)
                return True

            item = self.stack.pop()
            if self.strategy is FillStrategy.SPAN:
                self._fill_span(*item)
            else:
                self._fill_pixels(*item)
            processed += 1
            self._items_processed += 1
            self._max_pending = max(self._max_pending, len(self.stack))

        self._finish(FillStatus.FILLED)
        return True

    def run(self) -> FillOutcome:
        self.step()
        assert self.outcome is not None
        return self.outcome

    def _matches(self, x: int, y: int) -> bool:
        return colors_equal(self.buffer.get_color(x, y), self.target, self.request.tolerance)

    def _expand(self, x: int, y: int) -> tuple[int, int]:
        west = x
        while self._matches(west - 1, y):
            west -= 1
        east = x
        while self._matches(east + 1, y):
            east += 1
        return west, east

    def _fill_pixels(self, x: int, y: int) -> None:
        west, east = self._expand(x, y)
        for i in range(west, east + 1):
            self.buffer.set_color(i, y, self.color)
            self._pixels_written += 1
            if self._matches(i, y - 1):
                self.stack.append((i, y - 1))
            if self._matches(i, y + 1):
                self.stack.append((i, y + 1))

    def _fill_span(self, x: int, y: int) -> None:
        # Seeds are pushed once per run, so they may already have been painted
        if not self._matches(x, y):
            return
        west, east = self._expand(x, y)
        for i in range(west, east + 1):
            self.buffer.set_color(i, y, self.color)
        self._pixels_written += east - west + 1

        for ny in (y - 1, y + 1):
            in_run = False
            for i in range(west, east + 1):
                if self._matches(i, ny):
                    if not in_run:
                        self.stack.append((i, ny))
                        in_run = True
                else:
                    in_run = False

    def _finish(self, status: FillStatus) -> None:
        self.stack.clear()
        self.outcome = FillOutcome(
            status, self._pixels_written, self._items_processed, self._max_pending
        )
        logger.debug(
            "Fill %s: %d writes, %d items",
            status.value,
            self._pixels_written,
            self._items_processed,
        )
        if self.on_change is not None and self._pixels_written:
            self.on_change(self.outcome)


def flood_fill(
    buffer: PixelBuffer,
    request: FillRequest,
    *,
    pristine: bool = False,
    strategy: FillStrategy = FillStrategy.PIXEL,
    on_change: ChangeCallback | None = None,
) -> FillOutcome:
    """Fill the region connected to the request's seed with its color.

    - `buffer` is modified in-place.
    - `pristine` tells the fill that nothing has been drawn yet, in which
      case the whole buffer is set to the color.
    - `on_change` is called once if any pixel was written.
    """
    return FillJob(
        buffer, request, pristine=pristine, strategy=strategy, on_change=on_change
    ).run()


def fill_region_mask(
    buffer: PixelBuffer, x: int, y: int, tolerance: int | None = None
) -> set[tuple[int, int]]:
    """Return the pixels a fill seeded at (x, y) would paint, without touching `buffer`."""
    target = buffer.get_color(x, y)
    if target is None:
        raise OutOfBoundsError(x, y, buffer.width, buffer.height)

    # Furthest possible color per channel, so it can't match the target unless nothing can
    probe: Color = (
        0 if target[0] >= 128 else 255,
        0 if target[1] >= 128 else 255,
        0 if target[2] >= 128 else 255,
        0 if target[3] >= 128 else 255,
    )
    scratch = buffer.copy()
    outcome = flood_fill(
        scratch, FillRequest(x, y, probe, tolerance), strategy=FillStrategy.SPAN
    )
    if not outcome.changed:
        return set()

    before, after = buffer.data, scratch.data
    width = buffer.width
    return {
        ((i // 4) % width, (i // 4) // width)
        for i in range(0, len(before), 4)
        if before[i : i + 4] != after[i : i + 4]
    }
