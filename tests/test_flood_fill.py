"""Tests for the bucket fill engine"""

import random

import pytest

from bucketfill.buffer import PixelBuffer
from bucketfill.color import BLACK, WHITE
from bucketfill.errors import InvalidRequestError, OutOfBoundsError
from bucketfill.flood_fill import (
    FillJob,
    FillRequest,
    FillStatus,
    FillStrategy,
    fill_region_mask,
    flood_fill,
)

MAGENTA = (255, 0, 255, 255)
RED = (255, 0, 0, 255)


def make_buffer(w: int, h: int, color=WHITE) -> PixelBuffer:
    buf = PixelBuffer(w, h)
    buf.clear(color)
    return buf


def draw_box(buf: PixelBuffer, x0: int, y0: int, x1: int, y1: int, color=BLACK):
    buf.draw_line(x0, y0, x1, y0, color)  # top
    buf.draw_line(x1, y0, x1, y1, color)  # right
    buf.draw_line(x1, y1, x0, y1, color)  # bottom
    buf.draw_line(x0, y1, x0, y0, color)  # left


def random_buffer(w: int, h: int, seed: int) -> PixelBuffer:
    rng = random.Random(seed)
    palette = [WHITE, BLACK, (250, 250, 250, 255), (255, 255, 255, 128)]
    buf = PixelBuffer(w, h)
    for y in range(h):
        for x in range(w):
            buf.set_color(x, y, rng.choice(palette))
    return buf


class TestFloodFill:
    """Region filling"""

    def test_enclosed_area(self):
        w = h = 5
        buf = make_buffer(w, h)
        draw_box(buf, 1, 1, 3, 3)

        outcome = flood_fill(buf, FillRequest(2, 2, MAGENTA))

        assert outcome.status is FillStatus.FILLED
        border = {(x, 1) for x in range(1, 4)} | {(x, 3) for x in range(1, 4)}
        border |= {(1, y) for y in range(1, 4)} | {(3, y) for y in range(1, 4)}
        for y in range(h):
            for x in range(w):
                if (x, y) == (2, 2):
                    assert buf.get_color(x, y) == MAGENTA
                elif (x, y) in border:
                    assert buf.get_color(x, y) == BLACK
                else:
                    assert buf.get_color(x, y) == WHITE

    @pytest.mark.parametrize("tolerance", [False, None, 50])
    def test_square_on_500x500(self, tolerance):
        buf = make_buffer(500, 500)
        draw_box(buf, 100, 100, 300, 300)

        flood_fill(buf, FillRequest(150, 150, [255, 0, 255], tolerance))

        assert buf.get_color(100, 100) == (0, 0, 0, 255)
        assert buf.get_color(150, 150) == (255, 0, 255, 255)
        assert buf.get_color(101, 101) == MAGENTA
        assert buf.get_color(299, 299) == MAGENTA
        assert buf.get_color(99, 150) == WHITE
        assert buf.get_color(301, 150) == WHITE
        assert buf.count(MAGENTA) == 199 * 199

    def test_rectangle_interior_only(self):
        buf = make_buffer(12, 9)
        draw_box(buf, 2, 1, 9, 6)
        before = buf.copy()

        flood_fill(buf, FillRequest(5, 3, RED))

        for y in range(9):
            for x in range(12):
                inside = 2 < x < 9 and 1 < y < 6
                expected = RED if inside else before.get_color(x, y)
                assert buf.get_color(x, y) == expected

    def test_does_not_wrap_across_rows(self):
        # Column 1 is a wall; with naive indexing (-1, y) reads (2, y - 1)
        buf = make_buffer(3, 3)
        buf.draw_line(1, 0, 1, 2, BLACK)

        flood_fill(buf, FillRequest(0, 1, RED))

        for y in range(3):
            assert buf.get_color(0, y) == RED
            assert buf.get_color(1, y) == BLACK
            assert buf.get_color(2, y) == WHITE

    @pytest.mark.parametrize("seed", [(0, 0), (5, 0), (0, 3), (5, 3), (2, 0), (0, 2)])
    def test_corner_and_edge_seeds(self, seed):
        buf = make_buffer(6, 4)
        outcome = flood_fill(buf, FillRequest(*seed, RED))

        assert outcome.status is FillStatus.FILLED
        assert buf.count(RED) == 24
        assert len(buf.data) == 6 * 4 * 4

    @pytest.mark.parametrize("seed", [(-1, 0), (0, -1), (6, 0), (0, 4), (60, 40)])
    def test_seed_outside_buffer_is_rejected(self, seed):
        buf = make_buffer(6, 4)
        before = buf.to_bytes()

        with pytest.raises(OutOfBoundsError):
            flood_fill(buf, FillRequest(*seed, RED))
        assert buf.to_bytes() == before

    def test_already_target_color_is_noop(self):
        buf = random_buffer(8, 8, 1)
        before = buf.to_bytes()
        calls = []
        seed_color = buf.get_color(3, 3)

        outcome = flood_fill(buf, FillRequest(3, 3, seed_color), on_change=calls.append)

        assert outcome.status is FillStatus.UNCHANGED
        assert not outcome.changed
        assert buf.to_bytes() == before
        assert calls == []

    def test_within_tolerance_is_noop(self):
        buf = make_buffer(4, 4, (10, 10, 10, 255))
        before = buf.to_bytes()

        outcome = flood_fill(buf, FillRequest(1, 1, (12, 12, 12), 5))

        assert outcome.status is FillStatus.UNCHANGED
        assert buf.to_bytes() == before

    def test_idempotent(self):
        once = random_buffer(10, 10, 7)
        twice = once.copy()
        request = FillRequest(4, 4, RED, 10)

        flood_fill(once, request)
        flood_fill(twice, request)
        second = flood_fill(twice, request)

        assert second.status is FillStatus.UNCHANGED
        assert once.to_bytes() == twice.to_bytes()

    def test_tolerance_absorbs_transparent_edges(self):
        buf = make_buffer(5, 1)
        buf.set_color(3, 0, (255, 255, 255, 128))

        exact = buf.copy()
        flood_fill(exact, FillRequest(0, 0, RED))
        assert exact.get_color(3, 0) == (255, 255, 255, 128)
        assert exact.get_color(4, 0) == WHITE

        tolerant = buf.copy()
        flood_fill(tolerant, FillRequest(0, 0, RED, 1))
        assert tolerant.count(RED) == 5

    def test_tolerance_is_monotonic(self):
        buf = PixelBuffer(16, 16)
        for y in range(16):
            for x in range(16):
                v = (x * 7 + y * 3) % 256
                buf.set_color(x, y, (v, v, 255 - v, 255))

        previous: set[tuple[int, int]] = set()
        for tolerance in [None, 3, 10, 25, 60, 120]:
            region = fill_region_mask(buf, 8, 8, tolerance)
            assert previous <= region
            assert (8, 8) in region
            previous = region

    def test_one_notification_per_fill(self):
        buf = make_buffer(20, 20)
        draw_box(buf, 0, 0, 19, 19)
        calls = []

        outcome = flood_fill(buf, FillRequest(10, 10, RED), on_change=calls.append)

        assert calls == [outcome]

    def test_pristine_replaces_background(self):
        buf = make_buffer(10, 10)
        draw_box(buf, 2, 2, 7, 7)
        calls = []

        outcome = flood_fill(
            buf, FillRequest(0, 0, [0, 128, 0]), pristine=True, on_change=calls.append
        )

        assert outcome.status is FillStatus.BACKGROUND
        assert buf.count((0, 128, 0, 255)) == 100
        assert len(calls) == 1


class TestStrategies:
    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    @pytest.mark.parametrize("tolerance", [None, 10])
    def test_pixel_and_span_give_same_buffer(self, seed, tolerance):
        base = random_buffer(24, 18, seed)
        for x, y in [(0, 0), (12, 9), (23, 17)]:
            by_pixel = base.copy()
            by_span = base.copy()
            request = FillRequest(x, y, RED, tolerance)

            a = flood_fill(by_pixel, request, strategy=FillStrategy.PIXEL)
            b = flood_fill(by_span, request, strategy=FillStrategy.SPAN)

            assert a.status is b.status
            assert by_pixel.to_bytes() == by_span.to_bytes()

    def test_span_uses_fewer_items(self):
        a_buf = make_buffer(40, 40)
        b_buf = make_buffer(40, 40)

        a = flood_fill(a_buf, FillRequest(20, 20, RED), strategy=FillStrategy.PIXEL)
        b = flood_fill(b_buf, FillRequest(20, 20, RED), strategy=FillStrategy.SPAN)

        assert b.items_processed < a.items_processed
        assert b.pixels_written == 40 * 40


class TestFillJob:
    def test_chunked_matches_one_shot(self):
        base = random_buffer(30, 30, 11)
        request = FillRequest(15, 15, RED, 10)

        one_shot = base.copy()
        expected = flood_fill(one_shot, request)

        chunked = base.copy()
        calls = []
        job = FillJob(chunked, request, on_change=calls.append)
        steps = 0
        while not job.step(3):
            steps += 1
            assert not job.done

        assert job.outcome == expected
        assert chunked.to_bytes() == one_shot.to_bytes()
        assert len(calls) == 1
        if expected.items_processed > 3:
            assert steps > 0

    def test_cancel_between_items(self):
        buf = make_buffer(10, 10)
        calls = []
        job = FillJob(buf, FillRequest(5, 5, RED), on_change=calls.append)

        assert not job.step(1)
        job.cancel()
        assert job.step()

        assert job.outcome is not None
        assert job.outcome.status is FillStatus.CANCELLED
        assert job.outcome.items_processed == 1
        # The first span (row 5) is complete, nothing else was painted
        assert [buf.get_color(x, 5) for x in range(10)] == [RED] * 10
        assert buf.count(RED) == 10
        assert len(calls) == 1

    def test_guard_trip_stops_without_error(self):
        results = []
        for _ in range(2):
            buf = make_buffer(10, 10)
            calls = []
            job = FillJob(buf, FillRequest(5, 5, RED), on_change=calls.append)
            job.limit = 2

            outcome = job.run()

            assert outcome.status is FillStatus.GUARD_TRIPPED
            assert 0 < buf.count(RED) < 100
            assert len(calls) == 1
            results.append(buf.to_bytes())

        assert results[0] == results[1]

    def test_guard_is_pixel_count(self):
        job = FillJob(make_buffer(7, 3), FillRequest(0, 0, RED))
        assert job.limit == 21
        assert job.run().status is FillStatus.FILLED
        assert job.run().max_pending <= 21


class TestFillRequest:
    @pytest.mark.parametrize("tolerance", [-1, 1.5, True, "5"])
    def test_bad_tolerance(self, tolerance):
        with pytest.raises(InvalidRequestError):
            flood_fill(make_buffer(2, 2), FillRequest(0, 0, RED, tolerance))

    @pytest.mark.parametrize("color", [[1, 2], [0, 0, 256], [0, -1, 0], "red", [0.5, 0, 0]])
    def test_bad_color(self, color):
        buf = make_buffer(2, 2)
        before = buf.to_bytes()
        with pytest.raises(InvalidRequestError):
            flood_fill(buf, FillRequest(0, 0, color))
        assert buf.to_bytes() == before

    def test_normalize(self):
        assert FillRequest(0, 0, [1, 2, 3]).validate() == FillRequest(0, 0, (1, 2, 3, 255))
        assert FillRequest(0, 0, (1, 2, 3, 4), 0).validate().tolerance is None
        assert FillRequest(0, 0, (1, 2, 3), False).validate().tolerance is None


def test_region_mask_leaves_buffer_alone():
    buf = make_buffer(8, 8)
    draw_box(buf, 1, 1, 5, 5)
    before = buf.to_bytes()

    region = fill_region_mask(buf, 3, 3)

    assert region == {(x, y) for x in range(2, 5) for y in range(2, 5)}
    assert buf.to_bytes() == before
