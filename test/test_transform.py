"""
Tests for the screen/data/canvas coordinate transforms.
"""
import pytest

from treemeasure.transform import (CANVAS, DATA, SCREEN, Point, ViewState,
                                   to_canvas_space, to_data_space,
                                   to_screen_space, visible_data_bounds)

VIEWS = [
    ViewState(),
    ViewState(pan_offset=(35.0, -12.5), zoom=2.5, pixel_ratio=1.0, width=800, height=600),
    ViewState(pan_offset=(-400.0, 220.0), zoom=0.1, pixel_ratio=2.0, width=1600, height=1200),
    ViewState(pan_offset=(7.25, 3.5), zoom=10.0, pixel_ratio=1.5, width=300, height=300),
]


class TestToDataSpace:

    def test_identity_view(self):
        p = to_data_space(Point(12, 34, SCREEN), ViewState())
        assert (p.x, p.y, p.space) == (12, 34, DATA)

    def test_inverts_pan_zoom_and_pixel_ratio(self):
        view = ViewState(pan_offset=(10.0, 20.0), zoom=2.0, pixel_ratio=2.0)
        p = to_data_space(Point(15, 30, SCREEN), view)
        # (15 * 2 - 10) / 2, (30 * 2 - 20) / 2
        assert p.x == pytest.approx(10.0)
        assert p.y == pytest.approx(20.0)

    def test_rejects_data_point(self):
        with pytest.raises(ValueError):
            to_data_space(Point(1, 2, DATA), ViewState())


class TestToScreenSpace:

    @pytest.mark.parametrize("view", VIEWS)
    @pytest.mark.parametrize("xy", [(0, 0), (13.7, -4.2), (640, 480)])
    def test_round_trip(self, view, xy):
        p = Point(xy[0], xy[1], SCREEN)
        back = to_screen_space(to_data_space(p, view), view)
        assert back.space == SCREEN
        assert back.x == pytest.approx(p.x)
        assert back.y == pytest.approx(p.y)

    def test_rejects_screen_point(self):
        with pytest.raises(ValueError):
            to_screen_space(Point(1, 2, SCREEN), ViewState())


class TestToCanvasSpace:

    def test_is_screen_space_times_pixel_ratio(self):
        view = ViewState(pan_offset=(5.0, 6.0), zoom=3.0, pixel_ratio=2.0)
        data = Point(4, 7)
        canvas = to_canvas_space(data, view)
        screen = to_screen_space(data, view)
        assert canvas.space == CANVAS
        assert canvas.x == pytest.approx(screen.x * 2.0)
        assert canvas.y == pytest.approx(screen.y * 2.0)


class TestVisibleDataBounds:

    def test_bounds_cover_canvas(self):
        view = ViewState(pan_offset=(100.0, 50.0), zoom=2.0, width=400, height=300)
        left, top, right, bottom = visible_data_bounds(view)
        assert (left, top, right, bottom) == (-50.0, -25.0, 150.0, 125.0)

        corner = to_canvas_space(Point(right, bottom), view)
        assert (corner.x, corner.y) == (400, 300)
