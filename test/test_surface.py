"""
Tests for FrameSurface drawing into numpy frames.
"""
import numpy as np
import pytest

from treemeasure.surface import FrameSurface, parse_color, parse_font

BLACK = (0, 0, 0)
LIME = (0, 255, 0)


@pytest.fixture
def frame_surface():
    surface = FrameSurface(60, 50, background=BLACK)
    surface.stroke_style = "lime"
    surface.fill_style = "lime"
    surface.line_width = 3
    return surface


def ink(surface):
    """Coordinates (xs, ys) of every non-background pixel"""
    ys, xs = np.nonzero(np.any(surface.frame != surface.background, axis=2))
    return xs, ys


class TestFrame:

    def test_frame_shape_and_background(self):
        surface = FrameSurface(30, 20, background=(64, 64, 64))
        assert surface.frame.shape == (20, 30, 3)
        assert surface.frame.dtype == np.uint8
        assert (surface.frame == 64).all()

    def test_resize_reallocates(self):
        surface = FrameSurface(30, 20)
        surface.resize(40.0, 10.0)
        assert (surface.width, surface.height) == (40, 10)

    def test_clear(self, frame_surface):
        frame_surface.frame[:, :] = 200
        frame_surface.clear()
        assert not frame_surface.frame.any()


class TestStyle:

    def test_parse_color(self):
        assert parse_color("blue") == (0, 0, 255)
        assert parse_color("#ff000080") == (255, 0, 0)

    def test_invalid_color_rejected(self, frame_surface):
        with pytest.raises(ValueError):
            frame_surface.stroke_style = "not-a-colour"
        assert frame_surface.stroke_style == "lime"

    def test_parse_font(self):
        assert parse_font("18px Sans-serif") == (18.0, "sans-serif")
        assert parse_font("9.5px 'Serif', monospace") == (9.5, "serif")
        assert parse_font("bold") is None

    def test_unparseable_font_ignored(self, frame_surface):
        frame_surface.font = "24px serif"
        frame_surface.font = "large"
        assert frame_surface.font == "24px serif"

    def test_save_restore(self, frame_surface):
        frame_surface.save()
        frame_surface.stroke_style = "red"
        frame_surface.line_width = 7
        frame_surface.text_align = "center"
        frame_surface.restore()
        assert frame_surface.stroke_style == "lime"
        assert frame_surface.line_width == 3
        assert frame_surface.text_align == "start"

    def test_unbalanced_restore_is_harmless(self, frame_surface):
        frame_surface.restore()
        assert frame_surface.stroke_style == "lime"


class TestPaths:

    def test_stroke_line(self, frame_surface):
        frame_surface.begin_path()
        frame_surface.move_to(5, 25)
        frame_surface.line_to(55, 25)
        frame_surface.stroke()
        assert tuple(frame_surface.frame[25, 30]) == LIME
        assert tuple(frame_surface.frame[5, 30]) == BLACK

    def test_nothing_drawn_before_stroke(self, frame_surface):
        frame_surface.begin_path()
        frame_surface.move_to(5, 25)
        frame_surface.line_to(55, 25)
        assert not frame_surface.frame.any()

    def test_begin_path_discards_previous_path(self, frame_surface):
        frame_surface.begin_path()
        frame_surface.move_to(5, 10)
        frame_surface.line_to(55, 10)
        frame_surface.begin_path()
        frame_surface.move_to(5, 40)
        frame_surface.line_to(55, 40)
        frame_surface.stroke()
        assert tuple(frame_surface.frame[10, 30]) == BLACK
        assert tuple(frame_surface.frame[40, 30]) == LIME

    def test_line_to_without_move_starts_subpath(self, frame_surface):
        frame_surface.begin_path()
        frame_surface.line_to(5, 10)
        frame_surface.line_to(55, 10)
        frame_surface.stroke()
        assert tuple(frame_surface.frame[10, 30]) == LIME

    def test_close_path_joins_start(self, frame_surface):
        frame_surface.begin_path()
        frame_surface.move_to(10, 10)
        frame_surface.line_to(40, 10)
        frame_surface.line_to(40, 40)
        frame_surface.close_path()
        frame_surface.stroke()
        assert tuple(frame_surface.frame[25, 25]) == LIME

    def test_far_off_canvas_coordinates(self, frame_surface):
        frame_surface.begin_path()
        frame_surface.move_to(-1e12, 20)
        frame_surface.line_to(1e12, 20)
        frame_surface.stroke()
        assert tuple(frame_surface.frame[20, 30]) == LIME


class TestText:

    def test_measure_text_grows_with_length(self, frame_surface):
        frame_surface.font = "18px sans-serif"
        short = frame_surface.measure_text("1.0")
        long = frame_surface.measure_text("1.000000")
        assert long.width > short.width > 0
        assert long.height == short.height

    def test_larger_font_measures_wider(self, frame_surface):
        frame_surface.font = "12px sans-serif"
        small = frame_surface.measure_text("5.000000").width
        frame_surface.font = "36px sans-serif"
        assert frame_surface.measure_text("5.000000").width > small

    def test_centred_text(self):
        surface = FrameSurface(200, 100, background=BLACK)
        surface.fill_style = "white"
        surface.font = "18px sans-serif"
        surface.text_align = "center"
        surface.text_baseline = "middle"
        surface.fill_text("5.000000", 100, 50)
        xs, ys = ink(surface)
        assert len(xs) > 0
        assert abs((xs.min() + xs.max()) / 2 - 100) <= 4
        assert abs((ys.min() + ys.max()) / 2 - 50) <= 4

    def test_left_aligned_text_starts_at_x(self):
        surface = FrameSurface(200, 100, background=BLACK)
        surface.fill_style = "white"
        surface.font = "18px sans-serif"
        surface.text_align = "left"
        surface.fill_text("Label", 50, 50)
        xs, ys = ink(surface)
        assert xs.min() >= 48
        assert ys.max() <= 52


class TestClearRect:

    def test_clears_region(self, frame_surface):
        frame_surface.frame[:, :] = 255
        frame_surface.clear_rect(10.4, 5, 20, 10)
        assert tuple(frame_surface.frame[10, 20]) == BLACK
        assert tuple(frame_surface.frame[30, 20]) == (255, 255, 255)

    def test_clipped_to_frame(self, frame_surface):
        frame_surface.frame[:, :] = 255
        frame_surface.clear_rect(-10, -10, 15, 15)
        assert tuple(frame_surface.frame[0, 0]) == BLACK
        assert tuple(frame_surface.frame[6, 6]) == (255, 255, 255)

    def test_outside_frame_is_noop(self, frame_surface):
        frame_surface.clear_rect(100, 100, 10, 10)
        frame_surface.clear_rect(5, 5, 0, 10)
        assert not frame_surface.frame.any()
