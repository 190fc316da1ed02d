"""
Coordinate transforms between screen, canvas and data space.

Screen space is what pointer events report (relative to the canvas widget).
Canvas space is the device-pixel grid of the backing frame. Data space is the
diagram's own layout coordinates and does not change with pan or zoom.
"""

from dataclasses import dataclass
from typing import Tuple

SCREEN = "screen"
CANVAS = "canvas"
DATA = "data"


@dataclass(frozen=True)
class Point:
    """A 2D point tagged with the coordinate space it lives in"""

    x: float
    y: float
    space: str = DATA

    def as_tuple(self) -> Tuple[float, float]:
        return self.x, self.y


@dataclass(frozen=True)
class ViewState:
    """
    Snapshot of the host's view transform.

    Args:
        pan_offset: (x, y) translation in device pixels
        zoom: scale factor, always > 0
        pixel_ratio: device pixels per screen pixel
        width: canvas width in device pixels
        height: canvas height in device pixels
        distance_scalar: data units per native distance unit
    """

    pan_offset: Tuple[float, float] = (0.0, 0.0)
    zoom: float = 1.0
    pixel_ratio: float = 1.0
    width: int = 0
    height: int = 0
    distance_scalar: float = 1.0


def _expect(point: Point, space: str) -> None:
    if point.space != space:
        raise ValueError(f"Expected a {space}-space point, got {point.space}")


def to_data_space(screen_point: Point, view: ViewState) -> Point:
    """Convert a pointer position to data coordinates"""
    _expect(screen_point, SCREEN)
    pan_x, pan_y = view.pan_offset
    x = (screen_point.x * view.pixel_ratio - pan_x) / view.zoom
    y = (screen_point.y * view.pixel_ratio - pan_y) / view.zoom
    return Point(x, y, DATA)


def to_screen_space(data_point: Point, view: ViewState) -> Point:
    """Convert data coordinates back to a pointer position"""
    _expect(data_point, DATA)
    pan_x, pan_y = view.pan_offset
    x = (data_point.x * view.zoom + pan_x) / view.pixel_ratio
    y = (data_point.y * view.zoom + pan_y) / view.pixel_ratio
    return Point(x, y, SCREEN)


def to_canvas_space(data_point: Point, view: ViewState) -> Point:
    """Convert data coordinates to device pixels on the backing frame"""
    _expect(data_point, DATA)
    pan_x, pan_y = view.pan_offset
    return Point(data_point.x * view.zoom + pan_x,
                 data_point.y * view.zoom + pan_y,
                 CANVAS)


def visible_data_bounds(view: ViewState) -> Tuple[float, float, float, float]:
    """
    Data-space rectangle currently covered by the canvas.

    Returns:
        (left, top, right, bottom)
    """
    pan_x, pan_y = view.pan_offset
    left = (0 - pan_x) / view.zoom
    top = (0 - pan_y) / view.zoom
    right = (view.width - pan_x) / view.zoom
    bottom = (view.height - pan_y) / view.zoom
    return left, top, right, bottom
