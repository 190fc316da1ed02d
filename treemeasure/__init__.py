"""
treemeasure - distance measurement overlay for pan/zoom tree canvases.
"""

from .transform import Point, ViewState, to_data_space, to_screen_space, to_canvas_space
from .units import DistanceScale
from .events import PointerEvent, KeyEvent
from .surface import FrameSurface
from .measure_tool import MeasureTool, plugin
from .newick import parse_newick, NewickError
from .tree_canvas import TreeCanvas

__all__ = [
    'Point',
    'ViewState',
    'to_data_space',
    'to_screen_space',
    'to_canvas_space',
    'DistanceScale',
    'PointerEvent',
    'KeyEvent',
    'FrameSurface',
    'MeasureTool',
    'plugin',
    'parse_newick',
    'NewickError',
    'TreeCanvas',
]
