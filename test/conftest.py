"""
Shared fixtures for treemeasure tests.

Provides a recording drawing surface and a minimal diagram host so the
measure tool can be exercised without a display.
"""
import pytest

from treemeasure.events import EventEmitter
from treemeasure.transform import ViewState


class RecordingSurface:
    """Canvas-style surface that records calls instead of drawing"""

    STYLE_ATTRS = ("fill_style", "stroke_style", "line_width", "font",
                   "text_align", "text_baseline")

    def __init__(self):
        self.calls = []
        self.fill_style = "host-fill"
        self.stroke_style = "host-stroke"
        self.line_width = 1
        self.font = "10px host"
        self.text_align = "start"
        self.text_baseline = "alphabetic"
        self._stack = []

    def save(self):
        self.calls.append(("save",))
        self._stack.append({a: getattr(self, a) for a in self.STYLE_ATTRS})

    def restore(self):
        self.calls.append(("restore",))
        for attr, value in self._stack.pop().items():
            setattr(self, attr, value)

    def begin_path(self):
        self.calls.append(("begin_path",))

    def move_to(self, x, y):
        self.calls.append(("move_to", x, y))

    def line_to(self, x, y):
        self.calls.append(("line_to", x, y))

    def stroke(self):
        self.calls.append(("stroke",))

    def close_path(self):
        self.calls.append(("close_path",))

    def measure_text(self, text):
        class Metrics:
            width = 10.0 * len(text)
        return Metrics()

    def fill_text(self, text, x, y):
        self.calls.append(("fill_text", text, x, y))

    def clear_rect(self, x, y, width, height):
        self.calls.append(("clear_rect", x, y, width, height))

    # -- helpers for assertions --

    def names(self):
        return [call[0] for call in self.calls]

    def texts(self):
        return [call[1] for call in self.calls if call[0] == "fill_text"]

    def segments(self):
        """(start, end) pairs of every move_to/line_to segment"""
        segments = []
        current = None
        for call in self.calls:
            if call[0] == "move_to":
                current = (call[1], call[2])
            elif call[0] == "line_to":
                segments.append((current, (call[1], call[2])))
                current = (call[1], call[2])
        return segments


class FakeDiagram:
    """Host diagram with a settable view and a draw counter"""

    def __init__(self, view=None):
        self.view_state = view or ViewState(width=200, height=100)
        self.surface = RecordingSurface()
        self.cursor = "default"
        self.events = EventEmitter()
        self.redraw_hooks = []
        self.draw_count = 0

    def add_listener(self, event_type, callback):
        self.events.add_listener(event_type, callback)

    def add_redraw_hook(self, callback):
        self.redraw_hooks.append(callback)

    def dispatch(self, event_type, event):
        return self.events.emit(event_type, event)

    def draw(self, *args):
        self.draw_count += 1
        self.surface.calls.append(("host_frame",))
        for hook in self.redraw_hooks:
            hook(*args)


@pytest.fixture
def diagram():
    return FakeDiagram()


@pytest.fixture
def surface():
    return RecordingSurface()
