"""
MeasureTool - interactive distance measurement overlay for tree canvases.

Click to drop an anchor, move the pointer to see the distance to it in the
diagram's native units, click again (or press Escape) to clear. Holding
Ctrl/Cmd locks the measurement to the x axis, Shift to the y axis.
"""

import logging

from .transform import (SCREEN, Point, to_canvas_space, to_data_space,
                        visible_data_bounds)
from .units import DistanceScale

DEFAULTS = {
    "is_active": False,
    "fill_style": "black",
    "stroke_style": "blue",
    "line_width": 2,
    "font_size": 18,
    "font_family": "Sans-serif",
    "text_baseline": "middle",
    "text_align": "center",
    "crosshair_size": 10,
    "guidelines": True,
}

ACTIVE_CURSOR = "crosshair"

INACTIVE = "inactive"
IDLE = "idle"
ARMED = "armed"


def lock_axis_for(event):
    """
    Axis lock from the modifier keys of a single event.

    Ctrl or Meta locks to x and wins over Shift, Shift alone locks to y.
    """
    if getattr(event, "ctrl", False) or getattr(event, "meta", False):
        return "x"
    if getattr(event, "shift", False):
        return "y"
    return None


class MeasureTool:
    """
    Measurement overlay attached to one diagram.

    The diagram must provide view_state, surface, cursor, draw(),
    add_listener() and add_redraw_hook(). All points are kept in data space
    and only converted to canvas pixels while painting, so the overlay
    follows pan and zoom.
    """

    def __init__(self, diagram, options=None):
        self.diagram = diagram

        options = dict(options or {})
        unknown = sorted(set(options) - set(DEFAULTS))
        if unknown:
            logging.debug(f"Ignoring unknown measure tool options: {', '.join(unknown)}")
        settings = dict(DEFAULTS)
        settings.update((k, v) for k, v in options.items() if k in DEFAULTS)

        self.fill_style = settings["fill_style"]
        self.stroke_style = settings["stroke_style"]
        self.line_width = settings["line_width"]
        self.font_size = settings["font_size"]
        self.font_family = settings["font_family"]
        self.text_baseline = settings["text_baseline"]
        self.text_align = settings["text_align"]
        self.crosshair_size = settings["crosshair_size"]
        self.guidelines = settings["guidelines"]

        # Interaction state
        self.is_active = False
        self.original_cursor = None
        self.anchor_point = None
        self.live_point = None
        self.lock_axis = None

        diagram.add_listener("click", self.on_click)
        diagram.add_listener("mousemove", self.on_mousemove)
        diagram.add_listener("keydown", self.on_keydown)
        diagram.add_redraw_hook(self.draw)

        if settings["is_active"]:
            self.enable()

    @property
    def state(self):
        """Current state: 'inactive', 'idle' or 'armed'"""
        if not self.is_active:
            return INACTIVE
        return ARMED if self.anchor_point is not None else IDLE

    # -- lifecycle -------------------------------------------------------

    def enable(self):
        """Activate the tool; no-op if already active"""
        if self.is_active:
            return
        self.is_active = True
        self.original_cursor = self.diagram.cursor
        self.diagram.cursor = ACTIVE_CURSOR
        logging.info("Measure tool enabled")
        self.diagram.draw()

    def disable(self):
        """Deactivate the tool and restore the cursor; no-op if inactive"""
        if not self.is_active:
            return
        self.is_active = False
        self.diagram.cursor = self.original_cursor
        logging.info("Measure tool disabled")
        self.diagram.draw()

    def toggle(self):
        if self.is_active:
            self.disable()
        else:
            self.enable()

    def clear(self):
        """Drop the anchor and live point"""
        self.anchor_point = None
        self.live_point = None

    # -- event handlers --------------------------------------------------

    def _event_point(self, event):
        """Data-space position of a pointer event, or None if it has none"""
        try:
            x = float(getattr(event, "x"))
            y = float(getattr(event, "y"))
        except (AttributeError, TypeError, ValueError):
            return None
        return to_data_space(Point(x, y, SCREEN), self.diagram.view_state)

    def on_click(self, event):
        if not self.is_active:
            return

        # The click belongs to the measurement, not to the diagram
        for name in ("prevent_default", "stop_immediate_propagation"):
            method = getattr(event, name, None)
            if callable(method):
                method()

        point = self._event_point(event)
        if point is None:
            logging.debug("Click without coordinates, measurement unchanged")
        elif self.anchor_point is not None:
            self.clear()
            logging.debug("Measurement cleared by click")
        else:
            self.anchor_point = point
            logging.debug(f"Anchor set at ({point.x:.3f}, {point.y:.3f})")
        self.diagram.draw()

    def on_mousemove(self, event):
        if not self.is_active:
            return

        point = self._event_point(event)
        if point is None:
            return
        self.live_point = point
        self.lock_axis = lock_axis_for(event)

    def on_keydown(self, event):
        if not self.is_active:
            return

        if getattr(event, "is_escape", False):
            self.clear()
            logging.debug("Measurement cancelled")

        self.diagram.draw()

    # -- measurement -----------------------------------------------------

    def effective_endpoint(self):
        """
        End of the measured segment in data space.

        Returns the live point, projected onto the anchor's horizontal
        (x lock) or vertical (y lock) line, or None without both points.
        """
        if self.anchor_point is None or self.live_point is None:
            return None
        x, y = self.live_point.x, self.live_point.y
        if self.lock_axis == "x":
            y = self.anchor_point.y
        elif self.lock_axis == "y":
            x = self.anchor_point.x
        return Point(x, y)

    def measured_distance(self):
        """Distance in native units, or None when nothing is measured"""
        end = self.effective_endpoint()
        if end is None:
            return None
        scale = DistanceScale(self.diagram.view_state.distance_scalar)
        return scale.measure(self.anchor_point, end)

    def get_status_message(self):
        """Human-readable description of the measurement state"""
        if not self.is_active:
            return "Measure tool off"
        if self.anchor_point is None:
            return "Measure: click to set the anchor point"
        distance = self.measured_distance()
        label = DistanceScale().format(distance) if distance is not None else None
        if label is None:
            return "Measure: move the pointer, click or Esc to clear"
        return f"Distance: {label}"

    # -- painting --------------------------------------------------------

    def draw(self, *args):
        """
        Paint the overlay. Called by the diagram after it has drawn its frame.

        Extra arguments from the diagram's redraw are accepted and ignored.
        """
        if not self.is_active:
            return

        surface = self.diagram.surface
        surface.save()
        try:
            self._paint(surface, self.diagram.view_state)
        except Exception:
            logging.exception("Measure overlay paint failed")
        finally:
            surface.restore()

    def _paint(self, surface, view):
        surface.fill_style = self.fill_style
        surface.stroke_style = self.stroke_style
        surface.line_width = self.line_width
        surface.text_baseline = self.text_baseline
        surface.text_align = self.text_align
        surface.font = f"{self.font_size}px {self.font_family}"

        if self.guidelines and self.live_point is not None:
            self._draw_guidelines(surface, view, self.live_point)

        if self.anchor_point is None:
            return

        self.draw_crosshair(surface, view, self.anchor_point)

        end = self.effective_endpoint()
        if end is None:
            return

        # Line from anchor to (possibly axis-locked) endpoint
        start_px = to_canvas_space(self.anchor_point, view)
        end_px = to_canvas_space(end, view)
        surface.begin_path()
        surface.move_to(start_px.x, start_px.y)
        surface.line_to(end_px.x, end_px.y)
        surface.stroke()

        scale = DistanceScale(view.distance_scalar)
        label = scale.format(scale.measure(self.anchor_point, end))
        if label is None:
            logging.warning(f"Skipping distance label, distance scalar is {view.distance_scalar!r}")
        else:
            self._draw_label(surface, label,
                             (start_px.x + end_px.x) / 2,
                             (start_px.y + end_px.y) / 2)

        if self.lock_axis is not None:
            self.draw_crosshair(surface, view, end)

    def _draw_guidelines(self, surface, view, point):
        left, top, right, bottom = visible_data_bounds(view)
        surface.begin_path()
        if self.lock_axis != "y":
            a = to_canvas_space(Point(point.x, top), view)
            b = to_canvas_space(Point(point.x, bottom), view)
            surface.move_to(a.x, a.y)
            surface.line_to(b.x, b.y)
        if self.lock_axis != "x":
            a = to_canvas_space(Point(left, point.y), view)
            b = to_canvas_space(Point(right, point.y), view)
            surface.move_to(a.x, a.y)
            surface.line_to(b.x, b.y)
        surface.stroke()

    def _draw_label(self, surface, text, x, y):
        # Blank out whatever is behind the label so it stays readable
        width = surface.measure_text(text).width
        height = self.font_size
        surface.clear_rect(x - width / 2, y - height / 2, width, height)
        surface.fill_text(text, x, y)

    def draw_crosshair(self, surface, view, centre):
        """Two short perpendicular strokes centred on a data-space point"""
        c = to_canvas_space(centre, view)
        half = self.crosshair_size * view.pixel_ratio
        surface.begin_path()
        surface.move_to(c.x, c.y - half)
        surface.line_to(c.x, c.y + half)
        surface.move_to(c.x - half, c.y)
        surface.line_to(c.x + half, c.y)
        surface.stroke()


def plugin(diagram, config=None):
    """
    Install a MeasureTool on a diagram.

    Options are read from config["measure_tool"]. The tool is attached as
    diagram.measure_tool and returned.
    """
    config = config or {}
    diagram.measure_tool = MeasureTool(diagram, config.get("measure_tool"))
    return diagram.measure_tool
