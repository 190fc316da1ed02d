"""
TreeCanvas - pan/zoom tree diagram rendered into a numpy frame.

Hosts overlays such as the measure tool: it dispatches pointer and key
events to registered listeners before its own handling, and runs redraw
hooks after it has painted the base frame.
"""

import logging

import cv3
import numpy as np

from .events import EventEmitter
from .newick import parse_newick
from .surface import FrameSurface
from .transform import DATA, Point, ViewState, to_canvas_space, to_screen_space

BRANCH_COLOR = "white"
LABEL_COLOR = "white"
SELECTED_COLOR = (255, 80, 80)
HOVER_COLOR = (0, 255, 255)


class TreeCanvas:
    """Helper class to lay out, zoom, pan and draw a rectangular tree"""

    def __init__(self, canvas_width, canvas_height, pixel_ratio=1.0, padding=10,
                 font_size=12):
        self.canvas_width = canvas_width
        self.canvas_height = canvas_height
        self.pixel_ratio = pixel_ratio
        self.padding = padding
        self.font_size = font_size

        self.surface = FrameSurface(canvas_width * pixel_ratio, canvas_height * pixel_ratio)

        # Zoom and pan state (pan offset in device pixels)
        self.zoom_level = 1.0
        self.pan_offset = [0.0, 0.0]

        # Drag state for panning
        self.panning = False
        self.drag_start = None
        self.drag_distance = 0.0

        # Tree and layout
        self.original_root = None
        self.root = None
        self.positions = {}
        self.branch_scalar = 1.0
        self.selected = None
        self.hovered = None

        self.events = EventEmitter()
        self._redraw_hooks = []
        self._cursor = ""

        # Optional callbacks supplied by the window hosting this canvas
        self.on_frame = None
        self.on_cursor_change = None

    # -- host interfaces -------------------------------------------------

    @property
    def view_state(self):
        """Live view transform for overlays"""
        return ViewState(
            pan_offset=(self.pan_offset[0], self.pan_offset[1]),
            zoom=self.zoom_level,
            pixel_ratio=self.pixel_ratio,
            width=self.surface.width,
            height=self.surface.height,
            distance_scalar=self.branch_scalar,
        )

    @property
    def cursor(self):
        return self._cursor

    @cursor.setter
    def cursor(self, value):
        self._cursor = value
        if self.on_cursor_change:
            self.on_cursor_change(value)

    def add_listener(self, event_type, callback):
        self.events.add_listener(event_type, callback)

    def add_redraw_hook(self, callback):
        """Register callback(*args) to run after every frame is drawn"""
        self._redraw_hooks.append(callback)

    def dispatch(self, event_type, event):
        """
        Deliver an event to listeners, then to the canvas' own handling.

        Listeners that stop propagation or prevent the default keep the
        canvas from reacting (e.g. selecting a node on click).
        """
        if not self.events.emit(event_type, event):
            return
        if event.default_prevented:
            return
        if event_type == "click":
            self._on_click(event)
        elif event_type == "mousemove":
            self._on_mousemove(event)

    # -- tree management -------------------------------------------------

    def load(self, newick):
        """Parse and display a Newick tree"""
        self.original_root = parse_newick(newick)
        logging.info(f"Loaded tree with {len(self.original_root.leaves())} leaves")
        self.set_root(self.original_root)

    def set_root(self, node):
        self.root = node
        self.selected = None
        self.hovered = None
        self.layout()
        self.reset_view()
        self.draw()

    def redraw_from_node(self, name):
        """Show only the subtree below the named node"""
        node = self.root.find(name) if self.root else None
        if node is None or node.is_leaf:
            logging.warning(f"No subtree named {name!r}")
            return False
        self.set_root(node)
        return True

    def redraw_original(self):
        if self.original_root is not None:
            self.set_root(self.original_root)

    def layout(self):
        """
        Rectangular layout in data space.

        x is the distance from the root scaled by branch_scalar (pixels per
        branch length unit at zoom 1), leaves are evenly spaced along y.
        """
        self.positions = {}
        if self.root is None:
            return

        width = self.canvas_width * self.pixel_ratio
        height = self.canvas_height * self.pixel_ratio
        pad = self.padding * self.pixel_ratio

        depths = {}
        self._accumulate_depths(self.root, 0.0, depths)
        max_depth = max(depths.values()) or 1.0
        # Leave room on the right for leaf labels
        self.branch_scalar = max(1.0, (width - 2 * pad) * 0.8 / max_depth)

        leaves = self.root.leaves()
        step = (height - 2 * pad) / max(1, len(leaves) - 1)
        for i, leaf in enumerate(leaves):
            self.positions[leaf] = (pad + depths[leaf] * self.branch_scalar, pad + i * step)
        self._place_internal(self.root, depths, pad)

    def _accumulate_depths(self, node, depth, depths):
        # The root's own branch length is not drawn
        depth = depth + (node.length if node is not self.root else 0.0)
        depths[node] = depth
        for child in node.children:
            self._accumulate_depths(child, depth, depths)

    def _place_internal(self, node, depths, pad):
        if node.is_leaf:
            return self.positions[node][1]
        ys = [self._place_internal(child, depths, pad) for child in node.children]
        y = (ys[0] + ys[-1]) / 2
        self.positions[node] = (pad + depths[node] * self.branch_scalar, y)
        return y

    # -- view ------------------------------------------------------------

    def reset_view(self):
        """Reset zoom and pan to initial state"""
        self.zoom_level = 1.0
        self.pan_offset = [0.0, 0.0]

    def zoom_in(self, center_x=None, center_y=None):
        """Zoom in by 20%, centered on given screen point"""
        self._zoom_by(1.2, center_x, center_y)

    def zoom_out(self, center_x=None, center_y=None):
        """Zoom out by 20%, centered on given screen point"""
        self._zoom_by(1 / 1.2, center_x, center_y)

    def _zoom_by(self, factor, center_x, center_y):
        if center_x is None:
            center_x = self.canvas_width / 2
        if center_y is None:
            center_y = self.canvas_height / 2
        center_x *= self.pixel_ratio
        center_y *= self.pixel_ratio

        old_zoom = self.zoom_level
        self.zoom_level = min(max(self.zoom_level * factor, 0.1), 10.0)

        # Adjust pan to keep the cursor position fixed
        zoom_ratio = self.zoom_level / old_zoom
        self.pan_offset[0] = center_x - (center_x - self.pan_offset[0]) * zoom_ratio
        self.pan_offset[1] = center_y - (center_y - self.pan_offset[1]) * zoom_ratio

    def get_zoom_percentage(self):
        """Get current zoom level as percentage"""
        return int(self.zoom_level * 100)

    def start_pan(self, x, y):
        """Start panning operation"""
        self.panning = True
        self.drag_start = (x, y)
        self.drag_distance = 0.0

    def update_pan(self, x, y):
        """Update pan offset during drag"""
        if self.panning and self.drag_start:
            dx = x - self.drag_start[0]
            dy = y - self.drag_start[1]
            self.pan_offset[0] += dx * self.pixel_ratio
            self.pan_offset[1] += dy * self.pixel_ratio
            self.drag_distance += np.hypot(dx, dy)
            self.drag_start = (x, y)
            return True
        return False

    def end_pan(self):
        """
        End panning operation.

        Returns:
            float: Total pointer travel of the drag in screen pixels
        """
        self.panning = False
        self.drag_start = None
        return self.drag_distance

    # -- own event handling ----------------------------------------------

    def get_node_at_position(self, x, y, threshold=15):
        """Find the node drawn near the given screen position"""
        view = self.view_state
        for node, (nx, ny) in self.positions.items():
            pt = to_screen_space(Point(nx, ny, DATA), view)
            distance = np.sqrt((x - pt.x)**2 + (y - pt.y)**2)
            if distance < threshold:
                return node
        return None

    def _on_click(self, event):
        if not event.has_position:
            return
        self.selected = self.get_node_at_position(event.x, event.y)
        if self.selected is not None:
            logging.info(f"Selected node {self.selected.name or '(unnamed)'}")
        self.draw()

    def _on_mousemove(self, event):
        if event.has_position:
            self.hovered = self.get_node_at_position(event.x, event.y)
        self.draw()

    # -- rendering -------------------------------------------------------

    def draw(self, *args):
        """Render the tree, then let overlays paint on top"""
        self.surface.resize(self.canvas_width * self.pixel_ratio,
                            self.canvas_height * self.pixel_ratio)
        self.surface.clear()
        self._render_tree()

        for hook in list(self._redraw_hooks):
            hook(*args)

        if self.on_frame:
            self.on_frame(self.surface.frame)

    def _render_tree(self):
        if self.root is None:
            return

        surface = self.surface
        view = self.view_state

        def canvas_xy(node):
            x, y = self.positions[node]
            return to_canvas_space(Point(x, y, DATA), view)

        surface.stroke_style = BRANCH_COLOR
        surface.fill_style = LABEL_COLOR
        surface.line_width = self.pixel_ratio
        surface.font = f"{self.font_size * self.pixel_ratio}px sans-serif"
        surface.text_align = "left"
        surface.text_baseline = "middle"

        surface.begin_path()
        for node in self.root.walk():
            if node.is_leaf:
                continue
            parent = canvas_xy(node)
            first = canvas_xy(node.children[0])
            last = canvas_xy(node.children[-1])
            # Vertical connector, then one horizontal branch per child
            surface.move_to(parent.x, first.y)
            surface.line_to(parent.x, last.y)
            for child in node.children:
                c = canvas_xy(child)
                surface.move_to(parent.x, c.y)
                surface.line_to(c.x, c.y)
        surface.stroke()

        gap = 4 * self.pixel_ratio
        for leaf in self.root.leaves():
            c = canvas_xy(leaf)
            surface.fill_text(leaf.name, c.x + gap, c.y)

        for node, color in ((self.hovered, HOVER_COLOR), (self.selected, SELECTED_COLOR)):
            if node is not None and node in self.positions:
                c = canvas_xy(node)
                # Only draw if within canvas bounds (with some margin)
                if not (-20 <= c.x < surface.width + 20 and -20 <= c.y < surface.height + 20):
                    continue
                cv3.circle(surface.frame, int(c.x), int(c.y), int(4 * self.pixel_ratio),
                           color=color, fill=True)
