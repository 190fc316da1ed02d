"""
Tree Measure - Interactive distance measurement on a phylogenetic tree
Loads a Newick tree, lets the user zoom/pan it and measure distances
in branch-length units with the measure tool overlay.
Features: Zoom, Pan, Axis-locked measurement (Ctrl/Cmd = x, Shift = y)
"""

import argparse
import logging
import sys
import tkinter as tk
from tkinter import ttk

import cv3  # For resizing HiDPI frames down to the window size
from PIL import Image, ImageTk

from treemeasure import KeyEvent, NewickError, PointerEvent, TreeCanvas, plugin

DEFAULT_TREE = "((B:0.2,(C:0.3,(G:0.2,H:0.3)D:0.4)E:0.5)F:0.1)A;"

# Tk event.state modifier masks
SHIFT_MASK = 0x0001
CONTROL_MASK = 0x0004
COMMAND_MASK = 0x0008  # Mod1, the Command key under macOS Aqua

# Pointer travel (screen pixels) below which a press/release counts as a click
CLICK_SLOP = 3


def pointer_event_from_tk(event):
    """Build a PointerEvent from a Tk mouse event"""
    state = getattr(event, "state", 0)
    if not isinstance(state, int):
        state = 0
    return PointerEvent(
        x=event.x,
        y=event.y,
        ctrl=bool(state & CONTROL_MASK),
        meta=sys.platform == "darwin" and bool(state & COMMAND_MASK),
        shift=bool(state & SHIFT_MASK),
    )


class TreeMeasureGUI:
    def __init__(self, root, tree_canvas, measure_options=None):
        self.root = root
        self.root.title("Tree Measure")
        self.tree = tree_canvas

        # PhotoImage reference (must keep reference to prevent garbage collection)
        self.photo = None

        self.setup_ui()

        self.tree.on_frame = self.show_frame
        self.tree.on_cursor_change = lambda cursor: self.canvas.config(cursor=cursor)
        self.measure_tool = plugin(self.tree, {"measure_tool": measure_options or {}})

    def setup_ui(self):
        toolbar = ttk.Frame(self.root)
        toolbar.pack(side=tk.TOP, fill=tk.X, padx=5, pady=5)

        ttk.Button(toolbar, text="Toggle", command=self.toggle_measure).pack(side=tk.LEFT, padx=2)
        ttk.Button(toolbar, text="Subtree", command=lambda: self.tree.redraw_from_node("E")).pack(side=tk.LEFT, padx=2)
        ttk.Button(toolbar, text="Redraw Original", command=self.tree.redraw_original).pack(side=tk.LEFT, padx=2)

        self.zoom_label = ttk.Label(toolbar, text="100%")
        self.zoom_label.pack(side=tk.RIGHT, padx=5)

        self.canvas = tk.Canvas(self.root, width=self.tree.canvas_width,
                                height=self.tree.canvas_height, bg="gray25",
                                highlightthickness=0)
        self.canvas.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        self.status_label = ttk.Label(self.root, text="", anchor=tk.W)
        self.status_label.pack(side=tk.BOTTOM, fill=tk.X, padx=5, pady=2)

        self.canvas.bind("<Button-1>", self.on_canvas_press)
        self.canvas.bind("<B1-Motion>", self.on_canvas_drag)
        self.canvas.bind("<ButtonRelease-1>", self.on_canvas_release)
        self.canvas.bind("<Motion>", self.on_canvas_motion)
        self.canvas.bind("<MouseWheel>", self.on_mouse_wheel)
        self.canvas.bind("<Configure>", self.on_canvas_resize)
        self.root.bind("<KeyPress>", self.on_key_press)
        self.root.bind('<Control-m>', lambda e: self.toggle_measure())

    def toggle_measure(self):
        self.measure_tool.toggle()
        self.update_status()

    def show_frame(self, frame):
        """Display a rendered frame on the Tk canvas"""
        if self.tree.pixel_ratio != 1:
            frame = cv3.resize(frame, self.tree.canvas_width, self.tree.canvas_height)

        img_pil = Image.fromarray(frame)
        self.photo = ImageTk.PhotoImage(image=img_pil)

        self.canvas.delete("all")
        self.canvas.create_image(0, 0, anchor=tk.NW, image=self.photo)

    def update_status(self):
        self.status_label.config(text=self.measure_tool.get_status_message())
        self.zoom_label.config(text=f"{self.tree.get_zoom_percentage()}%")

    def on_canvas_press(self, event):
        self.canvas.focus_set()
        self.tree.start_pan(event.x, event.y)

    def on_canvas_drag(self, event):
        if self.tree.update_pan(event.x, event.y):
            self.tree.draw()

    def on_canvas_release(self, event):
        # A press without noticeable travel is a click, anything else was a pan
        if self.tree.end_pan() < CLICK_SLOP:
            self.tree.dispatch("click", pointer_event_from_tk(event))
        self.update_status()

    def on_canvas_motion(self, event):
        self.tree.dispatch("mousemove", pointer_event_from_tk(event))
        self.update_status()

    def on_key_press(self, event):
        self.tree.dispatch("keydown", KeyEvent(key=event.keysym, keycode=event.keycode))
        self.update_status()

    def on_mouse_wheel(self, event):
        """Handle mouse wheel zoom centered on cursor"""
        if event.delta > 0:
            self.tree.zoom_in(event.x, event.y)
        else:
            self.tree.zoom_out(event.x, event.y)
        self.tree.draw()
        self.update_status()

    def on_canvas_resize(self, event):
        if (event.width, event.height) == (self.tree.canvas_width, self.tree.canvas_height):
            return
        self.tree.canvas_width = event.width
        self.tree.canvas_height = event.height
        self.tree.layout()
        self.tree.draw()


def main():
    parser = argparse.ArgumentParser(description='Tree Measure - Distance measurement on a tree diagram')
    parser.add_argument('tree', nargs='?', help='Newick file to load on startup')
    parser.add_argument('--width', type=int, default=800, help='Canvas width in pixels (default: 800)')
    parser.add_argument('--height', type=int, default=600, help='Canvas height in pixels (default: 600)')
    parser.add_argument('--pixel-ratio', type=float, default=1.0,
                        help='Device pixel ratio of the backing frame (default: 1.0)')
    parser.add_argument('--font-size', type=float, default=18, help='Distance label size (default: 18)')
    parser.add_argument('--crosshair-size', type=float, default=10, help='Crosshair half-size (default: 10)')
    parser.add_argument('--no-guidelines', action='store_true', help='Hide the pointer guidelines')
    parser.add_argument('--inactive', action='store_true', help='Start with the measure tool disabled')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                        datefmt='%H:%M:%S')

    newick = DEFAULT_TREE
    if args.tree:
        with open(args.tree, encoding='utf-8') as f:
            newick = f.read()

    tree_canvas = TreeCanvas(args.width, args.height, pixel_ratio=args.pixel_ratio)
    try:
        tree_canvas.load(newick)
    except NewickError as e:
        logging.error(f"Cannot load tree: {e}")
        sys.exit(1)

    root = tk.Tk()
    app = TreeMeasureGUI(root, tree_canvas, {
        'is_active': not args.inactive,
        'font_size': args.font_size,
        'crosshair_size': args.crosshair_size,
        'guidelines': not args.no_guidelines,
    })
    tree_canvas.draw()
    app.update_status()

    root.mainloop()


if __name__ == "__main__":
    main()
