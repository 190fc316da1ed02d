"""
FrameSurface - immediate-mode 2D drawing surface backed by a numpy RGB frame.

Exposes a small canvas-style API (paths, strokes, text, clear_rect and a
save/restore style stack). Strokes go through cv3, text through cv2.
"""

import copy
import logging
import re
from dataclasses import dataclass

import cv2  # For text metrics and text rendering
import cv3  # For line drawing
import numpy as np
from PIL import ImageColor

# OpenCV takes int32 coordinates; far off-canvas points are clamped
COORD_LIMIT = 1 << 20

FONT_FACES = {
    "sans-serif": cv2.FONT_HERSHEY_SIMPLEX,
    "serif": cv2.FONT_HERSHEY_TRIPLEX,
    "monospace": cv2.FONT_HERSHEY_PLAIN,
    "cursive": cv2.FONT_HERSHEY_SCRIPT_SIMPLEX,
}

# Cap height in pixels of a Hershey font at scale 1.0
HERSHEY_PIXEL_HEIGHT = 22.0

DEFAULT_BACKGROUND = (64, 64, 64)

_FONT_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)px\s+(.+?)\s*$")


@dataclass
class _Style:
    fill_style: str = "black"
    stroke_style: str = "black"
    line_width: float = 1.0
    font: str = "10px sans-serif"
    text_align: str = "start"
    text_baseline: str = "alphabetic"


@dataclass(frozen=True)
class TextMetrics:
    width: float
    height: float
    descent: float


def parse_color(color):
    """Parse a CSS color string into an RGB tuple"""
    return tuple(ImageColor.getrgb(color)[:3])


def parse_font(font):
    """
    Parse a canvas font string such as "18px Sans-serif".

    Returns:
        (size_px, family) or None if the string is not understood
    """
    match = _FONT_RE.match(font)
    if not match:
        return None
    family = match.group(2).split(",")[0].strip().strip("'\"").lower()
    return float(match.group(1)), family


def _px(value):
    return int(round(max(-COORD_LIMIT, min(COORD_LIMIT, value))))


class FrameSurface:
    """Canvas-style drawing surface over an RGB numpy frame"""

    def __init__(self, width, height, background=DEFAULT_BACKGROUND):
        self.background = background
        self.frame = None
        self._style = _Style()
        self._stack = []
        self._subpaths = []
        self.resize(width, height)

    # -- frame management ------------------------------------------------

    @property
    def width(self):
        return self.frame.shape[1]

    @property
    def height(self):
        return self.frame.shape[0]

    def resize(self, width, height):
        """Reallocate the frame if the size changed"""
        width, height = max(1, int(width)), max(1, int(height))
        if self.frame is None or self.frame.shape[:2] != (height, width):
            self.frame = np.full((height, width, 3), self.background, dtype=np.uint8)

    def clear(self):
        """Fill the whole frame with the background color"""
        self.frame[:, :] = self.background

    # -- style state -----------------------------------------------------

    @property
    def fill_style(self):
        return self._style.fill_style

    @fill_style.setter
    def fill_style(self, value):
        parse_color(value)
        self._style.fill_style = value

    @property
    def stroke_style(self):
        return self._style.stroke_style

    @stroke_style.setter
    def stroke_style(self, value):
        parse_color(value)
        self._style.stroke_style = value

    @property
    def line_width(self):
        return self._style.line_width

    @line_width.setter
    def line_width(self, value):
        if value > 0:
            self._style.line_width = float(value)

    @property
    def font(self):
        return self._style.font

    @font.setter
    def font(self, value):
        # Unparseable fonts are ignored, as a 2D canvas does
        if parse_font(value) is None:
            logging.debug(f"Ignoring unsupported font {value!r}")
            return
        self._style.font = value

    @property
    def text_align(self):
        return self._style.text_align

    @text_align.setter
    def text_align(self, value):
        self._style.text_align = value

    @property
    def text_baseline(self):
        return self._style.text_baseline

    @text_baseline.setter
    def text_baseline(self, value):
        self._style.text_baseline = value

    def save(self):
        """Push the current style state"""
        self._stack.append(copy.copy(self._style))

    def restore(self):
        """Pop the most recently saved style state"""
        if self._stack:
            self._style = self._stack.pop()

    # -- paths -----------------------------------------------------------

    def begin_path(self):
        self._subpaths = []

    def move_to(self, x, y):
        self._subpaths.append([(x, y)])

    def line_to(self, x, y):
        if not self._subpaths:
            self.move_to(x, y)
            return
        self._subpaths[-1].append((x, y))

    def close_path(self):
        """Join the current subpath back to its start and open a new one there"""
        if not self._subpaths:
            return
        start = self._subpaths[-1][0]
        self._subpaths[-1].append(start)
        self._subpaths.append([start])

    def stroke(self):
        """Draw every segment of the current path with the stroke style"""
        color = parse_color(self._style.stroke_style)
        thickness = max(1, int(round(self._style.line_width)))
        for subpath in self._subpaths:
            for (x0, y0), (x1, y1) in zip(subpath, subpath[1:]):
                cv3.line(self.frame, _px(x0), _px(y0), _px(x1), _px(y1),
                         color=color, t=thickness)

    # -- text ------------------------------------------------------------

    def _font_params(self):
        size, family = parse_font(self._style.font)
        face = FONT_FACES.get(family, cv2.FONT_HERSHEY_SIMPLEX)
        scale = size / HERSHEY_PIXEL_HEIGHT
        thickness = max(1, int(round(scale)))
        return face, scale, thickness

    def measure_text(self, text):
        """Rendered size of text in the current font"""
        face, scale, thickness = self._font_params()
        (width, height), descent = cv2.getTextSize(text, face, scale, thickness)
        return TextMetrics(float(width), float(height), float(descent))

    def fill_text(self, text, x, y):
        """Draw text anchored at (x, y) according to text_align/text_baseline"""
        face, scale, thickness = self._font_params()
        metrics = self.measure_text(text)

        align = self._style.text_align
        if align == "center":
            x -= metrics.width / 2
        elif align in ("right", "end"):
            x -= metrics.width

        baseline = self._style.text_baseline
        if baseline == "middle":
            y += metrics.height / 2
        elif baseline in ("top", "hanging"):
            y += metrics.height
        elif baseline in ("bottom", "ideographic"):
            y -= metrics.descent

        cv2.putText(self.frame, text, (_px(x), _px(y)), face, scale,
                    parse_color(self._style.fill_style), thickness, cv2.LINE_AA)

    # -- rectangles ------------------------------------------------------

    def clear_rect(self, x, y, width, height):
        """Reset a rectangle to the background color, clipped to the frame"""
        x0 = max(0, int(np.floor(x)))
        y0 = max(0, int(np.floor(y)))
        x1 = min(self.width, int(np.ceil(x + width)))
        y1 = min(self.height, int(np.ceil(y + height)))
        if x1 > x0 and y1 > y0:
            self.frame[y0:y1, x0:x1] = self.background
