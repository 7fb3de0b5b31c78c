"""Image surface the turtle draws into. Segments are kept as vectors and only rasterised when saved as PNG.

Directions are in degrees: 0 points up and angles grow clockwise. Image y coordinates grow downwards.
"""

import math
import os
from dataclasses import dataclass

import numpy as np
from PIL import Image as PILImage

from logo.lang.error import ErrorKind, LogoError


@dataclass(frozen=True)
class Color:
    name: str
    red: int
    green: int
    blue: int

    @property
    def rgb(self):
        return (self.red, self.green, self.blue)

    @property
    def hex(self):
        return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"


COLORS = (
    Color("black", 0, 0, 0),
    Color("blue", 0, 0, 255),
    Color("cyan", 0, 255, 255),
    Color("green", 0, 255, 0),
    Color("red", 255, 0, 0),
    Color("magenta", 255, 0, 255),
    Color("yellow", 255, 255, 0),
    Color("white", 255, 255, 255),
    Color("brown", 165, 42, 42),
    Color("tan", 210, 180, 140),
    Color("forest", 34, 139, 34),
    Color("aqua", 127, 255, 212),
    Color("salmon", 250, 128, 114),
    Color("purple", 128, 0, 128),
    Color("orange", 255, 165, 0),
    Color("grey", 128, 128, 128),
    Color("silver", 192, 192, 192),
)

BACKGROUND = COLORS[0]

SUPPORTED_EXTENSIONS = (".svg", ".png")


def get_end_coordinates(x, y, direction, distance):
    """Returns the point distance away from (x, y) in direction."""
    radians = math.radians(direction)
    return x + distance * math.sin(radians), y - distance * math.cos(radians)


def _fmt(value):
    # 3 decimals is well below a pixel
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def clip_segment(start, end, width, height):
    """Clips the segment start-end to the pixel centres of a width x height image (Liang-Barsky). Returns the clipped
    end points, or None if nothing of the segment is on the image or it has a non-finite coordinate.
    """
    (x0, y0), (x1, y1) = start, end
    dx, dy = x1 - x0, y1 - y0
    if not all(math.isfinite(v) for v in (x0, y0, x1, y1, dx, dy)):
        return None

    t0, t1 = 0.0, 1.0
    for p, q in ((-dx, x0), (dx, width - 1 - x0), (-dy, y0), (dy, height - 1 - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        t = q / p
        if p < 0:
            if t > t1:
                return None
            t0 = max(t0, t)
        else:
            if t < t0:
                return None
            t1 = min(t1, t)

    return (x0 + t0 * dx, y0 + t0 * dy), (x0 + t1 * dx, y0 + t1 * dy)


@dataclass(frozen=True)
class Segment:
    start: tuple
    end: tuple
    color: Color


class Image:
    """Accumulates drawn segments on a black background."""

    def __init__(self, width, height):
        if width <= 0 or height <= 0:
            raise ValueError("image dimensions must be positive")
        self.width = width
        self.height = height
        self.segments = []

    def draw_simple_line(self, x, y, direction, distance, color):
        """Draws a line from (x, y) and returns its end point."""
        end = get_end_coordinates(x, y, direction, distance)
        self.segments.append(Segment((x, y), end, color))
        return end

    def to_svg(self):
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<svg xmlns="http://www.w3.org/2000/svg" version="1.1" width="{self.width}" height="{self.height}" '
            f'viewBox="0 0 {self.width} {self.height}">',
            f'  <rect x="0" y="0" width="{self.width}" height="{self.height}" fill="{BACKGROUND.hex}" />',
        ]
        for segment in self.segments:
            if not all(math.isfinite(v) for v in segment.start + segment.end):
                continue
            (x1, y1), (x2, y2) = segment.start, segment.end
            lines.append(f'  <line x1="{_fmt(x1)}" y1="{_fmt(y1)}" x2="{_fmt(x2)}" y2="{_fmt(y2)}" '
                         f'stroke="{segment.color.hex}" stroke-width="1" stroke-linecap="round" />')
        lines.append("</svg>")
        return "\n".join(lines) + "\n"

    def to_array(self):
        """Rasterises the segments into a (height, width, 3) uint8 array."""
        pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        pixels[:, :] = BACKGROUND.rgb

        def plot(px, py, color):
            if 0 <= px < self.width and 0 <= py < self.height:
                pixels[py, px] = color.rgb

        # Bresenham integer line rasterization over the visible part of each segment
        for segment in self.segments:
            clipped = clip_segment(segment.start, segment.end, self.width, self.height)
            if clipped is None:
                continue
            x0, y0 = (int(round(v)) for v in clipped[0])
            x1, y1 = (int(round(v)) for v in clipped[1])
            dx = abs(x1 - x0)
            dy = abs(y1 - y0)
            x, y = x0, y0
            sx = 1 if x0 < x1 else -1
            sy = 1 if y0 < y1 else -1
            if dx > dy:
                err = dx // 2
                while True:
                    plot(x, y, segment.color)
                    if x == x1:
                        break
                    err -= dy
                    if err < 0:
                        y += sy
                        err += dx
                    x += sx
            else:
                err = dy // 2
                while True:
                    plot(x, y, segment.color)
                    if y == y1:
                        break
                    err -= dx
                    if err < 0:
                        x += sx
                        err += dy
                    y += sy

        return pixels

    def save_svg(self, path):
        with open(path, "w", encoding="utf-8") as file:
            file.write(self.to_svg())

    def save_png(self, path):
        PILImage.fromarray(self.to_array(), "RGB").save(path, format="PNG")

    def save(self, path):
        """Saves as SVG or PNG depending on the extension of path."""
        check_image_path(path)
        try:
            if os.path.splitext(path)[1].lower() == ".svg":
                self.save_svg(path)
            else:
                self.save_png(path)
        except OSError:
            raise LogoError(ErrorKind.FILE_ACCESS, "couldn't save image to '{}'", path)


def check_image_path(path):
    """Checks that path has an extension Image can be saved as."""
    extension = os.path.splitext(path)[1].lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise LogoError(ErrorKind.UNSUPPORTED_IMAGE_FORMAT, "'{}' is not an .svg or .png path", path)
