from __future__ import annotations

import io
import math
from typing import Tuple

from PIL import Image, ImageDraw

from .models import Brush, Point

MAX_EDGE = 600
BACKGROUND = (255, 255, 255)


def edge_for_container(container_width: float, max_edge: int = MAX_EDGE) -> int:
    """Square logical edge: container width capped at max_edge, never below one pixel."""
    return max(1, min(max_edge, int(container_width)))


class RasterCanvas:
    """
    Device-scaled RGB pixel buffer.

    Callers work in logical (CSS) pixels; every coordinate and width is
    multiplied by ``dpr`` before it touches the backing image, which is
    ``floor(edge * dpr)`` pixels on a side.
    """

    def __init__(self, edge: int, dpr: float = 1.0) -> None:
        self.edge = int(edge)
        self.dpr = max(1.0, float(dpr or 1.0))
        side = max(1, math.floor(self.edge * self.dpr))
        self.image = Image.new("RGB", (side, side), BACKGROUND)
        self._draw = ImageDraw.Draw(self.image)

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def _scale(self, p: Point) -> Tuple[float, float]:
        return (p[0] * self.dpr, p[1] * self.dpr)

    def fill_background(self) -> None:
        self._draw.rectangle((0, 0, self.image.width, self.image.height), fill=BACKGROUND)

    def draw_segment(self, start: Point, end: Point, brush: Brush) -> None:
        """Round-capped segment; the caps double as round joins between consecutive segments."""
        color = brush.rgb
        width = brush.width * self.dpr
        x0, y0 = self._scale(start)
        x1, y1 = self._scale(end)
        self._draw.line([(x0, y0), (x1, y1)], fill=color, width=max(1, round(width)))
        r = width / 2.0
        for cx, cy in ((x0, y0), (x1, y1)):
            self._draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=color)

    def snapshot(self) -> Image.Image:
        return self.image.copy()

    def restore(self, snapshot: Image.Image) -> None:
        if snapshot.size != self.image.size:
            raise ValueError(f"snapshot size {snapshot.size} does not match canvas {self.image.size}")
        self.image.paste(snapshot)

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        """Backing-buffer pixel (device coordinates)."""
        return self.image.getpixel((x, y))

    def is_blank(self) -> bool:
        return self.image.getextrema() == tuple((c, c) for c in BACKGROUND)

    def encode_png(self) -> bytes:
        buf = io.BytesIO()
        self.image.save(buf, format="PNG")
        return buf.getvalue()
