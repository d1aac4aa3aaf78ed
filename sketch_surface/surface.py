from __future__ import annotations

import base64
from typing import Iterable, Optional

from PIL import Image

from .history import UNDO_CAPACITY, UndoHistory
from .models import Brush, GuessResult, Point, PointerEvent, PointerKind
from .raster import MAX_EDGE, RasterCanvas, edge_for_container


class DrawingSurface:
    """
    One drawing session: the raster, its undo history, the active brush and
    the guess shown next to it. Nothing here is shared between instances.
    """

    def __init__(
        self,
        container_width: float = MAX_EDGE,
        device_pixel_ratio: float = 1.0,
        *,
        brush: Optional[Brush] = None,
        undo_capacity: int = UNDO_CAPACITY,
        max_edge: int = MAX_EDGE,
    ) -> None:
        self.max_edge = max_edge
        self.brush = brush or Brush()
        self.history: UndoHistory[Image.Image] = UndoHistory(undo_capacity)
        self.device_pixel_ratio = device_pixel_ratio
        self.drawing = False
        self.anchor: Optional[Point] = None
        self.guess: Optional[GuessResult] = None
        self.loading = False
        self.canvas = RasterCanvas(edge_for_container(container_width, max_edge), device_pixel_ratio)

    # ------------------------------------------------------------------ lifecycle
    def resize(self, container_width: float, device_pixel_ratio: Optional[float] = None) -> None:
        """Replace the raster with a blank one sized for the container; history and guess are dropped."""
        if device_pixel_ratio is not None:
            self.device_pixel_ratio = device_pixel_ratio
        self.canvas = RasterCanvas(edge_for_container(container_width, self.max_edge), self.device_pixel_ratio)
        self.history.clear()
        self.drawing = False
        self.anchor = None
        self.guess = None
        self.loading = False

    # ------------------------------------------------------------------ strokes
    def begin_stroke(self, position: Point) -> None:
        self.history.push(self.canvas.snapshot())
        self.drawing = True
        self.anchor = position

    def extend_stroke(self, position: Point) -> None:
        if not self.drawing:
            return
        last = self.anchor or position
        self.canvas.draw_segment(last, position, self.brush)
        self.anchor = position

    def end_stroke(self) -> None:
        self.drawing = False
        self.anchor = None

    def handle(self, event: PointerEvent) -> None:
        if event.kind is PointerKind.DOWN:
            self.begin_stroke(event.position)
        elif event.kind is PointerKind.MOVE:
            self.extend_stroke(event.position)
        elif event.kind is PointerKind.UP:
            self.end_stroke()

    def replay(self, events: Iterable[PointerEvent]) -> None:
        for event in events:
            self.handle(event)

    # ------------------------------------------------------------------ editing
    def undo(self) -> bool:
        snapshot = self.history.pop()
        if snapshot is None:
            return False
        self.canvas.restore(snapshot)
        return True

    def clear(self) -> None:
        self.canvas.fill_background()
        self.guess = None

    def set_brush(self, color: Optional[str] = None, width: Optional[float] = None) -> Brush:
        self.brush = Brush(
            color=self.brush.color if color is None else color,
            width=self.brush.width if width is None else width,
        )
        return self.brush

    # ------------------------------------------------------------------ export
    def export_image(self) -> bytes:
        """PNG bytes of the backing buffer."""
        return self.canvas.encode_png()

    def export_base64(self) -> str:
        # Bare base64 body; the relay adds the data: prefix itself.
        return base64.b64encode(self.export_image()).decode("ascii")

    # ------------------------------------------------------------------ guess display
    def begin_guess(self) -> None:
        self.loading = True
        self.guess = None

    def show_guess(self, result: GuessResult) -> None:
        self.guess = result
        self.loading = False

    def display_text(self) -> str:
        return self.guess.display_text() if self.guess else ""
