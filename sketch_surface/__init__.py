"""
Drawing surface for the sketch-guess toy: raster, strokes, undo and the relay client.
"""

from .client import GuessClient
from .history import UNDO_CAPACITY, UndoHistory
from .models import (
    Brush,
    GuessResult,
    NETWORK_ERROR_TEXT,
    Point,
    PointerEvent,
    PointerKind,
    SERVER_ERROR_TEXT,
    UNDETERMINED,
)
from .raster import MAX_EDGE, RasterCanvas, edge_for_container
from .surface import DrawingSurface

__all__ = [
    "Brush",
    "DrawingSurface",
    "GuessClient",
    "GuessResult",
    "MAX_EDGE",
    "NETWORK_ERROR_TEXT",
    "Point",
    "PointerEvent",
    "PointerKind",
    "RasterCanvas",
    "SERVER_ERROR_TEXT",
    "UNDETERMINED",
    "UNDO_CAPACITY",
    "UndoHistory",
    "edge_for_container",
]
