from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from PIL import ImageColor

from guess_relay.prompting import UNDETERMINED

Point = Tuple[float, float]  # (x, y) in logical canvas pixels

DEFAULT_COLOR = "#000000"
DEFAULT_WIDTH = 6.0

SERVER_ERROR_TEXT = "服务错误"
NETWORK_ERROR_TEXT = "网络错误"


class PointerKind(str, Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"


@dataclass(frozen=True)
class PointerEvent:
    kind: PointerKind
    position: Point
    source_is_touch: bool = False

    @classmethod
    def from_mouse(cls, kind: PointerKind, client_x: float, client_y: float, origin: Point = (0.0, 0.0)) -> "PointerEvent":
        return cls(PointerKind(kind), (client_x - origin[0], client_y - origin[1]), False)

    @classmethod
    def from_touch(
        cls,
        kind: PointerKind,
        touches: Sequence[Point],
        changed_touches: Sequence[Point] = (),
        origin: Point = (0.0, 0.0),
    ) -> "PointerEvent":
        """Resolve the primary contact: first active touch, else the first changed (ended) one."""
        if touches:
            x, y = touches[0]
        elif changed_touches:
            x, y = changed_touches[0]
        else:
            raise ValueError("touch event carries no contact points")
        return cls(PointerKind(kind), (x - origin[0], y - origin[1]), True)


@dataclass(frozen=True)
class Brush:
    color: str = DEFAULT_COLOR
    width: float = DEFAULT_WIDTH

    def __post_init__(self) -> None:
        # ImageColor raises ValueError for anything Pillow cannot paint with.
        ImageColor.getrgb(self.color)
        if not self.width > 0:
            raise ValueError(f"brush width must be positive, got {self.width!r}")

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return ImageColor.getrgb(self.color)[:3]


@dataclass(frozen=True)
class GuessResult:
    guess: str = UNDETERMINED
    confidence: Optional[float] = None

    def display_text(self) -> str:
        if not self.guess:
            return ""
        suffix = f"（置信度 {self.confidence:.2f}）" if self.confidence is not None else ""
        return f"AI 猜测：{self.guess}{suffix}"
