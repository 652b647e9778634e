"""
Drawing surfaces.

The simulation only needs a handful of primitives with per-call alpha. The
Pillow surface draws in RGBA mode onto an RGB image, so every primitive is
alpha-blended over what is already on the canvas (trails accumulate).
"""
import math
from typing import Optional, Protocol, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

Color = Tuple[float, float, float]
Point = Tuple[float, float]

CAP_BUTT = "butt"
CAP_SQUARE = "square"
CAP_ROUND = "round"


class Surface(Protocol):
    width: int
    height: int

    def clear(self, rgb: Color) -> None: ...

    def fade(self, rgb: Color, alpha: float) -> None: ...

    def polyline(self, points: Sequence[Point], rgb: Color, width: float, alpha: float, cap: str = CAP_ROUND) -> None: ...

    def polygon(self, points: Sequence[Point], rgb: Color, alpha: float) -> None: ...

    def circle(self, center: Point, radius: float, rgb: Color, alpha: float) -> None: ...


def _rgba(rgb: Color, alpha: float) -> Tuple[int, int, int, int]:
    a = max(0.0, min(1.0, alpha))
    return (
        int(max(0, min(255, round(rgb[0])))),
        int(max(0, min(255, round(rgb[1])))),
        int(max(0, min(255, round(rgb[2])))),
        int(round(a * 255)),
    )


def _extend(p: Point, q: Point, amount: float) -> Point:
    """Moves p away from q by `amount` along the segment direction."""
    dx, dy = p[0] - q[0], p[1] - q[1]
    d = math.hypot(dx, dy)
    if d == 0.0:
        return p
    return (p[0] + dx / d * amount, p[1] + dy / d * amount)


class PillowSurface:
    """Pillow-backed raster surface with alpha-blended primitives."""

    def __init__(self, width: int, height: int, background: Color = (0, 0, 0)):
        self.resize(width, height, background)

    def resize(self, width: int, height: int, background: Optional[Color] = None):
        self.width = int(width)
        self.height = int(height)
        bg = _rgba(background or (0, 0, 0), 1.0)[:3]
        self.image = Image.new("RGB", (self.width, self.height), bg)
        self._draw = ImageDraw.Draw(self.image, "RGBA")

    def clear(self, rgb: Color):
        self._draw.rectangle([0, 0, self.width, self.height], fill=_rgba(rgb, 1.0))

    def fade(self, rgb: Color, alpha: float):
        """Washes the whole canvas with a translucent background (stroke trails)."""
        if alpha <= 0.0:
            return
        self._draw.rectangle([0, 0, self.width, self.height], fill=_rgba(rgb, alpha))

    def polyline(self, points: Sequence[Point], rgb: Color, width: float, alpha: float, cap: str = CAP_ROUND):
        pts = [(float(x), float(y)) for x, y in points]
        if not pts:
            return
        w = max(1, int(round(width)))
        fill = _rgba(rgb, alpha)
        if len(pts) == 1:
            self.circle(pts[0], width / 2.0, rgb, alpha)
            return
        if cap == CAP_SQUARE:
            pts[0] = _extend(pts[0], pts[1], width / 2.0)
            pts[-1] = _extend(pts[-1], pts[-2], width / 2.0)
        self._draw.line(pts, fill=fill, width=w, joint="curve")
        if cap == CAP_ROUND and w > 2:
            r = width / 2.0
            for x, y in (pts[0], pts[-1]):
                self._draw.ellipse([x - r, y - r, x + r, y + r], fill=fill)

    def polygon(self, points: Sequence[Point], rgb: Color, alpha: float):
        pts = [(float(x), float(y)) for x, y in points]
        if len(pts) < 3:
            return
        self._draw.polygon(pts, fill=_rgba(rgb, alpha))

    def circle(self, center: Point, radius: float, rgb: Color, alpha: float):
        x, y = center
        r = max(0.5, float(radius))
        self._draw.ellipse([x - r, y - r, x + r, y + r], fill=_rgba(rgb, alpha))

    def to_array(self) -> np.ndarray:
        """(height, width, 3) uint8 copy of the canvas."""
        return np.asarray(self.image, dtype=np.uint8).copy()

    def save(self, path: str):
        self.image.save(path)
