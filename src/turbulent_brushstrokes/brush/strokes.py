"""Per-technique stroke geometry. Pure drawing: nothing here mutates a particle."""

import math
import random
from typing import List, Sequence, Tuple

from ..surface import CAP_ROUND, CAP_SQUARE, Color, Point, Surface
from .presets import StrokeTechnique

HIGHLIGHT_MIX = 0.35
COMPLEMENT_CHANCE = 0.3
BLOB_CHANCE = 0.02


def _mix(rgb: Color, other: Color, t: float) -> Color:
    return (
        rgb[0] + (other[0] - rgb[0]) * t,
        rgb[1] + (other[1] - rgb[1]) * t,
        rgb[2] + (other[2] - rgb[2]) * t,
    )


def complement(rgb: Color) -> Color:
    return (255.0 - rgb[0], 255.0 - rgb[1], 255.0 - rgb[2])


def chaikin(points: Sequence[Point], iterations: int = 1) -> List[Point]:
    """Corner-cutting smoothing; endpoints are kept."""
    pts = list(points)
    for _ in range(iterations):
        if len(pts) < 3:
            break
        out = [pts[0]]
        for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
            out.append((0.75 * x0 + 0.25 * x1, 0.75 * y0 + 0.25 * y1))
            out.append((0.25 * x0 + 0.75 * x1, 0.25 * y0 + 0.75 * y1))
        out.append(pts[-1])
        pts = out
    return pts


def _rotated_rect(cx: float, cy: float, heading: float, length: float, width: float) -> List[Point]:
    ux, uy = math.cos(heading), math.sin(heading)
    px, py = -uy, ux
    hl, hw = length / 2.0, width / 2.0
    return [
        (cx - ux * hl - px * hw, cy - uy * hl - py * hw),
        (cx + ux * hl - px * hw, cy + uy * hl - py * hw),
        (cx + ux * hl + px * hw, cy + uy * hl + py * hw),
        (cx - ux * hl + px * hw, cy - uy * hl + py * hw),
    ]


def _trail(particle) -> List[Point]:
    pts = list(particle.history)
    if len(pts) < 2:
        x, y = particle.x, particle.y
        pts = [(x - particle.vx, y - particle.vy), (x, y)]
    return pts


def draw_impasto(surface: Surface, particle, alpha: float, rng: random.Random):
    """Short, thick slab along the heading with a thinner lit ridge on top."""
    heading = particle.heading()
    length = max(particle.stroke_length * 1.5, particle.stroke_width)
    width = particle.stroke_width
    body = _rotated_rect(particle.x, particle.y, heading, length, width)
    surface.polygon(body, particle.color, alpha)

    # Ridge of paint catching the light, offset toward the upper edge
    ox = math.sin(heading) * width * 0.25
    oy = -math.cos(heading) * width * 0.25
    ridge = _rotated_rect(particle.x + ox, particle.y + oy, heading, length * 0.8, width * 0.3)
    surface.polygon(ridge, _mix(particle.color, (255.0, 255.0, 255.0), HIGHLIGHT_MIX), alpha * 0.6)


def draw_pointillist(surface: Surface, particle, alpha: float, rng: random.Random):
    radius = particle.stroke_width / 2.0
    surface.circle((particle.x, particle.y), radius, particle.color, alpha)
    if rng.random() < COMPLEMENT_CHANCE:
        a = rng.uniform(0.0, 2.0 * math.pi)
        d = particle.stroke_width * 1.5
        center = (particle.x + math.cos(a) * d, particle.y + math.sin(a) * d)
        surface.circle(center, radius * 0.5, complement(particle.color), alpha * 0.7)


def draw_directional(surface: Surface, particle, alpha: float, rng: random.Random):
    """Polyline that swells from a thin tail to full width at the head."""
    pts = _trail(particle)
    n = len(pts) - 1
    for i in range(n):
        taper = 0.4 + 0.6 * (i + 1) / n
        surface.polyline(pts[i:i + 2], particle.color, particle.stroke_width * taper, alpha, cap=CAP_SQUARE)


def draw_turbulent(surface: Surface, particle, alpha: float, rng: random.Random):
    pts = chaikin(_trail(particle), iterations=1)
    surface.polyline(pts, particle.color, particle.stroke_width, alpha, cap=CAP_ROUND)
    if rng.random() < BLOB_CHANCE:
        bright = _mix(particle.color, (255.0, 255.0, 255.0), 0.5)
        surface.circle((particle.x, particle.y), particle.stroke_width * 1.2, bright, min(1.0, alpha * 1.25))


def draw_flowing(surface: Surface, particle, alpha: float, rng: random.Random):
    pts = chaikin(_trail(particle), iterations=2)
    surface.polyline(pts, particle.color, particle.stroke_width, alpha * 0.9, cap=CAP_ROUND)


def draw_stroke(surface: Surface, particle, technique: StrokeTechnique, alpha: float, rng: random.Random):
    if technique is StrokeTechnique.IMPASTO:
        draw_impasto(surface, particle, alpha, rng)
    elif technique is StrokeTechnique.POINTILLIST:
        draw_pointillist(surface, particle, alpha, rng)
    elif technique is StrokeTechnique.DIRECTIONAL:
        draw_directional(surface, particle, alpha, rng)
    elif technique is StrokeTechnique.TURBULENT:
        draw_turbulent(surface, particle, alpha, rng)
    elif technique is StrokeTechnique.FLOWING:
        draw_flowing(surface, particle, alpha, rng)
    else:
        raise ValueError(f"unhandled stroke technique: {technique!r}")
