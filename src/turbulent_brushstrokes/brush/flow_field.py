"""
Flow field grid and the per-technique direction rules that fill it.

The grid is recomputed in full every frame. All rules are vectorized over
the cell lattice with numpy; each cell ends up holding a unit vector.
"""

import math
from typing import Optional, Tuple

import numpy as np

from .configs import SimParams
from .eddies import EddySystem
from .noise import NoiseField
from .presets import Preset, StrokeTechnique

TWO_PI = 2.0 * math.pi

IMPASTO_BLOCK = 50.0
IMPASTO_TIME_SCALE = 0.3
POINTILLIST_FREQ = 3.0
POINTILLIST_JITTER = math.pi / 4.0
DIRECTIONAL_ANGLE = math.pi / 4.0
DIRECTIONAL_RADIAL = 0.6
FLOWING_WAVE_FREQ = 0.01
FLOWING_WAVE_AMP = 0.4
FLOWING_LIFT = 0.5


class FlowField:
    """2-D grid of unit direction vectors, one per `cell_size` cell."""

    def __init__(self, width: int, height: int, cell_size: int = 20):
        self.cell_size = int(cell_size)
        self.resize(width, height)

    def resize(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas must have positive size, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.cols = self.width // self.cell_size + 1
        self.rows = self.height // self.cell_size + 1
        self.vectors = np.zeros((self.rows, self.cols, 2), dtype=np.float64)
        self.vectors[..., 0] = 1.0
        cols = np.arange(self.cols, dtype=np.float64)
        rows = np.arange(self.rows, dtype=np.float64)
        self.col_index, self.row_index = np.meshgrid(cols, rows)
        self.xs = self.col_index * self.cell_size
        self.ys = self.row_index * self.cell_size

    def cell_index(self, x: float, y: float) -> Tuple[int, int]:
        """(col, row) of the cell under (x, y), clamped to the grid."""
        col = math.floor(x / self.cell_size) if math.isfinite(x) else 0
        row = math.floor(y / self.cell_size) if math.isfinite(y) else 0
        col = min(max(col, 0), self.cols - 1)
        row = min(max(row, 0), self.rows - 1)
        return col, row

    def lookup(self, x: float, y: float) -> Tuple[float, float]:
        col, row = self.cell_index(x, y)
        v = self.vectors[row, col]
        return float(v[0]), float(v[1])

    def set_angles(self, angles: np.ndarray):
        self.vectors[..., 0] = np.cos(angles)
        self.vectors[..., 1] = np.sin(angles)

    def set_directions(self, vx: np.ndarray, vy: np.ndarray, fallback: np.ndarray):
        """Normalizes (vx, vy); zero-length cells take the `fallback` angle."""
        norm = np.hypot(vx, vy)
        ok = norm > 1e-12
        safe = np.where(ok, norm, 1.0)
        self.vectors[..., 0] = np.where(ok, vx / safe, np.cos(fallback))
        self.vectors[..., 1] = np.where(ok, vy / safe, np.sin(fallback))


def select_preset(active: Preset, target: Preset, progress: float) -> Preset:
    """Which preset drives flow and strokes this frame.

    Colour and size blend smoothly, but the technique switches hard at the
    midpoint of a transition.
    """
    if progress > 0.5:
        return active
    return target


class FlowFieldGenerator:
    """Fills a FlowField according to the selected preset's technique."""

    def __init__(self, params: Optional[SimParams] = None, np_rng: Optional[np.random.Generator] = None):
        self.p = params or SimParams()
        self.np_rng = np_rng if np_rng is not None else np.random.default_rng()

    def recompute(self, grid: FlowField, active: Preset, target: Preset, progress: float,
                  eddies: EddySystem, noise: NoiseField, time: float) -> Preset:
        preset = select_preset(active, target, progress)
        technique = preset.technique
        if technique is StrokeTechnique.IMPASTO:
            self._impasto(grid, preset, noise, time)
        elif technique is StrokeTechnique.POINTILLIST:
            self._pointillist(grid, preset, noise, time)
        elif technique is StrokeTechnique.DIRECTIONAL:
            self._directional(grid, preset, noise, time)
        elif technique is StrokeTechnique.TURBULENT:
            grid.set_angles(eddies.total_flow_grid(grid.xs, grid.ys, noise))
        elif technique is StrokeTechnique.FLOWING:
            self._flowing(grid, preset, noise, time)
        else:
            raise ValueError(f"unhandled stroke technique: {technique!r}")
        return preset

    def _noise_coords(self, grid: FlowField, preset: Preset):
        step = self.p.noise_step * preset.flow_complexity
        return grid.col_index * step, grid.row_index * step

    def _impasto(self, grid, preset, noise, time):
        u, v = self._noise_coords(grid, preset)
        base = noise.sample_grid(u, v, time * IMPASTO_TIME_SCALE) * TWO_PI
        # Coarse blocks give chunky plateaus of shared direction
        bx = np.floor(grid.xs / IMPASTO_BLOCK)
        by = np.floor(grid.ys / IMPASTO_BLOCK)
        block = (noise.sample_grid(bx * 0.7 + 31.0, by * 0.7 + 17.0, time * 0.1) - 0.5) * math.pi
        grid.set_angles(base + block * (0.5 + preset.curvature))

    def _pointillist(self, grid, preset, noise, time):
        u, v = self._noise_coords(grid, preset)
        base = noise.sample_grid(u * POINTILLIST_FREQ, v * POINTILLIST_FREQ, time) * TWO_PI * 2.0
        jitter = self.np_rng.uniform(-POINTILLIST_JITTER, POINTILLIST_JITTER, size=base.shape)
        grid.set_angles(base + jitter)

    def _directional(self, grid, preset, noise, time):
        u, v = self._noise_coords(grid, preset)
        variation = (noise.sample_grid(u, v, time) - 0.5) * math.pi * preset.curvature
        angle = DIRECTIONAL_ANGLE + variation
        cx = grid.width / 2.0
        cy = grid.height / 2.0
        to_cx = cx - grid.xs
        to_cy = cy - grid.ys
        dist = np.hypot(to_cx, to_cy)
        safe = np.where(dist > 0.0, dist, 1.0)
        bias = DIRECTIONAL_RADIAL * (0.5 + 0.5 * math.sin(time * 5.0))
        vx = np.cos(angle) + bias * np.where(dist > 0.0, to_cx / safe, 0.0)
        vy = np.sin(angle) + bias * np.where(dist > 0.0, to_cy / safe, 0.0)
        grid.set_directions(vx, vy, angle)

    def _flowing(self, grid, preset, noise, time):
        u, v = self._noise_coords(grid, preset)
        base = (noise.sample_grid(u, v, time) - 0.5) * math.pi * preset.curvature
        wave = FLOWING_WAVE_AMP * np.sin(grid.xs * FLOWING_WAVE_FREQ + time * 10.0)
        angle = base + wave
        # Canvas y grows downward, so lift is a negative y component
        vx = np.cos(angle)
        vy = np.sin(angle) - FLOWING_LIFT
        grid.set_directions(vx, vy, angle)
