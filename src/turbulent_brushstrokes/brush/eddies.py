"""
Kolmogorov-style eddy model for the Starry Night period.

This is a stylised approximation, not a fluid solver:
- A fixed set of vortex generators in three scale tiers (large/medium/small)
- Energy per eddy follows a power law in scale (E ~ l ** -cascade_exponent,
  so large eddies dominate when the exponent is negative)
- Small eddies turn over faster (turnover speed ~ l ** -mixing_exponent)
- Influence decays exponentially with distance and is cut off at a few scales
- Flow direction is tangential to the radius plus a spiral twist, so particles
  trace spirals rather than closed circles

Inspired by:
- Kolmogorov 1941 (energy cascade, -5/3 spectrum)
- Aragon et al. 2008 (turbulent luminance in Van Gogh's paintings)
"""

import math
import random
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from .configs import SimParams
from .noise import NoiseField
from .presets import TurbulenceParams

# Tier proportions for the default 14-eddy layout (large, medium, small)
TIER_WEIGHTS = (5, 5, 4)
AMBIENT_NOISE_SCALE = 0.002
AMBIENT_TIME_SCALE = 0.1


class Influence(NamedTuple):
    angle: float
    strength: float


@dataclass
class Eddy:
    """One vortex generator."""

    x: float
    y: float
    base_scale: float
    rotation: int
    phase: float
    speed: float
    cascade_exponent: float = -5.0 / 3.0
    scale: float = field(init=False)
    energy: float = field(init=False)

    def __post_init__(self):
        self.scale = self.base_scale
        self.energy = self.base_scale ** (-self.cascade_exponent)


def _tier_counts(count: int) -> Tuple[int, int, int]:
    """Split `count` eddies across the tiers in the 5/5/4 proportion."""
    total = sum(TIER_WEIGHTS)
    large = int(round(count * TIER_WEIGHTS[0] / total))
    medium = int(round(count * TIER_WEIGHTS[1] / total))
    large = min(large, count)
    medium = min(medium, count - large)
    return large, medium, count - large - medium


class EddySystem:
    """Owns the eddies and evaluates their superposed flow direction."""

    def __init__(self, params: Optional[SimParams] = None, turbulence: Optional[TurbulenceParams] = None, rng: Optional[random.Random] = None):
        self.p = params or SimParams()
        self.turbulence = turbulence or TurbulenceParams()
        self.rng = rng or random.Random()
        self.eddies: List[Eddy] = []
        self.width = 0.0
        self.height = 0.0
        self.time = 0.0
        self._max_energy = 1.0

    def initialize(self, width: float, height: float, count: Optional[int] = None, turbulence: Optional[TurbulenceParams] = None):
        """Clears all eddies and builds a fresh tiered layout for the canvas."""
        if turbulence is not None:
            self.turbulence = turbulence
        if count is None:
            count = self.turbulence.eddy_count
        if count is None:
            count = self.p.eddy_count
        self.width = float(width)
        self.height = float(height)
        self.eddies = []

        large, medium, small = _tier_counts(int(count))
        tiers = (
            (large, self.p.large_eddy_scale, True),
            (medium, self.p.medium_eddy_scale, False),
            (small, self.p.small_eddy_scale, False),
        )
        r = self.rng
        for n, (lo, hi), upper_half in tiers:
            for _ in range(n):
                y_max = self.height * 0.5 if upper_half else self.height
                self.eddies.append(Eddy(
                    x=r.uniform(0.0, self.width),
                    y=r.uniform(0.0, y_max),
                    base_scale=r.uniform(lo, hi),
                    rotation=r.choice((-1, 1)),
                    phase=r.uniform(0.0, 2.0 * math.pi),
                    speed=r.uniform(0.5, 1.5),
                    cascade_exponent=self.turbulence.cascade_exponent,
                ))
        self._max_energy = max((e.energy for e in self.eddies), default=1.0)

    def reinitialize(self):
        """Rebuilds the layout for the last known canvas size."""
        self.initialize(self.width, self.height)

    def energies(self) -> List[float]:
        return [e.energy for e in self.eddies]

    def advance(self, dt: float):
        """Advances eddy phases by `dt` seconds and lets each scale breathe."""
        self.time += dt
        ref = self.p.eddy_reference_scale
        mix = self.turbulence.mixing_exponent
        amp = self.p.eddy_oscillation
        for e in self.eddies:
            scale_factor = (ref / e.base_scale) ** mix
            e.phase += dt * e.speed * scale_factor
            e.scale = e.base_scale * (1.0 + amp * math.sin(e.phase))

    def sample_influence(self, eddy: Eddy, x: float, y: float) -> Optional[Influence]:
        """Direction and strength of a single eddy at (x, y), or None past the cutoff."""
        dx = x - eddy.x
        dy = y - eddy.y
        d = math.hypot(dx, dy)
        if d > self.p.eddy_cutoff * eddy.scale:
            return None
        strength = math.exp(-d / eddy.scale)
        # atan2(0, 0) is 0, so the centre still gets a defined tangent
        angle = math.atan2(dy, dx) + eddy.rotation * (math.pi / 2.0 + self.p.spiral_coeff * d)
        return Influence(angle, strength)

    def _energy_weight(self, eddy: Eddy) -> float:
        return (eddy.energy / self._max_energy) ** self.turbulence.energy_decay

    def ambient_angle(self, x, y, noise: NoiseField):
        n = noise.sample_grid(np.asarray(x) * AMBIENT_NOISE_SCALE, np.asarray(y) * AMBIENT_NOISE_SCALE, self.time * AMBIENT_TIME_SCALE)
        return n * 4.0 * math.pi

    def total_flow(self, x: float, y: float, noise: NoiseField) -> float:
        """Weighted circular mean of all eddy directions at (x, y)."""
        sx = sy = total = 0.0
        for e in self.eddies:
            inf = self.sample_influence(e, x, y)
            if inf is None:
                continue
            w = inf.strength * self._energy_weight(e)
            sx += w * math.cos(inf.angle)
            sy += w * math.sin(inf.angle)
            total += w
        ambient = float(self.ambient_angle(x, y, noise))
        if total <= 0.0:
            return ambient
        k = self.p.ambient_weight
        vx = (1.0 - k) * sx / total + k * math.cos(ambient)
        vy = (1.0 - k) * sy / total + k * math.sin(ambient)
        if vx == 0.0 and vy == 0.0:
            return ambient
        return math.atan2(vy, vx)

    def total_flow_grid(self, xs: np.ndarray, ys: np.ndarray, noise: NoiseField) -> np.ndarray:
        """Vectorized `total_flow` over arrays of canvas coordinates."""
        sx = np.zeros(xs.shape)
        sy = np.zeros(xs.shape)
        total = np.zeros(xs.shape)
        spiral = self.p.spiral_coeff
        cutoff = self.p.eddy_cutoff
        for e in self.eddies:
            dx = xs - e.x
            dy = ys - e.y
            d = np.hypot(dx, dy)
            inside = d <= cutoff * e.scale
            w = np.where(inside, np.exp(-d / e.scale), 0.0) * self._energy_weight(e)
            angle = np.arctan2(dy, dx) + e.rotation * (math.pi / 2.0 + spiral * d)
            sx += w * np.cos(angle)
            sy += w * np.sin(angle)
            total += w

        ambient = self.ambient_angle(xs, ys, noise)
        k = self.p.ambient_weight
        safe_total = np.where(total > 0.0, total, 1.0)
        vx = (1.0 - k) * sx / safe_total + k * np.cos(ambient)
        vy = (1.0 - k) * sy / safe_total + k * np.sin(ambient)
        mixed = np.arctan2(vy, vx)
        degenerate = (total <= 0.0) | ((vx == 0.0) & (vy == 0.0))
        return np.where(degenerate, ambient, mixed)
