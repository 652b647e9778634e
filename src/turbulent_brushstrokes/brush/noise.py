"""
Smooth pseudo-random scalar field.

Lattice value noise: random values on an integer lattice, blended with a
smoothstep kernel and summed over several octaves. Deterministic for a given
seed and continuous in (x, y, z).
"""

from typing import Optional

import numpy as np

TABLE_SIZE = 256


class NoiseField:
    """Fractal value noise returning values in [0, 1)."""

    def __init__(self, seed: Optional[int] = None, octaves: int = 4, falloff: float = 0.5):
        rng = np.random.default_rng(seed)
        self.octaves = int(octaves)
        self.falloff = float(falloff)
        self._values = rng.random(TABLE_SIZE)
        perm = rng.permutation(TABLE_SIZE)
        # Doubled so perm[perm[i] + j] never needs a second wrap
        self._perm = np.concatenate([perm, perm])

    def _lattice(self, ix, iy, iz):
        p = self._perm
        h = p[p[p[ix % TABLE_SIZE] + iy % TABLE_SIZE] + iz % TABLE_SIZE]
        return self._values[h]

    def _octave(self, x, y, z):
        x0 = np.floor(x)
        y0 = np.floor(y)
        z0 = np.floor(z)
        fx, fy, fz = x - x0, y - y0, z - z0
        ix, iy, iz = x0.astype(np.int64), y0.astype(np.int64), z0.astype(np.int64)

        # Smoothstep weights keep the field C1-continuous across lattice cells
        sx = fx * fx * (3.0 - 2.0 * fx)
        sy = fy * fy * (3.0 - 2.0 * fy)
        sz = fz * fz * (3.0 - 2.0 * fz)

        c000 = self._lattice(ix, iy, iz)
        c100 = self._lattice(ix + 1, iy, iz)
        c010 = self._lattice(ix, iy + 1, iz)
        c110 = self._lattice(ix + 1, iy + 1, iz)
        c001 = self._lattice(ix, iy, iz + 1)
        c101 = self._lattice(ix + 1, iy, iz + 1)
        c011 = self._lattice(ix, iy + 1, iz + 1)
        c111 = self._lattice(ix + 1, iy + 1, iz + 1)

        x00 = c000 + (c100 - c000) * sx
        x10 = c010 + (c110 - c010) * sx
        x01 = c001 + (c101 - c001) * sx
        x11 = c011 + (c111 - c011) * sx
        y0v = x00 + (x10 - x00) * sy
        y1v = x01 + (x11 - x01) * sy
        return y0v + (y1v - y0v) * sz

    def sample_grid(self, x, y, z=0.0) -> np.ndarray:
        """Vectorized sampling; x, y, z broadcast against each other."""
        x, y, z = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64),
            np.asarray(y, dtype=np.float64),
            np.asarray(z, dtype=np.float64),
        )
        total = np.zeros(x.shape, dtype=np.float64)
        amp = 1.0
        freq = 1.0
        norm = 0.0
        for _ in range(self.octaves):
            total += amp * self._octave(x * freq, y * freq, z * freq)
            norm += amp
            amp *= self.falloff
            freq *= 2.0
        # Convex combination of values in [0, 1); guard against rounding up to 1.0
        return np.minimum(total / norm, np.nextafter(1.0, 0.0))

    def sample(self, x: float, y: float, z: float = 0.0) -> float:
        return float(self.sample_grid(x, y, z))
