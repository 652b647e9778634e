"""
Shared test fixtures for the brushstroke test suite.

Engines here are small and seeded so every test is deterministic and fast.
"""

import pytest

from turbulent_brushstrokes.brush.brushstroke_engine import BrushstrokeEngine
from turbulent_brushstrokes.brush.configs import SimParams


class RecordingSurface:
    """Drawing surface that records primitive calls instead of rasterizing."""

    def __init__(self, width=160, height=120):
        self.width = width
        self.height = height
        self.calls = []

    def kinds(self):
        return [c[0] for c in self.calls]

    def clear(self, rgb):
        self.calls.append(("clear", rgb))

    def fade(self, rgb, alpha):
        self.calls.append(("fade", rgb, alpha))

    def polyline(self, points, rgb, width, alpha, cap="round"):
        self.calls.append(("polyline", list(points), rgb, width, alpha, cap))

    def polygon(self, points, rgb, alpha):
        self.calls.append(("polygon", list(points), rgb, alpha))

    def circle(self, center, radius, rgb, alpha):
        self.calls.append(("circle", center, radius, rgb, alpha))

    def resize(self, width, height, background=None):
        self.width = width
        self.height = height
        self.calls.append(("resize", width, height))


# ---------------------------------------------------------------------------
# Params
# ---------------------------------------------------------------------------

@pytest.fixture
def small_params():
    """SimParams with a small population for quick frames."""
    return SimParams(particle_count=50)


# ---------------------------------------------------------------------------
# Engines
# ---------------------------------------------------------------------------

@pytest.fixture
def recording_surface():
    return RecordingSurface()


@pytest.fixture
def engine(small_params, recording_surface):
    """Seeded 160x120 engine drawing into a RecordingSurface."""
    return BrushstrokeEngine(160, 120, params=small_params, seed=1234, surface=recording_surface)


@pytest.fixture
def state(engine):
    return engine.state


@pytest.fixture
def surface_factory():
    """Builds fresh RecordingSurfaces for tests that draw more than once."""
    return RecordingSurface
