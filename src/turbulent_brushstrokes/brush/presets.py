"""
Period presets: the five Van Gogh-inspired styles the simulation cycles through.

Each preset bundles a palette, a stroke technique and the stroke/flow
parameters that technique reads. Presets are validated when they are built,
so a malformed palette or range fails at import time, never mid-frame.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

RGB = Tuple[int, int, int]


class PresetConfigError(ValueError):
    """Raised when a preset is malformed or registered twice."""


class StrokeTechnique(Enum):
    IMPASTO = "impasto"
    POINTILLIST = "pointillist"
    DIRECTIONAL = "directional"
    TURBULENT = "turbulent"
    FLOWING = "flowing"


@dataclass(frozen=True)
class TurbulenceParams:
    """Kolmogorov-style eddy settings for the turbulent technique."""

    eddy_count: Optional[int] = None  # None uses SimParams.eddy_count
    cascade_exponent: float = -5.0 / 3.0  # energy ~ scale ** -cascade_exponent
    mixing_exponent: float = 2.0 / 3.0  # turnover speed ~ scale ** -mixing_exponent
    energy_decay: float = 0.3  # how strongly low-energy eddies are down-weighted

    def __post_init__(self):
        if self.eddy_count is not None and (not isinstance(self.eddy_count, int) or self.eddy_count <= 0):
            raise PresetConfigError(f"eddy_count must be a positive integer, got {self.eddy_count!r}")
        if not self.cascade_exponent < 0:
            raise PresetConfigError(f"cascade_exponent must be negative, got {self.cascade_exponent}")
        if self.energy_decay < 0:
            raise PresetConfigError(f"energy_decay must be >= 0, got {self.energy_decay}")


def _check_rgb(label: str, rgb) -> None:
    if len(rgb) != 3 or any(not (0 <= c <= 255) for c in rgb):
        raise PresetConfigError(f"{label} must be an RGB triple in 0..255, got {rgb!r}")


def _check_range(label: str, rng) -> None:
    lo, hi = rng
    if not (lo > 0 and hi > 0):
        raise PresetConfigError(f"{label} bounds must be > 0, got {rng!r}")
    if lo > hi:
        raise PresetConfigError(f"{label} is inverted: {rng!r}")


@dataclass(frozen=True)
class Preset:
    """Immutable description of one stylistic period."""

    id: str
    name: str
    description: str
    palette: Tuple[RGB, ...]
    background: RGB
    technique: StrokeTechnique
    length_range: Tuple[float, float]
    width_range: Tuple[float, float]
    curvature: float
    flow_complexity: float
    speed: float
    turbulence: Optional[TurbulenceParams] = None

    def __post_init__(self):
        if not self.palette:
            raise PresetConfigError(f"preset {self.id!r} has an empty palette")
        for rgb in self.palette:
            _check_rgb(f"preset {self.id!r} palette entry", rgb)
        _check_rgb(f"preset {self.id!r} background", self.background)
        if not isinstance(self.technique, StrokeTechnique):
            raise PresetConfigError(f"preset {self.id!r} has unknown technique {self.technique!r}")
        _check_range(f"preset {self.id!r} length_range", self.length_range)
        _check_range(f"preset {self.id!r} width_range", self.width_range)
        if self.curvature < 0 or self.flow_complexity < 0:
            raise PresetConfigError(f"preset {self.id!r} coefficients must be >= 0")
        if not (self.speed > 0 and math.isfinite(self.speed)):
            raise PresetConfigError(f"preset {self.id!r} speed must be > 0, got {self.speed}")
        if self.technique is StrokeTechnique.TURBULENT and self.turbulence is None:
            raise PresetConfigError(f"turbulent preset {self.id!r} needs turbulence parameters")
        if self.technique is not StrokeTechnique.TURBULENT and self.turbulence is not None:
            raise PresetConfigError(f"preset {self.id!r} is not turbulent but sets turbulence parameters")


# Registry of presets, in auto-cycle order
PRESETS: Dict[str, Preset] = {}


def register_preset(preset: Preset) -> Preset:
    """Register a preset. Duplicate ids are a configuration error."""
    if preset.id in PRESETS:
        raise PresetConfigError(f"preset {preset.id!r} is already registered")
    PRESETS[preset.id] = preset
    return preset


def get_preset(preset_id: str) -> Preset:
    try:
        return PRESETS[preset_id]
    except KeyError:
        raise ValueError(f"unknown period {preset_id!r}; expected one of {list(PRESETS)}") from None


def period_order() -> List[str]:
    return list(PRESETS.keys())


def next_period(preset_id: str) -> str:
    """The period after `preset_id` in the fixed cyclic order."""
    order = period_order()
    return order[(order.index(preset_id) + 1) % len(order)]


NUENEN = register_preset(Preset(
    id="nuenen",
    name="The Potato Eaters",
    description="Nuenen, 1885 - Earth and shadows",
    palette=(
        (72, 60, 50),     # dark brown
        (101, 83, 67),    # warm brown
        (139, 119, 92),   # ochre
        (62, 54, 46),     # deep shadow
        (156, 136, 104),  # light earth
        (45, 40, 35),     # near black
    ),
    background=(25, 22, 18),
    technique=StrokeTechnique.IMPASTO,
    length_range=(3.0, 8.0),
    width_range=(4.0, 9.0),
    curvature=0.3,
    flow_complexity=0.6,
    speed=0.8,
))

PARIS = register_preset(Preset(
    id="paris",
    name="Impressionist Light",
    description="Paris, 1886-87 - Discovery of color",
    palette=(
        (180, 160, 200),  # soft violet
        (200, 180, 140),  # warm cream
        (140, 170, 180),  # pale blue
        (190, 170, 150),  # soft peach
        (160, 180, 160),  # sage green
        (210, 190, 170),  # light rose
    ),
    background=(40, 38, 45),
    technique=StrokeTechnique.POINTILLIST,
    length_range=(1.0, 2.0),
    width_range=(2.0, 5.0),
    curvature=0.1,
    flow_complexity=0.4,
    speed=1.0,
))

ARLES = register_preset(Preset(
    id="arles",
    name="Sunflowers",
    description="Arles, 1888 - Yellow and blue ecstasy",
    palette=(
        (255, 200, 50),   # sunflower yellow
        (255, 170, 30),   # deep gold
        (60, 80, 170),    # cobalt blue
        (255, 220, 100),  # pale yellow
        (40, 60, 130),    # prussian blue
        (200, 140, 40),   # amber
    ),
    background=(20, 25, 50),
    technique=StrokeTechnique.DIRECTIONAL,
    length_range=(8.0, 16.0),
    width_range=(2.0, 5.0),
    curvature=0.5,
    flow_complexity=0.5,
    speed=1.2,
))

STARRY_NIGHT = register_preset(Preset(
    id="starry_night",
    name="Starry Night",
    description="Saint-Remy, 1889 - Turbulent skies",
    palette=(
        (40, 60, 130),    # deep blue
        (70, 100, 170),   # mid blue
        (255, 230, 120),  # star yellow
        (100, 140, 190),  # sky blue
        (30, 45, 100),    # night blue
        (255, 200, 80),   # warm yellow
        (50, 80, 150),    # swirl blue
    ),
    background=(15, 20, 40),
    technique=StrokeTechnique.TURBULENT,
    length_range=(12.0, 30.0),
    width_range=(1.5, 4.0),
    curvature=1.0,
    flow_complexity=1.0,
    speed=1.5,
    turbulence=TurbulenceParams(),
))

ALMOND = register_preset(Preset(
    id="almond",
    name="Almond Blossoms",
    description="Saint-Remy, 1890 - Serenity",
    palette=(
        (130, 180, 200),  # sky blue
        (255, 250, 250),  # white blossom
        (180, 140, 100),  # branch brown
        (160, 200, 210),  # pale blue
        (255, 220, 220),  # pink blush
        (100, 160, 180),  # deeper blue
    ),
    background=(60, 100, 120),
    technique=StrokeTechnique.FLOWING,
    length_range=(10.0, 24.0),
    width_range=(1.0, 3.0),
    curvature=0.6,
    flow_complexity=0.3,
    speed=0.7,
))

DEFAULT_PERIOD = STARRY_NIGHT.id
