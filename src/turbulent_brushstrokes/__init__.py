"""
Turbulent Brushstrokes.

Copyright (c) 2026 Turbulent Brushstrokes contributors
SPDX-License-Identifier: MIT OR Apache-2.0
"""
from .brush.brushstroke_engine import BrushstrokeEngine
from .brush.configs import SimParams
from .brush.presets import PRESETS, Preset, StrokeTechnique
from .surface import PillowSurface

__version__ = "1.0.0"
__license__ = "MIT"
__all__ = ["BrushstrokeEngine", "SimParams", "PRESETS", "Preset", "StrokeTechnique", "PillowSurface"]
