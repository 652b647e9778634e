"""Flow-field brushstroke engine and its period presets."""
from .brushstroke_engine import BrushstrokeEngine, SimParams

__all__ = ["BrushstrokeEngine", "SimParams"]
