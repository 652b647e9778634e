from dataclasses import dataclass, field
from typing import Tuple

@dataclass
class SimParams:
    """User-adjustable parameters for the brushstroke simulation."""

    # --- [NORMAL] Population ---
    particle_count: int = field(default=2000, metadata={"help": "Number of brushstroke particles on the canvas.", "category": "Normal", "min": 1, "max": 10000})
    life_range: Tuple[float, float] = field(default=(100.0, 400.0), metadata={"help": "Particle lifespan range in frames.", "category": "Normal"})

    # --- [NORMAL] Motion ---
    cell_size: int = field(default=20, metadata={"help": "Size of one flow field cell in pixels.", "category": "Normal", "min": 4, "max": 100})
    max_speed: float = field(default=4.0, metadata={"help": "Maximum particle speed in pixels per frame.", "category": "Normal", "min": 0.5, "max": 20.0})
    steer_gain: float = field(default=0.5, metadata={"help": "Fraction of the flow vector applied as force each frame.", "category": "Normal", "min": 0.0, "max": 2.0})
    edge_margin: float = field(default=10.0, metadata={"help": "Distance outside the canvas before a particle respawns.", "category": "Normal", "min": 0.0, "max": 200.0})

    # --- [NORMAL] Periods ---
    period_duration_ms: float = field(default=30000.0, metadata={"help": "Milliseconds before auto-cycling to the next period.", "category": "Normal", "min": 1000.0, "max": 600000.0})
    transition_step: float = field(default=0.005, metadata={"help": "Transition progress added per frame during a period change.", "category": "Normal", "min": 0.0001, "max": 1.0})

    # --- [NORMAL] Visuals ---
    trail_fade_alpha: float = field(default=0.05, metadata={"help": "Opacity of the background wash drawn each frame (trail length).", "category": "Normal", "min": 0.0, "max": 1.0})
    max_stroke_alpha: float = field(default=0.8, metadata={"help": "Peak opacity of a stroke at mid-life.", "category": "Normal", "min": 0.0, "max": 1.0})

    # --- [NORMAL] Interaction ---
    mouse_radius: float = field(default=200.0, metadata={"help": "Radius of the cursor swirl in pixels.", "category": "Normal", "min": 10.0, "max": 1000.0})
    mouse_strength: float = field(default=0.5, metadata={"help": "Tangential impulse at the cursor position.", "category": "Normal", "min": 0.0, "max": 5.0})

    # --- [ADVANCED] Noise Field ---
    noise_step: float = field(default=0.1, metadata={"help": "Noise-space distance between adjacent cells.", "category": "Advanced", "min": 0.001, "max": 1.0})
    field_evolution: float = field(default=0.002, metadata={"help": "Noise time advance per frame (scaled by flow complexity).", "category": "Advanced", "min": 0.0, "max": 0.1})
    noise_octaves: int = field(default=4, metadata={"help": "Octaves summed by the noise field.", "category": "Advanced", "min": 1, "max": 8})
    noise_falloff: float = field(default=0.5, metadata={"help": "Amplitude falloff between noise octaves.", "category": "Advanced", "min": 0.1, "max": 0.9})

    # --- [ADVANCED] Eddies ---
    eddy_count: int = field(default=14, metadata={"help": "Default number of eddies for turbulent periods.", "category": "Advanced", "min": 1, "max": 64})
    large_eddy_scale: Tuple[float, float] = field(default=(150.0, 300.0), metadata={"help": "Scale range of the large eddy tier (upper half of canvas).", "category": "Advanced"})
    medium_eddy_scale: Tuple[float, float] = field(default=(80.0, 150.0), metadata={"help": "Scale range of the medium eddy tier.", "category": "Advanced"})
    small_eddy_scale: Tuple[float, float] = field(default=(40.0, 80.0), metadata={"help": "Scale range of the small eddy tier.", "category": "Advanced"})
    eddy_oscillation: float = field(default=0.2, metadata={"help": "Relative amplitude of eddy scale breathing.", "category": "Advanced", "min": 0.0, "max": 0.9})
    eddy_cutoff: float = field(default=3.0, metadata={"help": "Influence cutoff in multiples of eddy scale.", "category": "Advanced", "min": 0.5, "max": 10.0})
    eddy_reference_scale: float = field(default=100.0, metadata={"help": "Scale at which eddies turn over at their base angular speed.", "category": "Advanced", "min": 1.0, "max": 1000.0})
    spiral_coeff: float = field(default=0.004, metadata={"help": "Spiral twist per pixel of distance from an eddy centre.", "category": "Advanced", "min": 0.0, "max": 0.1})
    ambient_weight: float = field(default=0.15, metadata={"help": "Weight of the background noise direction in turbulent flow.", "category": "Advanced", "min": 0.0, "max": 1.0})

    def __post_init__(self):
        for name in ("life_range", "large_eddy_scale", "medium_eddy_scale", "small_eddy_scale"):
            lo, hi = getattr(self, name)
            if not (0 < lo <= hi):
                raise ValueError(f"{name} must satisfy 0 < min <= max, got {(lo, hi)!r}")
