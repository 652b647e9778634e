import random
from typing import Optional, Tuple

from .configs import SimParams
from .eddies import EddySystem
from .flow_field import select_preset
from .presets import DEFAULT_PERIOD, Preset, StrokeTechnique, get_preset, next_period


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


class PeriodTransitionController:
    """Active/target period pair, blend progress and the auto-cycle timer.

    progress == 1 means settled on the active preset. A switch resets it to 0
    and it climbs by a fixed step per frame; on reaching 1 the target becomes
    active. Blending always weights the target by (1 - progress).
    """

    def __init__(self, eddies: EddySystem, params: Optional[SimParams] = None, start: str = DEFAULT_PERIOD):
        self.p = params or SimParams()
        self.eddies = eddies
        self.active: Preset = get_preset(start)
        self.target: Preset = self.active
        self.progress = 1.0
        self.cycle_timer = 0.0

    @property
    def blend_weight(self) -> float:
        """Weight toward the target preset."""
        return 1.0 - self.progress

    @property
    def settled(self) -> bool:
        return self.progress >= 1.0

    def request_switch(self, preset_id: str) -> bool:
        """Starts a blend toward `preset_id`. Returns False if it is already the target."""
        preset = get_preset(preset_id)
        if preset is self.target:
            return False
        # Restart from the current active preset, even mid-transition
        self.target = preset
        self.progress = 0.0
        if preset.technique is StrokeTechnique.TURBULENT:
            self.eddies.initialize(self.eddies.width, self.eddies.height, turbulence=preset.turbulence)
        return True

    def tick(self, dt_ms: float):
        self.cycle_timer += dt_ms
        if self.cycle_timer > self.p.period_duration_ms:
            self.request_switch(next_period(self.active.id))
            self.cycle_timer = 0.0

        if self.progress < 1.0:
            self.progress += self.p.transition_step
            if self.progress >= 1.0:
                self.progress = 1.0
                self.active = self.target

    def selected_preset(self) -> Preset:
        return select_preset(self.active, self.target, self.progress)

    def is_turbulent(self) -> bool:
        return self.selected_preset().technique is StrokeTechnique.TURBULENT

    def involves_turbulence(self) -> bool:
        return StrokeTechnique.TURBULENT in (self.active.technique, self.target.technique)

    def blended_speed(self) -> float:
        return _lerp(self.active.speed, self.target.speed, self.blend_weight)

    def blended_complexity(self) -> float:
        return _lerp(self.active.flow_complexity, self.target.flow_complexity, self.blend_weight)

    def blended_background(self) -> Tuple[float, float, float]:
        t = self.blend_weight
        a, b = self.active.background, self.target.background
        return (_lerp(a[0], b[0], t), _lerp(a[1], b[1], t), _lerp(a[2], b[2], t))

    def sample_color(self, rng: random.Random) -> Tuple[float, float, float]:
        c1 = rng.choice(self.active.palette)
        c2 = rng.choice(self.target.palette)
        t = self.blend_weight
        return (_lerp(c1[0], c2[0], t), _lerp(c1[1], c2[1], t), _lerp(c1[2], c2[2], t))

    def _sample_range(self, rng: random.Random, attr: str) -> float:
        t = self.blend_weight
        lo_a, hi_a = getattr(self.active, attr)
        lo_b, hi_b = getattr(self.target, attr)
        return rng.uniform(_lerp(lo_a, lo_b, t), _lerp(hi_a, hi_b, t))

    def sample_width(self, rng: random.Random) -> float:
        return self._sample_range(rng, "width_range")

    def sample_length(self, rng: random.Random) -> float:
        return self._sample_range(rng, "length_range")
