import math
from collections import deque
from typing import Optional

from .flow_field import FlowField
from .presets import StrokeTechnique
from .strokes import draw_stroke


class Particle:
    """A single advected brushstroke.

    Reads canvas size, blend state and randomness from the shared simulation
    state, so a respawn always samples the current active/target mix.
    """

    def __init__(self, state):
        self.state = state
        self.respawns = 0
        self.respawn()
        self.respawns = 0

    def respawn(self):
        s = self.state
        rng = s.rng
        self.x = rng.uniform(0.0, s.width)
        self.y = rng.uniform(0.0, s.height)
        self.vx = 0.0
        self.vy = 0.0
        self.fx = 0.0
        self.fy = 0.0
        lo, hi = s.params.life_range
        self.life = rng.uniform(lo, hi)
        self.max_life = self.life
        self.color = s.transition.sample_color(rng)
        self.stroke_width = s.transition.sample_width(rng)
        self.stroke_length = s.transition.sample_length(rng)
        self.history = deque(maxlen=max(1, int(round(self.stroke_length))))
        self.respawns += 1

    def apply_force(self, fx: float, fy: float):
        self.fx += fx
        self.fy += fy

    def steer(self, field: FlowField, speed: float):
        """Pushes along the flow vector of the (clamped) cell under the particle."""
        vx, vy = field.lookup(self.x, self.y)
        gain = speed * self.state.params.steer_gain
        self.apply_force(vx * gain, vy * gain)

    def integrate(self):
        self.vx += self.fx
        self.vy += self.fy
        max_speed = self.state.params.max_speed
        speed = math.hypot(self.vx, self.vy)
        if speed > max_speed:
            self.vx *= max_speed / speed
            self.vy *= max_speed / speed
        self.x += self.vx
        self.y += self.vy
        self.fx = 0.0
        self.fy = 0.0
        self.history.append((self.x, self.y))

        self.life -= 1
        if self.life <= 0:
            self.respawn()

    def out_of_bounds(self, width: float, height: float, margin: float) -> bool:
        return (self.x < -margin or self.x > width + margin
                or self.y < -margin or self.y > height + margin)

    def check_edges(self, width: float, height: float, margin: float) -> bool:
        """Respawns the particle if it has left the canvas by more than `margin`."""
        if self.out_of_bounds(width, height, margin) or not (math.isfinite(self.x) and math.isfinite(self.y)):
            self.respawn()
            return True
        return False

    def heading(self) -> float:
        if self.vx == 0.0 and self.vy == 0.0:
            return 0.0
        return math.atan2(self.vy, self.vx)

    def alpha(self) -> float:
        """Fades in after spawn and out before death, peaking at mid-life."""
        if self.max_life <= 0:
            return 0.0
        frac = max(0.0, min(1.0, self.life / self.max_life))
        return self.state.params.max_stroke_alpha * math.sin(math.pi * frac)

    def render(self, surface, technique: StrokeTechnique, alpha: Optional[float] = None):
        if alpha is None:
            alpha = self.alpha()
        draw_stroke(surface, self, technique, alpha, self.state.rng)
