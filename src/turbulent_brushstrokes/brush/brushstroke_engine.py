"""
This engine is a stylized, realtime Van Gogh brushstroke animation.

High-level approach:
- A particle population advected by a flow field recomputed every frame
- Five period presets, each with its own flow rule and stroke technique
- Starry Night flow from a multi-scale eddy model (Kolmogorov-style cascade)
- Smooth palette/size blending between periods, hard technique switch midway
- Input from the host is queued and applied at the start of the next frame

Inspired by:
- Kolmogorov 1941 (energy cascade in turbulence)
- Aragon et al. 2008 (Kolmogorov scaling in Van Gogh's turbulent paintings)
- Hertzmann 1998 (painterly rendering with curved brush strokes)
"""

import math
import random
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Tuple

import numpy as np

from ..surface import PillowSurface, Surface
from .configs import SimParams
from .eddies import EddySystem
from .flow_field import FlowField, FlowFieldGenerator
from .noise import NoiseField
from .particle import Particle
from .presets import DEFAULT_PERIOD, get_preset, period_order
from .transition import PeriodTransitionController

# Queued command kinds
CMD_SWITCH = "switch"
CMD_PAUSE = "pause"
CMD_RESET = "reset"
CMD_RESIZE = "resize"
CMD_MOUSE = "mouse"
CMD_INFO = "info"


@dataclass
class SimulationState:
    """Everything one animation owns, mutated in place once per frame."""

    width: int
    height: int
    params: SimParams
    rng: random.Random
    np_rng: np.random.Generator
    noise: NoiseField
    eddies: EddySystem
    transition: PeriodTransitionController
    flow: FlowField
    particles: List[Particle] = field(default_factory=list)
    paused: bool = False
    show_info: bool = True
    z_offset: float = 0.0
    frame: int = 0


class BrushstrokeEngine:
    """Host-facing entry points for the brushstroke animation.

    The host calls `step(dt_ms)` once per frame. Every other entry point only
    queues a command; the queue is drained at the top of the next `step`.
    """

    def __init__(self, width: int = 1280, height: int = 720, params: Optional[SimParams] = None,
                 seed: Optional[int] = None, surface: Optional[Surface] = None, start: str = DEFAULT_PERIOD):
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas must have positive size, got {width}x{height}")
        self.p = params or SimParams()
        if seed is None:
            seed = int(time.time() * 1000) & 0xFFFFFFFF
        self.seed = int(seed)

        rng = random.Random(self.seed)
        np_rng = np.random.default_rng(self.seed)
        noise = NoiseField(seed=self.seed, octaves=self.p.noise_octaves, falloff=self.p.noise_falloff)
        eddies = EddySystem(self.p, rng=rng)
        eddies.width, eddies.height = float(width), float(height)
        transition = PeriodTransitionController(eddies, self.p, start=start)

        self.state = SimulationState(
            width=int(width),
            height=int(height),
            params=self.p,
            rng=rng,
            np_rng=np_rng,
            noise=noise,
            eddies=eddies,
            transition=transition,
            flow=FlowField(width, height, self.p.cell_size),
        )
        self.generator = FlowFieldGenerator(self.p, np_rng)
        self.surface = surface if surface is not None else PillowSurface(width, height)
        self._events: Deque[Tuple] = deque()

        self._init_eddies()
        self._spawn_particles()
        self.surface.clear(transition.active.background)
        print(f"[BrushstrokeEngine] Initialized {width}x{height} | Particles: {self.p.particle_count} | Seed: {self.seed} | Period: {transition.active.name}")

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def transition(self) -> PeriodTransitionController:
        return self.state.transition

    @property
    def eddies(self) -> EddySystem:
        return self.state.eddies

    @property
    def particles(self) -> List[Particle]:
        return self.state.particles

    @property
    def paused(self) -> bool:
        return self.state.paused

    def info(self) -> dict:
        """Overlay text for the host: the period being shown or blended toward."""
        target = self.transition.target
        return {
            "name": target.name,
            "description": target.description,
            "period": target.id,
            "progress": self.transition.progress,
            "paused": self.state.paused,
            "show_info": self.state.show_info,
        }

    # ------------------------------------------------------------------
    # Host entry points (queued)
    # ------------------------------------------------------------------

    def switch_period(self, period_id: str):
        get_preset(period_id)  # unknown ids fail here, not mid-frame
        self._events.append((CMD_SWITCH, period_id))

    def toggle_pause(self):
        self._events.append((CMD_PAUSE,))

    def toggle_info(self):
        self._events.append((CMD_INFO,))

    def reset(self):
        self._events.append((CMD_RESET,))

    def resize(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"canvas must have positive size, got {width}x{height}")
        self._events.append((CMD_RESIZE, int(width), int(height)))

    def mouse_moved(self, x: float, y: float):
        self._events.append((CMD_MOUSE, float(x), float(y)))

    def key_pressed(self, key: str) -> bool:
        """Maps a raw key identifier to a command. Returns False for unbound keys."""
        order = period_order()
        if key in ("1", "2", "3", "4", "5") and int(key) <= len(order):
            self.switch_period(order[int(key) - 1])
        elif key == " ":
            self.toggle_pause()
        elif key in ("r", "R"):
            self.reset()
        elif key in ("h", "H"):
            self.toggle_info()
        else:
            return False
        return True

    # ------------------------------------------------------------------
    # Frame
    # ------------------------------------------------------------------

    def step(self, dt_ms: float = 1000.0 / 60.0):
        """Drains queued input, then advances and renders one frame unless paused."""
        self._drain_events()
        s = self.state
        if s.paused:
            return

        tr = s.transition
        self.surface.fade(tr.blended_background(), self.p.trail_fade_alpha)

        tr.tick(dt_ms)
        if tr.involves_turbulence():
            s.eddies.advance(dt_ms / 1000.0)

        preset = self.generator.recompute(s.flow, tr.active, tr.target, tr.progress, s.eddies, s.noise, s.z_offset)
        technique = preset.technique
        speed = tr.blended_speed()
        margin = self.p.edge_margin

        for particle in s.particles:
            particle.steer(s.flow, speed)
            particle.integrate()
            particle.check_edges(s.width, s.height, margin)
            particle.render(self.surface, technique)

        s.z_offset += self.p.field_evolution * tr.blended_complexity()
        s.frame += 1

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _drain_events(self):
        while self._events:
            cmd = self._events.popleft()
            kind = cmd[0]
            if kind == CMD_SWITCH:
                if self.transition.request_switch(cmd[1]):
                    print(f"[BrushstrokeEngine] Switching to {self.transition.target.name}")
            elif kind == CMD_PAUSE:
                self.state.paused = not self.state.paused
                print(f"[BrushstrokeEngine] {'Paused' if self.state.paused else 'Resumed'}")
            elif kind == CMD_INFO:
                self.state.show_info = not self.state.show_info
            elif kind == CMD_RESET:
                self._reset()
            elif kind == CMD_RESIZE:
                self._resize(cmd[1], cmd[2])
            elif kind == CMD_MOUSE:
                self._stir(cmd[1], cmd[2])

    def _init_eddies(self):
        s = self.state
        turbulent = next((p for p in (s.transition.target, s.transition.active) if p.turbulence is not None), None)
        s.eddies.initialize(s.width, s.height, turbulence=turbulent.turbulence if turbulent else None)

    def _spawn_particles(self):
        self.state.particles = [Particle(self.state) for _ in range(self.p.particle_count)]

    def _reset(self):
        s = self.state
        s.z_offset = 0.0
        self._init_eddies()
        self._spawn_particles()
        self.surface.clear(s.transition.active.background)
        print("[BrushstrokeEngine] Reset particles and eddies.")

    def _resize(self, width: int, height: int):
        s = self.state
        s.width, s.height = width, height
        s.flow.resize(width, height)
        self._init_eddies()
        self._spawn_particles()
        if hasattr(self.surface, "resize"):
            self.surface.resize(width, height, s.transition.active.background)
        else:
            self.surface.clear(s.transition.active.background)
        print(f"[BrushstrokeEngine] Resized to {width}x{height}")

    def _stir(self, mx: float, my: float):
        """Tangential push around the cursor, only while Starry Night flow is active."""
        s = self.state
        if not s.transition.is_turbulent():
            return
        radius = self.p.mouse_radius
        strength = self.p.mouse_strength
        for particle in s.particles:
            dx = particle.x - mx
            dy = particle.y - my
            d = math.hypot(dx, dy)
            if d >= radius or d == 0.0:
                continue
            k = strength * (1.0 - d / radius)
            # Perpendicular to the radius, counter-clockwise on screen
            particle.apply_force(-dy / d * k, dx / d * k)
