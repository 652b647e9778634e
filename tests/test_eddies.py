"""Tests for brush/eddies.py: eddy layout, energy cascade and influence."""

import math
import random

import numpy as np
import pytest

from turbulent_brushstrokes.brush.configs import SimParams
from turbulent_brushstrokes.brush.eddies import Eddy, EddySystem, _tier_counts
from turbulent_brushstrokes.brush.noise import NoiseField
from turbulent_brushstrokes.brush.presets import TurbulenceParams

WIDTH, HEIGHT = 800, 600


@pytest.fixture
def system():
    s = EddySystem(SimParams(), rng=random.Random(11))
    s.initialize(WIDTH, HEIGHT)
    return s


@pytest.fixture
def noise():
    return NoiseField(seed=5)


def _eddy(x=0.0, y=0.0, scale=100.0, rotation=1):
    return Eddy(x=x, y=y, base_scale=scale, rotation=rotation, phase=0.0, speed=1.0)


class TestInitialize:
    def test_default_count(self, system):
        assert len(system.eddies) == 14

    def test_tier_split(self):
        assert _tier_counts(14) == (5, 5, 4)
        assert sum(_tier_counts(7)) == 7
        assert sum(_tier_counts(1)) == 1

    def test_large_tier_in_upper_half(self, system):
        large = system.eddies[:5]
        for e in large:
            assert 150.0 <= e.base_scale <= 300.0
            assert 0.0 <= e.y <= HEIGHT / 2.0

    def test_medium_and_small_scales(self, system):
        for e in system.eddies[5:10]:
            assert 80.0 <= e.base_scale <= 150.0
        for e in system.eddies[10:]:
            assert 40.0 <= e.base_scale <= 80.0

    def test_rotation_is_a_sign(self, system):
        assert {e.rotation for e in system.eddies} <= {-1, 1}

    def test_reinitialize_replaces_eddies(self, system):
        before = list(system.eddies)
        system.reinitialize()
        assert len(system.eddies) == 14
        assert not any(old is new for old in before for new in system.eddies)

    def test_custom_count_from_turbulence(self, system):
        system.initialize(WIDTH, HEIGHT, turbulence=TurbulenceParams(eddy_count=9))
        assert len(system.eddies) == 9

    def test_count_falls_back_to_params(self):
        s = EddySystem(SimParams(eddy_count=7), rng=random.Random(3))
        s.initialize(WIDTH, HEIGHT, turbulence=TurbulenceParams())
        assert len(s.eddies) == 7

    def test_repeated_initialize_does_not_accumulate(self, system):
        for _ in range(3):
            system.initialize(WIDTH, HEIGHT)
        assert len(system.eddies) == 14


class TestEnergy:
    def test_larger_eddies_hold_more_energy(self):
        assert _eddy(scale=300.0).energy >= _eddy(scale=40.0).energy

    def test_energy_monotonic_in_scale(self):
        energies = [_eddy(scale=s).energy for s in (40, 80, 150, 300)]
        assert energies == sorted(energies)

    def test_energy_power_law(self):
        e = _eddy(scale=100.0)
        assert e.energy == pytest.approx(100.0 ** (5.0 / 3.0))

    def test_energy_fixed_while_scale_breathes(self, system):
        before = system.energies()
        system.advance(1.0)
        assert system.energies() == before


class TestAdvance:
    def test_phase_increases(self, system):
        phases = [e.phase for e in system.eddies]
        system.advance(0.5)
        assert all(e.phase > p for e, p in zip(system.eddies, phases))

    def test_scale_oscillation_bounded(self, system):
        for _ in range(200):
            system.advance(0.1)
            for e in system.eddies:
                assert 0.8 * e.base_scale - 1e-9 <= e.scale <= 1.2 * e.base_scale + 1e-9
                assert e.scale > 0.0

    def test_small_eddies_turn_faster(self):
        s = EddySystem(SimParams(), rng=random.Random(0))
        big, small = _eddy(scale=300.0), _eddy(scale=40.0)
        s.eddies = [big, small]
        s.advance(1.0)
        assert small.phase > big.phase


class TestSampleInfluence:
    def test_cutoff_beyond_three_scales(self, system):
        e = _eddy(scale=50.0)
        assert system.sample_influence(e, 151.0, 0.0) is None

    def test_inside_cutoff(self, system):
        e = _eddy(scale=50.0)
        inf = system.sample_influence(e, 149.0, 0.0)
        assert inf is not None
        assert inf.strength == pytest.approx(math.exp(-149.0 / 50.0))

    def test_centre_is_defined(self, system):
        e = _eddy(x=10.0, y=20.0, scale=60.0)
        inf = system.sample_influence(e, 10.0, 20.0)
        assert inf.strength == 1.0
        assert math.isfinite(inf.angle)

    def test_tangential_direction(self):
        s = EddySystem(SimParams(spiral_coeff=0.0), rng=random.Random(0))
        e = _eddy(scale=100.0, rotation=1)
        inf = s.sample_influence(e, 50.0, 0.0)
        # Radius points along +x, so the tangent points along +y
        assert math.cos(inf.angle) == pytest.approx(0.0, abs=1e-12)
        assert math.sin(inf.angle) == pytest.approx(1.0)

    def test_rotation_sign_flips_tangent(self):
        s = EddySystem(SimParams(spiral_coeff=0.0), rng=random.Random(0))
        inf = s.sample_influence(_eddy(rotation=-1), 50.0, 0.0)
        assert math.sin(inf.angle) == pytest.approx(-1.0)

    def test_spiral_term_grows_with_distance(self, system):
        e = _eddy(scale=100.0)
        near = system.sample_influence(e, 10.0, 0.0).angle
        far = system.sample_influence(e, 200.0, 0.0).angle
        spiral = system.p.spiral_coeff
        assert near == pytest.approx(math.pi / 2.0 + spiral * 10.0)
        assert far == pytest.approx(math.pi / 2.0 + spiral * 200.0)


class TestTotalFlow:
    def test_finite_everywhere(self, system, noise):
        for x in (0.0, 123.0, 400.0, 799.0):
            for y in (0.0, 300.0, 599.0):
                assert math.isfinite(system.total_flow(x, y, noise))

    def test_no_eddies_falls_back_to_ambient(self, system, noise):
        system.eddies = []
        assert system.total_flow(50.0, 60.0, noise) == pytest.approx(float(system.ambient_angle(50.0, 60.0, noise)))

    def test_at_eddy_centre(self, system, noise):
        e = system.eddies[0]
        assert math.isfinite(system.total_flow(e.x, e.y, noise))

    def test_grid_matches_pointwise(self, system, noise):
        xs, ys = np.meshgrid(np.arange(0, WIDTH, 97.0), np.arange(0, HEIGHT, 83.0))
        grid = system.total_flow_grid(xs, ys, noise)
        for (r, c), angle in np.ndenumerate(grid):
            point = system.total_flow(xs[r, c], ys[r, c], noise)
            assert math.cos(angle) == pytest.approx(math.cos(point), abs=1e-9)
            assert math.sin(angle) == pytest.approx(math.sin(point), abs=1e-9)

    def test_dominated_by_single_eddy_near_centre(self, noise):
        s = EddySystem(SimParams(spiral_coeff=0.0, ambient_weight=0.0), rng=random.Random(0))
        s.eddies = [_eddy(x=400.0, y=300.0, scale=100.0, rotation=1)]
        angle = s.total_flow(450.0, 300.0, noise)
        assert math.sin(angle) == pytest.approx(1.0)
