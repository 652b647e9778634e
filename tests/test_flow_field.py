"""Tests for brush/flow_field.py: grid indexing and per-technique direction rules."""

import math
import random

import numpy as np
import pytest

from turbulent_brushstrokes.brush.configs import SimParams
from turbulent_brushstrokes.brush.eddies import EddySystem
from turbulent_brushstrokes.brush.flow_field import FlowField, FlowFieldGenerator, select_preset
from turbulent_brushstrokes.brush.noise import NoiseField
from turbulent_brushstrokes.brush.presets import PRESETS, StrokeTechnique

WIDTH, HEIGHT = 200, 150


@pytest.fixture
def grid():
    return FlowField(WIDTH, HEIGHT, cell_size=20)


@pytest.fixture
def eddies():
    s = EddySystem(SimParams(), rng=random.Random(3))
    s.initialize(WIDTH, HEIGHT)
    return s


@pytest.fixture
def generator():
    return FlowFieldGenerator(SimParams(), np.random.default_rng(3))


@pytest.fixture
def noise():
    return NoiseField(seed=3)


class TestGridShape:
    def test_dimensions(self, grid):
        assert grid.cols == WIDTH // 20 + 1
        assert grid.rows == HEIGHT // 20 + 1
        assert grid.vectors.shape == (grid.rows, grid.cols, 2)

    def test_resize_rebuilds(self, grid):
        grid.resize(400, 100)
        assert (grid.cols, grid.rows) == (21, 6)
        assert grid.vectors.shape == (6, 21, 2)

    def test_rejects_empty_canvas(self):
        with pytest.raises(ValueError):
            FlowField(0, 100)


class TestCellIndex:
    def test_inside(self, grid):
        assert grid.cell_index(45.0, 61.0) == (2, 3)

    def test_far_right_clamps_to_last_column(self, grid):
        col, row = grid.cell_index(WIDTH + 1000.0, 10.0)
        assert col == grid.cols - 1
        assert row == 0

    def test_negative_clamps_to_zero(self, grid):
        assert grid.cell_index(-500.0, -0.1) == (0, 0)

    def test_below_bottom_clamps(self, grid):
        assert grid.cell_index(10.0, HEIGHT + 999.0) == (0, grid.rows - 1)

    def test_non_finite_position(self, grid):
        assert grid.cell_index(float("nan"), float("inf")) == (0, 0)

    def test_lookup_out_of_bounds_reads_edge_cell(self, grid):
        grid.vectors[:, -1] = (0.0, 1.0)
        assert grid.lookup(WIDTH + 1000.0, 50.0) == (0.0, 1.0)


class TestSelectPreset:
    def setup_method(self):
        self.a = PRESETS["nuenen"]
        self.b = PRESETS["starry_night"]

    def test_settled_uses_active(self):
        assert select_preset(self.a, self.b, 1.0) is self.a

    def test_late_transition_uses_active(self):
        assert select_preset(self.a, self.b, 0.6) is self.a

    def test_midpoint_switches_to_target(self):
        assert select_preset(self.a, self.b, 0.5) is self.b

    def test_early_transition_uses_target(self):
        assert select_preset(self.a, self.b, 0.0) is self.b


class TestRecompute:
    @pytest.mark.parametrize("period", list(PRESETS))
    def test_unit_vectors_for_every_technique(self, period, grid, generator, eddies, noise):
        preset = PRESETS[period]
        used = generator.recompute(grid, preset, preset, 1.0, eddies, noise, 0.37)
        assert used is preset
        norms = np.hypot(grid.vectors[..., 0], grid.vectors[..., 1])
        assert np.all(np.isfinite(grid.vectors))
        assert np.allclose(norms, 1.0)

    def test_uses_target_technique_early_in_transition(self, grid, generator, eddies, noise):
        used = generator.recompute(grid, PRESETS["nuenen"], PRESETS["paris"], 0.2, eddies, noise, 0.0)
        assert used.technique is StrokeTechnique.POINTILLIST

    def test_turbulent_matches_eddy_flow(self, grid, generator, eddies, noise):
        preset = PRESETS["starry_night"]
        generator.recompute(grid, preset, preset, 1.0, eddies, noise, 0.0)
        angle = eddies.total_flow(grid.xs[2, 3], grid.ys[2, 3], noise)
        assert grid.vectors[2, 3, 0] == pytest.approx(math.cos(angle))
        assert grid.vectors[2, 3, 1] == pytest.approx(math.sin(angle))

    def test_impasto_is_smooth_in_time(self, grid, generator, eddies, noise):
        preset = PRESETS["nuenen"]
        generator.recompute(grid, preset, preset, 1.0, eddies, noise, 1.0)
        before = grid.vectors.copy()
        generator.recompute(grid, preset, preset, 1.0, eddies, noise, 1.001)
        assert np.abs(grid.vectors - before).max() < 0.1

    def test_pointillist_jitter_changes_every_frame(self, grid, generator, eddies, noise):
        preset = PRESETS["paris"]
        generator.recompute(grid, preset, preset, 1.0, eddies, noise, 1.0)
        before = grid.vectors.copy()
        generator.recompute(grid, preset, preset, 1.0, eddies, noise, 1.0)
        assert not np.allclose(grid.vectors, before)

    def test_directional_leans_diagonal(self, grid, generator, eddies, noise):
        preset = PRESETS["arles"]
        generator.recompute(grid, preset, preset, 1.0, eddies, noise, 0.0)
        mean = grid.vectors.reshape(-1, 2).mean(axis=0)
        assert mean[0] > 0.0 and mean[1] > 0.0

    def test_flowing_drifts_upward(self, generator, eddies, noise):
        # Wide enough that the horizontal sine wave averages out
        wide = FlowField(2000, HEIGHT, cell_size=20)
        preset = PRESETS["almond"]
        generator.recompute(wide, preset, preset, 1.0, eddies, noise, 0.0)
        assert wide.vectors[..., 1].mean() < 0.0
