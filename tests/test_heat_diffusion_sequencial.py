import numpy as np
import pytest

from heat_grid import HeatGrid, SimulationParams, initialize_grid
from heat_diffusion_sequencial import (
    SchedulerState, SequentialScheduler, commit_slab, heat_diffusion_sequencial,
    stencil_cell, stencil_slab,
)


def boundary_mask(shape):
    sx, sy, sz = shape
    mask = np.zeros(shape, dtype=bool)
    mask[0, :, :] = True
    mask[-1, :, :] = True
    mask[:, 0, :] = True
    mask[:, -1, :] = True
    mask[:, :, 0] = True
    mask[:, :, -1] = True
    return mask


def test_single_step_closed_form():
    grid = HeatGrid(5, 5, 5, alpha=0.5, dx=1.0, dy=1.0, dz=1.0, dt=0.1, steps=1)
    assert grid.read(4, 2, 2) == 300.0

    SequentialScheduler().run(grid)

    assert grid.read(4, 2, 2) == 300.0
    assert grid.read(1, 2, 2) == pytest.approx(5.0)


def test_stencil_cell_is_pure():
    T = initialize_grid(5, 5, 5)
    before = T.copy()
    value = stencil_cell(T, 1, 2, 2, 0.5, 0.1, 1.0, 1.0, 1.0)
    assert value == pytest.approx(5.0)
    np.testing.assert_array_equal(T, before)


def test_stencil_slab_matches_cell_formula():
    rng = np.random.default_rng(0)
    grid = HeatGrid(6, 5, 7, alpha=0.3, dx=1.0, dy=0.8, dz=1.2, dt=0.05)
    grid.current_grid[:] = rng.uniform(0, 300, size=grid.shape)

    stencil_slab(grid, 1, 5)

    for x in range(1, 5):
        for y in range(1, 4):
            for z in range(1, 6):
                expected = stencil_cell(grid.current_grid, x, y, z, grid.alpha, grid.dt,
                                        grid.dx ** 2, grid.dy ** 2, grid.dz ** 2)
                assert grid.next_grid[x, y, z] == pytest.approx(expected, rel=1e-12)


def test_stencil_slab_only_writes_its_rows_of_next():
    grid = HeatGrid(8, 5, 5)
    current_before = grid.snapshot()

    stencil_slab(grid, 3, 5)

    np.testing.assert_array_equal(grid.current_grid, current_before)
    assert not grid.next_grid[:3].any()
    assert not grid.next_grid[5:].any()


def test_commit_slab_copies_interior_only():
    grid = HeatGrid(5, 5, 5)
    grid.next_grid[:] = -1.0
    commit_slab(grid, 1, 4)

    mask = boundary_mask(grid.shape)
    assert (grid.current_grid[~mask] == -1.0).all()
    np.testing.assert_array_equal(grid.current_grid[mask], initialize_grid(5, 5, 5)[mask])


def test_empty_slab_does_nothing():
    grid = HeatGrid(5, 5, 5)
    stencil_slab(grid, 3, 3)
    commit_slab(grid, 3, 3)
    assert not grid.next_grid.any()


@pytest.mark.parametrize("shape", [(3, 3, 3), (6, 4, 5), (8, 8, 8)])
def test_boundary_cells_never_change(shape):
    grid = HeatGrid(*shape, steps=25)
    mask = boundary_mask(shape)
    initial = grid.snapshot()

    SequentialScheduler().run(grid)

    np.testing.assert_array_equal(grid.current_grid[mask], initial[mask])


@pytest.mark.parametrize("shape", [(1, 5, 5), (5, 1, 5), (5, 5, 1), (2, 2, 2), (2, 6, 6)])
def test_degenerate_grid_is_unchanged(shape):
    grid = HeatGrid(*shape, steps=10)
    initial = grid.snapshot()

    SequentialScheduler().run(grid)

    np.testing.assert_array_equal(grid.current_grid, initial)


def test_zero_steps_leaves_grid_untouched():
    grid = HeatGrid(5, 5, 5, steps=0)
    initial = grid.snapshot()
    SequentialScheduler().run(grid)
    np.testing.assert_array_equal(grid.current_grid, initial)


def test_max_change_is_non_increasing_for_stable_parameters():
    grid = HeatGrid(10, 10, 10, alpha=0.5, dt=0.1, steps=1)
    scheduler = SequentialScheduler()

    changes = []
    previous = grid.snapshot()
    for _ in range(60):
        scheduler.run(grid)
        changes.append(np.max(np.abs(grid.current_grid - previous)))
        previous = grid.snapshot()

    for earlier, later in zip(changes, changes[1:]):
        assert later <= earlier + 1e-12
    assert changes[-1] < changes[0]


def test_unstable_parameters_diverge_without_error():
    grid = HeatGrid(8, 8, 8, alpha=1.0, dt=1.0, steps=60)
    assert grid.stability_factor() > 1.0 / 6.0

    SequentialScheduler().run(grid)

    interior = grid.current_grid[1:-1, 1:-1, 1:-1]
    assert not np.isfinite(interior).all() or np.abs(interior).max() > 1e6


def test_scheduler_states():
    scheduler = SequentialScheduler()
    assert scheduler.state is SchedulerState.IDLE
    scheduler.run(HeatGrid(4, 4, 4, steps=2))
    assert scheduler.state is SchedulerState.DONE


def test_heat_diffusion_sequencial_returns_time_and_grid():
    params = SimulationParams(6, 6, 6, steps=5)
    tempo_ms, grid = heat_diffusion_sequencial(params)

    assert tempo_ms >= 0
    assert isinstance(grid, HeatGrid)
    assert grid.shape == (6, 6, 6)
    assert grid.read(1, 3, 3) > 0.0
