import enum
import logging
import time

from heat_grid import HeatGrid

logger = logging.getLogger(__name__)


class SchedulerState(enum.Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    DONE = 'done'


# --- Kernel do estêncil (FTCS, 7 pontos) ---

def stencil_cell(T, x, y, z, alpha, dt, dx2, dy2, dz2):
    """
    Próximo valor de uma célula interna a partir dela e dos 6 vizinhos.
    Função pura: só lê T.
    """
    d_tx = (T[x + 1, y, z] - 2 * T[x, y, z] + T[x - 1, y, z]) / dx2
    d_ty = (T[x, y + 1, z] - 2 * T[x, y, z] + T[x, y - 1, z]) / dy2
    d_tz = (T[x, y, z + 1] - 2 * T[x, y, z] + T[x, y, z - 1]) / dz2
    return T[x, y, z] + alpha * dt * (d_tx + d_ty + d_tz)


def stencil_slab(grid, x_start, x_stop):
    """
    Aplica o estêncil em todas as células internas com x_start <= x < x_stop.

    Lê apenas grid.current_grid e escreve apenas a fatia correspondente de
    grid.next_grid. Mesma ordem de operações que stencil_cell.
    """
    if x_start >= x_stop or not grid.has_interior:
        return

    T = grid.current_grid
    dx2 = grid.dx * grid.dx
    dy2 = grid.dy * grid.dy
    dz2 = grid.dz * grid.dz

    # OTIMIZAÇÃO: cálculo vetorizado usando slicing
    center = T[x_start:x_stop, 1:-1, 1:-1]
    d_tx = (T[x_start + 1:x_stop + 1, 1:-1, 1:-1] - 2 * center
            + T[x_start - 1:x_stop - 1, 1:-1, 1:-1]) / dx2
    d_ty = (T[x_start:x_stop, 2:, 1:-1] - 2 * center
            + T[x_start:x_stop, :-2, 1:-1]) / dy2
    d_tz = (T[x_start:x_stop, 1:-1, 2:] - 2 * center
            + T[x_start:x_stop, 1:-1, :-2]) / dz2

    grid.next_grid[x_start:x_stop, 1:-1, 1:-1] = (
        center + grid.alpha * grid.dt * (d_tx + d_ty + d_tz)
    )


def commit_slab(grid, x_start, x_stop):
    """Copia o interior de next_grid para current_grid na fatia [x_start, x_stop)."""
    if x_start >= x_stop or not grid.has_interior:
        return
    grid.current_grid[x_start:x_stop, 1:-1, 1:-1] = grid.next_grid[x_start:x_stop, 1:-1, 1:-1]


# --- Execução sequencial ---

class SequentialScheduler:
    """Executa grid.steps passos do estêncil numa única thread."""

    def __init__(self):
        self.state = SchedulerState.IDLE

    def run(self, grid):
        self.state = SchedulerState.RUNNING
        x_start, x_stop = grid.interior_range()
        logger.debug("Sequencial: %d passos, linhas x [%d, %d)", grid.steps, x_start, x_stop)

        for _ in range(grid.steps):
            # Fase (a): só lê current_grid
            stencil_slab(grid, x_start, x_stop)
            # Fase (b): commit do interior
            commit_slab(grid, x_start, x_stop)

        self.state = SchedulerState.DONE
        return grid


def heat_diffusion_sequencial(params):
    """
    Executa a simulação sequencial numa grade nova.

    Retorna (tempo_ms, grade).
    """
    grid = HeatGrid.from_params(params)
    scheduler = SequentialScheduler()

    start_time = time.perf_counter()
    scheduler.run(grid)
    end_time = time.perf_counter()

    return (end_time - start_time) * 1000, grid
