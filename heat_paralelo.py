import logging
import os
import threading
import time

from heat_grid import HeatGrid, HeatSimulationError
from heat_diffusion_sequencial import SchedulerState, stencil_slab, commit_slab

logger = logging.getLogger(__name__)


class ParallelRunError(HeatSimulationError):
    """Falha de uma ou mais threads durante a execução paralela."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(
            f"{len(self.errors)} worker(s) falharam; primeiro erro: {self.errors[0]!r}"
        )


# --- Divide as linhas x internas entre os workers ---
def divide_work(size_x, num_workers):
    """
    Retorna num_workers intervalos semiabertos (start, stop) contíguos que
    cobrem [1, size_x - 1). Os tamanhos diferem no máximo em 1; workers
    excedentes recebem intervalos vazios.
    """
    if num_workers < 1:
        raise ValueError(f"num_workers deve ser >= 1 (recebido {num_workers})")

    rows_to_calculate = max(size_x - 2, 0)
    rows_per_worker, remainder = divmod(rows_to_calculate, num_workers)
    divisions = []

    start_row = 1
    for i in range(num_workers):
        end_row = start_row + rows_per_worker + (1 if i < remainder else 0)
        divisions.append((start_row, end_row))
        start_row = end_row

    return divisions


class ParallelScheduler:
    """
    Executa os mesmos passos do SequentialScheduler particionando o eixo x
    em fatias, uma por thread.

    Cada thread roda todos os passos sobre a sua fatia; uma threading.Barrier
    separa a fase do estêncil do commit e o commit do próximo passo. As
    fatias são disjuntas, então nenhum lock é necessário.
    """

    def __init__(self, num_workers=None):
        if num_workers is None:
            num_workers = os.cpu_count() or 1
        if num_workers < 1:
            raise ValueError(f"num_workers deve ser >= 1 (recebido {num_workers})")
        self.num_workers = num_workers
        self.state = SchedulerState.IDLE

    # --- O trabalho de cada thread ---
    def _worker(self, worker_id, division, grid, barrier, errors, errors_lock):
        x_start, x_stop = division
        try:
            for _ in range(grid.steps):
                stencil_slab(grid, x_start, x_stop)
                barrier.wait()
                commit_slab(grid, x_start, x_stop)
                barrier.wait()
        except threading.BrokenBarrierError:
            # Outra thread falhou e abortou a barreira
            logger.debug("Worker %d: barreira quebrada, encerrando", worker_id)
        except BaseException as e:
            # Inclui SystemExit: a barreira precisa ser abortada de qualquer forma
            logger.error("Worker %d (linhas %d-%d) falhou: %s", worker_id, x_start, x_stop - 1, e)
            with errors_lock:
                errors.append(e)
            barrier.abort()

    def run(self, grid):
        self.state = SchedulerState.RUNNING
        divisions = divide_work(grid.size_x, self.num_workers)

        logger.debug("Paralelo: %d passos, divisão de trabalho %s", grid.steps, divisions)

        barrier = threading.Barrier(self.num_workers)
        errors = []
        errors_lock = threading.Lock()
        threads = []

        for i, division in enumerate(divisions):
            t = threading.Thread(
                target=self._worker,
                args=(i, division, grid, barrier, errors, errors_lock),
                name=f"heat-worker-{i}",
            )
            threads.append(t)
            t.start()

        for t in threads:
            t.join()

        self.state = SchedulerState.DONE

        if errors:
            raise ParallelRunError(errors) from errors[0]
        return grid


def heat_diffusion_paralelo(params, num_workers=None):
    """
    Executa a simulação paralela numa grade nova.

    Retorna (tempo_ms, grade).
    """
    grid = HeatGrid.from_params(params)
    scheduler = ParallelScheduler(num_workers)

    start_time = time.perf_counter()
    scheduler.run(grid)
    end_time = time.perf_counter()

    return (end_time - start_time) * 1000, grid
