#!/usr/bin/env python3
import logging
import time

import numpy as np
import pandas as pd

from heat_grid import HeatGrid, DEFAULT_PARAMS
from heat_diffusion_sequencial import SequentialScheduler, heat_diffusion_sequencial
from heat_paralelo import ParallelScheduler, heat_diffusion_paralelo

logger = logging.getLogger(__name__)

TAMANHOS = [20, 40, 60, 80]
NUM_THREADS = [1, 2, 4]
ITERACOES = 100

COLUNAS = ['Versao', 'Tamanho', 'Iteracoes', 'Threads_Workers', 'Tempo_ms']


def print_section(title):
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def _timed_run(scheduler, grid):
    start_time = time.perf_counter()
    scheduler.run(grid)
    return (time.perf_counter() - start_time) * 1000


# ---------------------------------------------------------
# Harness: sequencial vs paralelo numa mesma requisição
# ---------------------------------------------------------

def run_benchmark(params=DEFAULT_PARAMS, num_workers=None, fresh_grid=False, grid=None):
    """
    Cronometra uma execução sequencial e depois uma paralela.

    Com fresh_grid=False as duas execuções usam a MESMA grade, sem
    reinicialização: a paralela parte do estado deixado pela sequencial.
    O custo por passo é o mesmo, então a comparação de tempo continua válida.
    Com fresh_grid=True a grade volta à condição inicial antes da paralela.
    Se grid for passado, é usado no lugar de uma grade nova (e fica com o
    estado final para quem chamou).

    Retorna {'SequentialTime': ms, 'ParallelTime': ms}.
    """
    if grid is None:
        grid = HeatGrid.from_params(params)

    sequential_time = _timed_run(SequentialScheduler(), grid)
    logger.info("Sequencial: %.2f ms", sequential_time)

    if fresh_grid:
        grid.reset()

    parallel_time = _timed_run(ParallelScheduler(num_workers), grid)
    logger.info("Paralelo: %.2f ms", parallel_time)

    return {
        'SequentialTime': sequential_time,
        'ParallelTime': parallel_time,
    }


def check_correctness(C_seq, C_test, test_name, atol=1e-9):
    if C_test is None:
        logger.warning("[%s] Resultado nulo. Provável erro de execução.", test_name)
        return False

    if np.allclose(C_seq, C_test, atol=atol):
        logger.info("[%s] OK (dentro da tolerância).", test_name)
        return True

    logger.warning("[%s] Resultados diferentes do sequencial.", test_name)
    return False


# ---------------------------------------------------------
# Varredura: tamanhos x número de threads
# ---------------------------------------------------------

def benchmark_sweep(sizes=TAMANHOS, thread_counts=NUM_THREADS, steps=ITERACOES, base_params=DEFAULT_PARAMS):
    results = []

    for N in sizes:
        params = base_params._replace(size_x=N, size_y=N, size_z=N, steps=steps)

        tempo_seq, grid_seq = heat_diffusion_sequencial(params)
        logger.info("%dx%dx%d sequencial: %.2f ms", N, N, N, tempo_seq)
        results.append({
            'Versao': 'Sequencial',
            'Tamanho': N,
            'Iteracoes': steps,
            'Threads_Workers': 1,
            'Tempo_ms': tempo_seq,
        })

        for threads in thread_counts:
            tempo_par, grid_par = heat_diffusion_paralelo(params, threads)
            logger.info("%dx%dx%d com %d thread(s): %.2f ms", N, N, N, threads, tempo_par)
            check_correctness(grid_seq.current_grid, grid_par.current_grid,
                              f"Paralela {N}^3, {threads} threads")
            results.append({
                'Versao': 'Paralela',
                'Tamanho': N,
                'Iteracoes': steps,
                'Threads_Workers': threads,
                'Tempo_ms': tempo_par,
            })

    return pd.DataFrame(results, columns=COLUNAS)


def generate_analysis(df):
    """Speedup e eficiência de cada execução paralela contra a sequencial do mesmo tamanho."""
    seq = df[df['Versao'] == 'Sequencial'].set_index('Tamanho')['Tempo_ms']
    par = df[df['Versao'] == 'Paralela'].copy()

    if par.empty:
        return pd.DataFrame(columns=['Tamanho', 'Threads_Workers', 'Tempo_ms', 'Speedup', 'Eficiencia'])

    tempo_seq = par['Tamanho'].map(seq)
    par['Speedup'] = np.where(par['Tempo_ms'] > 0, tempo_seq / par['Tempo_ms'], 0.0)
    par['Eficiencia'] = par['Speedup'] / par['Threads_Workers'] * 100

    return par[['Tamanho', 'Threads_Workers', 'Tempo_ms', 'Speedup', 'Eficiencia']].reset_index(drop=True)


def save_results(df, output_file):
    df.to_csv(output_file, index=False)
    logger.info("Dados salvos em: %s", output_file)


def print_analysis(analysis):
    print_section("ANÁLISE DE RESULTADOS")

    for tamanho, grupo in analysis.groupby('Tamanho'):
        print(f"\n{tamanho}x{tamanho}x{tamanho}:")
        for _, row in grupo.iterrows():
            print(f"  {int(row['Threads_Workers'])} thread(s): {row['Tempo_ms']:>10.2f}ms | "
                  f"Speedup: {row['Speedup']:.2f}x | Eficiência: {row['Eficiencia']:.1f}%")
