#!/usr/bin/env python3
"""
Difusão de calor 3D: sequencial vs paralelo

Exemplos:
    # Uma requisição com os valores padrão (100^3, 1000 passos)
    python main.py simulate

    # Grade menor, 4 threads, grade reinicializada antes da execução paralela
    python main.py simulate --size-x 50 --size-y 50 --size-z 50 --steps 200 --workers 4 --fresh-grid

    # Varredura de tamanhos e threads com resultado em CSV
    python main.py benchmark --sizes 20 40 60 --threads 1 2 4 --steps 100 --output resultados_benchmark.csv
"""
import argparse
import json
import logging
import sys

from heat_grid import DEFAULT_PARAMS, HeatGrid, HeatSimulationError, SimulationParams, stability_factor
from benchmark_complete import (
    ITERACOES, NUM_THREADS, TAMANHOS,
    benchmark_sweep, generate_analysis, print_analysis, run_benchmark, save_results,
)
from logging_config import setup_logging
from render import save_image, slice_to_rgb

logger = logging.getLogger(__name__)

LIMITE_ESTABILIDADE = 1.0 / 6.0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Difusão de calor 3D (FTCS): sequencial vs paralelo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Nível de log (default: WARNING)")
    parser.add_argument("--log-file", default=None, help="Salvar logs também neste arquivo")

    sub = parser.add_subparsers(dest="command", required=True)

    # --- simulate: uma requisição ---
    sim = sub.add_parser("simulate", help="Cronometra uma execução sequencial e uma paralela")
    d = DEFAULT_PARAMS
    sim.add_argument("--size-x", type=int, default=d.size_x)
    sim.add_argument("--size-y", type=int, default=d.size_y)
    sim.add_argument("--size-z", type=int, default=d.size_z)
    sim.add_argument("--alpha", type=float, default=d.alpha, help="Difusividade térmica")
    sim.add_argument("--dx", type=float, default=d.dx)
    sim.add_argument("--dy", type=float, default=d.dy)
    sim.add_argument("--dz", type=float, default=d.dz)
    sim.add_argument("--dt", type=float, default=d.dt)
    sim.add_argument("--steps", type=int, default=d.steps)
    sim.add_argument("--workers", type=int, default=None,
                     help="Threads da execução paralela (default: os.cpu_count())")
    sim.add_argument("--fresh-grid", action="store_true",
                     help="Reinicializar a grade antes da execução paralela")
    sim.add_argument("--image", default=None,
                     help="Salvar o corte z do meio da grade final (PNG, BMP, ...)")

    # --- benchmark: varredura ---
    bench = sub.add_parser("benchmark", help="Varredura de tamanhos e número de threads")
    bench.add_argument("--sizes", type=int, nargs="+", default=TAMANHOS)
    bench.add_argument("--threads", type=int, nargs="+", default=NUM_THREADS)
    bench.add_argument("--steps", type=int, default=ITERACOES)
    bench.add_argument("--output", default="resultados_benchmark.csv")

    return parser.parse_args(argv)


def cmd_simulate(args):
    params = SimulationParams(args.size_x, args.size_y, args.size_z, args.alpha,
                              args.dx, args.dy, args.dz, args.dt, args.steps)

    factor = stability_factor(params.alpha, params.dt, params.dx, params.dy, params.dz)
    if factor > LIMITE_ESTABILIDADE:
        logger.warning("alpha*dt*(1/dx²+1/dy²+1/dz²) = %.4f > 1/6: o esquema explícito vai divergir",
                       factor)

    grid = HeatGrid.from_params(params)
    payload = run_benchmark(params, num_workers=args.workers, fresh_grid=args.fresh_grid, grid=grid)
    print(json.dumps(payload))

    if args.image:
        save_image(slice_to_rgb(grid), args.image)
        logger.info("Imagem salva em: %s", args.image)


def cmd_benchmark(args):
    df = benchmark_sweep(args.sizes, args.threads, args.steps)
    save_results(df, args.output)
    print_analysis(generate_analysis(df))


def main(argv=None):
    args = parse_args(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)

    try:
        if args.command == "simulate":
            cmd_simulate(args)
        else:
            cmd_benchmark(args)
    except (HeatSimulationError, ValueError, ZeroDivisionError) as e:
        print(f"Erro: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nSimulação interrompida pelo usuário.")
        sys.exit(130)
