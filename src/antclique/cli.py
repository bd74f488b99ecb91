"""
Command-line interface for the ant colony clique solver.

Usage:
    antclique solve GRAPH.clq.b [--solution GRAPH.sol] [--plot conv.png] [solver options]
    antclique bench BENCHMARK_DIR [--solutions SOLUTION_DIR] [--runs N] [--csv results.csv]
    antclique generate OUT.clq.b --nodes N --probability P [--seed S]

Example:
    antclique solve benchmarks/c-fat200-1.clq.b --ants 20 --cycles 100 --seed 7
"""

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

import networkx as nx

from . import __version__
from .algorithms import accuracy_percent
from .benchmarks import BenchmarkRunner, results_to_dataframe, summarize_all, summary_table
from .colony import ColonyConfig, ColonySolver
from .construction import HeuristicKind, StartPolicy
from .exceptions import AntCliqueError
from .graph import BitGraph
from .io import read_dimacs_binary_graph, read_solution_file, write_dimacs_binary_graph

# CLI option name -> ColonyConfig field
SOLVER_OPTIONS = {
    "ants": "num_ants",
    "cycles": "max_cycles",
    "rho": "rho",
    "alpha": "alpha",
    "beta": "beta",
    "tau_min": "tau_min",
    "tau_max": "tau_max",
    "initial_pheromone": "initial_pheromone",
    "start": "start_policy",
    "heuristic": "heuristic",
    "seed": "seed",
}


def add_solver_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("Colony parameters")
    group.add_argument("--config", help="JSON file with ColonyConfig fields (flags override it)")
    group.add_argument("--ants", type=int, help="Ants per cycle (default: 30)")
    group.add_argument("--cycles", type=int, help="Number of cycles (default: 1000)")
    group.add_argument("--rho", type=float, help="Pheromone persistence in (0, 1] (default: 0.99)")
    group.add_argument("--alpha", type=float, help="Pheromone exponent (default: 1.0)")
    group.add_argument("--beta", type=float, help="Heuristic exponent (default: 2.0)")
    group.add_argument("--tau-min", type=float, help="Lower trail bound (default: 0.01)")
    group.add_argument("--tau-max", type=float, help="Upper trail bound (default: 6.0)")
    group.add_argument("--initial-pheromone", type=float, help="Initial trail value (default: tau-max)")
    group.add_argument("--start", choices=[p.value for p in StartPolicy],
                       help="Start vertex policy (default: random)")
    group.add_argument("--heuristic", choices=[h.value for h in HeuristicKind],
                       help="Heuristic term (default: degree)")
    group.add_argument("--seed", type=int, help="Random seed for reproducibility")


def config_from_args(args: argparse.Namespace) -> ColonyConfig:
    """Merge the optional JSON config file with explicit command-line flags."""
    config = ColonyConfig.from_json_file(args.config) if args.config else ColonyConfig()
    overrides = {}
    for option, field_name in SOLVER_OPTIONS.items():
        value = getattr(args, option, None)
        if value is None:
            continue
        if field_name == "start_policy":
            value = StartPolicy(value)
        elif field_name == "heuristic":
            value = HeuristicKind(value)
        overrides[field_name] = value
    return replace(config, **overrides)


def build_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="antclique",
        description="Ant Colony Optimization search for large cliques in DIMACS binary graphs.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress (-v for INFO, -vv for DEBUG)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve = subparsers.add_parser("solve", help="Search one graph file")
    solve.add_argument("graph", help="Path to a .clq.b file")
    solve.add_argument("--solution", help="Reference .sol file used to report accuracy")
    solve.add_argument("--plot", help="Save the convergence plot to this path")
    solve.add_argument("--pheromone-plot", help="Save a heatmap of the final trails to this path")
    solve.add_argument("--clique-plot", help="Save a drawing of the graph with the clique highlighted")
    add_solver_arguments(solve)

    bench = subparsers.add_parser("bench", help="Run every .clq.b file in a directory")
    bench.add_argument("benchmark_dir", help="Directory with .clq.b files")
    bench.add_argument("--solutions", help="Directory with matching .sol files")
    bench.add_argument("--runs", type=int, default=1, help="Runs per instance (default: 1)")
    bench.add_argument("--pattern", default="*.clq.b", help="Glob for instance files (default: *.clq.b)")
    bench.add_argument("--csv", help="Write per-run results to this CSV file")
    add_solver_arguments(bench)

    generate = subparsers.add_parser("generate", help="Write an Erdos-Renyi random graph as .clq.b")
    generate.add_argument("output", help="Output .clq.b path")
    generate.add_argument("--nodes", type=int, required=True, help="Number of vertices")
    generate.add_argument("--probability", type=float, required=True, help="Edge probability (0.0 to 1.0)")
    generate.add_argument("--seed", type=int, default=None, help="Random seed for reproducibility")

    return parser


def run_solve(args: argparse.Namespace) -> int:
    config = config_from_args(args)
    graph = read_dimacs_binary_graph(args.graph)
    print(f"Loaded graph: {graph.num_vertices} vertices, {graph.num_edges} edges")

    result = ColonySolver(config).solve(graph)

    print(f"\nBest clique size: {result.size}")
    print(f"Vertices: {result.vertices}")
    print(f"Valid clique: {'yes' if graph.is_clique(result.vertices) else 'no'}")
    print(f"Cycles: {result.cycles}")
    print(f"Runtime: {result.runtime_seconds:.2f}s")

    known_optimum = None
    if args.solution:
        reference = read_solution_file(args.solution)
        known_optimum = reference.size
        percent = accuracy_percent(result.size, reference.size) or 0.0
        common = sorted(set(result.vertices) & set(reference.vertices))
        print(f"\nKnown optimum: {reference.size} ({percent:.2f}% reached)")
        print(f"Common vertices with reference: {len(common)}")

    if args.plot or args.pheromone_plot or args.clique_plot:
        from . import visualization

        if args.plot:
            visualization.plot_convergence(result, known_optimum=known_optimum, save_path=args.plot)
            print(f"Convergence plot saved to {args.plot}")
        if args.pheromone_plot:
            visualization.plot_pheromone_matrix(result.pheromone, save_path=args.pheromone_plot)
            print(f"Pheromone heatmap saved to {args.pheromone_plot}")
        if args.clique_plot:
            visualization.plot_clique(graph, result.vertices, save_path=args.clique_plot)
            print(f"Clique drawing saved to {args.clique_plot}")

    return 0


def run_bench(args: argparse.Namespace) -> int:
    config = config_from_args(args)
    runner = BenchmarkRunner(
        config=config,
        num_runs=args.runs,
        base_seed=config.seed,
        solutions_dir=args.solutions,
    )
    results = runner.run_directory(args.benchmark_dir, pattern=args.pattern)
    if not results:
        print(f"No benchmark files found in {args.benchmark_dir}")
        return 1

    summaries = summarize_all(results)
    print(summary_table(summaries).to_string(float_format=lambda x: f"{x:.2f}"))

    if args.csv:
        results_to_dataframe(results).to_csv(args.csv, index=False)
        print(f"\nPer-run results written to {args.csv}")

    failures = [name for name, runs in results.items() if not all(r.success for r in runs)]
    for name in failures:
        errors = {r.error_message for r in results[name] if r.error_message}
        print(f"FAILED {name}: {'; '.join(sorted(errors))}")
    return 1 if failures else 0


def run_generate(args: argparse.Namespace) -> int:
    if args.nodes <= 0:
        print("Error: --nodes must be positive", file=sys.stderr)
        return 2
    if not 0.0 <= args.probability <= 1.0:
        print("Error: --probability must be between 0.0 and 1.0", file=sys.stderr)
        return 2

    nx_graph = nx.erdos_renyi_graph(args.nodes, args.probability, seed=args.seed)
    graph = BitGraph.from_networkx(nx_graph)
    comments = [
        f"Erdos-Renyi random graph G({args.nodes}, {args.probability})",
        f"seed {args.seed}",
    ]
    write_dimacs_binary_graph(graph, args.output, comments=comments)
    print(f"Wrote {args.output}: {graph.num_vertices} vertices, {graph.num_edges} edges")
    return 0


COMMANDS = {
    "solve": run_solve,
    "bench": run_bench,
    "generate": run_generate,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_argparser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        return COMMANDS[args.command](args)
    except (OSError, AntCliqueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
