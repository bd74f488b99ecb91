"""
Tests for the benchmark runner and result analysis.
"""

import pytest
import networkx as nx
import pandas as pd

from antclique.benchmarks import (
    BenchmarkResult,
    BenchmarkRunner,
    discover_instances,
    results_to_dataframe,
    solution_path_for,
    statistical_summary,
    summarize_all,
    summary_table,
)
from antclique.benchmarks.runner import instance_name
from antclique.colony import ColonyConfig
from antclique.graph import BitGraph
from antclique.io import write_dimacs_binary_graph


@pytest.fixture
def benchmark_dirs(tmp_path):
    """A benchmark directory with two good instances, one bad one and .sol files."""
    bench_dir = tmp_path / "bench"
    sol_dir = tmp_path / "solutions"
    bench_dir.mkdir()
    sol_dir.mkdir()

    k5_plus = nx.complete_graph(5)
    k5_plus.add_edges_from([(4, 5), (5, 6)])
    write_dimacs_binary_graph(BitGraph.from_networkx(k5_plus), bench_dir / "k5.clq.b")
    write_dimacs_binary_graph(BitGraph.from_networkx(nx.cycle_graph(6)), bench_dir / "c6.clq.b")
    (bench_dir / "broken.clq.b").write_bytes(b"11\np edge 3 0\n\x00")
    (bench_dir / "notes.txt").write_text("not a graph")

    (sol_dir / "k5.sol").write_text("s cqu 5\nv 0 1 2 3 4\n")
    (sol_dir / "c6.sol").write_text("s cqu 3\n")  # deliberately wrong reference

    return bench_dir, sol_dir


@pytest.fixture
def bench_config():
    return ColonyConfig(num_ants=6, max_cycles=10)


class TestDiscovery:
    """Test instance discovery and naming."""

    def test_instance_name(self):
        assert instance_name("dir/c-fat200-1.clq.b") == "c-fat200-1"
        assert instance_name("graph.bin") == "graph"

    def test_discover_sorted(self, benchmark_dirs):
        bench_dir, _ = benchmark_dirs
        names = [p.name for p in discover_instances(bench_dir)]
        assert names == ["broken.clq.b", "c6.clq.b", "k5.clq.b"]

    def test_solution_path(self, tmp_path):
        assert solution_path_for("x/k5.clq.b", tmp_path) == tmp_path / "k5.sol"


class TestBenchmarkRunner:
    """Test running the solver over a directory."""

    def test_run_directory(self, benchmark_dirs, bench_config):
        bench_dir, sol_dir = benchmark_dirs
        runner = BenchmarkRunner(bench_config, num_runs=3, base_seed=10, solutions_dir=sol_dir)
        results = runner.run_directory(bench_dir)

        assert set(results) == {"broken", "c6", "k5"}
        assert len(results["k5"]) == 3
        for result in results["k5"]:
            assert result.success
            assert result.valid
            assert result.clique_size == 5
            assert result.known_optimum == 5
            assert result.accuracy_percent == pytest.approx(100.0)
            assert result.graph_size == 7
            assert result.graph_edges == 12
        assert [r.seed for r in results["c6"]] == [10, 11, 12]
        assert results["c6"][0].accuracy_percent == pytest.approx(200.0 / 3)

    def test_broken_file_recorded_as_failure(self, benchmark_dirs, bench_config):
        bench_dir, _ = benchmark_dirs
        results = BenchmarkRunner(bench_config, num_runs=2).run_instance(bench_dir / "broken.clq.b")
        assert len(results) == 1
        failure = results[0]
        assert not failure.success
        assert not failure.valid
        assert failure.error_message.startswith("TruncatedGraphError")
        assert failure.accuracy_percent is None

    def test_huge_declared_graph_does_not_stop_the_run(self, benchmark_dirs, bench_config):
        bench_dir, _ = benchmark_dirs
        (bench_dir / "a_corrupt.clq.b").write_bytes(b"17\np edge 2000000 0\n\x00")
        results = BenchmarkRunner(bench_config).run_directory(bench_dir)

        assert not results["a_corrupt"][0].success
        assert results["a_corrupt"][0].error_message.startswith("TruncatedGraphError")
        assert results["k5"][0].success
        assert results["c6"][0].success

    def test_missing_file_recorded_as_failure(self, tmp_path, bench_config):
        results = BenchmarkRunner(bench_config).run_instance(tmp_path / "absent.clq.b")
        assert not results[0].success
        assert results[0].error_message.startswith("FileNotFoundError")

    def test_missing_solution_is_not_fatal(self, benchmark_dirs, bench_config, tmp_path):
        bench_dir, _ = benchmark_dirs
        runner = BenchmarkRunner(bench_config, solutions_dir=tmp_path / "nowhere")
        result = runner.run_instance(bench_dir / "k5.clq.b")[0]
        assert result.success
        assert result.known_optimum is None

    def test_seeds_drawn_when_not_given(self, benchmark_dirs, bench_config):
        bench_dir, _ = benchmark_dirs
        results = BenchmarkRunner(bench_config, num_runs=2).run_instance(bench_dir / "c6.clq.b")
        assert all(isinstance(r.seed, int) for r in results)

    def test_same_base_seed_same_results(self, benchmark_dirs, bench_config):
        bench_dir, _ = benchmark_dirs
        first = BenchmarkRunner(bench_config, num_runs=2, base_seed=3).run_instance(bench_dir / "k5.clq.b")
        second = BenchmarkRunner(bench_config, num_runs=2, base_seed=3).run_instance(bench_dir / "k5.clq.b")
        assert [r.clique for r in first] == [r.clique for r in second]

    def test_empty_directory(self, tmp_path, bench_config):
        assert BenchmarkRunner(bench_config).run_directory(tmp_path) == {}

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            BenchmarkRunner(num_runs=0)
        with pytest.raises(ValueError):
            BenchmarkRunner(ColonyConfig(rho=2.0))


class TestAnalysis:
    """Test statistics and DataFrame export."""

    def make_results(self):
        return [
            BenchmarkResult("g", "g.clq.b", clique_size=4, runtime_seconds=1.0, known_optimum=5),
            BenchmarkResult("g", "g.clq.b", clique_size=5, runtime_seconds=3.0, known_optimum=5),
            BenchmarkResult("g", "g.clq.b", success=False, valid=False, error_message="boom"),
        ]

    def test_statistical_summary(self):
        stats = statistical_summary(self.make_results(), "g")
        assert stats.num_runs == 3
        assert stats.mean_clique_size == pytest.approx(4.5)
        assert stats.min_clique_size == 4
        assert stats.max_clique_size == 5
        assert stats.success_rate == pytest.approx(2 / 3)
        assert stats.known_optimum == 5
        assert stats.best_accuracy_percent == pytest.approx(100.0)
        assert stats.mean_accuracy_percent == pytest.approx(90.0)

    def test_summary_of_no_runs(self):
        stats = statistical_summary([], "empty")
        assert stats.num_runs == 0
        assert stats.success_rate == 0.0

    def test_results_to_dataframe(self):
        frame = results_to_dataframe({"g": self.make_results()})
        assert isinstance(frame, pd.DataFrame)
        assert len(frame) == 3
        assert list(frame["run"]) == [0, 1, 2]
        assert list(frame["success"]) == [True, True, False]
        assert "accuracy_percent" in frame.columns

    def test_summary_table(self):
        table = summary_table(summarize_all({"g": self.make_results()}))
        assert list(table.index) == ["g"]
        assert table.loc["g", "max_clique_size"] == 5
        assert summary_table({}).empty
