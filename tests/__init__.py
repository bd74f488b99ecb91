"""
Test suite for the antclique ant colony clique solver.

This package contains tests covering:
- The DIMACS binary loader and writer
- Pheromone bookkeeping, clique construction and the colony cycle loop
- Benchmark running, reporting, plotting and the command line
"""
