"""
Plotting helpers for colony runs: convergence, pheromone trails and the found clique.
"""

import matplotlib.pyplot as plt
import networkx as nx
import numpy as np
from typing import Iterable, Optional, Tuple

from .colony import ColonyResult
from .graph import BitGraph
from .pheromone import PheromoneField


def _finish(fig, save_path: Optional[str], show_plot: bool):
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    if show_plot:
        plt.show()
    return fig


def plot_convergence(
    result: ColonyResult,
    known_optimum: Optional[int] = None,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    show_plot: bool = False,
    figsize: Tuple[int, int] = (10, 6)
):
    """
    Plot cycle-best and global-best clique sizes over the cycles of a run.

    Args:
        result: Outcome of ColonySolver.solve.
        known_optimum: Optional reference size drawn as a horizontal line.
        title: Plot title.
        save_path: Path to save the plot.
        show_plot: Whether to display the plot.
        figsize: Figure size tuple.

    Returns:
        The matplotlib figure.
    """
    fig, ax = plt.subplots(figsize=figsize)
    cycles = np.arange(1, len(result.cycle_best_sizes) + 1)

    ax.plot(cycles, result.cycle_best_sizes, color='lightblue', linewidth=1, label='Cycle best')
    ax.step(cycles, result.global_best_sizes, where='post', color='red', linewidth=2, label='Global best')
    if known_optimum is not None:
        ax.axhline(known_optimum, color='green', linestyle='--', label=f'Known optimum ({known_optimum})')

    ax.set_xlabel('Cycle')
    ax.set_ylabel('Clique size')
    ax.set_title(title or f'Colony convergence (best size {result.size})')
    ax.legend()
    ax.grid(True, alpha=0.3)

    return _finish(fig, save_path, show_plot)


def plot_pheromone_matrix(
    pheromone: PheromoneField,
    save_path: Optional[str] = None,
    show_plot: bool = False,
    figsize: Tuple[int, int] = (8, 7)
):
    """Heatmap of the trail matrix."""
    fig, ax = plt.subplots(figsize=figsize)
    image = ax.imshow(
        pheromone.as_array(), cmap='viridis', vmin=pheromone.tau_min, vmax=pheromone.tau_max
    )
    fig.colorbar(image, ax=ax, label='Trail strength')
    ax.set_xlabel('Vertex')
    ax.set_ylabel('Vertex')
    ax.set_title(f'Pheromone trails ({pheromone.num_vertices} vertices)')

    return _finish(fig, save_path, show_plot)


def plot_clique(
    graph: BitGraph,
    clique: Iterable[int],
    seed: int = 42,
    save_path: Optional[str] = None,
    show_plot: bool = False,
    figsize: Tuple[int, int] = (8, 6)
):
    """Draw the graph with the clique vertices and edges highlighted."""
    members = set(clique)
    nx_graph = graph.to_networkx()
    pos = nx.spring_layout(nx_graph, seed=seed)

    fig, ax = plt.subplots(figsize=figsize)
    node_colors = ['red' if node in members else 'lightblue' for node in nx_graph.nodes()]
    edge_colors = ['red' if u in members and v in members else 'lightgray' for u, v in nx_graph.edges()]
    nx.draw(nx_graph, pos, ax=ax, with_labels=True, node_color=node_colors,
            edge_color=edge_colors, node_size=400, font_size=9)
    ax.set_title(f'Clique of size {len(members)}')

    return _finish(fig, save_path, show_plot)
