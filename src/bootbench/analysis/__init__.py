"""
Analysis Package
================

Visual comparison of resampling strategies.

    Visualizer
        Saves a violin plot of every strategy's bootstrap distribution and
        a bar chart of their timings to a configurable output directory.

Usage::

    from bootbench.analysis import Visualizer

    viz = Visualizer(output_dir="./figures")
    viz.plot_distributions(run)
    viz.plot_timings(run.timings)
"""

from .visualization import PlotConfig, Visualizer

__all__ = [
    "PlotConfig",
    "Visualizer",
]
