"""
Visualization Module
====================

Plots for comparing resampling strategies.

Plot Types
----------
    Distribution Comparison
        One violin per strategy showing its bootstrap distribution of the
        mean, with a reference line at the sample mean. Distributions from
        correct strategies should be indistinguishable by eye.

    Timing Chart
        Horizontal bar chart of wall-clock seconds per strategy, annotated
        with the time relative to the fastest strategy.

Configuration
-------------
    All plots are saved to a configurable output directory. File format,
    DPI, and figure dimensions are controlled via ``PlotConfig``. The
    default style is seaborn's ``whitegrid`` theme.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import numpy as np

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for server/CLI use
import matplotlib.pyplot as plt
from matplotlib.patches import Patch
import seaborn as sns

from ..bootstrap.strategies import Strategy
from ..timing.harness import BenchmarkRun, TimingTable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class PlotConfig:
    """Configuration for plot aesthetics and output.

    Attributes:
        figsize: Default figure size as (width, height) in inches.
        dpi: Resolution for saved figures.
        file_format: Output file format ('png', 'pdf', 'svg').
        style: Seaborn style preset.
        palette: Seaborn color palette name.
        font_scale: Scaling factor for all font sizes.
        context: Seaborn context preset.
        title_fontsize: Font size for plot titles.
        label_fontsize: Font size for axis labels.
        annotation_fontsize: Font size for text annotations on plots.
        balanced_color: Color used for balanced strategies.
        reference_color: Color of the sample-mean reference line.
    """
    figsize: tuple[float, float] = (12, 7)
    dpi: int = 150
    file_format: str = "png"
    style: str = "whitegrid"
    palette: str = "deep"
    font_scale: float = 1.1
    context: str = "notebook"
    title_fontsize: int = 15
    label_fontsize: int = 12
    annotation_fontsize: int = 9
    balanced_color: str = "#D32F2F"
    reference_color: str = "#333333"


class Visualizer:
    """
    Creates and saves strategy comparison plots.

    Each ``plot_*`` method builds a matplotlib figure, saves it to the
    output directory, and returns the figure.

    Examples
    --------
    >>> viz = Visualizer(output_dir="./figures")
    >>> viz.plot_distributions(run)
    >>> viz.plot_timings(run.timings)
    """

    def __init__(
        self,
        output_dir: str | Path = "./figures",
        config: Optional[PlotConfig] = None,
    ):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.config = config or PlotConfig()

        sns.set_theme(
            style=self.config.style,
            palette=self.config.palette,
            font_scale=self.config.font_scale,
            context=self.config.context,
        )

        logger.info(f"Visualizer initialized, output directory: {self.output_dir}")

    def _save_figure(self, fig: plt.Figure, filename: str) -> Path:
        """Save a figure as ``<output_dir>/<filename>.<format>`` and close it."""
        fig.tight_layout()

        filepath = self.output_dir / f"{filename}.{self.config.file_format}"
        fig.savefig(
            filepath,
            dpi=self.config.dpi,
            format=self.config.file_format,
            bbox_inches="tight",
            facecolor="white",
            edgecolor="none",
        )
        plt.close(fig)
        logger.info(f"Saved plot: {filepath}")
        return filepath

    def _colors(self, names: list[str]) -> list:
        base = sns.color_palette(self.config.palette)[0]
        return [
            self.config.balanced_color if Strategy.parse(name).balanced else base
            for name in names
        ]

    # ------------------------------------------------------------------
    # Distribution comparison
    # ------------------------------------------------------------------

    def plot_distributions(
        self,
        run: BenchmarkRun,
        filename: str = "distributions",
        title: Optional[str] = None,
    ) -> plt.Figure:
        """
        Violin plot of each strategy's bootstrap distribution.

        Parameters
        ----------
        run : BenchmarkRun
            Harness output holding one distribution per strategy.
        filename : str
            Output filename (without extension).
        title : str, optional
            Custom plot title.

        Returns
        -------
        matplotlib.figure.Figure
            The generated figure.
        """
        names = list(run.distributions)
        if not names:
            logger.warning("No distributions to plot")
            fig, ax = plt.subplots(figsize=(8, 4))
            ax.text(0.5, 0.5, "No distributions", ha="center", va="center")
            self._save_figure(fig, filename)
            return fig

        data = [run.distributions[name] for name in names]
        sample_mean = float(np.mean(run.sample))

        fig_height = max(5, len(names) * 0.9 + 2)
        fig, ax = plt.subplots(figsize=(self.config.figsize[0], fig_height))

        parts = ax.violinplot(
            data,
            positions=range(len(names)),
            orientation="horizontal",
            showmeans=True,
            showextrema=True,
        )
        for body, color in zip(parts["bodies"], self._colors(names)):
            body.set_facecolor(color)
            body.set_alpha(0.6)

        ax.axvline(
            sample_mean,
            color=self.config.reference_color,
            linestyle="--",
            linewidth=1,
            label=f"sample mean = {sample_mean:.3f}",
        )

        for i, values in enumerate(data):
            sd = np.std(values, ddof=1) if len(values) > 1 else 0.0
            ax.text(
                float(np.max(values)),
                i + 0.3,
                f"mean={np.mean(values):.4f} sd={sd:.4f}",
                fontsize=self.config.annotation_fontsize,
                ha="right",
            )

        ax.set_yticks(range(len(names)))
        ax.set_yticklabels(names, fontsize=self.config.annotation_fontsize + 1)
        ax.set_xlabel("Resample mean", fontsize=self.config.label_fontsize)

        handles = [
            Patch(facecolor=sns.color_palette(self.config.palette)[0], label="Independent resampling"),
            Patch(facecolor=self.config.balanced_color, label="Balanced bootstrap"),
        ]
        handles.extend(ax.get_legend_handles_labels()[0])
        ax.legend(handles=handles, loc="lower right", fontsize=self.config.annotation_fontsize)

        if title is None:
            title = (
                f"Bootstrap Distributions of the Mean\n"
                f"{run.iterations} iterations, sample size {run.sample.size}"
            )
        ax.set_title(title, fontsize=self.config.title_fontsize)

        self._save_figure(fig, filename)
        return fig

    # ------------------------------------------------------------------
    # Timing chart
    # ------------------------------------------------------------------

    def plot_timings(
        self,
        timings: TimingTable,
        filename: str = "timings",
        title: Optional[str] = None,
    ) -> plt.Figure:
        """
        Bar chart of wall-clock seconds per strategy.

        Each bar is annotated with its time relative to the fastest
        strategy (``1.0x`` for the fastest).
        """
        names = timings.names
        if not names:
            logger.warning("No timings to plot")
            fig, ax = plt.subplots(figsize=(8, 4))
            ax.text(0.5, 0.5, "No timings", ha="center", va="center")
            self._save_figure(fig, filename)
            return fig

        seconds = [timings[name].wall_seconds for name in names]
        relative = timings.relative_to(timings.fastest().strategy)

        fig_height = max(4, len(names) * 0.6 + 2)
        fig, ax = plt.subplots(figsize=(self.config.figsize[0], fig_height))

        y_pos = range(len(names))
        ax.barh(y_pos, seconds, color=self._colors(names), edgecolor="white", linewidth=0.5)

        ax.set_yticks(y_pos)
        ax.set_yticklabels(names, fontsize=self.config.annotation_fontsize + 1)
        ax.set_xlabel("Wall-clock time (s)", fontsize=self.config.label_fontsize)
        ax.invert_yaxis()  # Invocation order top to bottom

        for i, (name, secs) in enumerate(zip(names, seconds)):
            ratio = relative[name]
            label = f" {secs:.4f}s" if ratio is None else f" {secs:.4f}s ({ratio:.1f}x)"
            ax.text(
                secs,
                i,
                label,
                va="center",
                fontsize=self.config.annotation_fontsize,
            )

        if title is None:
            first = timings[names[0]]
            title = (
                f"Strategy Timings\n"
                f"{first.iterations} iterations, sample size {first.sample_size}"
            )
        ax.set_title(title, fontsize=self.config.title_fontsize)

        self._save_figure(fig, filename)
        return fig
