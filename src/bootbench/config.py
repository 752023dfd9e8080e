"""
Configuration
=============

Central configuration for the bootstrap strategy bench.
Loads from YAML config files with sensible defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml


@dataclass
class SampleConfig:
    """Where the sample comes from."""
    source: str = "generate"  # "generate" or "file"
    path: Optional[str] = None  # used when source == "file"
    size: int = 50
    distribution: str = "normal"  # "normal", "uniform", "exponential"
    loc: float = 0.0
    scale: float = 1.0
    seed: int = 42


@dataclass
class BenchmarkConfig:
    """Timing harness configuration."""
    iterations: int = 1000
    strategies: list[str] = field(default_factory=lambda: [
        "naive_loop",
        "sum_count_loop",
        "preallocated_loop",
        "batch_matrix",
        "map_based",
        "balanced_permutation",
        "balanced_labels",
    ])
    seed: Optional[int] = 42


@dataclass
class SummaryConfig:
    """Summary statistics configuration."""
    confidence: float = 0.95


@dataclass
class AnalysisConfig:
    """Output and plotting configuration."""
    output_dir: str = "output"
    generate_plots: bool = True
    save_distributions: bool = False


@dataclass
class BenchConfig:
    """Master configuration for the full pipeline."""
    sample: SampleConfig = field(default_factory=SampleConfig)
    benchmark: BenchmarkConfig = field(default_factory=BenchmarkConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)

    # Pipeline control: which phases to run
    phases: list[str] = field(default_factory=lambda: [
        "sample",
        "benchmark",
        "summary",
        "analysis",
    ])

    @classmethod
    def from_yaml(cls, path: str | Path) -> BenchConfig:
        """Load configuration from a YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        config = cls()

        if "sample" in data:
            config.sample = SampleConfig(**data["sample"])
        if "benchmark" in data:
            config.benchmark = BenchmarkConfig(**data["benchmark"])
        if "summary" in data:
            config.summary = SummaryConfig(**data["summary"])
        if "analysis" in data:
            config.analysis = AnalysisConfig(**data["analysis"])
        if "phases" in data:
            config.phases = data["phases"]

        return config

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        import dataclasses
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = dataclasses.asdict(self)
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
