"""
Main Pipeline
=============

Orchestrates a complete strategy comparison.

Pipeline Phases:
    1. SAMPLE    - Generate or load the numeric sample
    2. BENCHMARK - Time every configured strategy on the sample
    3. SUMMARY   - Standard errors, confidence intervals, grand-mean offsets
    4. ANALYSIS  - Distribution and timing plots

Each phase can be run independently or as part of the full pipeline.
Results are saved to the output directory after each phase.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Optional

import numpy as np

from .bootstrap.summary import BootstrapSummary, summarize
from .config import BenchConfig
from .data.loader import Sample
from .timing.harness import BenchmarkHarness, BenchmarkRun

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Orchestrates the bootstrap strategy bench.

    Usage:
        config = BenchConfig.from_yaml("configs/default.yaml")
        pipeline = Pipeline(config)
        results = pipeline.run()
    """

    def __init__(self, config: BenchConfig):
        self.config = config
        self.output_dir = Path(config.analysis.output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        # Pipeline state: populated as phases complete
        self.sample: Optional[Sample] = None
        self.benchmark_run: Optional[BenchmarkRun] = None
        self.summaries: dict[str, BootstrapSummary] = {}

    def run(self) -> dict:
        """
        Run all configured pipeline phases.

        Returns:
            Dict of phase_name -> result summary.
        """
        results = {}
        phases = self.config.phases
        total_start = time.time()

        logger.info("Starting bootstrap strategy bench")
        logger.info(f"Phases to run: {phases}")
        logger.info(f"Output directory: {self.output_dir}")

        for phase in phases:
            phase_start = time.time()
            logger.info(f"{'='*60}")
            logger.info(f"PHASE: {phase.upper()}")
            logger.info(f"{'='*60}")

            try:
                if phase == "sample":
                    results[phase] = self._run_sample()
                elif phase == "benchmark":
                    results[phase] = self._run_benchmark()
                elif phase == "summary":
                    results[phase] = self._run_summary()
                elif phase == "analysis":
                    results[phase] = self._run_analysis()
                else:
                    logger.warning(f"Unknown phase: {phase}, skipping")
                    continue

                elapsed = time.time() - phase_start
                logger.info(f"Phase {phase} completed in {elapsed:.2f}s")

            except Exception as e:
                logger.error(f"Phase {phase} failed: {e}", exc_info=True)
                results[phase] = {"error": str(e)}

        total_elapsed = time.time() - total_start
        logger.info(f"Pipeline completed in {total_elapsed:.2f}s")

        self._save_summary(results, total_elapsed)

        return results

    def _run_sample(self) -> dict:
        """Phase 1: Generate or load the sample."""
        cfg = self.config.sample

        if cfg.source == "generate":
            self.sample = Sample.generate(
                size=cfg.size,
                distribution=cfg.distribution,
                loc=cfg.loc,
                scale=cfg.scale,
                seed=cfg.seed,
            )
        elif cfg.source == "file":
            if not cfg.path:
                raise ValueError("sample.path is required when sample.source is 'file'")
            self.sample = Sample.from_file(cfg.path)
        else:
            raise ValueError(f"Unknown sample source: {cfg.source}")

        summary = self.sample.summary()
        logger.info(
            f"Sample ready: {summary['size']} values, "
            f"mean={summary['mean']:.4f}, sd={summary['std']:.4f}"
        )

        with open(self.output_dir / "sample_summary.json", "w") as f:
            json.dump(summary, f, indent=2)

        return summary

    def _run_benchmark(self) -> dict:
        """Phase 2: Time every configured strategy."""
        if self.sample is None:
            raise RuntimeError("Sample must be loaded before benchmark phase")

        cfg = self.config.benchmark
        harness = BenchmarkHarness(strategies=cfg.strategies, seed=cfg.seed)
        self.benchmark_run = harness.run(self.sample.values, cfg.iterations)

        timings = self.benchmark_run.timings
        with open(self.output_dir / "timings.json", "w") as f:
            json.dump(timings.to_dict(), f, indent=2)

        if self.config.analysis.save_distributions:
            path = self.output_dir / "distributions.npz"
            np.savez_compressed(path, **self.benchmark_run.distributions)
            logger.info(f"Distributions saved to {path}")

        fastest = timings.fastest()
        return {
            "iterations": self.benchmark_run.iterations,
            "strategies": timings.names,
            "fastest": fastest.strategy,
            "wall_seconds": {r.strategy: r.wall_seconds for r in timings},
            "relative_to_fastest": timings.relative_to(fastest.strategy),
        }

    def _run_summary(self) -> dict:
        """Phase 3: Summarize each bootstrap distribution."""
        if self.benchmark_run is None:
            raise RuntimeError("Benchmark must run before summary phase")

        confidence = self.config.summary.confidence
        run = self.benchmark_run

        for name, distribution in run.distributions.items():
            summary = summarize(distribution, run.sample, name, confidence=confidence)
            self.summaries[name] = summary
            logger.info(
                f"  {name:<22} grand mean={summary.grand_mean:.6f} "
                f"offset={summary.grand_mean_offset:+.2e} se={summary.bootstrap_se:.4f}"
            )

        results_summary = {name: s.to_dict() for name, s in self.summaries.items()}

        with open(self.output_dir / "summaries.json", "w") as f:
            json.dump(results_summary, f, indent=2)

        return results_summary

    def _run_analysis(self) -> dict:
        """Phase 4: Distribution and timing plots."""
        if self.benchmark_run is None:
            raise RuntimeError("Benchmark must run before analysis phase")

        if not self.config.analysis.generate_plots:
            logger.info("Plot generation disabled, skipping")
            return {"plots_generated": False}

        from .analysis.visualization import Visualizer

        viz = Visualizer(output_dir=self.output_dir)
        paths = [
            viz.plot_distributions(self.benchmark_run),
            viz.plot_timings(self.benchmark_run.timings),
        ]
        return {"plots_generated": True, "n_plots": len(paths)}

    def _save_summary(self, results: dict, total_elapsed: float) -> None:
        """Save pipeline run summary."""
        summary = {
            "total_elapsed_seconds": total_elapsed,
            "phases_run": list(results.keys()),
            "config": {
                "sample_source": self.config.sample.source,
                "iterations": self.config.benchmark.iterations,
                "strategies": self.config.benchmark.strategies,
                "seed": self.config.benchmark.seed,
            },
            "results": {},
        }

        # Serialize results (handle non-serializable types)
        for phase, result in results.items():
            try:
                json.dumps(result)
                summary["results"][phase] = result
            except (TypeError, ValueError):
                summary["results"][phase] = str(result)

        with open(self.output_dir / "pipeline_summary.json", "w") as f:
            json.dump(summary, f, indent=2, default=str)

        logger.info(f"Summary saved to {self.output_dir / 'pipeline_summary.json'}")


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for running the pipeline from command line."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Bootstrap strategy bench",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Run with default config
    python -m bootbench.pipeline

    # Run with custom config
    python -m bootbench.pipeline --config configs/custom.yaml

    # Compare two strategies only
    python -m bootbench.pipeline --strategies naive_loop batch_matrix

    # Quick test run
    python -m bootbench.pipeline --quick
        """,
    )
    parser.add_argument(
        "--config", "-c",
        default="configs/default.yaml",
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--phases", "-p",
        nargs="+",
        help="Specific phases to run (overrides config)",
    )
    parser.add_argument(
        "--strategies", "-s",
        nargs="+",
        help="Strategies to time (overrides config)",
    )
    parser.add_argument(
        "--iterations", "-n",
        type=int,
        help="Number of bootstrap iterations (overrides config)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for the benchmark (overrides config)",
    )
    parser.add_argument(
        "--sample-file",
        help="Read the sample from this file instead of generating it",
    )
    parser.add_argument(
        "--quick", "-q",
        action="store_true",
        help="Quick test run with reduced iterations and no plots",
    )
    parser.add_argument(
        "--output", "-o",
        help="Output directory (overrides config)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    config_path = Path(args.config)
    if config_path.exists():
        config = BenchConfig.from_yaml(config_path)
    else:
        logger.info(f"Config file {config_path} not found, using defaults")
        config = BenchConfig()

    # Apply overrides
    if args.phases:
        config.phases = args.phases
    if args.strategies:
        config.benchmark.strategies = args.strategies
    if args.iterations is not None:
        config.benchmark.iterations = args.iterations
    if args.seed is not None:
        config.benchmark.seed = args.seed
    if args.sample_file:
        config.sample.source = "file"
        config.sample.path = args.sample_file
    if args.output:
        config.analysis.output_dir = args.output

    if args.quick:
        config.benchmark.iterations = 100
        config.analysis.generate_plots = False
        logger.info("Quick mode: 100 iterations, plots disabled")

    pipeline = Pipeline(config)
    results = pipeline.run()

    print("\n" + "=" * 60)
    print("BENCH COMPLETE")
    print("=" * 60)
    failed = False
    for phase, result in results.items():
        if isinstance(result, dict) and "error" in result:
            print(f"  {phase}: FAILED - {result['error']}")
            failed = True
        else:
            print(f"  {phase}: OK")

    if pipeline.benchmark_run is not None:
        print("\nTimings (wall seconds):")
        for record in pipeline.benchmark_run.timings:
            print(f"  {record.strategy:<22} {record.wall_seconds:.4f}")

    print(f"\nResults saved to: {config.analysis.output_dir}/")

    return 1 if failed else 0


if __name__ == "__main__":
    import sys
    sys.exit(main())
