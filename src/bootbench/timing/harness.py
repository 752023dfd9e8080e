"""
Timing Harness
==============

Runs each resampling strategy once on the same sample and records how long
it took.

Three clocks are read around every call:

    wall  - ``time.perf_counter``, elapsed real time
    cpu   - ``time.process_time``, user + system CPU of this process
    user  - ``os.times().user``, user CPU only

Strategies run strictly one after another. The sample is validated once
up front and handed to every strategy as the same read-only array, so an
invalid sample fails before any strategy starts and no strategy can modify
what the next one sees.

Seeding:
    With ``seed`` set, every strategy gets its own Generator built from
    that seed. Runs are then reproducible, and the loop-style strategies,
    which consume the random stream in the same order, produce matching
    distributions.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import asdict, dataclass, field
from typing import Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray

from ..bootstrap.strategies import (
    Strategy,
    resolve_strategies,
    validate_iterations,
    validate_sample,
)
from ..errors import InvalidArgument

logger = logging.getLogger(__name__)


@dataclass
class TimingRecord:
    """Elapsed time of one strategy invocation, in seconds."""
    strategy: str
    iterations: int
    sample_size: int
    wall_seconds: float
    cpu_seconds: float
    user_seconds: float

    def to_dict(self) -> dict:
        return asdict(self)


class TimingTable:
    """Timing records keyed by strategy name, in invocation order."""

    def __init__(self, records: Optional[Sequence[TimingRecord]] = None):
        self._records: dict[str, TimingRecord] = {}
        for record in records or []:
            self.add(record)

    def add(self, record: TimingRecord) -> None:
        if record.strategy in self._records:
            raise InvalidArgument("record", f"duplicate strategy {record.strategy!r}")
        self._records[record.strategy] = record

    def __getitem__(self, name: str) -> TimingRecord:
        return self._records[name]

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(self._records.values())

    @property
    def names(self) -> list[str]:
        return list(self._records)

    @property
    def records(self) -> list[TimingRecord]:
        return list(self._records.values())

    def fastest(self) -> TimingRecord:
        """Record with the lowest wall-clock time."""
        if not self._records:
            raise ValueError("Timing table is empty")
        return min(self._records.values(), key=lambda r: r.wall_seconds)

    def relative_to(self, name: str) -> dict[str, Optional[float]]:
        """
        Wall-clock time of every strategy divided by that of ``name``.

        Values above 1 are slower than the reference, below 1 faster.
        Ratios are None when the reference time is zero (coarse clock).
        """
        reference = self._records[name].wall_seconds
        if reference <= 0:
            return {n: None for n in self._records}
        return {n: r.wall_seconds / reference for n, r in self._records.items()}

    def to_dict(self) -> dict[str, dict]:
        return {name: record.to_dict() for name, record in self._records.items()}


@dataclass
class BenchmarkRun:
    """Everything produced by one pass of the harness."""
    sample: NDArray[np.float64]
    iterations: int
    seed: Optional[int]
    timings: TimingTable = field(default_factory=TimingTable)
    distributions: dict[str, NDArray[np.float64]] = field(default_factory=dict)

    @property
    def strategies(self) -> list[str]:
        return self.timings.names


class BenchmarkHarness:
    """
    Times a list of resampling strategies on a shared sample.

    Usage:
        harness = BenchmarkHarness(seed=42)
        run = harness.run(sample, iterations=1000)
        for record in run.timings:
            print(record.strategy, record.wall_seconds)
    """

    def __init__(
        self,
        strategies: Optional[Sequence[Union[str, Strategy]]] = None,
        seed: Optional[int] = None,
    ):
        self.strategies = resolve_strategies(strategies)
        self.seed = seed

    def _generator(self) -> np.random.Generator:
        return np.random.default_rng(self.seed)

    def time_strategy(
        self,
        strategy: Strategy,
        sample: NDArray[np.float64],
        iterations: int,
    ) -> tuple[TimingRecord, NDArray[np.float64]]:
        """Run one strategy and measure it. Inputs must already be validated."""
        rng = self._generator()

        wall_start = time.perf_counter()
        cpu_start = time.process_time()
        user_start = os.times().user

        distribution = strategy.function(sample, iterations, rng=rng)

        user_elapsed = os.times().user - user_start
        cpu_elapsed = time.process_time() - cpu_start
        wall_elapsed = time.perf_counter() - wall_start

        record = TimingRecord(
            strategy=strategy.value,
            iterations=iterations,
            sample_size=int(sample.size),
            wall_seconds=wall_elapsed,
            cpu_seconds=cpu_elapsed,
            user_seconds=user_elapsed,
        )
        return record, distribution

    def run(
        self,
        sample: Sequence[float] | NDArray,
        iterations: int,
    ) -> BenchmarkRun:
        """
        Time every configured strategy once, in order.

        Raises:
            InvalidArgument: if the sample or iteration count is invalid.
                Nothing is run in that case.
        """
        values = validate_sample(sample)
        iterations = validate_iterations(iterations)

        logger.info(
            f"Timing {len(self.strategies)} strategies: "
            f"{values.size} values, {iterations} iterations, seed={self.seed}"
        )

        run = BenchmarkRun(sample=values, iterations=iterations, seed=self.seed)

        for strategy in self.strategies:
            record, distribution = self.time_strategy(strategy, values, iterations)
            run.timings.add(record)
            run.distributions[strategy.value] = distribution

            logger.info(
                f"  {strategy.value:<22} wall={record.wall_seconds:.4f}s "
                f"cpu={record.cpu_seconds:.4f}s user={record.user_seconds:.4f}s"
            )

        fastest = run.timings.fastest()
        logger.info(f"Fastest strategy: {fastest.strategy} ({fastest.wall_seconds:.4f}s)")
        return run
