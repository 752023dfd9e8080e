"""
Resampling Strategies
=====================

Seven interchangeable ways of computing the bootstrap distribution of the
sample mean.

Each strategy draws ``iterations`` resamples of the sample (same size,
uniformly with replacement), averages each one, and returns the averages
as a fresh 1-D array. They differ only in how the work is organised:

    1. naive_loop            - loop, general mean routine, growing list
    2. sum_count_loop        - loop, sum divided by count, growing list
    3. preallocated_loop     - loop, sum divided by count, fixed-size array
    4. batch_matrix          - all resamples drawn at once as matrix columns
    5. map_based             - resample-and-average closure mapped over
                               the iteration indices
    6. balanced_permutation  - permute the replicated sample, cut into groups
    7. balanced_labels       - shuffle balanced group labels over the
                               replicated sample

Strategies 1-5 are ordinary (unbalanced) bootstraps: the grand mean of
their distribution only approximates the sample mean. Strategies 6 and 7
are balanced bootstraps: every sample element appears exactly
``iterations`` times across all resamples, so the grand mean equals the
sample mean up to floating-point rounding.

Randomness always comes from an explicit ``numpy.random.Generator``. The
``rng`` argument accepts a seed, a Generator, or None (fresh entropy),
exactly like ``numpy.random.default_rng``.

Reference:
    Davison, A.C., Hinkley, D.V. & Schechtman, E. "Efficient bootstrap
    simulation" (1986), Biometrika 73(3) - introduces the balanced
    bootstrap.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Optional, Sequence, Union

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray

from ..errors import InvalidArgument

logger = logging.getLogger(__name__)

RandomSource = Union[None, int, np.random.SeedSequence, Generator]
Estimator = Callable[..., NDArray[np.float64]]


class Strategy(Enum):
    """Identifiers of the resampling strategies, in canonical order."""
    NAIVE_LOOP = "naive_loop"
    SUM_COUNT_LOOP = "sum_count_loop"
    PREALLOCATED_LOOP = "preallocated_loop"
    BATCH_MATRIX = "batch_matrix"
    MAP_BASED = "map_based"
    BALANCED_PERMUTATION = "balanced_permutation"
    BALANCED_LABELS = "balanced_labels"

    @property
    def balanced(self) -> bool:
        return self in (Strategy.BALANCED_PERMUTATION, Strategy.BALANCED_LABELS)

    @property
    def function(self) -> Estimator:
        return _ESTIMATORS[self]

    @classmethod
    def parse(cls, name: Union[str, Strategy]) -> Strategy:
        """Resolve a strategy name such as ``"batch-matrix"`` or ``"NAIVE_LOOP"``."""
        if isinstance(name, Strategy):
            return name
        key = str(name).strip().lower().replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise InvalidArgument(
                "strategy", f"unknown strategy {name!r} (expected one of: {valid})"
            ) from None


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------

def validate_sample(sample: Sequence[float] | NDArray) -> NDArray[np.float64]:
    """
    Convert a sample to a read-only 1-D float array.

    The returned array is a view when the input already is a float64
    array, so the caller's data is never copied or written to.

    Raises:
        InvalidArgument: if the sample is empty, not one-dimensional,
            not numeric, or contains NaN/inf.
    """
    try:
        values = np.asarray(sample, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidArgument("sample", f"values must be numeric ({e})") from e

    if values.ndim != 1:
        raise InvalidArgument("sample", f"expected a 1-D sequence, got shape {values.shape}")
    if values.size == 0:
        raise InvalidArgument("sample", "sample is empty")
    if not np.all(np.isfinite(values)):
        raise InvalidArgument("sample", "sample contains NaN or infinite values")

    values = values.view()
    values.flags.writeable = False
    return values


def validate_iterations(iterations: int) -> int:
    """Check that ``iterations`` is a positive integer and return it as int."""
    if isinstance(iterations, bool) or not isinstance(iterations, (int, np.integer)):
        raise InvalidArgument(
            "iterations", f"expected an integer, got {type(iterations).__name__}"
        )
    if iterations < 1:
        raise InvalidArgument("iterations", f"must be >= 1, got {iterations}")
    return int(iterations)


def _prepare(
    sample: Sequence[float] | NDArray,
    iterations: int,
    rng: RandomSource,
) -> tuple[NDArray[np.float64], int, Generator]:
    values = validate_sample(sample)
    iterations = validate_iterations(iterations)
    return values, iterations, np.random.default_rng(rng)


def _within_range(means: NDArray[np.float64], values: NDArray[np.float64]) -> NDArray[np.float64]:
    """Clip rounding overshoot so every mean lies in ``[min(sample), max(sample)]``."""
    return np.clip(means, values.min(), values.max())


# ---------------------------------------------------------------------------
# Unbalanced strategies
# ---------------------------------------------------------------------------

def naive_loop(
    sample: Sequence[float] | NDArray,
    iterations: int,
    rng: RandomSource = None,
) -> NDArray[np.float64]:
    """Grow a list one resample mean at a time, using ``np.mean``."""
    values, iterations, gen = _prepare(sample, iterations, rng)
    n = values.size

    means = []
    for _ in range(iterations):
        resample = gen.choice(values, size=n, replace=True)
        means.append(np.mean(resample))

    return _within_range(np.asarray(means, dtype=np.float64), values)


def sum_count_loop(
    sample: Sequence[float] | NDArray,
    iterations: int,
    rng: RandomSource = None,
) -> NDArray[np.float64]:
    """Same loop as :func:`naive_loop`, but the mean is ``sum / count``."""
    values, iterations, gen = _prepare(sample, iterations, rng)
    n = values.size

    means = []
    for _ in range(iterations):
        resample = gen.choice(values, size=n, replace=True)
        means.append(resample.sum() / n)

    return _within_range(np.asarray(means, dtype=np.float64), values)


def preallocated_loop(
    sample: Sequence[float] | NDArray,
    iterations: int,
    rng: RandomSource = None,
) -> NDArray[np.float64]:
    """Write ``sum / count`` into an array sized up front."""
    values, iterations, gen = _prepare(sample, iterations, rng)
    n = values.size

    means = np.empty(iterations, dtype=np.float64)
    for i in range(iterations):
        resample = gen.choice(values, size=n, replace=True)
        means[i] = resample.sum() / n

    return _within_range(means, values)


def batch_matrix(
    sample: Sequence[float] | NDArray,
    iterations: int,
    rng: RandomSource = None,
) -> NDArray[np.float64]:
    """
    Draw every resample in one call and average the columns.

    The draw is an ``(n, iterations)`` matrix whose columns are the
    resamples. Memory grows with ``n * iterations``, which is the price
    paid for removing the Python-level loop.
    """
    values, iterations, gen = _prepare(sample, iterations, rng)
    n = values.size

    matrix = gen.choice(values, size=(n, iterations), replace=True)
    return _within_range(matrix.sum(axis=0) / n, values)


def map_based(
    sample: Sequence[float] | NDArray,
    iterations: int,
    rng: RandomSource = None,
) -> NDArray[np.float64]:
    """Map a resample-and-average closure over the iteration indices."""
    values, iterations, gen = _prepare(sample, iterations, rng)
    n = values.size

    def resample_mean(_: int) -> float:
        return gen.choice(values, size=n, replace=True).sum() / n

    means = np.fromiter(map(resample_mean, range(iterations)), dtype=np.float64, count=iterations)
    return _within_range(means, values)


# ---------------------------------------------------------------------------
# Balanced strategies
# ---------------------------------------------------------------------------

def balanced_permutation(
    sample: Sequence[float] | NDArray,
    iterations: int,
    rng: RandomSource = None,
) -> NDArray[np.float64]:
    """
    Balanced bootstrap by global permutation.

    The sample is replicated ``iterations`` times, the pooled values are
    shuffled, and the shuffled pool is cut into ``iterations`` consecutive
    groups of ``n``. Only the partition is random; the pooled multiset is
    fixed, so the grand mean of the group means is the sample mean.
    """
    values, iterations, gen = _prepare(sample, iterations, rng)
    n = values.size

    pool = np.tile(values, iterations)
    shuffled = gen.permutation(pool)
    return _within_range(shuffled.reshape(iterations, n).mean(axis=1), values)


def balanced_labels(
    sample: Sequence[float] | NDArray,
    iterations: int,
    rng: RandomSource = None,
) -> NDArray[np.float64]:
    """
    Balanced bootstrap by random group labels.

    Every replicated value receives a group label drawn from a shuffled
    label vector in which each of the ``iterations`` labels appears exactly
    ``n`` times. Group means are then computed with a weighted bincount.
    """
    values, iterations, gen = _prepare(sample, iterations, rng)
    n = values.size

    pool = np.tile(values, iterations)
    labels = gen.permutation(np.repeat(np.arange(iterations), n))
    sums = np.bincount(labels, weights=pool, minlength=iterations)
    return _within_range(sums / n, values)


_ESTIMATORS: dict[Strategy, Estimator] = {
    Strategy.NAIVE_LOOP: naive_loop,
    Strategy.SUM_COUNT_LOOP: sum_count_loop,
    Strategy.PREALLOCATED_LOOP: preallocated_loop,
    Strategy.BATCH_MATRIX: batch_matrix,
    Strategy.MAP_BASED: map_based,
    Strategy.BALANCED_PERMUTATION: balanced_permutation,
    Strategy.BALANCED_LABELS: balanced_labels,
}


def get_strategy(name: Union[str, Strategy]) -> Estimator:
    """Return the estimator function for a strategy name or enum member."""
    return Strategy.parse(name).function


def estimate(
    sample: Sequence[float] | NDArray,
    iterations: int,
    strategy: Union[str, Strategy] = Strategy.PREALLOCATED_LOOP,
    rng: RandomSource = None,
) -> NDArray[np.float64]:
    """
    Compute a bootstrap distribution of the mean with the chosen strategy.

    Args:
        sample: Non-empty sequence of finite reals.
        iterations: Number of resamples (>= 1).
        strategy: Strategy enum member or its name.
        rng: Seed, Generator, or None for fresh entropy.

    Returns:
        Array of ``iterations`` resample means.

    Raises:
        InvalidArgument: on an empty sample, a non-positive iteration count,
            or an unknown strategy name.
    """
    chosen = Strategy.parse(strategy)
    logger.debug(f"Estimating {iterations} resample means with {chosen.value}")
    return chosen.function(sample, iterations, rng=rng)


def resolve_strategies(
    names: Optional[Sequence[Union[str, Strategy]]] = None,
) -> list[Strategy]:
    """Resolve a list of names to strategies; None means all, in canonical order."""
    if names is None:
        return list(Strategy)
    resolved = [Strategy.parse(name) for name in names]
    if not resolved:
        raise InvalidArgument("strategies", "at least one strategy is required")
    duplicates = sorted({s.value for s in resolved if resolved.count(s) > 1})
    if duplicates:
        raise InvalidArgument("strategies", f"listed more than once: {', '.join(duplicates)}")
    return resolved
