"""
Bootstrap Summary Statistics
============================

Reduces a bootstrap distribution to the numbers a reader compares across
strategies: the grand mean and its offset from the sample mean, the
bootstrap standard error, the analytical standard error of the mean, and
a percentile confidence interval.

For balanced strategies the grand-mean offset is zero up to rounding,
which makes the balanced/unbalanced distinction visible in a table.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Sequence, Union

import numpy as np
from numpy.typing import NDArray
from scipy import stats

from ..errors import InvalidArgument
from .strategies import Strategy, validate_sample

logger = logging.getLogger(__name__)

# Offsets below this are treated as exact for balanced designs
BALANCE_TOLERANCE = 1e-9


@dataclass
class BootstrapSummary:
    """Summary of one bootstrap distribution.

    Attributes:
        strategy: Name of the strategy that produced the distribution.
        iterations: Number of resample means.
        sample_mean: Mean of the original sample.
        grand_mean: Mean of the bootstrap distribution.
        grand_mean_offset: ``grand_mean - sample_mean``.
        bootstrap_se: Standard deviation (ddof=1) of the distribution.
        analytical_se: Standard error of the sample mean, ``s / sqrt(n)``.
        ci_lower: Lower percentile bound.
        ci_upper: Upper percentile bound.
        confidence: Confidence level of the interval.
        balanced: Whether the strategy is a balanced design.
    """
    strategy: str
    iterations: int
    sample_mean: float
    grand_mean: float
    grand_mean_offset: float
    bootstrap_se: float
    analytical_se: float
    ci_lower: float
    ci_upper: float
    confidence: float
    balanced: bool

    @property
    def is_exact(self) -> bool:
        """True when the grand mean reproduces the sample mean."""
        return abs(self.grand_mean_offset) <= BALANCE_TOLERANCE

    def to_dict(self) -> dict:
        data = asdict(self)
        data["is_exact"] = self.is_exact
        return data


def percentile_interval(
    distribution: Sequence[float] | NDArray,
    confidence: float = 0.95,
) -> tuple[float, float]:
    """Equal-tailed percentile interval of a bootstrap distribution."""
    if not 0.0 < confidence < 1.0:
        raise InvalidArgument("confidence", f"must lie in (0, 1), got {confidence}")
    values = np.asarray(distribution, dtype=np.float64)
    if values.size == 0:
        raise InvalidArgument("distribution", "distribution is empty")

    alpha = 1.0 - confidence
    lower, upper = np.quantile(values, [alpha / 2, 1.0 - alpha / 2])
    return float(lower), float(upper)


def summarize(
    distribution: Sequence[float] | NDArray,
    sample: Sequence[float] | NDArray,
    strategy: Union[str, Strategy],
    confidence: float = 0.95,
) -> BootstrapSummary:
    """
    Summarize a bootstrap distribution against the sample it came from.

    Args:
        distribution: Resample means produced by a strategy.
        sample: The original sample.
        strategy: Strategy enum member or name.
        confidence: Level of the percentile interval.

    Returns:
        BootstrapSummary for the distribution.
    """
    chosen = Strategy.parse(strategy)
    values = validate_sample(sample)
    means = np.asarray(distribution, dtype=np.float64)

    ci_lower, ci_upper = percentile_interval(means, confidence)

    sample_mean = float(values.mean())
    grand_mean = float(means.mean())
    bootstrap_se = float(means.std(ddof=1)) if means.size > 1 else 0.0
    analytical_se = float(stats.sem(values)) if values.size > 1 else 0.0

    summary = BootstrapSummary(
        strategy=chosen.value,
        iterations=int(means.size),
        sample_mean=sample_mean,
        grand_mean=grand_mean,
        grand_mean_offset=grand_mean - sample_mean,
        bootstrap_se=bootstrap_se,
        analytical_se=analytical_se,
        ci_lower=ci_lower,
        ci_upper=ci_upper,
        confidence=confidence,
        balanced=chosen.balanced,
    )

    if chosen.balanced and not summary.is_exact:
        logger.warning(
            f"{chosen.value}: balanced design but grand mean is off by "
            f"{summary.grand_mean_offset:.3e}"
        )

    return summary
