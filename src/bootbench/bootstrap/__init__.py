"""
Bootstrap Package
=================

Resampling strategies for the bootstrap distribution of the mean, and the
summary statistics used to compare them.

Usage::

    from bootbench.bootstrap import Strategy, estimate, summarize

    means = estimate([1.0, 2.0, 3.0, 4.0, 5.0], 1000,
                     strategy=Strategy.BALANCED_LABELS, rng=42)
    summary = summarize(means, [1.0, 2.0, 3.0, 4.0, 5.0], Strategy.BALANCED_LABELS)
"""

from .strategies import (
    Strategy,
    balanced_labels,
    balanced_permutation,
    batch_matrix,
    estimate,
    get_strategy,
    map_based,
    naive_loop,
    preallocated_loop,
    resolve_strategies,
    sum_count_loop,
    validate_iterations,
    validate_sample,
)
from .summary import BootstrapSummary, percentile_interval, summarize

__all__ = [
    "Strategy",
    "estimate",
    "get_strategy",
    "resolve_strategies",
    "validate_sample",
    "validate_iterations",
    "naive_loop",
    "sum_count_loop",
    "preallocated_loop",
    "batch_matrix",
    "map_based",
    "balanced_permutation",
    "balanced_labels",
    "BootstrapSummary",
    "percentile_interval",
    "summarize",
]
