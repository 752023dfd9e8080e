"""
Bootstrap Strategy Bench
========================

Compares interchangeable ways of computing the bootstrap sampling
distribution of the mean: explicit loops with and without a general mean
routine, pre-allocated loops, batch generation, map-based evaluation, and
two balanced bootstrap designs. A timing harness measures the cost of each
strategy on the same sample.

Every strategy returns the same kind of result, a distribution of resample
means, so the only things that differ between them are cost and, for the
balanced designs, the exactness of the grand mean.
"""

__version__ = "0.1.0"
