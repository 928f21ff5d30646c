"""Resampling engine: train/test partitioning, repeated fit/evaluate runs and
performance aggregation.

Prefer importing from :mod:`resample_engine.api`.
"""

__version__ = "0.3.0"
