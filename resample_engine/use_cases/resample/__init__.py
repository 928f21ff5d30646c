"""Resampling orchestration (use-case).

Small units, in the order they run:

- iterations: fit/predict/evaluate one split (joblib-dispatchable)
- aggregate: per-iteration values -> aggregated scalars, result tables
- run: option resolution, instance resolution, run-start checks, dispatch

Failure policy
--------------
A fit or predict failure in any iteration aborts the whole run; there is no
partial aggregation. The only graceful degradation is an undefined
per-iteration value (empty test set), which aggregations exclude with a
warning.
"""

from .run import resample
from .types import IterationResult, ResampleResult

__all__ = ["resample", "IterationResult", "ResampleResult"]
