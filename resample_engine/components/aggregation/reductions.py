from __future__ import annotations

"""Plain reductions over per-iteration performance values.

Missing values (NaN, from iterations with an empty split) are excluded and a
:class:`MissingIterationWarning` is emitted. If nothing is left the result is
NaN.
"""

import warnings
from typing import Callable

import numpy as np

from resample_engine.core.errors import AggregationError, MissingIterationWarning

from .types import AggregationInputs


def drop_missing(values: np.ndarray, *, where: str) -> np.ndarray:
    values = np.asarray(values, dtype=float)
    mask = np.isnan(values)
    if mask.any():
        warnings.warn(
            f"{where}: {int(mask.sum())} of {values.size} iteration(s) have no value and are excluded.",
            MissingIterationWarning,
            stacklevel=3,
        )
    return values[~mask]


def _sd(v: np.ndarray) -> float:
    # sample standard deviation; undefined for a single value
    return float(np.std(v, ddof=1)) if v.size > 1 else float("nan")


REDUCERS: dict[str, Callable[[np.ndarray], float]] = {
    "mean": lambda v: float(np.mean(v)),
    "median": lambda v: float(np.median(v)),
    "min": lambda v: float(np.min(v)),
    "max": lambda v: float(np.max(v)),
    "sd": _sd,
    "sum": lambda v: float(np.sum(v)),
    "range": lambda v: float(np.max(v) - np.min(v)),
}


def make_reduction(split: str, reducer: str) -> Callable[[AggregationInputs], float]:
    """Return an aggregation function reducing the ``split`` values with ``reducer``."""
    fn = REDUCERS[reducer]
    aggr_id = f"{split}.{reducer}"

    def _aggregate(inputs: AggregationInputs) -> float:
        values = inputs.test if split == "test" else inputs.train
        if values is None:
            raise AggregationError(
                f"{aggr_id} for measure {inputs.measure.id!r}: no {split} performance values available."
            )
        kept = drop_missing(values, where=f"{aggr_id}({inputs.measure.id})")
        if kept.size == 0:
            return float("nan")
        return fn(kept)

    _aggregate.__name__ = f"aggregate_{split}_{reducer}"
    return _aggregate


def pooled_test(inputs: AggregationInputs) -> float:
    """Measure computed once on the pooled test predictions of all iterations."""
    if not inputs.predictions:
        raise AggregationError(f"test.join for measure {inputs.measure.id!r}: no predictions available.")
    parts = [p.test for p in inputs.predictions if p.test is not None and len(p.test)]
    if not parts:
        return float("nan")
    truth = np.concatenate([p.truth for p in parts])
    response = np.concatenate([p.response for p in parts])
    return inputs.measure.evaluate(truth, response)


__all__ = ["REDUCERS", "drop_missing", "make_reduction", "pooled_test"]
