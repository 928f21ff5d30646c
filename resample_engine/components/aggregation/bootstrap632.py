from __future__ import annotations

"""Bootstrap .632 and .632+ aggregation.

Both combine the resubstitution (train) performance with the out-of-bag (test)
performance of every bootstrap iteration:

    b632      = 0.368 * train + 0.632 * oob
    b632plus  = (1 - w) * train + w * oob',   w = 0.632 / (1 - 0.368 * R)

For .632+, ``gamma`` is the no-information performance: the measure evaluated
on every (truth, response) pairing of the out-of-bag rows, i.e. what a
predictor would score if its predictions were permuted independently of the
labels. ``oob' = min(oob, gamma)`` and the relative overfitting rate
``R = (oob' - train) / (gamma - train)`` is clipped to [0, 1] (0 when
``gamma == train``). For measures that are maximized the same formulas are
applied to the negated values.

Iterations with an empty out-of-bag set have no value and are excluded with a
:class:`~resample_engine.core.errors.MissingIterationWarning`.
"""

import warnings
from typing import Optional

import numpy as np

from resample_engine.core.errors import AggregationError, MissingIterationWarning

from .types import AggregationInputs, SplitPrediction

W_TRAIN = 0.368
W_OOB = 0.632


def _paired_values(inputs: AggregationInputs, aggr_id: str) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    if inputs.train is None:
        raise AggregationError(
            f"{aggr_id} for measure {inputs.measure.id!r} needs train performance values "
            "(resample with predict='both')."
        )
    if inputs.test is None:
        raise AggregationError(f"{aggr_id} for measure {inputs.measure.id!r} needs out-of-bag values.")
    test = np.asarray(inputs.test, dtype=float)
    train = np.asarray(inputs.train, dtype=float)
    if test.shape != train.shape:
        raise AggregationError(f"{aggr_id}: {test.size} test values vs {train.size} train values.")
    keep = ~(np.isnan(test) | np.isnan(train))
    if not keep.all():
        warnings.warn(
            f"{aggr_id}({inputs.measure.id}): {int((~keep).sum())} of {keep.size} iteration(s) "
            "have no value and are excluded.",
            MissingIterationWarning,
            stacklevel=3,
        )
    return test, train, keep


def b632(inputs: AggregationInputs) -> float:
    test, train, keep = _paired_values(inputs, "b632")
    if not keep.any():
        return float("nan")
    return float(np.mean(W_TRAIN * train[keep] + W_OOB * test[keep]))


def no_information_value(measure, pred: Optional[SplitPrediction]) -> float:
    """Measure of the permutation-null predictor on one split (NaN if empty).

    The measure is evaluated on all ``m * m`` (truth, response) pairings of the
    ``m`` out-of-bag rows, so memory and time grow quadratically with the
    out-of-bag size (about ``0.368 * n`` rows). For label measures such as
    ``mmce`` the result equals the marginal form ``1 - sum_k p_k q_k`` over the
    truth and response label frequencies.
    """
    if pred is None or len(pred) == 0:
        return float("nan")
    n = len(pred)
    truth = np.repeat(pred.truth, n)
    response = np.tile(pred.response, n)
    return measure.evaluate(truth, response)


def b632plus_value(train: float, oob: float, gamma: float, *, minimize: bool = True) -> float:
    """Combine one iteration's train, out-of-bag and no-information values."""
    sign = 1.0 if minimize else -1.0
    tr, te, g = sign * train, sign * oob, sign * gamma
    te = min(te, g)
    denom = g - tr
    if denom > 0 and te > tr:
        r = float(np.clip((te - tr) / denom, 0.0, 1.0))
    else:
        r = 0.0
    w = W_OOB / (1.0 - W_TRAIN * r)
    return sign * ((1.0 - w) * tr + w * te)


def b632plus(inputs: AggregationInputs) -> float:
    test, train, keep = _paired_values(inputs, "b632plus")
    preds = inputs.predictions
    if preds is None or len(preds) != test.size:
        raise AggregationError(
            f"b632plus for measure {inputs.measure.id!r} needs the out-of-bag predictions of every iteration."
        )
    values = []
    for i in np.flatnonzero(keep):
        gamma = no_information_value(inputs.measure, preds[i].test)
        values.append(
            b632plus_value(float(train[i]), float(test[i]), gamma, minimize=inputs.measure.minimize)
        )
    if not values:
        return float("nan")
    return float(np.mean(values))


__all__ = ["b632", "b632plus", "b632plus_value", "no_information_value", "W_TRAIN", "W_OOB"]
