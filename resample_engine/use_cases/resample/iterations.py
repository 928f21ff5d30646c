from __future__ import annotations

"""One resampling iteration: fit on train, predict, evaluate.

:func:`run_iteration` is a module-level function without shared mutable state
so it can be dispatched to joblib workers.
"""

import time
from typing import Any, Callable, Optional, Sequence

import numpy as np

from resample_engine.components.aggregation.types import IterationPredictions, SplitPrediction
from resample_engine.components.evaluation.measures import Measure
from resample_engine.components.interfaces import Learner, Task
from resample_engine.components.splitters.types import Split
from resample_engine.core.errors import (
    AggregationError,
    LearnerError,
    LearnerFitError,
    LearnerPredictError,
)

from .types import IterationResult


def _wrap(
    exc: Exception,
    err_cls: type,
    *,
    what: str,
    learner_id: str,
    iteration: int,
    split: Split,
) -> LearnerError:
    if isinstance(exc, LearnerError):
        if exc.iteration is None:
            exc.iteration = iteration
            exc.train_idx = np.asarray(split.train_idx, dtype=int)
            exc.test_idx = np.asarray(split.test_idx, dtype=int)
        return exc
    return err_cls(
        f"Learner {learner_id!r} failed to {what}: {type(exc).__name__}: {exc}",
        iteration=iteration,
        train_idx=split.train_idx,
        test_idx=split.test_idx,
    )


def _predict_split(
    learner: Learner,
    model: Any,
    task: Task,
    idx: np.ndarray,
    *,
    iteration: int,
    split: Split,
    which: str,
) -> SplitPrediction:
    view = task.restrict(idx)
    if len(idx) == 0:
        # empty out-of-bag set: nothing to predict
        truth = np.asarray(view.y)
        return SplitPrediction(ids=np.asarray(idx, dtype=np.int64), truth=truth, response=truth.copy())
    try:
        response = np.asarray(learner.predict(model, view))
    except Exception as exc:
        raise _wrap(
            exc,
            LearnerPredictError,
            what=f"predict on {which}",
            learner_id=learner.id,
            iteration=iteration,
            split=split,
        ) from exc
    if response.shape[0] != len(idx):
        raise LearnerPredictError(
            f"Learner {learner.id!r} returned {response.shape[0]} predictions for {len(idx)} {which} rows.",
            iteration=iteration,
            train_idx=split.train_idx,
            test_idx=split.test_idx,
        )
    return SplitPrediction(ids=np.asarray(idx, dtype=np.int64), truth=np.asarray(view.y), response=response)


def _score(measures: Sequence[Measure], pred: SplitPrediction) -> dict[str, float]:
    out: dict[str, float] = {}
    for m in measures:
        if m.id in out:
            continue
        try:
            out[m.id] = m.evaluate(pred.truth, pred.response)
        except AggregationError:
            # undefined for this iteration (e.g. empty out-of-bag set)
            out[m.id] = float("nan")
    return out


def run_iteration(
    iteration: int,
    split: Split,
    *,
    learner: Learner,
    task: Task,
    measures: Sequence[Measure],
    predict_on: str,
    keep_model: bool = False,
    extract: Optional[Callable[[Any], Any]] = None,
) -> IterationResult:
    """Fit ``learner`` on the train rows of ``split`` and evaluate ``measures``.

    Raises
    ------
    LearnerFitError, LearnerPredictError
        Wrapping any learner failure, with the iteration and its index sets.
    """
    t0 = time.perf_counter()
    try:
        model = learner.fit(task.restrict(split.train_idx))
    except Exception as exc:
        raise _wrap(
            exc,
            LearnerFitError,
            what="fit",
            learner_id=learner.id,
            iteration=iteration,
            split=split,
        ) from exc
    time_train = time.perf_counter() - t0

    t1 = time.perf_counter()
    test_pred = train_pred = None
    if predict_on in ("test", "both"):
        test_pred = _predict_split(
            learner, model, task, split.test_idx, iteration=iteration, split=split, which="test"
        )
    if predict_on in ("train", "both"):
        train_pred = _predict_split(
            learner, model, task, split.train_idx, iteration=iteration, split=split, which="train"
        )
    time_predict = time.perf_counter() - t1

    return IterationResult(
        iteration=iteration,
        train_idx=split.train_idx,
        test_idx=split.test_idx,
        measures_test=_score(measures, test_pred) if test_pred is not None else {},
        measures_train=_score(measures, train_pred) if train_pred is not None else {},
        predictions=IterationPredictions(test=test_pred, train=train_pred),
        model=model if keep_model else None,
        extract=extract(model) if extract is not None else None,
        time_train=time_train,
        time_predict=time_predict,
        group=split.group,
    )
