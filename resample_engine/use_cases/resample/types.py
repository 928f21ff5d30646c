from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from resample_engine.components.aggregation.types import IterationPredictions
from resample_engine.components.evaluation.measures import Measure
from resample_engine.contracts.results.resample import ResampleSummary
from resample_engine.runtime.instance import ResampleInstance


@dataclass
class IterationResult:
    """Outputs of one fit/predict/evaluate cycle (0-based ``iteration``)."""

    iteration: int
    train_idx: np.ndarray
    test_idx: np.ndarray
    measures_test: Dict[str, float] = field(default_factory=dict)
    measures_train: Dict[str, float] = field(default_factory=dict)
    predictions: Optional[IterationPredictions] = None
    model: Optional[Any] = None
    extract: Optional[Any] = None
    time_train: float = 0.0
    time_predict: float = 0.0
    group: Optional[Any] = None


def _finite_or_none(v: Any) -> Optional[float]:
    try:
        fv = float(v)
    except (TypeError, ValueError):
        return None
    return fv if math.isfinite(fv) else None


def _frame_to_lists(frame: Optional[pd.DataFrame]) -> Optional[Dict[str, List[Optional[float]]]]:
    if frame is None:
        return None
    return {
        col: [_finite_or_none(v) for v in frame[col].tolist()]
        for col in frame.columns
        if col != "iter"
    }


@dataclass
class ResampleResult:
    """Result of :func:`resample_engine.api.resample`.

    ``iterations`` are in instance order. ``measures_test`` / ``measures_train``
    hold one row per iteration; ``pred`` pools the retained predictions with
    columns ``id``, ``truth``, ``response``, ``iter`` and ``set``.
    """

    learner_id: str
    task_id: str
    instance: ResampleInstance
    measures: List[Measure]
    predict_on: str
    iterations: List[IterationResult]
    aggr: Dict[str, float]
    measures_test: pd.DataFrame
    measures_train: Optional[pd.DataFrame] = None
    pred: Optional[pd.DataFrame] = None
    runtime: float = 0.0
    notes: List[str] = field(default_factory=list)

    @property
    def models(self) -> Optional[List[Any]]:
        models = [it.model for it in self.iterations]
        return models if any(m is not None for m in models) else None

    @property
    def extract(self) -> List[Any]:
        return [it.extract for it in self.iterations]

    def summary(self) -> ResampleSummary:
        return ResampleSummary(
            learner_id=self.learner_id,
            task_id=self.task_id,
            resampling=self.instance.desc.describe(),
            iterations=self.instance.iterations,
            aggr={k: _finite_or_none(v) for k, v in self.aggr.items()},
            measures_test=_frame_to_lists(self.measures_test) or {},
            measures_train=_frame_to_lists(self.measures_train),
            runtime=float(self.runtime),
            notes=list(self.notes),
        )

    def __repr__(self) -> str:
        aggr = ", ".join(f"{k}={v:.4g}" for k, v in self.aggr.items())
        return (
            f"ResampleResult(learner={self.learner_id!r}, task={self.task_id!r}, "
            f"{self.instance.desc.describe()}, {aggr})"
        )
