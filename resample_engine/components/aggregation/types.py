from __future__ import annotations

"""Aggregation contracts.

An :class:`Aggregation` reduces the per-iteration performance values of one
measure to a single scalar. Aggregators receive everything the orchestrator
knows about the measure in an :class:`AggregationInputs` bundle, so simple
reductions and prediction-based schemes (``test.join``, ``b632plus``) share one
signature.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional, Sequence, Tuple

import numpy as np

from resample_engine.core.errors import ConfigurationError

if TYPE_CHECKING:  # pragma: no cover
    from resample_engine.components.evaluation.measures import Measure


@dataclass(frozen=True)
class SplitPrediction:
    """Predictions of one iteration on one split (row ids, truth, response)."""

    ids: np.ndarray
    truth: np.ndarray
    response: np.ndarray

    def __len__(self) -> int:
        return int(self.ids.shape[0])


@dataclass(frozen=True)
class IterationPredictions:
    test: Optional[SplitPrediction] = None
    train: Optional[SplitPrediction] = None


@dataclass(frozen=True)
class AggregationInputs:
    """Per-iteration values of one measure plus the predictions behind them.

    ``test`` / ``train`` hold one float per iteration (NaN where the split was
    empty) or None when that split was not predicted.
    """

    measure: "Measure"
    test: Optional[np.ndarray] = None
    train: Optional[np.ndarray] = None
    predictions: Optional[Sequence[IterationPredictions]] = None


AggregationFn = Callable[[AggregationInputs], float]


@dataclass(frozen=True)
class Aggregation:
    id: str
    fun: AggregationFn
    requires_train: bool = False
    requires_test: bool = True
    # resampling methods this aggregation is defined for (None = any)
    methods: Optional[Tuple[str, ...]] = None
    note: str = ""

    def __call__(self, inputs: AggregationInputs) -> float:
        return float(self.fun(inputs))

    def check_compatible(self, *, method: Optional[str] = None, predict_on: Optional[str] = None) -> None:
        """Raise :class:`ConfigurationError` if this aggregation cannot be computed."""
        if method is not None and self.methods is not None and method not in self.methods:
            raise ConfigurationError(
                f"Aggregation {self.id!r} requires resampling method in {list(self.methods)}, got {method!r}."
            )
        if predict_on is not None:
            if self.requires_train and predict_on not in ("train", "both"):
                raise ConfigurationError(
                    f"Aggregation {self.id!r} needs train predictions; set predict='both' "
                    f"(or 'train'), got predict={predict_on!r}."
                )
            if self.requires_test and predict_on not in ("test", "both"):
                raise ConfigurationError(
                    f"Aggregation {self.id!r} needs test predictions; got predict={predict_on!r}."
                )
