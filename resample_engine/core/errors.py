"""Exception types raised by the resampling engine.

Configuration problems are raised eagerly (description / instance construction,
or at run start). Learner failures abort a run and carry the iteration context.
Aggregation is the only place where missing values degrade gracefully; that is
reported through :class:`MissingIterationWarning`.
"""

from __future__ import annotations

from typing import Optional

import numpy as np


class ResampleError(Exception):
    """Base class for all resampling errors."""


class ConfigurationError(ResampleError, ValueError):
    """Invalid or conflicting resampling options."""


class AggregationError(ResampleError):
    """A measure or aggregator could not be computed from the available inputs."""


class LearnerError(ResampleError):
    """A learner capability failed during one resampling iteration."""

    stage = "learner"

    def __init__(
        self,
        message: str,
        *,
        iteration: Optional[int] = None,
        train_idx: Optional[np.ndarray] = None,
        test_idx: Optional[np.ndarray] = None,
    ):
        super().__init__(message)
        self.iteration = iteration
        self.train_idx = None if train_idx is None else np.asarray(train_idx, dtype=int)
        self.test_idx = None if test_idx is None else np.asarray(test_idx, dtype=int)

    def __str__(self) -> str:
        msg = super().__str__()
        if self.iteration is None:
            return msg
        n_tr = 0 if self.train_idx is None else int(self.train_idx.shape[0])
        n_te = 0 if self.test_idx is None else int(self.test_idx.shape[0])
        return f"[iter {self.iteration}, n_train={n_tr}, n_test={n_te}] {msg}"

    def __reduce__(self):
        # keep the iteration context when crossing process boundaries
        return (
            _rebuild_learner_error,
            (type(self), self.args, self.iteration, self.train_idx, self.test_idx),
        )


class LearnerFitError(LearnerError):
    stage = "fit"


class LearnerPredictError(LearnerError):
    stage = "predict"


def _rebuild_learner_error(cls, args, iteration, train_idx, test_idx):
    return cls(*args, iteration=iteration, train_idx=train_idx, test_idx=test_idx)


class MissingIterationWarning(UserWarning):
    """Some per-iteration performance values were missing and got excluded."""


__all__ = [
    "ResampleError",
    "ConfigurationError",
    "AggregationError",
    "LearnerError",
    "LearnerFitError",
    "LearnerPredictError",
    "MissingIterationWarning",
]
