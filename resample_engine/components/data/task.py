from __future__ import annotations

"""In-memory task collaborator.

:class:`ArrayTask` holds features (numpy array or pandas DataFrame), a target
vector and optional blocking labels. Views are built by positional indexing;
the task itself is never modified, so it can be shared across iterations and
worker threads.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

import numpy as np
import pandas as pd

from resample_engine.components.interfaces import TaskKind
from resample_engine.core.errors import ConfigurationError
from resample_engine.core.shapes import coerce_1d


@dataclass(frozen=True)
class TaskView:
    X: Any
    y: np.ndarray
    indices: np.ndarray

    def __len__(self) -> int:
        return int(self.indices.shape[0])


def _infer_kind(y: np.ndarray) -> TaskKind:
    if y.dtype.kind in "fc":
        return "regression"
    return "classification"


@dataclass
class ArrayTask:
    """A supervised task over in-memory arrays.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features) or pandas.DataFrame
    y : array-like of shape (n_samples,)
    id : str
        Task identifier used in results and logs.
    kind : {"classification", "regression"}, optional
        Inferred from the dtype of ``y`` when omitted (floats are regression).
    blocking : array-like of shape (n_samples,), optional
        Block/group label per observation.
    strata : pandas.DataFrame, optional
        Extra columns available for stratification besides the columns of ``X``.
    """

    X: Any
    y: Any
    id: str = "task"
    kind: Optional[TaskKind] = None
    blocking: Optional[Any] = None
    strata: Optional[pd.DataFrame] = None
    _n: int = field(init=False, repr=False, default=0)

    def __post_init__(self) -> None:
        if not isinstance(self.X, pd.DataFrame):
            X = np.asarray(self.X)
            if X.ndim == 1:
                X = X[:, None]
            if X.ndim != 2:
                raise ValueError(f"X must be 2D; got {X.shape}")
            self.X = X
        self.y = coerce_1d(self.y)
        n = int(self.X.shape[0])
        if self.y.shape[0] != n:
            raise ValueError(f"X and y length mismatch: {n} vs {self.y.shape[0]}.")
        if self.blocking is not None:
            self.blocking = coerce_1d(self.blocking)
            if self.blocking.shape[0] != n:
                raise ValueError(f"blocking has {self.blocking.shape[0]} labels for {n} rows.")
        if self.strata is not None and len(self.strata) != n:
            raise ValueError(f"strata has {len(self.strata)} rows for {n} observations.")
        if self.kind is None:
            self.kind = _infer_kind(self.y)
        self._n = n

    @property
    def size(self) -> int:
        return self._n

    @property
    def block_labels(self) -> Optional[np.ndarray]:
        return self.blocking

    def _column(self, name: str) -> pd.Series:
        if self.strata is not None and name in self.strata.columns:
            return self.strata[name].reset_index(drop=True)
        if isinstance(self.X, pd.DataFrame) and name in self.X.columns:
            return self.X[name].reset_index(drop=True)
        raise ConfigurationError(f"Unknown stratification column {name!r} for task {self.id!r}.")

    def strata_labels(self, *, target: bool = False, cols: Sequence[str] = ()) -> np.ndarray:
        frame = pd.DataFrame({c: self._column(c) for c in cols})
        if target:
            if self.kind != "classification":
                raise ConfigurationError("Stratifying on the target requires a classification task.")
            frame["__target__"] = self.y
        if frame.shape[1] == 0:
            raise ConfigurationError("No stratification target or columns given.")
        # one code per distinct combination of values
        return frame.groupby(list(frame.columns), sort=False, dropna=False).ngroup().to_numpy()

    def restrict(self, indices: np.ndarray) -> TaskView:
        idx = np.asarray(indices, dtype=np.int64)
        X = self.X.iloc[idx] if isinstance(self.X, pd.DataFrame) else self.X[idx]
        return TaskView(X=X, y=self.y[idx], indices=idx)
