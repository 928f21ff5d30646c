from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
from sklearn.base import clone

from resample_engine.components.interfaces import DataView


def fit_model(
    model: Any,
    X_train: Any,
    y_train: np.ndarray,
) -> Any:
    """
    Fit a scikit-learn–style estimator on training data.

    Parameters
    ----------
    model : Any
        Estimator exposing `fit(X, y)`.
    X_train : array-like of shape (n_samples, n_features)
    y_train : array-like of shape (n_samples,)

    Returns
    -------
    model : Any
        The same estimator, after fitting (standard sklearn behavior).

    Raises
    ------
    AttributeError
        If `model` does not have a `fit` method.
    ValueError
        If input shapes are inconsistent.
    """
    if not hasattr(model, "fit"):
        raise AttributeError("`model` has no `.fit(...)` method.")

    y_train = np.asarray(y_train).ravel()
    n_rows = int(np.shape(X_train)[0])
    if n_rows != y_train.shape[0]:
        raise ValueError(
            f"X_train and y_train length mismatch: {n_rows} vs {y_train.shape[0]}."
        )

    model.fit(X_train, y_train)
    return model


@dataclass
class SklearnLearner:
    """Learner capability around an unfitted scikit-learn estimator.

    Every ``fit`` call works on a fresh ``sklearn.base.clone`` of the template,
    so iterations never share model state.
    """

    estimator: Any
    id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.id is None:
            self.id = type(self.estimator).__name__

    def fit(self, data: DataView) -> Any:
        return fit_model(clone(self.estimator), data.X, data.y)

    def predict(self, model: Any, data: DataView) -> np.ndarray:
        return np.asarray(model.predict(data.X))
