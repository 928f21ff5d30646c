"""Built-in measures backed by scikit-learn metrics."""

from __future__ import annotations

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    balanced_accuracy_score,
    f1_score,
    mean_absolute_error,
    mean_squared_error,
    median_absolute_error,
    r2_score,
)

from resample_engine.components.evaluation.measures import Measure
from resample_engine.registries.measures import register_measure

# classification (hard labels)
register_measure(Measure(
    id="mmce",
    fun=lambda y, yhat: 1.0 - accuracy_score(y, yhat),
    minimize=True, best=0.0, worst=1.0, kind="classification",
    note="Mean misclassification error.",
))
register_measure(Measure(
    id="acc",
    fun=lambda y, yhat: accuracy_score(y, yhat),
    minimize=False, best=1.0, worst=0.0, kind="classification",
))
register_measure(Measure(
    id="ber",
    fun=lambda y, yhat: 1.0 - balanced_accuracy_score(y, yhat),
    minimize=True, best=0.0, worst=1.0, kind="classification",
    note="Balanced error rate.",
))
register_measure(Measure(
    id="f1",
    fun=lambda y, yhat: f1_score(y, yhat, average="macro", zero_division=0),
    minimize=False, best=1.0, worst=0.0, kind="classification",
    note="Macro-averaged F1.",
))

# regression
register_measure(Measure(
    id="mse",
    fun=lambda y, yhat: mean_squared_error(y, yhat),
    minimize=True, best=0.0, kind="regression",
))
register_measure(Measure(
    id="rmse",
    fun=lambda y, yhat: float(np.sqrt(mean_squared_error(y, yhat))),
    minimize=True, best=0.0, kind="regression",
))
register_measure(Measure(
    id="mae",
    fun=lambda y, yhat: mean_absolute_error(y, yhat),
    minimize=True, best=0.0, kind="regression",
))
register_measure(Measure(
    id="medae",
    fun=lambda y, yhat: median_absolute_error(y, yhat),
    minimize=True, best=0.0, kind="regression",
))
register_measure(Measure(
    id="rsq",
    fun=lambda y, yhat: r2_score(y, yhat),
    minimize=False, best=1.0, worst=float("-inf"), kind="regression",
))
