"""Shared fixtures for the resampling engine tests."""

from __future__ import annotations

import numpy as np
import pytest
from sklearn.datasets import load_iris

from resample_engine.components.data.task import ArrayTask


class MajorityLearner:
    """Deterministic stub: predicts the most frequent training label."""

    id = "majority"

    def fit(self, data):
        values, counts = np.unique(data.y, return_counts=True)
        return values[np.argmax(counts)]

    def predict(self, model, data):
        return np.full(len(data.y), model)


class MeanLearner:
    """Deterministic stub for regression: predicts the training mean."""

    id = "mean"

    def fit(self, data):
        return float(np.mean(data.y))

    def predict(self, model, data):
        return np.full(len(data.y), model)


class BrokenLearner:
    id = "broken"

    def __init__(self, stage: str = "fit"):
        self.stage = stage

    def fit(self, data):
        if self.stage == "fit":
            raise RuntimeError("boom")
        return None

    def predict(self, model, data):
        raise RuntimeError("cannot predict")


@pytest.fixture
def iris_task() -> ArrayTask:
    data = load_iris()
    return ArrayTask(X=data.data, y=data.target, id="iris")


@pytest.fixture
def regression_task() -> ArrayTask:
    rng = np.random.default_rng(0)
    X = rng.normal(size=(120, 3))
    y = X @ np.array([1.5, -2.0, 0.5]) + rng.normal(scale=0.1, size=120)
    return ArrayTask(X=X, y=y, id="linear")


@pytest.fixture
def majority_learner() -> MajorityLearner:
    return MajorityLearner()


@pytest.fixture
def mean_learner() -> MeanLearner:
    return MeanLearner()


@pytest.fixture
def broken_learner():
    return BrokenLearner
