"""End-to-end resampling runs."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
import pytest
from sklearn.tree import DecisionTreeClassifier

from resample_engine.api import (
    ArrayTask,
    ConfigurationError,
    LearnerFitError,
    LearnerPredictError,
    MissingIterationWarning,
    ResampleInstance,
    ResampleOptions,
    ResampleResult,
    SklearnLearner,
    bind,
    get_measure,
    make_resample_desc,
    make_resample_instance,
    resample,
)
from resample_engine.contracts.results.resample import ResampleSummary


class RecordingProgress:
    def __init__(self):
        self.events = []

    def init(self, *, total, label=None):
        self.events.append(("init", total))

    def update(self, *, current, label=None):
        self.events.append(("update", current))

    def finalize(self, *, label=None):
        self.events.append(("finalize", None))


@pytest.fixture
def cv3():
    return make_resample_desc("CV", iters=3)


def test_aggregated_keys_and_values(iris_task, majority_learner, cv3) -> None:
    res = resample(majority_learner, iris_task, cv3, ["mmce", "acc"], seed=1)
    assert isinstance(res, ResampleResult)
    assert set(res.aggr) == {"mmce.test.mean", "acc.test.mean"}
    assert res.aggr["mmce.test.mean"] + res.aggr["acc.test.mean"] == pytest.approx(1.0)
    assert res.learner_id == "majority"
    assert res.task_id == "iris"
    assert len(res.iterations) == 3
    assert [it.iteration for it in res.iterations] == [0, 1, 2]


def test_default_measure_follows_task_kind(iris_task, regression_task, majority_learner, mean_learner, cv3) -> None:
    assert list(resample(majority_learner, iris_task, cv3, seed=0).aggr) == ["mmce.test.mean"]
    assert list(resample(mean_learner, regression_task, cv3, seed=0).aggr) == ["mse.test.mean"]


def test_measure_kind_mismatch(iris_task, majority_learner, cv3) -> None:
    with pytest.raises(ConfigurationError, match="regression"):
        resample(majority_learner, iris_task, cv3, "mse")


def test_same_seed_is_reproducible(iris_task, cv3) -> None:
    learner = SklearnLearner(DecisionTreeClassifier(random_state=0))
    a = resample(learner, iris_task, cv3, seed=5)
    b = resample(learner, iris_task, cv3, seed=5)
    assert a.aggr == b.aggr
    assert a.instance.is_paired_with(b.instance)


def test_shared_instance_pairs_learners(iris_task, majority_learner) -> None:
    inst = make_resample_instance(make_resample_desc("CV", iters=5), task=iris_task, seed=3)
    tree = resample(SklearnLearner(DecisionTreeClassifier(random_state=0)), iris_task, inst)
    base = resample(majority_learner, iris_task, inst)
    assert tree.instance is inst and base.instance is inst
    assert tree.aggr["mmce.test.mean"] < base.aggr["mmce.test.mean"]


def test_instance_size_mismatch(iris_task, majority_learner) -> None:
    inst = make_resample_instance(make_resample_desc("CV", iters=2), 10, seed=0)
    with pytest.raises(ConfigurationError, match="size"):
        resample(majority_learner, iris_task, inst)


def test_invalid_options(iris_task, majority_learner, cv3) -> None:
    with pytest.raises(ConfigurationError):
        resample(majority_learner, iris_task, cv3, verbose=True)
    with pytest.raises(ConfigurationError):
        resample(majority_learner, iris_task, "cv3")


def test_options_object_and_overrides(iris_task, majority_learner, cv3) -> None:
    opts = ResampleOptions(keep_models=True, seed=2)
    res = resample(majority_learner, iris_task, cv3, options=opts, keep_models=False)
    assert res.models is None
    assert res.instance.seed == 2


def test_keep_models_and_extract(iris_task, cv3) -> None:
    learner = SklearnLearner(DecisionTreeClassifier(random_state=0))
    res = resample(learner, iris_task, cv3, seed=0, keep_models=True, extract=lambda m: m.get_depth())
    assert len(res.models) == 3
    assert all(hasattr(m, "tree_") for m in res.models)
    # every iteration fits its own clone
    assert len({id(m) for m in res.models}) == 3
    assert res.extract == [m.get_depth() for m in res.models]
    assert not hasattr(learner.estimator, "tree_")


def test_frames_and_predictions(iris_task, majority_learner, cv3) -> None:
    res = resample(majority_learner, iris_task, cv3, ["mmce", "acc"], seed=4)
    assert list(res.measures_test.columns) == ["iter", "mmce", "acc"]
    assert res.measures_test["iter"].tolist() == [0, 1, 2]
    assert res.measures_train is None
    assert res.aggr["mmce.test.mean"] == pytest.approx(res.measures_test["mmce"].mean())

    pred = res.pred
    assert list(pred.columns) == ["id", "truth", "response", "iter", "set"]
    assert len(pred) == 150
    assert sorted(pred["id"].tolist()) == list(range(150))
    assert set(pred["set"]) == {"test"}


def test_train_predictions_and_train_aggregation(iris_task, majority_learner) -> None:
    desc = make_resample_desc("CV", iters=3, predict="both")
    measures = [get_measure("mmce"), bind(get_measure("mmce"), "train.mean")]
    res = resample(majority_learner, iris_task, desc, measures, seed=0)
    assert set(res.aggr) == {"mmce.test.mean", "mmce.train.mean"}
    assert res.measures_train is not None
    assert res.aggr["mmce.train.mean"] == pytest.approx(res.measures_train["mmce"].mean())
    assert set(res.pred["set"]) == {"test", "train"}


def test_predict_on_override(iris_task, majority_learner, cv3) -> None:
    train_mean = bind(get_measure("mmce"), "train.mean")
    with pytest.raises(ConfigurationError, match="train predictions"):
        resample(majority_learner, iris_task, cv3, train_mean, seed=0)
    res = resample(majority_learner, iris_task, cv3, train_mean, seed=0, predict_on="both")
    assert "mmce.train.mean" in res.aggr


def test_incompatible_aggregation_fails_before_fitting(iris_task, broken_learner, cv3) -> None:
    b632 = bind(get_measure("mmce"), "b632")
    with pytest.raises(ConfigurationError, match="Bootstrap"):
        resample(broken_learner("fit"), iris_task, cv3, b632)


def test_bootstrap_632_estimators(iris_task) -> None:
    desc = make_resample_desc("Bootstrap", iters=5, predict="both")
    mmce = get_measure("mmce")
    measures = [mmce, bind(mmce, "b632", desc), bind(mmce, "b632plus", desc)]
    learner = SklearnLearner(DecisionTreeClassifier(random_state=0))
    res = resample(learner, iris_task, desc, measures, seed=8)
    oob = res.aggr["mmce.test.mean"]
    b632 = res.aggr["mmce.b632"]
    b632plus = res.aggr["mmce.b632plus"]
    assert 0.0 <= b632 < oob
    assert b632 <= b632plus + 1e-12
    assert b632plus <= oob + 1e-12


def test_test_join_without_kept_predictions(iris_task, majority_learner, cv3) -> None:
    joined = bind(get_measure("mmce"), "test.join")
    res = resample(majority_learner, iris_task, cv3, joined, seed=0, keep_predictions=False)
    assert res.pred is None
    assert all(it.predictions is None for it in res.iterations)
    assert 0.0 <= res.aggr["mmce.test.join"] <= 1.0


def test_fit_error_carries_iteration_context(iris_task, broken_learner, cv3) -> None:
    with pytest.raises(LearnerFitError) as excinfo:
        resample(broken_learner("fit"), iris_task, cv3, seed=0)
    err = excinfo.value
    assert err.iteration == 0
    assert err.train_idx.shape[0] == 100
    assert err.test_idx.shape[0] == 50
    assert isinstance(err.__cause__, RuntimeError)
    assert "boom" in str(err)
    assert str(err).startswith("[iter 0, n_train=100, n_test=50]")


def test_predict_error(iris_task, broken_learner, cv3) -> None:
    with pytest.raises(LearnerPredictError, match="cannot predict"):
        resample(broken_learner("predict"), iris_task, cv3, seed=0)


def test_threaded_run_matches_sequential(iris_task, cv3) -> None:
    learner = SklearnLearner(DecisionTreeClassifier(random_state=0))
    seq = resample(learner, iris_task, cv3, seed=6)
    par = resample(learner, iris_task, cv3, seed=6, n_jobs=2, backend="threading")
    assert par.aggr == seq.aggr
    pd.testing.assert_frame_equal(par.measures_test, seq.measures_test)
    assert [it.iteration for it in par.iterations] == [0, 1, 2]


def test_threaded_run_propagates_learner_errors(iris_task, broken_learner, cv3) -> None:
    with pytest.raises(LearnerFitError):
        resample(broken_learner("fit"), iris_task, cv3, seed=0, n_jobs=2, backend="threading")


def test_empty_out_of_bag_iteration_is_missing(iris_task, majority_learner) -> None:
    desc = make_resample_desc("Bootstrap", iters=2)
    inst = ResampleInstance(
        desc,
        150,
        [np.arange(150), np.arange(100)],
        [np.array([], dtype=int), np.arange(100, 150)],
    )
    with pytest.warns(MissingIterationWarning):
        res = resample(majority_learner, iris_task, inst)
    values = res.measures_test["mmce"].to_numpy()
    assert np.isnan(values[0])
    assert values[1] == pytest.approx(1.0)
    assert res.aggr["mmce.test.mean"] == pytest.approx(1.0)
    assert res.notes
    assert res.summary().measures_test["mmce"] == [None, 1.0]


def test_loo_regression(mean_learner) -> None:
    y = np.arange(10, dtype=float)
    task = ArrayTask(X=np.zeros((10, 1)), y=y, id="ramp")
    res = resample(mean_learner, task, make_resample_desc("LOO"), ["mae"])
    assert len(res.iterations) == 10
    # leaving out y_i shifts the mean of the rest by (4.5 - y_i) / 9
    expected = np.mean(np.abs(y - (45.0 - y) / 9.0))
    assert res.aggr["mae.test.mean"] == pytest.approx(expected)


def test_fixed_groups_iterations_report_group(majority_learner) -> None:
    labels = np.array(list("abc") * 10)
    task = ArrayTask(X=np.zeros((30, 1)), y=np.arange(30) % 2, blocking=labels)
    res = resample(majority_learner, task, make_resample_desc("CV", blocking="fixed_groups"))
    assert [it.group for it in res.iterations] == ["a", "b", "c"]


def test_progress_callback(iris_task, majority_learner, cv3) -> None:
    progress = RecordingProgress()
    resample(majority_learner, iris_task, cv3, seed=0, progress=progress)
    assert progress.events == [
        ("init", 3),
        ("update", 1),
        ("update", 2),
        ("update", 3),
        ("finalize", None),
    ]


def test_show_progress_logs_at_info(iris_task, majority_learner, cv3, caplog) -> None:
    caplog.set_level(logging.INFO, logger="resample_engine")
    resample(majority_learner, iris_task, cv3, seed=0, show_progress=True)
    assert "Resampling: CV (iters=3)" in caplog.text
    assert "Aggr. Result: mmce.test.mean=" in caplog.text


def test_quiet_run_does_not_log_at_info(iris_task, majority_learner, cv3, caplog) -> None:
    caplog.set_level(logging.INFO, logger="resample_engine")
    resample(majority_learner, iris_task, cv3, seed=0)
    assert "Aggr. Result" not in caplog.text


def test_summary_is_json_friendly(iris_task, majority_learner, cv3) -> None:
    res = resample(majority_learner, iris_task, cv3, ["mmce", "acc"], seed=0)
    summary = res.summary()
    assert isinstance(summary, ResampleSummary)
    assert summary.iterations == 3
    assert summary.resampling == "CV (iters=3)"
    assert set(summary.measures_test) == {"mmce", "acc"}
    assert "mmce.test.mean" in summary.model_dump_json()
    assert "mmce.test.mean" in repr(res)


def test_zero_workers_rejected_before_any_work(iris_task, majority_learner, cv3) -> None:
    progress = RecordingProgress()
    with pytest.raises(ConfigurationError, match="n_jobs"):
        resample(majority_learner, iris_task, cv3, seed=0, n_jobs=0, progress=progress)
    assert progress.events == []
