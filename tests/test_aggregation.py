"""Aggregations and measure binding."""

from __future__ import annotations

import numpy as np
import pytest

from resample_engine.api import (
    AggregationError,
    ConfigurationError,
    MissingIterationWarning,
    bind,
    get_aggregation,
    get_measure,
    list_aggregations,
    make_resample_desc,
    register_aggregation,
)
from resample_engine.components.aggregation.bootstrap632 import b632plus_value, no_information_value
from resample_engine.components.aggregation.types import (
    AggregationInputs,
    IterationPredictions,
    SplitPrediction,
)


def _inputs(measure="mmce", test=None, train=None, predictions=None) -> AggregationInputs:
    return AggregationInputs(
        measure=get_measure(measure),
        test=None if test is None else np.asarray(test, dtype=float),
        train=None if train is None else np.asarray(train, dtype=float),
        predictions=predictions,
    )


def _pred(truth, response) -> SplitPrediction:
    truth = np.asarray(truth)
    return SplitPrediction(ids=np.arange(truth.size), truth=truth, response=np.asarray(response))


def test_builtin_aggregations_are_registered() -> None:
    names = list_aggregations()
    for name in ("test.mean", "test.median", "test.sd", "train.mean", "test.join", "b632", "b632plus"):
        assert name in names


@pytest.mark.parametrize(
    "name, expected",
    [
        ("test.mean", 0.25),
        ("test.median", 0.25),
        ("test.min", 0.1),
        ("test.max", 0.4),
        ("test.sum", 1.0),
        ("test.range", 0.3),
    ],
)
def test_reductions(name, expected) -> None:
    aggr = get_aggregation(name)
    assert aggr(_inputs(test=[0.1, 0.2, 0.3, 0.4])) == pytest.approx(expected)


def test_sd_is_sample_standard_deviation() -> None:
    sd = get_aggregation("test.sd")(_inputs(test=[1.0, 2.0, 3.0]))
    assert sd == pytest.approx(1.0)
    assert np.isnan(get_aggregation("test.sd")(_inputs(test=[1.0])))


def test_missing_values_are_excluded_with_warning() -> None:
    with pytest.warns(MissingIterationWarning, match="1 of 3"):
        value = get_aggregation("test.mean")(_inputs(test=[0.2, np.nan, 0.4]))
    assert value == pytest.approx(0.3)


def test_all_missing_gives_nan() -> None:
    with pytest.warns(MissingIterationWarning):
        value = get_aggregation("test.mean")(_inputs(test=[np.nan, np.nan]))
    assert np.isnan(value)


def test_train_reduction_without_train_values() -> None:
    with pytest.raises(AggregationError, match="train"):
        get_aggregation("train.mean")(_inputs(test=[0.1]))


def test_test_join_pools_predictions() -> None:
    preds = [
        IterationPredictions(test=_pred([0, 1], [0, 0])),
        IterationPredictions(test=_pred([1, 1, 1, 1], [1, 1, 1, 1])),
    ]
    value = get_aggregation("test.join")(_inputs(test=[0.5, 0.0], predictions=preds))
    assert value == pytest.approx(1.0 / 6.0)


def test_test_join_without_predictions() -> None:
    with pytest.raises(AggregationError):
        get_aggregation("test.join")(_inputs(test=[0.5]))


def test_b632_weights() -> None:
    value = get_aggregation("b632")(_inputs(test=[0.3, 0.5], train=[0.0, 0.1]))
    expected = np.mean([0.632 * 0.3, 0.368 * 0.1 + 0.632 * 0.5])
    assert value == pytest.approx(expected)


def test_b632_skips_iterations_without_oob() -> None:
    with pytest.warns(MissingIterationWarning):
        value = get_aggregation("b632")(_inputs(test=[0.3, np.nan], train=[0.0, 0.2]))
    assert value == pytest.approx(0.632 * 0.3)


def test_b632plus_value_minimized_measure() -> None:
    w = 0.632 / (1.0 - 0.368 * 0.6)
    assert b632plus_value(0.0, 0.3, 0.5) == pytest.approx(w * 0.3)


def test_b632plus_value_maximized_measure() -> None:
    # accuracy 1.0 on train, 0.7 out-of-bag, 0.5 no-information
    w = 0.632 / (1.0 - 0.368 * 0.6)
    value = b632plus_value(1.0, 0.7, 0.5, minimize=False)
    assert value == pytest.approx(1.0 - 0.3 * w)


def test_b632plus_value_no_overfitting_reduces_to_b632() -> None:
    assert b632plus_value(0.2, 0.2, 0.5) == pytest.approx(0.2)
    # out-of-bag worse than no-information is capped at gamma
    w = 0.632 / (1.0 - 0.368)
    assert b632plus_value(0.0, 0.8, 0.5) == pytest.approx(w * 0.5)
    # gamma not above train: R = 0
    assert b632plus_value(0.3, 0.4, 0.3) == pytest.approx(0.368 * 0.3 + 0.632 * 0.3)


def test_no_information_value_uses_all_pairs() -> None:
    mmce = get_measure("mmce")
    assert no_information_value(mmce, _pred([0, 1], [0, 1])) == pytest.approx(0.5)
    assert no_information_value(mmce, _pred([0, 0, 1], [0, 0, 0])) == pytest.approx(1.0 / 3.0)
    assert np.isnan(no_information_value(mmce, None))


def test_b632plus_aggregation() -> None:
    preds = [
        IterationPredictions(test=_pred([0, 1], [0, 1]), train=_pred([0, 1], [0, 1])),
        IterationPredictions(test=_pred([0, 1], [1, 1]), train=_pred([0, 1], [0, 1])),
    ]
    value = get_aggregation("b632plus")(_inputs(test=[0.0, 0.5], train=[0.0, 0.0], predictions=preds))
    # iteration 0: no overfitting, value 0; iteration 1: gamma 0.5 so R = 1
    w = 0.632 / (1.0 - 0.368)
    assert value == pytest.approx(np.mean([0.0, w * 0.5]))


def test_b632plus_requires_predictions() -> None:
    with pytest.raises(AggregationError):
        get_aggregation("b632plus")(_inputs(test=[0.1], train=[0.0]))


def test_bind_returns_new_measure() -> None:
    base = get_measure("mmce")
    med = bind(base, "test.median")
    assert med.key == "mmce.test.median"
    assert base.key == "mmce.test.mean"
    assert get_measure("mmce").key == "mmce.test.mean"
    assert med.id == base.id


def test_bind_checks_resampling_compatibility() -> None:
    mmce = get_measure("mmce")
    with pytest.raises(ConfigurationError, match="Bootstrap"):
        bind(mmce, "b632", make_resample_desc("CV", iters=3))
    with pytest.raises(ConfigurationError, match="train predictions"):
        bind(mmce, "b632", make_resample_desc("Bootstrap", iters=3))
    with pytest.raises(ConfigurationError, match="train predictions"):
        bind(mmce, "train.mean", make_resample_desc("CV", iters=3))
    bound = bind(mmce, "b632", make_resample_desc("Bootstrap", iters=3, predict="both"))
    assert bound.key == "mmce.b632"


def test_unknown_aggregation() -> None:
    with pytest.raises(ConfigurationError, match="Unknown aggregation"):
        bind(get_measure("mmce"), "test.mode")


def test_custom_aggregation() -> None:
    @register_aggregation("test.q90", note="90th percentile of test values.")
    def _q90(inputs: AggregationInputs) -> float:
        return float(np.quantile(inputs.test, 0.9))

    aggr = get_aggregation("test.q90")
    assert aggr.note.startswith("90th")
    bound = bind(get_measure("mse"), aggr)
    assert bound.key == "mse.test.q90"
    assert bound.aggregation(_inputs("mse", test=np.arange(11.0))) == pytest.approx(9.0)


def test_measure_undefined_on_empty_split() -> None:
    with pytest.raises(AggregationError):
        get_measure("mmce").evaluate(np.array([]), np.array([]))


def test_no_information_value_matches_label_frequencies() -> None:
    rng = np.random.default_rng(0)
    truth = rng.integers(0, 3, size=60)
    response = rng.integers(0, 3, size=60)
    p = np.bincount(truth, minlength=3) / 60.0
    q = np.bincount(response, minlength=3) / 60.0
    value = no_information_value(get_measure("mmce"), _pred(truth, response))
    assert value == pytest.approx(1.0 - float(np.sum(p * q)))
