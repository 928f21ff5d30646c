"""Public resampling API.

This module is the **stable public surface**; prefer importing from here
instead of reaching into internal subpackages:

    from resample_engine.api import make_resample_desc, resample

    desc = make_resample_desc("CV", iters=5, stratify=True)
    res = resample(SklearnLearner(LogisticRegression()), task, desc, ["mmce", "acc"])
    res.aggr  # {"mmce.test.mean": ..., "acc.test.mean": ...}
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from resample_engine.components.data.task import ArrayTask
from resample_engine.components.evaluation.measures import Measure
from resample_engine.components.learners.sklearn_learner import SklearnLearner
from resample_engine.contracts.resample_configs import ResampleDescription, get_preset
from resample_engine.contracts.run_config import ResampleOptions
from resample_engine.core.errors import (
    AggregationError,
    ConfigurationError,
    LearnerFitError,
    LearnerPredictError,
    MissingIterationWarning,
    ResampleError,
)
from resample_engine.core.progress import LoggingProgress, ProgressCallback
from resample_engine.io.instance_store import dumps_instance, load_instance, loads_instance, save_instance
from resample_engine.registries.aggregators import (
    bind,
    get_aggregation,
    list_aggregations,
    register_aggregation,
    set_aggregation,
)
from resample_engine.registries.measures import get_measure, list_measures, register_measure
from resample_engine.registries.partitioners import list_partition_methods, register_partitioner
from resample_engine.runtime.instance import ResampleInstance, make_resample_instance
from resample_engine.use_cases.resample import IterationResult, ResampleResult, resample


def make_resample_desc(method: str, **options: Any) -> ResampleDescription:
    """Build a validated :class:`ResampleDescription`.

    Raises
    ------
    ConfigurationError
        Unknown method, out-of-range values or conflicting options.
    """
    try:
        return ResampleDescription(method=method, **options)
    except ValidationError as e:
        msgs = "; ".join(str(err.get("msg", "")) for err in e.errors())
        raise ConfigurationError(f"Invalid resampling description for {method!r}: {msgs}") from e


def make_fixed_holdout_instance(train_idx: Any, test_idx: Any, size: int) -> ResampleInstance:
    """Holdout instance from explicit train/test indices (no randomness)."""
    return ResampleInstance.fixed(train_idx, test_idx, size)


__all__ = [
    "make_resample_desc",
    "get_preset",
    "make_resample_instance",
    "make_fixed_holdout_instance",
    "resample",
    "bind",
    "set_aggregation",
    "get_aggregation",
    "register_aggregation",
    "list_aggregations",
    "get_measure",
    "list_measures",
    "register_measure",
    "register_partitioner",
    "list_partition_methods",
    "save_instance",
    "load_instance",
    "dumps_instance",
    "loads_instance",
    "ResampleDescription",
    "ResampleInstance",
    "ResampleOptions",
    "ResampleResult",
    "IterationResult",
    "Measure",
    "ArrayTask",
    "SklearnLearner",
    "ProgressCallback",
    "LoggingProgress",
    "ResampleError",
    "ConfigurationError",
    "LearnerFitError",
    "LearnerPredictError",
    "AggregationError",
    "MissingIterationWarning",
]
